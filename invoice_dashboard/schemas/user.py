# invoice_dashboard/schemas/user.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str


class UserRecord(UserRead):
    """User as loaded for the sign-in check. The hash is excluded from dumps."""
    password_hash: str = Field(..., exclude=True, repr=False)

    def public(self) -> UserRead:
        return UserRead(id=self.id, name=self.name, email=self.email)


class Credentials(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
