# invoice_dashboard/services/auth.py
import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from invoice_dashboard.core.errors import InvalidCredentialsError
from invoice_dashboard.core.security import dummy_verify, verify_password
from invoice_dashboard.crud.base import UserRepository
from invoice_dashboard.schemas.user import Credentials, UserRead

logger = logging.getLogger(__name__)


class CredentialVerifier:
    """
    Stateless sign-in check: email + password -> user, or InvalidCredentialsError.

    An unknown email and a wrong password fail the same way, and both run a
    bcrypt verification. Session issuance happens elsewhere.
    """

    def __init__(self, users: UserRepository, rounds: Optional[int] = None):
        self.users = users
        self.rounds = rounds

    def verify(self, email: str, password: str) -> UserRead:
        try:
            credentials = Credentials(email=email, password=password)
        except PydanticValidationError as exc:
            logger.info("Sign-in rejected: malformed credentials")
            raise InvalidCredentialsError() from exc

        user = self.users.get_by_email(credentials.email)
        if user is None:
            dummy_verify(self.rounds)
            logger.info("Sign-in rejected")
            raise InvalidCredentialsError()

        if not verify_password(credentials.password, user.password_hash, self.rounds):
            logger.info("Sign-in rejected")
            raise InvalidCredentialsError()

        logger.info("Sign-in accepted for user %s", user.id)
        return user.public()
