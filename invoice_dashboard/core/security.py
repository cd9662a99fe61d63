# invoice_dashboard/core/security.py
from functools import lru_cache
from typing import Optional

from passlib.context import CryptContext

from invoice_dashboard.core.config import get_settings


@lru_cache(maxsize=None)
def get_pwd_context(rounds: Optional[int] = None) -> CryptContext:
    if rounds is None:
        rounds = get_settings().bcrypt_rounds
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    return get_pwd_context(rounds).hash(password)


def verify_password(plain_password: str, hashed_password: str, rounds: Optional[int] = None) -> bool:
    # verify() compares digests in constant time
    return get_pwd_context(rounds).verify(plain_password, hashed_password)


def dummy_verify(rounds: Optional[int] = None) -> None:
    """Spend the same work as a real verification when there is no hash to check."""
    get_pwd_context(rounds).dummy_verify()
