from functools import lru_cache

from passlib.context import CryptContext

from carpool.config import Settings


@lru_cache
def _crypt_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def get_password_hash(password: str, settings: Settings) -> str:
    return _crypt_context(settings.BCRYPT_ROUNDS).hash(password)


def verify_password(plain_password: str, hashed_password: str, settings: Settings) -> bool:
    return _crypt_context(settings.BCRYPT_ROUNDS).verify(plain_password, hashed_password)
