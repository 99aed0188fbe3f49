import secrets

from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from common.config.settings import settings
from common.logging.logger import log_error

# Initialize hashing context shared by passwords and OTP codes
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS
)

OTP_MIN = 100000
OTP_MAX = 999999


def hash_password(password: str) -> str:
    """
    Hash a password for secure storage.

    Args:
        password (str): Plain text password to hash.

    Returns:
        str: Hashed password.

    Raises:
        ValueError: If password is empty or invalid.
    """
    if not password or not isinstance(password, str):
        log_error("Invalid password input", extra={"input_type": str(type(password))})
        raise ValueError("Password must be a non-empty string")

    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password (str): Plain text password to verify.
        hashed_password (str): Hashed password from storage.

    Returns:
        bool: True if password matches, False otherwise (including malformed hashes).
    """
    if not plain_password or not hashed_password:
        return False

    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        log_error("Password verification failed", extra={"error": str(e)})
        return False


async def hash_password_async(password: str) -> str:
    """bcrypt is deliberately slow, so it runs off the event loop."""
    return await run_in_threadpool(hash_password, password)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    return await run_in_threadpool(verify_password, plain_password, hashed_password)


def generate_otp() -> str:
    """Six digit code drawn uniformly from [100000, 999999]."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


# OTP codes share the bcrypt context: a 6 digit space needs a slow hash.
hash_otp_async = hash_password_async
verify_otp_async = verify_password_async
