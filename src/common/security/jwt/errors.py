# File: common/security/jwt/errors.py
class JWTError(Exception):
    """Base exception class for JWT-related errors."""

    def __init__(self, message: str, status_code: int = 401):
        """
        Initialize JWTError with a message and optional status code.

        Args:
            message (str): Error message describing the issue.
            status_code (int): HTTP status code associated with the error (default: 401).
        """
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class InvalidTokenError(JWTError):
    """Raised for any access token that fails verification, expired or forged alike."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, status_code=401)


class TokenConfigurationError(JWTError):
    """Raised at startup when the signing secret is missing."""

    def __init__(self, message: str = "JWT_SECRET_KEY is not set"):
        super().__init__(message, status_code=500)
