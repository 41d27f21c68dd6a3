"""
Domain exceptions.

Token errors come from the credential verifier, upload errors from the
upload adapter and media store. Both are rendered as the standard
{message, success: false} envelope by the handlers in app.main.
"""

from fastapi import HTTPException, status


class TokenError(Exception):
    """Base class for session token verification failures."""

    message = "Invalid token"


class InvalidToken(TokenError):
    """Malformed token, bad signature or missing identity claim."""

    message = "Invalid token"


class ExpiredToken(TokenError):
    message = "Token expired"


class Unauthenticated(HTTPException):
    """No session token on a protected route."""

    def __init__(self, detail: str = "Authentication required. Please log in."):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class UploadError(Exception):
    """Base class for rejected uploads. Always a client error (400)."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoFile(UploadError):
    def __init__(self, message: str = "No file provided"):
        super().__init__(message)


class MalformedFile(UploadError):
    def __init__(self, message: str = "Invalid file object: missing original name or buffer"):
        super().__init__(message)


class FileTooLarge(UploadError):
    def __init__(self, max_mb: int):
        super().__init__(f"File size is too large. Max limit is {max_mb}MB")


class MediaUploadFailed(UploadError):
    def __init__(self, reason: str):
        super().__init__("File upload failed")
        self.reason = reason
