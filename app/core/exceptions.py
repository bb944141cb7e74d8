# app/core/exceptions.py

class AuthServiceError(Exception):
    """Base class for failures raised by the registration/login steps."""


class TokenIssuanceError(AuthServiceError):
    pass


class HashingError(AuthServiceError):
    pass


class DuplicateEmailError(AuthServiceError):
    def __init__(self, email: str):
        super().__init__(f"Email already exists: {email}")
        self.email = email


class DatabaseError(AuthServiceError):
    pass
