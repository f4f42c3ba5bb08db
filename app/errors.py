"""Failure kinds raised by the services and translated to redirects by the routes."""


class AppError(Exception):
    """Base class for every failure the services raise on purpose."""


class AuthenticationFailed(AppError):
    """Login did not produce a principal. Callers must not reveal which subclass fired."""


class UserNotFound(AuthenticationFailed):
    pass


class InvalidCredentials(AuthenticationFailed):
    pass


class DuplicateRegistration(AppError):
    def __init__(self, email):
        super().__init__(f"account already exists: {email}")
        self.email = email


class DuplicateProfile(AppError):
    def __init__(self, email):
        super().__init__(f"profile already exists: {email}")
        self.email = email


class ProfileRequired(AppError):
    def __init__(self, email):
        super().__init__(f"no profile recorded for {email}")
        self.email = email


class MalformedJoinCode(AppError):
    def __init__(self, code, reason):
        super().__init__(f"malformed join code {code!r}: {reason}")
        self.code = code
        self.reason = reason


class StoreUnavailable(AppError):
    """The relational store failed; no partial-state guarantees beyond per-row commits."""
