"""
Domain errors raised by the service layer.

Each carries the error code, message and HTTP status used by the error
envelope in api/errors.py. Services never build HTTP responses themselves.
"""


class ServiceError(Exception):
    code = "INTERNAL_ERROR"
    message = "An unexpected error occurred"
    status = 500

    def __init__(self, message: str | None = None, status: int | None = None):
        if message is not None:
            self.message = message
        if status is not None:
            self.status = status
        super().__init__(self.message)


class UserAlreadyExists(ServiceError):
    code = "USER_ALREADY_EXISTS"
    message = "User already exists"
    status = 400


class UserCouldNotBeCreated(ServiceError):
    code = "USER_COULD_NOT_BE_CREATED"
    message = "User could not be created"
    status = 400


class UserNotFound(ServiceError):
    code = "USER_NOT_FOUND"
    message = "User not found"
    status = 404


class PasswordOrEmailIncorrect(ServiceError):
    """Same message for unknown email and wrong password; only the status differs."""
    code = "PASSWORD_OR_EMAIL_INCORRECT"
    message = "Password or email is incorrect"
    status = 400


class InvalidToken(ServiceError):
    code = "INVALID_TOKEN"
    message = "Invalid token"
    status = 401


class RefreshTokenNotFound(ServiceError):
    code = "REFRESH_TOKEN_NOT_FOUND"
    message = "Refresh token not found"
    status = 401


class TokenExpired(ServiceError):
    code = "TOKEN_EXPIRED"
    message = "Token expired"
    status = 401


class GithubRateLimitExceeded(ServiceError):
    code = "GITHUB_API_RATE_LIMIT_EXCEEDED"
    message = "GitHub API rate limit exceeded"
    status = 429


class GithubUnavailable(ServiceError):
    code = "GITHUB_API_UNAVAILABLE"
    message = "GitHub API is unavailable"
    status = 503


class GithubSearchFailed(ServiceError):
    code = "GITHUB_SEARCH_FAILED"
    message = "GitHub repository search failed"
    status = 500
