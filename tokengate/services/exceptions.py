"""Domain errors for the auth flows, each with a fixed HTTP status and public message."""


class AuthError(Exception):
    """
    Base class for errors that cross the HTTP boundary.

    message is what the client sees; it never carries internal detail.
    """

    status_code: int = 500
    message: str = "Server error"
    # Rendered as a bare text body instead of the {message, result, data} envelope.
    plain_text: bool = False

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class DuplicateUserError(AuthError):
    status_code = 400
    message = "User already exists"
    plain_text = True


class InvalidCredentialsError(AuthError):
    """Unknown username and wrong password; deliberately indistinguishable."""

    status_code = 400
    message = "UserName or Password is Wrong"


class TokenError(AuthError):
    """Failures of the bearer-token check. Rendered as 401 plain text."""

    status_code = 401
    plain_text = True


class MissingTokenError(TokenError):
    message = "Authorization header missing or malformed"


class TokenRevokedError(TokenError):
    message = "Token is blacklisted"


class InvalidTokenError(TokenError):
    """Bad signature, malformed token or missing claims."""

    message = "Invalid token"


class TokenExpiredError(InvalidTokenError):
    """Signature is valid but exp has passed. Same public message as InvalidTokenError."""


class ServerError(AuthError):
    status_code = 500
    message = "Server error"
