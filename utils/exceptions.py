"""
Error taxonomy.

AppError subclasses are rendered to the client by api.errors as
{"error": message} with their status_code. TokenError and CredentialError
are internal only: the session manager and the request guards convert them
to Unauthorized so the client never learns why a token was rejected.
"""
from __future__ import annotations


class AppError(Exception):
    status_code = 500
    message = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class BadRequest(AppError):
    status_code = 400
    message = "Bad request"


class AuthenticationFailed(AppError):
    status_code = 401
    message = "Incorrect email or password"


class Unauthorized(AppError):
    status_code = 401
    message = "Invalid or missing token"


class Forbidden(AppError):
    status_code = 403
    message = "Forbidden"


class InternalFailure(AppError):
    status_code = 500


class HashingError(InternalFailure):
    pass


class EntropyError(InternalFailure):
    pass


# internal: access token failures

class TokenError(Exception):
    pass


class MalformedToken(TokenError):
    pass


class InvalidSignature(TokenError):
    pass


class TokenExpired(TokenError):
    pass


class InvalidSubject(TokenError):
    pass


# internal: header extraction failures

class CredentialError(Exception):
    pass


class MissingCredential(CredentialError):
    pass


class MalformedCredential(CredentialError):
    pass
