from __future__ import annotations

from vinped.commons.exceptions import BaseCoreException


class AuthConfigurationException(BaseCoreException):
    pass


class TokenVerificationException(BaseCoreException):
    pass


class TokenMalformedException(TokenVerificationException):
    pass


class TokenBadSignatureException(TokenVerificationException):
    pass


class TokenExpiredException(TokenVerificationException):
    pass


INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
EMAIL_ALREADY_EXISTS = "email_already_exists"
USER_NOT_FOUND = "user_not_found"
