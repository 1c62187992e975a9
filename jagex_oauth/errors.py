"""Exceptions raised by the login pipeline

Every stage raises one of these to its caller. Nothing in the pipeline catches
and continues: any AuthError aborts the whole login attempt.
"""

from typing import Optional


class AuthError(Exception):
    """Base class for all login pipeline failures"""


class CsrfMismatchError(AuthError):
    """Returned state does not match the CSRF token of this attempt"""

    def __init__(self, message: str = "Provided state from OAuth flow does not match the CSRF token."):
        super().__init__(message)


class InvalidRedirectError(AuthError):
    """Redirect matched the expected URI but lacked the required parameters"""

    def __init__(self, url: str, missing: tuple = ()):
        self.url = url
        self.missing = tuple(missing)
        super().__init__(f"Redirect URL does not contain the expected parameters: {url}")


class OAuthProviderError(AuthError):
    """Structured error reported by the identity provider or game service"""

    def __init__(
        self,
        error: str,
        error_description: Optional[str] = None,
        status_code: Optional[int] = None,
        context: Optional[str] = None,
    ):
        self.error = error
        self.error_description = error_description
        self.status_code = status_code
        self.context = context
        message = f"{error}: {error_description or ''}"
        if context:
            message = f"{context} failed: {message}"
        super().__init__(message)


class NetworkError(AuthError):
    """Transport level failure talking to a remote endpoint"""


class MalformedResponseError(AuthError):
    """Response body was not the JSON document we expected"""


class TokenDecodeError(AuthError):
    """JWT could not be decoded or its claims were rejected"""


class FlowCancelledError(AuthError):
    """Browser surface was closed before the redirect arrived"""

    def __init__(self, message: str = "OAuth flow was cancelled!"):
        super().__init__(message)


class BrowserSurfaceError(AuthError):
    """Browser surface could not be opened or driven"""
