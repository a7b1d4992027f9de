"""
Service error types. Each carries the HTTP status, error code and retry hint
used when main.py renders an ErrorResponse.
"""


class AceError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"
    retryable = True

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProviderError(AceError):
    """The text-generation backend failed (provider error, quota, bad reply)."""

    status_code = 502
    code = "PROVIDER_ERROR"
    retryable = True


class ProviderTimeoutError(ProviderError):
    status_code = 504
    code = "TIMEOUT"
    retryable = True


class ProviderNotConfiguredError(AceError):
    """Provider is known but has no credentials, or is not implemented yet."""

    status_code = 503
    code = "PROVIDER_UNAVAILABLE"
    retryable = False


class UnsupportedProviderError(ProviderNotConfiguredError):
    pass


class UnsupportedLanguageError(ValueError):
    pass
