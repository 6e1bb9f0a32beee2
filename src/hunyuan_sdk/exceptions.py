"""hunyuan_sdk exception hierarchy."""


class HunyuanError(Exception):
    """Base exception for all SDK errors.

    ``stage`` names the pipeline step that failed so callers can decide
    whether to log, retry, or give up.
    """

    stage: str = "sdk"


class ConfigError(HunyuanError):
    """Raised on client configuration validation failure."""

    stage = "config"


class InvalidCredentialError(HunyuanError):
    """Raised when the credential cannot be used for signing.

    Always raised before any network attempt. Not retryable.
    """

    stage = "sign"


class ClockError(HunyuanError):
    """Raised when the request timestamp is unusable for signing."""

    stage = "sign"


class TransportError(HunyuanError):
    """Raised on connection, TLS, or timeout failure.

    Safe to retry externally for idempotent actions.
    """

    stage = "transport"

    def __init__(self, original_error: Exception) -> None:
        self.original_error = original_error
        super().__init__(f"Transport failure: {original_error!r}")


_MAX_ERROR_BODY_DISPLAY = 500


def _truncate(body: str) -> str:
    if len(body) > _MAX_ERROR_BODY_DISPLAY:
        return body[:_MAX_ERROR_BODY_DISPLAY] + "..."
    return body


class DecodeError(HunyuanError):
    """Raised when a response body is not a valid response envelope.

    The full raw body is kept on the attribute for diagnosis; __str__
    truncates it so verbose payloads don't flood logs.
    """

    stage = "decode"

    def __init__(
        self,
        raw_body: str,
        reason: str,
        status_code: int | None = None,
    ) -> None:
        self.raw_body = raw_body
        self.reason = reason
        self.status_code = status_code
        super().__init__(
            f"Failed to decode response ({reason}): {_truncate(raw_body)}"
        )


class ServiceError(HunyuanError):
    """Raised when the remote API reports an error.

    Service errors usually arrive inside an HTTP 200 body, so they are
    detected from the envelope rather than the status code. ``request_id``
    is preserved for support correlation.
    """

    stage = "service"

    def __init__(
        self,
        code: str,
        message: str,
        request_id: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        self.status_code = status_code
        super().__init__(
            f"service error: {code}: {_truncate(message)} (request_id={request_id})"
        )


class CanceledError(HunyuanError):
    """Raised when a call is abandoned because its deadline expired."""

    stage = "cancel"

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Call canceled after {timeout:.3f}s deadline")
