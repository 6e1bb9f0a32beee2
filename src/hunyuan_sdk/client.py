"""Client — signs and dispatches any API action through one pipeline."""

from __future__ import annotations

import asyncio
import contextlib
import json
import math
import time
from collections.abc import Callable, Generator, Mapping
from typing import Any, TypeVar

import httpx
from opentelemetry import trace
from opentelemetry.trace import StatusCode
from pydantic import BaseModel, ValidationError

from hunyuan_sdk._logging import level_number
from hunyuan_sdk._redact import DebugRedactor
from hunyuan_sdk._signing import Tc3Signer, is_header_token
from hunyuan_sdk.config import ClientBuilder, ClientConfig
from hunyuan_sdk.exceptions import (
    CanceledError,
    ClockError,
    ConfigError,
    DecodeError,
    ServiceError,
    TransportError,
)
from hunyuan_sdk.models import ChatCompletionsRequest, ChatCompletionsResponse
from hunyuan_sdk.types import (
    ActionResponse,
    Credential,
    ResponseEnvelope,
    SignedRequest,
)

CONTENT_TYPE_JSON = "application/json; charset=utf-8"
ACTION_CHAT_COMPLETIONS = "ChatCompletions"

R = TypeVar("R", bound=ActionResponse)


def serialize_payload(payload: BaseModel | Mapping[str, Any] | None) -> bytes:
    """Serialize an action payload to the exact bytes that get hashed and sent.

    Pydantic models are dumped by alias with None fields dropped. Key order
    follows field/insertion order, so one input always yields one body.
    ``None`` yields an empty body.

    Raises:
        ConfigError: If the payload is not JSON-serializable.
    """
    if payload is None:
        return b""
    if isinstance(payload, BaseModel):
        data: Any = payload.model_dump(by_alias=True, exclude_none=True, mode="json")
    elif isinstance(payload, Mapping):
        data = dict(payload)
    else:
        raise ConfigError(
            f"Payload must be a pydantic model or a mapping, got {type(payload).__name__}"
        )
    try:
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Payload is not JSON-serializable: {e}") from e


class Client:
    """Async client for calling API actions.

    Construct with ClientBuilder (or Client.builder()). One client is safe
    to share across concurrent tasks: all state is read-only after
    construction, and the connection pool belongs to httpx.
    """

    def __init__(
        self,
        config: ClientConfig,
        http: httpx.AsyncClient | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._config = config
        self._owns_http = http is None
        self._closed = False
        self._http = (
            http
            if http is not None
            else httpx.AsyncClient(timeout=httpx.Timeout(config.timeout_seconds))
        )
        self._clock = clock if clock is not None else time.time
        self._signer = Tc3Signer(config.credential, config.service, config.signed_headers)
        self._redactor = DebugRedactor(
            config.debug, level=level_number(config.log_level)
        )

    @classmethod
    def builder(cls) -> ClientBuilder:
        return ClientBuilder()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def credential(self) -> Credential:
        return self._config.credential

    @property
    def region(self) -> str:
        return self._config.region

    @property
    def endpoint(self) -> str:
        return self._config.endpoint

    @property
    def debug(self) -> bool:
        return self._config.debug

    # -- Tracing --------------------------------------------------------------

    @property
    def _tracer(self) -> trace.Tracer:
        return trace.get_tracer("hunyuan_sdk")

    @contextlib.contextmanager
    def _span(
        self, name: str, attributes: dict[str, Any] | None = None
    ) -> Generator[trace.Span, None, None]:
        """Create a named OTel span; record exceptions and re-raise.

        No-op when no SDK is configured.
        """
        with self._tracer.start_as_current_span(name, attributes=attributes) as span:
            try:
                yield span
            except Exception as exc:
                span.record_exception(exc)
                span.set_status(StatusCode.ERROR, str(exc))
                raise

    # -- Request building -----------------------------------------------------

    def _timestamp(self) -> int:
        try:
            value = self._clock()
        except Exception as e:
            raise ClockError(f"Clock failed: {e}") from e
        if (
            isinstance(value, bool)
            or not isinstance(value, (int, float))
            or not math.isfinite(value)
        ):
            raise ClockError(f"Clock returned an unusable value: {value!r}")
        return int(value)

    def build_headers(self, action: str, timestamp: int) -> dict[str, str]:
        headers = {
            "Content-Type": CONTENT_TYPE_JSON,
            "Host": self._config.endpoint,
            "X-TC-Action": action,
            "X-TC-Timestamp": str(timestamp),
            "X-TC-Version": self._config.version,
            "X-TC-Region": self._config.region,
        }
        token = self._config.credential.token
        if token is not None and token.get_secret_value():
            headers["X-TC-Token"] = token.get_secret_value()
        return headers

    def sign_request(self, action: str, body: bytes, timestamp: int) -> SignedRequest:
        """Build and sign the request for ``action``. Performs no I/O."""
        if not action or not action.strip():
            raise ConfigError("Action name must not be empty")
        if not is_header_token(action):
            raise ConfigError(
                f"Action name must be printable ASCII without spaces, got {action!r}"
            )
        headers = self.build_headers(action, timestamp)
        return self._signer.sign(self._config.url, headers, body, timestamp)

    # -- Response decoding ----------------------------------------------------

    def _decode(
        self, status_code: int, text: str, response_type: type[R]
    ) -> ResponseEnvelope[R]:
        is_success = 200 <= status_code < 300
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            if not is_success:
                raise ServiceError(
                    code=f"HTTP_{status_code}", message=text, status_code=status_code
                ) from e
            raise DecodeError(text, f"invalid JSON: {e}", status_code) from e

        try:
            envelope = ResponseEnvelope[ActionResponse].model_validate(data)
        except ValidationError as e:
            if not is_success:
                raise ServiceError(
                    code=f"HTTP_{status_code}", message=text, status_code=status_code
                ) from e
            raise DecodeError(text, f"malformed envelope: {e}", status_code) from e

        error = envelope.response.error
        if error is not None:
            raise ServiceError(
                code=error.code,
                message=error.message,
                request_id=envelope.response.request_id,
                status_code=status_code,
            )
        if not is_success:
            raise ServiceError(
                code=f"HTTP_{status_code}",
                message=text,
                request_id=envelope.response.request_id,
                status_code=status_code,
            )

        try:
            return ResponseEnvelope[response_type].model_validate(data)
        except ValidationError as e:
            raise DecodeError(
                text, f"does not match {response_type.__name__}: {e}", status_code
            ) from e

    # -- Public API -----------------------------------------------------------

    async def _send(
        self, signed: SignedRequest, timeout: float | None
    ) -> httpx.Response:
        if self._closed:
            raise ConfigError("client is closed")
        try:
            async with asyncio.timeout(timeout):
                return await self._http.post(
                    signed.url, headers=signed.headers, content=signed.body
                )
        except TimeoutError as e:
            raise CanceledError(timeout) from e
        except httpx.TransportError as e:
            raise TransportError(e) from e

    async def call_action(
        self,
        action: str,
        payload: BaseModel | Mapping[str, Any] | None = None,
        response_type: type[R] = ActionResponse,
        *,
        timeout: float | None = None,
    ) -> ResponseEnvelope[R]:
        """Sign and send one action, returning its decoded envelope.

        Args:
            action: Action name, sent as X-TC-Action.
            payload: Pydantic model or JSON-compatible mapping. None sends
                an empty body.
            response_type: ActionResponse subclass to decode Response into.
            timeout: Deadline in seconds for the HTTP exchange. On expiry
                the in-flight request is canceled and CanceledError raised.
                The SDK never retries.

        Raises:
            InvalidCredentialError, ClockError: Before any network attempt.
            TransportError: Connection, TLS, or transport timeout failure.
            DecodeError: Body is not a valid envelope.
            ServiceError: The API reported an error (even on HTTP 200).
            CanceledError: ``timeout`` expired.
        """
        attributes = {"hunyuan.action": action, "hunyuan.region": self._config.region}
        signed: SignedRequest | None = None
        status_code: int | None = None
        response_text: str | None = None
        outcome = "ok"

        with self._span("hunyuan.call_action", attributes=attributes):
            try:
                body = serialize_payload(payload)
                signed = self.sign_request(action, body, self._timestamp())
                response = await self._send(signed, timeout)
                status_code = response.status_code
                response_text = response.text
                return self._decode(status_code, response_text, response_type)
            except BaseException as e:
                outcome = type(e).__name__
                raise
            finally:
                self._redactor.emit(
                    action=action,
                    region=self._config.region,
                    url=self._config.url,
                    signed=signed,
                    status_code=status_code,
                    response_body=response_text,
                    outcome=outcome,
                )

    async def chat_completions(
        self,
        request: ChatCompletionsRequest,
        *,
        timeout: float | None = None,
    ) -> ResponseEnvelope[ChatCompletionsResponse]:
        """Call the ``ChatCompletions`` action.

        Streaming responses are server-sent events, not an envelope, and
        are rejected.
        """
        if request.stream:
            raise ConfigError("Stream=True is not supported by chat_completions")
        return await self.call_action(
            ACTION_CHAT_COMPLETIONS,
            request,
            ChatCompletionsResponse,
            timeout=timeout,
        )

    # -- Lifecycle ------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP client if the SDK created it.

        An injected client stays open and attached; the caller owns it.
        Calls made after close() raise ConfigError.
        """
        if self._closed:
            return
        self._closed = True
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
