"""Debug rendering of signing internals with secrets masked.

Signatures, the Authorization header, and session tokens are masked down
to MASK_KEEP characters on each edge. The mask itself is fixed-width, so
the rendered form does not reveal the true length of the value. Request
and response bodies are rendered verbatim: they can carry sensitive
domain data, which is why debug output is opt-in.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from hunyuan_sdk._logging import log_structured
from hunyuan_sdk.types import SignedRequest

logger = logging.getLogger("hunyuan_sdk.debug")

MASK = "****"
MASK_KEEP = 4

_AUTHORIZATION_RE = re.compile(
    r"^(?P<algorithm>\S+) Credential=(?P<secret_id>[^/]*)/(?P<scope>[^,]*), "
    r"SignedHeaders=(?P<signed_headers>[^,]*), Signature=(?P<signature>\S*)$"
)


def mask(value: str, keep: int = MASK_KEEP) -> str:
    """Keep ``keep`` characters on each edge, replace the middle with MASK.

    Values too short to hide anything behind the edges are fully masked.
    """
    if len(value) <= keep * 2:
        return MASK
    return f"{value[:keep]}{MASK}{value[-keep:]}"


def mask_authorization(value: str) -> str:
    """Mask the credential id and signature inside an Authorization value.

    The algorithm, scope, and signed header list stay readable. A value
    that doesn't parse is masked as a whole.
    """
    m = _AUTHORIZATION_RE.match(value)
    if m is None:
        return mask(value)
    return (
        f"{m['algorithm']} Credential={mask(m['secret_id'])}/{m['scope']}, "
        f"SignedHeaders={m['signed_headers']}, Signature={mask(m['signature'])}"
    )


_SENSITIVE_HEADERS = {
    "authorization": mask_authorization,
    "x-tc-token": mask,
}


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of ``headers`` with sensitive values masked."""
    result: dict[str, str] = {}
    for name, value in headers.items():
        masker = _SENSITIVE_HEADERS.get(name.lower())
        result[name] = masker(value) if masker is not None else value
    return result


def _decode_body(body: bytes | str | None) -> str | None:
    if body is None:
        return None
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


class DebugRedactor:
    """Renders one masked debug record per dispatched call.

    Observes the pipeline without altering it: every input is read, none
    is modified. Disabled instances do nothing.
    """

    def __init__(self, enabled: bool, level: int = logging.DEBUG) -> None:
        self._enabled = enabled
        self._level = level

    @property
    def enabled(self) -> bool:
        return self._enabled

    def render(
        self,
        *,
        action: str,
        region: str,
        url: str,
        signed: SignedRequest | None = None,
        status_code: int | None = None,
        response_body: bytes | str | None = None,
        outcome: str = "ok",
    ) -> dict[str, Any]:
        """Build the field mapping for one record. Never contains raw secrets."""
        fields: dict[str, Any] = {
            "action": action,
            "url": url,
            "region": region,
        }
        if signed is not None:
            redacted = redact_headers(signed.headers)
            fields["scope"] = str(signed.scope)
            fields["canonical_request_sha256"] = signed.hashed_canonical_request
            fields["signature"] = mask(signed.signature)
            fields["token_present"] = any(k.lower() == "x-tc-token" for k in signed.headers)
            fields["headers"] = " ".join(f"{k}={v}" for k, v in redacted.items())
            fields["request_body"] = _decode_body(signed.body)
        fields["status"] = status_code
        fields["response_body"] = _decode_body(response_body)
        fields["outcome"] = outcome
        return fields

    def emit(self, **kwargs: Any) -> None:
        if not self._enabled:
            return
        log_structured(logger, self._level, "TC3 call", **self.render(**kwargs))
