"""TC3-HMAC-SHA256 request signing.

Three pure stages, run once per request:

1. build_canonical_request() normalizes the request into one string.
2. derive_signing_key() + compute_signature() run the keyed-hash chain
   secret -> date key -> service key -> signing key -> signature.
3. build_authorization() formats the Authorization header value.

Tc3Signer ties them together for the dispatcher. Nothing here performs
I/O, so signing never suspends the event loop on anything but CPU.
"""

from __future__ import annotations

import hashlib
import hmac
import re
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone

from hunyuan_sdk.exceptions import ClockError, ConfigError, InvalidCredentialError
from hunyuan_sdk.types import (
    TC3_ALGORITHM,
    TC3_TERMINATOR,
    CanonicalRequest,
    Credential,
    CredentialScope,
    SignedRequest,
)

REQUIRED_SIGNED_HEADERS = ("content-type", "host")

_WHITESPACE_RE = re.compile(r"\s+")
_HEADER_TOKEN_RE = re.compile(r"[\x21-\x7e]+")


def is_header_token(value: str) -> bool:
    """True if ``value`` is non-empty printable ASCII with no whitespace.

    Action, region, and endpoint travel as header values; anything else
    cannot be encoded on the wire.
    """
    return isinstance(value, str) and _HEADER_TOKEN_RE.fullmatch(value) is not None


def sha256_hex(data: bytes | str) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def hmac_sha256(key: bytes, data: str) -> bytes:
    return hmac.new(key, data.encode("utf-8"), hashlib.sha256).digest()


# ---------------------------------------------------------------------------
# Canonical request
# ---------------------------------------------------------------------------


def _normalize_header_value(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", str(value)).strip().lower()


def build_canonical_request(
    headers: Mapping[str, str],
    body: bytes,
    *,
    method: str = "POST",
    uri: str = "/",
    query_string: str = "",
    signed_header_names: Iterable[str] = REQUIRED_SIGNED_HEADERS,
) -> CanonicalRequest:
    """Select, normalize, and sort the signed headers and hash the body.

    Header names and values are lowercased; values have runs of whitespace
    collapsed and ends trimmed. Ordering of ``headers`` does not matter.

    Raises:
        ConfigError: If a header named in ``signed_header_names`` is absent.
    """
    wanted = {name.strip().lower() for name in signed_header_names}
    selected: dict[str, str] = {}
    for name, value in headers.items():
        lowered = name.strip().lower()
        if lowered in wanted:
            selected[lowered] = _normalize_header_value(value)

    missing = wanted - selected.keys()
    if missing:
        raise ConfigError(f"Headers required for signing are missing: {sorted(missing)}")

    names = tuple(sorted(selected, key=lambda n: n.encode("utf-8")))
    return CanonicalRequest(
        method=method.upper(),
        uri=uri,
        query_string=query_string,
        canonical_headers=tuple((n, selected[n]) for n in names),
        signed_headers=names,
        hashed_payload=sha256_hex(body),
    )


# ---------------------------------------------------------------------------
# Signature derivation
# ---------------------------------------------------------------------------


def scope_date(timestamp: int) -> str:
    """Return the UTC calendar date (YYYY-MM-DD) of a Unix timestamp.

    Raises:
        ClockError: If the timestamp is not a non-negative integer or is out
            of the representable range.
    """
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        raise ClockError(f"Timestamp must be integer Unix seconds, got {timestamp!r}")
    if timestamp < 0:
        raise ClockError(f"Timestamp must not be negative, got {timestamp}")
    try:
        moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise ClockError(f"Timestamp {timestamp} is out of range: {e}") from e
    return moment.strftime("%Y-%m-%d")


def derive_signing_key(secret_key: str, date: str, service: str) -> bytes:
    """Run the three-round HMAC chain that yields the per-day signing key.

    Raises:
        InvalidCredentialError: If ``secret_key`` is empty.
    """
    if not secret_key:
        raise InvalidCredentialError("Credential secret_key is empty; refusing to sign")
    date_key = hmac_sha256(f"TC3{secret_key}".encode("utf-8"), date)
    service_key = hmac_sha256(date_key, service)
    return hmac_sha256(service_key, TC3_TERMINATOR)


def build_string_to_sign(
    timestamp: int,
    scope: CredentialScope,
    hashed_canonical_request: str,
) -> str:
    return f"{TC3_ALGORITHM}\n{timestamp}\n{scope}\n{hashed_canonical_request}"


def compute_signature(signing_key: bytes, string_to_sign: str) -> str:
    return hmac.new(
        signing_key, string_to_sign.encode("utf-8"), hashlib.sha256
    ).hexdigest()


# ---------------------------------------------------------------------------
# Authorization header
# ---------------------------------------------------------------------------


def build_authorization(
    secret_id: str,
    scope: CredentialScope,
    signed_headers: str,
    signature: str,
) -> str:
    return (
        f"{TC3_ALGORITHM} Credential={secret_id}/{scope}, "
        f"SignedHeaders={signed_headers}, Signature={signature}"
    )


# ---------------------------------------------------------------------------
# Signer
# ---------------------------------------------------------------------------


class Tc3Signer:
    """Signs outgoing requests for one credential and one service.

    Holds only read-only state, so one instance is shared by every
    concurrent call on a client.
    """

    def __init__(
        self,
        credential: Credential,
        service: str,
        signed_header_names: Iterable[str] = REQUIRED_SIGNED_HEADERS,
    ) -> None:
        self._credential = credential
        self._service = service
        self._signed_header_names = tuple(signed_header_names)

    @property
    def service(self) -> str:
        return self._service

    def _check_credential(self) -> None:
        secret_id = self._credential.secret_id
        if not secret_id or not secret_id.strip():
            raise InvalidCredentialError("Credential secret_id is empty")
        if "/" in secret_id or any(c.isspace() for c in secret_id):
            raise InvalidCredentialError(
                "Credential secret_id must not contain '/' or whitespace"
            )
        if not self._credential.secret_key.get_secret_value():
            raise InvalidCredentialError("Credential secret_key is empty; refusing to sign")

    def sign(
        self,
        url: str,
        headers: Mapping[str, str],
        body: bytes,
        timestamp: int,
    ) -> SignedRequest:
        """Return a SignedRequest carrying ``headers`` plus Authorization.

        Raises:
            InvalidCredentialError: On an unusable credential.
            ClockError: On an unusable timestamp.
        """
        self._check_credential()
        date = scope_date(timestamp)
        scope = CredentialScope(date=date, service=self._service)

        canonical = build_canonical_request(
            headers, body, signed_header_names=self._signed_header_names
        )
        hashed_canonical_request = sha256_hex(canonical.render())
        string_to_sign = build_string_to_sign(timestamp, scope, hashed_canonical_request)

        signing_key = derive_signing_key(
            self._credential.secret_key.get_secret_value(), date, self._service
        )
        signature = compute_signature(signing_key, string_to_sign)

        signed_headers = dict(headers)
        signed_headers["Authorization"] = build_authorization(
            self._credential.secret_id, scope, canonical.signed_headers_str, signature
        )
        return SignedRequest(
            url=url,
            headers=signed_headers,
            body=body,
            scope=scope,
            hashed_canonical_request=hashed_canonical_request,
            signature=signature,
        )
