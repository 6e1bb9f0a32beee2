"""Core hunyuan_sdk types — the contract the signer and dispatcher share."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from hunyuan_sdk.exceptions import ConfigError, InvalidCredentialError

TC3_ALGORITHM = "TC3-HMAC-SHA256"
TC3_TERMINATOR = "tc3_request"


# ---------------------------------------------------------------------------
# Region
# ---------------------------------------------------------------------------


class Region(str, Enum):
    """Known regions. Any other non-empty string is accepted as a custom region."""

    AP_BEIJING = "ap-beijing"
    AP_GUANGZHOU = "ap-guangzhou"


def region_name(region: Region | str) -> str:
    """Return the wire string for a known or custom region."""
    if isinstance(region, Region):
        return region.value
    if not isinstance(region, str) or not region.strip():
        raise ConfigError(f"Region must be a non-empty string, got {region!r}")
    return region.strip()


# ---------------------------------------------------------------------------
# Credential
# ---------------------------------------------------------------------------

DEFAULT_SECRET_ID_ENV = "TENCENTCLOUD_SECRET_ID"
DEFAULT_SECRET_KEY_ENV = "TENCENTCLOUD_SECRET_KEY"
DEFAULT_TOKEN_ENV = "TENCENTCLOUD_SESSION_TOKEN"


class Credential(BaseModel):
    """Identity used to sign requests.

    ``secret_key`` and ``token`` are SecretStr, so repr() and model_dump()
    render them as '**********'. Use get_secret_value() only inside the
    signer.
    """

    model_config = ConfigDict(frozen=True)

    secret_id: str
    secret_key: SecretStr
    token: SecretStr | None = None

    @classmethod
    def from_env(
        cls,
        secret_id_env: str = DEFAULT_SECRET_ID_ENV,
        secret_key_env: str = DEFAULT_SECRET_KEY_ENV,
        token_env: str = DEFAULT_TOKEN_ENV,
    ) -> Credential:
        """Build a credential from environment variables.

        Raises:
            InvalidCredentialError: If the id or key variable is unset or empty.
        """
        secret_id = os.environ.get(secret_id_env, "")
        secret_key = os.environ.get(secret_key_env, "")
        if not secret_id or not secret_key:
            raise InvalidCredentialError(
                f"Missing environment variable '{secret_id_env}' or "
                f"'{secret_key_env}'. Set both to your API credential."
            )
        token = os.environ.get(token_env) or None
        return cls(secret_id=secret_id, secret_key=secret_key, token=token)


# ---------------------------------------------------------------------------
# Signing values (ephemeral, recomputed per call)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CredentialScope:
    """Binds a signature to one UTC day and one service."""

    date: str
    service: str

    def __str__(self) -> str:
        return f"{self.date}/{self.service}/{TC3_TERMINATOR}"


@dataclass(frozen=True)
class CanonicalRequest:
    method: str
    uri: str
    query_string: str
    canonical_headers: tuple[tuple[str, str], ...]
    signed_headers: tuple[str, ...]
    hashed_payload: str

    @property
    def signed_headers_str(self) -> str:
        return ";".join(self.signed_headers)

    def render(self) -> str:
        """Render the newline-joined string that gets hashed into string_to_sign."""
        headers = "".join(f"{name}:{value}\n" for name, value in self.canonical_headers)
        return "\n".join(
            [
                self.method,
                self.uri,
                self.query_string,
                headers,
                self.signed_headers_str,
                self.hashed_payload,
            ]
        )


@dataclass(frozen=True)
class SignedRequest:
    """A request ready to send, plus the signing internals the redactor shows."""

    url: str
    headers: dict[str, str]
    body: bytes
    scope: CredentialScope
    hashed_canonical_request: str
    signature: str = field(repr=False)


# ---------------------------------------------------------------------------
# Response envelope
# ---------------------------------------------------------------------------


class ErrorContent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: str = Field(alias="Code")
    message: str = Field(alias="Message")


class ActionResponse(BaseModel):
    """Fields every action response carries.

    Subclass per action to type the action-specific fields. Unknown fields
    are kept, so the base class alone decodes any action.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    request_id: str = Field(alias="RequestId")
    error: ErrorContent | None = Field(default=None, alias="Error")


ResponseT = TypeVar("ResponseT", bound=ActionResponse)


class ResponseEnvelope(BaseModel, Generic[ResponseT]):
    """The outer ``{"Response": {...}}`` wrapper."""

    model_config = ConfigDict(populate_by_name=True)

    response: ResponseT = Field(alias="Response")
