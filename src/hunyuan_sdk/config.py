"""Client configuration — validated once at build time, immutable after."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from hunyuan_sdk._logging import VALID_LOG_LEVELS
from hunyuan_sdk._signing import REQUIRED_SIGNED_HEADERS, is_header_token
from hunyuan_sdk.exceptions import ConfigError
from hunyuan_sdk.types import (
    DEFAULT_SECRET_ID_ENV,
    DEFAULT_SECRET_KEY_ENV,
    DEFAULT_TOKEN_ENV,
    Credential,
    Region,
    region_name,
)

if TYPE_CHECKING:
    import httpx

    from hunyuan_sdk.client import Client

DEFAULT_SERVICE = "hunyuan"
DEFAULT_VERSION = "2023-09-01"
DEFAULT_ENDPOINT = f"{DEFAULT_SERVICE}.tencentcloudapi.com"
DEFAULT_REGION = Region.AP_GUANGZHOU
DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_LOG_LEVEL = "DEBUG"

DEBUG_ENV = "TENCENTCLOUD_SDK_DEBUG"
_TRUTHY = frozenset({"1", "true", "on"})


def debug_from_env(environ: Mapping[str, str] | None = None) -> bool:
    """Read the debug flag from the environment (``true``/``1``/``on``)."""
    env = os.environ if environ is None else environ
    return env.get(DEBUG_ENV, "").strip().lower() in _TRUTHY


# ---------------------------------------------------------------------------
# ClientConfig
# ---------------------------------------------------------------------------


class ClientConfig(BaseModel):
    """Everything a Client needs. Frozen, so concurrent calls share it safely."""

    model_config = ConfigDict(frozen=True)

    credential: Credential
    region: str = DEFAULT_REGION.value
    endpoint: str = DEFAULT_ENDPOINT
    debug: bool = False
    service: str = DEFAULT_SERVICE
    version: str = DEFAULT_VERSION
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL
    signed_headers: tuple[str, ...] = REQUIRED_SIGNED_HEADERS

    @field_validator("region", mode="before")
    @classmethod
    def _validate_region(cls, v: Any) -> str:
        if isinstance(v, Region):
            return v.value
        if not isinstance(v, str) or not v.strip():
            raise ValueError(f"region must be a non-empty string, got {v!r}")
        v = v.strip()
        if not is_header_token(v):
            raise ValueError(f"region must be printable ASCII without spaces, got {v!r}")
        return v

    @field_validator("endpoint")
    @classmethod
    def _validate_endpoint(cls, v: str) -> str:
        """Endpoint is a bare host. HTTPS is always used."""
        v = v.strip()
        if not v:
            raise ValueError("endpoint must not be empty")
        if "://" in v or "/" in v:
            raise ValueError(
                f"endpoint must be a bare host like '{DEFAULT_ENDPOINT}', got: {v}"
            )
        if not is_header_token(v):
            raise ValueError(f"endpoint must be printable ASCII without spaces, got {v!r}")
        return v

    @field_validator("timeout_seconds")
    @classmethod
    def _validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout_seconds must be > 0")
        return v

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        if v not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(VALID_LOG_LEVELS)}, got: {v}"
            )
        return v

    @field_validator("signed_headers")
    @classmethod
    def _validate_signed_headers(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        lowered = tuple(sorted({h.strip().lower() for h in v}))
        missing = set(REQUIRED_SIGNED_HEADERS) - set(lowered)
        if missing:
            raise ValueError(f"signed_headers must include {sorted(missing)}")
        return lowered

    @property
    def url(self) -> str:
        return f"https://{self.endpoint}/"


# ---------------------------------------------------------------------------
# TOML settings
# ---------------------------------------------------------------------------


class ClientSettings(BaseModel):
    """[client] table. Unset fields fall through to builder defaults."""

    model_config = ConfigDict(extra="forbid")

    region: str | None = None
    endpoint: str | None = None
    debug: bool | None = None
    timeout_seconds: float | None = None
    log_level: str | None = None


class CredentialSettings(BaseModel):
    """[credential] table — names of the env vars holding the credential."""

    model_config = ConfigDict(extra="forbid")

    secret_id_env: str = DEFAULT_SECRET_ID_ENV
    secret_key_env: str = DEFAULT_SECRET_KEY_ENV
    token_env: str = DEFAULT_TOKEN_ENV


class SettingsFile(BaseModel):
    client: ClientSettings = ClientSettings()
    credential: CredentialSettings | None = None


def _load_toml_file(path: Path, context: str) -> dict[str, Any]:
    """Load and parse a TOML file with consistent error handling.

    Raises:
        ConfigError: On missing file or malformed TOML.
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"{context} not found: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse {context}: {e}") from e


def load_settings(path: str | Path) -> SettingsFile:
    """Load and validate a client settings TOML file.

    Secrets never live in the file; ``[credential]`` only names the
    environment variables to read them from.

    Raises:
        ConfigError: On missing file, malformed TOML, or invalid values.
    """
    data = _load_toml_file(Path(path), "client settings")
    try:
        return SettingsFile(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid client settings in {path}: {e}") from e


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class ClientBuilder:
    """Fluent builder for Client.

    Explicit builder values win over a loaded SettingsFile, which wins over
    defaults. The debug flag falls back to TENCENTCLOUD_SDK_DEBUG, read once
    in build().
    """

    def __init__(self) -> None:
        self._http: httpx.AsyncClient | None = None
        self._credential: Credential | None = None
        self._region: Region | str | None = None
        self._endpoint: str | None = None
        self._debug: bool | None = None
        self._timeout: float | None = None
        self._log_level: str | None = None
        self._settings: SettingsFile | None = None
        self._clock: Callable[[], float] | None = None

    def http(self, http: httpx.AsyncClient) -> ClientBuilder:
        """Use a caller-owned httpx.AsyncClient. The SDK will not close it."""
        self._http = http
        return self

    def credential(self, credential: Credential) -> ClientBuilder:
        self._credential = credential
        return self

    def region(self, region: Region | str) -> ClientBuilder:
        self._region = region
        return self

    def endpoint(self, endpoint: str) -> ClientBuilder:
        self._endpoint = endpoint
        return self

    def debug(self, debug: bool) -> ClientBuilder:
        self._debug = debug
        return self

    def timeout(self, seconds: float) -> ClientBuilder:
        self._timeout = seconds
        return self

    def log_level(self, level_name: str) -> ClientBuilder:
        self._log_level = level_name
        return self

    def settings(self, settings: SettingsFile) -> ClientBuilder:
        self._settings = settings
        return self

    def clock(self, clock: Callable[[], float]) -> ClientBuilder:
        """Override the timestamp source (defaults to time.time)."""
        self._clock = clock
        return self

    def has_http(self) -> bool:
        return self._http is not None

    def has_credential(self) -> bool:
        return self._credential is not None

    def has_region(self) -> bool:
        return self._region is not None

    def has_endpoint(self) -> bool:
        return self._endpoint is not None

    def has_debug(self) -> bool:
        return self._debug is not None

    def _resolve_credential(self) -> Credential:
        if self._credential is not None:
            return self._credential
        if self._settings is not None and self._settings.credential is not None:
            cred = self._settings.credential
            return Credential.from_env(
                secret_id_env=cred.secret_id_env,
                secret_key_env=cred.secret_key_env,
                token_env=cred.token_env,
            )
        raise ConfigError("credential is required")

    def build_config(self) -> ClientConfig:
        """Validate and freeze the configuration.

        Raises:
            ConfigError: On a missing credential or any invalid value.
            InvalidCredentialError: If settings name unset credential env vars.
        """
        file_settings = self._settings.client if self._settings else ClientSettings()

        def pick(explicit: Any, from_file: Any) -> Any:
            return explicit if explicit is not None else from_file

        values: dict[str, Any] = {"credential": self._resolve_credential()}
        region = pick(self._region, file_settings.region)
        if region is not None:
            values["region"] = region_name(region)
        optional = {
            "endpoint": pick(self._endpoint, file_settings.endpoint),
            "timeout_seconds": pick(self._timeout, file_settings.timeout_seconds),
            "log_level": pick(self._log_level, file_settings.log_level),
        }
        values.update({k: v for k, v in optional.items() if v is not None})
        debug = pick(self._debug, file_settings.debug)
        values["debug"] = debug if debug is not None else debug_from_env()

        try:
            return ClientConfig(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid client config: {e}") from e

    def build(self) -> Client:
        from hunyuan_sdk.client import Client

        return Client(self.build_config(), http=self._http, clock=self._clock)
