"""hunyuan_sdk — async Hunyuan API client with TC3-HMAC-SHA256 signing.

Debug logging is enabled with ``ClientBuilder().debug(True)`` or by setting
``TENCENTCLOUD_SDK_DEBUG=true``. Signatures, the Authorization header and
session tokens are masked in debug output; request and response bodies are
not.

Debug records go to the ``hunyuan_sdk.debug`` logger at the client's
``log_level`` (DEBUG by default). The SDK installs no handlers, and Python's
last-resort handler only prints WARNING and above, so configure that logger
to see the records::

    logging.basicConfig()
    logging.getLogger("hunyuan_sdk.debug").setLevel(logging.DEBUG)
"""

import importlib

from hunyuan_sdk.config import (
    ClientBuilder,
    ClientConfig,
    ClientSettings,
    CredentialSettings,
    SettingsFile,
    debug_from_env,
    load_settings,
)
from hunyuan_sdk.exceptions import (
    CanceledError,
    ClockError,
    ConfigError,
    DecodeError,
    HunyuanError,
    InvalidCredentialError,
    ServiceError,
    TransportError,
)
from hunyuan_sdk.models import (
    ChatChoice,
    ChatChoiceMessage,
    ChatCompletionsRequest,
    ChatCompletionsResponse,
    Message,
    Usage,
)
from hunyuan_sdk.types import (
    ActionResponse,
    Credential,
    ErrorContent,
    Region,
    ResponseEnvelope,
    region_name,
)

# Client is lazily imported to avoid loading httpx and opentelemetry at
# import time. `from hunyuan_sdk import Client` still works.
_LAZY_IMPORTS: dict[str, str] = {
    "Client": "hunyuan_sdk.client",
}


def __getattr__(name: str):
    if name in _LAZY_IMPORTS:
        module = importlib.import_module(_LAZY_IMPORTS[name])
        attr = getattr(module, name)
        globals()[name] = attr  # cache for subsequent accesses
        return attr
    raise AttributeError(f"module 'hunyuan_sdk' has no attribute {name!r}")


__all__ = [
    # Client (lazy — loaded on first access)
    "Client",
    # Config
    "ClientBuilder",
    "ClientConfig",
    "ClientSettings",
    "CredentialSettings",
    "SettingsFile",
    "debug_from_env",
    "load_settings",
    # Types
    "ActionResponse",
    "Credential",
    "ErrorContent",
    "Region",
    "ResponseEnvelope",
    "region_name",
    # Action models
    "ChatChoice",
    "ChatChoiceMessage",
    "ChatCompletionsRequest",
    "ChatCompletionsResponse",
    "Message",
    "Usage",
    # Exceptions
    "CanceledError",
    "ClockError",
    "ConfigError",
    "DecodeError",
    "HunyuanError",
    "InvalidCredentialError",
    "ServiceError",
    "TransportError",
]
