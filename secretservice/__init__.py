"""SecretService — client for the freedesktop.org Secret Service API.

Security Note (Threat Model):
    Secrets are decrypted in process memory once they reach the client.
    Encrypted sessions only protect them while they travel over the bus;
    anything able to read the process memory can read the plaintext.
"""

from .version import __version__
from .conf import ALGORITHM_DH, ALGORITHM_PLAIN, NO_OBJECT
from .config import SecretServiceConfig
from .exceptions import (
    SecretServiceError,
    InvalidAlgorithm,
    InvalidSession,
    InvalidPadding,
    KeyExchangeError,
    PromptDismissed,
    PromptTimeout,
)
from .secret import Secret, encode_secret, decode_secret
from .session import Session, open_session
from .prompt import Prompt, PromptState, check_prompt
from .transport import Transport, SignalReceiver
from .collection import Collection
from .item import Item
from .service import Service

__all__ = [
    "__version__",
    "ALGORITHM_DH",
    "ALGORITHM_PLAIN",
    "NO_OBJECT",
    "SecretServiceConfig",
    "SecretServiceError",
    "InvalidAlgorithm",
    "InvalidSession",
    "InvalidPadding",
    "KeyExchangeError",
    "PromptDismissed",
    "PromptTimeout",
    "Secret",
    "encode_secret",
    "decode_secret",
    "Session",
    "open_session",
    "Prompt",
    "PromptState",
    "check_prompt",
    "Transport",
    "SignalReceiver",
    "Collection",
    "Item",
    "Service",
]
