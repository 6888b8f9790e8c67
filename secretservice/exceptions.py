"""SecretService exceptions.

Every error raised by this package derives from :exc:`SecretServiceError`.
Errors coming from the transport (including errors reported by the daemon,
such as ``org.freedesktop.Secret.Error.IsLocked``) are never wrapped and
propagate unchanged.
"""


class SecretServiceError(Exception):
    """Base class for all SecretService errors."""


class InvalidAlgorithm(SecretServiceError, ValueError):
    """Unknown session algorithm. Raised before any call reaches the daemon."""


class InvalidSession(SecretServiceError):
    """The session cannot be used for this secret.

    Raised when the algorithm of a secret and a session disagree, when a
    secret belongs to another session, or when the session was closed.
    """


class InvalidPadding(SecretServiceError, ValueError):
    """PKCS7 padding check failed while decrypting a secret."""


class KeyExchangeError(SecretServiceError):
    """The daemon answered the key exchange with an unusable public value."""


class PromptDismissed(SecretServiceError):
    """The prompt was dismissed by the user or by the daemon."""


class PromptTimeout(SecretServiceError, TimeoutError):
    """The prompt did not complete in time."""
