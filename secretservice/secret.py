"""Secret — the ``(oayays)`` structure exchanged with the daemon.

Encoding and decoding depend on the session the secret travels in: plain
sessions carry the value as is, encrypted sessions carry an AES-128-CBC
ciphertext and its IV in ``parameters``.
"""
import os
from typing import TYPE_CHECKING, NamedTuple, Optional, Union

from .conf import CONTENT_TYPE
from .crypto import BLOCK_SIZE, aes_cbc_decrypt, aes_cbc_encrypt
from .exceptions import InvalidSession

if TYPE_CHECKING:
    from .session import Session


class Secret(NamedTuple):
    """A secret as marshalled on the wire.

    Field order is the order of the D-Bus struct and must not change.
    """
    session: str
    parameters: bytes
    value: bytes
    content_type: str = CONTENT_TYPE


def encode_secret(
    session: "Session",
    plaintext: Union[bytes, str],
    iv: Optional[bytes] = None,
) -> Secret:
    """Build the wire secret for ``plaintext`` in ``session``.

    Args:
        session: Open session the secret is sent through.
        plaintext: Secret value; ``str`` is encoded as UTF-8.
        iv: IV for encrypted sessions. A fresh random IV is generated
            when omitted. Not accepted for plain sessions.

    Returns:
        Secret ready to be passed to ``CreateItem`` or ``SetSecret``.

    Raises:
        InvalidSession: If the session is closed.
        ValueError: If ``iv`` has the wrong length or the session is plain.
    """
    if isinstance(plaintext, str):
        plaintext = plaintext.encode("utf-8")
    key = session.key
    if not session.encrypted:
        if iv:
            raise ValueError("Plain sessions do not use an IV")
        return Secret(session.path, b"", bytes(plaintext))
    if iv is None:
        iv = os.urandom(BLOCK_SIZE)
    elif len(iv) != BLOCK_SIZE:
        raise ValueError(f"IV must be {BLOCK_SIZE} bytes, got {len(iv)}")
    return Secret(
        session.path, bytes(iv), aes_cbc_encrypt(key, iv, bytes(plaintext))
    )


def decode_secret(session: "Session", secret: Secret) -> bytes:
    """Return the plaintext carried by ``secret``.

    ``content_type`` is not interpreted.

    Raises:
        InvalidSession: If the session is closed, if the secret belongs to
            another session, or if its parameters do not match the session
            algorithm.
        InvalidPadding: If the decrypted padding is malformed.
    """
    secret = Secret(*secret)
    key = session.key
    if secret.session != session.path:
        raise InvalidSession(
            f"Secret belongs to session {secret.session}, not {session.path}"
        )
    if not session.encrypted:
        if secret.parameters:
            raise InvalidSession("Encrypted secret received in a plain session")
        return bytes(secret.value)
    if len(secret.parameters) != BLOCK_SIZE:
        raise InvalidSession(
            "Secret parameters are not a valid IV for an encrypted session"
        )
    return aes_cbc_decrypt(key, bytes(secret.parameters), bytes(secret.value))
