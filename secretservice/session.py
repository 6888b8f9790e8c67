"""
Session — negotiated channel used to transport secrets.

``open_session`` runs the key exchange with the daemon:
- ``plain``: no key, secrets travel unencrypted
- ``dh-ietf1024-sha256-aes128-cbc-pkcs7``: a fresh DH key pair per session,
  the shared secret is turned into an AES-128 key with HKDF-SHA256

Security Note:
    Never log the session key. Only log session paths and algorithms.
"""
import logging
from typing import Optional, Union

from .conf import (
    ALGORITHM_DH,
    ALGORITHM_PLAIN,
    ALGORITHMS,
    IFACE_SERVICE,
    IFACE_SESSION,
    SERVICE_PATH,
)
from .crypto import (
    KEY_LENGTH,
    compute_shared_secret,
    derive_session_key,
    generate_keypair,
    public_bytes,
)
from .exceptions import InvalidAlgorithm, InvalidSession, KeyExchangeError
from .secret import Secret, decode_secret, encode_secret
from .transport import Transport

logger = logging.getLogger("secretservice")


class Session:
    """An open session with the daemon.

    The key is read-only once the session is built, so a session can be
    shared by concurrent callers. Closing drops the key.
    """

    def __init__(
        self,
        transport: Transport,
        path: str,
        algorithm: str,
        key: Optional[bytes] = None,
    ):
        if algorithm not in ALGORITHMS:
            raise InvalidAlgorithm(f"Unknown session algorithm: {algorithm!r}")
        if algorithm == ALGORITHM_DH:
            if key is None or len(key) != KEY_LENGTH:
                raise InvalidSession(
                    f"{algorithm} sessions need a {KEY_LENGTH}-byte key"
                )
        elif key is not None:
            raise InvalidSession("Plain sessions do not carry a key")
        self._transport = transport
        self._path = path
        self._algorithm = algorithm
        self._key: Optional[bytearray] = bytearray(key) if key is not None else None
        self._closed = False

    def __repr__(self) -> str:
        state = 'closed' if self._closed else 'open'
        return f'<Session {self._path} [{self._algorithm}, {state}]>'

    @property
    def path(self) -> str:
        return self._path

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def encrypted(self) -> bool:
        return self._algorithm == ALGORITHM_DH

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def key(self) -> Optional[bytes]:
        """Session key, ``None`` for plain sessions.

        Raises:
            InvalidSession: If the session was closed.
        """
        if self._closed:
            raise InvalidSession(f"Session {self._path} is closed")
        return bytes(self._key) if self._key is not None else None

    def encode(self, plaintext: Union[bytes, str], iv: Optional[bytes] = None) -> Secret:
        return encode_secret(self, plaintext, iv)

    def decode(self, secret: Secret) -> bytes:
        return decode_secret(self, secret)

    async def close(self) -> None:
        """Close the session on the daemon and forget the key.

        The close call does not wait for a reply. Closing twice is a no-op.
        """
        if self._closed:
            return
        self._closed = True
        if self._key is not None:
            for idx in range(len(self._key)):
                self._key[idx] = 0
            self._key = None
        await self._transport.send(self._path, IFACE_SESSION, 'Close')
        logger.debug("Session closed: %s", self._path)

    async def __aenter__(self) -> "Session":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()


async def open_session(
    transport: Transport,
    algorithm: str = ALGORITHM_DH,
    service_path: str = SERVICE_PATH,
) -> Session:
    """Negotiate a new session with the daemon.

    Args:
        transport: Transport connected to the daemon.
        algorithm: ``plain`` or ``dh-ietf1024-sha256-aes128-cbc-pkcs7``.
        service_path: Object path of the Service.

    Returns:
        Open :class:`Session`.

    Raises:
        InvalidAlgorithm: If ``algorithm`` is unknown. Nothing is sent.
        KeyExchangeError: If the daemon's reply to the key exchange is unusable.
    """
    if algorithm not in ALGORITHMS:
        raise InvalidAlgorithm(f"Unknown session algorithm: {algorithm!r}")

    if algorithm == ALGORITHM_PLAIN:
        _, path = await transport.call(
            service_path, IFACE_SERVICE, 'OpenSession', 'sv',
            (algorithm, ('s', '')),
        )
        logger.debug("Session opened: %s [%s]", path, algorithm)
        return Session(transport, path, algorithm)

    private_key = generate_keypair()
    output, path = await transport.call(
        service_path, IFACE_SERVICE, 'OpenSession', 'sv',
        (algorithm, ('ay', public_bytes(private_key))),
    )
    if not isinstance(output, tuple) or len(output) != 2 or output[0] != 'ay':
        await transport.send(path, IFACE_SESSION, 'Close')
        raise KeyExchangeError(
            f"Expecting an 'ay' output from OpenSession, got {output!r}"
        )
    try:
        shared_secret = compute_shared_secret(private_key, bytes(output[1]))
    except KeyExchangeError:
        await transport.send(path, IFACE_SESSION, 'Close')
        raise
    logger.debug("Session opened: %s [%s]", path, algorithm)
    return Session(transport, path, algorithm, derive_session_key(shared_secret))
