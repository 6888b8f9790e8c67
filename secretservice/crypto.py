"""
SecretService Crypto Core — Key agreement, key derivation and secret encryption.

Implements the ``dh-ietf1024-sha256-aes128-cbc-pkcs7`` session algorithm:
- Key agreement: Diffie-Hellman over the second Oakley group (RFC 2409, 1024 bit)
- Key derivation: HKDF-SHA256(shared_secret, salt=None, info=None) → 16 bytes
- Transport encryption: AES-128-CBC with PKCS7 padding, IV sent along the secret

Security Note:
    Never log key material, plaintext or ciphertext values.
    The derivation parameters are fixed by the daemon; changing any of
    them breaks interoperability.
"""

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.asymmetric import dh
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from .exceptions import InvalidPadding, KeyExchangeError


BLOCK_SIZE = 16  # AES block, also the IV length
KEY_LENGTH = 16  # AES-128

# Second Oakley group, RFC 2409 section 6.2
DH_PRIME = int(
    "FFFFFFFFFFFFFFFFC90FDAA22168C234C4C6628B80DC1CD1"
    "29024E088A67CC74020BBEA63B139B22514A08798E3404DD"
    "EF9519B3CD3A431B302B0A6DF25F14374FE1356D6D51C245"
    "E485B576625E7EC6F44C42E9A637ED6B0BFF5CB6F406B7ED"
    "EE386BFB5A899FA5AE9F24117C4B1FE649286651ECE65381"
    "FFFFFFFFFFFFFFFF",
    16,
)
DH_GENERATOR = 2
DH_PRIME_LENGTH = (DH_PRIME.bit_length() + 7) // 8

_PARAMETER_NUMBERS = dh.DHParameterNumbers(DH_PRIME, DH_GENERATOR)
_PARAMETERS = _PARAMETER_NUMBERS.parameters()


# ---------------------------------------------------------------------------
# Key agreement
# ---------------------------------------------------------------------------

def int_to_bytes(number: int) -> bytes:
    """Big-endian encoding without leading zero bytes."""
    return number.to_bytes((number.bit_length() + 7) // 8 or 1, "big")


def generate_keypair() -> dh.DHPrivateKey:
    """Generate a fresh private exponent in the Oakley group.

    A new key must be generated for every session.
    """
    return _PARAMETERS.generate_private_key()


def public_bytes(private_key: dh.DHPrivateKey) -> bytes:
    """Return the public value of ``private_key`` as sent to the daemon."""
    return int_to_bytes(private_key.public_key().public_numbers().y)


def compute_shared_secret(private_key: dh.DHPrivateKey, peer_public: bytes) -> bytes:
    """Compute the Diffie-Hellman shared secret with the daemon's public value.

    Args:
        private_key: Our private key for this session.
        peer_public: Big-endian public value returned by ``OpenSession``.

    Returns:
        Shared secret, left-padded with zeros to the length of the prime.

    Raises:
        KeyExchangeError: If the public value is outside ``(1, p - 1)``.
    """
    y = int.from_bytes(peer_public, "big")
    if not 1 < y < DH_PRIME - 1:
        raise KeyExchangeError(
            "Daemon public value is out of range for the Oakley group"
        )
    peer_key = dh.DHPublicNumbers(y, _PARAMETER_NUMBERS).public_key()
    shared = private_key.exchange(peer_key)
    return shared.rjust(DH_PRIME_LENGTH, b"\x00")


def derive_session_key(shared_secret: bytes) -> bytes:
    """Derive the 16-byte AES key using HKDF-SHA256 with no salt and no info.

    Args:
        shared_secret: Output of :func:`compute_shared_secret`.

    Returns:
        16-byte session key.
    """
    hkdf = HKDF(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=None,
        info=None,
    )
    return hkdf.derive(shared_secret)


# ---------------------------------------------------------------------------
# Secret encryption
# ---------------------------------------------------------------------------

def aes_cbc_encrypt(key: bytes, iv: bytes, plaintext: bytes) -> bytes:
    """PKCS7-pad ``plaintext`` and encrypt it with AES-128-CBC."""
    padder = padding.PKCS7(BLOCK_SIZE * 8).padder()
    padded = padder.update(plaintext) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def aes_cbc_decrypt(key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    """Decrypt AES-128-CBC ``ciphertext`` and strip its PKCS7 padding.

    Raises:
        InvalidPadding: If the ciphertext is not a whole number of blocks
            or the padding bytes are malformed.
    """
    if not ciphertext or len(ciphertext) % BLOCK_SIZE:
        raise InvalidPadding(
            f"Ciphertext length {len(ciphertext)} is not a positive "
            f"multiple of {BLOCK_SIZE}"
        )
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(BLOCK_SIZE * 8).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as err:
        raise InvalidPadding(str(err)) from err
