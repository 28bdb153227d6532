"""Key material handling for didpack."""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .codec import b58_decode, b58_encode
from .primitives import Primitives, resolve
from .types import PRIVATE_KEY_SIZE, PUBLIC_KEY_SIZE, InvalidKeyError


@dataclass(frozen=True)
class EncodedKey:
    """A key given as base58 text."""
    text: str


@dataclass(frozen=True)
class RawKey:
    """A key given as raw bytes."""
    data: bytes


KeyField = Union[EncodedKey, RawKey, str, bytes]


def normalize_key(value: KeyField, expected_size: Optional[int] = None) -> bytes:
    """
    Normalize a key field to raw bytes.

    Args:
        value: EncodedKey, RawKey, base58 str or raw bytes
        expected_size: Required length in bytes, if any

    Returns:
        Raw key bytes

    Raises:
        InvalidKeyError: If the value cannot be decoded or has the wrong size
    """
    if isinstance(value, EncodedKey):
        raw = b58_decode(value.text)
    elif isinstance(value, RawKey):
        raw = bytes(value.data)
    elif isinstance(value, str):
        raw = b58_decode(value)
    elif isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
    else:
        raise InvalidKeyError(f"Unsupported key type: {type(value).__name__}")

    if expected_size is not None and len(raw) != expected_size:
        raise InvalidKeyError(f"Key must be {expected_size} bytes, got {len(raw)}")
    return raw


@dataclass(frozen=True)
class Keypair:
    """
    An Ed25519 signing keypair.

    Attributes:
        public_key: Raw 32-byte Ed25519 public key
        private_key: Raw 64-byte Ed25519 private key (seed || public key)
    """

    public_key: bytes
    private_key: bytes

    def __post_init__(self) -> None:
        if len(self.public_key) != PUBLIC_KEY_SIZE:
            raise InvalidKeyError(
                f"Public key must be {PUBLIC_KEY_SIZE} bytes, got {len(self.public_key)}"
            )
        if len(self.private_key) != PRIVATE_KEY_SIZE:
            raise InvalidKeyError(
                f"Private key must be {PRIVATE_KEY_SIZE} bytes, got {len(self.private_key)}"
            )

    @classmethod
    def from_fields(cls, public_key: KeyField, private_key: KeyField) -> "Keypair":
        """Create a Keypair from raw or base58-encoded fields."""
        return cls(
            public_key=normalize_key(public_key, PUBLIC_KEY_SIZE),
            private_key=normalize_key(private_key, PRIVATE_KEY_SIZE),
        )

    @property
    def verkey(self) -> str:
        """The base58 verification key."""
        return b58_encode(self.public_key)

    def __repr__(self) -> str:
        return f"Keypair(verkey={self.verkey!r})"


def as_keypair(keys: Any) -> Keypair:
    """
    Coerce caller-supplied keys to a Keypair.

    Accepts a Keypair, a (public_key, private_key) tuple, or a mapping with
    publicKey/privateKey (or public_key/private_key) entries given as bytes
    or base58 text.
    """
    if isinstance(keys, Keypair):
        return keys
    if isinstance(keys, tuple) and len(keys) == 2:
        return Keypair.from_fields(keys[0], keys[1])
    if isinstance(keys, Mapping):
        public_key = keys.get("publicKey", keys.get("public_key"))
        private_key = keys.get("privateKey", keys.get("private_key"))
        if public_key is None or private_key is None:
            raise InvalidKeyError("Keypair mapping needs publicKey and privateKey")
        return Keypair.from_fields(public_key, private_key)
    if hasattr(keys, "public_key") and hasattr(keys, "private_key"):
        return Keypair.from_fields(keys.public_key, keys.private_key)
    raise InvalidKeyError(f"Unsupported keypair type: {type(keys).__name__}")


def generate_keypair(
    seed: Optional[bytes] = None,
    primitives: Optional[Primitives] = None,
) -> Keypair:
    """
    Generate an Ed25519 keypair.

    Args:
        seed: Optional 32-byte seed for deterministic keys
        primitives: Primitive capability (defaults to the process-wide one)

    Returns:
        A new Keypair
    """
    public_key, private_key = resolve(primitives).sign_keypair(seed)
    return Keypair(public_key=public_key, private_key=private_key)
