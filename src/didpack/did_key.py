"""
did:key identifiers for Ed25519 public keys.

Pure text encoding; usable before ready() since no primitive is involved.
"""

from .codec import b58_decode, b58_encode
from .types import (
    DID_KEY_PREFIX,
    ED25519_DID_KEY_PREFIX,
    ED25519_MULTICODEC,
    PUBLIC_KEY_SIZE,
    InvalidKeyError,
    UnsupportedKeyTypeError,
)


class Ed25519PubEncoder:
    """Multicodec ed25519-pub encoder for did:key identifiers."""

    name = "ed25519-pub"
    code = ED25519_MULTICODEC

    @property
    def prefix(self) -> bytes:
        """The 2-byte multicodec tag (0xed 0x01)."""
        return self.code.to_bytes(2, byteorder="big")

    def encode(self, public_key: bytes) -> str:
        """Encode a raw 32-byte Ed25519 public key as did:key:z..."""
        return f"{DID_KEY_PREFIX}{b58_encode(self.prefix + bytes(public_key))}"

    def decode(self, identifier: str) -> bytes:
        """
        Decode a did:key identifier back to the raw public key.

        Raises:
            UnsupportedKeyTypeError: If the identifier is not an Ed25519 did:key
        """
        if not isinstance(identifier, str) or not identifier.startswith(ED25519_DID_KEY_PREFIX):
            raise UnsupportedKeyTypeError(
                f"Only ed25519 keys are supported, got: {identifier!r}"
            )

        try:
            decoded = b58_decode(identifier[len(DID_KEY_PREFIX):])
        except InvalidKeyError as e:
            raise UnsupportedKeyTypeError(f"Malformed did:key identifier: {e}") from e

        if decoded[:2] != self.prefix or len(decoded) != 2 + PUBLIC_KEY_SIZE:
            raise UnsupportedKeyTypeError(
                f"Only ed25519 keys are supported, got: {identifier!r}"
            )
        return decoded[2:]


_encoder = Ed25519PubEncoder()


def encode_did_key(public_key: bytes) -> str:
    """Encode a raw Ed25519 public key as a did:key identifier."""
    return _encoder.encode(public_key)


def decode_did_key(identifier: str) -> bytes:
    """Decode a did:key identifier to a raw Ed25519 public key."""
    return _encoder.decode(identifier)


def is_did_key(identifier: str) -> bool:
    """Check whether text is a supported Ed25519 did:key identifier."""
    try:
        decode_did_key(identifier)
    except UnsupportedKeyTypeError:
        return False
    return True
