"""
Cryptographic primitive capability for didpack.

All libsodium and cryptography calls used by the pack/unpack and attachment
protocols go through a Primitives object. The process-wide instance is
created once by awaiting ready(); components accept an explicit instance so
tests can pass a substitute.
"""

import logging
from typing import Optional, Tuple

import nacl.bindings
from nacl.exceptions import CryptoError
from nacl.utils import random as nacl_random
from cryptography.exceptions import InvalidSignature, InvalidTag
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from .types import (
    BOX_NONCE_SIZE,
    CHACHA_NONCE_SIZE,
    CONTENT_KEY_SIZE,
    PRIVATE_KEY_SIZE,
    PUBLIC_KEY_SIZE,
    SEED_SIZE,
    SIGNATURE_SIZE,
    TAG_SIZE,
    XCHACHA_NONCE_SIZE,
    AuthenticationFailedError,
    InvalidKeyError,
    NotInitializedError,
)

logger = logging.getLogger(__name__)


class Primitives:
    """libsodium (PyNaCl) and cryptography backed primitives."""

    content_key_size = CONTENT_KEY_SIZE
    aead_nonce_size = XCHACHA_NONCE_SIZE
    box_nonce_size = BOX_NONCE_SIZE

    def __init__(self) -> None:
        nacl.bindings.sodium_init()

    # MARK: - Keys

    def sign_keypair(self, seed: Optional[bytes] = None) -> Tuple[bytes, bytes]:
        """
        Generate an Ed25519 keypair.

        Args:
            seed: Optional 32-byte seed for deterministic generation

        Returns:
            Tuple of (public_key, private_key) in libsodium layout
        """
        if seed is None:
            return nacl.bindings.crypto_sign_keypair()
        if len(seed) != SEED_SIZE:
            raise InvalidKeyError(f"Seed must be {SEED_SIZE} bytes, got {len(seed)}")
        return nacl.bindings.crypto_sign_seed_keypair(seed)

    def ed25519_pk_to_curve25519(self, public_key: bytes) -> bytes:
        """Convert an Ed25519 public key to its X25519 form."""
        if len(public_key) != PUBLIC_KEY_SIZE:
            raise InvalidKeyError(
                f"Ed25519 public key must be {PUBLIC_KEY_SIZE} bytes, got {len(public_key)}"
            )
        try:
            return nacl.bindings.crypto_sign_ed25519_pk_to_curve25519(public_key)
        except CryptoError as e:
            raise InvalidKeyError(f"Invalid Ed25519 public key: {e}") from e

    def ed25519_sk_to_curve25519(self, private_key: bytes) -> bytes:
        """Convert a 64-byte Ed25519 private key to its X25519 form."""
        if len(private_key) != PRIVATE_KEY_SIZE:
            raise InvalidKeyError(
                f"Ed25519 private key must be {PRIVATE_KEY_SIZE} bytes, got {len(private_key)}"
            )
        return nacl.bindings.crypto_sign_ed25519_sk_to_curve25519(private_key)

    def random_bytes(self, size: int) -> bytes:
        return nacl_random(size)

    def memcmp(self, a: bytes, b: bytes) -> bool:
        """Constant-time equality check."""
        if len(a) != len(b):
            return False
        return nacl.bindings.sodium_memcmp(a, b)

    # MARK: - Public-key boxes

    def box_seal(self, message: bytes, public_key: bytes) -> bytes:
        """Anonymously encrypt to an X25519 public key."""
        return nacl.bindings.crypto_box_seal(message, public_key)

    def box_seal_open(self, ciphertext: bytes, public_key: bytes, private_key: bytes) -> bytes:
        try:
            return nacl.bindings.crypto_box_seal_open(ciphertext, public_key, private_key)
        except CryptoError as e:
            raise AuthenticationFailedError(f"Failed to open sealed box: {e}") from e

    def box(self, message: bytes, nonce: bytes, public_key: bytes, private_key: bytes) -> bytes:
        """Authenticated public-key encryption (MAC || ciphertext)."""
        return nacl.bindings.crypto_box(message, nonce, public_key, private_key)

    def box_open(self, ciphertext: bytes, nonce: bytes, public_key: bytes, private_key: bytes) -> bytes:
        try:
            return nacl.bindings.crypto_box_open(ciphertext, nonce, public_key, private_key)
        except CryptoError as e:
            raise AuthenticationFailedError(f"Failed to open box: {e}") from e

    # MARK: - AEAD

    def aead_encrypt(
        self, plaintext: bytes, aad: bytes, nonce: bytes, key: bytes
    ) -> Tuple[bytes, bytes]:
        """
        XChaCha20-Poly1305 (IETF) encryption.

        Returns:
            Tuple of (ciphertext, tag) in detached form
        """
        combined = nacl.bindings.crypto_aead_xchacha20poly1305_ietf_encrypt(
            plaintext, aad, nonce, key
        )
        return combined[:-TAG_SIZE], combined[-TAG_SIZE:]

    def aead_decrypt(
        self, ciphertext: bytes, tag: bytes, aad: bytes, nonce: bytes, key: bytes
    ) -> bytes:
        try:
            return nacl.bindings.crypto_aead_xchacha20poly1305_ietf_decrypt(
                ciphertext + tag, aad, nonce, key
            )
        except CryptoError as e:
            raise AuthenticationFailedError("Message authentication failed") from e

    def chacha20poly1305_encrypt(
        self, plaintext: bytes, aad: bytes, nonce: bytes, key: bytes
    ) -> Tuple[bytes, bytes]:
        """IETF ChaCha20-Poly1305 encryption with a 12-byte nonce."""
        if len(nonce) != CHACHA_NONCE_SIZE:
            raise ValueError(f"Nonce must be {CHACHA_NONCE_SIZE} bytes, got {len(nonce)}")
        combined = ChaCha20Poly1305(key).encrypt(nonce, plaintext, aad)
        return combined[:-TAG_SIZE], combined[-TAG_SIZE:]

    def chacha20poly1305_decrypt(
        self, ciphertext: bytes, tag: bytes, aad: bytes, nonce: bytes, key: bytes
    ) -> bytes:
        try:
            return ChaCha20Poly1305(key).decrypt(nonce, ciphertext + tag, aad)
        except (InvalidTag, ValueError) as e:
            raise AuthenticationFailedError("Message authentication failed") from e

    # MARK: - Signatures

    def sign_detached(self, message: bytes, private_key: bytes) -> bytes:
        """Ed25519 detached signature using a 64-byte libsodium private key."""
        if len(private_key) != PRIVATE_KEY_SIZE:
            raise InvalidKeyError(
                f"Ed25519 private key must be {PRIVATE_KEY_SIZE} bytes, got {len(private_key)}"
            )
        signing_key = Ed25519PrivateKey.from_private_bytes(private_key[:SEED_SIZE])
        return signing_key.sign(message)

    def verify_detached(self, signature: bytes, message: bytes, public_key: bytes) -> bool:
        """Verify an Ed25519 detached signature. Returns False when invalid."""
        if len(signature) != SIGNATURE_SIZE:
            return False
        try:
            verifying_key = Ed25519PublicKey.from_public_bytes(public_key)
        except ValueError as e:
            raise InvalidKeyError(f"Invalid Ed25519 public key: {e}") from e

        try:
            verifying_key.verify(signature, message)
            return True
        except InvalidSignature:
            return False


_primitives: Optional[Primitives] = None


async def ready() -> Primitives:
    """
    Initialize the process-wide primitives.

    Must be awaited once before any pack, unpack or attachment operation
    that does not receive an explicit Primitives instance. Awaiting again
    returns the same instance.
    """
    global _primitives
    if _primitives is None:
        _primitives = Primitives()
        logger.debug("Primitives initialized")
    return _primitives


def is_ready() -> bool:
    """Whether ready() has completed in this process."""
    return _primitives is not None


def get_primitives() -> Primitives:
    """
    Return the process-wide primitives.

    Raises:
        NotInitializedError: If ready() has not been awaited
    """
    if _primitives is None:
        raise NotInitializedError("didpack is not ready; await didpack.ready() first")
    return _primitives


def resolve(primitives: Optional[Primitives]) -> Primitives:
    """Return primitives if given, else the process-wide instance."""
    if primitives is not None:
        return primitives
    return get_primitives()
