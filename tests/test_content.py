"""Tests for content encryption."""

import pytest
from didpack.content import decrypt_plaintext, encrypt_plaintext
from didpack.codec import b64url_encode
from didpack.envelope import Envelope, encode_envelope
from didpack.pack import unpack_message
from didpack.wrapping import Authcrypt, prepare_recipient_keys
from didpack.types import (
    AuthenticationFailedError,
    InvalidEnvelopeError,
    InvalidKeyError,
)

AAD = "eyJhbGciOiJBbm9uY3J5cHQifQ=="


class TestContentCipher:
    """Test encrypt/decrypt with associated data."""

    @pytest.fixture
    def key(self, sodium):
        return sodium.random_bytes(32)

    def test_round_trip(self, sodium, key) -> None:
        """Decrypt returns the plaintext."""
        ciphertext, tag, nonce = encrypt_plaintext("secret", AAD, key, sodium)

        assert len(nonce) == 24
        assert len(tag) == 16
        assert len(ciphertext) == len("secret")
        assert decrypt_plaintext(ciphertext, tag, AAD, nonce, key, sodium) == "secret"

    def test_wrong_aad(self, sodium, key) -> None:
        """Different associated data fails authentication."""
        ciphertext, tag, nonce = encrypt_plaintext("secret", AAD, key, sodium)

        with pytest.raises(AuthenticationFailedError):
            decrypt_plaintext(ciphertext, tag, AAD.rstrip("="), nonce, key, sodium)

    def test_wrong_key(self, sodium, key) -> None:
        """A different content key fails authentication."""
        ciphertext, tag, nonce = encrypt_plaintext("secret", AAD, key, sodium)

        with pytest.raises(AuthenticationFailedError):
            decrypt_plaintext(ciphertext, tag, AAD, nonce, sodium.random_bytes(32), sodium)

    def test_legacy_chacha_nonce(self, sodium, key) -> None:
        """12-byte nonces decrypt with IETF ChaCha20-Poly1305."""
        nonce = sodium.random_bytes(12)
        ciphertext, tag = sodium.chacha20poly1305_encrypt(b"legacy", AAD.encode(), nonce, key)

        assert decrypt_plaintext(ciphertext, tag, AAD, nonce, key, sodium) == "legacy"

    def test_unknown_nonce_length(self, sodium, key) -> None:
        """Other nonce sizes are rejected."""
        with pytest.raises(InvalidEnvelopeError):
            decrypt_plaintext(b"x", bytes(16), AAD, bytes(16), key, sodium)

    def test_non_utf8_plaintext(self, sodium, key) -> None:
        """Plaintext bytes must be UTF-8 since decrypt returns text."""
        with pytest.raises(ValueError):
            encrypt_plaintext(b"\xff\xfe", AAD, key, sodium)

    def test_utf8_bytes_plaintext(self, sodium, key) -> None:
        """UTF-8 bytes decrypt to the same text."""
        ciphertext, tag, nonce = encrypt_plaintext("naïve".encode("utf-8"), AAD, key, sodium)
        assert decrypt_plaintext(ciphertext, tag, AAD, nonce, key, sodium) == "naïve"

    def test_bad_key_length(self, sodium) -> None:
        """Content key must be 32 bytes."""
        with pytest.raises(InvalidKeyError):
            encrypt_plaintext("secret", AAD, bytes(16), sodium)


class TestLegacyEnvelope:
    """Test envelopes written with a 12-byte ChaCha20-Poly1305 nonce."""

    def test_unpack_legacy_envelope(self, sodium, alice, bob) -> None:
        """Bob unpacks an envelope whose content uses the IETF nonce size."""
        header_json, cek = prepare_recipient_keys([bob.public_key], Authcrypt(alice), sodium)
        protected = b64url_encode(header_json)
        nonce = sodium.random_bytes(12)
        ciphertext, tag = sodium.chacha20poly1305_encrypt(
            b"from an older packer", protected.encode("ascii"), nonce, cek
        )
        packed = encode_envelope(
            Envelope(ciphertext=ciphertext, iv=nonce, protected=protected, tag=tag)
        )

        result = unpack_message(packed, bob, primitives=sodium)
        assert result.message == "from an older packer"
        assert result.sender_key == alice.verkey
