"""Tests for did:key identifiers."""

import pytest
from didpack.codec import b58_encode
from didpack.did_key import (
    Ed25519PubEncoder,
    decode_did_key,
    encode_did_key,
    is_did_key,
)
from didpack.types import UnsupportedKeyTypeError


class TestEncode:
    """Test did:key encoding."""

    def test_ed25519_prefix(self, alice) -> None:
        """Ed25519 identifiers always start with did:key:z6Mk."""
        did_key = encode_did_key(alice.public_key)
        assert did_key.startswith("did:key:z6Mk")

    def test_deterministic(self, alice) -> None:
        """Same key always gives the same identifier."""
        assert encode_did_key(alice.public_key) == encode_did_key(alice.public_key)

    def test_layout(self) -> None:
        """Identifier is base58 of the multicodec tag and raw key."""
        key = bytes(range(32))
        assert encode_did_key(key) == "did:key:z" + b58_encode(b"\xed\x01" + key)

    def test_encoder_attributes(self) -> None:
        """Encoder names the ed25519-pub multicodec."""
        encoder = Ed25519PubEncoder()
        assert encoder.name == "ed25519-pub"
        assert encoder.code == 0xED01
        assert encoder.prefix == b"\xed\x01"


class TestDecode:
    """Test did:key decoding."""

    def test_round_trip(self, alice, bob, carol) -> None:
        """decode(encode(k)) == k."""
        for keys in (alice, bob, carol):
            assert decode_did_key(encode_did_key(keys.public_key)) == keys.public_key

    def test_round_trip_arbitrary_bytes(self) -> None:
        """Round trip holds for any 32-byte key."""
        for fill in (0, 1, 127, 255):
            key = bytes([fill] * 32)
            assert decode_did_key(encode_did_key(key)) == key

    @pytest.mark.parametrize(
        "identifier",
        [
            "did:key:zQ3shokFTS3brHcDQrn82RUDfCZESWL1ZdCEJwekUDPQiYBme",
            "did:sov:WRfXPg8dantKVubE3HX8pw",
            "z6MkhaXgBZDvotDkL5257faiztiGiC2QtKLGpbnnEGta2doK",
            "",
        ],
    )
    def test_rejects_unsupported_prefix(self, identifier: str) -> None:
        """Non-Ed25519 identifiers raise UnsupportedKeyTypeError."""
        with pytest.raises(UnsupportedKeyTypeError):
            decode_did_key(identifier)

    def test_rejects_truncated_key(self, alice) -> None:
        """A z6Mk identifier with a short key is rejected."""
        did_key = encode_did_key(alice.public_key)
        with pytest.raises(UnsupportedKeyTypeError):
            decode_did_key(did_key[:-10])

    def test_is_did_key(self, alice) -> None:
        """is_did_key reports support without raising."""
        assert is_did_key(encode_did_key(alice.public_key))
        assert not is_did_key("did:key:zQ3shokFTS3brHcDQrn82RUDfCZESWL1ZdCEJwekUDPQiYBme")
        assert not is_did_key(alice.verkey)
