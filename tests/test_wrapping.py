"""Tests for per-recipient key wrapping."""

import json

import pytest
from didpack.envelope import AuthenticatedKey, RecipientBlock, SealedKey
from didpack.wrapping import (
    Anoncrypt,
    Authcrypt,
    find_recipient,
    locate_recipient_key,
    prepare_recipient_keys,
)
from didpack.types import (
    MalformedRecipientError,
    RecipientNotFoundError,
)


def _recipients(header_json: bytes) -> list:
    return json.loads(header_json)["recipients"]


class TestPrepareRecipientKeys:
    """Test wrapping on the sender side."""

    def test_content_key_size(self, sodium, bob) -> None:
        """Content key is a 32-byte symmetric key."""
        _, cek = prepare_recipient_keys([bob.public_key], Anoncrypt(), sodium)
        assert len(cek) == 32

    def test_anoncrypt_blocks(self, sodium, bob, carol) -> None:
        """Anoncrypt seals the content key to each recipient."""
        header_json, _ = prepare_recipient_keys([bob.public_key, carol.public_key], Anoncrypt(), sodium)
        header = json.loads(header_json)

        assert header["alg"] == "Anoncrypt"
        for entry in header["recipients"]:
            assert isinstance(RecipientBlock.from_dict(entry).wrap, SealedKey)

    def test_authcrypt_blocks(self, sodium, alice, bob, carol) -> None:
        """Authcrypt gives every recipient a nonce and sealed sender."""
        header_json, _ = prepare_recipient_keys(
            [bob.public_key, carol.public_key], Authcrypt(alice), sodium
        )
        header = json.loads(header_json)

        assert header["alg"] == "Authcrypt"
        blocks = [RecipientBlock.from_dict(entry) for entry in header["recipients"]]
        for block in blocks:
            assert isinstance(block.wrap, AuthenticatedKey)
            assert len(block.wrap.iv) == 24
        assert blocks[0].wrap.iv != blocks[1].wrap.iv


class TestLocateRecipientKey:
    """Test unwrapping on the recipient side."""

    def test_unwraps_same_key_for_all(self, sodium, alice, bob, carol) -> None:
        """Each recipient recovers the same content key."""
        header_json, cek = prepare_recipient_keys(
            [bob.public_key, carol.public_key], Authcrypt(alice), sodium
        )
        recipients = _recipients(header_json)

        for keys in (bob, carol):
            unwrapped = locate_recipient_key(recipients, keys, sodium)
            assert unwrapped.cek == cek
            assert unwrapped.sender_key == alice.verkey
            assert unwrapped.recipient_key == keys.verkey

    def test_anoncrypt_has_no_sender(self, sodium, bob) -> None:
        """Sealed entries recover no sender."""
        header_json, cek = prepare_recipient_keys([bob.public_key], Anoncrypt(), sodium)

        unwrapped = locate_recipient_key(_recipients(header_json), bob, sodium)
        assert unwrapped.cek == cek
        assert unwrapped.sender_key is None

    def test_not_found_after_full_scan(self, sodium, bob, carol, mallory) -> None:
        """RecipientNotFoundError only after every entry is examined."""
        header_json, _ = prepare_recipient_keys([bob.public_key, carol.public_key], Anoncrypt(), sodium)

        with pytest.raises(RecipientNotFoundError):
            find_recipient(_recipients(header_json), mallory, sodium)

    @pytest.mark.parametrize(
        "entry",
        [
            {"header": {"kid": "x"}},
            {"encrypted_key": "AAAA"},
            {"encrypted_key": "AAAA", "header": "not an object"},
            "not an entry",
        ],
    )
    def test_malformed_entry_before_match(self, sodium, bob, entry) -> None:
        """A malformed entry reached before the match raises MalformedRecipientError."""
        header_json, _ = prepare_recipient_keys([bob.public_key], Anoncrypt(), sodium)
        recipients = [entry] + _recipients(header_json)

        with pytest.raises(MalformedRecipientError):
            find_recipient(recipients, bob, sodium)

    def test_malformed_entry_after_match(self, sodium, bob) -> None:
        """Entries after the match are not examined."""
        header_json, cek = prepare_recipient_keys([bob.public_key], Anoncrypt(), sodium)
        recipients = _recipients(header_json) + [{"bogus": True}]

        assert locate_recipient_key(recipients, bob, sodium).cek == cek

    def test_missing_kid(self, sodium, bob) -> None:
        """An entry whose header has no kid is malformed."""
        with pytest.raises(MalformedRecipientError):
            find_recipient([{"encrypted_key": "AAAA", "header": {}}], bob, sodium)
