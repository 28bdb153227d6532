"""
Per-recipient wrapping of the content key.

Anoncrypt seals the content key to each recipient. Authcrypt boxes it with
the sender's X25519 key and seals the sender's verkey so the recipient can
recover and authenticate the sender.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple, Union

from .codec import b58_decode, b58_encode
from .envelope import (
    AuthenticatedKey,
    ProtectedHeader,
    RecipientBlock,
    SealedKey,
    check_recipient_entry,
)
from .keys import KeyField, Keypair, normalize_key
from .primitives import Primitives, resolve
from .types import (
    ALG_ANONCRYPT,
    ALG_AUTHCRYPT,
    PUBLIC_KEY_SIZE,
    AuthenticationFailedError,
    InvalidKeyError,
    MalformedRecipientError,
    RecipientNotFoundError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Anoncrypt:
    """Anonymous mode: recipients learn nothing about the sender."""

    alg = ALG_ANONCRYPT


@dataclass(frozen=True)
class Authcrypt:
    """Authenticated mode: the sender's keypair boxes the content key."""
    sender: Keypair

    alg = ALG_AUTHCRYPT


PackMode = Union[Anoncrypt, Authcrypt]


@dataclass
class UnwrappedKey:
    """Result of unwrapping the local recipient's entry."""
    cek: bytes
    recipient_key: str  # base58 verkey (the entry's kid)
    sender_key: Optional[str] = None  # base58 verkey, Authcrypt only


def prepare_recipient_keys(
    to_keys: Iterable[KeyField],
    mode: PackMode,
    primitives: Optional[Primitives] = None,
) -> Tuple[bytes, bytes]:
    """
    Generate a content key and wrap it for every recipient.

    Args:
        to_keys: Recipient Ed25519 public keys (raw or base58)
        mode: Anoncrypt() or Authcrypt(sender_keypair), applied to all recipients
        primitives: Primitive capability (defaults to the process-wide one)

    Returns:
        Tuple of (serialized protected header, 32-byte content key)
    """
    sodium = resolve(primitives)
    targets = [normalize_key(key, PUBLIC_KEY_SIZE) for key in to_keys]
    if not targets:
        raise ValueError("At least one recipient key is required")

    cek = sodium.random_bytes(sodium.content_key_size)

    sender_vk = None
    sender_sk = None
    if isinstance(mode, Authcrypt):
        sender_vk = b58_encode(mode.sender.public_key).encode("ascii")
        sender_sk = sodium.ed25519_sk_to_curve25519(mode.sender.private_key)

    recipients: List[RecipientBlock] = []
    for target_vk in targets:
        target_pk = sodium.ed25519_pk_to_curve25519(target_vk)

        if sender_sk is not None:
            nonce = sodium.random_bytes(sodium.box_nonce_size)
            wrap = AuthenticatedKey(iv=nonce, sender=sodium.box_seal(sender_vk, target_pk))
            encrypted_key = sodium.box(cek, nonce, target_pk, sender_sk)
        else:
            wrap = SealedKey()
            encrypted_key = sodium.box_seal(cek, target_pk)

        recipients.append(
            RecipientBlock(encrypted_key=encrypted_key, kid=b58_encode(target_vk), wrap=wrap)
        )

    logger.debug("Wrapped content key for %d recipient(s) (%s)", len(recipients), mode.alg)
    header = ProtectedHeader(alg=mode.alg, recipients=recipients)
    return header.to_json(), cek


def unwrap_recipient_key(
    block: RecipientBlock,
    keys: Keypair,
    primitives: Optional[Primitives] = None,
) -> UnwrappedKey:
    """
    Recover the content key from a recipient entry addressed to us.

    Raises:
        AuthenticationFailedError: If the key or sender cannot be opened
    """
    sodium = resolve(primitives)
    pk = sodium.ed25519_pk_to_curve25519(keys.public_key)
    sk = sodium.ed25519_sk_to_curve25519(keys.private_key)

    if isinstance(block.wrap, AuthenticatedKey):
        sealed_sender = sodium.box_seal_open(block.wrap.sender, pk, sk)
        try:
            sender_vk = sealed_sender.decode("ascii")
            sender_pk = sodium.ed25519_pk_to_curve25519(
                normalize_key(sender_vk, PUBLIC_KEY_SIZE)
            )
        except (UnicodeDecodeError, InvalidKeyError) as e:
            raise AuthenticationFailedError(f"Invalid sender key in recipient header: {e}") from e
        cek = sodium.box_open(block.encrypted_key, block.wrap.iv, sender_pk, sk)
        return UnwrappedKey(cek=cek, recipient_key=block.kid, sender_key=sender_vk)

    cek = sodium.box_seal_open(block.encrypted_key, pk, sk)
    return UnwrappedKey(cek=cek, recipient_key=block.kid)


def find_recipient(
    recipients: List[Any],
    keys: Keypair,
    primitives: Optional[Primitives] = None,
) -> RecipientBlock:
    """
    Find the entry addressed to keys.

    Every entry is checked for structure as the scan reaches it; the scan
    only stops at the first entry whose kid matches our public key.

    Raises:
        MalformedRecipientError: If a scanned entry lacks header or encrypted_key
        RecipientNotFoundError: If no entry matches
    """
    sodium = resolve(primitives)

    for index, entry in enumerate(recipients):
        check_recipient_entry(entry)

        kid = entry["header"].get("kid")
        if not isinstance(kid, str):
            raise MalformedRecipientError(f"Recipient {index} has no kid")
        try:
            recipient_vk = b58_decode(kid)
        except InvalidKeyError as e:
            raise MalformedRecipientError(f"Recipient {index} has invalid kid: {e}") from e

        if not sodium.memcmp(recipient_vk, keys.public_key):
            continue

        logger.debug("Matched recipient %d of %d", index + 1, len(recipients))
        return RecipientBlock.from_dict(entry)

    raise RecipientNotFoundError("No corresponding recipient key found in recipients")


def locate_recipient_key(
    recipients: List[Any],
    keys: Keypair,
    primitives: Optional[Primitives] = None,
) -> UnwrappedKey:
    """Find the entry addressed to keys and unwrap its content key."""
    sodium = resolve(primitives)
    block = find_recipient(recipients, keys, sodium)
    return unwrap_recipient_key(block, keys, sodium)
