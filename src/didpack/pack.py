"""Packing and unpacking of JWM/1.0 messages."""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Union

from .codec import b64url_encode
from .content import decrypt_plaintext, encode_plaintext, encrypt_plaintext
from .envelope import (
    AuthenticatedKey,
    Envelope,
    decode_envelope,
    decode_protected,
    encode_envelope,
)
from .keys import KeyField, as_keypair
from .primitives import Primitives, resolve
from .types import (
    ALG_AUTHCRYPT,
    SUPPORTED_ALGS,
    MissingSenderKeyError,
    UnsupportedAlgorithmError,
)
from .wrapping import (
    Anoncrypt,
    Authcrypt,
    PackMode,
    find_recipient,
    prepare_recipient_keys,
    unwrap_recipient_key,
)

logger = logging.getLogger(__name__)


@dataclass
class UnpackedMessage:
    """Decrypted message with the keys involved."""
    message: str
    recipient_key: str  # base58 verkey the message was addressed to
    sender_key: Optional[str] = None  # base58 verkey, Authcrypt only


def pack_message(
    message: Union[str, bytes],
    to_keys: Iterable[KeyField],
    from_keys: Any = None,
    *,
    primitives: Optional[Primitives] = None,
    pad: bool = True,
) -> str:
    """
    Pack a message for one or more recipients.

    Without from_keys the message is Anoncrypt; with a sender keypair every
    recipient entry is Authcrypt.

    Args:
        message: Message to encrypt
        to_keys: Recipient Ed25519 public keys (raw bytes or base58)
        from_keys: Optional sender keypair (Keypair, tuple or mapping)
        primitives: Primitive capability (defaults to the process-wide one)
        pad: Keep base64url padding on the envelope's binary fields

    Returns:
        The envelope as JSON text

    Raises:
        ValueError: If message bytes are not valid UTF-8, or to_keys is empty
    """
    sodium = resolve(primitives)
    plaintext = encode_plaintext(message)
    mode: PackMode = Anoncrypt() if from_keys is None else Authcrypt(as_keypair(from_keys))

    header_json, cek = prepare_recipient_keys(to_keys, mode, sodium)
    protected = b64url_encode(header_json)

    ciphertext, tag, nonce = encrypt_plaintext(plaintext, protected, cek, sodium)

    logger.debug("Packed %s message (%d ciphertext bytes)", mode.alg, len(ciphertext))
    return encode_envelope(
        Envelope(ciphertext=ciphertext, iv=nonce, protected=protected, tag=tag),
        pad=pad,
    )


def unpack_message(
    packed: Union[str, bytes, Mapping],
    to_keys: Any,
    *,
    primitives: Optional[Primitives] = None,
) -> UnpackedMessage:
    """
    Unpack a message addressed to to_keys.

    Args:
        packed: Envelope JSON text or parsed mapping
        to_keys: Our keypair; fields may be raw bytes or base58 text
        primitives: Primitive capability (defaults to the process-wide one)

    Returns:
        UnpackedMessage with plaintext, recipient verkey and sender verkey

    Raises:
        InvalidEnvelopeError: If the envelope is malformed
        UnsupportedAlgorithmError: If alg is not Authcrypt or Anoncrypt
        MalformedRecipientError: If a recipient entry lacks required fields
        RecipientNotFoundError: If no recipient entry matches our key
        MissingSenderKeyError: If an Authcrypt entry carries no sender
        AuthenticationFailedError: If unwrapping or decryption fails
    """
    sodium = resolve(primitives)
    keys = as_keypair(to_keys)

    envelope = decode_envelope(packed)
    header = decode_protected(envelope.protected)

    alg = header.get("alg")
    if alg not in SUPPORTED_ALGS:
        raise UnsupportedAlgorithmError(alg)

    block = find_recipient(header["recipients"], keys, sodium)
    if alg == ALG_AUTHCRYPT and not isinstance(block.wrap, AuthenticatedKey):
        raise MissingSenderKeyError("Sender public key not provided in Authcrypt message")

    unwrapped = unwrap_recipient_key(block, keys, sodium)

    message = decrypt_plaintext(
        envelope.ciphertext,
        envelope.tag,
        envelope.protected,
        envelope.iv,
        unwrapped.cek,
        sodium,
    )
    return UnpackedMessage(
        message=message,
        recipient_key=unwrapped.recipient_key,
        sender_key=unwrapped.sender_key,
    )
