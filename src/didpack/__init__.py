"""
didpack - JWM/1.0 message packing and signed attachments

Python implementation of Anoncrypt/Authcrypt message packing over Ed25519
keys, detached-signature attachments and did:key identifiers.
"""

from .primitives import Primitives, ready, is_ready, get_primitives
from .codec import b64url_encode, b64url_decode, b58_encode, b58_decode
from .did_key import Ed25519PubEncoder, encode_did_key, decode_did_key, is_did_key
from .keys import EncodedKey, RawKey, Keypair, normalize_key, generate_keypair
from .envelope import (
    Envelope,
    ProtectedHeader,
    RecipientBlock,
    SealedKey,
    AuthenticatedKey,
    encode_envelope,
    decode_envelope,
    is_packed_message,
)
from .wrapping import (
    Anoncrypt,
    Authcrypt,
    UnwrappedKey,
    prepare_recipient_keys,
    find_recipient,
    unwrap_recipient_key,
    locate_recipient_key,
)
from .content import encrypt_plaintext, decrypt_plaintext
from .pack import UnpackedMessage, pack_message, unpack_message
from .attachment import (
    SignedAttachment,
    sign_attachment,
    verify_signed_attachment,
    decode_signed_attachment,
)
from .client import DIDCommConfig, DIDComm
from .types import (
    ALG_AUTHCRYPT,
    ALG_ANONCRYPT,
    ENC_XCHACHA20POLY1305,
    TYP_JWM,
    DIDPackError,
    NotInitializedError,
    UnsupportedKeyTypeError,
    UnsupportedAlgorithmError,
    MalformedRecipientError,
    MissingSenderKeyError,
    RecipientNotFoundError,
    AuthenticationFailedError,
    InvalidEnvelopeError,
    InvalidKeyError,
)

__version__ = "0.1.0"

__all__ = [
    # Primitives
    "Primitives",
    "ready",
    "is_ready",
    "get_primitives",
    # Codecs
    "b64url_encode",
    "b64url_decode",
    "b58_encode",
    "b58_decode",
    # did:key
    "Ed25519PubEncoder",
    "encode_did_key",
    "decode_did_key",
    "is_did_key",
    # Keys
    "EncodedKey",
    "RawKey",
    "Keypair",
    "normalize_key",
    "generate_keypair",
    # Envelope
    "Envelope",
    "ProtectedHeader",
    "RecipientBlock",
    "SealedKey",
    "AuthenticatedKey",
    "encode_envelope",
    "decode_envelope",
    "is_packed_message",
    # Key wrapping
    "Anoncrypt",
    "Authcrypt",
    "UnwrappedKey",
    "prepare_recipient_keys",
    "find_recipient",
    "unwrap_recipient_key",
    "locate_recipient_key",
    # Content
    "encrypt_plaintext",
    "decrypt_plaintext",
    # Pack
    "UnpackedMessage",
    "pack_message",
    "unpack_message",
    # Attachments
    "SignedAttachment",
    "sign_attachment",
    "verify_signed_attachment",
    "decode_signed_attachment",
    # Client
    "DIDCommConfig",
    "DIDComm",
    # Constants
    "ALG_AUTHCRYPT",
    "ALG_ANONCRYPT",
    "ENC_XCHACHA20POLY1305",
    "TYP_JWM",
    # Errors
    "DIDPackError",
    "NotInitializedError",
    "UnsupportedKeyTypeError",
    "UnsupportedAlgorithmError",
    "MalformedRecipientError",
    "MissingSenderKeyError",
    "RecipientNotFoundError",
    "AuthenticationFailedError",
    "InvalidEnvelopeError",
    "InvalidKeyError",
]
