"""Envelope encoding and decoding for the JWM/1.0 pack format."""

import json
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Union

from .codec import b64url_decode, b64url_decode_str, b64url_encode, compact_json
from .types import (
    ENC_XCHACHA20POLY1305,
    TYP_JWM,
    InvalidEnvelopeError,
    MalformedRecipientError,
)

ENVELOPE_FIELDS = ("ciphertext", "iv", "protected", "tag")


@dataclass(frozen=True)
class SealedKey:
    """Content key sealed anonymously to the recipient (Anoncrypt)."""


@dataclass(frozen=True)
class AuthenticatedKey:
    """Content key boxed by the sender (Authcrypt)."""
    iv: bytes  # 24-byte box nonce
    sender: bytes  # sender verkey sealed to the recipient


KeyWrap = Union[SealedKey, AuthenticatedKey]


@dataclass
class RecipientBlock:
    """One recipient entry of the protected header."""
    encrypted_key: bytes
    kid: str  # base58 Ed25519 verkey
    wrap: KeyWrap = field(default_factory=SealedKey)

    def to_dict(self) -> dict:
        if isinstance(self.wrap, AuthenticatedKey):
            iv = b64url_encode(self.wrap.iv)
            sender = b64url_encode(self.wrap.sender)
        else:
            iv = None
            sender = None
        return {
            "encrypted_key": b64url_encode(self.encrypted_key),
            "header": {
                "iv": iv,
                "kid": self.kid,
                "sender": sender,
            },
        }

    @classmethod
    def from_dict(cls, data: Any) -> "RecipientBlock":
        """
        Parse a recipient entry.

        Raises:
            MalformedRecipientError: If header or encrypted_key is missing
        """
        check_recipient_entry(data)
        header = data["header"]
        kid = header.get("kid")
        if not isinstance(kid, str):
            raise MalformedRecipientError("Invalid recipient header: missing kid")

        iv = header.get("iv")
        sender = header.get("sender")
        if iv and sender:
            wrap: KeyWrap = AuthenticatedKey(iv=b64url_decode(iv), sender=b64url_decode(sender))
        else:
            wrap = SealedKey()

        return cls(
            encrypted_key=b64url_decode(data["encrypted_key"]),
            kid=kid,
            wrap=wrap,
        )


def check_recipient_entry(data: Any) -> None:
    """Raise MalformedRecipientError unless data has header and encrypted_key."""
    if not isinstance(data, Mapping) or "header" not in data or "encrypted_key" not in data:
        raise MalformedRecipientError("Invalid recipient header")
    if not isinstance(data["header"], Mapping):
        raise MalformedRecipientError("Invalid recipient header")


@dataclass
class ProtectedHeader:
    """The JWM protected header, serialized once and used as AAD."""
    alg: str
    recipients: List[RecipientBlock]
    enc: str = ENC_XCHACHA20POLY1305
    typ: str = TYP_JWM

    def to_json(self) -> bytes:
        """Serialize with compact separators and fixed field order."""
        return compact_json(
            {
                "alg": self.alg,
                "enc": self.enc,
                "recipients": [r.to_dict() for r in self.recipients],
                "typ": self.typ,
            }
        ).encode("utf-8")


def decode_protected(protected: str) -> dict:
    """
    Decode the base64url protected field to its JSON object.

    Recipient entries are left as parsed JSON so they can be validated one
    at a time during the recipient scan.

    Raises:
        InvalidEnvelopeError: If the field is not a base64url JSON object
    """
    try:
        header = json.loads(b64url_decode_str(protected))
    except json.JSONDecodeError as e:
        raise InvalidEnvelopeError(f"Protected header is not JSON: {e}") from e

    if not isinstance(header, dict):
        raise InvalidEnvelopeError("Protected header must be a JSON object")
    if not isinstance(header.get("recipients"), list):
        raise InvalidEnvelopeError("Protected header has no recipients list")
    return header


@dataclass
class Envelope:
    """Packed message envelope."""
    ciphertext: bytes
    iv: bytes
    protected: str  # base64url text, kept verbatim for AAD
    tag: bytes


def encode_envelope(envelope: Envelope, pad: bool = True) -> str:
    """
    Encode an envelope to JSON text.

    Args:
        envelope: Envelope to encode
        pad: Keep base64url padding on binary fields

    Returns:
        JSON text with ciphertext, iv, protected and tag fields
    """
    return compact_json(
        {
            "ciphertext": b64url_encode(envelope.ciphertext, pad),
            "iv": b64url_encode(envelope.iv, pad),
            "protected": envelope.protected,
            "tag": b64url_encode(envelope.tag, pad),
        }
    )


def _load(data: Union[str, bytes, Mapping]) -> Mapping:
    if isinstance(data, Mapping):
        return data
    try:
        wrapper = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
        raise InvalidEnvelopeError(f"Envelope is not JSON: {e}") from e
    if not isinstance(wrapper, dict):
        raise InvalidEnvelopeError("Envelope must be a JSON object")
    return wrapper


def decode_envelope(data: Union[str, bytes, Mapping]) -> Envelope:
    """
    Decode JSON text (or an already parsed mapping) into an envelope.

    Raises:
        InvalidEnvelopeError: If data is invalid
    """
    wrapper = _load(data)
    missing = [name for name in ENVELOPE_FIELDS if not isinstance(wrapper.get(name), str)]
    if missing:
        raise InvalidEnvelopeError(f"Envelope missing fields: {', '.join(missing)}")

    return Envelope(
        ciphertext=b64url_decode(wrapper["ciphertext"]),
        iv=b64url_decode(wrapper["iv"]),
        protected=wrapper["protected"],
        tag=b64url_decode(wrapper["tag"]),
    )


def is_packed_message(data: Union[str, bytes, Mapping]) -> bool:
    """
    Check if data looks like a packed envelope.

    Args:
        data: JSON text or parsed mapping

    Returns:
        True if all four envelope fields are present as strings
    """
    try:
        wrapper = _load(data)
    except InvalidEnvelopeError:
        return False
    return all(isinstance(wrapper.get(name), str) for name in ENVELOPE_FIELDS)
