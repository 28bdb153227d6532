"""
Signed attachments.

A signed attachment carries a JSON payload as base64url together with a
detached JWS (EdDSA over Ed25519). The signing key is named by a did:key
identifier so a verifier needs nothing but the attachment itself.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .codec import b64url_decode, b64url_decode_str, b64url_encode, compact_json
from .did_key import decode_did_key, encode_did_key
from .keys import as_keypair
from .primitives import Primitives, resolve
from .types import (
    ATTACHMENT_MIME_TYPE,
    JWK_CRV,
    JWK_KTY,
    JWS_ALG,
    InvalidEnvelopeError,
)

logger = logging.getLogger(__name__)


@dataclass
class AttachmentJWS:
    """Detached JWS over protected.base64."""
    kid: str  # did:key of the signer
    protected: str
    signature: str


@dataclass
class AttachmentData:
    base64: str
    jws: AttachmentJWS


@dataclass
class SignedAttachment:
    """A JSON payload with a detached Ed25519 signature."""
    data: AttachmentData
    mime_type: str = ATTACHMENT_MIME_TYPE

    def signing_input(self) -> bytes:
        """The exact bytes covered by the signature."""
        return f"{self.data.jws.protected}.{self.data.base64}".encode("ascii")

    def to_dict(self) -> dict:
        return {
            "data": {
                "base64": self.data.base64,
                "jws": {
                    "header": {"kid": self.data.jws.kid},
                    "protected": self.data.jws.protected,
                    "signature": self.data.jws.signature,
                },
            },
            "mime-type": self.mime_type,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "SignedAttachment":
        """
        Parse the wire form of an attachment.

        Raises:
            InvalidEnvelopeError: If required fields are missing
        """
        try:
            inner = data["data"]
            jws = inner["jws"]
            return cls(
                data=AttachmentData(
                    base64=inner["base64"],
                    jws=AttachmentJWS(
                        kid=jws["header"]["kid"],
                        protected=jws["protected"],
                        signature=jws["signature"],
                    ),
                ),
                mime_type=data.get("mime-type", data.get("mimeType", ATTACHMENT_MIME_TYPE)),
            )
        except (KeyError, TypeError) as e:
            raise InvalidEnvelopeError(f"Invalid signed attachment: missing {e}") from e


AttachmentLike = Union[SignedAttachment, Mapping]


def _as_attachment(attachment: AttachmentLike) -> SignedAttachment:
    if isinstance(attachment, SignedAttachment):
        return attachment
    return SignedAttachment.from_dict(attachment)


def sign_attachment(
    payload: Any,
    keys: Any,
    mime_type: str = ATTACHMENT_MIME_TYPE,
    primitives: Optional[Primitives] = None,
) -> SignedAttachment:
    """
    Sign a JSON-serializable payload.

    Args:
        payload: Any JSON-serializable value
        keys: Signer keypair (Keypair, tuple or mapping)
        mime_type: MIME type recorded on the attachment
        primitives: Primitive capability (defaults to the process-wide one)

    Returns:
        The SignedAttachment
    """
    sodium = resolve(primitives)
    keypair = as_keypair(keys)
    did_key = encode_did_key(keypair.public_key)

    protected = b64url_encode(
        compact_json(
            {
                "alg": JWS_ALG,
                "jwk": {
                    "crv": JWK_CRV,
                    "kid": did_key,
                    "kty": JWK_KTY,
                    "x": b64url_encode(keypair.public_key, False),
                },
                "kid": did_key,
            },
        ),
        False,
    )
    sig_data = b64url_encode(compact_json(payload), False)

    signature = sodium.sign_detached(f"{protected}.{sig_data}".encode("ascii"), keypair.private_key)
    logger.debug("Signed attachment for %s", did_key)

    return SignedAttachment(
        data=AttachmentData(
            base64=sig_data,
            jws=AttachmentJWS(
                kid=did_key,
                protected=protected,
                signature=b64url_encode(signature, False),
            ),
        ),
        mime_type=mime_type,
    )


def verify_signed_attachment(
    attachment: AttachmentLike,
    primitives: Optional[Primitives] = None,
) -> bool:
    """
    Verify an attachment's detached signature.

    Returns:
        True if the signature is valid for the kid's key, False otherwise

    Raises:
        UnsupportedKeyTypeError: If kid is not an Ed25519 did:key
    """
    sodium = resolve(primitives)
    parsed = _as_attachment(attachment)
    public_key = decode_did_key(parsed.data.jws.kid)

    try:
        signature = b64url_decode(parsed.data.jws.signature)
        signing_input = parsed.signing_input()
    except (InvalidEnvelopeError, UnicodeEncodeError):
        logger.debug("Attachment signature is not decodable")
        return False

    return sodium.verify_detached(signature, signing_input, public_key)


def decode_signed_attachment(
    attachment: AttachmentLike,
    primitives: Optional[Primitives] = None,
) -> Any:
    """
    Decode an attachment's payload without checking its signature.

    Call verify_signed_attachment first if authenticity matters. No
    primitive is used, but the call still requires ready() like the rest
    of the attachment API.

    Raises:
        NotInitializedError: If primitives is omitted before ready()
        InvalidEnvelopeError: If the attachment or its payload is malformed
    """
    resolve(primitives)
    parsed = _as_attachment(attachment)
    try:
        return json.loads(b64url_decode_str(parsed.data.base64))
    except json.JSONDecodeError as e:
        raise InvalidEnvelopeError(f"Attachment payload is not JSON: {e}") from e
