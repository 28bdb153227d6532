"""
DIDComm facade for packing messages and signing attachments.

The DIDComm object bundles the pack/unpack and attachment operations behind
a single readiness gate.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Union

from . import primitives as _primitives
from .attachment import (
    AttachmentLike,
    SignedAttachment,
    decode_signed_attachment,
    sign_attachment,
    verify_signed_attachment,
)
from .codec import b64url_decode
from .keys import KeyField, Keypair, generate_keypair
from .pack import UnpackedMessage, pack_message, unpack_message
from .primitives import Primitives
from .types import ATTACHMENT_MIME_TYPE, NotInitializedError


@dataclass
class DIDCommConfig:
    """Configuration for a DIDComm instance."""

    mime_type: str = ATTACHMENT_MIME_TYPE
    """MIME type recorded on signed attachments."""

    pad_envelope: bool = True
    """Keep base64url padding on packed envelope fields."""

    primitives: Optional[Primitives] = None
    """Primitive capability override (default: the process-wide instance)."""

    @classmethod
    def default(cls) -> "DIDCommConfig":
        """Creates the default configuration."""
        return cls()


class DIDComm:
    """
    Pack/unpack and signed attachment operations.

    Example usage:
        ```python
        didcomm = DIDComm()
        await didcomm.ready()

        alice = didcomm.generate_keypair()
        bob = didcomm.generate_keypair()

        packed = didcomm.pack_message("Hello, Bob!", [bob.public_key], alice)
        unpacked = didcomm.unpack_message(packed, bob)
        print(unpacked.message, unpacked.sender_key)
        ```
    """

    def __init__(self, config: Optional[DIDCommConfig] = None) -> None:
        """
        Initialize the facade.

        Args:
            config: Optional configuration (default: DIDCommConfig.default()).
        """
        self.config = config or DIDCommConfig.default()
        self._sodium: Optional[Primitives] = None

    async def ready(self) -> None:
        """Resolve the primitives. Must be awaited before any other call."""
        if self._sodium is not None:
            return
        if self.config.primitives is not None:
            self._sodium = self.config.primitives
        else:
            self._sodium = await _primitives.ready()

    @property
    def is_ready(self) -> bool:
        return self._sodium is not None

    def _check_ready(self) -> Primitives:
        if self._sodium is None:
            raise NotInitializedError("DIDComm is not ready; await DIDComm.ready() first")
        return self._sodium

    @property
    def sodium(self) -> Primitives:
        """The primitives in use."""
        return self._check_ready()

    # MARK: - Keys

    def generate_keypair(self, seed: Optional[bytes] = None) -> Keypair:
        """Generate an Ed25519 keypair for use with pack/unpack."""
        return generate_keypair(seed, self.sodium)

    # MARK: - Pack

    def pack_message(
        self,
        message: Union[str, bytes],
        to_keys: Iterable[KeyField],
        from_keys: Any = None,
    ) -> str:
        """
        Pack a message.

        Args:
            message: Message to encrypt
            to_keys: Recipient public keys
            from_keys: Sender keypair, or None for Anoncrypt

        Returns:
            The envelope as JSON text
        """
        return pack_message(
            message,
            to_keys,
            from_keys,
            primitives=self.sodium,
            pad=self.config.pad_envelope,
        )

    def unpack_message(self, packed: Union[str, bytes, Mapping], to_keys: Any) -> UnpackedMessage:
        """
        Unpack a message.

        Args:
            packed: Envelope JSON text or mapping
            to_keys: Keypair of the party decrypting the message
        """
        return unpack_message(packed, to_keys, primitives=self.sodium)

    def b64dec(self, text: Union[str, bytes]) -> bytes:
        """Decode base64url with or without padding."""
        self._check_ready()
        return b64url_decode(text)

    # MARK: - Signed attachments

    def signed_attachment(self, payload: Any, keys: Any) -> SignedAttachment:
        """Sign a JSON payload as an attachment."""
        return sign_attachment(payload, keys, self.config.mime_type, self.sodium)

    def verify_signed_attachment(self, attachment: AttachmentLike) -> bool:
        """Verify a signed attachment. Returns False on a bad signature."""
        return verify_signed_attachment(attachment, self.sodium)

    def decode_signed_attachment(self, attachment: AttachmentLike) -> Any:
        """Decode an attachment payload without verifying it."""
        return decode_signed_attachment(attachment, self.sodium)
