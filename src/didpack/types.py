"""Type definitions and protocol constants for didpack."""


# Envelope constants
ALG_AUTHCRYPT = "Authcrypt"
ALG_ANONCRYPT = "Anoncrypt"
SUPPORTED_ALGS = (ALG_AUTHCRYPT, ALG_ANONCRYPT)
ENC_XCHACHA20POLY1305 = "xchacha20poly1305_ietf"
TYP_JWM = "JWM/1.0"

# Primitive sizes
CONTENT_KEY_SIZE = 32
XCHACHA_NONCE_SIZE = 24
CHACHA_NONCE_SIZE = 12  # legacy IETF ChaCha20-Poly1305 envelopes
TAG_SIZE = 16
BOX_NONCE_SIZE = 24
PUBLIC_KEY_SIZE = 32
PRIVATE_KEY_SIZE = 64  # libsodium layout: seed || public key
SEED_SIZE = 32
SIGNATURE_SIZE = 64

# did:key constants
ED25519_MULTICODEC = 0xED01
DID_KEY_PREFIX = "did:key:z"
ED25519_DID_KEY_PREFIX = "did:key:z6Mk"

# Signed attachment constants
ATTACHMENT_MIME_TYPE = "application/json"
JWS_ALG = "EdDSA"
JWK_CRV = "Ed25519"
JWK_KTY = "OKP"


# Exception types
class DIDPackError(Exception):
    """Base exception for didpack errors."""
    pass


class NotInitializedError(DIDPackError):
    """Operation invoked before the primitives were made ready."""
    pass


class UnsupportedKeyTypeError(DIDPackError):
    """Key identifier is not a supported Ed25519 key."""
    pass


class UnsupportedAlgorithmError(DIDPackError):
    """Envelope uses an unknown pack algorithm."""

    def __init__(self, alg: object) -> None:
        self.alg = alg
        super().__init__(f"Unsupported pack algorithm: {alg}")


class MalformedRecipientError(DIDPackError):
    """Recipient entry lacks required fields."""
    pass


class MissingSenderKeyError(DIDPackError):
    """Authcrypt envelope without a recoverable sender key."""
    pass


class RecipientNotFoundError(DIDPackError):
    """No recipient entry matches the local key."""
    pass


class AuthenticationFailedError(DIDPackError):
    """AEAD tag or box authentication failed."""
    pass


class InvalidEnvelopeError(DIDPackError):
    """Invalid envelope format."""
    pass


class InvalidKeyError(DIDPackError, ValueError):
    """Invalid key material format or length."""
    pass
