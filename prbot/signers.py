"""
RSA keypairs for prbot external accounts.

External accounts sign their requests to the bot with an RSA key; the bot
keeps the public half. Keys are exchanged as PKCS#1 PEM strings.
"""

from pathlib import Path

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from prbot.types.accounts import ExternalAccount

RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537


class RsaSigner:
    """RSASSA-PKCS1-v1_5 with SHA-256 (the RS256 JWT algorithm)."""

    def __init__(self, private_key: rsa.RSAPrivateKey) -> None:
        """
        Initialize with an RSA private key.

        Args:
            private_key: RSA private key from cryptography library
        """
        self._private_key = private_key
        self._public_key = private_key.public_key()

    def sign(self, message: bytes) -> bytes:
        """
        Sign a message.

        Args:
            message: The message bytes to sign

        Returns:
            Signature bytes (key size / 8 long)
        """
        return self._private_key.sign(message, padding.PKCS1v15(), hashes.SHA256())

    def verify(self, signature: bytes, message: bytes) -> bool:
        """
        Verify a signature made by this key.

        Returns:
            True if valid, False otherwise
        """
        return verify_signature(self._public_key, signature, message)

    def public_key_pem(self) -> str:
        """Return the public key in PKCS#1 PEM format."""
        return self._public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.PKCS1,
        ).decode()

    def private_key_pem(self) -> str:
        """Return the private key in PKCS#1 PEM format (for storage)."""
        return self._private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode()

    @classmethod
    def from_pem(cls, pem_string: str) -> "RsaSigner":
        """
        Load a signer from a PEM string (PKCS#1 or PKCS#8).

        Raises:
            TypeError: If the PEM holds a non-RSA key
        """
        private_key = serialization.load_pem_private_key(
            pem_string.encode(), password=None
        )

        if not isinstance(private_key, rsa.RSAPrivateKey):
            raise TypeError(f"Expected RSA private key, got {type(private_key).__name__}")

        return cls(private_key)

    @classmethod
    def from_pem_file(cls, path: str | Path) -> "RsaSigner":
        """Load a signer from a PEM file."""
        return cls.from_pem(Path(path).read_text())

    @classmethod
    def generate(cls, key_size: int = RSA_KEY_SIZE) -> tuple["RsaSigner", str]:
        """
        Generate a new RSA keypair.

        Returns:
            Tuple of (signer, public_key_pem)
        """
        private_key = rsa.generate_private_key(
            public_exponent=RSA_PUBLIC_EXPONENT, key_size=key_size
        )
        signer = cls(private_key)
        return signer, signer.public_key_pem()


def load_public_key(pem_string: str) -> rsa.RSAPublicKey:
    """
    Load an RSA public key from PEM (PKCS#1 or SubjectPublicKeyInfo).

    Raises:
        TypeError: If the PEM holds a non-RSA key
    """
    public_key = serialization.load_pem_public_key(pem_string.encode())
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise TypeError(f"Expected RSA public key, got {type(public_key).__name__}")
    return public_key


def verify_signature(
    public_key: rsa.RSAPublicKey, signature: bytes, message: bytes
) -> bool:
    try:
        public_key.verify(signature, message, padding.PKCS1v15(), hashes.SHA256())
        return True
    except InvalidSignature:
        return False


def generate_external_account(
    username: str, key_size: int = RSA_KEY_SIZE
) -> ExternalAccount:
    """
    Create an external account with a fresh keypair.

    Args:
        username: External account name
        key_size: RSA modulus size in bits

    Returns:
        ExternalAccount holding both PEM keys
    """
    if not username:
        raise ValueError("username cannot be empty")
    signer, public_key = RsaSigner.generate(key_size)
    return ExternalAccount(
        username=username,
        public_key=public_key,
        private_key=signer.private_key_pem(),
    )
