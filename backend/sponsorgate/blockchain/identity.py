"""Administrative signing identity for registry writes."""

import base64
import hashlib
from dataclasses import dataclass

import bech32
from nacl.signing import SigningKey

# Signature scheme flag for Ed25519 in Sui
ED25519_FLAG = 0x00

# Bech32 human-readable part for exported Sui private keys
SUI_PRIVATE_KEY_PREFIX = "suiprivkey"

# Intent prefix for transaction data: (scope=TransactionData, version=V0, app=Sui)
TRANSACTION_INTENT = bytes([0, 0, 0])


class AdminKeypair:
    """
    Ed25519 keypair used to sign the service's own transactions.

    Accepts the secret in any of the formats the Sui CLI exports:
    ``suiprivkey1...`` (Bech32), base64 ``flag || secret`` (keystore), or
    32-byte hex with optional ``0x`` prefix.
    """

    def __init__(self, signing_key: SigningKey) -> None:
        self._signing_key = signing_key
        self._public_key = bytes(signing_key.verify_key)

    @classmethod
    def from_secret(cls, secret: str) -> "AdminKeypair":
        """
        Decode a secret key string.

        Raises:
            ValueError: If the secret is not a recognizable Ed25519 key
        """
        secret = secret.strip()
        if secret.startswith(SUI_PRIVATE_KEY_PREFIX):
            hrp, data = bech32.bech32_decode(secret)
            if hrp != SUI_PRIVATE_KEY_PREFIX or data is None:
                raise ValueError("Invalid suiprivkey encoding")
            decoded = bech32.convertbits(data, 5, 8, False)
            if decoded is None:
                raise ValueError("Invalid suiprivkey payload")
            raw = bytes(decoded)
            return cls._from_flagged(raw)

        hex_part = secret[2:] if secret.startswith("0x") else secret
        if len(hex_part) == 64:
            try:
                return cls(SigningKey(bytes.fromhex(hex_part)))
            except ValueError:
                pass

        try:
            raw = base64.b64decode(secret, validate=True)
        except ValueError as e:
            raise ValueError("Unrecognized secret key format") from e

        if len(raw) == 33:
            return cls._from_flagged(raw)
        if len(raw) == 32:
            return cls(SigningKey(raw))
        raise ValueError(f"Unexpected secret key length: {len(raw)}")

    @classmethod
    def _from_flagged(cls, raw: bytes) -> "AdminKeypair":
        if len(raw) != 33:
            raise ValueError(f"Unexpected secret key length: {len(raw)}")
        if raw[0] != ED25519_FLAG:
            raise ValueError(f"Unsupported signature scheme flag: {raw[0]}")
        return cls(SigningKey(raw[1:]))

    @property
    def public_key(self) -> bytes:
        return self._public_key

    @property
    def address(self) -> str:
        """Sui address: Blake2b-256 of ``flag || public_key``."""
        digest = hashlib.blake2b(
            bytes([ED25519_FLAG]) + self._public_key, digest_size=32
        ).digest()
        return "0x" + digest.hex()

    def sign_transaction(self, tx_bytes_b64: str) -> str:
        """
        Sign base64 transaction data.

        Returns:
            Base64 serialized signature ``flag || signature || public_key``
        """
        tx_bytes = base64.b64decode(tx_bytes_b64)
        digest = hashlib.blake2b(TRANSACTION_INTENT + tx_bytes, digest_size=32).digest()
        signature = self._signing_key.sign(digest).signature
        serialized = bytes([ED25519_FLAG]) + signature + self._public_key
        return base64.b64encode(serialized).decode("ascii")


@dataclass(frozen=True)
class AdminIdentity:
    """
    The single principal allowed to author registry writes.

    Built once at startup and treated as read-only afterwards.
    """

    keypair: AdminKeypair
    package_id: str
    registry_id: str
    cap_id: str
    module: str = "dapp_registry"

    @property
    def address(self) -> str:
        return self.keypair.address

    @property
    def record_target(self) -> str:
        """Fully qualified ``record_interaction`` entry point."""
        return f"{self.package_id}::{self.module}::record_interaction"
