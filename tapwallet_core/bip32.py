"""
BIP32 hierarchical deterministic keys for TapWallet.

``ExtendedKey`` is a key plus chain code plus the metadata needed to
serialize it as an ``xprv`` / ``xpub`` (or ``tprv`` / ``tpub``) string.
Private keys live in a ``SecretBuffer`` and can be wiped; ``neutered()``
gives the public-only counterpart, and there is no way back.

Path notation: ``m/86'/0'/0'`` (``'`` or ``h`` marks hardened steps).
"""

from __future__ import annotations

import hashlib
import hmac
import struct

import base58
from Crypto.Hash import RIPEMD160

from tapwallet_core.ecc import EccContext, default_context
from tapwallet_core.errors import KeyDerivationError
from tapwallet_core.params import MAINNET, NETWORKS, NetworkParams
from tapwallet_core.secure import SecretBuffer

HARDENED = 0x80000000
MASTER_HMAC_KEY = b"Bitcoin seed"


def hash160(data: bytes) -> bytes:
    """RIPEMD160(SHA256(data))."""
    return RIPEMD160.new(hashlib.sha256(data).digest()).digest()


def parse_path(path: str) -> list[int]:
    """Turn ``m/86'/0'/0'`` into child indices."""
    path = path.strip()
    if path in ("m", ""):
        return []
    if path.startswith("m/"):
        path = path[2:]
    indices = []
    for component in path.split("/"):
        hardened = component[-1:] in ("'", "h", "H")
        digits = component[:-1] if hardened else component
        if not digits.isdigit():
            raise ValueError(f"Invalid path component {component!r}")
        index = int(digits)
        if index >= HARDENED:
            raise ValueError(f"Path index {index} out of range")
        indices.append(index + HARDENED if hardened else index)
    return indices


class ExtendedKey:
    """
    A BIP32 node.

    Exactly one of ``secret`` (private node) or ``public_point`` (neutered
    node) is authoritative; private nodes compute their public point.
    """

    def __init__(
        self,
        chain_code: bytes,
        secret: SecretBuffer | None = None,
        public_point=None,
        depth: int = 0,
        index: int = 0,
        parent_fingerprint: bytes = b"\x00" * 4,
        network: NetworkParams = MAINNET,
        ctx: EccContext | None = None,
    ):
        if secret is None and public_point is None:
            raise ValueError("ExtendedKey needs a private or a public key")
        self.ctx = ctx or default_context()
        self.chain_code = chain_code
        self._secret = secret
        self.depth = depth
        self.index = index
        self.parent_fingerprint = parent_fingerprint
        self.network = network
        if public_point is None:
            try:
                public_point = self.ctx.point_from_scalar(secret.to_int())
            except ValueError as exc:
                raise KeyDerivationError(f"Invalid private key: {exc}") from exc
        self._point = public_point

    # ---- construction ----

    @classmethod
    def from_seed(
        cls,
        seed: bytes,
        network: NetworkParams = MAINNET,
        ctx: EccContext | None = None,
    ) -> ExtendedKey:
        """Master node from a 16..64-byte seed."""
        if not 16 <= len(seed) <= 64:
            raise KeyDerivationError("Seed must be between 128 and 512 bits")
        ctx = ctx or default_context()
        digest = hmac.new(MASTER_HMAC_KEY, seed, hashlib.sha512).digest()
        il = int.from_bytes(digest[:32], "big")
        if il == 0 or il >= ctx.order:
            raise KeyDerivationError("Failed to create root key from seed")
        return cls(
            chain_code=digest[32:],
            secret=SecretBuffer(digest[:32]),
            network=network,
            ctx=ctx,
        )

    # ---- key material ----

    @property
    def is_private(self) -> bool:
        return self._secret is not None

    @property
    def private_key(self) -> bytes:
        if self._secret is None:
            raise ValueError("Neutered key has no private key")
        return self._secret.get_value()

    @property
    def secret_exponent(self) -> int:
        if self._secret is None:
            raise ValueError("Neutered key has no private key")
        return self._secret.to_int()

    @property
    def point(self):
        return self._point

    @property
    def public_key(self) -> bytes:
        """33-byte compressed public key."""
        return self.ctx.serialize_compressed(self._point)

    @property
    def x_only_public_key(self) -> bytes:
        return self.ctx.x_only(self._point)

    @property
    def identifier(self) -> bytes:
        return hash160(self.public_key)

    @property
    def fingerprint(self) -> bytes:
        """First 4 bytes of Hash160 of the public key."""
        return self.identifier[:4]

    # ---- derivation ----

    def derive_child(self, index: int) -> ExtendedKey:
        """CKDpriv for private nodes, CKDpub for neutered ones."""
        if not 0 <= index <= 0xFFFFFFFF:
            raise ValueError(f"Child index {index} out of range")
        hardened = index >= HARDENED
        if hardened:
            if self._secret is None:
                raise KeyDerivationError("Cannot derive a hardened child from a public key")
            data = b"\x00" + self.private_key + struct.pack(">I", index)
        else:
            data = self.public_key + struct.pack(">I", index)

        digest = hmac.new(self.chain_code, data, hashlib.sha512).digest()
        il = int.from_bytes(digest[:32], "big")
        if il >= self.ctx.order:
            raise KeyDerivationError(f"Invalid child at index {index}")

        if self._secret is not None:
            child_int = (il + self.secret_exponent) % self.ctx.order
            if child_int == 0:
                raise KeyDerivationError(f"Invalid child at index {index}")
            return ExtendedKey(
                chain_code=digest[32:],
                secret=SecretBuffer.from_int(child_int),
                depth=self.depth + 1,
                index=index,
                parent_fingerprint=self.fingerprint,
                network=self.network,
                ctx=self.ctx,
            )

        child_point = self.ctx.add_scalar_mul(self._point, il)
        if self.ctx.is_infinity(child_point):
            raise KeyDerivationError(f"Invalid child at index {index}")
        return ExtendedKey(
            chain_code=digest[32:],
            public_point=child_point,
            depth=self.depth + 1,
            index=index,
            parent_fingerprint=self.fingerprint,
            network=self.network,
            ctx=self.ctx,
        )

    def derive_path(self, path: str) -> ExtendedKey:
        node = self
        for index in parse_path(path):
            try:
                child = node.derive_child(index)
            finally:
                if node is not self:
                    node.wipe()
            node = child
        return node

    def neutered(self) -> ExtendedKey:
        """Public-only copy of this node."""
        return ExtendedKey(
            chain_code=self.chain_code,
            public_point=self._point,
            depth=self.depth,
            index=self.index,
            parent_fingerprint=self.parent_fingerprint,
            network=self.network,
            ctx=self.ctx,
        )

    def wipe(self) -> None:
        if self._secret is not None:
            self._secret.wipe()

    # ---- serialization ----

    def _serialize(self, private: bool) -> bytes:
        if private:
            version = self.network.xprv_version
            key_data = b"\x00" + self.private_key
        else:
            version = self.network.xpub_version
            key_data = self.public_key
        return (
            version
            + struct.pack(">B", self.depth)
            + self.parent_fingerprint
            + struct.pack(">I", self.index)
            + self.chain_code
            + key_data
        )

    def to_base58(self) -> str:
        """xprv for private nodes, xpub for neutered ones."""
        return base58.b58encode_check(self._serialize(self.is_private)).decode("ascii")

    def public_base58(self) -> str:
        return base58.b58encode_check(self._serialize(False)).decode("ascii")

    @classmethod
    def from_base58(cls, text: str, ctx: EccContext | None = None) -> ExtendedKey:
        """Parse an xprv/xpub/tprv/tpub string."""
        try:
            raw = base58.b58decode_check(text)
        except ValueError as exc:
            raise ValueError(f"Invalid extended key checksum: {exc}") from exc
        if len(raw) != 78:
            raise ValueError("Extended key must decode to 78 bytes")
        version = raw[:4]
        depth = raw[4]
        parent_fingerprint = raw[5:9]
        index = struct.unpack(">I", raw[9:13])[0]
        chain_code = raw[13:45]
        key_data = raw[45:]

        for network in NETWORKS.values():
            if version in (network.xprv_version, network.xpub_version):
                break
        else:
            raise ValueError(f"Unknown extended key version {version.hex()}")

        ctx = ctx or default_context()
        common = dict(
            chain_code=chain_code,
            depth=depth,
            index=index,
            parent_fingerprint=parent_fingerprint,
            network=network,
            ctx=ctx,
        )
        if version == network.xprv_version:
            if key_data[0] != 0:
                raise ValueError("Private extended key must start with 0x00")
            return cls(secret=SecretBuffer(key_data[1:]), **common)
        return cls(public_point=ctx.parse_compressed(key_data), **common)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExtendedKey):
            return NotImplemented
        return (
            self.is_private == other.is_private
            and self._serialize(self.is_private) == other._serialize(other.is_private)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        kind = "private" if self.is_private else "public"
        return f"ExtendedKey({kind}, depth={self.depth}, fp={self.fingerprint.hex()})"
