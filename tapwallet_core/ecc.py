"""
secp256k1 arithmetic context for TapWallet.

All curve work (public key computation, BIP340 x-only keys, the BIP341
TapTweak, Schnorr and ECDSA signing) goes through an ``EccContext``.  The
context is constructed explicitly and passed to every derivation call;
``default_context()`` hands out a single process-wide instance for callers
that do not care.

Thread safety
-------------
An ``EccContext`` holds no mutable state after ``__init__``.  The only
shared resource underneath is the generator point's precomputation table
inside the ``ecdsa`` package, which is filled lazily on first use.  The
constructor triggers that fill once, so by the time any derivation runs
the table is complete and every method is reentrant.  ``default_context()``
creates its instance under a lock, so concurrent first calls still end up
with the same object.

Errors from this module are plain ``ValueError``s; the wallet layers map
them onto ``KeyDerivationError`` / ``AddressDerivationError``.
"""

from __future__ import annotations

import hashlib
import threading

from ecdsa import SECP256k1, BadSignatureError, SigningKey, VerifyingKey
from ecdsa.ellipticcurve import INFINITY, Point, PointJacobi
from ecdsa.util import sigdecode_string, sigencode_string_canonize


def tagged_hash(tag: str, msg: bytes) -> bytes:
    """BIP340 tagged hash: SHA256(SHA256(tag) || SHA256(tag) || msg)."""
    tag_hash = hashlib.sha256(tag.encode("utf-8")).digest()
    return hashlib.sha256(tag_hash + tag_hash + msg).digest()


def _xor(a: bytes, b: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(a, b))


class EccContext:
    """Stateless secp256k1 helper bound to one curve description."""

    def __init__(self) -> None:
        self.curve = SECP256k1
        self.order: int = SECP256k1.order
        self.field_prime: int = SECP256k1.curve.p()
        self.generator: PointJacobi = SECP256k1.generator
        # Fills the generator's lazy precomputation table before any
        # concurrent use.
        if self.is_infinity(self.generator * 1):
            raise RuntimeError("secp256k1 generator is degenerate")

    # ---- points ----

    @staticmethod
    def is_infinity(point) -> bool:
        return point is INFINITY or point == INFINITY

    def _add(self, a, b):
        if self.is_infinity(a):
            return b
        if self.is_infinity(b):
            return a
        return a + b

    def check_scalar(self, k: int) -> int:
        if not 0 < k < self.order:
            raise ValueError("scalar out of range [1, n-1]")
        return k

    def point_from_scalar(self, k: int) -> PointJacobi:
        """k·G for a valid private scalar."""
        return self.generator * self.check_scalar(k)

    def has_even_y(self, point) -> bool:
        return point.y() % 2 == 0

    def x_only(self, point) -> bytes:
        """32-byte x coordinate (BIP340 public key encoding)."""
        if self.is_infinity(point):
            raise ValueError("point at infinity has no x-only encoding")
        return int(point.x()).to_bytes(32, "big")

    def serialize_compressed(self, point) -> bytes:
        if self.is_infinity(point):
            raise ValueError("cannot serialize the point at infinity")
        prefix = b"\x02" if self.has_even_y(point) else b"\x03"
        return prefix + int(point.x()).to_bytes(32, "big")

    def _lift(self, x: int, odd: bool) -> PointJacobi:
        p = self.field_prime
        if not 0 <= x < p:
            raise ValueError("x coordinate not in field")
        y_sq = (pow(x, 3, p) + 7) % p
        y = pow(y_sq, (p + 1) // 4, p)
        if pow(y, 2, p) != y_sq:
            raise ValueError("x coordinate is not on secp256k1")
        if (y % 2 == 1) != odd:
            y = p - y
        affine = Point(self.curve.curve, x, y, self.order)
        return PointJacobi.from_affine(affine)

    def lift_x(self, xonly: bytes) -> PointJacobi:
        """The even-y point for a 32-byte x-only key (BIP340 lift_x)."""
        if len(xonly) != 32:
            raise ValueError("x-only key must be 32 bytes")
        return self._lift(int.from_bytes(xonly, "big"), odd=False)

    def parse_compressed(self, data: bytes) -> PointJacobi:
        if len(data) != 33 or data[0] not in (2, 3):
            raise ValueError("compressed public key must be 33 bytes, 02/03 prefix")
        return self._lift(int.from_bytes(data[1:], "big"), odd=data[0] == 3)

    def public_key(self, secret: int) -> bytes:
        """Compressed SEC1 public key for a private scalar."""
        return self.serialize_compressed(self.point_from_scalar(secret))

    def add_scalar_mul(self, point, tweak: int):
        """point + tweak·G, or INFINITY."""
        return self._add(point, self.generator * (tweak % self.order))

    # ---- BIP341 ----

    def taptweak(self, xonly: bytes, merkle_root: bytes = b"") -> int:
        t = int.from_bytes(tagged_hash("TapTweak", xonly + merkle_root), "big")
        if t >= self.order:
            raise ValueError("TapTweak exceeds curve order")
        return t

    def tweak_public_key(self, xonly: bytes, merkle_root: bytes = b"") -> tuple[int, bytes]:
        """taproot_tweak_pubkey: returns (parity, 32-byte output key)."""
        t = self.taptweak(xonly, merkle_root)
        q = self.add_scalar_mul(self.lift_x(xonly), t)
        if self.is_infinity(q):
            raise ValueError("tweaked output key is the point at infinity")
        return (0 if self.has_even_y(q) else 1), self.x_only(q)

    def tweak_private_key(self, secret: int, merkle_root: bytes = b"") -> int:
        """taproot_tweak_seckey: negate for odd y, then add the TapTweak."""
        point = self.point_from_scalar(secret)
        if not self.has_even_y(point):
            secret = self.order - secret
        t = self.taptweak(self.x_only(point), merkle_root)
        tweaked = (secret + t) % self.order
        if tweaked == 0:
            raise ValueError("tweaked private key is zero")
        return tweaked

    # ---- BIP340 Schnorr ----

    def schnorr_sign(self, msg: bytes, secret: int, aux_rand: bytes = b"\x00" * 32) -> bytes:
        if len(aux_rand) != 32:
            raise ValueError("aux_rand must be 32 bytes")
        n = self.order
        point = self.point_from_scalar(secret)
        d = secret if self.has_even_y(point) else n - secret
        pub = self.x_only(point)
        t = _xor(d.to_bytes(32, "big"), tagged_hash("BIP0340/aux", aux_rand))
        k0 = int.from_bytes(tagged_hash("BIP0340/nonce", t + pub + msg), "big") % n
        if k0 == 0:
            raise ValueError("nonce is zero")
        r_point = self.generator * k0
        k = k0 if self.has_even_y(r_point) else n - k0
        r = self.x_only(r_point)
        e = int.from_bytes(tagged_hash("BIP0340/challenge", r + pub + msg), "big") % n
        sig = r + ((k + e * d) % n).to_bytes(32, "big")
        if not self.schnorr_verify(msg, pub, sig):
            raise ValueError("produced signature does not verify")
        return sig

    def schnorr_verify(self, msg: bytes, xonly: bytes, sig: bytes) -> bool:
        if len(sig) != 64:
            return False
        try:
            point = self.lift_x(xonly)
        except ValueError:
            return False
        n = self.order
        r = int.from_bytes(sig[:32], "big")
        s = int.from_bytes(sig[32:], "big")
        if r >= self.field_prime or s >= n:
            return False
        e = int.from_bytes(
            tagged_hash("BIP0340/challenge", sig[:32] + xonly + msg), "big"
        ) % n
        r_point = self._add(self.generator * s, point * ((n - e) % n))
        if self.is_infinity(r_point) or not self.has_even_y(r_point):
            return False
        return r_point.x() == r

    # ---- ECDSA (RFC6979, low-S compact) ----

    def ecdsa_sign(self, digest: bytes, secret: int) -> bytes:
        if len(digest) != 32:
            raise ValueError("ECDSA message must be a 32-byte hash")
        sk = SigningKey.from_secret_exponent(
            self.check_scalar(secret), curve=self.curve, hashfunc=hashlib.sha256,
        )
        return sk.sign_digest_deterministic(digest, sigencode=sigencode_string_canonize)

    def ecdsa_verify(self, digest: bytes, public_key: bytes, sig: bytes) -> bool:
        try:
            vk = VerifyingKey.from_string(public_key, curve=self.curve)
            return vk.verify_digest(sig, digest, sigdecode=sigdecode_string)
        except (BadSignatureError, ValueError, AssertionError):
            return False


_default: EccContext | None = None
_default_lock = threading.Lock()


def default_context() -> EccContext:
    """Process-wide context, created once on first use."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = EccContext()
    return _default
