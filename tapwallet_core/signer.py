"""
Seed derivation and the Taproot signer adapter.

``derive_signer`` turns a (previously validated) mnemonic into a
``WalletSigner``: seed, BIP32 root, and the BIP86 account key pair at
``ACCOUNT_PATH``.  ``to_signing_key`` re-derives the account child from the
root, applies the BIP341 TapTweak once and returns a ``TaprootSigningKey``
for key-path spends.

Nothing here is cached.  Signers and signing keys are context managers;
leaving the ``with`` block wipes their private material:

    with derive_signer(mnemonic) as signer:
        with to_signing_key(signer) as key:
            sig = key.sign_schnorr(sighash)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tapwallet_core.bip32 import ExtendedKey
from tapwallet_core.bip39 import mnemonic_to_seed
from tapwallet_core.ecc import EccContext, default_context
from tapwallet_core.errors import KeyDerivationError
from tapwallet_core.params import ACCOUNT_PATH, MAINNET, NetworkParams
from tapwallet_core.secure import SecretBuffer

logger = logging.getLogger("tapwallet_signer")


@dataclass
class WalletSigner:
    """Root and BIP86 account keys derived from one mnemonic."""
    root: ExtendedKey
    xprv: ExtendedKey
    xpub: ExtendedKey
    seed: SecretBuffer
    network: NetworkParams = MAINNET

    def wipe(self) -> None:
        self.root.wipe()
        self.xprv.wipe()
        self.seed.wipe()

    def __enter__(self) -> WalletSigner:
        return self

    def __exit__(self, *exc) -> None:
        self.wipe()

    def __repr__(self) -> str:
        return f"WalletSigner({self.network.name}, xpub={self.xpub.to_base58()})"


def derive_signer(
    mnemonic: str,
    network: NetworkParams = MAINNET,
    ctx: EccContext | None = None,
) -> WalletSigner:
    """
    Mnemonic → seed → root → ``m/86'/0'/0'``.

    The mnemonic is not re-validated here; call ``validate_mnemonic`` first.
    Raises ``KeyDerivationError`` for a degenerate seed or child.
    """
    ctx = ctx or default_context()
    seed = mnemonic_to_seed(mnemonic)
    root = None
    try:
        root = ExtendedKey.from_seed(seed.get_value(), network=network, ctx=ctx)
        xprv = root.derive_path(ACCOUNT_PATH)
    except BaseException:
        seed.wipe()
        if root is not None:
            root.wipe()
        raise
    return WalletSigner(
        root=root,
        xprv=xprv,
        xpub=xprv.neutered(),
        seed=seed,
        network=network,
    )


def derive_account_child(signer: WalletSigner) -> ExtendedKey:
    """Fresh private account node from ``signer.root``; caller wipes it."""
    return signer.root.derive_path(ACCOUNT_PATH)


class TaprootSigningKey:
    """
    Tweaked BIP86 key for key-path spending.

    ``public_key`` is the 32-byte x-only output key that appears in the
    P2TR script; ``internal_key`` is the untweaked x-only key.
    """

    def __init__(
        self,
        secret: SecretBuffer,
        internal_key: bytes,
        ctx: EccContext,
    ):
        self.ctx = ctx
        self._secret = secret
        self.internal_key = internal_key
        self.public_key = ctx.x_only(ctx.point_from_scalar(secret.to_int()))

    @property
    def compressed_public_key(self) -> bytes:
        return self.ctx.public_key(self._secret.to_int())

    def sign(self, message: bytes) -> bytes:
        """64-byte compact low-S ECDSA signature (RFC6979 nonce)."""
        return self.ctx.ecdsa_sign(message, self._secret.to_int())

    def sign_schnorr(self, message: bytes, aux_rand: bytes = b"\x00" * 32) -> bytes:
        """64-byte BIP340 signature."""
        if len(message) != 32:
            raise ValueError("Schnorr message must be 32 bytes")
        return self.ctx.schnorr_sign(message, self._secret.to_int(), aux_rand)

    def verify_schnorr(self, message: bytes, signature: bytes) -> bool:
        return self.ctx.schnorr_verify(message, self.public_key, signature)

    def verify(self, message: bytes, signature: bytes) -> bool:
        return self.ctx.ecdsa_verify(message, self.compressed_public_key, signature)

    def wipe(self) -> None:
        self._secret.wipe()

    def __enter__(self) -> TaprootSigningKey:
        return self

    def __exit__(self, *exc) -> None:
        self.wipe()

    def __repr__(self) -> str:
        return f"TaprootSigningKey({self.public_key.hex()})"


def to_signing_key(signer: WalletSigner, ctx: EccContext | None = None) -> TaprootSigningKey:
    """Apply the key-path-only TapTweak to the account child of ``signer``."""
    ctx = ctx or signer.root.ctx
    child = derive_account_child(signer)
    try:
        internal_key = child.x_only_public_key
        tweaked = ctx.tweak_private_key(child.secret_exponent)
    except ValueError as exc:
        logger.warning(f"Account key tweak failed: {exc}")
        raise KeyDerivationError(f"Failed to tweak account key: {exc}") from exc
    finally:
        child.wipe()
    return TaprootSigningKey(SecretBuffer.from_int(tweaked), internal_key, ctx)
