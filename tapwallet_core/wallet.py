"""
Wallet assembly for TapWallet.

Creates or restores the single wallet bundle:
  - mnemonic (fresh 12 words, or a supplied phrase)
  - ``WalletSigner`` derived from it
  - ``SavedWallet``: encrypted mnemonic + receiving address, the unit
    written to disk

``generate_wallet`` and ``unlock_wallet`` are the only places where
internal faults are folded into the stable ``WalletError`` tags; callers
get a ``BoxedSuccess`` or a ``BoxedError``, never a half-built wallet.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from tapwallet_core.address import first_taproot_address
from tapwallet_core.bip39 import generate_mnemonic, is_valid_mnemonic, validate_mnemonic
from tapwallet_core.boxed import BoxedError, BoxedResponse, BoxedSuccess
from tapwallet_core.cipher import (
    DEFAULT_KDF_PARAMS,
    EncryptedMnemonic,
    KdfParams,
    decrypt_mnemonic,
    encrypt_mnemonic,
)
from tapwallet_core.ecc import EccContext
from tapwallet_core.errors import (
    AuthenticationError,
    EncryptedFormatError,
    TapWalletError,
    WalletError,
)
from tapwallet_core.params import MAINNET, NetworkParams
from tapwallet_core.signer import WalletSigner, derive_signer

logger = logging.getLogger("tapwallet_wallet")

__all__ = [
    "DecryptedWallet",
    "GeneratedWallet",
    "SavedWallet",
    "decrypt_wallet_with_password",
    "generate_wallet",
    "is_valid_mnemonic",
    "unlock_wallet",
]


@dataclass(frozen=True)
class SavedWallet:
    encrypted_mnemonic: EncryptedMnemonic
    address: str

    def to_dict(self) -> dict:
        return {
            "encryptedMnemonic": self.encrypted_mnemonic.to_dict(),
            "address": self.address,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> SavedWallet:
        if not isinstance(raw, dict):
            raise EncryptedFormatError("saved wallet must be an object")
        if "encryptedMnemonic" not in raw or "address" not in raw:
            raise EncryptedFormatError("saved wallet needs encryptedMnemonic and address")
        if not isinstance(raw["address"], str):
            raise EncryptedFormatError("address must be a string")
        return cls(
            encrypted_mnemonic=EncryptedMnemonic.from_dict(raw["encryptedMnemonic"]),
            address=raw["address"],
        )


@dataclass
class DecryptedWallet:
    mnemonic: str
    signer: WalletSigner


@dataclass
class GeneratedWallet:
    mnemonic: str
    signer: WalletSigner
    wallet_json: SavedWallet


def generate_wallet(
    password: str,
    from_mnemonic: str | None = None,
    network: NetworkParams = MAINNET,
    ctx: EccContext | None = None,
    kdf_params: KdfParams = DEFAULT_KDF_PARAMS,
) -> BoxedResponse[GeneratedWallet, WalletError]:
    """
    Create a new wallet, or restore one from ``from_mnemonic``.

    Every failure (bad checksum, degenerate derivation, encryption error)
    comes back as ``BoxedError(WalletError.INVALID_MNEMONIC, message)``.
    """
    signer = None
    try:
        if from_mnemonic is None:
            mnemonic = generate_mnemonic(128)
        else:
            mnemonic = from_mnemonic
            if not validate_mnemonic(mnemonic):
                return BoxedError(WalletError.INVALID_MNEMONIC, "Invalid mnemonic")
        signer = derive_signer(mnemonic, network=network, ctx=ctx)
        wallet_json = SavedWallet(
            encrypted_mnemonic=encrypt_mnemonic(mnemonic, password, kdf_params),
            address=first_taproot_address(signer),
        )
    except Exception as exc:
        if signer is not None:
            signer.wipe()
        logger.warning(f"Wallet generation failed: {type(exc).__name__}")
        return BoxedError(WalletError.INVALID_MNEMONIC, str(exc) or "Invalid mnemonic")

    logger.info(f"Wallet ready on {network.name}: {wallet_json.address}")
    return BoxedSuccess(GeneratedWallet(mnemonic=mnemonic, signer=signer, wallet_json=wallet_json))


def decrypt_wallet_with_password(
    encrypted: Union[SavedWallet, EncryptedMnemonic],
    password: str,
    network: NetworkParams = MAINNET,
    ctx: EccContext | None = None,
    kdf_params: KdfParams = DEFAULT_KDF_PARAMS,
) -> DecryptedWallet:
    """Decrypt the mnemonic and re-derive the signer.  Raises on failure."""
    if isinstance(encrypted, SavedWallet):
        encrypted = encrypted.encrypted_mnemonic
    mnemonic = decrypt_mnemonic(encrypted, password, kdf_params)
    return DecryptedWallet(mnemonic=mnemonic, signer=derive_signer(mnemonic, network, ctx))


def unlock_wallet(
    saved: SavedWallet,
    password: str,
    network: NetworkParams = MAINNET,
    ctx: EccContext | None = None,
    kdf_params: KdfParams = DEFAULT_KDF_PARAMS,
) -> BoxedResponse[DecryptedWallet, WalletError]:
    """
    Boxed unlock that also checks the re-derived address against the one
    stored next to the ciphertext.
    """
    try:
        decrypted = decrypt_wallet_with_password(saved, password, network, ctx, kdf_params)
    except AuthenticationError as exc:
        return BoxedError(WalletError.WRONG_PASSWORD, str(exc))
    except TapWalletError as exc:
        return BoxedError(WalletError.INVALID_MNEMONIC, str(exc))

    try:
        address = first_taproot_address(decrypted.signer)
    except TapWalletError as exc:
        decrypted.signer.wipe()
        return BoxedError(WalletError.INVALID_MNEMONIC, str(exc))
    if address != saved.address:
        decrypted.signer.wipe()
        logger.warning(f"Saved address {saved.address} does not match derived {address}")
        return BoxedError(
            WalletError.ADDRESS_MISMATCH,
            f"Saved address {saved.address} does not match derived {address}",
        )
    return BoxedSuccess(decrypted)
