"""
Exception taxonomy for TapWallet.

Validation faults (bad password, tampered ciphertext) are recoverable and
the caller is expected to re-prompt.  Construction faults (degenerate key
or script) mean corrupted input or a broken curve invariant and abort the
current operation.  ``WalletError`` is the stable tag reported outside the
core by the wallet assembler.
"""

from __future__ import annotations

from enum import Enum


class TapWalletError(Exception):
    """Base class for every error raised by tapwallet_core."""


class KeyDerivationError(TapWalletError):
    """BIP32 / BIP341 derivation produced an invalid key."""


class AddressDerivationError(TapWalletError):
    """The Taproot output script could not be built from the internal key."""


class AuthenticationError(TapWalletError):
    """AEAD tag verification failed: wrong password or corrupted data."""


class EncryptedFormatError(TapWalletError, ValueError):
    """A persisted wallet or encrypted mnemonic is malformed."""


class WalletError(str, Enum):
    """Externally visible error tags returned inside ``BoxedError``."""
    INVALID_MNEMONIC = "InvalidMnemonic"
    WRONG_PASSWORD = "WrongPassword"
    ADDRESS_MISMATCH = "AddressMismatch"
    WALLET_NOT_FOUND = "WalletNotFound"
