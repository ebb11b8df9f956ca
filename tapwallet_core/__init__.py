"""
TapWallet - single-account Taproot (BIP86) HD wallet core.

Key features:
- BIP39 mnemonics and BIP32 derivation at m/86'/0'/0'
- BIP341 key-path tweak with Schnorr and ECDSA signing
- P2TR addresses and witness-UTXO records for transaction builders
- scrypt + AES-256-GCM encryption of the mnemonic at rest
"""

__version__ = "1.0.0"
__all__ = [
    "params",
    "errors",
    "boxed",
    "ecc",
    "secure",
    "bip32",
    "bip39",
    "signer",
    "address",
    "witness",
    "cipher",
    "wallet",
    "storage",
    "config",
    "logging_config",
    "cli",
]
