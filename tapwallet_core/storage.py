"""
JSON persistence for the saved wallet.

The file holds exactly one ``SavedWallet``:

    {
      "encryptedMnemonic": {"kdf": ..., "cipher": ..., "salt": ..., ...},
      "address": "bc1p..."
    }

Usage:
    save_wallet("data/wallet.json", generated.wallet_json)
    saved = load_wallet("data/wallet.json")
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from tapwallet_core.errors import EncryptedFormatError
from tapwallet_core.wallet import SavedWallet

logger = logging.getLogger("tapwallet_storage")


def wallet_exists(path: str | os.PathLike) -> bool:
    return Path(path).is_file()


def save_wallet(path: str | os.PathLike, saved: SavedWallet) -> Path:
    """Write ``saved`` to ``path``, replacing any previous file atomically."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_name(target.name + ".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(saved.to_dict(), f, indent=2)
            f.write("\n")
        os.replace(tmp, target)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    logger.info(f"Wallet saved: {target} ({saved.address})")
    return target


def load_wallet(path: str | os.PathLike) -> SavedWallet:
    """
    Read a saved wallet.

    Raises ``FileNotFoundError`` if missing and ``EncryptedFormatError`` if
    the file is not a well-formed saved wallet.
    """
    source = Path(path)
    with open(source, encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise EncryptedFormatError(f"{source} is not valid JSON: {exc}") from exc
    saved = SavedWallet.from_dict(raw)
    logger.debug(f"Wallet loaded: {source} ({saved.address})")
    return saved
