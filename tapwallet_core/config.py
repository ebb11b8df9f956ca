"""
TOML-based configuration for TapWallet.

Loads settings from a TOML file and/or environment variables.
Environment variables take precedence over file values.

Usage:
    from tapwallet_core.config import load_config
    cfg = load_config("tapwallet.toml")
    network = cfg.wallet.network_params()

Example file:

    [wallet]
    network = "testnet"
    wallet_file = "data/wallet.json"

    [kdf]
    n = 16384

    [logging]
    level = "DEBUG"
    format = "json"
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from tapwallet_core.cipher import KdfParams
from tapwallet_core.params import NetworkParams, get_network

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import,no-redef]


@dataclass
class WalletConfig:
    """Which network to derive for and where the saved wallet lives."""
    network: str = "mainnet"
    wallet_file: str = "data/wallet.json"

    def network_params(self) -> NetworkParams:
        return get_network(self.network)


@dataclass
class KdfConfig:
    """scrypt costs.  Must match whatever the wallet file was written with."""
    n: int = 16384
    r: int = 8
    p: int = 1

    def params(self) -> KdfParams:
        return KdfParams(n=int(self.n), r=int(self.r), p=int(self.p))


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    format: str = "human"   # "human" or "json"
    file: str | None = None


@dataclass
class TapWalletConfig:
    """Top-level configuration container."""
    wallet: WalletConfig = field(default_factory=WalletConfig)
    kdf: KdfConfig = field(default_factory=KdfConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _merge(dc: Any, raw: dict[str, Any]) -> None:
    """Merge a raw dict into a dataclass instance (in-place)."""
    for key, value in raw.items():
        key_under = key.replace("-", "_")
        if hasattr(dc, key_under):
            setattr(dc, key_under, value)


def load_config(path: str | None = None) -> TapWalletConfig:
    """
    Load configuration from a TOML file, then overlay environment variables.

    Env-var mapping:
        TAPWALLET_NETWORK      -> wallet.network
        TAPWALLET_WALLET_FILE  -> wallet.wallet_file
        TAPWALLET_LOG_LEVEL    -> logging.level
        TAPWALLET_LOG_FMT      -> logging.format
        TAPWALLET_LOG_FILE     -> logging.file
    """
    cfg = TapWalletConfig()

    # ── TOML file ────────────────────────────────────────────────
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p, "rb") as f:
                data = tomllib.load(f)
            for section_name, section_dc in [
                ("wallet", cfg.wallet),
                ("kdf", cfg.kdf),
                ("logging", cfg.logging),
            ]:
                if section_name in data:
                    _merge(section_dc, data[section_name])

    # ── Environment variable overrides ───────────────────────────
    if v := os.environ.get("TAPWALLET_NETWORK"):
        cfg.wallet.network = v.lower()
    if v := os.environ.get("TAPWALLET_WALLET_FILE"):
        cfg.wallet.wallet_file = v
    if v := os.environ.get("TAPWALLET_LOG_LEVEL"):
        cfg.logging.level = v.upper()
    if v := os.environ.get("TAPWALLET_LOG_FMT"):
        cfg.logging.format = v
    if v := os.environ.get("TAPWALLET_LOG_FILE"):
        cfg.logging.file = v

    return cfg
