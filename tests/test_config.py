"""
Tests for tapwallet_core.config — TOML configuration and environment overrides.

Covers:
  - Default values for all dataclass sections
  - TOML parsing and section merging
  - Environment variable overrides (precedence over TOML)
  - Network and KDF helpers
  - _merge helper edge cases
"""

from __future__ import annotations

import dataclasses
import os
import tempfile
import textwrap
import unittest
from unittest.mock import patch

from tapwallet_core.cipher import DEFAULT_KDF_PARAMS, KdfParams
from tapwallet_core.config import (
    KdfConfig,
    LoggingConfig,
    TapWalletConfig,
    WalletConfig,
    _merge,
    load_config,
)
from tapwallet_core.params import MAINNET, REGTEST, TESTNET, NetworkParams

_ENV_KEYS = (
    "TAPWALLET_NETWORK",
    "TAPWALLET_WALLET_FILE",
    "TAPWALLET_LOG_LEVEL",
    "TAPWALLET_LOG_FMT",
    "TAPWALLET_LOG_FILE",
)


def _clean_env() -> dict[str, str]:
    return {k: v for k, v in os.environ.items() if k not in _ENV_KEYS}


# ═══════════════════════════════════════════════════════════════════
#  Defaults
# ═══════════════════════════════════════════════════════════════════

class TestDefaults(unittest.TestCase):

    def test_wallet_defaults(self):
        w = WalletConfig()
        self.assertEqual(w.network, "mainnet")
        self.assertEqual(w.wallet_file, "data/wallet.json")
        self.assertIs(w.network_params(), MAINNET)

    def test_kdf_defaults_match_cipher(self):
        self.assertEqual(KdfConfig().params(), DEFAULT_KDF_PARAMS)

    def test_logging_defaults(self):
        lc = LoggingConfig()
        self.assertEqual(lc.level, "INFO")
        self.assertEqual(lc.format, "human")
        self.assertIsNone(lc.file)

    def test_top_level_defaults(self):
        cfg = TapWalletConfig()
        self.assertIsInstance(cfg.wallet, WalletConfig)
        self.assertIsInstance(cfg.kdf, KdfConfig)
        self.assertIsInstance(cfg.logging, LoggingConfig)


# ═══════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════

class TestHelpers(unittest.TestCase):

    def test_network_lookup(self):
        self.assertIs(WalletConfig(network="testnet").network_params(), TESTNET)
        self.assertIs(WalletConfig(network="RegTest").network_params(), REGTEST)

    def test_network_params_fields(self):
        names = [f.name for f in dataclasses.fields(NetworkParams)]
        self.assertEqual(names, ["name", "hrp", "xprv_version", "xpub_version"])

    def test_unknown_network(self):
        with self.assertRaises(ValueError):
            WalletConfig(network="signet").network_params()

    def test_kdf_params_coerced_to_int(self):
        self.assertEqual(KdfConfig(n="1024", r="8", p="2").params(), KdfParams(n=1024, r=8, p=2))

    def test_merge_updates_fields(self):
        w = WalletConfig()
        _merge(w, {"network": "testnet"})
        self.assertEqual(w.network, "testnet")

    def test_merge_ignores_unknown_keys(self):
        w = WalletConfig()
        _merge(w, {"colour": "orange"})
        self.assertFalse(hasattr(w, "colour"))

    def test_merge_hyphenated_keys(self):
        w = WalletConfig()
        _merge(w, {"wallet-file": "/tmp/w.json"})
        self.assertEqual(w.wallet_file, "/tmp/w.json")


# ═══════════════════════════════════════════════════════════════════
#  TOML loading
# ═══════════════════════════════════════════════════════════════════

class TestLoadConfig(unittest.TestCase):

    @patch.dict(os.environ, _clean_env(), clear=True)
    def test_load_no_file(self):
        cfg = load_config(None)
        self.assertEqual(cfg.wallet.network, "mainnet")

    @patch.dict(os.environ, _clean_env(), clear=True)
    def test_load_missing_file(self):
        cfg = load_config("/tmp/__nonexistent_tapwallet__.toml")
        self.assertEqual(cfg.kdf.n, 16384)

    @patch.dict(os.environ, _clean_env(), clear=True)
    def test_load_toml_file(self):
        content = textwrap.dedent("""\
            [wallet]
            network = "testnet"
            wallet-file = "/var/lib/tapwallet/wallet.json"

            [kdf]
            n = 2048

            [logging]
            level = "DEBUG"
            format = "json"
        """)
        with tempfile.NamedTemporaryFile(mode="w", suffix=".toml", delete=False) as f:
            f.write(content)
            f.flush()
            cfg = load_config(f.name)
        os.unlink(f.name)

        self.assertEqual(cfg.wallet.network, "testnet")
        self.assertEqual(cfg.wallet.wallet_file, "/var/lib/tapwallet/wallet.json")
        self.assertEqual(cfg.kdf.params(), KdfParams(n=2048, r=8, p=1))
        self.assertEqual(cfg.logging.level, "DEBUG")
        self.assertEqual(cfg.logging.format, "json")


# ═══════════════════════════════════════════════════════════════════
#  Environment overrides
# ═══════════════════════════════════════════════════════════════════

class TestEnvOverrides(unittest.TestCase):

    @patch.dict(os.environ, {"TAPWALLET_NETWORK": "TESTNET"}, clear=False)
    def test_env_network_lowercased(self):
        self.assertEqual(load_config(None).wallet.network, "testnet")

    @patch.dict(os.environ, {"TAPWALLET_WALLET_FILE": "/tmp/env.json"}, clear=False)
    def test_env_wallet_file(self):
        self.assertEqual(load_config(None).wallet.wallet_file, "/tmp/env.json")

    @patch.dict(os.environ, {"TAPWALLET_LOG_LEVEL": "debug"}, clear=False)
    def test_env_log_level_uppercased(self):
        self.assertEqual(load_config(None).logging.level, "DEBUG")

    @patch.dict(os.environ, {"TAPWALLET_LOG_FMT": "json"}, clear=False)
    def test_env_log_format(self):
        self.assertEqual(load_config(None).logging.format, "json")

    @patch.dict(os.environ, {"TAPWALLET_LOG_FILE": "/tmp/tw.log"}, clear=False)
    def test_env_log_file(self):
        self.assertEqual(load_config(None).logging.file, "/tmp/tw.log")

    @patch.dict(os.environ, {"TAPWALLET_NETWORK": "regtest"}, clear=False)
    def test_env_beats_toml(self):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".toml", delete=False) as f:
            f.write('[wallet]\nnetwork = "testnet"\n')
            f.flush()
            cfg = load_config(f.name)
        os.unlink(f.name)
        self.assertEqual(cfg.wallet.network, "regtest")


if __name__ == "__main__":
    unittest.main()
