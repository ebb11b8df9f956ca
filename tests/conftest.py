"""
Shared pytest fixtures for the TapWallet test suite.
"""

import pytest

from tapwallet_core.cipher import KdfParams
from tapwallet_core.ecc import EccContext
from tapwallet_core.params import MAINNET, TESTNET
from tapwallet_core.signer import derive_signer

from bip_vectors import ABANDON_12


@pytest.fixture
def ctx():
    """Explicitly constructed curve context."""
    return EccContext()


@pytest.fixture
def fast_kdf():
    """Cheap scrypt costs so round-trip tests stay quick."""
    return KdfParams(n=1024, r=8, p=1)


@pytest.fixture
def abandon_signer(ctx):
    """Mainnet signer for the BIP39 'abandon ... about' vector."""
    with derive_signer(ABANDON_12, network=MAINNET, ctx=ctx) as signer:
        yield signer


@pytest.fixture
def abandon_testnet_signer(ctx):
    with derive_signer(ABANDON_12, network=TESTNET, ctx=ctx) as signer:
        yield signer


@pytest.fixture
def wallet_file(tmp_path):
    """Path for a saved wallet inside a temp directory."""
    return tmp_path / "data" / "wallet.json"
