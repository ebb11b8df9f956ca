"""
Network parameters and the fixed derivation path.

A wallet is derived and encoded under exactly one network for its whole
lifetime.  The network is picked once at startup (see
``tapwallet_core.config``) and handed to every derivation call.
"""

from __future__ import annotations

from dataclasses import dataclass

# BIP86 single-key Taproot account 0.  Signer, address and witness
# builder all derive from this path; never build it ad hoc.
ACCOUNT_PATH = "m/86'/0'/0'"


@dataclass(frozen=True)
class NetworkParams:
    """Version bytes and address prefixes for one Bitcoin network."""
    name: str
    hrp: str                 # bech32 human-readable part
    xprv_version: bytes      # BIP32 serialization, private
    xpub_version: bytes      # BIP32 serialization, public


MAINNET = NetworkParams(
    name="mainnet",
    hrp="bc",
    xprv_version=bytes.fromhex("0488ade4"),
    xpub_version=bytes.fromhex("0488b21e"),
)

TESTNET = NetworkParams(
    name="testnet",
    hrp="tb",
    xprv_version=bytes.fromhex("04358394"),
    xpub_version=bytes.fromhex("043587cf"),
)

REGTEST = NetworkParams(
    name="regtest",
    hrp="bcrt",
    xprv_version=bytes.fromhex("04358394"),
    xpub_version=bytes.fromhex("043587cf"),
)

NETWORKS: dict[str, NetworkParams] = {
    n.name: n for n in (MAINNET, TESTNET, REGTEST)
}


def get_network(name: str) -> NetworkParams:
    """Look up network parameters by name (case-insensitive)."""
    try:
        return NETWORKS[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown network {name!r}: expected one of {', '.join(NETWORKS)}"
        ) from None
