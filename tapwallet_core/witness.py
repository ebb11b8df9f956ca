"""
Witness-UTXO records for Taproot key-path inputs.

An indexer supplies ``{txid, vout, value}``; combined with the wallet's
account key this yields everything a transaction signer needs for the
input: outpoint, P2TR script, amount and internal key.  Whether the
output is really unspent is the indexer's business, not ours.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tapwallet_core.address import account_internal_key, p2tr_output
from tapwallet_core.ecc import EccContext
from tapwallet_core.signer import WalletSigner

MAX_VOUT = 0xFFFFFFFF


@dataclass(frozen=True)
class Utxo:
    """Unspent output as reported by an Esplora-style indexer."""
    txid: str
    vout: int
    value: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Utxo:
        txid = str(data["txid"]).lower()
        try:
            raw = bytes.fromhex(txid)
        except ValueError:
            raise ValueError(f"txid is not hex: {txid!r}") from None
        if len(raw) != 32:
            raise ValueError("txid must be 32 bytes")
        vout = _whole_number("vout", data["vout"])
        value = _whole_number("value", data["value"])
        if vout > MAX_VOUT:
            raise ValueError(f"vout {vout} exceeds 0xFFFFFFFF")
        return cls(txid=txid, vout=vout, value=value)


def _whole_number(name: str, raw: Any) -> int:
    # BIP341 sighashes commit to the exact amount.
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"{name} must be an integer, got {type(raw).__name__}")
    if raw < 0:
        raise ValueError(f"{name} must be non-negative")
    return raw


@dataclass(frozen=True)
class WitnessUtxo:
    txid: str
    vout: int
    script: bytes
    value: int
    tap_internal_key: bytes

    def to_dict(self) -> dict:
        return {
            "hash": self.txid,
            "index": self.vout,
            "witnessUtxo": {"script": self.script.hex(), "value": self.value},
            "tapInternalKey": self.tap_internal_key.hex(),
        }


def build_witness_utxo(
    utxo: Utxo,
    signer: WalletSigner,
    ctx: EccContext | None = None,
) -> WitnessUtxo:
    """Raises ``AddressDerivationError`` when the output script cannot be built."""
    ctx = ctx or signer.root.ctx
    internal_key = account_internal_key(signer)
    _, script = p2tr_output(internal_key, ctx)
    return WitnessUtxo(
        txid=utxo.txid,
        vout=utxo.vout,
        script=script,
        value=utxo.value,
        tap_internal_key=internal_key,
    )
