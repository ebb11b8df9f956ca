"""
Taproot output scripts and bech32m addresses.

The canonical receiving address of a wallet is the key-path-only P2TR
output of the account node at ``ACCOUNT_PATH``.
"""

from __future__ import annotations

from tapwallet_core.ecc import EccContext
from tapwallet_core.errors import AddressDerivationError
from tapwallet_core.params import NetworkParams
from tapwallet_core.signer import WalletSigner, derive_account_child

BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
BECH32M_CONST = 0x2BC830A3
OP_1 = 0x51


def _bech32_polymod(values: list[int]) -> int:
    gen = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
    chk = 1
    for v in values:
        top = chk >> 25
        chk = ((chk & 0x1FFFFFF) << 5) ^ v
        for i in range(5):
            chk ^= gen[i] if (top >> i) & 1 else 0
    return chk


def _bech32_hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _convertbits(data: bytes, frombits: int, tobits: int) -> list[int]:
    acc = bits = 0
    out = []
    maxv = (1 << tobits) - 1
    for b in data:
        acc = (acc << frombits) | b
        bits += frombits
        while bits >= tobits:
            bits -= tobits
            out.append((acc >> bits) & maxv)
    if bits:
        out.append((acc << (tobits - bits)) & maxv)
    return out


def bech32m_encode(hrp: str, data: list[int]) -> str:
    values = _bech32_hrp_expand(hrp) + data
    polymod = _bech32_polymod(values + [0] * 6) ^ BECH32M_CONST
    checksum = [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]
    return hrp + "1" + "".join(BECH32_CHARSET[d] for d in data + checksum)


def encode_segwit_v1(hrp: str, program: bytes) -> str:
    """Witness version 1 address (bech32m)."""
    if len(program) != 32:
        raise ValueError("Taproot witness program must be 32 bytes")
    return bech32m_encode(hrp, [1] + _convertbits(program, 8, 5))


def p2tr_script(output_key: bytes) -> bytes:
    """``OP_1 <32-byte output key>``."""
    return bytes([OP_1, 0x20]) + output_key


def p2tr_output(internal_key: bytes, ctx: EccContext) -> tuple[bytes, bytes]:
    """(output key, scriptPubKey) for a key-path-only internal key."""
    try:
        _, output_key = ctx.tweak_public_key(internal_key)
    except ValueError as exc:
        raise AddressDerivationError(f"Failed to derive p2tr output script: {exc}") from exc
    return output_key, p2tr_script(output_key)


def p2tr_address(internal_key: bytes, network: NetworkParams, ctx: EccContext) -> str:
    output_key, _ = p2tr_output(internal_key, ctx)
    return encode_segwit_v1(network.hrp, output_key)


def account_internal_key(signer: WalletSigner) -> bytes:
    """x-only public key of the account node, re-derived from the root."""
    child = derive_account_child(signer)
    try:
        return child.x_only_public_key
    except ValueError as exc:
        raise AddressDerivationError(f"Degenerate internal key: {exc}") from exc
    finally:
        child.wipe()


def first_taproot_address(
    signer: WalletSigner,
    network: NetworkParams | None = None,
    ctx: EccContext | None = None,
) -> str:
    """The wallet's receiving address; network defaults to the signer's."""
    ctx = ctx or signer.root.ctx
    return p2tr_address(account_internal_key(signer), network or signer.network, ctx)
