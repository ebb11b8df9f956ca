"""
BIP39 mnemonic support.

Wraps the reference ``mnemonic`` package (English wordlist) for phrase
generation, checksum validation and mnemonic-to-seed stretching.
"""

from __future__ import annotations

import asyncio
import logging
import secrets

from mnemonic import Mnemonic

from tapwallet_core.secure import SecretBuffer

logger = logging.getLogger("tapwallet_bip39")

LANGUAGE = "english"
VALID_STRENGTHS = (128, 160, 192, 224, 256)
VALID_WORD_COUNTS = (12, 15, 18, 21, 24)

_MNEMO = Mnemonic(LANGUAGE)


def generate_mnemonic(strength: int = 128) -> str:
    """New phrase from ``strength`` bits of CSPRNG entropy (128 → 12 words)."""
    if strength not in VALID_STRENGTHS:
        raise ValueError("Strength must be 128/160/192/224/256")
    return _MNEMO.to_mnemonic(secrets.token_bytes(strength // 8))


def entropy_to_mnemonic(entropy: bytes) -> str:
    return _MNEMO.to_mnemonic(entropy)


def mnemonic_to_seed(mnemonic: str, passphrase: str = "") -> SecretBuffer:
    """64-byte BIP39 seed (PBKDF2-HMAC-SHA512, 2048 rounds)."""
    return SecretBuffer(Mnemonic.to_seed(mnemonic, passphrase=passphrase))


def validate_mnemonic(candidate) -> bool:
    """
    True only for an exact BIP39 phrase: supported word count, every word
    in the wordlist, checksum bits correct.

    Any internal fault (non-string input, wordlist lookup error) is
    reported as ``False``; this never raises.
    """
    try:
        if not isinstance(candidate, str):
            return False
        words = candidate.split(" ")
        if len(words) not in VALID_WORD_COUNTS:
            return False
        return bool(_MNEMO.check(candidate))
    except Exception:
        logger.debug("mnemonic check failed internally", exc_info=True)
        return False


async def is_valid_mnemonic(candidate) -> bool:
    """Async form of ``validate_mnemonic``; the check runs in a worker thread."""
    try:
        return await asyncio.to_thread(validate_mnemonic, candidate)
    except asyncio.CancelledError:
        raise
    except Exception:
        return False
