"""
Structured logging configuration for TapWallet.

Supports two output formats:
  - **human** – coloured, single-line, readable
  - **json**  – newline-delimited JSON for log aggregators

Usage:
    from tapwallet_core.logging_config import setup_logging
    setup_logging(level="DEBUG", fmt="json", log_file="tapwallet.log")

tapwallet_core logs addresses, network names and outcome tags only.
Every handler installed by ``setup_logging`` also carries a
``SecretRedactingFilter`` that masks anything shaped like a BIP39 phrase,
an extended private key or a raw 32-byte hex secret before it is written.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from mnemonic import Mnemonic

REDACTED = "[REDACTED]"

_WORD_RUN = re.compile(r"\b[a-z]{3,8}(?:\s+[a-z]{3,8}){11,}\b")
_XPRV = re.compile(r"\b[tx]prv[1-9A-HJ-NP-Za-km-z]{100,112}\b")
_HEX_SECRET = re.compile(r"\b[0-9a-fA-F]{64,}\b")
_BIP39_WORDS = frozenset(Mnemonic("english").wordlist)


class SecretRedactingFilter(logging.Filter):
    """
    Mask secrets in the rendered message of every record.

    A run of 12 or more BIP39 words, an xprv/tprv string and any hex run of
    64+ characters (seeds, private scalars, ciphertext) become ``[REDACTED]``.
    Word runs that contain a non-BIP39 word are left alone, so ordinary
    sentences survive.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def _mask_word_run(match: re.Match) -> str:
    # Mask every stretch of 12+ consecutive wordlist words inside the run.
    out: list[str] = []
    pending: list[str] = []

    def flush() -> None:
        out.extend([REDACTED] if len(pending) >= 12 else pending)
        pending.clear()

    for word in match.group(0).split():
        if word in _BIP39_WORDS:
            pending.append(word)
        else:
            flush()
            out.append(word)
    flush()
    if REDACTED not in out:
        return match.group(0)
    return " ".join(out)


def redact(text: str) -> str:
    text = _WORD_RUN.sub(_mask_word_run, text)
    text = _XPRV.sub(REDACTED, text)
    return _HEX_SECRET.sub(REDACTED, text)


class _JSONFormatter(logging.Formatter):
    """Emit each log record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            log_obj["exception"] = redact(self.formatException(record.exc_info))
        return json.dumps(log_obj, default=str)


class _HumanFormatter(logging.Formatter):
    """Coloured, concise single-line format."""

    COLOURS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        colour = self.COLOURS.get(record.levelname, "")
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        return (
            f"{colour}{ts} [{record.levelname:<7}]{self.RESET} "
            f"{record.name}: {record.getMessage()}"
        )


def setup_logging(
    level: str = "INFO",
    fmt: str = "human",
    log_file: Optional[str] = None,
) -> None:
    """
    Configure the root logger.

    Parameters
    ----------
    level : str
        One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
    fmt : str
        ``"human"`` or ``"json"``.
    log_file : str, optional
        Extra JSON log file; parent directories are created.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(_JSONFormatter() if fmt == "json" else _HumanFormatter())
    console.addFilter(SecretRedactingFilter())
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path))
        fh.setFormatter(_JSONFormatter())
        fh.addFilter(SecretRedactingFilter())
        root.addHandler(fh)
