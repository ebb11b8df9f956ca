"""
Command-line wallet management.

Usage:
    tapwallet generate                 # new 12-word wallet
    tapwallet restore                  # wallet from an existing phrase
    tapwallet address                  # print the saved receiving address
    tapwallet unlock                   # check the password, print address + xpub
    tapwallet validate                 # check a phrase against BIP39

Global options (before the command):
    --config tapwallet.toml  --network testnet  --wallet-file path.json
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import sys
from typing import Callable, TextIO

from tapwallet_core.bip39 import is_valid_mnemonic
from tapwallet_core.boxed import BoxedError
from tapwallet_core.config import TapWalletConfig, load_config
from tapwallet_core.errors import EncryptedFormatError, WalletError
from tapwallet_core.logging_config import setup_logging
from tapwallet_core.storage import load_wallet, save_wallet, wallet_exists
from tapwallet_core.wallet import generate_wallet, unlock_wallet

logger = logging.getLogger("tapwallet_cli")

Prompt = Callable[[str], str]

EXIT_OK = 0
EXIT_ERROR = 1


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="tapwallet", description="Taproot HD wallet manager")
    p.add_argument("--config", default=None, help="Path to tapwallet.toml config file")
    p.add_argument("--network", default=None, help="mainnet, testnet or regtest")
    p.add_argument("--wallet-file", default=None, help="Saved wallet JSON path")
    sub = p.add_subparsers(dest="command", required=True)
    gen = sub.add_parser("generate", help="Create a new wallet")
    gen.add_argument("--force", action="store_true", help="Overwrite an existing wallet file")
    res = sub.add_parser("restore", help="Restore a wallet from a mnemonic")
    res.add_argument("--force", action="store_true", help="Overwrite an existing wallet file")
    sub.add_parser("address", help="Print the saved receiving address")
    sub.add_parser("unlock", help="Verify the password and show the account xpub")
    sub.add_parser("validate", help="Check a mnemonic phrase")
    return p.parse_args(argv)


def _new_password(prompt: Prompt) -> str | None:
    password = prompt("New wallet password: ")
    if password != prompt("Repeat password: "):
        return None
    return password


def _store(cfg: TapWalletConfig, result, out: TextIO, show_mnemonic: bool) -> int:
    if isinstance(result, BoxedError):
        print(f"Error: {result}", file=out)
        return EXIT_ERROR
    bundle = result.data
    with bundle.signer:
        save_wallet(cfg.wallet.wallet_file, bundle.wallet_json)
    if show_mnemonic:
        print("Write down your recovery phrase; it is not shown again:", file=out)
        print(f"  {bundle.mnemonic}", file=out)
    print(f"Address: {bundle.wallet_json.address}", file=out)
    return EXIT_OK


def cmd_create(cfg: TapWalletConfig, args, prompt: Prompt, out: TextIO) -> int:
    if wallet_exists(cfg.wallet.wallet_file) and not args.force:
        print(f"Wallet already exists at {cfg.wallet.wallet_file} (use --force)", file=out)
        return EXIT_ERROR
    mnemonic = None
    if args.command == "restore":
        mnemonic = " ".join(prompt("Recovery phrase: ").split())
    password = _new_password(prompt)
    if password is None:
        print("Passwords do not match", file=out)
        return EXIT_ERROR
    result = generate_wallet(
        password,
        from_mnemonic=mnemonic,
        network=cfg.wallet.network_params(),
        kdf_params=cfg.kdf.params(),
    )
    return _store(cfg, result, out, show_mnemonic=mnemonic is None)


def cmd_address(cfg: TapWalletConfig, args, prompt: Prompt, out: TextIO) -> int:
    saved = load_wallet(cfg.wallet.wallet_file)
    print(saved.address, file=out)
    return EXIT_OK


def cmd_unlock(cfg: TapWalletConfig, args, prompt: Prompt, out: TextIO) -> int:
    saved = load_wallet(cfg.wallet.wallet_file)
    result = unlock_wallet(
        saved,
        prompt("Wallet password: "),
        network=cfg.wallet.network_params(),
        kdf_params=cfg.kdf.params(),
    )
    if isinstance(result, BoxedError):
        print(f"Error: {result}", file=out)
        return EXIT_ERROR
    with result.data.signer as signer:
        print(f"Address: {saved.address}", file=out)
        print(f"Account xpub: {signer.xpub.to_base58()}", file=out)
    return EXIT_OK


def cmd_validate(cfg: TapWalletConfig, args, prompt: Prompt, out: TextIO) -> int:
    phrase = " ".join(prompt("Phrase to check: ").split())
    if asyncio.run(is_valid_mnemonic(phrase)):
        print("valid", file=out)
        return EXIT_OK
    print("invalid", file=out)
    return EXIT_ERROR


COMMANDS = {
    "generate": cmd_create,
    "restore": cmd_create,
    "address": cmd_address,
    "unlock": cmd_unlock,
    "validate": cmd_validate,
}


def main(
    argv: list[str] | None = None,
    prompt: Prompt | None = None,
    out: TextIO | None = None,
) -> int:
    args = parse_args(argv)
    cfg = load_config(args.config)
    if args.network:
        cfg.wallet.network = args.network.lower()
    if args.wallet_file:
        cfg.wallet.wallet_file = args.wallet_file
    setup_logging(cfg.logging.level, cfg.logging.format, cfg.logging.file)

    logger.debug(f"Running {args.command} on {cfg.wallet.network}")
    prompt = prompt or getpass.getpass
    out = out or sys.stdout
    try:
        cfg.wallet.network_params()
        return COMMANDS[args.command](cfg, args, prompt, out)
    except FileNotFoundError:
        print(f"Error: {WalletError.WALLET_NOT_FOUND.value}: {cfg.wallet.wallet_file}", file=out)
        return EXIT_ERROR
    except (EncryptedFormatError, ValueError) as exc:
        print(f"Error: {exc}", file=out)
        return EXIT_ERROR


def main_sync() -> None:
    """Entry point for console_scripts."""
    sys.exit(main())


if __name__ == "__main__":
    main_sync()
