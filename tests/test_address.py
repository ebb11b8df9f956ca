"""
Tests for P2TR scripts and bech32m addresses.

Covers:
  - BIP86 first receiving address vector through the tweak/encode path
  - first_taproot_address stability and network handling
  - AddressDerivationError for degenerate internal keys
"""

import unittest
from unittest.mock import patch

from tapwallet_core.address import (
    account_internal_key,
    encode_segwit_v1,
    first_taproot_address,
    p2tr_address,
    p2tr_output,
    p2tr_script,
)
from tapwallet_core.bip32 import ExtendedKey
from tapwallet_core.ecc import EccContext
from tapwallet_core.errors import AddressDerivationError
from tapwallet_core.params import MAINNET, REGTEST, TESTNET
from tapwallet_core.signer import derive_signer

from bip_vectors import (
    ABANDON_12,
    ACCOUNT_ADDRESS,
    ABANDON_SEED_HEX,
    RECEIVE_0_ADDRESS,
    RECEIVE_0_INTERNAL_KEY,
    RECEIVE_0_OUTPUT_KEY,
    RECEIVE_0_PATH,
    RECEIVE_0_SCRIPT,
    ZOO_12,
)


class TestBip86Vector(unittest.TestCase):

    def setUp(self):
        self.ctx = EccContext()
        root = ExtendedKey.from_seed(bytes.fromhex(ABANDON_SEED_HEX), ctx=self.ctx)
        self.internal = root.derive_path(RECEIVE_0_PATH).x_only_public_key

    def test_output_key_and_script(self):
        output_key, script = p2tr_output(self.internal, self.ctx)
        self.assertEqual(output_key.hex(), RECEIVE_0_OUTPUT_KEY)
        self.assertEqual(script.hex(), RECEIVE_0_SCRIPT)

    def test_address(self):
        self.assertEqual(p2tr_address(self.internal, MAINNET, self.ctx), RECEIVE_0_ADDRESS)

    def test_encode_from_output_key(self):
        self.assertEqual(
            encode_segwit_v1("bc", bytes.fromhex(RECEIVE_0_OUTPUT_KEY)), RECEIVE_0_ADDRESS,
        )

    def test_internal_key_vector(self):
        self.assertEqual(self.internal.hex(), RECEIVE_0_INTERNAL_KEY)


class TestFirstTaprootAddress(unittest.TestCase):

    def setUp(self):
        self.ctx = EccContext()
        self.signer = derive_signer(ABANDON_12, ctx=self.ctx)

    def tearDown(self):
        self.signer.wipe()

    def test_shape(self):
        address = first_taproot_address(self.signer)
        self.assertTrue(address.startswith("bc1p"))
        self.assertEqual(len(address), 62)
        self.assertEqual(address, address.lower())

    def test_known_wallet_address(self):
        self.assertEqual(first_taproot_address(self.signer), ACCOUNT_ADDRESS)

    def test_stable(self):
        self.assertEqual(first_taproot_address(self.signer), first_taproot_address(self.signer))

    def test_uses_account_node(self):
        internal = self.signer.xprv.x_only_public_key
        self.assertEqual(account_internal_key(self.signer), internal)
        self.assertEqual(
            first_taproot_address(self.signer), p2tr_address(internal, MAINNET, self.ctx),
        )

    def test_different_wallets_differ(self):
        with derive_signer(ZOO_12, ctx=self.ctx) as other:
            self.assertNotEqual(first_taproot_address(self.signer), first_taproot_address(other))

    def test_network_changes_prefix_not_key(self):
        main_addr = first_taproot_address(self.signer)
        test_addr = first_taproot_address(self.signer, network=TESTNET)
        reg_addr = first_taproot_address(self.signer, network=REGTEST)
        self.assertTrue(test_addr.startswith("tb1p"))
        self.assertTrue(reg_addr.startswith("bcrt1p"))
        self.assertNotEqual(main_addr, test_addr)
        _, script = p2tr_output(account_internal_key(self.signer), self.ctx)
        self.assertEqual(encode_segwit_v1("tb", script[2:]), test_addr)
        self.assertEqual(encode_segwit_v1("bc", script[2:]), main_addr)

    def test_defaults_to_signer_network(self):
        with derive_signer(ABANDON_12, network=TESTNET, ctx=self.ctx) as signer:
            self.assertEqual(
                first_taproot_address(signer),
                first_taproot_address(self.signer, network=TESTNET),
            )

    def test_degenerate_internal_key(self):
        with patch("tapwallet_core.address.account_internal_key", return_value=b"\xff" * 32):
            with self.assertRaises(AddressDerivationError):
                first_taproot_address(self.signer)


class TestScripts(unittest.TestCase):

    def test_p2tr_script_layout(self):
        script = p2tr_script(b"\x01" * 32)
        self.assertEqual(script[:2], b"\x51\x20")
        self.assertEqual(len(script), 34)

    def test_p2tr_output_rejects_invalid_key(self):
        with self.assertRaises(AddressDerivationError):
            p2tr_output(b"\xff" * 32, EccContext())

    def test_encode_rejects_wrong_program_length(self):
        with self.assertRaises(ValueError):
            encode_segwit_v1("bc", b"\x00" * 20)


if __name__ == "__main__":
    unittest.main()
