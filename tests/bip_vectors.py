"""Published BIP39 / BIP32 / BIP86 / BIP340 test vectors used across the suite."""

ABANDON_12 = "abandon " * 11 + "about"
ABANDON_24 = "abandon " * 23 + "art"
ZOO_12 = "zoo " * 11 + "wrong"
BROKEN_CHECKSUM_12 = "abandon " * 11 + "abandon"

# BIP39, empty passphrase
ABANDON_SEED_HEX = (
    "5eb00bbddcf069084889a8ab9155568165f5c453ccb85e70811aaed6f6da5fc1"
    "9a5ac40b389cd370d086206dec8aa6c43daea6690f20ad3d8d48b2d2ce9e38e4"
)

# BIP86
ROOT_XPRV = (
    "xprv9s21ZrQH143K3GJpoapnV8SFfukcVBSfeCficPSGfubmSFDxo1kuHnLisriDvSnRR"
    "uL2Qrg5ggqHKNVpxR86QEC8w35uxmGoggxtQTPvfUu"
)
ROOT_XPUB = (
    "xpub661MyMwAqRbcFkPHucMnrGNzDwb6teAX1RbKQmqtEF8kK3Z7LZ59qafCjB9eCRLiT"
    "VG3uxBxgKvRgbubRhqSKXnGGb1aoaqLrpMBDrVxga8"
)
ACCOUNT_XPRV = (
    "xprv9xgqHN7yz9MwCkxsBPN5qetuNdQSUttZNKw1dcYTV4mkaAFiBVGQziHs3NRSWMkCz"
    "vgjEe3n9xV8oYywvM8at9yRqyaZVz6TYYhX98VjsUk"
)
ACCOUNT_XPUB = (
    "xpub6BgBgsespWvERF3LHQu6CnqdvfEvtMcQjYrcRzx53QJjSxarj2afYWcLteoGVky7D"
    "3UKDP9QyrLprQ3VCECoY49yfdDEHGCtMMj92pReUsQ"
)

# BIP86 first receiving address, m/86'/0'/0'/0/0
RECEIVE_0_PATH = "m/86'/0'/0'/0/0"
RECEIVE_0_INTERNAL_KEY = "cc8a4bc64d897bddc5fbc2f670f7a8ba0b386779106cf1223c6fc5d7cd6fc115"
RECEIVE_0_OUTPUT_KEY = "a60869f0dbcf1dc659c9cecbaf8050135ea9e8cdc487053f1dc6880949dc684c"
RECEIVE_0_SCRIPT = "5120" + RECEIVE_0_OUTPUT_KEY
RECEIVE_0_ADDRESS = "bc1p5cyxnuxmeuwuvkwfem96lqzszd02n6xdcjrs20cac6yqjjwudpxqkedrcr"

# Wallet receiving address for ABANDON_12: P2TR of the account node m/86'/0'/0'
ACCOUNT_ADDRESS = "bc1pw992htk2pwsg09y9ww2m569p9pte0h0x29dap6rsp450dyjnq98q07u8gu"

# BIP340 vector 0
SCHNORR_SECRET = 3
SCHNORR_PUBKEY = "f9308a019258c31049344f85f89d5229b531c845836f99b08601f113bce036f9"
SCHNORR_AUX = bytes(32)
SCHNORR_MSG = bytes(32)
SCHNORR_SIG = (
    "e907831f80848d1069a5371b402410364bdf1c5f8307b0084c55f1ce2dca8215"
    "25f66a4a85ea8b71e482a74f382d2ce5ebeee8fdb2172f477df4900d310536c0"
)

GENERATOR_X = "79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"

# ABANDON_12 encrypted with password "test" by Node's crypto module
# (scryptSync(password, salt, 32) + aes-256-gcm), fixed salt and iv.
NODE_ENCRYPTED_ABANDON_12 = {
    "kdf": "scrypt",
    "cipher": "aes-256-gcm",
    "salt": "000102030405060708090a0b0c0d0e0f",
    "iv": "a0a1a2a3a4a5a6a7a8a9aaab",
    "tag": "6b74cfc3e1b2a87323e288a23c9511aa",
    "data": (
        "a67236ca258e966711d093873881935c59d64305f96143929c1fb5b29556a8e4"
        "44e5699ec07c5d9f5f42a5bb5e8091ee745a13dba31617dafb1b36d43f6c5609"
        "bba84e5acd7020e87c0095bf166286d2b168f11306925dc3a766ce7082"
    ),
}
