"""
At-rest encryption of the wallet mnemonic.

Format (every binary field hex-encoded):

    {"kdf": "scrypt", "cipher": "aes-256-gcm",
     "salt": 16 bytes, "iv": 12 bytes, "tag": 16 bytes, "data": ciphertext}

The key is scrypt(password, salt) with N=16384, r=8, p=1 and a 32-byte
output.  Those are the costs every existing saved wallet was written
with; they are not stored in the file, so changing the defaults makes
old wallets unreadable.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import asdict, dataclass

from Crypto.Cipher import AES
from Crypto.Protocol.KDF import scrypt

from tapwallet_core.errors import AuthenticationError, EncryptedFormatError
from tapwallet_core.secure import SecretBuffer

logger = logging.getLogger("tapwallet_cipher")

KDF_NAME = "scrypt"
CIPHER_NAME = "aes-256-gcm"
KEY_LEN = 32
SALT_LEN = 16
IV_LEN = 12
TAG_LEN = 16


@dataclass(frozen=True)
class KdfParams:
    """scrypt cost parameters."""
    n: int = 16384
    r: int = 8
    p: int = 1


DEFAULT_KDF_PARAMS = KdfParams()


@dataclass(frozen=True)
class EncryptedMnemonic:
    kdf: str
    cipher: str
    salt: str
    iv: str
    tag: str
    data: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: dict) -> EncryptedMnemonic:
        if not isinstance(raw, dict):
            raise EncryptedFormatError("encrypted mnemonic must be an object")
        missing = [k for k in ("kdf", "cipher", "salt", "iv", "tag", "data") if k not in raw]
        if missing:
            raise EncryptedFormatError(f"encrypted mnemonic missing fields: {', '.join(missing)}")
        fields = {k: raw[k] for k in ("kdf", "cipher", "salt", "iv", "tag", "data")}
        for key, value in fields.items():
            if not isinstance(value, str):
                raise EncryptedFormatError(f"field {key!r} must be a string")
        return cls(**fields)

    def _unhex(self, name: str, expected_len: int | None = None) -> bytes:
        try:
            value = bytes.fromhex(getattr(self, name))
        except ValueError:
            raise EncryptedFormatError(f"field {name!r} is not valid hex") from None
        if expected_len is not None and len(value) != expected_len:
            raise EncryptedFormatError(
                f"field {name!r} must be {expected_len} bytes, got {len(value)}"
            )
        return value


def _derive_key(password: str, salt: bytes, params: KdfParams) -> SecretBuffer:
    return SecretBuffer(
        scrypt(password.encode("utf-8"), salt, KEY_LEN, N=params.n, r=params.r, p=params.p)
    )


def encrypt_mnemonic(
    mnemonic: str,
    password: str,
    params: KdfParams = DEFAULT_KDF_PARAMS,
) -> EncryptedMnemonic:
    """Encrypt under a fresh random salt and nonce."""
    salt = secrets.token_bytes(SALT_LEN)
    iv = secrets.token_bytes(IV_LEN)
    with _derive_key(password, salt, params) as key:
        cipher = AES.new(key.get_value(), AES.MODE_GCM, nonce=iv, mac_len=TAG_LEN)
        ciphertext, tag = cipher.encrypt_and_digest(mnemonic.encode("utf-8"))
    return EncryptedMnemonic(
        kdf=KDF_NAME,
        cipher=CIPHER_NAME,
        salt=salt.hex(),
        iv=iv.hex(),
        tag=tag.hex(),
        data=ciphertext.hex(),
    )


def decrypt_mnemonic(
    encrypted: EncryptedMnemonic,
    password: str,
    params: KdfParams = DEFAULT_KDF_PARAMS,
) -> str:
    """
    Verify the tag, then return the mnemonic.

    Raises ``AuthenticationError`` on a wrong password or tampered data and
    ``EncryptedFormatError`` on an unsupported or malformed record.  The
    recovered phrase is not checksum-validated again.
    """
    if encrypted.kdf != KDF_NAME:
        raise EncryptedFormatError(f"unsupported kdf {encrypted.kdf!r}")
    if encrypted.cipher != CIPHER_NAME:
        raise EncryptedFormatError(f"unsupported cipher {encrypted.cipher!r}")
    salt = encrypted._unhex("salt", SALT_LEN)
    iv = encrypted._unhex("iv", IV_LEN)
    tag = encrypted._unhex("tag", TAG_LEN)
    data = encrypted._unhex("data")

    with _derive_key(password, salt, params) as key:
        cipher = AES.new(key.get_value(), AES.MODE_GCM, nonce=iv, mac_len=TAG_LEN)
        try:
            plaintext = cipher.decrypt_and_verify(data, tag)
        except ValueError:
            logger.warning("mnemonic decryption failed: authentication tag mismatch")
            raise AuthenticationError("Wrong password or corrupted wallet data") from None
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError:
        raise EncryptedFormatError("decrypted mnemonic is not valid UTF-8") from None
