"""
Passphrase-based AES in the OpenSSL "Salted__" text format.

The output of ``PassphraseAES.encrypt`` is the same text CryptoJS produces
for ``CryptoJS.AES.encrypt(text, passphrase).toString()``:

    base64( b"Salted__" || salt[8] || AES-256-CBC(PKCS#7(utf8(text))) )

Key and IV are derived from the passphrase and salt with OpenSSL's
EVP_BytesToKey (MD5, one iteration).
"""

import base64
import binascii
from typing import Protocol

from Crypto.Cipher import AES
from Crypto.Hash import MD5
from Crypto.Random import get_random_bytes
from Crypto.Util.Padding import pad, unpad

from app.core.exceptions import DecryptionError, EncryptionError

MAGIC = b"Salted__"
SALT_SIZE = 8
KEY_SIZE = 32
BLOCK = AES.block_size


class StrongCipher(Protocol):
    """Capability the strong cipher stage depends on."""

    def encrypt(self, plaintext: str, key: str) -> str:
        ...

    def decrypt(self, ciphertext: str, key: str) -> str:
        """Raises DecryptionError when the key or ciphertext is wrong."""
        ...


def evp_bytes_to_key(passphrase: bytes, salt: bytes, key_len: int = KEY_SIZE, iv_len: int = BLOCK) -> tuple[bytes, bytes]:
    """OpenSSL EVP_BytesToKey with MD5 and a single iteration."""
    derived = b""
    block = b""
    while len(derived) < key_len + iv_len:
        block = MD5.new(block + passphrase + salt).digest()
        derived += block
    return derived[:key_len], derived[key_len:key_len + iv_len]


class PassphraseAES:
    """AES-256-CBC keyed by a passphrase, producing base64 text."""

    def encrypt(self, plaintext: str, key: str) -> str:
        try:
            salt = get_random_bytes(SALT_SIZE)
            aes_key, iv = evp_bytes_to_key(key.encode("utf-8"), salt)
            cipher = AES.new(aes_key, AES.MODE_CBC, iv)
            body = cipher.encrypt(pad(plaintext.encode("utf-8"), BLOCK))
        except (UnicodeEncodeError, ValueError) as e:
            raise EncryptionError(f"AES encryption failed: {e}") from e

        return base64.b64encode(MAGIC + salt + body).decode("ascii")

    def decrypt(self, ciphertext: str, key: str) -> str:
        try:
            raw = base64.b64decode(ciphertext.strip(), validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecryptionError("AES decryption failed: ciphertext is not valid base64") from e

        if not raw.startswith(MAGIC) or len(raw) < len(MAGIC) + SALT_SIZE + BLOCK:
            raise DecryptionError("AES decryption failed: missing salted header")

        salt = raw[len(MAGIC):len(MAGIC) + SALT_SIZE]
        body = raw[len(MAGIC) + SALT_SIZE:]
        if len(body) % BLOCK:
            raise DecryptionError("AES decryption failed: truncated ciphertext")

        try:
            aes_key, iv = evp_bytes_to_key(key.encode("utf-8"), salt)
        except UnicodeEncodeError as e:
            raise DecryptionError("AES decryption failed: key is not valid text") from e

        cipher = AES.new(aes_key, AES.MODE_CBC, iv)

        try:
            return unpad(cipher.decrypt(body), BLOCK).decode("utf-8")
        except (ValueError, UnicodeDecodeError) as e:
            # Wrong keys surface here as bad padding or undecodable bytes
            raise DecryptionError("AES decryption failed: wrong key or corrupted ciphertext") from e
