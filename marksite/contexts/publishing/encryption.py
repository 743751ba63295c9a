"""
Page Encryption

AES-256-CBC with PKCS7 padding. The key is the SHA-256 digest of the UTF-8
password and a fresh random 16-byte IV is prepended to the ciphertext, which is
the layout the client decrypts with WebCrypto.
"""

import base64
import hashlib
import os

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

IV_SIZE = 16
BLOCK_SIZE_BITS = 128


def derive_key(password: str) -> bytes:
    """32-byte AES key: SHA-256 of the UTF-8 password."""
    return hashlib.sha256(password.encode("utf-8")).digest()


def encrypt(key: bytes, iv: bytes, data: bytes) -> bytes:
    """PKCS7-pad and AES-CBC encrypt data, returning iv + ciphertext."""
    padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
    padded = padder.update(data) + padder.finalize()

    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return iv + encryptor.update(padded) + encryptor.finalize()


def encrypt_with_password(password: str, data: bytes) -> bytes:
    """Encrypt data under SHA-256(password) with a random IV (iv + ciphertext)."""
    return encrypt(derive_key(password), os.urandom(IV_SIZE), data)


def decrypt_with_password(password: str, payload: bytes) -> bytes:
    """
    Inverse of encrypt_with_password.

    Raises:
        ValueError: If the payload is too short or the padding is invalid
                    (usually a wrong password)
    """
    if len(payload) < IV_SIZE * 2:
        raise ValueError(f"Encrypted payload too short: {len(payload)} bytes")

    iv, ciphertext = payload[:IV_SIZE], payload[IV_SIZE:]
    decryptor = Cipher(algorithms.AES(derive_key(password)), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()

    unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


def encrypt_body(password: str, body: str) -> str:
    """Encrypt a rendered HTML body and base64-encode it for the crypto page shell."""
    return base64.b64encode(encrypt_with_password(password, body.encode("utf-8"))).decode("ascii")
