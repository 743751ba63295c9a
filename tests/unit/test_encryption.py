"""Unit tests for page encryption."""

import base64
import hashlib

import pytest
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from marksite.contexts.publishing import decrypt_with_password, encrypt_with_password
from marksite.contexts.publishing.encryption import IV_SIZE, derive_key, encrypt_body


def manual_decrypt(password: str, payload: bytes) -> bytes:
    """Decrypt the way the browser does: SHA-256 key, leading 16 bytes as IV."""
    key = hashlib.sha256(password.encode("utf-8")).digest()
    iv, ciphertext = payload[:16], payload[16:]
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(128).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


@pytest.mark.unit
def test_key_is_sha256_of_password():
    assert derive_key("hunter2") == hashlib.sha256(b"hunter2").digest()
    assert len(derive_key("hunter2")) == 32


@pytest.mark.unit
def test_payload_layout_decrypts_with_leading_iv():
    data = "<p>Secret</p>".encode("utf-8")
    payload = encrypt_with_password("hunter2", data)

    assert len(payload) == IV_SIZE + 16
    assert manual_decrypt("hunter2", payload) == data


@pytest.mark.unit
def test_fresh_iv_per_encryption():
    first = encrypt_with_password("pw", b"same data")
    second = encrypt_with_password("pw", b"same data")

    assert first[:IV_SIZE] != second[:IV_SIZE]
    assert first != second


@pytest.mark.unit
def test_decrypt_with_password_round_trip():
    data = "日本語の本文".encode("utf-8") * 10
    assert decrypt_with_password("pw", encrypt_with_password("pw", data)) == data


@pytest.mark.unit
def test_decrypt_rejects_short_payload():
    with pytest.raises(ValueError, match="too short"):
        decrypt_with_password("pw", b"\x00" * 20)


@pytest.mark.unit
def test_encrypt_body_is_base64_of_payload():
    body = "<h2>Hidden</h2>\n"
    encoded = encrypt_body("pw", body)

    assert manual_decrypt("pw", base64.b64decode(encoded)) == body.encode("utf-8")
