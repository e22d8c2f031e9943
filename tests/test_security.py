import base64

import pytest

from logmonitor.security import SecurityError, StringCipher, new_string_cipher


@pytest.fixture
def cipher():
    secret = "secret"
    return new_string_cipher(secret)


def test_blank_secret_gives_no_cipher():
    assert new_string_cipher("   ") is None
    assert new_string_cipher("") is None


def test_blank_secret_rejected_by_constructor():
    with pytest.raises(ValueError):
        StringCipher("  ")


def test_round_trip(cipher):
    encrypted = cipher.encrypt("password")
    assert encrypted.startswith("enc:v1:")
    assert "password" not in encrypted
    assert cipher.decrypt(encrypted) == "password"


def test_encoding_has_no_padding(cipher):
    for value in ["a", "ab", "abc", "password"]:
        assert "=" not in cipher.encrypt(value)


def test_each_encryption_uses_fresh_nonce(cipher):
    first = cipher.encrypt("password")
    second = cipher.encrypt("password")
    assert first != second
    assert cipher.decrypt(first) == cipher.decrypt(second) == "password"


def test_empty_and_encrypted_values_pass_through(cipher):
    assert cipher.encrypt("") == ""
    encrypted = cipher.encrypt("password")
    assert cipher.encrypt(encrypted) == encrypted


def test_plaintext_passes_through_decrypt(cipher):
    assert cipher.decrypt("plain-secret") == "plain-secret"
    assert cipher.decrypt("") == ""


def test_surrounding_whitespace_in_secret_is_ignored(cipher):
    other = new_string_cipher("  secret  ")
    assert other.decrypt(cipher.encrypt("password")) == "password"


def test_wrong_key_fails(cipher):
    other = new_string_cipher("token")
    with pytest.raises(SecurityError):
        other.decrypt(cipher.encrypt("password"))


def test_tampered_ciphertext_fails(cipher):
    encrypted = cipher.encrypt("password")
    payload = bytearray(base64.b64decode(encrypted[len("enc:v1:"):] + "=="))
    payload[-1] ^= 0x01
    tampered = "enc:v1:" + base64.b64encode(bytes(payload)).decode().rstrip("=")
    with pytest.raises(SecurityError):
        cipher.decrypt(tampered)


def test_invalid_base64_fails(cipher):
    with pytest.raises(SecurityError, match="decode encrypted value"):
        cipher.decrypt("enc:v1:!!!!")


def test_padded_base64_fails(cipher):
    with pytest.raises(SecurityError, match="decode encrypted value"):
        cipher.decrypt("enc:v1:YWJj" + "=" * 4)


def test_too_short_payload_fails(cipher):
    short = "enc:v1:" + base64.b64encode(b"abc").decode().rstrip("=")
    with pytest.raises(SecurityError, match="too short"):
        cipher.decrypt(short)