import importlib
import re
import warnings

import pytest
from cryptography.utils import CryptographyDeprecationWarning

from contact_service.core import Cipher
from contact_service.core import cipher as cipher_module
from contact_service.core.cipher import ALGORITHMS
from contact_service.shared import ConfigurationError, DecryptionError

from .conftest import TEST_SECRET

ENCODED = re.compile(r"^[0-9a-f]{32}:[0-9a-f]*$")


@pytest.mark.parametrize("text", ["Hello, world!", "", "Zoë Ångström 日本", "a:b:c"])
def test_round_trip(cipher, text):
    assert cipher.decrypt(cipher.encrypt(text)) == text


@pytest.mark.parametrize("algorithm", sorted(ALGORITHMS))
def test_round_trip_every_algorithm(algorithm):
    cipher = Cipher(TEST_SECRET.encode(), algorithm=algorithm)
    assert cipher.decrypt(cipher.encrypt("64-990-611-3752")) == "64-990-611-3752"


def test_modes_import_without_deprecation_warnings():
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        importlib.reload(cipher_module)

    assert not [w for w in caught if issubclass(w.category, CryptographyDeprecationWarning)]


def test_encrypt_returns_hex_iv_and_ciphertext(cipher):
    encrypted = cipher.encrypt("John")
    assert ENCODED.match(encrypted)
    # One padded AES block for a short value
    assert len(encrypted.split(":")[1]) == 32


def test_fresh_iv_per_call(cipher):
    first = cipher.encrypt("John")
    second = cipher.encrypt("John")

    assert first != second
    assert first.split(":")[0] != second.split(":")[0]
    assert cipher.decrypt(first) == cipher.decrypt(second) == "John"


def test_decrypt_malformed_input(cipher):
    with pytest.raises(DecryptionError):
        cipher.decrypt("12345678:abcdefg")


def test_decrypt_without_separator(cipher):
    with pytest.raises(DecryptionError):
        cipher.decrypt(cipher.encrypt("John").replace(":", ""))


def test_decrypt_truncated_ciphertext(cipher):
    with pytest.raises(DecryptionError):
        cipher.decrypt(cipher.encrypt("John")[:-2])


def test_decrypt_non_hex(cipher):
    with pytest.raises(DecryptionError):
        cipher.decrypt("zz:zz")


def test_decryption_error_is_opaque(cipher):
    with pytest.raises(DecryptionError) as excinfo:
        cipher.decrypt("nonsense")
    assert excinfo.value.message == "Decryption failed"


@pytest.mark.parametrize("key", [b"", b"too short", b"x" * 31, b"x" * 33])
def test_key_must_be_32_bytes(key):
    with pytest.raises(ConfigurationError):
        Cipher(key)


def test_unsupported_algorithm():
    with pytest.raises(ConfigurationError):
        Cipher(TEST_SECRET.encode(), algorithm="des-ede3-cbc")


def test_iv_length_must_match_block_size():
    with pytest.raises(ConfigurationError):
        Cipher(TEST_SECRET.encode(), iv_length=12)
