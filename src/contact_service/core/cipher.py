import logging
import os

from cryptography.hazmat.decrepit.ciphers import modes as decrepit_modes
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher as _Cipher
from cryptography.hazmat.primitives.ciphers import algorithms, modes

from contact_service.shared.config import KEY_LENGTH, Encryption
from contact_service.shared.errors import ConfigurationError, DecryptionError

__all__ = ["ALGORITHMS", "Cipher"]

ALGORITHMS = {
    "aes-256-cbc": modes.CBC,
    "aes-256-cfb": decrepit_modes.CFB,
    "aes-256-ofb": decrepit_modes.OFB,
    "aes-256-ctr": modes.CTR,
}
# Block modes that need PKCS7 padding; the rest are stream modes
PADDED = {"aes-256-cbc"}

BLOCK_SIZE = algorithms.AES.block_size


class Cipher:
    """Encrypt and decrypt single text values with a fresh IV per call.

    Encrypted values are encoded as ``hex(iv) + ":" + hex(ciphertext)``.
    """

    def __init__(
        self,
        key: bytes,
        algorithm: str = "aes-256-cbc",
        iv_length: int = 16,
        logger: logging.Logger | None = None,
    ):
        if len(key) != KEY_LENGTH:
            raise ConfigurationError("Invalid encryption secret key.")
        if algorithm not in ALGORITHMS:
            raise ConfigurationError(f"Unsupported encryption algorithm: {algorithm}")
        if iv_length != BLOCK_SIZE // 8:
            raise ConfigurationError(
                f"IV length for {algorithm} must be {BLOCK_SIZE // 8} bytes"
            )

        self.__key = key
        self.algorithm = algorithm
        self.iv_length = iv_length
        self.__mode = ALGORITHMS[algorithm]
        self.__padded = algorithm in PADDED
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_config(cls, encryption: Encryption, logger: logging.Logger | None = None):
        return cls(
            key=encryption.key,
            algorithm=encryption.algorithm,
            iv_length=encryption.iv_length,
            logger=logger,
        )

    def encrypt(self, plaintext: str) -> str:
        iv = os.urandom(self.iv_length)
        data = plaintext.encode("utf-8")

        if self.__padded:
            padder = padding.PKCS7(BLOCK_SIZE).padder()
            data = padder.update(data) + padder.finalize()

        encryptor = self.__cipher(iv).encryptor()
        encrypted = encryptor.update(data) + encryptor.finalize()
        return f"{iv.hex()}:{encrypted.hex()}"

    def decrypt(self, encoded: str) -> str:
        try:
            iv_hex, separator, encrypted_hex = encoded.partition(":")
            if not separator:
                raise ValueError("missing IV separator")

            iv = bytes.fromhex(iv_hex)
            encrypted = bytes.fromhex(encrypted_hex)

            decryptor = self.__cipher(iv).decryptor()
            data = decryptor.update(encrypted) + decryptor.finalize()

            if self.__padded:
                unpadder = padding.PKCS7(BLOCK_SIZE).unpadder()
                data = unpadder.update(data) + unpadder.finalize()

            return data.decode("utf-8")

        except (ValueError, TypeError) as e:
            self.logger.debug("Decryption failed: %s", e)
            raise DecryptionError() from e

    def __cipher(self, iv: bytes) -> _Cipher:
        return _Cipher(algorithms.AES(self.__key), self.__mode(iv))
