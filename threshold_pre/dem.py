"""
Data encapsulation: XChaCha20-Poly1305 keyed with HKDF-SHA256 of the key seed.

A ciphertext is laid out as ``nonce || encrypted plaintext || tag``.
"""

import os
from typing import Optional, Tuple

from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives import hashes

import nacl.exceptions
from nacl.bindings.crypto_aead import (
    crypto_aead_xchacha20poly1305_ietf_encrypt as xchacha_encrypt,
    crypto_aead_xchacha20poly1305_ietf_decrypt as xchacha_decrypt,
    crypto_aead_xchacha20poly1305_ietf_KEYBYTES as XCHACHA_KEY_SIZE,
    crypto_aead_xchacha20poly1305_ietf_NPUBBYTES as XCHACHA_NONCE_SIZE,
    crypto_aead_xchacha20poly1305_ietf_ABYTES as XCHACHA_TAG_SIZE,
    )

from .errors import AuthenticationFailure


def kdf(data: bytes, key_length: int, salt: Optional[bytes] = None, info: Optional[bytes] = None) -> bytes:
    return HKDF(algorithm=hashes.SHA256(), length=key_length, salt=salt, info=info).derive(data)


class DEM:

    KEY_SIZE = XCHACHA_KEY_SIZE
    NONCE_SIZE = XCHACHA_NONCE_SIZE
    TAG_SIZE = XCHACHA_TAG_SIZE

    def __init__(self, key_seed: bytes):
        self._key = kdf(key_seed, self.KEY_SIZE)

    def encrypt(self, plaintext: bytes, authenticated_data: bytes = b"") -> bytes:
        nonce = os.urandom(self.NONCE_SIZE)
        return nonce + xchacha_encrypt(plaintext, authenticated_data, nonce, self._key)

    @classmethod
    def _split(cls, data: bytes) -> Tuple[bytes, bytes]:
        # NaCl itself does not check the lengths
        if len(data) < cls.NONCE_SIZE:
            raise AuthenticationFailure("The ciphertext must include the nonce")
        if len(data) < cls.NONCE_SIZE + cls.TAG_SIZE:
            raise AuthenticationFailure("The authentication tag is missing or malformed")
        return data[:cls.NONCE_SIZE], data[cls.NONCE_SIZE:]

    def decrypt(self, data: bytes, authenticated_data: bytes = b"") -> bytes:
        """
        Raises :py:class:`AuthenticationFailure` if the ciphertext is truncated, was modified,
        or was made with another key or other authenticated data.
        """
        nonce, ciphertext = self._split(data)
        try:
            return xchacha_decrypt(ciphertext, authenticated_data, nonce, self._key)
        except nacl.exceptions.CryptoError as e:
            raise AuthenticationFailure("Decryption of ciphertext failed: "
                                        "either someone tampered with the ciphertext or "
                                        "you are using an incorrect decryption key.") from e
