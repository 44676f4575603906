import os
from typing import Callable

from .curve_scalar import CurveScalar
from .curve_point import CurvePoint
from .dem import kdf
from .errors import GenericError
from .hashing import Hash
from .serializable import Record, SerializableSecret, Deserializable


class _ErasableSecret(SerializableSecret, Deserializable):
    """
    Keeps secret bytes in a mutable buffer that can be overwritten with zeros.
    Erasure happens on :py:meth:`erase`, when leaving a ``with`` block,
    or when the object is collected. Any later use raises :py:class:`GenericError`.
    """

    def __init__(self, secret: bytes):
        self.__buffer = bytearray(secret)
        self.__erased = False

    def _secret(self) -> bytes:
        if self.__erased:
            raise GenericError(f"This {self.__class__.__name__} has been erased")
        return bytes(self.__buffer)

    def erase(self) -> None:
        """
        Overwrites the secret material with zeros.
        The object cannot be used afterwards.
        """
        # `__init__` may have failed before the buffer was created
        buffer = getattr(self, '_ErasableSecret__buffer', None)
        if buffer is not None:
            buffer[:] = bytes(len(buffer))
        self.__erased = True

    def is_erased(self) -> bool:
        return self.__erased

    def to_secret_bytes(self) -> bytes:
        return self._secret()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.erase()

    def __del__(self):
        self.erase()

    def __str__(self):
        return f"{self.__class__.__name__}:..."

    def __hash__(self):
        raise RuntimeError("Hashing secret objects is not secure")


class SecretKey(_ErasableSecret):
    """
    Secret (private) key: a nonzero scalar.
    """

    def __init__(self, scalar_key: CurveScalar):
        if scalar_key.is_zero():
            raise ValueError("A secret key cannot be zero")
        super().__init__(bytes(scalar_key))
        # Public keys are requested far more often than secret keys are created
        self._public_key = PublicKey(CurvePoint.generator() * scalar_key)

    @classmethod
    def random(cls) -> 'SecretKey':
        """
        Generates a random secret key and returns it.
        """
        return cls(CurveScalar.random_nonzero())

    def public_key(self) -> 'PublicKey':
        return self._public_key

    def secret_scalar(self) -> CurveScalar:
        return CurveScalar._from_exact_bytes(self._secret())

    @classmethod
    def serialized_size(cls):
        return CurveScalar.serialized_size()

    @classmethod
    def _from_exact_bytes(cls, data: bytes):
        return cls(CurveScalar._from_exact_bytes(data))


class PublicKey(Record):
    """
    Public key, a point of the configured curve other than the identity.

    Created using :py:meth:`SecretKey.public_key` or :py:meth:`PublicKey.from_secret_key`.
    """

    def __init__(self, point_key: CurvePoint):
        if point_key.is_identity():
            raise ValueError("A public key cannot be the identity point")
        self._point_key = point_key

    _COMPONENT_TYPES = (CurvePoint,)

    def _components(self):
        return (self._point_key,)

    @classmethod
    def from_secret_key(cls, sk: SecretKey) -> 'PublicKey':
        return sk.public_key()

    def point(self) -> CurvePoint:
        return self._point_key


class SecretKeyFactory(_ErasableSecret):
    """
    Derives :py:class:`SecretKey` objects and other factories from a secret seed,
    deterministically, based on labels.

    Don't use the seed directly as a key.
    """

    _KEY_SEED_SIZE = 32
    _DERIVED_KEY_SIZE = 64

    @classmethod
    def random(cls) -> 'SecretKeyFactory':
        return cls(os.urandom(cls._KEY_SEED_SIZE))

    @classmethod
    def seed_size(cls) -> int:
        """
        Returns the seed size required by
        :py:meth:`~SecretKeyFactory.from_secure_randomness`.
        """
        return cls._KEY_SEED_SIZE

    @classmethod
    def from_secure_randomness(cls, seed: bytes) -> 'SecretKeyFactory':
        """
        Creates a factory from the given random bytes
        (of size :py:meth:`~SecretKeyFactory.seed_size`).

        .. warning::

            Make sure the seed comes from a cryptographically secure source of randomness!
        """
        if len(seed) != cls.seed_size():
            raise ValueError(f"Expected {cls.seed_size()} bytes, got {len(seed)}")
        return cls(seed)

    def _derive(self, kind: bytes, label: bytes, size: int, make: Callable):
        info = kind + b"/" + label
        return make(info, kdf(self._secret(), size, info=info))

    def make_key(self, label: bytes) -> SecretKey:
        """
        Creates a :py:class:`SecretKey` deterministically from the given label.
        """
        def to_key(info, material):
            digest = Hash(info)
            digest.update(material)
            return SecretKey(CurveScalar.from_digest(digest))
        return self._derive(b"KEY_DERIVATION", label, self._DERIVED_KEY_SIZE, to_key)

    def make_factory(self, label: bytes) -> 'SecretKeyFactory':
        """
        Creates a :py:class:`SecretKeyFactory` deterministically from the given label.
        """
        return self._derive(b"FACTORY_DERIVATION", label, self._KEY_SEED_SIZE,
                            lambda _info, seed: SecretKeyFactory(seed))

    @classmethod
    def serialized_size(cls):
        return cls._KEY_SEED_SIZE

    @classmethod
    def _from_exact_bytes(cls, data: bytes):
        return cls(data)
