from typing import TYPE_CHECKING, Union

from . import backend
from .config import default_curve
from .serializable import Serializable, Deserializable
if TYPE_CHECKING: # pragma: no cover
    from .hashing import Hash


class CurveScalar(Serializable, Deserializable):
    """
    An integer modulo the (prime) order of the configured curve.
    Arithmetic with plain ``int`` operands is supported, as long as they are already reduced.
    """

    def __init__(self, backend_scalar: int):
        self._backend_scalar = backend_scalar

    @staticmethod
    def _order() -> int:
        return default_curve().order

    @classmethod
    def _coerce(cls, value: Union[int, 'CurveScalar']) -> int:
        if isinstance(value, int):
            return backend.scalar_from_int(value, check_modulus=cls._order())
        return value._backend_scalar

    @classmethod
    def random_nonzero(cls) -> 'CurveScalar':
        """
        Returns a uniformly random nonzero scalar from a secure source.
        """
        return cls(backend.scalar_random_nonzero(cls._order()))

    @classmethod
    def from_int(cls, num: int, check_normalization: bool = True) -> 'CurveScalar':
        """
        Raises ``ValueError`` if ``num`` is not in ``[0, order)``,
        unless ``check_normalization`` is ``False``, in which case it is reduced.
        """
        if check_normalization:
            return cls(cls._coerce(num))
        return cls(num % cls._order())

    @classmethod
    def from_digest(cls, digest: 'Hash') -> 'CurveScalar':
        # The digest is much wider than the order, so the reduction bias is negligible.
        # Zero is a possible (if unlikely) result.
        return cls(backend.scalar_from_bytes(digest.finalize(), apply_modulus=cls._order()))

    @classmethod
    def serialized_size(cls):
        return default_curve().scalar_size

    @classmethod
    def _from_exact_bytes(cls, data: bytes):
        return cls(backend.scalar_from_bytes(data, check_modulus=cls._order()))

    def __bytes__(self) -> bytes:
        # Big-endian, padded to the size of the order
        return backend.scalar_to_bytes(self._backend_scalar, self.serialized_size())

    def __int__(self) -> int:
        return self._backend_scalar

    def __eq__(self, other) -> bool:
        return self._backend_scalar == self._coerce(other)

    def __hash__(self):
        return hash((self.__class__, self._backend_scalar))

    @classmethod
    def one(cls) -> 'CurveScalar':
        return cls(1)

    @classmethod
    def zero(cls) -> 'CurveScalar':
        return cls(0)

    def is_zero(self) -> bool:
        return self._backend_scalar == 0

    def __mul__(self, other: Union[int, 'CurveScalar']) -> 'CurveScalar':
        return CurveScalar((self._backend_scalar * self._coerce(other)) % self._order())

    def __add__(self, other: Union[int, 'CurveScalar']) -> 'CurveScalar':
        return CurveScalar((self._backend_scalar + self._coerce(other)) % self._order())

    def __sub__(self, other: Union[int, 'CurveScalar']) -> 'CurveScalar':
        return CurveScalar((self._backend_scalar - self._coerce(other)) % self._order())

    def invert(self) -> 'CurveScalar':
        """
        Returns the multiplicative inverse. Raises ``ZeroDivisionError`` for zero.
        """
        return CurveScalar(backend.scalar_invert(self._backend_scalar, self._order()))
