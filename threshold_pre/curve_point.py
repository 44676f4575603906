from typing import Tuple

from . import backend
from .config import default_curve
from .curve_scalar import CurveScalar
from .serializable import Serializable, Deserializable


class CurvePoint(Serializable, Deserializable):
    """
    A point of the configured curve, serialized in the compressed form.
    The identity can be computed with, but neither serialized nor deserialized.
    """

    def __init__(self, backend_point) -> None:
        self._backend_point = backend_point

    @classmethod
    def generator(cls) -> 'CurvePoint':
        return cls(default_curve().point_generator)

    @classmethod
    def identity(cls) -> 'CurvePoint':
        return cls(backend.point_identity())

    @classmethod
    def random(cls) -> 'CurvePoint':
        return cls.generator() * CurveScalar.random_nonzero()

    def is_identity(self) -> bool:
        return backend.point_is_identity(self._backend_point)

    def to_affine(self) -> Tuple[int, int]:
        """
        Returns the affine coordinates ``(x, y)``.
        Raises ``ValueError`` for the identity.
        """
        return backend.point_to_affine_coords(default_curve(), self._backend_point)

    @classmethod
    def serialized_size(cls):
        # The sign byte and the x coordinate
        return 1 + default_curve().field_element_size

    @classmethod
    def _from_exact_bytes(cls, data: bytes):
        return cls(backend.point_from_bytes(default_curve(), data))

    def __bytes__(self) -> bytes:
        return backend.point_to_bytes_compressed(default_curve(), self._backend_point)

    def __eq__(self, other):
        return backend.point_eq(self._backend_point, other._backend_point)

    def __hash__(self):
        return hash((self.__class__, bytes(self)))

    def __mul__(self, scalar: CurveScalar) -> 'CurvePoint':
        return CurvePoint(backend.point_mul_scalar(self._backend_point, int(scalar)))

    def __add__(self, other: 'CurvePoint') -> 'CurvePoint':
        return CurvePoint(backend.point_add(self._backend_point, other._backend_point))

    def __neg__(self) -> 'CurvePoint':
        return CurvePoint(backend.point_neg(self._backend_point))

    def __sub__(self, other: 'CurvePoint') -> 'CurvePoint':
        return self + -other
