"""
Fixed-size binary encoding of the library objects.

The size of every public object depends only on the configured curve,
so composite objects are stored as a plain concatenation of their components.
Besides the library types, two primitive component types are supported:
``bool`` (a single byte) and ``int`` (a big-endian 32-bit unsigned integer).
"""

from abc import abstractmethod, ABC
from typing import Any, Callable, Iterable, List, Tuple, Type, TypeVar


UINT32_MAX = 2**32 - 1


def bool_bytes(value: bool) -> bytes:
    return b'\x01' if value else b'\x00'


def bool_from_exact_bytes(data: bytes) -> bool:
    if data not in (b'\x00', b'\x01'):
        raise ValueError("Incorrectly serialized boolean; "
                         f"expected b'\\x00' or b'\\x01', got {data!r}")
    return data == b'\x01'


def uint32_bytes(num: int) -> bytes:
    if not 0 <= num <= UINT32_MAX:
        raise ValueError(f"Integer {num} does not fit into 32 bits")
    return num.to_bytes(4, byteorder='big')


def uint32_from_exact_bytes(data: bytes) -> int:
    if len(data) != 4:
        raise ValueError(f"Expected 4 bytes for an integer, got {len(data)}")
    return int.from_bytes(data, byteorder='big')


# `bool` is a subclass of `int`, so it must come first
_PRIMITIVES = (
    (bool, 1, bool_bytes, bool_from_exact_bytes),
    (int, 4, uint32_bytes, uint32_from_exact_bytes),
)


def _codec(tp: Type) -> Tuple[int, Callable[[bytes], Any]]:
    for primitive, size, _encode, decode in _PRIMITIVES:
        if issubclass(tp, primitive):
            return size, decode
    return tp.serialized_size(), tp._from_exact_bytes


def _encode(component: Any) -> bytes:
    for primitive, _size, encode, _decode in _PRIMITIVES:
        if isinstance(component, primitive):
            return encode(component)
    return bytes(component)


def serialized_size_of(types: Iterable[Type]) -> int:
    """
    Returns the total size of the components of the given types,
    for the currently configured curve.
    """
    return sum(_codec(tp)[0] for tp in types)


class HasSerializedSize(ABC):

    @classmethod
    @abstractmethod
    def serialized_size(cls) -> int:
        """
        Returns the size in bytes of ``bytes(obj)`` (or ``obj.to_secret_bytes()``)
        for any object of this type.
        """
        raise NotImplementedError


class Deserializable(HasSerializedSize):

    Self = TypeVar('Self', bound='Deserializable')

    @classmethod
    def from_bytes(cls: Type[Self], data: bytes) -> Self:
        """
        Restores the object from serialized bytes.
        Raises ``ValueError`` if the length or the contents of ``data`` are invalid.
        """
        expected_size = cls.serialized_size()
        if len(data) != expected_size:
            raise ValueError(f"Expected {expected_size} bytes, got {len(data)}")
        return cls._from_exact_bytes(data)

    @classmethod
    @abstractmethod
    def _from_exact_bytes(cls: Type[Self], data: bytes) -> Self:
        raise NotImplementedError

    @staticmethod
    def _split(data: bytes, *types: Type) -> List[Any]:
        """
        Decodes consecutive components of the given types from ``data``.
        """
        components = []
        pos = 0
        for tp in types:
            size, decode = _codec(tp)
            components.append(decode(data[pos:pos + size]))
            pos += size
        return components


class Serializable(HasSerializedSize):

    @abstractmethod
    def __bytes__(self):
        raise NotImplementedError


class SerializableSecret(HasSerializedSize):

    @abstractmethod
    def to_secret_bytes(self) -> bytes:
        """
        Serializes the object. The result contains secret data, handle with care!
        """
        raise NotImplementedError


class Record(Serializable, Deserializable):
    """
    A public object stored as the concatenation of its components.

    Subclasses list the component types in ``_COMPONENT_TYPES``,
    return the components in the same order from ``_components()``,
    and take them in the same order in ``__init__()``.
    Objects compare by their components and hash by their serialized form.
    """

    _COMPONENT_TYPES: Tuple[Type, ...] = ()

    @abstractmethod
    def _components(self) -> Tuple[Any, ...]:
        raise NotImplementedError

    def _validate(self) -> None:
        """
        Called on every deserialized object. Raises ``ValueError`` if it is malformed.
        """

    @classmethod
    def serialized_size(cls):
        return serialized_size_of(cls._COMPONENT_TYPES)

    @classmethod
    def _from_exact_bytes(cls, data: bytes):
        obj = cls(*cls._split(data, *cls._COMPONENT_TYPES))
        obj._validate()
        return obj

    def __bytes__(self):
        return b''.join(_encode(component) for component in self._components())

    def __eq__(self, other):
        if not isinstance(other, Record):
            return NotImplemented
        return type(self) is type(other) and self._components() == other._components()

    def __hash__(self):
        return hash((self.__class__, bytes(self)))

    def __str__(self):
        return f"{self.__class__.__name__}:{bytes(self).hex()[:16]}"


class Verified(Serializable):
    """
    Marks a wrapped object as checked.
    Can be cast to ``bytes``, but cannot be deserialized from bytes directly,
    except with :py:meth:`from_verified_bytes`.
    """

    _WRAPPED: Type[Deserializable]

    def __init__(self, obj):
        self._obj = obj

    @classmethod
    def from_verified_bytes(cls, data: bytes):
        """
        Restores a verified object from serialized bytes without checking it.
        Only use it for bytes from trusted storage.
        """
        return cls(cls._WRAPPED.from_bytes(data))

    @classmethod
    def serialized_size(cls):
        return cls._WRAPPED.serialized_size()

    def __bytes__(self):
        return bytes(self._obj)

    def __eq__(self, other):
        return type(self) is type(other) and self._obj == other._obj

    def __hash__(self):
        return hash((self.__class__, bytes(self)))

    def __str__(self):
        return f"{self.__class__.__name__}:{bytes(self).hex()[:16]}"
