from typing import Optional, Sequence, Union

from cryptography.hazmat.primitives import hashes

from .backend import ErrorInvalidCompressedPoint
from .config import default_curve
from .curve_scalar import CurveScalar
from .curve_point import CurvePoint
from .serializable import Serializable, UINT32_MAX, uint32_bytes


class Hash:
    """
    BLAKE2b with a 64-byte digest, optionally domain-separated with a length-prefixed tag.
    The digest is wide enough to be reduced modulo the order of any supported curve,
    and to be mapped to a coordinate of any supported curve.
    """

    def __init__(self, dst: Optional[bytes] = None):
        self._hash = hashes.Hash(hashes.BLAKE2b(64))
        if dst is not None:
            self.update(uint32_bytes(len(dst)) + dst)

    def update(self, data: Union[bytes, Serializable]) -> None:
        self._hash.update(bytes(data))

    def finalize(self) -> bytes:
        return self._hash.finalize()


def hash_to_scalar(dst: bytes, *items: Union[bytes, Serializable]) -> CurveScalar:
    digest = Hash(dst)
    for item in items:
        digest.update(item)
    return CurveScalar.from_digest(digest)


def hash_to_polynomial_arg(precursor: CurvePoint,
                           pubkey: CurvePoint,
                           dh_point: CurvePoint,
                           kfrag_id: Serializable,
                           ) -> CurveScalar:
    return hash_to_scalar(b"POLYNOMIAL_ARG", precursor, pubkey, dh_point, kfrag_id)


def hash_capsule_points(e: CurvePoint, v: CurvePoint) -> CurveScalar:
    return hash_to_scalar(b"CAPSULE_POINTS", e, v)


def hash_to_shared_secret(precursor: CurvePoint,
                          pubkey: CurvePoint,
                          dh_point: CurvePoint,
                          ) -> CurveScalar:
    return hash_to_scalar(b"SHARED_SECRET", precursor, pubkey, dh_point)


def hash_metadata(metadata: Optional[bytes]) -> CurveScalar:
    """
    Maps the re-encryption metadata to a scalar.
    The absence of metadata is encoded as zero.
    """
    if metadata is None:
        return CurveScalar.zero()
    return hash_to_scalar(b"METADATA", uint32_bytes(len(metadata)), metadata)


def hash_to_cfrag_verification(points: Sequence[CurvePoint], metadata: CurveScalar) -> CurveScalar:
    return hash_to_scalar(b"CFRAG_VERIFICATION", *points, metadata)


def unsafe_hash_to_point(dst: bytes, data: bytes) -> CurvePoint:
    """
    Hashes arbitrary data into a point of the configured curve with even ``y``,
    using the try-and-increment method.

    WARNING: the running time depends on the input,
    so it must not be used with secret data.
    """
    prefix = uint32_bytes(len(data)) + data
    x_size = default_curve().field_element_size

    for counter in range(UINT32_MAX + 1):
        digest = Hash(dst)
        digest.update(prefix + uint32_bytes(counter))
        candidate = b'\x02' + digest.finalize()[:x_size]
        try:
            return CurvePoint.from_bytes(candidate)
        except ErrorInvalidCompressedPoint:
            continue

    # Only happens with probability 2^(-32)
    raise ValueError('Could not hash input into the curve') # pragma: no cover
