from typing import Optional, Tuple

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import ec, utils
from ecdsa import curves, numbertheory, util
from ecdsa.ellipticcurve import INFINITY, PointJacobi
from ecdsa.errors import MalformedPointError


class Curve:
    """
    Acts as a container to store constant values of an elliptic curve:
    the field description, the generator point and the order of the group.

    Contains a whitelist of supported elliptic curves. Group arithmetic
    is delegated to ``ecdsa``, signatures are created and checked with ``cryptography``.
    """

    _supported_curves = {
        'secp256k1': (curves.SECP256k1, ec.SECP256K1),
        'secp256r1': (curves.NIST256p, ec.SECP256R1),
        'secp384r1': (curves.NIST384p, ec.SECP384R1),
    }

    def __init__(self, name: str):
        """
        Instantiates a curve by its canonical name. You can _only_ instantiate curves
        with supported names (see ``Curve._supported_curves``).
        """
        try:
            ecdsa_curve, ec_curve_class = self._supported_curves[name]
        except KeyError as e:
            raise NotImplementedError(f"Curve {name} is not supported.") from e

        self.name = name

        self._ec_curve_class = ec_curve_class
        self.curve_fp = ecdsa_curve.curve
        self.point_generator = ecdsa_curve.generator
        self.order = ecdsa_curve.order

        self.field_element_size = (self.curve_fp.p().bit_length() + 7) // 8
        self.scalar_size = (self.order.bit_length() + 7) // 8

    @classmethod
    def from_name(cls, name: str) -> 'Curve':
        """
        Alternate constructor to generate a curve instance by its name.

        Raises NotImplementedError if the name cannot be mapped to a known
        supported curve.
        """
        name = name.casefold()  # normalize
        if name not in cls._supported_curves:
            raise NotImplementedError(f"{name} is not supported curve name.")
        return cls(name)

    def ec_curve(self) -> ec.EllipticCurve:
        return self._ec_curve_class()

    def __eq__(self, other):
        return self.name == other.name

    def __hash__(self):
        return hash((self.__class__, self.name))

    def __str__(self):
        return f"<Curve(name={self.name})>"


#
# Scalars (Python ints modulo the curve order)
#


def scalar_is_normalized(num: int, modulus: int) -> bool:
    """
    Returns ``True`` if ``num`` is in ``[0, modulus)``, ``False`` otherwise.
    """
    return 0 <= num < modulus


def scalar_from_int(num: int, check_modulus: Optional[int] = None) -> int:
    """
    If ``check_modulus`` is provided, checks that the integer is within ``[0, modulus)``.
    """
    if check_modulus and not scalar_is_normalized(num, check_modulus):
        raise ValueError(f"The Python integer given ({num}) is not under the provided modulus.")
    return num


def scalar_from_bytes(bytes_seq: bytes,
                      check_modulus: Optional[int] = None,
                      apply_modulus: Optional[int] = None,
                      ) -> int:
    """
    Converts the given big-endian byte sequence to an integer.
    """
    num = int.from_bytes(bytes_seq, byteorder='big')

    if check_modulus and not scalar_is_normalized(num, check_modulus):
        raise ValueError(f"The integer encoded with given bytes ({repr(bytes_seq)}) "
                         "is not under the provided modulus.")

    if apply_modulus:
        return num % apply_modulus

    return num


def scalar_to_bytes(num: int, length: int) -> bytes:
    # Sanity check, CurveScalar ensures it won't happen.
    assert num.bit_length() <= length * 8, f"Input integer doesn't fit in {length} B"
    return num.to_bytes(length, byteorder='big')


def scalar_random_nonzero(modulus: int) -> int:
    # Returns a random integer in range `[1, modulus)`, drawn from `os.urandom`.
    return util.randrange(modulus)


def scalar_invert(num: int, modulus: int) -> int:
    if num % modulus == 0:
        raise ZeroDivisionError("Zero scalar cannot be inverted")
    return numbertheory.inverse_mod(num, modulus)


#
# EC points
#


class ErrorInvalidCompressedPoint(Exception):
    pass


class ErrorInvalidPointEncoding(Exception):
    pass


def point_is_identity(point) -> bool:
    return point is INFINITY or point == INFINITY


def point_identity():
    return INFINITY


def point_to_affine_coords(curve: Curve, point) -> Tuple[int, int]:
    """
    Returns the affine coordinates of a given point on the provided curve.
    """
    if point_is_identity(point):
        raise ValueError("Cannot get affine coordinates of an identity point")
    return point.x(), point.y()


def point_from_bytes(curve: Curve, data: bytes):
    if data[:1] not in (b'\x02', b'\x03'):
        raise ErrorInvalidPointEncoding(f"Invalid compressed point prefix: {repr(data[:1])}")

    if int.from_bytes(data[1:], byteorder='big') >= curve.curve_fp.p():
        raise ErrorInvalidCompressedPoint("The x coordinate is not reduced modulo the field order")

    try:
        point = PointJacobi.from_bytes(curve.curve_fp,
                                       data,
                                       valid_encodings=("compressed",),
                                       order=curve.order)
    except (MalformedPointError, numbertheory.Error) as e:
        raise ErrorInvalidCompressedPoint from e

    return point


def point_to_bytes_compressed(curve: Curve, point) -> bytes:
    size = curve.field_element_size + 1 # compressed point size

    # The identity cannot be deserialized; it only shows up in hash inputs
    # when someone submits a malformed fragment.
    if point_is_identity(point):
        return b'\x00' * size

    return point.to_bytes("compressed")


def point_eq(point1, point2) -> bool:
    identity1 = point_is_identity(point1)
    identity2 = point_is_identity(point2)
    if identity1 or identity2:
        return identity1 and identity2
    return point1 == point2


def point_mul_scalar(point, num: int):
    if point_is_identity(point) or num == 0:
        return INFINITY
    return point * num


def point_add(point1, point2):
    if point_is_identity(point1):
        return point2
    if point_is_identity(point2):
        return point1
    return point1 + point2


def point_neg(point):
    if point_is_identity(point):
        return INFINITY
    return -point


#
# Signing
#

def ecdsa_sign(curve: Curve,
               secret_int: int,
               prehashed_message: bytes,
               hash_algorithm,
               ) -> Tuple[int, int]:
    signature_algorithm = ec.ECDSA(utils.Prehashed(hash_algorithm))
    private_key = ec.derive_private_key(secret_int, curve.ec_curve())
    signature_der_bytes = private_key.sign(prehashed_message, signature_algorithm)
    r_int, s_int = utils.decode_dss_signature(signature_der_bytes)
    return r_int, s_int


def ecdsa_verify(curve: Curve, sig_r: int, sig_s: int, public_point,
                 prehashed_message: bytes, hash_algorithm) -> bool:
    signature_algorithm = ec.ECDSA(utils.Prehashed(hash_algorithm))
    public_key = ec.EllipticCurvePublicKey.from_encoded_point(
        curve.ec_curve(), point_to_bytes_compressed(curve, public_point))
    signature_der_bytes = utils.encode_dss_signature(sig_r, sig_s)

    try:
        public_key.verify(signature=signature_der_bytes,
                          data=prehashed_message,
                          signature_algorithm=signature_algorithm)
    except InvalidSignature:
        return False
    return True
