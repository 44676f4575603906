from cryptography.hazmat.primitives import hashes

from . import backend
from .config import default_curve
from .curve_scalar import CurveScalar
from .keys import SecretKey, PublicKey
from .serializable import Record


# Plain SHA-256 with no domain separation tag,
# so that the signatures can be checked by any ECDSA implementation.
SIGNATURE_HASH = hashes.SHA256


def _prehash(message: bytes) -> bytes:
    digest = hashes.Hash(SIGNATURE_HASH())
    digest.update(message)
    return digest.finalize()


def _low_s(s: int, order: int) -> int:
    # Both `s` and `order - s` are valid, only the smaller one is accepted
    # (Bitcoin's BIP-0062), so a signature cannot be altered into another valid one.
    return order - s if s > order >> 1 else s


class Signer:
    """
    Signs messages with a secret key, which it does not expose.
    Cannot be hashed or serialized.
    """

    def __init__(self, secret_key: SecretKey):
        self.__secret_key = secret_key

    def sign(self, message: bytes) -> 'Signature':
        """
        Signs the SHA-256 hash of the message.
        """
        curve = default_curve()
        r, s = backend.ecdsa_sign(curve=curve,
                                  secret_int=int(self.__secret_key.secret_scalar()),
                                  prehashed_message=_prehash(message),
                                  hash_algorithm=SIGNATURE_HASH())
        return Signature(CurveScalar.from_int(r), CurveScalar.from_int(_low_s(s, curve.order)))

    def verifying_key(self) -> PublicKey:
        return self.__secret_key.public_key()

    def __str__(self):
        return f"{self.__class__.__name__}:..."

    def __hash__(self):
        raise RuntimeError(f"{self.__class__.__name__} objects do not support hashing")

    def __bytes__(self):
        raise RuntimeError(f"{self.__class__.__name__} objects do not support serialization")


class Signature(Record):
    """
    ECDSA signature over the SHA-256 hash of a message, with a normalized (low) ``s``.
    """

    def __init__(self, r: CurveScalar, s: CurveScalar):
        self.r = r
        self.s = s

    _COMPONENT_TYPES = (CurveScalar, CurveScalar)

    def _components(self):
        return self.r, self.s

    def verify(self, verifying_key: PublicKey, message: bytes) -> bool:
        """
        Returns ``True`` if ``message`` was signed by the owner of ``verifying_key``.
        """
        return backend.ecdsa_verify(curve=default_curve(),
                                    sig_r=int(self.r),
                                    sig_s=int(self.s),
                                    public_point=verifying_key.point()._backend_point,
                                    prehashed_message=_prehash(message),
                                    hash_algorithm=SIGNATURE_HASH())
