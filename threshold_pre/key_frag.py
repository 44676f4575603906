import os
from typing import List, Optional

from .config import default_params
from .curve_point import CurvePoint
from .curve_scalar import CurveScalar
from .errors import VerificationError, InvalidThreshold
from .hashing import hash_to_shared_secret, hash_to_polynomial_arg
from .keys import PublicKey, SecretKey
from .serializable import Record, Verified, bool_bytes, uint32_bytes, UINT32_MAX
from .signing import Signature, Signer


class KeyFragID(Record):
    """
    A random 32-byte identifier of a kfrag, unique within a batch.
    """

    SIZE = 32

    def __init__(self, id_: bytes):
        self._id = id_

    def _components(self):
        return (self._id,)

    @classmethod
    def random(cls) -> 'KeyFragID':
        return cls(os.urandom(cls.SIZE))

    @classmethod
    def serialized_size(cls):
        return cls.SIZE

    @classmethod
    def _from_exact_bytes(cls, data):
        return cls(data)


class KeyFragClaim:
    """
    The statement a kfrag signature vouches for: the fragment ID, the commitment to the share,
    the precursor, the threshold, and optionally the delegating and receiving keys.

    The same statement is signed for the proxy and for the receiver,
    and is checked again (with both keys) when a cfrag is verified.
    """

    def __init__(self,
                 kfrag_id: KeyFragID,
                 commitment: CurvePoint,
                 precursor: CurvePoint,
                 threshold: int,
                 ):
        self.kfrag_id = kfrag_id
        self.commitment = commitment
        self.precursor = precursor
        self.threshold = threshold

    def message(self,
                delegating_pk: Optional[PublicKey] = None,
                receiving_pk: Optional[PublicKey] = None,
                ) -> bytes:
        parts = [bytes(self.kfrag_id),
                 bytes(self.commitment),
                 bytes(self.precursor),
                 uint32_bytes(self.threshold)]
        # Each key is preceded by a flag, so that omitting it is unambiguous
        for pk in (delegating_pk, receiving_pk):
            parts.append(bool_bytes(pk is not None))
            if pk is not None:
                parts.append(bytes(pk))
        return b''.join(parts)

    def sign(self,
             signer: Signer,
             delegating_pk: Optional[PublicKey] = None,
             receiving_pk: Optional[PublicKey] = None,
             ) -> Signature:
        return signer.sign(self.message(delegating_pk, receiving_pk))

    def is_signed(self,
                  signature: Signature,
                  verifying_pk: PublicKey,
                  delegating_pk: Optional[PublicKey] = None,
                  receiving_pk: Optional[PublicKey] = None,
                  ) -> bool:
        return signature.verify(verifying_pk, self.message(delegating_pk, receiving_pk))


class KeyFragProof(Record):
    """
    The commitment ``u * rk`` to the share, and the signatures over the :py:class:`KeyFragClaim`.
    The signature for the receiver always binds both keys,
    the one for the proxy binds only the keys flagged as signed.
    """

    def __init__(self,
                 commitment: CurvePoint,
                 signature_for_proxy: Signature,
                 signature_for_receiver: Signature,
                 delegating_key_signed: bool,
                 receiving_key_signed: bool,
                 ):
        self.commitment = commitment
        self.signature_for_proxy = signature_for_proxy
        self.signature_for_receiver = signature_for_receiver
        self.delegating_key_signed = delegating_key_signed
        self.receiving_key_signed = receiving_key_signed

    _COMPONENT_TYPES = (CurvePoint, Signature, Signature, bool, bool)

    def _components(self):
        return (self.commitment,
                self.signature_for_proxy,
                self.signature_for_receiver,
                self.delegating_key_signed,
                self.receiving_key_signed)


class KeyFrag(Record):
    """
    A signed fragment of the delegating key.
    """

    def __init__(self,
                 id_: KeyFragID,
                 key: CurveScalar,
                 precursor: CurvePoint,
                 threshold: int,
                 proof: KeyFragProof,
                 ):
        self.id = id_
        self.key = key
        self.precursor = precursor
        self.threshold = threshold
        self.proof = proof

    _COMPONENT_TYPES = (KeyFragID, CurveScalar, CurvePoint, int, KeyFragProof)

    def _components(self):
        return self.id, self.key, self.precursor, self.threshold, self.proof

    def _validate(self):
        if self.threshold < 1:
            raise ValueError(f"Invalid threshold in a serialized KeyFrag: {self.threshold}")

    def claim(self) -> KeyFragClaim:
        return KeyFragClaim(self.id, self.proof.commitment, self.precursor, self.threshold)

    def verify(self,
               verifying_pk: PublicKey,
               delegating_pk: Optional[PublicKey] = None,
               receiving_pk: Optional[PublicKey] = None,
               ) -> 'VerifiedKeyFrag':
        """
        Verifies the validity of this fragment.

        If the delegating and/or receiving key were not signed in :py:func:`generate_kfrags`,
        but are given to this function, they are ignored.
        """
        proof = self.proof

        if proof.commitment != default_params().u * self.key:
            raise VerificationError("Invalid kfrag commitment")

        if proof.delegating_key_signed and delegating_pk is None:
            raise VerificationError("A signature of a delegating key was included in this kfrag, "
                                    "but the key is not provided")
        if proof.receiving_key_signed and receiving_pk is None:
            raise VerificationError("A signature of a receiving key was included in this kfrag, "
                                    "but the key is not provided")

        if not self.claim().is_signed(proof.signature_for_proxy,
                                      verifying_pk,
                                      delegating_pk if proof.delegating_key_signed else None,
                                      receiving_pk if proof.receiving_key_signed else None):
            raise VerificationError("Failed to verify the kfrag signature")

        return VerifiedKeyFrag(self)


class VerifiedKeyFrag(Verified):
    """
    Verified kfrag, good for reencryption.
    It can only be obtained from :py:meth:`KeyFrag.verify`.
    """

    _WRAPPED = KeyFrag

    @property
    def kfrag(self) -> KeyFrag:
        return self._obj


def poly_eval(coeffs: List[CurveScalar], x: CurveScalar) -> CurveScalar:
    """
    Evaluates the polynomial with the given coefficients (lowest degree first) at ``x``.
    """
    result = coeffs[-1]
    for coeff in reversed(coeffs[:-1]):
        result = (result * x) + coeff
    return result


class KeyFragBase:
    """
    The secret state shared by all the kfrags of one batch:
    the precursor and its DH point with the receiving key,
    and the coefficients of the polynomial whose values are the shares.
    """

    @staticmethod
    def check_threshold(threshold: int, num_kfrags: Optional[int] = None) -> None:
        """
        Raises :py:class:`InvalidThreshold` unless ``1 <= threshold <= num_kfrags``
        and the threshold fits into 32 bits.
        """
        if threshold < 1:
            raise InvalidThreshold(f"`threshold` must be larger than 0 (given: {threshold})")
        if threshold > UINT32_MAX:
            raise InvalidThreshold(f"`threshold` must fit into 32 bits (given: {threshold})")
        if num_kfrags is not None and num_kfrags < threshold:
            raise InvalidThreshold(f"Creating less kfrags ({num_kfrags}) "
                                   f"than threshold ({threshold}) makes them useless")

    def __init__(self,
                 delegating_sk: SecretKey,
                 receiving_pk: PublicKey,
                 signer: Signer,
                 threshold: int,
                 num_kfrags: Optional[int] = None,
                 ):

        self.check_threshold(threshold, num_kfrags)

        g = CurvePoint.generator()
        pk_point = receiving_pk.point()

        # `d` has to be invertible, which fails with negligible probability
        d = CurveScalar.zero()
        while d.is_zero():
            private_precursor = CurveScalar.random_nonzero()
            precursor = g * private_precursor
            dh_point = pk_point * private_precursor
            d = hash_to_shared_secret(precursor, pk_point, dh_point)

        self.signer = signer
        self.precursor = precursor
        self.dh_point = dh_point
        self.delegating_pk = delegating_sk.public_key()
        self.receiving_pk = receiving_pk
        self.threshold = threshold
        self.coefficients = ([delegating_sk.secret_scalar() * d.invert()] +
                             [CurveScalar.random_nonzero() for _ in range(threshold - 1)])

    def share_index(self, kfrag_id: KeyFragID) -> CurveScalar:
        # Hashing in the DH point keeps the indices, and hence the reconstruction,
        # out of reach for anyone but the receiver
        return hash_to_polynomial_arg(self.precursor, self.receiving_pk.point(),
                                      self.dh_point, kfrag_id)

    def make_kfrag(self,
                   kfrag_id: KeyFragID,
                   sign_delegating_key: bool,
                   sign_receiving_key: bool,
                   ) -> KeyFrag:
        rk = poly_eval(self.coefficients, self.share_index(kfrag_id))
        claim = KeyFragClaim(kfrag_id, default_params().u * rk, self.precursor, self.threshold)

        proof = KeyFragProof(
            commitment=claim.commitment,
            signature_for_proxy=claim.sign(self.signer,
                                           self.delegating_pk if sign_delegating_key else None,
                                           self.receiving_pk if sign_receiving_key else None),
            signature_for_receiver=claim.sign(self.signer, self.delegating_pk, self.receiving_pk),
            delegating_key_signed=sign_delegating_key,
            receiving_key_signed=sign_receiving_key,
            )

        return KeyFrag(kfrag_id, rk, self.precursor, self.threshold, proof)

    def make_kfrags(self,
                    num_kfrags: int,
                    sign_delegating_key: bool = True,
                    sign_receiving_key: bool = True,
                    ) -> List[KeyFrag]:
        """
        Makes ``num_kfrags`` fragments with distinct random IDs.
        """
        kfrags = {}
        while len(kfrags) < num_kfrags:
            kfrag_id = KeyFragID.random()
            if kfrag_id not in kfrags:
                kfrags[kfrag_id] = self.make_kfrag(kfrag_id, sign_delegating_key,
                                                   sign_receiving_key)
        return list(kfrags.values())
