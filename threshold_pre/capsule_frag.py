from typing import Optional

from .capsule import Capsule
from .config import default_params
from .curve_point import CurvePoint
from .curve_scalar import CurveScalar
from .errors import VerificationError
from .hashing import hash_to_cfrag_verification, hash_metadata
from .keys import PublicKey
from .key_frag import KeyFrag, KeyFragClaim, KeyFragID
from .serializable import Record, Verified
from .signing import Signature


def _challenge(capsule: Capsule,
               point_e1: CurvePoint,
               point_v1: CurvePoint,
               point_e2: CurvePoint,
               point_v2: CurvePoint,
               commitment: CurvePoint,
               point_u2: CurvePoint,
               metadata: CurveScalar,
               ) -> CurveScalar:
    points = [capsule.point_e, point_e1, point_e2,
              capsule.point_v, point_v1, point_v2,
              default_params().u, commitment, point_u2]
    return hash_to_cfrag_verification(points, metadata)


class CapsuleFragProof(Record):
    """
    A non-interactive proof that ``E1 = E * rk`` and ``V1 = V * rk``,
    where ``rk`` is the share committed to in the kfrag (``u * rk``).
    The hashed metadata is a part of the challenge.
    """

    def __init__(self,
                 point_e2: CurvePoint,
                 point_v2: CurvePoint,
                 kfrag_commitment: CurvePoint,
                 point_u2: CurvePoint,
                 response: CurveScalar,
                 metadata: CurveScalar,
                 kfrag_signature: Signature,
                 ):
        self.point_e2 = point_e2
        self.point_v2 = point_v2
        self.kfrag_commitment = kfrag_commitment
        self.point_u2 = point_u2
        self.response = response
        self.metadata = metadata
        self.kfrag_signature = kfrag_signature

    _COMPONENT_TYPES = (
        CurvePoint, CurvePoint, CurvePoint, CurvePoint, CurveScalar, CurveScalar, Signature)

    def _components(self):
        return (self.point_e2, self.point_v2, self.kfrag_commitment,
                self.point_u2, self.response, self.metadata, self.kfrag_signature)

    @classmethod
    def prove(cls,
              capsule: Capsule,
              kfrag: KeyFrag,
              point_e1: CurvePoint,
              point_v1: CurvePoint,
              metadata: Optional[bytes],
              ) -> 'CapsuleFragProof':
        t = CurveScalar.random_nonzero()
        e2 = capsule.point_e * t
        v2 = capsule.point_v * t
        u2 = default_params().u * t
        commitment = kfrag.proof.commitment
        metadata_scalar = hash_metadata(metadata)

        h = _challenge(capsule, point_e1, point_v1, e2, v2, commitment, u2, metadata_scalar)

        return cls(point_e2=e2,
                   point_v2=v2,
                   kfrag_commitment=commitment,
                   point_u2=u2,
                   response=t + kfrag.key * h,
                   metadata=metadata_scalar,
                   kfrag_signature=kfrag.proof.signature_for_receiver,
                   )

    def holds_for(self, capsule: Capsule, point_e1: CurvePoint, point_v1: CurvePoint) -> bool:
        h = _challenge(capsule, point_e1, point_v1, self.point_e2, self.point_v2,
                       self.kfrag_commitment, self.point_u2, self.metadata)
        z = self.response
        equations = [
            (capsule.point_e, point_e1, self.point_e2),
            (capsule.point_v, point_v1, self.point_v2),
            (default_params().u, self.kfrag_commitment, self.point_u2),
            ]
        # Every equation is evaluated, whatever the outcome of the others
        results = [base * z == blinded + image * h for base, image, blinded in equations]
        return all(results)


class CapsuleFrag(Record):
    """
    Re-encrypted fragment of :py:class:`Capsule`.
    """

    def __init__(self,
                 point_e1: CurvePoint,
                 point_v1: CurvePoint,
                 kfrag_id: KeyFragID,
                 precursor: CurvePoint,
                 threshold: int,
                 proof: CapsuleFragProof,
                 ):
        self.point_e1 = point_e1
        self.point_v1 = point_v1
        self.kfrag_id = kfrag_id
        self.precursor = precursor
        self.threshold = threshold
        self.proof = proof

    _COMPONENT_TYPES = (CurvePoint, CurvePoint, KeyFragID, CurvePoint, int, CapsuleFragProof)

    def _components(self):
        return (self.point_e1, self.point_v1, self.kfrag_id,
                self.precursor, self.threshold, self.proof)

    def _validate(self):
        if self.threshold < 1:
            raise ValueError(f"Invalid threshold in a serialized CapsuleFrag: {self.threshold}")

    @classmethod
    def reencrypted(cls,
                    capsule: Capsule,
                    kfrag: KeyFrag,
                    metadata: Optional[bytes] = None,
                    ) -> 'CapsuleFrag':
        e1 = capsule.point_e * kfrag.key
        v1 = capsule.point_v * kfrag.key
        return cls(point_e1=e1,
                   point_v1=v1,
                   kfrag_id=kfrag.id,
                   precursor=kfrag.precursor,
                   threshold=kfrag.threshold,
                   proof=CapsuleFragProof.prove(capsule, kfrag, e1, v1, metadata),
                   )

    def claim(self) -> KeyFragClaim:
        return KeyFragClaim(self.kfrag_id, self.proof.kfrag_commitment,
                            self.precursor, self.threshold)

    def verify(self,
               capsule: Capsule,
               verifying_pk: PublicKey,
               delegating_pk: PublicKey,
               receiving_pk: PublicKey,
               metadata: Optional[bytes] = None,
               ) -> 'VerifiedCapsuleFrag':
        """
        Checks that this fragment is a correct re-encryption of ``capsule``
        with a kfrag that the owner of ``verifying_pk`` made
        for the given pair of delegating and receiving keys.

        If ``metadata`` is given, also checks that the fragment was created
        with the same metadata.
        """
        # All the checks are made before any of them is reported
        signed = self.claim().is_signed(self.proof.kfrag_signature,
                                        verifying_pk, delegating_pk, receiving_pk)
        proven = self.proof.holds_for(capsule, self.point_e1, self.point_v1)
        same_metadata = metadata is None or hash_metadata(metadata) == self.proof.metadata

        if not signed:
            raise VerificationError("Invalid KeyFrag signature")
        if not proven:
            raise VerificationError("Failed to verify reencryption proof")
        if not same_metadata:
            raise VerificationError("The fragment was created with different metadata")

        return VerifiedCapsuleFrag(self)


class VerifiedCapsuleFrag(Verified):
    """
    Verified capsule frag, good for decryption.
    It can only be obtained from :py:meth:`CapsuleFrag.verify`.
    """

    _WRAPPED = CapsuleFrag

    @property
    def cfrag(self) -> CapsuleFrag:
        return self._obj
