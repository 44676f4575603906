import logging
from typing import TYPE_CHECKING, Tuple, Sequence, List

from .curve_point import CurvePoint
from .curve_scalar import CurveScalar
from .errors import AuthenticationFailure, InsufficientFragments
from .hashing import hash_capsule_points, hash_to_polynomial_arg, hash_to_shared_secret
from .keys import PublicKey, SecretKey
from .serializable import Record
if TYPE_CHECKING: # pragma: no cover
    from .capsule_frag import CapsuleFrag
    from .prepared_capsule import PreparedCapsule


logger = logging.getLogger(__name__)


def lambda_coeff(xs: Sequence[CurveScalar], i: int) -> CurveScalar:
    """
    Lagrange basis coefficient at zero for the node ``xs[i]``.
    """
    res = CurveScalar.one()
    for j, xs_j in enumerate(xs):
        if j != i:
            res = res * xs_j * (xs_j - xs[i]).invert()
    return res


def distinct_cfrags(cfrags: Sequence['CapsuleFrag']) -> List['CapsuleFrag']:
    """
    Drops the fragments whose kfrag ID was already seen, keeping the first occurrence.
    """
    by_id = {}
    for cfrag in cfrags:
        by_id.setdefault(cfrag.kfrag_id, cfrag)
    return list(by_id.values())


def _weighted_sum(points: Sequence[CurvePoint], weights: Sequence[CurveScalar]) -> CurvePoint:
    total = CurvePoint.identity()
    for point, weight in zip(points, weights):
        total = total + point * weight
    return total


class Capsule(Record):
    """
    Encapsulated symmetric key: ``E = g * r``, ``V = g * u``,
    and ``s = u + r * H(E, V)`` binding them together.
    """

    def __init__(self, point_e: CurvePoint, point_v: CurvePoint, signature: CurveScalar):
        self.point_e = point_e
        self.point_v = point_v
        self.signature = signature

    _COMPONENT_TYPES = (CurvePoint, CurvePoint, CurveScalar)

    def _components(self):
        return self.point_e, self.point_v, self.signature

    def _validate(self):
        if not self._verify():
            raise ValueError("Capsule self-verification failed. Serialized data may be damaged.")

    def _verify(self) -> bool:
        h = hash_capsule_points(self.point_e, self.point_v)
        return CurvePoint.generator() * self.signature == self.point_v + self.point_e * h

    @classmethod
    def from_public_key(cls, delegating_pk: PublicKey) -> Tuple['Capsule', CurvePoint]:
        """
        Makes a new capsule for ``delegating_pk``,
        returning it along with the key seed it encapsulates.
        """
        g = CurvePoint.generator()
        r = CurveScalar.random_nonzero()
        u = CurveScalar.random_nonzero()
        point_e = g * r
        point_v = g * u
        s = u + r * hash_capsule_points(point_e, point_v)
        key_seed = delegating_pk.point() * (r + u)
        return cls(point_e, point_v, s), key_seed

    def open_original(self, delegating_sk: SecretKey) -> CurvePoint:
        return (self.point_e + self.point_v) * delegating_sk.secret_scalar()

    def open_reencrypted(self,
                         receiving_sk: SecretKey,
                         delegating_pk: PublicKey,
                         cfrags: Sequence['CapsuleFrag'],
                         ) -> CurvePoint:
        """
        Combines the capsule fragments into the key seed.

        Fragments with repeated kfrag IDs count once.
        Raises :py:class:`InsufficientFragments` if fewer distinct fragments than
        the threshold are given, ``ValueError`` if the fragments come from different
        :py:func:`generate_kfrags` calls, and :py:class:`AuthenticationFailure`
        if the combined fragments do not correspond to this capsule.
        """

        if len(cfrags) == 0:
            raise InsufficientFragments("Empty CapsuleFrag sequence")

        given = len(cfrags)
        cfrags = distinct_cfrags(cfrags)
        threshold = cfrags[0].threshold
        logger.debug("Opening with %d cfrags (%d distinct)", given, len(cfrags))

        if len(cfrags) < threshold:
            raise InsufficientFragments(f"Need {threshold} distinct CapsuleFrags, "
                                        f"got {len(cfrags)}")

        precursor = cfrags[0].precursor
        if not all(cfrag.precursor == precursor and cfrag.threshold == threshold
                   for cfrag in cfrags[1:]):
            raise ValueError("CapsuleFrags are not pairwise consistent")

        # Any `threshold` shares define the polynomial
        cfrags = cfrags[:threshold]

        receiving_point = receiving_sk.public_key().point()
        dh_point = precursor * receiving_sk.secret_scalar()

        nodes = [hash_to_polynomial_arg(precursor, receiving_point, dh_point, cfrag.kfrag_id)
                 for cfrag in cfrags]
        lambdas = [lambda_coeff(nodes, i) for i in range(len(nodes))]
        e_prime = _weighted_sum([cfrag.point_e1 for cfrag in cfrags], lambdas)
        v_prime = _weighted_sum([cfrag.point_v1 for cfrag in cfrags], lambdas)

        # The fragments were made for someone else if `d` is zero or the check fails
        d = hash_to_shared_secret(precursor, receiving_point, dh_point)
        if d.is_zero():
            raise AuthenticationFailure("Internal validation failed")

        h = hash_capsule_points(self.point_e, self.point_v)
        if delegating_pk.point() * (self.signature * d.invert()) != e_prime * h + v_prime:
            raise AuthenticationFailure("Internal validation failed")

        return (e_prime + v_prime) * d

    def with_correctness_keys(self,
                              delegating_pk: PublicKey,
                              receiving_pk: PublicKey,
                              verifying_pk: PublicKey,
                              ) -> 'PreparedCapsule':
        """
        Binds the capsule to the identities its fragments will be checked against.
        """
        from .prepared_capsule import PreparedCapsule
        return PreparedCapsule(self, delegating_pk, receiving_pk, verifying_pk)
