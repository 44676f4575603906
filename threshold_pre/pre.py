import logging
from typing import Tuple, Optional, Sequence, List

from .capsule import Capsule
from .capsule_frag import VerifiedCapsuleFrag, CapsuleFrag
from .config import default_params
from .curve_point import CurvePoint
from .dem import DEM
from .errors import VerificationError
from .keys import PublicKey, SecretKey
from .key_frag import VerifiedKeyFrag, KeyFrag, KeyFragBase
from .params import Parameters
from .signing import Signer


logger = logging.getLogger(__name__)


def _check_params(params: Optional[Parameters]) -> None:
    if params is not None and params != default_params():
        raise ValueError(f"The given parameters ({params}) do not match "
                         f"the configured ones ({default_params()})")


def open_ciphertext(key_seed: CurvePoint, capsule: Capsule, ciphertext: bytes) -> bytes:
    """
    Decrypts the ciphertext with the key seed recovered from ``capsule``.
    The capsule is the associated data, so a ciphertext only opens with its own capsule.
    """
    return DEM(bytes(key_seed)).decrypt(ciphertext, authenticated_data=bytes(capsule))


def encrypt(delegating_pk: PublicKey,
            plaintext: bytes,
            params: Optional[Parameters] = None,
            ) -> Tuple[Capsule, bytes]:
    """
    Encrypts ``plaintext`` for the owner of ``delegating_pk``.

    Returns the capsule holding the encapsulated key, and the ciphertext.
    Both are needed for decryption.
    """
    _check_params(params)
    capsule, key_seed = Capsule.from_public_key(delegating_pk)
    ciphertext = DEM(bytes(key_seed)).encrypt(plaintext, authenticated_data=bytes(capsule))
    return capsule, ciphertext


def decrypt_original(delegating_sk: SecretKey, capsule: Capsule, ciphertext: bytes) -> bytes:
    """
    Decrypts a ciphertext made by :py:func:`encrypt` with the delegator's own key.

    Raises :py:class:`AuthenticationFailure` if the key, the capsule and the ciphertext
    do not belong together, or the ciphertext was modified.
    """
    return open_ciphertext(capsule.open_original(delegating_sk), capsule, ciphertext)


def generate_kfrags(delegating_sk: SecretKey,
                    receiving_pk: PublicKey,
                    signer: Signer,
                    threshold: int,
                    num_kfrags: int,
                    sign_delegating_key: bool = True,
                    sign_receiving_key: bool = True,
                    params: Optional[Parameters] = None,
                    ) -> List[VerifiedKeyFrag]:
    """
    Splits the re-encryption key from ``delegating_sk`` to ``receiving_pk``
    into ``num_kfrags`` fragments, any ``threshold`` of which are enough for decryption.
    Each fragment goes to a separate proxy.

    ``sign_delegating_key`` and ``sign_receiving_key`` decide whether the proxies will need
    the corresponding keys to check their fragments with :py:meth:`KeyFrag.verify`.

    Raises :py:class:`InvalidThreshold` unless ``1 <= threshold <= num_kfrags``.
    """
    _check_params(params)

    # The threshold is checked before any secret values are drawn
    base = KeyFragBase(delegating_sk, receiving_pk, signer, threshold, num_kfrags)
    kfrags = base.make_kfrags(num_kfrags, sign_delegating_key, sign_receiving_key)

    logger.debug("Generated %d kfrags with threshold %d", num_kfrags, threshold)

    # Just made, no need to check them
    return [VerifiedKeyFrag(kfrag) for kfrag in kfrags]


def reencrypt(capsule: Capsule,
              kfrag: VerifiedKeyFrag,
              metadata: Optional[bytes] = None,
              ) -> VerifiedCapsuleFrag:
    """
    Re-encrypts the capsule with a verified kfrag, producing a capsule fragment for the receiver.

    If ``metadata`` is given, it is bound to the fragment's correctness proof
    and can be checked by :py:meth:`CapsuleFrag.verify`.
    """
    if isinstance(kfrag, KeyFrag):
        raise TypeError("KeyFrag must be verified before reencryption")
    return VerifiedCapsuleFrag(CapsuleFrag.reencrypted(capsule, kfrag.kfrag, metadata))


def verify_kfrag(kfrag: KeyFrag,
                 verifying_pk: PublicKey,
                 delegating_pk: Optional[PublicKey] = None,
                 receiving_pk: Optional[PublicKey] = None,
                 ) -> bool:
    """
    Returns ``True`` if the kfrag passes :py:meth:`KeyFrag.verify`, ``False`` otherwise.
    A fragment failing the check must be discarded.
    """
    if isinstance(kfrag, VerifiedKeyFrag):
        kfrag = kfrag.kfrag
    try:
        kfrag.verify(verifying_pk, delegating_pk=delegating_pk, receiving_pk=receiving_pk)
    except VerificationError:
        return False
    return True


def verify_cfrag(cfrag: CapsuleFrag,
                 capsule: Capsule,
                 verifying_pk: PublicKey,
                 delegating_pk: PublicKey,
                 receiving_pk: PublicKey,
                 metadata: Optional[bytes] = None,
                 ) -> bool:
    """
    Returns ``True`` if the cfrag passes :py:meth:`CapsuleFrag.verify`, ``False`` otherwise.
    A fragment failing the check must be discarded.
    """
    if isinstance(cfrag, VerifiedCapsuleFrag):
        cfrag = cfrag.cfrag
    try:
        cfrag.verify(capsule,
                     verifying_pk=verifying_pk,
                     delegating_pk=delegating_pk,
                     receiving_pk=receiving_pk,
                     metadata=metadata)
    except VerificationError:
        return False
    return True


def decrypt_reencrypted(receiving_sk: SecretKey,
                        delegating_pk: PublicKey,
                        capsule: Capsule,
                        verified_cfrags: Sequence[VerifiedCapsuleFrag],
                        ciphertext: bytes,
                        ) -> bytes:
    """
    Decrypts the ciphertext on the receiver's side, from verified capsule fragments.

    Fragments with the same kfrag ID are counted once.
    Raises :py:class:`InsufficientFragments` if fewer distinct fragments than the threshold
    are given, and :py:class:`AuthenticationFailure` if the decryption fails.
    """
    if any(isinstance(cfrag, CapsuleFrag) for cfrag in verified_cfrags):
        raise TypeError("All CapsuleFrags must be verified before decryption")

    cfrags = [vcfrag.cfrag for vcfrag in verified_cfrags]
    key_seed = capsule.open_reencrypted(receiving_sk, delegating_pk, cfrags)
    return open_ciphertext(key_seed, capsule, ciphertext)
