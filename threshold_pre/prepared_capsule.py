from typing import Optional, Sequence, Union

from .capsule import Capsule
from .capsule_frag import CapsuleFrag, VerifiedCapsuleFrag
from .errors import VerificationError
from .keys import PublicKey, SecretKey
from .key_frag import KeyFrag, VerifiedKeyFrag
from .pre import open_ciphertext


def _unwrap_kfrag(kfrag: Union[KeyFrag, VerifiedKeyFrag]) -> KeyFrag:
    return kfrag.kfrag if isinstance(kfrag, VerifiedKeyFrag) else kfrag


def _unwrap_cfrag(cfrag: Union[CapsuleFrag, VerifiedCapsuleFrag]) -> CapsuleFrag:
    return cfrag.cfrag if isinstance(cfrag, VerifiedCapsuleFrag) else cfrag


class PreparedCapsule:
    """
    A capsule bundled with the keys its fragments are expected to be bound to:
    the delegating key it was encrypted with, the receiving key it is being re-encrypted for,
    and the verifying key of the signer who made the kfrags.

    Created using :py:meth:`Capsule.with_correctness_keys`.
    """

    def __init__(self,
                 capsule: Capsule,
                 delegating_pk: PublicKey,
                 receiving_pk: PublicKey,
                 verifying_pk: PublicKey,
                 ):
        self.capsule = capsule
        self.delegating_pk = delegating_pk
        self.receiving_pk = receiving_pk
        self.verifying_pk = verifying_pk

    def _verify_kfrag(self, kfrag: Union[KeyFrag, VerifiedKeyFrag]) -> VerifiedKeyFrag:
        return _unwrap_kfrag(kfrag).verify(verifying_pk=self.verifying_pk,
                                           delegating_pk=self.delegating_pk,
                                           receiving_pk=self.receiving_pk)

    def _verify_cfrag(self,
                      cfrag: Union[CapsuleFrag, VerifiedCapsuleFrag],
                      metadata: Optional[bytes] = None,
                      ) -> VerifiedCapsuleFrag:
        return _unwrap_cfrag(cfrag).verify(self.capsule,
                                           verifying_pk=self.verifying_pk,
                                           delegating_pk=self.delegating_pk,
                                           receiving_pk=self.receiving_pk,
                                           metadata=metadata)

    def verify_kfrag(self, kfrag: Union[KeyFrag, VerifiedKeyFrag]) -> bool:
        """
        Returns ``True`` if the kfrag was made by the expected signer
        for the expected pair of keys.
        """
        try:
            self._verify_kfrag(kfrag)
        except VerificationError:
            return False
        return True

    def verify_cfrag(self,
                     cfrag: Union[CapsuleFrag, VerifiedCapsuleFrag],
                     metadata: Optional[bytes] = None,
                     ) -> bool:
        """
        Returns ``True`` if the cfrag is a correct re-encryption of this capsule
        with a kfrag made for the expected keys.
        """
        try:
            self._verify_cfrag(cfrag, metadata)
        except VerificationError:
            return False
        return True

    def reencrypt(self,
                  kfrag: Union[KeyFrag, VerifiedKeyFrag],
                  metadata: Optional[bytes] = None,
                  verify_kfrag: bool = True,
                  ) -> VerifiedCapsuleFrag:
        """
        Re-encrypts the capsule with the given kfrag,
        checking it against the bundled keys first unless ``verify_kfrag`` is ``False``.
        Raises :py:class:`VerificationError` if the check fails.
        """
        if verify_kfrag:
            kfrag = self._verify_kfrag(kfrag)
        cfrag = CapsuleFrag.reencrypted(self.capsule, _unwrap_kfrag(kfrag), metadata)
        return VerifiedCapsuleFrag(cfrag)

    def decrypt_reencrypted(self,
                            receiving_sk: SecretKey,
                            cfrags: Sequence[Union[CapsuleFrag, VerifiedCapsuleFrag]],
                            ciphertext: bytes,
                            check_proof: bool = True,
                            metadata: Optional[bytes] = None,
                            ) -> bytes:
        """
        Decrypts the ciphertext with the given fragments.
        If ``check_proof`` is ``True``, every fragment is verified first
        (against ``metadata``, if the proxies were given one), and
        :py:class:`VerificationError` is raised on the first invalid one.
        """
        if receiving_sk.public_key() != self.receiving_pk:
            raise ValueError("The secret key does not match the receiving key of this capsule")

        if check_proof:
            cfrags = [self._verify_cfrag(cfrag, metadata) for cfrag in cfrags]

        key_seed = self.capsule.open_reencrypted(receiving_sk,
                                                 self.delegating_pk,
                                                 [_unwrap_cfrag(cfrag) for cfrag in cfrags])
        return open_ciphertext(key_seed, self.capsule, ciphertext)

    def __str__(self):
        return f"{self.__class__.__name__}:{bytes(self.capsule).hex()[:16]}"
