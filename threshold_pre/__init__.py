import logging

from .__about__ import (
    __author__, __license__, __summary__, __title__, __version__, __copyright__
)

from .capsule import Capsule
from .capsule_frag import CapsuleFrag, VerifiedCapsuleFrag
from .config import set_default_curve, default_curve, default_params
from .curve import SECP256K1, SECP256R1, SECP384R1
from .errors import (
    GenericError, VerificationError, InvalidThreshold, AuthenticationFailure, InsufficientFragments)
from .key_frag import KeyFrag, VerifiedKeyFrag
from .keys import SecretKey, PublicKey, SecretKeyFactory
from .params import Parameters
from .pre import (
    encrypt, decrypt_original, decrypt_reencrypted, reencrypt, generate_kfrags,
    verify_kfrag, verify_cfrag)
from .prepared_capsule import PreparedCapsule
from .signing import Signature, Signer

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "SecretKey",
    "PublicKey",
    "SecretKeyFactory",
    "Signature",
    "Signer",
    "Capsule",
    "PreparedCapsule",
    "KeyFrag",
    "VerifiedKeyFrag",
    "CapsuleFrag",
    "VerifiedCapsuleFrag",
    "Parameters",
    "SECP256K1",
    "SECP256R1",
    "SECP384R1",
    "set_default_curve",
    "default_curve",
    "default_params",
    "GenericError",
    "VerificationError",
    "InvalidThreshold",
    "AuthenticationFailure",
    "InsufficientFragments",
    "encrypt",
    "decrypt_original",
    "generate_kfrags",
    "reencrypt",
    "verify_kfrag",
    "verify_cfrag",
    "decrypt_reencrypted",
]
