from .backend import Curve

SECP256K1 = Curve.from_name('secp256k1')
SECP256R1 = Curve.from_name('secp256r1')
SECP384R1 = Curve.from_name('secp384r1')

CURVES = (SECP256K1, SECP256R1, SECP384R1)
