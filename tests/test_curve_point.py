import pytest

from threshold_pre.backend import ErrorInvalidCompressedPoint, ErrorInvalidPointEncoding
from threshold_pre.config import default_curve
from threshold_pre.curve_point import CurvePoint
from threshold_pre.curve_scalar import CurveScalar


FIELD_PRIME = 2**256 - 2**32 - 977


def _on_curve(x, y):
    # secp256k1: y^2 = x^3 + 7
    return (y * y - x * x * x - 7) % FIELD_PRIME == 0


def _encode_x(x, prefix=b'\x02'):
    return prefix + x.to_bytes(default_curve().field_element_size, 'big')


def test_compressed_encoding():
    for _ in range(4):
        point = CurvePoint.random()
        x, y = point.to_affine()
        assert _on_curve(x, y)

        data = bytes(point)
        assert len(data) == CurvePoint.serialized_size() == 33
        assert data[0] == 2 + (y & 1)
        assert int.from_bytes(data[1:], 'big') == x
        assert CurvePoint.from_bytes(data) == point


def test_generator_encoding():
    generator = CurvePoint.generator()
    assert bytes(generator).hex() == (
        '02'
        '79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798')
    assert generator * CurveScalar.one() == generator


def test_parity_prefix_selects_the_point():
    x, y = CurvePoint.random().to_affine()
    even = CurvePoint.from_bytes(_encode_x(x, b'\x02'))
    odd = CurvePoint.from_bytes(_encode_x(x, b'\x03'))

    assert even == -odd
    assert {even.to_affine()[1], odd.to_affine()[1]} == {y, FIELD_PRIME - y}
    assert even.to_affine()[1] % 2 == 0


def test_x_above_group_order():
    # The largest x for which a point exists is p - 3, which is above the group order
    x = FIELD_PRIME - 3
    assert x > default_curve().order

    point = CurvePoint.from_bytes(_encode_x(x))
    assert point.to_affine()[0] == x
    assert _on_curve(*point.to_affine())


@pytest.mark.parametrize('prefix', [b'\x00', b'\x01', b'\x04', b'\x05', b'\xff'])
def test_unknown_prefix(prefix):
    x = CurvePoint.random().to_affine()[0]
    with pytest.raises(ErrorInvalidPointEncoding, match="prefix"):
        CurvePoint.from_bytes(_encode_x(x, prefix))


def test_x_off_the_curve():
    # Search for an x which has no matching y
    x = CurvePoint.random().to_affine()[0]
    while pow(x**3 + 7, (FIELD_PRIME - 1) // 2, FIELD_PRIME) == 1:
        x += 1

    with pytest.raises(ErrorInvalidCompressedPoint):
        CurvePoint.from_bytes(_encode_x(x))


@pytest.mark.parametrize('x', [FIELD_PRIME, FIELD_PRIME + 2, 2**256 - 1])
def test_x_outside_of_the_field(x):
    with pytest.raises(ErrorInvalidCompressedPoint, match="not reduced"):
        CurvePoint.from_bytes(_encode_x(x))


def test_truncated_and_extended_data():
    data = bytes(CurvePoint.random())
    for damaged in (data[:-1], data + b'\x00', b''):
        with pytest.raises(ValueError, match="Expected 33 bytes"):
            CurvePoint.from_bytes(damaged)


def test_identity():
    point = CurvePoint.random()
    identity = point - point

    assert identity.is_identity()
    assert identity == CurvePoint.identity()
    assert identity != point
    assert point != identity

    # Encodes as zeros, but never decodes
    assert bytes(identity) == bytes(CurvePoint.serialized_size())
    with pytest.raises(ErrorInvalidPointEncoding):
        CurvePoint.from_bytes(bytes(identity))

    with pytest.raises(ValueError, match="identity"):
        identity.to_affine()

    assert point + identity == identity + point == point
    assert -identity == identity
    assert point * CurveScalar.zero() == identity
    assert identity * CurveScalar.random_nonzero() == identity


def test_group_laws():
    g = CurvePoint.generator()
    a, b, c = (CurveScalar.random_nonzero() for _ in range(3))

    assert g * a + g * b == g * (a + b) == g * b + g * a
    assert (g * a + g * b) + g * c == g * a + (g * b + g * c)
    assert g * a - g * b == g * (a - b)
    assert (g * a) * b == (g * b) * a == g * (a * b)
    assert -(g * a) == g * (CurveScalar.zero() - a)

    # The generator has the order of the group
    assert (g * CurveScalar.from_int(default_curve().order - 1) + g).is_identity()


def test_hash_follows_value():
    point = CurvePoint.random()
    same = CurvePoint.from_bytes(bytes(point))
    other = point + CurvePoint.generator()

    assert hash(point) == hash(same)
    assert len({point, same, other}) == 2
