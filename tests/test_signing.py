import pytest

from threshold_pre.config import default_curve
from threshold_pre.curve_scalar import CurveScalar
from threshold_pre.keys import SecretKey
from threshold_pre.signing import Signature, Signer


@pytest.fixture
def signing_sk():
    return SecretKey.random()


@pytest.mark.parametrize('suffix', [b'', b'x', b'\x00' * 100, bytes(range(256))])
def test_signature_checks_out(signing_sk, suffix):
    message = b'kfrag batch #7' + suffix
    signature = Signer(signing_sk).sign(message)

    assert signature.verify(signing_sk.public_key(), message)
    assert not signature.verify(signing_sk.public_key(), message + b'!')
    assert not signature.verify(SecretKey.random().public_key(), message)


def test_s_is_normalized(signing_sk):
    half_order = default_curve().order >> 1
    signer = Signer(signing_sk)

    # Without normalization, about half of these would have a high `s`
    for i in range(16):
        signature = signer.sign(i.to_bytes(2, 'big'))
        assert 0 < int(signature.s) <= half_order


def test_high_s_variant_is_not_produced(signing_sk):
    message = b'one signature per message and nonce'
    signature = Signer(signing_sk).sign(message)

    # The mirrored `s` still satisfies the ECDSA equation,
    # but it is never what the signer outputs
    mirrored = Signature(signature.r, CurveScalar.from_int(default_curve().order - int(signature.s)))
    assert mirrored != signature
    assert int(mirrored.s) > default_curve().order >> 1


def test_signatures_are_randomized(signing_sk):
    signer = Signer(signing_sk)
    first = signer.sign(b'same message')
    second = signer.sign(b'same message')

    assert first != second
    assert hash(first) != hash(second)
    assert first.verify(signing_sk.public_key(), b'same message')
    assert second.verify(signing_sk.public_key(), b'same message')


def test_signature_encoding(signing_sk):
    signature = Signer(signing_sk).sign(b'encoded')
    data = bytes(signature)

    scalar_size = CurveScalar.serialized_size()
    assert len(data) == Signature.serialized_size() == 2 * scalar_size
    assert data == bytes(signature.r) + bytes(signature.s)

    restored = Signature.from_bytes(data)
    assert restored == signature
    assert hash(restored) == hash(signature)
    assert restored.verify(signing_sk.public_key(), b'encoded')
    assert str(restored).startswith('Signature:')


def test_damaged_signature(signing_sk):
    signature = Signer(signing_sk).sign(b'message')
    damaged = Signature.from_bytes(bytes(CurveScalar.one()) + bytes(signature.s))
    assert not damaged.verify(signing_sk.public_key(), b'message')

    # Out-of-range scalars are rejected while decoding
    with pytest.raises(ValueError):
        Signature.from_bytes(b'\xff' * Signature.serialized_size())


def test_signer_does_not_leak(signing_sk):
    signer = Signer(signing_sk)

    assert signer.verifying_key() == signing_sk.public_key()
    assert str(signer) == "Signer:..."

    with pytest.raises(RuntimeError, match="hashing"):
        hash(signer)
    with pytest.raises(RuntimeError, match="serialization"):
        bytes(signer)
