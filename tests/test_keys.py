import os

import pytest

from threshold_pre import GenericError
from threshold_pre.backend import ErrorInvalidPointEncoding
from threshold_pre.config import default_curve
from threshold_pre.curve_point import CurvePoint
from threshold_pre.curve_scalar import CurveScalar
from threshold_pre.keys import PublicKey, SecretKey, SecretKeyFactory


SECRET_CLASSES = [SecretKey, SecretKeyFactory]


def test_public_key_is_the_scaled_generator():
    scalar = CurveScalar.random_nonzero()
    sk = SecretKey(scalar)
    pk = sk.public_key()

    assert pk.point() == CurvePoint.generator() * scalar
    assert PublicKey.from_secret_key(sk) == pk
    assert sk.secret_scalar() == scalar
    assert sk.to_secret_bytes() == bytes(scalar)


@pytest.mark.parametrize('data', [bytes(32), default_curve().order.to_bytes(32, 'big')])
def test_secret_key_must_be_a_nonzero_scalar(data):
    with pytest.raises(ValueError):
        SecretKey.from_bytes(data)


def test_zero_secret_key():
    with pytest.raises(ValueError, match="cannot be zero"):
        SecretKey(CurveScalar.zero())


def test_secret_key_bytes():
    sk = SecretKey.random()
    data = sk.to_secret_bytes()

    assert len(data) == SecretKey.serialized_size() == 32
    restored = SecretKey.from_bytes(data)
    assert restored.to_secret_bytes() == data
    assert restored.public_key() == sk.public_key()

    # Secret keys only come out through the explicit call
    assert not hasattr(sk, '__bytes__')


def test_public_key_bytes():
    pk = SecretKey.random().public_key()
    data = bytes(pk)

    assert data == bytes(pk.point())
    assert len(data) == PublicKey.serialized_size()
    assert PublicKey.from_bytes(data) == pk
    assert str(pk) == "PublicKey:" + data.hex()[:16]


def test_public_key_cannot_be_the_identity():
    with pytest.raises(ValueError, match="identity"):
        PublicKey(CurvePoint.identity())
    with pytest.raises(ErrorInvalidPointEncoding):
        PublicKey.from_bytes(bytes(PublicKey.serialized_size()))


def test_public_keys_in_sets():
    sk = SecretKey.random()
    other = SecretKey.random()
    keys = {sk.public_key(), PublicKey.from_bytes(bytes(sk.public_key())), other.public_key()}
    assert len(keys) == 2


@pytest.mark.parametrize('cls', SECRET_CLASSES)
def test_secrets_stay_hidden(cls):
    secret = cls.random()
    assert str(secret) == f"{cls.__name__}:..."
    assert secret.to_secret_bytes().hex() not in repr(secret)
    with pytest.raises(RuntimeError, match="not secure"):
        hash(secret)


@pytest.mark.parametrize('cls', SECRET_CLASSES)
def test_erase(cls):
    secret = cls.random()
    assert not secret.is_erased()

    secret.erase()
    assert secret.is_erased()
    with pytest.raises(GenericError, match=f"This {cls.__name__} has been erased"):
        secret.to_secret_bytes()

    # Idempotent
    secret.erase()
    assert secret.is_erased()


@pytest.mark.parametrize('cls', SECRET_CLASSES)
def test_erase_on_leaving_the_block(cls):
    with cls.random() as secret:
        data = secret.to_secret_bytes()
        assert cls.from_bytes(data).to_secret_bytes() == data
    assert secret.is_erased()


def test_erased_key_keeps_its_public_key():
    with SecretKey.random() as sk:
        pk = sk.public_key()

    assert sk.public_key() == pk
    with pytest.raises(GenericError):
        sk.secret_scalar()


def test_erased_factory_derives_nothing():
    factory = SecretKeyFactory.random()
    factory.erase()

    with pytest.raises(GenericError):
        factory.make_key(b'label')
    with pytest.raises(GenericError):
        factory.make_factory(b'label')


def test_derived_keys_depend_on_the_seed_and_the_label():
    seed = os.urandom(SecretKeyFactory.seed_size())
    factory = SecretKeyFactory.from_secure_randomness(seed)
    twin = SecretKeyFactory.from_bytes(seed)
    stranger = SecretKeyFactory.random()

    labels = [b'', b'records/2023', b'records/2024']
    keys = [factory.make_key(label).to_secret_bytes() for label in labels]

    assert keys == [twin.make_key(label).to_secret_bytes() for label in labels]
    assert len(set(keys)) == len(labels)
    assert stranger.make_key(labels[1]).to_secret_bytes() != keys[1]


def test_child_factories():
    root = SecretKeyFactory.random()
    child = root.make_factory(b'department')

    assert isinstance(child, SecretKeyFactory)
    assert child.to_secret_bytes() == root.make_factory(b'department').to_secret_bytes()
    assert child.to_secret_bytes() != root.make_factory(b'department2').to_secret_bytes()

    # A child factory and a key with the same label are unrelated
    assert child.to_secret_bytes() != root.make_key(b'department').to_secret_bytes()
    assert child.make_key(b'x').to_secret_bytes() != root.make_key(b'x').to_secret_bytes()


@pytest.mark.parametrize('size', [0, 31, 33])
def test_seed_size(size):
    assert SecretKeyFactory.seed_size() == 32
    with pytest.raises(ValueError, match=f"Expected 32 bytes, got {size}"):
        SecretKeyFactory.from_secure_randomness(os.urandom(size))
