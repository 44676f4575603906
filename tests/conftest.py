import pytest

from threshold_pre import SecretKey, Signer, generate_kfrags, encrypt
from threshold_pre.config import set_default_curve
from threshold_pre.curve import SECP256K1

# Individual tests may switch the curve, but they restore this one
set_default_curve(SECP256K1)

THRESHOLD = 6
NUM_KFRAGS = 10


@pytest.fixture
def alices_keys():
    # (delegating key, key signing the kfrags)
    return SecretKey.random(), SecretKey.random()


@pytest.fixture
def bobs_keys():
    receiving_sk = SecretKey.random()
    return receiving_sk, receiving_sk.public_key()


@pytest.fixture
def verification_keys(alices_keys, bobs_keys):
    # (verifying key, delegating key, receiving key), as the proxies and Bob see them
    delegating_sk, signing_sk = alices_keys
    return signing_sk.public_key(), delegating_sk.public_key(), bobs_keys[1]


@pytest.fixture
def kfrags(alices_keys, bobs_keys):
    delegating_sk, signing_sk = alices_keys
    return generate_kfrags(delegating_sk, bobs_keys[1], Signer(signing_sk),
                           threshold=THRESHOLD, num_kfrags=NUM_KFRAGS)


@pytest.fixture(scope='session')
def message():
    return (b"Alice [9:30 AM] "
            b"we need the quarterly numbers shared with the audit team, "
            b"but only through the proxies. "
            b"Bob [9:32 AM] "
            b"ok")


@pytest.fixture
def capsule_and_ciphertext(alices_keys, message):
    delegating_sk = alices_keys[0]
    return encrypt(delegating_sk.public_key(), message)


@pytest.fixture
def capsule(capsule_and_ciphertext):
    return capsule_and_ciphertext[0]
