import pytest
from hypothesis import given, settings, HealthCheck
from hypothesis import strategies as st

from threshold_pre import (
    SecretKey,
    Signer,
    AuthenticationFailure,
    InsufficientFragments,
    VerificationError,
    CapsuleFrag,
    encrypt,
    generate_kfrags,
    reencrypt,
    decrypt_reencrypted,
    )

# Group operations are slow, keep the number of examples modest
common_settings = settings(max_examples=20,
                           deadline=None,
                           suppress_health_check=[HealthCheck.too_slow])


class Party:

    def __init__(self):
        self.delegating_sk = SecretKey.random()
        self.signing_sk = SecretKey.random()
        self.receiving_sk = SecretKey.random()

    @property
    def delegating_pk(self):
        return self.delegating_sk.public_key()

    @property
    def verifying_pk(self):
        return self.signing_sk.public_key()

    @property
    def receiving_pk(self):
        return self.receiving_sk.public_key()


PARTY = Party()


@st.composite
def thresholds(draw, max_kfrags=6):
    num_kfrags = draw(st.integers(min_value=1, max_value=max_kfrags))
    threshold = draw(st.integers(min_value=1, max_value=num_kfrags))
    return threshold, num_kfrags


@common_settings
@given(thresholds(), st.binary(max_size=64), st.data())
def test_any_threshold_subset_decrypts(threshold_and_num, plaintext, data):
    threshold, num_kfrags = threshold_and_num

    capsule, ciphertext = encrypt(PARTY.delegating_pk, plaintext)
    kfrags = generate_kfrags(delegating_sk=PARTY.delegating_sk,
                             receiving_pk=PARTY.receiving_pk,
                             signer=Signer(PARTY.signing_sk),
                             threshold=threshold,
                             num_kfrags=num_kfrags)

    cfrags = [reencrypt(capsule, kfrag) for kfrag in kfrags]
    subset = data.draw(st.permutations(cfrags))
    size = data.draw(st.integers(min_value=0, max_value=num_kfrags))
    subset = subset[:size]

    if size >= threshold:
        plaintext_back = decrypt_reencrypted(receiving_sk=PARTY.receiving_sk,
                                             delegating_pk=PARTY.delegating_pk,
                                             capsule=capsule,
                                             verified_cfrags=subset,
                                             ciphertext=ciphertext)
        assert plaintext_back == plaintext
    else:
        with pytest.raises(InsufficientFragments):
            decrypt_reencrypted(receiving_sk=PARTY.receiving_sk,
                                delegating_pk=PARTY.delegating_pk,
                                capsule=capsule,
                                verified_cfrags=subset,
                                ciphertext=ciphertext)


@common_settings
@given(st.binary(min_size=1, max_size=64), st.data())
def test_tampered_ciphertext_is_rejected(plaintext, data):

    capsule, ciphertext = encrypt(PARTY.delegating_pk, plaintext)
    kfrags = generate_kfrags(delegating_sk=PARTY.delegating_sk,
                             receiving_pk=PARTY.receiving_pk,
                             signer=Signer(PARTY.signing_sk),
                             threshold=1,
                             num_kfrags=1)
    cfrags = [reencrypt(capsule, kfrags[0])]

    position = data.draw(st.integers(min_value=0, max_value=len(ciphertext) - 1))
    mask = data.draw(st.integers(min_value=1, max_value=255))
    tampered = bytearray(ciphertext)
    tampered[position] ^= mask

    with pytest.raises(AuthenticationFailure):
        decrypt_reencrypted(receiving_sk=PARTY.receiving_sk,
                            delegating_pk=PARTY.delegating_pk,
                            capsule=capsule,
                            verified_cfrags=cfrags,
                            ciphertext=bytes(tampered))


@common_settings
@given(st.binary(max_size=32), st.binary(max_size=32))
def test_metadata_is_bound(metadata, other_metadata):

    capsule, _ciphertext = encrypt(PARTY.delegating_pk, b'peace at dawn')
    kfrags = generate_kfrags(delegating_sk=PARTY.delegating_sk,
                             receiving_pk=PARTY.receiving_pk,
                             signer=Signer(PARTY.signing_sk),
                             threshold=1,
                             num_kfrags=1)
    cfrag = CapsuleFrag.from_bytes(bytes(reencrypt(capsule, kfrags[0], metadata=metadata)))

    def verify(metadata):
        return cfrag.verify(capsule,
                            verifying_pk=PARTY.verifying_pk,
                            delegating_pk=PARTY.delegating_pk,
                            receiving_pk=PARTY.receiving_pk,
                            metadata=metadata)

    verify(metadata)

    if other_metadata != metadata:
        with pytest.raises(VerificationError):
            verify(other_metadata)
