import random
from threshold_pre import (
    SECP256K1, SecretKey, PublicKey, Signer, CapsuleFrag,
    AuthenticationFailure, InsufficientFragments,
    set_default_curve, encrypt, generate_kfrags, reencrypt, verify_cfrag,
    decrypt_original, decrypt_reencrypted)

# Fix the curve
# -------------
# Every key, capsule and fragment in a process lives on one curve.

set_default_curve(SECP256K1)

# Generate key pairs
# ------------------
# Alice needs two key pairs: a delegating one and a signing one.

alices_secret_key = SecretKey.random()
alices_public_key = PublicKey.from_secret_key(alices_secret_key)

alices_signing_key = SecretKey.random()
alices_verifying_key = PublicKey.from_secret_key(alices_signing_key)
alices_signer = Signer(alices_signing_key)

# Encrypt some data for Alice
# ---------------------------
# Anyone with Alice's public key can do this.
# `encrypt` returns the `capsule` and the `ciphertext`.

plaintext = b'Plaintext message'
capsule, ciphertext = encrypt(alices_public_key, plaintext)

# Alice can open the capsule with her secret key.

assert decrypt_original(alices_secret_key, capsule, ciphertext) == plaintext

# Bob exists
# ----------

bobs_secret_key = SecretKey.random()
bobs_public_key = PublicKey.from_secret_key(bobs_secret_key)

try:
    decrypt_original(bobs_secret_key, capsule, ciphertext)
except AuthenticationFailure:
    print("Decryption failed! Bob has not been granted access yet.")

# Alice grants access to Bob
# --------------------------
# Alice splits a re-encryption key for Bob into 3 kfrags,
# any 2 of which are enough.

kfrags = generate_kfrags(delegating_sk=alices_secret_key,
                         receiving_pk=bobs_public_key,
                         signer=alices_signer,
                         threshold=2,
                         num_kfrags=3)

# Proxies re-encrypt
# ------------------
# Each proxy holds one kfrag and produces one cfrag.
# The metadata is bound to the correctness proof of the cfrag.

metadata = b'asbdasdasd'
kfrags = random.sample(kfrags, 2)
cfrags = [reencrypt(capsule=capsule, kfrag=kfrag, metadata=metadata) for kfrag in kfrags]

# Bob checks the capsule fragments
# --------------------------------
# Fragments received over the wire are untrusted until verified.

suspicious_cfrags = [CapsuleFrag.from_bytes(bytes(cfrag)) for cfrag in cfrags]

for cfrag in suspicious_cfrags:
    assert verify_cfrag(cfrag, capsule,
                        verifying_pk=alices_verifying_key,
                        delegating_pk=alices_public_key,
                        receiving_pk=bobs_public_key,
                        metadata=metadata)

verified_cfrags = [cfrag.verify(capsule,
                                verifying_pk=alices_verifying_key,
                                delegating_pk=alices_public_key,
                                receiving_pk=bobs_public_key,
                                metadata=metadata)
                   for cfrag in suspicious_cfrags]

# Bob opens the capsule
# ---------------------

bob_cleartext = decrypt_reencrypted(receiving_sk=bobs_secret_key,
                                    delegating_pk=alices_public_key,
                                    capsule=capsule,
                                    verified_cfrags=verified_cfrags,
                                    ciphertext=ciphertext)
print(bob_cleartext)
assert bob_cleartext == plaintext

# One fragment is not enough.

try:
    decrypt_reencrypted(receiving_sk=bobs_secret_key,
                        delegating_pk=alices_public_key,
                        capsule=capsule,
                        verified_cfrags=verified_cfrags[:1],
                        ciphertext=ciphertext)
except InsufficientFragments:
    print("Decryption failed! Bob needs one more fragment.")
