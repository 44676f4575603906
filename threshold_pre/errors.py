class GenericError(Exception):
    """
    An internal error of the library, see the message for details.
    """


class VerificationError(GenericError):
    """
    Integrity of the data cannot be verified, see the message for details.
    """


class InvalidThreshold(GenericError, ValueError):
    """
    Raised when the threshold and the number of fragments requested
    do not satisfy ``1 <= threshold <= num_kfrags``.
    """


class AuthenticationFailure(GenericError):
    """
    Raised when the ciphertext or the reconstructed key cannot be authenticated,
    see the message for details.
    """


class InsufficientFragments(GenericError):
    """
    Raised when fewer distinct capsule fragments than the threshold
    are supplied for decryption.
    """
