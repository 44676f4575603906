from typing import TYPE_CHECKING, Optional
from warnings import warn

from .curve import Curve, SECP256K1
from .errors import GenericError
if TYPE_CHECKING: # pragma: no cover
    from .params import Parameters


FALLBACK_CURVE = SECP256K1


class ConfigurationError(GenericError):
    """Raised when the process-wide configuration is changed after it was fixed."""


class _Config:
    """
    The curve shared by every key, capsule and fragment of the process,
    and the parameters derived from it. The curve is fixed on first use.
    """

    NO_CURVE_WARNING = ("No default curve has been set. Using {name}. "
                        "Set a default curve with threshold_pre.config.set_default_curve().")

    def __init__(self):
        self._curve = None  # type: Optional[Curve]
        self._params = None  # type: Optional[Parameters]

    def curve(self) -> Curve:
        if self._curve is None:
            warn(self.NO_CURVE_WARNING.format(name=FALLBACK_CURVE.name), RuntimeWarning)
            self.set_curve(FALLBACK_CURVE)
        return self._curve

    def set_curve(self, curve: Optional[Curve] = None) -> None:
        if self._curve is not None:
            raise ConfigurationError(f"The default curve is already set to {self._curve.name}; "
                                     "it can only be set once")
        self._curve = FALLBACK_CURVE if curve is None else curve

    def params(self) -> 'Parameters':
        if self._params is None:
            # Deriving `u` hashes to the curve, so it waits until the curve is known
            from .params import Parameters
            self._params = Parameters(self.curve())
        return self._params


_CONFIG = _Config()


def set_default_curve(curve: Optional[Curve] = None) -> None:
    """
    Fixes the curve used by every key, capsule and fragment in this process.
    Can only be called once; without arguments, selects secp256k1.
    """
    _CONFIG.set_curve(curve)


def default_curve() -> Curve:
    return _CONFIG.curve()


def default_params() -> 'Parameters':
    return _CONFIG.params()
