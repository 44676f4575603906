from typing import Optional

from .curve import Curve


class Parameters:
    """
    Public parameters of the scheme: the curve, its generator,
    and a second generator ``u`` with an unknown discrete logarithm.

    Must be created for the curve fixed in :py:mod:`threshold_pre.config`,
    normally through :py:func:`threshold_pre.config.default_params`.
    """

    def __init__(self, curve: Optional[Curve] = None):
        from .config import default_curve
        from .curve_point import CurvePoint
        from .hashing import unsafe_hash_to_point

        configured_curve = default_curve()
        if curve is not None and curve != configured_curve:
            raise ValueError(f"Parameters can only be created for the configured curve "
                             f"({configured_curve.name}), got {curve.name}")

        self.curve = configured_curve
        self.g = CurvePoint.generator()
        self.u = unsafe_hash_to_point(b'PARAMETERS', b'POINT_U')

    def __eq__(self, other):
        return (self.curve, self.g, self.u) == (other.curve, other.g, other.u)

    def __hash__(self):
        return hash((self.__class__, self.curve, bytes(self.u)))

    def __str__(self):
        return f"{self.__class__.__name__}:{self.curve.name}"
