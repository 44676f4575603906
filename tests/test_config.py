import warnings

import pytest

from threshold_pre import Parameters, GenericError, config
from threshold_pre.curve import SECP256K1, SECP256R1


@pytest.fixture
def fresh_config():
    # The process-wide one was fixed by conftest
    return config._Config()


def test_fallback_curve_with_a_warning(fresh_config):
    with pytest.warns(RuntimeWarning, match="No default curve has been set. Using secp256k1"):
        assert fresh_config.curve() == SECP256K1

    # Only the first use warns
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert fresh_config.curve() == SECP256K1


def test_params_fix_the_curve(fresh_config):
    with pytest.warns(RuntimeWarning):
        params = fresh_config.params()

    assert params.curve == SECP256K1
    assert fresh_config.params() is params

    with pytest.raises(config.ConfigurationError):
        fresh_config.set_curve(SECP256R1)


def test_curve_is_set_once(fresh_config):
    fresh_config.set_curve(SECP256R1)
    assert fresh_config.curve() == SECP256R1

    for curve in (SECP256K1, SECP256R1, None):
        with pytest.raises(config.ConfigurationError, match="already set to secp256r1"):
            fresh_config.set_curve(curve)

    assert fresh_config.curve() == SECP256R1


def test_explicit_fallback_does_not_warn(fresh_config):
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        fresh_config.set_curve()
        assert fresh_config.curve() == SECP256K1


def test_process_wide_curve():
    assert config.default_curve() == SECP256K1

    with pytest.raises(config.ConfigurationError):
        config.set_default_curve(SECP256R1)

    # Part of the library's error hierarchy
    assert issubclass(config.ConfigurationError, GenericError)
    assert config.default_curve() == SECP256K1


def test_default_params():
    params = config.default_params()

    assert params is config.default_params()
    assert params == Parameters()
    assert hash(params) == hash(Parameters(SECP256K1))
    assert str(params) == "Parameters:secp256k1"

    assert not params.g.is_identity()
    assert not params.u.is_identity()
    assert params.u != params.g


def test_parameters_for_another_curve():
    with pytest.raises(ValueError, match=r"configured curve \(secp256k1\), got secp256r1"):
        Parameters(SECP256R1)
