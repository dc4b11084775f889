import math

import pytest

from crr_pricer.services.errors import InvalidArgument
from crr_pricer.services.lattice_params import (
    ExerciseStyle,
    OptionType,
    coerce_exercise_style,
    coerce_option_type,
    derive_parameters,
)


def test_crr_parameters():
    p = derive_parameters(volatility=0.2, time_to_expiry=1.0, steps=4, rate=0.05)

    assert p.delta_t == pytest.approx(0.25)
    assert p.up == pytest.approx(math.exp(0.2 * 0.5))
    assert p.up * p.down == pytest.approx(1.0, abs=1e-15)
    assert p.growth == pytest.approx(math.exp(0.05 * 0.25))
    assert p.pu == pytest.approx((p.growth - p.down) / (p.up - p.down))
    assert p.pu + p.pd == pytest.approx(1.0, abs=1e-15)
    assert p.pu_over_growth == pytest.approx(p.pu / p.growth)
    assert p.is_arbitrage_free


def test_risk_neutral_drift_matches_growth():
    p = derive_parameters(volatility=0.35, time_to_expiry=0.75, steps=30, rate=0.03)
    assert p.up * p.pu + p.down * p.pd == pytest.approx(p.growth, rel=1e-14)


def test_arbitrage_flag_when_rate_dominates_volatility():
    p = derive_parameters(volatility=0.001, time_to_expiry=1.0, steps=1, rate=0.5)
    assert not p.is_arbitrage_free
    assert p.pu > 1.0


@pytest.mark.parametrize("steps", [0, -3])
def test_steps_must_be_positive(steps):
    with pytest.raises(InvalidArgument):
        derive_parameters(volatility=0.2, time_to_expiry=1.0, steps=steps, rate=0.05)


def test_non_integer_steps_rejected():
    with pytest.raises(InvalidArgument):
        derive_parameters(volatility=0.2, time_to_expiry=1.0, steps=2.5, rate=0.05)


def test_zero_volatility_rejected():
    with pytest.raises(InvalidArgument):
        derive_parameters(volatility=0.0, time_to_expiry=1.0, steps=10, rate=0.05)


def test_tags_are_coerced_case_insensitively():
    assert coerce_option_type("CALL") is OptionType.CALL
    assert coerce_option_type(" put ") is OptionType.PUT
    assert coerce_option_type(OptionType.PUT) is OptionType.PUT
    assert coerce_exercise_style("American") is ExerciseStyle.AMERICAN
    assert coerce_exercise_style(ExerciseStyle.EUROPEAN) is ExerciseStyle.EUROPEAN


def test_unknown_tags_raise_invalid_argument():
    with pytest.raises(InvalidArgument, match="call or put"):
        coerce_option_type("straddle")
    with pytest.raises(InvalidArgument, match="european or american"):
        coerce_exercise_style("bermudan")
    # still a ValueError for callers that only know the builtin
    with pytest.raises(ValueError):
        coerce_option_type("")
