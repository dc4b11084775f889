from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from crr_pricer.services.errors import InvalidArgument


class OptionType(str, Enum):
    CALL = "call"
    PUT = "put"


class ExerciseStyle(str, Enum):
    EUROPEAN = "european"
    AMERICAN = "american"


def coerce_option_type(value: OptionType | str) -> OptionType:
    if isinstance(value, OptionType):
        return value
    try:
        return OptionType(str(value).strip().lower())
    except ValueError:
        raise InvalidArgument(f"option type must be call or put, got {value!r}") from None


def coerce_exercise_style(value: ExerciseStyle | str) -> ExerciseStyle:
    if isinstance(value, ExerciseStyle):
        return value
    try:
        return ExerciseStyle(str(value).strip().lower())
    except ValueError:
        raise InvalidArgument(f"exercise style must be european or american, got {value!r}") from None


@dataclass(frozen=True)
class LatticeParameters:
    """Per-step quantities of a CRR lattice.

    Conventions:
      - rate is continuously compounded, so `growth` is exp(r * dt) and
        discounting one step means dividing by it.
      - pu/pd are the risk-neutral up/down probabilities.
    """

    steps: int
    delta_t: float
    up: float
    down: float
    growth: float
    pu: float
    pd: float

    @property
    def pu_over_growth(self) -> float:
        return self.pu / self.growth

    @property
    def pd_over_growth(self) -> float:
        return self.pd / self.growth

    @property
    def is_arbitrage_free(self) -> bool:
        # d < a < u, equivalently 0 < pu < 1
        return self.down < self.growth < self.up


def derive_parameters(volatility: float, time_to_expiry: float, steps: int, rate: float) -> LatticeParameters:
    """Derive u, d, a, pu and pd for `steps` periods over `time_to_expiry`.

    pu is not forced into (0, 1); keeping sigma, r and dt consistent is the
    caller's job (see `LatticeParameters.is_arbitrage_free`).
    """
    if isinstance(steps, bool) or int(steps) != steps:
        raise InvalidArgument(f"steps must be an integer, got {steps!r}")
    steps = int(steps)
    if steps < 1:
        raise InvalidArgument("steps must be >= 1")
    if time_to_expiry <= 0:
        raise InvalidArgument("time_to_expiry must be > 0")
    if volatility <= 0:
        # u == d collapses the lattice and pu becomes 0/0
        raise InvalidArgument("volatility must be > 0")

    delta_t = time_to_expiry / steps
    up = math.exp(volatility * math.sqrt(delta_t))
    down = 1.0 / up
    growth = math.exp(rate * delta_t)
    pu = (growth - down) / (up - down)

    return LatticeParameters(
        steps=steps,
        delta_t=delta_t,
        up=up,
        down=down,
        growth=growth,
        pu=pu,
        pd=1.0 - pu,
    )
