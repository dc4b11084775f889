from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from crr_pricer.services.arena import Arena
from crr_pricer.services.dividends import Dividend, build_schedule
from crr_pricer.services.lattice_params import (
    ExerciseStyle,
    OptionType,
    coerce_exercise_style,
    coerce_option_type,
    derive_parameters,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptionSpec:
    option_type: OptionType
    style: ExerciseStyle
    spot: float
    rate: float
    time_to_expiry: float
    volatility: float
    strike: float
    steps: int


def _exercise_value(option_type: OptionType, underlying: np.ndarray | float, strike: float) -> np.ndarray | float:
    if option_type is OptionType.CALL:
        return underlying - strike
    return strike - underlying


def price_option(spec: OptionSpec, dividends: Sequence[Dividend] = (), *, arena: Arena | None = None) -> float:
    """Recombining Cox–Ross–Rubinstein tree with escrowed discrete dividends.

    - The lattice models S - PV(remaining dividends); the escrowed value at
      step i is added back wherever an exercise value is needed.
    - Only the active slice of the tree is held: level i overwrites the first
      i + 1 entries of the level i + 1 arrays.
    - Early exercise is tested at every node when style is American.
    """
    option_type = coerce_option_type(spec.option_type)
    style = coerce_exercise_style(spec.style)
    if spec.time_to_expiry <= 0 and spec.steps >= 1:
        # Already at expiry: no lattice, no escrowed dividends left.
        return float(max(0.0, _exercise_value(option_type, spec.spot, spec.strike)))
    params = derive_parameters(spec.volatility, spec.time_to_expiry, spec.steps, spec.rate)
    n = params.steps

    logger.debug(
        "CRR %s/%s n=%d u=%.8f d=%.8f a=%.8f pu=%.8f",
        option_type.value,
        style.value,
        n,
        params.up,
        params.down,
        params.growth,
        params.pu,
    )

    if arena is None:
        arena = Arena()
    windows = arena.acquire(n)
    s = windows.underlying
    o = windows.option

    schedule = build_schedule(
        dividends,
        rate=spec.rate,
        time_to_expiry=spec.time_to_expiry,
        steps=n,
        out=windows.schedule,
    )

    # Terminal layer, index 0 is the highest node: S_adj * u^(n - 2j)
    spot_adj = spec.spot - schedule[0]
    np.power(params.up, n - 2.0 * np.arange(n + 1), out=s)
    s *= spot_adj
    np.maximum(_exercise_value(option_type, s + schedule[n], spec.strike), 0.0, out=o)

    pu_a = params.pu_over_growth
    pd_a = params.pd_over_growth
    down = params.down
    american = style is ExerciseStyle.AMERICAN

    for i in range(n - 1, -1, -1):
        # RHS is evaluated in full before the overlapping slice is written
        o[: i + 1] = o[: i + 1] * pu_a + o[1 : i + 2] * pd_a
        s[: i + 1] *= down
        if american:
            exercise = _exercise_value(option_type, s[: i + 1] + schedule[i], spec.strike)
            np.maximum(o[: i + 1], exercise, out=o[: i + 1])

    return float(o[0])


def price(
    option_type: OptionType | str,
    style: ExerciseStyle | str,
    spot: float,
    rate: float,
    time_to_expiry: float,
    dividends: Sequence[Dividend],
    volatility: float,
    strike: float,
    steps: int,
    *,
    arena: Arena | None = None,
) -> float:
    """Price a vanilla call/put, European or American, on a CRR lattice.

    `dividends` is read-only and may be empty. Pass a reusable `arena` when
    pricing many times in a row (calibration sweeps, benchmarks).
    """
    spec = OptionSpec(
        option_type=coerce_option_type(option_type),
        style=coerce_exercise_style(style),
        spot=spot,
        rate=rate,
        time_to_expiry=time_to_expiry,
        volatility=volatility,
        strike=strike,
        steps=steps,
    )
    return price_option(spec, dividends, arena=arena)
