from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from crr_pricer.services.errors import InvalidArgument


@dataclass(frozen=True)
class Dividend:
    """A discrete cash dividend.

    `time_to_ex_div` is measured in the same unit as the option's time to
    expiry (years everywhere in this package).
    """

    amount: float
    time_to_ex_div: float

    def __post_init__(self) -> None:
        if not (self.amount > 0):
            raise InvalidArgument(f"dividend amount must be > 0, got {self.amount!r}")
        if not (self.time_to_ex_div >= 0):
            raise InvalidArgument(f"dividend time_to_ex_div must be >= 0, got {self.time_to_ex_div!r}")


def _last_step_before_ex_div(time_to_ex_div: float, delta_t: float, steps: int) -> int:
    # floor(t_ex / dt); t_ex < T keeps this below `steps` except for rounding
    return min(int(math.floor(time_to_ex_div / delta_t)), steps)


def build_schedule(
    dividends: Iterable[Dividend],
    *,
    rate: float,
    time_to_expiry: float,
    steps: int,
    out: np.ndarray | None = None,
) -> np.ndarray:
    """Escrowed dividend value at every lattice step.

    Entry k is the value, as of step k, of all dividends that go ex after
    step k and strictly before expiry:

        schedule[k] = sum(D * exp(-r * (t_ex - k * dt)))  for k <= floor(t_ex / dt)

    Dividends going ex on or after expiry never enter the schedule. The
    result is >= 0 and zero past the last ex-date, but it is not monotonic:
    discounting makes each dividend's contribution grow as k approaches its
    ex-date.

    `out`, when given, must have length steps + 1; it is overwritten.
    """
    if steps < 1:
        raise InvalidArgument("steps must be >= 1")

    if out is None:
        out = np.zeros(steps + 1, dtype=float)
    else:
        if out.shape != (steps + 1,):
            raise InvalidArgument(f"schedule buffer must have length {steps + 1}, got {out.shape}")
        out.fill(0.0)

    delta_t = time_to_expiry / steps

    for div in dividends:
        t_ex = div.time_to_ex_div
        if t_ex >= time_to_expiry:
            continue
        last = _last_step_before_ex_div(t_ex, delta_t, steps)
        k = np.arange(last + 1, dtype=float)
        out[: last + 1] += div.amount * np.exp(-rate * (t_ex - k * delta_t))

    return out


def present_value(dividends: Iterable[Dividend], *, rate: float, time_to_expiry: float) -> float:
    """Time-0 value of the dividends that go ex before expiry (schedule[0])."""
    total = 0.0
    for div in dividends:
        if div.time_to_ex_div < time_to_expiry:
            total += div.amount * math.exp(-rate * div.time_to_ex_div)
    return total
