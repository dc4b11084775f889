from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Sequence

from crr_pricer.services.arena import Arena
from crr_pricer.services.binomial import OptionSpec, price_option
from crr_pricer.services.black_scholes import escrowed_black_scholes_price
from crr_pricer.services.dividends import Dividend
from crr_pricer.services.lattice_params import ExerciseStyle, coerce_exercise_style

logger = logging.getLogger(__name__)

DEFAULT_STEPS: tuple[int, ...] = (100, 500, 1000, 5000, 10000, 20000)


@dataclass(frozen=True)
class SweepRow:
    steps: int
    price: float
    latency_ms: float
    analytic_gap: float | None


def convergence_sweep(
    spec: OptionSpec,
    dividends: Sequence[Dividend],
    steps_list: Iterable[int] = DEFAULT_STEPS,
    *,
    arena: Arena | None = None,
    clock: Callable[[], float] = time.perf_counter,
) -> list[SweepRow]:
    """Reprice `spec` for each step count, reusing one arena.

    For European contracts `analytic_gap` is |lattice - escrowed Black–Scholes|;
    American contracts have no closed form, so the gap is None.
    """
    if arena is None:
        arena = Arena()

    analytic: float | None = None
    if coerce_exercise_style(spec.style) is ExerciseStyle.EUROPEAN:
        analytic = escrowed_black_scholes_price(
            spec.option_type,
            spot=spec.spot,
            strike=spec.strike,
            rate=spec.rate,
            vol=spec.volatility,
            time_to_expiry=spec.time_to_expiry,
            dividends=dividends,
        )

    rows: list[SweepRow] = []
    for n in steps_list:
        start = clock()
        value = price_option(replace(spec, steps=n), dividends, arena=arena)
        elapsed_ms = (clock() - start) * 1000.0
        gap = abs(value - analytic) if analytic is not None else None
        logger.debug("sweep n=%d price=%.6f latency=%.3fms", n, value, elapsed_ms)
        rows.append(SweepRow(steps=n, price=value, latency_ms=elapsed_ms, analytic_gap=gap))
    return rows


def format_table(rows: Iterable[SweepRow]) -> str:
    lines = [f"{'Steps (N)':<10}{'Price':<15}{'Latency (ms)':<15}", "-" * 40]
    for row in rows:
        lines.append(f"{row.steps:<10}{row.price:<15.6f}{row.latency_ms:<15.6f}")
    return "\n".join(lines)
