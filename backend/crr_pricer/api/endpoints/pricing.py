from __future__ import annotations

import logging
from dataclasses import replace

from fastapi import APIRouter, Depends, HTTPException

from crr_pricer.api.deps import get_arenas, get_settings
from crr_pricer.config import Settings
from crr_pricer.schemas.pricing import (
    BinomialPricingRequest,
    BinomialPricingResponse,
    DividendIn,
    SweepRequest,
    SweepResponse,
    SweepRowOut,
)
from crr_pricer.services.arena import ThreadArenas
from crr_pricer.services.benchmark import convergence_sweep
from crr_pricer.services.binomial import OptionSpec, price_option
from crr_pricer.services.black_scholes import escrowed_black_scholes_price
from crr_pricer.services.dividends import Dividend, present_value
from crr_pricer.services.errors import ResourceExhausted
from crr_pricer.services.lattice_params import ExerciseStyle

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_dividends(items: list[DividendIn]) -> list[Dividend]:
    return [Dividend(amount=d.amount, time_to_ex_div=d.time_to_ex_div) for d in items]


def _check_steps(steps: int, settings: Settings) -> None:
    if steps > settings.max_steps:
        raise HTTPException(status_code=400, detail=f"steps must be <= {settings.max_steps}")


def _pricer_error(e: Exception) -> HTTPException:
    if isinstance(e, ResourceExhausted):
        logger.warning("Arena exhausted: %s", e)
        return HTTPException(status_code=503, detail=str(e))
    logger.warning("Rejected pricing request: %s", e)
    return HTTPException(status_code=400, detail=str(e))


@router.post("/binomial", response_model=BinomialPricingResponse)
def price_binomial(
    req: BinomialPricingRequest,
    settings: Settings = Depends(get_settings),
    arenas: ThreadArenas = Depends(get_arenas),
) -> BinomialPricingResponse:
    steps = req.steps if req.steps is not None else settings.default_steps
    _check_steps(steps, settings)

    arena = arenas.get()
    dividends = _to_dividends(req.dividends)
    spec = OptionSpec(
        option_type=req.option_type,
        style=req.style,
        spot=req.spot,
        rate=req.rate,
        time_to_expiry=req.time_to_expiry,
        volatility=req.vol,
        strike=req.strike,
        steps=steps,
    )
    try:
        value = price_option(spec, dividends, arena=arena)
        if req.style is ExerciseStyle.AMERICAN:
            european = price_option(
                replace(spec, style=ExerciseStyle.EUROPEAN),
                dividends,
                arena=arena,
            )
        else:
            european = value
    except (ValueError, ResourceExhausted) as e:
        raise _pricer_error(e) from e

    return BinomialPricingResponse(
        price_per_unit=value,
        price_total=value * req.quantity,
        steps=steps,
        escrowed_dividend_pv=present_value(dividends, rate=req.rate, time_to_expiry=req.time_to_expiry),
        european_price=european,
        early_exercise_premium=value - european,
    )


@router.post("/binomial/sweep", response_model=SweepResponse)
def sweep_binomial(
    req: SweepRequest,
    settings: Settings = Depends(get_settings),
    arenas: ThreadArenas = Depends(get_arenas),
) -> SweepResponse:
    """Reprice one contract for several step counts (convergence + latency table)."""
    for n in req.steps:
        _check_steps(n, settings)

    arena = arenas.get()
    dividends = _to_dividends(req.dividends)
    spec = OptionSpec(
        option_type=req.option_type,
        style=req.style,
        spot=req.spot,
        rate=req.rate,
        time_to_expiry=req.time_to_expiry,
        volatility=req.vol,
        strike=req.strike,
        steps=req.steps[0],
    )
    try:
        rows = convergence_sweep(spec, dividends, req.steps, arena=arena)
        analytic = None
        if req.style is ExerciseStyle.EUROPEAN:
            analytic = escrowed_black_scholes_price(
                req.option_type,
                spot=req.spot,
                strike=req.strike,
                rate=req.rate,
                vol=req.vol,
                time_to_expiry=req.time_to_expiry,
                dividends=dividends,
            )
    except (ValueError, ResourceExhausted) as e:
        raise _pricer_error(e) from e

    return SweepResponse(
        analytic_price=analytic,
        rows=[
            SweepRowOut(steps=r.steps, price=r.price, latency_ms=r.latency_ms, analytic_gap=r.analytic_gap)
            for r in rows
        ],
    )
