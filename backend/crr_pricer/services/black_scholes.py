from __future__ import annotations

import math
from typing import Sequence

from crr_pricer.services.dividends import Dividend, present_value
from crr_pricer.services.lattice_params import OptionType, coerce_option_type


def norm_cdf(x: float) -> float:
    """Standard normal CDF."""
    return 0.5 * math.erfc(-x / math.sqrt(2.0))


def escrowed_black_scholes_price(
    option_type: OptionType | str,
    *,
    spot: float,
    strike: float,
    rate: float,
    vol: float,
    time_to_expiry: float,
    dividends: Sequence[Dividend] = (),
) -> float:
    """European Black–Scholes price under the escrowed dividend model.

    Conventions:
      - rate is a continuously-compounded annual rate.
      - vol is annualized (e.g. 0.20 for 20%) and applies to S - PV(dividends).
      - only dividends going ex before expiry are escrowed.

    This is the limit the CRR lattice converges to for European exercise.
    """
    option_type = coerce_option_type(option_type)
    spot_adj = spot - present_value(dividends, rate=rate, time_to_expiry=time_to_expiry)

    if time_to_expiry <= 0:
        intrinsic = max(0.0, spot - strike) if option_type is OptionType.CALL else max(0.0, strike - spot)
        return intrinsic

    if vol <= 0:
        raise ValueError("vol must be > 0")
    if spot_adj <= 0:
        raise ValueError("spot must exceed the present value of escrowed dividends")

    sqrtT = math.sqrt(time_to_expiry)
    d1 = (math.log(spot_adj / strike) + (rate + 0.5 * vol * vol) * time_to_expiry) / (vol * sqrtT)
    d2 = d1 - vol * sqrtT
    disc_r = math.exp(-rate * time_to_expiry)

    if option_type is OptionType.CALL:
        return spot_adj * norm_cdf(d1) - strike * disc_r * norm_cdf(d2)
    return strike * disc_r * norm_cdf(-d2) - spot_adj * norm_cdf(-d1)
