from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from crr_pricer.services.lattice_params import ExerciseStyle, OptionType


class DividendIn(BaseModel):
    amount: float = Field(gt=0, description="Cash dividend per share")
    time_to_ex_div: float = Field(ge=0, description="Time to ex-dividend date in years")


# --------------------------
# Single binomial price
# --------------------------


class BinomialPricingRequest(BaseModel):
    option_type: OptionType = Field(description="Option type")
    style: ExerciseStyle = Field(default=ExerciseStyle.AMERICAN, description="Exercise style")
    spot: float = Field(gt=0, description="Spot price")
    strike: float = Field(gt=0, description="Strike price")
    rate: float = Field(description="Continuously-compounded annual risk-free rate (e.g., 0.05)")
    vol: float = Field(gt=0, description="Annualized volatility (e.g., 0.20)")
    time_to_expiry: float = Field(gt=0, description="Time to expiry in years (e.g., 0.5)")
    dividends: list[DividendIn] = Field(default_factory=list, description="Discrete cash dividends")
    steps: int | None = Field(default=None, ge=1, description="Lattice steps (server default if omitted)")
    quantity: float = Field(default=1.0, gt=0, description="Number of option units")


class BinomialPricingResponse(BaseModel):
    price_per_unit: float
    price_total: float
    steps: int
    escrowed_dividend_pv: float
    european_price: float
    early_exercise_premium: float


# --------------------------
# Steps sweep (convergence / latency)
# --------------------------


class SweepRequest(BaseModel):
    option_type: OptionType
    style: ExerciseStyle = ExerciseStyle.AMERICAN
    spot: float = Field(gt=0)
    strike: float = Field(gt=0)
    rate: float
    vol: float = Field(gt=0)
    time_to_expiry: float = Field(gt=0)
    dividends: list[DividendIn] = Field(default_factory=list)
    steps: list[int] = Field(min_length=1, max_length=20, description="Step counts to price, in order")

    @model_validator(mode="after")
    def _validate_steps(self) -> "SweepRequest":
        if any(n < 1 for n in self.steps):
            raise ValueError("every step count must be >= 1")
        return self


class SweepRowOut(BaseModel):
    steps: int
    price: float
    latency_ms: float
    analytic_gap: float | None = None


class SweepResponse(BaseModel):
    analytic_price: float | None = None
    rows: list[SweepRowOut]
