from __future__ import annotations

from fastapi import APIRouter, Depends

from crr_pricer.api.deps import get_settings
from crr_pricer.config import Settings
from crr_pricer.services.lattice_params import ExerciseStyle, OptionType


router = APIRouter()


@router.get("/pricer")
def get_pricer_metadata(settings: Settings = Depends(get_settings)) -> dict[str, object]:
    """Describe what the lattice pricer accepts.

    This is static metadata plus the server's step limits and arena policy.
    """
    return {
        "model": "crr_binomial_escrowed_dividends",
        "option_types": [t.value for t in OptionType],
        "exercise_styles": [s.value for s in ExerciseStyle],
        "default_steps": settings.default_steps,
        "max_steps": settings.max_steps,
        "arena": {
            "initial_capacity": settings.arena_capacity,
            "growable": settings.arena_growable,
        },
    }
