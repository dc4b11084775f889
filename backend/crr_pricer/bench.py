"""Latency / convergence table for the CRR lattice pricer.

Reprices one contract for a list of step counts, reusing a single arena, and
prints price and wall-clock latency per row. Defaults reproduce the classic
American put on a dividend-paying stock:

    crr-bench
    crr-bench --style european --steps 100 1000 10000
"""

from __future__ import annotations

import argparse
import logging
import sys

from crr_pricer.services.arena import Arena
from crr_pricer.services.benchmark import DEFAULT_STEPS, convergence_sweep, format_table
from crr_pricer.services.binomial import OptionSpec
from crr_pricer.services.dividends import Dividend
from crr_pricer.services.errors import ResourceExhausted
from crr_pricer.services.lattice_params import ExerciseStyle, OptionType

logger = logging.getLogger(__name__)


def _dividend(text: str) -> Dividend:
    try:
        amount, when = text.split("@", 1)
        return Dividend(amount=float(amount), time_to_ex_div=float(when))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"dividend must look like AMOUNT@TIME, got {text!r}: {e}") from e


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Print a steps / price / latency table for the CRR lattice pricer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--type", dest="option_type", choices=[t.value for t in OptionType], default="put")
    parser.add_argument("--style", choices=[s.value for s in ExerciseStyle], default="american")
    parser.add_argument("--spot", type=float, default=235.50)
    parser.add_argument("--rate", type=float, default=0.0042)
    parser.add_argument("--expiry", type=float, default=0.5, help="Time to expiry in years")
    parser.add_argument("--vol", type=float, default=0.25)
    parser.add_argument("--strike", type=float, default=235.00)
    parser.add_argument(
        "--dividend",
        dest="dividends",
        type=_dividend,
        action="append",
        help="Cash dividend as AMOUNT@TIME_TO_EX_DIV (repeatable, default 0.25@0.25)",
    )
    parser.add_argument("--steps", type=int, nargs="+", default=list(DEFAULT_STEPS))
    parser.add_argument(
        "--arena-capacity",
        type=int,
        default=None,
        help="Fixed arena capacity in slots; omit for a growing arena",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    dividends = args.dividends if args.dividends is not None else [Dividend(amount=0.25, time_to_ex_div=0.25)]
    if args.arena_capacity is None:
        arena = Arena()
    else:
        arena = Arena(args.arena_capacity, growable=False)

    spec = OptionSpec(
        option_type=OptionType(args.option_type),
        style=ExerciseStyle(args.style),
        spot=args.spot,
        rate=args.rate,
        time_to_expiry=args.expiry,
        volatility=args.vol,
        strike=args.strike,
        steps=args.steps[0],
    )

    try:
        rows = convergence_sweep(spec, dividends, args.steps, arena=arena)
    except (ValueError, ResourceExhausted) as e:
        logger.error("Sweep failed: %s", e)
        return 2

    print(format_table(rows))
    return 0


if __name__ == "__main__":
    sys.exit(main())
