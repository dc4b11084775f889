import itertools

import pytest

from crr_pricer import bench
from crr_pricer.services.arena import Arena
from crr_pricer.services.benchmark import convergence_sweep, format_table
from crr_pricer.services.binomial import OptionSpec, price_option
from crr_pricer.services.dividends import Dividend
from crr_pricer.services.lattice_params import ExerciseStyle, OptionType


def _spec(style):
    return OptionSpec(
        option_type=OptionType.PUT,
        style=style,
        spot=235.50,
        rate=0.0042,
        time_to_expiry=0.5,
        volatility=0.25,
        strike=235.00,
        steps=100,
    )


def _fake_clock():
    ticks = itertools.count()
    return lambda: next(ticks) * 0.002


def test_sweep_reuses_arena_and_reports_latency():
    divs = [Dividend(amount=0.25, time_to_ex_div=0.25)]
    arena = Arena()
    rows = convergence_sweep(_spec(ExerciseStyle.AMERICAN), divs, [50, 200, 100], arena=arena, clock=_fake_clock())

    assert [r.steps for r in rows] == [50, 200, 100]
    assert all(r.latency_ms == pytest.approx(2.0) for r in rows)
    assert all(r.analytic_gap is None for r in rows)
    assert arena.capacity >= 3 * 201
    assert rows[2].price == price_option(_spec(ExerciseStyle.AMERICAN), divs)


def test_sweep_reports_gap_to_black_scholes_for_european():
    divs = [Dividend(amount=0.25, time_to_ex_div=0.25)]
    rows = convergence_sweep(_spec(ExerciseStyle.EUROPEAN), divs, [100, 2000])

    assert rows[0].analytic_gap is not None
    assert rows[1].analytic_gap < 0.05


def test_format_table():
    divs = [Dividend(amount=0.25, time_to_ex_div=0.25)]
    rows = convergence_sweep(_spec(ExerciseStyle.AMERICAN), divs, [10, 20], clock=_fake_clock())
    table = format_table(rows).splitlines()

    assert table[0].startswith("Steps (N)")
    assert "Latency (ms)" in table[0]
    assert table[1] == "-" * 40
    assert table[2].startswith("10")
    assert len(table) == 4


def test_bench_cli_prints_table(capsys):
    assert bench.main(["--steps", "20", "40", "--style", "european", "--dividend", "1.0@0.1"]) == 0
    out = capsys.readouterr().out
    assert "Steps (N)" in out
    assert out.strip().splitlines()[-1].startswith("40")


def test_bench_cli_fixed_arena_too_small():
    assert bench.main(["--steps", "100", "--arena-capacity", "30"]) == 2
