import os

import pytest

from simulator import simulate
from visualize import cumulative_hit_rate, plot_cumulative_hit_rate, plot_hit_miss_rate


def test_cumulative_hit_rate():
    rates = cumulative_hit_rate([True, False, True, True])
    assert rates.tolist() == pytest.approx([100.0, 50.0, 200.0 / 3, 75.0])


def test_cumulative_hit_rate_empty():
    assert cumulative_hit_rate([]).size == 0


def test_plots_are_written(tmp_path, lru_config, fifo_config, make_trace):
    trace = make_trace("R 0", "R 64", "R 0", "R 128", "R 0")
    results = {"LRU": simulate(lru_config, trace), "FIFO": simulate(fifo_config, trace)}
    pie = plot_hit_miss_rate(results["LRU"].stats.actual_hit_rate / 100.0, str(tmp_path / "plots" / "pie.png"))
    line = plot_cumulative_hit_rate(results, str(tmp_path / "plots" / "rate.png"))
    assert os.path.getsize(pie) > 0
    assert os.path.getsize(line) > 0
