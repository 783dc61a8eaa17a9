from memtrace import AccessTrace
from report import (describe_lines, format_address_table, format_cache_table, format_hit_rates,
                    format_result, format_simulator_output)
from simulator import simulate


def test_describe_lines():
    assert describe_lines((6,)) == "6"
    assert describe_lines((4, 5)) == "4 or 5"
    assert describe_lines((8, 9, 10, 11)) == "8 to 11"


def test_simulator_output(lru_config):
    result = simulate(lru_config, AccessTrace())
    text = format_simulator_output(result.codec)
    assert "Total address lines required = 10" in text
    assert "Number of bits for offset = 4" in text
    assert "Number of bits for index = 2" in text
    assert "Number of bits for tag = 4" in text
    assert "Total cache size required = 134 bytes" in text


def test_address_table(lru_config, make_trace):
    result = simulate(lru_config, make_trace("R 0", "R 16", "R 32", "R 0"))
    rows = format_address_table(result.outcomes).splitlines()
    assert rows[0].split()[:3] == ["main", "memory", "address"]
    assert len(rows) == 2 + 4
    assert rows[2].split() == ["0", "0", "0", "0", "or", "1", "miss"]
    assert rows[3].split() == ["16", "1", "1", "2", "or", "3", "miss"]
    assert rows[5].split() == ["0", "0", "0", "0", "or", "1", "hit"]


def test_hit_rates(lru_config, make_trace):
    result = simulate(lru_config, make_trace("R 0", "R 16", "R 32", "R 0"))
    text = format_hit_rates(result.stats)
    assert "Highest possible hit rate = 1/4 = 25.00%" in text
    assert "Actual hit rate = 1/4 = 25.00%" in text


def test_cache_table(lru_config, make_trace):
    result = simulate(lru_config, make_trace("W 64", "R 200"))
    rows = format_cache_table(result.lines, result.codec).splitlines()
    assert rows[0] == 'Final "status" of the cache:'
    assert len(rows) == 3 + 8
    assert rows[3].split() == ["0", "1", "1", "0001", "mm", "blk", "#", "4"]
    assert rows[4].split() == ["1", "0", "1", "0011", "mm", "blk", "#", "12"]
    assert rows[5].split() == ["2", "0", "0", "xxxx", "xxx"]


def test_format_result_has_every_section(lru_config, make_trace):
    text = format_result(simulate(lru_config, make_trace("R 0")))
    for heading in ("Simulator Output:", "main memory address", "Actual hit rate", 'Final "status"'):
        assert heading in text
