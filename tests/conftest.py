import matplotlib

matplotlib.use("Agg")

import pytest

from cache_config import CacheConfig, ReplacementPolicy
from memtrace import AccessTrace


@pytest.fixture
def lru_config():
    # 8 lines, 4 sets of 2 ways: 4 offset bits, 2 index bits, 4 tag bits
    return CacheConfig(memory_size=1024, cache_size=128, block_size=16, associativity=2,
                       policy=ReplacementPolicy.LRU)


@pytest.fixture
def fifo_config(lru_config):
    return lru_config.with_policy("FIFO")


@pytest.fixture
def make_trace():
    def _make(*refs):
        """make_trace("R 0", "W 16") -> AccessTrace"""
        return AccessTrace.from_pairs(ref.split() for ref in refs)
    return _make


@pytest.fixture
def trace_file(tmp_path):
    def _write(text, name="trace.txt"):
        path = tmp_path / name
        path.write_text(text)
        return str(path)
    return _write
