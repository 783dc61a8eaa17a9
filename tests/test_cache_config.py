import json

import pytest

from cache_config import CacheConfig, ConfigurationError, ReplacementPolicy, load_config


def test_derived_geometry(lru_config):
    assert lru_config.num_lines == 8
    assert lru_config.num_sets == 4


@pytest.mark.parametrize("text,policy", [
    ("L", ReplacementPolicy.LRU),
    ("lru", ReplacementPolicy.LRU),
    ("F", ReplacementPolicy.FIFO),
    (" fifo ", ReplacementPolicy.FIFO),
    (ReplacementPolicy.FIFO, ReplacementPolicy.FIFO),
])
def test_policy_parse(text, policy):
    assert ReplacementPolicy.parse(text) is policy


def test_policy_parse_rejects_unknown():
    with pytest.raises(ConfigurationError):
        ReplacementPolicy.parse("random")


def test_only_lru_refreshes_on_hit():
    assert ReplacementPolicy.LRU.refreshes_on_hit
    assert not ReplacementPolicy.FIFO.refreshes_on_hit


def test_policy_given_as_text_is_normalised():
    config = CacheConfig(1024, 128, 16, 2, "F")
    assert config.policy is ReplacementPolicy.FIFO


@pytest.mark.parametrize("memory,cache,block,ways", [
    (1000, 128, 16, 2),   # memory not a power of two
    (1024, 96, 16, 2),    # cache not a power of two
    (1024, 128, 12, 2),   # block not a power of two
    (1024, 128, 0, 2),    # zero block size
    (1024, 128, 256, 1),  # block larger than cache
    (1024, 128, 16, 3),   # ways do not divide 8 lines
    (1024, 128, 16, 0),
    (64, 128, 16, 2),     # cache larger than memory
])
def test_invalid_configurations(memory, cache, block, ways):
    with pytest.raises(ConfigurationError):
        CacheConfig(memory, cache, block, ways)


def test_configuration_error_is_value_error():
    assert issubclass(ConfigurationError, ValueError)


def test_from_dict_defaults_and_overrides():
    cfg = {"memory": {"size_bytes": 4096}, "cache": {"size_bytes": 256, "replacement_policy": "FIFO"}}
    config = CacheConfig.from_dict(cfg, associativity=4, block_size=None)
    assert config.memory_size == 4096
    assert config.cache_size == 256
    assert config.block_size == 16
    assert config.associativity == 4
    assert config.policy is ReplacementPolicy.FIFO


def test_with_policy_keeps_geometry(lru_config):
    fifo = lru_config.with_policy("F")
    assert fifo.policy is ReplacementPolicy.FIFO
    assert (fifo.memory_size, fifo.cache_size, fifo.block_size, fifo.associativity) == (1024, 128, 16, 2)


def test_load_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"cache": {"associativity": 4}}))
    assert load_config(str(path)) == {"cache": {"associativity": 4}}


def test_load_config_rejects_bad_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(ConfigurationError):
        load_config(str(path))
