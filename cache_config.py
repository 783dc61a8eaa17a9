# cache_config.py
import json
import logging
from dataclasses import dataclass
from enum import Enum


class ConfigurationError(ValueError):
    """Raised when a cache configuration cannot be simulated."""


class ReplacementPolicy(Enum):
    LRU = "LRU"
    FIFO = "FIFO"

    @property
    def refreshes_on_hit(self):
        # LRU orders by last use, FIFO strictly by insertion
        return self is ReplacementPolicy.LRU

    @classmethod
    def parse(cls, text):
        """
        Accept the long names ("LRU", "fifo") as well as the one-letter
        answers of the interactive prompt ("L", "F").
        """
        if isinstance(text, cls):
            return text
        key = str(text).strip().upper()
        aliases = {"L": cls.LRU, "F": cls.FIFO}
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError:
            raise ConfigurationError("unknown replacement policy: {!r}".format(text)) from None


def is_power_of_two(value):
    return isinstance(value, int) and value > 0 and (value & (value - 1)) == 0


@dataclass(frozen=True)
class CacheConfig:
    """
    Immutable description of the simulated memory system.

    Sizes are in bytes. associativity is the number of ways per set
    (1 is direct-mapped, num_lines is fully associative).
    """
    memory_size: int
    cache_size: int
    block_size: int
    associativity: int
    policy: ReplacementPolicy = ReplacementPolicy.LRU

    def __post_init__(self):
        if not isinstance(self.policy, ReplacementPolicy):
            object.__setattr__(self, "policy", ReplacementPolicy.parse(self.policy))
        for name in ("memory_size", "cache_size", "block_size"):
            value = getattr(self, name)
            if not is_power_of_two(value):
                raise ConfigurationError("{} must be a positive power of two (got {!r})".format(name, value))
        if not isinstance(self.associativity, int) or self.associativity <= 0:
            raise ConfigurationError("associativity must be a positive integer (got {!r})".format(self.associativity))
        if self.cache_size % self.block_size != 0:
            raise ConfigurationError("cache size {} is not a multiple of block size {}".format(self.cache_size, self.block_size))
        if self.cache_size > self.memory_size:
            raise ConfigurationError("cache size {} exceeds main memory size {}".format(self.cache_size, self.memory_size))
        if self.num_lines % self.associativity != 0:
            raise ConfigurationError("associativity {} does not divide the {} cache lines".format(self.associativity, self.num_lines))

    @property
    def num_lines(self):
        return self.cache_size // self.block_size

    @property
    def num_sets(self):
        return self.num_lines // self.associativity

    @classmethod
    def from_dict(cls, cfg, **overrides):
        """
        Build a configuration from the "memory" and "cache" sections of a
        config document. Keyword overrides that are not None win over the
        file (the command line uses this).
        """
        mem_cfg = cfg.get("memory", {})
        cache_cfg = cfg.get("cache", {})
        values = {
            "memory_size": mem_cfg.get("size_bytes", 1024),
            "cache_size": cache_cfg.get("size_bytes", 128),
            "block_size": cache_cfg.get("block_size_bytes", 16),
            "associativity": cache_cfg.get("associativity", 2),
            "policy": cache_cfg.get("replacement_policy", "LRU"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        logging.debug('CacheConfig.from_dict(): {}'.format(values))
        return cls(**values)

    def with_policy(self, policy):
        return CacheConfig(self.memory_size, self.cache_size, self.block_size,
                           self.associativity, ReplacementPolicy.parse(policy))


def load_config(path="config.json"):
    try:
        with open(path, "r") as f:
            return json.load(f)
    except json.JSONDecodeError as ex:
        raise ConfigurationError("{}: invalid JSON ({})".format(path, ex)) from ex
