# simulator.py
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from addressing import AddressCodec
from cache import CacheLine, CacheStore, ReplacementEngine
from cache_config import CacheConfig
from memtrace import AccessTrace


class OutcomeKind(Enum):
    HIT = "hit"
    COLD_MISS = "cold miss"
    EVICTION = "eviction"


@dataclass(frozen=True)
class AccessOutcome:
    access_index: int
    address: int
    is_write: bool
    block_number: int
    set_index: int
    tag: int
    line_indices: Tuple[int, ...]
    hit: bool
    line_index: int
    kind: OutcomeKind
    evicted_block: Optional[int] = None
    write_back: bool = False


@dataclass(frozen=True)
class AggregateStats:
    total_accesses: int
    actual_hits: int
    theoretical_max_hits: int
    write_backs: int = 0

    @property
    def misses(self):
        return self.total_accesses - self.actual_hits

    @staticmethod
    def _percent(hits, total):
        return 100.0 * hits / total if total else 0.0

    @property
    def actual_hit_rate(self):
        return self._percent(self.actual_hits, self.total_accesses)

    @property
    def highest_hit_rate(self):
        return self._percent(self.theoretical_max_hits, self.total_accesses)

    def as_dict(self):
        return {
            "total_accesses": self.total_accesses,
            "hits": self.actual_hits,
            "misses": self.misses,
            "highest_possible_hits": self.theoretical_max_hits,
            "write_backs": self.write_backs,
            "hit_rate": self.actual_hit_rate,
            "highest_hit_rate": self.highest_hit_rate,
        }


@dataclass(frozen=True)
class SimulationResult:
    config: CacheConfig
    codec: AddressCodec
    outcomes: Tuple[AccessOutcome, ...]
    lines: Tuple[CacheLine, ...]
    stats: AggregateStats

    def hit_flags(self):
        return np.array([o.hit for o in self.outcomes], dtype=bool)


def compute_stats(outcomes, trace, codec):
    """
    Hits actually scored against the best case: every reference to a block
    after its first one hits (first references are unavoidable misses).
    """
    blocks = np.array(trace.block_numbers(codec), dtype=np.int64)
    total = len(trace)
    return AggregateStats(
        total_accesses=total,
        actual_hits=sum(1 for o in outcomes if o.hit),
        theoretical_max_hits=total - np.unique(blocks).size,
        write_backs=sum(1 for o in outcomes if o.write_back),
    )


class SimulationDriver:
    """
    Replays an access trace through a freshly built cache.

    Each access ends in exactly one of three states: a tag match in its set
    (hit), an empty line in its set (cold miss), or a replacement chosen
    by the ReplacementEngine (eviction). Misses always allocate the block,
    with the dirty bit set only for writes.
    """

    def __init__(self, config, trace):
        self.config = config
        self.trace = trace if isinstance(trace, AccessTrace) else AccessTrace(trace)
        self.codec = AddressCodec(config)
        self.engine = ReplacementEngine(config.policy)

    def run(self):
        store = CacheStore.for_config(self.config)
        outcomes = [self._step(store, i, access) for i, access in enumerate(self.trace)]
        stats = compute_stats(outcomes, self.trace, self.codec)
        logging.info('run(): {} {}-way {}: {}/{} hits (best case {})'.format(
            self.config.policy.value, self.config.associativity, self.config.cache_size,
            stats.actual_hits, stats.total_accesses, stats.theoretical_max_hits))
        return SimulationResult(self.config, self.codec, tuple(outcomes), store.snapshot(), stats)

    def _step(self, store, i, access):
        fields = self.codec.decompose(access.address)
        candidates = store.candidate_lines(fields.set_index)
        evicted_block = None
        write_back = False

        line = store.find_match(fields.set_index, fields.tag)
        if line is not None:
            kind = OutcomeKind.HIT
            store.touch(line, access.is_write)
        else:
            line = store.find_empty(fields.set_index)
            if line is not None:
                kind = OutcomeKind.COLD_MISS
            else:
                kind = OutcomeKind.EVICTION
                line = self.engine.select_victim(candidates, store)
            previous = store.install_line(line, fields.tag, access.is_write, fields.block_number)
            if previous.valid:
                evicted_block = previous.block
                write_back = previous.dirty

        logging.debug('_step(): [{:04}] {} blk {} set {} -> line {} {}'.format(
            i, access, fields.block_number, fields.set_index, line, kind.value))
        return AccessOutcome(
            access_index=i,
            address=access.address,
            is_write=access.is_write,
            block_number=fields.block_number,
            set_index=fields.set_index,
            tag=fields.tag,
            line_indices=candidates,
            hit=kind is OutcomeKind.HIT,
            line_index=line,
            kind=kind,
            evicted_block=evicted_block,
            write_back=write_back,
        )


def simulate(config, trace):
    return SimulationDriver(config, trace).run()
