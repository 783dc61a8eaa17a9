# cache.py
import logging
from dataclasses import dataclass, replace
from typing import Optional


@dataclass
class CacheLine:
    valid: bool = False
    dirty: bool = False
    tag: Optional[int] = None
    block: Optional[int] = None  # main memory block held by the line
    last_touched: int = 0

    @property
    def label(self):
        return "mm blk # {}".format(self.block) if self.valid else "xxx"


class CacheStore:
    """
    Set-associative cache line array.
    Set s owns the `associativity` consecutive lines starting at
    s * associativity; that order is also the tie-break order for
    replacement.
    """

    def __init__(self, num_sets, associativity, policy):
        self.num_sets = num_sets
        self.associativity = associativity
        self.policy = policy
        self.num_lines = num_sets * associativity
        self.lines = [CacheLine() for _ in range(self.num_lines)]
        self._clock = 0

    @classmethod
    def for_config(cls, config):
        return cls(config.num_sets, config.associativity, config.policy)

    @property
    def clock(self):
        return self._clock

    def _tick(self, line_index):
        self._clock += 1
        self.lines[line_index].last_touched = self._clock

    def candidate_lines(self, set_index):
        first = set_index * self.associativity
        return tuple(range(first, first + self.associativity))

    def find_match(self, set_index, tag):
        for i in self.candidate_lines(set_index):
            line = self.lines[i]
            if line.valid and line.tag == tag:
                return i
        return None

    def find_empty(self, set_index):
        for i in self.candidate_lines(set_index):
            if not self.lines[i].valid:
                return i
        return None

    def install_line(self, line_index, tag, is_write, block=None):
        """
        Load a block into a line, overwriting whatever was there.
        Returns a copy of the displaced line.
        """
        previous = replace(self.lines[line_index])
        line = self.lines[line_index]
        line.valid = True
        line.tag = tag
        line.block = block
        line.dirty = bool(is_write)
        self._tick(line_index)
        return previous

    def touch(self, line_index, is_write):
        if self.policy.refreshes_on_hit:
            self._tick(line_index)
        if is_write:
            self.mark_dirty(line_index)

    def mark_dirty(self, line_index):
        self.lines[line_index].dirty = True

    def snapshot(self):
        return tuple(replace(line) for line in self.lines)


def line_stats(lines):
    return {
        "num_lines": len(lines),
        "used_lines": sum(1 for line in lines if line.valid),
        "dirty_lines": sum(1 for line in lines if line.dirty),
    }


class ReplacementEngine:
    """
    Picks the line to evict from a full set: the oldest timestamp wins,
    ties go to the lowest line index. Under LRU the timestamp is the last
    use, under FIFO the insertion time (see CacheStore.touch).
    """

    def __init__(self, policy):
        self.policy = policy

    def select_victim(self, candidates, store):
        victim = min(candidates, key=lambda i: (store.lines[i].last_touched, i))
        logging.debug('select_victim(): {} evicts line {} (t={})'.format(
            self.policy.value, victim, store.lines[victim].last_touched))
        return victim
