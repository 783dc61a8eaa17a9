# benchmark.py
import os
import json
import time
import logging
import threading
import numpy as np
from cache import line_stats
from cache_config import CacheConfig, ReplacementPolicy
from memtrace import Access, AccessTrace
from simulator import simulate


class TraceGenerator:
    """
    Synthetic reference stream over a working set of memory blocks.
    Patterns: "sequential" walks the blocks in order, "random" picks them
    uniformly, "mixed" is mostly sequential with some random jumps.
    """

    def __init__(self, config, working_set_blocks=64, access_pattern="mixed", read_ratio=0.8, seed=None):
        if access_pattern not in ("sequential", "random", "mixed"):
            raise ValueError("unknown access pattern: {!r}".format(access_pattern))
        self.config = config
        self.rng = np.random.default_rng(seed)
        # the working set never exceeds main memory
        self.num_blocks = max(1, min(working_set_blocks, config.memory_size // config.block_size))
        self.access_pattern = access_pattern
        self.read_ratio = read_ratio
        self._seq_ptr = 0

    def _next_sequential(self):
        block = self._seq_ptr
        self._seq_ptr = (block + 1) % self.num_blocks
        return block

    def _next_block(self):
        if self.access_pattern == "sequential":
            return self._next_sequential()
        elif self.access_pattern == "random":
            return int(self.rng.integers(0, self.num_blocks))
        else:  # mixed
            if self.rng.random() < 0.8:
                return self._next_sequential()
            return int(self.rng.integers(0, self.num_blocks))

    def generate(self, num_requests):
        accesses = []
        for _ in range(num_requests):
            block = self._next_block()
            offset = int(self.rng.integers(0, self.config.block_size))
            is_write = bool(self.rng.random() >= self.read_ratio)
            accesses.append(Access(is_write, block * self.config.block_size + offset))
        return AccessTrace(accesses)


class BenchmarkRunner:
    """Runs one synthetic trace through every replacement policy and compares them."""

    def __init__(self, cfg, policies=(ReplacementPolicy.LRU, ReplacementPolicy.FIFO)):
        self.cfg = cfg
        bench_cfg = cfg.get("benchmark", {})
        self.config = CacheConfig.from_dict(cfg)
        self.policies = tuple(ReplacementPolicy.parse(p) for p in policies)
        self.num_requests = bench_cfg.get("num_requests", 10000)
        self.generator = TraceGenerator(
            self.config,
            working_set_blocks=bench_cfg.get("working_set_blocks", 4 * self.config.num_lines),
            access_pattern=bench_cfg.get("access_pattern", "mixed"),
            read_ratio=bench_cfg.get("read_ratio", 0.8),
            seed=bench_cfg.get("random_seed", None),
        )
        self.results_lock = threading.Lock()
        self.results = {}
        self.durations = {}

    def _worker(self, policy, trace):
        start = time.time()
        result = simulate(self.config.with_policy(policy), trace)
        end = time.time()
        with self.results_lock:
            self.results[policy.value] = result
            self.durations[policy.value] = end - start

    def run(self, trace=None):
        if trace is None:
            trace = self.generator.generate(self.num_requests)
        logging.info('run(): {} references, policies {}'.format(len(trace), [p.value for p in self.policies]))
        threads = []
        for policy in self.policies:
            t = threading.Thread(target=self._worker, args=(policy, trace), name=policy.value)
            t.start()
            threads.append(t)
        for t in threads:
            t.join()

        summary = {}
        for policy in self.policies:
            result = self.results[policy.value]
            summary[policy.value] = {
                **result.stats.as_dict(),
                "duration_s": self.durations[policy.value],
                "cache": line_stats(result.lines),
            }
        return summary, self.results

    def save_results(self, summary, out_cfg):
        results_dir = out_cfg.get("results_dir", "results")
        os.makedirs(results_dir, exist_ok=True)
        path = os.path.join(results_dir, out_cfg.get("results_file", "results.json"))
        with open(path, "w") as f:
            json.dump(summary, f, indent=2)
        return path
