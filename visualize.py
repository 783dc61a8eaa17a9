# visualize.py
import os
import numpy as np
import matplotlib.pyplot as plt


def _prepare(outpath):
    os.makedirs(os.path.dirname(outpath) or ".", exist_ok=True)


def cumulative_hit_rate(hit_flags):
    """Running hit rate (percent) after each access."""
    flags = np.asarray(hit_flags, dtype=float)
    if flags.size == 0:
        return flags
    return 100.0 * np.cumsum(flags) / np.arange(1, flags.size + 1)


def plot_cumulative_hit_rate(results, outpath):
    """results maps a label (e.g. "LRU") to a SimulationResult."""
    _prepare(outpath)
    plt.figure(figsize=(8,4))
    for label, result in results.items():
        plt.plot(cumulative_hit_rate(result.hit_flags()), linewidth=1.0, label=label)
    plt.title("Cumulative Hit Rate")
    plt.xlabel("Access Index")
    plt.ylabel("Hit Rate (%)")
    plt.ylim(0, 100)
    plt.legend()
    plt.grid(True)
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()
    return outpath


def plot_hit_miss_rate(hit_rate, outpath):
    """hit_rate is a fraction in [0, 1]."""
    _prepare(outpath)
    plt.figure(figsize=(4,4))
    labels = ['Hit', 'Miss']
    sizes = [hit_rate, 1.0 - hit_rate]
    plt.pie(sizes, labels=labels, autopct='%1.1f%%')
    plt.title("Cache Hit/Miss Rate")
    plt.tight_layout()
    plt.savefig(outpath)
    plt.close()
    return outpath
