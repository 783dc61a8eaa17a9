# main.py
import os
import sys
import logging
import argparse

from benchmark import BenchmarkRunner
from cache_config import CacheConfig, ConfigurationError, load_config
from memtrace import TraceFormatError, check_addresses, load_trace
from report import format_result
from simulator import simulate
from visualize import plot_cumulative_hit_rate, plot_hit_miss_rate


def build_parser():
    parser = argparse.ArgumentParser(description='Set-associative cache simulator')
    parser.add_argument('--config', dest='config', type=str, default='config.json', help='JSON configuration file')
    parser.add_argument('--trace', dest='trace', type=str, help='memory reference file (overrides trace.path)')
    parser.add_argument('--memory-size', dest='memory_size', type=int, help='main memory size in bytes')
    parser.add_argument('--cache-size', dest='cache_size', type=int, help='cache size in bytes')
    parser.add_argument('--block-size', dest='block_size', type=int, help='cache block/line size in bytes')
    parser.add_argument('--associativity', dest='associativity', type=int, help='n for an n-way set-associative mapping')
    parser.add_argument('--policy', dest='policy', type=str, help='replacement policy (L = LRU, F = FIFO)')
    parser.add_argument('--interactive', '-i', dest='interactive', action='store_true', help='prompt for the configuration')
    parser.add_argument('--benchmark', dest='benchmark', action='store_true', help='compare LRU and FIFO on a synthetic trace')
    parser.add_argument('--plots', dest='plots', action='store_true', help='save hit-rate charts of the simulation')
    parser.add_argument('--debug', '-D', dest='debug', action='store_true', help='output debug messages')
    return parser


def read_config(path):
    if os.path.exists(path):
        return load_config(path)
    logging.info('read_config(): {} not found, using defaults'.format(path))
    return {}


def run_trace(config, trace_path, out_cfg=None, plots=False):
    trace = load_trace(trace_path)
    check_addresses(trace, config)
    result = simulate(config, trace)
    print(format_result(result))
    if plots:
        out_cfg = out_cfg or {}
        plot_hit_miss_rate(result.stats.actual_hit_rate / 100.0,
                           out_cfg.get("hitmiss_plot", "results/hit_miss_rate.png"))
        plot_cumulative_hit_rate({config.policy.value: result},
                                 out_cfg.get("hitrate_plot", "results/cumulative_hit_rate.png"))
        print("Plots saved in {}/".format(out_cfg.get("results_dir", "results")))
    return result


def run_benchmark(cfg):
    runner = BenchmarkRunner(cfg)
    print("Starting benchmark with config:", cfg.get("benchmark", {}))
    summary, results = runner.run()
    out_cfg = cfg.get("output", {})
    results_path = runner.save_results(summary, out_cfg)
    for policy, s in summary.items():
        print("{:<5} hits {}/{} = {:.2f}% (highest possible {:.2f}%, {} write-backs)".format(
            policy, s["hits"], s["total_accesses"], s["hit_rate"], s["highest_hit_rate"], s["write_backs"]))
    print("Results saved to:", results_path)

    best = max(summary.values(), key=lambda s: s["hit_rate"])
    plot_hit_miss_rate(best["hit_rate"] / 100.0, out_cfg.get("hitmiss_plot", "results/hit_miss_rate.png"))
    plot_cumulative_hit_rate(results, out_cfg.get("hitrate_plot", "results/cumulative_hit_rate.png"))
    print("Plots saved in {}/".format(out_cfg.get("results_dir", "results")))
    return summary


def prompt_config(ask=input):
    memory_size = int(ask("Enter the size of Main Memory in bytes: "))
    cache_size = int(ask("Enter the size of the cache in bytes: "))
    block_size = int(ask("Enter the cache block/line size: "))
    associativity = int(ask("Enter the degree of set-associativity (input n for an n-way set-associative mapping): "))
    policy = ask("Enter the replacement policy (L = LRU, F = FIFO): ")
    trace_path = ask("Enter the name of the input file containing the list of memory references generated by the CPU: ").strip()
    return CacheConfig(memory_size, cache_size, block_size, associativity, policy), trace_path


def interactive(ask=input):
    while True:
        try:
            config, trace_path = prompt_config(ask)
            run_trace(config, trace_path)
        except ValueError as ex:
            # ConfigurationError, TraceFormatError and unparsable numbers
            logging.error('{}'.format(ex))
        except OSError as ex:
            logging.error('cannot read trace: {}'.format(ex))
        if ask("\nContinue? (y = yes, n = no): ").strip().lower() != 'y':
            return 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        stream=sys.stderr,
        format='%(levelname)s %(module)s: %(message)s',
        level=(logging.DEBUG if args.debug else logging.INFO),
        force=True,
    )
    logging.debug('args : {}'.format(args))

    if args.interactive:
        return interactive()

    try:
        cfg = read_config(args.config)
        if args.benchmark:
            run_benchmark(cfg)
            return 0
        config = CacheConfig.from_dict(
            cfg,
            memory_size=args.memory_size,
            cache_size=args.cache_size,
            block_size=args.block_size,
            associativity=args.associativity,
            policy=args.policy,
        )
        trace_path = args.trace or cfg.get("trace", {}).get("path")
        if not trace_path:
            raise ConfigurationError("no trace file given (use --trace or trace.path)")
        run_trace(config, trace_path, cfg.get("output", {}), args.plots)
    except (ConfigurationError, TraceFormatError) as ex:
        logging.error('{}'.format(ex))
        return 1
    except OSError as ex:
        logging.error('{}'.format(ex))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
