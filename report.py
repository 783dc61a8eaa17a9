# report.py
RULE = "-" * 84


def describe_lines(line_indices):
    """Candidate cache blocks as shown in the address table: "4", "4 or 5", "4 to 7"."""
    if len(line_indices) == 1:
        return str(line_indices[0])
    if len(line_indices) == 2:
        return "{} or {}".format(*line_indices)
    return "{} to {}".format(line_indices[0], line_indices[-1])


def format_simulator_output(codec):
    return "\n".join([
        "Simulator Output:",
        "Total address lines required = {}".format(codec.address_lines),
        "Number of bits for offset = {}".format(codec.offset_bits),
        "Number of bits for index = {}".format(codec.set_bits),
        "Number of bits for tag = {}".format(codec.tag_bits),
        "Total cache size required = {} bytes".format(codec.total_cache_size),
    ])


def format_address_table(outcomes):
    rows = [
        "{:<22}{:<12}{:<12}{:<14}{}".format("main memory address", "mm blk #", "cm set #", "cm blk #", "hit/miss"),
        RULE,
    ]
    for o in outcomes:
        rows.append("{:<22}{:<12}{:<12}{:<14}{}".format(
            o.address, o.block_number, o.set_index, describe_lines(o.line_indices),
            "hit" if o.hit else "miss"))
    return "\n".join(rows)


def format_hit_rates(stats):
    return "\n".join([
        "Highest possible hit rate = {}/{} = {:.2f}%".format(
            stats.theoretical_max_hits, stats.total_accesses, stats.highest_hit_rate),
        "Actual hit rate = {}/{} = {:.2f}%".format(
            stats.actual_hits, stats.total_accesses, stats.actual_hit_rate),
    ])


def format_cache_table(lines, codec):
    rows = [
        'Final "status" of the cache:',
        "{:<14}{:<12}{:<12}{:<{w}}{}".format("cache blk #", "dirty bit", "valid bit", "tag", "data",
                                              w=max(codec.tag_bits, 3) + 4),
        RULE,
    ]
    for i, line in enumerate(lines):
        rows.append("{:<14}{:<12}{:<12}{:<{w}}{}".format(
            i, int(line.dirty), int(line.valid), codec.format_tag(line.tag if line.valid else None),
            line.label, w=max(codec.tag_bits, 3) + 4))
    return "\n".join(rows)


def format_result(result):
    return "\n\n".join([
        format_simulator_output(result.codec),
        format_address_table(result.outcomes),
        format_hit_rates(result.stats),
        format_cache_table(result.lines, result.codec),
    ])
