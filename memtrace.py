# memtrace.py
import logging
from collections.abc import Sequence
from dataclasses import dataclass


class TraceFormatError(ValueError):
    """Raised for a memory reference file the simulator cannot replay."""


@dataclass(frozen=True)
class Access:
    is_write: bool
    address: int

    @property
    def op(self):
        return "W" if self.is_write else "R"

    def __str__(self):
        return "{} {}".format(self.op, self.address)


class AccessTrace(Sequence):
    """Ordered, immutable sequence of memory accesses."""

    def __init__(self, accesses=()):
        self._accesses = tuple(accesses)

    def __getitem__(self, i):
        if isinstance(i, slice):
            return AccessTrace(self._accesses[i])
        return self._accesses[i]

    def __len__(self):
        return len(self._accesses)

    def __eq__(self, other):
        if isinstance(other, AccessTrace):
            return self._accesses == other._accesses
        return NotImplemented

    def __hash__(self):
        return hash(self._accesses)

    def __repr__(self):
        return "AccessTrace({} accesses)".format(len(self._accesses))

    @classmethod
    def from_pairs(cls, pairs):
        """Build a trace from (op, address) pairs such as ("R", 16)."""
        return cls(_make_access(op, address) for op, address in pairs)

    def block_numbers(self, codec):
        return [codec.block_number(a.address) for a in self._accesses]


def _make_access(op, address, lineno=None):
    where = "line {}: ".format(lineno) if lineno is not None else ""
    op = str(op).strip().upper()
    if op not in ("R", "W"):
        raise TraceFormatError("{}unknown operation {!r} (expected R or W)".format(where, op))
    if isinstance(address, str):
        text = address.strip()
        if not (text.isascii() and text.isdecimal()):
            raise TraceFormatError("{}address {!r} is not a decimal integer".format(where, address))
        address = int(text)
    elif not isinstance(address, int) or isinstance(address, bool):
        raise TraceFormatError("{}address {!r} is not a decimal integer".format(where, address))
    if address < 0:
        raise TraceFormatError("{}negative address {}".format(where, address))
    return Access(op == "W", address)


def parse_trace(lines):
    """
    Parse a memory reference listing: a first line holding the number of
    references, then one "R <address>" or "W <address>" per line. Blank
    lines are ignored.
    """
    rows = [(n, line.strip()) for n, line in enumerate(lines, 1) if line.strip()]
    if not rows:
        raise TraceFormatError("empty trace: missing reference count")
    lineno, header = rows[0]
    try:
        declared = int(header)
    except ValueError:
        raise TraceFormatError("line {}: reference count {!r} is not an integer".format(lineno, header)) from None
    accesses = []
    for lineno, line in rows[1:]:
        fields = line.split()
        if len(fields) != 2:
            raise TraceFormatError("line {}: expected '<R|W> <address>', got {!r}".format(lineno, line))
        accesses.append(_make_access(fields[0], fields[1], lineno))
    if declared != len(accesses):
        raise TraceFormatError("trace declares {} references but lists {}".format(declared, len(accesses)))
    logging.debug('parse_trace(): {} references'.format(len(accesses)))
    return AccessTrace(accesses)


def load_trace(path):
    with open(path, "r") as f:
        return parse_trace(f)


def dump_trace(path, trace):
    with open(path, "w") as f:
        f.write("{}\n".format(len(trace)))
        for access in trace:
            f.write("{}\n".format(access))
    return path


def check_addresses(trace, config):
    """Reject references that fall outside main memory."""
    for i, access in enumerate(trace):
        if access.address >= config.memory_size:
            raise TraceFormatError("reference {} ({}) is outside the {}-byte main memory".format(
                i + 1, access, config.memory_size))
