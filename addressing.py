# addressing.py
from collections import namedtuple

from cache_config import ConfigurationError, is_power_of_two

AddressFields = namedtuple("AddressFields", ["block_number", "set_index", "tag", "offset"])


def log2(value):
    if not is_power_of_two(value):
        raise ConfigurationError("{!r} is not a positive power of two".format(value))
    return value.bit_length() - 1


class AddressCodec:
    """
    Splits a main memory address into offset, set index and tag fields.

        | tag (tag_bits) | set index (set_bits) | offset (offset_bits) |

    The codec is stateless once built; every method is a pure function of
    the configuration and the address.
    """

    def __init__(self, config):
        self.config = config
        self.block_size = config.block_size
        self.num_sets = config.num_sets
        self.address_bits = log2(config.memory_size)
        self.offset_bits = log2(config.block_size)
        self.set_bits = log2(self.num_sets)
        self.tag_bits = self.address_bits - self.offset_bits - self.set_bits
        if self.tag_bits <= 0:
            raise ConfigurationError(
                "no bits left for the tag ({} address, {} offset, {} index)".format(
                    self.address_bits, self.offset_bits, self.set_bits))

    @property
    def address_lines(self):
        return self.address_bits

    @property
    def total_cache_size(self):
        # data bytes plus the valid bit, dirty bit and tag of a line
        return self.config.cache_size + 2 + self.tag_bits

    def block_number(self, address):
        return address // self.block_size

    def set_index(self, address):
        return self.block_number(address) % self.num_sets

    def tag(self, address):
        return self.block_number(address) // self.num_sets

    def offset(self, address):
        return address & (self.block_size - 1)

    def decompose(self, address):
        return AddressFields(self.block_number(address), self.set_index(address),
                             self.tag(address), self.offset(address))

    def format_tag(self, tag):
        """Fixed-width bit pattern of a tag; all "x" for an empty line."""
        if tag is None:
            return "x" * self.tag_bits
        return format(tag, "0{}b".format(self.tag_bits))
