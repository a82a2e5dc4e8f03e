"""
Order number allocation.

The Orders table is loaded with historical orders numbered 1 to 500, so the
in-memory allocator starts at 501 by default. Its counter lives only as long
as the process and is not shared between processes; two sessions running at
once against the same database can hand out the same number. Use
`SequenceOrderNumberAllocator` when that matters.
"""

DEFAULT_ORDER_NUMBER_BASE = 501


class OrderNumberAllocator:
    """Hands out consecutive order numbers starting at `base`."""

    def __init__(self, base=DEFAULT_ORDER_NUMBER_BASE):
        self._next = int(base)

    def next_order_number(self):
        number = self._next
        self._next += 1
        return number


class SequenceOrderNumberAllocator:
    """Draws order numbers from a PostgreSQL sequence."""

    def __init__(self, gateway, sequence):
        self._gateway = gateway
        self._sequence = sequence

    def next_order_number(self):
        return self._gateway.get_next_seq_val(self._sequence)


def build_allocator(gateway, settings):
    """Chooses the allocator named by the ORDER_NUMBER_SOURCE setting."""
    if settings['ORDER_NUMBER_SOURCE'].strip().lower() == 'sequence':
        return SequenceOrderNumberAllocator(gateway, settings['ORDER_NUMBER_SEQUENCE'])
    return OrderNumberAllocator(int(settings['ORDER_NUMBER_BASE']))
