"""
Ordering helpers shared by the Player and Team aggregates.

Sibling records carry a ``display_order`` that must stay contiguous and
zero-based. These helpers implement list moves and renumbering.
"""
from typing import Iterable, List, Sequence, TypeVar

T = TypeVar("T")


def move_offsets(items: Sequence[T], from_indices: Iterable[int], to_index: int) -> List[T]:
    """
    Move the items at ``from_indices`` so they sit before ``to_index``.

    Offsets refer to positions in the original sequence. The moved items keep
    their relative order, and ``to_index`` may equal ``len(items)`` to move
    them to the end.

    Args:
        items: Current ordering
        from_indices: Offsets of the items to move
        to_index: Destination offset in the original sequence

    Returns:
        New list with the items moved

    Raises:
        IndexError: If any offset is out of range

    Example:
        >>> move_offsets(["a", "b", "c", "d"], [0], 3)
        ['b', 'c', 'a', 'd']
    """
    source = sorted(set(from_indices))
    count = len(items)
    for index in source:
        if not 0 <= index < count:
            raise IndexError(f"Source offset {index} out of range for {count} items")
    if not 0 <= to_index <= count:
        raise IndexError(f"Destination offset {to_index} out of range for {count} items")

    moving = [items[i] for i in source]
    remaining = [item for i, item in enumerate(items) if i not in source]
    insert_at = to_index - sum(1 for i in source if i < to_index)
    return remaining[:insert_at] + moving + remaining[insert_at:]


def renumber(items: Iterable) -> None:
    """Assign display_order 0..n-1 following the iteration order."""
    for index, item in enumerate(items):
        item.display_order = index
