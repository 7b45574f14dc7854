# gammon/utils/bitmask.py

from typing import Iterable, List

# =========================================================

def bits_from_indices(indices: Iterable[int]) -> int:
    """Build a mask from board points (bit i = point i)."""
    mask = 0
    for i in indices:
        mask |= 1 << int(i)
    return mask


def indices_from_bits(mask: int) -> List[int]:
    """Return the set bits of a mask as ascending point indices."""
    idxs = []
    mask = int(mask)
    while mask:
        lsb = mask & -mask
        idxs.append(lsb.bit_length() - 1)
        mask &= mask - 1
    return idxs


def set_bit(idx: int, mask: int = 0) -> int:
    """Set the bit for point idx."""
    return mask | (1 << idx)


def clear_bit(idx: int, mask: int) -> int:
    """Clear the bit for point idx."""
    return mask & ~(1 << idx)


def is_bit_set(idx: int, mask: int) -> bool:
    """Check whether the bit for point idx is set."""
    return (mask & (1 << idx)) != 0


def set_all_bits(start: int, end: int) -> int:
    """Mask with every bit from start to end (inclusive). Empty if end < start."""
    if end < start:
        return 0
    return ((1 << (end + 1)) - 1) & ~((1 << start) - 1)

