from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType

from beartype import beartype

from .field_types import VALID_LABELS, FieldState, PairKey


@beartype
def combine_labels(labels: Sequence[int]) -> int:
    """Base-3 positional packing: sum(labels[i] * 3**i), crack 0 least significant."""
    value = 0
    for i, label in enumerate(labels):
        value += int(label) * 3**i
    return value


@beartype
def decode_combined(value: int, n_cracks: int) -> tuple[int, ...]:
    """
    Inverse of combine_labels for labels in {1,2,3}.
    Shifting by the all-ones value turns the digits into plain base-3 {0,1,2}.
    """
    if n_cracks < 0:
        raise ValueError("n_cracks must be >= 0")
    ones = (3**n_cracks - 1) // 2
    rest = value - ones
    if rest < 0 or rest > 2 * ones:
        raise ValueError(
            f"combined value {value} is not encodable with {n_cracks} crack(s)"
        )
    labels: list[int] = []
    for _ in range(n_cracks):
        rest, digit = divmod(rest, 3)
        labels.append(digit + 1)
    return tuple(labels)


def encode_state(labels_by_pair: Mapping[PairKey, Sequence[int]]) -> FieldState:
    """Read-only snapshot PairKey -> combined field, in accumulator order."""
    combined: dict[PairKey, int] = {}
    for key, labels in labels_by_pair.items():
        if any(int(label) not in VALID_LABELS for label in labels):
            raise ValueError(f"pair {key} holds labels outside {{1,2,3}}: {labels}")
        combined[key] = combine_labels(labels)
    return MappingProxyType(combined)
