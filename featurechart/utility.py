from typing import Sequence, Iterator, List, Tuple, TypeVar

__author__ = 'Aaron Hosford'
__all__ = [
    'iter_combinations',
    'iter_partitions',
]


T = TypeVar('T')


def iter_combinations(sequence_list: Sequence[Sequence[T]], index: int = 0) -> Iterator[List[T]]:
    """Iterate over every way of choosing one item from each sequence, in order."""
    if index < len(sequence_list):
        for item in sequence_list[index]:
            for tail in iter_combinations(sequence_list, index + 1):
                yield [item] + tail
    else:
        yield []


def iter_partitions(start: int, end: int, count: int) -> Iterator[Tuple[Tuple[int, int], ...]]:
    """Iterate over every way of dividing the span from start to end into count contiguous,
    non-empty, ordered sub-spans. Each partition is a tuple of (start, end) pairs."""
    if count <= 0 or end - start < count:
        return
    if count == 1:
        yield (start, end),
        return
    # Leave at least one position for each of the remaining sub-spans.
    for split in range(start + 1, end - count + 2):
        for tail in iter_partitions(split, end, count - 1):
            yield ((start, split),) + tail
