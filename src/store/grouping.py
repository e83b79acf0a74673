"""Row grouping over views.

Groups are built by bucketing logical row indices under a caller-supplied
key, then ordering buckets by their first row. Each group is a row
selection over the grouped view, so grouping copies no cells.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Callable, Generic, Hashable, Iterator, TypeVar

from core.logging_config import get_logger

if TYPE_CHECKING:
    from store.row import Row
    from store.view import View

_LOGGER = get_logger(__name__)

K = TypeVar("K", bound=Hashable)


class Groups(Generic[K]):
    """Ordered collection of ``(key, view)`` pairs."""

    def __init__(self, groups: list[tuple[K, "View"]]) -> None:
        self._groups = groups

    def __len__(self) -> int:
        return len(self._groups)

    def __iter__(self) -> Iterator[tuple[K, "View"]]:
        return iter(self._groups)

    def __getitem__(self, index: int) -> tuple[K, "View"]:
        return self._groups[index]

    def keys(self) -> list[K]:
        return [key for key, _ in self._groups]

    def views(self) -> list["View"]:
        return [view for _, view in self._groups]

    def get(self, key: K) -> "View | None":
        """Return the view of ``key``, or ``None`` when no row produced it."""
        for group_key, view in self._groups:
            if group_key == key:
                return view
        return None

    def total_rows(self) -> int:
        return sum(len(view) for _, view in self._groups)

    def distribution(self) -> list[tuple[int, int]]:
        """Histogram of group sizes.

        Returns:
            ``(group size, number of groups with that size)`` pairs,
            ordered by group size ascending.
        """
        sizes = Counter(len(view) for _, view in self._groups)
        return sorted(sizes.items())

    def filter(self, predicate: Callable[[K, "View"], bool]) -> "Groups[K]":
        """Keep groups satisfying ``predicate``, preserving group order."""
        return Groups([(key, view) for key, view in self._groups if predicate(key, view)])

    def __repr__(self) -> str:
        return f"Groups(groups={len(self)}, rows={self.total_rows()})"


def build_groups(view: "View", key_fn: Callable[["Row"], K]) -> Groups[K]:
    """Partition a view's rows by key.

    Args:
        view: View to partition.
        key_fn: Function mapping a row to a hashable key.

    Returns:
        Groups ordered by the first row index of each key.
    """
    buckets: dict[K, list[int]] = {}
    for index, row in enumerate(view):
        buckets.setdefault(key_fn(row), []).append(index)
    ordered = sorted(buckets.items(), key=lambda bucket: bucket[1][0])
    groups = Groups([(key, view.select_rows(indices)) for key, indices in ordered])
    _LOGGER.debug("groups_built", groups=len(groups), rows=len(view))
    return groups
