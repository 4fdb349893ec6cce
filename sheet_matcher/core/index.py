"""BK-tree index over lookup keys for bounded edit-distance queries."""

from typing import Dict, Iterable, List, Optional, Tuple

from sheet_matcher.core.distance import edit_distance


class _Node:
    __slots__ = ('key', 'position', 'children')

    def __init__(self, key: str, position: int):
        self.key = key
        self.position = position
        self.children: Dict[int, '_Node'] = {}


class BKTree:
    """
    Burkhard-Keller tree keyed on Levenshtein distance.

    Every key remembers the position at which it was added so that queries
    can break ties the same way a linear scan in insertion order does.
    """

    def __init__(self, keys: Iterable[str] = ()):
        self._root: Optional[_Node] = None
        self._size = 0
        for key in keys:
            self.add(key)

    def __len__(self) -> int:
        return self._size

    def add(self, key: str) -> None:
        """Insert a key; re-adding a known key is a no-op."""
        position = self._size
        if self._root is None:
            self._root = _Node(key, position)
            self._size += 1
            return

        node = self._root
        while True:
            distance = edit_distance(key, node.key)
            if distance == 0:
                return
            child = node.children.get(distance)
            if child is None:
                node.children[distance] = _Node(key, position)
                self._size += 1
                return
            node = child

    def search(self, query: str, max_distance: int) -> List[Tuple[int, int, str]]:
        """
        Find every key within ``max_distance`` edits of the query.

        Returns:
            List[Tuple[int, int, str]]: (distance, position, key) triples
            sorted by distance, then insertion position
        """
        if self._root is None:
            return []

        found = []
        pending = [self._root]
        while pending:
            node = pending.pop()
            distance = edit_distance(query, node.key)
            if distance <= max_distance:
                found.append((distance, node.position, node.key))
            low, high = distance - max_distance, distance + max_distance
            pending.extend(
                child for edge, child in node.children.items()
                if low <= edge <= high
            )
        found.sort()
        return found

    def nearest(self, query: str, max_distance: int) -> Optional[Tuple[str, int]]:
        """Closest key within ``max_distance``, earliest-added on ties."""
        found = self.search(query, max_distance)
        if not found:
            return None
        distance, _, key = found[0]
        return key, distance
