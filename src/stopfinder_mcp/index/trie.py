"""Character trie mapping stop names to the stops that carry them."""

from typing import Any, Dict, Iterator, List, Optional, Sequence


class PrefixIndexNode:
    def __init__(self) -> None:
        self.children: Dict[str, "PrefixIndexNode"] = {}
        self.entries: List[Any] = []

    def child(self, char: str) -> Optional["PrefixIndexNode"]:
        return self.children.get(char)

    def add_child(self, char: str) -> "PrefixIndexNode":
        node = self.children.get(char)
        if node is None:
            node = PrefixIndexNode()
            self.children[char] = node
        return node

    def __iter__(self) -> Iterator["PrefixIndexNode"]:
        """Children in sorted key order."""
        for char in sorted(self.children):
            yield self.children[char]


class PrefixIndex:
    """
    Exact and prefix lookup over character keys.

    Keys are matched as given; callers that want case-insensitive search
    must normalise keys themselves before inserting and looking up.
    """

    def __init__(self) -> None:
        self.root = PrefixIndexNode()
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"PrefixIndex(keys={', '.join(sorted(self.root.children))})"

    def insert(self, key: Sequence[str], entry: Any) -> None:
        node = self.root
        for char in key:
            node = node.add_child(char)
        node.entries.append(entry)
        self._size += 1

    def _walk(self, key: Sequence[str]) -> Optional[PrefixIndexNode]:
        node = self.root
        for char in key:
            node = node.child(char)
            if node is None:
                return None
        return node

    def lookup_exact(self, key: Sequence[str]) -> Optional[List[Any]]:
        """
        Entries stored under exactly ``key``.

        Returns None when no key starts with ``key`` at all, and an empty
        list when ``key`` is only the prefix of longer keys.
        """
        node = self._walk(key)
        if node is None:
            return None
        return list(node.entries)

    def lookup_prefix(self, key: Sequence[str]) -> List[Any]:
        """Entries under ``key`` and every longer key, in pre-order."""
        node = self._walk(key)
        if node is None:
            return []
        results: List[Any] = []
        stack = [node]
        while stack:
            current = stack.pop()
            results.extend(current.entries)
            stack.extend(reversed(list(current)))
        return results

    def clear(self) -> None:
        self.root = PrefixIndexNode()
        self._size = 0
