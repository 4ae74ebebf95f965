"""Point quadtree over stop locations with best-first nearest search."""

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, List, Optional, Tuple, Union

from .errors import SubdivideOnNonLeafError
from .geometry import Located, Point, Region

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 4
DEFAULT_MAX_DEPTH = 24


@dataclass
class _Leaf:
    entries: List[Located] = field(default_factory=list)


@dataclass(frozen=True)
class _Internal:
    children: Tuple["SpatialIndexNode", ...]


class SpatialIndexNode:
    """
    One square of the quadtree.

    A node is either a leaf holding up to ``capacity`` entries or an internal
    node with exactly four children, one per quadrant of its region. A leaf
    turns internal the first time it would overflow and never turns back.
    """

    def __init__(
        self,
        region: Region,
        capacity: int = DEFAULT_CAPACITY,
        depth: int = 0,
        max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.region = region
        self.capacity = capacity
        self.depth = depth
        self.max_depth = max_depth
        self._state: Union[_Leaf, _Internal] = _Leaf()

    def __repr__(self) -> str:
        kind = "leaf" if self.is_leaf else "internal"
        return f"SpatialIndexNode({kind}, depth={self.depth}, region={self.region})"

    @property
    def is_leaf(self) -> bool:
        return isinstance(self._state, _Leaf)

    @property
    def entries(self) -> Tuple[Located, ...]:
        """Entries stored directly in this node; always empty for internal nodes."""
        if isinstance(self._state, _Leaf):
            return tuple(self._state.entries)
        return ()

    @property
    def children(self) -> Tuple["SpatialIndexNode", ...]:
        if isinstance(self._state, _Internal):
            return self._state.children
        return ()

    def insert(self, entry: Located) -> bool:
        """
        Insert an entry into this subtree.

        Returns False, leaving the tree untouched, when the entry's location
        is outside this node's region.
        """
        if not self.region.contains(entry.location):
            return False

        state = self._state
        if isinstance(state, _Leaf):
            if len(state.entries) < self.capacity:
                state.entries.append(entry)
                return True
            if self.max_depth is not None and self.depth >= self.max_depth:
                # coincident points cannot be separated by further splits
                logger.debug(f"Depth limit reached at {self.region}, leaf now holds "
                             f"{len(state.entries) + 1} entries")
                state.entries.append(entry)
                return True
            self.subdivide()

        for child in self.children:
            if child.insert(entry):
                return True
        return False

    def subdivide(self) -> None:
        """Split this leaf into four quadrant children and push its entries down."""
        state = self._state
        if not isinstance(state, _Leaf):
            raise SubdivideOnNonLeafError(f"Subdividing a non-leaf node: {self!r}")

        children = tuple(
            SpatialIndexNode(self.region.quadrant(i), self.capacity, self.depth + 1, self.max_depth)
            for i in range(4)
        )
        self._state = _Internal(children)

        for entry in state.entries:
            for child in children:
                if child.insert(entry):
                    break

    def best_among_direct(self, target: Point, best_distance: float) -> Optional[Located]:
        """Closest directly stored entry that beats ``best_distance``, if any."""
        best = None
        for entry in self.entries:
            distance = entry.location.distance_to(target)
            if distance < best_distance:
                best_distance = distance
                best = entry
        return best

    def prunable(self, target: Point, best_distance: float) -> bool:
        """True if nothing in this node's region can be closer than ``best_distance``."""
        return self.region.is_beyond(target, best_distance)

    def children_to_check(self, target: Point) -> List["SpatialIndexNode"]:
        """
        Children ordered from least to most likely to hold the nearest entry.

        Callers push these onto a stack, so the quadrant containing ``target``
        is popped first and the diagonally opposite one last.
        """
        children = self.children
        if not children:
            return []
        best = self.region.quadrant_of(target)
        right = best & 1
        bottom = best >> 1
        order = (
            2 * (1 - bottom) + (1 - right),
            2 * (1 - bottom) + right,
            2 * bottom + (1 - right),
            best,
        )
        return [children[i] for i in order]

    def iter_entries(self) -> Iterator[Located]:
        """Every entry in this subtree."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield from node.entries
            stack.extend(reversed(node.children))


@dataclass
class NearestResult:
    entry: Optional[Located] = None
    distance: Optional[float] = None
    nodes_visited: int = 0
    nodes_pruned: int = 0


class SpatialIndex:
    """Owns the root node and runs nearest-point queries against it."""

    def __init__(
        self,
        region: Region,
        capacity: int = DEFAULT_CAPACITY,
        max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.region = region
        self.capacity = capacity
        self.max_depth = max_depth
        self.root = SpatialIndexNode(region, capacity, 0, max_depth)
        self._size = 0

    @classmethod
    def build(
        cls,
        region: Region,
        entries: Iterable[Located] = (),
        capacity: int = DEFAULT_CAPACITY,
        max_depth: Optional[int] = DEFAULT_MAX_DEPTH,
    ) -> "SpatialIndex":
        """Create an index over ``region`` and insert ``entries``, skipping ones outside it."""
        index = cls(region, capacity, max_depth)
        rejected = 0
        for entry in entries:
            if not index.insert(entry):
                rejected += 1
        if rejected:
            logger.warning(f"{rejected} entries fell outside {region} and were not indexed")
        return index

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Located]:
        return self.root.iter_entries()

    def insert(self, entry: Located) -> bool:
        inserted = self.root.insert(entry)
        if inserted:
            self._size += 1
        return inserted

    def clear(self) -> None:
        self.root = SpatialIndexNode(self.region, self.capacity, 0, self.max_depth)
        self._size = 0

    def nearest(self, target: Point, max_distance: float = math.inf) -> Optional[Located]:
        return self.search(target, max_distance).entry

    def search(
        self,
        target: Point,
        max_distance: float = math.inf,
        on_prune: Optional[Callable[[SpatialIndexNode, float], None]] = None,
    ) -> NearestResult:
        """
        Find the entry closest to ``target``.

        Only entries strictly closer than ``max_distance`` are considered.
        The tree is walked with an explicit stack, most promising quadrant
        first, and whole subtrees are skipped once they cannot beat the
        best distance found so far. Ties go to whichever entry is reached
        first.
        """
        result = NearestResult()
        best_distance = max_distance
        fringe = [self.root]
        visited = set()

        while fringe:
            current = fringe.pop()
            if current in visited:
                continue
            if current.prunable(target, best_distance):
                result.nodes_pruned += 1
                if on_prune is not None:
                    on_prune(current, best_distance)
                continue
            visited.add(current)
            result.nodes_visited += 1

            candidate = current.best_among_direct(target, best_distance)
            if candidate is not None:
                best_distance = candidate.location.distance_to(target)
                result.entry = candidate
                result.distance = best_distance
            fringe.extend(current.children_to_check(target))

        return result

    def node_count(self) -> int:
        count = 0
        stack = [self.root]
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(node.children)
        return count

    def depth(self) -> int:
        deepest = 0
        stack = [self.root]
        while stack:
            node = stack.pop()
            deepest = max(deepest, node.depth)
            stack.extend(node.children)
        return deepest
