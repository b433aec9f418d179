"""
Category Tree - Transient index over a job's flat category list.

Categories are stored flat with optional parent ids. This index is built
once per call and discarded afterwards:
- id -> Category for ancestor walks (root-first chains)
- parent id -> child ids for descendant closures

Walks carry a visited set so a malformed parent graph raises
CategoryCycleError instead of looping.
"""
from collections import defaultdict, deque
from typing import Dict, Iterable, List, Optional, Set
import logging

from ..entities.category import Category
from ..exceptions import (
    CategoryCycleError,
    CategoryDepthExceededError,
    CategoryNotFoundError,
)

logger = logging.getLogger(__name__)


class CategoryTree:
    """
    Lookup structure for ancestry and descendant queries.

    Chains are cached by category id since many line items share a
    category. The tree never mutates the categories it indexes.
    """

    def __init__(self, categories: Iterable[Category]):
        self._by_id: Dict[str, Category] = {}
        for category in categories:
            self._by_id[category.id] = category

        self._children: Dict[Optional[str], List[str]] = defaultdict(list)
        for category in self._by_id.values():
            self._children[category.parent_id].append(category.id)

        self._chains: Dict[str, List[Category]] = {}

        logger.debug("Indexed %d categories", len(self._by_id))

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, category_id: str) -> bool:
        return category_id in self._by_id

    def get(self, category_id: str) -> Category:
        """
        Get a category by id.

        Raises:
            CategoryNotFoundError: If the id is not in this tree
        """
        try:
            return self._by_id[category_id]
        except KeyError:
            raise CategoryNotFoundError(category_id)

    # =========================================================================
    # Ancestry
    # =========================================================================

    def chain(self, category_id: str) -> List[Category]:
        """
        Get the ancestor chain of a category, root first.

        The chain ends with the category itself. Unknown ids give an empty
        chain; a dangling parent id ends the chain at the last category
        that could be resolved.

        Raises:
            CategoryCycleError: If the parent pointers loop
        """
        cached = self._chains.get(category_id)
        if cached is not None:
            return cached

        chain: List[Category] = []
        visited: Set[str] = set()
        current = self._by_id.get(category_id)
        if current is None:
            logger.warning("Category '%s' not found; using empty chain", category_id)

        while current is not None:
            if current.id in visited:
                raise CategoryCycleError(current.id, [c.id for c in chain])
            visited.add(current.id)
            chain.append(current)

            if current.parent_id is None:
                break
            parent = self._by_id.get(current.parent_id)
            if parent is None:
                logger.warning(
                    "Category '%s' references missing parent '%s'",
                    current.id, current.parent_id,
                )
            current = parent

        chain.reverse()
        self._chains[category_id] = chain
        return chain

    def depth(self, category_id: str) -> int:
        """Nesting depth of a category (1 = top level)."""
        self.get(category_id)
        return len(self.chain(category_id))

    def breadcrumbs(self, category_id: str) -> List[str]:
        """Names from the top-level ancestor down to the category."""
        self.get(category_id)
        return [c.name for c in self.chain(category_id)]

    def can_add_subcategory(self, category_id: str, max_depth: int) -> bool:
        """Whether a child of this category would stay within max_depth."""
        return self.depth(category_id) < max_depth

    def require_subcategory_room(self, category_id: str, max_depth: int) -> None:
        """
        Guard used before creating a child under category_id.

        Raises:
            CategoryNotFoundError: If the category is not in this tree
            CategoryDepthExceededError: If a child would exceed max_depth
        """
        if not self.can_add_subcategory(category_id, max_depth):
            raise CategoryDepthExceededError(category_id, max_depth)

    # =========================================================================
    # Descendants
    # =========================================================================

    def children(self, category_id: Optional[str]) -> List[Category]:
        """
        Direct children of a category ordered by sort_order.

        Pass None for the job's top-level categories.
        """
        children = [self._by_id[cid] for cid in self._children.get(category_id, [])]
        return sorted(children, key=lambda c: c.sort_order)

    def top_level(self) -> List[Category]:
        return self.children(None)

    def descendant_ids(self, category_id: str) -> Set[str]:
        """
        Ids of the category and every category below it (breadth-first).

        Raises:
            CategoryCycleError: If a descendant is reached twice
        """
        result: Set[str] = {category_id}
        queue = deque(self._children.get(category_id, []))

        while queue:
            current = queue.popleft()
            if current in result:
                raise CategoryCycleError(current)
            result.add(current)
            queue.extend(self._children.get(current, []))

        return result
