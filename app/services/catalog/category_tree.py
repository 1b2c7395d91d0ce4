"""
Pointer walks over the category forest.

Both walks take async lookups instead of a session so they can run against the
database or a plain dict. Both keep a visited set, since rows edited outside
the service may already contain a loop.
"""
import logging
from typing import Awaitable, Callable, List, Optional, Set

logger = logging.getLogger(__name__)

ParentLookup = Callable[[int], Awaitable[Optional[int]]]
ChildrenLookup = Callable[[int], Awaitable[List[int]]]


async def would_create_cycle(
    category_id: int,
    candidate_parent_id: int,
    get_parent_id: ParentLookup,
) -> bool:
    """
    True when making ``candidate_parent_id`` the parent of ``category_id`` closes a loop.

    Walks upward from the candidate: reaching ``category_id`` or revisiting a
    node means a cycle; reaching a root (or a missing row) means none.
    """
    visited: Set[int] = set()
    current: Optional[int] = candidate_parent_id

    while current is not None:
        if current == category_id:
            return True
        if current in visited:
            logger.warning(f"Parent chain above category {candidate_parent_id} loops at {current}")
            return True
        visited.add(current)
        current = await get_parent_id(current)

    return False


async def collect_subtree_ids(root_id: int, get_child_ids: ChildrenLookup) -> List[int]:
    """
    Return ``root_id`` and every transitive descendant, each id once.

    Breadth-first and iterative; the visited set alone bounds the walk, so a
    loop in stored data ends the traversal instead of repeating it. No depth
    cap is applied because a truncated set would leave orphans behind a delete.
    """
    collected: List[int] = [root_id]
    visited: Set[int] = {root_id}
    frontier: List[int] = [root_id]

    while frontier:
        next_frontier: List[int] = []
        for node_id in frontier:
            for child_id in await get_child_ids(node_id):
                if child_id in visited:
                    logger.warning(f"Category {child_id} reached twice under {root_id}, skipping")
                    continue
                visited.add(child_id)
                collected.append(child_id)
                next_frontier.append(child_id)
        frontier = next_frontier

    return collected
