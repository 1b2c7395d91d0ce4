import pytest
from app.services.catalog.category_tree import collect_subtree_ids, would_create_cycle


def parent_lookup(parents):
    async def get_parent_id(category_id):
        return parents.get(category_id)
    return get_parent_id


def children_lookup(children):
    async def get_child_ids(category_id):
        return list(children.get(category_id, []))
    return get_child_ids


class TestWouldCreateCycle:
    """Upward walk from the candidate parent"""

    @pytest.fixture
    def parents(self):
        # 1 -> 2 -> 3 -> 4, plus an unrelated root 10
        return {1: None, 2: 1, 3: 2, 4: 3, 10: None}

    async def test_moving_ancestor_under_descendant_is_a_cycle(self, parents):
        """Test an ancestor cannot move under its own descendant"""
        assert await would_create_cycle(1, 4, parent_lookup(parents)) is True
        assert await would_create_cycle(2, 3, parent_lookup(parents)) is True

    async def test_self_parent_is_a_cycle(self, parents):
        """Test a category cannot be its own parent"""
        assert await would_create_cycle(3, 3, parent_lookup(parents)) is True

    async def test_unrelated_parent_is_allowed(self, parents):
        """Test moving under another tree is allowed"""
        assert await would_create_cycle(2, 10, parent_lookup(parents)) is False

    async def test_moving_descendant_higher_is_allowed(self, parents):
        """Test a descendant may move up to an ancestor"""
        assert await would_create_cycle(4, 1, parent_lookup(parents)) is False

    async def test_missing_row_ends_the_walk(self):
        """Test a pointer to a missing row reads as a root"""
        assert await would_create_cycle(1, 5, parent_lookup({5: 99})) is False

    async def test_existing_loop_in_data_terminates(self):
        """Test a loop already stored in the data stops the walk"""
        # 5 and 6 point at each other; 1 is not part of the loop
        parents = {5: 6, 6: 5, 1: None}
        assert await would_create_cycle(1, 5, parent_lookup(parents)) is True

    async def test_deep_acyclic_chain_is_allowed(self):
        """Test a long chain without loops never reads as a cycle"""
        parents = {n: n - 1 for n in range(2, 1001)}
        parents[1] = None

        assert await would_create_cycle(5000, 1000, parent_lookup(parents)) is False
        assert await would_create_cycle(1, 1000, parent_lookup(parents)) is True


class TestCollectSubtreeIds:
    """Breadth-first descendant collection"""

    async def test_collects_root_and_all_descendants_once(self):
        """Test every descendant is returned exactly once"""
        children = {1: [2, 3], 2: [4], 3: [], 4: []}

        ids = await collect_subtree_ids(1, children_lookup(children))

        assert ids[0] == 1
        assert sorted(ids) == [1, 2, 3, 4]
        assert len(ids) == len(set(ids))

    async def test_leaf_returns_only_itself(self):
        """Test a leaf collects only its own id"""
        assert await collect_subtree_ids(4, children_lookup({})) == [4]

    async def test_breadth_first_order(self):
        """Test ids come out level by level"""
        children = {1: [2, 3], 2: [4], 3: [5]}

        assert await collect_subtree_ids(1, children_lookup(children)) == [1, 2, 3, 4, 5]

    async def test_loop_in_stored_data_terminates(self):
        """Test a stored loop does not repeat ids"""
        children = {1: [2], 2: [3], 3: [1, 2]}

        ids = await collect_subtree_ids(1, children_lookup(children))

        assert sorted(ids) == [1, 2, 3]

    async def test_deep_chain_is_fully_collected(self):
        """Test depth does not truncate the collected set"""
        children = {n: [n + 1] for n in range(1, 500)}

        ids = await collect_subtree_ids(1, children_lookup(children))

        assert len(ids) == 500
