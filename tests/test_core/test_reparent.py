"""Tests for moving categories and cascading path updates."""

import pytest

from category_admin.core.outcome import CycleDetectedError, Ok, Rejected, RejectionReason
from category_admin.core.records import CategoryRecord, index_by_id
from category_admin.core.reparent import move


class TestMoveScenario:
    """A root, B under A, C under B."""

    def test_moving_root_under_its_grandchild_is_rejected(self, abc_snapshot) -> None:
        before = tuple(abc_snapshot)

        result = move("A", "C", abc_snapshot)

        assert isinstance(result, Rejected)
        assert result.reason == RejectionReason.CYCLIC_MOVE
        assert abc_snapshot == before

    def test_moving_leaf_to_root(self, abc_snapshot, assert_tree_invariants) -> None:
        result = move("C", None, abc_snapshot)

        assert isinstance(result, Ok)
        index = index_by_id(result.value)
        assert index["C"].parent_id is None
        assert index["C"].path == ()
        assert index["C"].level == 0
        assert index["A"] == abc_snapshot[0]
        assert index["B"] == abc_snapshot[1]
        assert_tree_invariants(result.value)


class TestMoveSubtree:
    """Tests for cascading path/level to descendants."""

    def test_descendants_follow_moved_node(self, catalog_snapshot, assert_tree_invariants) -> None:
        result = move("phones", "fashion", catalog_snapshot)

        assert isinstance(result, Ok)
        index = index_by_id(result.value)
        assert index["phones"].path == ("fashion",)
        assert index["phones"].level == 1
        assert index["android"].path == ("fashion", "phones")
        assert index["android"].level == 2
        assert index["android"].parent_id == "phones"
        assert index["iphone"].path == ("fashion", "phones")
        assert_tree_invariants(result.value)

    def test_descendant_relative_order_preserved(self, catalog_snapshot) -> None:
        result = move("phones", "fashion", catalog_snapshot)

        index = index_by_id(result.value)
        assert index["android"].display_order == 0
        assert index["iphone"].display_order == 1

    def test_unrelated_records_untouched(self, catalog_snapshot) -> None:
        result = move("phones", "fashion", catalog_snapshot)

        before = index_by_id(catalog_snapshot)
        after = index_by_id(result.value)
        for category_id in ("electronics", "fashion", "shoes"):
            assert after[category_id] == before[category_id]

    def test_former_siblings_close_the_gap(self, catalog_snapshot, assert_tree_invariants) -> None:
        result = move("phones", "fashion", catalog_snapshot)

        index = index_by_id(result.value)
        assert index["laptops"].display_order == 0
        assert index["laptops"].path == ("electronics",)
        assert_tree_invariants(result.value)

    def test_snapshot_order_and_size_preserved(self, catalog_snapshot) -> None:
        result = move("phones", "fashion", catalog_snapshot)

        assert [r.id for r in result.value] == [r.id for r in catalog_snapshot]

    def test_moving_first_child_out_reranks_the_rest(self, assert_tree_invariants) -> None:
        records = [
            CategoryRecord(id="P", name="P"),
            CategoryRecord(id="Q", name="Q", display_order=1),
        ]
        for i, name in enumerate("abc"):
            records.append(
                CategoryRecord(
                    id=name, name=name, parent_id="P", path=("P",), level=1, display_order=i
                )
            )

        result = move("a", "Q", records)

        index = index_by_id(result.value)
        assert (index["b"].display_order, index["c"].display_order) == (0, 1)
        assert index["a"].display_order == 0
        assert_tree_invariants(result.value)

    def test_move_deep_subtree_to_root(self, assert_tree_invariants) -> None:
        records = [CategoryRecord(id="top", name="Top")]
        for i in range(200):
            parent = records[-1]
            records.append(
                CategoryRecord(
                    id=f"n{i}",
                    name=f"n{i}",
                    parent_id=parent.id,
                    path=(*parent.path, parent.id),
                    level=parent.level + 1,
                )
            )

        result = move("n0", None, records)

        assert isinstance(result, Ok)
        index = index_by_id(result.value)
        assert index["n0"].level == 0
        assert index["n199"].level == 199
        assert index["n199"].path[0] == "n0"
        assert_tree_invariants(result.value)


class TestMoveDisplayOrder:
    """Tests for the moved node's rank among its new siblings."""

    def test_appended_after_new_siblings(self, catalog_snapshot, assert_tree_invariants) -> None:
        result = move("laptops", "fashion", catalog_snapshot)

        index = index_by_id(result.value)
        assert index["shoes"].display_order == 0
        assert index["laptops"].display_order == 1
        assert index["phones"].display_order == 0
        assert_tree_invariants(result.value)

    def test_inserted_at_requested_position(self, catalog_snapshot, assert_tree_invariants) -> None:
        result = move("laptops", "fashion", catalog_snapshot, new_display_order=0)

        index = index_by_id(result.value)
        assert index["laptops"].display_order == 0
        assert index["shoes"].display_order == 1
        assert_tree_invariants(result.value)

    def test_requested_position_is_clamped(self, catalog_snapshot) -> None:
        result = move("laptops", "fashion", catalog_snapshot, new_display_order=99)

        index = index_by_id(result.value)
        assert index["shoes"].display_order == 0
        assert index["laptops"].display_order == 1

    def test_reposition_within_same_parent(self, catalog_snapshot, assert_tree_invariants) -> None:
        result = move("iphone", "phones", catalog_snapshot, new_display_order=0)

        index = index_by_id(result.value)
        assert index["iphone"].display_order == 0
        assert index["android"].display_order == 1
        assert_tree_invariants(result.value)

    def test_same_parent_without_position_is_noop(self, catalog_snapshot) -> None:
        result = move("iphone", "phones", catalog_snapshot)

        assert isinstance(result, Ok)
        assert result.value == tuple(catalog_snapshot)


class TestMoveRejections:
    """Tests that rejections leave the input alone."""

    @pytest.mark.parametrize(
        ("node_id", "new_parent_id", "reason"),
        [
            ("ghost", None, RejectionReason.NOT_FOUND),
            ("phones", "phones", RejectionReason.SELF_PARENT),
            ("phones", "tablets", RejectionReason.PARENT_NOT_FOUND),
            ("electronics", "android", RejectionReason.CYCLIC_MOVE),
        ],
    )
    def test_rejection_reasons(self, catalog_snapshot, node_id, new_parent_id, reason) -> None:
        before = tuple(catalog_snapshot)

        result = move(node_id, new_parent_id, catalog_snapshot)

        assert isinstance(result, Rejected)
        assert result.reason == reason
        assert catalog_snapshot == before

    def test_cycle_below_moved_node_raises(self) -> None:
        """A corrupt snapshot is reported, never half-applied."""
        records = [
            CategoryRecord(id="X", name="X", parent_id="Y"),
            CategoryRecord(id="Y", name="Y", parent_id="X"),
        ]

        with pytest.raises(CycleDetectedError):
            move("X", None, records)
