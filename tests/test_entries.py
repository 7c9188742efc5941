"""
Tests for the entry list manager.
"""

import pytest

from finance_tracker.entries import (
    ItemIdGenerator,
    LineItem,
    add_item,
    remove_item,
    update_item,
)


@pytest.fixture
def items():
    return [
        LineItem(id=1, name="VCB", amount=1000000),
        LineItem(id=2, name="Techcombank", amount=250000),
    ]


class TestItemIdGenerator:
    """Tests for id generation."""

    def test_ids_start_from_clock(self):
        generator = ItemIdGenerator(clock=lambda: 1000)
        assert generator.next_id() == 1000

    def test_ids_strictly_increase_within_same_millisecond(self):
        generator = ItemIdGenerator(clock=lambda: 1000)
        first = generator.next_id()
        second = generator.next_id()
        assert second > first

    def test_ids_exceed_existing_ids(self):
        generator = ItemIdGenerator(clock=lambda: 1000)
        assert generator.next_id([5000, 42]) == 5001


class TestAddItem:
    """Tests for add_item."""

    def test_appends_zero_amount_item(self, items):
        result = add_item(items, "New bank", ItemIdGenerator(clock=lambda: 1000))
        assert len(result) == 3
        assert result[-1].name == "New bank"
        assert result[-1].amount == 0
        assert result[-1].id == 1000

    def test_does_not_touch_input(self, items):
        result = add_item(items, "New bank")
        assert len(items) == 2
        assert result is not items

    def test_ids_unique_after_repeated_adds(self):
        result = []
        for _ in range(5):
            result = add_item(result, "Item")
        ids = [item.id for item in result]
        assert len(set(ids)) == 5

    def test_add_then_remove_round_trips(self, items):
        """Test that removing the added id gives back the original list."""
        added = add_item(items, "Temporary")
        new_id = added[-1].id
        assert remove_item(added, new_id) == items


class TestUpdateItem:
    """Tests for update_item."""

    def test_updates_amount(self, items):
        result = update_item(items, 2, "amount", 300000)
        assert result[1].amount == 300000
        assert items[1].amount == 250000

    def test_updates_name(self, items):
        result = update_item(items, 1, "name", "Vietcombank")
        assert result[0].name == "Vietcombank"

    def test_amount_is_coerced(self, items):
        """Test that a malformed amount becomes 0 instead of raising."""
        assert update_item(items, 1, "amount", "abc")[0].amount == 0
        assert update_item(items, 1, "amount", "42")[0].amount == 42

    def test_changed_item_is_new_object(self, items):
        result = update_item(items, 1, "amount", 5)
        assert result[0] is not items[0]
        assert result[1] is items[1]

    def test_unknown_id_returns_equal_list(self, items):
        result = update_item(items, 999, "amount", 5)
        assert result == items
        assert result is not items

    def test_unknown_field_raises(self, items):
        with pytest.raises(ValueError, match="Unknown line item field"):
            update_item(items, 1, "colour", "red")


class TestRemoveItem:
    """Tests for remove_item."""

    def test_removes_matching_item(self, items):
        result = remove_item(items, 1)
        assert [item.id for item in result] == [2]

    def test_unknown_id_is_noop(self, items):
        result = remove_item(items, 999)
        assert result == items

    def test_preserves_order(self):
        items = [LineItem(id=i, name=str(i)) for i in (3, 1, 2)]
        assert [item.id for item in remove_item(items, 1)] == [3, 2]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
