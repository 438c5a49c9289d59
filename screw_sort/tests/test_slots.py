"""
Tests for the slot row.
"""
import pytest
from screw_sort.gameplay.colors import ScrewColor
from screw_sort.gameplay.entities import Screw
from screw_sort.gameplay.slots import SlotRow


def make_screw(color: ScrewColor) -> Screw:
    return Screw(100.0, 400.0, color)


def place_all(row: SlotRow, *colors: ScrewColor):
    screws = [make_screw(c) for c in colors]
    for screw in screws:
        assert row.try_place(screw)
    return screws


def assert_compacted(row: SlotRow):
    """No empty slot may precede an occupied one."""
    seen_empty = False
    for slot in row.slots:
        if slot.screw is None:
            seen_empty = True
        else:
            assert not seen_empty, "gap before an occupied slot"


class TestPlacement:
    """Tests for try_place / is_full."""

    def test_place_uses_lowest_empty_slot(self):
        """Screws fill slots left to right."""
        row = SlotRow()
        a, b = place_all(row, ScrewColor.RED, ScrewColor.BLUE)

        assert row.slots[0].screw is a
        assert row.slots[1].screw is b
        assert row.slots[2].screw is None

    def test_place_marks_slotted_and_targets_slot(self):
        """A placed screw is flagged and starts moving to its slot."""
        row = SlotRow()
        screw = make_screw(ScrewColor.RED)

        row.try_place(screw)

        assert screw.is_in_slot
        assert screw.is_moving
        assert (screw.target_x, screw.target_y) == (row.slots[0].x, row.slots[0].y)

    def test_full_after_capacity_placements(self):
        """is_full flips exactly on the Nth placement."""
        row = SlotRow(capacity=5)
        colors = [ScrewColor.RED, ScrewColor.BLUE, ScrewColor.YELLOW, ScrewColor.GREEN, ScrewColor.PINK]

        for color in colors:
            assert not row.is_full()
            assert row.try_place(make_screw(color))
        assert row.is_full()

    def test_place_fails_when_full(self):
        """A full row rejects the screw and leaves it untouched."""
        row = SlotRow(capacity=2)
        place_all(row, ScrewColor.RED, ScrewColor.BLUE)
        extra = make_screw(ScrewColor.YELLOW)

        assert not row.try_place(extra)
        assert not extra.is_in_slot
        assert not extra.is_moving
        assert row.occupied_count() == 2

    def test_slots_centered_in_viewport(self):
        """Slot positions are centered horizontally."""
        row = SlotRow(capacity=5, viewport_width=480, spacing=60, slot_y=40)

        xs = [slot.x for slot in row.slots]
        assert xs == [120.0, 180.0, 240.0, 300.0, 360.0]
        assert all(slot.y == 40 for slot in row.slots)


class TestMatching:
    """Tests for check_match / remove_matched."""

    def test_no_match_below_threshold(self):
        row = SlotRow()
        place_all(row, ScrewColor.RED, ScrewColor.RED, ScrewColor.BLUE)
        assert row.check_match() is None

    def test_no_match_with_fewer_screws_than_threshold(self):
        row = SlotRow()
        place_all(row, ScrewColor.RED, ScrewColor.RED)
        assert row.check_match() is None

    def test_red_blue_red_red_scenario(self):
        """[red, blue, red, red] matches red and leaves blue in slot 0."""
        row = SlotRow(capacity=5, match_count=3)
        _, blue, _, _ = place_all(row, ScrewColor.RED, ScrewColor.BLUE, ScrewColor.RED, ScrewColor.RED)

        color = row.check_match()
        assert color == ScrewColor.RED

        removed = row.remove_matched(color)
        assert len(removed) == 3
        assert all(s.color == ScrewColor.RED for s in removed)
        assert row.screws() == [blue]
        assert row.slots[0].screw is blue
        assert (blue.target_x, blue.target_y) == (row.slots[0].x, row.slots[0].y)

    def test_tie_break_follows_slot_order(self):
        """With room for two matches, the color seen first in the row wins."""
        row = SlotRow(capacity=6, match_count=3)
        place_all(
            row,
            ScrewColor.BLUE, ScrewColor.RED, ScrewColor.RED,
            ScrewColor.BLUE, ScrewColor.RED, ScrewColor.BLUE,
        )
        assert row.check_match() == ScrewColor.BLUE

    def test_remove_takes_lowest_indices_only(self):
        """Only match_count screws are removed when more are present."""
        row = SlotRow(capacity=5, match_count=3)
        screws = place_all(row, *[ScrewColor.RED] * 4)

        removed = row.remove_matched(ScrewColor.RED)

        assert removed == screws[:3]
        assert row.screws() == [screws[3]]

    def test_remove_compacts(self):
        """Remaining screws are packed into the lowest slots."""
        row = SlotRow(capacity=5, match_count=2)
        place_all(row, ScrewColor.BLUE, ScrewColor.RED, ScrewColor.YELLOW, ScrewColor.RED, ScrewColor.GREEN)

        row.remove_matched(ScrewColor.RED)

        assert_compacted(row)
        assert [s.color for s in row.screws()] == [ScrewColor.BLUE, ScrewColor.YELLOW, ScrewColor.GREEN]
        for slot in row.slots[:3]:
            assert (slot.screw.target_x, slot.screw.target_y) == (slot.x, slot.y)

    def test_match_with_custom_threshold(self):
        row = SlotRow(capacity=7, match_count=2)
        place_all(row, ScrewColor.GREEN, ScrewColor.PINK, ScrewColor.PINK)
        assert row.check_match() == ScrewColor.PINK


class TestRelease:
    """Tests for the extra-slots release."""

    def test_release_last_frees_highest_slots(self):
        row = SlotRow(capacity=5)
        screws = place_all(row, ScrewColor.RED, ScrewColor.BLUE, ScrewColor.YELLOW, ScrewColor.GREEN, ScrewColor.PINK)

        released = row.release_last(2)

        assert released == [screws[4], screws[3]]
        assert row.screws() == screws[:3]
        assert not row.is_full()
        assert_compacted(row)

    def test_release_more_than_occupied(self):
        row = SlotRow(capacity=5)
        screws = place_all(row, ScrewColor.RED)

        assert row.release_last(2) == screws
        assert row.occupied_count() == 0


class TestLayout:
    """Tests for relayout / clear."""

    def test_relayout_keeps_and_retargets_occupants(self):
        row = SlotRow(capacity=5, viewport_width=480)
        a, b = place_all(row, ScrewColor.RED, ScrewColor.BLUE)

        row.relayout(600)

        assert row.slots[0].screw is a
        assert row.slots[1].screw is b
        assert row.slots[0].x == pytest.approx(180.0)
        assert a.target_x == pytest.approx(180.0)

    def test_clear_empties_every_slot(self):
        row = SlotRow()
        place_all(row, ScrewColor.RED, ScrewColor.BLUE)
        row.clear()
        assert row.occupied_count() == 0
        assert len(row) == 5
