"""
Unit Tests for Segment Planning

Tests for:
- chunk_window
- select_focus_item
- the per-mode plan generators and their dispatcher
"""

from itertools import islice

import pytest

from aerobic_player.domain.playback.configuration import (
    ChunksConfig,
    ContinuousConfig,
    GapConfig,
    HalfConfig,
    SingleConfig,
)
from aerobic_player.domain.playback.planning import (
    chunk_window,
    plan_chunks,
    plan_continuous,
    plan_gap,
    plan_half,
    plan_segments,
    plan_single,
    select_focus_item,
)
from aerobic_player.domain.playback.segments import AudioSegment, GapSegment
from aerobic_player.domain.shared.exceptions import (
    NoDurationError,
    NoPlayableItemError,
    UnknownModeError,
)


def windows(plan):
    return [(s.item.id, s.start, s.end) for s in plan if isinstance(s, AudioSegment)]


class TestChunkWindow:
    """Tests for the buffered chunk window arithmetic."""

    def test_three_chunks_with_buffers(self):
        """Windows overlap by the buffers and stay inside the item."""
        assert chunk_window(90.0, 0, 3, 5.0, 5.0) == (0.0, 35.0)
        assert chunk_window(90.0, 1, 3, 5.0, 5.0) == (25.0, 65.0)
        assert chunk_window(90.0, 2, 3, 5.0, 5.0) == (55.0, 90.0)

    def test_last_chunk_ends_exactly_at_duration(self):
        """Rounding never cuts the tail of the item."""
        _, end = chunk_window(10.0, 2, 3)
        assert end == 10.0

    def test_unbuffered_chunks_tile_the_item(self):
        bounds = [chunk_window(100.0, i, 4) for i in range(4)]
        assert bounds == [(0.0, 25.0), (25.0, 50.0), (50.0, 75.0), (75.0, 100.0)]

    def test_large_buffers_are_clamped(self):
        assert chunk_window(20.0, 0, 2, 100.0, 100.0) == (0.0, 20.0)


class TestSelectFocusItem:
    """Tests for focus item selection in single and half mode."""

    def test_selected_item_wins(self, make_item):
        items = [make_item("a"), make_item("b")]
        assert select_focus_item(items, "b", "single").id == "b"

    def test_missing_selection_falls_back_to_first(self, make_item):
        items = [make_item("a"), make_item("b")]
        assert select_focus_item(items, "gone", "single").id == "a"
        assert select_focus_item(items, None, "single").id == "a"

    def test_no_items_raises(self):
        with pytest.raises(NoPlayableItemError) as exc_info:
            select_focus_item([], None, "half")
        assert exc_info.value.mode == "half"

    def test_item_without_duration_raises(self, make_item):
        items = [make_item("a", duration=0.0)]
        with pytest.raises(NoDurationError) as exc_info:
            select_focus_item(items, "a", "single")
        assert exc_info.value.item_id == "a"


class TestContinuousAndGapPlans:
    """Tests for the continuous and gap planners."""

    def test_continuous_plays_every_item_fully(self, make_item):
        items = [make_item("a", 10.0), make_item("b", 20.0)]
        assert windows(plan_continuous(items, ContinuousConfig())) == [
            ("a", 0.0, 10.0),
            ("b", 0.0, 20.0),
        ]

    def test_gap_only_between_items(self, make_item):
        items = [make_item("a"), make_item("b"), make_item("c")]
        plan = list(plan_gap(items, GapConfig(pause_seconds=3.0)))

        kinds = [type(s) for s in plan]
        assert kinds == [AudioSegment, GapSegment, AudioSegment, GapSegment, AudioSegment]
        assert all(s.seconds == 3.0 for s in plan if isinstance(s, GapSegment))
        assert plan[0].note == "Pause 3s afterwards"

    def test_zero_pause_yields_no_gaps(self, make_item):
        items = [make_item("a"), make_item("b")]
        plan = list(plan_gap(items, GapConfig(pause_seconds=0.0)))

        assert not any(isinstance(s, GapSegment) for s in plan)
        assert plan[0].note == "Playing"


class TestSingleAndHalfPlans:
    """Tests for the focus-item planners."""

    def test_single_repeats_the_selected_item(self, make_item):
        items = [make_item("a", 10.0), make_item("b", 30.0)]
        plan = plan_single(items, SingleConfig(selected_item_id="b"))

        assert windows(islice(plan, 5)) == [("b", 0.0, 30.0)] * 5

    def test_single_validates_when_the_plan_is_created(self, make_item):
        with pytest.raises(NoDurationError):
            plan_single([make_item("a", duration=None)], SingleConfig())

    def test_half_plays_half_plus_buffer_then_full(self, make_item):
        items = [make_item("a", 100.0)]
        plan = list(plan_half(items, HalfConfig(half_buffer_seconds=5.0)))

        assert windows(plan) == [("a", 0.0, 55.0), ("a", 0.0, 100.0)]
        assert plan[1].note == "Full track"

    def test_half_buffer_never_exceeds_duration(self, make_item):
        plan = list(plan_half([make_item("a", 10.0)], HalfConfig(half_buffer_seconds=60.0)))
        assert plan[0].end == 10.0

    def test_half_without_items_raises(self):
        with pytest.raises(NoPlayableItemError):
            plan_half([], HalfConfig())


class TestChunksPlan:
    """Tests for the chunk-major planner."""

    def test_chunk_major_order(self, make_item):
        items = [make_item("a", 90.0), make_item("b", 30.0)]
        config = ChunksConfig(
            chunk_count=2, chunk_repeats=2, chunk_lead_buffer=0.0, chunk_tail_buffer=0.0
        )
        plan = list(plan_chunks(items, config))

        assert windows(plan) == [
            ("a", 0.0, 45.0),
            ("b", 0.0, 15.0),
            ("a", 0.0, 45.0),
            ("b", 0.0, 15.0),
            ("a", 45.0, 90.0),
            ("b", 15.0, 30.0),
            ("a", 45.0, 90.0),
            ("b", 15.0, 30.0),
        ]

    def test_indices_are_one_based(self, make_item):
        config = ChunksConfig(chunk_count=3, chunk_repeats=2)
        plan = list(plan_chunks([make_item("a", 90.0)], config))

        first, last = plan[0], plan[-1]
        assert (first.chunk_index, first.repeat_index) == (1, 1)
        assert (last.chunk_index, last.repeat_index) == (3, 2)
        assert first.chunk_total == 3 and first.repeat_total == 2
        assert last.note == "Chunk 3/3 · Repeat 2/2"

    def test_items_without_duration_are_skipped(self, make_item):
        items = [make_item("a", 0.0), make_item("b", 60.0)]
        plan = list(plan_chunks(items, ChunksConfig()))

        assert {s.item.id for s in plan} == {"b"}
        assert len(plan) == 3


class TestPlanSegments:
    """Tests for mode dispatch."""

    @pytest.mark.parametrize(
        "config",
        [ContinuousConfig(), GapConfig(), ChunksConfig()],
    )
    def test_dispatches_by_config_type(self, make_item, config):
        plan = plan_segments([make_item("a")], config)
        assert isinstance(next(plan), AudioSegment)

    def test_unknown_config_raises(self, make_item):
        with pytest.raises(UnknownModeError):
            plan_segments([make_item("a")], object())
