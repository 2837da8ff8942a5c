"""Tests for lane assignment."""

import random

import pytest

from timeline.lanes import BUFFER_LANES, LaneAllocator


class TestLaneAllocator:
    @pytest.fixture
    def lanes(self) -> LaneAllocator:
        return LaneAllocator()

    def test_sequential_tasks_get_distinct_lanes(self, lanes: LaneAllocator) -> None:
        lanes.sync(["a"])
        lanes.sync(["a", "b"])
        assert lanes.lane_of("a") == 0
        assert lanes.lane_of("b") == 1

    def test_freed_lane_is_reused(self, lanes: LaneAllocator) -> None:
        lanes.sync(["a", "b"])
        lanes.sync(["b"])
        lanes.sync(["b", "c"])
        assert lanes.lane_of("b") == 1
        assert lanes.lane_of("c") == 0
        assert "a" not in lanes

    def test_existing_lane_is_stable(self, lanes: LaneAllocator) -> None:
        lanes.sync(["a", "b", "c"])
        before = lanes.assignments()
        lanes.sync(["c", "a", "b", "d"])
        for tid, lane in before.items():
            assert lanes.lane_of(tid) == lane

    def test_lane_count_keeps_one_buffer_row(self, lanes: LaneAllocator) -> None:
        lanes.sync(["a", "b", "c"])
        assert lanes.lane_count() == 2 + 1 + BUFFER_LANES == 4

    def test_empty_allocator_still_has_rows(self, lanes: LaneAllocator) -> None:
        assert lanes.lane_count() == 2

    def test_random_add_remove_keeps_lanes_unique_and_lowest(self, lanes: LaneAllocator) -> None:
        rng = random.Random(7)
        live: list[str] = []
        counter = 0
        for _ in range(300):
            new_id = None
            if live and rng.random() < 0.4:
                live.remove(rng.choice(live))
            else:
                counter += 1
                new_id = f"t{counter}"
                live.append(new_id)
            assigned = lanes.sync(live)
            assert set(assigned) == set(live)
            values = list(assigned.values())
            assert len(values) == len(set(values))
            if new_id is not None:
                used = {lane for tid, lane in assigned.items() if tid != new_id}
                lowest = next(n for n in range(len(live) + 1) if n not in used)
                assert assigned[new_id] == lowest

    def test_lowest_free_lane_fills_gaps(self, lanes: LaneAllocator) -> None:
        lanes.sync(["a", "b", "c", "d"])
        lanes.sync(["a", "d"])
        lanes.sync(["a", "d", "e", "f"])
        assert lanes.lane_of("e") == 1
        assert lanes.lane_of("f") == 2

    def test_pin_moves_task(self, lanes: LaneAllocator) -> None:
        lanes.sync(["a"])
        lanes.pin("a", 3)
        assert lanes.lane_of("a") == 3
        assert lanes.lane_count() == 5

    def test_pin_to_taken_lane_swaps(self, lanes: LaneAllocator) -> None:
        lanes.sync(["a", "b"])
        lanes.pin("a", 1)
        assert lanes.lane_of("a") == 1
        assert lanes.lane_of("b") == 0

    def test_negative_pin_is_ignored(self, lanes: LaneAllocator) -> None:
        lanes.sync(["a"])
        lanes.pin("a", -1)
        assert lanes.lane_of("a") == 0

    def test_release_and_clear(self, lanes: LaneAllocator) -> None:
        lanes.sync(["a", "b"])
        lanes.release("a")
        assert lanes.lane_of("a") is None
        lanes.clear()
        assert len(lanes) == 0
