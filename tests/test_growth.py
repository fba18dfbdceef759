import math
import random

import pytest

import constants as C
from growth import GrowthScheduler
from lsystem import PRESETS, expand
from physics import PhysicsWorld
from physics_graph import PhysicsGraphBuilder
from turtle_interpreter import interpret_grammar


def make_scheduler(name="berry", growth_rate=C.PLANT_GROWTH_RATE, batch_divisor=C.GROWTH_BATCH_DIVISOR, seed=3):
    rng = random.Random(seed)
    spec = PRESETS[name]
    segments, fruits = interpret_grammar(spec, expand(spec, rng), rng)
    world = PhysicsWorld()
    builder = PhysicsGraphBuilder(world, 200.0, 600.0, 1.0)
    scheduler = GrowthScheduler(segments, fruits, builder, growth_rate=growth_rate, batch_divisor=batch_divisor)
    return scheduler, builder, world


class TestRootPlacement:
    def test_starts_seeded_with_nothing_built(self):
        scheduler, _, world = make_scheduler()
        assert scheduler.stage == C.GROWTH_STAGE_SEEDED
        assert world.body_count == 0

    def test_place_root_builds_first_trunk_segments(self):
        scheduler, builder, _ = make_scheduler()
        placed = scheduler.place_root()
        assert placed == C.ROOT_SEGMENT_COUNT
        assert scheduler.stage == C.GROWTH_STAGE_ROOT_PLACED
        assert scheduler.materialized_count == C.ROOT_SEGMENT_COUNT
        built = [scheduler.segments[i] for i in builder.segment_springs]
        assert all(s.depth == 0 for s in built)

    def test_place_root_only_once(self):
        scheduler, _, _ = make_scheduler()
        scheduler.place_root()
        assert scheduler.place_root() == 0
        assert scheduler.materialized_count == C.ROOT_SEGMENT_COUNT


class TestAdvance:
    def test_nothing_grows_below_start_fraction(self):
        scheduler, _, _ = make_scheduler(growth_rate=0.05)
        scheduler.place_root()
        scheduler.advance()
        scheduler.advance()
        assert scheduler.growth == pytest.approx(0.1)
        assert scheduler.materialized_count == C.ROOT_SEGMENT_COUNT
        assert scheduler.stage == C.GROWTH_STAGE_GROWING

    def test_batch_size(self):
        scheduler, _, _ = make_scheduler()
        assert scheduler.batch_size == max(1, scheduler.total // C.GROWTH_BATCH_DIVISOR)
        scheduler.batch_divisor = 10 ** 6
        assert scheduler.batch_size == 1

    def test_growth_and_count_never_decrease(self):
        scheduler, _, _ = make_scheduler()
        scheduler.place_root()
        last_growth, last_count = scheduler.growth, scheduler.materialized_count
        for _ in range(300):
            built = scheduler.advance()
            assert built <= scheduler.batch_size
            assert scheduler.growth >= last_growth
            assert scheduler.materialized_count >= last_count
            assert scheduler.materialized_count <= max(math.floor(scheduler.growth * scheduler.total), C.ROOT_SEGMENT_COUNT)
            last_growth, last_count = scheduler.growth, scheduler.materialized_count
        assert scheduler.growth == 1.0
        assert scheduler.materialized_count == scheduler.total
        assert scheduler.stage == C.GROWTH_STAGE_STEADY

    def test_stages_in_order(self):
        scheduler, _, _ = make_scheduler()
        scheduler.place_root()
        seen = [scheduler.stage]
        while not scheduler.is_complete:
            scheduler.advance()
            if scheduler.stage != seen[-1]:
                seen.append(scheduler.stage)
        assert seen[0] == C.GROWTH_STAGE_ROOT_PLACED
        assert seen[1] == C.GROWTH_STAGE_GROWING
        assert C.GROWTH_STAGE_CONSTRAINTS_APPLIED in seen
        assert seen[-1] == C.GROWTH_STAGE_STEADY

    def test_constraints_added_once_at_threshold(self, monkeypatch):
        scheduler, builder, _ = make_scheduler()
        calls = []
        original = builder.add_angle_constraints

        def record(segments):
            calls.append(scheduler.materialized_count)
            return original(segments)

        monkeypatch.setattr(builder, "add_angle_constraints", record)
        scheduler.place_root()
        for _ in range(300):
            scheduler.advance()
        assert len(calls) == 1
        assert calls[0] >= C.ANGLE_CONSTRAINT_TRIGGER_FRACTION * scheduler.total

    def test_fruits_attached_once_when_complete(self):
        scheduler, builder, _ = make_scheduler("berry")
        scheduler.place_root()
        for _ in range(300):
            scheduler.advance()
        assert scheduler.fruits
        assert len(builder.fruit_links) == len(scheduler.fruits)
        scheduler.advance()
        assert len(builder.fruit_links) == len(scheduler.fruits)

    def test_steady_state_stops_structural_work(self):
        scheduler, _, world = make_scheduler("simple")
        scheduler.place_root()
        while not scheduler.is_complete:
            scheduler.advance()
        bodies, springs = world.body_count, world.spring_count
        assert scheduler.advance() == 0
        assert (world.body_count, world.spring_count) == (bodies, springs)


class TestGrowthRatios:
    def test_segment_ratio_window(self):
        scheduler, _, _ = make_scheduler()
        scheduler.segments = [None] * 100
        scheduler.growth = 0.5
        assert scheduler.segment_growth_ratio(0) == 1.0
        assert scheduler.segment_growth_ratio(40) == 1.0
        assert scheduler.segment_growth_ratio(47) == pytest.approx(0.6)
        assert scheduler.segment_growth_ratio(51) == 0.0

    def test_segment_ratio_before_growth(self):
        scheduler, _, _ = make_scheduler()
        assert scheduler.segment_growth_ratio(0) == 0.0

    def test_fruit_ratio(self):
        scheduler, _, _ = make_scheduler()
        scheduler.growth = 0.5
        assert scheduler.fruit_growth_ratio() == 0.0
        scheduler.growth = 0.85
        assert scheduler.fruit_growth_ratio() == pytest.approx(0.5)
        scheduler.growth = 1.0
        assert scheduler.fruit_growth_ratio() == 1.0
