import random

import pytest

import constants as C
from forces import ForceSource
from garden import THEMES, Garden
from lsystem import PRESET_NAMES


@pytest.fixture
def garden():
    return Garden(800, 600, min_seconds_between_plants=0.0, rng=random.Random(42))


def advance(garden, ticks):
    for _ in range(ticks):
        garden.update(C.SIMULATION_TICK_INTERVAL_SECONDS)


class TestPlanting:
    def test_plants_share_the_garden_world(self, garden):
        first = garden.create_plant(200, garden.ground_y, "simple")
        second = garden.create_plant(400, garden.ground_y, "fern")
        assert first.physics is garden.physics
        assert second.physics is garden.physics
        assert len(garden) == 2
        assert list(garden) == [first, second]

    def test_cooldown_rejects_rapid_planting(self):
        garden = Garden(800, 600, rng=random.Random(1))
        assert garden.create_plant(100, 590, "simple") is not None
        assert garden.create_plant(120, 590, "simple") is None
        garden.time_manager.advance_tick(C.GARDEN_MIN_SECONDS_BETWEEN_PLANTS)
        assert garden.create_plant(140, 590, "simple") is not None
        assert len(garden) == 2

    def test_oldest_plant_evicted_at_capacity(self):
        garden = Garden(800, 600, max_plants=2, min_seconds_between_plants=0.0, rng=random.Random(1))
        oldest = garden.create_plant(100, 590, "simple")
        middle = garden.create_plant(200, 590, "simple")
        newest = garden.create_plant(300, 590, "simple")
        assert list(garden) == [middle, newest]
        assert oldest.is_destroyed

    def test_failed_planting_keeps_the_oldest_plant(self, monkeypatch):
        garden = Garden(800, 600, max_plants=2, min_seconds_between_plants=0.0, rng=random.Random(1))
        first = garden.create_plant(100, 590, "simple")
        second = garden.create_plant(200, 590, "simple")

        def broken_plant(*args, **kwargs):
            raise ValueError("bad grammar")

        monkeypatch.setattr("garden.Plant", broken_plant)
        assert garden.create_plant(300, 590, "simple") is None
        assert list(garden) == [first, second]
        assert not first.is_destroyed

    def test_theme_decides_type(self, garden):
        garden.set_theme("cactus")
        plant = garden.create_plant(100, garden.ground_y)
        assert plant.plant_type == "cactus"

    def test_mixed_theme_picks_presets(self, garden):
        plant = garden.create_plant(100, garden.ground_y)
        assert plant.plant_type in PRESET_NAMES

    def test_explicit_type_overrides_theme(self, garden):
        garden.set_theme("cactus")
        assert garden.create_plant(100, garden.ground_y, "fern").plant_type == "fern"


class TestThemes:
    def test_cycle_visits_every_theme(self, garden):
        seen = [garden.current_theme]
        for _ in range(len(THEMES) - 1):
            seen.append(garden.cycle_theme())
        assert seen == list(THEMES)
        assert garden.cycle_theme() == "mixed"

    def test_unknown_theme_rejected(self, garden):
        assert not garden.set_theme("jungle")
        assert garden.current_theme == C.GARDEN_DEFAULT_THEME


class TestSchedule:
    def test_schedule_is_capped_and_staggered(self, garden):
        assert garden.schedule_plants(10, "simple") == C.GARDEN_MAX_SCHEDULED_PLANTS
        advance(garden, 1)
        assert len(garden) == 1
        ticks_per_interval = int(C.GARDEN_SCHEDULE_INTERVAL_SECONDS / C.SIMULATION_TICK_INTERVAL_SECONDS) + 2
        advance(garden, ticks_per_interval * C.GARDEN_MAX_SCHEDULED_PLANTS)
        assert len(garden) == C.GARDEN_MAX_SCHEDULED_PLANTS
        assert garden.pending_plantings == 0

    def test_scheduled_plants_sit_on_the_ground(self, garden):
        garden.schedule_plants(2, "simple")
        advance(garden, 60)
        for plant in garden:
            assert plant.y == garden.ground_y
            assert garden.width * C.GARDEN_PLANTING_MIN_X_FRACTION <= plant.x <= garden.width * C.GARDEN_PLANTING_MAX_X_FRACTION


class TestUpdate:
    def test_plants_grow_and_clock_advances(self, garden):
        plant = garden.create_plant(300, garden.ground_y, "simple")
        advance(garden, 100)
        assert plant.growth == 1.0
        assert garden.time_manager.tick_count == 100
        assert garden.time_manager.total_sim_seconds == pytest.approx(100 * C.SIMULATION_TICK_INTERVAL_SECONDS)

    def test_failing_plant_is_isolated(self, garden):
        healthy = garden.create_plant(200, garden.ground_y, "simple")
        broken = garden.create_plant(500, garden.ground_y, "simple")

        def explode(time_step):
            raise ValueError("boom")

        broken.update = explode
        advance(garden, 1)
        assert list(garden) == [healthy]
        assert broken.is_destroyed
        assert healthy.growth > 0

    def test_force_sources_last_one_tick(self, garden, monkeypatch):
        garden.wind.enabled = False
        garden.create_plant(300, garden.ground_y, "simple")
        calls = []
        monkeypatch.setattr("garden.apply_force_sources", lambda *args: calls.append(args) or 0)
        garden.add_force_source(ForceSource(300, 500))
        advance(garden, 2)
        assert len(calls) == 1

    def test_counts_and_clear(self, garden):
        garden.create_plant(200, garden.ground_y, "tree")
        garden.create_plant(500, garden.ground_y, "berry")
        advance(garden, 120)
        assert garden.get_particle_count() > 0
        assert garden.get_spring_count() > 0

        garden.clear_plants()
        assert len(garden) == 0
        assert garden.get_particle_count() == 0
        assert garden.get_spring_count() == 0

    def test_reset_rewinds_clock_and_cooldown(self):
        garden = Garden(800, 600, rng=random.Random(5))
        garden.create_plant(100, 590, "simple")
        garden.schedule_plants(2)
        advance(garden, 10)
        garden.reset()
        assert len(garden) == 0
        assert garden.pending_plantings == 0
        assert garden.time_manager.tick_count == 0
        assert garden.time_manager.total_sim_seconds == 0.0
        assert garden.create_plant(300, 590, "simple") is not None

    def test_render_frames_one_per_plant(self, garden):
        garden.create_plant(200, garden.ground_y, "simple")
        garden.create_plant(500, garden.ground_y, "flower")
        advance(garden, 50)
        frames = garden.render_frames()
        assert [frame.plant_id for frame in frames] == [plant.id for plant in garden]
