# garden.py

import random
import constants as C
import logger as log
from forces import WindField, apply_force_sources
from lsystem import PRESET_NAMES
from physics import PhysicsWorld
from plant import Plant
from time_manager import TimeManager

THEMES = ("mixed",) + PRESET_NAMES

class Garden:
    """
    A bed of plants sharing one physics world.

    Each tick runs in a fixed order: scheduled plantings, every plant's growth, external
    forces, one physics step, then the clock. Structural changes therefore never overlap
    with force application.
    """
    def __init__(self, width=C.SCREEN_WIDTH, height=C.SCREEN_HEIGHT, time_manager=None,
                 max_plants=C.GARDEN_MAX_PLANTS,
                 min_seconds_between_plants=C.GARDEN_MIN_SECONDS_BETWEEN_PLANTS,
                 growth_rate=C.PLANT_GROWTH_RATE, scale_factor_range=C.PLANT_SCALE_FACTOR_RANGE,
                 batch_divisor=C.GROWTH_BATCH_DIVISOR, rng=None):
        self.width = width
        self.height = height
        self.ground_y = height - C.GROUND_MARGIN_PIXELS
        self.rng = rng if rng is not None else random.Random()
        self.time_manager = time_manager if time_manager is not None else TimeManager()

        self.max_plants = max_plants
        self.min_seconds_between_plants = min_seconds_between_plants
        self.growth_rate = growth_rate
        self.scale_factor_range = scale_factor_range
        self.batch_divisor = batch_divisor

        self.physics = PhysicsWorld(bounds=(0.0, 0.0, float(width), float(height)))
        self.wind = WindField(self.ground_y, rng=self.rng)
        self.plants = []
        self.current_theme = C.GARDEN_DEFAULT_THEME
        self.last_plant_time = None
        self._scheduled = [] # (due sim time, plant type or None), kept sorted by time
        self._force_sources = []

    def __len__(self):
        return len(self.plants)

    def __iter__(self):
        return iter(self.plants)

    # --- Themes ---

    def set_theme(self, theme):
        if theme not in THEMES:
            log.log(f"WARNING: Unknown theme '{theme}'; keeping '{self.current_theme}'.")
            return False
        self.current_theme = theme
        log.log(f"Event: Garden theme set to '{theme}'.")
        return True

    def cycle_theme(self):
        index = THEMES.index(self.current_theme)
        self.current_theme = THEMES[(index + 1) % len(THEMES)]
        log.log(f"Event: Garden theme set to '{self.current_theme}'.")
        return self.current_theme

    def _pick_type(self):
        if self.current_theme == "mixed":
            return self.rng.choice(PRESET_NAMES)
        return self.current_theme

    # --- Planting ---

    def create_plant(self, x, y, plant_type=None, grammar=None):
        """Plants at (x, y). Returns the new Plant, or None while the planting cooldown is running."""
        now = self.time_manager.total_sim_seconds
        if self.last_plant_time is not None and now - self.last_plant_time < self.min_seconds_between_plants:
            return None

        if grammar is None and plant_type is None:
            plant_type = self._pick_type()

        try:
            plant = Plant(x, y, plant_type=plant_type, grammar=grammar, physics=self.physics,
                          growth_rate=self.growth_rate, scale_factor_range=self.scale_factor_range,
                          batch_divisor=self.batch_divisor, rng=self.rng)
        except Exception as e:
            log.log(f"ERROR: Could not create '{plant_type}' plant at ({x:.0f}, {y:.0f}): {e!r}")
            return None

        if len(self.plants) >= self.max_plants:
            oldest = self.plants[0]
            log.log(f"DEBUG: Garden full ({self.max_plants}); removing oldest plant {oldest.id}.")
            self._discard(oldest)

        self.last_plant_time = now
        self.plants.append(plant)
        return plant

    def schedule_plants(self, count=3, plant_type=None):
        """Queues up to C.GARDEN_MAX_SCHEDULED_PLANTS plantings, staggered along the sim clock."""
        count = max(0, min(count, C.GARDEN_MAX_SCHEDULED_PLANTS))
        now = self.time_manager.total_sim_seconds
        for i in range(count):
            self._scheduled.append((now + i * C.GARDEN_SCHEDULE_INTERVAL_SECONDS, plant_type))
        self._scheduled.sort(key=lambda entry: entry[0])
        log.log(f"Event: Scheduled {count} plantings.")
        return count

    @property
    def pending_plantings(self):
        return len(self._scheduled)

    def _plant_scheduled(self, now):
        while self._scheduled and self._scheduled[0][0] <= now:
            _, plant_type = self._scheduled.pop(0)
            x = self.rng.uniform(self.width * C.GARDEN_PLANTING_MIN_X_FRACTION,
                                 self.width * C.GARDEN_PLANTING_MAX_X_FRACTION)
            if self.create_plant(x, self.ground_y, plant_type) is None:
                log.log("DEBUG: Scheduled planting skipped by the planting cooldown.")

    def _discard(self, plant):
        if plant in self.plants:
            self.plants.remove(plant)
        try:
            plant.destroy()
        except Exception as e:
            log.log(f"ERROR: Failed to destroy plant {plant.id}: {e!r}")

    def clear_plants(self):
        for plant in list(self.plants):
            self._discard(plant)
        self._scheduled.clear()
        log.log("Event: Garden cleared.")

    def reset(self):
        """Clears every plant and pending planting and rewinds the sim clock."""
        self.clear_plants()
        self.last_plant_time = None
        self.time_manager.reset()

    # --- Forces ---

    def add_force_source(self, source):
        """Queues a force source for the next tick only."""
        self._force_sources.append(source)

    def movable_point_masses(self):
        return [pm for plant in self.plants for pm in plant.movable_point_masses()]

    # --- Tick ---

    def update(self, time_step=C.SIMULATION_TICK_INTERVAL_SECONDS):
        self._plant_scheduled(self.time_manager.total_sim_seconds)

        for plant in list(self.plants):
            try:
                plant.update(time_step)
            except Exception as e:
                log.log(f"ERROR: Plant {plant.id} failed to update: {e!r}. Removing it.")
                self._discard(plant)

        movable = self.movable_point_masses()
        if self._force_sources:
            apply_force_sources(movable, self._force_sources, self.physics)
            self._force_sources = []
        self.wind.update()
        self.wind.apply(movable, self.physics, self.time_manager.tick_count)

        self.physics.step(time_step)
        self.time_manager.advance_tick(time_step)

    def render_frames(self):
        frames = []
        for plant in self.plants:
            try:
                frames.append(plant.render_frame())
            except Exception as e:
                log.log(f"ERROR: Plant {plant.id} failed to render: {e!r}")
        return frames

    def get_particle_count(self):
        return self.physics.body_count

    def get_spring_count(self):
        return self.physics.spring_count
