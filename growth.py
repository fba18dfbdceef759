# growth.py

import math
import constants as C
import logger as log
from geometry import remap, clamp

class GrowthScheduler:
    """
    Drives a plant from its seeded skeleton to a fully built physics body.

    Stages: seeded -> root_placed -> growing -> constraints_applied -> fruits_applied -> steady.
    Segments are materialized in generation order, a bounded batch per tick, so even a
    large plant never costs more than `batch_size` new springs in a single frame.
    """
    def __init__(self, segments, fruits, builder, growth_rate=C.PLANT_GROWTH_RATE,
                 batch_divisor=C.GROWTH_BATCH_DIVISOR):
        self.segments = segments
        self.fruits = fruits
        self.builder = builder
        self.growth_rate = growth_rate
        self.batch_divisor = max(1, int(batch_divisor))

        self.stage = C.GROWTH_STAGE_SEEDED
        self.growth = 0.0
        self.materialized = [False] * len(segments)
        self.materialized_count = 0
        self.constraints_applied = False
        self.fruits_applied = False
        self._cursor = 0 # Every segment before this index is already materialized

    @property
    def total(self):
        return len(self.segments)

    @property
    def batch_size(self):
        return max(1, self.total // self.batch_divisor)

    @property
    def is_complete(self):
        return self.stage == C.GROWTH_STAGE_STEADY

    def _materialize(self, index):
        self.builder.materialize_segment(self.segments[index], index)
        self.materialized[index] = True
        self.materialized_count += 1

    def place_root(self):
        """Materializes the first few trunk segments so the plant is anchored from its first frame."""
        if self.stage != C.GROWTH_STAGE_SEEDED:
            log.log(f"WARNING: place_root() called in stage '{self.stage}'; ignoring.")
            return 0

        placed = 0
        for index, segment in enumerate(self.segments):
            if placed >= C.ROOT_SEGMENT_COUNT:
                break
            if segment.depth == 0:
                self._materialize(index)
                placed += 1

        self.stage = C.GROWTH_STAGE_ROOT_PLACED
        return placed

    def advance(self):
        """
        Runs one growth tick and returns the number of segments materialized by it.
        Growth and the materialized count only ever increase.
        """
        if self.stage == C.GROWTH_STAGE_STEADY:
            return 0
        if self.stage in (C.GROWTH_STAGE_SEEDED, C.GROWTH_STAGE_ROOT_PLACED):
            self.stage = C.GROWTH_STAGE_GROWING

        self.growth = min(C.PLANT_TARGET_GROWTH, self.growth + self.growth_rate)

        built = 0
        if self.growth > C.GROWTH_START_FRACTION:
            target = math.floor(self.growth * self.total)
            budget = min(self.batch_size, target - self.materialized_count)
            while built < budget and self._cursor < self.total:
                if not self.materialized[self._cursor]:
                    self._materialize(self._cursor)
                    built += 1
                self._cursor += 1

        if not self.constraints_applied and self.materialized_count >= C.ANGLE_CONSTRAINT_TRIGGER_FRACTION * self.total:
            built_segments = [s for s, done in zip(self.segments, self.materialized) if done]
            created = self.builder.add_angle_constraints(built_segments)
            self.constraints_applied = True
            self.stage = C.GROWTH_STAGE_CONSTRAINTS_APPLIED
            log.log(f"DEBUG: Added {len(created)} angle constraints at {self.materialized_count}/{self.total} segments.")

        if self.constraints_applied and not self.fruits_applied and self.materialized_count == self.total:
            links = self.builder.attach_fruits(self.fruits)
            self.fruits_applied = True
            self.stage = C.GROWTH_STAGE_FRUITS_APPLIED
            log.log(f"DEBUG: Attached {len(links)} of {len(self.fruits)} fruits.")
            # Nothing structural is left to build.
            self.stage = C.GROWTH_STAGE_STEADY

        return built

    def segment_growth_ratio(self, index):
        """How much of segment `index` is revealed: 0 (hidden) to 1, fading in across the newest slice."""
        if self.growth <= 0 or self.total == 0:
            return 0.0
        t = (index / self.total) / self.growth
        if t > 1.0:
            return 0.0
        if t > 1.0 - C.SEGMENT_FADE_FRACTION:
            return (1.0 - t) / C.SEGMENT_FADE_FRACTION
        return 1.0

    def fruit_growth_ratio(self):
        if self.growth < C.FRUIT_REVEAL_GROWTH:
            return 0.0
        return clamp(remap(self.growth, C.FRUIT_REVEAL_GROWTH, 1.0, 0.0, 1.0), 0.0, 1.0)
