# plant.py

import random
from dataclasses import dataclass

import constants as C
import logger as log
from geometry import point_key
from growth import GrowthScheduler
from lsystem import GrammarSpec, create_preset, create_random_preset, expand
from physics import PhysicsWorld
from physics_graph import PhysicsGraphBuilder
from turtle_interpreter import interpret_grammar

class PlantStateError(RuntimeError):
    """Raised when a destroyed plant is updated or drawn."""

@dataclass(frozen=True)
class SegmentView:
    x1: float
    y1: float
    x2: float
    y2: float
    depth: int
    thickness: float # Stem thickness times the segment's own multiplier
    color: tuple
    growth: float # Reveal ratio, 0..1
    is_tip: bool # True when no other built segment starts at this one's end

@dataclass(frozen=True)
class FruitView:
    x: float
    y: float
    size: float
    color: tuple
    growth: float

@dataclass(frozen=True)
class RenderFrame:
    """Everything a renderer needs to draw one plant. Holds positions only, never physics handles."""
    plant_id: int
    plant_type: str
    growth: float
    stem_thickness: float
    leaf_color: tuple
    segments: tuple
    fruits: tuple

class Plant:
    """
    One growing plant: a grammar expanded and walked once into a skeleton, then grown
    into the physics world a batch of segments at a time.

    When no physics world is passed in, the plant creates and steps its own. A plant
    sharing a world with others leaves stepping to whoever owns that world.
    """
    def __init__(self, x, y, plant_type="random", grammar=None, physics=None,
                 growth_rate=C.PLANT_GROWTH_RATE, scale_factor=None,
                 scale_factor_range=C.PLANT_SCALE_FACTOR_RANGE,
                 batch_divisor=C.GROWTH_BATCH_DIVISOR, rng=None):
        self.rng = rng if rng is not None else random.Random()
        self.id = self.rng.randint(C.PLANT_ID_MIN, C.PLANT_ID_MAX)
        self.x = x
        self.y = y

        if isinstance(grammar, GrammarSpec):
            self.grammar = grammar
            self.stem_thickness = grammar.stem_thickness
        elif plant_type == "random":
            self.grammar = create_random_preset(self.rng)
            self.stem_thickness = self.rng.uniform(*C.PLANT_STEM_THICKNESS_RANGE)
        else:
            self.grammar = create_preset(plant_type)
            self.stem_thickness = self.grammar.stem_thickness
        self.plant_type = self.grammar.name

        production = expand(self.grammar, self.rng)
        self.segments, self.fruits = interpret_grammar(self.grammar, production, self.rng)

        if scale_factor is None:
            scale_factor = self.rng.uniform(*scale_factor_range)
        self.scale_factor = scale_factor

        self.owns_physics = physics is None
        self.physics = PhysicsWorld() if physics is None else physics
        self.builder = PhysicsGraphBuilder(self.physics, x, y, scale_factor)
        self.scheduler = GrowthScheduler(self.segments, self.fruits, self.builder,
                                         growth_rate=growth_rate, batch_divisor=batch_divisor)
        self.scheduler.place_root()
        self.is_destroyed = False

        log.log(f"DEBUG ({self.id}): Planted '{self.plant_type}' at ({x:.0f}, {y:.0f}) with "
                f"{len(self.segments)} segments, {len(self.fruits)} fruits, scale {scale_factor:.2f}.")

    @property
    def growth(self):
        return self.scheduler.growth

    @property
    def stage(self):
        return self.scheduler.stage

    @property
    def materialized_count(self):
        return self.scheduler.materialized_count

    def _check_alive(self, action):
        if self.is_destroyed:
            raise PlantStateError(f"Plant {self.id} has been destroyed and cannot be {action}.")

    def update(self, time_step=C.SIMULATION_TICK_INTERVAL_SECONDS):
        """Runs one growth tick, then steps the physics world if this plant owns it."""
        self._check_alive("updated")
        self.scheduler.advance()
        if self.owns_physics:
            self.physics.step(time_step)

    def movable_point_masses(self):
        """Free point masses of this plant, for wind and pointer forces."""
        if self.is_destroyed:
            return []
        return self.builder.movable_point_masses()

    def destroy(self):
        """Removes every point mass and spring of this plant from the physics world."""
        if self.is_destroyed:
            log.log(f"WARNING: Plant {self.id} destroyed twice; ignoring.")
            return
        self.builder.release()
        self.is_destroyed = True
        log.log(f"DEBUG ({self.id}): Destroyed at growth {self.growth:.2f}.")

    def render_frame(self):
        """Builds the plant's drawable state for the current tick."""
        self._check_alive("drawn")
        scheduler = self.scheduler

        built = [(index, spring) for index, spring in self.builder.segment_springs.items() if spring.is_alive]
        start_keys = {point_key(spring.segment.x1, spring.segment.y1) for _, spring in built}
        # Stable sort keeps generation order within each depth.
        built.sort(key=lambda item: item[1].segment.depth)

        segment_views = []
        for index, spring in built:
            segment = spring.segment
            ax, ay = spring.a.position
            bx, by = spring.b.position
            segment_views.append(SegmentView(
                x1=ax, y1=ay, x2=bx, y2=by,
                depth=segment.depth,
                thickness=self.stem_thickness * segment.thickness,
                color=segment.color,
                growth=scheduler.segment_growth_ratio(index),
                is_tip=point_key(segment.x2, segment.y2) not in start_keys,
            ))

        fruit_growth = scheduler.fruit_growth_ratio()
        fruit_views = []
        for link in self.builder.fruit_links:
            if not link.point_mass.is_alive:
                continue
            fx, fy = link.point_mass.position
            fruit_views.append(FruitView(
                x=fx, y=fy,
                size=link.anchor.size * self.scale_factor,
                color=link.anchor.color,
                growth=fruit_growth,
            ))

        return RenderFrame(
            plant_id=self.id,
            plant_type=self.plant_type,
            growth=scheduler.growth,
            stem_thickness=self.stem_thickness,
            leaf_color=self.grammar.leaf_color,
            segments=tuple(segment_views),
            fruits=tuple(fruit_views),
        )
