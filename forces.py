# forces.py

import random
import numpy as np
import constants as C
import logger as log
from geometry import clamp, remap

class ForceSource:
    """A radial force field: pulls free point masses within `radius` towards (x, y)."""
    def __init__(self, x, y, radius=C.ATTRACTOR_RADIUS, strength=C.ATTRACTOR_STRENGTH,
                 max_force=C.ATTRACTOR_MAX_FORCE):
        self.x = x
        self.y = y
        self.radius = radius
        self.strength = strength
        self.max_force = max_force

    def __repr__(self):
        return f"ForceSource(({self.x:.1f}, {self.y:.1f}), r={self.radius}, s={self.strength})"

def _positions(point_masses):
    return np.array([pm.position for pm in point_masses], dtype=np.float64).reshape(-1, 2)

def apply_force_sources(point_masses, sources, physics):
    """
    Applies every source's falloff force to the free point masses within its radius.
    Magnitude is strength * (1 - d / radius), capped at the source's max_force.
    Returns how many point masses received a force.
    """
    movable = [pm for pm in point_masses if pm.is_alive and not pm.is_fixed]
    if not movable or not sources:
        return 0

    positions = _positions(movable)
    totals = np.zeros_like(positions)
    for source in sources:
        if source.radius <= 0:
            log.log(f"WARNING: Ignoring {source!r} with non-positive radius.")
            continue

        delta = np.array([source.x, source.y]) - positions
        distances = np.linalg.norm(delta, axis=1)
        in_range = distances < source.radius
        if not np.any(in_range):
            continue

        magnitudes = np.minimum(source.strength * (1.0 - distances / source.radius), source.max_force)
        at_source = distances <= C.PHYSICS_MIN_SPRING_LENGTH
        directions = delta / np.where(at_source, 1.0, distances)[:, np.newaxis]
        # A point sitting on the source has no direction towards it.
        directions[at_source] = C.FORCE_DEGENERATE_DIRECTION
        totals[in_range] += directions[in_range] * magnitudes[in_range, np.newaxis]

    touched = np.flatnonzero(np.any(totals != 0.0, axis=1))
    for i in touched:
        physics.apply_force(movable[i], float(totals[i, 0]), float(totals[i, 1]))
    return len(touched)

class PointerAttractor:
    """Pointer-driven attraction. Produces a force source only while enabled and held down."""
    def __init__(self, strength=C.ATTRACTOR_STRENGTH, radius=C.ATTRACTOR_RADIUS,
                 max_force=C.ATTRACTOR_MAX_FORCE):
        self.enabled = True
        self.is_active = False
        self.x = 0.0
        self.y = 0.0
        self.max_force = max_force
        self.strength = clamp(strength, *C.ATTRACTOR_STRENGTH_LIMITS)
        self.radius = clamp(radius, *C.ATTRACTOR_RADIUS_LIMITS)

    def set_strength(self, strength):
        self.strength = clamp(strength, *C.ATTRACTOR_STRENGTH_LIMITS)
        log.log(f"Event: Attractor strength set to {self.strength:.4f}.")

    def set_radius(self, radius):
        self.radius = clamp(radius, *C.ATTRACTOR_RADIUS_LIMITS)
        log.log(f"Event: Attractor radius set to {self.radius:.0f}.")

    def toggle(self):
        self.enabled = not self.enabled
        if not self.enabled:
            self.is_active = False
        log.log(f"Event: Attractor {'enabled' if self.enabled else 'disabled'}.")
        return self.enabled

    def press(self, x, y):
        self.is_active = self.enabled
        self.move(x, y)

    def move(self, x, y):
        self.x = x
        self.y = y

    def release(self):
        self.is_active = False

    def source_at(self, x, y):
        return ForceSource(x, y, self.radius, self.strength, self.max_force)

    def sources(self):
        if self.enabled and self.is_active:
            return [self.source_at(self.x, self.y)]
        return []

class WindField:
    """
    Gusty horizontal wind. The current force eases towards a target that is frequently
    re-drawn, so it wanders smoothly between -max_force and max_force.
    Higher and lighter point masses are pushed harder.
    """
    def __init__(self, ground_y, world_top=0.0, max_force=C.WIND_MAX_FORCE, easing=C.WIND_EASING,
                 retarget_probability=C.WIND_RETARGET_PROBABILITY, rng=None):
        self.rng = rng if rng is not None else random.Random()
        self.ground_y = ground_y
        self.world_top = world_top
        self.max_force = max_force
        self.easing = easing
        self.retarget_probability = retarget_probability
        self.enabled = True
        self.force = 0.0
        self.target_force = 0.0

    def toggle(self):
        self.enabled = not self.enabled
        log.log(f"Event: Wind {'enabled' if self.enabled else 'disabled'}.")
        return self.enabled

    def update(self):
        """Eases the force one tick towards its target and maybe picks a new target."""
        if not self.enabled:
            return
        self.force += (self.target_force - self.force) * self.easing
        if self.rng.random() < self.retarget_probability:
            self.target_force = self.rng.uniform(-self.max_force, self.max_force)

    def apply(self, point_masses, physics, tick):
        """Pushes every free point mass; `tick` phases the vertical ripple. Returns the count pushed."""
        if not self.enabled or self.force == 0.0:
            return 0
        movable = [pm for pm in point_masses if pm.is_alive and not pm.is_fixed]
        if not movable:
            return 0

        positions = _positions(movable)
        masses = np.array([pm.mass for pm in movable], dtype=np.float64)

        height_factors = remap(positions[:, 1], self.ground_y, self.world_top, *C.WIND_HEIGHT_FACTOR_RANGE)
        mass_factors = remap(masses, *C.WIND_MASS_RANGE, *C.WIND_MASS_FACTOR_RANGE)
        ripple = np.sin(positions[:, 0] * C.WIND_RIPPLE_FREQUENCY + tick * C.WIND_RIPPLE_FREQUENCY) * C.WIND_RIPPLE_AMPLITUDE

        horizontal = self.force * height_factors * mass_factors
        vertical = horizontal * ripple
        for pm, fx, fy in zip(movable, horizontal, vertical):
            physics.apply_force(pm, float(fx), float(fy))
        return len(movable)
