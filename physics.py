# physics.py
import numpy as np
import constants as C
import logger as log

class PointMass:
    """
    A handle to one particle of a PhysicsWorld.
    The world owns the state in its NumPy arrays; the handle only remembers its slot index,
    which the world patches whenever it moves the particle to another slot.
    """
    def __init__(self, world, index, id):
        self.world = world
        self.index = index
        self.id = id
        self.is_alive = True

    def _slot(self):
        if not self.is_alive:
            raise ValueError(f"Point mass {self.id} has been removed from its physics world.")
        return self.index

    @property
    def x(self):
        return float(self.world.arrays['positions'][self._slot(), 0])

    @property
    def y(self):
        return float(self.world.arrays['positions'][self._slot(), 1])

    @property
    def position(self):
        px, py = self.world.arrays['positions'][self._slot()]
        return float(px), float(py)

    @property
    def mass(self):
        return float(self.world.arrays['masses'][self._slot()])

    @property
    def is_fixed(self):
        return bool(self.world.arrays['fixed'][self._slot()])

    def __repr__(self):
        state = f"({self.x:.2f}, {self.y:.2f})" if self.is_alive else "removed"
        return f"PointMass(id={self.id}, {state})"

class SpringLink:
    """An elastic connector between two distinct point masses."""
    def __init__(self, a, b, stiffness, damping, rest_length):
        self.a = a
        self.b = b
        self.stiffness = stiffness
        self.damping = damping
        self.rest_length = rest_length
        self.segment = None # Originating plant segment, set by the graph builder
        self.index = -1
        self.is_alive = True

    @property
    def current_length(self):
        ax, ay = self.a.position
        bx, by = self.b.position
        return float(np.hypot(bx - ax, by - ay))

class PhysicsWorld:
    """
    A small position-Verlet mass-spring simulator.

    Implements the five operations the growth engine relies on: create a point mass,
    create a spring, remove either, step, and apply a force. Particle state lives in
    NumPy arrays so integration and spring relaxation run as vectorized operations.
    """
    def __init__(self, gravity=C.PHYSICS_GRAVITY, air_friction=C.PHYSICS_AIR_FRICTION,
                 constraint_iterations=C.PHYSICS_CONSTRAINT_ITERATIONS, bounds=None,
                 initial_capacity=C.PHYSICS_INITIAL_CAPACITY):
        self.gravity = np.asarray(gravity, dtype=np.float64)
        self.air_friction = air_friction
        self.constraint_iterations = constraint_iterations
        self.bounds = bounds # (min_x, min_y, max_x, max_y) or None for an unbounded world

        self.bodies = []
        self.springs = []
        self.capacity = initial_capacity
        self.count = 0
        self._next_id = 0
        self._spring_cache = None

        self.arrays = {
            'positions': np.zeros((initial_capacity, 2), dtype=np.float64),
            'previous_positions': np.zeros((initial_capacity, 2), dtype=np.float64),
            'forces': np.zeros((initial_capacity, 2), dtype=np.float64),
            'masses': np.ones(initial_capacity, dtype=np.float64),
            'fixed': np.zeros(initial_capacity, dtype=bool),
        }

    @property
    def body_count(self):
        return self.count

    @property
    def spring_count(self):
        return len(self.springs)

    # --- Point masses ---

    def create_point_mass(self, x, y, mass=1.0, fixed=False):
        """Adds a particle at rest at (x, y) and returns its handle."""
        if mass <= 0:
            log.log(f"WARNING: Point mass requested with non-positive mass {mass}; using {C.POINT_MASS_MIN}.")
            mass = C.POINT_MASS_MIN
        if self.count == self.capacity:
            self._grow_capacity()

        idx = self.count
        self.arrays['positions'][idx] = (x, y)
        self.arrays['previous_positions'][idx] = (x, y)
        self.arrays['forces'][idx] = (0.0, 0.0)
        self.arrays['masses'][idx] = mass
        self.arrays['fixed'][idx] = fixed

        point_mass = PointMass(self, idx, self._next_id)
        self._next_id += 1
        self.bodies.append(point_mass)
        self.count += 1
        return point_mass

    def fix_point_mass(self, point_mass):
        """Pins a particle where it currently is."""
        idx = point_mass._slot()
        self.arrays['fixed'][idx] = True
        self.arrays['previous_positions'][idx] = self.arrays['positions'][idx]

    def _grow_capacity(self):
        """Doubles the capacity of all NumPy arrays within the self.arrays dictionary."""
        new_capacity = self.capacity * 2
        log.log(f"DEBUG: PhysicsWorld growing from {self.capacity} to {new_capacity} point masses")

        for key, arr in self.arrays.items():
            if arr.ndim == 2:
                self.arrays[key] = np.resize(arr, (new_capacity, arr.shape[1]))
            else:
                self.arrays[key] = np.resize(arr, new_capacity)

        self.capacity = new_capacity

    def remove_point_mass(self, point_mass):
        """
        Removes a particle using the 'swap and pop' method, together with any spring still attached to it.
        """
        if point_mass is None or not point_mass.is_alive or point_mass.world is not self:
            log.log(f"WARNING: Attempted to remove a point mass that is not in this world: {point_mass!r}")
            return False

        for spring in [s for s in self.springs if s.a is point_mass or s.b is point_mass]:
            self.remove_spring(spring)

        idx_to_remove = point_mass.index
        last_idx = self.count - 1
        if idx_to_remove != last_idx:
            last_body = self.bodies[last_idx]
            for arr in self.arrays.values():
                arr[idx_to_remove] = arr[last_idx]
            self.bodies[idx_to_remove] = last_body
            last_body.index = idx_to_remove

        self.bodies.pop()
        self.count -= 1
        point_mass.is_alive = False
        point_mass.index = -1
        self._spring_cache = None
        return True

    # --- Springs ---

    def create_spring(self, a, b, stiffness, rest_length=None, damping=C.SPRING_DAMPING):
        """
        Connects two particles. Returns None, without touching the world, when either end is missing,
        removed, foreign to this world, or both ends are the same particle.
        """
        if a is None or b is None or not a.is_alive or not b.is_alive:
            log.log("WARNING: Attempted to create spring with a missing point mass.")
            return None
        if a.world is not self or b.world is not self:
            log.log("WARNING: Attempted to create spring between point masses of another world.")
            return None
        if a is b:
            log.log(f"WARNING: Attempted to create spring from point mass {a.id} to itself.")
            return None

        if rest_length is None or rest_length < 0:
            ax, ay = a.position
            bx, by = b.position
            rest_length = float(np.hypot(bx - ax, by - ay))
        stiffness = min(max(stiffness, 0.0), C.SPRING_MAX_STIFFNESS)

        spring = SpringLink(a, b, stiffness, damping, rest_length)
        spring.index = len(self.springs)
        self.springs.append(spring)
        self._spring_cache = None
        return spring

    def remove_spring(self, spring):
        if spring is None or not spring.is_alive or spring.index >= len(self.springs) or self.springs[spring.index] is not spring:
            log.log("WARNING: Attempted to remove a spring that is not in this world.")
            return False

        idx_to_remove = spring.index
        last_spring = self.springs[-1]
        self.springs[idx_to_remove] = last_spring
        last_spring.index = idx_to_remove
        self.springs.pop()

        spring.is_alive = False
        spring.index = -1
        self._spring_cache = None
        return True

    def _spring_arrays(self):
        """Index and parameter arrays for all springs, rebuilt only after a structural change."""
        if self._spring_cache is None:
            self._spring_cache = (
                np.fromiter((s.a.index for s in self.springs), dtype=np.int64, count=len(self.springs)),
                np.fromiter((s.b.index for s in self.springs), dtype=np.int64, count=len(self.springs)),
                np.fromiter((s.rest_length for s in self.springs), dtype=np.float64, count=len(self.springs)),
                np.fromiter((s.stiffness for s in self.springs), dtype=np.float64, count=len(self.springs)),
                np.fromiter((s.damping for s in self.springs), dtype=np.float64, count=len(self.springs)),
            )
        return self._spring_cache

    # --- Forces & stepping ---

    def apply_force(self, point_mass, fx, fy):
        """Accumulates a force on a particle; it is consumed by the next step."""
        if point_mass is None or not point_mass.is_alive or point_mass.world is not self:
            log.log(f"WARNING: Attempted to apply force to a point mass that is not in this world: {point_mass!r}")
            return False
        self.arrays['forces'][point_mass.index] += (fx, fy)
        return True

    def get_force(self, point_mass):
        """Returns the force accumulated on a particle since the last step."""
        fx, fy = self.arrays['forces'][point_mass._slot()]
        return float(fx), float(fy)

    def step(self, time_step=C.SIMULATION_TICK_INTERVAL_SECONDS):
        """Advances the simulation by one fixed time step."""
        n = self.count
        if n == 0:
            return

        positions = self.arrays['positions'][:n]
        previous = self.arrays['previous_positions'][:n]
        forces = self.arrays['forces'][:n]
        masses = self.arrays['masses'][:n]
        fixed = self.arrays['fixed'][:n]

        # --- Verlet integration ---
        velocities = (positions - previous) * (1.0 - self.air_friction)
        accelerations = self.gravity + forces / masses[:, np.newaxis] * C.PHYSICS_FORCE_SCALE
        new_positions = positions + velocities + accelerations * time_step * time_step
        new_positions[fixed] = positions[fixed]

        previous[:] = positions
        positions[:] = new_positions
        forces.fill(0.0)

        # --- Spring relaxation ---
        if self.springs:
            self._relax_springs(positions, previous, masses, fixed)

        if self.bounds is not None:
            min_x, min_y, max_x, max_y = self.bounds
            np.clip(positions[:, 0], min_x, max_x, out=positions[:, 0])
            np.clip(positions[:, 1], min_y, max_y, out=positions[:, 1])

    def _relax_springs(self, positions, previous, masses, fixed):
        ia, ib, rest, stiffness, damping = self._spring_arrays()

        inverse_masses = np.where(fixed, 0.0, 1.0 / masses)
        wa = inverse_masses[ia]
        wb = inverse_masses[ib]
        total = wa + wb
        movable = total > 0
        share_a = np.divide(wa, total, out=np.zeros_like(wa), where=movable)[:, np.newaxis]
        share_b = np.divide(wb, total, out=np.zeros_like(wb), where=movable)[:, np.newaxis]

        for _ in range(self.constraint_iterations):
            delta = positions[ib] - positions[ia]
            lengths = np.linalg.norm(delta, axis=1)
            safe_lengths = np.maximum(lengths, C.PHYSICS_MIN_SPRING_LENGTH)
            stretch = (lengths - rest) / safe_lengths * stiffness
            correction = delta * stretch[:, np.newaxis]
            np.add.at(positions, ia, correction * share_a)
            np.add.at(positions, ib, -correction * share_b)

        # Damp the relative velocity along each spring by nudging the previous positions.
        delta = positions[ib] - positions[ia]
        safe_lengths = np.maximum(np.linalg.norm(delta, axis=1), C.PHYSICS_MIN_SPRING_LENGTH)
        normals = delta / safe_lengths[:, np.newaxis]
        relative_velocity = (positions[ib] - previous[ib]) - (positions[ia] - previous[ia])
        along = np.sum(relative_velocity * normals, axis=1) * damping
        impulse = normals * along[:, np.newaxis]
        np.add.at(previous, ia, -impulse * share_a)
        np.add.at(previous, ib, impulse * share_b)
