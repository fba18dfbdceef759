# physics_graph.py

import constants as C
import logger as log
from geometry import remap, point_key, law_of_cosines
from quadtree import QuadTree, Rectangle

def joint_mass(depth, thickness):
    """Mass of a segment's start point. Deeper joints are lighter, thicker ones heavier."""
    return max(C.POINT_MASS_MIN, remap(depth, *C.DEPTH_MAPPING_RANGE, *C.JOINT_MASS_RANGE) * thickness)

def tip_mass(depth, thickness):
    """Mass of a segment's end point; always below the joint mass for the same segment."""
    return max(C.POINT_MASS_MIN, remap(depth, *C.DEPTH_MAPPING_RANGE, *C.TIP_MASS_RANGE) * thickness)

def spring_stiffness(depth, thickness):
    return max(C.SPRING_STIFFNESS_MIN, remap(depth, *C.DEPTH_MAPPING_RANGE, *C.SPRING_STIFFNESS_RANGE) * thickness)

def angle_constraint_stiffness(depth):
    return max(0.0, remap(depth, *C.DEPTH_MAPPING_RANGE, *C.ANGLE_CONSTRAINT_STIFFNESS_RANGE))

class FruitLink:
    """A fruit hanging from the plant: its anchor record, its own point mass and the spring holding it."""
    def __init__(self, anchor, point_mass, spring):
        self.anchor = anchor
        self.point_mass = point_mass
        self.spring = spring

class PhysicsGraphBuilder:
    """
    Maps one plant's segments onto point masses and springs of a physics world.

    Endpoints are deduplicated on their plant-local rest coordinates, quantized to
    C.POINT_KEY_DECIMALS decimal places, so segments meeting at a joint share one point mass.
    Every object the builder creates is tracked so the plant can release it later.
    """
    def __init__(self, physics, origin_x, origin_y, scale):
        self.physics = physics
        self.origin_x = origin_x
        self.origin_y = origin_y
        self.scale = scale

        self.point_masses = {} # quantized local key -> PointMass
        self.segment_springs = {} # segment index -> SpringLink
        self.angle_constraints = []
        self.fruit_links = []
        self._constrained_pairs = set()

    def to_world(self, x, y):
        return self.origin_x + x * self.scale, self.origin_y + y * self.scale

    @property
    def all_springs(self):
        return (list(self.segment_springs.values()) + self.angle_constraints +
                [link.spring for link in self.fruit_links])

    @property
    def all_point_masses(self):
        return list(self.point_masses.values()) + [link.point_mass for link in self.fruit_links]

    def movable_point_masses(self):
        return [pm for pm in self.all_point_masses if pm.is_alive and not pm.is_fixed]

    def _get_or_create_point(self, key, world_x, world_y, mass, fixed):
        point_mass = self.point_masses.get(key)
        if point_mass is None:
            point_mass = self.physics.create_point_mass(world_x, world_y, mass, fixed)
            self.point_masses[key] = point_mass
        elif fixed and not point_mass.is_fixed:
            self.physics.fix_point_mass(point_mass)
        return point_mass

    def materialize_segment(self, segment, index=None):
        """Creates (or reuses) the segment's two point masses and the spring between them."""
        start_key = point_key(segment.x1, segment.y1)
        end_key = point_key(segment.x2, segment.y2)
        if start_key == end_key:
            log.log(f"DEBUG: Segment {index} collapses to a single point at {start_key}; not linked.")
            return None

        start_x, start_y = self.to_world(segment.x1, segment.y1)
        start = self._get_or_create_point(start_key, start_x, start_y,
                                          joint_mass(segment.depth, segment.thickness), segment.is_root)

        # A new tip sprouts from wherever its parent joint has swayed to.
        current_x, current_y = start.position
        end_x = current_x + (segment.x2 - segment.x1) * self.scale
        end_y = current_y + (segment.y2 - segment.y1) * self.scale
        end = self._get_or_create_point(end_key, end_x, end_y,
                                        tip_mass(segment.depth, segment.thickness), segment.is_root)

        spring = self.physics.create_spring(start, end, spring_stiffness(segment.depth, segment.thickness),
                                            rest_length=segment.length * self.scale)
        if spring is None:
            log.log(f"WARNING: Segment {index} could not be linked; skipping it.")
            return None

        spring.segment = segment
        if index is not None:
            self.segment_springs[index] = spring
        return spring

    def add_angle_constraints(self, segments):
        """
        Adds a weak spring between the end points of every pair of segments sharing a start point,
        with a rest length that holds the pair at its original opening angle.
        Returns the springs created by this call; pairs constrained earlier are left alone.
        """
        groups = {}
        for segment in segments:
            groups.setdefault(point_key(segment.x1, segment.y1), []).append(segment)

        created = []
        skipped_degenerate = 0
        for key, group in groups.items():
            if len(group) < 2 or key not in self.point_masses:
                continue

            for i in range(len(group)):
                for j in range(i + 1, len(group)):
                    segment_a, segment_b = group[i], group[j]
                    end_a = self.point_masses.get(point_key(segment_a.x2, segment_a.y2))
                    end_b = self.point_masses.get(point_key(segment_b.x2, segment_b.y2))
                    if end_a is None or end_b is None or end_a is end_b:
                        continue

                    pair = (min(end_a.id, end_b.id), max(end_a.id, end_b.id))
                    if pair in self._constrained_pairs:
                        continue

                    length_a = segment_a.length * self.scale
                    length_b = segment_b.length * self.scale
                    if length_a < C.DEGENERATE_LENGTH_EPSILON or length_b < C.DEGENERATE_LENGTH_EPSILON:
                        skipped_degenerate += 1
                        continue

                    opening_angle = abs(segment_a.heading - segment_b.heading)
                    target_length = law_of_cosines(length_a, length_b, opening_angle)
                    spring = self.physics.create_spring(end_a, end_b, angle_constraint_stiffness(segment_a.depth),
                                                        rest_length=target_length)
                    if spring is None:
                        continue

                    self._constrained_pairs.add(pair)
                    self.angle_constraints.append(spring)
                    created.append(spring)

        if skipped_degenerate:
            log.log(f"DEBUG: Skipped {skipped_degenerate} angle constraints with zero-length segments.")
        return created

    def attach_fruits(self, fruits):
        """Hangs each fruit from the nearest materialized point mass by a soft spring."""
        if not fruits:
            return []
        if not self.point_masses:
            log.log(f"WARNING: No point masses to hang {len(fruits)} fruits from.")
            return []

        anchors = [pm for pm in self.point_masses.values() if pm.is_alive]
        tree = QuadTree(Rectangle.around(anchors))
        for point_mass in anchors:
            tree.insert(point_mass)

        created = []
        for fruit in fruits:
            x, y = self.to_world(fruit.x, fruit.y)
            nearest = tree.nearest(x, y)
            if nearest is None:
                log.log(f"WARNING: No anchor found for fruit at ({x:.1f}, {y:.1f}).")
                continue

            fruit_mass = self.physics.create_point_mass(x, y, C.FRUIT_MASS, False)
            spring = self.physics.create_spring(nearest, fruit_mass, C.FRUIT_SPRING_STIFFNESS,
                                                rest_length=fruit.size * self.scale * C.FRUIT_REST_LENGTH_FACTOR)
            if spring is None:
                self.physics.remove_point_mass(fruit_mass)
                continue

            link = FruitLink(fruit, fruit_mass, spring)
            self.fruit_links.append(link)
            created.append(link)
        return created

    def release(self):
        """Removes every spring and point mass this builder created from the physics world."""
        for spring in self.all_springs:
            if spring.is_alive:
                self.physics.remove_spring(spring)
        for point_mass in self.all_point_masses:
            if point_mass.is_alive:
                self.physics.remove_point_mass(point_mass)

        self.point_masses.clear()
        self.segment_springs.clear()
        self.angle_constraints.clear()
        self.fruit_links.clear()
        self._constrained_pairs.clear()
