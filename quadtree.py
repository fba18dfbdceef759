#quadtree.py

import math
import constants as C

class Rectangle:
    """Axis-aligned box stored as a center (x, y) and half extents (w, h)."""
    def __init__(self, x, y, w, h):
        self.x = x
        self.y = y
        self.w = w
        self.h = h

    def contains(self, point):
        return (self.x - self.w <= point.x < self.x + self.w and
                self.y - self.h <= point.y < self.y + self.h)

    def intersects(self, other):
        return not (other.x - other.w > self.x + self.w or
                    other.x + other.w < self.x - self.w or
                    other.y - other.h > self.y + self.h or
                    other.y + other.h < self.y - self.h)

    @classmethod
    def around(cls, points, padding=1.0):
        """The bounding box of the points, grown by padding so the max edge is still inside."""
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        min_x, max_x = min(xs), max(xs)
        min_y, max_y = min(ys), max(ys)
        return cls((min_x + max_x) / 2, (min_y + max_y) / 2,
                   (max_x - min_x) / 2 + padding, (max_y - min_y) / 2 + padding)

class QuadTree:
    """
    Point index over anything with .x and .y attributes.
    Used to find the closest point mass for each fruit anchor.
    """
    def __init__(self, boundary, capacity=C.QUADTREE_CAPACITY):
        self.boundary = boundary
        self.capacity = capacity
        self.points = []
        self.children = None
        self.size = 0

    def subdivide(self):
        b = self.boundary
        hw, hh = b.w / 2, b.h / 2
        self.children = [QuadTree(Rectangle(b.x + dx * hw, b.y + dy * hh, hw, hh), self.capacity)
                         for dx, dy in ((1, -1), (-1, -1), (1, 1), (-1, 1))]

    def insert(self, point):
        """Adds a point. Returns False if it lies outside this node's boundary."""
        if not self.boundary.contains(point):
            return False

        if len(self.points) < self.capacity:
            self.points.append(point)
        else:
            if self.children is None:
                self.subdivide()
            if not any(child.insert(point) for child in self.children):
                return False
        self.size += 1
        return True

    def query(self, range_rect, found=None):
        """Collects every stored point inside range_rect into found."""
        if found is None:
            found = []
        if not self.boundary.intersects(range_rect):
            return found

        found.extend(p for p in self.points if range_rect.contains(p))
        if self.children is not None:
            for child in self.children:
                child.query(range_rect, found)
        return found

    def nearest(self, x, y, initial_half_size=C.QUADTREE_NEAREST_INITIAL_HALF_SIZE):
        """
        Returns the stored point closest to (x, y), or None if the tree is empty.
        Searches a square window that doubles until it holds a point no farther than its half size.
        """
        if self.size == 0:
            return None

        # Once the window reaches this half size it covers the whole boundary.
        covering_half_size = max(abs(x - self.boundary.x) + self.boundary.w,
                                 abs(y - self.boundary.y) + self.boundary.h)
        half_size = initial_half_size
        while True:
            found = self.query(Rectangle(x, y, half_size, half_size))
            best = min(found, key=lambda p: math.hypot(p.x - x, p.y - y), default=None)
            if best is not None:
                # A point inside the square but beyond its inscribed circle may not be the closest overall.
                if math.hypot(best.x - x, best.y - y) <= half_size or half_size >= covering_half_size:
                    return best
            if half_size >= covering_half_size:
                return None
            half_size *= 2
