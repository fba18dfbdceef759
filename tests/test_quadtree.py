import math
import random
from collections import namedtuple

from quadtree import QuadTree, Rectangle

Point = namedtuple("Point", "x y")


def brute_nearest(points, x, y):
    return min(points, key=lambda p: math.hypot(p.x - x, p.y - y))


class TestRectangle:
    def test_around_contains_every_point(self):
        points = [Point(-5.0, 2.0), Point(10.0, 30.0), Point(3.0, -7.5)]
        boundary = Rectangle.around(points)
        assert all(boundary.contains(p) for p in points)

    def test_around_single_point(self):
        boundary = Rectangle.around([Point(4.0, 4.0)])
        assert boundary.contains(Point(4.0, 4.0))
        assert boundary.w > 0 and boundary.h > 0

    def test_intersects(self):
        a = Rectangle(0, 0, 5, 5)
        assert a.intersects(Rectangle(8, 0, 4, 4))
        assert not a.intersects(Rectangle(20, 20, 4, 4))


class TestQuadTree:
    def test_insert_outside_boundary_fails(self):
        tree = QuadTree(Rectangle(0, 0, 10, 10))
        assert not tree.insert(Point(50, 50))
        assert tree.size == 0

    def test_query_returns_points_in_range(self):
        tree = QuadTree(Rectangle(0, 0, 100, 100), capacity=2)
        points = [Point(float(i), float(i)) for i in range(-50, 50, 5)]
        for p in points:
            tree.insert(p)
        found = tree.query(Rectangle(0, 0, 10, 10), [])
        assert sorted(found) == sorted(p for p in points if -10 <= p.x < 10)

    def test_nearest_on_empty_tree(self):
        assert QuadTree(Rectangle(0, 0, 10, 10)).nearest(1, 1) is None

    def test_nearest_matches_brute_force(self):
        rng = random.Random(9)
        points = [Point(rng.uniform(0, 500), rng.uniform(0, 500)) for _ in range(200)]
        tree = QuadTree(Rectangle.around(points))
        for p in points:
            tree.insert(p)

        for _ in range(50):
            x, y = rng.uniform(-100, 600), rng.uniform(-100, 600)
            expected = brute_nearest(points, x, y)
            found = tree.nearest(x, y)
            assert math.hypot(found.x - x, found.y - y) == math.hypot(expected.x - x, expected.y - y)

    def test_nearest_far_outside_boundary(self):
        points = [Point(0.0, 0.0), Point(10.0, 0.0)]
        tree = QuadTree(Rectangle.around(points))
        for p in points:
            tree.insert(p)
        assert tree.nearest(1000.0, 0.0) == Point(10.0, 0.0)
