"""Ray–shape intersection tests and the nearest hit in a world."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .scene import Cone, Cylinder, Disc, Plane, Polygon, Shape, Sphere, World
from .vectors import EPSILON, Ray, Vector

_FAR_AWAY = 999999999999999.0


@dataclass(frozen=True)
class Intersection:
    """Where a ray meets a shape, ``t`` units of direction from its origin."""

    shape: Shape
    point: Vector
    t: float


def _project(point: Vector, discard: str) -> tuple[float, float]:
    if discard == "x":
        return point.y, point.z
    if discard == "y":
        return point.x, point.z
    return point.x, point.y


def point_in_polygon(point: Vector, polygon: Polygon) -> bool:
    """Crossing test of ``point`` against ``polygon`` in its projection plane."""
    discard = polygon.discard_axis()
    pu, pv = _project(point, discard)
    flat = [_project(vertex, discard) for vertex in polygon.vertices]
    crossings = 0
    for (u1, v1), (u2, v2) in zip(flat, flat[1:] + flat[:1]):
        u1 -= pu
        v1 -= pv
        u2 -= pu
        v2 -= pv
        if (v1 < 0 and v2 < 0) or (v1 > 0 and v2 > 0):
            continue
        if u1 < 0 and u2 < 0:
            continue
        straddles = (v1 < 0 < v2) or (v2 < 0 < v1)
        if not straddles:
            continue
        if u1 > 0 and u2 > 0:
            crossings += 1
            continue
        u_cross = u1 + (u2 - u1) * (-v1) / (v2 - v1)
        if u_cross > 0:
            crossings += 1
    return crossings % 2 == 1


def intersect_sphere(ray: Ray, sphere: Sphere) -> Intersection | None:
    """Nearest hit of ``ray`` on ``sphere``, honouring its cut plane."""
    to_origin = ray.origin - sphere.center
    alpha = ray.direction.dot(ray.direction)
    beta = 2.0 * to_origin.dot(ray.direction)
    gamma = to_origin.dot(to_origin) - sphere.radius ** 2
    discriminant = beta ** 2 - 4 * alpha * gamma
    if discriminant < 0 or alpha == 0:
        return None
    root = math.sqrt(discriminant)
    t1 = (-beta - root) / (2.0 * alpha)
    t2 = (-beta + root) / (2.0 * alpha)
    if t1 > EPSILON and t1 < t2:
        t = t1
    elif t2 > EPSILON and t2 < t1:
        t = t2
    else:
        return None
    point = ray.at(t)
    if sphere.cut_plane is not None:
        value = sphere.cut_plane.value(point)
        if value > EPSILON and not sphere.cut_top:
            return None
        if value < -EPSILON and sphere.cut_top:
            return None
    return Intersection(sphere, point, t)


def _intersect_plane(ray: Ray, plane: Plane) -> tuple[float, Vector] | None:
    normal = plane.normal()
    denominator = normal.dot(ray.direction)
    if abs(denominator) < EPSILON:
        return None
    t = -(normal.dot(ray.origin) + plane.d) / denominator
    if t < EPSILON:
        return None
    return t, ray.at(t)


def intersect_polygon(ray: Ray, polygon: Polygon) -> Intersection | None:
    """Hit of ``ray`` on ``polygon``, if it falls inside its edges."""
    hit = _intersect_plane(ray, polygon.plane())
    if hit is None:
        return None
    t, point = hit
    if not point_in_polygon(point, polygon):
        return None
    return Intersection(polygon, point, t)


def intersect_disc(ray: Ray, disc: Disc) -> Intersection | None:
    """Hit of ``ray`` on ``disc``, if within its radius."""
    hit = _intersect_plane(ray, disc.plane)
    if hit is None:
        return None
    t, point = hit
    offset = point - disc.center
    if offset.dot(offset) > disc.radius * disc.radius:
        return None
    return Intersection(disc, point, t)


def _intersect_quadric(
    ray: Ray, shape: Cylinder | Cone, widen: float
) -> Intersection | None:
    """Shared solver for open cylinders (``widen`` 1) and cones."""
    axis = shape.axis()
    base = shape.d1
    direction = ray.direction
    delta = ray.origin - base
    q_dot_d = direction.dot(axis)
    delta_dot_q = delta.dot(axis)
    delta_dot_d = delta.dot(direction)

    a = direction.dot(direction) - widen * q_dot_d ** 2
    b = 2.0 * (delta_dot_d - widen * q_dot_d * delta_dot_q)
    c = delta.dot(delta) - widen * delta_dot_q ** 2 - shape.radius ** 2
    discriminant = b * b - 4 * a * c
    if discriminant < 0 or a == 0:
        return None
    root = math.sqrt(discriminant)
    t1, t2 = sorted(((-b - root) / (2 * a), (-b + root) / (2 * a)))
    if t2 < EPSILON:
        return None

    height = shape.height()

    def within(t: float) -> tuple[bool, Vector]:
        point = ray.at(t)
        level = (point - base).dot(axis)
        return 0 <= level <= height, point

    t = t1 if t1 > EPSILON else t2
    inside, point = within(t)
    if not inside:
        t = t2
        inside, point = within(t)
        if not inside:
            return None
    return Intersection(shape, point, t)


def intersect_cylinder(ray: Ray, cylinder: Cylinder) -> Intersection | None:
    """Nearest hit of ``ray`` on the body of ``cylinder``."""
    return _intersect_quadric(ray, cylinder, 1.0)


def intersect_cone(ray: Ray, cone: Cone) -> Intersection | None:
    """Nearest hit of ``ray`` on the body of ``cone``."""
    return _intersect_quadric(ray, cone, 1.0 + (cone.k2 / cone.k1) ** 2)


def _intersect(ray: Ray, shape: Shape) -> Intersection | None:
    if isinstance(shape, Sphere):
        return intersect_sphere(ray, shape)
    if isinstance(shape, Polygon):
        return intersect_polygon(ray, shape)
    if isinstance(shape, Cylinder):
        return intersect_cylinder(ray, shape)
    if isinstance(shape, Disc):
        return intersect_disc(ray, shape)
    if isinstance(shape, Cone):
        return intersect_cone(ray, shape)
    raise TypeError(f"unknown shape {type(shape).__name__}")


def first_intersection(ray: Ray, world: World) -> Intersection | None:
    """Closest hit of ``ray`` among all shapes of ``world``.

    On equal distances the shape met first in :meth:`World.shapes` wins.
    """
    best: Intersection | None = None
    t_min = _FAR_AWAY
    for shape in world.shapes():
        hit = _intersect(ray, shape)
        if hit is not None and hit.t < t_min:
            best = hit
            t_min = hit.t
    return best