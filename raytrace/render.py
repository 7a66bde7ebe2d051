"""Shading of rays and sampling of the projection window into an image."""

from __future__ import annotations

import math
from typing import Callable, Mapping

from .intersect import Intersection, first_intersection
from .raycache import RayCache
from .scene import Cone, Cylinder, Disc, Material, Polygon, Sphere, World
from .texture import Texture, load_ppm_texture
from .vectors import Color, Ray, Vector

BACKGROUND = Color(192, 192, 192)
WHITE = Color(255, 255, 255)
MAX_DEPTH = 6
CHECKBOARD = "checkboard"

# Offsets inside a pixel at which rays are traced: the four corners and the centre.
_SAMPLE_OFFSETS = ((0.0, 0.0), (1.0, 0.0), (0.5, 0.5), (0.0, 1.0), (1.0, 1.0))

Image = list[list[Color]]


def _c_rem(value: int, modulus: int) -> int:
    """Remainder with the sign of ``value``, as integer division truncating to zero."""
    return int(math.fmod(value, modulus))


def _byte(value: float) -> int:
    """Truncate ``value`` to an 8-bit channel."""
    return int(value) % 256


def load_textures(world: World) -> dict[str, Texture]:
    """Load every PPM texture named by the polygons of ``world``, once per path."""
    textures: dict[str, Texture] = {}
    for polygon in world.polygons:
        path = polygon.texture_path
        if path is None or path == CHECKBOARD or path in textures:
            continue
        textures[path] = load_ppm_texture(path)
    return textures


def _facing(normal: Vector, ray: Ray) -> Vector:
    """``normal`` turned to face back along ``ray``."""
    return -normal if normal.dot(-ray.direction) < 0 else normal


class Renderer:
    """Traces rays through a world, with shadows, reflection and transparency."""

    def __init__(
        self,
        world: World,
        textures: Mapping[str, Texture] | None = None,
        max_depth: int = MAX_DEPTH,
    ) -> None:
        self.world = world
        self.textures = dict(load_textures(world) if textures is None else textures)
        self.max_depth = max_depth
        self.cache = RayCache()

    # -- surfaces ------------------------------------------------------

    def surface_color(self, polygon: Polygon, point: Vector) -> Color:
        """Colour of ``polygon`` at ``point``, with its texture applied."""
        base = polygon.material.color
        path = polygon.texture_path
        if path is None:
            return base
        discard = polygon.discard_axis()
        if path == CHECKBOARD:
            scale = polygon.texture_scale
            if discard == "y":
                first, second = point.x, point.z
            else:
                first, second = point.y, point.z
            coord1 = _c_rem(int(first * scale), 2)
            coord2 = _c_rem(int(second * scale), 2)
            return WHITE if (coord1 + coord2) % 2 == 0 else base

        texture = self.textures.get(path)
        if texture is None or texture.width == 0 or texture.height == 0:
            return base
        if discard == "x":
            row, col = point.y, point.z
        elif discard == "y":
            row, col = point.z, point.x
        else:
            row, col = point.y, point.x
        yt = _c_rem(int(row), texture.height)
        xt = _c_rem(int(col), texture.width)
        return texture.texel(xt, yt)

    def _surface(self, hit: Intersection, ray: Ray) -> tuple[Color, Vector, Material]:
        """Base colour, shading normal and material at ``hit``."""
        shape = hit.shape
        point = hit.point
        if isinstance(shape, Sphere):
            return shape.material.color, (point - shape.center).normalized(), shape.material
        if isinstance(shape, Polygon):
            color = self.surface_color(shape, point)
            return color, _facing(shape.plane().normal(), ray), shape.material
        if isinstance(shape, Disc):
            return shape.material.color, _facing(shape.plane.normal(), ray), shape.material
        if isinstance(shape, (Cylinder, Cone)):
            axis = shape.axis()
            level = (point - shape.d1).dot(axis)
            to_hit = point - (shape.d1 + axis * level)
            if isinstance(shape, Cone):
                to_hit = to_hit + axis * (shape.k2 / shape.k1)
            return shape.material.color, _facing(to_hit.normalized(), ray), shape.material
        raise TypeError(f"unknown shape {type(shape).__name__}")

    # -- lighting ------------------------------------------------------

    def _lighting(self, hit: Intersection, ray: Ray, normal: Vector, material: Material) -> tuple[float, float]:
        """Diffuse plus ambient intensity and specular intensity, each capped at 1."""
        diffuse = 0.0
        specular = 0.0
        view = -ray.direction
        for light in self.world.lights:
            to_light = light.point - hit.point
            direction = to_light.normalized()
            distance = to_light.length()
            cos_theta = direction.dot(normal)
            if cos_theta <= 0:
                continue
            denominator = light.c1 + light.c2 * distance + light.c3 * distance * distance
            fatt = 1.0 / denominator if denominator else math.inf
            obstacle = first_intersection(Ray(hit.point, direction), self.world)
            if obstacle is not None and obstacle.t <= distance:
                continue
            diffuse += cos_theta * material.kd * fatt * light.lp
            reflected = normal * (2 * normal.dot(direction)) - direction
            cos_angle = reflected.dot(view)
            if cos_angle > 0:
                specular += cos_angle ** material.kn * material.ks * fatt * light.lp
        diffuse += self.world.ambient * material.ka
        return min(1.0, diffuse), min(1.0, specular)

    # -- tracing -------------------------------------------------------

    def pixel_color(self, ray: Ray, depth: int = 1) -> Color:
        """Colour seen along ``ray``; ``depth`` counts the bounces so far."""
        cached = self.cache.get(ray)
        if cached is not None:
            return cached

        hit = first_intersection(ray, self.world)
        if hit is None:
            color = BACKGROUND
        else:
            color = self._shade(hit, ray, depth)
        self.cache.put(ray, color)
        return color

    def _shade(self, hit: Intersection, ray: Ray, depth: int) -> Color:
        base, normal, material = self._surface(hit, ray)
        intensity, specular = self._lighting(hit, ray, normal, material)
        lit = [_byte(channel * intensity) for channel in base]
        lit = [_byte(channel + specular * (255 - channel)) for channel in lit]

        o1, o2, o3 = material.o1, material.o2, material.o3
        if (o2 == 0 and o3 == 0) or depth >= self.max_depth:
            return Color(*(_byte(channel * o1) for channel in lit))

        extra: list[tuple[Color, float]] = []
        if o2 != 0:
            mirrored = ray.direction - normal * (2 * normal.dot(ray.direction))
            reflection = Ray(hit.point, mirrored.normalized())
            extra.append((self.pixel_color(reflection, depth + 1), o2))
        if o3 != 0:
            through = Ray(hit.point, ray.direction)
            extra.append((self.pixel_color(through, depth + 1), o3))

        channels = []
        for index, channel in enumerate(lit):
            value = channel * o1
            for color, weight in extra:
                value += tuple(color)[index] * weight
            channels.append(_byte(value))
        return Color(*channels)

    # -- sampling ------------------------------------------------------

    def sample_pixel(self, i: int, j: int, width: int, height: int) -> Color:
        """Average colour of pixel ``(i, j)`` over its corners and centre."""
        world = self.world
        span_x = world.projection_max_x - world.projection_min_x
        span_y = world.projection_max_y - world.projection_min_y
        eye = world.eye
        samples = []
        for du, dv in _SAMPLE_OFFSETS:
            target = Vector(
                (i + du) * span_x / width + world.projection_min_x,
                (j + dv) * span_y / height + world.projection_min_y,
                0.0,
            )
            samples.append(self.pixel_color(Ray(eye, (target - eye).normalized()), 1))
        return Color(*(sum(channel) // 5 for channel in zip(*samples)))

    def render(
        self,
        width: int,
        height: int,
        on_column: Callable[[int, list[Color]], None] | None = None,
    ) -> Image:
        """Render the whole image, column by column, as rows of colours.

        ``on_column`` is called with each column index and its colours, top
        to bottom, as soon as the column is done.
        """
        columns: list[list[Color]] = []
        for i in range(width):
            column = [self.sample_pixel(i, j, width, height) for j in range(height)]
            columns.append(column)
            if on_column is not None:
                on_column(i, column)
        if not columns:
            return [[] for _ in range(height)]
        return [list(row) for row in zip(*columns)]