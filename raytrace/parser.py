"""Reading of scene description files into a :class:`World`.

A scene file is line based. A line whose first character is one of the
keywords below announces what the following data lines hold; lines that
start with ``#`` are comments.

* ``O`` – output: ``1`` renders to the screen, anything else to a file
* ``E`` – eye position ``x,y,z``
* ``W`` – projection window ``min_x,min_y,max_x,max_y``
* ``A`` – ambient light intensity
* ``S`` – sphere: centre, factors, colour (an ``X`` block may follow the centre)
* ``X`` – cut plane of the last sphere: three points and a ``1``/``0`` flag
* ``D`` – disc: centre and two points of its plane, factors, colour
* ``C`` – cylinder: both axis end points, factors, colour
* ``K`` – cone: both axis end points, factors with ``k1,k2``, colour
* ``P`` – polygon: space separated ``x,y,z`` vertices, factors, colour
* ``T`` – texture of the last polygon: a path or ``checkboard`` and its scale
* ``L`` – light: position, ``lp,c1,c2,c3``, colour
"""

from __future__ import annotations

import enum
import re
from dataclasses import replace
from functools import lru_cache
from pathlib import Path
from typing import Callable, Iterable

from .scene import (
    Cone,
    Cylinder,
    Disc,
    LightSource,
    Polygon,
    Sphere,
    World,
)
from .vectors import Color, Vector

_FLOAT = r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)"
_INT = r"[+-]?\d+"
_CHECKBOARD = "checkboard"


class WorldFormatError(ValueError):
    """Raised when a scene file cannot be understood."""


class _Flag(enum.Enum):
    OUTPUT = enum.auto()
    EYE = enum.auto()
    WINDOW = enum.auto()
    AMBIENT = enum.auto()
    SPHERE = enum.auto()
    DISC = enum.auto()
    CYLINDER = enum.auto()
    CONE = enum.auto()
    POLYGON = enum.auto()
    CUT = enum.auto()
    TEXTURE = enum.auto()
    FACTORS = enum.auto()
    COLOR = enum.auto()
    LIGHT = enum.auto()
    LIGHT_FACTORS = enum.auto()
    LIGHT_COLOR = enum.auto()


# keyword character -> (flag it raises, shape kind it selects)
_KEYWORDS: dict[str, tuple[_Flag, str | None]] = {
    "O": (_Flag.OUTPUT, None),
    "W": (_Flag.WINDOW, None),
    "E": (_Flag.EYE, None),
    "S": (_Flag.SPHERE, "S"),
    "P": (_Flag.POLYGON, "P"),
    "C": (_Flag.CYLINDER, "C"),
    "K": (_Flag.CONE, "K"),
    "D": (_Flag.DISC, "D"),
    "L": (_Flag.LIGHT, None),
    "A": (_Flag.AMBIENT, None),
    "X": (_Flag.CUT, None),
    "T": (_Flag.TEXTURE, None),
}


@lru_cache(maxsize=None)
def _pattern(kinds: str) -> re.Pattern[str]:
    groups = (r"\s*(" + (_INT if kind == "d" else _FLOAT) + ")" for kind in kinds)
    return re.compile(",".join(groups), re.IGNORECASE)


class _Parser:
    """Line-by-line state machine that fills a world."""

    def __init__(self) -> None:
        self.world = World()
        self.kind = "S"
        self.pending: set[_Flag] = set()
        self.lineno = 0
        self._light_point: Vector | None = None
        # Checked in this order; a handler returning False lets the line go on.
        self._steps: list[tuple[_Flag, str | None, Callable[[str], bool]]] = [
            (_Flag.OUTPUT, None, self._output),
            (_Flag.EYE, None, self._eye),
            (_Flag.WINDOW, None, self._window),
            (_Flag.AMBIENT, None, self._ambient),
            (_Flag.SPHERE, None, self._sphere),
            (_Flag.CUT, "S", self._cut),
            (_Flag.FACTORS, "S", self._shape_factors),
            (_Flag.COLOR, "S", self._color),
            (_Flag.DISC, None, self._disc),
            (_Flag.FACTORS, "D", self._shape_factors),
            (_Flag.COLOR, "D", self._color),
            (_Flag.CYLINDER, None, self._cylinder),
            (_Flag.FACTORS, "C", self._shape_factors),
            (_Flag.COLOR, "C", self._color),
            (_Flag.CONE, None, self._cone),
            (_Flag.FACTORS, "K", self._cone_factors),
            (_Flag.COLOR, "K", self._color),
            (_Flag.POLYGON, None, self._polygon),
            (_Flag.TEXTURE, "P", self._texture),
            (_Flag.FACTORS, "P", self._polygon_factors),
            (_Flag.COLOR, "P", self._color),
            (_Flag.LIGHT, None, self._light),
            (_Flag.LIGHT_FACTORS, None, self._light_factors),
            (_Flag.LIGHT_COLOR, None, self._light_color),
        ]

    # -- driving -------------------------------------------------------

    def feed(self, lineno: int, line: str) -> None:
        self.lineno = lineno
        first = line[:1]
        if first == "#":
            return
        keyword = _KEYWORDS.get(first)
        if keyword is not None:
            flag, kind = keyword
            self.pending.add(flag)
            if kind is not None:
                self.kind = kind
            return
        for flag, kind, handler in self._steps:
            if flag not in self.pending or (kind is not None and kind != self.kind):
                continue
            try:
                consumed = handler(line)
            except WorldFormatError:
                raise
            except (ValueError, ZeroDivisionError) as exc:
                raise self._error(str(exc)) from exc
            if consumed:
                return

    # -- helpers -------------------------------------------------------

    def _error(self, message: str) -> WorldFormatError:
        return WorldFormatError(f"line {self.lineno}: {message}")

    def _scan(self, line: str, kinds: str) -> list[float]:
        match = _pattern(kinds).match(line)
        if match is None:
            raise self._error(f"expected {len(kinds)} comma separated values, got {line.strip()!r}")
        return [
            int(text) if kind == "d" else float(text)
            for kind, text in zip(kinds, match.groups())
        ]

    def _vector(self, line: str) -> Vector:
        return Vector(*self._scan(line, "fff"))

    def _shapes_of_kind(self) -> list:
        world = self.world
        return {
            "S": world.spheres,
            "D": world.discs,
            "C": world.cylinders,
            "K": world.cones,
            "P": world.polygons,
        }[self.kind]

    def _current(self):
        shapes = self._shapes_of_kind()
        if not shapes:
            raise self._error("data for a shape that has not been declared")
        return shapes[-1]

    def _start_shape(self, flag: _Flag, shape, target: list) -> bool:
        target.append(shape)
        self.pending.discard(flag)
        self.pending.add(_Flag.FACTORS)
        return True

    def _finish_factors(self) -> bool:
        self.pending.discard(_Flag.FACTORS)
        self.pending.add(_Flag.COLOR)
        return True

    # -- world settings ------------------------------------------------

    def _output(self, line: str) -> bool:
        self.world.output_to_screen = line.startswith("1")
        self.pending.discard(_Flag.OUTPUT)
        return True

    def _eye(self, line: str) -> bool:
        self.world.eye = self._vector(line)
        self.pending.discard(_Flag.EYE)
        return True

    def _window(self, line: str) -> bool:
        min_x, min_y, max_x, max_y = self._scan(line, "ffff")
        world = self.world
        world.projection_min_x = min_x
        world.projection_min_y = min_y
        world.projection_max_x = max_x
        world.projection_max_y = max_y
        self.pending.discard(_Flag.WINDOW)
        return True

    def _ambient(self, line: str) -> bool:
        (self.world.ambient,) = self._scan(line, "f")
        self.pending.discard(_Flag.AMBIENT)
        return True

    # -- shapes --------------------------------------------------------

    def _sphere(self, line: str) -> bool:
        sphere = Sphere(center=self._vector(line), radius=0.0)
        return self._start_shape(_Flag.SPHERE, sphere, self.world.spheres)

    def _disc(self, line: str) -> bool:
        values = self._scan(line, "fffffffff")
        disc = Disc(
            center=Vector(*values[0:3]),
            p1=Vector(*values[3:6]),
            p2=Vector(*values[6:9]),
            radius=0.0,
        )
        return self._start_shape(_Flag.DISC, disc, self.world.discs)

    def _cylinder(self, line: str) -> bool:
        values = self._scan(line, "ffffff")
        cylinder = Cylinder(d1=Vector(*values[0:3]), d2=Vector(*values[3:6]), radius=0.0)
        return self._start_shape(_Flag.CYLINDER, cylinder, self.world.cylinders)

    def _cone(self, line: str) -> bool:
        values = self._scan(line, "ffffff")
        cone = Cone(d1=Vector(*values[0:3]), d2=Vector(*values[3:6]), radius=0.0, k1=0.0, k2=0.0)
        return self._start_shape(_Flag.CONE, cone, self.world.cones)

    def _polygon(self, line: str) -> bool:
        vertices = tuple(self._vector(token) for token in line.split())
        polygon = Polygon(vertices=vertices)
        return self._start_shape(_Flag.POLYGON, polygon, self.world.polygons)

    def _cut(self, line: str) -> bool:
        from .scene import Plane

        sphere = self._current()
        values = self._scan(line, "fffffffffd")
        sphere.cut_plane = Plane.from_points(
            Vector(*values[0:3]), Vector(*values[3:6]), Vector(*values[6:9])
        )
        sphere.cut_top = values[9] == 1
        self.pending.discard(_Flag.CUT)
        return True

    def _shape_factors(self, line: str) -> bool:
        shape = self._current()
        radius, kd, ka, ks, kn, o1, o2, o3 = self._scan(line, "ffffdfff")
        shape.radius = radius
        shape.material = replace(shape.material, kd=kd, ka=ka, ks=ks, kn=kn, o1=o1, o2=o2, o3=o3)
        return self._finish_factors()

    def _cone_factors(self, line: str) -> bool:
        cone = self._current()
        radius, kd, ka, ks, kn, k1, k2, o1, o2, o3 = self._scan(line, "ffffdfffff")
        cone.radius = radius
        cone.k1 = k1
        cone.k2 = k2
        cone.material = replace(cone.material, kd=kd, ka=ka, ks=ks, kn=kn, o1=o1, o2=o2, o3=o3)
        return self._finish_factors()

    def _polygon_factors(self, line: str) -> bool:
        polygon = self._current()
        kd, ka, ks, kn, o1, o2, o3 = self._scan(line, "fffdfff")
        polygon.material = replace(
            polygon.material, kd=kd, ka=ka, ks=ks, kn=kn, o1=o1, o2=o2, o3=o3
        )
        return self._finish_factors()

    def _texture(self, line: str) -> bool:
        polygon = self._current()
        if polygon.texture_path is None:
            tokens = line.split()
            if not tokens:
                raise self._error("missing texture path")
            polygon.texture_path = tokens[0]
            return True
        self.pending.discard(_Flag.TEXTURE)
        if polygon.texture_path == _CHECKBOARD:
            (polygon.texture_scale,) = self._scan(line, "f")
            return True
        return False

    def _color(self, line: str) -> bool:
        shape = self._current()
        shape.material = replace(shape.material, color=self._rgb(line))
        self.pending.discard(_Flag.COLOR)
        return True

    def _rgb(self, line: str) -> Color:
        return Color(*(int(value) % 256 for value in self._scan(line, "ddd")))

    # -- lights --------------------------------------------------------

    def _light(self, line: str) -> bool:
        point = self._vector(line)
        self.world.lights.append(LightSource(point=point, lp=0.0, c1=0.0, c2=0.0, c3=0.0))
        self.pending.discard(_Flag.LIGHT)
        self.pending.add(_Flag.LIGHT_FACTORS)
        return True

    def _last_light(self) -> LightSource:
        if not self.world.lights:
            raise self._error("light data without a light")
        return self.world.lights[-1]

    def _light_factors(self, line: str) -> bool:
        light = self._last_light()
        lp, c1, c2, c3 = self._scan(line, "ffff")
        self.world.lights[-1] = replace(light, lp=lp, c1=c1, c2=c2, c3=c3)
        self.pending.discard(_Flag.LIGHT_FACTORS)
        self.pending.add(_Flag.LIGHT_COLOR)
        return True

    def _light_color(self, line: str) -> bool:
        light = self._last_light()
        self.world.lights[-1] = replace(light, color=self._rgb(line))
        self.pending.discard(_Flag.LIGHT_COLOR)
        return True


def parse_world(lines: Iterable[str]) -> World:
    """Build a world from the lines of a scene description."""
    parser = _Parser()
    for lineno, line in enumerate(lines, 1):
        parser.feed(lineno, line)
    return parser.world


def load_world(path: str | Path) -> World:
    """Read the scene description stored at ``path``."""
    with open(path, encoding="utf-8") as handle:
        return parse_world(handle)