"""Scene description: shapes, materials, lights and the world holding them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union

from .vectors import Color, Vector


@dataclass(frozen=True, slots=True)
class Plane:
    """The plane ``a*x + b*y + c*z + d = 0`` with a unit normal ``(a, b, c)``."""

    a: float
    b: float
    c: float
    d: float

    @classmethod
    def from_points(cls, p1: Vector, p2: Vector, p3: Vector) -> Plane:
        """Plane through three points, normal along ``(p2 - p1) x (p3 - p1)``."""
        normal = (p2 - p1).cross(p3 - p1).normalized()
        return cls(normal.x, normal.y, normal.z, -normal.dot(p1))

    def normal(self) -> Vector:
        """Unit normal of the plane."""
        return Vector(self.a, self.b, self.c)

    def value(self, point: Vector) -> float:
        """Signed value of the plane equation at ``point``."""
        return self.a * point.x + self.b * point.y + self.c * point.z + self.d


@dataclass(frozen=True, slots=True)
class Material:
    """Lighting coefficients and base colour of a surface.

    ``o1``, ``o2`` and ``o3`` weigh the object's own colour, the reflected
    colour and the colour seen through it.
    """

    kd: float = 0.0
    ks: float = 0.0
    ka: float = 0.0
    kn: int = 0
    o1: float = 1.0
    o2: float = 0.0
    o3: float = 0.0
    color: Color = Color(0, 0, 0)


@dataclass
class Sphere:
    """A sphere, optionally cut by a plane.

    With ``cut_top`` set, the part where the cut plane is negative is
    removed; otherwise the part where it is positive is removed.
    """

    center: Vector
    radius: float
    material: Material = field(default_factory=Material)
    cut_plane: Plane | None = None
    cut_top: bool = False


@dataclass
class Disc:
    """A flat disc through ``center``, ``p1`` and ``p2``."""

    center: Vector
    p1: Vector
    p2: Vector
    radius: float
    material: Material = field(default_factory=Material)
    plane: Plane = field(init=False)

    def __post_init__(self) -> None:
        self.plane = Plane.from_points(self.center, self.p1, self.p2)


@dataclass
class Cylinder:
    """An open cylinder whose axis runs from ``d1`` to ``d2``."""

    d1: Vector
    d2: Vector
    radius: float
    material: Material = field(default_factory=Material)
    _axis: Vector = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._axis = (self.d2 - self.d1).normalized()

    def axis(self) -> Vector:
        """Unit vector from ``d1`` towards ``d2``."""
        return self._axis

    def height(self) -> float:
        """Length of the cylinder along its axis."""
        return (self.d2 - self.d1).dot(self._axis)


@dataclass
class Cone:
    """An open cone along ``d1``–``d2``; ``k2 / k1`` sets its opening."""

    d1: Vector
    d2: Vector
    radius: float
    k1: float
    k2: float
    material: Material = field(default_factory=Material)
    _axis: Vector = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._axis = (self.d2 - self.d1).normalized()

    def axis(self) -> Vector:
        """Unit vector from ``d1`` towards ``d2``."""
        return self._axis

    def height(self) -> float:
        """Length of the cone along its axis."""
        return (self.d2 - self.d1).dot(self._axis)


@dataclass
class Polygon:
    """A flat polygon given by its vertices in order.

    ``texture_path`` is either ``None``, the word ``checkboard`` or the
    path of a PPM texture.
    """

    vertices: tuple[Vector, ...]
    material: Material = field(default_factory=Material)
    texture_path: str | None = None
    texture_scale: float = 0.0
    _plane: Plane = field(init=False, repr=False, compare=False)
    _discard: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.vertices = tuple(self.vertices)
        if len(self.vertices) < 3:
            raise ValueError(f"a polygon needs at least 3 vertices, got {len(self.vertices)}")
        first, second, third = self.vertices[:3]
        self._plane = Plane.from_points(first, second, third)
        nx, ny, nz = (abs(component) for component in self._plane.normal())
        if nx >= ny and nx >= nz:
            self._discard = "x"
        elif ny >= nx and ny >= nz:
            self._discard = "y"
        else:
            self._discard = "z"

    def plane(self) -> Plane:
        """Plane through the first three vertices."""
        return self._plane

    def discard_axis(self) -> str:
        """Axis (``'x'``, ``'y'`` or ``'z'``) with the largest normal component."""
        return self._discard


@dataclass(frozen=True, slots=True)
class LightSource:
    """A point light with power ``lp`` and attenuation ``c1 + c2*d + c3*d*d``."""

    point: Vector
    lp: float
    c1: float
    c2: float
    c3: float
    color: Color = Color(255, 255, 255)


Shape = Union[Sphere, Polygon, Cylinder, Disc, Cone]


@dataclass
class World:
    """Everything needed to render a scene."""

    spheres: list[Sphere] = field(default_factory=list)
    polygons: list[Polygon] = field(default_factory=list)
    cylinders: list[Cylinder] = field(default_factory=list)
    discs: list[Disc] = field(default_factory=list)
    cones: list[Cone] = field(default_factory=list)
    lights: list[LightSource] = field(default_factory=list)
    eye: Vector = Vector(0.0, 0.0, 0.0)
    output_to_screen: bool = False
    projection_min_x: float = 0.0
    projection_min_y: float = 0.0
    projection_max_x: float = 0.0
    projection_max_y: float = 0.0
    ambient: float = 0.0

    def shapes(self) -> Iterator[Shape]:
        """All shapes: spheres, polygons, cylinders, discs, then cones."""
        yield from self.spheres
        yield from self.polygons
        yield from self.cylinders
        yield from self.discs
        yield from self.cones