import pytest

from raytrace.render import BACKGROUND, Renderer, load_textures
from raytrace.scene import (
    Cone,
    Cylinder,
    Disc,
    LightSource,
    Material,
    Polygon,
    Sphere,
    World,
)
from raytrace.texture import Texture
from raytrace.vectors import Color, Ray, Vector

DOWN = Ray(Vector(0.0, 0.0, 5.0), Vector(0.0, 0.0, -1.0))
BASE = Color(100, 50, 20)


def ambient_material(**changes):
    values = dict(kd=0.0, ka=1.0, ks=0.0, kn=1, o1=1.0, o2=0.0, o3=0.0, color=BASE)
    values.update(changes)
    return Material(**values)


def square(material=None, **kwargs):
    return Polygon(
        vertices=(
            Vector(-1, -1, 0),
            Vector(1, -1, 0),
            Vector(1, 1, 0),
            Vector(-1, 1, 0),
        ),
        material=material or ambient_material(),
        **kwargs,
    )


def world_with(*, ambient=1.0, lights=(), **shapes):
    world = World(ambient=ambient, lights=list(lights), eye=Vector(0.0, 0.0, 5.0))
    for name, items in shapes.items():
        setattr(world, name, list(items))
    return world


def test_empty_world_shows_background():
    renderer = Renderer(World())
    assert renderer.pixel_color(DOWN) == Color(192, 192, 192)


@pytest.mark.parametrize(
    "shapes",
    [
        {"spheres": [Sphere(Vector(0, 0, 0), 1.0, ambient_material())]},
        {"discs": [Disc(Vector(0, 0, 0), Vector(1, 0, 0), Vector(0, 1, 0), 2.0, ambient_material())]},
        {"cylinders": [Cylinder(Vector(-2, 0, 0), Vector(2, 0, 0), 1.0, ambient_material())]},
        {"cones": [Cone(Vector(-2, 0, 0), Vector(2, 0, 0), 1.0, 1.0, 0.0, ambient_material())]},
        {"polygons": [square()]},
    ],
)
def test_full_ambient_gives_material_color(shapes):
    renderer = Renderer(world_with(**shapes), textures={})
    assert renderer.pixel_color(DOWN) == BASE


def test_lower_ambient_darkens():
    bright = Renderer(world_with(spheres=[Sphere(Vector(0, 0, 0), 1.0, ambient_material())]))
    dim = Renderer(
        world_with(ambient=0.3, spheres=[Sphere(Vector(0, 0, 0), 1.0, ambient_material())])
    )
    for low, high in zip(dim.pixel_color(DOWN), bright.pixel_color(DOWN)):
        assert low < high


def test_full_specular_highlight_is_white():
    material = ambient_material(ka=0.0, ks=1.0)
    light = LightSource(point=Vector(0, 0, 5), lp=1.0, c1=1.0, c2=0.0, c3=0.0)
    renderer = Renderer(
        world_with(ambient=0.0, lights=[light], spheres=[Sphere(Vector(0, 0, 0), 1.0, material)])
    )
    assert renderer.pixel_color(DOWN) == Color(255, 255, 255)


def test_unblocked_light_brightens():
    material = ambient_material(kd=1.0, ka=0.2)
    light = LightSource(point=Vector(0, 0, 5), lp=0.5, c1=1.0, c2=0.0, c3=0.0)
    sphere = Sphere(Vector(0, 0, 0), 1.0, material)
    dark = Renderer(world_with(spheres=[sphere])).pixel_color(DOWN)
    lit = Renderer(world_with(spheres=[sphere], lights=[light])).pixel_color(DOWN)
    assert all(a > b for a, b in zip(lit, dark))


def test_blocked_light_casts_shadow():
    material = ambient_material(kd=1.0, ka=0.2)
    floor = Sphere(Vector(0, 0, 0), 1.0, material)
    light = LightSource(point=Vector(0, 0, 20), lp=1.0, c1=1.0, c2=0.0, c3=0.0)
    blocker = Sphere(Vector(0, 0, 10), 1.0, material)
    ray = Ray(Vector(0.0, 3.0, 1.0), Vector(0.0, -1.0, 0.0).normalized())
    unlit_world = world_with(ambient=0.2, spheres=[floor, blocker])
    shadowed_world = world_with(ambient=0.2, spheres=[floor, blocker], lights=[light])
    unlit = Renderer(unlit_world).pixel_color(Ray(Vector(0, 0, 5), Vector(0, 0, -1)))
    shadowed = Renderer(shadowed_world).pixel_color(Ray(Vector(0, 0, 5), Vector(0, 0, -1)))
    assert shadowed == unlit
    assert ray.direction.length() == pytest.approx(1.0)


def test_transparent_sphere_shows_background():
    material = ambient_material(ka=0.0, o1=0.0, o3=1.0)
    renderer = Renderer(world_with(spheres=[Sphere(Vector(0, 0, 0), 1.0, material)]))
    assert renderer.pixel_color(DOWN) == BACKGROUND


def test_mirror_facing_empty_space_shows_background():
    material = ambient_material(ka=0.0, o1=0.0, o2=1.0)
    renderer = Renderer(world_with(spheres=[Sphere(Vector(0, 0, 0), 1.0, material)]))
    assert renderer.pixel_color(DOWN) == BACKGROUND


def test_depth_limit_stops_recursion():
    material = ambient_material(ka=0.0, o1=0.0, o3=1.0)
    renderer = Renderer(
        world_with(spheres=[Sphere(Vector(0, 0, 0), 1.0, material)]), max_depth=1
    )
    assert renderer.pixel_color(DOWN) == Color(0, 0, 0)


def test_cache_returns_first_result():
    sphere = Sphere(Vector(0, 0, 0), 1.0, ambient_material())
    renderer = Renderer(world_with(spheres=[sphere]))
    first = renderer.pixel_color(DOWN)
    renderer.world.spheres.clear()
    assert renderer.pixel_color(DOWN) == first
    renderer.cache.clear()
    assert renderer.pixel_color(DOWN) == BACKGROUND


def test_surface_color_without_texture():
    renderer = Renderer(World(), textures={})
    assert renderer.surface_color(square(), Vector(0.2, 0.3, 0.0)) == BASE


def test_checkboard_alternates():
    polygon = square(texture_path="checkboard", texture_scale=1.0)
    renderer = Renderer(World(), textures={})
    assert renderer.surface_color(polygon, Vector(0.5, 0.5, 0.0)) == Color(255, 255, 255)
    assert renderer.surface_color(polygon, Vector(0.0, 1.5, 0.0)) == BASE


def test_texture_lookup_uses_texel():
    texels = [[Color(1, 2, 3), Color(4, 5, 6)], [Color(7, 8, 9), Color(10, 11, 12)]]
    texture = Texture(path="tex.ppm", width=2, height=2, texels=texels)
    polygon = square(texture_path="tex.ppm")
    renderer = Renderer(World(), textures={"tex.ppm": texture})
    assert renderer.surface_color(polygon, Vector(1.0, 0.0, 0.0)) == texture.texel(1, 0)
    assert renderer.surface_color(polygon, Vector(0.0, 1.0, 0.0)) == texture.texel(0, 1)


def test_missing_texture_falls_back_to_material():
    renderer = Renderer(World(), textures={})
    assert renderer.surface_color(square(texture_path="absent.ppm"), Vector(0, 0, 0)) == BASE


def test_load_textures_reads_each_file_once(tmp_path):
    path = tmp_path / "tex.ppm"
    path.write_text("P3\n# made by hand\n2 1\n255\n10\n20\n30\n40\n50\n60\n")
    world = World(
        polygons=[
            square(texture_path=str(path)),
            square(texture_path=str(path)),
            square(texture_path="checkboard", texture_scale=2.0),
            square(),
        ]
    )
    textures = load_textures(world)
    assert list(textures) == [str(path)]
    texture = textures[str(path)]
    assert texture.texel(0, 0) == Color(10, 20, 30)
    assert texture.texel(1, 0) == Color(40, 50, 60)


def _window_world(**shapes):
    world = world_with(**shapes)
    world.projection_min_x = -1.0
    world.projection_min_y = -1.0
    world.projection_max_x = 1.0
    world.projection_max_y = 1.0
    return world


def test_sample_pixel_of_empty_world_is_background():
    renderer = Renderer(_window_world())
    assert renderer.sample_pixel(0, 0, 4, 4) == BACKGROUND


def test_render_shape_and_column_callbacks():
    renderer = Renderer(_window_world())
    seen = []
    image = renderer.render(3, 2, lambda i, column: seen.append((i, column)))
    assert len(image) == 2
    assert all(len(row) == 3 for row in image)
    assert [i for i, _ in seen] == [0, 1, 2]
    assert all(color == BACKGROUND for row in image for color in row)


def test_render_matches_sample_pixel():
    world = _window_world(spheres=[Sphere(Vector(0, 0, 0), 0.6, ambient_material())])
    image = Renderer(world).render(4, 3)
    reference = Renderer(world)
    for j, row in enumerate(image):
        assert row == [reference.sample_pixel(i, j, 4, 3) for i in range(4)]
    assert any(color != BACKGROUND for row in image for color in row)