# raytrace

A small recursive ray tracer. It reads a scene from a plain-text file, traces
rays from an eye point through a projection window in the plane `z = 0`, and
either shows the picture in a window as it is drawn or writes it to a plain
(P3) PPM image.

Supported objects:

- spheres, optionally cut by a plane
- flat polygons, optionally with a checkerboard or a PPM texture
- discs
- cylinders and cones (the curved surface only, between two end points)
- point lights with distance attenuation

Shading is Phong-style (ambient, diffuse and specular terms) with shadows.
Objects can reflect and be transparent; secondary rays are followed up to a
depth of 6. Every pixel is the average of five samples: its four corners and
its centre. Rays that hit nothing give a light grey background
(`192, 192, 192`).

## Installing

```
pip install .
```

The window display uses `pygame`, which is installed as a dependency.

## Running

```
raytrace [world] [-o OUTPUT] [--width WIDTH] [--height HEIGHT]
```

- `world` — the scene file, `world.txt` by default
- `-o`, `--output` — the PPM image to write, `scene.ppm` by default
- `--width`, `--height` — image size in pixels, 1920×1080 by default

The command prints a summary of the scene (object counts, eye and projection
window). If the scene asks for screen output, a window opens and the image is
drawn column by column each time the window is exposed, until the window is
closed. Otherwise the image is rendered and saved to the output file.

The exit status is 1 when the scene file or a texture cannot be opened or
understood, or the image cannot be written, and 0 otherwise.

## Scene file format

A scene is a sequence of sections. Each section starts with a line whose first
character names it, followed by data lines of comma-separated numbers. Lines
starting with `#` are comments.

| Header | Data lines |
|--------|------------|
| `O` | a line starting with `1` shows the image on screen; anything else writes the image file |
| `W` | `minX,minY,maxX,maxY` of the projection window |
| `E` | `x,y,z` of the eye |
| `A` | ambient light intensity |
| `L` | `x,y,z` position · `power,c1,c2,c3` attenuation · `r,g,b` |
| `S` | `x,y,z` centre · `radius,kd,ka,ks,kn,o1,o2,o3` · `r,g,b` |
| `X` | (after a sphere's centre) `x1,y1,z1,x2,y2,z2,x3,y3,z3,top` — a cut plane through three points. With `top` equal to `1` the part on the negative side of the plane is removed; otherwise the part on the positive side is removed. The normal is `(p2 - p1) × (p3 - p1)` |
| `D` | centre and two more points on the disc's plane (9 numbers) · `radius,kd,ka,ks,kn,o1,o2,o3` · `r,g,b` |
| `C` | `x1,y1,z1,x2,y2,z2` axis end points · `radius,kd,ka,ks,kn,o1,o2,o3` · `r,g,b` |
| `K` | `x1,y1,z1,x2,y2,z2` axis end points · `radius,kd,ka,ks,kn,k1,k2,o1,o2,o3` · `r,g,b` |
| `P` | at least three vertices as `x,y,z` triples separated by whitespace · `kd,ka,ks,kn,o1,o2,o3` · `r,g,b` |
| `T` | (after a polygon's vertices) a texture: either `checkboard` followed by a line with its scale, or the path of a P3 PPM file |

The coefficients are: `kd` diffuse, `ka` ambient, `ks` specular, `kn` shininess
(an integer), `o1` the object's own colour weight, `o2` the reflection weight
and `o3` the transparency weight. For cones, `k2/k1` sets how steeply the
surface widens along the axis. Colour values are taken modulo 256.

PPM textures are read in the layout GIMP writes: the `P3` line, one comment
line, the size line, the maximum value, then one channel value per line. They
are looked up by their path relative to the current directory and tiled over
the polygon in world units.

A malformed data line raises `WorldFormatError` with its line number.

An example with one light and one sphere:

```
# output to file
O
0
W
0,0,1920,1080
E
960,540,-1500
A
0.2
L
200,1000,-1000
1,1,0,0
255,255,255
S
960,540,600
300,0.8,0.5,0.6,20,1,0,0
200,40,40
```

## Using it as a library

The pieces can be used on their own:

- `raytrace.vectors` — `Vector`, `Ray` and `Color`
- `raytrace.texture` — `load_ppm_texture` and `parse_ppm_texture` read P3 textures into a `Texture`; bad files raise `TextureFormatError`
- `raytrace.scene` — the scene objects (`Sphere`, `Polygon`, `Disc`, `Cylinder`, `Cone`, `LightSource`, `Plane`, `Material`) and `World`
- `raytrace.parser` — `load_world` and `parse_world` read the scene format above
- `raytrace.raycache` — `RayCache`, the per-ray colour cache used while rendering
- `raytrace.intersect` — `first_intersection` and the per-shape `intersect_*` functions
- `raytrace.render` — `Renderer`, which turns rays into colours and renders whole images, and `load_textures`
- `raytrace.cli` — `write_ppm`, `show_on_screen` and the `main` entry point

```python
from raytrace.parser import load_world
from raytrace.render import Renderer
from raytrace.cli import write_ppm

world = load_world("world.txt")
print(sum(1 for _ in world.shapes()), "objects")

image = Renderer(world).render(320, 180)
write_ppm("small.ppm", image)
```

`Renderer.render` returns the image as rows of `Color`, top to bottom, and
takes an optional callback that is called with each finished column.

## What it does not do

- Cylinders and cones have no end caps; close them with discs if needed.
- Transparency does not bend rays: the ray continues in the same direction.
- Light colours are read but not used; lights are white.
- Only plain-text P3 PPM is read and written.

## Running the tests

```
pip install .[test]
pytest
```