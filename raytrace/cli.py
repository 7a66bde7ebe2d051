"""Command line entry point: render a scene file to a window or a PPM image."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from .parser import WorldFormatError, load_world
from .render import Image, Renderer, load_textures
from .scene import World
from .texture import TextureFormatError
from .vectors import Color

DEFAULT_WORLD = "world.txt"
DEFAULT_OUTPUT = "scene.ppm"
DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 1080
_RULE = "---------------------------------------------------"
_FRAME_DELAY_MS = 16


def write_ppm(path: str | Path, image: Image) -> None:
    """Write ``image`` (rows of colours, top to bottom) as a plain P3 PPM file."""
    height = len(image)
    width = len(image[0]) if image else 0
    with open(path, "w", encoding="ascii") as handle:
        handle.write(f"P3\n{width} {height}\n255\n")
        for row in image:
            handle.write("".join(f"{c.r} {c.g} {c.b} " for c in row))
            handle.write("\n")


def show_on_screen(renderer: Renderer, width: int, height: int) -> None:
    """Open a window and render into it whenever it is exposed, until closed."""
    import pygame

    pygame.init()
    try:
        surface = pygame.display.set_mode((width, height))
        pygame.display.set_caption("raytrace - Rendering in progress")
        surface.fill((255, 255, 255))
        pygame.display.flip()

        exposed = {pygame.VIDEOEXPOSE, getattr(pygame, "WINDOWEXPOSED", pygame.VIDEOEXPOSE)}

        def draw_column(i: int, column: list[Color]) -> None:
            for j, color in enumerate(column):
                surface.set_at((i, j), tuple(color))
            pygame.display.flip()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                    break
                if event.type in exposed:
                    image = renderer.render(width, height, draw_column)
                    for j, row in enumerate(image):
                        for i, color in enumerate(row):
                            surface.set_at((i, j), tuple(color))
                    pygame.display.flip()
                    pygame.time.wait(_FRAME_DELAY_MS)
                    pygame.display.set_caption("raytrace - Rendering complete")
            else:
                pygame.time.wait(_FRAME_DELAY_MS)
    finally:
        pygame.quit()


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="raytrace", description="Ray trace a scene file.")
    parser.add_argument("world", nargs="?", default=DEFAULT_WORLD, help="scene description file")
    parser.add_argument("-o", "--output", default=DEFAULT_OUTPUT, help="PPM image to write")
    parser.add_argument("--width", type=_positive_int, default=DEFAULT_WIDTH)
    parser.add_argument("--height", type=_positive_int, default=DEFAULT_HEIGHT)
    return parser


def _describe(world: World) -> None:
    print("Universal world created")
    print(f"Spheres count: {len(world.spheres)}")
    print(f"Polygons count: {len(world.polygons)}")
    print(f"Cylinders count: {len(world.cylinders)}")
    print(f"Discs count: {len(world.discs)}")
    print(f"Cones count: {len(world.cones)}")
    print(f"Lights count: {len(world.lights)}")
    eye = world.eye
    print(f"Eye: ({eye.x:f}, {eye.y:f}, {eye.z:f})")
    print(
        "Projection window: "
        f"({world.projection_min_x:f}, {world.projection_min_y:f}, "
        f"{world.projection_max_x:f}, {world.projection_max_y:f})"
    )
    print(f"{_RULE}\n")


def main(argv: Sequence[str] | None = None) -> int:
    """Render the scene named on the command line; return the exit status."""
    args = _build_parser().parse_args(argv)

    print("Generating scene please wait... \n")
    print(f"{_RULE}\n")

    try:
        world = load_world(args.world)
    except OSError as exc:
        print(f"Failed to open file: {exc}", file=sys.stderr)
        return 1
    except WorldFormatError as exc:
        print(f"Error: {args.world}: {exc}", file=sys.stderr)
        return 1

    try:
        textures = load_textures(world)
    except OSError as exc:
        print(f"Error: Unable to open texture: {exc}", file=sys.stderr)
        return 1
    except TextureFormatError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    _describe(world)
    sys.stdout.flush()

    renderer = Renderer(world, textures)
    if world.output_to_screen:
        show_on_screen(renderer, args.width, args.height)
        return 0

    image = renderer.render(args.width, args.height)
    print(f"Saving image to {args.output}...")
    try:
        write_ppm(args.output, image)
    except OSError as exc:
        print(f"Error: Cannot open file for writing: {exc}", file=sys.stderr)
        return 1
    print(f"Image saved to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())