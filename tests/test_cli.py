from pathlib import Path

import pytest

from raytrace.cli import main, write_ppm
from raytrace.vectors import Color


def _read_ppm(path: Path):
    text = path.read_text(encoding="ascii")
    lines = text.split("\n")
    assert lines[0] == "P3"
    width, height = (int(v) for v in lines[1].split())
    assert lines[2] == "255"
    rows = []
    for line in lines[3 : 3 + height]:
        values = [int(v) for v in line.split()]
        rows.append([Color(*values[k : k + 3]) for k in range(0, len(values), 3)])
    return width, height, rows


EMPTY_SCENE = """# nothing but the background
O
0
E
0,0,-10
W
-1,-1,1,1
A
0.5
"""

SPHERE_SCENE = """O
0
E
0,0,-10
W
-1,-1,1,1
A
0.5
S
0,0,10
3,0.5,1,0,1,1,0,0
200,0,0
"""


def test_write_ppm_exact_text(tmp_path):
    target = tmp_path / "out.ppm"
    write_ppm(target, [[Color(1, 2, 3), Color(4, 5, 6)]])
    assert target.read_text(encoding="ascii") == "P3\n2 1\n255\n1 2 3 4 5 6 \n"


def test_write_ppm_round_trip(tmp_path):
    image = [
        [Color(0, 0, 0), Color(255, 255, 255), Color(10, 20, 30)],
        [Color(7, 8, 9), Color(100, 0, 50), Color(1, 1, 1)],
    ]
    target = tmp_path / "img.ppm"
    write_ppm(target, image)
    width, height, rows = _read_ppm(target)
    assert (width, height) == (3, 2)
    assert rows == image


def test_write_ppm_empty_image(tmp_path):
    target = tmp_path / "empty.ppm"
    write_ppm(target, [])
    assert target.read_text(encoding="ascii") == "P3\n0 0\n255\n"


def test_main_empty_scene_renders_background(tmp_path, capsys):
    world = tmp_path / "world.txt"
    world.write_text(EMPTY_SCENE, encoding="utf-8")
    output = tmp_path / "scene.ppm"
    status = main([str(world), "-o", str(output), "--width", "4", "--height", "3"])
    assert status == 0
    width, height, rows = _read_ppm(output)
    assert (width, height) == (4, 3)
    assert all(pixel == Color(192, 192, 192) for row in rows for pixel in row)
    out = capsys.readouterr().out
    assert "Spheres count: 0" in out
    assert f"Image saved to {output}" in out


def test_main_sphere_scene(tmp_path, capsys):
    world = tmp_path / "world.txt"
    world.write_text(SPHERE_SCENE, encoding="utf-8")
    output = tmp_path / "scene.ppm"
    status = main([str(world), "-o", str(output), "--width", "3", "--height", "3"])
    assert status == 0
    _, _, rows = _read_ppm(output)
    pixels = [pixel for row in rows for pixel in row]
    assert len(set(pixels)) == 1
    pixel = pixels[0]
    assert pixel.g == 0 and pixel.b == 0
    assert 0 < pixel.r <= 200
    out = capsys.readouterr().out
    assert "Spheres count: 1" in out
    assert "Lights count: 0" in out
    assert "Eye: (0.000000, 0.000000, -10.000000)" in out


def test_main_missing_world_file(tmp_path, capsys):
    status = main([str(tmp_path / "absent.txt"), "-o", str(tmp_path / "x.ppm")])
    assert status == 1
    assert "Failed to open file" in capsys.readouterr().err
    assert not (tmp_path / "x.ppm").exists()


def test_main_missing_texture(tmp_path, capsys):
    scene = (
        "O\n0\nE\n0,0,-10\nW\n-1,-1,1,1\nA\n0.5\n"
        "P\n-1,-1,5 1,-1,5 1,1,5 -1,1,5\n"
        "T\n"
        f"{tmp_path / 'nope.ppm'}\n"
        "0.5,1,0,1,1,0,0\n"
        "10,20,30\n"
    )
    world = tmp_path / "world.txt"
    world.write_text(scene, encoding="utf-8")
    output = tmp_path / "scene.ppm"
    status = main([str(world), "-o", str(output), "--width", "2", "--height", "2"])
    assert status == 1
    assert not output.exists()


@pytest.mark.parametrize("bad", ["0", "-3", "abc"])
def test_main_rejects_bad_size(tmp_path, bad):
    with pytest.raises(SystemExit) as info:
        main([str(tmp_path / "world.txt"), "--width", bad])
    assert info.value.code == 2