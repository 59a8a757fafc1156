"""Tests for the command line entry point and built-in scenes."""

import pytest
import logging
import math

from PIL import Image

from lumenray.camera import Camera
from lumenray.shapes import Group, Sphere, Cube, Cylinder
from lumenray.patterns import StripePattern
from lumenray.world import World
from lumenray.scenes import SCENES, hexagon
from lumenray.cli import build_parser, main
from lumenray.logging_config import setup_logging


SMALL_SCENE = """
camera:
  width: 6
  height: 4
  fov_degrees: 90
  from: [0, 0, -5]
  to: [0, 0, 0]
objects:
  - type: sphere
lights:
  - position: [-10, 10, -10]
"""


class TestBuiltinScenes:
    """Test the built-in demo scenes."""

    @pytest.mark.parametrize("name", sorted(SCENES))
    def test_builds(self, name):
        world, camera = SCENES[name](8, 6)
        assert isinstance(world, World)
        assert isinstance(camera, Camera)
        assert (camera.hsize, camera.vsize) == (8, 6)
        assert len(world.objects) > 0
        assert len(world.lights) > 0

    @pytest.mark.parametrize("name", sorted(SCENES))
    def test_renders(self, name):
        world, camera = SCENES[name](4, 3)
        canvas = camera.render(world, max_depth=2)
        assert canvas.pixels.shape == (3, 4, 3)

    def test_room_is_built_from_cubes(self):
        world, camera = SCENES['room'](8, 8)
        assert all(isinstance(s, Cube) for s in world.objects)
        assert any(isinstance(s.material.pattern, StripePattern) for s in world.objects)
        assert any(s.material.reflective == 1.0 for s in world.objects)
        assert camera.field_of_view == pytest.approx(math.pi / 3)

    def test_hexagon(self):
        hex_ = hexagon()
        assert isinstance(hex_, Group)
        assert len(hex_) == 6
        for side in hex_.children:
            assert isinstance(side, Group)
            kinds = {type(c) for c in side.children}
            assert kinds == {Sphere, Cylinder}


class TestParser:
    """Test command line parsing."""

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.scene == 'balls'
        assert args.scene_file is None
        assert args.width is None
        assert args.output == 'output/render.png'
        assert args.log_level == 'INFO'

    def test_unknown_scene(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(['--scene', 'teapot'])


class TestMain:
    """Test the main entry point."""

    def test_render_builtin_ppm(self, tmp_path):
        out = tmp_path / "default.ppm"
        code = main(['--scene', 'default', '--width', '5', '--height', '4', '--output', str(out)])
        assert code == 0
        lines = out.read_text().splitlines()
        assert lines[:3] == ["P3", "5 4", "255"]

    def test_render_scene_file_png(self, tmp_path):
        scene = tmp_path / "small.yaml"
        scene.write_text(SMALL_SCENE)
        out = tmp_path / "nested" / "small.png"
        code = main(['--scene-file', str(scene), '--output', str(out), '--threads', '2', '--samples', '1', '--seed', '3'])
        assert code == 0
        with Image.open(out) as img:
            assert img.size == (6, 4)

    def test_scene_file_resized(self, tmp_path):
        scene = tmp_path / "small.yaml"
        scene.write_text(SMALL_SCENE)
        out = tmp_path / "resized.png"
        assert main(['--scene-file', str(scene), '--width', '3', '--height', '2', '--output', str(out)]) == 0
        with Image.open(out) as img:
            assert img.size == (3, 2)

    def test_bad_scene_file(self, tmp_path):
        scene = tmp_path / "broken.yaml"
        scene.write_text("objects:\n  - type: torus\n")
        assert main(['--scene-file', str(scene), '--output', str(tmp_path / "x.png")]) == 1

    def test_missing_scene_file(self, tmp_path):
        assert main(['--scene-file', str(tmp_path / "missing.yaml")]) == 1

    def test_invalid_settings(self, tmp_path):
        assert main(['--scene', 'default', '--width', '0', '--output', str(tmp_path / "x.png")]) == 2


class TestLogging:
    """Test logging setup."""

    def test_setup_replaces_handlers(self, tmp_path):
        log_file = tmp_path / "logs" / "render.log"
        logger = setup_logging("DEBUG", log_file=str(log_file), name="lumenray.test")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2

        logger = setup_logging("WARNING", name="lumenray.test")
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

        logging.getLogger("lumenray.test").warning("hello")
        assert log_file.exists()
