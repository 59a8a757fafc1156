"""
Command line entry point for rendering scenes.
"""

from __future__ import annotations
import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from .camera import Camera
from .scenes import SCENES
from .scene_parser import load_scene, SceneParseError
from .renderer import Renderer, RenderSettings
from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='lumenray',
        description='lumenray - A Python Whitted-style Ray Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene balls --output balls.png
  python main.py --scene hexagon --width 600 --height 600 --samples 8 --threads 4
  python main.py --scene-file scenes/room.yaml --output room.ppm
        '''
    )

    parser.add_argument('--scene', type=str, default='balls', choices=sorted(SCENES),
                        help='Built-in scene to render (default: balls)')
    parser.add_argument('--scene-file', type=str, default=None,
                        help='YAML or JSON scene file (overrides --scene)')
    parser.add_argument('--width', type=int, default=None, help='Image width (default: 400 or from file)')
    parser.add_argument('--height', type=int, default=None, help='Image height (default: 300 or from file)')
    parser.add_argument('--samples', type=int, default=None,
                        help='Extra jittered samples per pixel (default: 0)')
    parser.add_argument('--depth', type=int, default=None, help='Max reflection/refraction depth (default: 5)')
    parser.add_argument('--threads', type=int, default=None, help='Number of worker threads (default: 1)')
    parser.add_argument('--seed', type=int, default=None, help='Seed for supersampling jitter')
    parser.add_argument('--output', type=str, default='output/render.png',
                        help='Output filename; .ppm writes plain PPM, other extensions go through Pillow')
    parser.add_argument('--log-level', type=str, default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Logging verbosity (default: INFO)')
    return parser


def _override(settings: RenderSettings, args: argparse.Namespace) -> RenderSettings:
    """Apply command line flags on top of settings that came from a scene file."""
    return RenderSettings(
        width=args.width if args.width is not None else settings.width,
        height=args.height if args.height is not None else settings.height,
        samples_per_pixel=args.samples if args.samples is not None else settings.samples_per_pixel,
        max_depth=args.depth if args.depth is not None else settings.max_depth,
        tile_size=settings.tile_size,
        num_threads=args.threads if args.threads is not None else settings.num_threads,
        seed=args.seed if args.seed is not None else settings.seed,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        if args.scene_file:
            world, camera, file_settings = load_scene(args.scene_file)
            settings = _override(file_settings, args)
            if (settings.width, settings.height) != (camera.hsize, camera.vsize):
                # Keep the file's view, resized to the requested image
                camera = Camera(settings.width, settings.height, camera.field_of_view, camera.transform)
            scene_name = args.scene_file
        else:
            settings = _override(RenderSettings(), args)
            world, camera = SCENES[args.scene](settings.width, settings.height)
            scene_name = args.scene
    except SceneParseError as e:
        logger.error("Cannot load scene: %s", e)
        return 1
    except ValueError as e:
        logger.error("Invalid settings: %s", e)
        return 2

    logger.info("Scene %s: %d object(s), %d light(s)", scene_name, len(world.objects), len(world.lights))

    renderer = Renderer(settings)

    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct >= last_progress[0] + 10 or pct == 100:
            last_progress[0] = pct
            logger.info("Rendering: %d%%", pct)

    renderer.set_progress_callback(progress_callback)

    start_time = time.time()
    canvas = renderer.render(world, camera)
    elapsed = time.time() - start_time
    logger.info("Render completed in %.2f seconds", elapsed)

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    canvas.save(output_path)
    return 0


if __name__ == '__main__':
    sys.exit(main())
