"""
Renderer module - drives the camera over the whole image.

Implements:
- Tile-based rendering, optionally on a thread pool
- Jittered supersampling with reproducible per-tile random streams
- Progress reporting
"""

from __future__ import annotations
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Callable, Tuple, TYPE_CHECKING
import numpy as np

from .canvas import Canvas

if TYPE_CHECKING:
    from .camera import Camera
    from .world import World

logger = logging.getLogger(__name__)

Tile = Tuple[int, int, int, int]


@dataclass
class RenderSettings:
    """Configuration for the renderer.

    Attributes:
        width: Image width in pixels
        height: Image height in pixels
        samples_per_pixel: Jittered rays added to the center ray (0 disables supersampling)
        max_depth: Recursion budget for reflected and refracted rays
        tile_size: Edge length of the square tiles the image is split into
        num_threads: Worker threads; 1 renders on the calling thread
        seed: Seed for the jitter streams (None for a fresh random image each time)
    """
    width: int = 400
    height: int = 300
    samples_per_pixel: int = 0
    max_depth: int = 5
    tile_size: int = 32
    num_threads: int = 1
    seed: Optional[int] = None

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.samples_per_pixel < 0:
            raise ValueError("samples_per_pixel cannot be negative")
        if self.max_depth < 0:
            raise ValueError("max_depth cannot be negative")
        if self.tile_size <= 0:
            raise ValueError("tile_size must be positive")
        if self.num_threads < 1:
            raise ValueError("num_threads must be at least 1")


class Renderer:
    """Whitted-style renderer with optional multi-threading."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render(self, world: World, camera: Camera) -> Canvas:
        """Render the scene and return the image as a canvas.

        The canvas takes the camera's size; settings.width/height are only
        used to build cameras, and a mismatch is logged.

        Args:
            world: The scene to render
            camera: The camera to render from

        Returns:
            Canvas of camera.hsize x camera.vsize unclamped colors
        """
        width, height = camera.hsize, camera.vsize
        if (width, height) != (self.settings.width, self.settings.height):
            logger.warning(
                "Camera is %dx%d but settings ask for %dx%d; using the camera size",
                width, height, self.settings.width, self.settings.height
            )

        canvas = Canvas(width, height)
        tiles = self._generate_tiles(width, height)
        total_tiles = len(tiles)
        completed_tiles = [0]
        lock = threading.Lock()

        logger.info(
            "Rendering %dx%d, %d sample(s) per pixel, depth %d, %d tile(s) on %d thread(s)",
            width, height, self.settings.samples_per_pixel + 1, self.settings.max_depth,
            total_tiles, self.settings.num_threads
        )
        start = time.perf_counter()

        def render_tile(indexed: Tuple[int, Tile]) -> None:
            index, tile = indexed
            block = self._render_tile(world, camera, tile, self._rng_for_tile(index))
            canvas.write_block(tile[0], tile[1], block)

            with lock:
                completed_tiles[0] += 1
                done = completed_tiles[0]
            logger.debug("Tile %d/%d done %s", done, total_tiles, tile)
            if self._progress_callback:
                self._progress_callback(done / total_tiles)

        if self.settings.num_threads > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                # list() re-raises any worker exception here
                list(executor.map(render_tile, enumerate(tiles)))
        else:
            for indexed in enumerate(tiles):
                render_tile(indexed)

        logger.info("Render finished in %.2fs", time.perf_counter() - start)
        return canvas

    def _rng_for_tile(self, index: int) -> np.random.Generator:
        if self.settings.seed is None:
            return np.random.default_rng()
        # One stream per tile keeps results independent of thread scheduling
        return np.random.default_rng([self.settings.seed, index])

    def _render_tile(
        self,
        world: World,
        camera: Camera,
        tile: Tile,
        rng: np.random.Generator
    ) -> np.ndarray:
        """Render a single tile.

        Args:
            world: The scene
            camera: The camera
            tile: (x0, y0, x1, y1) with exclusive upper bounds
            rng: Random stream for the jitter

        Returns:
            Float array of shape (y1 - y0, x1 - x0, 3)
        """
        x0, y0, x1, y1 = tile
        samples = self.settings.samples_per_pixel
        depth = self.settings.max_depth
        block = np.zeros((y1 - y0, x1 - x0, 3), dtype=np.float64)

        for y in range(y0, y1):
            for x in range(x0, x1):
                color = world.color_at(camera.ray_for_pixel(x, y), depth)

                if samples > 0:
                    offsets = rng.uniform(-0.5, 0.5, size=(samples, 2))
                    for dx, dy in offsets:
                        ray = camera.ray_for_pixel(x + dx, y + dy)
                        color = color + world.color_at(ray, depth)
                    color = color / (samples + 1)

                block[y - y0, x - x0] = color.to_array()

        return block

    def _generate_tiles(self, width: int, height: int) -> list[Tile]:
        """Generate tiles for parallel rendering.

        Args:
            width: Image width
            height: Image height

        Returns:
            List of tiles as (x0, y0, x1, y1) tuples
        """
        tile_size = self.settings.tile_size
        tiles = []

        for y in range(0, height, tile_size):
            for x in range(0, width, tile_size):
                x1 = min(x + tile_size, width)
                y1 = min(y + tile_size, height)
                tiles.append((x, y, x1, y1))

        return tiles
