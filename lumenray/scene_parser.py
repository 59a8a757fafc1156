"""
Scene description language parser.

Supports YAML (or JSON) scene files with:
- Camera configuration
- Render settings
- Background color
- Materials library (with patterns)
- Objects (shapes, groups with children, transforms)
- Lights

Example scene file:
```yaml
camera:
  width: 320
  height: 240
  fov_degrees: 60
  from: [0, 1.5, -5]
  to: [0, 1, 0]
  up: [0, 1, 0]

render:
  samples: 4
  max_depth: 5
  threads: 2
  seed: 7

background: [0, 0, 0]

materials:
  floor:
    specular: 0
    pattern:
      type: checkers
      colors: [[1, 1, 1], [0, 0, 0]]
      transform:
        - [scale, 0.5, 0.5, 0.5]

  glass:
    color: [0.1, 0.1, 0.1]
    transparency: 0.9
    reflective: 0.9
    refractive_index: 1.5

objects:
  - type: plane
    material: floor

  - type: sphere
    material: glass
    transform:
      - [translate, 0, 1, 0]

  - type: group
    transform:
      - [rotate_y, 0.5]
    children:
      - type: cylinder
        minimum: 0
        maximum: 1
        closed: true
        material: {color: "#ff0000"}

lights:
  - type: point
    position: [-10, 10, -10]
    intensity: [1, 1, 1]
```

Transform operations are applied in the order they are listed.
"""

from __future__ import annotations
import copy
import json
import logging
import math
from pathlib import Path
from typing import Dict, Any, Optional, Tuple

import yaml

from .vec3 import Vec3, Point3, Color, BLACK
from .matrix import Matrix, SingularMatrixError
from .transform import Transform, view_transform
from .patterns import Pattern, PATTERN_TYPES, create_pattern
from .materials import Material
from .lights import PointLight
from .shapes import Shape, Sphere, Plane, Cube, Cylinder, Cone, Group
from .world import World
from .camera import Camera
from .renderer import RenderSettings

logger = logging.getLogger(__name__)

SHAPE_TYPES: dict[str, type] = {
    'sphere': Sphere,
    'plane': Plane,
    'cube': Cube,
    'cylinder': Cylinder,
    'cone': Cone,
    'group': Group,
}

MATERIAL_FLOATS = (
    'ambient', 'diffuse', 'specular', 'shininess',
    'reflective', 'transparency', 'refractive_index',
)


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.world: World = World()
        self.camera: Optional[Camera] = None
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath: str) -> Tuple[World, Camera, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            Tuple of (world, camera, settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()
        logger.info("Loading scene %s", path)

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                # YAML is a superset of JSON, so this also covers other extensions
                data = yaml.safe_load(content)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise SceneParseError(f"Cannot read {filepath}: {e}") from e

        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[World, Camera, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (world, camera, settings)
        """
        if not isinstance(data, dict):
            raise SceneParseError(f"Scene must be a mapping, got {type(data).__name__}")

        if 'background' in data:
            self.world.background = self._parse_color(data['background'])

        # Parse materials first (objects reference them)
        if 'materials' in data:
            self._parse_materials(data['materials'])

        for obj_data in data.get('objects') or []:
            self.world.add_shape(self._parse_object(obj_data))

        if 'lights' in data:
            self._parse_lights(data['lights'])

        self._parse_settings(data.get('render') or {}, data.get('camera') or {})
        self._parse_camera(data.get('camera') or {})

        logger.info(
            "Parsed scene: %d object(s), %d light(s), %d material(s)",
            len(self.world.objects), len(self.world.lights), len(self.materials)
        )
        return self.world, self.camera, self.settings

    def _parse_vec3(self, data: Any, cls: type = Vec3) -> Vec3:
        """Parse a Vec3 (or Point3) from various formats."""
        try:
            if isinstance(data, (list, tuple)):
                if len(data) != 3:
                    raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
                return cls(float(data[0]), float(data[1]), float(data[2]))
            elif isinstance(data, dict):
                return cls(
                    float(data.get('x', 0)),
                    float(data.get('y', 0)),
                    float(data.get('z', 0))
                )
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}") from e
        raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_point(self, data: Any) -> Point3:
        return self._parse_vec3(data, Point3)

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from various formats."""
        try:
            if isinstance(data, (list, tuple)):
                if len(data) != 3:
                    raise SceneParseError(f"Color must have 3 components, got {len(data)}")
                return Color(float(data[0]), float(data[1]), float(data[2]))
            elif isinstance(data, dict):
                return Color(
                    float(data.get('r', 0)),
                    float(data.get('g', 0)),
                    float(data.get('b', 0))
                )
            elif isinstance(data, str):
                # Handle hex colors
                if data.startswith('#') and len(data) == 7:
                    return Color.from_rgb255(
                        int(data[1:3], 16), int(data[3:5], 16), int(data[5:7], 16)
                    )
                raise SceneParseError(f"Cannot parse color from string: {data}")
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Cannot parse Color from: {data}") from e
        raise SceneParseError(f"Cannot parse Color from: {data}")

    def _parse_transform(self, ops: Any) -> Matrix:
        """Build a matrix from a list of [op, args...] entries, applied in order."""
        if not isinstance(ops, list):
            raise SceneParseError(f"Transform must be a list of operations, got: {ops}")

        t = Transform()
        for op in ops:
            if not isinstance(op, (list, tuple)) or not op:
                raise SceneParseError(f"Invalid transform operation: {op}")
            name, args = str(op[0]).lower(), op[1:]
            try:
                args = [float(a) for a in args]
                if name == 'translate':
                    t = t.translation(*args)
                elif name == 'scale':
                    t = t.scaling(*args)
                elif name == 'rotate_x':
                    t = t.rotation_x(*args)
                elif name == 'rotate_y':
                    t = t.rotation_y(*args)
                elif name == 'rotate_z':
                    t = t.rotation_z(*args)
                elif name == 'shear':
                    t = t.shearing(*args)
                else:
                    raise SceneParseError(f"Unknown transform operation: {name}")
            except (TypeError, ValueError) as e:
                raise SceneParseError(f"Bad arguments for {name}: {args}") from e

        try:
            return t.build()
        except SingularMatrixError as e:
            raise SceneParseError(f"Transform is not invertible: {ops}") from e

    def _parse_pattern(self, data: Dict[str, Any]) -> Pattern:
        """Parse a pattern mapping (type, colors, transform)."""
        if not isinstance(data, dict):
            raise SceneParseError(f"Pattern must be a mapping, got: {data}")

        kind = str(data.get('type', 'stripe')).lower()
        if kind not in PATTERN_TYPES:
            raise SceneParseError(f"Unknown pattern type: {kind}")

        colors = [self._parse_color(c) for c in data.get('colors', [[1, 1, 1], [0, 0, 0]])]
        if not colors:
            raise SceneParseError("Pattern needs at least one color")
        a = colors[0]
        b = colors[1] if len(colors) > 1 else BLACK

        pattern = create_pattern(kind, a, b)
        if 'transform' in data:
            pattern.transform = self._parse_transform(data['transform'])
        return pattern

    def _build_material(self, mat_data: Dict[str, Any], base: Optional[Material] = None) -> Material:
        if not isinstance(mat_data, dict):
            raise SceneParseError(f"Material must be a mapping, got: {mat_data}")

        material = copy.deepcopy(base) if base is not None else Material()
        if 'color' in mat_data:
            material.color = self._parse_color(mat_data['color'])
        for name in MATERIAL_FLOATS:
            if name in mat_data:
                try:
                    setattr(material, name, float(mat_data[name]))
                except (TypeError, ValueError) as e:
                    raise SceneParseError(f"Material {name} must be a number") from e
        if material.refractive_index <= 0:
            raise SceneParseError(
                f"refractive_index must be positive, got {material.refractive_index}"
            )
        if 'pattern' in mat_data:
            material.pattern = self._parse_pattern(mat_data['pattern'])
        return material

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section.

        A material may name another library entry under `extends`.
        """
        if not isinstance(materials_data, dict):
            raise SceneParseError("materials must be a mapping of name to material")

        for name, mat_data in materials_data.items():
            base = None
            if isinstance(mat_data, dict) and 'extends' in mat_data:
                base = self._library_material(mat_data['extends'])
            self.materials[name] = self._build_material(mat_data, base)

    def _library_material(self, name: str) -> Material:
        if name not in self.materials:
            raise SceneParseError(f"Unknown material: {name}")
        return self.materials[name]

    def _get_material(self, mat_ref: Any) -> Material:
        """Get a material by name or inline definition.

        Library materials are copied so shapes never share one instance.
        """
        if mat_ref is None:
            return Material()
        if isinstance(mat_ref, str):
            return copy.deepcopy(self._library_material(mat_ref))
        elif isinstance(mat_ref, dict):
            base = None
            if 'extends' in mat_ref:
                base = self._library_material(mat_ref['extends'])
            return self._build_material(mat_ref, base)
        else:
            raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_object(self, obj_data: Dict[str, Any]) -> Shape:
        """Parse one object (recursing into group children)."""
        if not isinstance(obj_data, dict):
            raise SceneParseError(f"Object must be a mapping, got: {obj_data}")

        obj_type = str(obj_data.get('type', 'sphere')).lower()
        cls = SHAPE_TYPES.get(obj_type)
        if cls is None:
            raise SceneParseError(f"Unknown object type: {obj_type}")

        shape = cls()
        if 'transform' in obj_data:
            shape.transform = self._parse_transform(obj_data['transform'])
        shape.material = self._get_material(obj_data.get('material'))
        shape.cast_shadow = bool(obj_data.get('cast_shadow', True))

        if obj_type in ('cylinder', 'cone'):
            try:
                shape.minimum = float(obj_data.get('minimum', -math.inf))
                shape.maximum = float(obj_data.get('maximum', math.inf))
            except (TypeError, ValueError) as e:
                raise SceneParseError(f"Bad bounds for {obj_type}") from e
            shape.closed = bool(obj_data.get('closed', False))

        if obj_type == 'group':
            for child_data in obj_data.get('children') or []:
                shape.add_child(self._parse_object(child_data))
        elif 'children' in obj_data:
            raise SceneParseError(f"Only groups can have children, not {obj_type}")

        return shape

    def _parse_lights(self, lights_data: list) -> None:
        """Parse lights section."""
        for light_data in lights_data:
            if not isinstance(light_data, dict):
                raise SceneParseError(f"Light must be a mapping, got: {light_data}")
            light_type = str(light_data.get('type', 'point')).lower()

            if light_type == 'point':
                position = self._parse_point(light_data.get('position', [-10, 10, -10]))
                intensity = self._parse_color(light_data.get('intensity', [1, 1, 1]))
                self.world.add_light(PointLight(position, intensity))
            else:
                raise SceneParseError(f"Unknown light type: {light_type}")

    def _parse_settings(self, settings_data: Dict[str, Any], camera_data: Dict[str, Any]) -> None:
        """Parse render settings section (image size comes from the camera)."""
        seed = settings_data.get('seed')
        try:
            self.settings = RenderSettings(
                width=int(camera_data.get('width', 400)),
                height=int(camera_data.get('height', 300)),
                samples_per_pixel=int(settings_data.get('samples', 0)),
                max_depth=int(settings_data.get('max_depth', 5)),
                tile_size=int(settings_data.get('tile_size', 32)),
                num_threads=int(settings_data.get('threads', 1)),
                seed=int(seed) if seed is not None else None,
            )
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section."""
        if 'fov_degrees' in camera_data:
            fov = math.radians(float(camera_data['fov_degrees']))
        else:
            fov = float(camera_data.get('field_of_view', math.pi / 3))

        look_from = self._parse_point(camera_data.get('from', [0, 1.5, -5]))
        look_at = self._parse_point(camera_data.get('to', [0, 1, 0]))
        up = self._parse_vec3(camera_data.get('up', [0, 1, 0]))

        try:
            transform = view_transform(look_from, look_at, up)
        except SingularMatrixError as e:
            raise SceneParseError("Camera 'from', 'to' and 'up' do not define a view") from e

        self.camera = Camera(self.settings.width, self.settings.height, fov, transform)


def load_scene(filepath: str) -> Tuple[World, Camera, RenderSettings]:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        Tuple of (world, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[World, Camera, RenderSettings]:
    """Convenience function to parse a scene from a dictionary.

    Args:
        data: Scene description dictionary

    Returns:
        Tuple of (world, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_dict(data)
