"""
lumenray - A Python Ray Tracing Renderer

A recursive (Whitted-style) CPU ray tracer with support for:
- Spheres, planes, cubes, cylinders, cones and nested groups
- Phong shading with hard shadows from any number of point lights
- Reflection and refraction blended with Schlick's approximation
- Procedural patterns (stripes, gradients, rings, checkers)
- Jittered supersampling and multi-threaded tile rendering
- YAML/JSON scene files, PPM and PNG output
"""

__version__ = "0.1.0"
__author__ = "lumenray Team"

from .vec3 import EPSILON, float_eq, Vec3, Point3, Color, BLACK, WHITE
from .matrix import Matrix, IDENTITY, SingularMatrixError
from .transform import Transform, view_transform
from .ray import Ray
from .patterns import (
    Pattern, SolidPattern, StripePattern, GradientPattern,
    RingPattern, CheckersPattern, TestPattern, create_pattern
)
from .lights import PointLight
from .materials import Material
from .intersection import Intersection, Computations, hit, prepare_computations, schlick
from .shapes import Shape, Sphere, Plane, Cube, Cylinder, Cone, Group, ShapeNotFoundError
from .world import World
from .canvas import Canvas
from .renderer import Renderer, RenderSettings
from .camera import Camera
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
from .scenes import SCENES
from .logging_config import setup_logging
