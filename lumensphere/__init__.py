"""
Lumensphere - a small Python path tracer for sphere scenes.

Renders spheres with diffuse, metal and glass materials under a sky
gradient:
- Stochastic path tracing with a bounded bounce depth
- Thin-lens camera with field of view and depth of field
- Anti-aliasing by jittered pixel sampling
- Plain-text PPM output (other formats through Pillow)
"""

__version__ = "0.1.0"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .interval import Interval, EMPTY, UNIVERSE
from .sampling import RandomSource, make_rng
from .shapes import Hittable, HitRecord, Sphere, HittableList
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric
from .color import linear_to_gamma, quantize, write_color, write_ppm_header
from .config import RenderConfig, ConfigError
from .camera import Camera
from .scenes import three_spheres, final_scene
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
from .image_io import save_image, write_ppm
