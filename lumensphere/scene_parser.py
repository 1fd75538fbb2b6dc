"""
Scene description parser.

Reads a YAML (or JSON) description of spheres, materials and the camera.

Example scene file:
```yaml
camera:
  lookfrom: [13, 2, 3]
  lookat: [0, 0, 0]
  vfov: 20
  defocus_angle: 0.6
  focus_dist: 10

render:
  aspect_ratio: 1.7777
  image_width: 400
  samples_per_pixel: 100
  max_depth: 50
  seed: 7

materials:
  ground:
    type: lambertian
    albedo: [0.5, 0.5, 0.5]

  glass:
    type: dielectric
    ior: 1.5

objects:
  - type: sphere
    center: [0, -1000, 0]
    radius: 1000
    material: ground

  - type: sphere
    center: [0, 1, 0]
    radius: 1
    material:
      type: metal
      albedo: [0.7, 0.6, 0.5]
      fuzz: 0.1
```
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, Tuple, Union

import yaml

from .vec3 import Vec3, Color
from .shapes import Sphere, HittableList
from .materials import Material, Lambertian, Metal, Dielectric
from .config import RenderConfig, ConfigError

logger = logging.getLogger(__name__)

CAMERA_KEYS = ('vfov', 'lookfrom', 'lookat', 'vup', 'defocus_angle', 'focus_dist')
RENDER_KEYS = ('aspect_ratio', 'image_width', 'samples_per_pixel', 'max_depth', 'seed')
VECTOR_KEYS = ('lookfrom', 'lookat', 'vup')


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.objects: HittableList = HittableList()

    def parse_file(self, filepath: Union[str, Path]) -> Tuple[HittableList, RenderConfig]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            Tuple of (world, config)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()
        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                # YAML is a superset of JSON, so it covers everything else
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Cannot read {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file must contain a mapping: {filepath}")

        logger.debug("Loaded scene description from %s", path)
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[HittableList, RenderConfig]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (world, config)
        """
        # Materials first, objects reference them by name
        self._parse_materials(data.get('materials') or {})
        self._parse_objects(data.get('objects') or [])
        config = self._parse_config(data.get('camera') or {}, data.get('render') or {})

        logger.debug(
            "Parsed %d materials and %d objects", len(self.materials), len(self.objects)
        )
        return self.objects, config

    def _parse_float(self, value: Any, what: str) -> float:
        """Convert a scalar scene value to float."""
        if isinstance(value, bool):
            raise SceneParseError(f"{what} must be a number, got {value!r}")
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"{what} must be a number, got {value!r}") from e

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from a list or an x/y/z mapping."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            return Vec3(*(self._parse_float(c, 'Vec3 component') for c in data))
        elif isinstance(data, dict):
            return Vec3(*(self._parse_float(data.get(k, 0), 'Vec3 component') for k in 'xyz'))
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from a list, an r/g/b mapping or a hex string."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            return Color(*(self._parse_float(c, 'Color component') for c in data))
        elif isinstance(data, dict):
            return Color(*(self._parse_float(data.get(k, 0), 'Color component') for k in 'rgb'))
        elif isinstance(data, str):
            if data.startswith('#') and len(data) == 7:
                try:
                    r, g, b = (int(data[i:i + 2], 16) / 255.0 for i in (1, 3, 5))
                except ValueError as e:
                    raise SceneParseError(f"Cannot parse color from string: {data}") from e
                return Color(r, g, b)
            raise SceneParseError(f"Cannot parse color from string: {data}")
        else:
            raise SceneParseError(f"Cannot parse Color from: {data}")

    def _build_material(self, mat_data: Dict[str, Any]) -> Material:
        if not isinstance(mat_data, dict):
            raise SceneParseError(f"Material must be a mapping, got: {mat_data!r}")
        mat_type = str(mat_data.get('type', 'lambertian')).lower()

        if mat_type == 'lambertian':
            return Lambertian(self._parse_color(mat_data.get('albedo', [0.5, 0.5, 0.5])))

        elif mat_type == 'metal':
            albedo = self._parse_color(mat_data.get('albedo', [0.8, 0.8, 0.8]))
            return Metal(albedo, self._parse_float(mat_data.get('fuzz', 0.0), 'Metal fuzz'))

        elif mat_type == 'dielectric':
            return Dielectric(self._parse_float(mat_data.get('ior', 1.5), 'Dielectric ior'))

        raise SceneParseError(f"Unknown material type: {mat_type}")

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse the named materials library."""
        if not isinstance(materials_data, dict):
            raise SceneParseError("'materials' must be a mapping of name to material")
        for name, mat_data in materials_data.items():
            self.materials[name] = self._build_material(mat_data)

    def _get_material(self, mat_ref: Any) -> Material:
        """Get a material by name or inline definition."""
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        if isinstance(mat_ref, dict):
            return self._build_material(mat_ref)
        raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_objects(self, objects_data: list) -> None:
        if not isinstance(objects_data, list):
            raise SceneParseError("'objects' must be a list")
        for obj_data in objects_data:
            if not isinstance(obj_data, dict):
                raise SceneParseError(f"Object must be a mapping, got: {obj_data!r}")
            obj_type = str(obj_data.get('type', 'sphere')).lower()
            if obj_type != 'sphere':
                raise SceneParseError(f"Unknown object type: {obj_type}")

            if 'material' not in obj_data:
                raise SceneParseError("Sphere is missing a material")

            self.objects.add(Sphere(
                self._parse_vec3(obj_data.get('center', [0, 0, 0])),
                self._parse_float(obj_data.get('radius', 1.0), 'Sphere radius'),
                self._get_material(obj_data['material'])
            ))

    def _parse_config(self, camera_data: Dict[str, Any], render_data: Dict[str, Any]) -> RenderConfig:
        """Merge the camera and render sections into one RenderConfig."""
        settings: Dict[str, Any] = {}
        for name, section in (('camera', camera_data), ('render', render_data)):
            if not isinstance(section, dict):
                raise SceneParseError(f"'{name}' must be a mapping")
        for section, keys in ((camera_data, CAMERA_KEYS), (render_data, RENDER_KEYS)):
            unknown = set(section) - set(keys)
            if unknown:
                raise SceneParseError(f"Unknown settings: {', '.join(sorted(unknown))}")
            for key in keys:
                if key in section:
                    value = section[key]
                    settings[key] = self._parse_vec3(value) if key in VECTOR_KEYS else value

        try:
            return RenderConfig(**settings)
        except (ConfigError, TypeError) as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e


def load_scene(filepath: Union[str, Path]) -> Tuple[HittableList, RenderConfig]:
    """Load a scene file and return (world, config)."""
    return SceneParser().parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[HittableList, RenderConfig]:
    """Build (world, config) from an already decoded scene description."""
    return SceneParser().parse_dict(data)
