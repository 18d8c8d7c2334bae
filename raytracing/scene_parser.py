"""
Scene description language parser.

Supports a YAML or JSON scene description format with:
- Camera configuration
- Render settings
- Materials library (named materials are shared by every object using them)
- Objects (spheres with materials)

Example scene file:
```yaml
camera:
  look_from: [13, 2, 3]
  look_at: [0, 0, 0]
  vfov: 20
  aperture: 0.1
  focus_dist: 10

render:
  width: 400
  aspect_ratio: 1.7778
  samples: 100
  max_depth: 50
  threads: 0

materials:
  ground:
    type: lambertian
    albedo: [0.5, 0.5, 0.5]

  glass:
    type: dielectric
    refraction_index: 1.5

objects:
  - type: sphere
    center: [0, -1000, 0]
    radius: 1000
    material: ground

  - type: sphere
    center: [0, 1, 0]
    radius: 1
    material: glass
```
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional, Union
import json

import yaml

from .vec3 import Vec3, Point3, Color
from .camera import Camera
from .shapes import Sphere, HittableList
from .materials import Material, Lambertian, Metal, Dielectric
from .renderer import RenderSettings


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneDescription(NamedTuple):
    """Everything needed to render a parsed scene."""
    world: HittableList
    camera: Camera
    settings: RenderSettings


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.objects: HittableList = HittableList()
        self.camera: Optional[Camera] = None
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath: Union[str, Path]) -> SceneDescription:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            The parsed world, camera and render settings
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                # YAML is a superset of JSON, so this covers other extensions too
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise SceneParseError(f"Cannot read scene file {filepath}: {exc}") from exc

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file {filepath} must contain a mapping at the top level")

        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> SceneDescription:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            The parsed world, camera and render settings
        """
        # Settings first: the camera defaults to their aspect ratio
        if 'render' in data:
            self._parse_settings(data['render'])
        else:
            self.settings = RenderSettings()

        # Parse materials before objects (objects reference them)
        if 'materials' in data:
            self._parse_materials(data['materials'])

        if 'objects' in data:
            self._parse_objects(data['objects'])

        if 'camera' in data:
            self._parse_camera(data['camera'])
        else:
            # Default camera
            self.camera = Camera(
                look_from=Point3(0, 0, 0),
                look_at=Point3(0, 0, -1),
                vfov=90,
                aspect_ratio=self.settings.aspect_ratio,
            )

        return SceneDescription(self.objects, self.camera, self.settings)

    def _number(self, value: Any, what: str) -> float:
        try:
            return float(value)
        except (TypeError, ValueError) as exc:
            raise SceneParseError(f"{what} must be a number, got {value!r}") from exc

    def _triple(self, data: Any, keys: str, what: str) -> Vec3:
        """Read three components from a list or a mapping keyed by `keys`."""
        if isinstance(data, dict):
            data = [data.get(key, 0) for key in keys]
        if not isinstance(data, (list, tuple)):
            raise SceneParseError(f"Cannot parse {what} from: {data!r}")
        if len(data) != 3:
            raise SceneParseError(f"{what} must have 3 components, got {len(data)}")
        return Vec3(*(self._number(c, f"{what} component") for c in data))

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from `[x, y, z]` or `{x:, y:, z:}`."""
        return self._triple(data, 'xyz', 'Vec3')

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from `[r, g, b]`, `{r:, g:, b:}` or `'#rrggbb'`."""
        if isinstance(data, str):
            digits = data[1:] if data.startswith('#') else ''
            try:
                if len(digits) != 6:
                    raise ValueError(digits)
                return Color(*(int(digits[k:k + 2], 16) / 255.0 for k in (0, 2, 4)))
            except ValueError as exc:
                raise SceneParseError(f"Cannot parse color from string: {data!r}") from exc
        return self._triple(data, 'rgb', 'Color')

    def _build_material(self, mat_data: Any) -> Material:
        if not isinstance(mat_data, dict):
            raise SceneParseError(f"Material must be a mapping, got {mat_data!r}")
        mat_type = str(mat_data.get('type', 'lambertian')).lower()

        if mat_type == 'lambertian':
            return Lambertian(self._parse_color(mat_data.get('albedo', [0.5, 0.5, 0.5])))

        if mat_type == 'metal':
            albedo = self._parse_color(mat_data.get('albedo', [0.8, 0.8, 0.8]))
            return Metal(albedo, self._number(mat_data.get('fuzz', 0.0), 'fuzz'))

        if mat_type == 'dielectric':
            return Dielectric(self._number(mat_data.get('refraction_index', 1.5), 'refraction_index'))

        raise SceneParseError(f"Unknown material type: {mat_type}")

    def _parse_materials(self, materials_data: Any) -> None:
        """Parse materials section."""
        if not isinstance(materials_data, dict):
            raise SceneParseError("'materials' must be a mapping of name to material")
        for name, mat_data in materials_data.items():
            self.materials[name] = self._build_material(mat_data)

    def _get_material(self, mat_ref: Any) -> Optional[Material]:
        """Get a material by name or inline definition."""
        if mat_ref is None:
            return None
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        if isinstance(mat_ref, dict):
            return self._build_material(mat_ref)
        raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_objects(self, objects_data: Any) -> None:
        """Parse objects section."""
        if not isinstance(objects_data, list):
            raise SceneParseError("'objects' must be a list")
        for obj_data in objects_data:
            if not isinstance(obj_data, dict):
                raise SceneParseError(f"Object must be a mapping, got {obj_data!r}")
            obj_type = str(obj_data.get('type', 'sphere')).lower()
            if obj_type != 'sphere':
                raise SceneParseError(f"Unknown object type: {obj_type}")

            material = self._get_material(obj_data.get('material'))
            center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
            radius = self._number(obj_data.get('radius', 1.0), 'radius')
            self.objects.add(Sphere(center, radius, material))

    def _parse_camera(self, camera_data: Any) -> None:
        """Parse camera section."""
        if not isinstance(camera_data, dict):
            raise SceneParseError("'camera' must be a mapping")

        def field(key, default):
            return self._number(camera_data.get(key, default), key)

        self.camera = Camera(
            look_from=self._parse_vec3(camera_data.get('look_from', [0, 0, 0])),
            look_at=self._parse_vec3(camera_data.get('look_at', [0, 0, -1])),
            vup=self._parse_vec3(camera_data.get('vup', [0, 1, 0])),
            vfov=field('vfov', 90),
            aspect_ratio=field('aspect_ratio', self.settings.aspect_ratio),
            aperture=field('aperture', 0.0),
            focus_dist=field('focus_dist', 1.0),
        )

    def _parse_settings(self, settings_data: Any) -> None:
        """Parse render settings section."""
        if not isinstance(settings_data, dict):
            raise SceneParseError("'render' must be a mapping")
        defaults = RenderSettings()
        try:
            self.settings = RenderSettings(
                width=int(settings_data.get('width', defaults.width)),
                aspect_ratio=float(settings_data.get('aspect_ratio', defaults.aspect_ratio)),
                samples_per_pixel=int(settings_data.get('samples', defaults.samples_per_pixel)),
                max_depth=int(settings_data.get('max_depth', defaults.max_depth)),
                num_threads=int(settings_data.get('threads', defaults.num_threads)),
            )
        except (TypeError, ValueError) as exc:
            raise SceneParseError(f"Invalid render settings: {exc}") from exc


def load_scene(filepath: Union[str, Path]) -> SceneDescription:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        The parsed world, camera and render settings
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> SceneDescription:
    """Convenience function to parse a scene from a dictionary.

    Args:
        data: Scene description dictionary

    Returns:
        The parsed world, camera and render settings
    """
    parser = SceneParser()
    return parser.parse_dict(data)
