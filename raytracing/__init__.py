"""
raytracing - A Python Path Tracer

An offline recursive ray tracer for scenes of spheres with:
- Diffuse, metal and glass materials
- Depth of field
- Monte-Carlo anti-aliasing
- Multi-threaded scanline rendering into an ordered pixel buffer
- Plain-text PPM output (other formats through Pillow)
"""

__version__ = "0.1.0"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .shapes import Sphere, HittableList, HitRecord, Hittable
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric
from .camera import Camera
from .renderer import (
    Renderer, RenderSettings, RenderError,
    ray_color, sky_color, render_pixel, render_scanline
)
from .image import encode_pixel, to_rgb_string, format_ppm, write_ppm, to_array, save_image
from .scenes import random_scene, material_scene, default_camera, material_camera
from .scene_parser import SceneParser, SceneParseError, SceneDescription, load_scene, parse_scene
