"""
Built-in demo scenes and the cameras that frame them.
"""

from __future__ import annotations

from .vec3 import Vec3, Point3, Color
from .camera import Camera
from .shapes import Sphere, HittableList
from .materials import Material, Lambertian, Metal, Dielectric
from .sampling import random_double


def random_scene() -> HittableList:
    """Create the cover scene: a field of small random spheres around three large ones."""
    world = HittableList()

    ground_material = Lambertian(Color(0.5, 0.5, 0.5))
    world.add(Sphere(Point3(0, -1000, 0), 1000, ground_material))

    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = random_double()
            center = Point3(a + 0.9 * random_double(), 0.2, b + 0.9 * random_double())

            # Leave room around the large metal sphere
            if (center - Point3(4, 0.2, 0)).length() <= 0.9:
                continue

            sphere_material: Material
            if choose_mat < 0.8:
                sphere_material = Lambertian(Color.random() * Color.random())
            elif choose_mat < 0.95:
                sphere_material = Metal(Color.random(0.5, 1), random_double(0, 0.5))
            else:
                sphere_material = Dielectric(1.5)

            world.add(Sphere(center, 0.2, sphere_material))

    world.add(Sphere(Point3(0, 1, 0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    return world


def material_scene() -> HittableList:
    """Three spheres on a ground sphere: diffuse, hollow glass and polished metal."""
    world = HittableList()

    ground = Lambertian(Color(0.8, 0.8, 0.0))
    center = Lambertian(Color(0.1, 0.2, 0.5))
    left = Dielectric(1.5)
    right = Metal(Color(0.8, 0.6, 0.2), 0.0)

    world.add(Sphere(Point3(0, -100.5, -1), 100.0, ground))
    world.add(Sphere(Point3(0, 0, -1), 0.5, center))
    # Glass bubble: outer shell and inward-facing inner wall share one material
    world.add(Sphere(Point3(-1, 0, -1), 0.5, left))
    world.add(Sphere(Point3(-1, 0, -1), -0.45, left))
    world.add(Sphere(Point3(1, 0, -1), 0.5, right))

    return world


def default_camera(aspect_ratio: float) -> Camera:
    """Camera framing `random_scene` with a shallow depth of field."""
    return Camera(
        look_from=Point3(13, 2, 3),
        look_at=Point3(0, 0, 0),
        vup=Vec3(0, 1, 0),
        vfov=20.0,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_dist=10.0,
    )


def material_camera(aspect_ratio: float) -> Camera:
    """Camera framing `material_scene`, pinhole lens."""
    look_from = Point3(-2, 2, 1)
    look_at = Point3(0, 0, -1)
    return Camera(
        look_from=look_from,
        look_at=look_at,
        vup=Vec3(0, 1, 0),
        vfov=20.0,
        aspect_ratio=aspect_ratio,
        aperture=0.0,
        focus_dist=(look_from - look_at).length(),
    )
