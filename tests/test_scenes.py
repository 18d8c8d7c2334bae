"""Tests for the built-in demo scenes."""

import pytest
from raytracing.vec3 import Vec3, Point3
from raytracing.ray import Ray
from raytracing.shapes import Sphere, HittableList
from raytracing.materials import Lambertian, Metal, Dielectric
from raytracing.scenes import random_scene, material_scene, default_camera, material_camera


class TestRandomScene:
    """Test random_scene()."""

    def test_structure(self):
        world = random_scene()
        objects = list(world)

        assert isinstance(world, HittableList)
        # Ground + at most 22 * 22 small spheres + 3 large ones
        assert 4 <= len(world) <= 1 + 22 * 22 + 3
        ground = objects[0]
        assert ground.radius == 1000
        assert ground.center == Point3(0, -1000, 0)

    def test_large_spheres(self):
        objects = list(random_scene())
        glass, diffuse, metal = objects[-3:]
        assert isinstance(glass.material, Dielectric)
        assert isinstance(diffuse.material, Lambertian)
        assert isinstance(metal.material, Metal)
        assert metal.material.fuzz == 0.0
        assert all(s.radius == 1.0 for s in (glass, diffuse, metal))

    def test_small_spheres_keep_clear_of_metal_sphere(self):
        objects = list(random_scene())[1:-3]
        for sphere in objects:
            assert sphere.radius == 0.2
            assert sphere.center.y == 0.2
            assert (sphere.center - Point3(4, 0.2, 0)).length() > 0.9

    def test_small_sphere_materials_in_range(self):
        for sphere in list(random_scene())[1:-3]:
            material = sphere.material
            if isinstance(material, Metal):
                assert all(0.5 <= c < 1 for c in material.albedo)
                assert 0 <= material.fuzz < 0.5
            elif isinstance(material, Dielectric):
                assert material.refraction_index == 1.5
            else:
                assert all(0 <= c < 1 for c in material.albedo)


class TestMaterialScene:
    """Test material_scene()."""

    def test_glass_bubble_shares_material(self):
        objects = list(material_scene())
        assert len(objects) == 5
        outer, inner = objects[2], objects[3]
        assert outer.radius == 0.5
        assert inner.radius == -0.45
        assert outer.material is inner.material
        assert isinstance(outer.material, Dielectric)

    def test_center_ray_hits_blue_sphere(self):
        world = material_scene()
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        hit = world.hit(ray, 0.001, float('inf'))
        assert hit is not None
        assert abs(hit.t - 0.5) < 1e-9


class TestSceneCameras:
    """Test the cameras framing the demo scenes."""

    def test_default_camera_has_depth_of_field(self):
        cam = default_camera(1.5)
        assert cam.origin == Point3(13, 2, 3)
        assert cam.lens_radius == 0.05

    def test_material_camera_is_pinhole(self):
        cam = material_camera(16 / 9)
        assert cam.origin == Point3(-2, 2, 1)
        assert cam.lens_radius == 0.0
        center = cam.get_ray(0.5, 0.5).direction.unit()
        assert center == (Point3(0, 0, -1) - Point3(-2, 2, 1)).unit()
