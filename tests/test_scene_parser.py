"""Tests for scene file parsing."""

import pytest
import json
from raytracing.vec3 import Vec3, Point3, Color
from raytracing.camera import Camera
from raytracing.shapes import Sphere
from raytracing.materials import Lambertian, Metal, Dielectric
from raytracing.renderer import RenderSettings
from raytracing.scene_parser import SceneParser, SceneParseError, load_scene, parse_scene

SCENE = {
    'camera': {
        'look_from': [13, 2, 3],
        'look_at': [0, 0, 0],
        'vfov': 20,
        'aperture': 0.1,
        'focus_dist': 10,
    },
    'render': {
        'width': 120,
        'aspect_ratio': 1.5,
        'samples': 8,
        'max_depth': 5,
        'threads': 2,
    },
    'materials': {
        'ground': {'type': 'lambertian', 'albedo': [0.5, 0.5, 0.5]},
        'glass': {'type': 'dielectric', 'refraction_index': 1.5},
        'gold': {'type': 'metal', 'albedo': '#ccaa33', 'fuzz': 3.0},
    },
    'objects': [
        {'type': 'sphere', 'center': [0, -1000, 0], 'radius': 1000, 'material': 'ground'},
        {'type': 'sphere', 'center': [0, 1, 0], 'radius': 1, 'material': 'glass'},
        {'type': 'sphere', 'center': [0, 1, 0], 'radius': -0.9, 'material': 'glass'},
        {'type': 'sphere', 'center': {'x': 4, 'y': 1, 'z': 0}, 'radius': 1, 'material': 'gold'},
        {'center': [-4, 1, 0], 'material': {'type': 'lambertian', 'albedo': {'r': 0.4, 'g': 0.2, 'b': 0.1}}},
    ],
}


class TestParseDict:
    """Test parsing scene dictionaries."""

    def test_full_scene(self):
        world, camera, settings = parse_scene(SCENE)

        assert len(world) == 5
        assert isinstance(camera, Camera)
        assert camera.origin == Point3(13, 2, 3)
        assert camera.lens_radius == 0.05
        assert settings == RenderSettings(width=120, aspect_ratio=1.5, samples_per_pixel=8, max_depth=5, num_threads=2)
        assert settings.height == 80

    def test_named_materials_are_shared(self):
        world, _, _ = parse_scene(SCENE)
        objects = list(world)
        assert objects[1].material is objects[2].material
        assert isinstance(objects[1].material, Dielectric)
        assert objects[2].radius == -0.9

    def test_material_parameters(self):
        objects = list(parse_scene(SCENE).world)
        gold = objects[3].material
        assert isinstance(gold, Metal)
        assert gold.fuzz == 1.0
        assert gold.albedo == Color(0xcc / 255, 0xaa / 255, 0x33 / 255)
        assert objects[3].center == Point3(4, 1, 0)

    def test_inline_material_and_defaults(self):
        sphere = list(parse_scene(SCENE).world)[4]
        assert isinstance(sphere, Sphere)
        assert sphere.radius == 1.0
        assert isinstance(sphere.material, Lambertian)
        assert sphere.material.albedo == Color(0.4, 0.2, 0.1)

    def test_defaults_without_sections(self):
        world, camera, settings = parse_scene({})
        assert len(world) == 0
        assert settings == RenderSettings()
        assert camera.get_ray(0.5, 0.5).direction == Vec3(0, 0, -1)

    def test_camera_uses_render_aspect_ratio(self):
        _, camera, _ = parse_scene({'render': {'width': 100, 'aspect_ratio': 2.0}, 'camera': {}})
        assert abs(camera.horizontal.length() / camera.vertical.length() - 2.0) < 1e-9


class TestValueForms:
    """Test the accepted spellings of vectors and colors."""

    @pytest.mark.parametrize("data,expected", [
        ([1, 2, 3], Vec3(1, 2, 3)),
        ((1, 2, 3), Vec3(1, 2, 3)),
        ({'x': 1, 'z': 3}, Vec3(1, 0, 3)),
    ])
    def test_vec3(self, data, expected):
        assert SceneParser()._parse_vec3(data) == expected

    @pytest.mark.parametrize("data,expected", [
        ([0.1, 0.2, 0.3], Color(0.1, 0.2, 0.3)),
        ({'g': 0.5}, Color(0, 0.5, 0)),
        ('#ff0080', Color(1.0, 0.0, 128 / 255)),
    ])
    def test_color(self, data, expected):
        assert SceneParser()._parse_color(data) == expected


class TestParseErrors:
    """Test malformed scene descriptions."""

    @pytest.mark.parametrize("data", [
        {'materials': {'x': {'type': 'plasma'}}},
        {'objects': [{'type': 'cube'}]},
        {'objects': [{'type': 'sphere', 'material': 'missing'}]},
        {'objects': [{'type': 'sphere', 'material': 42}]},
        {'objects': [{'type': 'sphere', 'center': [1, 2]}]},
        {'materials': {'x': {'type': 'lambertian', 'albedo': 'red'}}},
        {'render': {'width': 1}},
        {'render': {'width': 'wide'}},
        {'objects': [{'center': ['a', 0, 0]}]},
        {'objects': [{'radius': 'big'}]},
        {'objects': ['sphere']},
        {'objects': {'type': 'sphere'}},
        {'materials': None},
        {'materials': {'x': 'lambertian'}},
        {'materials': {'x': {'type': 'lambertian', 'albedo': '#zzzzzz'}}},
        {'materials': {'x': {'type': 'metal', 'fuzz': 'some'}}},
        {'camera': {'vfov': None}},
        {'camera': {'look_at': 'origin'}},
    ])
    def test_invalid(self, data):
        with pytest.raises(SceneParseError):
            SceneParser().parse_dict(data)


class TestLoadScene:
    """Test loading scene files from disk."""

    def test_load_json(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(SCENE))
        world, camera, settings = load_scene(path)
        assert len(world) == 5
        assert settings.width == 120

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "scene.yaml"
        path.write_text(
            "render:\n"
            "  width: 40\n"
            "  aspect_ratio: 2.0\n"
            "materials:\n"
            "  glass:\n"
            "    type: dielectric\n"
            "objects:\n"
            "  - center: [0, 0, -1]\n"
            "    radius: 0.5\n"
            "    material: glass\n"
        )
        world, camera, settings = load_scene(str(path))
        assert len(world) == 1
        assert settings.height == 20
        assert list(world)[0].material.refraction_index == 1.5

    def test_missing_file(self, tmp_path):
        with pytest.raises(SceneParseError):
            load_scene(tmp_path / "nope.yaml")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(SceneParseError):
            load_scene(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(SceneParseError):
            load_scene(path)
