"""Tests for Camera: ray generation and the path tracing loop."""

import io
import math
import pytest
import numpy as np

from lumensphere.vec3 import Vec3, Point3, Color
from lumensphere.ray import Ray
from lumensphere.camera import Camera
from lumensphere.config import RenderConfig
from lumensphere.shapes import Sphere, HittableList
from lumensphere.materials import Lambertian, Metal
from lumensphere.sampling import make_rng

from conftest import FixedRandom


def small_camera(**kwargs):
    settings = dict(
        aspect_ratio=1.0,
        image_width=3,
        samples_per_pixel=1,
        max_depth=1,
        vfov=90,
        lookfrom=Point3(0, 0, 0),
        lookat=Point3(0, 0, -1),
        vup=Vec3(0, 1, 0),
        defocus_angle=0.0,
        focus_dist=1.0,
        rng=FixedRandom(),
    )
    settings.update(kwargs)
    return Camera(**settings)


def golden_world():
    world = HittableList()
    world.add(Sphere(Point3(0, -100.5, -1), 100, Lambertian(Color(0.8, 0.8, 0.0))))
    world.add(Sphere(Point3(0, 0, -1), 0.5, Lambertian(Color(0.1, 0.2, 0.5))))
    return world


def expected_sky_pixel(direction):
    """Independent computation of the background color for a direction."""
    x, y, z = direction
    unit_y = y / math.sqrt(x * x + y * y + z * z)
    a = 0.5 * (unit_y + 1.0)
    channels = (1.0 * (1.0 - a) + 0.5 * a, 1.0 * (1.0 - a) + 0.7 * a, 1.0 * (1.0 - a) + 1.0 * a)
    return tuple(int(255.999 * min(math.sqrt(c), 0.999)) for c in channels)


class TestCameraInitialize:
    """Test derived camera geometry."""

    def test_image_height(self):
        cam = small_camera(aspect_ratio=16 / 9, image_width=400)
        assert cam.image_height == 225

    def test_image_height_at_least_one(self):
        cam = small_camera(aspect_ratio=16 / 9, image_width=1)
        assert cam.image_height == 1

    def test_pixel_samples_scale(self):
        cam = small_camera(samples_per_pixel=4)
        assert cam.pixel_samples_scale == 0.25

    def test_camera_basis_vectors(self):
        cam = small_camera()
        assert cam.w == Vec3(0, 0, 1)
        assert cam.u == Vec3(1, 0, 0)
        assert cam.v == Vec3(0, 1, 0)

    def test_basis_is_orthonormal(self):
        cam = small_camera(lookfrom=Point3(13, 2, 3), lookat=Point3(0, 0, 0), vup=Vec3(0, 1, 0.5))
        for axis in (cam.u, cam.v, cam.w):
            assert abs(axis.length() - 1.0) < 1e-9
        assert abs(cam.u.dot(cam.v)) < 1e-9
        assert abs(cam.v.dot(cam.w)) < 1e-9
        assert abs(cam.u.dot(cam.w)) < 1e-9

    def test_pixel_grid(self):
        cam = small_camera()
        # 90 degree fov at focus distance 1 spans [-1, 1] in both axes
        assert cam.pixel_delta_u == Vec3(2 / 3, 0, 0)
        assert cam.pixel_delta_v == Vec3(0, -2 / 3, 0)
        assert cam.pixel00_loc == Point3(-2 / 3, 2 / 3, -1)

    def test_viewport_scales_with_focus_distance(self):
        cam = small_camera(focus_dist=2.0)
        assert cam.pixel_delta_u == Vec3(4 / 3, 0, 0)
        assert cam.pixel00_loc == Point3(-4 / 3, 4 / 3, -2)

    def test_defocus_disk_radius(self):
        cam = small_camera(defocus_angle=10.0, focus_dist=3.4)
        radius = 3.4 * math.tan(math.radians(5.0))
        assert abs(cam.defocus_disk_u.length() - radius) < 1e-9
        assert abs(cam.defocus_disk_v.length() - radius) < 1e-9

    def test_reinitialize_after_change(self):
        cam = small_camera()
        cam.image_width = 8
        cam.initialize()
        assert cam.image_height == 8
        assert cam.pixel_delta_u == Vec3(0.25, 0, 0)

    def test_from_config(self):
        config = RenderConfig(image_width=20, aspect_ratio=2.0, vfov=40, seed=1)
        cam = Camera.from_config(config)
        assert cam.image_width == 20
        assert cam.image_height == 10
        assert cam.vfov == 40


class TestCameraRays:
    """Test Camera.get_ray()."""

    def test_center_ray_without_jitter(self):
        cam = small_camera()
        ray = cam.get_ray(1, 1)
        assert ray.origin == Point3(0, 0, 0)
        assert ray.direction == Vec3(0, 0, -1)

    def test_top_left_ray(self):
        cam = small_camera()
        ray = cam.get_ray(0, 0)
        assert ray.direction == Vec3(-2 / 3, 2 / 3, -1)

    def test_direction_not_normalized(self):
        cam = small_camera(focus_dist=5.0)
        ray = cam.get_ray(1, 1)
        assert abs(ray.direction.length() - 5.0) < 1e-9

    def test_jitter_stays_inside_pixel(self):
        cam = small_camera(rng=make_rng(21))
        for _ in range(100):
            ray = cam.get_ray(1, 1)
            target = ray.at(1.0)
            assert -1 / 3 <= target.x < 1 / 3
            assert -1 / 3 < target.y <= 1 / 3

    def test_jitter_varies(self):
        cam = small_camera(rng=make_rng(22))
        directions = {tuple(cam.get_ray(0, 0).direction) for _ in range(10)}
        assert len(directions) > 1

    def test_ray_origin_without_defocus(self):
        cam = small_camera(lookfrom=Point3(1, 2, 3), lookat=Point3(0, 0, 0), rng=make_rng(23))
        for _ in range(10):
            assert cam.get_ray(1, 1).origin == Point3(1, 2, 3)

    def test_ray_origin_on_defocus_disk(self):
        cam = small_camera(defocus_angle=20.0, focus_dist=2.0, rng=make_rng(24))
        radius = 2.0 * math.tan(math.radians(10.0))
        origins = []
        for _ in range(50):
            origin = cam.get_ray(1, 1).origin
            assert origin.z == 0
            assert origin.length() < radius + 1e-12
            origins.append(tuple(origin))
        assert len(set(origins)) > 1

    def test_defocused_rays_converge_on_focus_plane(self):
        cam = small_camera(defocus_angle=20.0, focus_dist=2.0, rng=FixedRandom())
        ray = cam.get_ray(1, 1)
        assert ray.origin != Point3(0, 0, 0)
        assert ray.at(1.0) == Point3(0, 0, -2)


class TestRayColor:
    """Test the recursive integrator."""

    def test_depth_zero_is_black(self):
        cam = small_camera()
        world = golden_world()
        for direction in (Vec3(0, 0, -1), Vec3(0, 1, 0), Vec3(0, -1, 0)):
            assert cam.ray_color(Ray(Point3(0, 0, 0), direction), 0, world) == Color(0, 0, 0)

    def test_negative_depth_is_black(self):
        cam = small_camera()
        assert cam.ray_color(Ray(Point3(0, 0, 0), Vec3(0, 1, 0)), -3, HittableList()) == Color(0, 0, 0)

    def test_miss_returns_sky(self):
        cam = small_camera()
        ray = Ray(Point3(0, 0, 0), Vec3(0, 1, 0))
        assert cam.ray_color(ray, 5, HittableList()) == Color(0.5, 0.7, 1.0)

    def test_sky_gradient(self):
        assert Camera.sky_color(Ray(Point3(0, 0, 0), Vec3(0, -3, 0))) == Color(1, 1, 1)
        assert Camera.sky_color(Ray(Point3(0, 0, 0), Vec3(1, 0, 0))) == Color(0.75, 0.85, 1.0)

    def test_hit_with_depth_one_is_black(self):
        cam = small_camera()
        ray = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        assert cam.ray_color(ray, 1, golden_world()) == Color(0, 0, 0)

    def test_attenuation_multiplies_bounce(self):
        cam = small_camera()
        world = HittableList([Sphere(Point3(0, 0, -2), 1.0, Metal(Color(0.5, 0.5, 0.5), 0.0))])
        # Mirror bounce straight back along +z, which sees the horizon color
        color = cam.ray_color(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 2, world)
        assert color == Color(0.375, 0.425, 0.5)

    def test_absorbed_ray_is_black(self):
        # A fuzz of 2 pointing back into the surface pushes the bounce below it
        cam = small_camera(rng=FixedRandom(0.5, 0.25))
        world = HittableList([Sphere(Point3(0, 0, -2), 1.0, Metal(Color(1, 1, 1), 2.0))])
        color = cam.ray_color(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 5, world)
        assert color == Color(0, 0, 0)

    def test_trapped_path_runs_out_of_depth(self):
        cam = small_camera()
        # Mirror on the inside of a sphere bounces back and forth forever
        world = HittableList([Sphere(Point3(0, 0, 0), -1.0, Metal(Color(1, 1, 1), 0.0))])
        color = cam.ray_color(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 10, world)
        assert color == Color(0, 0, 0)


class TestRender:
    """Test the full render loop."""

    def test_golden_image(self):
        cam = small_camera()
        out = io.StringIO()
        cam.render(golden_world(), out)
        lines = out.getvalue().splitlines()

        assert lines[:3] == ["P3", "3 3", "255"]
        pixels = [tuple(int(c) for c in line.split()) for line in lines[3:]]
        assert len(pixels) == 9

        black = (0, 0, 0)
        h = math.tan(math.radians(45))
        step = 2 * h / 3
        expected = []
        for j in range(3):
            for i in range(3):
                direction = (-h + (i + 0.5) * step, h - (j + 0.5) * step, -1.0)
                expected.append(expected_sky_pixel(direction))
        # Center pixel sees the small sphere, the bottom row sees the ground
        expected[4] = black
        expected[6:9] = [black, black, black]

        assert pixels == expected

    def test_golden_image_array_matches_stream(self):
        world = golden_world()
        out = io.StringIO()
        small_camera().render(world, out)
        image = small_camera().render_image(world)

        assert image.shape == (3, 3, 3)
        assert image.dtype == np.uint8
        lines = out.getvalue().splitlines()[3:]
        flat = [" ".join(str(c) for c in pixel) for pixel in image.reshape(-1, 3)]
        assert flat == lines

    @pytest.mark.parametrize("width,aspect", [(4, 2.0), (5, 1.0), (7, 16 / 9)])
    def test_output_size(self, width, aspect):
        cam = small_camera(image_width=width, aspect_ratio=aspect, rng=make_rng(1))
        out = io.StringIO()
        cam.render(HittableList(), out)
        lines = out.getvalue().splitlines()
        assert lines[1] == f"{width} {cam.image_height}"
        assert len(lines) == 3 + width * cam.image_height
        for line in lines[3:]:
            channels = [int(c) for c in line.split()]
            assert len(channels) == 3
            assert all(0 <= c <= 255 for c in channels)

    def test_rows_are_top_to_bottom(self):
        cam = small_camera(image_width=2, aspect_ratio=0.5)
        rows = list(cam.scanlines(HittableList()))
        assert len(rows) == 4
        # Looking up the sky gets bluer, so the top row has less red
        assert rows[0][0].x < rows[-1][0].x

    def test_progress_callback(self):
        cam = small_camera(image_width=4, aspect_ratio=2.0)
        calls = []
        cam.render(HittableList(), io.StringIO(), progress=lambda done, total: calls.append((done, total)))
        assert calls == [(1, 2), (2, 2)]

    def test_seeded_renders_repeat(self):
        world = golden_world()
        outputs = []
        for _ in range(2):
            cam = small_camera(image_width=6, samples_per_pixel=3, max_depth=4, rng=make_rng(99))
            out = io.StringIO()
            cam.render(world, out)
            outputs.append(out.getvalue())
        assert outputs[0] == outputs[1]

    def test_render_reinitializes(self):
        cam = small_camera()
        cam.image_width = 2
        out = io.StringIO()
        cam.render(HittableList(), out)
        assert out.getvalue().splitlines()[1] == "2 2"
