"""
Built-in scenes.

Each builder returns the world together with the RenderConfig it is
meant to be viewed with.
"""

from __future__ import annotations
from typing import Optional, Tuple

from .vec3 import Vec3, Point3, Color
from .shapes import Sphere, HittableList
from .materials import Lambertian, Metal, Dielectric
from .config import RenderConfig
from .sampling import RandomSource, make_rng


def three_spheres() -> Tuple[HittableList, RenderConfig]:
    """Diffuse, hollow glass and fuzzy metal spheres on a yellow ground."""
    world = HittableList()

    material_ground = Lambertian(Color(0.8, 0.8, 0.0))
    material_center = Lambertian(Color(0.1, 0.2, 0.5))
    material_left = Dielectric(1.50)
    material_bubble = Dielectric(1.00 / 1.50)
    material_right = Metal(Color(0.8, 0.6, 0.2), 1.0)

    world.add(Sphere(Point3(0.0, -100.5, -1.0), 100.0, material_ground))
    world.add(Sphere(Point3(0.0, 0.0, -1.2), 0.5, material_center))
    world.add(Sphere(Point3(-1.0, 0.0, -1.0), 0.5, material_left))
    world.add(Sphere(Point3(-1.0, 0.0, -1.0), 0.4, material_bubble))
    world.add(Sphere(Point3(1.0, 0.0, -1.0), 0.5, material_right))

    config = RenderConfig(
        aspect_ratio=16.0 / 9.0,
        image_width=400,
        samples_per_pixel=100,
        max_depth=50,
        vfov=20,
        lookfrom=Point3(-2, 2, 1),
        lookat=Point3(0, 0, -1),
        vup=Vec3(0, 1, 0),
        defocus_angle=10.0,
        focus_dist=3.4
    )
    return world, config


def final_scene(rng: Optional[RandomSource] = None) -> Tuple[HittableList, RenderConfig]:
    """A field of small random spheres around three large ones.

    Args:
        rng: Random source for placement and materials (unseeded if omitted)
    """
    rng = rng if rng is not None else make_rng()
    world = HittableList()

    ground_material = Lambertian(Color(0.5, 0.5, 0.5))
    world.add(Sphere(Point3(0, -1000, 0), 1000, ground_material))

    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())

            if (center - Point3(4, 0.2, 0)).length() <= 0.9:
                continue

            if choose_mat < 0.8:
                # diffuse
                albedo = Color.random(rng) * Color.random(rng)
                sphere_material = Lambertian(albedo)
            elif choose_mat < 0.95:
                # metal
                albedo = Color.random_range(rng, 0.5, 1)
                fuzz = rng.uniform(0, 0.5)
                sphere_material = Metal(albedo, fuzz)
            else:
                # glass
                sphere_material = Dielectric(1.5)

            world.add(Sphere(center, 0.2, sphere_material))

    world.add(Sphere(Point3(0, 1, 0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    config = RenderConfig(
        aspect_ratio=16.0 / 9.0,
        image_width=1200,
        samples_per_pixel=500,
        max_depth=50,
        vfov=20,
        lookfrom=Point3(13, 2, 3),
        lookat=Point3(0, 0, 0),
        vup=Vec3(0, 1, 0),
        defocus_angle=0.6,
        focus_dist=10.0
    )
    return world, config

