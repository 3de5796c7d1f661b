"""Monte Carlo path tracer for spheres, built on Taichi.

This package renders a scene of spheres with diffuse (Lambertian) and
metal materials under a sky gradient, with:
- Closest-hit ray-sphere intersection with a self-intersection epsilon
- Bounded-depth path tracing with per-material scattering
- Jittered multi-sample antialiasing
- Plain PPM (P3) and PNG output

Subpackages:
    core: Rays, vector algebra, configuration, integrator and renderer
    geometry: Sphere primitive and intersection
    materials: Lambertian and metal scattering laws
    scene: Scene aggregate, material arena and reference world
    camera: Pinhole camera ray generation
    output: Color encoding and image writers
"""

__version__ = "0.1.0"
