#!/usr/bin/env python3
"""Render the reference sphere scene as a PPM (or PNG) image.

A small diffuse sphere rests on a large ground sphere under a sky gradient,
optionally flanked by two metal spheres. The image is streamed in plain PPM
(P3) format, one scanline at a time, while progress goes to stderr.

Usage:
    python -m examples.render_spheres [options] > image.ppm

Options:
    --width WIDTH           Image width in pixels (default: 400)
    --aspect-ratio RATIO    Width / height (default: 1.7778)
    --samples SAMPLES       Samples per pixel (default: 100)
    --max-depth DEPTH       Bounce budget per path (default: 50)
    --gamma GAMMA           Output gamma, 1.0 = linear (default: 1.0)
    --seed SEED             Random seed (default: 0)
    --no-metal              Leave out the two metal spheres
    --normals               Shade by surface normal instead of path tracing
    --output OUTPUT         Output path, "-" for stdout (default: -)
    --cpu                   Force the CPU backend
    --quiet                 Suppress progress output

Example:
    python -m examples.render_spheres --width 200 --samples 20 --output spheres.png
"""

from __future__ import annotations

import argparse
import sys
import time

import taichi as ti

# Holds no Taichi fields, so importing before ti.init is safe
from pathweave.core.config import RenderConfig, ShadingMode


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the reference sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--aspect-ratio",
        type=float,
        default=16.0 / 9.0,
        help="Image width divided by height (default: 16/9)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Number of samples per pixel (default: 100)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=50,
        help="Maximum number of bounces per path (default: 50)",
    )
    parser.add_argument(
        "--gamma",
        type=float,
        default=1.0,
        help="Output gamma, 1.0 writes linear values (default: 1.0)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for jitter and scattering (default: 0)",
    )
    parser.add_argument(
        "--no-metal",
        action="store_true",
        help="Leave out the two metal spheres",
    )
    parser.add_argument(
        "--normals",
        action="store_true",
        help="Shade by surface normal instead of path tracing",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="-",
        help='Output file, "-" for stdout; .png writes PNG, anything else PPM (default: -)',
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RenderConfig:
    """Build and validate the render configuration from the arguments.

    Raises:
        ValueError: If any argument is out of range.
    """
    config = RenderConfig(
        aspect_ratio=args.aspect_ratio,
        image_width=args.width,
        samples_per_pixel=args.samples,
        max_depth=args.max_depth,
        gamma=args.gamma,
        seed=args.seed,
        shading=ShadingMode.NORMALS if args.normals else ShadingMode.SCATTER,
    )
    config.validate()
    return config


def init_taichi(config: RenderConfig, cpu: bool = False) -> None:
    """Initialize Taichi with the configuration's RNG seed.

    Rendering is serial in raster order, so the seed alone fixes the image.
    """
    if cpu:
        ti.init(arch=ti.cpu, random_seed=config.seed)
    else:
        try:
            ti.init(arch=ti.gpu, random_seed=config.seed)
        except Exception:
            ti.init(arch=ti.cpu, random_seed=config.seed)


def render_spheres(args: argparse.Namespace, config: RenderConfig) -> None:
    """Build the scene, render it and write the image.

    Args:
        args: Parsed command-line arguments.
        config: Validated render configuration; Taichi must already be
            initialized with its seed.
    """
    # Lazy imports to allow Taichi initialization first
    from pathweave.camera.pinhole import setup_camera
    from pathweave.core.renderer import Renderer
    from pathweave.scene.default_world import create_default_scene

    _, camera = create_default_scene(
        aspect_ratio=config.aspect_ratio,
        include_metal=not args.no_metal,
    )
    setup_camera(camera)

    renderer = Renderer(config)

    def progress_callback(remaining: int, total: int) -> None:
        if not args.quiet:
            print(f"\rScanlines remaining: {remaining} ", end="", file=sys.stderr, flush=True)

    start_time = time.time()

    if args.output == "-":
        renderer.render_to_stream(sys.stdout, callback=progress_callback)
    else:
        renderer.render(callback=progress_callback)
        renderer.save_image(args.output)

    if not args.quiet:
        print("\nDone.", file=sys.stderr)
        print(f"Total time: {time.time() - start_time:.2f}s", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = build_config(args)
        init_taichi(config, cpu=args.cpu)
        render_spheres(args, config)
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
