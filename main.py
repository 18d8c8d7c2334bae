#!/usr/bin/env python3
"""
raytracing - A Python Path Tracer

Main entry point for rendering scenes.
"""

import argparse
import logging
import sys
import time

from raytracing.renderer import Renderer, RenderSettings, RenderError
from raytracing.scenes import random_scene, material_scene, default_camera, material_camera
from raytracing.scene_parser import load_scene, SceneParseError
from raytracing.image import save_image

logger = logging.getLogger("raytracing.cli")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='raytracing - A Python Path Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --output dist/image.ppm
  python main.py --width 1200 --aspect 1.5 --samples 500 --output dist/cover.png
  python main.py --scene materials --samples 50 --output dist/materials.ppm
  python main.py --scene-file scenes/example.yaml --output dist/example.png
        '''
    )

    parser.add_argument('--width', type=int, default=400, help='Image width (default: 400)')
    parser.add_argument('--aspect', type=float, default=16.0 / 9.0,
                        help='Aspect ratio, height is derived from it (default: 16/9)')
    parser.add_argument('--samples', type=int, default=100, help='Samples per pixel (default: 100)')
    parser.add_argument('--depth', type=int, default=50, help='Max ray depth (default: 50)')
    parser.add_argument('--threads', type=int, default=0, help='Number of threads (0=auto)')
    parser.add_argument('--output', type=str, default='dist/image.ppm', help='Output filename')
    parser.add_argument('--scene', type=str, default='random', choices=['random', 'materials'],
                        help='Built-in scene to render (default: random)')
    parser.add_argument('--scene-file', type=str, default=None,
                        help='YAML/JSON scene file; overrides --scene and the render flags')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log every finished scanline')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    # Print header
    print("=" * 60)
    print("raytracing")
    print("=" * 60)

    if args.scene_file:
        print(f"\nLoading scene file: {args.scene_file}")
        try:
            world, camera, settings = load_scene(args.scene_file)
        except SceneParseError:
            logger.exception("Could not load scene file %s", args.scene_file)
            raise
    else:
        settings = RenderSettings(
            width=args.width,
            aspect_ratio=args.aspect,
            samples_per_pixel=args.samples,
            max_depth=args.depth,
            num_threads=args.threads
        )
        print(f"\nCreating scene: {args.scene}")
        if args.scene == 'materials':
            world = material_scene()
            camera = material_camera(settings.aspect_ratio)
        else:
            world = random_scene()
            camera = default_camera(settings.aspect_ratio)

    print(f"  Objects in scene: {len(world)}")
    print(f"\nRender Settings:")
    print(f"  Resolution: {settings.width}x{settings.height}")
    print(f"  Samples: {settings.samples_per_pixel}")
    print(f"  Max Depth: {settings.max_depth}")
    print(f"  Threads: {settings.workers}")

    renderer = Renderer(settings)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    if not args.verbose:
        renderer.set_progress_callback(progress_callback)

    # Render
    print("\nRendering...")
    start_time = time.time()

    try:
        pixels = renderer.render(world, camera)
    except RenderError:
        logger.exception("Render aborted")
        raise

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")
    print(f"  Rays per second: {(settings.width * settings.height * settings.samples_per_pixel) / max(elapsed, 1e-9):.0f}")

    print(f"\nSaving to: {args.output}")
    save_image(args.output, pixels, settings.width, settings.height)

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
