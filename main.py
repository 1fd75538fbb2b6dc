#!/usr/bin/env python3
"""
Lumensphere - A Python Path Tracer

Main entry point for rendering scenes.
"""

import argparse
import logging
import sys
from pathlib import Path

from lumensphere.camera import Camera
from lumensphere.config import ConfigError
from lumensphere.image_io import save_image
from lumensphere.sampling import make_rng
from lumensphere.scenes import three_spheres, final_scene
from lumensphere.scene_parser import SceneParseError, load_scene

logger = logging.getLogger('lumensphere')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Lumensphere - A Python Path Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene three > image.ppm
  python main.py --scene final --width 400 --samples 20 --output final.png
  python main.py --scene-file scenes/demo.yaml --seed 7 --output demo.ppm
        '''
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument('--scene', type=str, default='three', choices=['three', 'final'],
                        help='Built-in scene to render (default: three)')
    source.add_argument('--scene-file', type=str, help='YAML or JSON scene description')

    parser.add_argument('--width', type=int, help='Image width in pixels')
    parser.add_argument('--samples', type=int, help='Samples per pixel')
    parser.add_argument('--depth', type=int, help='Max bounce depth')
    parser.add_argument('--seed', type=int, help='Random seed for a reproducible render')
    parser.add_argument('--output', type=str,
                        help='Output file (.ppm or any Pillow format); stdout PPM if omitted')
    parser.add_argument('--quiet', action='store_true', help='No progress bar')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')
    return parser


def make_progress_callback():
    """Progress bar on stderr; stdout carries the image."""
    def progress_callback(done: int, total: int):
        bar_len = 40
        filled = int(bar_len * done / total)
        bar = '█' * filled + '░' * (bar_len - filled)
        print(f'\rScanlines: [{bar}] {done}/{total}', end='', file=sys.stderr, flush=True)
        if done == total:
            print(file=sys.stderr)

    return progress_callback


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr
    )

    try:
        if args.scene_file:
            world, config = load_scene(args.scene_file)
        elif args.scene == 'final':
            world, config = final_scene(make_rng(args.seed))
        else:
            world, config = three_spheres()

        config = config.with_overrides(
            image_width=args.width,
            samples_per_pixel=args.samples,
            max_depth=args.depth,
            seed=args.seed
        )
    except (ConfigError, SceneParseError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    logger.info("Objects in scene: %d", len(world))
    camera = Camera.from_config(config)
    progress = None if args.quiet else make_progress_callback()

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        image = camera.render_image(world, progress)
        save_image(image, output_path)
        logger.info("Saved %s", output_path)
    else:
        camera.render(world, sys.stdout, progress)

    return 0


if __name__ == '__main__':
    sys.exit(main())
