"""
Main script for seamless texture generation.
Usage: python main.py --input photo.jpg --output-dir results --method scattered --tiles 3
"""

import argparse
import os
import time
import matplotlib
import numpy as np

# Figures are only written to files
matplotlib.use('Agg')

from seamless_texture import (AveragingSettings, CropSettings, OutputFormat, OutputSpec,
                              ProcessingError, SeamlessMethod, decode_image, process_texture)
from seamless_texture.evaluation import evaluate_seamlessness
from seamless_texture.utils import load_texture, save_bytes, save_image, visualize_results

# Same limit the upload form enforces
MAX_INPUT_BYTES = 10 * 1024 * 1024


def build_parser():
    parser = argparse.ArgumentParser(description='Seamless Texture Generator')
    parser.add_argument('--input', type=str, required=True, help='Input image path')
    parser.add_argument('--output-dir', type=str, default='results', help='Output directory')
    parser.add_argument('--method', type=str, default=SeamlessMethod.SCATTERED.value,
                        choices=[m.value for m in SeamlessMethod], help='Synthesis method')
    parser.add_argument('--tiles', type=int, default=2, choices=[1, 2, 3],
                        help='Preview grid size (N x N)')
    parser.add_argument('--mark-seams', action='store_true', help='Outline tiles in the preview')
    parser.add_argument('--crop-top', type=int, default=0, help='Pixels to crop from the top')
    parser.add_argument('--crop-bottom', type=int, default=0, help='Pixels to crop from the bottom')
    parser.add_argument('--crop-left', type=int, default=0, help='Pixels to crop from the left')
    parser.add_argument('--crop-right', type=int, default=0, help='Pixels to crop from the right')
    parser.add_argument('--intensity', type=float, default=0,
                        help='Lighting averaging strength (0-100, 0 disables)')
    parser.add_argument('--radius', type=float, default=5, help='Averaging blur radius (1-20)')
    parser.add_argument('--format', type=str, default='jpeg', choices=['jpeg', 'png'],
                        help='Output format')
    parser.add_argument('--quality', type=int, default=92, help='JPEG quality (1-100)')
    parser.add_argument('--seed', type=int, default=None, help='Seed for patch placement')
    parser.add_argument('--visualize', type=str, default=None,
                        help='Save a side-by-side comparison figure to this path')
    parser.add_argument('--evaluate', action='store_true', help='Print seam quality metrics')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if not os.path.isfile(args.input):
        print(f"Error: Input file '{args.input}' not found.")
        return 1
    if os.path.getsize(args.input) > MAX_INPUT_BYTES:
        print("Error: File size exceeds 10MB limit.")
        return 1

    try:
        crop = CropSettings(top=args.crop_top, bottom=args.crop_bottom,
                            left=args.crop_left, right=args.crop_right)
        averaging = AveragingSettings(intensity=args.intensity, radius=args.radius)
        output = OutputSpec(format=OutputFormat.parse(args.format), quality=args.quality)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    print(f"Loading image from: {args.input}")
    with open(args.input, 'rb') as f:
        source = f.read()

    print(f"Algorithm parameters:")
    print(f"  Method: {args.method}")
    print(f"  Tiles: {args.tiles}x{args.tiles}")
    print(f"  Crop: {crop}")
    print(f"  Averaging: {averaging}")
    print(f"  Output: {output.format.name} (quality {output.quality})")

    print("\nStarting texture generation...")
    start_time = time.time()
    try:
        result = process_texture(
            source,
            method=args.method,
            tile_format=args.tiles,
            mark_seams=args.mark_seams,
            crop_settings=crop,
            averaging=averaging,
            output=output,
            rng=np.random.default_rng(args.seed),
            verbose=True
        )
    except ProcessingError as e:
        print(f"Error during processing: {e}")
        return 1
    print(f"Generation completed in {time.time() - start_time:.2f} seconds")

    name = os.path.splitext(os.path.basename(args.input))[0]
    ext = output.format.extension
    seamless_path = os.path.join(args.output_dir, f"{name}_seamless{ext}")
    preview_path = os.path.join(args.output_dir, f"{name}_preview{ext}")
    save_bytes(result.seamless_image, seamless_path)
    save_bytes(result.preview_image, preview_path)
    print(f"Saved {result.width}x{result.height} texture to: {seamless_path}")
    print(f"Saved preview to: {preview_path}")

    if args.evaluate or args.visualize:
        original = load_texture(args.input)
        seamless = decode_image(result.seamless_image).rgb()

        if args.evaluate:
            evaluate_seamlessness(original, seamless, verbose=True)

        if args.visualize:
            preview = decode_image(result.preview_image).rgb()
            try:
                figure = visualize_results(original, seamless, preview,
                                           f"Seamless Texture ({args.method})")
                save_image(figure, args.visualize)
                print(f"Saved visualization to: {args.visualize}")
            except (OSError, ValueError) as e:
                print(f"Visualization error: {e}. Result still saved.")

    return 0


if __name__ == "__main__":
    import sys
    sys.exit(main())
