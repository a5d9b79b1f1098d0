"""
Usage:
    $ python scripts/benchmark.py [--image_path cat.jpg] [--ratio 0.2] [--patch_size 16] [--number 100]
"""
import argparse
import sys
import timeit

import numpy as np
from PIL import Image

sys.path.append(".")

from fastmask.data import PatchMaskGenerator, load_image  # noqa: E402

parser = argparse.ArgumentParser(description="Patch mask transform benchmark")
parser.add_argument("--image_path", type=str, default=None, help="image to mask, a random 1024x1024 RGBA if unset")
parser.add_argument("--ratio", type=float, default=0.2)
parser.add_argument("--patch_size", type=int, default=16)
parser.add_argument("--number", type=int, default=100, help="number of timed calls")
args = parser.parse_args()

if args.image_path:
    image = load_image(args.image_path)
else:
    image = Image.fromarray(np.random.randint(0, 256, size=(1024, 1024, 4), dtype=np.uint8), "RGBA")
array = np.array(image)

generator = PatchMaskGenerator(args.ratio, args.patch_size)

for name, stmt in [
    ("PIL image", lambda: generator.transform(image)),
    ("ndarray", lambda: generator.transform(array.copy())),
]:
    total = timeit.timeit(stmt, number=args.number)
    print(f"transform/{name} {image.size[0]}x{image.size[1]}: {total / args.number * 1000:.3f} ms per call")
