#!/usr/bin/env python3
"""Print the point density implied by `count` points inside a sphere.

Usage:
    python sphere_density.py -r 20 -c 50
"""

import argparse

from src.field import sphere_density


def main() -> None:
    parser = argparse.ArgumentParser(description="Density of count points in a sphere of radius r")
    parser.add_argument("-r", "--radius", type=float, default=20.0, help="Sphere radius")
    parser.add_argument("-c", "--count", type=float, default=50.0, help="Point count inside the sphere")
    args = parser.parse_args()

    try:
        print(sphere_density(args.radius, args.count))
    except ValueError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
