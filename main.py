#!/usr/bin/env python3
"""
main.py - Quick-start entry point.

Put tile images into ``tiles/`` and sources into ``images/``, then run:

    python main.py batch

Or build a single mosaic:

    python main.py single my_photo.jpg --tiles tiles/ -o output/mosaic.png
    python -m tile_mosaic.cli single --help
"""

from tile_mosaic.cli import app

if __name__ == "__main__":
    app()
