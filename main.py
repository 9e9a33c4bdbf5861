#!/usr/bin/env python3
"""
main.py - Quick-start entry point.

Drop images into ``images/`` and run:

    python main.py batch

Or use the full CLI:

    python -m brick_mosaic.cli solve --help
    python -m brick_mosaic.cli solve bricks.txt my_sprite.png
    python -m brick_mosaic.cli catalog
"""

from brick_mosaic.cli import app

if __name__ == "__main__":
    app()
