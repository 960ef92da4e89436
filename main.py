#!/usr/bin/env python3
"""
main.py — Quick-start entry point.

With no arguments it runs the ``single`` command on its defaults: put a
``test.jpg`` next to this file and run:

    python main.py

to get ``result.jpg`` pixelated with 100x100 tiles. Or use the full CLI:

    python -m block_mosaic.cli single photo.png -o out.png --tile 16
    python -m block_mosaic.cli batch --help
"""

import sys

from block_mosaic.cli import app

if __name__ == "__main__":
    app(sys.argv[1:] or ["single"])
