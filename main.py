#!/usr/bin/env python3
# /smartcomment/main.py
"""
smartcomment Main Entry Point
=============================

Runs the command line straight from a source checkout:

    ./main.py ~/.config/alacritty/alacritty.toml dark

1) Path Setup: makes the `smartcomment` package under `src/` importable.
2) CLI: hands over to the click command, which loads the environment,
   configuration and logging itself.

Installed copies use the `smartcomment` / `smc` console scripts instead.
"""

import os
import sys

# Ensure the 'smartcomment' package is importable for source runs.
project_root = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from smartcomment.cli import main  # noqa: E402


if __name__ == "__main__":
    main()
