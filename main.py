"""
TSP Map Editor - Main Application
Place cities on a map and have a remote solver route them.
"""

import sys
from typing import List, Optional

from config import config_from_args, configure_logging


def main(argv: Optional[List[str]] = None):
    """Main entry point for the TSP map editor."""
    config = config_from_args(argv)
    configure_logging(config.log_level)

    print("=" * 60)
    print("TSP MAP EDITOR")
    print("=" * 60)
    print(f"Solver: {config.solver_url}")
    print("\nInstructions:")
    print("1. Click on the map to add a city, click a city to remove it")
    print("2. Drag to pan, scroll to zoom, Ctrl+Z / Ctrl+Y to undo / redo")
    print("3. Press Solve to send the map to the solver")
    print("=" * 60 + "\n")

    # tkinter is only loaded once the GUI actually starts
    from interactive_map import run
    run(config)


if __name__ == "__main__":
    sys.exit(main())
