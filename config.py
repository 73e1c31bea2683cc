"""
TSP Map Editor - Configuration
Every tunable of the editor, filled in from the command line.
"""

import argparse
import logging
from dataclasses import dataclass
from typing import List, Optional

from solver_channel import SEND_POLICIES, SolverParameters


@dataclass
class EditorConfig:
    """Editor settings. Distances are in world units, tolerances in screen pixels."""

    # Solver connection
    solver_url: str = "ws://localhost:8080"
    alpha: float = 1.0
    beta: float = 3.0
    rho: float = 0.5
    send_params: bool = True
    send_policy: str = "queue"
    max_pending: int = 1
    reconnect_delay: float = 2.0
    discard_stale_paths: bool = True

    # Interaction
    hit_tolerance: float = 15.0
    drag_threshold: float = 5.0
    min_scale: float = 0.1
    max_scale: float = 2.0
    zoom_step: float = 1.1
    history_limit: Optional[int] = 200

    # Rendering
    grid_spacing: float = 50.0
    marker_radius: float = 10.0
    distance_decimals: int = 2
    poll_interval_ms: int = 50

    # Start-up
    seed_cities: int = 0
    pattern: str = "random"
    log_level: str = "INFO"

    def __post_init__(self):
        self.validate()

    def validate(self):
        if self.min_scale <= 0 or self.min_scale > self.max_scale:
            raise ValueError(f"Scale bounds must satisfy 0 < min <= max, got [{self.min_scale}, {self.max_scale}]")
        if self.send_policy not in SEND_POLICIES:
            raise ValueError(f"send_policy must be one of {SEND_POLICIES}, got {self.send_policy!r}")
        if self.hit_tolerance <= 0 or self.drag_threshold < 0:
            raise ValueError("hit_tolerance must be positive and drag_threshold non-negative")
        if self.zoom_step <= 1.0:
            raise ValueError(f"zoom_step must be greater than 1, got {self.zoom_step}")
        if self.grid_spacing <= 0:
            raise ValueError(f"grid_spacing must be positive, got {self.grid_spacing}")
        if self.max_pending < 1:
            raise ValueError(f"max_pending must be at least 1, got {self.max_pending}")
        if self.reconnect_delay <= 0:
            raise ValueError(f"reconnect_delay must be positive, got {self.reconnect_delay}")
        if self.distance_decimals < 0:
            raise ValueError(f"distance_decimals cannot be negative, got {self.distance_decimals}")
        if self.poll_interval_ms <= 0:
            raise ValueError(f"poll_interval_ms must be positive, got {self.poll_interval_ms}")
        if self.marker_radius <= 0:
            raise ValueError(f"marker_radius must be positive, got {self.marker_radius}")
        if self.seed_cities < 0:
            raise ValueError(f"seed_cities cannot be negative, got {self.seed_cities}")
        if self.pattern not in ("random", "circle"):
            raise ValueError(f"pattern must be 'random' or 'circle', got {self.pattern!r}")
        # raises on non-positive values
        self.solver_parameters()

    def solver_parameters(self) -> SolverParameters:
        return SolverParameters(alpha=self.alpha, beta=self.beta, rho=self.rho)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Interactive TSP map editor - place cities and solve tours with a remote solver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Connect to a solver on the default port
  python main.py

  # Start with 20 cities on a circle and a remote solver
  python main.py --cities 20 --pattern circle --url ws://solver.local:8080

  # Tune the search parameters sent with each request
  python main.py --alpha 1.5 --beta 4 --rho 0.3
        """
    )
    defaults = EditorConfig()

    parser.add_argument('--url', dest='solver_url', default=defaults.solver_url,
                        help=f'Solver WebSocket URL (default: {defaults.solver_url})')
    parser.add_argument('--alpha', type=float, default=defaults.alpha,
                        help=f'Solver alpha parameter (default: {defaults.alpha})')
    parser.add_argument('--beta', type=float, default=defaults.beta,
                        help=f'Solver beta parameter (default: {defaults.beta})')
    parser.add_argument('--rho', type=float, default=defaults.rho,
                        help=f'Solver rho parameter (default: {defaults.rho})')
    parser.add_argument('--no-params', dest='send_params', action='store_false',
                        help='Do not attach parameters to solve requests')
    parser.add_argument('--send-policy', choices=SEND_POLICIES, default=defaults.send_policy,
                        help='What to do with a solve request while disconnected (default: queue)')
    parser.add_argument('--reconnect-delay', type=float, default=defaults.reconnect_delay,
                        help=f'Seconds between reconnect attempts (default: {defaults.reconnect_delay})')
    parser.add_argument('--keep-stale', dest='discard_stale_paths', action='store_false',
                        help='Show solver results even if the cities changed since the request')

    parser.add_argument('--hit-tolerance', type=float, default=defaults.hit_tolerance,
                        help=f'City click radius in pixels (default: {defaults.hit_tolerance})')
    parser.add_argument('--drag-threshold', type=float, default=defaults.drag_threshold,
                        help=f'Pixels of movement before a press becomes a pan (default: {defaults.drag_threshold})')
    parser.add_argument('--min-scale', type=float, default=defaults.min_scale,
                        help=f'Minimum zoom (default: {defaults.min_scale})')
    parser.add_argument('--max-scale', type=float, default=defaults.max_scale,
                        help=f'Maximum zoom (default: {defaults.max_scale})')
    parser.add_argument('--grid', dest='grid_spacing', type=float, default=defaults.grid_spacing,
                        help=f'Grid spacing in world units (default: {defaults.grid_spacing})')
    parser.add_argument('--decimals', dest='distance_decimals', type=int, default=defaults.distance_decimals,
                        help=f'Decimal places kept in the distance matrix (default: {defaults.distance_decimals})')

    parser.add_argument('--cities', dest='seed_cities', type=int, default=defaults.seed_cities,
                        help='Number of cities to place at start-up (default: 0)')
    parser.add_argument('--pattern', choices=['random', 'circle'], default=defaults.pattern,
                        help='Start-up city placement pattern (default: random)')
    parser.add_argument('--log-level', default=defaults.log_level,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: INFO)')
    return parser


def config_from_args(argv: Optional[List[str]] = None,
                     parser: Optional[argparse.ArgumentParser] = None) -> EditorConfig:
    """Parse `argv` into an EditorConfig. Invalid combinations exit through the parser."""
    parser = parser or build_parser()
    args = parser.parse_args(argv)
    try:
        return EditorConfig(**vars(args))
    except ValueError as e:
        parser.error(str(e))


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
