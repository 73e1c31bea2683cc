"""
TSP Map Editor - Controller
Owns the editor state and is the only place it is changed.

Every change to the city set goes through one path: snapshot for undo,
drop the current tour, rebuild the distance matrix, redraw. Viewport
changes only redraw.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from config import EditorConfig
from data_generator import generate_circle_cities, generate_random_cities
from history import HistoryManager
from interaction import (
    Click, Idle, Pan, PointerState, is_panning,
    pointer_down, pointer_move, pointer_up,
)
from solver_channel import SolverChannel, SolverParameters, parse_path_message
from tsp_core import City, CitySet, DistanceMatrix, Point, Tour
from viewport import Viewport

logger = logging.getLogger(__name__)

CURSOR_IDLE = "crosshair"
CURSOR_OVER_CITY = "hand2"
CURSOR_PANNING = "fleur"


@dataclass
class EditorState:
    """Everything the renderer needs to draw one frame."""
    cities: CitySet
    viewport: Viewport
    matrix: DistanceMatrix
    tour: Optional[Tour] = None
    generation: int = 0
    pointer: PointerState = field(default_factory=Idle)
    cursor: str = CURSOR_IDLE


class MapEditor:
    """Controller for the city map: editing, history, view and solver sync."""

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        channel: Optional[SolverChannel] = None,
        on_redraw: Optional[Callable[[EditorState], None]] = None,
    ):
        self.config = config or EditorConfig()
        self.channel = channel
        self.on_redraw = on_redraw
        self.params: Optional[SolverParameters] = (
            self.config.solver_parameters() if self.config.send_params else None
        )
        self.history = HistoryManager(limit=self.config.history_limit)
        self.state = EditorState(
            cities=CitySet(),
            viewport=Viewport(self.config.min_scale, self.config.max_scale),
            matrix=DistanceMatrix([], self.config.distance_decimals),
        )
        # generation of the city set when the last solve request went out
        self._solve_generation: Optional[int] = None

    # --------------------------------------------------------
    # Internal mutation path
    # --------------------------------------------------------
    def redraw(self):
        if self.on_redraw is not None:
            self.on_redraw(self.state)

    def _mutate(self, change: Callable[[], None]):
        self.history.snapshot(self.state.cities.snapshot())
        change()
        self._cities_changed()

    def _cities_changed(self):
        self.state.tour = None
        self.state.generation += 1
        self.state.matrix = DistanceMatrix(list(self.state.cities), self.config.distance_decimals)
        self.redraw()

    def _world_tolerance(self) -> float:
        return self.config.hit_tolerance / self.state.viewport.scale

    # --------------------------------------------------------
    # City editing
    # --------------------------------------------------------
    @property
    def cities(self) -> CitySet:
        return self.state.cities

    @property
    def tour(self) -> Optional[Tour]:
        return self.state.tour

    @property
    def matrix(self) -> DistanceMatrix:
        return self.state.matrix

    def hit_test(self, world: Point) -> Optional[int]:
        return self.state.cities.hit_test(world, self._world_tolerance())

    def add_city(self, world: Point) -> int:
        self._mutate(lambda: self.state.cities.add(world))
        return len(self.state.cities) - 1

    def remove_city_near(self, world: Point) -> bool:
        """Remove the first city within click range of `world`."""
        if self.hit_test(world) is None:
            return False
        tolerance = self._world_tolerance()
        self._mutate(lambda: self.state.cities.remove_near(world, tolerance))
        return True

    def click(self, screen: Point):
        """A click removes the city under the pointer, or adds one there."""
        world = self.state.viewport.to_world(screen)
        if not self.remove_city_near(world):
            self.add_city(world)

    def add_random_cities(self, n: int, width: int, height: int, margin: float = 20.0, rng=None) -> bool:
        """Add `n` random cities inside the visible area as a single undo step."""
        if n <= 0:
            return False
        min_x, min_y, max_x, max_y = self.state.viewport.visible_world_bounds(width, height)
        pad = margin / self.state.viewport.scale
        new_cities = generate_random_cities(
            n, min_x + pad, min_y + pad, max(max_x - pad, min_x + pad), max(max_y - pad, min_y + pad), rng=rng
        )
        self._mutate(lambda: self.state.cities.extend(new_cities))
        return True

    def clear_cities(self) -> bool:
        if not self.state.cities:
            return False
        self._mutate(self.state.cities.clear)
        return True

    def load_cities(self, cities: List[City]):
        """Replace the city set without recording history (start-up seeding)."""
        self.state.cities.restore(cities)
        self.history.clear()
        self._cities_changed()

    def seed_cities(self, n: int, pattern: str, width: float, height: float, margin: float = 20.0, rng=None):
        """Place `n` start-up cities across a canvas of the given size."""
        if n <= 0:
            return
        if pattern == 'circle':
            radius = min(width, height) * 0.4
            cities = generate_circle_cities(n, radius=radius, center_x=width / 2, center_y=height / 2)
        else:
            cities = generate_random_cities(
                n, margin, margin, max(width - margin, margin), max(height - margin, margin), rng=rng
            )
        self.load_cities(cities)

    # --------------------------------------------------------
    # History
    # --------------------------------------------------------
    def undo(self) -> bool:
        snapshot = self.history.undo(self.state.cities.snapshot())
        if snapshot is None:
            return False
        self.state.cities.restore(snapshot)
        self._cities_changed()
        return True

    def redo(self) -> bool:
        snapshot = self.history.redo(self.state.cities.snapshot())
        if snapshot is None:
            return False
        self.state.cities.restore(snapshot)
        self._cities_changed()
        return True

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    # --------------------------------------------------------
    # Viewport
    # --------------------------------------------------------
    def pan(self, dx: float, dy: float):
        self.state.viewport.pan(dx, dy)
        self.redraw()

    def zoom_at(self, screen: Point, factor: float):
        self.state.viewport.zoom_at(screen, factor)
        self.redraw()

    def wheel(self, screen: Point, steps: float):
        """Zoom in for positive wheel steps, out for negative ones."""
        if steps:
            self.zoom_at(screen, self.config.zoom_step ** steps)

    def reset_view(self):
        self.state.viewport.reset()
        self.redraw()

    # --------------------------------------------------------
    # Pointer gestures
    # --------------------------------------------------------
    def pointer_down(self, screen: Point):
        self.state.pointer, _ = pointer_down(self.state.pointer, screen)

    def pointer_move(self, screen: Point):
        if isinstance(self.state.pointer, Idle):
            self._update_hover(screen)
            return
        self.state.pointer, action = pointer_move(self.state.pointer, screen, self.config.drag_threshold)
        if isinstance(action, Pan):
            self.state.cursor = CURSOR_PANNING
            self.pan(action.dx, action.dy)

    def pointer_up(self, screen: Point):
        self.state.pointer, action = pointer_up(self.state.pointer, screen)
        if isinstance(action, Click):
            self.click(action.point)
        self._update_hover(screen)

    def _update_hover(self, screen: Point):
        if is_panning(self.state.pointer):
            self.state.cursor = CURSOR_PANNING
            return
        world = self.state.viewport.to_world(screen)
        self.state.cursor = CURSOR_OVER_CITY if self.hit_test(world) is not None else CURSOR_IDLE

    # --------------------------------------------------------
    # Solver
    # --------------------------------------------------------
    def request_solve(self) -> bool:
        """
        Send the current distance matrix to the solver.

        Returns:
            True if the request left on an open connection. Nothing is sent
            for an empty map or when no channel is attached.
        """
        if not self.state.cities:
            logger.info("No cities placed, solve request not sent")
            return False
        if self.channel is None:
            logger.warning("No solver channel attached")
            return False
        self._solve_generation = self.state.generation
        return self.channel.send_solve_request(self.state.matrix.to_list(), self.params)

    def set_parameters(self, params: SolverParameters):
        self.params = params

    def apply_solver_path(self, indices: List[int]) -> bool:
        """Replace the current tour with one from the solver and redraw."""
        if (self.config.discard_stale_paths and self._solve_generation is not None
                and self._solve_generation != self.state.generation):
            logger.info("Discarding solver path for an outdated city set")
            return False
        self.state.tour = Tour(indices)
        self.redraw()
        return True

    def apply_solver_message(self, raw) -> bool:
        indices = parse_path_message(raw)
        if indices is None:
            return False
        return self.apply_solver_path(indices)

    def process_solver_updates(self) -> bool:
        """Drain the channel queue; only the newest path is applied."""
        if self.channel is None:
            return False
        paths = self.channel.poll()
        if not paths:
            return False
        return self.apply_solver_path(paths[-1])

    # --------------------------------------------------------
    # Readouts
    # --------------------------------------------------------
    def tour_length(self) -> Optional[float]:
        if self.state.tour is None:
            return None
        return self.state.tour.get_total_distance(self.state.matrix)

    def status_text(self) -> str:
        text = f"Cities: {len(self.state.cities)}"
        if self.channel is not None:
            text += "  |  Solver: " + ("connected" if self.channel.connected else "offline")
        length = self.tour_length()
        text += f"  |  Tour: {length:.2f}" if length is not None else "  |  Tour: -"
        return text
