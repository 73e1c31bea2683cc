from typing import Tuple

Point = Tuple[float, float]


class Viewport:
    """Pan/zoom transform between screen pixels and world coordinates."""

    def __init__(self, min_scale: float = 0.1, max_scale: float = 2.0):
        if min_scale <= 0 or min_scale > max_scale:
            raise ValueError(f"Invalid scale bounds: [{min_scale}, {max_scale}]")
        self.min_scale = min_scale
        self.max_scale = max_scale
        self.offset_x: float = 0.0
        self.offset_y: float = 0.0
        self.scale: float = self._clamp(1.0)

    def _clamp(self, scale: float) -> float:
        return max(self.min_scale, min(self.max_scale, scale))

    def to_screen(self, p: Point) -> Point:
        return (p[0] * self.scale + self.offset_x, p[1] * self.scale + self.offset_y)

    def to_world(self, p: Point) -> Point:
        return ((p[0] - self.offset_x) / self.scale, (p[1] - self.offset_y) / self.scale)

    def pan(self, dx: float, dy: float):
        self.offset_x += dx
        self.offset_y += dy

    def zoom_at(self, screen_point: Point, factor: float):
        """Scale by `factor` keeping the world point under `screen_point` fixed."""
        wx, wy = self.to_world(screen_point)
        self.scale = self._clamp(self.scale * factor)
        self.offset_x = screen_point[0] - wx * self.scale
        self.offset_y = screen_point[1] - wy * self.scale

    def reset(self):
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.scale = self._clamp(1.0)

    def visible_world_bounds(self, width: int, height: int) -> Tuple[float, float, float, float]:
        """Return (min_x, min_y, max_x, max_y) of the world region on screen."""
        min_x, min_y = self.to_world((0, 0))
        max_x, max_y = self.to_world((width, height))
        return min_x, min_y, max_x, max_y

    def __repr__(self):
        return f"Viewport(offset=({self.offset_x:.1f}, {self.offset_y:.1f}), scale={self.scale:.3f})"
