"""
TSP Map Editor - Render Loop
Draws one frame of the editor state onto a Tk canvas.
"""

import math
from typing import Dict, Optional

from config import EditorConfig
from editor import EditorState

COLORS: Dict[str, str] = {
    'canvas': '#ffffff',
    'grid': '#ecf0f1',
    'city': '#e74c3c',
    'city_outline': '#c0392b',
    'label': '#ffffff',
    'path': '#3498db',
}


class CanvasRenderer:
    """
    Redraws the whole canvas from the editor state.

    Grid and tour are placed through the viewport transform. City markers
    are placed there too, but their radius and label size stay fixed in
    pixels at every zoom level.
    """

    def __init__(self, canvas, config: Optional[EditorConfig] = None, colors: Optional[Dict[str, str]] = None):
        self.canvas = canvas
        self.config = config or EditorConfig()
        self.colors = dict(COLORS, **(colors or {}))

    def __call__(self, state: EditorState):
        self.render(state)

    def render(self, state: EditorState):
        self.canvas.delete('all')
        width = int(self.canvas.winfo_width())
        height = int(self.canvas.winfo_height())
        if width <= 1 or height <= 1:
            return
        self.draw_grid(state, width, height)
        self.draw_tour(state)
        self.draw_cities(state)

    def draw_grid(self, state: EditorState, width: int, height: int):
        vp = state.viewport
        spacing = self.config.grid_spacing
        min_x, min_y, max_x, max_y = vp.visible_world_bounds(width, height)

        x = math.floor(min_x / spacing) * spacing
        while x <= max_x:
            sx, _ = vp.to_screen((x, 0))
            self.canvas.create_line(sx, 0, sx, height, fill=self.colors['grid'], tags='grid')
            x += spacing

        y = math.floor(min_y / spacing) * spacing
        while y <= max_y:
            _, sy = vp.to_screen((0, y))
            self.canvas.create_line(0, sy, width, sy, fill=self.colors['grid'], tags='grid')
            y += spacing

    def draw_tour(self, state: EditorState):
        if state.tour is None or len(state.cities) < 2:
            return
        vp = state.viewport
        for from_city, to_city in state.tour.segments(state.cities):
            x1, y1 = vp.to_screen(from_city.as_point())
            x2, y2 = vp.to_screen(to_city.as_point())
            self.canvas.create_line(x1, y1, x2, y2, fill=self.colors['path'], width=3, tags='tour')

    def draw_cities(self, state: EditorState):
        radius = self.config.marker_radius
        for i, city in enumerate(state.cities):
            sx, sy = state.viewport.to_screen(city.as_point())
            self.canvas.create_oval(
                sx - radius, sy - radius, sx + radius, sy + radius,
                fill=self.colors['city'],
                outline=self.colors['city_outline'],
                width=2,
                tags='city'
            )
            self.canvas.create_text(
                sx, sy,
                text=str(i + 1),
                fill=self.colors['label'],
                font=('Arial', 12),
                tags='city'
            )
