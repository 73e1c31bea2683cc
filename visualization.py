"""
TSP Map Editor - Visualization Module
Export the current map and tour as an image.
"""

from typing import Optional

from matplotlib.figure import Figure

from tsp_core import CitySet, DistanceMatrix, Tour


class MapVisualizer:
    """Plot cities and the current tour with matplotlib."""

    def __init__(self, figsize=(10, 8), dpi: int = 150):
        self.figsize = figsize
        self.dpi = dpi

    def plot_map(
        self,
        cities: CitySet,
        tour: Optional[Tour] = None,
        title: str = "TSP Map",
        matrix: Optional[DistanceMatrix] = None,
        save_path: Optional[str] = None
    ) -> Figure:
        """
        Plot the city map.

        Args:
            cities: Cities to draw, labelled 1..n like the editor
            tour: Optional tour drawn as successive segments
            title: Plot title
            matrix: Distance matrix used for the tour length in the title
            save_path: Optional path to save the figure

        Returns:
            The matplotlib figure
        """
        fig = Figure(figsize=self.figsize)
        ax = fig.add_subplot(111)

        if len(cities) == 0:
            ax.text(0.5, 0.5, 'No cities placed', ha='center', va='center',
                    fontsize=16, transform=ax.transAxes)
        else:
            if tour is not None:
                for from_city, to_city in tour.segments(cities):
                    ax.plot([from_city.x, to_city.x], [from_city.y, to_city.y],
                            'b-', linewidth=2, alpha=0.6, zorder=1)
                if matrix is not None:
                    title = f"{title}\nTour Length: {tour.get_total_distance(matrix):.2f}"

            xs = [c.x for c in cities]
            ys = [c.y for c in cities]
            ax.scatter(xs, ys, c='#e74c3c', s=200, zorder=3, edgecolors='#c0392b', linewidth=2)
            for i, city in enumerate(cities):
                ax.annotate(str(i + 1), (city.x, city.y), fontsize=9, ha='center', va='center',
                            color='white', weight='bold', zorder=4)

        ax.set_title(title, fontsize=14, weight='bold')
        ax.set_xlabel('X Coordinate', fontsize=12)
        ax.set_ylabel('Y Coordinate', fontsize=12)
        ax.grid(True, alpha=0.3)
        ax.set_aspect('equal')
        # screen y grows downwards; keep the same orientation as the editor
        ax.invert_yaxis()
        fig.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=self.dpi, bbox_inches='tight')

        return fig
