import numpy as np
from typing import List, Optional

from tsp_core import City


def generate_random_cities(
    n: int,
    min_x: float = 0,
    min_y: float = 0,
    max_x: float = 100,
    max_y: float = 100,
    rng: Optional[np.random.Generator] = None,
) -> List[City]:
    """
    Generate cities uniformly inside a rectangle.

    Args:
        n: Number of cities to generate
        min_x, min_y, max_x, max_y: Bounds of the area
        rng: Optional numpy generator for reproducible layouts

    Returns:
        List of randomly placed cities
    """
    rng = rng or np.random.default_rng()
    xs = rng.uniform(min_x, max_x, size=n)
    ys = rng.uniform(min_y, max_y, size=n)
    return [City(x, y) for x, y in zip(xs, ys)]


def generate_circle_cities(n: int, radius: float = 50, center_x: float = 50, center_y: float = 50) -> List[City]:
    """Generate cities evenly spaced on a circle."""
    cities = []
    for i in range(n):
        angle = 2 * np.pi * i / n
        x = center_x + radius * np.cos(angle)
        y = center_y + radius * np.sin(angle)
        cities.append(City(x, y))
    return cities
