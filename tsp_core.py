"""
TSP Map Editor - Core Module
Contains the fundamental data structures for the editable city map.
"""

import math
import numpy as np
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple


Point = Tuple[float, float]


class City:
    """Represents a city with x, y world coordinates. Never moved once placed."""

    def __init__(self, x: float, y: float):
        self.x = float(x)
        self.y = float(y)

    def distance_to(self, city: 'City') -> float:
        """Calculate Euclidean distance to another city."""
        return math.hypot(self.x - city.x, self.y - city.y)

    def as_point(self) -> Point:
        return (self.x, self.y)

    def __repr__(self):
        return f"City({self.x:.2f}, {self.y:.2f})"

    def __eq__(self, other):
        if not isinstance(other, City):
            return False
        return self.x == other.x and self.y == other.y

    def __hash__(self):
        return hash((self.x, self.y))


class CitySet:
    """
    Ordered collection of cities.

    The position of a city in the set is its identifier everywhere else:
    distance matrix rows and columns and the indices of a solver tour.
    Removing a city shifts every later city down by one.
    """

    def __init__(self, cities: Iterable[City] = ()):
        self._cities: List[City] = list(cities)

    def add(self, point: Point) -> int:
        """Append a city at a world point and return its index."""
        self._cities.append(City(point[0], point[1]))
        return len(self._cities) - 1

    def extend(self, cities: Iterable[City]):
        self._cities.extend(cities)

    def hit_test(self, point: Point, tolerance: float) -> Optional[int]:
        """
        Return the index of the first city closer than `tolerance` to `point`.

        Args:
            point: Query point in world coordinates
            tolerance: Hit radius in world units

        Returns:
            Index in storage order, or None when nothing is in range
        """
        query = City(point[0], point[1])
        for i, city in enumerate(self._cities):
            if city.distance_to(query) < tolerance:
                return i
        return None

    def remove_near(self, point: Point, tolerance: float) -> bool:
        """Remove the city hit at `point`, if any."""
        index = self.hit_test(point, tolerance)
        if index is None:
            return False
        del self._cities[index]
        return True

    def clear(self):
        self._cities = []

    def snapshot(self) -> Tuple[City, ...]:
        """Immutable copy of the current cities."""
        return tuple(self._cities)

    def restore(self, snapshot: Sequence[City]):
        self._cities = list(snapshot)

    def __len__(self):
        return len(self._cities)

    def __iter__(self) -> Iterator[City]:
        return iter(self._cities)

    def __getitem__(self, index):
        return self._cities[index]

    def __eq__(self, other):
        if not isinstance(other, CitySet):
            return False
        return self._cities == other._cities

    def __repr__(self):
        return f"CitySet(cities={len(self._cities)})"


class Tour:
    """Represents a tour returned by the solver as an ordered list of city indices."""

    def __init__(self, indices: Iterable[int] = None):
        self.indices: List[int] = list(indices) if indices is not None else []

    def segments(self, cities: CitySet) -> List[Tuple[City, City]]:
        """
        Pairs of successive cities along the tour.

        Pairs that reference an index outside the current city set are
        skipped, and nothing is returned for fewer than two cities.
        """
        n = len(cities)
        if n < 2:
            return []
        pairs = []
        for a, b in zip(self.indices, self.indices[1:]):
            if 0 <= a < n and 0 <= b < n:
                pairs.append((cities[a], cities[b]))
        return pairs

    def get_total_distance(self, matrix: 'DistanceMatrix') -> float:
        """Sum the matrix distances over every valid successive pair."""
        total = 0.0
        for a, b in zip(self.indices, self.indices[1:]):
            if 0 <= a < matrix.n and 0 <= b < matrix.n:
                total += matrix.get_distance_by_index(a, b)
        return total

    def __len__(self):
        return len(self.indices)

    def __eq__(self, other):
        if not isinstance(other, Tour):
            return False
        return self.indices == other.indices

    def __repr__(self):
        return f"Tour({self.indices})"


def round_half_away_from_zero(values: np.ndarray, decimals: int) -> np.ndarray:
    """Round to `decimals` places with halves moving away from zero."""
    factor = 10.0 ** decimals
    return np.sign(values) * np.floor(np.abs(values) * factor + 0.5) / factor


def build_distance_matrix(cities: Sequence[City], decimals: int = 2) -> np.ndarray:
    """
    Build the full n x n Euclidean distance matrix for `cities`.

    Distances are rounded to `decimals` places, the diagonal is exactly 0
    and any non-finite distance becomes 0.
    """
    n = len(cities)
    if n == 0:
        return np.zeros((0, 0))
    coords = np.array([[c.x, c.y] for c in cities], dtype=float)
    with np.errstate(invalid="ignore", over="ignore"):
        delta = coords[:, np.newaxis, :] - coords[np.newaxis, :, :]
        dist = np.hypot(delta[..., 0], delta[..., 1])
    dist = np.where(np.isfinite(dist), dist, 0.0)
    dist = round_half_away_from_zero(dist, decimals)
    np.fill_diagonal(dist, 0.0)
    # fold onto the upper triangle so rounding noise can never break symmetry
    upper = np.triu(dist)
    return upper + upper.T


class DistanceMatrix:
    """Precomputed distance matrix for the current city set."""

    def __init__(self, cities: Sequence[City], decimals: int = 2):
        self.n = len(cities)
        self.decimals = decimals
        self.matrix = build_distance_matrix(cities, decimals)

    def get_distance_by_index(self, i: int, j: int) -> float:
        """Get distance by city indices."""
        return float(self.matrix[i][j])

    def to_list(self) -> List[List[float]]:
        """Nested lists, ready for JSON."""
        return self.matrix.tolist()

    def __len__(self):
        return self.n

    def __repr__(self):
        return f"DistanceMatrix(n={self.n})"
