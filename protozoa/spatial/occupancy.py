"""Dense grid-to-organism-id index."""

from typing import List

from protozoa.spatial.grid import GridGeometry, Point

EMPTY = -1


class OccupancyGrid:
    """Maps each grid cell to the id of the organism occupying it.

    The grid is stored column-major (``cells[x][y]``) and holds ``EMPTY``
    for vacant cells. It does not enforce that an id appears only once;
    the organism manager keeps it consistent with organism locations.
    """

    def __init__(self, geometry: GridGeometry):
        self.geometry = geometry
        self.cells: List[List[int]] = [
            [EMPTY] * geometry.height for _ in range(geometry.width)
        ]
        self._occupied = 0

    def get(self, point: Point) -> int:
        return self.cells[point.x][point.y]

    def is_empty(self, point: Point) -> bool:
        return self.cells[point.x][point.y] == EMPTY

    def set(self, point: Point, organism_id: int) -> None:
        if self.cells[point.x][point.y] == EMPTY:
            self._occupied += 1
        self.cells[point.x][point.y] = organism_id

    def clear(self, point: Point) -> None:
        if self.cells[point.x][point.y] != EMPTY:
            self._occupied -= 1
        self.cells[point.x][point.y] = EMPTY

    def move(self, source: Point, target: Point) -> None:
        """Relocate the occupant of ``source`` to ``target``."""
        organism_id = self.get(source)
        self.clear(source)
        self.set(target, organism_id)

    def occupied_count(self) -> int:
        return self._occupied
