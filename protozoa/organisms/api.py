"""Protocol interfaces between organisms, the manager and the world.

The organism manager implements ``WorldAPI`` as a facade over its own
occupancy index and the two external collaborators (food and pH). During
the decide pass organisms only see the ``LookupAPI`` half.
"""

from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from protozoa.spatial.grid import GridGeometry, Point

if TYPE_CHECKING:
    from protozoa.organisms.organism import Organism


@runtime_checkable
class FoodService(Protocol):
    """Per-cell food storage. Amounts are clamped by the implementation."""

    def food_at(self, point: Point) -> Optional[float]:
        """Food value at a cell, or None if there is no food item."""
        ...

    def add_food(self, point: Point, amount: float) -> float:
        """Add food at a cell and return the amount actually added."""
        ...

    def remove_food(self, point: Point, amount: float) -> float:
        """Remove food at a cell and return the amount actually removed."""
        ...


@runtime_checkable
class EnvironmentService(Protocol):
    """Per-cell pH levels."""

    def ph_at(self, point: Point) -> float:
        ...

    def change_ph(self, point: Point, delta: float) -> None:
        """Shift pH at a cell, clamped to the configured bounds."""
        ...


class LookupAPI(Protocol):
    """Read-only world queries available while organisms decide."""

    @property
    def geometry(self) -> GridGeometry:
        ...

    @property
    def cycle(self) -> int:
        ...

    def food_at(self, point: Point) -> Optional[float]:
        ...

    def ph_at(self, point: Point) -> float:
        ...

    def organism_at(self, point: Point) -> Optional["Organism"]:
        ...

    def is_organism_at(self, point: Point) -> bool:
        ...

    def is_cell_empty(self, point: Point) -> bool:
        """True when a cell holds neither an organism nor food."""
        ...

    def organism_count(self) -> int:
        ...


class ChangeAPI(Protocol):
    """World mutations applied during the resolve pass."""

    def add_food(self, point: Point, amount: float) -> float:
        ...

    def remove_food(self, point: Point, amount: float) -> float:
        ...

    def change_ph(self, point: Point, delta: float) -> None:
        ...


class WorldAPI(LookupAPI, ChangeAPI, Protocol):
    """Lookups and mutations together."""
