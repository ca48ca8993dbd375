"""Data models for station and system dump records."""

import math
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_serializer, field_validator, model_validator

from src.data_model import DumpModel
from src.stations.constants import TIMESTAMP_FORMAT


class Coords(DumpModel):
    """Position in galactic coordinates (light years)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def from_sequence(cls, data: Any) -> Any:
        """Accept ``[x, y, z]`` as written by the game journal."""
        if isinstance(data, list | tuple):
            if len(data) != 3:  # noqa: PLR2004
                msg = f"Coordinates need exactly 3 components, got {len(data)}"
                raise ValueError(msg)
            return {"x": data[0], "y": data[1], "z": data[2]}
        return data

    def distance_to(self, other: "Coords") -> float:
        """Straight-line distance to another position.

        Args:
            other: Position to measure to.

        Returns:
            Euclidean distance in light years.
        """
        return math.dist((self.x, self.y, self.z), (other.x, other.y, other.z))


class Category(str, Enum):
    """Independently timestamped station activity."""

    INFORMATION = "information"
    MARKET = "market"
    SHIPYARD = "shipyard"
    OUTFITTING = "outfitting"

    @property
    def flag(self) -> str:
        """One-letter flag used in rendered rows."""
        return self.value[0].upper()


def _parse_timestamp(value: Any) -> datetime | None:
    """Parse a dump timestamp, always returning an aware UTC datetime."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, str):
        return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=UTC)
    msg = f"Unsupported timestamp value: {value!r}"
    raise ValueError(msg)


class UpdateTime(DumpModel):
    """Last-update timestamps per category.

    Information is always present; the other categories are absent for
    stations that do not offer the service or were never scanned.
    """

    information: datetime
    market: datetime | None = None
    shipyard: datetime | None = None
    outfitting: datetime | None = None

    @field_validator("information", "market", "shipyard", "outfitting", mode="before")
    @classmethod
    def parse_timestamp(cls, value: Any) -> datetime | None:
        """Parse the dump's ``YYYY-MM-DD HH:MM:SS`` UTC format."""
        return _parse_timestamp(value)

    @field_serializer("information", "market", "shipyard", "outfitting")
    def serialize_timestamp(self, value: datetime | None) -> str | None:
        """Write timestamps back in the dump format."""
        if value is None:
            return None
        return value.astimezone(UTC).strftime(TIMESTAMP_FORMAT)

    def get(self, category: Category) -> datetime | None:
        """Get the timestamp for a category."""
        value: datetime | None = getattr(self, category.value)
        return value


class StationType(str, Enum):
    """Closed set of facility types found in the stations dump."""

    OCELLUS_STARPORT = "Ocellus Starport"
    ORBIS_STARPORT = "Orbis Starport"
    CORIOLIS_STARPORT = "Coriolis Starport"
    ASTEROID_BASE = "Asteroid base"
    MEGA_SHIP = "Mega ship"
    FLEET_CARRIER = "Fleet Carrier"
    OUTPOST = "Outpost"
    PLANETARY_PORT = "Planetary Port"
    PLANETARY_OUTPOST = "Planetary Outpost"
    ODYSSEY_SETTLEMENT = "Odyssey Settlement"

    @property
    def has_large_pad(self) -> bool:
        """Whether large ships can dock here."""
        return self not in _SMALL_PAD_TYPES

    @property
    def is_planetary(self) -> bool:
        """Whether the facility sits on a planet surface."""
        return self in _PLANETARY_TYPES

    @property
    def label(self) -> str:
        """Short display label."""
        return _TYPE_LABELS[self]


_SMALL_PAD_TYPES = frozenset({StationType.OUTPOST, StationType.ODYSSEY_SETTLEMENT})

_PLANETARY_TYPES = frozenset(
    {
        StationType.PLANETARY_PORT,
        StationType.PLANETARY_OUTPOST,
        StationType.ODYSSEY_SETTLEMENT,
    }
)

_TYPE_LABELS = {
    StationType.OCELLUS_STARPORT: "Ocellus",
    StationType.ORBIS_STARPORT: "Orbis",
    StationType.CORIOLIS_STARPORT: "Coriolis",
    StationType.ASTEROID_BASE: "Asteroid",
    StationType.MEGA_SHIP: "MegaShip",
    StationType.FLEET_CARRIER: "FleetCarrier",
    StationType.OUTPOST: "Outpost",
    StationType.PLANETARY_PORT: "PlanetaryPort",
    StationType.PLANETARY_OUTPOST: "PlanetaryOutpost",
    StationType.ODYSSEY_SETTLEMENT: "Settlement",
}


class Economy(str, Enum):
    """Station economy classification."""

    AGRICULTURE = "Agriculture"
    CARRIER = "Carrier"
    COLONY = "Colony"
    DAMAGED = "Damaged"
    ENGINEERING = "Engineering"
    EXTRACTION = "Extraction"
    HIGH_TECH = "High Tech"
    INDUSTRIAL = "Industrial"
    MILITARY = "Military"
    NONE = "None"
    PRISON = "Prison"
    PRIVATE_ENTERPRISE = "Private Enterprise"
    REFINERY = "Refinery"
    REPAIR = "Repair"
    RESCUE = "Rescue"
    SERVICE = "Service"
    TERRAFORMING = "Terraforming"
    TOURISM = "Tourism"


class Station(DumpModel):
    """One dockable facility from the stations dump.

    Attributes:
        id: Stable station identifier.
        market_id: Market identifier, matched against docking history.
        name: Display name.
        station_type: Facility type.
        distance_to_arrival: Distance from the arrival star in light seconds.
        system_id: Identifier of the containing system.
        system_name: Name of the containing system.
        economy: Primary economy.
        second_economy: Secondary economy.
        update_time: Per-category last-update timestamps.
        coords: System position; origin until joined with the coordinates index.
    """

    id: int
    market_id: int | None = None
    name: str
    station_type: StationType = Field(alias="type")
    distance_to_arrival: float | None = None
    system_id: int
    system_name: str
    economy: Economy | None = None
    second_economy: Economy | None = None
    update_time: UpdateTime
    coords: Coords = Field(default_factory=Coords)

    def with_coords(self, coords: Coords) -> "Station":
        """Return a copy placed at the given system position."""
        return self.model_copy(update={"coords": coords})


class SystemCoords(DumpModel):
    """Positional record from the populated systems dump."""

    id: int
    coords: Coords
