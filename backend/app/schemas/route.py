"""
Pydantic schemas for routes and route sources.

A route arrives already parsed: an ordered point sequence with cumulative
distance from the start, plus the total distance. The planner treats it as
read-only input.
"""
from pydantic import BaseModel, Field, TypeAdapter
from typing import Annotated, List, Literal, Union
import enum


class RouteVariant(str, enum.Enum):
    """EuroVelo route variant."""
    FULL = "full"
    DEVELOPED = "developed"


class Coordinate(BaseModel):
    """A latitude/longitude pair."""
    latitude: float
    longitude: float

    model_config = {"frozen": True}


class RoutePoint(Coordinate):
    """A route point with its cumulative distance from the start in km."""
    distance_from_start_km: float = 0.0


class Route(BaseModel):
    """An already-parsed route."""
    id: str
    name: str
    points: List[RoutePoint] = []
    total_distance_km: float = Field(ge=0)

    model_config = {"frozen": True}


class EuroVeloSource(BaseModel):
    type: Literal["eurovelo"] = "eurovelo"
    eurovelo_id: int
    variant: RouteVariant = RouteVariant.FULL


class CustomRouteSource(BaseModel):
    type: Literal["custom"] = "custom"
    custom_route_id: str


class ImportedRouteSource(BaseModel):
    type: Literal["imported"] = "imported"
    name: str


RouteSource = Annotated[
    Union[EuroVeloSource, CustomRouteSource, ImportedRouteSource],
    Field(discriminator="type"),
]

route_source_adapter = TypeAdapter(RouteSource)


def route_source_display_name(source: RouteSource) -> str:
    """Name shown for the route a trip follows."""
    if isinstance(source, EuroVeloSource):
        return f"EuroVelo {source.eurovelo_id}"
    if isinstance(source, CustomRouteSource):
        return "Custom Route"
    if isinstance(source, ImportedRouteSource):
        return source.name
    raise TypeError(f"Unknown route source: {source!r}")


def route_source_label(source: RouteSource) -> str:
    """Short badge label for a route source."""
    if isinstance(source, EuroVeloSource):
        return f"EuroVelo {source.eurovelo_id}"
    if isinstance(source, CustomRouteSource):
        return "My Route"
    if isinstance(source, ImportedRouteSource):
        return "Imported"
    raise TypeError(f"Unknown route source: {source!r}")
