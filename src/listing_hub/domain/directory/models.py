"""Directory domain - Models.

Two families of models live here:

* Entity records (``Salon``, ``City``, ``State``, ``Category``) parsed from the
  CSV tables. They are frozen; each build stage returns annotated copies made
  with ``model_copy(update=...)`` instead of mutating what it received.
* View models (``SalonView``, ``CityView``, ``StateView``, ``CategoryView``)
  produced by the projection stage and consumed by the renderers and the
  JSON data dumps.
"""

import math
from typing import Any, Dict, List, Optional, Tuple, cast

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    model_validator,
)


class DirectoryRecord(BaseModel):
    """Base for CSV-backed entity records - lenient parsing."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    id: Optional[str] = Field(None, description="Opaque identifier, unique per kind")

    @model_validator(mode="before")
    @classmethod
    def convert_blank_to_none(cls, data: Any) -> Dict[str, Any]:
        """Treat empty cells and NaN as unset."""
        if not isinstance(data, dict):
            return cast(Dict[str, Any], data)
        return {
            k: None
            if v is None
            or (isinstance(v, float) and math.isnan(v))
            or (isinstance(v, str) and v == "")
            else v
            for k, v in data.items()
        }


class Salon(DirectoryRecord):
    """A business listing row from ``beauty_salon.csv``."""

    title: Optional[str] = None
    website: Optional[str] = None
    telephone: Optional[str] = None
    address: Optional[str] = None
    postal_code: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    email: Optional[str] = None
    opening_hours: Optional[str] = None
    description: Optional[str] = None
    service_product: Optional[str] = None
    reviews: Optional[str] = None
    average_star: Optional[str] = None

    city_id: Optional[str] = None
    city_name: Optional[str] = None
    state_id: Optional[str] = None
    state_name: Optional[str] = None

    # Comma-separated multi-value columns, split during projection
    category_ids: Optional[str] = None
    detail_keys: Optional[str] = None
    detail_values: Optional[str] = None
    amenity_ids: Optional[str] = None
    payment_ids: Optional[str] = None
    images: Optional[str] = None


class City(DirectoryRecord):
    """A city row; ``state_name`` and ``salon_count`` are derived."""

    name: Optional[str] = Field(
        None, validation_alias=AliasChoices("name", "city"), description="City name"
    )
    state_id: Optional[str] = None
    state_name: Optional[str] = None
    salon_count: int = 0


class State(DirectoryRecord):
    """A state row; ``city_count`` and ``salon_count`` are derived."""

    name: Optional[str] = Field(
        None, validation_alias=AliasChoices("name", "state"), description="State name"
    )
    city_count: int = 0
    salon_count: int = 0


class Category(DirectoryRecord):
    """A category row; ``salon_count`` is derived."""

    name: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("name", "category"),
        description="Category name",
    )
    salon_count: int = 0


# =============================================================================
# View models
# =============================================================================


class SalonView(BaseModel):
    """Denormalized listing consumed by company pages and ``salons.json``."""

    id: Optional[str] = None
    title: Optional[str] = None
    slug: str
    website: Optional[str] = None
    telephone: Optional[str] = None
    address: Optional[str] = None
    postal_code: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    email: Optional[str] = None
    opening_hours: Optional[str] = None
    description: Optional[str] = None
    service_product: Optional[str] = None
    reviews: Optional[str] = None
    average_star: Optional[str] = None
    city_id: Optional[str] = None
    city_name: Optional[str] = None
    state_id: Optional[str] = None
    state_name: Optional[str] = None
    category_ids: List[str] = Field(default_factory=list)
    detail_keys: List[str] = Field(default_factory=list)
    detail_values: List[str] = Field(default_factory=list)
    amenity_ids: List[str] = Field(default_factory=list)
    payment_ids: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)

    def coordinates(self) -> Optional[Tuple[float, float]]:
        """Return (latitude, longitude) when both parse as finite floats."""
        if not self.latitude or not self.longitude:
            return None
        try:
            lat = float(self.latitude)
            lng = float(self.longitude)
        except ValueError:
            return None
        if not (math.isfinite(lat) and math.isfinite(lng)):
            return None
        return lat, lng


class CityView(BaseModel):
    """City page model; ``salon_ids`` includes name-fallback matches."""

    id: Optional[str] = None
    name: Optional[str] = None
    slug: str
    state_id: Optional[str] = None
    state_name: Optional[str] = None
    salon_ids: List[str] = Field(default_factory=list)
    salon_count: int = 0

    # Positions in the projected salon list; not serialized
    _salon_positions: List[int] = PrivateAttr(default_factory=list)

    @property
    def salon_positions(self) -> List[int]:
        """Positions of member salons, aligned with ``salon_ids``."""
        return self._salon_positions


class StateView(BaseModel):
    """State page model with member cities and salons."""

    id: Optional[str] = None
    name: Optional[str] = None
    slug: str
    city_ids: List[str] = Field(default_factory=list)
    salon_ids: List[str] = Field(default_factory=list)
    city_count: int = 0
    salon_count: int = 0

    _city_positions: List[int] = PrivateAttr(default_factory=list)
    _salon_positions: List[int] = PrivateAttr(default_factory=list)

    @property
    def city_positions(self) -> List[int]:
        """Positions of member cities, aligned with ``city_ids``."""
        return self._city_positions

    @property
    def salon_positions(self) -> List[int]:
        """Positions of member salons, aligned with ``salon_ids``."""
        return self._salon_positions


class CategoryView(BaseModel):
    """Category model written to ``categories.json``."""

    id: Optional[str] = None
    name: Optional[str] = None
    slug: str
    salon_ids: List[str] = Field(default_factory=list)
    salon_count: int = 0


__all__ = [
    "Category",
    "CategoryView",
    "City",
    "CityView",
    "DirectoryRecord",
    "Salon",
    "SalonView",
    "State",
    "StateView",
]
