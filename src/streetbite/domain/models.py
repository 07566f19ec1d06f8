"""
Domain models (Pydantic).

These types represent the stable "contract" between the engine and its collaborators:
- catalog entities supplied by the store (`Vendor`, `MenuEntry`)
- live updates supplied by the location feed (`LiveLocationReport`)
- derived, per-request outputs (`ProximityResult`, `ScoredCandidate`, `CatalogStats`)

Keeping these models in one place helps:
- validation at the provider boundary (reject bad coordinates/prices early),
- typed refactors,
- consistent JSON output across CLI/API.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

REASON_SEPARATOR = " • "


class Coordinate(BaseModel):
    """A geographic point in decimal degrees (immutable value type)."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class MenuEntry(BaseModel):
    """One priced item on a vendor's menu."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    currency: str = "INR"


class Vendor(BaseModel):
    """A street-food vendor as stored by the catalog provider."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    food_type: str = Field(..., alias="foodType")
    coordinates: Coordinate
    address: str = ""
    menu: tuple[MenuEntry, ...] = ()
    availability: bool = True
    is_verified: bool = Field(default=False, alias="isVerified")


class LiveLocationReport(BaseModel):
    """An ephemeral coordinate update for one vendor."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    vendor_id: str = Field(..., alias="vendorId")
    coordinates: Coordinate


class ProximityResult(BaseModel):
    """One search hit: the vendor plus its distance from the origin (if any)."""

    vendor: Vendor
    distance_km: float | None = Field(default=None, ge=0)


class ScoredCandidate(BaseModel):
    """One ranked recommendation with the trail of reasons behind its score."""

    vendor: Vendor
    distance_km: float | None = Field(default=None, ge=0)
    score: float = Field(..., ge=0)
    reason_trail: list[str] = Field(default_factory=list)
    components: dict[str, float] = Field(default_factory=dict)

    @property
    def reason(self) -> str:
        return REASON_SEPARATOR.join(self.reason_trail)

    @property
    def deterministic_score(self) -> float:
        """Score without the trending boost."""
        return self.score - self.components.get("trending", 0.0)


class CatalogStats(BaseModel):
    """Administrative statistics over the full catalog."""

    total_count: int = 0
    verified_count: int = 0
    available_count: int = 0
    category_histogram: dict[str, int] = Field(default_factory=dict)

    @property
    def unverified_count(self) -> int:
        return self.total_count - self.verified_count

    @property
    def unavailable_count(self) -> int:
        return self.total_count - self.available_count

    @property
    def food_type_count(self) -> int:
        return len(self.category_histogram)

    @property
    def verified_ratio(self) -> float:
        if self.total_count == 0:
            return 0.0
        return self.verified_count / self.total_count

    def verification_breakdown(self) -> dict[str, int]:
        return {"Verified": self.verified_count, "Unverified": self.unverified_count}

    def availability_breakdown(self) -> dict[str, int]:
        return {"Open": self.available_count, "Closed": self.unavailable_count}

    def as_dict(self) -> dict:
        """Full dashboard payload (stored counts plus derived breakdowns)."""
        return {
            **self.model_dump(mode="json"),
            "unverified_count": self.unverified_count,
            "unavailable_count": self.unavailable_count,
            "food_type_count": self.food_type_count,
            "verified_ratio": self.verified_ratio,
            "verification_breakdown": self.verification_breakdown(),
            "availability_breakdown": self.availability_breakdown(),
        }


class VendorRegistration(BaseModel):
    """Payload for registering a new vendor with the catalog provider."""

    name: str
    food_type: str = Field(..., alias="foodType")
    coordinates: Coordinate
    address: str
    menu: list[MenuEntry] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)
