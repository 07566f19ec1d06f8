"""
In-memory catalog provider.

This is the reference collaborator the API and tests run against: it owns the
vendor records, assigns ids, accepts operator verification and vendor-side
updates, and publishes live location reports. The engine itself only ever sees
the snapshots returned by `snapshot()` / `live_locations()`.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Iterable

from streetbite.domain.models import Coordinate, LiveLocationReport, MenuEntry, Vendor, VendorRegistration

logger = logging.getLogger(__name__)


class VendorNotFoundError(KeyError):
    """Raised when a mutation references a vendor id the store does not know."""

    def __init__(self, vendor_id: str):
        super().__init__(vendor_id)
        self.vendor_id = vendor_id

    def __str__(self) -> str:
        return f"Unknown vendor id '{self.vendor_id}'."


def _validate_registration(registration: VendorRegistration) -> None:
    if not registration.name.strip():
        raise ValueError("Vendor name is required.")
    if not registration.food_type.strip():
        raise ValueError("Food type is required.")
    if not registration.address.strip():
        raise ValueError("Address is required.")
    if not registration.menu:
        raise ValueError("At least one menu item is required.")
    for item in registration.menu:
        _validate_menu_item(item)


def _validate_menu_item(item: MenuEntry) -> None:
    if not item.name.strip():
        raise ValueError("Menu item name is required.")
    if item.price <= 0:
        raise ValueError(f"Menu item '{item.name}' must have a positive price.")


class InMemoryVendorStore:
    def __init__(self, vendors: Iterable[Vendor] = ()):
        self._lock = threading.Lock()
        self._vendors: dict[str, Vendor] = {}
        self._live: dict[str, Coordinate] = {}
        self._issued_ids: set[str] = set()
        for v in vendors:
            self._vendors[v.id] = v
            self._issued_ids.add(v.id)

    def _new_id(self) -> str:
        while True:
            vendor_id = uuid.uuid4().hex
            if vendor_id not in self._issued_ids:
                self._issued_ids.add(vendor_id)
                return vendor_id

    def _require(self, vendor_id: str) -> Vendor:
        try:
            return self._vendors[vendor_id]
        except KeyError:
            raise VendorNotFoundError(vendor_id) from None

    def register(self, registration: VendorRegistration) -> Vendor:
        """Create a new (unverified, available) vendor from a registration payload."""
        _validate_registration(registration)
        with self._lock:
            vendor = Vendor(
                id=self._new_id(),
                name=registration.name.strip(),
                food_type=registration.food_type.strip(),
                coordinates=registration.coordinates,
                address=registration.address.strip(),
                menu=tuple(registration.menu),
                availability=True,
                is_verified=False,
            )
            self._vendors[vendor.id] = vendor
        logger.info("Registered vendor %s (%s)", vendor.id, vendor.name)
        return vendor

    def get(self, vendor_id: str) -> Vendor | None:
        return self._vendors.get(vendor_id)

    def snapshot(self) -> list[Vendor]:
        """Current catalog in registration order."""
        with self._lock:
            return list(self._vendors.values())

    list_all = snapshot

    def list_available(self) -> list[Vendor]:
        return [v for v in self.snapshot() if v.availability]

    def search_by_name(self, term: str) -> list[Vendor]:
        needle = term.strip().lower()
        if not needle:
            return []
        return [v for v in self.snapshot() if needle in v.name.lower()]

    def _replace(self, vendor_id: str, **updates) -> Vendor:
        with self._lock:
            vendor = self._require(vendor_id).model_copy(update=updates)
            self._vendors[vendor_id] = vendor
        return vendor

    def verify(self, vendor_id: str) -> Vendor:
        """Mark a vendor as verified by an operator (idempotent)."""
        vendor = self._replace(vendor_id, is_verified=True)
        logger.info("Verified vendor %s", vendor_id)
        return vendor

    def set_availability(self, vendor_id: str, available: bool) -> Vendor:
        return self._replace(vendor_id, availability=bool(available))

    def add_menu_item(self, vendor_id: str, item: MenuEntry) -> Vendor:
        _validate_menu_item(item)
        with self._lock:
            vendor = self._require(vendor_id)
            vendor = vendor.model_copy(update={"menu": (*vendor.menu, item)})
            self._vendors[vendor_id] = vendor
        return vendor

    def update_location(self, vendor_id: str, coordinates: Coordinate) -> LiveLocationReport:
        """Publish a live location for a vendor; the stored record is left untouched."""
        with self._lock:
            self._require(vendor_id)
            self._live[vendor_id] = coordinates
        logger.debug("Live location for %s -> (%.5f, %.5f)", vendor_id, coordinates.latitude, coordinates.longitude)
        return LiveLocationReport(vendor_id=vendor_id, coordinates=coordinates)

    def live_locations(self) -> list[LiveLocationReport]:
        with self._lock:
            return [LiveLocationReport(vendor_id=k, coordinates=v) for k, v in self._live.items()]
