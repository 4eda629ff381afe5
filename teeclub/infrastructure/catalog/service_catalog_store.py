from __future__ import annotations

import re

from teeclub.application.ports.service_catalog import ServiceCatalogPort
from teeclub.application.utils.durations import duration_from_service_name
from teeclub.domain.entities.service_catalog import ServiceCatalogEntry

_NON_ALNUM = re.compile(r"[^a-z0-9.]+")


def normalize_service_name(name: str) -> str:
    """'Simulator Bay (1 hr)' -> 'simulator bay 1 hr'."""
    return " ".join(_NON_ALNUM.sub(" ", name.lower()).split())


SERVICE_CATALOG: dict[str, ServiceCatalogEntry] = {
    entry.service_key: entry
    for entry in (
        ServiceCatalogEntry("simulator bay 30 min", "Simulator Bay (30 min)", 30),
        ServiceCatalogEntry("simulator bay 1 hr", "Simulator Bay (1 hr)", 60),
        ServiceCatalogEntry("simulator bay 2 hr", "Simulator Bay (2 hr)", 120),
        # a full round runs long; the name carries no length
        ServiceCatalogEntry("simulator bay 18 holes", "Simulator Bay (18 Holes)", 240),
        ServiceCatalogEntry("putting green", "Putting Green", 30),
        ServiceCatalogEntry("lesson 1 hr", "Private Lesson (1 hr)", 60, notes="Pro must be present"),
    )
}


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(self, catalog: dict[str, ServiceCatalogEntry] | None = None) -> None:
        catalog = catalog if catalog is not None else SERVICE_CATALOG
        self._catalog: dict[str, ServiceCatalogEntry] = {}
        for entry in catalog.values():
            self._catalog[normalize_service_name(entry.display_name)] = entry
            self._catalog[normalize_service_name(entry.service_key)] = entry

    def get_service(self, service_name: str) -> ServiceCatalogEntry | None:
        return self._catalog.get(normalize_service_name(service_name))

    def get_duration_minutes(self, service_name: str) -> int:
        entry = self.get_service(service_name)
        if not entry:
            return duration_from_service_name(service_name)
        return entry.duration_minutes
