from __future__ import annotations

from abc import ABC, abstractmethod

from teeclub.domain.entities.service_catalog import ServiceCatalogEntry


class ServiceCatalogPort(ABC):
    @abstractmethod
    def get_service(self, service_name: str) -> ServiceCatalogEntry | None:
        """Get service catalog entry by service name."""
        raise NotImplementedError

    @abstractmethod
    def get_duration_minutes(self, service_name: str) -> int:
        """Get the reservation length of a service in minutes."""
        raise NotImplementedError
