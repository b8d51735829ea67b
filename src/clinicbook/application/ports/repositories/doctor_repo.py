"""
Doctor repository interface for data access abstraction.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ....domain.entities.doctor import Doctor


class DoctorRepository(ABC):
    """Abstract repository for doctor data access."""

    @abstractmethod
    async def save(self, doctor: Doctor) -> Doctor:
        """Insert or replace a doctor record."""
        pass

    @abstractmethod
    async def find_by_id(self, doctor_id: str) -> Optional[Doctor]:
        """Find a doctor by ID."""
        pass

    @abstractmethod
    async def exists_by_id(self, doctor_id: str) -> bool:
        """Check if a doctor exists by ID."""
        pass

    @abstractmethod
    async def find_all(self, specialty: Optional[str] = None) -> List[Doctor]:
        """List doctors ordered by name, optionally filtered by specialty."""
        pass

    @abstractmethod
    async def delete(self, doctor_id: str) -> bool:
        """Delete a doctor. Appointments referencing it are left untouched."""
        pass
