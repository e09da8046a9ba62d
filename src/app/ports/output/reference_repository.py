from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models.reference import ReferenceStore


class IReferenceRepository(ABC):
    """Port for loading static route/trip metadata into a ReferenceStore."""

    @abstractmethod
    def load_references(self) -> ReferenceStore:
        raise NotImplementedError
