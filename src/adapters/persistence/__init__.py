from .local_reference_repository import LocalReferenceRepository, load_table

__all__ = [
    "LocalReferenceRepository",
    "load_table",
]
