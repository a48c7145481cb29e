"""Domain layer definitions."""

from .datasets import DatasetState

__all__ = [
    "DatasetState",
]
