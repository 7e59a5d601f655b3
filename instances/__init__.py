"""Training instances and built-in synthetic datasets."""

from .base import Instance
from .synthetic import make_classification, make_sequences

__all__ = ["Instance", "make_classification", "make_sequences"]
