"""Small helper utilities shared across persondir."""

from .iterables import is_non_string_iterable
from .missing import is_missing

__all__ = ["is_non_string_iterable", "is_missing"]
