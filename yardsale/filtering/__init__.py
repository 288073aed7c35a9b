"""Filtering module for search rows."""

from .privacy import public_location, should_mask
from .sale_filter import TEXT_SEARCH_FIELDS, SaleFilter

__all__ = ['SaleFilter', 'TEXT_SEARCH_FIELDS', 'public_location', 'should_mask']
