"""Part categorizer contract."""

from shopfloor_ingestion.categorizers.base import DefaultCategorizer, PartCategorizer

__all__ = ["PartCategorizer", "DefaultCategorizer"]
