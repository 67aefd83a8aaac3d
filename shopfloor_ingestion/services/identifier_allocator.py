"""
Identifier allocator: makes every id of one conversion unique.

An id is free when no persisted row of its table has it and this
conversion has not already claimed it for that table.  Taken ids are
rewritten ``<id>_1``, ``<id>_2``, ... until free.
"""

from __future__ import annotations

from uuid import uuid4

from shopfloor_kernel.logging_config import get_logger
from shopfloor_kernel.selectors.entity_selector import EntitySelector, EntityTable

logger = get_logger("ingestion.identifier_allocator")


class IdentifierAllocator:
    def __init__(self, selector: EntitySelector):
        self._selector = selector
        self._claimed: dict[EntityTable, set[str]] = {}
        self.renamed: dict[tuple[EntityTable, str], str] = {}

    def _taken(self, table: EntityTable, candidate: str) -> bool:
        if candidate in self._claimed.get(table, ()):
            return True
        # Staged entities are incomplete until the graph is built; never autoflush them.
        with self._selector.session.no_autoflush:
            return self._selector.exists(table, candidate)

    def claim(self, table: EntityTable, requested: str) -> str:
        """Reserve ``requested`` (or its first free ``_n`` variant) and return it."""
        final = requested
        n = 0
        while self._taken(table, final):
            n += 1
            final = f"{requested}_{n}"
        self._claimed.setdefault(table, set()).add(final)

        if final != requested:
            self.renamed[(table, requested)] = final
            logger.info(
                "identifier_renamed",
                extra={"table": table.value, "requested_id": requested, "final_id": final},
            )
        return final

    def generate(self, table: EntityTable) -> str:
        """Fresh uuid4 id for tables whose ids are not export LinkIDs."""
        return self.claim(table, str(uuid4()))
