"""
Import service: parse -> select -> convert.

Facade over the tree builder and the selective converter.  A caller either
previews the parsed tree and converts a hand-picked selection, or imports
everything in one call.
"""

from __future__ import annotations

from typing import Callable

from sqlalchemy.orm import Session

from shopfloor_config.schema import ImportSettings
from shopfloor_ingestion.categorizers.base import DefaultCategorizer, PartCategorizer
from shopfloor_ingestion.domain.types import (
    ConversionResult,
    ImportWorkOrder,
    RawImportBundle,
    SelectionRequest,
)
from shopfloor_ingestion.mapping.field_resolver import FieldResolver
from shopfloor_ingestion.services.selective_converter import SelectiveConverter
from shopfloor_ingestion.services.tree_builder import TreeBuilder
from shopfloor_kernel.db.engine import (
    create_tables,
    get_session_factory,
    init_engine_from_url,
)
from shopfloor_kernel.domain.clock import Clock, SystemClock
from shopfloor_kernel.logging_config import configure_logging, get_logger

logger = get_logger("ingestion.import_service")


def build_full_selection(
    tree: ImportWorkOrder,
    work_order_name: str | None = None,
    allow_duplicates: bool = False,
) -> SelectionRequest:
    """Select every node of the parsed tree under its own item type."""
    items = {}
    for item_id, item_type in tree.iter_items():
        items.setdefault(item_id, item_type)
    return SelectionRequest(
        work_order_name=work_order_name if work_order_name is not None else tree.name,
        items=items,
        allow_duplicates=allow_duplicates,
    )


class ImportService:
    """Entry point for CAD cut-list imports."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        settings: ImportSettings | None = None,
        clock: Clock | None = None,
        categorizer: PartCategorizer | None = None,
    ):
        self._settings = settings or ImportSettings()
        resolver = FieldResolver()
        self._builder = TreeBuilder(resolver, self._settings)
        self._converter = SelectiveConverter(
            session_factory,
            settings=self._settings,
            clock=clock or SystemClock(),
            categorizer=categorizer or DefaultCategorizer(),
            resolver=resolver,
        )

    def parse(
        self, bundle: RawImportBundle, work_order_name: str | None = None
    ) -> ImportWorkOrder:
        """Build the preview tree; nothing is persisted."""
        return self._builder.build(bundle, work_order_name)

    def convert_selected(
        self,
        tree: ImportWorkOrder,
        selection: SelectionRequest,
        bundle: RawImportBundle | None = None,
    ) -> ConversionResult:
        """Persist the selected branches; ``bundle`` supplies sheet placements."""
        return self._converter.convert(tree, selection, bundle)

    def import_all(
        self,
        bundle: RawImportBundle,
        work_order_name: str | None = None,
        allow_duplicates: bool = False,
    ) -> ConversionResult:
        tree = self.parse(bundle, work_order_name)
        selection = build_full_selection(tree, tree.name, allow_duplicates)
        logger.info(
            "import_all_started",
            extra={"work_order_id": tree.id, "selected_items": len(selection.items)},
        )
        return self.convert_selected(tree, selection, bundle)


def build_import_service(
    settings: ImportSettings,
    clock: Clock | None = None,
    categorizer: PartCategorizer | None = None,
    create_schema: bool = False,
) -> ImportService:
    """
    Wire an ImportService from loaded settings.

    Configures logging at ``settings.log_level`` before the engine is
    initialized, so the engine's own configure call is a no-op.

    Args:
        settings: Usually ``shopfloor_config.get_active_settings()``.
        clock: Defaults to SystemClock.
        categorizer: Defaults to DefaultCategorizer.
        create_schema: Create missing tables on the configured database.
    """
    configure_logging(level=settings.log_level)
    engine = init_engine_from_url(settings.database.url, echo=settings.database.echo)
    if create_schema:
        create_tables(engine)
    return ImportService(
        get_session_factory(),
        settings=settings,
        clock=clock,
        categorizer=categorizer,
    )
