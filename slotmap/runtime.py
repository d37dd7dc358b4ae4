# FILE: slotmap/runtime.py
# ------------------------------------------------------------------------------
import logging
from typing import Optional

import slotmap_metrics
from slotmap.backend.table import SlotMap
from slotmap.config import KeyOptions
from slotmap.settings import Settings, load_settings

logger = logging.getLogger("slotmap.runtime")


def build_table(settings: Optional[Settings] = None, name: str = "default") -> SlotMap:
    if settings is None:
        settings = load_settings()
    options = KeyOptions.from_settings(settings.table)
    if settings.metrics.enabled:
        slotmap_metrics.start_metrics_http_server(settings.metrics.port)
    logger.info(
        "Initializing slot map",
        extra={"table": name, "capacity": settings.table.capacity, "key_bits": options.key_bits},
    )
    return SlotMap(
        settings.table.capacity,
        options=options,
        name=name,
        export_metrics=settings.metrics.enabled,
    )
