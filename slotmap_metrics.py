import logging

from prometheus_client import Counter, Gauge, start_http_server

logger = logging.getLogger("slotmap.metrics")

# Prometheus metrics (one series per table name)
inserts_total = Counter("slotmap_inserts_total", "Successful inserts", ["table"])
overflows_total = Counter("slotmap_overflows_total", "Inserts rejected because the table was full", ["table"])
releases_total = Counter("slotmap_releases_total", "Keys released", ["table", "kind"])
saturations_total = Counter("slotmap_saturations_total", "Slots retired by generation saturation", ["table"])
lookups_total = Counter("slotmap_lookups_total", "Key lookups", ["table", "result"])

# Gauges
live_entries = Gauge("slotmap_live_entries", "Currently live entries", ["table"])


_server_started = False


def start_metrics_http_server(port: int = 8000) -> bool:
    """Start the prometheus client HTTP server on the given port (no-op if already started)."""
    global _server_started
    if _server_started:
        return True
    try:
        start_http_server(int(port))
        _server_started = True
    except OSError as exc:
        # tables keep working without an exporter
        logger.warning("Failed to start metrics server on port %s: %s", port, exc)
        _server_started = False
    return _server_started
