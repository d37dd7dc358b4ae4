# FILE: slotmap/metrics/counters.py
# ------------------------------------------------------------------------------
import slotmap_metrics


class TableMetrics:
    def __init__(self, table: str, export: bool = False):
        self.table = table
        self.export = export
        self.inserts = 0
        self.overflows = 0
        self.removals = 0
        self.recycles = 0
        self.reads_ok = 0
        self.reads_miss = 0
        self.saturations = 0

    def inc_insert(self):
        self.inserts += 1
        if self.export: slotmap_metrics.inserts_total.labels(table=self.table).inc()

    def inc_overflow(self):
        self.overflows += 1
        if self.export: slotmap_metrics.overflows_total.labels(table=self.table).inc()

    def inc_remove(self):
        self.removals += 1
        if self.export: slotmap_metrics.releases_total.labels(table=self.table, kind="remove").inc()

    def inc_recycle(self):
        self.recycles += 1
        if self.export: slotmap_metrics.releases_total.labels(table=self.table, kind="recycle").inc()

    def inc_saturation(self):
        self.saturations += 1
        if self.export: slotmap_metrics.saturations_total.labels(table=self.table).inc()

    def inc_read_ok(self):
        self.reads_ok += 1
        if self.export: slotmap_metrics.lookups_total.labels(table=self.table, result="hit").inc()

    def inc_read_miss(self):
        self.reads_miss += 1
        if self.export: slotmap_metrics.lookups_total.labels(table=self.table, result="miss").inc()

    def set_live(self, count: int):
        if self.export: slotmap_metrics.live_entries.labels(table=self.table).set(count)

    def snapshot(self):
        return {
            "inserts": self.inserts,
            "overflows": self.overflows,
            "removals": self.removals,
            "recycles": self.recycles,
            "reads_ok": self.reads_ok,
            "reads_miss": self.reads_miss,
            "saturations": self.saturations,
        }
