from prometheus_client import (
    Counter,
    Histogram,
)

update_cycles_total = Counter(
    "price_update_cycles_total",
    "Total price update cycles",
    ["status"],  # success | failed
)

price_records_total = Counter(
    "price_records_total",
    "Candidate prices seen by update cycles",
    ["outcome"],  # saved | rejected | missing
)

update_cycle_duration = Histogram(
    "price_update_duration_seconds",
    "Price update cycle duration in seconds",
)

icon_updates_total = Counter(
    "icon_updates_total",
    "Asset icon URLs refreshed from market metadata",
)
