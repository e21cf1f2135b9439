from barplan.adapters.event_rows.adapter import (
    EventRowsAdapter,
    as_list,
    as_records,
    count_drinks,
    flatten_rows,
)

__all__ = ["EventRowsAdapter", "as_list", "as_records", "count_drinks", "flatten_rows"]
