"""CSV and Excel exports."""
from inspection_desk.reporting.sinks import (
    INSPECTION_HEADERS,
    INVOICE_HEADERS,
    export_inspection,
    export_invoices,
    inspection_rows,
    invoice_rows,
    write_csv,
    write_excel,
)

__all__ = [
    "INSPECTION_HEADERS",
    "INVOICE_HEADERS",
    "export_inspection",
    "export_invoices",
    "inspection_rows",
    "invoice_rows",
    "write_csv",
    "write_excel",
]
