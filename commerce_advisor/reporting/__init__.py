"""
Reporting: file exports and terminal formatting for advisor runs.

Modules
-------
export     : write_report() + flatten_report_for_export() - JSON / CSV / Parquet.
formatters : format_report_summary() and per-advisor ASCII tables.
"""
