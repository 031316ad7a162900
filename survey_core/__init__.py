"""Core (UI-agnostic) survey dashboard logic.

This package contains:
- CSV parsing (survey export text -> list of records)
- table view state (search / filter / sort / pagination / CSV export)
- data loading (local file or URL -> records)
- summary metrics and feedback analysis (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
