"""Core (UI-agnostic) PnL dashboard logic.

This package contains:
- CSV parsing (exchange export -> pandas record frame)
- table filter state and the filter/sort/paginate pipeline
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
- the session holder used by the Streamlit app
"""
