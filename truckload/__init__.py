"""Core (UI-agnostic) truck loading dashboard logic.

This package contains:
- record model and boundary validation (pydantic)
- date-range helpers and view-state filters
- aggregation for the charts page
- hand-drawn SVG chart geometry and Altair -> Vega-Lite chart helpers
- view compute functions (JSON-serializable payloads)
- the remote store repository (Supabase)
"""
