# backend/repairdesk/routes/__init__.py
"""HTTP routes, grouped by API version."""
