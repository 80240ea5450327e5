"""
forgeclaw_portal.catalog

Static product data.

Responsibilities:
- Tier table (pricing, Northflank resources, provisioned skills).
- Skills catalog and its query helpers.
"""

# Package marker.
