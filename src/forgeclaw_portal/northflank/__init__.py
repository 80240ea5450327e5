"""
forgeclaw_portal.northflank

Northflank deployment API boundary.

Responsibilities:
- HTTP client that turns advisor configuration into Northflank REST calls.
- In-memory demo client with the same interface for local development.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers and services depend on `protocol.NorthflankApi`, never on httpx directly.
