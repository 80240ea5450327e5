"""
forgeclaw_portal.observability

structlog setup and per-request logging context.
"""
