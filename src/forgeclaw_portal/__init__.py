"""
forgeclaw_portal

ForgeClaw Portal API: advisor accounts, per-advisor Northflank provisioning and
the skills catalog behind forgeclaw.com.
"""

__all__ = ["__version__"]

# Reported by `GET /health`.
__version__ = "1.0.0"
