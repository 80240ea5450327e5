"""
forgeclaw_portal.services

Provisioning workflows (own the DB transaction and the audit trail) and the
read-side views behind the platform dashboard.
"""
