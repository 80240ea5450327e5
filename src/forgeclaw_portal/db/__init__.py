"""
forgeclaw_portal.db

Portal persistence: advisor accounts, local advisor records and the audit trail.
Tables are created on startup in dev/test; production applies Alembic migrations.
"""
