"""
forgeclaw_portal.db.repositories

One repository per table. Repositories flush; the service or router commits.
"""
