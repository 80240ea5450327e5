"""
forgeclaw_portal.api

HTTP surface of the portal: app factory, dependencies, error mapping and one
router per area (`auth`, `advisors`, `skills`, `northflank`, probes, dev tokens).
"""
