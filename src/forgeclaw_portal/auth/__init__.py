"""
forgeclaw_portal.auth

Advisor and operator authentication: session JWTs, bcrypt password hashes and
the FastAPI dependencies that turn a bearer token into a `Principal`.
"""
