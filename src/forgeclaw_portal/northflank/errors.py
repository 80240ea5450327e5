"""
forgeclaw_portal.northflank.errors

Failures raised by the Northflank boundary. Messages are safe to return to API callers.
"""

from __future__ import annotations


class NorthflankError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BuildNotReadyError(NorthflankError):
    def __init__(self, status: str) -> None:
        super().__init__(
            "No successful build available. Please wait for the current build to complete."
        )
        self.status = status


class SubdomainTakenError(NorthflankError):
    def __init__(self, domain: str) -> None:
        super().__init__(f"{domain} is not available")
        self.domain = domain
