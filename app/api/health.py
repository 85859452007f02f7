"""Health-check endpoint.

Hosting platforms and load balancers hit this endpoint to verify the
bridge is running.  It does not check Twitch or Discord reachability.
"""

from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Return ``{"status": "healthy"}`` while the process is serving requests."""
    return {"status": "healthy"}
