"""
Service handlers for the onboarding example.

These handlers simulate backend lookups for demo purposes.
In production, they would call the real profile API.
"""

from typing import Any

from screenflow import ServiceRegistry

PROFILES: dict[str, dict[str, Any]] = {
    "Ana": {"plan": "premium", "language": "es"},
    "Ben": {"plan": "basic", "language": "en"},
}

services = ServiceRegistry()


@services.register("profile.fetch")
def fetch_profile(params: dict[str, Any]) -> dict[str, Any]:
    """Look up a user profile by name."""
    name = params.get("userName")
    if name not in PROFILES:
        raise LookupError(f"No profile for {name}")
    return {"data": PROFILES[name], "status": "ok"}
