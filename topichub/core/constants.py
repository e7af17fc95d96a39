"""
App-wide constants for route configuration.

This module provides a single source of truth for route prefixes, tags,
and common response definitions for API routes.
"""

from dataclasses import dataclass
from typing import Any

from topichub.models.error import ErrorResponse


@dataclass(frozen=True)
class RouteConfig:
    """Configuration for a route group."""

    prefix: str
    tag: str


class Routes:
    """Route configurations for all API endpoints."""

    AUTH = RouteConfig(prefix="/auth", tag="auth")
    USER = RouteConfig(prefix="/users", tag="users")
    TOPIC = RouteConfig(prefix="/topics", tag="topics")
    SUBSCRIPTION = RouteConfig(prefix="/subscriptions", tag="subscriptions")
    HEALTH = RouteConfig(prefix="/health", tag="health")


# Common response definitions for reuse across routers
# Use these when configuring APIRouter or individual endpoints
class CommonResponses:
    """Standard HTTP error response definitions for OpenAPI documentation."""

    UNAUTHORIZED: dict[int, dict[str, Any]] = {
        401: {
            "model": ErrorResponse,
            "description": "Not authenticated or unknown user",
        }
    }
    FORBIDDEN: dict[int, dict[str, Any]] = {
        403: {
            "model": ErrorResponse,
            "description": "User is banned or lacks the required admin tier",
        }
    }
    NOT_FOUND: dict[int, dict[str, Any]] = {
        404: {"model": ErrorResponse, "description": "Resource not found"}
    }
    BAD_REQUEST: dict[int, dict[str, Any]] = {
        400: {"model": ErrorResponse, "description": "Missing or malformed argument"}
    }
    STORE_UNAVAILABLE: dict[int, dict[str, Any]] = {
        503: {"model": ErrorResponse, "description": "Storage is unavailable"}
    }
