"""Shared constants for analyzers.

Constants and environment-driven defaults that are used across multiple
analyzer modules.

Configuration via environment variables (read at call time):
    BLASTMAP_RELATIONSHIP_DEPTH: Default hop count for related-node queries (2).
    BLASTMAP_IMPACT_MAX_DEPTH: Depth cap of the dependents walk (5).
    BLASTMAP_FADE_OPACITY: Opacity of nodes unrelated to the focus (0.15).
"""

import os

from blastmap.logging import logger

DOMAIN_PREFIX = "domain:"
UNKNOWN_DOMAIN = "unknown"

# Domain palette used for edge styling in structural view modes
DOMAIN_COLORS: dict[str, str] = {
    "auth": "#3b82f6",
    "payment": "#10b981",
    "api": "#8b5cf6",
    "database": "#f59e0b",
    "notification": "#ec4899",
    "core": "#6366f1",
    "ui": "#f43f5e",
    "util": "#14b8a6",
    "test": "#84cc16",
    "config": "#71717a",
    UNKNOWN_DOMAIN: "#94a3b8",
}

# Base edge colors by relationship type
EDGE_TYPE_COLORS: dict[str, str] = {
    "call": "#3b82f6",
    "import": "#10b981",
}
DEFAULT_EDGE_COLOR = "#6b7280"

# Coupling gradient stops (low -> medium -> high)
COUPLING_LOW_COLOR = "#3b82f6"
COUPLING_MID_COLOR = "#fbbf24"
COUPLING_HIGH_COLOR = "#ef4444"

# Severity score weights
FUNCTION_WEIGHT = 1
FILE_WEIGHT = 5
DOMAIN_WEIGHT = 20
DEFAULT_IMPACT_DEPTH = 1
IMPACT_DEPTH_PIVOT = 5

# Severity bands (lower bounds, inclusive)
SEVERITY_MEDIUM = 25
SEVERITY_HIGH = 50
SEVERITY_CRITICAL = 75

# Dependents-count risk bands (upper bounds, inclusive)
DEPENDENTS_LOW_MAX = 5
DEPENDENTS_MEDIUM_MAX = 15

# Search queries must be longer than this to refine the view
SEARCH_MIN_LENGTH = 2

_DEFAULT_RELATIONSHIP_DEPTH = 2
_DEFAULT_IMPACT_MAX_DEPTH = 5
_DEFAULT_FADE_OPACITY = 0.15


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %d", name, raw, default)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


def get_relationship_depth() -> int:
    """Default hop count for related-node queries."""
    return _env_int("BLASTMAP_RELATIONSHIP_DEPTH", _DEFAULT_RELATIONSHIP_DEPTH)


def get_impact_max_depth() -> int:
    """Default depth cap of the dependents walk."""
    return _env_int("BLASTMAP_IMPACT_MAX_DEPTH", _DEFAULT_IMPACT_MAX_DEPTH)


def get_fade_opacity() -> float:
    """Opacity applied to nodes unrelated to the focus node, clamped to [0, 1]."""
    return min(1.0, max(0.0, _env_float("BLASTMAP_FADE_OPACITY", _DEFAULT_FADE_OPACITY)))
