"""Domain Types — enums shared by configuration, lifecycle and locale code.

Invariants:
    - All valid states encoded as Enums — no raw string matching
    - LifecycleState order is the startup order (see core/lifecycle_transitions.py)

Design Decisions:
    - str Enums: serialize to JSON and log lines without custom encoders
"""

from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class Profile(str, Enum):
    """Runtime mode — governs logging verbosity and fault escalation."""
    DEVELOPMENT = "development"
    TEST = "test"
    STAGING = "staging"
    PRODUCTION = "production"


class Locale(str, Enum):
    """Supported catalog locales. Value is the BCP-47 tag used in config."""
    EN = "en"
    PT_BR = "pt-BR"


class LifecycleState(str, Enum):
    """Startup/serving state machine — one orchestrator per process."""
    IDLE = "idle"
    SECURING_TRANSPORT_HEADERS = "securing_transport_headers"
    CONFIGURING_VALIDATION = "configuring_validation"
    CONNECTING_DATASTORE = "connecting_datastore"
    REGISTERING_ROUTES = "registering_routes"
    SERVING = "serving"
    FAILED = "failed"


class CourseLevel(str, Enum):
    """Course difficulty levels accepted by the course schemas."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
