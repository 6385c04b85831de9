"""Core domain logic for the shopcast notification system.

This package contains zero external dependencies and represents
the pure business logic of the application: event classification,
identity resolution and notification formatting. All adapters and
external integrations are handled by the adapters package.
"""

from .classifier import DEFAULT_RULES, ClassificationRule, EventClassifier
from .formatter import NotificationFormatter
from .identity import IdentityCache, IdentityResolver
from .models import (
    UNKNOWN,
    EstimateViewed,
    EventKind,
    InspectionCompleted,
    NotificationContent,
    PartsReceived,
    PaymentMade,
    ProcessingResult,
    RawEvent,
    RepairOrderCompleted,
    ResolvedIdentity,
    Unrecognized,
    WorkAuthorization,
)

__all__ = [
    "DEFAULT_RULES",
    "UNKNOWN",
    "ClassificationRule",
    "EstimateViewed",
    "EventClassifier",
    "EventKind",
    "IdentityCache",
    "IdentityResolver",
    "InspectionCompleted",
    "NotificationContent",
    "NotificationFormatter",
    "PartsReceived",
    "PaymentMade",
    "ProcessingResult",
    "RawEvent",
    "RepairOrderCompleted",
    "ResolvedIdentity",
    "Unrecognized",
    "WorkAuthorization",
]
