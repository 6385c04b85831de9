"""Domain models for the shopcast notification core.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Literal, TypeAlias


class Unknown(Enum):
    """Sentinel for identity or reference values no source could supply."""

    UNKNOWN = "Unknown"

    def __str__(self) -> str:
        return self.value

    def __bool__(self) -> bool:
        return False


UNKNOWN: Literal[Unknown.UNKNOWN] = Unknown.UNKNOWN

MaybeKnown: TypeAlias = str | Literal[Unknown.UNKNOWN]


def display(value: "MaybeKnown | None") -> str:
    """Render a possibly unknown value for humans."""
    if value is None or value is UNKNOWN:
        return UNKNOWN.value
    return str(value)


@dataclass(frozen=True)
class RawEvent:
    """A single inbound webhook delivery, as decoded from JSON.

    Neither field is trusted: ``tag`` is free text written by the emitter
    and ``payload`` may be missing any key.
    """

    tag: str
    payload: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Convert payload dict to read-only proxy."""
        if isinstance(self.payload, dict):
            object.__setattr__(self, "payload", MappingProxyType(self.payload))

    @classmethod
    def from_body(cls, body: Any) -> "RawEvent":
        """Build a RawEvent from a decoded ``{"event": ..., "data": ...}`` body.

        Malformed bodies never raise; a non-string event becomes an empty tag
        and a non-object data field becomes an empty payload.
        """
        if not isinstance(body, Mapping):
            return cls(tag="", payload={})
        tag = body.get("event")
        data = body.get("data")
        return cls(
            tag=tag if isinstance(tag, str) else "",
            payload=dict(data) if isinstance(data, Mapping) else {},
        )


# ============================================================================
# EVENT KINDS
# ============================================================================


@dataclass(frozen=True)
class JobLine:
    """One job performed on a completed repair order."""

    name: str
    labor_hours: float | None = None
    labor_cents: int = 0


@dataclass(frozen=True)
class FeeLine:
    """One fee charged on a completed repair order."""

    name: str
    cents: int = 0


@dataclass(frozen=True)
class InspectionTask:
    """A single inspected item and its outcome."""

    name: str
    rating: str | None = None
    finding: str | None = None
    reported: bool = False


@dataclass(frozen=True)
class InspectionGroup:
    """A titled section of an inspection sheet."""

    title: str
    tasks: tuple[InspectionTask, ...] = ()


@dataclass(frozen=True)
class EstimateViewed:
    """The customer opened the estimate."""


@dataclass(frozen=True)
class WorkAuthorization:
    """The customer approved and/or declined proposed jobs."""

    approved_count: int
    declined_count: int


@dataclass(frozen=True)
class RepairOrderCompleted:
    """Work on a repair order was marked complete.

    Monetary amounts are integer cents. The detail fields are optional and
    only filled when the emitter includes them.
    """

    labor_cents: int = 0
    parts_cents: int = 0
    fee_cents: int = 0
    total_cents: int = 0
    completed_at: str | None = None
    jobs: tuple[JobLine, ...] = ()
    fees: tuple[FeeLine, ...] = ()


@dataclass(frozen=True)
class PaymentMade:
    """A payment was recorded against a repair order.

    ``is_paid_in_full`` is a best-effort reading of whatever balance or
    status fields the emitter chose to include; it is not a ledger fact.
    """

    amount_cents: int
    payment_method: MaybeKnown = UNKNOWN
    is_paid_in_full: bool = False
    paid_at: str | None = None


@dataclass(frozen=True)
class InspectionCompleted:
    """A vehicle inspection was marked complete."""

    inspection_name: MaybeKnown = UNKNOWN
    completed_at: str | None = None
    groups: tuple[InspectionGroup, ...] = ()


@dataclass(frozen=True)
class PartsReceived:
    """Parts on a purchase order were received."""

    purchase_order_id: MaybeKnown = UNKNOWN


@dataclass(frozen=True)
class Unrecognized:
    """An event no classification rule matched. Logged, never notified."""

    raw_tag: str


EventKind: TypeAlias = (
    EstimateViewed
    | WorkAuthorization
    | RepairOrderCompleted
    | PaymentMade
    | InspectionCompleted
    | PartsReceived
    | Unrecognized
)


# ============================================================================
# IDENTITY AND OUTPUT
# ============================================================================


@dataclass(frozen=True)
class ResolvedIdentity:
    """Best-effort customer and repair-order identity for one event.

    Both fields are always populated; UNKNOWN stands in for anything no
    source could supply.
    """

    customer_name: MaybeKnown = UNKNOWN
    repair_order_number: MaybeKnown = UNKNOWN


@dataclass(frozen=True)
class NotificationContent:
    """Transport-agnostic notification ready for a chat collaborator."""

    title: str
    body: str
    fields: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class ProcessingResult:
    """Summary of one event's trip through the pipeline."""

    kind: EventKind
    identity: ResolvedIdentity
    content: NotificationContent | None
    notified: bool
    dispatch_error: str | None = None

    @property
    def ignored(self) -> bool:
        return self.content is None
