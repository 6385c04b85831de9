"""Event classification for shop-management webhook deliveries.

Emitters describe the same business event with different free-text tags and
differently shaped payloads. This module maps a ``(tag, payload)`` pair onto
a typed EventKind using an ordered rule table: the first rule whose
predicate matches wins, and anything unmatched becomes Unrecognized.

The table is plain data so new emitter variants are added by inserting a
ClassificationRule, never by editing control flow.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .fields import (
    lookup_bool,
    lookup_cents,
    lookup_list,
    lookup_str,
)
from .models import (
    UNKNOWN,
    EstimateViewed,
    EventKind,
    FeeLine,
    InspectionCompleted,
    InspectionGroup,
    InspectionTask,
    JobLine,
    PartsReceived,
    PaymentMade,
    RepairOrderCompleted,
    Unrecognized,
    WorkAuthorization,
)

COMPLETED_STATUS_NAMES = frozenset({"complete", "completed"})
PAYMENT_SUCCEEDED_MARKER = "succeeded"

_PURCHASE_ORDER_TAG = re.compile(r"purchase order\s*#\s*(\d+)", re.IGNORECASE)

Predicate = Callable[[str, Mapping[str, Any]], bool]
Builder = Callable[[str, Mapping[str, Any]], EventKind]


@dataclass(frozen=True)
class ClassificationRule:
    """One row of the classification table.

    Attributes:
        name: Stable identifier, used in logs and tests.
        matches: Predicate over ``(lowercased tag, payload)``.
        build: Constructor for the EventKind, given ``(original tag, payload)``.
    """

    name: str
    matches: Predicate
    build: Builder


def _tag_has(*needles: str) -> Predicate:
    def predicate(tag: str, payload: Mapping[str, Any]) -> bool:
        return all(needle in tag for needle in needles)

    return predicate


# ----------------------------------------------------------------------------
# Work authorization
# ----------------------------------------------------------------------------


def _build_work_authorization(tag: str, payload: Mapping[str, Any]) -> EventKind:
    jobs = lookup_list(payload, "jobs").or_default([])
    approved = sum(1 for job in jobs if lookup_bool(job, "authorized").or_default(False))
    return WorkAuthorization(approved_count=approved, declined_count=len(jobs) - approved)


# ----------------------------------------------------------------------------
# Repair order completed
# ----------------------------------------------------------------------------


def _is_completed_status(tag: str, payload: Mapping[str, Any]) -> bool:
    status = lookup_str(payload, "repairOrderStatus", "name").or_default("")
    return status.lower() in COMPLETED_STATUS_NAMES


def _job_lines(payload: Mapping[str, Any]) -> tuple[JobLine, ...]:
    lines = []
    for job in lookup_list(payload, "jobs").or_default([]):
        name = lookup_str(job, "name")
        if not name.is_present:
            continue
        lines.append(
            JobLine(
                name=name.value,
                labor_hours=_float_or_none(job, "laborHours"),
                labor_cents=lookup_cents(job, "laborTotal").or_default(0),
            )
        )
    return tuple(lines)


def _fee_lines(payload: Mapping[str, Any]) -> tuple[FeeLine, ...]:
    lines = []
    for fee in lookup_list(payload, "fees").or_default([]):
        name = lookup_str(fee, "name")
        if name.is_present:
            lines.append(FeeLine(name=name.value, cents=lookup_cents(fee, "total").or_default(0)))
    return tuple(lines)


def _float_or_none(obj: Any, key: str) -> float | None:
    value = obj.get(key) if isinstance(obj, Mapping) else None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _build_repair_order_completed(tag: str, payload: Mapping[str, Any]) -> EventKind:
    return RepairOrderCompleted(
        labor_cents=lookup_cents(payload, "laborSales").or_default(0),
        parts_cents=lookup_cents(payload, "partsSales").or_default(0),
        fee_cents=lookup_cents(payload, "feeTotal").or_default(0),
        total_cents=lookup_cents(payload, "totalSales").or_default(0),
        completed_at=lookup_str(payload, "completedDate").or_default(None),
        jobs=_job_lines(payload),
        fees=_fee_lines(payload),
    )


# ----------------------------------------------------------------------------
# Payment made
# ----------------------------------------------------------------------------


def _is_payment(tag: str, payload: Mapping[str, Any]) -> bool:
    if "payment made" in tag:
        return True
    amount_paid = lookup_cents(payload, "amountPaid")
    total_sales = lookup_cents(payload, "totalSales")
    if not (amount_paid.is_present and total_sales.is_present):
        return False
    return amount_paid.value > 0 and amount_paid.value == total_sales.value


def _is_paid_in_full(payload: Mapping[str, Any]) -> bool:
    amount_paid = lookup_cents(payload, "amountPaid")
    total_sales = lookup_cents(payload, "totalSales")
    if amount_paid.is_present and total_sales.is_present and total_sales.value > 0:
        if amount_paid.value >= total_sales.value:
            return True
    for key in ("paymentStatus", "status"):
        marker = lookup_str(payload, key).or_default("")
        if marker.lower() == PAYMENT_SUCCEEDED_MARKER:
            return True
    return False


def _build_payment_made(tag: str, payload: Mapping[str, Any]) -> EventKind:
    amount = lookup_cents(payload, "amount")
    if not amount.is_present:
        amount = lookup_cents(payload, "amountPaid")
    method = lookup_str(payload, "paymentType", "name")
    if not method.is_present:
        method = lookup_str(payload, "paymentMethod")
    return PaymentMade(
        amount_cents=amount.or_default(0),
        payment_method=method.or_default(UNKNOWN),
        is_paid_in_full=_is_paid_in_full(payload),
        paid_at=lookup_str(payload, "paymentDate").or_default(None),
    )


# ----------------------------------------------------------------------------
# Inspection completed
# ----------------------------------------------------------------------------


def _inspection_groups(payload: Mapping[str, Any]) -> tuple[InspectionGroup, ...]:
    groups = []
    for group in lookup_list(payload, "inspectionTasks").or_default([]):
        tasks = tuple(
            InspectionTask(
                name=lookup_str(task, "name").or_default("Unnamed task"),
                rating=lookup_str(task, "inspectionRating").or_default(None),
                finding=lookup_str(task, "finding").or_default(None),
                reported=lookup_bool(task, "reported").or_default(False),
            )
            for task in lookup_list(group, "tasks").or_default([])
        )
        groups.append(
            InspectionGroup(title=lookup_str(group, "title").or_default("Inspection"), tasks=tasks)
        )
    return tuple(groups)


def _build_inspection_completed(tag: str, payload: Mapping[str, Any]) -> EventKind:
    return InspectionCompleted(
        inspection_name=lookup_str(payload, "name").or_default(UNKNOWN),
        completed_at=lookup_str(payload, "completedDate").or_default(None),
        groups=_inspection_groups(payload),
    )


# ----------------------------------------------------------------------------
# Parts received
# ----------------------------------------------------------------------------


def _build_parts_received(tag: str, payload: Mapping[str, Any]) -> EventKind:
    purchase_order = lookup_str(payload, "purchaseOrderId")
    if purchase_order.is_present:
        return PartsReceived(purchase_order_id=purchase_order.value)
    match = _PURCHASE_ORDER_TAG.search(tag)
    return PartsReceived(purchase_order_id=match.group(1) if match else UNKNOWN)


DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        name="estimate_viewed",
        matches=_tag_has("estimate", "viewed"),
        build=lambda tag, payload: EstimateViewed(),
    ),
    ClassificationRule(
        name="work_authorization",
        matches=_tag_has("approved", "declined"),
        build=_build_work_authorization,
    ),
    ClassificationRule(
        name="repair_order_completed",
        matches=_is_completed_status,
        build=_build_repair_order_completed,
    ),
    ClassificationRule(
        name="payment_made",
        matches=_is_payment,
        build=_build_payment_made,
    ),
    ClassificationRule(
        name="inspection_completed",
        matches=_tag_has("inspection", "complete"),
        build=_build_inspection_completed,
    ),
    ClassificationRule(
        name="parts_received",
        matches=_tag_has("purchase order", "received"),
        build=_build_parts_received,
    ),
)


class EventClassifier:
    """Classifies raw webhook events against an ordered rule table.

    Pure decision logic; it never touches the identity cache.
    """

    def __init__(self, rules: tuple[ClassificationRule, ...] = DEFAULT_RULES):
        self.rules = tuple(rules)

    def match_rule(self, tag: Any, payload: Any) -> ClassificationRule | None:
        """Return the first rule matching ``(tag, payload)``, if any."""
        text = tag.lower() if isinstance(tag, str) else ""
        data = payload if isinstance(payload, Mapping) else {}
        for rule in self.rules:
            if rule.matches(text, data):
                return rule
        return None

    def classify(self, tag: Any, payload: Any) -> EventKind:
        """Decide which business event ``(tag, payload)`` describes.

        Args:
            tag: Free-text event description from the emitter.
            payload: The event's data object; keys are never assumed present.

        Returns:
            The EventKind built by the first matching rule, or Unrecognized.
        """
        rule = self.match_rule(tag, payload)
        raw_tag = tag if isinstance(tag, str) else ""
        if rule is None:
            return Unrecognized(raw_tag=raw_tag)
        data = payload if isinstance(payload, Mapping) else {}
        return rule.build(raw_tag, data)


__all__ = ["ClassificationRule", "DEFAULT_RULES", "EventClassifier"]
