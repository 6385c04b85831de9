"""Notification templates, one per event kind.

Pure rendering from ``(EventKind, ResolvedIdentity)`` to
NotificationContent. Transport-specific serialization (Discord embeds,
plain text) belongs to the notification adapters.
"""

from datetime import datetime

from .models import (
    EstimateViewed,
    EventKind,
    InspectionCompleted,
    InspectionGroup,
    InspectionTask,
    NotificationContent,
    PartsReceived,
    PaymentMade,
    RepairOrderCompleted,
    ResolvedIdentity,
    Unrecognized,
    WorkAuthorization,
    display,
)


def format_cents(cents: int) -> str:
    """Render integer cents as a dollar amount, e.g. 27000 -> ``$270.00``."""
    sign = "-" if cents < 0 else ""
    dollars, remainder = divmod(abs(cents), 100)
    return f"{sign}${dollars}.{remainder:02d}"


def format_timestamp(value: str) -> str:
    """Render an ISO-8601 timestamp as ``YYYY-MM-DD HH:MM [TZ]``.

    Text that does not parse is returned unchanged.
    """
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    rendered = moment.strftime("%Y-%m-%d %H:%M")
    zone = moment.tzname()
    return f"{rendered} {zone}" if zone else rendered


def _inspection_marker(task: InspectionTask) -> str:
    if task.rating == "Poor" or task.reported:
        return "❌"
    if task.rating == "Fair":
        return "⚠️"
    return "✅"


def _inspection_line(task: InspectionTask) -> str:
    status = task.rating or ("Issue Found" if task.reported else "No Issues")
    finding = f" ({task.finding})" if task.finding else ""
    return f"- {task.name}: {_inspection_marker(task)} {status}{finding}"


def _inspection_section(group: InspectionGroup) -> str:
    lines = [f"**{group.title}**"]
    lines.extend(_inspection_line(task) for task in group.tasks)
    return "\n".join(lines)


class NotificationFormatter:
    """Renders classified events into notification content.

    Stateless; every template is deterministic for a given input.
    """

    def format(
        self, kind: EventKind, identity: ResolvedIdentity
    ) -> NotificationContent | None:
        """Render one event.

        Args:
            kind: Classified event.
            identity: Resolved customer and repair-order identity.

        Returns:
            NotificationContent, or None for Unrecognized events, which are
            logged by the caller and never sent.
        """
        if isinstance(kind, Unrecognized):
            return None
        if isinstance(kind, EstimateViewed):
            return self._estimate_viewed(identity)
        if isinstance(kind, WorkAuthorization):
            return self._work_authorization(kind, identity)
        if isinstance(kind, RepairOrderCompleted):
            return self._repair_order_completed(kind, identity)
        if isinstance(kind, PaymentMade):
            return self._payment_made(kind, identity)
        if isinstance(kind, InspectionCompleted):
            return self._inspection_completed(kind, identity)
        if isinstance(kind, PartsReceived):
            return self._parts_received(kind, identity)
        return None

    @staticmethod
    def _title(emoji: str, identity: ResolvedIdentity) -> str:
        number = display(identity.repair_order_number)
        name = display(identity.customer_name)
        return f"{emoji} Repair Order #{number} - {name}"

    @staticmethod
    def _identity_fields(identity: ResolvedIdentity) -> tuple[tuple[str, str], ...]:
        return (
            ("Repair Order", display(identity.repair_order_number)),
            ("Customer", display(identity.customer_name)),
        )

    def _estimate_viewed(self, identity: ResolvedIdentity) -> NotificationContent:
        return NotificationContent(
            title=self._title("👀", identity),
            body="Customer viewed the estimate.",
            fields=self._identity_fields(identity),
        )

    def _work_authorization(
        self, kind: WorkAuthorization, identity: ResolvedIdentity
    ) -> NotificationContent:
        return NotificationContent(
            title=self._title("✅", identity),
            body=(
                f"Customer approved {kind.approved_count} job(s) and "
                f"declined {kind.declined_count} job(s)."
            ),
            fields=self._identity_fields(identity)
            + (
                ("Approved", str(kind.approved_count)),
                ("Declined", str(kind.declined_count)),
            ),
        )

    def _repair_order_completed(
        self, kind: RepairOrderCompleted, identity: ResolvedIdentity
    ) -> NotificationContent:
        lines = ["Work has been completed."]
        if kind.completed_at:
            lines.append(f"Completed on: {format_timestamp(kind.completed_at)}")

        if kind.jobs:
            lines.extend(["", "**Services Performed:**"])
            for job in kind.jobs:
                lines.append(f"- {job.name}")
                if job.labor_hours is not None:
                    lines.append(f"  - Labor Hours: {job.labor_hours:g}")
                lines.append(f"  - Labor Cost: {format_cents(job.labor_cents)}")

        if kind.fees:
            lines.extend(["", "**Fees:**"])
            lines.extend(f"- {fee.name}: {format_cents(fee.cents)}" for fee in kind.fees)

        return NotificationContent(
            title=self._title("🔧", identity),
            body="\n".join(lines),
            fields=self._identity_fields(identity)
            + (
                ("Labor", format_cents(kind.labor_cents)),
                ("Parts", format_cents(kind.parts_cents)),
                ("Fees", format_cents(kind.fee_cents)),
                ("Total", format_cents(kind.total_cents)),
            ),
        )

    def _payment_made(
        self, kind: PaymentMade, identity: ResolvedIdentity
    ) -> NotificationContent:
        amount = format_cents(kind.amount_cents)
        method = display(kind.payment_method)
        status = "✅ Paid in Full" if kind.is_paid_in_full else "⚠️ Partially Paid"
        lines = [f"💰 Payment Received: **{amount}** ({method})"]
        if kind.paid_at:
            lines.append(f"📅 Payment Date: {format_timestamp(kind.paid_at)}")
        lines.append(status)
        return NotificationContent(
            title=self._title("🧾", identity),
            body="\n".join(lines),
            fields=self._identity_fields(identity)
            + (
                ("Amount", amount),
                ("Method", method),
                ("Status", "Paid in Full" if kind.is_paid_in_full else "Partially Paid"),
            ),
        )

    def _inspection_completed(
        self, kind: InspectionCompleted, identity: ResolvedIdentity
    ) -> NotificationContent:
        name = display(kind.inspection_name)
        lines = [f'Inspection "**{name}**" has been completed.']
        if kind.completed_at:
            lines.append(f"Completed on: {format_timestamp(kind.completed_at)}")
        if kind.groups:
            lines.extend(["", "**Inspection Details:**", ""])
            lines.append("\n\n".join(_inspection_section(group) for group in kind.groups))
        return NotificationContent(
            title=self._title("🔍", identity),
            body="\n".join(lines),
            fields=self._identity_fields(identity) + (("Inspection", name),),
        )

    def _parts_received(
        self, kind: PartsReceived, identity: ResolvedIdentity
    ) -> NotificationContent:
        fields: tuple[tuple[str, str], ...] = (
            ("Purchase Order", display(kind.purchase_order_id)),
        )
        if identity.repair_order_number:
            fields += (("Repair Order", display(identity.repair_order_number)),)
        return NotificationContent(
            title=f"📦 Purchase Order #{display(kind.purchase_order_id)}",
            body="Parts have been received for this order.",
            fields=fields,
        )


__all__ = ["NotificationFormatter", "format_cents", "format_timestamp"]
