"""Unit tests for the event classifier and its rule table."""

import pytest

from shopcast.core.classifier import DEFAULT_RULES, ClassificationRule, EventClassifier
from shopcast.core.models import (
    UNKNOWN,
    EstimateViewed,
    FeeLine,
    InspectionCompleted,
    JobLine,
    PartsReceived,
    PaymentMade,
    RepairOrderCompleted,
    Unrecognized,
    WorkAuthorization,
)


@pytest.fixture
def classifier() -> EventClassifier:
    return EventClassifier()


class TestRuleTable:
    """The rule table is data and its order is part of the contract."""

    def test_rule_order(self) -> None:
        assert [rule.name for rule in DEFAULT_RULES] == [
            "estimate_viewed",
            "work_authorization",
            "repair_order_completed",
            "payment_made",
            "inspection_completed",
            "parts_received",
        ]

    def test_match_rule_returns_none_for_unknown_tag(self, classifier: EventClassifier) -> None:
        assert classifier.match_rule("Vehicle checked in", {}) is None

    def test_overlapping_tag_first_rule_wins(self, classifier: EventClassifier) -> None:
        """A tag matching estimate+viewed and approved+declined is EstimateViewed."""
        tag = "Customer viewed estimate, approved 1 and declined 2"
        assert classifier.match_rule(tag, {}).name == "estimate_viewed"
        assert classifier.classify(tag, {"jobs": [{"authorized": True}]}) == EstimateViewed()

    def test_custom_rule_table(self) -> None:
        """New emitter variants are added as rows, not control flow."""
        checked_in = ClassificationRule(
            name="checked_in",
            matches=lambda tag, payload: "checked in" in tag,
            build=lambda tag, payload: EstimateViewed(),
        )
        classifier = EventClassifier(rules=(checked_in,) + DEFAULT_RULES)
        assert classifier.classify("Vehicle checked in", {}) == EstimateViewed()


class TestEstimateViewed:
    def test_scenario_tag(self, classifier: EventClassifier) -> None:
        kind = classifier.classify(
            "Grant Bodmer viewed estimate for Repair Order #12558",
            {"repairOrderNumber": 12558, "customer": {"firstName": "Grant", "lastName": "Bodmer"}},
        )
        assert kind == EstimateViewed()

    def test_case_insensitive(self, classifier: EventClassifier) -> None:
        assert classifier.classify("ESTIMATE VIEWED", {}) == EstimateViewed()


class TestWorkAuthorization:
    def test_counts_authorized_jobs(self, classifier: EventClassifier) -> None:
        kind = classifier.classify(
            "Grant Bodmer approved 1 job(s) and declined 0 job(s) for Repair Order #12558",
            {"jobs": [{"authorized": True}, {"authorized": False}, {}]},
        )
        assert kind == WorkAuthorization(approved_count=1, declined_count=2)

    def test_missing_jobs_counts_zero(self, classifier: EventClassifier) -> None:
        kind = classifier.classify("approved 0 and declined 0", {})
        assert kind == WorkAuthorization(approved_count=0, declined_count=0)

    def test_non_boolean_authorized_is_declined(self, classifier: EventClassifier) -> None:
        kind = classifier.classify(
            "approved and declined", {"jobs": [{"authorized": "yes"}, "junk"]}
        )
        assert kind == WorkAuthorization(approved_count=0, declined_count=2)


class TestRepairOrderCompleted:
    def test_scenario_amounts(self, classifier: EventClassifier) -> None:
        kind = classifier.classify(
            "Repair Order #999 completed by tech@example.com",
            {
                "repairOrderStatus": {"name": "Completed"},
                "laborSales": 1000,
                "partsSales": 500,
                "feeTotal": 200,
                "totalSales": 1700,
            },
        )
        assert isinstance(kind, RepairOrderCompleted)
        assert (kind.labor_cents, kind.parts_cents, kind.fee_cents, kind.total_cents) == (
            1000,
            500,
            200,
            1700,
        )

    def test_float_amounts(self, classifier: EventClassifier) -> None:
        kind = classifier.classify(
            "Repair Order #999 completed",
            {"repairOrderStatus": {"name": "Completed"}, "laborSales": 1000.0, "totalSales": 1700.4},
        )
        assert kind.labor_cents == 1000
        assert kind.total_cents == 1700

    def test_status_complete_with_missing_amounts(self, classifier: EventClassifier) -> None:
        kind = classifier.classify("anything", {"repairOrderStatus": {"name": " complete "}})
        assert kind == RepairOrderCompleted()

    def test_status_drives_classification_not_tag(self, classifier: EventClassifier) -> None:
        kind = classifier.classify("Repair Order #5 completed", {"repairOrderStatus": {"name": "In Progress"}})
        assert isinstance(kind, Unrecognized)

    def test_job_and_fee_details(self, classifier: EventClassifier) -> None:
        kind = classifier.classify(
            "Repair Order #1 completed",
            {
                "repairOrderStatus": {"name": "COMPLETED"},
                "completedDate": "2025-04-02T15:30:00Z",
                "jobs": [
                    {"name": "Oil change", "laborHours": 0.5, "laborTotal": 4500},
                    {"laborHours": 1},
                ],
                "fees": [{"name": "Shop supplies", "total": 350}, {"total": 10}],
            },
        )
        assert kind.completed_at == "2025-04-02T15:30:00Z"
        assert kind.jobs == (JobLine(name="Oil change", labor_hours=0.5, labor_cents=4500),)
        assert kind.fees == (FeeLine(name="Shop supplies", cents=350),)


class TestPaymentMade:
    def test_tag_match_with_amount(self, classifier: EventClassifier) -> None:
        kind = classifier.classify("Payment made", {"amount": 27000, "repairOrderId": 77})
        assert isinstance(kind, PaymentMade)
        assert kind.amount_cents == 27000
        assert kind.payment_method is UNKNOWN
        assert kind.is_paid_in_full is False

    def test_payload_match_amount_paid_equals_total(self, classifier: EventClassifier) -> None:
        kind = classifier.classify("Balance settled", {"amountPaid": 1700, "totalSales": 1700})
        assert isinstance(kind, PaymentMade)
        assert kind.amount_cents == 1700
        assert kind.is_paid_in_full is True

    def test_zero_amount_paid_does_not_match(self, classifier: EventClassifier) -> None:
        kind = classifier.classify("Balance settled", {"amountPaid": 0, "totalSales": 0})
        assert isinstance(kind, Unrecognized)

    def test_fractional_amounts_are_rounded_not_dropped(self, classifier: EventClassifier) -> None:
        kind = classifier.classify("Balance settled", {"amountPaid": 17.5, "totalSales": 17.5})
        assert isinstance(kind, PaymentMade)
        assert kind.is_paid_in_full is True

        kind = classifier.classify("Payment made", {"amount": 1699.6})
        assert kind.amount_cents == 1700

    def test_partial_payment(self, classifier: EventClassifier) -> None:
        kind = classifier.classify(
            "Payment made",
            {"amount": 500, "amountPaid": 500, "totalSales": 1700, "paymentType": {"name": "Visa"}},
        )
        assert kind.is_paid_in_full is False
        assert kind.payment_method == "Visa"

    def test_succeeded_status_marks_paid_in_full(self, classifier: EventClassifier) -> None:
        kind = classifier.classify("payment made", {"amount": 100, "paymentStatus": "SUCCEEDED"})
        assert kind.is_paid_in_full is True

    def test_payment_method_fallback_and_date(self, classifier: EventClassifier) -> None:
        kind = classifier.classify(
            "Payment made", {"amount": 100, "paymentMethod": "Cash", "paymentDate": "2025-04-02"}
        )
        assert kind.payment_method == "Cash"
        assert kind.paid_at == "2025-04-02"


class TestInspectionCompleted:
    def test_name_and_tasks(self, classifier: EventClassifier) -> None:
        kind = classifier.classify(
            "Inspection marked complete",
            {
                "name": "Multi-point",
                "inspectionTasks": [
                    {
                        "title": "Brakes ",
                        "tasks": [
                            {"name": "Front pads", "inspectionRating": "Fair", "finding": "3mm"},
                            {"name": "Rotors", "reported": True},
                        ],
                    }
                ],
            },
        )
        assert isinstance(kind, InspectionCompleted)
        assert kind.inspection_name == "Multi-point"
        assert kind.groups[0].title == "Brakes"
        assert kind.groups[0].tasks[0].rating == "Fair"
        assert kind.groups[0].tasks[1].reported is True

    def test_missing_name_is_unknown(self, classifier: EventClassifier) -> None:
        kind = classifier.classify("Inspection complete", {})
        assert kind == InspectionCompleted(inspection_name=UNKNOWN)


class TestPartsReceived:
    def test_purchase_order_from_payload(self, classifier: EventClassifier) -> None:
        kind = classifier.classify("Purchase Order #41 received", {"purchaseOrderId": 5001})
        assert kind == PartsReceived(purchase_order_id="5001")

    def test_purchase_order_from_tag(self, classifier: EventClassifier) -> None:
        kind = classifier.classify("Purchase Order #4417 received by Parts Desk", {})
        assert kind == PartsReceived(purchase_order_id="4417")

    def test_unparseable_purchase_order_is_unknown(self, classifier: EventClassifier) -> None:
        kind = classifier.classify("purchase order received", {})
        assert kind == PartsReceived(purchase_order_id=UNKNOWN)


class TestUnrecognized:
    def test_unknown_tag(self, classifier: EventClassifier) -> None:
        assert classifier.classify("Vehicle checked in", {}) == Unrecognized(raw_tag="Vehicle checked in")

    @pytest.mark.parametrize(
        ("tag", "payload"),
        [
            (None, None),
            (42, {"jobs": "nope"}),
            ("", []),
            ("Payment", {"amountPaid": "lots"}),
        ],
    )
    def test_malformed_input_never_raises(self, classifier: EventClassifier, tag, payload) -> None:
        assert isinstance(classifier.classify(tag, payload), Unrecognized)

    def test_classification_is_repeatable(self, classifier: EventClassifier) -> None:
        payload = {"jobs": [{"authorized": True}]}
        tag = "approved 1 declined 0"
        assert classifier.classify(tag, payload) == classifier.classify(tag, payload)
