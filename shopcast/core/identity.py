"""Customer and repair-order identity resolution.

Many emitter payloads omit who the customer is, or carry only the internal
repair-order id instead of the customer-facing number. The IdentityCache
remembers facts that earlier events asserted so later events for the same
repair order can still be attributed.
"""

import logging
import re
import threading
from collections.abc import Mapping
from typing import Any

from .fields import Lookup, MISSING, Present, lookup_str
from .models import UNKNOWN, ResolvedIdentity

logger = logging.getLogger(__name__)

# Tags led by a business object rather than a person's name.
OBJECT_TAG_PREFIXES: tuple[str, ...] = (
    "repair order",
    "purchase order",
    "inspection",
    "estimate",
    "payment",
    "invoice",
)

_NAME_WORD = r"[^\W\d_](?:[^\W\d_]|['\-])*"
_LEADING_NAME = re.compile(rf"^\s*({_NAME_WORD})\s+({_NAME_WORD})(?=[\s,.:;!?]|$)")


class IdentityCache:
    """Process-lifetime memory of repair-order identity facts.

    Holds two mappings, both keyed by text:

    - RO number -> customer full name
    - RO internal id -> RO number

    Entries are only ever added or overwritten (last write wins), never
    removed. A single lock guards both mappings; it is held only for the
    dictionary operation itself.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._number_to_customer_name: dict[str, str] = {}
        self._id_to_number: dict[str, str] = {}

    def remember_customer(self, repair_order_number: str, customer_name: str) -> None:
        with self._lock:
            previous = self._number_to_customer_name.get(repair_order_number)
            self._number_to_customer_name[repair_order_number] = customer_name
        if previous is not None and previous != customer_name:
            logger.debug(
                "Customer name replaced for repair order",
                extra={"repair_order_number": repair_order_number},
            )

    def remember_number(self, repair_order_id: str, repair_order_number: str) -> None:
        with self._lock:
            self._id_to_number[repair_order_id] = repair_order_number

    def customer_for(self, repair_order_number: str) -> Lookup:
        with self._lock:
            name = self._number_to_customer_name.get(repair_order_number)
        return MISSING if name is None else Present(name)

    def number_for(self, repair_order_id: str) -> Lookup:
        with self._lock:
            number = self._id_to_number.get(repair_order_id)
        return MISSING if number is None else Present(number)

    def snapshot(self) -> dict[str, dict[str, str]]:
        """Return a copy of both mappings, for diagnostics and tests."""
        with self._lock:
            return {
                "number_to_customer_name": dict(self._number_to_customer_name),
                "id_to_number": dict(self._id_to_number),
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._number_to_customer_name) + len(self._id_to_number)


def _repair_order_id(payload: Mapping[str, Any]) -> Lookup:
    found = lookup_str(payload, "repairOrderId")
    if found.is_present:
        return found
    return lookup_str(payload, "id")


def _customer_of_record(payload: Mapping[str, Any]) -> Lookup:
    first = lookup_str(payload, "customer", "firstName")
    last = lookup_str(payload, "customer", "lastName")
    if first.is_present and last.is_present:
        return Present(f"{first.value} {last.value}")
    return MISSING


def name_from_tag(tag: Any) -> Lookup:
    """Read a leading ``<First> <Last>`` actor name from an event tag.

    Tags led by a business object ("Repair Order #12 ...") are skipped, as
    are tags whose first two words are not both capitalised.
    """
    if not isinstance(tag, str):
        return MISSING
    text = tag.strip()
    if text.lower().startswith(OBJECT_TAG_PREFIXES):
        return MISSING
    match = _LEADING_NAME.match(text)
    if match is None or not (match.group(1)[0].isupper() and match.group(2)[0].isupper()):
        return MISSING
    return Present(f"{match.group(1)} {match.group(2)}")


def resolve(payload: Any, cache: IdentityCache, tag: Any = "") -> ResolvedIdentity:
    """Resolve the customer name and repair-order number for one event.

    Facts asserted by the payload itself (number together with id, or
    number together with a full customer name) are written to ``cache``
    before it is read, so the same event benefits from them.

    Args:
        payload: The event's data object.
        cache: Identity cache shared across events.
        tag: The event's free-text tag, used as a last-resort name source.

    Returns:
        ResolvedIdentity with UNKNOWN in place of anything unresolvable.
    """
    data = payload if isinstance(payload, Mapping) else {}

    number = lookup_str(data, "repairOrderNumber")
    ro_id = _repair_order_id(data)

    if number.is_present and ro_id.is_present:
        cache.remember_number(ro_id.value, number.value)

    resolved_number = number
    if not resolved_number.is_present and ro_id.is_present:
        resolved_number = cache.number_for(ro_id.value)

    customer = _customer_of_record(data)
    if customer.is_present:
        if number.is_present:
            cache.remember_customer(number.value, customer.value)
    else:
        customer = lookup_str(data, "payerName")
    if not customer.is_present and resolved_number.is_present:
        customer = cache.customer_for(resolved_number.value)
    if not customer.is_present:
        customer = name_from_tag(tag)

    return ResolvedIdentity(
        customer_name=customer.or_default(UNKNOWN),
        repair_order_number=resolved_number.or_default(UNKNOWN),
    )


class IdentityResolver:
    """Resolves identities against an injected IdentityCache."""

    def __init__(self, cache: IdentityCache | None = None):
        self.cache = cache if cache is not None else IdentityCache()

    def resolve(self, payload: Any, tag: Any = "") -> ResolvedIdentity:
        return resolve(payload, self.cache, tag)


__all__ = [
    "IdentityCache",
    "IdentityResolver",
    "OBJECT_TAG_PREFIXES",
    "name_from_tag",
    "resolve",
]
