"""Fake/mock implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakeNotificationPort: Captured notifications for assertion
- FakeEventIntakePort: Captured inbound events with canned results
"""

from .intake import FakeEventIntakePort
from .notification import FakeNotificationPort

__all__ = [
    "FakeEventIntakePort",
    "FakeNotificationPort",
]
