"""Shop-management webhook to chat-channel notification bridge."""

__version__ = "0.1.0"
