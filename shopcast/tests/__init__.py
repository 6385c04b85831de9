"""Test suite for the shopcast notification system.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - No external dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Integration tests for adapter implementations
   - Discord delivery against a mocked httpx transport
   - Webhook HTTP server over real sockets

3. fakes/: Port implementations for testing
   - In-memory implementations of NotificationPort and EventIntakePort
"""
