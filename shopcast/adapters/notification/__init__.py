"""Notification adapters for delivering shop events to a chat channel.

Implementations support multiple output channels:
- Discord (webhook, rich embed or plain content)
- Stdout (terminal pretty-print)
"""
