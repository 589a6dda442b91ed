"""
Notification service module.

Provides best-effort status notifications.

Structure:
- core.py: Sinks (Discord webhook, Telegram) and the fan-out NotificationService
- messages.py: Message builders

Usage:
    from rotator.services.notification import NotificationService, DiscordWebhookSink

    notifications = NotificationService([DiscordWebhookSink(url)])
    notifications.notify("Hello!", wallet_index=1)
    await notifications.close()
"""

from rotator.services.notification import messages
from rotator.services.notification.core import (
    DiscordWebhookSink,
    NotificationService,
    NotificationSink,
    TelegramSink,
)


__all__ = [
    "DiscordWebhookSink",
    "NotificationService",
    "NotificationSink",
    "TelegramSink",
    "messages",
]
