"""Notification utilities - email."""

from src.bale.core.notifications.email import (
    send_platform_invite_email,
    send_upgrade_approved_email,
)

__all__ = [
    "send_platform_invite_email",
    "send_upgrade_approved_email",
]
