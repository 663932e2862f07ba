"""
Notification collaborators for emergency alerts.

The monitor never delivers anything itself: when an alert countdown
expires it hands an AlertDispatch to an AlertNotifier. send_alert may
return a bool or an awaitable bool; False or an exception is a failed send.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Awaitable, List, Optional, Protocol, Union

from trailguard.features.profiles import EmergencyContact
from trailguard.features.recording.models import GPSFix
from trailguard.shared.constants import AlertType
from trailguard.shared.scheduler import utcnow
from trailguard.shared.telegram import TelegramNotifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlertDispatch:
    """Everything a notifier needs to deliver one alert."""
    alert_type: AlertType
    message: str
    contacts: List[EmergencyContact]
    location: Optional[GPSFix] = None
    created_at: datetime = field(default_factory=utcnow)


class AlertNotifier(Protocol):
    def send_alert(self, dispatch: AlertDispatch) -> Union[bool, Awaitable[bool]]:
        ...


class LoggingAlertNotifier:
    """Notifier that only logs; used when no delivery channel is configured."""

    def send_alert(self, dispatch: AlertDispatch) -> bool:
        for contact in dispatch.contacts:
            logger.warning(
                f"Alert {dispatch.alert_type.value} for {contact.name} "
                f"({contact.phone}): {dispatch.message}"
            )
        return True


class TelegramAlertNotifier:
    """
    Delivers alerts to contacts that have a Telegram chat id.

    The send counts as successful when at least one contact received it.
    Contacts without a chat id are skipped with a warning.
    """

    def __init__(self, telegram: TelegramNotifier):
        self.telegram = telegram

    async def send_alert(self, dispatch: AlertDispatch) -> bool:
        targets = [c for c in dispatch.contacts if c.telegram_chat_id]
        for contact in dispatch.contacts:
            if not contact.telegram_chat_id:
                logger.warning(f"Contact {contact.name} has no Telegram chat id, skipped")

        if not targets:
            return False

        results = await asyncio.gather(
            *(self.telegram.send_message(c.telegram_chat_id, dispatch.message) for c in targets)
        )
        delivered = sum(1 for ok in results if ok)
        logger.info(
            f"Alert {dispatch.alert_type.value} delivered to {delivered}/{len(targets)} contacts"
        )
        return delivered > 0
