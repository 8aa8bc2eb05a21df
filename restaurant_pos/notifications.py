# restaurant_pos/notifications.py
import logging
import re
import threading
from collections import deque
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

import requests
from telebot import TeleBot
from telebot.apihelper import ApiException

from config import NOTIFICATION_DELAY_SECONDS, TELEGRAM_BOT_TOKEN, TELEGRAM_ALERT_CHAT_ID
from restaurant_pos.models.models import ProductORM

logger = logging.getLogger(__name__)

LOW_STOCK_TITLE = "Low Stock Alert"
MAX_DELIVERED = 100


def escape_markdown_v2(text: str) -> str:
    """
    Safely escape text for Telegram MarkdownV2.
    """
    escape_chars = r'_*[]()~`>#+-=|{}.!'
    return re.sub(f'([{re.escape(escape_chars)}])', r'\\\1', text or '')


class TelegramSender:
    """Deliver alert text to a single Telegram chat."""

    def __init__(self, token: str, chat_id: str):
        self.bot = TeleBot(token)
        self.chat_id = chat_id

    def __call__(self, title: str, body: str) -> bool:
        text = escape_markdown_v2(f"⚠️ {title}\n{body}")
        try:
            self.bot.send_message(self.chat_id, text, parse_mode="MarkdownV2")
            logger.info(f"✅ Telegram alert sent to {self.chat_id}")
            return True
        except (ApiException, requests.RequestException) as e:
            logger.error(f"❌ Failed to send Telegram alert: {e}")
            return False


def default_sender() -> Optional[Callable[[str, str], bool]]:
    if TELEGRAM_BOT_TOKEN and TELEGRAM_ALERT_CHAT_ID:
        return TelegramSender(TELEGRAM_BOT_TOKEN, TELEGRAM_ALERT_CHAT_ID)
    return None


def low_stock_identifier(product: ProductORM) -> str:
    return f"low-stock-{product.product_id}"


def low_stock_body(product: ProductORM) -> str:
    return f"{product.name or 'Product'} is running low on stock ({product.quantity} remaining)"


class NotificationManager:
    """
    Fire-and-forget low-stock alerts.

    Alerts are only scheduled once notifications are authorized. Each alert
    fires after `delay` seconds on a timer; scheduling an alert for a product
    that already has one pending replaces the pending one.
    """

    def __init__(self, delay: float = NOTIFICATION_DELAY_SECONDS, timer_factory=threading.Timer, sender=None):
        self.delay = delay
        self.timer_factory = timer_factory
        self.sender = sender
        self.is_authorized = False
        self._pending: Dict[str, tuple] = {}
        self._delivered = deque(maxlen=MAX_DELIVERED)
        self._lock = threading.Lock()

    def request_authorization(self) -> bool:
        self.is_authorized = True
        logger.info("🔔 Low-stock notifications enabled")
        return self.is_authorized

    def revoke_authorization(self) -> None:
        self.is_authorized = False
        self.cancel_all()
        logger.info("🔕 Low-stock notifications disabled")

    def schedule_low_stock_notification(self, product: ProductORM) -> Optional[str]:
        if not self.is_authorized:
            return None

        identifier = low_stock_identifier(product)
        notification = {
            "identifier": identifier,
            "title": LOW_STOCK_TITLE,
            "body": low_stock_body(product),
            "product_id": product.product_id,
        }

        with self._lock:
            # Remove any existing notification for this product
            existing = self._pending.pop(identifier, None)
            if existing is not None:
                existing[0].cancel()

            timer = self.timer_factory(self.delay, self._deliver, args=[notification])
            timer.daemon = True
            self._pending[identifier] = (timer, notification)
        timer.start()

        logger.debug(f"⏰ Scheduled {identifier} in {self.delay}s")
        return identifier

    def check_low_stock_products(self, products: Iterable[ProductORM]) -> List[str]:
        scheduled = []
        for product in products:
            if product.is_low_stock:
                identifier = self.schedule_low_stock_notification(product)
                if identifier:
                    scheduled.append(identifier)
        return scheduled

    def _deliver(self, notification: dict) -> None:
        with self._lock:
            # A replaced alert may still fire; only the current one is delivered
            current = self._pending.get(notification["identifier"])
            if current is None or current[1] is not notification:
                return
            del self._pending[notification["identifier"]]
            self._delivered.append(dict(notification, delivered_at=datetime.now()))

        logger.warning(f"⚠️ {notification['title']}: {notification['body']}")
        if self.sender is not None:
            self.sender(notification["title"], notification["body"])

    def pending_identifiers(self) -> List[str]:
        with self._lock:
            return sorted(self._pending)

    def delivered(self) -> List[dict]:
        with self._lock:
            return list(self._delivered)

    def cancel_all(self) -> None:
        with self._lock:
            for timer, _ in self._pending.values():
                timer.cancel()
            self._pending.clear()

    def reset(self) -> None:
        self.cancel_all()
        with self._lock:
            self._delivered.clear()
        self.is_authorized = False


notification_manager = NotificationManager(sender=default_sender())


def get_notification_manager() -> NotificationManager:
    """FastAPI dependency returning the shared notification manager."""
    return notification_manager
