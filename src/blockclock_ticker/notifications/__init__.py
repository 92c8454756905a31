__all__ = ["EmailNotifier", "TelegramNotifier"]

from blockclock_ticker.notifications.mail import EmailNotifier
from blockclock_ticker.notifications.telegram import TelegramNotifier
