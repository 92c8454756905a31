__all__ = ["DeviceDriver", "Notifier", "PriceSource", "Scheduler", "order_tokens"]

from blockclock_ticker.engine.protocols import DeviceDriver, Notifier, PriceSource
from blockclock_ticker.engine.scheduler import Scheduler, order_tokens
