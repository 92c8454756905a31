__all__ = ["BlockClockClient"]

from blockclock_ticker.device.blockclock import BlockClockClient
