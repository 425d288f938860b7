"""Alert templates — compose channel-appropriate messages from a stock record."""

from notifications.templates.low_stock_alert import LowStockAlertTemplate

__all__ = ["LowStockAlertTemplate"]
