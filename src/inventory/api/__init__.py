from inventory.api.routes import stock_router

__all__ = ["stock_router"]
