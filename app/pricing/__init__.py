from app.pricing.oracle import get_native_price

__all__ = ["get_native_price"]
