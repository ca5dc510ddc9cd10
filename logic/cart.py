"""Cart payloads for adding a look (or one of its items) to the shopper's cart.

The cart itself lives client-side; the service only validates the request,
prices it and describes what the client should add.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from logic.validation import LookItemPayload


def cart_total(items: Sequence[LookItemPayload], supplied_total: Optional[float] = None) -> float:
    """Use the caller's total when given, otherwise price × quantity per item."""

    if supplied_total is not None:
        return supplied_total
    return sum(item.price * item.quantity for item in items)


def build_cart_summary(
    items: Sequence[LookItemPayload],
    action_type: str,
    look_name: str,
    session_id: str,
    total_price: Optional[float] = None,
) -> Dict[str, Any]:
    cart_items: List[Dict[str, Any]] = [
        {
            "product_id": item.product_id,
            "name": item.product_name,
            "brand": item.brand,
            "price": item.price,
            "quantity": item.quantity,
            "image_url": item.image_url,
        }
        for item in items
    ]
    message = f"{len(items)} items ready for cart!" if action_type == "add_all" else "Item ready for cart!"
    return {
        "success": True,
        "message": message,
        "cart_items": cart_items,
        "cart_summary": {
            "items_count": len(items),
            "look_name": look_name,
            "total_value": cart_total(items, total_price),
        },
        "next_actions": {
            "view_cart": "/cart",
            "continue_shopping": "/shop",
            "checkout": "/checkout",
        },
        "source": "ai_dresser",
        "session_id": session_id,
    }


def notification_payload(
    items: Sequence[LookItemPayload],
    action_type: str,
    look_name: str,
    look_number: int,
    session_id: str,
    total_price: Optional[float] = None,
    customer_name: Optional[str] = None,
    customer_email: Optional[str] = None,
) -> Dict[str, Any]:
    """Admin notification body describing a look sent to the cart."""

    return {
        "type": "ai_dresser_cart",
        "data": {
            "customerName": customer_name or "Guest",
            "customerEmail": customer_email or "Not provided",
            "lookName": look_name,
            "lookNumber": look_number,
            "items": [{"name": item.product_name, "brand": item.brand, "price": item.price} for item in items],
            "totalPrice": total_price if total_price is not None else sum(item.price for item in items),
            "actionType": action_type,
            "source": "AI Dresser",
            "sessionId": session_id,
        },
    }


__all__ = ["cart_total", "build_cart_summary", "notification_payload"]
