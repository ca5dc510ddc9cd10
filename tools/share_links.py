"""Share links and messages for a look."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence
from urllib.parse import quote

from logic.validation import LookItemPayload

CURRENCY = "₱"
PREVIEW_LENGTH = 100


def _format_price(value: float) -> str:
    if float(value).is_integer():
        return f"{CURRENCY}{int(value)}"
    return f"{CURRENCY}{value:.2f}"


def share_url(base_url: str, session_id: str, look_number: int) -> str:
    return f"{base_url.rstrip('/')}/shared-look/{quote(session_id, safe='')}/{look_number}"


def share_message(
    look_name: str, items: Sequence[LookItemPayload], total_price: float, url: str, store_name: str
) -> str:
    pieces = ", ".join(f"{item.product_name} - {_format_price(item.price)}" for item in items)
    return f"Check out this {look_name} from {store_name}! {pieces} Total: {_format_price(total_price)} {url}"


def build_share_options(
    base_url: str,
    session_id: str,
    look_number: int,
    look_name: str,
    items: Sequence[LookItemPayload],
    total_price: Optional[float] = None,
    store_name: str = "America Brands Bazaar",
) -> Dict[str, Any]:
    """Return the share URLs for Messenger, WhatsApp and copy-link plus a preview."""

    total = total_price if total_price is not None else sum(item.price for item in items)
    url = share_url(base_url, session_id, look_number)
    message = share_message(look_name, items, total, url, store_name)
    redirect = f"{base_url.rstrip('/')}/share-complete"
    preview = message if len(message) <= PREVIEW_LENGTH else message[:PREVIEW_LENGTH] + "..."
    return {
        "success": True,
        "message": "Share link generated!",
        "share_options": {
            "messenger": {
                "url": f"https://www.facebook.com/dialog/send?link={quote(url, safe='')}"
                f"&redirect_uri={quote(redirect, safe='')}",
                "label": "Share via Messenger",
            },
            "whatsapp": {
                "url": f"https://wa.me/?text={quote(message, safe='')}",
                "label": "Share via WhatsApp",
            },
            "copy_link": {"url": url, "label": "Copy Link"},
        },
        "preview": {"look_name": look_name, "message_preview": preview},
    }


__all__ = ["share_url", "share_message", "build_share_options"]
