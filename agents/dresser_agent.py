"""AI Dresser agent: access gate, catalog, look engine and look actions."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from agents.stylist_message import StylistMessageWriter
from dresser_app.config import DresserConfig
from dresser_app.logging_config import get_logger, log_event, operation_context
from logic.access_gate import AccessGate
from logic.cart import build_cart_summary, notification_payload
from logic.errors import AccessDenied, InsufficientCatalog, UnknownSession, UpstreamUnavailable
from logic.recommendation_engine import generate_looks, regenerate_looks, summarize_looks
from logic.validation import (
    AccessRequest,
    CartRequest,
    RecommendationRequest,
    SaveLookRequest,
    ShareLookRequest,
    validation_failure,
)
from memory.saved_looks import SavedLook, SavedLookStore
from tools.catalog_store import CatalogProvider, StaticCatalogProvider
from tools.share_links import build_share_options
from tools.webhook_notifier import WebhookNotifier

logger = get_logger(__name__)


def _denied_payload(denied: AccessDenied) -> Dict[str, Any]:
    if isinstance(denied, UnknownSession):
        return {
            "status": "denied",
            "success": False,
            "access_granted": False,
            "error_code": "INVALID_SESSION",
            "message": str(denied),
            "action": "start_session",
        }
    next_reset = denied.reset_at.isoformat()
    return {
        "status": "denied",
        "success": False,
        "access_granted": False,
        "error_code": "NO_SESSIONS_AVAILABLE",
        "message": str(denied),
        "next_reset": next_reset,
        "unlock_options": [
            {
                "type": "wait",
                "title": "Come back tomorrow",
                "description": "Your free daily session resets at midnight.",
                "next_reset": next_reset,
            },
            {
                "type": "purchase",
                "title": "Earn bonus sessions",
                "description": "Every purchase unlocks an extra AI Dresser session.",
                "cta": "Shop now",
                "action_url": "/shop",
            },
        ],
    }


def _unavailable_payload(error: UpstreamUnavailable) -> Dict[str, Any]:
    return {
        "status": "unavailable",
        "success": False,
        "error_code": error.code,
        "message": "AI Dresser is temporarily unavailable. Please try again shortly.",
    }


class DresserAgent:
    """Serves AI Dresser requests as structured dictionaries.

    Every failure is scoped to the request and reported through ``status``:
    ``ok``, ``denied``, ``not_found``, ``unavailable`` or ``needs_review``.
    """

    def __init__(
        self,
        config: DresserConfig,
        access_gate: AccessGate,
        catalog_provider: CatalogProvider,
        saved_looks: SavedLookStore,
        notifier: Optional[WebhookNotifier] = None,
        message_writer: Optional[StylistMessageWriter] = None,
    ) -> None:
        self.config = config
        self.access_gate = access_gate
        self.catalog_provider = catalog_provider
        self.saved_looks = saved_looks
        self.notifier = notifier or WebhookNotifier(config.webhook_url)
        self.message_writer = message_writer or StylistMessageWriter(config)

    def check_access(self, user_id: str) -> Dict[str, Any]:
        try:
            request = AccessRequest(user_id=user_id)
        except ValidationError as exc:
            return validation_failure("Please log in to access the AI Dresser feature.", exc)
        status = self.access_gate.check_access(request.user_id)
        payload = {
            "status": "ok",
            "success": True,
            "access_granted": status.has_access,
            **status.to_dict(),
            "action": "start_quiz" if status.has_access else "show_unlock_options",
        }
        return payload

    def start_session(self, user_id: str) -> Dict[str, Any]:
        try:
            request = AccessRequest(user_id=user_id)
        except ValidationError as exc:
            return validation_failure("Please log in to access the AI Dresser feature.", exc)
        with operation_context("agent:dresser.start_session"):
            try:
                grant = self.access_gate.start_session(request.user_id)
            except AccessDenied as denied:
                return _denied_payload(denied)
            except UpstreamUnavailable as error:
                return _unavailable_payload(error)
        return {
            "status": "ok",
            "success": True,
            "access_granted": True,
            **grant.to_dict(),
            "action": "start_quiz",
            "message": "Welcome! Let's find your perfect style.",
        }

    def award_bonus_sessions(self, user_id: str, count: int = 1) -> Dict[str, Any]:
        try:
            request = AccessRequest(user_id=user_id)
        except ValidationError as exc:
            return validation_failure("A user is required to award bonus sessions.", exc)
        try:
            status = self.access_gate.award_bonus_sessions(request.user_id, count)
        except UpstreamUnavailable as error:
            return _unavailable_payload(error)
        return {"status": "ok", "success": True, **status.to_dict()}

    def get_recommendations(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Validate the quiz payload, meter access and return assembled looks.

        A request without ``session_id`` is checked against the quota up front
        and pays for a new session only once looks exist to return. Requests
        that carry a ``session_id`` must name a session previously granted to
        the same user; that is how "get new looks" runs without paying again.
        """

        try:
            request = RecommendationRequest.model_validate(payload)
        except ValidationError as exc:
            log_event(logger, logging.WARNING, "recommendation_request_invalid", details=str(exc))
            return validation_failure("Invalid recommendation request", exc)

        with operation_context("agent:dresser.get_recommendations", session_id=request.session_id) as correlation_id:
            log_event(
                logger,
                logging.INFO,
                "agent_call_started",
                agent="dresser",
                method="get_recommendations",
                correlation_id=correlation_id,
                user_id=request.user_id,
                client_catalog=request.products is not None,
            )
            session_id = request.session_id
            access_type = None
            try:
                if session_id:
                    self.access_gate.verify_session(request.user_id, session_id)
                else:
                    status = self.access_gate.check_access(request.user_id)
                    if not status.has_access:
                        raise AccessDenied(
                            user_id=request.user_id,
                            reset_at=status.reset_at or self.access_gate.next_reset(),
                        )
            except AccessDenied as denied:
                return _denied_payload(denied)
            except UpstreamUnavailable as error:
                return _unavailable_payload(error)

            provider = (
                StaticCatalogProvider(request.products)
                if request.products is not None
                else self.catalog_provider
            )
            try:
                products = provider.list_products()
            except Exception as exc:  # noqa: BLE001
                log_event(logger, logging.ERROR, "catalog_read_failed", error=str(exc))
                return _unavailable_payload(UpstreamUnavailable("catalog"))

            answers = request.answers.to_answers()
            if request.exclude_product_ids:
                result = regenerate_looks(
                    answers,
                    products,
                    request.exclude_product_ids,
                    look_count=self.config.looks_per_session,
                    default_budget=self.config.default_budget,
                )
            else:
                result = generate_looks(
                    answers,
                    products,
                    look_count=self.config.looks_per_session,
                    default_budget=self.config.default_budget,
                )
            if result.is_empty:
                error = InsufficientCatalog(result.products_analyzed)
                log_event(
                    logger,
                    logging.INFO,
                    "recommendation_insufficient_catalog",
                    products_analyzed=result.products_analyzed,
                    reason=str(error),
                )
                return {
                    "status": "not_found",
                    "success": False,
                    "error_code": error.code,
                    "message": "Not enough matching products to build a look. Try a different budget or style.",
                    "session_id": session_id,
                    "looks": [],
                    "stats": summarize_looks([], result.products_analyzed),
                }

            if not session_id:
                try:
                    grant = self.access_gate.start_session(request.user_id)
                except AccessDenied as denied:
                    return _denied_payload(denied)
                except UpstreamUnavailable as error:
                    return _unavailable_payload(error)
                session_id = grant.session_id
                access_type = grant.access_type

            response = {
                "status": "ok",
                "success": True,
                "session_id": session_id,
                "user_id": request.user_id,
                "access_type": access_type,
                "stylist_message": self.message_writer.write(answers, result.looks),
                "looks": [look.to_dict() for look in result.looks],
                "stats": summarize_looks(result.looks, result.products_analyzed),
                "based_on": answers.to_dict(),
                "debug_summary": result.diagnostics,
            }
            log_event(
                logger,
                logging.INFO,
                "agent_call_completed",
                agent="dresser",
                method="get_recommendations",
                correlation_id=correlation_id,
                look_count=len(result.looks),
            )
            return response

    def save_look(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            request = SaveLookRequest.model_validate(payload)
        except ValidationError as exc:
            return validation_failure("Invalid request data", exc)
        items = [item.model_dump() for item in request.items]
        total = request.total_price if request.total_price is not None else sum(item.price for item in request.items)
        try:
            saved = self.saved_looks.save_look(
                SavedLook(
                    user_id=request.user_id,
                    session_id=request.session_id,
                    look_number=request.look_number,
                    look_name=request.look_name,
                    items=items,
                    total_price=total,
                )
            )
        except Exception as exc:  # noqa: BLE001
            return self._saved_looks_unavailable("save_look", exc)
        log_event(logger, logging.INFO, "look_saved", user_id=request.user_id, look_number=request.look_number)
        return {
            "status": "ok",
            "success": True,
            "message": "Look saved to wishlist!",
            "wishlist_item": {
                "saved_id": saved.saved_id,
                "look_name": saved.look_name,
                "items_count": len(saved.items),
                "total_price": saved.total_price,
            },
            "next_actions": {"view_wishlist": "/wishlist", "continue_browsing": "/ai-dresser"},
        }

    def list_saved_looks(self, user_id: str) -> Dict[str, Any]:
        try:
            looks = self.saved_looks.list_looks(user_id)
        except Exception as exc:  # noqa: BLE001
            return self._saved_looks_unavailable("list_saved_looks", exc)
        return {"status": "ok", "success": True, "looks": [look.to_dict() for look in looks]}

    def delete_saved_look(self, user_id: str, saved_id: str) -> Dict[str, Any]:
        try:
            deleted = self.saved_looks.delete_look(user_id, saved_id)
        except Exception as exc:  # noqa: BLE001
            return self._saved_looks_unavailable("delete_saved_look", exc)
        if not deleted:
            return {"status": "not_found", "success": False, "message": "Saved look not found"}
        return {"status": "ok", "success": True}

    @staticmethod
    def _saved_looks_unavailable(method: str, exc: Exception) -> Dict[str, Any]:
        log_event(
            logger,
            logging.ERROR,
            "saved_looks_failed",
            method=method,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return _unavailable_payload(UpstreamUnavailable("saved looks"))

    def add_look_to_cart(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            request = CartRequest.model_validate(payload)
        except ValidationError as exc:
            return validation_failure("No items provided", exc)
        with operation_context("agent:dresser.add_look_to_cart", session_id=request.session_id or None):
            log_event(
                logger,
                logging.INFO,
                "look_cart_action",
                user_id=request.user_id,
                action_type=request.action_type,
                look_number=request.look_number,
                items_count=len(request.items),
            )
            notified = self.notifier.notify(
                notification_payload(
                    request.items,
                    request.action_type,
                    request.look_name,
                    request.look_number,
                    request.session_id,
                    total_price=request.total_price,
                    customer_name=request.user_name,
                    customer_email=request.user_email,
                )
            )
        summary = build_cart_summary(
            request.items,
            request.action_type,
            request.look_name,
            request.session_id,
            total_price=request.total_price,
        )
        return {"status": "ok", **summary, "notified": notified}

    def share_look(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            request = ShareLookRequest.model_validate(payload)
        except ValidationError as exc:
            return validation_failure("Invalid share request", exc)
        options = build_share_options(
            self.config.share_base_url,
            request.session_id,
            request.look_number,
            request.look_name,
            request.items,
            total_price=request.total_price,
        )
        with operation_context("agent:dresser.share_look", session_id=request.session_id or None):
            log_event(logger, logging.INFO, "look_shared", look_number=request.look_number, channel=request.channel)
        return {"status": "ok", **options}


__all__ = ["DresserAgent"]
