"""FastAPI server exposing the AI Dresser endpoints."""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from dresser_app.app import AIDresserApp
from dresser_app.logging_config import configure_logging

_STATUS_CODES = {
    "denied": 403,
    "not_found": 404,
    "needs_review": 422,
    "unavailable": 503,
}


class AccessPayload(BaseModel):
    """Request payload for access checks and session starts."""

    user_id: Optional[str] = Field(None, description="Authenticated storefront user id")
    auth_token: Optional[str] = None


class BonusPayload(AccessPayload):
    count: int = Field(1, ge=1, description="Bonus sessions to add")


class LookActionPayload(BaseModel):
    """Loose look payload; the agent validates the details."""

    model_config = ConfigDict(extra="allow")

    user_id: Optional[str] = None
    session_id: str = ""
    look_number: int = 1
    look_name: str = ""
    items: List[Dict[str, Any]] = Field(default_factory=list)


def _require_user(user_id: Optional[str]) -> str:
    if not user_id or not user_id.strip():
        raise HTTPException(status_code=401, detail="Please log in to access the AI Dresser feature.")
    return user_id.strip()


def _unwrap(response: Dict[str, Any]) -> Dict[str, Any]:
    status = response.get("status", "ok")
    if status == "ok":
        return response
    raise HTTPException(status_code=_STATUS_CODES.get(status, 400), detail=response)


def create_app(dresser: AIDresserApp | None = None) -> FastAPI:
    """Build the FastAPI application around an ``AIDresserApp``."""

    configure_logging()
    dresser = dresser or AIDresserApp()
    agent = dresser.agent
    app = FastAPI(title="AI Dresser", version="0.1.0")

    @app.get("/healthz")
    async def healthcheck() -> dict:
        """Lightweight readiness probe."""

        return {
            "status": "ok",
            "service": "ai-dresser",
            "environment": dresser.config.environment or "local",
            "model": dresser.config.model,
        }

    @app.post("/ai-dresser/check-access")
    def check_access(request: AccessPayload) -> dict:
        """Report whether the user may start a session, without consuming one."""

        return _unwrap(agent.check_access(_require_user(request.user_id)))

    @app.post("/ai-dresser/start-session")
    def start_session(request: AccessPayload) -> dict:
        """Consume a daily-free or bonus session and return its id."""

        return _unwrap(agent.start_session(_require_user(request.user_id)))

    @app.post("/ai-dresser/bonus-sessions")
    def award_bonus(request: BonusPayload) -> dict:
        return _unwrap(agent.award_bonus_sessions(_require_user(request.user_id), request.count))

    @app.post("/ai-dresser/get-recommendations")
    def get_recommendations(payload: Dict[str, Any]) -> dict:
        """Assemble looks from the quiz answers."""

        _require_user(payload.get("user_id"))
        return _unwrap(agent.get_recommendations(payload))

    @app.post("/ai-dresser/save-wishlist")
    def save_wishlist(request: LookActionPayload) -> dict:
        _require_user(request.user_id)
        return _unwrap(agent.save_look(request.model_dump()))

    @app.get("/ai-dresser/wishlist/{user_id}")
    def list_wishlist(user_id: str) -> dict:
        return _unwrap(agent.list_saved_looks(user_id))

    @app.delete("/ai-dresser/wishlist/{user_id}/{saved_id}")
    def delete_wishlist_look(user_id: str, saved_id: str) -> dict:
        return _unwrap(agent.delete_saved_look(user_id, saved_id))

    @app.post("/ai-dresser/add-to-cart")
    def add_to_cart(request: LookActionPayload) -> dict:
        """Describe the cart additions for a look and notify the store admin."""

        return _unwrap(agent.add_look_to_cart(request.model_dump()))

    @app.post("/ai-dresser/share-look")
    def share_look(request: LookActionPayload) -> dict:
        return _unwrap(agent.share_look(request.model_dump()))

    return app


_app: FastAPI | None = None


def get_app() -> FastAPI:
    """Expose the FastAPI instance for ASGI servers."""

    global _app
    if _app is None:
        _app = create_app()
    return _app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:get_app", factory=True, host="0.0.0.0", port=int("8080"), reload=False)
