"""Pydantic schemas and helpers for validating AI Dresser request payloads."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from models.quiz import QuizAnswers, SizePreferences
from models.taxonomy import normalize_gender


class SizesPayload(BaseModel):
    top: str = ""
    bottom: str = ""
    shoe: str = ""


class QuizAnswersPayload(BaseModel):
    """Quiz answers as posted by the storefront."""

    purpose: Optional[Literal["personal", "gift"]] = "personal"
    gender: Optional[str] = None
    style: str = ""
    occasion: str = ""
    budget: str | int | float | None = None
    color: str = ""
    sizes: Optional[SizesPayload] = None
    recipient: Optional[str] = None
    relationship: Optional[str] = None

    @field_validator("gender")
    @classmethod
    def _validate_gender(cls, gender: Optional[str]) -> Optional[str]:
        return normalize_gender(gender)

    def to_answers(self) -> QuizAnswers:
        sizes = self.sizes or SizesPayload()
        return QuizAnswers(
            purpose=self.purpose or "personal",
            gender=self.gender,
            style=self.style,
            occasion=self.occasion,
            budget=self.budget,
            color=self.color,
            sizes=SizePreferences(top=sizes.top, bottom=sizes.bottom, shoe=sizes.shoe),
            recipient=self.recipient,
            relationship=self.relationship,
        )


class AccessRequest(BaseModel):
    """Input contract for access checks and session starts."""

    user_id: str = Field(min_length=1)
    auth_token: Optional[str] = None


class RecommendationRequest(BaseModel):
    """Input contract for look recommendations.

    ``products`` carries a client-supplied catalog snapshot; when omitted the
    server-side catalog store is used.
    """

    user_id: str = Field(min_length=1)
    session_id: Optional[str] = None
    answers: QuizAnswersPayload = Field(validation_alias=AliasChoices("answers", "collected_data"))
    products: Optional[List[Dict[str, Any]]] = None
    exclude_product_ids: List[str] = Field(default_factory=list)


class LookItemPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    product_id: str = Field(min_length=1)
    product_name: str = ""
    brand: str = ""
    category: str = ""
    price: float = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    image_url: Optional[str] = None
    product_url: Optional[str] = None
    styling_note: Optional[str] = None


class LookPayload(BaseModel):
    """Fields shared by requests that act on one look."""

    session_id: str = ""
    user_id: Optional[str] = None
    look_number: int = Field(default=1, ge=1)
    look_name: str = ""
    items: List[LookItemPayload] = Field(min_length=1)
    total_price: Optional[float] = Field(default=None, ge=0)


class SaveLookRequest(LookPayload):
    user_id: str = Field(min_length=1)


class CartRequest(LookPayload):
    action_type: Literal["add_all", "add_single"] = "add_all"
    user_name: Optional[str] = None
    user_email: Optional[str] = None


class ShareLookRequest(LookPayload):
    channel: Optional[str] = None


class ValidationResult(BaseModel):
    """Wrapper returned to callers when validation fails."""

    status: Literal["needs_review"] = "needs_review"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent review payload."""

    details = [
        {key: value for key, value in error.items() if key in {"type", "loc", "msg"}}
        for error in exc.errors()
    ]
    return ValidationResult(message=message, details=details).model_dump()


__all__ = [
    "SizesPayload",
    "QuizAnswersPayload",
    "AccessRequest",
    "RecommendationRequest",
    "LookItemPayload",
    "LookPayload",
    "SaveLookRequest",
    "CartRequest",
    "ShareLookRequest",
    "ValidationResult",
    "validation_failure",
]
