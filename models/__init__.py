"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.access import AccessGrant, AccessStatus, UsageRecord
from models.look import Look, LookItem
from models.product import Product, from_raw_record
from models.quiz import QuizAnswers, SizePreferences

__all__ = [
    "AccessGrant",
    "AccessStatus",
    "Look",
    "LookItem",
    "Product",
    "QuizAnswers",
    "SizePreferences",
    "UsageRecord",
    "from_raw_record",
]
