"""Collection registry: maps collection names to their schemas and gates every read and write."""

from enum import Enum
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import ValidationError
from .auth import AdminCollection, SessionCollection
from .booking import BookingCollection
from .date_override import DateOverrideCollection
from .faq import FaqCollection
from .starting_price import StartingPriceCollection

ModelT = TypeVar("ModelT", bound=BaseModel)


class CollectionName(str, Enum):
    """Named collections; each is one JSON file in the data directory."""
    BOOKINGS = "bookings"
    DATE_OVERRIDES = "date-overrides"
    STARTING_PRICES = "starting-prices"
    FAQS = "faqs"
    ADMINS = "admins"
    SESSIONS = "sessions"


COLLECTION_MODELS: Dict[CollectionName, Type[BaseModel]] = {
    CollectionName.BOOKINGS: BookingCollection,
    CollectionName.DATE_OVERRIDES: DateOverrideCollection,
    CollectionName.STARTING_PRICES: StartingPriceCollection,
    CollectionName.FAQS: FaqCollection,
    CollectionName.ADMINS: AdminCollection,
    CollectionName.SESSIONS: SessionCollection,
}

ENTITY_KEYS: Dict[CollectionName, str] = {
    CollectionName.BOOKINGS: "bookings",
    CollectionName.DATE_OVERRIDES: "date_overrides",
    CollectionName.STARTING_PRICES: "starting_prices",
    CollectionName.FAQS: "faqs",
    CollectionName.ADMINS: "admins",
    CollectionName.SESSIONS: "sessions",
}


def violations_from(exc: PydanticValidationError, prefix: str = "") -> List[Dict[str, str]]:
    """Flatten pydantic errors into ``{path, message}`` pairs with dotted paths."""
    violations = []
    for error in exc.errors():
        parts = [str(part) for part in error["loc"]]
        if prefix:
            parts.insert(0, prefix)
        violations.append({
            "path": ".".join(parts) or "$",
            "message": error["msg"],
        })
    return violations


def validate_model(model_cls: Type[ModelT], raw: Any, context: str) -> ModelT:
    """Validate ``raw`` against ``model_cls`` or raise ``ValidationError``."""
    try:
        return model_cls.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError(
            detail=f"{context} failed schema validation",
            violations=violations_from(e),
        ) from e


def validate_collection(name: CollectionName, raw: Any) -> BaseModel:
    return validate_model(COLLECTION_MODELS[name], raw, f"Collection '{name.value}'")


def dump_collection(model: BaseModel) -> Dict[str, Any]:
    """Serialize a collection model into the JSON-ready snapshot written to disk."""
    return model.model_dump(mode="json", by_alias=True)


def empty_collection(name: CollectionName) -> Dict[str, Any]:
    return dump_collection(COLLECTION_MODELS[name]())
