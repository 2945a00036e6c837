"""FAQ schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field

from .common import Meta, StrictModel


class FaqItem(StrictModel):
    """A single question and answer."""

    id: str = Field(..., min_length=1, description="Unique FAQ ID")
    question: str = Field(..., min_length=1, max_length=500)
    answer: str = Field(..., min_length=1, max_length=5000)
    sort_order: int = Field(1, ge=0, description="Ascending display order")


class FaqCollection(BaseModel):
    """Persisted ``faqs`` collection."""

    faqs: List[FaqItem] = Field(default_factory=list)
    meta: Meta = Field(default_factory=Meta)


class CreateFaqRequest(StrictModel):
    """Request schema for creating an FAQ."""

    question: str = Field(..., min_length=1, max_length=500)
    answer: str = Field(..., min_length=1, max_length=5000)
    sort_order: Optional[int] = Field(None, ge=0, description="Appended after the last item when omitted")


class FaqPatch(StrictModel):
    """Updatable FAQ fields."""

    question: Optional[str] = Field(None, min_length=1, max_length=500)
    answer: Optional[str] = Field(None, min_length=1, max_length=5000)
    sort_order: Optional[int] = Field(None, ge=0)


class UpdateFaqRequest(FaqPatch):
    """Request schema for patching an FAQ."""

    id: str = Field(..., min_length=1)

    def to_patch(self) -> FaqPatch:
        return FaqPatch(**self.model_dump(exclude={"id"}, exclude_unset=True))
