"""Unit tests for the FAQ repository."""

import pytest

from matchtrip.core.exceptions import NotFoundError
from matchtrip.schemas.faq import CreateFaqRequest, FaqPatch


@pytest.mark.asyncio
async def test_create_appends_after_last_item(faq_repository):
    """Test omitted sort_order lands after the current maximum."""
    first = await faq_repository.create(CreateFaqRequest(question="When do I find out?", answer="A week before."))
    second = await faq_repository.create(CreateFaqRequest(question="Can I cancel?", answer="Yes."))

    assert first.sort_order == 1
    assert second.sort_order == 2
    assert first.id.startswith("faq-")


@pytest.mark.asyncio
async def test_list_is_ordered_by_sort_order(faq_repository):
    """Test FAQs come back in display order, not insertion order."""
    await faq_repository.create(CreateFaqRequest(question="Last", answer="c", sort_order=30))
    await faq_repository.create(CreateFaqRequest(question="First", answer="a", sort_order=10))
    await faq_repository.create(CreateFaqRequest(question="Middle", answer="b", sort_order=20))

    assert [item.question for item in await faq_repository.list()] == ["First", "Middle", "Last"]


@pytest.mark.asyncio
async def test_update_and_delete_faq(faq_repository):
    """Test patching and removing an FAQ."""
    created = await faq_repository.create(CreateFaqRequest(question="Q?", answer="A."))

    updated = await faq_repository.update(created.id, FaqPatch(answer="Better answer."))
    assert updated.answer == "Better answer."
    assert updated.question == "Q?"

    await faq_repository.delete(created.id)
    assert await faq_repository.list() == []

    with pytest.raises(NotFoundError):
        await faq_repository.update(created.id, FaqPatch(answer="Gone"))
