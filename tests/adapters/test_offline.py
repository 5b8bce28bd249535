"""Tests for OfflineAdapter."""

import pytest

from sales_assistant.adapters.offline import OfflineAdapter
from sales_assistant.exceptions import TransientAdapterFailure
from sales_assistant.models.metadata import SaleStatus, SalesMetadata


@pytest.fixture
def adapter():
    return OfflineAdapter()


class TestOfflineAdapter:
    """Tests for OfflineAdapter."""

    class TestGenerateTitle:
        """SUT: OfflineAdapter.generate_title"""

        async def test_first_words(self, adapter):
            title = await adapter.generate_title("i'm looking for a new gaming laptop please")
            assert title == "I'm looking for a new gaming"

        async def test_no_words(self, adapter):
            with pytest.raises(TransientAdapterFailure):
                await adapter.generate_title("?!")

    class TestGenerateResponse:
        """SUT: OfflineAdapter.generate_response"""

        async def test_without_context(self, adapter):
            reply = await adapter.generate_response("hello")
            assert "tell me a bit more" in reply

        async def test_mentions_interests_and_rejections(self, adapter):
            metadata = SalesMetadata(interests=["laptop"], rejected_products=["mac"], sale_status="interested")
            reply = await adapter.generate_response("what do you have?", metadata)
            assert "laptop" in reply
            assert "leave out mac" in reply

        async def test_lost(self, adapter):
            reply = await adapter.generate_response("bye", SalesMetadata(interests=["tv"], sale_status="lost"))
            assert reply.startswith("Understood")

    class TestExtractMetadata:
        """SUT: OfflineAdapter.extract_metadata"""

        async def test_interest(self, adapter):
            metadata = await adapter.extract_metadata(
                "Customer: I'm looking for a laptop under $1000\n"
                "Sales assistant: Great, any brand preference?"
            )
            assert metadata.interests == ["laptop"]
            assert metadata.sale_status is SaleStatus.INTERESTED
            assert metadata.last_intent == "I'm looking for a laptop under $1000"

        async def test_rejection(self, adapter):
            metadata = await adapter.extract_metadata("Customer: I don't want a Mac")
            assert metadata.rejected_products == ["mac"]

        async def test_rejection_with_typographic_apostrophe(self, adapter):
            metadata = await adapter.extract_metadata("Customer: I don\u2019t want a Mac")
            assert metadata.rejected_products == ["mac"]

        async def test_offer(self, adapter):
            metadata = await adapter.extract_metadata(
                "Customer: I need a laptop\n"
                "Sales assistant: I recommend the Dell XPS 13."
            )
            assert metadata.offered_products == ["Dell XPS 13"]

        async def test_negotiating(self, adapter):
            metadata = await adapter.extract_metadata("Customer: Can I get a discount on it?")
            assert metadata.sale_status is SaleStatus.NEGOTIATING

        async def test_cue_inside_word_ignored(self, adapter):
            """'ideal' is not the 'deal' cue."""
            metadata = await adapter.extract_metadata("Customer: I need an ideal laptop for school")
            assert metadata.sale_status is SaleStatus.INTERESTED
            assert metadata.interests == ["ideal laptop"]

        async def test_lost(self, adapter):
            metadata = await adapter.extract_metadata("Customer: Forget it, I'm not buying anything")
            assert metadata.sale_status is SaleStatus.LOST

        async def test_no_customer_lines(self, adapter):
            metadata = await adapter.extract_metadata("Sales assistant: Hello!")
            assert metadata.last_intent is None
            assert metadata.sale_status is SaleStatus.EXPLORING
