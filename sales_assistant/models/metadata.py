"""
Sales metadata model.

The metadata is the running summary of what a customer wants: stated
interests, products offered and declined, the position in the sales funnel
and the most recent detected intent. It is stored as one JSON document on
the conversation row and is the only state the synthesis engine evolves.

Funnel order is ``exploring < interested < negotiating < closed``; ``lost``
sits outside the order as a terminal state that automatic merges never leave.
"""

import json
import re
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..exceptions import MetadataParseError


class SaleStatus(str, Enum):
    """Position of a conversation in the sales funnel."""

    EXPLORING = "exploring"
    INTERESTED = "interested"
    NEGOTIATING = "negotiating"
    CLOSED = "closed"
    LOST = "lost"

    @property
    def rank(self) -> int:
        """Funnel position; ``lost`` has no position and ranks -1."""
        return _FUNNEL_ORDER.index(self) if self in _FUNNEL_ORDER else -1


_FUNNEL_ORDER = [
    SaleStatus.EXPLORING,
    SaleStatus.INTERESTED,
    SaleStatus.NEGOTIATING,
    SaleStatus.CLOSED,
]


def _clean_entries(values: Iterable[Any]) -> List[str]:
    """Strip entries, drop blanks and case-insensitive duplicates (first spelling wins)."""
    seen = set()
    cleaned = []
    for value in values:
        if value is None:
            continue
        text = str(value).strip()
        key = text.casefold()
        if not text or key in seen:
            continue
        seen.add(key)
        cleaned.append(text)
    return cleaned


def _keys(values: Iterable[str]) -> set:
    return {value.casefold() for value in values}


class SalesMetadata(BaseModel):
    """What is known about the customer's purchase intent."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    interests: List[str] = Field(default_factory=list, description="Customer-stated interests")
    offered_products: List[str] = Field(
        default_factory=list, alias="offeredProducts", description="Products surfaced to the customer"
    )
    rejected_products: List[str] = Field(
        default_factory=list, alias="rejectedProducts", description="Products explicitly declined"
    )
    sale_status: SaleStatus = Field(
        default=SaleStatus.EXPLORING, alias="saleStatus", description="Funnel position"
    )
    last_intent: Optional[str] = Field(
        default=None, alias="lastIntent", description="Most recent detected customer intent"
    )

    @field_validator("interests", "offered_products", "rejected_products", mode="before")
    @classmethod
    def _default_lists(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("interests", "offered_products", "rejected_products")
    @classmethod
    def _clean_lists(cls, value: List[str]) -> List[str]:
        return _clean_entries(value)

    @field_validator("sale_status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        if value is None:
            return SaleStatus.EXPLORING
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("last_intent", mode="before")
    @classmethod
    def _blank_intent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _exclusive_products(self) -> "SalesMetadata":
        # A declined product is never also on offer.
        rejected = _keys(self.rejected_products)
        if any(p.casefold() in rejected for p in self.offered_products):
            self.offered_products = [p for p in self.offered_products if p.casefold() not in rejected]
        return self

    def is_empty(self) -> bool:
        """True when nothing has been learned yet (initial synthesis applies)."""
        return not self.interests and not self.offered_products and not self.last_intent

    def to_document(self) -> Dict[str, Any]:
        """Plain camelCase dict as stored on the conversation row."""
        return self.model_dump(mode="json", by_alias=True)


def serialize_metadata(metadata: SalesMetadata) -> str:
    """Serialize metadata to its compact camelCase JSON form."""
    return json.dumps(metadata.to_document(), ensure_ascii=False)


_FENCE_RE = re.compile(r"^\s*```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding markdown code fence and isolate the JSON object."""
    text = raw.strip()
    match = _FENCE_RE.match(text)
    if match:
        text = match.group(1).strip()

    if not text.startswith("{"):
        start = text.find("{")
        end = text.rfind("}")
        if start != -1 and end > start:
            text = text[start:end + 1]

    return text


def parse_metadata(raw: str) -> SalesMetadata:
    """
    Decode adapter output into a validated metadata instance.

    Args:
        raw: Adapter reply, optionally wrapped in a ```json fence

    Returns:
        SalesMetadata instance

    Raises:
        MetadataParseError: If the text is not a JSON object matching the schema
    """
    if not isinstance(raw, str) or not raw.strip():
        raise MetadataParseError("Empty metadata document")

    text = strip_code_fences(raw)
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise MetadataParseError(f"Metadata is not valid JSON: {e}") from e

    return _validate_document(document)


def _validate_document(document: Any) -> SalesMetadata:
    if not isinstance(document, dict):
        raise MetadataParseError(f"Metadata must be a JSON object, got {type(document).__name__}")
    try:
        return SalesMetadata.model_validate(document)
    except ValidationError as e:
        raise MetadataParseError(f"Metadata does not match schema: {e.errors()}") from e


def coerce_metadata(value: Union[SalesMetadata, Dict[str, Any], str, None]) -> SalesMetadata:
    """Accept whatever an adapter returned and turn it into a validated model."""
    if isinstance(value, SalesMetadata):
        return _validate_document(value.to_document())
    if isinstance(value, str):
        return parse_metadata(value)
    return _validate_document(value)


def load_metadata(document: Optional[Dict[str, Any]]) -> SalesMetadata:
    """Load the stored document; rows written before metadata existed get defaults."""
    if not document:
        return SalesMetadata()
    return SalesMetadata.model_validate(document)


def advance_status(current: SaleStatus, proposed: SaleStatus) -> SaleStatus:
    """
    Apply the funnel rule to a proposed status.

    ``lost`` always wins and is never left automatically; otherwise the later
    of the two funnel positions is kept.
    """
    if current is SaleStatus.LOST or proposed is SaleStatus.LOST:
        return SaleStatus.LOST
    return proposed if proposed.rank > current.rank else current


def merge_metadata(current: SalesMetadata, proposed: SalesMetadata) -> SalesMetadata:
    """
    Merge a proposal into the current metadata.

    Sets are unioned. A product the proposal rejects leaves the offered set,
    and a product the proposal offers (without rejecting it) leaves the
    rejected set. Status follows ``advance_status``; the latest non-empty
    intent wins.
    """
    proposed_rejected = _keys(proposed.rejected_products)
    proposed_offered = _keys(proposed.offered_products) - proposed_rejected

    offered = [
        p for p in _clean_entries(current.offered_products + proposed.offered_products)
        if p.casefold() not in proposed_rejected
    ]
    rejected = [
        p for p in _clean_entries(current.rejected_products + proposed.rejected_products)
        if p.casefold() not in proposed_offered
    ]

    return SalesMetadata(
        interests=_clean_entries(current.interests + proposed.interests),
        offered_products=offered,
        rejected_products=rejected,
        sale_status=advance_status(current.sale_status, proposed.sale_status),
        last_intent=proposed.last_intent or current.last_intent,
    )
