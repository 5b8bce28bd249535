"""Deterministic keyword adapter for local development without an LLM."""

import re
from typing import List, Optional

from .base import BaseTextAdapter
from ..exceptions import TransientAdapterFailure
from ..models.metadata import SaleStatus, SalesMetadata

CUSTOMER_LABEL = "Customer"
ASSISTANT_LABEL = "Sales assistant"

_STOP = r"(?=\s+(?:under|below|for|with|from|that|which|because|but)\b|[.,;!?]|$)"

INTEREST_PATTERNS = [
    re.compile(r"\blooking for (?:an? |some |the )?(?P<item>[\w\- ]+?)" + _STOP, re.IGNORECASE),
    re.compile(r"\binterested in (?:an? |some |the )?(?P<item>[\w\- ]+?)" + _STOP, re.IGNORECASE),
    re.compile(r"\bsearching for (?:an? |some |the )?(?P<item>[\w\- ]+?)" + _STOP, re.IGNORECASE),
    re.compile(r"\bi need (?:an? |some |the )?(?P<item>[\w\- ]+?)" + _STOP, re.IGNORECASE),
]

REJECTION_PATTERNS = [
    re.compile(r"\b(?:don'?t|do not|won'?t|will not) (?:want|like|need) (?:an? |any |the )?(?P<item>[\w\- ]+?)" + _STOP,
               re.IGNORECASE),
    re.compile(r"\bnot (?:an? |the )?(?P<item>[\w\- ]+?),? (?:please|thanks)\b", re.IGNORECASE),
    re.compile(r"\bno (?:more )?(?P<item>[\w\-]+)s?,? (?:please|thanks)\b", re.IGNORECASE),
]

OFFER_PATTERNS = [
    re.compile(r"\b(?:recommend|suggest|offer|propose)(?: you)? (?:the |an? )?(?P<item>[A-Z0-9][\w\-]*(?: [A-Z0-9][\w\-]*)*)"),
]

LOST_CUES = ("not interested", "forget it", "no longer", "never mind", "nevermind", "i'll pass", "not buying")
CLOSED_CUES = ("i'll take it", "i will take it", "place the order", "buy it", "i'll buy", "checkout", "purchase it")
NEGOTIATING_CUES = ("price", "discount", "deal", "how much", "cheaper", "offer me", "payment")


def _cue_pattern(cues) -> re.Pattern:
    return re.compile(r"\b(?:" + "|".join(re.escape(cue) for cue in cues) + r")\b")


LOST_RE = _cue_pattern(LOST_CUES)
CLOSED_RE = _cue_pattern(CLOSED_CUES)
NEGOTIATING_RE = _cue_pattern(NEGOTIATING_CUES)

MAX_TITLE_WORDS = 6
MAX_INTENT_LENGTH = 160


def _lines(history_text: str, label: str) -> List[str]:
    prefix = f"{label}:"
    return [
        # Typographic apostrophes count as plain ones
        line[len(prefix):].strip().replace("\u2019", "'")
        for line in history_text.splitlines()
        if line.startswith(prefix)
    ]


def _matches(patterns, texts: List[str], lowercase: bool = True) -> List[str]:
    found = []
    for text in texts:
        for pattern in patterns:
            for match in pattern.finditer(text):
                item = match.group("item").strip()
                found.append(item.lower() if lowercase else item)
    return found


class OfflineAdapter(BaseTextAdapter):
    """
    Rule-based stand-in for a language model.

    Titles are the first words of the message, replies are templated on the
    funnel stage, and extraction reads interest, rejection, offer and stage
    cues from the history with regular expressions.
    """

    async def generate_title(self, first_message: str) -> str:
        words = re.findall(r"[\w$'\-]+", first_message)
        if not words:
            raise TransientAdapterFailure("No words to build a title from")
        title = " ".join(words[:MAX_TITLE_WORDS])
        return title[0].upper() + title[1:]

    async def generate_response(self, user_message: str, metadata: Optional[SalesMetadata] = None) -> str:
        if metadata is None or metadata.is_empty():
            return (
                "Thanks for reaching out! Could you tell me a bit more about what you "
                "need, and whether you have a budget in mind?"
            )

        interests = ", ".join(metadata.interests) or "what you are looking for"
        status = metadata.sale_status
        if status is SaleStatus.LOST:
            return "Understood. If anything changes, I'm here to help you find the right option."
        if status is SaleStatus.CLOSED:
            return "Great choice! I'll help you complete the order. Anything else I can add?"
        if status is SaleStatus.NEGOTIATING:
            return f"Let's find terms that work for you on {interests}. What price range would be comfortable?"

        reply = f"Based on your interest in {interests}, I can suggest a few options."
        if metadata.rejected_products:
            reply += f" I'll leave out {', '.join(metadata.rejected_products)}."
        return reply + " Which features matter most to you?"

    async def extract_metadata(
        self,
        history_text: str,
        current_metadata: Optional[SalesMetadata] = None
    ) -> SalesMetadata:
        customer = _lines(history_text, CUSTOMER_LABEL)
        assistant = _lines(history_text, ASSISTANT_LABEL)
        customer_text = " ".join(customer).lower()

        rejected = _matches(REJECTION_PATTERNS, customer)
        interests = _matches(INTEREST_PATTERNS, customer)
        offered = _matches(OFFER_PATTERNS, assistant, lowercase=False)

        if LOST_RE.search(customer_text):
            status = SaleStatus.LOST
        elif CLOSED_RE.search(customer_text):
            status = SaleStatus.CLOSED
        elif NEGOTIATING_RE.search(customer_text):
            status = SaleStatus.NEGOTIATING
        elif interests:
            status = SaleStatus.INTERESTED
        else:
            status = SaleStatus.EXPLORING

        last_intent = customer[-1][:MAX_INTENT_LENGTH] if customer else None

        self.logger.debug(
            f"[Offline] extracted interests={interests} offered={offered} "
            f"rejected={rejected} status={status.value}"
        )
        return SalesMetadata(
            interests=interests,
            offered_products=offered,
            rejected_products=rejected,
            sale_status=status,
            last_intent=last_intent,
        )
