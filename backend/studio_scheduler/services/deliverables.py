"""
Keyword classification of package deliverable lines.

Estimates list deliverables as free text ("Wedding film 8-12 mins",
"35 Sheet Album", ...). Each line maps to exactly one deliverable type; new
phrasings are supported by adding rows to DELIVERABLE_KEYWORDS.
"""
import uuid

from studio_scheduler.schemas.event import Deliverable

# Checked in order; the first row with a matching keyword wins.
DELIVERABLE_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("videos", ("video", "film", "cinemat", "teaser", "reel")),
    ("album", ("album",)),
]
DEFAULT_DELIVERABLE_TYPE = "photos"


def classify(text: str) -> str:
    lowered = (text or "").lower()
    for deliverable_type, keywords in DELIVERABLE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return deliverable_type
    return DEFAULT_DELIVERABLE_TYPE


def build_deliverables(lines: list[str]) -> list[Deliverable]:
    """Turn deliverable lines into pending deliverables, never returning an empty list."""
    items = [
        Deliverable(id=str(uuid.uuid4()), type=classify(line), status="pending", description=line)
        for line in lines
        if isinstance(line, str) and line.strip()
    ]
    if not items:
        items.append(Deliverable(id=str(uuid.uuid4()), type=DEFAULT_DELIVERABLE_TYPE, status="pending"))
    return items
