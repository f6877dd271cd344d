# utils/priority.py
"""
Keyword-weighted urgency score for incident descriptions (0-100).

Officers' report list is ordered by this score, so it only has to rank
reports sensibly relative to each other.
"""
from __future__ import annotations

import re

BASELINE = 20

# (weight, keywords)
KEYWORD_WEIGHTS: list[tuple[int, tuple[str, ...]]] = [
    (45, ("weapon", "gun", "knife", "shooting", "stabbing", "bomb", "explosive", "hostage")),
    (35, ("fire", "injured", "injury", "bleeding", "unconscious", "assault", "attack", "overdose")),
    (25, ("collision", "crash", "accident", "suspicious", "break-in", "burglary", "robbery", "threat")),
    (15, ("hazard", "spill", "fight", "harassment", "vandalism", "theft", "stolen")),
    (5,  ("noise", "graffiti", "litter", "parking", "streetlight", "outage")),
]

URGENCY_MARKERS = ("urgent", "emergency", "immediately", "asap", "help")


def get_text_priority(text: str | None) -> int:
    if not text or not isinstance(text, str):
        return BASELINE

    lowered = text.lower()
    words = set(re.findall(r"[a-z][a-z\-]*", lowered))

    score = BASELINE
    for weight, keywords in KEYWORD_WEIGHTS:
        if any(k in words for k in keywords):
            score += weight

    if any(m in words for m in URGENCY_MARKERS):
        score += 10

    return max(0, min(100, score))
