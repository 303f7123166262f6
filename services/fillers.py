"""Filler words and phrases detected in transcripts.

Used for metrics, transcript highlighting and the feedback prompt. Keys in a
filler breakdown are always spelled exactly as they appear here.
"""

import re
from typing import Dict, Pattern, Tuple

FILLER_WORDS: Tuple[str, ...] = (
    # Single word fillers
    "um",
    "uh",
    "like",
    "so",
    "basically",
    "actually",
    "literally",
    "right",
    "okay",
    "well",
    # Multi-word fillers
    "you know",
    "I mean",
    "kind of",
    "sort of",
    "you see",
    "I guess",
)


def compile_filler_pattern(filler: str) -> Pattern[str]:
    """Whole word/phrase, case-insensitive match for a catalogue entry."""
    return re.compile(r"\b" + re.escape(filler) + r"\b", re.IGNORECASE)


FILLER_PATTERNS: Dict[str, Pattern[str]] = {
    filler: compile_filler_pattern(filler) for filler in FILLER_WORDS
}
