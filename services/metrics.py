import math
import re
from typing import Dict, Tuple

from models import ObjectiveMetrics
from services.fillers import FILLER_PATTERNS
from services.math_utils import round_half_up

SENTENCE_BOUNDARY = re.compile(r"[.!?]+")

# (lowest wpm, highest wpm, score), checked in order; optimal range is 140-160
PACING_BANDS: Tuple[Tuple[int, int, int], ...] = (
    (140, 160, 10),
    (130, 170, 9),
    (120, 180, 8),
    (110, 190, 7),
    (100, 200, 6),
    (90, 210, 5),
    (80, 220, 4),
    (70, 230, 3),
    (60, 240, 2),
)

# (filler rate upper bound in %, score); lower filler rate = higher score
FILLER_BANDS: Tuple[Tuple[float, int], ...] = (
    (1, 10),
    (2, 9),
    (3, 8),
    (5, 7),
    (7, 6),
    (10, 5),
    (15, 4),
    (20, 3),
    (25, 2),
)

PACING_FEEDBACK: Tuple[Tuple[int, str], ...] = (
    (80, "Very slow - try speaking more energetically"),
    (110, "Slow pace - consider speeding up slightly"),
    (140, "Good pace with emphasis on clarity"),
    (160, "Excellent natural conversational pace"),
    (180, "Good pace with high energy"),
    (200, "Fast pace - ensure clarity isn't compromised"),
)
FAST_PACING_FEEDBACK = "Very fast - slow down for better comprehension"


def count_words(transcript: str) -> int:
    return len(transcript.split())


def count_fillers(transcript: str) -> Tuple[int, Dict[str, int]]:
    """Count catalogue fillers over the raw transcript.

    Multi-word phrases are matched independently of word tokenization, so the
    filler count may exceed the word count for phrase-heavy transcripts.
    """
    breakdown: Dict[str, int] = {}
    for filler, pattern in FILLER_PATTERNS.items():
        matches = len(pattern.findall(transcript))
        if matches > 0:
            breakdown[filler] = matches
    return sum(breakdown.values()), breakdown


def count_sentences(transcript: str) -> int:
    return sum(1 for segment in SENTENCE_BOUNDARY.split(transcript) if segment.strip())


def calculate_wpm(word_count: int, duration: float) -> int:
    if not math.isfinite(duration) or duration <= 0:
        return 0
    rate = word_count / duration * 60
    # subnormal durations overflow to inf
    if not math.isfinite(rate):
        return 0
    return round_half_up(rate)


def calculate_filler_rate(filler_count: int, word_count: int) -> float:
    """Percentage of words that are fillers, to one decimal place."""
    if word_count == 0:
        return 0.0
    return round_half_up(filler_count / word_count * 1000) / 10


def calculate_pacing_score(wpm: float) -> int:
    """Score 1-10 for how close the speaking rate is to 140-160 WPM."""
    for low, high, score in PACING_BANDS:
        if low <= wpm <= high:
            return score
    return 1


def calculate_filler_score(filler_rate: float) -> int:
    for upper, score in FILLER_BANDS:
        if filler_rate < upper:
            return score
    return 1


def get_pacing_feedback(wpm: float) -> str:
    for upper, feedback in PACING_FEEDBACK:
        if wpm < upper:
            return feedback
    return FAST_PACING_FEEDBACK


def _format_rate(filler_rate: float) -> str:
    if float(filler_rate).is_integer():
        return str(int(filler_rate))
    return str(filler_rate)


def get_filler_feedback(filler_count: int, filler_rate: float) -> str:
    plural = "" if filler_count == 1 else "s"
    rate = _format_rate(filler_rate)
    if filler_rate < 1:
        return f"Excellent! Only {filler_count} filler word{plural} - very polished delivery."
    if filler_rate < 3:
        return f"Good control with {filler_count} filler word{plural} ({rate}% of speech)."
    if filler_rate < 7:
        return f"Moderate filler usage: {filler_count} instances ({rate}%). Try pausing instead."
    return f"High filler usage: {filler_count} instances ({rate}%). Practice silent pauses."


def calculate_objective_metrics(transcript: str, duration: float) -> ObjectiveMetrics:
    """
    Calculate objective metrics from a transcript and its recording duration.

    Args:
        transcript: The full transcribed text.
        duration: Recording duration in seconds, may be fractional.

    Returns:
        The computed ObjectiveMetrics. Degenerate input (no words, zero or
        invalid duration) yields zero-valued fields rather than an error.
    """
    transcript = transcript or ""
    if not math.isfinite(duration):
        duration = 0.0

    word_count = count_words(transcript)
    words_per_minute = calculate_wpm(word_count, duration)
    filler_count, filler_breakdown = count_fillers(transcript)
    filler_rate = calculate_filler_rate(filler_count, word_count)

    sentence_count = count_sentences(transcript)
    avg_sentence_length = round_half_up(word_count / sentence_count) if sentence_count > 0 else 0

    return ObjectiveMetrics(
        word_count=word_count,
        words_per_minute=words_per_minute,
        filler_count=filler_count,
        filler_breakdown=filler_breakdown,
        filler_rate=filler_rate,
        sentence_count=sentence_count,
        avg_sentence_length=avg_sentence_length,
        duration=round_half_up(duration),
        pacing_score=calculate_pacing_score(words_per_minute),
        filler_score=calculate_filler_score(filler_rate),
        pacing_feedback=get_pacing_feedback(words_per_minute),
        filler_feedback=get_filler_feedback(filler_count, filler_rate),
    )
