"""Merge AI-scored qualitative feedback with calculated metrics."""

from typing import Dict

from models import (
    AIFeedback,
    CoachingTips,
    DetectedMetrics,
    FeedbackResult,
    FeedbackScores,
    ObjectiveMetrics,
    ScoreMetadata,
)
from services.math_utils import round_half_up

AI_SCORE = ScoreMetadata(source="ai", confidence="medium")
CALCULATED_SCORE = ScoreMetadata(source="calculated", confidence="verified")


def assemble_feedback(ai: AIFeedback, metrics: ObjectiveMetrics, avg_pause_length: float = 0.0) -> FeedbackResult:
    scores = FeedbackScores(
        clarity=ai.scores.clarity,
        confidence=ai.scores.confidence,
        logic=ai.scores.logic,
        pacing=metrics.pacing_score,
        fillers=metrics.filler_score,
    )
    coaching = CoachingTips(
        clarity=ai.coaching.clarity.tip,
        confidence=ai.coaching.confidence.tip,
        logic=ai.coaching.logic.tip,
        pacing=metrics.pacing_feedback,
        fillers=metrics.filler_feedback,
    )
    detected = DetectedMetrics(
        wpm=metrics.words_per_minute,
        filler_count=metrics.filler_count,
        filler_breakdown=metrics.filler_breakdown,
        filler_rate=metrics.filler_rate,
        avg_pause_length=avg_pause_length,
        total_words=metrics.word_count,
        duration=metrics.duration,
    )
    return FeedbackResult(
        scores=scores,
        coaching=coaching,
        detailed_coaching=ai.coaching,
        summary=ai.summary,
        detected_metrics=detected,
        strengths=ai.strengths,
        improvements=ai.improvements,
        top_improvement=ai.top_improvement,
        score_metadata={
            "clarity": AI_SCORE,
            "confidence": AI_SCORE,
            "logic": AI_SCORE,
            "pacing": CALCULATED_SCORE,
            "fillers": CALCULATED_SCORE,
        },
    )


def calculate_overall_score(scores: FeedbackScores) -> float:
    """Mean of all five scores, rounded to one decimal."""
    values: Dict[str, int] = scores.model_dump()
    mean = sum(values.values()) / len(values)
    return round_half_up(mean * 10) / 10
