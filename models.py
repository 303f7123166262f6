from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from typing import Any, Dict, List, Literal, Optional

from services.math_utils import is_finite_number, round_half_up

Goal = Literal["clarity", "confidence", "persuasion", "fillers", "quick_thinking"]
Context = Literal["work", "social", "everyday"]
Difficulty = Literal["easy", "medium", "hard"]

DEFAULT_SCORE = 5
DEFAULT_SUMMARY = (
    "Your speech showed both strengths and areas for improvement. "
    "Keep practicing to build your communication skills."
)
DEFAULT_STRENGTHS = ["Completed the practice session", "Spoke for the full duration"]
DEFAULT_IMPROVEMENTS = ["Focus on clarity and structure", "Practice speaking with more confidence"]
DEFAULT_TOP_IMPROVEMENT = "Practice speaking in a clear, structured manner"


class WordMetadata(BaseModel):
    word: str
    start: float
    end: float
    confidence: float

class TranscriptionResult(BaseModel):
    transcript: str
    word_count: int
    duration: float
    language: str = "en"
    words: List[WordMetadata] = []

class ObjectiveMetrics(BaseModel):
    """Deterministic measurements taken from a transcript, not AI opinions."""
    word_count: int
    words_per_minute: int
    filler_count: int
    filler_breakdown: Dict[str, int]
    filler_rate: float
    sentence_count: int
    avg_sentence_length: int
    duration: int
    pacing_score: int
    filler_score: int
    pacing_feedback: str
    filler_feedback: str

class PauseAnalysis(BaseModel):
    pause_count: int
    total_pause_time_sec: float
    avg_pause_length: float
    pause_feedback: str

class Scenario(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    goal: Goal
    context: Context
    difficulty: Difficulty
    objective: str
    prompt_text: str
    time_limit_sec: int
    eval_focus: List[str]
    example_opening: Optional[str] = None
    tips: List[str] = []


# --- LLM feedback ---------------------------------------------------------
# Every field carries a default so that a malformed model response degrades
# to usable feedback instead of failing the request.

def _coerce_score(value: Any) -> int:
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return DEFAULT_SCORE
    if not is_finite_number(value):
        return DEFAULT_SCORE
    return max(0, min(10, round_half_up(value)))


def _non_empty_strings(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


class CoachingDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reason: str = "Unable to analyze this aspect"
    example: str = "No specific example available"
    tip: str = "Continue practicing this skill"
    rubric_level: str = Field("N/A", alias="rubricLevel")

    @field_validator("reason", "example", "tip", "rubric_level", mode="before")
    @classmethod
    def _default_blank(cls, value: Any, info):
        if isinstance(value, str) and value.strip():
            return value
        return cls.model_fields[info.field_name].default


def _metric_coaching(metric: str, tip: str) -> CoachingDetail:
    return CoachingDetail(
        reason=f"Unable to analyze {metric}",
        example="No specific example available",
        tip=tip,
        rubric_level="N/A",
    )


class AIScores(BaseModel):
    clarity: int = DEFAULT_SCORE
    confidence: int = DEFAULT_SCORE
    logic: int = DEFAULT_SCORE

    @field_validator("clarity", "confidence", "logic", mode="before")
    @classmethod
    def _clamp(cls, value: Any) -> int:
        return _coerce_score(value)


class AICoaching(BaseModel):
    clarity: CoachingDetail = Field(
        default_factory=lambda: _metric_coaching("clarity", "Focus on clear articulation and structure"))
    confidence: CoachingDetail = Field(
        default_factory=lambda: _metric_coaching("confidence", "Speak with more conviction and authority"))
    logic: CoachingDetail = Field(
        default_factory=lambda: _metric_coaching("logic", "Structure your arguments more clearly"))

    @field_validator("clarity", "confidence", "logic", mode="wrap")
    @classmethod
    def _fallback(cls, value: Any, handler, info):
        if not isinstance(value, (dict, BaseModel)):
            return cls.model_fields[info.field_name].default_factory()
        try:
            return handler(value)
        except ValidationError:
            return cls.model_fields[info.field_name].default_factory()


class AIFeedback(BaseModel):
    """Qualitative feedback as returned by the language model, after repair."""
    model_config = ConfigDict(populate_by_name=True)

    scores: AIScores = Field(default_factory=AIScores)
    coaching: AICoaching = Field(default_factory=AICoaching)
    summary: str = DEFAULT_SUMMARY
    strengths: List[str] = Field(default_factory=lambda: list(DEFAULT_STRENGTHS))
    improvements: List[str] = Field(default_factory=lambda: list(DEFAULT_IMPROVEMENTS))
    top_improvement: str = Field(DEFAULT_TOP_IMPROVEMENT, alias="topImprovement")

    @field_validator("scores", "coaching", mode="wrap")
    @classmethod
    def _fallback(cls, value: Any, handler, info):
        if not isinstance(value, (dict, BaseModel)):
            return cls.model_fields[info.field_name].default_factory()
        try:
            return handler(value)
        except ValidationError:
            return cls.model_fields[info.field_name].default_factory()

    @field_validator("summary", "top_improvement", mode="before")
    @classmethod
    def _default_text(cls, value: Any, info):
        if isinstance(value, str) and value.strip():
            return value
        return cls.model_fields[info.field_name].default

    @field_validator("strengths", "improvements", mode="before")
    @classmethod
    def _default_list(cls, value: Any, info):
        items = _non_empty_strings(value)
        return items or cls.model_fields[info.field_name].default_factory()


# --- Assembled feedback ---------------------------------------------------

class FeedbackScores(BaseModel):
    clarity: int
    confidence: int
    logic: int
    pacing: int
    fillers: int

class CoachingTips(BaseModel):
    clarity: str
    confidence: str
    logic: str
    pacing: str
    fillers: str

class DetectedMetrics(BaseModel):
    wpm: int
    filler_count: int
    filler_breakdown: Dict[str, int]
    filler_rate: float
    avg_pause_length: float
    total_words: int
    duration: int

class ScoreMetadata(BaseModel):
    source: Literal["ai", "calculated"]
    confidence: Literal["high", "medium", "low", "verified"]

class FeedbackResult(BaseModel):
    scores: FeedbackScores
    coaching: CoachingTips
    detailed_coaching: AICoaching
    summary: str
    detected_metrics: DetectedMetrics
    strengths: List[str]
    improvements: List[str]
    top_improvement: str
    score_metadata: Dict[str, ScoreMetadata]


# --- API payloads ---------------------------------------------------------

class TranscribeUrlRequest(BaseModel):
    audio_url: str

class TranscribeResponse(BaseModel):
    success: bool = True
    transcript: str
    word_count: int
    duration: float
    language: str

class AnalyzeRequest(BaseModel):
    transcript: str
    scenario_id: str = Field(min_length=1)
    duration: float = Field(gt=0)  # seconds, needed for WPM

class AnalyzeResponse(BaseModel):
    success: bool = True
    feedback: FeedbackResult
    overall_score: float
    word_count: int

class MetricsRequest(BaseModel):
    transcript: str
    duration: float = Field(ge=0)

class GenerateScenarioRequest(BaseModel):
    goal: Optional[Goal] = None
    context: Optional[Context] = None
    difficulty: Optional[Difficulty] = None

class ScenarioResponse(BaseModel):
    success: bool = True
    scenario: Scenario

class VoiceEvaluationResponse(BaseModel):
    transcription: TranscriptionResult
    metrics: ObjectiveMetrics
    pauses: PauseAnalysis
    feedback: FeedbackResult
    overall_score: float
