from typing import List

from config import Config
from models import PauseAnalysis, WordMetadata

class PauseAnalyzer:
    def __init__(self, pause_threshold: float = Config.PAUSE_THRESHOLD):
        self.pause_threshold = pause_threshold

    def analyze_pauses(self, words: List[WordMetadata]) -> PauseAnalysis:
        """Find silent gaps between consecutive timed words"""
        if len(words) < 2:
            return PauseAnalysis(
                pause_count=0,
                total_pause_time_sec=0.0,
                avg_pause_length=0.0,
                pause_feedback="Insufficient data for pause analysis.",
            )

        pauses = []
        for previous, current in zip(words, words[1:]):
            gap = current.start - previous.end
            if gap > self.pause_threshold:
                pauses.append(gap)

        pause_count = len(pauses)
        total_pause_time = sum(pauses)
        avg_pause = total_pause_time / pause_count if pause_count else 0.0

        if pause_count == 0:
            feedback = "Great! Your speech flows smoothly without long pauses."
        elif pause_count <= 2:
            feedback = "Good fluency with minimal pauses."
        elif pause_count <= 4:
            feedback = "Try to reduce long pauses to improve fluency."
        else:
            feedback = "Your speech has many long pauses. Practice speaking more continuously."

        return PauseAnalysis(
            pause_count=pause_count,
            total_pause_time_sec=round(total_pause_time, 2),
            avg_pause_length=round(avg_pause, 2),
            pause_feedback=feedback,
        )
