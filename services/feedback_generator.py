import logging
from typing import Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from config import Config
from models import AIFeedback, Scenario
from services.exceptions import FeedbackGenerationError, RateLimitExceededError
from services.prompts import SYSTEM_PROMPT, build_analysis_prompt
from services.validation import parse_feedback_response


class FeedbackGenerator:
    def __init__(self):
        genai.configure(api_key=Config.GEMINI_API_KEY)
        self.model = genai.GenerativeModel(Config.GEMINI_MODEL, system_instruction=SYSTEM_PROMPT)
        self.generation_config = genai.GenerationConfig(
            response_mime_type="application/json",
            temperature=Config.FEEDBACK_TEMPERATURE,
            max_output_tokens=Config.FEEDBACK_MAX_TOKENS,
        )

    def generate_feedback(self,
                          transcript: str,
                          scenario: Scenario,
                          duration: Optional[float] = None) -> AIFeedback:
        """Ask Gemini for clarity/confidence/logic coaching on a transcript."""
        prompt = build_analysis_prompt(transcript, scenario, duration)

        try:
            response = self.model.generate_content(prompt, generation_config=self.generation_config)
            content = response.text
        except google_exceptions.ResourceExhausted as e:
            logging.warning(f"Gemini quota exhausted for scenario {scenario.id}: {e}")
            raise RateLimitExceededError("API rate limit reached. Please try again in a moment.", service="gemini")
        except Exception as e:
            logging.error(f"Error generating feedback with Gemini API: {e}. Scenario: {scenario.id}", exc_info=True)
            raise FeedbackGenerationError("Failed to analyze transcript. Please try again.")

        if not content:
            logging.warning(f"Empty response from Gemini for scenario {scenario.id}; using default feedback")

        return parse_feedback_response(content)
