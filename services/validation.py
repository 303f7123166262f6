import json
import logging
from typing import Optional

from pydantic import ValidationError

from models import AIFeedback


def parse_feedback_response(response: Optional[str]) -> AIFeedback:
    """Parse a language model reply into AIFeedback without ever raising.

    Fields are repaired one at a time: a missing or malformed field takes its
    default while the rest of the reply is kept. A reply that is not a JSON
    object at all yields the fully defaulted feedback.
    """
    try:
        data = json.loads(response or "")
    except (TypeError, ValueError) as e:
        logging.warning(f"Feedback response is not valid JSON ({e}); using defaults. Raw: {response!r:.200}")
        return AIFeedback()

    if not isinstance(data, dict):
        logging.warning(f"Feedback response is a {type(data).__name__}, not an object; using defaults")
        return AIFeedback()

    try:
        return AIFeedback.model_validate(data)
    except ValidationError as e:
        logging.error(f"Feedback response failed validation: {e.errors()}")
        return AIFeedback()
