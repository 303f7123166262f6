"""Custom exceptions for the transcription and feedback services."""


class SpeechCoachError(Exception):
    """Base exception for failures talking to an external AI service."""

    def __init__(self, message: str, service: str = "N/A"):
        self.message = message
        self.service = service
        super().__init__(message)


class TranscriptionError(SpeechCoachError):
    """Raised when audio cannot be uploaded or transcribed."""

    def __init__(self, message: str):
        super().__init__(message, service="assemblyai")


class FeedbackGenerationError(SpeechCoachError):
    """Raised when the language model call fails."""

    def __init__(self, message: str):
        super().__init__(message, service="gemini")


class RateLimitExceededError(SpeechCoachError):
    """Raised when an upstream provider rejects a call for quota reasons."""
    pass
