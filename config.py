from dotenv import load_dotenv
import os

load_dotenv()

# Configuration class for the application
class Config:
    ASSEMBLYAI_API_KEY = os.getenv("ASSEMBLYAI_API_KEY")

    if ASSEMBLYAI_API_KEY is None:
        raise ValueError("ASSEMBLYAI_API_KEY environment variable is required")

    ASSEMBLYAI_BASE_URL = os.getenv("ASSEMBLYAI_BASE_URL", "https://api.assemblyai.com/v2")
    TRANSCRIPTION_LANGUAGE = os.getenv("TRANSCRIPTION_LANGUAGE", "en")

    # Network configuration
    UPLOAD_TIMEOUT = 150
    REQUEST_TIMEOUT = 30.0
    MAX_RETRIES = 3
    RETRY_DELAY = 2  # Base delay for exponential backoff
    MAX_POLL_ATTEMPTS = 60
    POLL_INTERVAL = 1.0

    # File size limits
    MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB

    UPLOAD_DIR = "uploads"
    ALLOWED_EXTENSIONS = {".webm", ".mp4", ".m4a", ".mp3", ".wav", ".ogg"}
    ALLOWED_AUDIO_TYPES = ["audio/webm", "audio/mp4", "audio/mpeg", "audio/wav", "audio/x-wav", "audio/ogg"]

    # Analysis thresholds
    PAUSE_THRESHOLD = 0.5  # seconds
    MIN_ANALYSIS_WORDS = 5

    # Rate limiting (requests per window, window in seconds)
    RATE_LIMIT_WINDOW = int(os.getenv("RATE_LIMIT_WINDOW", "60"))
    RATE_LIMIT_MAX_TOKENS = 500
    STRICT_RATE_LIMIT = int(os.getenv("STRICT_RATE_LIMIT", "10"))
    MODERATE_RATE_LIMIT = int(os.getenv("MODERATE_RATE_LIMIT", "20"))
    GENEROUS_RATE_LIMIT = int(os.getenv("GENEROUS_RATE_LIMIT", "60"))

    CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
    CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/0")

    # Gemini API Configuration
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash-lite")
    FEEDBACK_TEMPERATURE = 0.7
    FEEDBACK_MAX_TOKENS = 1500

    if GEMINI_API_KEY is None:
        raise ValueError("GEMINI_API_KEY environment variable is required for feedback generation")
