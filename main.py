import asyncio
import os
import uuid
import logging
import httpx
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse
from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from celery import Celery

from config import Config
from models import (
    AnalyzeRequest,
    AnalyzeResponse,
    GenerateScenarioRequest,
    Goal,
    MetricsRequest,
    ObjectiveMetrics,
    ScenarioResponse,
    TranscribeResponse,
    TranscribeUrlRequest,
    VoiceEvaluationResponse,
)
from services.exceptions import FeedbackGenerationError, RateLimitExceededError, SpeechCoachError, TranscriptionError
from services.feedback_assembly import assemble_feedback, calculate_overall_score
from services.feedback_generator import FeedbackGenerator
from services.metrics import calculate_objective_metrics, count_words
from services.pause_analysis import PauseAnalyzer
from services.rate_limit import enforce, generous_rate_limit, moderate_rate_limit, strict_rate_limit
from services.scenarios import basic_scenario, generate_scenario, get_daily_challenge, get_scenario_by_id
from services.transcription import TranscriptionService

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

app = FastAPI(title="Speech Practice Coach", version="1.0.0")

celery_app = Celery(
    "speech_coach",
    broker=Config.CELERY_BROKER_URL,
    backend=Config.CELERY_RESULT_BACKEND
)

# Shared by the HTTP handlers and the Celery task
transcription_service = TranscriptionService()
pause_analyzer = PauseAnalyzer()
feedback_generator = FeedbackGenerator()

os.makedirs(Config.UPLOAD_DIR, exist_ok=True)


def _service_error_to_http(request_id: str, e: SpeechCoachError) -> HTTPException:
    logging.error(f"[{request_id}] {type(e).__name__} from {e.service}: {e.message}")
    if isinstance(e, RateLimitExceededError):
        return HTTPException(status_code=429, detail="API rate limit reached. Please try again in a moment.")
    if isinstance(e, TranscriptionError):
        return HTTPException(status_code=502, detail=e.message)
    return HTTPException(status_code=500, detail=e.message)


def _resolve_scenario(scenario_id: str):
    scenario = get_scenario_by_id(scenario_id)
    if scenario is None:
        logging.warning(f"Scenario {scenario_id} not found, using basic scenario")
        scenario = basic_scenario(scenario_id)
    return scenario


@celery_app.task(name="process_audio_task")
def process_audio_task(file_path: str, file_name: str, mime_type: str, scenario_id: str) -> dict:
    """
    Transcribe an uploaded recording and build its full feedback report.
    Runs in a Celery worker; the uploaded file is removed afterwards.
    """
    request_id = str(uuid.uuid4())[:8]
    logging.info(f"[{request_id}] Starting background processing for file: {file_name}")

    try:
        upload_url = asyncio.run(transcription_service.upload_file_with_retry(file_path, mime_type))
        transcription = asyncio.run(transcription_service.transcribe_url(upload_url))

        if transcription.word_count < Config.MIN_ANALYSIS_WORDS:
            raise ValueError("Transcript too short. Please record a longer response.")

        metrics = calculate_objective_metrics(transcription.transcript, transcription.duration)
        pauses = pause_analyzer.analyze_pauses(transcription.words)

        scenario = _resolve_scenario(scenario_id)
        ai_feedback = feedback_generator.generate_feedback(transcription.transcript, scenario, transcription.duration)
        feedback = assemble_feedback(ai_feedback, metrics, pauses.avg_pause_length)

        response_data = VoiceEvaluationResponse(
            transcription=transcription,
            metrics=metrics,
            pauses=pauses,
            feedback=feedback,
            overall_score=calculate_overall_score(feedback.scores),
        ).model_dump()

        logging.info(f"[{request_id}] Finished background processing for file: {file_name}")
        return response_data

    except Exception as e:
        logging.error(f"[{request_id}] Background processing error for {file_name}: {str(e)}")
        raise
    finally:
        if os.path.exists(file_path):
            os.remove(file_path)


@app.post("/transcribe", response_model=dict, dependencies=[Depends(enforce(moderate_rate_limit))])
async def transcribe_and_evaluate(file: UploadFile = File(...), scenario_id: str = Form("general")):
    """
    Receives a recording, saves it, and enqueues transcription and feedback
    as a background task. Returns the task ID.
    """
    request_id = str(uuid.uuid4())[:8]
    logging.info(f"[{request_id}] Received request for file: {file.filename}")

    if not file.filename:
        raise HTTPException(status_code=400, detail="No file provided")

    file_extension = Path(file.filename).suffix.lower()
    if file_extension not in Config.ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file format. Allowed: {', '.join(sorted(Config.ALLOWED_EXTENSIONS))}"
        )

    # Browsers send codec parameters, e.g. "audio/webm;codecs=opus"
    mime_type = (file.content_type or "").split(";")[0].strip().lower()
    if mime_type not in Config.ALLOWED_AUDIO_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid audio format: {file.content_type}. Supported formats: {', '.join(Config.ALLOWED_AUDIO_TYPES)}"
        )

    content = await file.read()
    if len(content) == 0:
        raise HTTPException(status_code=400, detail="Empty file")
    if len(content) > Config.MAX_FILE_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"File size ({len(content) / 1024 / 1024:.1f}MB) exceeds {Config.MAX_FILE_SIZE // (1024 * 1024)}MB limit"
        )

    file_path = f"{Config.UPLOAD_DIR}/{uuid.uuid4()}{file_extension}"
    with open(file_path, "wb") as buffer:
        buffer.write(content)

    try:
        task = process_audio_task.delay(file_path, file.filename, mime_type, scenario_id)
    except Exception as e:
        logging.error(f"[{request_id}] Error enqueuing task: {str(e)}")
        if os.path.exists(file_path):
            os.remove(file_path)
        raise HTTPException(status_code=500, detail=f"Failed to start processing: {str(e)}")

    logging.info(f"[{request_id}] Enqueued task {task.id} for file: {file.filename}")
    return {"message": "Processing started", "task_id": task.id}


@app.get("/status/{task_id}", response_model=dict)
async def get_task_status(task_id: str):
    """
    Check the status of a background processing task.
    """
    task = celery_app.AsyncResult(task_id)

    if task.state == "PENDING":
        response = {
            "status": "PENDING",
            "message": "Task is pending or not found"
        }
    elif task.state == "PROGRESS":
        response = {
            "status": "PROGRESS",
            "message": "Task is in progress",
            "info": task.info
        }
    elif task.state == "SUCCESS":
        response = {
            "status": "SUCCESS",
            "result": task.result
        }
    elif task.state == "FAILURE":
        response = {
            "status": "FAILURE",
            "message": str(task.info),  # task.info contains the exception
            "traceback": task.traceback
        }
    else:
        response = {
            "status": task.state,
            "message": "Unknown state"
        }
    return response


@app.post("/api/session/transcribe", response_model=TranscribeResponse,
          dependencies=[Depends(enforce(strict_rate_limit))])
async def transcribe_url(request: TranscribeUrlRequest):
    """Transcribe a recording that is already reachable by URL."""
    request_id = str(uuid.uuid4())[:8]

    parsed = urlparse(request.audio_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise HTTPException(status_code=400, detail="Invalid audio URL format")

    logging.info(f"[{request_id}] Transcribing audio from {parsed.netloc}")
    try:
        result = await transcription_service.transcribe_url(request.audio_url)
    except SpeechCoachError as e:
        raise _service_error_to_http(request_id, e)

    return TranscribeResponse(
        transcript=result.transcript,
        word_count=result.word_count,
        duration=result.duration,
        language=result.language,
    )


@app.post("/api/session/analyze", response_model=AnalyzeResponse,
          dependencies=[Depends(enforce(strict_rate_limit))])
def analyze_session(request: AnalyzeRequest):
    """Score a transcript: AI for clarity/confidence/logic, calculated pacing and fillers."""
    request_id = str(uuid.uuid4())[:8]

    if not request.transcript.strip():
        raise HTTPException(status_code=400, detail="Missing or invalid transcript")

    word_count = count_words(request.transcript)
    if word_count < Config.MIN_ANALYSIS_WORDS:
        raise HTTPException(status_code=400, detail="Transcript too short. Please record a longer response.")

    scenario = _resolve_scenario(request.scenario_id)
    logging.info(f"[{request_id}] Analyzing {word_count} words for scenario {scenario.id}")

    metrics = calculate_objective_metrics(request.transcript, request.duration)
    try:
        ai_feedback = feedback_generator.generate_feedback(request.transcript, scenario, request.duration)
    except SpeechCoachError as e:
        raise _service_error_to_http(request_id, e)

    feedback = assemble_feedback(ai_feedback, metrics)
    return AnalyzeResponse(
        feedback=feedback,
        overall_score=calculate_overall_score(feedback.scores),
        word_count=word_count,
    )


@app.post("/api/session/metrics", response_model=ObjectiveMetrics)
async def session_metrics(request: MetricsRequest):
    """Objective metrics only; no AI call."""
    return calculate_objective_metrics(request.transcript, request.duration)


@app.get("/api/scenario/daily", response_model=ScenarioResponse)
async def daily_scenario(goal: Optional[Goal] = None):
    return ScenarioResponse(scenario=get_daily_challenge(goal))


@app.post("/api/scenario/generate", response_model=ScenarioResponse,
          dependencies=[Depends(enforce(generous_rate_limit))])
async def new_scenario(request: GenerateScenarioRequest):
    scenario = generate_scenario(request.goal, request.context, request.difficulty)
    return ScenarioResponse(scenario=scenario)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "Speech Practice Coach is running"}


@app.get("/health/assemblyai")
async def assemblyai_health_check():
    """Check AssemblyAI service connectivity"""
    try:
        headers = {"authorization": Config.ASSEMBLYAI_API_KEY}

        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(f"{Config.ASSEMBLYAI_BASE_URL}/transcript", headers=headers)

            if response.status_code == 401:
                return {"status": "error", "message": "Invalid API key"}
            elif response.status_code == 429:
                return {"status": "warning", "message": "Rate limited"}
            elif response.status_code in [200, 404]:
                return {"status": "healthy", "message": "AssemblyAI is reachable"}
            else:
                return {"status": "error", "message": f"Unexpected status: {response.status_code}"}

    except httpx.TimeoutException:
        return {"status": "error", "message": "Connection timeout"}
    except httpx.HTTPError as e:
        return {"status": "error", "message": f"Health check failed: {str(e)}"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
