import asyncio
import httpx
import logging
from typing import Dict, Any
from config import Config
from models import TranscriptionResult, WordMetadata
from services.exceptions import RateLimitExceededError, TranscriptionError
import os

class TranscriptionService:
    def __init__(self):
        self.api_key = Config.ASSEMBLYAI_API_KEY
        self.base_url = Config.ASSEMBLYAI_BASE_URL
        self.language = Config.TRANSCRIPTION_LANGUAGE
        self.max_retries = Config.MAX_RETRIES
        self.audio_mime_types = {
            ".webm": "audio/webm",
            ".mp4": "audio/mp4",
            ".m4a": "audio/mp4",
            ".mp3": "audio/mpeg",
            ".wav": "audio/wav",
            ".ogg": "audio/ogg",
        }

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise TranscriptionError("AssemblyAI API key not configured")
        return {"authorization": self.api_key}

    def _check_response(self, response: httpx.Response, action: str) -> Dict[str, Any]:
        """Map AssemblyAI error statuses to service errors and return the JSON body"""
        if response.status_code == 401:
            raise TranscriptionError("Invalid AssemblyAI API key")
        if response.status_code == 413:
            raise TranscriptionError("File too large for AssemblyAI")
        if response.status_code == 429:
            raise RateLimitExceededError("API rate limit reached. Please try again in a moment.", service="assemblyai")
        if response.status_code not in (200, 201):
            error_text = response.text if response.content else "Unknown error"
            raise TranscriptionError(f"{action} failed: {response.status_code} - {error_text}")
        try:
            return response.json()
        except ValueError:
            logging.error(f"{action} returned a non-JSON body: {response.text[:200]!r}")
            raise TranscriptionError("Invalid response from AssemblyAI")

    async def upload_file_with_retry(self, file_path: str, mime_type: str) -> str:
        """Upload file, retrying network read errors with exponential backoff"""
        for attempt in range(self.max_retries):
            try:
                return await self.upload_file(file_path, mime_type)
            except httpx.ReadError as e:
                if attempt == self.max_retries - 1:
                    raise TranscriptionError(f"File upload failed after {self.max_retries} attempts: {str(e)}")

                wait_time = Config.RETRY_DELAY ** attempt
                logging.warning(f"Upload attempt {attempt + 1} failed, retrying in {wait_time}s...")
                await asyncio.sleep(wait_time)

    async def upload_file(self, file_path: str, mime_type: str) -> str:
        """Upload a recording to AssemblyAI and return its private upload URL"""
        headers = self._headers()

        if not os.path.exists(file_path):
            raise TranscriptionError(f"File not found: {file_path}")

        file_size = os.path.getsize(file_path)
        logging.info(f"Uploading file: {file_path} ({file_size} bytes)")

        file_extension = os.path.splitext(file_path)[1].lower()
        effective_mime_type = self.audio_mime_types.get(file_extension, mime_type)
        if effective_mime_type != mime_type:
            logging.info(f"Overriding guessed MIME type {mime_type} with {effective_mime_type} for extension {file_extension}")

        timeout = httpx.Timeout(
            connect=30.0,
            read=Config.UPLOAD_TIMEOUT,
            write=Config.UPLOAD_TIMEOUT,
            pool=300.0
        )

        try:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
                with open(file_path, "rb") as f:
                    files_payload = {"file": (os.path.basename(file_path), f, effective_mime_type)}
                    response = await client.post(f"{self.base_url}/upload", files=files_payload, headers=headers)

            result = self._check_response(response, "Upload")
            upload_url = result.get("upload_url")
            if not upload_url:
                raise TranscriptionError("No upload URL returned from AssemblyAI")

            logging.info(f"File uploaded successfully: {upload_url}")
            return upload_url

        except httpx.ReadError as e:
            logging.error(f"Network read error during upload: {e}")
            raise e  # Re-raise to trigger retry logic
        except httpx.TimeoutException as e:
            logging.error(f"Upload timeout: {e}")
            raise TranscriptionError("Upload timeout - try with a smaller file or check your connection")
        except httpx.HTTPError as e:
            logging.error(f"Error during file upload: {e}", exc_info=True)
            raise TranscriptionError(f"File upload error: {str(e)}")

    async def transcribe_audio(self, audio_url: str) -> Dict[str, Any]:
        """Submit audio for transcription and poll for the result"""
        headers = {**self._headers(), "content-type": "application/json"}
        json_data = {"audio_url": audio_url, "language_code": self.language}

        try:
            async with httpx.AsyncClient(timeout=Config.REQUEST_TIMEOUT) as client:
                response = await client.post(f"{self.base_url}/transcript", headers=headers, json=json_data)
                transcript_id = self._check_response(response, "Transcription submission").get("id")
                if not transcript_id:
                    raise TranscriptionError("Failed to get transcript ID from submission response.")

                logging.info(f"Transcription job submitted successfully. Transcript ID: {transcript_id}")
                return await self._poll_transcript(client, transcript_id, headers)

        except httpx.TimeoutException:
            raise TranscriptionError("Timeout when talking to the transcription service.")
        except httpx.HTTPError as e:
            logging.error(f"Error during transcription submission or polling: {e}", exc_info=True)
            raise TranscriptionError(f"Transcription process failed: {str(e)}")

    async def _poll_transcript(self, client: httpx.AsyncClient, transcript_id: str, headers: Dict[str, str]) -> Dict[str, Any]:
        """Poll transcript status until it completes, fails, or runs out of attempts"""
        for _ in range(Config.MAX_POLL_ATTEMPTS):
            response = await client.get(f"{self.base_url}/transcript/{transcript_id}", headers=headers)
            result = self._check_response(response, "Polling")
            status = result.get("status")

            if status == "completed":
                return result
            elif status == "error":
                error_msg = result.get("error", "Unknown transcription error")
                raise TranscriptionError(f"Transcription failed: {error_msg}")
            elif status in ("queued", "processing"):
                await asyncio.sleep(Config.POLL_INTERVAL)
            else:
                raise TranscriptionError(f"Unknown status: {status}")

        raise TranscriptionError("Transcription timeout - process took too long")

    async def transcribe_url(self, audio_url: str) -> TranscriptionResult:
        """Transcribe audio that AssemblyAI can fetch directly"""
        result = await self.transcribe_audio(audio_url)
        return self.parse_transcription_result(result)

    def parse_transcription_result(self, result: Dict[str, Any]) -> TranscriptionResult:
        """Convert an AssemblyAI transcript into our format (times in seconds)"""
        words = [
            WordMetadata(
                word=word_data["text"],
                start=word_data["start"] / 1000.0,
                end=word_data["end"] / 1000.0,
                confidence=word_data.get("confidence", 0.0),
            )
            for word_data in result.get("words") or []
        ]

        transcript = result.get("text") or ""
        duration = result.get("audio_duration") or 0
        # audio_duration is whole seconds; the last word's end time is more precise
        if words and words[-1].end > duration:
            duration = words[-1].end

        return TranscriptionResult(
            transcript=transcript,
            word_count=len(transcript.split()),
            duration=float(duration),
            language=result.get("language_code") or self.language,
            words=words,
        )
