# transport.py
import logging
import time

import google.generativeai as genai
import requests
from google.api_core import exceptions as google_exceptions
from google.generativeai.types import BlockedPromptException, StopCandidateException

from errors import TransportError
from utils import (GEMINI_API_KEY, GEMINI_MODEL, MAX_OUTPUT_TOKENS, MAX_RETRIES,
                   RASA_URL, REQUEST_TIMEOUT, RETRY_BACKOFF)

logger = logging.getLogger(__name__)

TRANSIENT_GOOGLE_ERRORS = (
    google_exceptions.DeadlineExceeded,
    google_exceptions.ServiceUnavailable,
    google_exceptions.InternalServerError,
    google_exceptions.TooManyRequests,
    google_exceptions.ResourceExhausted,
)
# statuses returned before the webhook handled the message
RETRYABLE_STATUS = {429, 503}


def with_retries(call, what, retries=MAX_RETRIES, backoff=RETRY_BACKOFF):
    """Run `call`, retrying up to `retries` more times on retryable TransportErrors."""
    attempt = 0
    while True:
        try:
            return call()
        except TransportError as exc:
            if not exc.retryable or attempt >= retries:
                raise
            attempt += 1
            logger.warning("%s failed (attempt %d/%d): %s", what, attempt, retries + 1, exc)
            time.sleep(backoff * attempt)


def safe_get_response_text(response) -> str:
    """Safely extract text from a Gemini response, handling blocked/empty responses."""
    try:
        if hasattr(response, "text") and response.text:
            return response.text.strip()
    except ValueError as e:
        logger.warning(f"Could not extract response.text: {e}")

    try:
        if getattr(response, "candidates", None):
            parts = response.candidates[0].content.parts
            if parts:
                return parts[0].text.strip()
    except (AttributeError, IndexError) as e:
        logger.warning(f"Could not extract from candidates: {e}")

    return ""


class GeminiTransport:
    """Hosted Gemini model: chat turns and one-shot summary prompts."""

    name = "gemini"

    def __init__(self, api_key=GEMINI_API_KEY, model_name=GEMINI_MODEL, timeout=REQUEST_TIMEOUT,
                 max_output_tokens=MAX_OUTPUT_TOKENS, retries=MAX_RETRIES, backoff=RETRY_BACKOFF):
        self.api_key = api_key
        self.model_name = model_name
        self.timeout = timeout
        self.max_output_tokens = max_output_tokens
        self.retries = retries
        self.backoff = backoff
        self._model = None

    def _get_model(self):
        if self._model is None:
            if self.api_key:
                genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(self.model_name)
        return self._model

    def _require_key(self):
        # a missing key fails the call, not startup
        if not self.api_key:
            raise TransportError("GEMINI_API_KEY is not set")

    def _invoke(self, fn, what):
        def call():
            try:
                response = fn()
            except TRANSIENT_GOOGLE_ERRORS as exc:
                raise TransportError(f"{what} failed: {exc}", retryable=True) from exc
            except google_exceptions.GoogleAPIError as exc:
                raise TransportError(f"{what} failed: {exc}") from exc
            except (BlockedPromptException, StopCandidateException) as exc:
                raise TransportError(f"{what} was blocked: {exc}") from exc
            text = safe_get_response_text(response)
            if not text:
                raise TransportError(f"{what} returned no text")
            return text

        self._require_key()
        return with_retries(call, what, self.retries, self.backoff)

    def start_chat(self, session_id, history):
        contents = [
            {"role": "model" if role == "assistant" else "user", "parts": [text]}
            for role, text in history
        ]
        logger.info("opening gemini chat %s (model=%s)", session_id, self.model_name)
        return self._get_model().start_chat(history=contents)

    def send(self, chat, text):
        return self._invoke(
            lambda: chat.send_message(
                text,
                generation_config={"max_output_tokens": self.max_output_tokens},
                request_options={"timeout": self.timeout},
            ),
            "gemini chat request",
        )

    def generate(self, prompt):
        model = self._get_model()
        return self._invoke(
            lambda: model.generate_content(prompt, request_options={"timeout": self.timeout}),
            "gemini generate request",
        )


class RasaTransport:
    """Local Rasa REST webhook: one POST per user message."""

    name = "rasa"

    def __init__(self, url=RASA_URL, timeout=REQUEST_TIMEOUT, retries=MAX_RETRIES,
                 backoff=RETRY_BACKOFF, http=None):
        self.url = url
        self.timeout = timeout
        self.retries = retries
        self.backoff = backoff
        self.http = http or requests.Session()

    def start_chat(self, session_id, history):
        # the webhook keeps its own tracker per sender
        return session_id

    def _post(self, sender, text):
        try:
            r = self.http.post(self.url, json={"sender": sender, "message": text}, timeout=self.timeout)
            r.raise_for_status()
        except requests.exceptions.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise TransportError(f"webhook returned HTTP {status}",
                                 retryable=status in RETRYABLE_STATUS) from exc
        except requests.exceptions.ConnectionError as exc:
            raise TransportError(f"webhook unreachable: {exc}", retryable=True) from exc
        except requests.exceptions.Timeout as exc:
            # the webhook may already have recorded the message in its tracker
            raise TransportError(f"webhook timed out: {exc}") from exc
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"webhook request failed: {exc}") from exc

        try:
            replies = r.json()
        except ValueError as exc:
            raise TransportError("webhook returned a non-JSON body") from exc

        if not isinstance(replies, list) or not replies:
            raise TransportError("webhook returned no replies")
        first = replies[0]
        if not isinstance(first, dict) or not first.get("text"):
            raise TransportError("webhook reply has no text")
        return first["text"]

    def send(self, sender, text):
        return with_retries(lambda: self._post(sender, text), "rasa webhook request",
                            self.retries, self.backoff)


def build_chat_transport(backend):
    if backend == "rasa":
        return RasaTransport()
    if backend == "gemini":
        return GeminiTransport()
    raise ValueError(f"unknown CHAT_BACKEND: {backend!r}")
