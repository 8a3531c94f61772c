# symptom_agent.py
import logging
import threading
import uuid
from enum import Enum

from conversation import Conversation, Role
from errors import ChatError, SessionBusyError, UninitializedError
from fhir_summarizer import summarize
from fhir_templates import SummaryKind

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a symptom-checking chatbot designed to collect information about the user's physical and mental health conditions. Your purpose is to gather relevant symptom details, understand the user's concerns, and provide helpful information and guidance.

Your conversation should follow these guidelines:
1. Greet the user and ask about their symptoms or health concerns.
2. Ask follow-up questions to gather more specific details about the symptoms, such as severity, duration, and any additional context.
3. Show empathy and understanding towards the user's concerns.
4. Provide relevant information and guidance based on the user's symptoms.
5. Encourage the user to seek professional medical advice if necessary.
6. Summarize the collected symptom information and map it to FHIR data structures for further analysis and integration with healthcare systems.

Remember to maintain a friendly and professional tone throughout the conversation. Let's start by greeting the user and asking about their symptoms.
"""

INTRO = ("Hello! I am a symptom-checking chatbot. Can you please tell me what symptoms "
         "or health concerns you are experiencing?")

SEED_HISTORY = (
    (Role.USER.value, SYSTEM_PROMPT),
    (Role.ASSISTANT.value, INTRO),
)


class SessionState(str, Enum):
    IDLE = "idle"
    AWAITING_REPLY = "awaiting_reply"


class ChatSession:
    """One page view: the conversation log, its chat handle and the latest FHIR summary."""

    def __init__(self, session_id, chat_transport, summary_transport):
        self.session_id = session_id
        self.chat_transport = chat_transport
        self.summary_transport = summary_transport
        self.conversation = Conversation()
        self.state = SessionState.IDLE
        self.summary = None
        self.summary_kind = None
        self.last_error = None
        self._chat = None
        self._lock = threading.RLock()

    @property
    def ready(self):
        return self._chat is not None

    def start(self):
        try:
            self._chat = self.chat_transport.start_chat(self.session_id, SEED_HISTORY)
        except ChatError as exc:
            self._record_error(exc, "initializing chat")
        return self.ready

    def send(self, text):
        """Send one user message and return the assistant reply.

        Blank input is ignored and returns None without touching the network.
        """
        text = (text or "").strip()
        if not text:
            return None

        with self._lock:
            if self._chat is None:
                raise UninitializedError("Chat not initialized")
            if self.state is SessionState.AWAITING_REPLY:
                raise SessionBusyError("a reply is still pending for this session")
            self.state = SessionState.AWAITING_REPLY
            self.conversation.add_user(text)

        try:
            reply = self.chat_transport.send(self._chat, text)
        except Exception as exc:
            with self._lock:
                self.state = SessionState.IDLE
            if isinstance(exc, ChatError):
                self._record_error(exc, "processing message")
            raise

        # the reply lands before the session accepts another message
        with self._lock:
            self.conversation.add_assistant(reply)
            self.state = SessionState.IDLE
            self.last_error = None
        return reply

    def summarize(self, kind):
        kind = SummaryKind(kind)
        turns = self.conversation.snapshot()
        try:
            document = summarize(self.summary_transport, turns, kind)
        except ChatError as exc:
            self._record_error(exc, f"summarizing to FHIR {kind.value}")
            raise
        with self._lock:
            self.summary = document
            self.summary_kind = kind
            self.last_error = None
        return document

    def _record_error(self, exc, action):
        logger.error("Error %s (session %s): %s", action, self.session_id, exc)
        self.last_error = {"error": type(exc).__name__, "message": str(exc)}

    def to_dict(self):
        return {
            "session_id": self.session_id,
            "ready": self.ready,
            "state": self.state.value,
            "turns": [t.model_dump(mode="json") for t in self.conversation.snapshot()],
            "summary": self.summary,
            "summary_kind": self.summary_kind.value if self.summary_kind else None,
            "last_error": self.last_error,
        }


class SessionStore:
    """In-memory sessions, one per open page. Nothing outlives the process."""

    def __init__(self, chat_transport, summary_transport):
        self.chat_transport = chat_transport
        self.summary_transport = summary_transport
        self._sessions = {}
        self._lock = threading.Lock()

    def create(self):
        session = ChatSession(uuid.uuid4().hex, self.chat_transport, self.summary_transport)
        session.start()
        with self._lock:
            self._sessions[session.session_id] = session
        logger.info("session %s created (ready=%s)", session.session_id, session.ready)
        return session

    def get(self, session_id):
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise UninitializedError(f"unknown session {session_id}")
        return session

    def remove(self, session_id):
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise UninitializedError(f"unknown session {session_id}")

    def __len__(self):
        return len(self._sessions)
