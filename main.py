import logging
import os

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from errors import ChatError, ParseError, SessionBusyError, TransportError, UninitializedError
from fhir_templates import SummaryKind
from symptom_agent import INTRO, SessionStore
from transport import GeminiTransport, build_chat_transport
from utils import APP_PORT, CHAT_BACKEND, setup_logging

logger = logging.getLogger("fhir_side_chats")

STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")

# ---------------------------
# Models
# ---------------------------
class ChatRequest(BaseModel):
    session_id: str
    message: str

class SummaryRequest(BaseModel):
    session_id: str
    kind: SummaryKind


def _error_status(exc):
    if isinstance(exc, (TransportError, ParseError)):
        return 502
    if isinstance(exc, (UninitializedError, SessionBusyError)):
        return 409
    return 500

def _http_error(exc: ChatError):
    return HTTPException(status_code=_error_status(exc),
                         detail={"error": type(exc).__name__, "message": str(exc)})

# ---------------------------
# Setup
# ---------------------------
def create_app(chat_transport=None, summary_transport=None, backend=CHAT_BACKEND):
    summary_transport = summary_transport or GeminiTransport()
    if chat_transport is None:
        # summaries always go to gemini; reuse it for chat unless the webhook build is selected
        chat_transport = summary_transport if backend == "gemini" else build_chat_transport(backend)

    logger.info("chat backend=%s summary backend=%s", chat_transport.name, summary_transport.name)

    app = FastAPI(title="FHIR Side Chats")
    app.state.sessions = SessionStore(chat_transport, summary_transport)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    def get_session(session_id):
        try:
            return app.state.sessions.get(session_id)
        except UninitializedError as exc:
            raise HTTPException(status_code=404,
                                detail={"error": type(exc).__name__, "message": str(exc)}) from exc

    # ---------------------------
    # Routes
    # ---------------------------
    @app.get("/")
    def serve_home():
        return FileResponse(os.path.join(STATIC_DIR, "index.html"))

    @app.get("/health")
    def health():
        return {"status": "ok", "chat_backend": chat_transport.name}

    @app.post("/api/sessions")
    def create_session():
        session = app.state.sessions.create()
        return {"session_id": session.session_id, "intro": INTRO,
                "ready": session.ready, "state": session.state.value}

    @app.get("/api/sessions/{session_id}")
    def read_session(session_id: str):
        return get_session(session_id).to_dict()

    @app.delete("/api/sessions/{session_id}")
    def end_session(session_id: str):
        get_session(session_id)
        app.state.sessions.remove(session_id)
        return {"session_id": session_id, "ended": True}

    @app.post("/api/chat")
    def chat(req: ChatRequest):
        session = get_session(req.session_id)
        try:
            reply = session.send(req.message)
        except ChatError as exc:
            raise _http_error(exc) from exc
        turns = session.to_dict()["turns"]
        return {"reply": reply, "turns": turns}

    @app.post("/api/summary")
    def summary(req: SummaryRequest):
        session = get_session(req.session_id)
        try:
            document = session.summarize(req.kind)
        except ChatError as exc:
            raise _http_error(exc) from exc
        return {"kind": req.kind.value, "summary": document}

    return app


setup_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=APP_PORT)
