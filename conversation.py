# conversation.py
from __future__ import annotations

import threading
from enum import Enum
from typing import Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Turn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    text: str

    def render(self) -> str:
        return f"{self.role.value}: {self.text}"


class Conversation:
    """Append-only log of turns for one session."""

    def __init__(self):
        self._turns: List[Turn] = []
        self._lock = threading.Lock()

    def append(self, role: Role, text: str) -> Turn:
        turn = Turn(role=role, text=text)
        with self._lock:
            self._turns.append(turn)
        return turn

    def add_user(self, text: str) -> Turn:
        return self.append(Role.USER, text)

    def add_assistant(self, text: str) -> Turn:
        return self.append(Role.ASSISTANT, text)

    def snapshot(self) -> Tuple[Turn, ...]:
        with self._lock:
            return tuple(self._turns)

    def transcript(self) -> str:
        return render_transcript(self.snapshot())

    def __len__(self):
        return len(self.snapshot())

    def __iter__(self):
        return iter(self.snapshot())


def render_transcript(turns: Iterable[Turn]) -> str:
    return "\n".join(t.render() for t in turns)
