from __future__ import annotations

import pytest
from pydantic import ValidationError

from conversation import Conversation, Role, Turn, render_transcript


def test_turns_keep_insertion_order():
    conversation = Conversation()
    conversation.add_user("I have a headache")
    conversation.add_assistant("How severe?")
    conversation.add_user("7 out of 10")

    assert [t.role for t in conversation] == [Role.USER, Role.ASSISTANT, Role.USER]
    assert conversation.transcript() == (
        "user: I have a headache\nassistant: How severe?\nuser: 7 out of 10"
    )


def test_turn_is_frozen():
    turn = Turn(role=Role.USER, text="hello")
    with pytest.raises(ValidationError):
        turn.text = "changed"


def test_turn_rejects_unknown_role():
    with pytest.raises(ValidationError):
        Turn(role="model", text="hi")


def test_snapshot_is_detached_from_later_appends():
    conversation = Conversation()
    conversation.add_user("one")
    snapshot = conversation.snapshot()
    conversation.add_assistant("two")
    assert len(snapshot) == 1
    assert len(conversation) == 2


def test_render_transcript_of_nothing_is_empty():
    assert render_transcript([]) == ""


def test_len_counts_appended_turns():
    conversation = Conversation()
    assert len(conversation) == 0
    conversation.add_user("one")
    conversation.add_assistant("two")
    assert len(conversation) == len(conversation.snapshot()) == 2
