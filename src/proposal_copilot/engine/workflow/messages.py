"""Conversation log entries and the append-only log that holds them."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .events import EntryPoint


class Role(str, Enum):
    AGENT = "agent"
    USER = "user"
    SYSTEM = "system"


class MessageKind(str, Enum):
    PLAIN = "plain"
    REASONING_TRACE = "reasoning_trace"
    ACTION_CARD = "action_card"


class ReasoningTrace(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["reasoning_trace"] = "reasoning_trace"
    steps: tuple[str, ...]


class ActionCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["action_card"] = "action_card"
    title: str
    description: str
    action_label: str
    entry_point: EntryPoint


MessageMetadata = Annotated[ReasoningTrace | ActionCard, Field(discriminator="kind")]


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    role: Role
    content: str
    metadata: MessageMetadata | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def kind(self) -> MessageKind:
        if self.metadata is None:
            return MessageKind.PLAIN
        return MessageKind(self.metadata.kind)


@dataclass(frozen=True, slots=True)
class MessageDraft:
    """A message as declared by a script, before the log gives it an id."""

    role: Role
    content: str
    metadata: ReasoningTrace | ActionCard | None = None

    @staticmethod
    def plain(role: Role, content: str) -> MessageDraft:
        return MessageDraft(role=role, content=content)

    @staticmethod
    def reasoning(content: str, *steps: str) -> MessageDraft:
        return MessageDraft(role=Role.AGENT, content=content, metadata=ReasoningTrace(steps=steps))

    @staticmethod
    def action(content: str, card: ActionCard) -> MessageDraft:
        return MessageDraft(role=Role.AGENT, content=content, metadata=card)


class MessageLog:
    """Append-only, ordered conversation log.

    Entries are never edited or removed. Ids start at 1 and follow append order.
    """

    def __init__(self, seed: MessageDraft | None = None) -> None:
        self._messages: list[Message] = []
        self._ids = itertools.count(1)
        if seed is not None:
            self.append(seed)

    def append(self, draft: MessageDraft) -> None:
        self._messages.append(
            Message(
                id=next(self._ids),
                role=draft.role,
                content=draft.content,
                metadata=draft.metadata,
            )
        )

    def snapshot(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)
