"""
Chat Session

Tracks the lifecycle of research chat turns:

    Idle -> AwaitingResponse -> Rendered | Errored

A session accepts a new message only when no turn is awaiting a response.
Rendered and Errored are terminal; the next message starts a new turn.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from src.research.services.answer_service import ResearchAnswer, ResearchAnswerService

logger = logging.getLogger(__name__)

ERROR_MESSAGE = "Sorry, I encountered an error while searching for research. Please try again."


class TurnState(str, Enum):
    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"
    RENDERED = "rendered"
    ERRORED = "errored"


class TurnInProgressError(Exception):
    """Raised when a message is submitted while the previous turn is still awaiting a response."""
    pass


@dataclass
class ChatTurn:
    """One user message and its outcome."""
    message: str
    state: TurnState = TurnState.AWAITING_RESPONSE
    answer: Optional[ResearchAnswer] = None
    error: Optional[str] = None
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (TurnState.RENDERED, TurnState.ERRORED)


class ChatSession:
    """
    In-memory chat history with single-flight turn handling.

    Example:
        session = ChatSession(answer_service)
        turn = await session.ask("How do I handle bedtime resistance?")
        if turn.state is TurnState.RENDERED:
            print(turn.answer.answer)
    """

    def __init__(self, answer_service: Optional[ResearchAnswerService] = None):
        self._answer_service = answer_service
        self.turns: List[ChatTurn] = []

    @property
    def current_turn(self) -> Optional[ChatTurn]:
        return self.turns[-1] if self.turns else None

    @property
    def state(self) -> TurnState:
        turn = self.current_turn
        return turn.state if turn else TurnState.IDLE

    def begin(self, message: str) -> ChatTurn:
        """
        Start a new turn.

        Raises:
            TurnInProgressError: If the previous turn has not finished
            ValueError: If the message is blank
        """
        if self.state is TurnState.AWAITING_RESPONSE:
            raise TurnInProgressError("Previous message is still awaiting a response")
        if not message or not message.strip():
            raise ValueError("Message must not be empty")

        turn = ChatTurn(message=message.strip())
        self.turns.append(turn)
        return turn

    def complete(self, answer: ResearchAnswer) -> ChatTurn:
        """Mark the current turn as rendered with its answer."""
        turn = self._awaiting_turn()
        turn.answer = answer
        turn.state = TurnState.RENDERED
        turn.finished_at = datetime.now()
        return turn

    def fail(self, error: str = ERROR_MESSAGE) -> ChatTurn:
        """Mark the current turn as errored."""
        turn = self._awaiting_turn()
        turn.error = error
        turn.state = TurnState.ERRORED
        turn.finished_at = datetime.now()
        return turn

    async def ask(self, message: str) -> ChatTurn:
        """
        Run one full turn through the answer service.

        Failures inside the answer service end the turn in Errored with the
        user-facing error message; they are not raised to the caller.
        """
        if self._answer_service is None:
            raise RuntimeError("ChatSession.ask requires an answer service")

        turn = self.begin(message)
        try:
            answer = await self._answer_service.answer(turn.message)
        except Exception as e:
            logger.error(f"Chat turn failed for {turn.message!r}: {e}")
            return self.fail()
        return self.complete(answer)

    def _awaiting_turn(self) -> ChatTurn:
        turn = self.current_turn
        if turn is None or turn.state is not TurnState.AWAITING_RESPONSE:
            raise RuntimeError("No turn is awaiting a response")
        return turn
