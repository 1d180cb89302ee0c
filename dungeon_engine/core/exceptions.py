"""Engine error taxonomy.

Content problems (missing catalog ids, unaffordable costs) degrade gracefully
inside the engine; caller protocol violations raise InvalidStateError.
"""

from typing import Optional


class EngineError(Exception):
    """Base class for all engine errors."""


class DataNotFoundError(EngineError, KeyError):
    """A referenced catalog id does not exist."""

    def __init__(self, kind: str, item_id: str):
        self.kind = kind
        self.item_id = item_id
        super().__init__(f"{kind} not found: {item_id}")

    def __str__(self) -> str:
        return f"{self.kind} not found: {self.item_id}"


class InvalidStateError(EngineError):
    """The caller asked for something the session state does not allow."""

    def __init__(self, message: str, session_id: Optional[str] = None):
        self.session_id = session_id
        if session_id:
            message = f"[session {session_id}] {message}"
        super().__init__(message)


class ExhaustedResourceError(EngineError):
    """An action costs more mana or health than the combatant has."""

    def __init__(self, resource: str, required: int, available: int):
        self.resource = resource
        self.required = required
        self.available = available
        super().__init__(
            f"insufficient {resource}: required {required}, available {available}"
        )
