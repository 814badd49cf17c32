"""Validation error types shared by the normalizer and the booking validator."""

from typing import Iterable, List, Union

class ValidationError(Exception):
    """A field-shape or cross-field rule was violated.

    Carries one human-readable message per failed rule. Field-level
    failures for a single record are collected into one instance.
    """

    def __init__(self, messages: Union[str, Iterable[str]]):
        if isinstance(messages, str):
            messages = [messages]
        self.messages: List[str] = list(messages)
        super().__init__("; ".join(self.messages))

class EventReferenceError(ValidationError):
    """A booking refers to an event that does not exist or could not be checked."""
    pass
