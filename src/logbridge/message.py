"""
Message objects and factories.

Loggers turn ``(msg, *args)`` into a message object through a
`MessageFactory`; layouts only ever call ``get_formatted_message()``.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class Message(Protocol):
    def get_formatted_message(self) -> str: ...


@runtime_checkable
class MultiformatMessage(Protocol):
    """A message that can render itself in more than one format (e.g. XML)."""

    def get_formats(self) -> Sequence[str]: ...

    def get_formatted_message(self, formats: Sequence[str] | None = None) -> str: ...


class SimpleMessage:
    """Message whose text is used as-is."""

    __slots__ = ("_text",)

    def __init__(self, text: Any) -> None:
        self._text = "" if text is None else str(text)

    def get_formatted_message(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"SimpleMessage({self._text!r})"


class ParameterizedMessage:
    """%-style message formatted lazily on first render.

    When the template and arguments do not match, the arguments are appended
    instead of raising, so a bad call site still produces a record.
    """

    __slots__ = ("template", "args", "_formatted")

    def __init__(self, template: Any, *args: Any) -> None:
        self.template = "" if template is None else str(template)
        self.args = args
        self._formatted: str | None = None

    def get_formatted_message(self) -> str:
        if self._formatted is None:
            if not self.args:
                self._formatted = self.template
            else:
                try:
                    self._formatted = self.template % self.args
                except (TypeError, ValueError, KeyError):
                    extra = " ".join(str(a) for a in self.args)
                    self._formatted = f"{self.template} {extra}"
        return self._formatted

    def __repr__(self) -> str:
        return f"ParameterizedMessage({self.template!r}, args={self.args!r})"


@runtime_checkable
class MessageFactory(Protocol):
    def new_message(self, message: Any, *args: Any) -> Message: ...


class ParameterizedMessageFactory:
    """Default factory: message objects pass through, text gets %-formatting."""

    def new_message(self, message: Any, *args: Any) -> Message:
        if not args and hasattr(message, "get_formatted_message"):
            return message  # type: ignore[no-any-return]
        return ParameterizedMessage(message, *args)


DEFAULT_MESSAGE_FACTORY = ParameterizedMessageFactory()

__all__ = [
    "Message",
    "MultiformatMessage",
    "SimpleMessage",
    "ParameterizedMessage",
    "MessageFactory",
    "ParameterizedMessageFactory",
    "DEFAULT_MESSAGE_FACTORY",
]
