#!/usr/bin/env python3
# line_server/commands.py
"""
Command Classification Module

Turns a trimmed message into a Command. Classification is a pure function
evaluated fresh for every message; the session handler dispatches on the
resulting CommandKind.

Grammar:
- ""              -> EMPTY
- "hello", "bye"  -> HELLO, BYE (exact match only)
- "/time"         -> TIME
- "/quit"         -> QUIT
- "/echo <args>"  -> ECHO
- "/<anything>"   -> UNKNOWN
- everything else -> TEXT
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Tuple


class CommandKind(Enum):
    """Kinds of message the session handler knows how to answer."""
    EMPTY = "empty"
    HELLO = "hello"
    BYE = "bye"
    TIME = "time"
    QUIT = "quit"
    ECHO = "echo"
    UNKNOWN = "unknown"
    TEXT = "text"


# Kinds that end the session once their reply has been sent
TERMINAL_KINDS = frozenset({CommandKind.BYE, CommandKind.QUIT})

COMMAND_PREFIX = "/"

KEYWORDS = {
    "": CommandKind.EMPTY,
    "hello": CommandKind.HELLO,
    "bye": CommandKind.BYE,
}

SLASH_COMMANDS = {
    "/time": CommandKind.TIME,
    "/quit": CommandKind.QUIT,
    "/echo": CommandKind.ECHO,
}


@dataclass(frozen=True)
class Command:
    """
    A classified message.

    Attributes:
        kind: What the message asks for
        text: The trimmed message as received
        args: Whitespace-separated fields following a slash-command name
    """
    kind: CommandKind
    text: str
    args: Tuple[str, ...] = ()

    @property
    def is_terminal(self) -> bool:
        return self.kind in TERMINAL_KINDS


def classify(message: str) -> Command:
    """
    Classify a trimmed message.

    Args:
        message: The message with surrounding whitespace already removed

    Returns:
        The Command describing the message
    """
    if message in KEYWORDS:
        return Command(KEYWORDS[message], message)

    if message.startswith(COMMAND_PREFIX):
        name, *args = message.split()
        kind = SLASH_COMMANDS.get(name, CommandKind.UNKNOWN)
        return Command(kind, message, tuple(args))

    return Command(CommandKind.TEXT, message)


# English names, independent of the process locale
_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_clock(moment: datetime) -> str:
    """Format a time the way /time reports it, e.g. 'Mon Jan 2 15:04:05 2006'."""
    return (f"{_WEEKDAYS[moment.weekday()]} {_MONTHS[moment.month - 1]} "
            f"{moment.day} {moment:%H:%M:%S} {moment.year}")
