# backend/chimera/engine/commands.py
"""
Player command parsing.

A raw command string is classified once, at the front of a turn:
    /declare <free text>            -> DeclareCommand
    /answer <question-id> <text>    -> AnswerCommand
    anything else (or empty)        -> UnknownCommand
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

DECLARE_PREFIX = "/declare"
ANSWER_PREFIX = "/answer"

# First match wins if several ids appear
ANSWER_ID_PATTERN = re.compile(r"/answer\s+(uq-[a-z0-9]+)")


@dataclass(frozen=True)
class DeclareCommand:
    text: str


@dataclass(frozen=True)
class AnswerCommand:
    text: str
    question_id: Optional[str]


@dataclass(frozen=True)
class UnknownCommand:
    text: str


Command = Union[DeclareCommand, AnswerCommand, UnknownCommand]


def extract_question_id(text: str) -> Optional[str]:
    match = ANSWER_ID_PATTERN.search(text)
    return match.group(1) if match else None


def parse_command(raw: Optional[str]) -> Command:
    text = raw or ""
    if not text.strip():
        return UnknownCommand(text)

    if text.startswith(DECLARE_PREFIX):
        return DeclareCommand(text)
    if text.startswith(ANSWER_PREFIX):
        return AnswerCommand(text, extract_question_id(text))
    return UnknownCommand(text)
