"""Scripted stand-ins for the text generator and the random source."""

import random

from chimera.llm_client import FALLBACK_PREFIX


class ScriptedLLM:
    """
    Replies from a fixed list (cycling the last entry) or a callable,
    and records every (role_instruction, context) pair it was asked.
    """

    def __init__(self, replies=None, responder=None):
        self.replies = list(replies or [])
        self.responder = responder
        self.calls = []

    async def generate(self, role_instruction, context_text):
        self.calls.append((role_instruction, context_text))
        if self.responder is not None:
            return self.responder(role_instruction, context_text)
        if not self.replies:
            return "What does the player feel in that moment?"
        if len(self.replies) == 1:
            return self.replies[0]
        return self.replies.pop(0)


class OfflineLLM(ScriptedLLM):
    def __init__(self):
        super().__init__(replies=[f"{FALLBACK_PREFIX} The agent is offline."])


class ScriptedRandom(random.Random):
    """random() returns the scripted draws in order; choice() picks the first element."""

    def __init__(self, draws=()):
        super().__init__(0)
        self.draws = list(draws)
        self.draw_count = 0

    def random(self):
        self.draw_count += 1
        if not self.draws:
            raise AssertionError("unexpected random draw")
        return self.draws.pop(0)

    def choice(self, seq):
        return seq[0]
