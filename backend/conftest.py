"""
Shared test helpers: a scripted text generator and a fixed calendar
"""

import asyncio
from datetime import date

from fridge.persistence import MemoryPersistence
from fridge.recommend import RecommendationEngine
from fridge.session import FridgeSession
from fridge.store import IngredientStore

TODAY = date(2025, 3, 10)


class FakeGenerator:
    """Returns scripted responses in order; exceptions in the script are raised"""

    def __init__(self, *responses, configured=True):
        self.responses = list(responses)
        self.prompts = []
        self.configured = configured

    @property
    def call_count(self) -> int:
        return len(self.prompts)

    async def generate(self, prompt):
        self.prompts.append(prompt)
        response = self.responses.pop(0) if self.responses else None
        if isinstance(response, Exception):
            raise response
        return response


class GatedGenerator(FakeGenerator):
    """Like FakeGenerator, but every call waits until release() is called"""

    def __init__(self, *responses, configured=True):
        super().__init__(*responses, configured=configured)
        self._gate = None

    def _gate_event(self):
        if self._gate is None:
            self._gate = asyncio.Event()
        return self._gate

    def release(self):
        self._gate_event().set()

    async def generate(self, prompt):
        self.prompts.append(prompt)
        await self._gate_event().wait()
        response = self.responses.pop(0) if self.responses else None
        if isinstance(response, Exception):
            raise response
        return response


def make_store(persistence=None):
    return IngredientStore(persistence or MemoryPersistence(), today=lambda: TODAY)


def make_session(generator, persistence=None):
    return FridgeSession(make_store(persistence), RecommendationEngine(generator))
