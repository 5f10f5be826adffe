from __future__ import annotations

import inspect
from typing import Any

import pytest

from lingua_lens.gemini import GenerativeBackend
from lingua_lens.history import HistoryStore
from lingua_lens.schemas import DefineMeaningOutput, PronounceTextOutput, TranslateTextOutput
from lingua_lens.storage import InMemoryStore
from lingua_lens.translator import Translator

DEFAULT_RESPONSES: dict[type, Any] = {
    TranslateTextOutput: {"translation": "hola mundo"},
    DefineMeaningOutput: {"meaning": "A friendly greeting to everyone."},
    PronounceTextOutput: {"pronunciation": "ˈo.la ˈmun.do"},
}


class FakeBackend(GenerativeBackend):
    """Deterministic backend that records every prompt it receives.

    ``responses`` maps an output schema to a value, an exception to raise, or
    a (possibly async) callable receiving the prompt.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, type]] = []
        self.responses: dict[type, Any] = dict(DEFAULT_RESPONSES)

    async def generate(self, prompt: str, response_schema: type) -> Any:
        self.calls.append((prompt, response_schema))
        value = self.responses[response_schema]
        if isinstance(value, Exception):
            raise value
        if callable(value):
            value = value(prompt)
            if inspect.isawaitable(value):
                value = await value
        return value

    def prompts_for(self, schema: type) -> list[str]:
        return [prompt for prompt, called_schema in self.calls if called_schema is schema]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def history(store: InMemoryStore) -> HistoryStore:
    return HistoryStore(store)


@pytest.fixture
def translator(backend: FakeBackend, history: HistoryStore) -> Translator:
    return Translator(backend, history)
