from __future__ import annotations

import asyncio

import pytest

from lingua_lens.errors import FlowError, FlowInputError, FlowOutputError
from lingua_lens.flows import (
    FLOWS,
    define_meaning,
    pronounce_text,
    translate_text,
    translate_text_flow,
)
from lingua_lens.schemas import (
    DefineMeaningOutput,
    PronounceTextOutput,
    TranslateTextInput,
    TranslateTextOutput,
)


def test_translate_prompt_names_language_and_quotes_text(backend) -> None:
    result = asyncio.run(translate_text(backend, "hello world", "Spanish"))

    assert result == TranslateTextOutput(translation="hola mundo")
    (prompt,) = backend.prompts_for(TranslateTextOutput)
    assert "expert multilingual translator" in prompt
    assert "into Spanish" in prompt
    assert '"hello world"' in prompt


def test_prompt_rendering_keeps_braces_in_user_text() -> None:
    prompt = translate_text_flow.build_prompt(
        TranslateTextInput(text="use {placeholder} here", target_language="German")
    )
    assert "use {placeholder} here" in prompt


def test_define_and_pronounce_prompts(backend) -> None:
    meaning = asyncio.run(define_meaning(backend, "hola mundo"))
    pronunciation = asyncio.run(pronounce_text(backend, "hola mundo", "Spanish"))

    assert meaning.meaning == "A friendly greeting to everyone."
    assert pronunciation.pronunciation == "ˈo.la ˈmun.do"
    assert "What is the meaning of the following text: hola mundo" in backend.prompts_for(DefineMeaningOutput)[0]
    pronounce_prompt = backend.prompts_for(PronounceTextOutput)[0]
    assert "which is in Spanish" in pronounce_prompt
    assert "International Phonetic Alphabet" in pronounce_prompt


def test_flow_accepts_model_instance_and_json_text(backend) -> None:
    backend.responses[TranslateTextOutput] = TranslateTextOutput(translation="bonjour")
    assert asyncio.run(translate_text(backend, "hello", "French")).translation == "bonjour"

    backend.responses[TranslateTextOutput] = '{"translation": "hallo"}'
    assert asyncio.run(translate_text(backend, "hello", "German")).translation == "hallo"


def test_empty_input_is_rejected_before_backend_call(backend) -> None:
    with pytest.raises(FlowInputError):
        asyncio.run(translate_text(backend, "", "Spanish"))
    assert backend.calls == []


@pytest.mark.parametrize(
    "response",
    [None, "not json", {"translation": ""}, {"translation": "   "}, {"wrong": "field"}],
)
def test_unusable_output_raises_flow_output_error(backend, response) -> None:
    backend.responses[TranslateTextOutput] = response
    with pytest.raises(FlowOutputError):
        asyncio.run(translate_text(backend, "hello", "Spanish"))


def test_backend_failure_is_wrapped(backend) -> None:
    backend.responses[TranslateTextOutput] = ConnectionError("network down")

    with pytest.raises(FlowError) as excinfo:
        asyncio.run(translate_text(backend, "hello", "Spanish"))

    assert excinfo.value.flow_name == "translateTextFlow"
    assert isinstance(excinfo.value.__cause__, ConnectionError)


def test_flow_registry_names() -> None:
    assert set(FLOWS) == {"translateTextFlow", "defineMeaningFlow", "pronounceTextFlow"}
