"""
Flows: named prompt + schema pairs executed against the generative backend.

- translate_text: translates text into a target language.
- define_meaning: explains the meaning of a text.
- pronounce_text: returns the phonetic rendering of a text.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, Type, TypeVar

from pydantic import BaseModel, ValidationError

from lingua_lens.errors import FlowError, FlowInputError, FlowOutputError
from lingua_lens.gemini import GenerativeBackend
from lingua_lens.prompts import (
    DEFINE_MEANING_PROMPT,
    PRONOUNCE_TEXT_PROMPT,
    TRANSLATE_TEXT_PROMPT,
)
from lingua_lens.schemas import (
    DefineMeaningInput,
    DefineMeaningOutput,
    PronounceTextInput,
    PronounceTextOutput,
    TranslateTextInput,
    TranslateTextOutput,
)

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)


@dataclass(frozen=True)
class Flow(Generic[InputT, OutputT]):
    """
    A single named operation against the generative backend.

    Attributes:
        name: Flow identifier used in logs and errors
        input_schema: Pydantic model the input must satisfy
        output_schema: Pydantic model the backend answer must satisfy
        template: Prompt template, formatted with the input fields
    """
    name: str
    input_schema: Type[InputT]
    output_schema: Type[OutputT]
    template: str

    def build_prompt(self, payload: InputT) -> str:
        return self.template.format(**payload.model_dump())

    async def run(self, backend: GenerativeBackend, payload: Any) -> OutputT:
        """
        Validate ``payload``, call the backend and parse its answer.

        Args:
            backend: Generative backend to call
            payload: Input model instance or a mapping of its fields

        Returns:
            The validated output model

        Raises:
            FlowInputError: If the payload does not match the input schema
            FlowOutputError: If the answer is empty or unparsable
            FlowError: If the backend call itself fails
        """
        try:
            validated = self.input_schema.model_validate(
                payload.model_dump() if isinstance(payload, BaseModel) else payload
            )
        except ValidationError as e:
            raise FlowInputError(self.name, f"invalid input: {e}") from e

        prompt = self.build_prompt(validated)
        logger.info(f"Running flow '{self.name}' ({len(prompt)} prompt chars)")

        try:
            raw = await backend.generate(prompt, self.output_schema)
        except Exception as e:
            logger.error(f"Backend call failed for flow '{self.name}': {e}", exc_info=True)
            raise FlowError(self.name, f"backend call failed: {e}") from e

        output = self._parse_output(raw)
        logger.info(f"Flow '{self.name}' completed")
        return output

    def _parse_output(self, raw: Any) -> OutputT:
        if raw is None:
            raise FlowOutputError(self.name, "backend returned no output")

        try:
            if isinstance(raw, BaseModel):
                output = self.output_schema.model_validate(raw.model_dump())
            elif isinstance(raw, (str, bytes)):
                output = self.output_schema.model_validate_json(raw)
            else:
                output = self.output_schema.model_validate(raw)
        except (ValidationError, json.JSONDecodeError) as e:
            logger.error(f"Unparsable output for flow '{self.name}': {raw!r}")
            raise FlowOutputError(self.name, f"unparsable output: {e}") from e

        empty = [field for field, value in output.model_dump().items() if isinstance(value, str) and not value.strip()]
        if empty:
            raise FlowOutputError(self.name, f"empty output field(s): {', '.join(empty)}")
        return output


translate_text_flow: Flow[TranslateTextInput, TranslateTextOutput] = Flow(
    name="translateTextFlow",
    input_schema=TranslateTextInput,
    output_schema=TranslateTextOutput,
    template=TRANSLATE_TEXT_PROMPT,
)

define_meaning_flow: Flow[DefineMeaningInput, DefineMeaningOutput] = Flow(
    name="defineMeaningFlow",
    input_schema=DefineMeaningInput,
    output_schema=DefineMeaningOutput,
    template=DEFINE_MEANING_PROMPT,
)

pronounce_text_flow: Flow[PronounceTextInput, PronounceTextOutput] = Flow(
    name="pronounceTextFlow",
    input_schema=PronounceTextInput,
    output_schema=PronounceTextOutput,
    template=PRONOUNCE_TEXT_PROMPT,
)

FLOWS: Dict[str, Flow] = {
    flow.name: flow for flow in (translate_text_flow, define_meaning_flow, pronounce_text_flow)
}


async def translate_text(backend: GenerativeBackend, text: str, target_language: str) -> TranslateTextOutput:
    return await translate_text_flow.run(backend, {"text": text, "target_language": target_language})


async def define_meaning(backend: GenerativeBackend, text: str) -> DefineMeaningOutput:
    return await define_meaning_flow.run(backend, {"text": text})


async def pronounce_text(backend: GenerativeBackend, text: str, language: str) -> PronounceTextOutput:
    return await pronounce_text_flow.run(backend, {"text": text, "language": language})
