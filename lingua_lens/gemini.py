"""
Generative backend used by the flows.

The flows only depend on the ``GenerativeBackend`` interface, so the
Gemini client can be swapped for a deterministic fake in tests.
"""

import abc
import asyncio
import logging
from typing import Any, Optional, Type

from google import genai
from google.genai import types
from pydantic import BaseModel

from lingua_lens import config

logger = logging.getLogger(__name__)


class GenerativeBackend(abc.ABC):
    """Capability interface: a prompt goes in, structured output comes out."""

    @abc.abstractmethod
    async def generate(self, prompt: str, response_schema: Type[BaseModel]) -> Any:
        """
        Generate a response for ``prompt`` shaped like ``response_schema``.

        Returns:
            A ``response_schema`` instance, a plain dict, or a JSON string.
            The caller validates whichever it gets.
        """


class GeminiClient(GenerativeBackend):
    """
    Handles all interactions with the Gemini API.

    Requests JSON output constrained by the flow's pydantic output model
    and returns the parsed object when the SDK manages to parse it.
    """

    def __init__(
        self,
        model: str = config.GenerationDefaults.MODEL,
        temperature: float = config.GenerationDefaults.TEMPERATURE,
        client: Optional[genai.Client] = None,
    ):
        """
        Initialize Gemini client.

        Args:
            model: Gemini model identifier
            temperature: Sampling temperature (0.0-2.0)
            client: Optional preconfigured ``genai.Client``. When omitted, one
                is built from the environment (Vertex AI or API key).
        """
        self.model = model
        self.temperature = temperature
        self.client = client or self._build_client()

    @staticmethod
    def _build_client() -> genai.Client:
        if config.USE_VERTEXAI:
            logger.info(f"Using Vertex AI backend (project={config.PROJECT_ID}, location={config.LOCATION})")
            return genai.Client(vertexai=True, project=config.PROJECT_ID, location=config.LOCATION)
        return genai.Client(api_key=config.API_KEY)

    def _generation_config(self, response_schema: Type[BaseModel]) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            temperature=self.temperature,
            max_output_tokens=config.GeminiLimits.MAX_OUTPUT_TOKENS,
            response_mime_type="application/json",
            response_schema=response_schema,
            safety_settings=[
                types.SafetySetting(category=cat, threshold="BLOCK_ONLY_HIGH")
                for cat in [
                    "HARM_CATEGORY_HATE_SPEECH",
                    "HARM_CATEGORY_DANGEROUS_CONTENT",
                    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
                    "HARM_CATEGORY_HARASSMENT",
                ]
            ],
        )

    async def generate(self, prompt: str, response_schema: Type[BaseModel]) -> Any:
        """
        Generate structured content using the Gemini API.

        Args:
            prompt: Rendered prompt text
            response_schema: Pydantic model describing the expected JSON

        Returns:
            The parsed ``response_schema`` instance, or the raw response text
            when the SDK could not parse it.

        Raises:
            Exception: If the API call fails
        """
        contents = [
            types.Content(
                role="user",
                parts=[types.Part(text=prompt)]
            )
        ]

        # The sync client is not bound to an event loop, so one GeminiClient can
        # serve requests that each run on their own loop.
        response = await asyncio.to_thread(
            self.client.models.generate_content,
            model=self.model,
            contents=contents,
            config=self._generation_config(response_schema),
        )

        if response.parsed is not None:
            return response.parsed
        return response.text
