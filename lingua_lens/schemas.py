"""
Flow Pydantic Models

Structured input and output shapes for the translation assistant flows.
Output models double as the response schema sent to Gemini.
"""

from pydantic import BaseModel, Field


class TranslateTextInput(BaseModel):
    text: str = Field(min_length=1, description="The text to translate.")
    target_language: str = Field(min_length=1, description="The target language for the translation.")


class TranslateTextOutput(BaseModel):
    translation: str = Field(description="The translated text.")


class DefineMeaningInput(BaseModel):
    text: str = Field(min_length=1, description="The text to define the meaning of.")


class DefineMeaningOutput(BaseModel):
    meaning: str = Field(description="The meaning of the text.")


class PronounceTextInput(BaseModel):
    text: str = Field(min_length=1, description="The text to get the pronunciation of.")
    language: str = Field(
        min_length=1,
        description='The language of the text for more accurate pronunciation (e.g., "Spanish", "Japanese").',
    )


class PronounceTextOutput(BaseModel):
    pronunciation: str = Field(
        description="The phonetic pronunciation of the text, using the International Phonetic Alphabet (IPA) if possible."
    )
