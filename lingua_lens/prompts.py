"""
This file contains the prompt templates for the translation assistant flows.
"""

TRANSLATE_TEXT_PROMPT = """
You are an expert multilingual translator. Translate the following text into {target_language}.

Text to translate:
"{text}"

**Output:** Return ONLY the translated text in the `translation` field. Do not include preamble or explanations.
"""

DEFINE_MEANING_PROMPT = """
What is the meaning of the following text: {text}

**Output:** Return the explanation in the `meaning` field.
"""

PRONOUNCE_TEXT_PROMPT = """
You are a linguistic expert. Provide the phonetic pronunciation for the following text, which is in {language}. Use the International Phonetic Alphabet (IPA) if appropriate for the language.

Text: "{text}"

**Output:** Return ONLY the pronunciation in the `pronunciation` field.
"""
