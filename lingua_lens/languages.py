"""
Supported target languages and their speech-synthesis locales.

The locale table is a simple static mapping handed to the browser's speech
synthesis; languages missing from it play back with the fallback locale.
"""

from typing import Dict, List

from lingua_lens import config

SPEECH_LOCALES: Dict[str, str] = {
    "Spanish": "es-ES",
    "French": "fr-FR",
    "German": "de-DE",
    "Japanese": "ja-JP",
    "Mandarin Chinese": "zh-CN",
    "Italian": "it-IT",
    "Korean": "ko-KR",
    "Russian": "ru-RU",
    "Arabic": "ar-SA",
    "Portuguese": "pt-BR",
    "Hindi": "hi-IN",
    "Bengali": "bn-IN",
    "Tamil": "ta-IN",
    "Telugu": "te-IN",
    "Marathi": "mr-IN",
}

# Selector order
LANGUAGES: List[str] = list(SPEECH_LOCALES)


def is_supported(language: str) -> bool:
    return language in SPEECH_LOCALES


def speech_locale(language: str) -> str:
    """Return the BCP-47 locale used to read ``language`` aloud."""
    return SPEECH_LOCALES.get(language, config.LanguageDefaults.FALLBACK_LOCALE)
