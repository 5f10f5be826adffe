"""
Interaction orchestrator behind the translator page and the CLI.

Holds the state of the three capabilities (translate, define, pronounce),
sequences calls to the flows, records successful translations in the
history and queues user-facing notifications.

Each capability moves idle -> in_flight -> success | failed. A capability
that is in flight is disabled: triggering it again raises
``CapabilityBusyError``. Different capabilities may overlap.
"""

import enum
import logging
import threading
from dataclasses import asdict, dataclass, replace
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from lingua_lens import config
from lingua_lens.errors import CapabilityBusyError, FlowError
from lingua_lens.flows import define_meaning, pronounce_text, translate_text
from lingua_lens.gemini import GenerativeBackend
from lingua_lens.history import HistoryStore, TranslationEntry
from lingua_lens.languages import is_supported, speech_locale

logger = logging.getLogger(__name__)


class Status(str, enum.Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCESS = "success"
    FAILED = "failed"


class Capability(str, enum.Enum):
    TRANSLATE = "translate"
    DEFINE = "define"
    PRONOUNCE = "pronounce"


@dataclass(frozen=True)
class CapabilityState:
    status: Status = Status.IDLE
    result: Optional[str] = None
    error: Optional[str] = None

    @property
    def busy(self) -> bool:
        return self.status is Status.IN_FLIGHT

    def start(self) -> "CapabilityState":
        return CapabilityState(status=Status.IN_FLIGHT)

    def succeed(self, result: str) -> "CapabilityState":
        return CapabilityState(status=Status.SUCCESS, result=result)

    def fail(self, error: str) -> "CapabilityState":
        return CapabilityState(status=Status.FAILED, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status.value, "result": self.result, "error": self.error}


IDLE = CapabilityState()


@dataclass(frozen=True)
class TranslatorState:
    """Snapshot of everything the page renders."""
    input_text: str = ""
    target_language: str = config.LanguageDefaults.TARGET_LANGUAGE
    translate: CapabilityState = IDLE
    define: CapabilityState = IDLE
    pronounce: CapabilityState = IDLE

    @property
    def is_busy(self) -> bool:
        """True while the input and language controls must stay disabled."""
        return self.translate.busy

    @property
    def translation(self) -> Optional[str]:
        if self.translate.status is Status.SUCCESS:
            return self.translate.result
        return None

    def capability(self, capability: Capability) -> CapabilityState:
        return getattr(self, capability.value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inputText": self.input_text,
            "targetLanguage": self.target_language,
            "isBusy": self.is_busy,
            "translate": self.translate.to_dict(),
            "define": self.define.to_dict(),
            "pronounce": self.pronounce.to_dict(),
        }


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = "default"

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


INPUT_REQUIRED = Notification(
    title="Input Required",
    description="Please enter some text to translate.",
    variant="destructive",
)

FAILURE_NOTIFICATIONS: Dict[Capability, Notification] = {
    Capability.TRANSLATE: Notification(
        title="Translation Failed",
        description="Could not translate the text. Please try again later.",
        variant="destructive",
    ),
    Capability.DEFINE: Notification(
        title="Definition Failed",
        description="Could not define the meaning of the text. Please try again.",
        variant="destructive",
    ),
    Capability.PRONOUNCE: Notification(
        title="Pronunciation Failed",
        description="Could not get the pronunciation. Please try again.",
        variant="destructive",
    ),
}


class Translator:
    """
    Orchestrates translations for a single client session.

    Args:
        backend: Generative backend the flows call
        history: History store that receives successful translations
    """

    def __init__(self, backend: GenerativeBackend, history: HistoryStore):
        self.backend = backend
        self.history = history
        self.state = TranslatorState()
        self._notifications: List[Notification] = []
        # Bumped whenever the current translation is replaced, so define and
        # pronounce results for an older translation are dropped.
        self._generation = 0
        # Serializes busy checks with state changes when Flask serves requests
        # from several threads.
        self._lock = threading.Lock()

    # --- notifications -----------------------------------------------------

    def notify(self, notification: Notification) -> None:
        self._notifications.append(notification)

    def drain_notifications(self) -> List[Notification]:
        drained, self._notifications = self._notifications, []
        return drained

    # --- plain state changes -----------------------------------------------

    def _set(self, capability: Capability, value: CapabilityState) -> None:
        self.state = replace(self.state, **{capability.value: value})

    def _ensure_controls_enabled(self) -> None:
        if self.state.is_busy:
            raise CapabilityBusyError(Capability.TRANSLATE.value)

    def set_input(self, text: str) -> TranslatorState:
        with self._lock:
            self._ensure_controls_enabled()
            self.state = replace(self.state, input_text=text)
            return self.state

    def set_target_language(self, language: str) -> TranslatorState:
        if not is_supported(language):
            raise ValueError(f"Unsupported target language: {language}")
        with self._lock:
            self._ensure_controls_enabled()
            self.state = replace(self.state, target_language=language)
            return self.state

    def select_history_entry(self, entry_id: str) -> TranslationEntry:
        """
        Show a past translation without calling the backend.

        Raises:
            KeyError: If no entry has ``entry_id``
            CapabilityBusyError: If a translation is in flight
        """
        with self._lock:
            self._ensure_controls_enabled()
            entry = self.history.get(entry_id)
            if entry is None:
                raise KeyError(entry_id)

            self._generation += 1
            self.state = replace(
                self.state,
                input_text=entry.original_text,
                target_language=entry.language,
                translate=IDLE.succeed(entry.translated_text),
                define=IDLE,
                pronounce=IDLE,
            )
            return entry

    def clear_history(self) -> None:
        self.history.clear_history()

    def listen(self) -> Optional[Tuple[str, str]]:
        """Return the current translation and the locale to speak it in."""
        if not self.state.translation:
            return None
        return self.state.translation, speech_locale(self.state.target_language)

    # --- backend calls -----------------------------------------------------

    async def _run(
        self,
        capability: Capability,
        call: Callable[[], Awaitable[str]],
        replaces_translation: bool = False,
    ) -> Optional[str]:
        with self._lock:
            current = self.state.capability(capability)
            if current.busy:
                raise CapabilityBusyError(capability.value)
            if replaces_translation:
                self._generation += 1
                self.state = replace(self.state, define=IDLE, pronounce=IDLE)
            generation = self._generation
            self._set(capability, current.start())

        try:
            result = await call()
        except FlowError as e:
            logger.error(f"{capability.value} failed: {e}", exc_info=True)
            with self._lock:
                if generation != self._generation:
                    logger.info(f"Discarding stale {capability.value} failure")
                    return None
                self._set(capability, self.state.capability(capability).fail(str(e)))
                self.notify(FAILURE_NOTIFICATIONS[capability])
            return None

        with self._lock:
            if generation != self._generation:
                logger.info(f"Discarding stale {capability.value} result")
                return None
            self._set(capability, self.state.capability(capability).succeed(result))
        return result

    async def translate(self, text: Optional[str] = None, target_language: Optional[str] = None) -> Optional[str]:
        """
        Translate ``text`` (or the current input) into the target language.

        Empty input is rejected with a notification before any backend call.
        On success the translation is appended to the history.

        Returns:
            The translation, or None if the input was rejected or the call failed.
        """
        if target_language is not None and not is_supported(target_language):
            raise ValueError(f"Unsupported target language: {target_language}")
        with self._lock:
            self._ensure_controls_enabled()
            changes = {}
            if text is not None:
                changes["input_text"] = text
            if target_language is not None:
                changes["target_language"] = target_language
            self.state = replace(self.state, **changes)
            source_text = self.state.input_text
            language = self.state.target_language

        if not source_text.strip():
            self.notify(INPUT_REQUIRED)
            return None

        async def call() -> str:
            output = await translate_text(self.backend, source_text, language)
            return output.translation

        translation = await self._run(Capability.TRANSLATE, call, replaces_translation=True)
        if translation is not None:
            self.history.add_entry(source_text, translation, language)
        return translation

    async def define(self) -> Optional[str]:
        """Explain the meaning of the current translation. No-op without one."""
        translation = self.state.translation
        if not translation:
            return None

        async def call() -> str:
            output = await define_meaning(self.backend, translation)
            return output.meaning

        return await self._run(Capability.DEFINE, call)

    async def pronounce(self) -> Optional[str]:
        """Get the pronunciation of the current translation. No-op without one."""
        translation = self.state.translation
        if not translation:
            return None
        language = self.state.target_language

        async def call() -> str:
            output = await pronounce_text(self.backend, translation, language)
            return output.pronunciation

        return await self._run(Capability.PRONOUNCE, call)
