import argparse
import asyncio
import logging
import sys

from lingua_lens import config
from lingua_lens.history import HistoryStore
from lingua_lens.languages import LANGUAGES, speech_locale
from lingua_lens.storage import create_store

logger = logging.getLogger(__name__)


def _build_translator(args):
    # Imported lazily so `history` and `languages` work without Gemini credentials.
    from lingua_lens.gemini import GeminiClient
    from lingua_lens.translator import Translator

    history = HistoryStore(create_store(args.storage))
    return Translator(GeminiClient(model=args.model), history)


async def _translate(args) -> int:
    translator = _build_translator(args)

    translation = await translator.translate(text=args.text, target_language=args.target_language)
    for notification in translator.drain_notifications():
        logger.error(f"{notification.title}: {notification.description}")
    if translation is None:
        return 1

    print(translation)
    failed = False
    if args.pronounce:
        pronunciation = await translator.pronounce()
        failed |= pronunciation is None
        if pronunciation:
            print(f"Pronunciation ({speech_locale(args.target_language)}): {pronunciation}")
    if args.define:
        meaning = await translator.define()
        failed |= meaning is None
        if meaning:
            print(f"Meaning: {meaning}")

    for notification in translator.drain_notifications():
        logger.error(f"{notification.title}: {notification.description}")
    return 1 if failed else 0


def _history(args) -> int:
    history = HistoryStore(create_store(args.storage))
    if args.clear:
        history.clear_history()
        logger.info("History cleared.")
        return 0

    if not len(history):
        print("Your translation history is empty.")
        return 0
    for entry in history.entries:
        print(f"[{entry.id}] ({entry.language}) {entry.original_text} -> {entry.translated_text}")
    return 0


def _serve(args) -> int:
    from lingua_lens.app import create_app

    app = create_app({"STORAGE_BACKEND": args.storage})
    app.run(host=args.host, port=args.port, debug=args.debug)
    return 0


def _languages(args) -> int:
    for language in LANGUAGES:
        print(f"{language}\t{speech_locale(language)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Translate text with Gemini and keep a short history.")
    parser.add_argument(
        "--storage",
        default=config.Config.STORAGE_BACKEND,
        choices=sorted(config.StorageBackends.SUPPORTED),
        help="Where the translation history is kept.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    translate = subparsers.add_parser("translate", help="Translate a piece of text.")
    translate.add_argument("text", help="Text to translate.")
    translate.add_argument(
        "--to", dest="target_language",
        default=config.LanguageDefaults.TARGET_LANGUAGE,
        choices=LANGUAGES,
        help="Target language (e.g. 'French').",
    )
    translate.add_argument("--define", action="store_true", help="Also explain the meaning of the translation.")
    translate.add_argument("--pronounce", action="store_true", help="Also show the pronunciation of the translation.")
    translate.add_argument("--model", default=config.GenerationDefaults.MODEL, help="Gemini model to use.")

    history = subparsers.add_parser("history", help="Show or clear the translation history.")
    history.add_argument("--clear", action="store_true", help="Delete all history entries.")

    serve = subparsers.add_parser("serve", help="Run the web application.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=5001)
    serve.add_argument("--debug", action="store_true")

    subparsers.add_parser("languages", help="List supported target languages.")
    return parser


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    args = build_parser().parse_args(argv)

    try:
        if args.command == "translate":
            return asyncio.run(_translate(args))
        if args.command == "history":
            return _history(args)
        if args.command == "serve":
            return _serve(args)
        return _languages(args)
    except ValueError as e:
        logger.error(f"Configuration Error: {e}")
        return 1
    except Exception as e:
        logger.error(f"Critical failure: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
