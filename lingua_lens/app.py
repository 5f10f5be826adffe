import logging
from typing import Optional

from flask import Flask, current_app, jsonify, render_template, request

from lingua_lens import config
from lingua_lens.errors import CapabilityBusyError
from lingua_lens.gemini import GeminiClient, GenerativeBackend
from lingua_lens.history import HistoryStore
from lingua_lens.languages import LANGUAGES, SPEECH_LOCALES
from lingua_lens.storage import KeyValueStore, create_store
from lingua_lens.translator import Status, Translator

logger = logging.getLogger(__name__)


def create_app(
    app_config: Optional[dict] = None,
    backend: Optional[GenerativeBackend] = None,
    store: Optional[KeyValueStore] = None,
) -> Flask:
    """
    Build the Flask application.

    Args:
        app_config: Extra Flask config values (e.g. ``{"TESTING": True}``)
        backend: Generative backend; a GeminiClient is created when omitted
        store: History storage; selected from configuration when omitted
    """
    app = Flask(__name__, template_folder="templates")
    app.config.from_object(config.Config)
    if app_config:
        app.config.update(app_config)

    history = HistoryStore(store if store is not None else create_store(app.config["STORAGE_BACKEND"]))
    app.extensions["lingua_lens"] = Translator(backend or GeminiClient(), history)

    _register_routes(app)
    return app


def _translator() -> Translator:
    return current_app.extensions["lingua_lens"]


def _payload(translator: Translator, **extra):
    body = {
        "state": translator.state.to_dict(),
        "history": [entry.to_dict() for entry in translator.history.entries],
        "notifications": [n.to_dict() for n in translator.drain_notifications()],
    }
    body.update(extra)
    return body


def _register_routes(app: Flask) -> None:

    @app.route('/')
    def index():
        """Render the translator page."""
        return render_template(
            'index.html',
            languages=LANGUAGES,
            speech_locales=SPEECH_LOCALES,
            fallback_locale=config.LanguageDefaults.FALLBACK_LOCALE,
            default_language=config.LanguageDefaults.TARGET_LANGUAGE,
        )

    @app.errorhandler(CapabilityBusyError)
    def handle_busy(e):
        logger.warning(f"Rejected request: {e}")
        return jsonify(_payload(_translator(), error=str(e))), 409

    @app.route('/api/state', methods=['GET'])
    def get_state():
        return jsonify(_payload(_translator(), languages=LANGUAGES))

    @app.route('/api/translate', methods=['POST'])
    async def translate():
        """Translate the submitted text and record it in the history."""
        data = request.get_json(silent=True) or {}
        text = data.get('text', '')
        target_language = data.get('targetLanguage') or None

        translator = _translator()
        try:
            translation = await translator.translate(text=text, target_language=target_language)
        except ValueError as e:
            return jsonify(_payload(translator, error=str(e))), 400

        if translation is None:
            # Rejected input leaves translate idle; a failed call marks it failed.
            status = 502 if translator.state.translate.status is Status.FAILED else 400
            return jsonify(_payload(translator)), status
        return jsonify(_payload(translator, translation=translation)), 200

    @app.route('/api/define', methods=['POST'])
    async def define():
        translator = _translator()
        if translator.state.translation is None:
            return jsonify(_payload(translator, error="Nothing to define yet.")), 400
        meaning = await translator.define()
        if meaning is None:
            return jsonify(_payload(translator)), 502
        return jsonify(_payload(translator, meaning=meaning)), 200

    @app.route('/api/pronounce', methods=['POST'])
    async def pronounce():
        translator = _translator()
        if translator.state.translation is None:
            return jsonify(_payload(translator, error="Nothing to pronounce yet.")), 400
        pronunciation = await translator.pronounce()
        if pronunciation is None:
            return jsonify(_payload(translator)), 502
        return jsonify(_payload(translator, pronunciation=pronunciation)), 200

    @app.route('/api/listen', methods=['GET'])
    def listen():
        """Return the text and locale the browser should speak."""
        translator = _translator()
        spoken = translator.listen()
        if spoken is None:
            return jsonify({"error": "Nothing to play yet."}), 400
        text, locale = spoken
        return jsonify({"text": text, "lang": locale}), 200

    @app.route('/api/history', methods=['GET'])
    def get_history():
        translator = _translator()
        return jsonify({
            "isLoaded": translator.history.is_loaded,
            "history": [entry.to_dict() for entry in translator.history.entries],
        })

    @app.route('/api/history', methods=['DELETE'])
    def clear_history():
        translator = _translator()
        translator.clear_history()
        logger.info("History cleared")
        return jsonify(_payload(translator)), 200

    @app.route('/api/history/<entry_id>/select', methods=['POST'])
    def select_history_entry(entry_id):
        translator = _translator()
        try:
            translator.select_history_entry(entry_id)
        except KeyError:
            return jsonify({"error": "History entry not found"}), 404
        return jsonify(_payload(translator)), 200


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    create_app().run(debug=True, port=5001)
