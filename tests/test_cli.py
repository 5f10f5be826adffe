from __future__ import annotations

import json

import pytest

from lingua_lens import cli
from lingua_lens.storage import InMemoryStore


@pytest.fixture
def memory_store(monkeypatch) -> InMemoryStore:
    store = InMemoryStore()
    monkeypatch.setattr(cli, "create_store", lambda _backend: store)
    return store


def test_history_command_lists_entries(memory_store, capsys) -> None:
    memory_store.set(
        "linguaLensHistory",
        json.dumps([{"id": "abc", "originalText": "hello", "translatedText": "hola",
                     "language": "Spanish", "timestamp": 1}]),
    )

    assert cli.main(["history"]) == 0
    assert "[abc] (Spanish) hello -> hola" in capsys.readouterr().out


def test_history_clear_command(memory_store, capsys) -> None:
    memory_store.set("linguaLensHistory", "[]")

    assert cli.main(["history", "--clear"]) == 0
    assert memory_store.get("linguaLensHistory") is None

    assert cli.main(["history"]) == 0
    assert "empty" in capsys.readouterr().out


def test_languages_command(capsys) -> None:
    assert cli.main(["languages"]) == 0
    assert "Korean\tko-KR" in capsys.readouterr().out


def test_translate_command_uses_backend(memory_store, backend, monkeypatch, capsys) -> None:
    from lingua_lens.history import HistoryStore
    from lingua_lens.translator import Translator

    monkeypatch.setattr(cli, "_build_translator", lambda _args: Translator(backend, HistoryStore(memory_store)))

    assert cli.main(["translate", "hello world", "--to", "Spanish", "--pronounce"]) == 0
    out = capsys.readouterr().out
    assert "hola mundo" in out
    assert "Pronunciation (es-ES): ˈo.la ˈmun.do" in out
    assert json.loads(memory_store.get("linguaLensHistory"))[0]["originalText"] == "hello world"
