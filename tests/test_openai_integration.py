# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-05
# Description: test_openai_integration.py
# -----------------------------------------------------------------------------
import os

import pytest

import settings
from chat.OpenAIChat import OpenAIChat
from config.Config import Config
from embedding.KBEmbedder import KBEmbedder
from translation.KBTranslator import KBTranslator


def _skip_if_missing_prereqs():
    missing = [name for name in Config.OPENAI_ENV_VARS if not os.getenv(name)]
    if missing:
        pytest.skip(f"Missing env vars for OpenAI: {', '.join(missing)}")


def _cfg() -> Config:
    # database is not touched here
    os.environ.setdefault(Config.ENV_VARS["database_url"], "sqlite://")
    return Config.from_env()


@pytest.mark.integration
def test_openai_chat_simple_roundtrip():
    _skip_if_missing_prereqs()

    chat = OpenAIChat(cfg=_cfg())
    resp = chat.simple_chat(
        user_text="Reply with a single word: OK",
        system_text="You are a test assistant.",
        temperature=0.0,
        max_tokens=5,
    )

    assert isinstance(resp, dict)
    assert resp["answer"].strip().upper().startswith("OK")


@pytest.mark.integration
def test_embedding_dimension_matches_settings():
    _skip_if_missing_prereqs()

    vector = KBEmbedder(_cfg()).embed("How do I bind an OData model to a sap.m.Table?")
    assert len(vector) == settings.EMBEDDING_DIM


@pytest.mark.integration
def test_portuguese_translation_preserves_identifiers():
    _skip_if_missing_prereqs()

    translator = KBTranslator(OpenAIChat(cfg=_cfg()))
    result = translator.translate("Crie um controller que chama onInit() e abre a transação ME21N", "pt")

    assert result.was_translated is True
    assert "onInit()" in result.translated_text
    assert "ME21N" in result.translated_text
