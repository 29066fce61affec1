"""Tests for keyword-triggered context enrichment."""

import pytest

from pldbot.chat.enricher import (
    REFERENCE_SEPARATOR,
    THRESHOLD_KEYWORDS,
    enrich_message,
    matched_keywords,
)
from pldbot.chat.prompts import THRESHOLD_REFERENCE


class TestKeywordHits:

    @pytest.mark.parametrize("message", [
        "¿Cuál es el umbral para inmuebles?",
        "¿Qué MONTO debo reportar?",
        "¿Hay un límite para vehículos?",
        "¿Cuánto tiempo tengo?",
        "¿Cuándo presento el Aviso?",
        "Necesito reportar una operación",
    ])
    def test_appends_reference_block(self, message):
        enriched = enrich_message(message)
        assert enriched.startswith(message)
        assert enriched.endswith(THRESHOLD_REFERENCE)
        assert enriched == f"{message}{REFERENCE_SEPARATOR}{THRESHOLD_REFERENCE}"

    def test_substring_match(self):
        # "umbrales" contains "umbral"
        assert matched_keywords("Lista de umbrales") == ["umbral"]

    def test_multiple_keywords_single_block(self):
        enriched = enrich_message("¿Cuál es el monto del umbral?")
        assert enriched.count("UMBRALES DE AVISO") == 1

    def test_custom_reference_block(self):
        assert enrich_message("umbral", "TABLA") == f"umbral{REFERENCE_SEPARATOR}TABLA"


class TestNoHit:

    @pytest.mark.parametrize("message", [
        "¿Qué es una Actividad Vulnerable?",
        "Hola",
        "¿Qué documentos necesito para KYC?",
    ])
    def test_message_unchanged(self, message):
        assert enrich_message(message) == message

    def test_keyword_set_is_fixed(self):
        assert THRESHOLD_KEYWORDS == {"umbral", "monto", "límite", "cuánto", "aviso", "reportar"}


def test_reference_block_documents_real_estate():
    assert "Inmuebles: Cualquier monto" in enrich_message("¿Cuál es el umbral para inmuebles?")
