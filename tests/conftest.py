"""Shared fixtures for the Inquilex test suite"""

import pytest

from inquilex.core.corpus import Corpus, load_corpus, parse_entries
from inquilex.core.engine import LegalTermEngine
from inquilex.core.patterns import compile_pattern


@pytest.fixture(scope="session")
def corpus():
    return load_corpus()


@pytest.fixture(scope="session")
def pattern(corpus):
    return compile_pattern(corpus)


@pytest.fixture(scope="session")
def engine(corpus):
    return LegalTermEngine(corpus=corpus)


@pytest.fixture
def small_corpus():
    """Two entries: a perfect title hit and a content-only hit for 'despejo'"""
    return Corpus(parse_entries({
        "despejo": "Definição: processo judicial de despejo do locatário.",
        "retomada": "Quando o locador pede o imóvel de volta, muitas vezes via despejo.",
    }))
