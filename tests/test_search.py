"""
Unit tests for the fuzzy term search.

Tests cover:
- Levenshtein distance
- Title and content scoring
- Query length threshold
- Ranking, result cap and tie order
- Memoization
"""

import pytest

from inquilex.core.corpus import Corpus, parse_entries
from inquilex.core.search import (
    MAX_RESULTS,
    TermSearcher,
    content_score,
    levenshtein,
    title_score,
)


@pytest.mark.parametrize("a, b, expected", [
    ("kitten", "sitting", 3),
    ("", "abc", 3),
    ("abc", "", 3),
    ("abc", "abc", 0),
    ("fiador", "fiadro", 2),
    ("locador", "locadora", 1),
    ("caução", "caucao", 2),
])
def test_levenshtein(a, b, expected):
    assert levenshtein(a, b) == expected


def test_levenshtein_is_symmetric():
    assert levenshtein("despejo", "desejo") == levenshtein("desejo", "despejo") == 1


def test_title_score_exact_match():
    assert title_score("despejo", "despejo") == pytest.approx(10.0)


def test_title_score_within_threshold():
    # len("desejo") // 5 == 1, one deletion away from the key
    assert title_score("desejo", "despejo") == pytest.approx(10 * (1 - 1 / 7))


def test_title_score_outside_threshold():
    assert title_score("locatário", "locador") == 0.0


def test_content_score_substring():
    assert content_score("fiador", "O fiador paga a dívida.") == pytest.approx(3.0)


def test_content_score_fuzzy_word():
    # No substring hit; "fiador" is two edits from "fiadro" and the threshold is 2
    assert content_score("fiadro", "O fiador paga.") == pytest.approx(2 * (1 - 2 / 6))


def test_content_score_short_query_uses_tighter_threshold():
    # len("casa") <= 5 so only one edit is tolerated
    assert content_score("casa", "mesa posta") == 0.0
    assert content_score("casa", "a caso") == pytest.approx(2 * (1 - 1 / 4))


def test_short_queries_return_nothing(small_corpus):
    searcher = TermSearcher(small_corpus)
    assert searcher.search("ab") == []
    assert searcher.search("   ab   ") == []
    assert searcher.search("") == []


def test_three_char_query_never_throws(corpus):
    results = TermSearcher(corpus).search("loc")
    assert isinstance(results, list)
    assert len(results) <= MAX_RESULTS


def test_exact_title_match_ranks_first(small_corpus):
    results = TermSearcher(small_corpus).search("despejo")

    assert [r.key for r in results] == ["despejo", "retomada"]
    assert results[0].score >= 10
    assert results[1].score == pytest.approx(3.0)


def test_search_result_fields(corpus):
    results = TermSearcher(corpus).search("art. 23")

    top = results[0]
    assert top.key == "art. 23"
    assert top.display_title == "ARTIGO 23"
    assert top.content_preview == corpus["art. 23"].summary
    assert top.score == pytest.approx(10.0 + 3.0)


def test_search_is_case_insensitive(corpus):
    searcher = TermSearcher(corpus)
    assert searcher.search("DESPEJO") == searcher.search("despejo")


def test_search_embedded_corpus(corpus):
    results = TermSearcher(corpus).search("despejo")

    assert results[0].key == "despejo"
    assert results[0].score >= 10
    assert all(r.score < results[0].score for r in results[1:])
    assert all(r.score > 1.5 for r in results)


def test_results_capped(corpus):
    # "locação"/"locador"/"locatário" appear in most summaries
    results = TermSearcher(corpus).search("loca")
    assert len(results) == MAX_RESULTS


def test_search_is_deterministic(corpus):
    first = TermSearcher(corpus).search("fiador")
    second = TermSearcher(corpus).search("fiador")
    assert first == second


def test_ties_keep_corpus_order():
    corpus = Corpus(parse_entries({
        "primeiro": "cláusula de vigência",
        "segundo": "cláusula de vigência",
        "terceiro": "cláusula de vigência",
    }))
    results = TermSearcher(corpus).search("vigência")
    assert [r.key for r in results] == ["primeiro", "segundo", "terceiro"]


def test_nothing_above_floor():
    corpus = Corpus(parse_entries({"locador": "parte que cede o imóvel"}))
    assert TermSearcher(corpus).search("xyzzy") == []


def test_results_are_memoized(corpus):
    searcher = TermSearcher(corpus)
    searcher.search("fiança")
    searcher.search("  FIANÇA ")
    assert searcher._cached_search.cache_info().hits == 1

    searcher.clear_cache()
    assert searcher._cached_search.cache_info().currsize == 0


def test_long_queries_are_truncated(corpus):
    searcher = TermSearcher(corpus, max_query_chars=7)
    assert searcher.search("despejo" + "x" * 500) == searcher.search("despejo")


def test_non_string_query(corpus):
    assert TermSearcher(corpus).search(None) == []


def test_query_is_trimmed_before_truncation(corpus):
    searcher = TermSearcher(corpus)
    assert searcher.search(" " * 200 + "despejo") == searcher.search("despejo")
    assert searcher.search(" " * 200 + "despejo")[0].key == "despejo"
