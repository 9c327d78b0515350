"""
Inquilex Term Search
Fuzzy search over the corpus, ranked by title and content edit distance
"""

import re
from dataclasses import dataclass, asdict
from functools import lru_cache
from typing import Any, Dict, List, Tuple
import logging

from .corpus import Corpus, DefinitionRecord, display_title

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3
MAX_RESULTS = 7
SCORE_FLOOR = 1.5

# Empirically tuned weights, kept as-is so ranked output stays stable
TITLE_WEIGHT = 10
SUBSTRING_SCORE = 3
FUZZY_WEIGHT = 2

_WORD_SPLIT = re.compile(r'[\s,.;\-()]+')


def levenshtein(a: str, b: str) -> int:
    """
    Classic edit distance (insert, delete and substitute all cost 1)

    Args:
        a: First string
        b: Second string

    Returns:
        Minimum number of edits turning a into b
    """
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            ))
        previous = current

    return previous[-1]


@dataclass(frozen=True)
class SearchResult:
    """A ranked corpus entry"""
    key: str
    display_title: str
    content_preview: str
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def title_score(query: str, key: str) -> float:
    """Score the fuzzy match between the query and an entry key"""
    title = key.lower()
    threshold = max(1, len(query) // 5)
    distance = levenshtein(query, title)
    if distance <= threshold:
        return TITLE_WEIGHT * (1 - distance / len(title))
    return 0.0


def content_score(query: str, content: str) -> float:
    """Score substring and per-word fuzzy matches of the query in the entry content"""
    content = content.lower()
    threshold = 2 if len(query) > 5 else 1

    score = 0.0
    if query in content:
        score = float(SUBSTRING_SCORE)

    best_distance = None
    for word in _WORD_SPLIT.split(content):
        # Words whose length differs too much cannot be within the threshold
        if abs(len(word) - len(query)) > threshold:
            continue
        distance = levenshtein(query, word)
        if best_distance is None or distance < best_distance:
            best_distance = distance
        if best_distance == 0:
            break

    if best_distance is not None and best_distance <= threshold:
        fuzzy_score = FUZZY_WEIGHT * (1 - best_distance / len(query))
        score = max(score, fuzzy_score)

    return score


def score_entry(query: str, record: DefinitionRecord) -> float:
    """Total score of one entry for an already lowercased and trimmed query"""
    return title_score(query, record.key) + content_score(query, record.content)


class TermSearcher:
    """
    Ranks corpus entries against a free-text query

    The corpus is immutable, so results are memoized per query.
    """

    def __init__(self, corpus: Corpus, max_query_chars: int = 200, cache_size: int = 256):
        self.corpus = corpus
        self.max_query_chars = max_query_chars
        self._cached_search = lru_cache(maxsize=cache_size)(self._search)

    def search(self, query: str) -> List[SearchResult]:
        """
        Search the corpus

        Args:
            query: Raw user query

        Returns:
            At most MAX_RESULTS results, highest score first. Empty when the
            trimmed query is shorter than MIN_QUERY_LENGTH.
        """
        if not isinstance(query, str):
            return []

        normalized = query.strip()[:self.max_query_chars].rstrip().lower()
        if len(normalized) < MIN_QUERY_LENGTH:
            return []

        return list(self._cached_search(normalized))

    def _search(self, query: str) -> Tuple[SearchResult, ...]:
        results = []
        for key, record in self.corpus.items():
            score = score_entry(query, record)
            if score > SCORE_FLOOR:
                results.append(SearchResult(
                    key=key,
                    display_title=display_title(key),
                    content_preview=record.summary,
                    score=score,
                ))

        # sorted() is stable, so ties keep corpus order
        results = sorted(results, key=lambda r: r.score, reverse=True)[:MAX_RESULTS]
        logger.debug(f"Search '{query}' matched {len(results)} entries")
        return tuple(results)

    def clear_cache(self):
        self._cached_search.cache_clear()
