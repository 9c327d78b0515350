"""
Inquilex Engine
Host-facing facade over the corpus, ranker and annotator
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional
import logging

from .annotator import Annotator, MatchSpan, find_spans
from .config import EngineConfig, default_config
from .corpus import Corpus, display_title, load_corpus, normalize_key
from .patterns import compile_pattern
from .search import SearchResult, TermSearcher
from .tree import Node, from_html, to_html

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArticleView:
    """What the host shows when a "view full text" action is activated"""
    key: str
    title: str
    body: str

    def to_dict(self) -> Dict[str, str]:
        return {'key': self.key, 'title': self.title, 'body': self.body}


class LegalTermEngine:
    """
    Legal term recognition and search

    All state is built once in the constructor and only read afterwards, so
    one engine can serve concurrent callers.
    """

    def __init__(self, corpus: Optional[Corpus] = None, config: Optional[EngineConfig] = None):
        """
        Initialize the engine

        Args:
            corpus: Corpus to use; loaded from config (or the embedded asset) when omitted
            config: Engine configuration
        """
        self.config = config or EngineConfig()
        self.corpus = corpus if corpus is not None else load_corpus(self.config.corpus_path)
        self.pattern = compile_pattern(self.corpus)

        self.searcher = TermSearcher(
            self.corpus,
            max_query_chars=self.config.max_query_chars,
            cache_size=self.config.search_cache_size,
        )
        self.annotator = Annotator(
            self.corpus,
            self.pattern,
            max_annotation_chars=self.config.max_annotation_chars,
            search_url_template=self.config.search_url_template,
            source_query_prefix=self.config.source_query_prefix,
        )

        logger.info(f"Legal term engine ready with {len(self.corpus)} corpus entries")

    def search(self, query: str) -> List[SearchResult]:
        """Ranked corpus entries for a live search query"""
        return self.searcher.search(query)

    def annotate(self, tree: Node) -> Node:
        """Annotate one rendered message tree"""
        return self.annotator.annotate(tree)

    def annotate_html(self, html: str) -> str:
        """
        Annotate sanitized message markup

        Args:
            html: Rendered and sanitized HTML of one assistant message

        Returns:
            Markup with recognized terms wrapped; the input unchanged if it
            cannot be processed
        """
        try:
            tree = from_html(html)
        except Exception as e:
            logger.warning(f"Could not parse message markup, returning it unannotated: {e}")
            return html
        return to_html(self.annotate(tree))

    def extract_terms(self, text: str) -> List[MatchSpan]:
        """
        Recognized terms in a plain string, first occurrence of each key

        Args:
            text: Input text

        Returns:
            List of MatchSpan objects in order of first appearance
        """
        found = []
        seen = set()
        for span in find_spans(text, self.pattern, self.corpus):
            if span.normalized_key in seen:
                continue
            seen.add(span.normalized_key)
            found.append(span)
        return found

    def get_article(self, key: str) -> Optional[ArticleView]:
        """
        Resolve a "view full text" action key back into the corpus

        Glossary entries resolve to their summary; unknown keys to None.
        """
        normalized = normalize_key(key)
        record = self.corpus.get(normalized)
        if record is None:
            logger.debug(f"No corpus entry for article key '{key}'")
            return None

        body = record.full_text if record.is_citation else record.summary
        return ArticleView(key=record.key, title=display_title(record.key), body=body)

    def get_stats(self) -> Dict[str, int]:
        return self.corpus.get_stats()


@lru_cache(maxsize=1)
def get_default_engine() -> LegalTermEngine:
    """Process-wide engine built from the default configuration"""
    return LegalTermEngine(config=default_config.engine)
