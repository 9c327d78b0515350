from .corpus import Corpus, DefinitionRecord, load_corpus, normalize_key
from .patterns import compile_pattern
from .search import SearchResult, TermSearcher, levenshtein
from .annotator import Annotator, MatchSpan, annotate, find_spans
from .engine import ArticleView, LegalTermEngine, get_default_engine
