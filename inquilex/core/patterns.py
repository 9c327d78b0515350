"""
Inquilex Pattern Compiler
Builds the single regex used to recognize legal terms and statute citations
"""

import re
from functools import lru_cache
from typing import Iterable, List, Optional, Pattern, Tuple
import logging

logger = logging.getLogger(__name__)

# Contract-law jargon recognized in responses even though it has no corpus entry
AUXILIARY_TERMS = (
    'Lei do Inquilinato', 'sublocação', 'revisional de aluguel', 'ação de despejo',
    'contrato de locação', 'notificação premonitória', 'jurisprudência', 'aditivo contratual',
    'rescisão de contrato', 'multa contratual', 'garantia locatícia', 'seguro-fiança',
    'purgação da mora', 'liminar de despejo', 'alienação do imóvel', 'prazo determinado',
    'prazo indeterminado', 'reajuste do aluguel', 'índice de reajuste', 'obrigações do locador',
    'obrigações do locatário', 'vistoria', 'cláusula penal', 'renovatória de aluguel',
    'imóvel residencial', 'imóvel não residencial', 'locação por temporada',
)

# "Art. 23", "Artigo 5º", "arts. 46", "art.4°"
CITATION_PATTERN = r'\b(?:Art\.|Artigo|arts\.)\s*\d+[º°]?'


def vocabulary_terms(keys: Iterable[str], auxiliary_terms: Iterable[str] = AUXILIARY_TERMS) -> List[str]:
    """
    Collect the vocabulary alternatives of the pattern

    Terms are de-duplicated case-insensitively and sorted longest first so
    longer phrases win over their prefixes at the same position.
    """
    unique_terms = {}
    for term in list(keys) + list(auxiliary_terms):
        term = term.strip()
        # Skip empty terms
        if not term:
            continue
        unique_terms.setdefault(term.lower(), term)

    return sorted(unique_terms.values(), key=lambda t: (-len(t), t.lower()))


@lru_cache(maxsize=16)
def _compile_alternation(terms: Tuple[str, ...]) -> Pattern:
    """Compile the alternation for an already-sorted term tuple"""
    pattern_parts = [CITATION_PATTERN]

    if terms:
        escaped = '|'.join(re.escape(term) for term in terms)
        # Lookarounds instead of \b so terms ending in punctuation still anchor
        pattern_parts.append(f'(?<!\\w)(?:{escaped})(?!\\w)')

    return re.compile('|'.join(pattern_parts), re.IGNORECASE)


def compile_pattern(corpus, auxiliary_terms: Optional[Iterable[str]] = None) -> Pattern:
    """
    Build the recognition pattern

    Args:
        corpus: Corpus (or any iterable of canonical keys)
        auxiliary_terms: Extra vocabulary; defaults to AUXILIARY_TERMS

    Returns:
        Case-insensitive compiled pattern. An empty corpus still yields a
        pattern that matches citations.
    """
    if auxiliary_terms is None:
        auxiliary_terms = AUXILIARY_TERMS

    terms = tuple(vocabulary_terms(corpus, auxiliary_terms))
    pattern = _compile_alternation(terms)

    logger.debug(f"Compiled recognition pattern with {len(terms)} vocabulary terms")
    return pattern
