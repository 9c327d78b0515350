"""
Inquilex Annotator
Wraps recognized legal terms and citations in rendered messages with tooltips
"""

import dataclasses
from dataclasses import dataclass
from typing import List, Optional, Pattern
from urllib.parse import quote
import logging

from .corpus import Corpus, DefinitionRecord, humanize_key, normalize_key
from .tree import RAW_TEXT_TAGS, Annotation, Element, Node, Text, document

logger = logging.getLogger(__name__)

# Text directly inside these elements is already emphasized or interactive
EXEMPT_TAGS = frozenset({'a', 'code', 'pre', 'strong', 'b', 'i', 'em'})

ANNOTATION_CLASS = 'legal-term'
LABEL_CLASS = 'legal-term__label'
UNKNOWN_CLASS = 'legal-term-unknown'

SEARCH_URL_TEMPLATE = 'https://www.google.com/search?q={query}'
SOURCE_QUERY_PREFIX = 'Lei do Inquilinato'

DEFAULT_MAX_ANNOTATION_CHARS = 20000


@dataclass(frozen=True)
class MatchSpan:
    """A recognized occurrence of a term inside one text leaf"""
    start: int
    end: int
    matched_text: str
    normalized_key: str
    record: Optional[DefinitionRecord] = None

    @property
    def is_known(self) -> bool:
        return self.record is not None


def find_spans(text: str, pattern: Pattern, corpus: Corpus) -> List[MatchSpan]:
    """
    Locate and classify all matches in a string

    Args:
        text: Raw text of one leaf
        pattern: Compiled recognition pattern
        corpus: Corpus used to classify matches

    Returns:
        Non-overlapping spans in left-to-right order
    """
    spans = []
    for match in pattern.finditer(text):
        if match.start() == match.end():
            continue
        matched_text = match.group(0)
        key = normalize_key(matched_text)
        spans.append(MatchSpan(
            start=match.start(),
            end=match.end(),
            matched_text=matched_text,
            normalized_key=key,
            record=corpus.get(key),
        ))
    return spans


class _CycleError(Exception):
    pass


class Annotator:
    """
    Rewrites document trees, annotating recognized terms in text leaves

    The input tree is never modified; unchanged subtrees are shared with the
    output.
    """

    def __init__(self,
                 corpus: Corpus,
                 pattern: Pattern,
                 max_annotation_chars: int = DEFAULT_MAX_ANNOTATION_CHARS,
                 search_url_template: str = SEARCH_URL_TEMPLATE,
                 source_query_prefix: str = SOURCE_QUERY_PREFIX):
        self.corpus = corpus
        self.pattern = pattern
        self.max_annotation_chars = max_annotation_chars
        self.search_url_template = search_url_template
        self.source_query_prefix = source_query_prefix

    def annotate(self, tree: Node) -> Node:
        """
        Annotate a document tree

        Never raises: on any failure the affected part of the tree is returned
        unchanged and a warning is logged.
        """
        try:
            nodes = self._rewrite(tree, parent_tag=None, path=set())
        except RecursionError:
            logger.warning("Document tree too deep to annotate, leaving it unchanged")
            return tree
        except Exception as e:
            logger.warning(f"Malformed document tree, leaving it unchanged: {e}")
            return tree

        if len(nodes) == 1:
            return nodes[0]
        # A bare text leaf that expanded into several nodes
        return document(*nodes)

    def annotate_text(self, text: str) -> List[Node]:
        """Annotate a plain string, returning the replacement nodes"""
        return self._rewrite_leaf(Text(text))

    def source_url(self, key: str) -> str:
        """External search link for a citation"""
        query = f"{self.source_query_prefix} {humanize_key(key)}"
        return self.search_url_template.format(query=quote(query, safe=''))

    def _rewrite(self, node: Node, parent_tag: Optional[str], path: set) -> List[Node]:
        if isinstance(node, Text):
            if parent_tag in EXEMPT_TAGS or parent_tag in RAW_TEXT_TAGS:
                return [node]
            return self._rewrite_leaf(node)

        if isinstance(node, Element):
            return [self._rewrite_element(node, path)]

        logger.warning(f"Skipping unsupported node type {type(node).__name__}")
        return [node]

    def _rewrite_element(self, element: Element, path: set) -> Element:
        if element.annotation is not None or ANNOTATION_CLASS in element.classes:
            return element

        if id(element) in path:
            logger.warning(f"Cyclic reference under <{element.tag}>, leaving subtree unchanged")
            raise _CycleError()

        path.add(id(element))
        try:
            new_children = []
            changed = False
            for child in element.children:
                try:
                    replacement = self._rewrite(child, element.tag, path)
                except _CycleError:
                    replacement = [child]
                except RecursionError:
                    raise
                except Exception as e:
                    logger.warning(f"Malformed subtree under <{element.tag}>, leaving it unchanged: {e}")
                    replacement = [child]
                if len(replacement) != 1 or replacement[0] is not child:
                    changed = True
                new_children.extend(replacement)
        finally:
            path.discard(id(element))

        if not changed:
            return element
        return dataclasses.replace(element, children=tuple(new_children))

    def _rewrite_leaf(self, leaf: Text) -> List[Node]:
        text = leaf.text
        if not isinstance(text, str):
            logger.warning(f"Skipping text leaf with non-string content {type(text).__name__}")
            return [leaf]

        if len(text) > self.max_annotation_chars:
            logger.debug(f"Text leaf of {len(text)} chars exceeds annotation limit, skipping")
            return [leaf]

        try:
            spans = find_spans(text, self.pattern, self.corpus)
        except Exception as e:
            logger.warning(f"Annotation failed for text leaf, leaving it unchanged: {e}")
            return [leaf]

        if not spans:
            return [leaf]

        nodes = []
        last_index = 0
        for span in spans:
            if span.start > last_index:
                nodes.append(Text(text[last_index:span.start]))
            nodes.append(self._wrap(span))
            last_index = span.end

        if last_index < len(text):
            nodes.append(Text(text[last_index:]))

        return nodes

    def _wrap(self, span: MatchSpan) -> Element:
        """Build the wrapper element for one match"""
        label = (Text(span.matched_text),)

        if not span.is_known:
            return Element('strong', label, {'class': UNKNOWN_CLASS})

        record = span.record
        if record.is_citation:
            annotation = Annotation(
                key=record.key,
                summary=record.summary,
                term_class=record.term_class,
                full_text_key=span.normalized_key,
                source_url=self.source_url(span.normalized_key),
            )
        else:
            annotation = Annotation(key=record.key, summary=record.summary, term_class=record.term_class)

        return Element(
            'span',
            (Element('strong', label, {'class': LABEL_CLASS}),),
            {
                'class': ANNOTATION_CLASS,
                'data-term-key': record.key,
                'data-term-class': record.term_class,
            },
            annotation=annotation,
        )


def annotate(tree: Node, pattern: Pattern, corpus: Corpus) -> Node:
    """Annotate a document tree with default limits"""
    return Annotator(corpus, pattern).annotate(tree)
