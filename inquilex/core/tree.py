"""
Inquilex Document Tree
Immutable node model for rendered messages, with HTML parsing and serialization
"""

from dataclasses import dataclass, field
from html import escape
from typing import Dict, Iterator, Optional, Sequence, Union
import logging

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

logger = logging.getLogger(__name__)

# Transparent root produced by from_html; serialized as its children only
DOCUMENT_TAG = '#document'

VOID_TAGS = frozenset({
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input',
    'link', 'meta', 'source', 'track', 'wbr',
})

# Content is raw text: never escaped, never annotated
RAW_TEXT_TAGS = frozenset({'script', 'style'})

FULL_TEXT_LABEL = 'Ver texto completo'
SOURCE_LINK_LABEL = 'Buscar fonte'


@dataclass(frozen=True)
class Text:
    """A text leaf"""
    text: str


@dataclass(frozen=True)
class Annotation:
    """
    Tooltip payload attached to an interactive term wrapper

    It is not part of the text content of the tree.
    """
    key: str
    summary: str
    term_class: str
    full_text_key: Optional[str] = None
    source_url: Optional[str] = None


@dataclass(frozen=True)
class Element:
    """A structural element: tag name, attributes and ordered children"""
    tag: str
    children: Sequence['Node'] = ()
    attrs: Dict[str, str] = field(default_factory=dict)
    annotation: Optional[Annotation] = None

    @property
    def classes(self) -> Sequence[str]:
        value = self.attrs.get('class') if isinstance(self.attrs, dict) else None
        return value.split() if isinstance(value, str) else []


Node = Union[Text, Element]


def text_content(node: Node) -> str:
    """Concatenated text of all leaves under a node (annotations excluded)"""
    return ''.join(iter_text(node))


def iter_text(node: Node) -> Iterator[str]:
    if isinstance(node, Text):
        yield node.text
    elif isinstance(node, Element):
        for child in node.children:
            yield from iter_text(child)


def document(*children: Node) -> Element:
    """Build a transparent root element"""
    return Element(DOCUMENT_TAG, tuple(children))


def _convert(soup_node) -> Optional[Node]:
    # Comments, doctypes and CDATA carry no renderable text
    if isinstance(soup_node, PreformattedString):
        return None
    if isinstance(soup_node, NavigableString):
        return Text(str(soup_node))
    if isinstance(soup_node, Tag):
        attrs = {}
        for name, value in soup_node.attrs.items():
            # bs4 returns multi-valued attributes (class, rel) as lists
            attrs[name] = ' '.join(value) if isinstance(value, list) else value
        children = tuple(
            child for child in (_convert(c) for c in soup_node.children) if child is not None
        )
        return Element(soup_node.name, children, attrs)
    return None


def from_html(html: str) -> Element:
    """
    Parse sanitized markup into a tree

    Args:
        html: HTML fragment as produced by the host's markdown renderer

    Returns:
        Transparent document root holding the parsed nodes
    """
    soup = BeautifulSoup(html, 'html.parser')
    children = tuple(
        child for child in (_convert(c) for c in soup.children) if child is not None
    )
    return Element(DOCUMENT_TAG, children)


def _render_attrs(attrs: Dict[str, str]) -> str:
    return ''.join(f' {name}="{escape(str(value), quote=True)}"' for name, value in attrs.items())


def render_annotation(annotation: Annotation) -> str:
    """Tooltip markup for an annotation payload"""
    links = []
    if annotation.full_text_key is not None:
        links.append(
            f'<a href="#" class="legal-term__action" '
            f'data-article-key="{escape(annotation.full_text_key, quote=True)}">{FULL_TEXT_LABEL}</a>'
        )
    if annotation.source_url is not None:
        links.append(
            f'<a href="{escape(annotation.source_url, quote=True)}" class="legal-term__source" '
            f'target="_blank" rel="noopener noreferrer">{SOURCE_LINK_LABEL}</a>'
        )

    html = f'<span class="legal-term__tooltip" role="tooltip">{escape(annotation.summary, quote=False)}'
    if links:
        separator = '<span class="legal-term__separator">|</span>'
        html += f'<span class="legal-term__links">{separator.join(links)}</span>'
    return html + '</span>'


def to_html(node: Node) -> str:
    """Serialize a tree back to markup"""
    if isinstance(node, Text):
        return escape(node.text, quote=False)

    if not isinstance(node, Element):
        raise TypeError(f"Cannot render node of type {type(node).__name__}")

    if node.tag in RAW_TEXT_TAGS:
        inner = text_content(node)
    else:
        inner = ''.join(to_html(child) for child in node.children)
    if node.annotation is not None:
        inner += render_annotation(node.annotation)

    if node.tag == DOCUMENT_TAG:
        return inner
    if node.tag in VOID_TAGS and not inner:
        return f'<{node.tag}{_render_attrs(node.attrs)}/>'
    return f'<{node.tag}{_render_attrs(node.attrs)}>{inner}</{node.tag}>'
