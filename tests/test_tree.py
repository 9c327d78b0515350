"""Tests for the document tree model and HTML conversion"""

import pytest

from inquilex.core.tree import (
    DOCUMENT_TAG,
    Annotation,
    Element,
    Text,
    document,
    from_html,
    render_annotation,
    text_content,
    to_html,
)


def test_from_html_structure():
    tree = from_html('<p>Olá <strong class="x y">mundo</strong></p>')

    assert tree.tag == DOCUMENT_TAG
    (paragraph,) = tree.children
    assert paragraph.tag == "p"
    assert paragraph.children[0] == Text("Olá ")
    assert paragraph.children[1] == Element("strong", (Text("mundo"),), {"class": "x y"})


def test_comments_are_dropped():
    tree = from_html("<p>a<!-- nota -->b</p>")
    assert text_content(tree) == "ab"


@pytest.mark.parametrize("html", [
    "<p>texto simples</p>",
    '<p>a &amp; b &lt; c</p><ul><li>um</li><li>dois</li></ul>',
    '<p>linha<br/>outra</p>',
    '<pre><code class="language-text">Art. 23 - texto</code></pre>',
    '<p><a href="https://exemplo.com/?a=1&amp;b=2">link</a></p>',
])
def test_html_round_trip(html):
    assert to_html(from_html(html)) == html


def test_text_content_ignores_annotations():
    annotation = Annotation(key="fiador", summary="garante", term_class="glossary")
    wrapper = Element("span", (Text("fiador"),), {"class": "legal-term"}, annotation=annotation)
    assert text_content(document(Text("o "), wrapper)) == "o fiador"


def test_render_glossary_annotation():
    html = render_annotation(Annotation(key="fiador", summary="garante <pessoal>", term_class="glossary"))
    assert html == '<span class="legal-term__tooltip" role="tooltip">garante &lt;pessoal&gt;</span>'


def test_render_citation_annotation():
    html = render_annotation(Annotation(
        key="art. 23",
        summary="obrigações",
        term_class="citation",
        full_text_key="art. 23",
        source_url="https://www.google.com/search?q=Lei%20do%20Inquilinato%20Artigo%2023",
    ))

    assert 'data-article-key="art. 23">Ver texto completo</a>' in html
    assert 'target="_blank" rel="noopener noreferrer">Buscar fonte</a>' in html
    assert '<span class="legal-term__separator">|</span>' in html


def test_to_html_renders_annotation_after_children():
    annotation = Annotation(key="fiador", summary="garante", term_class="glossary")
    wrapper = Element("span", (Element("strong", (Text("Fiador"),)),), {"class": "legal-term"}, annotation)

    assert to_html(wrapper) == (
        '<span class="legal-term"><strong>Fiador</strong>'
        '<span class="legal-term__tooltip" role="tooltip">garante</span></span>'
    )


def test_to_html_rejects_unknown_nodes():
    with pytest.raises(TypeError):
        to_html(Element("p", (42,)))


@pytest.mark.parametrize("html", [
    "<style>p > a { color: red }</style>",
    '<script>if (a < b && c > d) { x = "<p>"; }</script>',
])
def test_raw_text_round_trip(html):
    assert to_html(from_html(html)) == html


@pytest.mark.parametrize("attrs", [None, ["x"], {"class": 3}])
def test_classes_tolerates_odd_attrs(attrs):
    assert Element("p", (), attrs).classes == []
