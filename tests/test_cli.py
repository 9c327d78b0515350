"""Tests for the command-line interface"""

import json

import pytest

from inquilex.cli import build_parser, main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("INQUILEX_CORPUS_PATH", raising=False)


def test_parser_flags():
    args = build_parser().parse_args(["-s", "fiador", "--json"])
    assert args.search == "fiador"
    assert args.json is True
    assert args.annotate is None


def test_search_json(capsys):
    assert main(["--search", "despejo", "--json"]) == 0

    results = json.loads(capsys.readouterr().out)
    assert results[0]["key"] == "despejo"


def test_search_table(capsys):
    assert main(["--search", "xyzxyzxyz"]) == 0
    assert "Nenhum resultado" in capsys.readouterr().out


def test_article_json(capsys):
    assert main(["--article", "Artigo 23", "--json"]) == 0

    article = json.loads(capsys.readouterr().out)
    assert article["key"] == "art. 23"
    assert article["title"] == "ARTIGO 23"


def test_unknown_article():
    assert main(["--article", "art. 999"]) == 1


def test_annotate_file(tmp_path, capsys):
    source = tmp_path / "message.html"
    source.write_text("<p>Art. 46 e o locador</p>", encoding="utf-8")

    assert main(["--annotate", str(source)]) == 0

    out = capsys.readouterr().out
    assert 'data-term-key="art. 46"' in out
    assert 'data-term-key="locador"' in out


def test_annotate_missing_file(tmp_path):
    assert main(["--annotate", str(tmp_path / "missing.html")]) == 1


def test_custom_corpus_terms(tmp_path, capsys):
    corpus_file = tmp_path / "corpus.json"
    corpus_file.write_text(json.dumps({
        "vistoria": "Inspeção do imóvel.",
        "Art. 8º": {"summary": "Alienação do imóvel.", "fullText": "Se o imóvel for alienado..."},
    }), encoding="utf-8")

    assert main(["--corpus", str(corpus_file), "--terms", "--json"]) == 0

    terms = json.loads(capsys.readouterr().out)
    assert terms == [
        {"key": "vistoria", "class": "glossary", "summary": "Inspeção do imóvel."},
        {"key": "art. 8", "class": "citation", "summary": "Alienação do imóvel."},
    ]


def test_missing_corpus(tmp_path):
    assert main(["--corpus", str(tmp_path / "missing.yaml"), "--terms"]) == 1


def test_annotate_undecodable_file(tmp_path):
    source = tmp_path / "message.html"
    source.write_bytes(b"<p>o locador \xff\xfe</p>")

    assert main(["--annotate", str(source)]) == 1
