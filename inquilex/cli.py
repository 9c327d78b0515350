#!/usr/bin/env python3
"""
Inquilex CLI Interface
Command-line access to legal term search, annotation and statute lookup
"""

import sys
import json
import logging
import argparse
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from inquilex.core.config import InquilexConfig, default_config
from inquilex.core.corpus import load_corpus
from inquilex.core.engine import LegalTermEngine
from inquilex.core.errors import InquilexError

console = Console()
logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class InquilexCLI:
    """Command-line interface for the legal term engine"""

    def __init__(self, engine: LegalTermEngine):
        self.engine = engine

    def search(self, query: str, as_json: bool = False):
        """Print ranked search results"""
        results = self.engine.search(query)

        if as_json:
            print(json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=2))
            return results

        if not results:
            console.print("Nenhum resultado encontrado.", style="yellow")
            return results

        table = Table(title=f"Resultados para '{query}'")
        table.add_column("Termo", style="cyan")
        table.add_column("Score", style="green", justify="right")
        table.add_column("Resumo", style="white", overflow="fold")

        for result in results:
            table.add_row(result.display_title, f"{result.score:.2f}", result.content_preview)

        console.print(table)
        return results

    def annotate(self, source: str) -> str:
        """Annotate HTML read from a file path, or stdin when source is '-'"""
        if source == "-":
            html = sys.stdin.read()
        else:
            html = Path(source).read_text(encoding="utf-8")

        annotated = self.engine.annotate_html(html)
        sys.stdout.write(annotated)
        if not annotated.endswith("\n"):
            sys.stdout.write("\n")
        return annotated

    def show_article(self, key: str, as_json: bool = False):
        """Display the full text behind a corpus key"""
        article = self.engine.get_article(key)

        if article is None:
            console.print(f"❌ Termo não encontrado: {key}", style="red", markup=False)
            return None

        if as_json:
            print(json.dumps(article.to_dict(), ensure_ascii=False, indent=2))
        else:
            console.print(Panel(Text(article.body), title=article.title, border_style="cyan"))
        return article

    def list_terms(self, as_json: bool = False):
        """List every corpus entry"""
        records = [self.engine.corpus[key] for key in self.engine.corpus]

        if as_json:
            print(json.dumps(
                [{"key": r.key, "class": r.term_class, "summary": r.summary} for r in records],
                ensure_ascii=False, indent=2,
            ))
            return records

        table = Table(title="📚 Corpus")
        table.add_column("Chave", style="cyan")
        table.add_column("Tipo", style="yellow")
        table.add_column("Resumo", overflow="fold")

        for record in records:
            table.add_row(record.key, record.term_class, record.summary)

        console.print(table)
        stats = self.engine.get_stats()
        console.print(f"[dim]{stats['total_terms']} termos, {stats['citations']} artigos[/dim]")
        return records

    def interactive_mode(self):
        """Run interactive search mode"""
        console.print(Panel(
            "[bold cyan]Inquilex Interactive Mode[/bold cyan]\n"
            "Type a search query, or use commands:\n"
            "  /article <key> - Show the full text of an article\n"
            "  /terms - List corpus entries\n"
            "  /exit - Exit",
            title="⚖️ Lei do Inquilinato",
            border_style="cyan"
        ))

        while True:
            try:
                line = console.input("\n[bold cyan]Busca:[/bold cyan] ")
            except (KeyboardInterrupt, EOFError):
                console.print("\n👋 Até logo!", style="yellow")
                break

            if line.startswith("/"):
                if not self._handle_command(line):
                    break
            elif line.strip():
                self.search(line)

    def _handle_command(self, command: str) -> bool:
        """Handle special commands; returns False when the session should end"""
        parts = command.split(maxsplit=1)
        cmd = parts[0].lower()

        if cmd == "/exit":
            console.print("👋 Até logo!", style="yellow")
            return False
        elif cmd == "/article" and len(parts) > 1:
            self.show_article(parts[1])
        elif cmd == "/terms":
            self.list_terms()
        else:
            console.print(f"Unknown command: {cmd}", style="red", markup=False)
        return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inquilex",
        description="Inquilex - Legal term search and annotation for the Lei do Inquilinato",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive search
  inquilex

  # Fuzzy search
  inquilex --search "despejo"

  # Annotate rendered message markup
  inquilex --annotate message.html
  cat message.html | inquilex --annotate -

  # Full text of an article
  inquilex --article "art. 23"

  # HTTP API
  inquilex --serve --port 8000
        """
    )

    parser.add_argument("--search", "-s", help="Search legal terms and articles")
    parser.add_argument("--annotate", "-a", metavar="FILE",
                        help="Annotate an HTML file ('-' reads stdin)")
    parser.add_argument("--article", help="Show the full text behind a corpus key")
    parser.add_argument("--terms", action="store_true", help="List corpus entries")
    parser.add_argument("--serve", action="store_true", help="Start the HTTP API server")
    parser.add_argument("--host", help="API server host")
    parser.add_argument("--port", type=int, help="API server port")
    parser.add_argument("--json", action="store_true", help="Print machine-readable JSON")
    parser.add_argument("--config", "-c", help="YAML configuration file")
    parser.add_argument("--corpus", help="Alternative corpus file (YAML or JSON)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = InquilexConfig.load_from_file(args.config) if args.config else default_config
        engine_config = config.engine
        if args.corpus:
            engine_config = replace(engine_config, corpus_path=args.corpus)

        setup_logging("DEBUG" if args.verbose else config.log_level)

        corpus = load_corpus(engine_config.corpus_path)
        engine = LegalTermEngine(corpus=corpus, config=engine_config)
    except InquilexError as e:
        console.print(f"❌ {e}", style="red", markup=False)
        return 1

    if args.serve:
        from inquilex.api_server import run_server
        run_server(engine, config,
                   host=args.host or config.api.host,
                   port=args.port or config.api.port)
        return 0

    cli = InquilexCLI(engine)

    if args.search is not None:
        cli.search(args.search, as_json=args.json)
    elif args.annotate:
        try:
            cli.annotate(args.annotate)
        except (OSError, UnicodeDecodeError) as e:
            console.print(f"❌ Could not read {args.annotate}: {e}", style="red", markup=False)
            return 1
    elif args.article:
        if cli.show_article(args.article, as_json=args.json) is None:
            return 1
    elif args.terms:
        cli.list_terms(as_json=args.json)
    else:
        cli.interactive_mode()

    return 0


if __name__ == "__main__":
    sys.exit(main())
