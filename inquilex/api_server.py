#!/usr/bin/env python3
"""
Inquilex REST API Server
HTTP endpoints the chat front end calls for live search, message annotation
and full-text article lookup
"""

import logging
from typing import Optional

from flask import Flask, request, jsonify
from flask_cors import CORS

from inquilex.core.config import InquilexConfig, default_config
from inquilex.core.engine import LegalTermEngine, get_default_engine

logger = logging.getLogger(__name__)

app = Flask(__name__)
cors = CORS()

# Global components (initialized once)
engine: Optional[LegalTermEngine] = None
max_html_chars = default_config.api.max_html_chars
cors_origins: Optional[str] = None


def initialize_components(custom_engine: Optional[LegalTermEngine] = None,
                          config: Optional[InquilexConfig] = None) -> bool:
    """
    Initialize the engine shared by all requests

    Must run before the first request: CORS is bound to the app here, once.
    """
    global engine, max_html_chars, cors_origins

    config = config or default_config
    max_html_chars = config.api.max_html_chars

    if cors_origins is None:
        cors.init_app(app, origins=config.api.cors_origins)  # Enable CORS for the chat front end
        cors_origins = config.api.cors_origins
    elif cors_origins != config.api.cors_origins:
        logger.warning(f"CORS already bound to {cors_origins}, ignoring {config.api.cors_origins}")

    try:
        if custom_engine is not None:
            engine = custom_engine
        elif config is default_config:
            engine = get_default_engine()
        else:
            engine = LegalTermEngine(config=config.engine)
        logger.info("Inquilex API server ready")
        return True
    except Exception as e:
        logger.error(f"Failed to initialize Inquilex: {e}")
        return False


def _get_engine() -> LegalTermEngine:
    global engine
    if engine is None:
        engine = get_default_engine()
    return engine


@app.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    return jsonify({"status": "healthy", "message": "Inquilex API is running"})


@app.route('/api/search', methods=['GET'])
def search():
    """Live search over legal terms and articles"""
    query_text = request.args.get('q', '')

    try:
        results = _get_engine().search(query_text)
        return jsonify({
            "query": query_text,
            "results": [result.to_dict() for result in results]
        })
    except Exception as e:
        logger.exception(f"Search error: {e}")
        return jsonify({"query": query_text, "results": [], "error": str(e)}), 500


@app.route('/api/annotate', methods=['POST'])
def annotate():
    """Annotate one rendered assistant message"""
    data = request.get_json(silent=True) or {}
    html = data.get('html')

    if not isinstance(html, str):
        return jsonify({"error": "No html provided"}), 400

    if len(html) > max_html_chars:
        return jsonify({
            "error": f"Message exceeds {max_html_chars} characters"
        }), 413

    try:
        return jsonify({"html": _get_engine().annotate_html(html)})
    except Exception as e:
        logger.exception(f"Annotation error: {e}")
        # Unannotated markup is still readable
        return jsonify({"html": html, "error": str(e)}), 500


@app.route('/api/articles/<path:key>', methods=['GET'])
def get_article(key):
    """Full text behind a "view full text" action"""
    article = _get_engine().get_article(key)
    if article is None:
        return jsonify({"error": f"Unknown article: {key}"}), 404
    return jsonify(article.to_dict())


@app.route('/api/terms', methods=['GET'])
def list_terms():
    """List corpus entries"""
    corpus = _get_engine().corpus
    return jsonify({
        "terms": [
            {"key": record.key, "class": record.term_class, "summary": record.summary}
            for record in corpus.values()
        ]
    })


@app.route('/api/stats', methods=['GET'])
def get_stats():
    """Get corpus statistics"""
    return jsonify(_get_engine().get_stats())


def run_server(custom_engine: Optional[LegalTermEngine] = None,
               config: Optional[InquilexConfig] = None,
               host: Optional[str] = None,
               port: Optional[int] = None):
    """Start the development server"""
    config = config or default_config

    if not initialize_components(custom_engine, config):
        logger.error("Failed to start Inquilex API server")
        return

    host = host or config.api.host
    port = port or config.api.port
    logger.info(f"Starting Flask server on http://{host}:{port}")
    app.run(host=host, port=port, debug=config.api.debug)


if __name__ == '__main__':
    logging.basicConfig(level=default_config.log_level)
    run_server()
