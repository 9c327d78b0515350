"""
Inquilex Central Configuration
Engine limits, corpus location, API server settings and logging
"""

from dataclasses import dataclass, asdict
from typing import Optional
import os

import yaml

from .errors import ConfigError


def _env_int(name: str) -> int:
    value = os.getenv(name)
    try:
        return int(value)
    except ValueError:
        raise ConfigError("environment", f"{name} must be an integer, got '{value}'") from None


@dataclass
class EngineConfig:
    """Configuration for search and annotation"""

    # Alternative corpus file (YAML or JSON); None uses the embedded asset
    corpus_path: Optional[str] = None

    # Work bounds
    max_query_chars: int = 200
    max_annotation_chars: int = 20000
    search_cache_size: int = 256

    # External "search source" link for citations
    search_url_template: str = "https://www.google.com/search?q={query}"
    source_query_prefix: str = "Lei do Inquilinato"


@dataclass
class APIConfig:
    """Configuration for the HTTP API server"""

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: str = "*"

    # Request limits
    max_html_chars: int = 200000


@dataclass
class InquilexConfig:
    """Main configuration class combining all settings"""

    engine: EngineConfig
    api: APIConfig

    # Logging
    log_level: str = "INFO"

    def __init__(self,
                 engine: Optional[EngineConfig] = None,
                 api: Optional[APIConfig] = None,
                 log_level: str = "INFO"):
        """Initialize with optional custom configurations"""
        self.engine = engine or EngineConfig()
        self.api = api or APIConfig()
        self.log_level = log_level

        # Override with environment variables if present
        self._load_env_overrides()

    def _load_env_overrides(self):
        """Load configuration overrides from environment variables"""
        if os.getenv("INQUILEX_CORPUS_PATH"):
            self.engine.corpus_path = os.getenv("INQUILEX_CORPUS_PATH")

        if os.getenv("INQUILEX_MAX_ANNOTATION_CHARS"):
            self.engine.max_annotation_chars = _env_int("INQUILEX_MAX_ANNOTATION_CHARS")

        if os.getenv("INQUILEX_HOST"):
            self.api.host = os.getenv("INQUILEX_HOST")

        if os.getenv("INQUILEX_PORT"):
            self.api.port = _env_int("INQUILEX_PORT")

        if os.getenv("INQUILEX_LOG_LEVEL"):
            self.log_level = os.getenv("INQUILEX_LOG_LEVEL").upper()

        # Debug override
        if os.getenv("INQUILEX_DEBUG", "").lower() in ("true", "1", "yes"):
            self.api.debug = True
            self.log_level = "DEBUG"

    @classmethod
    def load_from_file(cls, config_path: str) -> 'InquilexConfig':
        """Load configuration from YAML file"""
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}

            engine = EngineConfig(**config_data.get('engine', {}))
            api = APIConfig(**config_data.get('api', {}))
            config = cls(engine=engine, api=api, log_level=config_data.get('log_level', 'INFO'))

            # Environment still wins over the file
            config._load_env_overrides()
            return config

        except (OSError, TypeError, AttributeError, yaml.YAMLError) as e:
            raise ConfigError(config_path, str(e)) from e

    def save_to_file(self, config_path: str):
        """Save configuration to YAML file"""
        config_data = {
            'engine': asdict(self.engine),
            'api': asdict(self.api),
            'log_level': self.log_level,
        }

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f, default_flow_style=False, indent=2, allow_unicode=True)


# Default global configuration instance
default_config = InquilexConfig()
