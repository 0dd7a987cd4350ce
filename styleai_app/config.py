"""Configuration helpers for the StyleAI service."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
DEFAULT_FASHN_BASE_URL = "https://api.fashn.ai/v1"
DEFAULT_CATALOG_API_URL = "https://backend-879168005744.us-west1.run.app"


@dataclass
class AppConfig:
    """Configuration values for the StyleAI service.

    Secrets (Gemini and FASHN keys) are optional so the service can boot
    locally; the adapters that need them report a configuration error when
    they are called without a key.
    """

    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    fashn_api_key: Optional[str] = None
    fashn_base_url: str = DEFAULT_FASHN_BASE_URL
    catalog_api_url: str = DEFAULT_CATALOG_API_URL
    storage_path: str = "data/styleai_storage.json"
    catalog_path: str = "data/product-filters-map.json"
    request_timeout_seconds: float = 30.0
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables, which take precedence.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("STYLEAI_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        timeout = get_value("request_timeout_seconds", "30")
        try:
            timeout_seconds = float(timeout) if timeout else 30.0
        except ValueError as exc:
            raise ValueError(f"Invalid request_timeout_seconds value: {timeout!r}") from exc

        return cls(
            gemini_api_key=get_value("gemini_api_key"),
            gemini_model=str(get_value("gemini_model") or DEFAULT_GEMINI_MODEL),
            fashn_api_key=get_value("fashn_api_key"),
            fashn_base_url=str(get_value("fashn_base_url") or DEFAULT_FASHN_BASE_URL),
            catalog_api_url=str(get_value("catalog_api_url") or DEFAULT_CATALOG_API_URL),
            storage_path=str(get_value("storage_path") or "data/styleai_storage.json"),
            catalog_path=str(get_value("catalog_path") or "data/product-filters-map.json"),
            request_timeout_seconds=timeout_seconds,
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a flat ``key: value`` config file."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
