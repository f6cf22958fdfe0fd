from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

_DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-sonnet-4-5-20250929",
}


@dataclass
class RuntimeEnv:
    provider_api_key: str
    provider_env_var: str


@dataclass
class AppConfig:
    provider_name: str
    model: str
    max_tokens: int
    temperature: float
    summary_max_tokens: int
    db_path: str
    log_level: str
    log_consumers: list | None


def load_json_config(config_path: Path | None = None) -> dict:
    config_path = config_path or Path.cwd() / "config.json"
    if config_path.exists():
        with open(config_path) as f:
            return json.load(f)
    return {}


def parse_app_config(config: dict) -> AppConfig:
    provider_name = str(config.get("Provider", "openai")).strip().lower()
    return AppConfig(
        provider_name=provider_name,
        model=config.get("Model") or _DEFAULT_MODELS.get(provider_name, _DEFAULT_MODELS["openai"]),
        max_tokens=int(config.get("MaxTokens", 4000)),
        temperature=float(config.get("Temperature", 0.3)),
        summary_max_tokens=int(config.get("SummaryMaxTokens", 100)),
        db_path=str(config.get("DbPath", ".chat_sessions/chat.db")),
        log_level=config.get("LogLevel", "INFO"),
        log_consumers=config.get("LogConsumers"),
    )


def resolve_runtime_env(provider_name: str) -> RuntimeEnv:
    if provider_name == "anthropic":
        provider_env_var = "ANTHROPIC_API_KEY"
    else:
        provider_env_var = "OPENAI_API_KEY"

    return RuntimeEnv(
        provider_api_key=os.environ.get(provider_env_var, ""),
        provider_env_var=provider_env_var,
    )
