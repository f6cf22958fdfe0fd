from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from chat_sessions.app_config import AppConfig, RuntimeEnv
from chat_sessions.chat_service import ChatService
from chat_sessions.completion import create_completion_service
from chat_sessions.logging_config import setup_logging
from chat_sessions.storage import DocumentStore, SqliteChatStore


@dataclass
class AppRuntime:
    chat_service: ChatService
    document_store: DocumentStore
    log_descriptions: list[str]

    def close(self) -> None:
        self.document_store.close()


def bootstrap_runtime(app: AppConfig, env: RuntimeEnv) -> AppRuntime:
    log_descriptions = setup_logging(level=app.log_level, consumers=app.log_consumers)

    if not env.provider_api_key:
        raise ValueError(f"{env.provider_env_var} environment variable is required.")

    db_path = app.db_path
    if db_path != ":memory:" and not Path(db_path).is_absolute():
        db_path = str(Path.cwd() / db_path)
    document_store = DocumentStore(db_path)

    completion = create_completion_service(
        app.provider_name,
        env.provider_api_key,
        model=app.model,
        max_tokens=app.max_tokens,
        temperature=app.temperature,
        summary_max_tokens=app.summary_max_tokens,
    )
    logger.info(f"Completion provider: {app.provider_name} ({app.model}, max_tokens={app.max_tokens})")

    return AppRuntime(
        chat_service=ChatService(SqliteChatStore(document_store), completion),
        document_store=document_store,
        log_descriptions=log_descriptions,
    )
