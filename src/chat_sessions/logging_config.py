import sys
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from loguru import logger

_CONSOLE_FORMAT = (
    "<level>{level:<8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>"
    " - <level>{message}</level>"
)
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} - {message}"


@runtime_checkable
class LogConsumer(Protocol):
    def register(self, level: str) -> None: ...
    def describe(self, level: str) -> str: ...


class ConsoleLogConsumer:
    def __init__(self, stream: str = "stderr"):
        if stream not in ("stderr", "stdout"):
            raise ValueError(f"Unsupported console stream: {stream!r}")
        self._stream = stream

    def register(self, level: str) -> None:
        sink = sys.stdout if self._stream == "stdout" else sys.stderr
        logger.add(sink, level=level, format=_CONSOLE_FORMAT)

    def describe(self, level: str) -> str:
        return f"console ({self._stream}, {level})"


class FileLogConsumer:
    """Rotating log file; ``serialize`` writes one JSON record per line."""

    def __init__(
        self,
        path: str = "chat.log",
        rotation: str = "10 MB",
        retention: int = 3,
        serialize: bool = False,
    ):
        self._path = path
        self._rotation = rotation
        self._retention = retention
        self._serialize = serialize

    def register(self, level: str) -> None:
        Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            self._path,
            level=level,
            format=_FILE_FORMAT,
            rotation=self._rotation,
            retention=self._retention,
            serialize=self._serialize,
        )

    def describe(self, level: str) -> str:
        kind = "jsonl" if self._serialize else "text"
        return f"file ({self._path}, {kind}, {level})"


_CONSUMER_TYPES: dict[str, type] = {
    "console": ConsoleLogConsumer,
    "file": FileLogConsumer,
}

_DEFAULT_CONSUMERS = [
    {"type": "file", "path": ".chat_sessions/chat.log"},
]


def setup_logging(
    level: str = "INFO",
    consumers: list[dict[str, Any]] | None = None,
) -> list[str]:
    """Replace all loguru sinks with the configured consumers.

    Returns a description of each registered consumer.
    """
    logger.remove()

    descriptions: list[str] = []
    for config in consumers if consumers is not None else _DEFAULT_CONSUMERS:
        sink_type = config.get("type", "")
        cls = _CONSUMER_TYPES.get(sink_type)
        if cls is None:
            logger.warning(f"Unknown log consumer type: {sink_type!r}")
            continue

        sink_level = config.get("level", level)
        consumer = cls(**{k: v for k, v in config.items() if k not in ("type", "level")})
        consumer.register(sink_level)
        descriptions.append(consumer.describe(sink_level))

    return descriptions
