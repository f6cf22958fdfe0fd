import json
import os
import shutil
import unittest
from pathlib import Path
from unittest.mock import patch
from uuid import uuid4

from chat_sessions.app_config import load_json_config, parse_app_config, resolve_runtime_env


PROJECT_ROOT = Path(__file__).resolve().parents[1]


class ParseAppConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        app = parse_app_config({})
        self.assertEqual("openai", app.provider_name)
        self.assertEqual("gpt-4o-mini", app.model)
        self.assertEqual(4000, app.max_tokens)
        self.assertEqual(0.3, app.temperature)
        self.assertEqual(100, app.summary_max_tokens)
        self.assertEqual(".chat_sessions/chat.db", app.db_path)
        self.assertEqual("INFO", app.log_level)
        self.assertIsNone(app.log_consumers)

    def test_explicit_values(self) -> None:
        app = parse_app_config({
            "Provider": " Anthropic ",
            "MaxTokens": "8000",
            "Temperature": "0.7",
            "DbPath": ":memory:",
            "LogConsumers": [{"type": "console"}],
        })
        self.assertEqual("anthropic", app.provider_name)
        self.assertEqual("claude-sonnet-4-5-20250929", app.model)
        self.assertEqual(8000, app.max_tokens)
        self.assertEqual(0.7, app.temperature)
        self.assertEqual(":memory:", app.db_path)
        self.assertEqual([{"type": "console"}], app.log_consumers)


class LoadJsonConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp_dir = PROJECT_ROOT / ".test-artifacts" / f"config-{uuid4().hex}"
        self._tmp_dir.mkdir(parents=True, exist_ok=True)

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp_dir, ignore_errors=True)

    def test_missing_file_gives_empty_dict(self) -> None:
        self.assertEqual({}, load_json_config(self._tmp_dir / "config.json"))

    def test_reads_file(self) -> None:
        path = self._tmp_dir / "config.json"
        path.write_text(json.dumps({"Model": "gpt-test"}))
        self.assertEqual({"Model": "gpt-test"}, load_json_config(path))


class ResolveRuntimeEnvTests(unittest.TestCase):
    def test_picks_key_for_provider(self) -> None:
        with patch.dict(os.environ, {"OPENAI_API_KEY": "o", "ANTHROPIC_API_KEY": "a"}):
            self.assertEqual(("o", "OPENAI_API_KEY"), tuple(vars(resolve_runtime_env("openai")).values()))
            self.assertEqual(("a", "ANTHROPIC_API_KEY"), tuple(vars(resolve_runtime_env("anthropic")).values()))

    def test_missing_key_is_empty(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual("", resolve_runtime_env("openai").provider_api_key)


if __name__ == "__main__":
    unittest.main()
