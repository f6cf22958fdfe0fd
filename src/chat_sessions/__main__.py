import asyncio
import sys

from dotenv import load_dotenv
from loguru import logger

from chat_sessions.app_config import load_json_config, parse_app_config, resolve_runtime_env
from chat_sessions.bootstrap import bootstrap_runtime
from chat_sessions.console import ChatConsole


async def main() -> None:
    load_dotenv()

    app = parse_app_config(load_json_config())
    env = resolve_runtime_env(app.provider_name)

    try:
        runtime = bootstrap_runtime(app, env)
    except ValueError as ex:
        logger.error(str(ex))
        print(ex, file=sys.stderr)
        sys.exit(1)

    console = ChatConsole(runtime.chat_service)

    try:
        await console.start()

        print("chat-sessions (type 'exit' to quit, '/help' for commands)")
        print(f"Provider: {app.provider_name} ({app.model})")
        print(f"Store: {runtime.document_store.db_path}")
        if runtime.log_descriptions:
            print(f"Logging: {', '.join(runtime.log_descriptions)}")
        print()

        while True:
            try:
                user_input = input("you> ")
            except (EOFError, KeyboardInterrupt):
                break

            trimmed = user_input.strip()

            if trimmed in ("exit", "quit"):
                break

            if not trimmed:
                continue

            try:
                await console.handle_input(trimmed)
                print()
            except Exception as ex:
                logger.exception(f"Unhandled error: {ex}")
                print(f"Error: {ex}", file=sys.stderr)
    finally:
        runtime.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
