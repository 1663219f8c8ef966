from __future__ import annotations

import asyncio
import logging

from client.config import CLIENT_CONFIG, load_config
from client.core import ConnectionManager, IdentityState
from client.features import MessageDispatcher, UploadCoordinator
from client.ui import ChatCLI, ConsoleRenderer


async def run_client() -> None:
    load_config()
    logging.basicConfig(level=CLIENT_CONFIG["log_level"])
    renderer = ConsoleRenderer()
    identity = IdentityState()
    dispatcher = MessageDispatcher(identity, renderer)
    uploads = UploadCoordinator(renderer)
    uploads.progress.add_listener(renderer.show_upload_progress)

    connection = ConnectionManager()
    connection.add_state_listener(renderer.show_connection_state)
    connection.add_message_handler(dispatcher.handle_payload)

    cli = ChatCLI(connection, uploads, renderer)
    try:
        await cli.run()
    finally:
        await cli.shutdown()


def main() -> None:
    asyncio.run(run_client())


if __name__ == "__main__":
    main()
