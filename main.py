"""Entry point - launches the client or manages the saved session via CLI args.

Usage:
    python main.py                          # Matchmaking lobby on localhost:8080
    python main.py lobby host port          # Matchmaking lobby on a custom server
    python main.py game GAME_ID [host port] # Join a running game directly
    python main.py login NAME               # Create a mock wallet for NAME
    python main.py logout                   # Forget the saved wallet
"""

import sys
import asyncio

from shared.constants import DEFAULT_HOST, DEFAULT_PORT
from client.settings import load_session, create_session, clear_session


def _server_args(args: list[str]) -> tuple[str, int]:
    host = args[0] if len(args) > 0 else DEFAULT_HOST
    port = int(args[1]) if len(args) > 1 else DEFAULT_PORT
    return host, port


async def run_client(context, host: str, port: int, game_id: str = None):
    from client.app import App
    print(f"[main] {context.username or context.wallet} -> {host}:{port}")
    app = App(context, server_host=host, server_port=port)
    await app.run(game_id)


def main(argv: list[str]) -> int:
    command = argv[0] if argv else "lobby"

    if command == "login":
        if len(argv) < 2:
            print(__doc__)
            return 1
        context = create_session(argv[1])
        print(f"[main] Logged in as {context.username} (wallet {context.wallet})")
        return 0
    if command == "logout":
        clear_session()
        print("[main] Logged out")
        return 0
    if command not in ("lobby", "game"):
        print(__doc__)
        return 1

    context = load_session()
    if context is None:
        print("[main] No saved wallet. Run: python main.py login NAME")
        return 1

    if command == "game":
        if len(argv) < 2:
            print(__doc__)
            return 1
        host, port = _server_args(argv[2:])
        asyncio.run(run_client(context, host, port, game_id=argv[1]))
    else:
        host, port = _server_args(argv[1:])
        asyncio.run(run_client(context, host, port))
    return 0


def cli():
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
