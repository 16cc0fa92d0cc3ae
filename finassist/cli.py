"""Command line entry point.

Usage:
    # List the catalog, or one domain of it
    finassist functions --domain budget

    # Run one function against a snapshot file
    finassist dispatch getTopCategories '{"type": "expense", "topN": 5}' --data snapshot.json

    # Chat against the in-process app, or a running server
    finassist chat --data snapshot.json [--server http://localhost:8000]

    # Serve the API
    finassist serve --port 8000
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

import httpx

from finassist.assistant import catalog
from finassist.assistant.client import AssistantClient
from finassist.data.store import LocalStore
from finassist.dispatch import DispatchEngine
from finassist.errors import AssistantError, UnknownFunctionError


def load_store(path: str) -> LocalStore:
    """Load a LocalStore from a JSON snapshot; a missing file starts empty."""
    snapshot_path = Path(path)
    if not snapshot_path.exists():
        return LocalStore()
    return LocalStore.from_snapshot(json.loads(snapshot_path.read_text(encoding="utf-8")))


def save_store(store: LocalStore, path: str) -> None:
    Path(path).write_text(json.dumps(store.snapshot(), indent=2), encoding="utf-8")


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


# ============================================================================
# COMMANDS
# ============================================================================

def cmd_functions(args: argparse.Namespace) -> int:
    functions = catalog.by_domain(args.domain) if args.domain else catalog.all_functions()
    _print_json([f.model_dump() for f in functions])
    return 0


async def cmd_dispatch(args: argparse.Namespace) -> int:
    try:
        arguments = json.loads(args.arguments) if args.arguments else {}
    except json.JSONDecodeError as e:
        print(f"Invalid JSON arguments: {e}", file=sys.stderr)
        return 2

    store = load_store(args.data)
    engine = DispatchEngine(store)
    try:
        result = await engine.execute(args.name, arguments)
    except UnknownFunctionError as e:
        print(e.message, file=sys.stderr)
        return 2

    _print_json(result.to_wire())
    if args.save and result.success:
        save_store(store, args.data)
    return 0 if result.success else 1


async def cmd_chat(args: argparse.Namespace) -> int:
    store = load_store(args.data)
    engine = DispatchEngine(store)

    if args.server:
        http = httpx.AsyncClient(base_url=args.server, timeout=120)
    else:
        from finassist.main import app
        http = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://finassist", timeout=120)

    async with http:
        client = AssistantClient(http, engine)
        print("Ask about your finances. Empty line or Ctrl-D to quit.")
        while True:
            try:
                prompt = input("you> ").strip()
            except EOFError:
                break
            if not prompt:
                break
            try:
                answer = await client.ask(prompt)
            except AssistantError as e:
                print(f"error> {e.message}")
                continue
            print(f"assistant> {answer}")

    if args.save:
        save_store(store, args.data)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("finassist.main:app", host=args.host, port=args.port)
    return 0


# ============================================================================
# PARSER
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="finassist", description="Finance tracker assistant")
    sub = parser.add_subparsers(dest="command", required=True)

    functions = sub.add_parser("functions", help="Print the function catalog as JSON")
    functions.add_argument("--domain", choices=catalog.DOMAINS)

    dispatch = sub.add_parser("dispatch", help="Run one catalog function locally")
    dispatch.add_argument("name")
    dispatch.add_argument("arguments", nargs="?", help="JSON object of arguments")
    dispatch.add_argument("--data", required=True, help="Snapshot JSON file")
    dispatch.add_argument("--save", action="store_true", help="Write mutations back to the snapshot")

    chat = sub.add_parser("chat", help="Interactive chat")
    chat.add_argument("--data", required=True, help="Snapshot JSON file")
    chat.add_argument("--server", help="Base URL of a running API; in-process app if omitted")
    chat.add_argument("--save", action="store_true", help="Write mutations back to the snapshot on exit")

    serve = sub.add_parser("serve", help="Run the API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "functions":
        return cmd_functions(args)
    if args.command == "dispatch":
        return asyncio.run(cmd_dispatch(args))
    if args.command == "chat":
        return asyncio.run(cmd_chat(args))
    return cmd_serve(args)


if __name__ == "__main__":
    sys.exit(main())
