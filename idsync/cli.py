"""
Command-line entry point.

    idsync check-username NAME
    idsync sync --session-id SESSION_ID
    idsync serve [--host HOST] [--port PORT] [--reload]
"""

import argparse
import asyncio
import sys
from typing import Optional

from idsync.shared.config import get_settings
from idsync.shared.logging import configure_logging, console
from idsync.modules.validation.models import ValidationPhase, ValidationState

_PHASE_STYLES = {
    ValidationPhase.IDLE: "dim",
    ValidationPhase.CHECKING: "yellow",
    ValidationPhase.VALID: "green",
    ValidationPhase.INVALID: "red",
}


def render_state(state: ValidationState) -> str:
    """Format a validation state as rich markup."""
    style = _PHASE_STYLES[state.phase]
    line = f"[{style}]{state.phase.value}[/{style}]"
    if state.message:
        line += f" {state.message}"
    if state.suggestions:
        line += f" [dim](try: {', '.join(state.suggestions)})[/dim]"
    return line


async def check_username(username: str) -> ValidationState:
    """Run one username through the live validator and wait for the verdict."""
    from idsync.modules.store.supabase_store import get_data_store
    from idsync.modules.validation.service import UsernameValidator

    store = await get_data_store()
    validator = UsernameValidator(store)
    validator.subscribe(lambda state: console.print(render_state(state)))
    validator.on_input_changed(username)
    try:
        return await validator.settle()
    finally:
        validator.close()


async def run_sync(session_id: str) -> int:
    """Sign a session in and keep its credential fresh until interrupted."""
    from idsync.modules.identity.client import get_identity_provider
    from idsync.modules.profiles.repository import ProfileRepository
    from idsync.modules.session.service import CredentialSynchronizer
    from idsync.modules.store.supabase_store import get_data_store

    settings = get_settings()
    provider = get_identity_provider()
    store = await get_data_store()
    try:
        identity = await provider.get_identity(session_id)
        if identity is None:
            console.print(f"[red]Error:[/red] No active session {session_id}")
            return 1

        synchronizer = CredentialSynchronizer(
            provider, store, ProfileRepository(store, settings.users_table)
        )
        async with synchronizer:
            await synchronizer.sign_in(identity)
            if not synchronizer.is_ready():
                console.print(f"[red]Error:[/red] Could not authorize {identity.subject_id}")
                return 1
            console.print(
                f"[green]Authorized[/green] {identity.subject_id}, "
                f"refreshing every {settings.credential_refresh_seconds:g}s. Ctrl+C to stop."
            )
            await asyncio.Event().wait()
    finally:
        await provider.aclose()
    return 0


def serve(host: Optional[str], port: Optional[int], reload: bool) -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "idsync.api:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload or settings.reload,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="idsync",
        description="Username validation and Clerk/Supabase credential sync",
    )
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check-username", help="Validate a username")
    check.add_argument("username")

    sync = subparsers.add_parser("sync", help="Run the credential synchronizer")
    sync.add_argument("--session-id", required=True, help="Clerk session ID")

    server = subparsers.add_parser("serve", help="Run the API server")
    server.add_argument("--host", type=str, help="Host to bind to")
    server.add_argument("--port", type=int, help="Port to bind to")
    server.add_argument("--reload", action="store_true", help="Enable auto-reload")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level or get_settings().log_level)

    if args.command == "check-username":
        state = asyncio.run(check_username(args.username))
        sys.exit(0 if state.is_valid else 1)
    elif args.command == "sync":
        try:
            code = asyncio.run(run_sync(args.session_id))
        except KeyboardInterrupt:
            console.print("\n[dim]Signed out[/dim]")
            code = 0
        sys.exit(code)
    elif args.command == "serve":
        serve(args.host, args.port, args.reload)


if __name__ == "__main__":
    main()
