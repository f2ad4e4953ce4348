"""
Headless sign-in entry point.

Wires the client together the way a screen would: opens the local cache,
builds the authentication and synchronization clients, feeds the typed
credentials into the sign-in orchestrator and reports the effects it
emits. Useful for scripting and for checking a service deployment.

    notesync --email alice@example.com
"""

import argparse
import asyncio
import getpass
import logging
import sys
from typing import List, Optional

import httpx

from notesync.config import Settings, get_settings
from notesync.database import close_cache, connect_cache
from notesync.models.sign_in import (
    EmailChanged,
    NavigateToNoteList,
    PasswordChanged,
    ShowProgress,
    ShowSnackbar,
    SubmitRequested,
    UiEffect,
)
from notesync.services.auth_client import AuthClient
from notesync.services.sync_client import NoteSyncClient
from notesync.session.orchestrator import SignInOrchestrator, SignInState
from notesync.session.storage import JsonStateStore, UserSessionStorage

logger = logging.getLogger(__name__)


# ============================================================
# Logging Configuration
# ============================================================
def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    # Suppress per-request noise from the HTTP client
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _drain(orchestrator: SignInOrchestrator) -> List[UiEffect]:
    effects = []
    while True:
        effect = orchestrator.effects.receive_nowait()
        if effect is None:
            return effects
        effects.append(effect)


def _report(effect: UiEffect) -> None:
    if isinstance(effect, ShowSnackbar):
        logger.warning(effect.message)
    elif isinstance(effect, ShowProgress):
        logger.info("Working..." if effect.is_loading else "Done")
    elif isinstance(effect, NavigateToNoteList):
        logger.info("Signed in; note list unlocked")
    else:
        logger.info(f"Effect: {effect!r}")


async def run_sign_in(
    email: str,
    password: str,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """
    Sign in and synchronize notes.

    Args:
        email: Account email
        password: Account password
        settings: Overrides the environment-derived settings
        transport: Optional httpx transport for both service clients

    Returns:
        True if the note list was reached.
    """
    settings = settings or get_settings()
    cache = await connect_cache(str(settings.cache_db_path))
    try:
        session_storage = UserSessionStorage(JsonStateStore(settings.session_file))
        auth_client = AuthClient(
            settings.api_base_url, session_storage,
            timeout=settings.request_timeout, transport=transport,
        )
        sync_client = NoteSyncClient(
            settings.api_base_url, cache, session_storage,
            timeout=settings.request_timeout, transport=transport,
        )
        orchestrator = SignInOrchestrator(
            sign_in=auth_client.sign_in,
            synchronize=sync_client.synchronize,
            get_session_identity=session_storage.get_user_session_id,
            state=JsonStateStore(settings.state_file),
        )

        if orchestrator.state != SignInState.READY:
            orchestrator.on_event(EmailChanged(email))
            orchestrator.on_event(PasswordChanged(password))
            orchestrator.on_event(SubmitRequested())
            await orchestrator.join()

        effects = _drain(orchestrator)
        await orchestrator.close()
        for effect in effects:
            _report(effect)

        signed_in = any(isinstance(effect, NavigateToNoteList) for effect in effects)
        if signed_in:
            notes = await cache.snapshot()
            logger.info(f"{len(notes)} notes available offline")
        return signed_in
    finally:
        await close_cache()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Sign in and synchronize notes")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", help="Prompted for when omitted")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    password = args.password if args.password is not None else getpass.getpass()
    signed_in = asyncio.run(run_sign_in(args.email, password, settings))
    return 0 if signed_in else 1


if __name__ == "__main__":
    sys.exit(main())
