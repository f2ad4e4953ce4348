"""
Sign-in orchestrator.

State machine behind the sign-in screen:

    IDLE -> VALIDATING -> AUTHENTICATING -> SYNCHRONIZING -> READY
    VALIDATING / AUTHENTICATING -> FAILED -> IDLE

Credentials are checked locally (email first, password only if the email
passed), then handed to the authentication capability. After a successful
sign-in the synchronization capability refills the local note cache and
the screen is told to move on to the note list. Everything the screen
needs to react to leaves through the effect channel, in order.

A user who is already signed in when the orchestrator is built skips all
of this and is sent straight to the note list.

Typical usage:
    orchestrator = SignInOrchestrator(
        sign_in=auth_client.sign_in,
        synchronize=sync_client.synchronize,
        get_session_identity=session_storage.get_user_session_id,
        state=JsonStateStore(settings.state_file),
    )
    orchestrator.on_event(EmailChanged("alice@example.com"))
    orchestrator.on_event(SubmitRequested())
    async for effect in orchestrator.effects:
        ...
"""

import asyncio
import logging
from contextlib import aclosing
from enum import Enum
from typing import AsyncIterator, Awaitable, Callable, Optional, Set

from notesync.models.resource import Error, Loading, Resource, Success
from notesync.models.sign_in import (
    EmailChanged,
    NavigateToNoteList,
    NavigateToRegister,
    PasswordChanged,
    RegisterRequested,
    ShowProgress,
    ShowSnackbar,
    SignInEvent,
    SubmitRequested,
    UiEffect,
)
from notesync.session.channel import EffectChannel
from notesync.session.storage import EMPTY_VALUE, StateStore
from notesync.utils.validators import Validator, validate_email, validate_password

logger = logging.getLogger(__name__)

EMAIL_KEY = "email"
PASSWORD_KEY = "password"

UNEXPECTED_ERROR = "An unexpected error occurred. Please try again."
SYNC_FAILED_MESSAGE = "Could not synchronize notes. Showing notes saved on this device."

SignIn = Callable[[str, str], AsyncIterator[Resource]]
Synchronize = Callable[[], Awaitable[None]]
SessionIdentity = Callable[[], str]


class SignInState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    AUTHENTICATING = "authenticating"
    SYNCHRONIZING = "synchronizing"
    READY = "ready"
    FAILED = "failed"
    REGISTERING = "registering"


_TERMINAL_STATES = {SignInState.READY, SignInState.REGISTERING}


class SignInOrchestrator:
    """
    Coordinates validation, authentication and synchronization for one
    sign-in screen.

    Must be created and driven from inside a running event loop. At most
    one submission is in flight at a time; submits arriving meanwhile are
    ignored.
    """

    def __init__(
        self,
        sign_in: SignIn,
        synchronize: Synchronize,
        get_session_identity: SessionIdentity,
        state: StateStore,
        validate_email: Validator = validate_email,
        validate_password: Validator = validate_password,
    ):
        self._sign_in = sign_in
        self._synchronize = synchronize
        self._validate_email = validate_email
        self._validate_password = validate_password
        self._saved_state = state
        self._channel = EffectChannel()
        self._tasks: Set[asyncio.Task] = set()
        self._state = SignInState.IDLE

        self._email = state.get(EMAIL_KEY, EMPTY_VALUE)
        self._password = state.get(PASSWORD_KEY, EMPTY_VALUE)

        if get_session_identity():
            logger.info("Existing session found, skipping sign-in")
            self._state = SignInState.READY
            self._emit(NavigateToNoteList())

    # ============================================================
    # Read-only surface
    # ============================================================

    @property
    def effects(self) -> EffectChannel:
        return self._channel

    @property
    def state(self) -> SignInState:
        return self._state

    @property
    def email(self) -> str:
        return self._email

    @property
    def password(self) -> str:
        return self._password

    # ============================================================
    # Event intake
    # ============================================================

    def on_event(self, event: SignInEvent) -> None:
        """Handle one screen event. Events after teardown are ignored."""
        if self._channel.closed:
            logger.debug(f"Ignoring {event!r}: orchestrator closed")
            return

        if isinstance(event, EmailChanged):
            if self._state not in _TERMINAL_STATES:
                self._set_email(event.email)
        elif isinstance(event, PasswordChanged):
            if self._state not in _TERMINAL_STATES:
                self._set_password(event.password)
        elif isinstance(event, RegisterRequested):
            self._navigate_to_register()
        elif isinstance(event, SubmitRequested):
            self._submit()
        else:
            raise TypeError(f"Unknown sign-in event: {event!r}")

    def _set_email(self, email: str) -> None:
        self._email = email
        self._saved_state.set(EMAIL_KEY, email)

    def _set_password(self, password: str) -> None:
        self._password = password
        self._saved_state.set(PASSWORD_KEY, password)

    def _clear_credentials(self) -> None:
        self._email = EMPTY_VALUE
        self._password = EMPTY_VALUE
        self._saved_state.remove(EMAIL_KEY)
        self._saved_state.remove(PASSWORD_KEY)

    def _navigate_to_register(self) -> None:
        if self._state != SignInState.IDLE:
            logger.debug(f"Ignoring register request in state {self._state.value}")
            return
        self._clear_credentials()
        self._transition(SignInState.REGISTERING)
        self._emit(NavigateToRegister())

    def _submit(self) -> None:
        if self._state != SignInState.IDLE:
            logger.debug(f"Ignoring submit in state {self._state.value}")
            return
        # Claim the slot before the task starts so a second submit is dropped
        self._transition(SignInState.VALIDATING)
        self._launch(self._sign_in_user())

    # ============================================================
    # Submission flow
    # ============================================================

    def _is_validation_successful(self) -> bool:
        email_result = self._validate_email(self._email)
        if not email_result.successful:
            self._emit(ShowSnackbar(email_result.error_message))
            return False

        password_result = self._validate_password(self._password)
        if not password_result.successful:
            self._emit(ShowSnackbar(password_result.error_message))
            return False

        return True

    async def _sign_in_user(self) -> None:
        if not self._is_validation_successful():
            self._transition(SignInState.FAILED)
            self._transition(SignInState.IDLE)
            return

        self._transition(SignInState.AUTHENTICATING)
        await self._send(ShowProgress(True))

        outcome = await self._authenticate()
        if isinstance(outcome, Success):
            await self._synchronize_notes()
        else:
            await self._fail(outcome.message)

    async def _authenticate(self) -> Resource:
        """Consume the sign-in stream up to its terminal outcome."""
        try:
            async with aclosing(self._sign_in(self._email, self._password)) as stream:
                async for event in stream:
                    if isinstance(event, Loading):
                        # progress is already showing
                        continue
                    if isinstance(event, (Success, Error)):
                        return event
                    logger.warning(f"Unexpected sign-in outcome: {event!r}")
        except Exception as e:
            logger.error(f"Sign-in call failed: {e}", exc_info=True)
            return Error(None)
        logger.warning("Sign-in stream ended without an outcome")
        return Error(None)

    async def _fail(self, message: Optional[str]) -> None:
        self._transition(SignInState.FAILED)
        await self._send(ShowSnackbar(message or UNEXPECTED_ERROR))
        await self._send(ShowProgress(False))
        self._transition(SignInState.IDLE)

    async def _synchronize_notes(self) -> None:
        self._transition(SignInState.SYNCHRONIZING)
        try:
            await self._synchronize()
        except Exception as e:
            # Signed in already; carry on with whatever the cache holds
            logger.warning(f"Note synchronization failed: {e}", exc_info=True)
            await self._send(ShowSnackbar(SYNC_FAILED_MESSAGE))
        await self._send(ShowProgress(False))
        await self._send(NavigateToNoteList())
        self._clear_credentials()
        self._transition(SignInState.READY)

    # ============================================================
    # Plumbing
    # ============================================================

    def _transition(self, new_state: SignInState) -> None:
        logger.debug(f"Sign-in state {self._state.value} -> {new_state.value}")
        self._state = new_state

    def _emit(self, effect: UiEffect) -> None:
        self._channel.send_nowait(effect)

    async def _send(self, effect: UiEffect) -> None:
        await self._channel.send(effect)

    def _launch(self, coro) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def join(self) -> None:
        """Wait for in-flight work to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Tear down: cancel in-flight work and close the effect channel.

        Work already done remotely is not rolled back; a later orchestrator
        picks the stored session up on construction.
        """
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._channel.close()
        logger.debug("Sign-in orchestrator closed")
