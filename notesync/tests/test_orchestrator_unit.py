import asyncio
from typing import List, Optional

from notesync.exceptions import SynchronizationFault
from notesync.models.resource import Error, Loading, Success
from notesync.models.sign_in import (
    EmailChanged,
    NavigateToNoteList,
    NavigateToRegister,
    PasswordChanged,
    RegisterRequested,
    ShowProgress,
    ShowSnackbar,
    SubmitRequested,
    UiEffect,
)
from notesync.models.validation import ValidationResult
from notesync.session.orchestrator import (
    SYNC_FAILED_MESSAGE,
    UNEXPECTED_ERROR,
    SignInOrchestrator,
    SignInState,
)
from notesync.session.storage import InMemoryStateStore
from notesync.utils.validators import validate_email, validate_password

VALID_EMAIL = "alice@example.com"
VALID_PASSWORD = "secret123"


class FakeAuth:
    """Scripted sign-in stream; optionally waits on a gate before finishing."""

    def __init__(self, outcomes, gate: Optional[asyncio.Event] = None, fail: bool = False):
        self.outcomes = outcomes
        self.gate = gate
        self.fail = fail
        self.calls = []

    async def sign_in(self, email: str, password: str):
        self.calls.append((email, password))
        yield Loading()
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise ConnectionError("socket closed")
        for outcome in self.outcomes:
            yield outcome


class FakeSync:
    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.calls = 0

    async def synchronize(self) -> None:
        self.calls += 1
        if self.error is not None:
            raise self.error


class CountingValidator:
    def __init__(self, validator):
        self.validator = validator
        self.calls = 0

    def __call__(self, value: str) -> ValidationResult:
        self.calls += 1
        return self.validator(value)


def _build(auth: FakeAuth, sync: Optional[FakeSync] = None, identity: str = "",
           state: Optional[InMemoryStateStore] = None,
           email_validator=None, password_validator=None) -> SignInOrchestrator:
    return SignInOrchestrator(
        sign_in=auth.sign_in,
        synchronize=(sync or FakeSync()).synchronize,
        get_session_identity=lambda: identity,
        state=state if state is not None else InMemoryStateStore(),
        validate_email=email_validator or validate_email,
        validate_password=password_validator or validate_password,
    )


def _drain(orchestrator: SignInOrchestrator) -> List[UiEffect]:
    effects = []
    while (effect := orchestrator.effects.receive_nowait()) is not None:
        effects.append(effect)
    return effects


def _type_credentials(orchestrator: SignInOrchestrator, email: str, password: str) -> None:
    orchestrator.on_event(EmailChanged(email))
    orchestrator.on_event(PasswordChanged(password))


def test_invalid_email_short_circuits_password_check_and_auth() -> None:
    async def scenario() -> None:
        auth = FakeAuth([Success()])
        email_check = CountingValidator(validate_email)
        password_check = CountingValidator(validate_password)
        orchestrator = _build(auth, email_validator=email_check, password_validator=password_check)

        _type_credentials(orchestrator, "", "x")
        orchestrator.on_event(SubmitRequested())
        await orchestrator.join()

        assert _drain(orchestrator) == [ShowSnackbar("Email is required")]
        assert email_check.calls == 1
        assert password_check.calls == 0
        assert auth.calls == []
        assert orchestrator.state == SignInState.IDLE

    asyncio.run(scenario())


def test_invalid_password_is_reported_after_email_passes() -> None:
    async def scenario() -> None:
        auth = FakeAuth([Success()])
        orchestrator = _build(auth)

        _type_credentials(orchestrator, VALID_EMAIL, "short")
        orchestrator.on_event(SubmitRequested())
        await orchestrator.join()

        assert _drain(orchestrator) == [ShowSnackbar("Password must be at least 8 characters")]
        assert auth.calls == []
        assert orchestrator.state == SignInState.IDLE

    asyncio.run(scenario())


def test_successful_sign_in_synchronizes_then_navigates() -> None:
    async def scenario() -> None:
        auth = FakeAuth([Success("token")])
        sync = FakeSync()
        state = InMemoryStateStore()
        orchestrator = _build(auth, sync, state=state)

        _type_credentials(orchestrator, VALID_EMAIL, VALID_PASSWORD)
        orchestrator.on_event(SubmitRequested())
        await orchestrator.join()

        assert _drain(orchestrator) == [
            ShowProgress(True),
            ShowProgress(False),
            NavigateToNoteList(),
        ]
        assert auth.calls == [(VALID_EMAIL, VALID_PASSWORD)]
        assert sync.calls == 1
        assert orchestrator.state == SignInState.READY
        assert state.get("email") == ""
        assert state.get("password") == ""

    asyncio.run(scenario())


def test_error_without_message_falls_back_to_generic_text() -> None:
    async def scenario() -> None:
        auth = FakeAuth([Error(None)])
        sync = FakeSync()
        orchestrator = _build(auth, sync)

        _type_credentials(orchestrator, VALID_EMAIL, VALID_PASSWORD)
        orchestrator.on_event(SubmitRequested())
        await orchestrator.join()

        assert _drain(orchestrator) == [
            ShowProgress(True),
            ShowSnackbar(UNEXPECTED_ERROR),
            ShowProgress(False),
        ]
        assert sync.calls == 0
        assert orchestrator.state == SignInState.IDLE

    asyncio.run(scenario())


def test_error_message_from_service_is_shown_and_retry_is_allowed() -> None:
    async def scenario() -> None:
        auth = FakeAuth([Error("Invalid email or password")])
        orchestrator = _build(auth)

        _type_credentials(orchestrator, VALID_EMAIL, VALID_PASSWORD)
        orchestrator.on_event(SubmitRequested())
        await orchestrator.join()
        assert ShowSnackbar("Invalid email or password") in _drain(orchestrator)

        auth.outcomes = [Success()]
        orchestrator.on_event(SubmitRequested())
        await orchestrator.join()

        assert _drain(orchestrator)[-1] == NavigateToNoteList()
        assert len(auth.calls) == 2
        assert orchestrator.state == SignInState.READY

    asyncio.run(scenario())


def test_sign_in_stream_that_raises_is_treated_as_generic_error() -> None:
    async def scenario() -> None:
        auth = FakeAuth([], fail=True)
        orchestrator = _build(auth)

        _type_credentials(orchestrator, VALID_EMAIL, VALID_PASSWORD)
        orchestrator.on_event(SubmitRequested())
        await orchestrator.join()

        assert _drain(orchestrator) == [
            ShowProgress(True),
            ShowSnackbar(UNEXPECTED_ERROR),
            ShowProgress(False),
        ]
        assert orchestrator.state == SignInState.IDLE

    asyncio.run(scenario())


def test_repeated_submit_while_authenticating_calls_auth_once() -> None:
    async def scenario() -> None:
        gate = asyncio.Event()
        auth = FakeAuth([Success()], gate=gate)
        orchestrator = _build(auth)

        _type_credentials(orchestrator, VALID_EMAIL, VALID_PASSWORD)
        orchestrator.on_event(SubmitRequested())
        orchestrator.on_event(SubmitRequested())
        await asyncio.sleep(0.01)
        assert orchestrator.state == SignInState.AUTHENTICATING
        orchestrator.on_event(SubmitRequested())

        gate.set()
        await orchestrator.join()

        assert len(auth.calls) == 1
        assert _drain(orchestrator) == [
            ShowProgress(True),
            ShowProgress(False),
            NavigateToNoteList(),
        ]

    asyncio.run(scenario())


def test_failed_synchronization_still_navigates_to_note_list() -> None:
    async def scenario() -> None:
        auth = FakeAuth([Success()])
        sync = FakeSync(error=SynchronizationFault("service down"))
        orchestrator = _build(auth, sync)

        _type_credentials(orchestrator, VALID_EMAIL, VALID_PASSWORD)
        orchestrator.on_event(SubmitRequested())
        await orchestrator.join()

        assert _drain(orchestrator) == [
            ShowProgress(True),
            ShowSnackbar(SYNC_FAILED_MESSAGE),
            ShowProgress(False),
            NavigateToNoteList(),
        ]
        assert orchestrator.state == SignInState.READY

    asyncio.run(scenario())


def test_existing_session_navigates_immediately_without_checks() -> None:
    async def scenario() -> None:
        auth = FakeAuth([Success()])
        email_check = CountingValidator(validate_email)
        password_check = CountingValidator(validate_password)
        orchestrator = _build(
            auth, identity="token-123",
            email_validator=email_check, password_validator=password_check,
        )

        assert _drain(orchestrator) == [NavigateToNoteList()]
        assert orchestrator.state == SignInState.READY
        assert email_check.calls == 0
        assert password_check.calls == 0
        assert auth.calls == []

    asyncio.run(scenario())


def test_register_request_navigates_and_ends_the_flow() -> None:
    async def scenario() -> None:
        auth = FakeAuth([Success()])
        state = InMemoryStateStore()
        orchestrator = _build(auth, state=state)

        _type_credentials(orchestrator, VALID_EMAIL, VALID_PASSWORD)
        orchestrator.on_event(RegisterRequested())
        orchestrator.on_event(SubmitRequested())
        await orchestrator.join()

        assert _drain(orchestrator) == [NavigateToRegister()]
        assert orchestrator.state == SignInState.REGISTERING
        assert state.get("email") == ""
        assert auth.calls == []

    asyncio.run(scenario())


def test_credentials_are_restored_and_saved_through_state_store() -> None:
    async def scenario() -> None:
        state = InMemoryStateStore({"email": VALID_EMAIL, "password": "typed-before"})
        orchestrator = _build(FakeAuth([]), state=state)
        assert orchestrator.email == VALID_EMAIL
        assert orchestrator.password == "typed-before"

        orchestrator.on_event(EmailChanged("bob@example.com"))
        orchestrator.on_event(PasswordChanged("hunter22"))
        assert state.get("email") == "bob@example.com"
        assert state.get("password") == "hunter22"

        restored = _build(FakeAuth([]), state=state)
        assert restored.email == "bob@example.com"

    asyncio.run(scenario())


def test_close_cancels_in_flight_sign_in_and_drops_effects() -> None:
    async def scenario() -> None:
        gate = asyncio.Event()
        auth = FakeAuth([Success()], gate=gate)
        sync = FakeSync()
        orchestrator = _build(auth, sync)

        _type_credentials(orchestrator, VALID_EMAIL, VALID_PASSWORD)
        orchestrator.on_event(SubmitRequested())
        await asyncio.sleep(0.01)
        await orchestrator.close()
        gate.set()
        await asyncio.sleep(0.01)

        assert orchestrator.effects.closed
        assert _drain(orchestrator) == []
        assert sync.calls == 0

        orchestrator.on_event(SubmitRequested())
        assert len(auth.calls) == 1

    asyncio.run(scenario())
