# src/pipeline/session.py — v2
"""Request sessions: one capture-to-result operation, cancellable as a unit.

State machine:
    idle → capturing → dispatching → succeeded | failed | cancelled

A session binds the provider instance that is active when it is created,
so a later provider switch or reconfiguration never affects it. The
coordinator keeps at most one session in flight: submitting a new one
cancels the previous one first, and a cancelled session's late result is
never delivered.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from enum import Enum

from writingtools.capture.collector import CaptureError, UrlTextFetcher, collect
from writingtools.capture.source import ContentSource
from writingtools.core.models import CapturedContent, SessionOutcome
from writingtools.extraction.url_fetcher import fetch_url_text
from writingtools.llm.base_client import BaseAIProvider
from writingtools.llm.cancellation import CancellationToken
from writingtools.llm.errors import ProviderError, RequestCancelledError
from writingtools.llm.provider_registry import ProviderRegistry
from writingtools.logging.context import set_session_context
from writingtools.pipeline.delivery import DeliverySurface
from writingtools.pipeline.operations import (
    FreeformInstruction,
    Operation,
    build_request,
    operation_kind,
)

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    DISPATCHING = "dispatching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset(
    {SessionState.SUCCEEDED, SessionState.FAILED, SessionState.CANCELLED}
)


class SessionStateError(RuntimeError):
    """Raised when a session method is called in the wrong state."""


class RequestSession:
    """One logical user operation against a fixed provider instance."""

    def __init__(
        self,
        provider: BaseAIProvider,
        fetch_url: UrlTextFetcher = fetch_url_text,
        session_id: str | None = None,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self._provider = provider
        self._fetch_url = fetch_url
        self._state = SessionState.IDLE
        self._content: CapturedContent | None = None
        self._outcome: SessionOutcome | None = None
        self._error: Exception | None = None
        self._operation_kind: str | None = None
        self._cancel_requested = False
        self._task: asyncio.Task | None = None
        self._call_token: CancellationToken | None = None

    # --- Read-only view ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_terminal(self) -> bool:
        return self._state in TERMINAL_STATES

    @property
    def provider(self) -> BaseAIProvider:
        return self._provider

    @property
    def content(self) -> CapturedContent | None:
        return self._content

    @property
    def outcome(self) -> SessionOutcome | None:
        return self._outcome

    @property
    def error(self) -> Exception | None:
        return self._error

    @property
    def operation_kind(self) -> str | None:
        return self._operation_kind

    # --- Transitions ---

    async def capture(self, source: ContentSource) -> CapturedContent:
        """idle → capturing: sniff and normalise the source.

        Raises:
            CaptureError: Nothing usable; the session returns to idle.
        """
        self._require(SessionState.IDLE)
        self._state = SessionState.CAPTURING
        try:
            content = await collect(source, fetch_url=self._fetch_url)
        except CaptureError as exc:
            self._state = SessionState.IDLE
            self._error = exc
            raise
        self._content = content
        logger.debug(
            "Captured %s: text=%d chars, images=%d, videos=%d",
            content.source_kind, len(content.text), len(content.images), len(content.videos),
        )
        return content

    def use_content(self, content: CapturedContent) -> None:
        """idle → capturing with content captured elsewhere."""
        self._require(SessionState.IDLE)
        self._state = SessionState.CAPTURING
        self._content = content

    async def dispatch(self, operation: Operation) -> SessionOutcome | None:
        """capturing → dispatching → terminal.

        Returns:
            The outcome on success, None on failure or cancellation.

        Raises:
            EmptyRequestError: The operation yields an entirely empty request.
            SessionStateError: Not capturing, or capturing without content.
        """
        self._require(SessionState.CAPTURING)
        if self._content is None:
            raise SessionStateError(
                f"Session {self.session_id} has no captured content to dispatch"
            )
        kind = operation_kind(operation)
        self._operation_kind = kind

        if self._cancel_requested:
            self._state = SessionState.CANCELLED
            return None

        request = build_request(operation, self._content)
        self._call_token = CancellationToken()
        self._state = SessionState.DISPATCHING
        logger.info(
            "Dispatching %s to %s (images=%d, videos=%d)",
            kind, self._provider.provider_name,
            len(request.images), len(request.videos or ()),
        )

        try:
            text = await self._provider.execute(request, token=self._call_token)
        except RequestCancelledError:
            self._state = SessionState.CANCELLED
            logger.info("Session %s cancelled", self.session_id)
            return None
        except ProviderError as exc:
            if self._cancel_requested:
                self._state = SessionState.CANCELLED
                logger.info("Session %s cancelled; late error discarded", self.session_id)
                return None
            self._state = SessionState.FAILED
            self._error = exc
            logger.warning("Session %s failed: %s", self.session_id, exc.message)
            return None

        if self._cancel_requested:
            self._state = SessionState.CANCELLED
            logger.info("Session %s cancelled; late result discarded", self.session_id)
            return None

        self._outcome = SessionOutcome(
            session_id=self.session_id,
            operation_kind=kind,
            result_text=text,
            original_text=_original_text(operation, self._content),
            presentation=operation.presentation,
            provider=self._provider.provider_name,
        )
        self._state = SessionState.SUCCEEDED
        logger.info("Session %s succeeded (%d chars)", self.session_id, len(text))
        return self._outcome

    async def run(
        self,
        operation: Operation,
        source: ContentSource | None = None,
        content: CapturedContent | None = None,
    ) -> SessionOutcome | None:
        """Capture (from source or prebuilt content) then dispatch.

        Raises:
            CaptureError: Nothing usable on the source.
        """
        if (source is None) == (content is None):
            raise ValueError("Pass exactly one of source or content")
        if self._state is SessionState.CANCELLED:
            return None

        self._task = asyncio.current_task()
        set_session_context(
            self.session_id, self._provider.provider_name, operation_kind(operation),
        )
        try:
            if content is not None:
                self.use_content(content)
            else:
                await self.capture(source)  # type: ignore[arg-type]
            return await self.dispatch(operation)
        except asyncio.CancelledError:
            if not self._cancel_requested:
                raise
            if self._task is not None:
                self._task.uncancel()
            self._state = SessionState.CANCELLED
            logger.info("Session %s cancelled during capture", self.session_id)
            return None
        finally:
            self._task = None

    def cancel(self) -> None:
        """Cancel the session. Idempotent; no effect once terminal."""
        if self.is_terminal:
            return
        self._cancel_requested = True
        if self._state is SessionState.DISPATCHING and self._call_token is not None:
            self._call_token.cancel()
        elif self._state is SessionState.CAPTURING and self._task is not None:
            self._task.cancel()
        elif self._state is SessionState.IDLE:
            self._state = SessionState.CANCELLED

    def _require(self, expected: SessionState) -> None:
        if self._state is not expected:
            raise SessionStateError(
                f"Session {self.session_id} is {self._state.value}, expected {expected.value}"
            )


def _original_text(operation: Operation, content: CapturedContent) -> str:
    if isinstance(operation, FreeformInstruction) and not content.text:
        return operation.instruction
    return content.text


class SessionCoordinator:
    """Runs sessions one at a time against the active provider."""

    def __init__(
        self,
        registry: ProviderRegistry,
        surface: DeliverySurface,
        fetch_url: UrlTextFetcher = fetch_url_text,
    ) -> None:
        self._registry = registry
        self._surface = surface
        self._fetch_url = fetch_url
        self._current: RequestSession | None = None

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    @property
    def current(self) -> RequestSession | None:
        return self._current

    def cancel_current(self) -> None:
        if self._current is not None and not self._current.is_terminal:
            logger.info("Cancelling session %s", self._current.session_id)
            self._current.cancel()

    async def submit(
        self,
        operation: Operation,
        source: ContentSource | None = None,
        content: CapturedContent | None = None,
    ) -> RequestSession:
        """Start a new session, superseding any one still in flight.

        The terminal state is reported to the delivery surface: result on
        success, message on failure, nothing on cancel or empty capture.
        """
        self.cancel_current()
        session = RequestSession(self._registry.active, fetch_url=self._fetch_url)
        self._current = session
        try:
            await session.run(operation, source=source, content=content)
        except CaptureError:
            logger.info("Nothing captured; no operation attempted")
            return session
        finally:
            if self._current is session:
                self._current = None

        self._deliver(session)
        return session

    def _deliver(self, session: RequestSession) -> None:
        if session.state is SessionState.SUCCEEDED and session.outcome is not None:
            self._surface.present_result(session.outcome)
        elif session.state is SessionState.FAILED and session.error is not None:
            message = getattr(session.error, "message", str(session.error))
            self._surface.present_error(session.operation_kind or "operation", message)
