"""Delete an application, wait for ArgoCD to finish it, then delete its project.

ArgoCD deletes applications asynchronously: an accepted delete may leave the
app around while its finalizers run. The project is only removed once the app
is confirmed gone (or was never there), and each run reports two independent
outcomes, one for the app and one for the project.

Runs move through :class:`DeletionState`::

    START -> APP_DELETE_ATTEMPTED -> APP_NOT_FOUND ------------------\\
                                  -> APP_DELETE_FAILED --------------+-> PROJECT_DECISION
                                  -> APP_DELETE_OK -> POLLING -> POLL_GONE / POLL_EXHAUSTED

    PROJECT_DECISION -> PROJECT_DELETED / PROJECT_SKIPPED / PROJECT_DELETE_FAILED -> DONE
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from loguru import logger
from prometheus_client import Counter

from ..models import ApplicationRef, DeleteResponse, DeletionOutcome
from . import Sleep, poll
from .instances import InstanceDirectory
from .tokens import Connection, TokenResolver

APP_DELETED = "application is deleted successfully"
APP_DELETE_REJECTED = "error with deleteing argo app"
APP_PENDING_DELETE = "application pending delete"
APP_POLL_ERROR = "error getting argo app data"
PROJECT_DELETED = "project is deleted successfully"
PROJECT_DELETE_ERROR = "error with deleteing argo project"
PROJECT_SKIPPED_PENDING = "skipping project deletion due to app deletion pending"
PROJECT_SKIPPED_APP_ERROR = "skipping project deletion due to erro deleting argo app"

DELETIONS = Counter(
    "argocd_gateway_deletions",
    "Application deletion requests by app and project outcome.",
    ["app_status", "project_status"],
)


class DeletionState(str, Enum):
    START = "START"
    APP_DELETE_ATTEMPTED = "APP_DELETE_ATTEMPTED"
    APP_NOT_FOUND = "APP_NOT_FOUND"
    APP_DELETE_FAILED = "APP_DELETE_FAILED"
    APP_DELETE_OK = "APP_DELETE_OK"
    POLLING = "POLLING"
    POLL_GONE = "POLL_GONE"
    POLL_EXHAUSTED = "POLL_EXHAUSTED"
    PROJECT_DECISION = "PROJECT_DECISION"
    PROJECT_DELETED = "PROJECT_DELETED"
    PROJECT_SKIPPED = "PROJECT_SKIPPED"
    PROJECT_DELETE_FAILED = "PROJECT_DELETE_FAILED"
    DONE = "DONE"


S = DeletionState

TRANSITIONS: Dict[DeletionState, FrozenSet[DeletionState]] = {
    S.START: frozenset({S.APP_DELETE_ATTEMPTED}),
    S.APP_DELETE_ATTEMPTED: frozenset({S.APP_NOT_FOUND, S.APP_DELETE_FAILED, S.APP_DELETE_OK}),
    S.APP_NOT_FOUND: frozenset({S.PROJECT_DECISION}),
    S.APP_DELETE_FAILED: frozenset({S.PROJECT_DECISION}),
    S.APP_DELETE_OK: frozenset({S.POLLING}),
    S.POLLING: frozenset({S.POLL_GONE, S.POLL_EXHAUSTED}),
    S.POLL_GONE: frozenset({S.PROJECT_DECISION}),
    S.POLL_EXHAUSTED: frozenset({S.PROJECT_DECISION}),
    S.PROJECT_DECISION: frozenset({S.PROJECT_DELETED, S.PROJECT_SKIPPED, S.PROJECT_DELETE_FAILED}),
    S.PROJECT_DELETED: frozenset({S.DONE}),
    S.PROJECT_SKIPPED: frozenset({S.DONE}),
    S.PROJECT_DELETE_FAILED: frozenset({S.DONE}),
    S.DONE: frozenset(),
}

# App-side states after which the project may be deleted.
PROJECT_DELETABLE = frozenset({S.APP_NOT_FOUND, S.POLL_GONE})


@dataclass
class PollState:
    attempt_count: int = 0
    app_still_exists: bool = True
    exhausted: bool = False


@dataclass
class DeletionRun:
    instance_name: str
    app_name: str
    state: DeletionState = S.START
    history: List[DeletionState] = field(default_factory=lambda: [S.START])
    app_outcome: Optional[DeletionOutcome] = None
    project_outcome: Optional[DeletionOutcome] = None
    poll: Optional[PollState] = None

    def advance(self, state: DeletionState) -> None:
        if state not in TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal deletion transition {self.state.value} -> {state.value}")
        logger.bind(instance=self.instance_name).debug(f"{self.app_name}: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def response(self) -> DeleteResponse:
        return DeleteResponse(argoDeleteAppResp=self.app_outcome, argoDeleteProjectResp=self.project_outcome)


class DeletionOrchestrator:
    def __init__(
        self,
        directory: InstanceDirectory,
        tokens: TokenResolver,
        argocd,
        wait_cycles: int = 5,
        poll_delay: float = 5.0,
        sleep: Sleep = asyncio.sleep,
    ):
        self.directory = directory
        self.tokens = tokens
        self.argocd = argocd
        self.wait_cycles = wait_cycles
        self.poll_delay = poll_delay
        self.sleep = sleep

    async def delete(self, instance_name: str, app_name: str) -> DeleteResponse:
        run = await self.run(instance_name, app_name)
        return run.response()

    async def run(self, instance_name: str, app_name: str) -> DeletionRun:
        """Execute one deletion.

        Instance or token resolution errors propagate. Everything after that is
        reported through the run's two outcomes.
        """
        conn = await self.tokens.connect(self.directory, instance_name)
        run = DeletionRun(instance_name=instance_name, app_name=app_name)
        log = logger.bind(instance=instance_name)

        app_state = await self._delete_app(run, conn)
        if app_state is S.APP_DELETE_OK:
            app_state = await self._wait_for_deletion(run, conn)

        await self._decide_project(run, conn, app_state)
        run.advance(S.DONE)

        log.info(f"Deleting {app_name}: app {run.app_outcome.status.value}, project {run.project_outcome.status.value}")
        DELETIONS.labels(run.app_outcome.status.value, run.project_outcome.status.value).inc()
        return run

    async def _delete_app(self, run: DeletionRun, conn: Connection) -> DeletionState:
        run.advance(S.APP_DELETE_ATTEMPTED)
        try:
            accepted = await self.argocd.delete_app(conn.instance.base_url, run.app_name, conn.token)
        except Exception as e:
            logger.bind(instance=run.instance_name).warning(f"Deleting app {run.app_name} failed: {e!r}")
            # Treated as not found; its project can still be cleaned up.
            run.app_outcome = DeletionOutcome.failed(getattr(e, "detail", None) or str(e))
            run.advance(S.APP_NOT_FOUND)
            return S.APP_NOT_FOUND

        if accepted is False:
            run.app_outcome = DeletionOutcome.failed(APP_DELETE_REJECTED)
            run.advance(S.APP_DELETE_FAILED)
            return S.APP_DELETE_FAILED

        run.advance(S.APP_DELETE_OK)
        return S.APP_DELETE_OK

    async def _wait_for_deletion(self, run: DeletionRun, conn: Connection) -> DeletionState:
        run.advance(S.POLLING)
        state = run.poll = PollState()
        ref = ApplicationRef(name=run.app_name)

        async def app_gone() -> bool:
            state.attempt_count += 1
            data = await self.argocd.get_app_data(conn.instance.base_url, conn.instance.name, ref, conn.token)
            state.app_still_exists = "metadata" in data
            return not state.app_still_exists

        def on_error(attempt: int, exc: Exception) -> None:
            logger.bind(instance=run.instance_name).warning(f"Polling {run.app_name} failed on attempt {attempt}: {exc}")
            # Known quirk: attempts are numbered 0..wait_cycles-1, so this never matches.
            if attempt == self.wait_cycles:
                run.app_outcome = DeletionOutcome.failed(APP_POLL_ERROR)

        result = await poll(app_gone, self.wait_cycles, self.poll_delay, on_error=on_error, sleep=self.sleep)

        if result.done:
            run.app_outcome = DeletionOutcome.success(APP_DELETED)
            run.advance(S.POLL_GONE)
            return S.POLL_GONE

        state.exhausted = True
        run.advance(S.POLL_EXHAUSTED)
        return S.POLL_EXHAUSTED

    async def _decide_project(self, run: DeletionRun, conn: Connection, app_state: DeletionState) -> None:
        run.advance(S.PROJECT_DECISION)

        if app_state is S.POLL_EXHAUSTED:
            run.app_outcome = DeletionOutcome.failed(APP_PENDING_DELETE)
            run.project_outcome = DeletionOutcome.failed(PROJECT_SKIPPED_PENDING)
            run.advance(S.PROJECT_SKIPPED)
            return

        if app_state not in PROJECT_DELETABLE:
            run.project_outcome = DeletionOutcome.failed(PROJECT_SKIPPED_APP_ERROR)
            run.advance(S.PROJECT_SKIPPED)
            return

        # The project carries the application's name.
        try:
            await self.argocd.delete_project(conn.instance.base_url, run.app_name, conn.token)
        except Exception as e:
            logger.bind(instance=run.instance_name).warning(f"Deleting project {run.app_name} failed: {e!r}")
            run.project_outcome = DeletionOutcome.failed(getattr(e, "detail", None) or PROJECT_DELETE_ERROR)
            run.advance(S.PROJECT_DELETE_FAILED)
            return

        run.project_outcome = DeletionOutcome.success(PROJECT_DELETED)
        run.advance(S.PROJECT_DELETED)
