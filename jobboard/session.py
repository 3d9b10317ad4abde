"""
Profile session: the single owner of a Profile and its engines.

Wires the validation pipeline, upload machine, save workflow and reward
tracker to one state store, notification sink and cancellation token.
"""

import asyncio
from dataclasses import replace
from typing import List, Optional

from .env import Settings
from .events import CancellationToken, CollectingSink, NotificationSink, StateStore
from .logger import StructuredLogger, get_logger
from .models import DocumentRef, Profile, UploadKind
from .pipeline import ReactiveValidationPipeline
from .rewards import EarnResult, RewardState, RewardTracker
from .schema import ValidationError
from .services import (
    ProfileService,
    RandomSource,
    SimulatedProfileService,
    SimulatedUploadService,
    UploadService,
)
from .uploads import UploadStateMachine
from .workflow import ProfileWorkflow, SaveResult

ERRORS_KEY = "profile.errors"


class ProfileSession:
    def __init__(
        self,
        profile: Optional[Profile] = None,
        settings: Optional[Settings] = None,
        upload_service: Optional[UploadService] = None,
        profile_service: Optional[ProfileService] = None,
        sink: Optional[NotificationSink] = None,
        reward_state: Optional[RewardState] = None,
        rng: Optional[RandomSource] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        settings = settings or Settings()
        self.settings = settings
        self.profile = profile.snapshot() if profile else Profile()
        self.sink = sink or CollectingSink()
        self.token = CancellationToken()
        self._logger = logger or get_logger()
        self.store = StateStore(logger=self._logger)

        self.pipeline = ReactiveValidationPipeline(
            on_result=self._on_validated,
            window=settings.debounce_seconds,
            logger=self._logger,
        )
        self.uploads = UploadStateMachine(
            service=upload_service or SimulatedUploadService(
                latency=settings.upload_latency,
                success_rate=settings.upload_success_rate,
                rng=rng,
            ),
            apply_document=self._apply_document,
            sink=self.sink,
            token=self.token,
            store=self.store,
            logger=self._logger,
        )
        self.workflow = ProfileWorkflow(
            service=profile_service or SimulatedProfileService(
                latency=settings.save_latency,
                success_rate=settings.save_success_rate,
                rng=rng,
            ),
            sink=self.sink,
            token=self.token,
            store=self.store,
            logger=self._logger,
        )
        self.rewards = RewardTracker(
            sink=self.sink,
            state=reward_state or RewardState.initial(settings.initial_points),
            rng=rng,
            points_range=(settings.points_min, settings.points_max),
            store=self.store,
            logger=self._logger,
        )

    async def __aenter__(self) -> "ProfileSession":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.close()

    @property
    def closed(self) -> bool:
        return self.token.cancelled

    @property
    def errors(self) -> Optional[List[ValidationError]]:
        return self.pipeline.latest_errors

    def update(self, **fields) -> Profile:
        """Edit profile fields and schedule re-validation of the result."""
        if self.closed:
            raise RuntimeError("Session is closed")
        self.profile = replace(self.profile, **fields)
        self.pipeline.submit(self.profile)
        return self.profile

    def upload(self, kind: UploadKind, doc: DocumentRef) -> Optional[asyncio.Task]:
        return self.uploads.begin_upload(kind, doc)

    async def save(self) -> SaveResult:
        self.pipeline.flush()
        return await self.workflow.save(self.profile)

    def earn_points(self) -> EarnResult:
        return self.rewards.earn()

    def close(self) -> None:
        """Tear down: later resolutions are discarded, pending validation dropped."""
        if self.closed:
            return
        self.token.cancel()
        self.pipeline.dispose()
        self._logger.debug("Profile session closed")

    async def drain(self) -> None:
        """Wait for in-flight uploads to resolve (applied or discarded)."""
        await self.uploads.wait()

    def _apply_document(self, kind: UploadKind, doc: DocumentRef) -> None:
        self.profile = self.profile.with_document(kind, doc)

    def _on_validated(self, errors: List[ValidationError]) -> None:
        if self.closed:
            return
        self.store.set(ERRORS_KEY, tuple(errors))
