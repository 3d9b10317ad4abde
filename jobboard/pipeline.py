"""
Debounced re-validation of profile snapshots.

Each submitted snapshot restarts the quiescence window; only the timer that
survives the window fires, validating the latest snapshot.
"""

import asyncio
from typing import Callable, List, Optional

from .logger import StructuredLogger, get_logger
from .models import Profile
from .schema import ValidationError, validate_profile

ResultCallback = Callable[[List[ValidationError]], None]


class ReactiveValidationPipeline:
    """
    Restartable-timer debounce in front of ``validate_profile``.

    Args:
        on_result: Called with the error list once the window elapses
        window: Quiescence window in seconds
        validator: Validation function (default: validate_profile)
        logger: Structured logger (default: global logger)
    """

    def __init__(
        self,
        on_result: ResultCallback,
        window: float = 0.5,
        validator: Callable[[Profile], List[ValidationError]] = validate_profile,
        logger: Optional[StructuredLogger] = None,
    ):
        self.on_result = on_result
        self.window = window
        self.validator = validator
        self.latest_errors: Optional[List[ValidationError]] = None
        self._logger = logger or get_logger()
        self._handle: Optional[asyncio.TimerHandle] = None
        self._snapshot: Optional[Profile] = None
        self._disposed = False

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def submit(self, profile: Profile) -> None:
        """Queue a snapshot of ``profile``; must be called from the event loop."""
        if self._disposed:
            return
        self._snapshot = profile.snapshot()
        if self._handle is not None:
            self._handle.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.window, self._fire)

    def flush(self) -> Optional[List[ValidationError]]:
        """Fire a pending window now. Returns the emitted errors, if any."""
        if self._handle is None:
            return None
        self._handle.cancel()
        self._fire()
        return self.latest_errors

    def dispose(self) -> None:
        self._disposed = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._snapshot = None

    def _fire(self) -> None:
        self._handle = None
        snapshot, self._snapshot = self._snapshot, None
        if self._disposed or snapshot is None:
            return
        errors = self.validator(snapshot)
        self._logger.record_validation()
        self._logger.debug("Profile re-validated", errors=len(errors))
        self.latest_errors = errors
        self.on_result(errors)
