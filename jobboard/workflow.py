"""Save-profile use case: validate locally, then hand off to the profile service."""

from dataclasses import dataclass
from typing import Optional, Tuple

from .events import CancellationToken, NotificationSink, StateStore
from .logger import StructuredLogger, get_logger
from .models import Notification, Profile
from .schema import ValidationError, format_errors, validate_profile
from .services import ProfileService, SaveError

SAVING_KEY = "profile.saving"


@dataclass(frozen=True)
class SaveResult:
    succeeded: bool
    errors: Tuple[ValidationError, ...] = ()
    error: Optional[SaveError] = None

    @property
    def report(self) -> str:
        if self.errors:
            return format_errors(list(self.errors))
        if self.error is not None:
            return str(self.error)
        return ""


class ProfileWorkflow:
    def __init__(
        self,
        service: ProfileService,
        sink: NotificationSink,
        token: Optional[CancellationToken] = None,
        store: Optional[StateStore] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self.service = service
        self.sink = sink
        self.token = token or CancellationToken()
        self.store = store
        self._logger = logger or get_logger()

    async def save(self, profile: Profile) -> SaveResult:
        """
        Validate and persist a profile snapshot.

        Validation failures return immediately without calling the service.
        Any exception from the service becomes a failed result (wrapped in
        SaveError when it is not one already); the caller may retry with the
        same or an edited profile.
        """
        snapshot = profile.snapshot()
        errors = validate_profile(snapshot)
        self._logger.record_validation()
        if errors:
            self._logger.info("Save blocked by validation", errors=[type(e).__name__ for e in errors])
            self.sink.notify(Notification(title="Validation Error", message=format_errors(errors)))
            return SaveResult(succeeded=False, errors=tuple(errors))

        self._logger.record_save_attempt()
        self._set_saving(True)
        try:
            await self.service.save(snapshot)
        except Exception as e:
            if not isinstance(e, SaveError):
                self._logger.error(
                    "Profile service raised unexpectedly",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                cause, e = e, SaveError(f"Profile service failed: {e}")
                e.__cause__ = cause
            self._logger.record_save_failure(type(e).__name__)
            self._logger.warning("Profile save failed", error=str(e))
            if not self.token.cancelled:
                self._set_saving(False)
                self.sink.notify(Notification(
                    title="Error",
                    message="Failed to save profile. Please try again.",
                ))
            return SaveResult(succeeded=False, error=e)

        self._logger.record_save_success()
        self._logger.info("Profile saved", email=snapshot.email)
        if not self.token.cancelled:
            self._set_saving(False)
            self.sink.notify(Notification(title="Success", message="Profile saved successfully!"))
        return SaveResult(succeeded=True)

    def _set_saving(self, saving: bool):
        if self.store is not None:
            self.store.set(SAVING_KEY, saving)
