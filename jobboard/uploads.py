"""
Per-document upload state machine.

States per kind:
- NOT_STARTED: nothing picked yet
- UPLOADING: a transfer is in flight; new starts for this kind are rejected
- COMPLETED: the profile holds the resolved reference
- FAILED: the profile is unchanged; a new start re-enters UPLOADING
"""

import asyncio
from typing import Callable, Dict, Optional

from .events import CancellationToken, NotificationSink, StateStore
from .logger import StructuredLogger, get_logger
from .models import DocumentRef, Notification, UploadKind, UploadStatus
from .services import UploadError, UploadService

ApplyDocument = Callable[[UploadKind, DocumentRef], None]


def status_key(kind: UploadKind) -> str:
    return f"upload.{kind.name.lower()}"


class UploadStateMachine:
    """
    Tracks one independent upload lifecycle per ``UploadKind``.

    Args:
        service: Collaborator performing the transfer
        apply_document: Called with the resolved reference on success; the
            owner of the profile decides how to store it
        sink: Receives the failure notification
        token: Session liveness flag, checked before applying any outcome
        store: Optional state store receiving status changes
        logger: Structured logger (default: global logger)
    """

    def __init__(
        self,
        service: UploadService,
        apply_document: ApplyDocument,
        sink: NotificationSink,
        token: Optional[CancellationToken] = None,
        store: Optional[StateStore] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self.service = service
        self.apply_document = apply_document
        self.sink = sink
        self.token = token or CancellationToken()
        self.store = store
        self._logger = logger or get_logger()
        self._status: Dict[UploadKind, UploadStatus] = {}
        self._tasks: Dict[UploadKind, asyncio.Task] = {}
        for kind in UploadKind:
            self._set_status(kind, UploadStatus.NOT_STARTED)

    def status(self, kind: UploadKind) -> UploadStatus:
        return self._status[kind]

    def statuses(self) -> Dict[UploadKind, UploadStatus]:
        return dict(self._status)

    def begin_upload(self, kind: UploadKind, doc: DocumentRef) -> Optional[asyncio.Task]:
        """
        Start uploading ``doc`` as ``kind``.

        Returns:
            The task resolving the upload, or None when the start was rejected
            (an upload of this kind is already in flight, or the session is closed)
        """
        if self.token.cancelled:
            self._logger.warning("Upload requested after session teardown", kind=kind.value)
            return None
        if self._status[kind] is UploadStatus.UPLOADING:
            self._logger.warning("Upload already in flight, ignoring", kind=kind.value)
            return None

        self._set_status(kind, UploadStatus.UPLOADING)
        self._logger.record_upload_attempt(kind.value)
        self._logger.info("Upload started", kind=kind.value, document=doc.location)

        task = asyncio.get_running_loop().create_task(self._run(kind, doc))
        self._tasks[kind] = task
        return task

    async def wait(self) -> None:
        """Wait for every in-flight upload to resolve."""
        tasks = [t for t in self._tasks.values() if not t.done()]
        if tasks:
            await asyncio.gather(*tasks)

    async def _run(self, kind: UploadKind, doc: DocumentRef) -> UploadStatus:
        try:
            resolved = await self.service.upload(doc, kind)
        except UploadError as e:
            if self._discard(kind):
                return self._status[kind]
            self._on_failure(kind, e)
        except Exception as e:
            # Any collaborator failure must leave UPLOADING
            self._logger.error(
                "Upload service raised unexpectedly",
                kind=kind.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            if self._discard(kind):
                return self._status[kind]
            failure = UploadError(f"Transfer of {kind.value} failed: {e}")
            failure.__cause__ = e
            self._on_failure(kind, failure)
        else:
            if self._discard(kind):
                return self._status[kind]
            self._on_success(kind, resolved)
        return self._status[kind]

    def _discard(self, kind: UploadKind) -> bool:
        if not self.token.cancelled:
            return False
        self._logger.record_upload_discarded(kind.value)
        self._logger.info("Upload resolved after teardown, discarded", kind=kind.value)
        return True

    def _on_success(self, kind: UploadKind, resolved: DocumentRef):
        self.apply_document(kind, resolved)
        self._set_status(kind, UploadStatus.COMPLETED)
        self._logger.record_upload_success(kind.value)
        self._logger.info("Upload completed", kind=kind.value, document=resolved.location)

    def _on_failure(self, kind: UploadKind, error: UploadError):
        self._set_status(kind, UploadStatus.FAILED)
        self._logger.record_upload_failure(kind.value, type(error).__name__)
        self._logger.warning("Upload failed", kind=kind.value, error=str(error))
        self.sink.notify(Notification(
            title="Upload Failed",
            message=f"Failed to upload {kind.value}. Please try again.",
        ))

    def _set_status(self, kind: UploadKind, status: UploadStatus):
        self._status[kind] = status
        if self.store is not None:
            self.store.set(status_key(kind), status)
