"""
External collaborators of the core: upload and profile services.

The simulated implementations stand in for real network calls. Each one
decides its outcome with a single draw from an injectable random source,
then waits a fixed latency before resolving.
"""

import asyncio
import random
from typing import Optional, Protocol

from .models import DocumentRef, Profile, UploadKind


class UploadError(Exception):
    """Raised when a document transfer fails."""
    pass


class SaveError(Exception):
    """Raised when a profile cannot be persisted."""
    pass


class RandomSource(Protocol):
    def random(self) -> float:
        ...

    def randint(self, a: int, b: int) -> int:
        ...


class UploadService(Protocol):
    async def upload(self, doc: DocumentRef, kind: UploadKind) -> DocumentRef:
        ...


class ProfileService(Protocol):
    async def save(self, profile: Profile) -> None:
        ...


class SimulatedUploadService:
    """
    Upload stand-in with fixed latency and a configurable success rate.

    Args:
        latency: Seconds to wait before resolving
        success_rate: Probability that an upload succeeds
        rng: Random source; defaults to a fresh ``random.Random``
    """

    def __init__(
        self,
        latency: float = 2.0,
        success_rate: float = 0.9,
        rng: Optional[RandomSource] = None,
    ):
        self.latency = latency
        self.success_rate = success_rate
        self.rng = rng or random.Random()
        self.calls = 0

    async def upload(self, doc: DocumentRef, kind: UploadKind) -> DocumentRef:
        self.calls += 1
        succeeded = self.rng.random() < self.success_rate
        await asyncio.sleep(self.latency)
        if not succeeded:
            raise UploadError(f"Transfer of {kind.value} failed: {doc.location}")
        return doc


class SimulatedProfileService:
    """Save stand-in; same single-draw contract as ``SimulatedUploadService``."""

    def __init__(
        self,
        latency: float = 1.5,
        success_rate: float = 0.9,
        rng: Optional[RandomSource] = None,
    ):
        self.latency = latency
        self.success_rate = success_rate
        self.rng = rng or random.Random()
        self.saved = []

    async def save(self, profile: Profile) -> None:
        succeeded = self.rng.random() < self.success_rate
        await asyncio.sleep(self.latency)
        if not succeeded:
            raise SaveError("Profile service unavailable")
        self.saved.append(profile.snapshot())
