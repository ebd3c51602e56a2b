import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Optional

from climate_jobs.models.submission_schema import ProofMedia
from climate_jobs.services.verification import ProofVerifier
from climate_jobs.utils.logger import get_logger


logger = get_logger("workflow-registry")


@dataclass
class Workflow:
    id: str
    verifier: ProofVerifier
    media: Optional[ProofMedia] = None
    touched: float = field(default_factory=time.monotonic)


class WorkflowRegistry:
    """In-process map of workflow id → Workflow; idle workflows expire after ``ttl`` seconds."""

    def __init__(self, factory: Callable[[], ProofVerifier], ttl: float = 3600.0):
        self.factory = factory
        self.ttl = ttl
        self._lock = threading.Lock()
        self._items: dict[str, Workflow] = {}

    def create(self) -> Workflow:
        wf = Workflow(id=uuid.uuid4().hex, verifier=self.factory())
        with self._lock:
            self._evict(wf.touched)
            self._items[wf.id] = wf
        logger.info("Workflow %s created", wf.id)
        return wf

    def get(self, workflow_id: str) -> Optional[Workflow]:
        with self._lock:
            wf = self._items.get(workflow_id)
            if not wf:
                return None
            now = time.monotonic()
            if now - wf.touched > self.ttl:
                del self._items[workflow_id]
                logger.info("Workflow %s expired", workflow_id)
                return None
            wf.touched = now
            return wf

    def attach_media(self, workflow_id: str, media: ProofMedia) -> None:
        """Record the latest proof upload; replaces any earlier one."""
        with self._lock:
            wf = self._items.get(workflow_id)
            if wf:
                wf.media = media

    def discard(self, workflow_id: str) -> None:
        with self._lock:
            self._items.pop(workflow_id, None)

    def __len__(self) -> int:
        return len(self._items)

    def _evict(self, now: float) -> None:
        stale = [k for k, wf in self._items.items() if now - wf.touched > self.ttl]
        for k in stale:
            del self._items[k]
        if stale:
            logger.info("Expired %d idle workflow(s)", len(stale))
