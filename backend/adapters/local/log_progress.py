"""LogProgressAdapter — reports pipeline stages via logging, with elapsed time per job."""

import logging
import time
from typing import Optional

from ports.progress import ProgressPort

logger = logging.getLogger(__name__)

FINAL_STAGES = ("done", "failed")


class LogProgressAdapter(ProgressPort):
    def __init__(self):
        self._started: dict[str, float] = {}

    def report(
        self,
        job_id: str,
        stage: str,
        progress: float = 0.0,
        detail: Optional[str] = None,
    ) -> None:
        started = self._started.setdefault(job_id, time.monotonic())
        elapsed = time.monotonic() - started

        parts = [f"[{job_id}] {stage}"]
        if progress > 0:
            parts.append(f"{progress:.0%}")
        if detail:
            parts.append(f"({detail})")
        parts.append(f"+{elapsed:.1f}s")
        logger.info(" ".join(parts))

        if stage in FINAL_STAGES:
            self._started.pop(job_id, None)
