"""
Run many thumbnail tasks on a thread pool.

Each task owns its source, sink and rasters, so tasks share nothing and can
run side by side. Cancellation is cooperative: tasks that have not started
when the event is set are skipped, running ones finish.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List

from thumbnailer.services.thumbnail_service import create_thumbnail
from thumbnailer.tasks.task import ThumbnailTask

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[Dict[str, Any]], None]


@dataclass
class BatchResult:
    """Outcome of one batch run."""

    total: int
    processed: int = 0
    failed: int = 0
    cancelled: int = 0
    errors: list[str] = field(default_factory=list)
    destinations: list[Any] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed == 0


class BatchService:
    """Thread-pool runner for independent thumbnail tasks."""

    def __init__(self, max_workers: int = 2) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.max_workers = max_workers

    def run(
        self,
        tasks: Iterable[ThumbnailTask],
        progress_cb: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> BatchResult:
        task_list: List[ThumbnailTask] = list(tasks)
        result = BatchResult(total=len(task_list))
        LOGGER.info("Batch started: %d tasks on %d workers", result.total, self.max_workers)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures: dict[Future, ThumbnailTask] = {
                executor.submit(self._run_one, task, cancel_event): task for task in task_list
            }
            for future in as_completed(futures):
                task = futures[future]
                try:
                    ran = future.result()
                except Exception as exc:
                    result.failed += 1
                    result.errors.append(f"{task.source}: {exc}")
                    LOGGER.warning("Thumbnail failed for %s: %s", task.source, exc)
                else:
                    if ran:
                        result.processed += 1
                        result.destinations.append(task.destination)
                    else:
                        result.cancelled += 1
                progress = {
                    "total": result.total,
                    "processed": result.processed,
                    "failed": result.failed,
                    "cancelled": result.cancelled,
                }
                if progress_cb:
                    progress_cb(progress)

        LOGGER.info(
            "Batch finished: %d processed, %d failed, %d cancelled",
            result.processed,
            result.failed,
            result.cancelled,
        )
        return result

    @staticmethod
    def _run_one(task: ThumbnailTask, cancel_event: threading.Event | None) -> bool:
        if cancel_event is not None and cancel_event.is_set():
            return False
        create_thumbnail(task)
        return True
