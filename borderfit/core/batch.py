# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Borderfit — Batch Orchestrator
Drives the normalizer over many images in bounded concurrent groups.

  - Tasks are split into consecutive groups of at most batch_size.
  - Groups run one after another; inside a group every image is
    normalized in a worker thread and the group is awaited as a whole.
  - Each image fails on its own. A failure becomes a ProcessingResult
    with error set and never reaches sibling tasks or later groups.
  - results[i] always belongs to tasks[i].
  - After each group the optional progress callback receives cumulative
    counts and the last few error strings.

Only malformed input (batch_size < 1, a non-ImageTask entry) raises
PipelineError. Setting cancel_event stops scheduling further groups;
in-flight images finish and unscheduled ones are reported as failed.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Callable, Iterable, Optional

import structlog

from borderfit.config import get_settings
from borderfit.core.errors import PipelineError
from borderfit.models.options import NormalizationOptions
from borderfit.models.result import (
    BatchProgress,
    BatchSummary,
    ImageTask,
    ProcessingResult,
)
from borderfit.modules.border.classifier import BorderPolicy
from borderfit.modules.normalization.normalizer import normalize
from borderfit.utils.logger import get_logger

log = get_logger(__name__)

ProgressCallback = Callable[[BatchProgress], None]

# Error strings carried in each progress notification
RECENT_ERROR_COUNT = 5
CANCELLED_MESSAGE = "cancelled before processing"


def _error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _validate_batch(tasks: list, batch_size: int) -> None:
    if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size < 1:
        raise PipelineError(f"batch_size must be a positive integer, got {batch_size!r}.")
    for index, task in enumerate(tasks):
        if not isinstance(task, ImageTask):
            raise PipelineError(
                f"Task at index {index} is {type(task).__name__}, expected ImageTask."
            )


def partition(tasks: list, batch_size: int) -> list[list]:
    """Consecutive groups of at most batch_size, original order kept."""
    return [tasks[i:i + batch_size] for i in range(0, len(tasks), batch_size)]


def process_task(
    task: ImageTask,
    options: NormalizationOptions,
    policy: BorderPolicy,
) -> ProcessingResult:
    """Normalize one task, capturing any failure into the result."""
    try:
        buffer = normalize(task.raw_bytes, task.filename, options, policy)
    except Exception as exc:
        log.warning(
            "task_failed",
            filename=task.filename,
            error=_error_message(exc),
            exc_type=type(exc).__name__,
        )
        return ProcessingResult.failure(
            task.filename, _error_message(exc), original=task.raw_bytes
        )
    return ProcessingResult.success(task.filename, buffer)


def _notify(callback: ProgressCallback, progress: BatchProgress) -> None:
    try:
        callback(progress)
    except Exception as exc:
        log.warning(
            "progress_callback_failed",
            error=_error_message(exc),
            exc_type=type(exc).__name__,
        )


async def process_all(
    tasks: Iterable[ImageTask],
    options: NormalizationOptions | None = None,
    batch_size: int | None = None,
    progress_callback: Optional[ProgressCallback] = None,
    cancel_event: Optional[asyncio.Event] = None,
    policy: BorderPolicy | None = None,
) -> tuple[list[ProcessingResult], BatchSummary]:
    """
    Normalize every task and return (results, summary).

    Args:
        tasks:             Images to process; results keep this order.
        options:           Shared read-only options; defaults from settings.
        batch_size:        Max images normalized concurrently; defaults
                           from settings (5).
        progress_callback: Called synchronously after each group. Keep it
                           fast — the next group waits for it.
        cancel_event:      When set, no further group is started.
        policy:            Border heuristics; defaults from settings.

    Raises:
        PipelineError: batch_size < 1 or a task is not an ImageTask.
    """
    settings = get_settings()
    options = options or NormalizationOptions.from_settings(settings)
    policy = policy or BorderPolicy.from_settings(settings)
    batch_size = settings.batch_size if batch_size is None else batch_size

    try:
        tasks = list(tasks)
    except TypeError as exc:
        raise PipelineError(
            f"tasks must be an iterable of ImageTask, got {type(tasks).__name__}."
        ) from exc
    _validate_batch(tasks, batch_size)
    groups = partition(tasks, batch_size)
    total_batches = len(groups)

    structlog.contextvars.bind_contextvars(batch_id=uuid.uuid4().hex[:12])
    try:
        log.info(
            "batch_start",
            total=len(tasks),
            batch_size=batch_size,
            total_batches=total_batches,
            resize=options.resize.mode.value,
        )

        results: list[ProcessingResult] = []
        errors: list[str] = []
        for current_batch, group in enumerate(groups, start=1):
            if cancel_event is not None and cancel_event.is_set():
                remaining = tasks[len(results):]
                log.warning(
                    "batch_cancelled",
                    current_batch=current_batch,
                    skipped=len(remaining),
                )
                results.extend(
                    ProcessingResult.failure(
                        t.filename, CANCELLED_MESSAGE, original=t.raw_bytes
                    )
                    for t in remaining
                )
                break

            group_results = await asyncio.gather(
                *(asyncio.to_thread(process_task, t, options, policy) for t in group)
            )
            results.extend(group_results)
            errors.extend(f"{r.filename}: {r.error}" for r in group_results if not r.ok)

            successful = len(results) - len(errors)
            log.info(
                "batch_group_complete",
                current_batch=current_batch,
                total_batches=total_batches,
                processed=len(results),
                successful=successful,
                failed=len(errors),
            )

            if progress_callback is not None:
                _notify(
                    progress_callback,
                    BatchProgress(
                        total=len(tasks),
                        processed=len(results),
                        successful=successful,
                        failed=len(errors),
                        current_batch=current_batch,
                        total_batches=total_batches,
                        errors=errors[-RECENT_ERROR_COUNT:],
                    ),
                )

        if len(results) != len(tasks):
            raise PipelineError(
                f"Produced {len(results)} results for {len(tasks)} tasks."
            )
        summary = BatchSummary.from_results(results)
        log.info(
            "batch_complete",
            total=summary.total,
            success=summary.success,
            failures=summary.failures,
        )
        return results, summary
    finally:
        structlog.contextvars.unbind_contextvars("batch_id")


def process_all_sync(
    tasks: Iterable[ImageTask],
    options: NormalizationOptions | None = None,
    batch_size: int | None = None,
    progress_callback: Optional[ProgressCallback] = None,
    policy: BorderPolicy | None = None,
) -> tuple[list[ProcessingResult], BatchSummary]:
    """Blocking wrapper around process_all for callers without an event loop."""
    return asyncio.run(
        process_all(
            tasks,
            options=options,
            batch_size=batch_size,
            progress_callback=progress_callback,
            policy=policy,
        )
    )
