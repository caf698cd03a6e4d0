# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Batch orchestrator tests.
Covers grouping, order preservation under uneven latency, per-item
failure isolation, progress notifications, cancellation, and the
end-to-end three-image scenario.
"""

import asyncio
import threading
import time

import cv2
import numpy as np
import pytest


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _noise(h: int, w: int, seed: int = 11) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.integers(0, 200, (h, w, 3), dtype=np.uint8)


def _encode(img: np.ndarray, ext: str = ".png") -> bytes:
    _, buf = cv2.imencode(ext, img)
    return buf.tobytes()


def _bordered_png(size: int = 300, border: int = 30) -> bytes:
    img = np.full((size, size, 3), 255, dtype=np.uint8)
    img[border:size - border, border:size - border] = _noise(
        size - 2 * border, size - 2 * border
    )
    return _encode(img)


def _tasks(n: int, bad: tuple = ()) -> list:
    from borderfit.models.result import ImageTask
    tasks = []
    for i in range(n):
        data = b"corrupted bytes" if i in bad else _encode(_noise(60, 80, seed=i))
        tasks.append(ImageTask(raw_bytes=data, filename=f"img_{i}.png"))
    return tasks


def _decode(data: bytes) -> np.ndarray:
    return cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_UNCHANGED)


# ─── Partitioning ────────────────────────────────────────────────────────────

def test_partition_keeps_order_and_size():
    from borderfit.core.batch import partition
    groups = partition(list(range(7)), 3)
    assert groups == [[0, 1, 2], [3, 4, 5], [6]]


def test_partition_batch_larger_than_input():
    from borderfit.core.batch import partition
    assert partition([1, 2], 10) == [[1, 2]]


# ─── Failure isolation ───────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_corrupted_image_fails_alone():
    from borderfit.core.batch import process_all
    tasks = _tasks(5, bad=(2,))
    results, summary = await process_all(tasks, batch_size=5)

    assert summary.total == 5
    assert summary.success == 4
    assert summary.failures == 1
    assert summary.errors[0].startswith("img_2.png: ")
    for i in (0, 1, 3, 4):
        assert results[i].ok
        assert _decode(results[i].buffer).shape[:2] == (800, 800)
    assert results[2].buffer is None
    assert results[2].error
    assert results[2].original == b"corrupted bytes"


@pytest.mark.asyncio
@pytest.mark.parametrize("batch_size", [1, 2, 3, 5, 50])
async def test_summary_counts_add_up(batch_size):
    from borderfit.core.batch import process_all
    tasks = _tasks(5, bad=(0, 4))
    results, summary = await process_all(tasks, batch_size=batch_size)

    assert summary.success + summary.failures == summary.total == len(results)
    assert summary.failures == 2
    for r in results:
        assert (r.buffer is None) != (r.error is None)


@pytest.mark.asyncio
async def test_unexpected_exception_is_captured(monkeypatch):
    from borderfit.core import batch

    def exploding_normalize(raw_bytes, filename, options, policy):
        if filename == "img_1.png":
            raise MemoryError()
        return b"ok"

    monkeypatch.setattr(batch, "normalize", exploding_normalize)
    results, summary = await batch.process_all(_tasks(3), batch_size=3)
    assert summary.success == 2
    assert results[1].error == "MemoryError"
    assert summary.errors == ["img_1.png: MemoryError"]


# ─── Ordering and concurrency ────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_results_follow_input_order_under_uneven_latency(monkeypatch):
    from borderfit.core import batch

    def slow_first(raw_bytes, filename, options, policy):
        index = int(filename.split("_")[1].split(".")[0])
        time.sleep(0.05 * (4 - index % 5))
        return filename.encode()

    monkeypatch.setattr(batch, "normalize", slow_first)
    tasks = _tasks(10)
    results, _ = await batch.process_all(tasks, batch_size=5)
    assert [r.filename for r in results] == [t.filename for t in tasks]
    assert [r.buffer for r in results] == [t.filename.encode() for t in tasks]


@pytest.mark.asyncio
async def test_concurrency_capped_at_batch_size(monkeypatch):
    from borderfit.core import batch

    lock = threading.Lock()
    active = 0
    peak = 0

    def tracking_normalize(raw_bytes, filename, options, policy):
        nonlocal active, peak
        with lock:
            active += 1
            peak = max(peak, active)
        time.sleep(0.02)
        with lock:
            active -= 1
        return b"ok"

    monkeypatch.setattr(batch, "normalize", tracking_normalize)
    await batch.process_all(_tasks(9), batch_size=2)
    assert 1 <= peak <= 2


# ─── Progress ────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_progress_reported_after_each_group():
    from borderfit.core.batch import process_all
    updates = []
    await process_all(_tasks(5, bad=(1,)), batch_size=2, progress_callback=updates.append)

    assert [u.current_batch for u in updates] == [1, 2, 3]
    assert all(u.total_batches == 3 and u.total == 5 for u in updates)
    assert [u.processed for u in updates] == [2, 4, 5]
    assert updates[-1].successful == 4
    assert updates[-1].failed == 1
    assert updates[0].errors[0].startswith("img_1.png: ")


@pytest.mark.asyncio
async def test_progress_error_tail_is_bounded():
    from borderfit.core.batch import RECENT_ERROR_COUNT, process_all
    updates = []
    await process_all(
        _tasks(7, bad=tuple(range(7))), batch_size=1, progress_callback=updates.append
    )
    assert len(updates[-1].errors) == RECENT_ERROR_COUNT
    assert updates[-1].errors[-1].startswith("img_6.png: ")


@pytest.mark.asyncio
async def test_failing_progress_callback_does_not_abort():
    from borderfit.core.batch import process_all

    def broken_callback(progress):
        raise RuntimeError("ui went away")

    results, summary = await process_all(
        _tasks(4), batch_size=2, progress_callback=broken_callback
    )
    assert summary.success == 4


# ─── Cancellation ────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_cancel_stops_scheduling_further_groups():
    from borderfit.core.batch import CANCELLED_MESSAGE, process_all
    cancel = asyncio.Event()

    def cancel_after_first(progress):
        cancel.set()

    results, summary = await process_all(
        _tasks(6), batch_size=2, progress_callback=cancel_after_first, cancel_event=cancel
    )
    assert len(results) == 6
    assert all(r.ok for r in results[:2])
    assert all(r.error == CANCELLED_MESSAGE for r in results[2:])
    assert summary.success == 2
    assert summary.failures == 4


# ─── Systemic errors ─────────────────────────────────────────────────────────

@pytest.mark.asyncio
@pytest.mark.parametrize("batch_size", [0, -1])
async def test_invalid_batch_size_raises(batch_size):
    from borderfit.core.batch import process_all
    from borderfit.core.errors import PipelineError
    with pytest.raises(PipelineError, match="batch_size"):
        await process_all(_tasks(2), batch_size=batch_size)


@pytest.mark.asyncio
async def test_malformed_task_list_raises():
    from borderfit.core.batch import process_all
    from borderfit.core.errors import PipelineError
    with pytest.raises(PipelineError, match="ImageTask"):
        await process_all([b"raw bytes"], batch_size=2)


@pytest.mark.asyncio
@pytest.mark.parametrize("tasks", [None, 42])
async def test_non_iterable_tasks_raises(tasks):
    from borderfit.core.batch import process_all
    from borderfit.core.errors import PipelineError
    with pytest.raises(PipelineError, match="iterable"):
        await process_all(tasks, batch_size=2)


@pytest.mark.asyncio
async def test_empty_task_list():
    from borderfit.core.batch import process_all
    results, summary = await process_all([], batch_size=3)
    assert results == []
    assert summary.total == 0


# ─── End-to-end ──────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_end_to_end_three_images():
    from borderfit.core.batch import process_all
    from borderfit.models.options import NormalizationOptions
    from borderfit.models.result import ImageTask

    bordered = np.full((1200, 1200, 3), 255, dtype=np.uint8)
    bordered[50:1150, 50:1150] = _noise(1100, 1100)
    tasks = [
        ImageTask(raw_bytes=_encode(bordered), filename="bordered.png"),
        ImageTask(raw_bytes=_encode(_noise(600, 800), ".jpg"), filename="photo.jpg"),
        ImageTask(raw_bytes=b"\x00\x01garbage", filename="bad.png"),
    ]
    results, summary = await process_all(tasks, NormalizationOptions(), batch_size=2)

    assert (summary.total, summary.success, summary.failures) == (3, 2, 1)
    assert summary.errors[0].startswith("bad.png: Could not decode image")
    assert _decode(results[0].buffer).shape[:2] == (800, 800)
    assert _decode(results[1].buffer).shape[:2] == (800, 800)
    assert results[2].error is not None


def test_process_all_sync_without_event_loop():
    from borderfit.core.batch import process_all_sync
    from borderfit.models.result import ImageTask
    tasks = [ImageTask(raw_bytes=_bordered_png(), filename="b.png")]
    results, summary = process_all_sync(tasks, batch_size=1)
    assert summary.success == 1
    assert _decode(results[0].buffer).shape[:2] == (800, 800)
