"""Tests for the video operation poller: lifecycle, resume, stale results, scheduling."""

import asyncio
from datetime import datetime, timedelta

import httpx
import pytest

from promo_studio.exceptions import (
    CATEGORY_MESSAGES,
    ErrorCategory,
    GenerationError,
    PromptValidationError,
)
from promo_studio.schemas import VideoGenerationStatus, VideoJobStatus, VideoOperationState
from promo_studio.services import StorageKey, VideoOperationPoller
from promo_studio.services.video_poller import (
    DEADLINE_MESSAGE,
    NO_OUTPUT_MESSAGE,
    POLLING_STOPPED_MESSAGE,
)


def _not_done(name, **extra):
    return VideoJobStatus(done=False, handle={"name": name, **extra})


def _done(name, reference=None):
    return VideoJobStatus(
        done=True,
        handle={"name": name, "done": True},
        result_reference=reference,
    )


async def _store_state(store, state):
    await store.set(StorageKey.VIDEO_OPERATION, state.model_dump(mode="json"))


@pytest.mark.asyncio
async def test_submit_then_poll_to_success(poller, jobs, store, media):
    """Submit, one not-done poll with a refreshed handle, then done with a result."""
    jobs.submit_video_job.return_value = {"name": "op-1"}
    jobs.poll_video_job.side_effect = [
        _not_done("op-1", metadata={"progress": 40}),
        _done("op-1", reference="uri-A"),
    ]
    jobs.fetch_result.return_value = b"video-bytes"

    state = await poller.submit("cinematic rainy street")

    assert state.status == VideoGenerationStatus.GENERATING
    assert state.operation_handle == {"name": "op-1"}
    assert state.prompt == "cinematic rainy street"

    final = await poller.wait()

    assert final.status == VideoGenerationStatus.SUCCESS
    assert final.operation_handle is None
    assert final.error_detail is None
    assert final.result_locator.startswith("/media/videos/")
    assert media.resolve(final.result_locator).read_bytes() == b"video-bytes"

    polled = [call.args[0] for call in jobs.poll_video_job.await_args_list]
    assert polled == [{"name": "op-1"}, {"name": "op-1", "metadata": {"progress": 40}}]
    jobs.fetch_result.assert_awaited_once_with("uri-A")

    stored = await store.get(StorageKey.VIDEO_OPERATION)
    assert stored["status"] == "success"
    assert not poller.is_polling


@pytest.mark.asyncio
async def test_poll_transport_error_fails_and_stops(poller, jobs):
    jobs.submit_video_job.return_value = {"name": "op-2"}
    jobs.poll_video_job.side_effect = GenerationError(ErrorCategory.GENERIC, detail="connection reset")

    await poller.submit("x")
    final = await poller.wait()

    assert final.status == VideoGenerationStatus.FAILED
    assert final.error_detail == "Generation failed: connection reset"
    assert final.operation_handle is None
    assert jobs.poll_video_job.await_count == 1
    jobs.fetch_result.assert_not_awaited()
    assert not poller.is_polling


@pytest.mark.asyncio
async def test_raw_transport_exception_is_normalized(poller, jobs):
    jobs.submit_video_job.return_value = {"name": "op-3"}
    jobs.poll_video_job.side_effect = httpx.ReadTimeout("read timed out")

    await poller.submit("x")
    final = await poller.wait()

    assert final.status == VideoGenerationStatus.FAILED
    assert final.error_detail == CATEGORY_MESSAGES[ErrorCategory.TIMEOUT]


@pytest.mark.asyncio
async def test_done_without_result_has_fixed_diagnostic(poller, jobs):
    jobs.submit_video_job.return_value = {"name": "op-4"}
    jobs.poll_video_job.return_value = _done("op-4", reference=None)

    await poller.submit("x")
    final = await poller.wait()

    assert final.status == VideoGenerationStatus.FAILED
    assert final.error_detail == NO_OUTPUT_MESSAGE
    jobs.fetch_result.assert_not_awaited()


@pytest.mark.asyncio
async def test_result_fetch_error_fails(poller, jobs, media):
    jobs.submit_video_job.return_value = {"name": "op-5"}
    jobs.poll_video_job.return_value = _done("op-5", reference="uri-B")
    jobs.fetch_result.side_effect = GenerationError(ErrorCategory.PERMISSION)

    await poller.submit("x")
    final = await poller.wait()

    assert final.status == VideoGenerationStatus.FAILED
    assert final.error_detail == CATEGORY_MESSAGES[ErrorCategory.PERMISSION]
    assert list((media.media_dir / "videos").glob("*")) == []


@pytest.mark.asyncio
async def test_exactly_one_terminal_transition(poller, jobs, store):
    """Polling stops for good once a terminal state is stored."""
    jobs.submit_video_job.return_value = {"name": "op-6"}
    jobs.poll_video_job.side_effect = [
        _not_done("op-6"),
        _not_done("op-6"),
        _done("op-6", reference=None),
    ]
    transitions = []
    poller.subscribe(lambda key, value: transitions.append(value["status"]))

    await poller.submit("x")
    await poller.wait()
    for _ in range(5):
        await asyncio.sleep(0)

    assert jobs.poll_video_job.await_count == 3
    assert transitions == ["generating", "generating", "generating", "failed"]
    assert [s for s in transitions if s in ("success", "failed")] == ["failed"]
    assert not poller.is_polling


@pytest.mark.asyncio
async def test_resume_polls_stored_handle_without_submitting(jobs, store, media, settings):
    """A restarted poller picks up the persisted handle and never resubmits."""
    await _store_state(store, VideoOperationState.generating({"name": "op-7"}, prompt="x"))
    jobs.poll_video_job.return_value = _done("op-7", reference="uri-C")
    jobs.fetch_result.return_value = b"resumed"

    restarted = VideoOperationPoller(
        jobs=jobs, store=store, media=media, poll_interval=0, poll_timeout=0, settings=settings
    )
    state = await restarted.resume()
    assert state.status == VideoGenerationStatus.GENERATING

    final = await restarted.wait()

    assert final.status == VideoGenerationStatus.SUCCESS
    jobs.submit_video_job.assert_not_awaited()
    jobs.poll_video_job.assert_awaited_once_with({"name": "op-7"})


@pytest.mark.asyncio
async def test_resume_leaves_terminal_state_alone(poller, jobs, store):
    await _store_state(store, VideoOperationState.success("/media/videos/old.mp4"))

    state = await poller.resume()

    assert state.status == VideoGenerationStatus.SUCCESS
    assert not poller.is_polling
    jobs.poll_video_job.assert_not_awaited()


@pytest.mark.asyncio
async def test_stale_poll_result_is_discarded(poller, jobs, store, media):
    """A poll for op-old that lands after a resubmission must not overwrite op-new."""
    old = VideoOperationState.generating({"name": "op-old"}, prompt="old")
    new = VideoOperationState.generating({"name": "op-new"}, prompt="new")
    await _store_state(store, old)

    async def poll_while_resubmitted(handle):
        await _store_state(store, new)
        return _done("op-old", reference="uri-old")

    jobs.poll_video_job.side_effect = poll_while_resubmitted
    jobs.fetch_result.return_value = b"old-video"

    result = await poller.poll(old)

    assert result.status == VideoGenerationStatus.GENERATING
    assert result.operation_handle == {"name": "op-new"}
    stored = await poller.get_state()
    assert stored.operation_handle == {"name": "op-new"}
    assert list((media.media_dir / "videos").glob("*")) == []


@pytest.mark.asyncio
async def test_stale_failure_is_discarded(poller, jobs, store):
    old = VideoOperationState.generating({"name": "op-old"})
    await _store_state(store, old)

    async def fail_after_resubmission(handle):
        await _store_state(store, VideoOperationState.success("/media/videos/new.mp4"))
        raise GenerationError(ErrorCategory.GENERIC, detail="late error")

    jobs.poll_video_job.side_effect = fail_after_resubmission

    result = await poller.poll(old)

    assert result.status == VideoGenerationStatus.SUCCESS
    assert result.result_locator == "/media/videos/new.mp4"


@pytest.mark.asyncio
async def test_poll_rejects_non_generating_state(poller):
    with pytest.raises(ValueError):
        await poller.poll(VideoOperationState.idle())


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "previous",
    [
        VideoOperationState.success("/media/videos/previous.mp4", prompt="old"),
        VideoOperationState.failed("Generation failed: earlier", prompt="old"),
    ],
)
async def test_resubmission_resets_previous_result(poller, jobs, store, previous):
    await _store_state(store, previous)
    jobs.submit_video_job.return_value = {"name": "op-fresh"}
    jobs.poll_video_job.return_value = _done("op-fresh", reference=None)

    state = await poller.submit("new prompt")

    assert state.status == VideoGenerationStatus.GENERATING
    assert state.operation_handle == {"name": "op-fresh"}
    assert state.result_locator is None
    assert state.error_detail is None
    assert state.prompt == "new prompt"

    await poller.wait()


@pytest.mark.asyncio
async def test_resubmission_mid_flight_replaces_schedule(jobs, store, media, settings):
    """The old operation stops being polled once a new one is submitted."""
    poller = VideoOperationPoller(
        jobs=jobs, store=store, media=media, poll_interval=3600, poll_timeout=0, settings=settings
    )
    polled = []
    first_polled = asyncio.Event()
    second_polled = asyncio.Event()

    async def record(handle):
        polled.append(handle["name"])
        (first_polled if len(polled) == 1 else second_polled).set()
        return _not_done(handle["name"])

    jobs.poll_video_job.side_effect = record
    jobs.submit_video_job.side_effect = [{"name": "op-a"}, {"name": "op-b"}]

    await poller.submit("first")
    await asyncio.wait_for(first_polled.wait(), timeout=1)
    state = await poller.submit("second")
    await asyncio.wait_for(second_polled.wait(), timeout=1)

    assert state.operation_handle == {"name": "op-b"}
    assert polled == ["op-a", "op-b"]
    assert (await poller.get_state()).operation_handle == {"name": "op-b"}

    await poller.close()
    assert not poller.is_polling
    assert (await poller.get_state()).status == VideoGenerationStatus.GENERATING


@pytest.mark.asyncio
async def test_empty_prompt_never_reaches_generating(poller, jobs):
    with pytest.raises(PromptValidationError):
        await poller.submit("   ")

    jobs.submit_video_job.assert_not_awaited()
    assert (await poller.get_state()).status == VideoGenerationStatus.IDLE


@pytest.mark.asyncio
async def test_submission_error_fails_without_handle(poller, jobs, store):
    jobs.submit_video_job.side_effect = GenerationError(ErrorCategory.QUOTA)

    state = await poller.submit("x")

    assert state.status == VideoGenerationStatus.FAILED
    assert state.operation_handle is None
    assert state.error_detail == CATEGORY_MESSAGES[ErrorCategory.QUOTA]
    assert not poller.is_polling
    jobs.poll_video_job.assert_not_awaited()
    assert (await store.get(StorageKey.VIDEO_OPERATION))["status"] == "failed"


@pytest.mark.asyncio
async def test_deadline_fails_long_running_job(jobs, store, media, settings):
    submitted = datetime.utcnow() - timedelta(seconds=120)
    await _store_state(
        store,
        VideoOperationState.generating({"name": "op-slow"}, submitted_at=submitted),
    )
    poller = VideoOperationPoller(
        jobs=jobs, store=store, media=media, poll_interval=0, poll_timeout=60, settings=settings
    )

    await poller.resume()
    final = await poller.wait()

    assert final.status == VideoGenerationStatus.FAILED
    assert final.error_detail == DEADLINE_MESSAGE
    jobs.poll_video_job.assert_not_awaited()


@pytest.mark.asyncio
async def test_unreadable_stored_state_reads_as_idle(poller, store):
    await store.set(StorageKey.VIDEO_OPERATION, {"status": "success"})

    state = await poller.get_state()

    assert state.status == VideoGenerationStatus.IDLE


@pytest.mark.asyncio
async def test_resubmission_discards_previous_video_file(poller, jobs, store, media):
    locator = await media.save_video(b"old-video")
    await _store_state(store, VideoOperationState.success(locator, prompt="old"))
    jobs.submit_video_job.return_value = {"name": "op-next"}
    jobs.poll_video_job.return_value = _not_done("op-next")

    await poller.submit("new prompt")
    await poller.close()

    assert media.resolve(locator).exists() is False


@pytest.mark.asyncio
async def test_cancel_before_commit_removes_fetched_file(poller, jobs, store, media):
    state = VideoOperationState.generating({"name": "op-8"})
    await _store_state(store, state)
    jobs.poll_video_job.return_value = _done("op-8", reference="uri-D")
    jobs.fetch_result.return_value = b"video-bytes"
    videos = media.media_dir / "videos"

    async with poller._lock:
        task = asyncio.create_task(poller.poll(state))
        for _ in range(200):
            if list(videos.glob("*.mp4")):
                break
            await asyncio.sleep(0.01)
        assert len(list(videos.glob("*.mp4"))) == 1
        task.cancel()
        await asyncio.wait([task])

    assert task.cancelled()
    assert list(videos.glob("*")) == []
    assert (await poller.get_state()).operation_handle == {"name": "op-8"}


@pytest.mark.asyncio
async def test_storage_failure_stops_polling_visibly(poller, jobs, store, monkeypatch):
    """A state write that fails ends the schedule with a reason; resume() restarts it."""
    jobs.submit_video_job.return_value = {"name": "op-9"}
    original_set = store.set
    pending_failures = []

    async def flaky_set(key, value):
        if pending_failures:
            pending_failures.pop()
            raise OSError("disk full")
        await original_set(key, value)

    monkeypatch.setattr(store, "set", flaky_set)

    async def poll_then_fail_write(handle):
        pending_failures.append(True)
        return _not_done("op-9")

    jobs.poll_video_job.side_effect = poll_then_fail_write

    await poller.submit("x")
    stalled = await poller.wait()

    assert stalled.status == VideoGenerationStatus.GENERATING
    assert not poller.is_polling
    assert poller.polling_error == POLLING_STOPPED_MESSAGE.format(
        error="Generation failed: disk full"
    )

    jobs.poll_video_job.side_effect = None
    jobs.poll_video_job.return_value = _done("op-9", reference=None)

    await poller.resume()
    assert poller.polling_error is None
    final = await poller.wait()

    assert final.status == VideoGenerationStatus.FAILED
    assert final.error_detail == NO_OUTPUT_MESSAGE
