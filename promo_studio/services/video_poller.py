"""
Video Operation Poller - drives a long-running video generation job to completion

The job state lives in the view state store and is written on every
transition. A restart calls resume(), which polls the stored handle again
without resubmitting the prompt.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Tuple

from pydantic import ValidationError

from ..config import Settings, get_settings
from ..exceptions import normalize_error
from ..gemini_client import AsyncVideoJobManager
from ..schemas.video import OperationHandle, VideoOperationState
from ..utils.validation import require_prompt
from .media_store import MediaStore
from .view_state import StorageKey, ViewStateStore

logger = logging.getLogger(__name__)

NO_OUTPUT_MESSAGE = "Video generation completed but produced no output."
DEADLINE_MESSAGE = "Video generation did not finish in time and was abandoned."
POLLING_STOPPED_MESSAGE = "Video status polling stopped: {error}"


class VideoOperationPoller:
    """Owns the lifecycle of the single video generation slot"""

    def __init__(
        self,
        jobs: AsyncVideoJobManager,
        store: ViewStateStore,
        media: MediaStore,
        poll_interval: Optional[float] = None,
        poll_timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
        state_key: str = StorageKey.VIDEO_OPERATION,
    ):
        """
        Args:
            jobs: video job manager (submit / poll / fetch)
            store: persisted view state store
            media: where fetched videos are written
            poll_interval: seconds between status checks, default from settings
            poll_timeout: overall deadline in seconds from submission, 0 disables
            settings: settings object
            state_key: store key of the operation state
        """
        settings = settings or get_settings()
        self.jobs = jobs
        self.store = store
        self.media = media
        self.poll_interval = settings.video_poll_interval if poll_interval is None else poll_interval
        self.poll_timeout = settings.video_poll_timeout if poll_timeout is None else poll_timeout
        self.state_key = state_key

        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None
        self._submissions = 0
        self._polling_error: Optional[str] = None

    @property
    def is_polling(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def polling_error(self) -> Optional[str]:
        """Why the last schedule stopped before a terminal state, if it did"""
        return self._polling_error

    async def get_state(self) -> VideoOperationState:
        """Current stored state; idle when nothing (or nothing readable) is stored"""
        raw = await self.store.get(self.state_key)
        if raw is None:
            return VideoOperationState.idle()
        try:
            return VideoOperationState.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"[video] ignoring invalid stored state: {e}")
            return VideoOperationState.idle()

    def subscribe(self, listener: Callable[[str, Any], Any]) -> Callable[[], None]:
        """Notify listener with the serialized state after each transition"""
        return self.store.subscribe(self.state_key, listener)

    async def _save(self, state: VideoOperationState) -> None:
        await self.store.set(self.state_key, state.model_dump(mode="json"))

    async def submit(self, prompt: str) -> VideoOperationState:
        """
        Start a new video job, abandoning whatever the slot held before

        Args:
            prompt: text description of the video

        Returns:
            generating state with the new handle, or failed if the service
            rejected the request

        Raises:
            PromptValidationError: prompt is blank; nothing is sent or stored
        """
        prompt = require_prompt(prompt)

        self._submissions += 1
        ticket = self._submissions
        self._cancel_schedule()

        logger.info(f"[video] submitting job: {prompt[:50]}...")
        try:
            handle = await self.jobs.submit_video_job(prompt)
        except Exception as e:
            message = normalize_error(e)
            logger.error(f"[video] submission failed: {type(e).__name__}: {e}")
            state = VideoOperationState.failed(message, prompt=prompt)
        else:
            state = VideoOperationState.generating(handle, prompt=prompt)

        async with self._lock:
            if ticket != self._submissions:
                logger.info("[video] submission superseded by a newer one")
                return await self.get_state()
            previous = await self.get_state()
            await self._save(state)

        if previous.result_locator:
            self.media.discard(previous.result_locator)
        if state.is_generating:
            self._schedule(state)
        return state

    async def poll(self, state: VideoOperationState) -> VideoOperationState:
        """
        Check a generating operation once and apply the outcome

        Returns:
            The new state, or the stored state unchanged when the polled
            handle is no longer the current one
        """
        new_state, _ = await self._poll_once(state)
        return new_state

    async def _poll_once(self, state: VideoOperationState) -> Tuple[VideoOperationState, bool]:
        if not state.is_generating:
            raise ValueError(f"Cannot poll a video operation in state {state.status.value}")

        handle = state.operation_handle
        locator = None
        try:
            status = await self.jobs.poll_video_job(handle)
            if not status.done:
                new_state = VideoOperationState.generating(
                    status.handle or handle,
                    prompt=state.prompt,
                    submitted_at=state.submitted_at,
                )
            elif not status.result_reference:
                logger.warning("[video] operation finished without a result")
                new_state = VideoOperationState.failed(NO_OUTPUT_MESSAGE, prompt=state.prompt)
            else:
                payload = await self.jobs.fetch_result(status.result_reference)
                locator = await self.media.save_video(payload)
                new_state = VideoOperationState.success(locator, prompt=state.prompt)
        except Exception as e:
            logger.error(f"[video] status check failed: {type(e).__name__}: {e}")
            new_state = VideoOperationState.failed(normalize_error(e), prompt=state.prompt)

        try:
            accepted = await self._commit(handle, new_state)
        finally:
            # Covers rejection, a failed write and cancellation mid-commit
            if locator and not self._is_stored_locator(locator):
                self.media.discard(locator)

        if not accepted:
            return await self.get_state(), False

        if new_state.is_terminal:
            logger.info(f"[video] operation finished: {new_state.status.value}")
        return new_state, True

    async def _commit(self, polled_handle: OperationHandle, new_state: VideoOperationState) -> bool:
        """Store new_state only if polled_handle is still the current handle"""
        async with self._lock:
            current = await self.get_state()
            if not current.is_generating or current.operation_handle != polled_handle:
                logger.info("[video] discarding result for a superseded operation")
                return False
            await self._save(new_state)
            return True

    def _is_stored_locator(self, locator: str) -> bool:
        stored = self.store.peek(self.state_key) or {}
        return stored.get("result_locator") == locator

    def _deadline_passed(self, state: VideoOperationState) -> bool:
        if not self.poll_timeout or state.submitted_at is None:
            return False
        return datetime.utcnow() - state.submitted_at > timedelta(seconds=self.poll_timeout)

    async def _run(self, state: VideoOperationState) -> None:
        """Poll now, then every poll_interval seconds, until a terminal state"""
        logger.info("[video] polling started")
        try:
            while state.is_generating:
                if self._deadline_passed(state):
                    logger.warning(f"[video] no result after {self.poll_timeout:.0f}s, giving up")
                    failed = VideoOperationState.failed(DEADLINE_MESSAGE, prompt=state.prompt)
                    await self._commit(state.operation_handle, failed)
                    return

                state, accepted = await self._poll_once(state)
                if not accepted:
                    return
                if state.is_generating:
                    await asyncio.sleep(self.poll_interval)
        except Exception as e:
            # The state could not be stored; the slot stays generating until resume()
            self._polling_error = POLLING_STOPPED_MESSAGE.format(error=normalize_error(e))
            logger.error(f"[video] polling stopped: {type(e).__name__}: {e}", exc_info=True)

    def _schedule(self, state: VideoOperationState) -> None:
        self._cancel_schedule()
        self._polling_error = None
        task = asyncio.create_task(self._run(state), name="video-operation-poller")
        task.add_done_callback(self._on_task_done)
        self._task = task

    def _on_task_done(self, task: asyncio.Task) -> None:
        if self._task is task:
            self._task = None
        if not task.cancelled() and task.exception() is not None:
            logger.error(
                "[video] polling stopped unexpectedly",
                exc_info=task.exception(),
            )

    def _cancel_schedule(self) -> None:
        if self._task is not None and not self._task.done():
            logger.info("[video] cancelling current polling schedule")
            self._task.cancel()
        self._task = None

    async def resume(self) -> VideoOperationState:
        """
        Pick up a job that was generating before a restart, or whose
        polling stopped after a storage error

        Only polls the stored handle; the prompt is never resubmitted.
        """
        state = await self.get_state()
        if state.is_generating and not self.is_polling:
            logger.info("[video] resuming stored operation")
            self._schedule(state)
        return state

    async def wait(self) -> VideoOperationState:
        """Wait for the current schedule to end and return the stored state"""
        task = self._task
        if task is not None:
            await asyncio.wait([task])
        return await self.get_state()

    async def close(self) -> None:
        """Stop polling; a generating state stays stored for the next resume"""
        task = self._task
        self._cancel_schedule()
        if task is not None:
            await asyncio.wait([task])
