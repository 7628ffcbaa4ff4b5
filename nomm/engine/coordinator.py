# Path: nomm/engine/coordinator.py
"""
Install Coordinator

Main workflow orchestrator for install operations.
Coordinates: fetch -> reset directory -> extract -> continuation -> clear state.

Architecture:
- One asyncio.Lock per target identifier, created lazily and shared
  by every caller: at most one fetch/extract sequence per target
- Task State published before any work and removed when the last
  operation on that target ends (success, failure or cancellation)
- Cancellation wired through the task handle; honored only while
  downloading
- Extraction and directory cleanup run on a bounded thread pool, off
  the event loop
- A failed non-protected install leaves no target directory behind
- IPO logging throughout
"""

import asyncio
import inspect
import shutil
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Union

from nomm.core.logger import get_logger
from nomm.core.config_loader import ConfigLoader
from nomm.engine.archive_downloader import ArchiveDownloader
from nomm.engine.extraction.archive_handler import ArchiveHandler
from nomm.engine.result import ExtractionResult, InstallResult
from nomm.engine.task_state import TaskPhase, TaskState, TaskStateStore
from nomm.engine.constants import INSTALL_TASK_PREFIX, EXTRACTION_THREAD_PREFIX
from nomm.constants import (
    DEFAULT_MAX_CONCURRENT,
    LOG_INPUT,
    LOG_PROCESS,
    LOG_OUTPUT,
)

logger = get_logger(__name__, 'engine')

SuccessContinuation = Callable[[InstallResult], Union[Any, Awaitable[Any]]]


class InstallCoordinator:
    """
    Coordinates the install of one target at a time per identifier.

    Workflow (inside the target lock):
    1. Fetch the payload, publishing download progress
    2. Ensure the target directory exists (emptied first when clean_target)
    3. Extract (not cancellable)
    4. Run the success continuation
    5. Clear the Task State entry

    Errors other than cancellation become a terminal Task State
    (Extracting, error set) just before the entry is cleared.
    The target directory of a failed non-protected install is deleted.

    Example:
        coordinator = InstallCoordinator(store)
        task = coordinator.install('MyMod', url, target_dir, on_success=write_meta)
        result = await task
    """

    def __init__(
        self,
        store: Optional[TaskStateStore] = None,
        downloader: Optional[ArchiveDownloader] = None,
        archive_handler: Optional[ArchiveHandler] = None,
        config: Optional[ConfigLoader] = None
    ):
        """
        Initialize install coordinator.

        Args:
            store: Task State Store observed by the UI
            downloader: Archive fetcher (with retry)
            archive_handler: Payload extractor
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()
        self.store = store if store is not None else TaskStateStore()
        self.downloader = downloader if downloader else ArchiveDownloader(config=self.config)
        self.archive_handler = archive_handler if archive_handler else ArchiveHandler(self.config)

        max_workers = max(1, self.config.get('max_concurrent', DEFAULT_MAX_CONCURRENT))
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=EXTRACTION_THREAD_PREFIX
        )

        self._locks: dict[str, asyncio.Lock] = {}
        self._queues: dict[str, list[asyncio.Task]] = {}
        self._tasks: set[asyncio.Task] = set()

    @property
    def active_targets(self) -> set[str]:
        """Targets with at least one running or queued install."""
        return set(self._queues)

    def install(
        self,
        target_id: str,
        url: str,
        target_dir: Path,
        protected: bool = False,
        on_success: Optional[SuccessContinuation] = None,
        clean_target: bool = False
    ) -> asyncio.Task:
        """
        Start an install without waiting for it.

        Must be called from the event loop thread.

        Args:
            target_id: Lock and Task State key
            url: Download URL (its extension selects the extractor)
            target_dir: Extraction destination
            protected: Prerequisite install (own state slot, no overwrite,
                no cleanup on failure)
            on_success: Continuation run with the InstallResult after a
                successful extraction, before the entry is cleared
            clean_target: Empty target_dir before extracting, while holding
                the target lock

        Returns:
            Task resolving to the InstallResult
        """
        logger.info(f"{LOG_INPUT} Install requested: {target_id} from {url}")

        loop = asyncio.get_running_loop()
        task = loop.create_task(
            self._run(target_id, url, Path(target_dir), protected, on_success, clean_target),
            name=f"{INSTALL_TASK_PREFIX}{target_id}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        task.add_done_callback(lambda t: self._finish(target_id, t, protected))

        queue = self._queues.setdefault(target_id, [])
        queue.append(task)
        if len(queue) == 1:
            self.store.update(target_id, self._downloading_state(task, 0.0), protected)
        else:
            logger.info(f"{LOG_PROCESS} {target_id} already installing; request queued")

        return task

    async def join(self) -> None:
        """Wait until no install is in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Wait for in-flight installs, then release network and worker resources."""
        logger.info("Closing install coordinator")
        await self.join()
        await self.downloader.close()
        self._executor.shutdown(wait=False)

    def _lock_for(self, target_id: str) -> asyncio.Lock:
        return self._locks.setdefault(target_id, asyncio.Lock())

    def _downloading_state(self, task: asyncio.Task, progress: Optional[float]) -> TaskState:
        return TaskState(TaskPhase.DOWNLOADING, progress, None, True, task.cancel)

    async def _run(
        self,
        target_id: str,
        url: str,
        target_dir: Path,
        protected: bool,
        on_success: Optional[SuccessContinuation],
        clean_target: bool
    ) -> InstallResult:
        task = asyncio.current_task()
        try:
            async with self._lock_for(target_id):
                return await self._install_locked(
                    task, target_id, url, target_dir, protected, on_success, clean_target
                )
        finally:
            self._finish(target_id, task, protected)

    async def _install_locked(
        self,
        task: asyncio.Task,
        target_id: str,
        url: str,
        target_dir: Path,
        protected: bool,
        on_success: Optional[SuccessContinuation],
        clean_target: bool
    ) -> InstallResult:
        start_time = time.time()
        result = InstallResult(
            target_id=target_id,
            url=url,
            target_dir=target_dir,
            protected=protected
        )

        def publish_progress(progress: Optional[float]) -> None:
            self.store.update(target_id, self._downloading_state(task, progress), protected)

        try:
            publish_progress(0.0)
            data = await self.downloader.fetch(url, publish_progress)
            result.bytes_downloaded = len(data)

            self.store.update(
                target_id,
                TaskState(TaskPhase.EXTRACTING, None, None, False),
                protected
            )
            result.extraction_result = await self._extract(data, url, target_dir, protected, clean_target)
            result.success = True

            if on_success is not None:
                outcome = on_success(result)
                if inspect.isawaitable(outcome):
                    await outcome

            logger.info(
                f"{LOG_OUTPUT} Installed {target_id}: {result.bytes_downloaded} bytes, "
                f"{result.extraction_result.files_extracted} files"
            )

        except asyncio.CancelledError:
            logger.info(f"{LOG_OUTPUT} Install of {target_id} cancelled")
            raise

        except Exception as e:
            result.success = False
            result.error_message = str(e) or e.__class__.__name__
            logger.error(f"{LOG_OUTPUT} Install of {target_id} failed: {result.error_message}")
            self.store.update(
                target_id,
                TaskState(TaskPhase.EXTRACTING, None, result.error_message, False),
                protected
            )
            if not protected:
                await self._remove_target(target_dir)

        finally:
            result.duration = time.time() - start_time

        return result

    async def _extract(
        self,
        data: bytes,
        url: str,
        target_dir: Path,
        protected: bool,
        clean_target: bool
    ) -> ExtractionResult:
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(
            self._executor,
            self._extract_sync,
            data,
            url,
            target_dir,
            protected,
            clean_target
        )
        try:
            return await asyncio.shield(future)
        except asyncio.CancelledError:
            # A half-written directory is worse than a finished one
            logger.warning(
                f"{LOG_PROCESS} Cancellation deferred until extraction into {target_dir} finishes"
            )
            await asyncio.wait({future})
            raise

    def _extract_sync(
        self,
        data: bytes,
        url: str,
        target_dir: Path,
        protected: bool,
        clean_target: bool
    ) -> ExtractionResult:
        if clean_target and target_dir.exists():
            logger.info(f"{LOG_PROCESS} Emptying {target_dir} before extraction")
            shutil.rmtree(target_dir)
        target_dir.mkdir(parents=True, exist_ok=True)
        return self.archive_handler.extract(data, url, target_dir, protected)

    async def _remove_target(self, target_dir: Path) -> None:
        """Delete what a failed install left in target_dir."""
        if not target_dir.exists():
            return
        logger.info(f"{LOG_PROCESS} Removing {target_dir} after failed install")
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(self._executor, shutil.rmtree, target_dir, True)

    def _finish(self, target_id: str, task: asyncio.Task, protected: bool) -> None:
        """
        Drop a finished task and update the target's Task State.

        The running task's entry is always removed; a queued successor
        then publishes its own initial state. Runs from the task itself
        and again from its done callback (for tasks cancelled before they
        started); only the first call acts.
        """
        queue = self._queues.get(target_id)
        if not queue or task not in queue:
            return

        was_running = queue[0] is task
        queue.remove(task)
        if not was_running:
            return

        self.store.clear(target_id, protected)
        if queue:
            self.store.update(target_id, self._downloading_state(queue[0], 0.0), protected)
        else:
            del self._queues[target_id]


__all__ = ['InstallCoordinator', 'SuccessContinuation']
