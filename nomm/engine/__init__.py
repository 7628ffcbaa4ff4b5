# Path: nomm/engine/__init__.py
"""
Install Engine

Fetch, extract and coordinate mod installs.

Components:
- HTTPHandler / RetryManager / ArchiveDownloader: payload retrieval
- ArchiveHandler: format-dispatching extraction
- TaskStateStore: observable per-target progress
- InstallCoordinator: per-target serialized install sequence
- DependencyResolver: dependency walk dispatching installs
"""

from nomm.engine.protocol_handlers import HTTPHandler, ProgressCallback
from nomm.engine.retry_manager import RetryManager
from nomm.engine.archive_downloader import ArchiveDownloader
from nomm.engine.extraction import ArchiveHandler
from nomm.engine.result import ExtractionResult, InstallResult
from nomm.engine.task_state import TaskPhase, TaskState, TaskStateStore
from nomm.engine.coordinator import InstallCoordinator, SuccessContinuation
from nomm.engine.dependency_resolver import DependencyResolver, ResolveOutcome

__all__ = [
    'HTTPHandler',
    'ProgressCallback',
    'RetryManager',
    'ArchiveDownloader',
    'ArchiveHandler',
    'ExtractionResult',
    'InstallResult',
    'TaskPhase',
    'TaskState',
    'TaskStateStore',
    'InstallCoordinator',
    'SuccessContinuation',
    'DependencyResolver',
    'ResolveOutcome',
]
