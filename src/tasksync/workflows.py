"""Shared wiring between the CLI and any other front end.

Each get_* function resolves one collaborator from config.
"""

from .adapters.file_storage import FileTaskStorage
from .adapters.rest_api import RestTaskAdapter
from .config import Config, load_config
from .synchronizer import TaskSynchronizer


def get_storage(config: Config) -> FileTaskStorage:
    """Resolve the local task store from config."""
    return FileTaskStorage(config.resolved_storage_dir(), key=config.storage_key)


def get_remote(config: Config) -> RestTaskAdapter:
    return RestTaskAdapter(config=config)


def build_synchronizer(config: Config | None = None) -> TaskSynchronizer:
    """Build a synchronizer with its cache already loaded."""
    config = config or load_config()
    sync = TaskSynchronizer(remote=get_remote(config), storage=get_storage(config))
    sync.load_local()
    return sync
