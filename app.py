import sys

from loguru import logger

from truthnotes.api import create_app
from truthnotes.config import settings
from truthnotes.domain.result import Err
from truthnotes.service import NotesService
from truthnotes.store import NoteStore
from truthnotes.sync.appsync import AppSyncAdapter
from truthnotes.sync.base import RemoteSyncAdapter
from truthnotes.sync.local import LocalSyncAdapter

logger.configure(handlers=[{"sink": sys.stderr, "level": settings.log_level}])


def build_adapter() -> RemoteSyncAdapter:
    if settings.sync_backend == "appsync":
        logger.info(f"Using AppSync backend at {settings.appsync_url}")
        return AppSyncAdapter(
            url=settings.appsync_url,
            api_key=settings.appsync_api_key,
            timeout=settings.appsync_timeout,
        )
    logger.info(f"Using local backend at {settings.local_store_path}")
    return LocalSyncAdapter(filepath=settings.local_store_path)


adapter = build_adapter()
store = NoteStore(adapter)
result = store.refresh()
if isinstance(result, Err):
    logger.warning(f"Initial refresh failed: {result.error}")

service = NotesService(store, tz=settings.display_tz)
app = create_app(
    service=service,
    on_shutdown=adapter.close if isinstance(adapter, AppSyncAdapter) else None,
)
