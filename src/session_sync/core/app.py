"""Wiring of the session store, candidate registry and export dispatcher."""

from dataclasses import dataclass
from typing import Optional

from ..utils.api_client import SheetSyncApiClient, create_api_client
from ..utils.error_handler import NotificationCenter
from .candidates import CandidateRegistry
from .dispatcher import ExportDispatcher
from .persistence import LocalStoragePersistence
from .session_store import SessionStore
from .settings import Settings
from .sheets import SheetUpdater, create_sheet_updater
from .storage import FileStorage, LocalStorage


@dataclass
class SyncApp:
    """Everything one user session of the recorder works with"""
    settings: Settings
    store: SessionStore
    registry: CandidateRegistry
    notifications: NotificationCenter
    client: SheetSyncApiClient
    _updater: Optional[SheetUpdater] = None
    _dispatcher: Optional[ExportDispatcher] = None

    @property
    def dispatcher(self) -> ExportDispatcher:
        # Built on first use so direct-mode credentials are only read for exports
        if self._dispatcher is None:
            if self._updater is None:
                self._updater = create_sheet_updater(self.settings, self.client)
            self._dispatcher = ExportDispatcher(
                self.store,
                self.registry,
                self._updater,
                notifications=self.notifications,
                row_window=self.settings.export.row_window,
            )
        return self._dispatcher


def create_app(settings: Settings, storage: Optional[LocalStorage] = None,
               client: Optional[SheetSyncApiClient] = None,
               updater: Optional[SheetUpdater] = None) -> SyncApp:
    """
    Build the application objects for the given settings

    Args:
        settings: Loaded settings
        storage: Storage backend (default: files under settings.storage_dir)
        client: API client (default: one for settings.api)
        updater: Sheet transport (default: chosen by settings.export.mode)

    Returns:
        SyncApp: Wired application
    """
    storage = storage or FileStorage(settings.storage_dir)
    persistence = LocalStoragePersistence(storage)
    client = client or create_api_client(settings.api.base_url, settings.api.timeout)
    notifications = NotificationCenter()

    store = SessionStore(
        persistence,
        session_count=settings.session_count,
        videos_per_session=settings.videos_per_session,
    )
    registry = CandidateRegistry(client, notifications=notifications, persistence=persistence)

    return SyncApp(
        settings=settings,
        store=store,
        registry=registry,
        notifications=notifications,
        client=client,
        _updater=updater,
    )
