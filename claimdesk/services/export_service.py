# services/export_service.py
import json
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Dict, Optional

from ..exceptions import DriveError, DriveNotAuthorizedError
from ..schemas.client_schemas import ClientSchema
from .client_service import ClientService
from .credential_store import FileCredentialStore
from .drive_service import DriveUploader, build_drive_client_factory
from .upload_log import UploadLog

from claimdesk import logger


def build_snapshot(now: Optional[datetime] = None) -> bytes:
    """Serialize every client, name-ordered, with the export timestamp"""
    exported_at = (now or datetime.now(timezone.utc)).isoformat()
    clients = ClientSchema(many=True).dump(ClientService.all_clients_for_export())
    payload = {'exportedAt': exported_at, 'clients': clients}
    return json.dumps(payload, indent=2).encode('utf-8')


class DriveExporter:
    """
    Runs Drive exports either on demand or in the background.

    Background exports go through a single-worker executor, so the request
    that triggered them never waits and uploads from one process run one
    at a time. A snapshot is taken when the export starts, so while one
    export is still queued further triggers are folded into it.
    """

    def __init__(self, uploader: DriveUploader, executor: Optional[Executor] = None):
        self.uploader = uploader
        self._executor = executor
        self._lock = threading.Lock()
        self._pending: Optional[Future] = None

    @property
    def executor(self) -> Executor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='drive-export')
        return self._executor

    def export_now(self) -> Dict:
        """Upload a fresh snapshot and return the remote file info"""
        return self.uploader.upload(build_snapshot())

    def schedule(self, app) -> Future:
        """Queue an export unless one is already waiting; failures end up in the logs only"""
        with self._lock:
            pending = self._pending
            if pending is not None and not pending.running() and not pending.done():
                logger.debug("Drive export already queued, skipping")
                return pending
            self._pending = self.executor.submit(self._run_in_background, app)
            return self._pending

    def _run_in_background(self, app):
        with app.app_context():
            try:
                file_info = self.export_now()
                logger.info(f"Background Drive export stored as {file_info.get('name')}")
                return file_info
            except DriveNotAuthorizedError:
                logger.info("Background Drive export skipped: not authorized")
            except DriveError as e:
                logger.warning(f"Background Drive export failed: {str(e)}")
            except Exception as e:
                logger.error(f"Unexpected error in background Drive export: {str(e)}")
            return None


def build_drive_exporter(app) -> DriveExporter:
    config = app.config
    uploader = DriveUploader(
        credential_store=FileCredentialStore(config['DRIVE_TOKENS_PATH']),
        upload_log=UploadLog(config['DRIVE_UPLOAD_LOG_PATH']),
        client_factory=build_drive_client_factory(config),
        max_attempts=config['DRIVE_UPLOAD_MAX_ATTEMPTS'],
        backoff_base=config['DRIVE_UPLOAD_BACKOFF_BASE'],
        backoff_factor=config['DRIVE_UPLOAD_BACKOFF_FACTOR'],
    )
    return DriveExporter(uploader)


def on_client_data_changed(sender, action=None, entity_id=None, **extra):
    """Subscriber for client_data_changed; sender is the Flask app"""
    if not sender.config.get('DRIVE_AUTO_EXPORT'):
        return
    exporter = sender.extensions.get('drive_exporter')
    if exporter is None:
        return
    logger.debug(f"Scheduling Drive export after {action} ({entity_id})")
    exporter.schedule(sender)
