"""
Google Drive upload with retry, token refresh and an audit trail.

DriveClient wraps the Google libraries behind four calls (ensure_fresh,
refresh, create_file, token_fields) so DriveUploader can be exercised with
a test double. Every request failure surfaces as DriveRequestError, the only
error the retry loop retries.
"""
import io
import time
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload
from retry.api import retry_call

from ..exceptions import DriveConfigurationError, DriveNotAuthorizedError, DriveRequestError, DriveUploadError
from .credential_store import CredentialStore
from .upload_log import UploadLog

from claimdesk import logger

DRIVE_SCOPES = ['https://www.googleapis.com/auth/drive.file']
GOOGLE_AUTH_URI = 'https://accounts.google.com/o/oauth2/auth'
GOOGLE_TOKEN_URI = 'https://oauth2.googleapis.com/token'
EXPORT_MIME_TYPE = 'application/json'


def _parse_expiry(bundle: Dict) -> Optional[datetime]:
    """google-auth compares expiry against naive UTC datetimes"""
    if bundle.get('expiry'):
        expiry = datetime.fromisoformat(bundle['expiry'])
        if expiry.tzinfo is not None:
            expiry = expiry.astimezone(timezone.utc).replace(tzinfo=None)
        return expiry
    if bundle.get('expiry_date'):
        # Millisecond epoch as issued by other OAuth clients
        return datetime.fromtimestamp(bundle['expiry_date'] / 1000, tz=timezone.utc).replace(tzinfo=None)
    return None


def credentials_to_bundle(credentials) -> Dict:
    return {
        'access_token': credentials.token,
        'refresh_token': credentials.refresh_token,
        'expiry': credentials.expiry.isoformat() if credentials.expiry else None,
        'token_type': 'Bearer',
        'scope': ' '.join(credentials.scopes) if credentials.scopes else None,
    }


class DriveClient:
    """Drive v3 access for one credential bundle"""

    def __init__(self, bundle: Dict, client_id: str, client_secret: str):
        scope = bundle.get('scope')
        self.credentials = Credentials(
            token=bundle.get('access_token'),
            refresh_token=bundle.get('refresh_token'),
            token_uri=GOOGLE_TOKEN_URI,
            client_id=client_id,
            client_secret=client_secret,
            scopes=scope.split() if scope else DRIVE_SCOPES,
            expiry=_parse_expiry(bundle),
        )
        self._service = None

    @property
    def has_refresh_token(self) -> bool:
        return bool(self.credentials.refresh_token)

    def ensure_fresh(self) -> None:
        """Refresh the access token when it is missing or expired"""
        if self.credentials.token and not self.credentials.expired:
            return
        if not self.has_refresh_token:
            raise DriveRequestError("Access token expired and no refresh token is available", status=401)
        self.refresh()

    def refresh(self) -> None:
        try:
            self.credentials.refresh(Request())
        except GoogleAuthError as e:
            raise DriveRequestError(f"Token refresh failed: {e}") from e

    def create_file(self, name: str, payload: bytes) -> Dict:
        media = MediaIoBaseUpload(io.BytesIO(payload), mimetype=EXPORT_MIME_TYPE, resumable=False)
        try:
            if self._service is None:
                self._service = build('drive', 'v3', credentials=self.credentials, cache_discovery=False)
            return self._service.files().create(
                body={'name': name},
                media_body=media,
                fields='id, name'
            ).execute()
        except HttpError as e:
            raise DriveRequestError(e.reason or str(e), status=e.resp.status) from e
        except (httplib2.HttpLib2Error, GoogleAuthError, OSError) as e:
            raise DriveRequestError(str(e)) from e

    def token_fields(self) -> Dict:
        return credentials_to_bundle(self.credentials)


def build_drive_client_factory(config) -> Callable[[Dict], DriveClient]:
    def factory(bundle):
        client_id = config.get('GOOGLE_CLIENT_ID')
        client_secret = config.get('GOOGLE_CLIENT_SECRET')
        if not client_id or not client_secret:
            raise DriveConfigurationError()
        return DriveClient(bundle, client_id, client_secret)
    return factory


def build_oauth_flow(config, state: Optional[str] = None) -> Flow:
    """OAuth consent flow for the Drive file scope"""
    client_id = config.get('GOOGLE_CLIENT_ID')
    client_secret = config.get('GOOGLE_CLIENT_SECRET')
    if not client_id or not client_secret:
        raise DriveConfigurationError()

    redirect_uri = config['GOOGLE_REDIRECT_URI']
    client_config = {
        'web': {
            'client_id': client_id,
            'client_secret': client_secret,
            'auth_uri': GOOGLE_AUTH_URI,
            'token_uri': GOOGLE_TOKEN_URI,
            'redirect_uris': [redirect_uri],
        }
    }
    return Flow.from_client_config(
        client_config,
        scopes=DRIVE_SCOPES,
        redirect_uri=redirect_uri,
        state=state,
        autogenerate_code_verifier=False
    )


class DriveUploader:
    """
    Pushes an export payload to Drive, retrying transient failures.

    Each attempt makes sure the access token is fresh and creates a new,
    timestamp-named remote file, so a failure after the file was created can
    leave extra files behind. A 401 with a refresh token on hand triggers one
    refresh before the backoff delay. Delays start at backoff_base and grow
    by backoff_factor; nothing sleeps after the final attempt.
    """

    def __init__(self, credential_store: CredentialStore, upload_log: UploadLog,
                 client_factory: Callable[[Dict], DriveClient],
                 max_attempts: int = 3, backoff_base: float = 1.0, backoff_factor: float = 2):
        self.credential_store = credential_store
        self.upload_log = upload_log
        self.client_factory = client_factory
        self.max_attempts = max_attempts
        self.backoff_base = backoff_base
        self.backoff_factor = backoff_factor

    def is_authorized(self) -> bool:
        return self.credential_store.load() is not None

    def upload(self, payload: bytes) -> Dict:
        """
        Upload the payload and return the remote file's id and name.

        Raises:
            DriveNotAuthorizedError: no credential bundle is stored
            DriveConfigurationError: the OAuth client is not configured
            DriveUploadError: every attempt failed
        """
        bundle = self.credential_store.load()
        if not bundle:
            self.upload_log.append("Upload skipped: not authorized")
            raise DriveNotAuthorizedError()

        client = self.client_factory(bundle)
        attempts = {'count': 0}

        def attempt():
            attempts['count'] += 1
            number = attempts['count']
            self.upload_log.append(f"Upload attempt {number} starting")
            try:
                client.ensure_fresh()
                return client.create_file(f"clients-export-{int(time.time() * 1000)}.json", payload)
            except DriveRequestError as e:
                self.upload_log.append(f"Upload failed on attempt {number}: {e}")
                if e.is_unauthorized and client.has_refresh_token:
                    self._refresh(client)
                raise

        try:
            file_info = retry_call(
                attempt,
                exceptions=DriveRequestError,
                tries=self.max_attempts,
                delay=self.backoff_base,
                backoff=self.backoff_factor,
                logger=None
            )
        except DriveRequestError as e:
            self.upload_log.append(f"All upload attempts failed: {e}")
            raise DriveUploadError(str(e), attempts['count']) from e
        except Exception as e:
            self.upload_log.append(f"Unexpected error during upload: {e}")
            raise

        self.upload_log.append(f"Upload succeeded: id={file_info.get('id')} name={file_info.get('name')}")
        self.credential_store.merge(client.token_fields())
        return file_info

    def _refresh(self, client: DriveClient) -> None:
        try:
            client.refresh()
        except DriveRequestError as e:
            self.upload_log.append(f"Refresh failed: {e}")
            return
        self.upload_log.append("Access token refreshed")
        self.credential_store.merge(client.token_fields())
        logger.info("Drive access token refreshed after 401")
