"""Error types raised by the services and translated to HTTP responses by the routes."""


class ClaimDeskError(Exception):
    """Base class for application errors."""


class NotFoundError(ClaimDeskError):
    """Raised when a client or record id does not exist."""

    def __init__(self, entity, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class DriveError(ClaimDeskError):
    """Base class for Drive export failures."""


class DriveNotAuthorizedError(DriveError):
    """No stored credential bundle. Terminal, never retried."""

    def __init__(self, message="Not authorized with Google Drive. Visit /auth/google to authorize."):
        super().__init__(message)


class DriveConfigurationError(DriveError):
    """OAuth client id/secret are missing from the configuration."""

    def __init__(self, message="OAuth client not configured. Set GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET"):
        super().__init__(message)


class DriveRequestError(DriveError):
    """A single request to the storage API failed. Retried by the uploader."""

    def __init__(self, message, status=None):
        self.status = status
        super().__init__(message)

    @property
    def is_unauthorized(self):
        return self.status == 401


class DriveUploadError(DriveError):
    """All upload attempts failed."""

    def __init__(self, message, attempts):
        self.attempts = attempts
        super().__init__(message)
