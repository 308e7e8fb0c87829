from datetime import datetime, timezone

from claimdesk import logger


class UploadLog:
    """
    Append-only audit trail of Drive upload activity.

    One ``[<ISO timestamp>] <message>`` line per event. Write failures are
    reported through the application logger and otherwise ignored; the
    log never influences the upload itself.
    """

    def __init__(self, path: str):
        self.path = path

    def append(self, message: str) -> None:
        timestamp = datetime.now(timezone.utc).isoformat()
        try:
            with open(self.path, 'a', encoding='utf-8') as handle:
                handle.write(f"[{timestamp}] {message}\n")
        except OSError as e:
            logger.error(f"Failed to write drive log: {str(e)}")
        logger.info(f"drive upload: {message}")
