from blinker import Namespace
from flask import current_app

from claimdesk import logger

_signals = Namespace()

# Sent with the Flask app as sender after every committed client/record change.
# Keyword arguments: action (e.g. 'client.created'), entity_id.
client_data_changed = _signals.signal('client-data-changed')


def notify_data_changed(action, entity_id):
    """
    Emit client_data_changed for the current app. Subscriber errors are
    logged and never reach the request that made the change.
    """
    try:
        client_data_changed.send(current_app._get_current_object(), action=action, entity_id=entity_id)
    except Exception as e:
        logger.error(f"client_data_changed subscriber failed after {action}: {str(e)}")
