from flask import Blueprint

# API index
index_bp = Blueprint('index', __name__)

# Admin login
auth_bp = Blueprint('auth', __name__)

# Google OAuth consent flow for Drive export
google_auth_bp = Blueprint('google_auth', __name__)

# Client management routes
client_bp = Blueprint('client', __name__)

# Claim record routes
records_bp = Blueprint('records', __name__)

# Reporting routes
reporting_bp = Blueprint('reporting', __name__)

# Drive export routes
drive_bp = Blueprint('drive', __name__)

# Import route handlers to register routes
from . import (
    index,
    auth,
    clients,
    records,
    reporting,
    drive
)
