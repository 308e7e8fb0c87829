# routes/auth.py
import time

from flask import jsonify, request, redirect, session, current_app
from flask_login import login_user, logout_user

from . import auth_bp, google_auth_bp
from ..exceptions import DriveConfigurationError
from ..models.user import AdminUser
from ..services.drive_service import build_oauth_flow, credentials_to_bundle

from claimdesk import logger

OAUTH_STATE_KEY = 'google_oauth_state'


@auth_bp.route("/login", methods=["POST"])
def login():
    """
    Log in with the configured admin account.

    Responses:
      200: {"success": true, "message": ..., "token": ...}
      400: username or password missing
      401: {"success": false, "error": "Invalid credentials"}
    """
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    password = data.get('password')
    if not username or not password:
        return jsonify({"error": "Username and password are required"}), 400

    admin = AdminUser.from_config(current_app.config)
    if username != admin.username or not admin.verify_password(password):
        logger.warning(f"Failed login attempt for {username}")
        return jsonify({"success": False, "error": "Invalid credentials"}), 401

    login_user(admin)
    logger.info(f"Admin {username} logged in")
    return jsonify({
        "success": True,
        "message": "Login successful",
        "token": f"admin_token_{int(time.time() * 1000)}"
    }), 200


@auth_bp.route("/logout", methods=["POST"])
def logout():
    logout_user()
    return jsonify({"success": True}), 200


@google_auth_bp.route("/google", methods=["GET"])
def google_authorize():
    """Redirect to the Google consent screen for Drive file access."""
    try:
        flow = build_oauth_flow(current_app.config)
    except DriveConfigurationError as e:
        return str(e), 500

    auth_url, state = flow.authorization_url(access_type='offline', prompt='consent')
    session[OAUTH_STATE_KEY] = state
    return redirect(auth_url)


@google_auth_bp.route("/google/callback", methods=["GET"])
def google_callback():
    """Exchange the authorization code for tokens and store the bundle."""
    code = request.args.get('code')
    if not code:
        return "Missing authorization code", 400

    exporter = current_app.extensions['drive_exporter']
    try:
        flow = build_oauth_flow(current_app.config, state=session.pop(OAUTH_STATE_KEY, None))
        flow.fetch_token(code=code)
        exporter.uploader.credential_store.merge(credentials_to_bundle(flow.credentials))
    except DriveConfigurationError as e:
        return str(e), 500
    except Exception as e:
        logger.error(f"OAuth callback error: {str(e)}")
        return "Authorization failed", 500

    logger.info("Google Drive authorization stored")
    return "Google Drive authorization successful. You can close this window.", 200
