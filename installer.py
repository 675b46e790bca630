#!/usr/bin/env python3
"""
Storefront Setup Wizard with Web GUI
A Flask-based step-by-step installer: requirements check, license, database
setup, shop paths and admin login.

Security: Protected by HTTP Basic Auth, auto-shuts down after 60 min inactivity.
"""

import os
import sys
import logging
import secrets
import time
from datetime import datetime, timedelta
from functools import wraps
from threading import Thread, Lock

from flask import Flask, request, session, jsonify, Response, render_template
from werkzeug.security import check_password_hash, generate_password_hash

from shop_setup import config
from shop_setup.controller import Controller
from shop_setup.language import Language
from shop_setup.request_params import RequestParams
from shop_setup.services import file_service
from shop_setup.session import SetupSession
from shop_setup.texts import LANGUAGES
from shop_setup.wizard import Wizard, dispatch

# ============================================
# GLOBAL CONFIGURATION
# ============================================

INACTIVITY_TIMEOUT = 60 * 60  # 60 minutes in seconds

# In-memory storage for Basic Auth credentials
auth_credentials = {
    'username': None,
    'password_hash': None,
    'initialized': False
}

# Activity tracking for auto-shutdown
last_activity = {
    'timestamp': datetime.now(),
    'lock': Lock()
}

# ============================================
# LOGGING SETUP
# ============================================

def setup_logging():
    """Initialize logging to file and console."""
    log_format = '%(asctime)s - %(levelname)s - %(message)s'

    # Package modules log to children of this logger
    logger = logging.getLogger('shop_setup')
    logger.setLevel(logging.INFO)

    # Clear any existing handlers
    logger.handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(log_format))
    logger.addHandler(console_handler)

    # File handler
    try:
        file_handler = logging.FileHandler(config.LOG_FILE)
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter(log_format))
        logger.addHandler(file_handler)
    except (PermissionError, FileNotFoundError):
        logger.warning(f"Cannot write to {config.LOG_FILE}, logging to console only")

    return logger

logger = setup_logging()

# ============================================
# ACTIVITY TRACKING
# ============================================

def update_activity():
    """Update the last activity timestamp."""
    with last_activity['lock']:
        last_activity['timestamp'] = datetime.now()

def get_inactivity_duration():
    """Get seconds since last activity."""
    with last_activity['lock']:
        return (datetime.now() - last_activity['timestamp']).total_seconds()

def activity_monitor():
    """Stop the wizard once nobody used it for INACTIVITY_TIMEOUT seconds."""
    while True:
        time.sleep(60)
        inactive_seconds = get_inactivity_duration()
        if inactive_seconds >= INACTIVITY_TIMEOUT:
            logger.warning(f"No requests for {inactive_seconds:.0f}s, stopping setup wizard")
            os._exit(0)

# ============================================
# FLASK APP INITIALIZATION
# ============================================

app = Flask(__name__, template_folder=config.TEMPLATES_DIR)
app.secret_key = config.SECRET_KEY or secrets.token_hex(32)
app.config['SESSION_COOKIE_HTTPONLY'] = True
app.config['SESSION_COOKIE_SAMESITE'] = 'Strict'
app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(hours=2)

# ============================================
# AUTHENTICATION SETUP
# ============================================

def set_credentials(username, password):
    """Store the Basic Auth credentials (hashed) in memory."""
    auth_credentials['username'] = username
    auth_credentials['password_hash'] = generate_password_hash(password)
    auth_credentials['initialized'] = True
    logger.info(f"Credentials set for user: {username}")

def prompt_for_credentials():
    """Set admin credentials from the environment or prompt for them on first run."""
    if auth_credentials['initialized']:
        return

    if config.INSTALLER_USERNAME and config.INSTALLER_PASSWORD:
        set_credentials(config.INSTALLER_USERNAME, config.INSTALLER_PASSWORD)
        return

    print("\nChoose a login for the web setup wizard (kept in memory only).")

    username = ''
    while len(username) < 3:
        username = input("Wizard username (at least 3 characters): ").strip()

    while True:
        password = input("Wizard password (at least 8 characters): ").strip()
        if len(password) < 8:
            continue
        if password == input("Repeat password: ").strip():
            break
        print("Passwords do not match, try again.")

    set_credentials(username, password)

def check_auth(username, password):
    """Validate username and password."""
    if not auth_credentials['initialized']:
        return False

    return (username == auth_credentials['username'] and
            check_password_hash(auth_credentials['password_hash'], password))

def authenticate():
    """Send 401 response that enables Basic Auth."""
    return Response(
        'Authentication required. Please log in with your credentials.',
        401,
        {'WWW-Authenticate': 'Basic realm="Shop Setup"'}
    )

def requires_auth(f):
    """Decorator to require HTTP Basic Authentication."""
    @wraps(f)
    def decorated(*args, **kwargs):
        auth = request.authorization
        if not auth or not check_auth(auth.username, auth.password):
            logger.warning(f"Failed authentication attempt from {request.remote_addr}")
            return authenticate()

        # Update activity on successful auth
        update_activity()
        return f(*args, **kwargs)
    return decorated

# ============================================
# WIZARD FRONT CONTROLLER
# ============================================

def get_host_url():
    """Scheme and host the wizard is reached under, without the setup path."""
    return request.host_url

def run_wizard_step(setup_session, params, language):
    """
    Run the requested wizard step.

    Args:
        setup_session: SetupSession wrapping the Flask session
        params: RequestParams of the current request
        language: Language bound to the session

    Returns:
        tuple: (template name, Controller, current step id)
    """
    wizard = Wizard()
    step = wizard.get_current_step(params.get_request_var('istep'))
    controller = Controller(setup_session, params, language=language,
                            wizard=wizard, host_url=get_host_url())
    template = dispatch(controller, step)
    return template, controller, step

@app.route('/', methods=['GET', 'POST'])
@requires_auth
def index():
    """Render the requested wizard step."""
    setup_session = SetupSession(session, request.values.get('sid'))
    session.permanent = True
    params = RequestParams.from_flask(request)
    language = Language(
        setup_session,
        params,
        browser_language=request.accept_languages.best_match(list(LANGUAGES)),
    )

    template, controller, step = run_wizard_step(setup_session, params, language)
    view = controller.get_view()
    wizard = controller.get_wizard()

    response = Response(render_template(
        template,
        view=view,
        title=language.get_text(view.title) if view.title else '',
        message=view.message,
        params=view.params,
        steps=wizard.get_steps(),
        current_step=step,
        next_step=wizard.get_next_step(),
        sid=setup_session.get_sid(),
        language=language.get_language(),
        text=language.get_text,
        version=config.APP_VERSION,
    ))

    for cookie in view.cookies:
        response.set_cookie(cookie['key'], cookie['value'],
                            max_age=cookie['max_age'], path=cookie['path'])

    return response

# ============================================
# ROUTES
# ============================================

@app.route('/health')
def health():
    """Health check endpoint (no auth required)."""
    update_activity()
    return jsonify({
        'status': 'ok',
        'version': config.APP_VERSION,
        'inactivity_seconds': int(get_inactivity_duration())
    })

def schedule_shutdown(delay=2):
    """Stop the process shortly after the current response was sent."""
    def delayed_shutdown():
        time.sleep(delay)
        logger.info("Shutting down setup wizard")
        os._exit(0)

    Thread(target=delayed_shutdown).start()

@app.route('/api/shutdown-installer', methods=['POST'])
@requires_auth
def api_shutdown_installer():
    """Remove the setup directory when requested and shutdown the wizard."""
    update_activity()
    logger.info("Setup wizard shutdown requested")

    try:
        setup_config = session.get('setup_config') or {}
        setup_dir_removed = None
        message = 'Setup wizard shutting down'

        if setup_config.get('delete_setup_dir'):
            setup_dir_removed, message = file_service.remove_setup_directory()

        schedule_shutdown()
        return jsonify({
            'success': True,
            'setup_dir_removed': setup_dir_removed,
            'message': message
        })

    except Exception as e:
        logger.error(f"Error during shutdown: {e}")
        return jsonify({'success': False, 'error': str(e)}), 500

# ============================================
# MAIN ENTRY POINT
# ============================================

def main():
    """Main entry point for the setup wizard."""
    logger.info(f"Shop Setup Wizard {config.APP_VERSION} for {config.SHOP_DIR}")

    prompt_for_credentials()

    Thread(target=activity_monitor, daemon=True).start()

    print(f"\n  Setup wizard: http://localhost:{config.APP_PORT} (user {auth_credentials['username']})")
    print(f"  Stops after {INACTIVITY_TIMEOUT // 60} minutes without requests. Logs: {config.LOG_FILE}\n")

    try:
        app.run(
            host='0.0.0.0',
            port=config.APP_PORT,
            debug=False,
            threaded=True
        )
    except KeyboardInterrupt:
        logger.info("Setup wizard stopped by user (Ctrl+C)")
        print("\n\n✅ Setup wizard stopped")
    except Exception as e:
        logger.error(f"Error starting server: {e}")
        print(f"\n❌ Error: {e}")
        sys.exit(1)

if __name__ == '__main__':
    main()
