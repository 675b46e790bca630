"""
File system helpers for the setup wizard

Handles:
- Default shop paths and path normalization
- Writing the shop configuration file
- Updating the RewriteBase of the rewrite-rule file
- License text lookup
- Demo data package detection and asset installation
- Setup directory removal
"""
import logging
import os
import re
import shutil
from datetime import datetime
from urllib.parse import urlparse

from .. import config
from ..exceptions import DatabaseError, FileWriteError

logger = logging.getLogger(__name__)

# Shop config file variable -> key of the merged db_config/paths params
CONFIG_FILE_PARAMS = {
    'dbHost': 'host',
    'dbPort': 'port',
    'dbName': 'name',
    'dbUser': 'user',
    'dbPwd': 'password',
    'sShopURL': 'shop_url',
    'sShopDir': 'shop_dir',
    'sCompileDir': 'compile_dir',
    'iUtfMode': 'utf_mode',
}

EMAIL_PATTERN = re.compile(r'^[\w.+\-]+@(?:[\w\-]+\.)+[a-zA-Z0-9]{2,}$')
REWRITE_BASE_PATTERN = re.compile(r'^(\s*)RewriteBase\b.*$', re.MULTILINE)


# ============================================================================
# Paths
# ============================================================================

def prepare_path(path):
    """Normalize separators to "/" and strip trailing slashes."""
    if not path:
        return ''
    return str(path).replace('\\', '/').rstrip('/')


def extract_rewrite_base(url):
    """URL path of the shop, used as RewriteBase ("/" for the web root)."""
    try:
        path = urlparse(url or '').path
    except ValueError:
        return '/'
    return prepare_path(path) or '/'


def get_default_path_params(host_url=None):
    """
    Default shop URL and directories.

    Args:
        host_url: Scheme and host the wizard was reached under (e.g. "http://shop.local/")

    Returns:
        dict: {'shop_url', 'shop_dir', 'compile_dir'}
    """
    shop_dir = prepare_path(config.SHOP_DIR)
    host = prepare_path(host_url or 'http://localhost')
    url_path = config.SHOP_URL_PATH.strip('/')
    shop_url = f"{host}/{url_path}/" if url_path else f"{host}/"

    return {
        'shop_url': shop_url,
        'shop_dir': shop_dir,
        'compile_dir': f"{shop_dir}/{config.COMPILE_DIR_NAME}",
    }


def is_writable(path):
    return bool(path) and os.path.exists(path) and os.access(path, os.W_OK)


# ============================================================================
# Config and rewrite-rule files
# ============================================================================

def _read_file(path):
    if not os.path.isfile(path) or not os.access(path, os.R_OK):
        raise FileWriteError(f"Could not open {path} for reading",
                             path=path, text_key='ERROR_COULD_NOT_OPEN_CONFIG_FILE')
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except OSError as e:
        raise FileWriteError(f"Could not open {path} for reading: {e}",
                             path=path, text_key='ERROR_COULD_NOT_OPEN_CONFIG_FILE') from e


def _write_file(path, content):
    if not os.access(path, os.W_OK):
        raise FileWriteError(f"Could not write to {path}",
                             path=path, text_key='ERROR_COULD_NOT_WRITE_TO_FILE')
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
    except OSError as e:
        raise FileWriteError(f"Could not write to {path}: {e}",
                             path=path, text_key='ERROR_COULD_NOT_WRITE_TO_FILE') from e


def _backup_file(path):
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_file = f"{path}.backup_{timestamp}"
    try:
        shutil.copy2(path, backup_file)
        logger.info(f"Backed up {path} to {backup_file}")
    except OSError as e:
        logger.warning(f"Failed to backup {path}: {e}")


def format_config_value(name, value):
    """Integer variables (prefixed "i") are written bare, everything else quoted."""
    if name.startswith('i'):
        try:
            return str(int(value))
        except (TypeError, ValueError):
            return '0'

    escaped = str(value if value is not None else '').replace('\\', '\\\\').replace("'", "\\'")
    return f"'{escaped}'"


def render_config_file(content, params):
    """Replace the values of `$this->name = ...;` assignments in the config file."""
    for name, key in CONFIG_FILE_PARAMS.items():
        if key not in params:
            continue
        pattern = re.compile(
            r"(\$this->" + re.escape(name) + r")\s*=\s*(?:'(?:[^'\\]|\\.)*'|[^;'\n]*)\s*;"
        )
        value = format_config_value(name, params[key])
        content = pattern.sub(lambda m, value=value: f"{m.group(1)} = {value};", content)
    return content


def update_config_file(params):
    """Write database and path settings into the shop config file."""
    config_path = config.get_shop_config_path(params.get('shop_dir'))
    content = _read_file(config_path)

    _write_file(config_path, render_config_file(content, params))
    logger.info(f"Written shop configuration to {config_path}")


def update_htaccess_file(params):
    """Set the RewriteBase of the shop's rewrite-rule file to `base_url_path`."""
    htaccess_path = config.get_htaccess_path(params.get('shop_dir'))
    content = _read_file(htaccess_path)

    base_url_path = params.get('base_url_path') or '/'
    updated = REWRITE_BASE_PATTERN.sub(lambda m: f"{m.group(1)}RewriteBase {base_url_path}", content)

    if updated == content:
        logger.info(f"RewriteBase already up to date in {htaccess_path}")
        return

    _backup_file(htaccess_path)
    _write_file(htaccess_path, updated)
    logger.info(f"Set RewriteBase {base_url_path} in {htaccess_path}")


# ============================================================================
# License and e-mail
# ============================================================================

def get_file_contents(path):
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except OSError as e:
        logger.warning(f"Cannot read {path}: {e}")
        return ''


def get_license_path(language):
    return os.path.join(config.LICENSE_DIR, language.capitalize(), config.LICENSE_FILE)


def is_valid_email(email):
    return bool(email) and EMAIL_PATTERN.match(email) is not None


# ============================================================================
# Database helpers
# ============================================================================

def check_db_exists(database):
    """True when the shop marker table is present in the opened database."""
    try:
        return database.has_table(config.SHOP_MARKER_TABLE)
    except DatabaseError as e:
        logger.warning(f"Could not check for existing shop tables: {e}")
        return False


def get_sql_directory():
    return config.SQL_DIR


def get_migrations_directory():
    return config.MIGRATIONS_DIR


# ============================================================================
# Demo data package
# ============================================================================

def get_demodata_sql_file_path():
    return os.path.join(config.DEMODATA_DIR, config.DEMODATA_SQL_FILE)


def check_if_demodata_prepared(demodata):
    """Demo data was requested and the demo data package is installed."""
    try:
        requested = bool(int(demodata or 0))
    except (TypeError, ValueError):
        requested = False
    return requested and os.path.isfile(get_demodata_sql_file_path())


def demodata_assets_install(shop_dir):
    """Copy the demo data package's assets into the shop directory."""
    source = os.path.join(config.DEMODATA_DIR, config.DEMODATA_ASSETS_DIR)
    target = os.path.join(shop_dir, config.DEMODATA_ASSETS_DIR)

    if not os.path.isdir(source):
        logger.info(f"No demo data assets found at {source}")
        return

    try:
        shutil.copytree(source, target, dirs_exist_ok=True)
    except (OSError, shutil.Error) as e:
        raise FileWriteError(f"Could not copy demo data assets to {target}: {e}",
                             path=target, text_key='ERROR_COULD_NOT_WRITE_TO_FILE') from e
    logger.info(f"Copied demo data assets to {target}")


# ============================================================================
# Setup directory
# ============================================================================

def remove_setup_directory():
    """Remove the setup directory once the installation is finished."""
    setup_dir = config.SETUP_DIR
    if not os.path.isdir(setup_dir):
        return True, f"Setup directory {setup_dir} does not exist"

    try:
        shutil.rmtree(setup_dir)
    except OSError as e:
        logger.error(f"Failed to remove setup directory {setup_dir}: {e}")
        return False, f"Failed to remove setup directory: {e}"

    logger.info(f"Removed setup directory {setup_dir}")
    return True, f"Setup directory {setup_dir} removed"
