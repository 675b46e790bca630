"""
System requirement checks for the setup wizard

Each probe returns a module state:
    2  fulfilled
    1  minimum fulfilled (works, but not recommended)
    0  not fulfilled
   -1  could not be checked
"""
import importlib.util
import logging
import os
import shutil
import sys

from .. import config

logger = logging.getLogger(__name__)

MIN_PYTHON_VERSION = (3, 9)
MIN_FREE_DISK_SPACE = 100 * 1024 * 1024
LOW_FREE_DISK_SPACE = 20 * 1024 * 1024

# SQLAlchemy driver name -> importable module
DB_DRIVER_MODULES = {
    'pymysql': 'pymysql',
    'mysqldb': 'MySQLdb',
    'mysqlconnector': 'mysql.connector',
    'psycopg2': 'psycopg2',
    'psycopg': 'psycopg',
    'pysqlite': 'sqlite3',
}

# Default driver of a dialect when DB_DRIVER has no "+driver" part
DEFAULT_DIALECT_DRIVERS = {
    'mysql': 'mysqldb',
    'postgresql': 'psycopg2',
    'sqlite': 'pysqlite',
}


def _module_available(module_name):
    try:
        return importlib.util.find_spec(module_name) is not None
    except (ImportError, ValueError):
        return False


def check_python_version():
    return 2 if sys.version_info[:2] >= MIN_PYTHON_VERSION else 0


def check_unicode_support():
    encoding = (sys.getfilesystemencoding() or '').lower().replace('-', '')
    return 2 if encoding == 'utf8' else 1


def check_server_permissions(shop_dir=None):
    """Shop directory, compile directory and config file must be writable."""
    shop_dir = shop_dir or config.SHOP_DIR
    config_path = config.get_shop_config_path(shop_dir)
    compile_dir = os.path.join(shop_dir, config.COMPILE_DIR_NAME)

    if not os.path.isdir(shop_dir) or not os.access(shop_dir, os.W_OK):
        logger.warning(f"Shop directory is not writable: {shop_dir}")
        return 0

    if not os.path.isfile(config_path) or not os.access(config_path, os.W_OK):
        logger.warning(f"Config file is missing or not writable: {config_path}")
        return 0

    if os.path.exists(compile_dir) and not os.access(compile_dir, os.W_OK):
        logger.warning(f"Compile directory is not writable: {compile_dir}")
        return 0

    return 2


def check_rewrite_file(shop_dir=None):
    htaccess_path = config.get_htaccess_path(shop_dir or config.SHOP_DIR)
    if not os.path.isfile(htaccess_path):
        return -1

    try:
        with open(htaccess_path, 'r', encoding='utf-8') as f:
            content = f.read()
    except OSError as e:
        logger.warning(f"Cannot read {htaccess_path}: {e}")
        return 0

    return 2 if 'RewriteEngine' in content else 1


def check_free_disk_space(shop_dir=None):
    try:
        free = shutil.disk_usage(shop_dir or config.SHOP_DIR).free
    except OSError as e:
        logger.warning(f"Cannot determine free disk space: {e}")
        return -1

    if free >= MIN_FREE_DISK_SPACE:
        return 2
    if free >= LOW_FREE_DISK_SPACE:
        return 1
    return 0


def check_sqlalchemy():
    return 2 if _module_available('sqlalchemy') else 0


def get_db_driver_module(db_driver=None):
    """Module name needed by a SQLAlchemy "dialect+driver" string."""
    db_driver = db_driver or config.DB_DRIVER
    dialect, _, driver = db_driver.partition('+')
    driver = driver or DEFAULT_DIALECT_DRIVERS.get(dialect, '')
    return DB_DRIVER_MODULES.get(driver)


def check_db_driver(db_driver=None):
    module_name = get_db_driver_module(db_driver)
    if module_name is None:
        return -1
    return 2 if _module_available(module_name) else 0


def check_image_library():
    return 2 if _module_available('PIL') else 1


def get_system_info():
    """Return requirement groups with the state of each module."""
    info = {
        'server_config': {
            'python_version': check_python_version(),
            'unicode_support': check_unicode_support(),
            'server_permissions': check_server_permissions(),
            'rewrite_file': check_rewrite_file(),
            'free_disk_space': check_free_disk_space(),
        },
        'python_modules': {
            'sqlalchemy': check_sqlalchemy(),
            'db_driver': check_db_driver(),
            'image_library': check_image_library(),
        },
    }

    failed = [name for modules in info.values() for name, state in modules.items() if state == 0]
    if failed:
        logger.warning(f"System requirements not fulfilled: {', '.join(failed)}")
    else:
        logger.info("System requirements check passed")

    return info


def get_module_info(module_name):
    """State of a single module, or None when no such probe exists."""
    for modules in get_system_info().values():
        if module_name in modules:
            return modules[module_name]
    return None
