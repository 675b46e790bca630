"""
Configuration management for the storefront setup wizard
"""
import os

# Base paths
PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
RESOURCES_DIR = os.path.join(PACKAGE_DIR, 'resources')
TEMPLATES_DIR = os.path.join(PACKAGE_DIR, 'templates')

# Application settings
APP_PORT = int(os.environ.get('APP_PORT', 9999))
APP_VERSION = '1.0.0'
LOG_FILE = os.environ.get('SETUP_LOG_FILE', '/var/log/shop-setup.log')
SECRET_KEY = os.environ.get('SETUP_SECRET_KEY', '')

# Basic auth for the web installer (prompted on start when empty)
INSTALLER_USERNAME = os.environ.get('INSTALLER_USERNAME', '')
INSTALLER_PASSWORD = os.environ.get('INSTALLER_PASSWORD', '')


def _detect_shop_dir():
    """Auto-detect the storefront installation directory."""
    if os.environ.get('SHOP_DIR'):
        return os.environ.get('SHOP_DIR')

    common_paths = [
        '/var/www/shop/source',
        '/var/www/html',
        '/srv/shop',
    ]

    for path in common_paths:
        if os.path.exists(os.path.join(path, 'config.inc.php')):
            return path

    return os.getcwd()


# Storefront paths
SHOP_DIR = _detect_shop_dir()
SETUP_DIR = os.environ.get('SETUP_DIR', os.path.join(SHOP_DIR, 'Setup'))
SHOP_URL_PATH = os.environ.get('SHOP_URL_PATH', '/')
SHOP_CONFIG_FILE = os.environ.get('SHOP_CONFIG_FILE', 'config.inc.php')
HTACCESS_FILE = os.environ.get('HTACCESS_FILE', '.htaccess')
COMPILE_DIR_NAME = 'tmp'

# SQL scripts shipped with the wizard
SQL_DIR = os.environ.get('SQL_DIR', os.path.join(RESOURCES_DIR, 'sql'))
MIGRATIONS_DIR = os.environ.get('MIGRATIONS_DIR', os.path.join(SQL_DIR, 'migrations'))
LICENSE_DIR = os.path.join(RESOURCES_DIR, 'license')
LICENSE_FILE = 'license.txt'

# Optional demo data package (sql + assets)
DEMODATA_DIR = os.environ.get('DEMODATA_DIR', os.path.join(SHOP_DIR, 'vendor', 'demodata'))
DEMODATA_SQL_FILE = 'demodata.sql'
DEMODATA_ASSETS_DIR = 'out'

# Database settings
DB_DRIVER = os.environ.get('DB_DRIVER', 'mysql+pymysql')
DB_DEFAULT_HOST = 'localhost'
DB_DEFAULT_PORT = os.environ.get('DB_DEFAULT_PORT', '3306')
MIN_MYSQL_VERSION = (5, 5)

# Marker table used to decide whether a shop database already exists
SHOP_MARKER_TABLE = 'shop_config'

# Whether the finish page offers to remove the setup directory by default
DELETE_SETUP_DIR = os.environ.get('DELETE_SETUP_DIR', '1') not in ('0', 'false', 'False', '')

# Admin language cookie
ADMIN_LANGUAGE_COOKIE = 'admin_language'
ADMIN_LANGUAGE_COOKIE_LIFETIME = 365 * 24 * 60 * 60

# Admin password policy
MIN_PASSWORD_LENGTH = 6


def get_shop_config_path(shop_dir=None):
    """Path of the storefront configuration file."""
    return os.path.join(shop_dir or SHOP_DIR, SHOP_CONFIG_FILE)


def get_htaccess_path(shop_dir=None):
    """Path of the storefront rewrite-rule file."""
    return os.path.join(shop_dir or SHOP_DIR, HTACCESS_FILE)
