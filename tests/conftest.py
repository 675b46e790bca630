"""
Shared fixtures: a temporary shop installation and sqlite-backed database settings.
"""
import os
import tempfile

os.environ.setdefault('SETUP_LOG_FILE', os.path.join(tempfile.gettempdir(), 'shop-setup-tests.log'))

import pytest

from shop_setup import config
from shop_setup.controller import Controller
from shop_setup.language import Language
from shop_setup.request_params import RequestParams
from shop_setup.session import SetupSession
from shop_setup.wizard import Wizard

CONFIG_FILE_TEMPLATE = """<?php
class ConfigFile
{
    public function init()
    {
        $this->dbHost = '<dbHost>';
        $this->dbPort = 3306;
        $this->dbName = '<dbName>';
        $this->dbUser = '<dbUser>';
        $this->dbPwd = '<dbPwd>';
        $this->sShopURL = '<sShopURL>';
        $this->sShopDir = '<sShopDir>';
        $this->sCompileDir = '<sCompileDir>';
        $this->iUtfMode = 0;
    }
}
"""

HTACCESS_TEMPLATE = """<IfModule mod_rewrite.c>
    Options +FollowSymLinks
    RewriteEngine On
    RewriteBase /shop
    RewriteRule ^(.*)$ index.php [L]
</IfModule>
"""


@pytest.fixture
def shop_dir(tmp_path, monkeypatch):
    """Temporary shop directory with config file, rewrite rules and setup directory."""
    shop = tmp_path / 'shop'
    shop.mkdir()
    (shop / 'tmp').mkdir()
    (shop / 'Setup').mkdir()
    (shop / 'Setup' / 'index.py').write_text('# setup entry\n')
    (shop / config.SHOP_CONFIG_FILE).write_text(CONFIG_FILE_TEMPLATE)
    (shop / config.HTACCESS_FILE).write_text(HTACCESS_TEMPLATE)

    monkeypatch.setattr(config, 'SHOP_DIR', str(shop))
    monkeypatch.setattr(config, 'SETUP_DIR', str(shop / 'Setup'))
    monkeypatch.setattr(config, 'DEMODATA_DIR', str(tmp_path / 'demodata'))
    return shop


@pytest.fixture
def sqlite_driver(monkeypatch):
    monkeypatch.setattr(config, 'DB_DRIVER', 'sqlite')


@pytest.fixture
def db_config(tmp_path, sqlite_driver):
    """Wizard database settings pointing at a (not yet existing) sqlite file."""
    return {
        'host': 'localhost',
        'port': '',
        'user': '',
        'password': '',
        'name': str(tmp_path / 'shop.db'),
        'demo_data': 0,
        'utf_mode': 1,
    }


@pytest.fixture
def make_controller():
    """Build a controller for one simulated request against a dict session bag."""
    def _make(bag, get=None, post=None, **kwargs):
        params = RequestParams(get=get, post=post)
        setup_session = SetupSession(bag, (get or {}).get('sid'))
        language = Language(setup_session, params)
        return Controller(setup_session, params, language=language, wizard=Wizard(), **kwargs)
    return _make
