"""Tests for the wizard steps, run against a dict session bag."""
import os

import pytest
from markupsafe import Markup
from sqlalchemy import create_engine, text

from shop_setup import config
from shop_setup.exceptions import DatabaseError
from shop_setup.services import requirements_service
from shop_setup.services.database_service import Database
from shop_setup.texts import TEXTS

EN = TEXTS['en']


class FakeDatabase:
    """Database stand-in for the connect and create steps."""

    def __init__(self, has_shop=False, open_error=None, create_error=None, view_error=None):
        self.has_shop = has_shop
        self.open_error = open_error
        self.create_error = create_error
        self.view_error = view_error
        self.created = None
        self.closed = False

    def open_database(self, db_config):
        if self.open_error:
            raise self.open_error

    def create_db(self, name):
        if self.create_error:
            raise self.create_error
        self.created = name

    def test_create_view(self):
        if self.view_error:
            raise self.view_error

    def has_table(self, table_name):
        return self.has_shop

    def close(self):
        self.closed = True


def connect_post(**overrides):
    db = {'host': 'localhost', 'port': '3306', 'user': 'shop', 'password': 'secret', 'name': 'shop', 'demo_data': '1'}
    db.update(overrides)
    return {'db': db}


def dirs_post(**admin_overrides):
    admin_data = {'login_name': 'admin@example.com', 'password': 'secret1', 'password_confirm': 'secret1'}
    admin_data.update(admin_overrides)
    return {
        'paths': {'shop_url': 'http://shop.local/store/', 'shop_dir': config.SHOP_DIR,
                  'compile_dir': f"{config.SHOP_DIR}/tmp/"},
        'admin_data': admin_data,
        'setup_config': {'delete_setup_dir': '1'},
    }


def query(db_config, sql):
    engine = create_engine(f"sqlite:///{db_config['name']}")
    try:
        with engine.connect() as conn:
            return conn.execute(text(sql)).fetchall()
    finally:
        engine.dispose()


# ============================================
# Requirements, welcome and license
# ============================================

def test_system_req_lists_modules(shop_dir, sqlite_driver, make_controller):
    controller = make_controller({})
    assert controller.system_req() == 'systemreq.html'

    view = controller.get_view()
    assert view.title == 'STEP_0_TITLE'
    groups = view.get_view_param('group_module_info')
    assert list(groups) == [EN['MOD_SERVER_CONFIG'], EN['MOD_PYTHON_MODULES']]
    modules = {module['module']: module['class'] for module in groups[EN['MOD_SERVER_CONFIG']]}
    assert modules['server_permissions'] == 'pass'
    assert view.get_view_param('language') == 'en'


def test_system_req_sets_rewrite_base(shop_dir, make_controller):
    make_controller({}).system_req()
    assert 'RewriteBase /\n' in (shop_dir / '.htaccess').read_text()


def test_system_req_blocks_on_failed_module(shop_dir, monkeypatch, make_controller):
    monkeypatch.setattr(requirements_service, 'get_system_info', lambda: {
        'server_config': {'python_version': 2, 'rewrite_file': -1},
        'python_modules': {'sqlalchemy': 0},
    })
    controller = make_controller({})
    controller.system_req()
    assert controller.get_view().get_view_param('continue') is False


def test_system_req_unknown_state_does_not_block(shop_dir, monkeypatch, make_controller):
    monkeypatch.setattr(requirements_service, 'get_system_info', lambda: {
        'server_config': {'python_version': 2, 'rewrite_file': -1, 'server_permissions': 1},
    })
    controller = make_controller({})
    controller.system_req()
    assert controller.get_view().get_view_param('continue') is True


def test_system_req_without_rewrite_file_fails_permissions(shop_dir, monkeypatch, make_controller):
    os.remove(shop_dir / '.htaccess')
    monkeypatch.setattr(requirements_service, 'get_system_info', lambda: {
        'server_config': {'server_permissions': 2},
    })
    controller = make_controller({})
    controller.system_req()

    view = controller.get_view()
    assert view.get_view_param('continue') is False
    module = view.get_view_param('group_module_info')[EN['MOD_SERVER_CONFIG']][0]
    assert module['class'] == 'fail'


def test_welcome_sets_admin_language_cookie(make_controller):
    controller = make_controller({'sid': 'x', 'setup_lang': 'de'})
    assert controller.welcome() == 'welcome.html'

    view = controller.get_view()
    assert view.cookies == [{
        'key': config.ADMIN_LANGUAGE_COOKIE,
        'value': 'de',
        'max_age': config.ADMIN_LANGUAGE_COOKIE_LIFETIME,
        'path': '/',
    }]
    assert view.get_view_param('countries')['de'] == 'Deutschland'
    assert view.get_view_param('check_for_updates') == 1


def test_license_stores_welcome_choices(make_controller):
    bag = {}
    controller = make_controller(bag, post={'shop_lang': 'de', 'location_lang': 'eu', 'country_lang': 'at'})
    assert controller.license() == 'license.html'

    assert bag['shop_lang'] == 'de'
    assert bag['location_lang'] == 'eu'
    assert bag['country_lang'] == 'at'
    assert bag['check_for_updates'] == 0
    assert 'LICENSE' in controller.get_view().get_view_param('license_text')


def test_license_without_post_keeps_session(make_controller):
    bag = {'sid': 'x', 'shop_lang': 'de', 'check_for_updates': 1}
    make_controller(bag).license()
    assert bag['shop_lang'] == 'de'
    assert bag['check_for_updates'] == 1


# ============================================
# Database info and connect
# ============================================

def test_db_info_requires_license(make_controller):
    controller = make_controller({}, post={'eula': '0'})
    assert controller.db_info() == 'licenseerror.html'
    assert controller.get_wizard().get_next_step() == 200
    assert controller.get_view().message == EN['ERROR_SETUP_CANCELLED']


def test_db_info_defaults(make_controller):
    bag = {}
    controller = make_controller(bag, post={'eula': '1'})
    assert controller.db_info() == 'dbinfo.html'

    db_config = controller.get_view().get_view_param('db_config')
    assert db_config['host'] == config.DB_DEFAULT_HOST
    assert db_config['port'] == config.DB_DEFAULT_PORT
    assert db_config['demo_data'] == 1
    assert bag['eula'] == 1


def test_db_info_uses_accepted_license_from_session(make_controller):
    bag = {'sid': 'x', 'eula': 1, 'db_config': {'host': 'db.local', 'name': 'shop'}}
    controller = make_controller(bag)
    assert controller.db_info() == 'dbinfo.html'
    assert controller.get_view().get_view_param('db_config')['host'] == 'db.local'


def test_db_connect_missing_fields(make_controller):
    controller = make_controller({}, post=connect_post(name=''), database_factory=FakeDatabase)
    assert controller.db_connect() == 'default.html'
    assert controller.get_wizard().get_next_step() == 400
    assert controller.get_view().message == EN['ERROR_FILL_ALL_FIELDS']


def test_db_connect_stores_config(make_controller):
    bag = {}
    controller = make_controller(bag, post=connect_post(), database_factory=FakeDatabase)
    assert controller.db_connect() == 'dbconnect.html'
    assert controller.get_wizard().get_next_step() == 500
    assert bag['db_config']['demo_data'] == 1
    assert bag['db_config']['utf_mode'] == 1


def test_db_connect_connection_error(make_controller):
    database = FakeDatabase(open_error=DatabaseError('Access denied', DatabaseError.ERROR_DB_CONNECT))
    controller = make_controller({}, post=connect_post(), database_factory=lambda: database)

    assert controller.db_connect() == 'default.html'
    assert controller.get_wizard().get_next_step() == 400
    assert controller.get_view().message == f"{EN['ERROR_DB_CONNECT']} - Access denied"


def test_db_connect_version_error(make_controller):
    error = DatabaseError('too old', DatabaseError.ERROR_DB_VERSION, params=('5.1.73', '5.5'))
    controller = make_controller({}, post=connect_post(), database_factory=lambda: FakeDatabase(open_error=error))

    controller.db_connect()
    assert controller.get_view().message == EN['ERROR_DB_VERSION'] % ('5.1.73', '5.5')


def test_db_connect_creates_missing_database(make_controller):
    database = FakeDatabase(open_error=DatabaseError('missing', DatabaseError.ERROR_DB_NOT_EXISTS))
    controller = make_controller({}, post=connect_post(name='new_shop'), database_factory=lambda: database)

    assert controller.db_connect() == 'dbconnect.html'
    assert database.created == 'new_shop'
    assert controller.get_view().get_view_param('created') == 1


def test_db_connect_create_failure(make_controller):
    database = FakeDatabase(
        open_error=DatabaseError('missing', DatabaseError.ERROR_DB_NOT_EXISTS),
        create_error=DatabaseError('denied', DatabaseError.ERROR_DB_NOT_EXISTS),
    )
    controller = make_controller({}, post=connect_post(), database_factory=lambda: database)

    assert controller.db_connect() == 'default.html'
    assert controller.get_wizard().get_next_step() == 400
    assert controller.get_view().message == 'denied'


def test_db_connect_closes_database(make_controller):
    database = FakeDatabase()
    controller = make_controller({}, post=connect_post(), database_factory=lambda: database)

    controller.db_connect()
    assert database.closed


def test_db_connect_closes_database_on_error(make_controller):
    database = FakeDatabase(open_error=DatabaseError('Access denied', DatabaseError.ERROR_DB_CONNECT))
    controller = make_controller({}, post=connect_post(), database_factory=lambda: database)

    controller.db_connect()
    assert database.closed


# ============================================
# Overwrite guard
# ============================================

@pytest.mark.parametrize('get, session_flag, has_shop, allowed', [
    (None, False, False, True),
    (None, False, True, False),
    ({'ow': '1'}, False, True, True),
    (None, True, True, True),
    ({'ow': '1'}, True, False, True),
])
def test_overwrite_guard(make_controller, get, session_flag, has_shop, allowed):
    bag = {'sid': 'abc'}
    if session_flag:
        bag['overwrite'] = True
    if get:
        get = dict(get, sid='abc')

    controller = make_controller(bag, get=get, post=connect_post(),
                                 database_factory=lambda: FakeDatabase(has_shop=has_shop))
    template = controller.db_connect()

    if allowed:
        assert template == 'dbconnect.html'
        assert controller.get_wizard().get_next_step() == 500
    else:
        assert template == 'default.html'
        assert controller.get_wizard().get_next_step() is None


def test_overwrite_prompt_links_back_with_sid(make_controller):
    controller = make_controller({'sid': 'abc'}, post=connect_post(name='live_shop'),
                                 database_factory=lambda: FakeDatabase(has_shop=True))
    controller.db_connect()

    view = controller.get_view()
    assert view.get_view_param('overwrite_step') == 500
    assert view.get_view_param('overwrite_link') == '?sid=abc&istep=500&ow=1'
    assert isinstance(view.message, Markup)
    assert EN['ERROR_DB_ALREADY_EXISTS'] % 'live_shop' in view.message
    assert 'href="?sid=abc&amp;istep=500&amp;ow=1"' in view.message


def test_overwrite_prompt_escapes_database_name(make_controller):
    controller = make_controller({'sid': 'abc'}, post=connect_post(name='<script>'),
                                 database_factory=lambda: FakeDatabase(has_shop=True))
    controller.db_connect()
    assert '<script>' not in controller.get_view().message


def test_dirs_info_remembers_overwrite_decision(shop_dir, make_controller):
    bag = {'sid': 'abc'}
    controller = make_controller(bag, get={'sid': 'abc', 'ow': '1'})
    assert controller.dirs_info() == 'dirsinfo.html'
    assert bag['overwrite'] is True


def test_dirs_info_defaults(shop_dir, make_controller):
    controller = make_controller({})
    controller.dirs_info()

    view = controller.get_view()
    assert view.get_view_param('paths')['shop_dir'] == str(shop_dir)
    assert view.get_view_param('setup_config') == {'delete_setup_dir': 1}
    assert view.get_view_param('admin_data') == {}


def test_dirs_info_prefers_session_paths(shop_dir, make_controller):
    paths = {'shop_url': 'http://other/', 'shop_dir': '/srv/other', 'compile_dir': '/srv/other/tmp'}
    controller = make_controller({'sid': 'x', 'paths': paths})
    controller.dirs_info()
    assert controller.get_view().get_view_param('paths') == paths


# ============================================
# Directories write
# ============================================

@pytest.mark.parametrize('admin_overrides, message_key', [
    ({'login_name': ''}, 'ERROR_FILL_ALL_FIELDS'),
    ({'password_confirm': ''}, 'ERROR_FILL_ALL_FIELDS'),
    ({'password': 'short', 'password_confirm': 'other'}, 'ERROR_PASSWORD_TOO_SHORT'),
    ({'password_confirm': 'secret2'}, 'ERROR_PASSWORDS_DO_NOT_MATCH'),
    ({'login_name': 'admin'}, 'ERROR_USER_NAME_DOES_NOT_MATCH_PATTERN'),
])
def test_dirs_write_validation(shop_dir, make_controller, admin_overrides, message_key):
    controller = make_controller({}, post=dirs_post(**admin_overrides))

    assert controller.dirs_write() == 'default.html'
    assert controller.get_wizard().get_next_step() == 500
    assert controller.get_view().message == EN[message_key]
    assert "'<dbHost>'" in (shop_dir / 'config.inc.php').read_text()


def test_dirs_write_missing_path(shop_dir, make_controller):
    post = dirs_post()
    post['paths']['compile_dir'] = ''
    controller = make_controller({}, post=post)

    controller.dirs_write()
    assert controller.get_view().message == EN['ERROR_FILL_ALL_FIELDS']


def test_dirs_write_writes_config(shop_dir, make_controller):
    bag = {'sid': 'x', 'db_config': {'host': 'db.local', 'port': '3306', 'user': 'shop',
                                     'password': 'pw', 'name': 'shop', 'utf_mode': 1}}
    controller = make_controller(bag, post=dirs_post())

    assert controller.dirs_write() == 'default.html'
    assert controller.get_wizard().get_next_step() == 420
    assert controller.get_view().message == EN['STEP_4_1_DATA_WAS_WRITTEN']

    content = (shop_dir / 'config.inc.php').read_text()
    assert "$this->dbHost = 'db.local';" in content
    assert "$this->sShopURL = 'http://shop.local/store';" in content
    assert f"$this->sCompileDir = '{shop_dir}/tmp';" in content
    assert 'RewriteBase /store\n' in (shop_dir / '.htaccess').read_text()

    assert bag['paths']['base_url_path'] == '/store'
    assert bag['setup_config'] == {'delete_setup_dir': 1}
    assert bag['admin_data']['login_name'] == 'admin@example.com'


def test_dirs_write_unwritable_target(tmp_path, shop_dir, make_controller):
    post = dirs_post()
    post['paths']['shop_dir'] = str(tmp_path / 'missing')
    controller = make_controller({}, post=post)

    assert controller.dirs_write() == 'default.html'
    assert controller.get_wizard().get_next_step() == 500
    config_path = os.path.join(str(tmp_path / 'missing'), 'config.inc.php')
    assert controller.get_view().message == EN['ERROR_COULD_NOT_OPEN_CONFIG_FILE'] % config_path


# ============================================
# Database create
# ============================================

@pytest.fixture
def install_bag(shop_dir, db_config):
    return {
        'sid': 'abc',
        'setup_lang': 'en',
        'shop_lang': 'de',
        'country_lang': 'de',
        'location_lang': 'de_ch_at',
        'check_for_updates': 1,
        'db_config': db_config,
        'paths': {'shop_dir': str(shop_dir), 'shop_url': 'http://shop.local/'},
        'admin_data': {'login_name': 'admin@example.com', 'password': 'secret1', 'password_confirm': 'secret1'},
    }


def connect(make_controller, bag):
    controller = make_controller(bag, post={'db': dict(bag['db_config'])})
    assert controller.db_connect() == 'dbconnect.html'


def test_db_create_installs_shop(make_controller, install_bag, db_config):
    connect(make_controller, install_bag)
    controller = make_controller(install_bag)

    assert controller.db_create() == 'default.html'
    assert controller.get_wizard().get_next_step() == 700
    assert controller.get_view().message == EN['STEP_4_2_UPDATING_DATABASE']

    assert query(db_config, "SELECT value FROM shop_config WHERE name = 'shop_language'") == [('de',)]
    assert query(db_config, "SELECT username FROM shop_users") == [('admin@example.com',)]
    assert len(query(db_config, "SELECT version FROM schema_migrations")) == 2
    assert query(db_config, "SELECT COUNT(*) FROM shop_countries") == [(5,)]
    assert query(db_config, "SELECT COUNT(*) FROM shop_articles") == [(0,)]


def test_db_create_with_bundled_demodata(make_controller, install_bag, db_config):
    install_bag['db_config']['demo_data'] = 1
    connect(make_controller, install_bag)

    assert make_controller(install_bag).db_create() == 'default.html'
    assert query(db_config, "SELECT COUNT(*) FROM shop_articles") == [(3,)]


def test_db_create_with_demodata_package(make_controller, install_bag, db_config, shop_dir):
    install_bag['db_config']['demo_data'] = 1
    os.makedirs(os.path.join(config.DEMODATA_DIR, 'out'))
    with open(os.path.join(config.DEMODATA_DIR, 'demodata.sql'), 'w') as f:
        f.write("INSERT INTO shop_categories (id, title) VALUES ('cat_demo', 'Demo');\n")
    with open(os.path.join(config.DEMODATA_DIR, 'out', 'logo.png'), 'w') as f:
        f.write('logo')
    connect(make_controller, install_bag)

    assert make_controller(install_bag).db_create() == 'default.html'
    assert query(db_config, "SELECT id FROM shop_categories") == [('cat_demo',)]
    assert query(db_config, "SELECT COUNT(*) FROM shop_countries") == [(0,)]
    assert (shop_dir / 'out' / 'logo.png').read_text() == 'logo'


def test_db_create_bad_demodata(make_controller, install_bag):
    install_bag['db_config']['demo_data'] = 1
    os.makedirs(config.DEMODATA_DIR)
    with open(os.path.join(config.DEMODATA_DIR, 'demodata.sql'), 'w') as f:
        f.write("INSERT INTO no_such_table VALUES (1);\n")
    connect(make_controller, install_bag)

    controller = make_controller(install_bag)
    assert controller.db_create() == 'default.html'
    assert controller.get_wizard().get_next_step() == 400
    message = controller.get_view().message
    assert message.startswith(EN['ERROR_BAD_DEMODATA'])
    assert EN['ERROR_BAD_SQL'] in message


def test_db_create_refuses_to_overwrite_shop(make_controller, install_bag):
    connect(make_controller, install_bag)
    make_controller(install_bag).db_create()

    controller = make_controller(install_bag)
    assert controller.db_create() == 'default.html'
    assert controller.get_wizard().get_next_step() is None
    assert controller.get_view().get_view_param('overwrite_step') == 420

    controller = make_controller(install_bag, get={'sid': 'abc', 'ow': '1'})
    assert controller.db_create() == 'default.html'
    assert controller.get_wizard().get_next_step() == 700


def test_db_create_bad_schema(make_controller, install_bag, tmp_path, monkeypatch):
    sql_dir = tmp_path / 'sql'
    sql_dir.mkdir()
    (sql_dir / 'database_schema.sql').write_text('CREATE TABLE shop_config (;\n')
    monkeypatch.setattr(config, 'SQL_DIR', str(sql_dir))
    connect(make_controller, install_bag)

    controller = make_controller(install_bag)
    assert controller.db_create() == 'default.html'
    assert controller.get_wizard().get_next_step() == 400
    assert controller.get_view().message.startswith(EN['ERROR_BAD_SQL'])


def test_db_create_without_database(make_controller, install_bag):
    controller = make_controller(install_bag)
    assert controller.db_create() == 'default.html'
    assert controller.get_wizard().get_next_step() == 400


def test_db_create_without_admin_login(make_controller, install_bag):
    install_bag['admin_data'] = {}
    connect(make_controller, install_bag)

    controller = make_controller(install_bag)
    assert controller.db_create() == 'default.html'
    assert controller.get_wizard().get_next_step() == 500
    assert controller.get_view().message == EN['ERROR_FILL_ALL_FIELDS']


def test_db_create_view_privilege_missing(make_controller, install_bag):
    error = DatabaseError('CREATE VIEW command denied', DatabaseError.ERROR_VIEWS_CANT_CREATE)
    database = FakeDatabase(view_error=error)
    controller = make_controller(install_bag, database_factory=lambda: database)

    assert controller.db_create() == 'default.html'
    assert controller.get_wizard().get_next_step() == 400
    assert controller.get_view().message == f"{EN['ERROR_VIEWS_CANT_CREATE']} - CREATE VIEW command denied"
    assert database.closed


def test_db_steps_dispose_engine(make_controller, install_bag):
    opened = []

    def factory():
        opened.append(Database())
        return opened[-1]

    controller = make_controller(install_bag, post={'db': dict(install_bag['db_config'])}, database_factory=factory)
    assert controller.db_connect() == 'dbconnect.html'

    controller = make_controller(install_bag, database_factory=factory)
    assert controller.db_create() == 'default.html'
    assert controller.get_wizard().get_next_step() == 700

    assert len(opened) == 2
    assert all(database._engine is None for database in opened)


# ============================================
# Finish
# ============================================

def test_finish(shop_dir, make_controller):
    paths = {'shop_dir': str(shop_dir), 'shop_url': 'http://shop.local/'}
    controller = make_controller({'sid': 'x', 'paths': paths, 'setup_config': {'delete_setup_dir': 1}})

    assert controller.finish() == 'finish.html'
    view = controller.get_view()
    assert view.title == 'STEP_6_TITLE'
    assert view.get_view_param('config_file') == str(shop_dir / 'config.inc.php')
    assert view.get_view_param('writable_config') is True
    assert view.get_view_param('setup_config') == {'delete_setup_dir': 1}
