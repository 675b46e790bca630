"""
Setup wizard controller

One method per wizard step. Each method reads prior state from the session
bag, validates the request, performs the step's side effect, fills the view
and returns the name of the template to render. The step to continue with is
set on the wizard.
"""
import logging
import os
from urllib.parse import urlencode

from markupsafe import Markup

from . import config
from .exceptions import DatabaseError, FileWriteError, SetupError
from .language import Language, get_country_list, get_languages, get_locations
from .services import file_service, requirements_service
from .services.database_service import Database
from .view import View
from .wizard import Wizard

logger = logging.getLogger(__name__)

WELCOME_FIELDS = ('shop_lang', 'location_lang', 'country_lang')


def to_flag(value):
    """Form value -> 0/1 ("on", "1", 1 and True count as set)."""
    try:
        return 1 if int(value) else 0
    except (TypeError, ValueError):
        return 1 if value else 0


class Controller:

    def __init__(self, session, request, language=None, wizard=None,
                 database_factory=Database, host_url=None):
        self._session = session
        self._request = request
        self._language = language or Language(session, request)
        self._wizard = wizard or Wizard()
        self._database_factory = database_factory
        self._host_url = host_url
        self._database = None
        self._view = View()

    # ============================================
    # STEPS
    # ============================================

    def system_req(self):
        """First page with the system requirements check."""
        language = self._language
        continue_setup = True
        group_module_info = {}

        htaccess_update_error = False
        try:
            path = file_service.get_default_path_params(self._host_url)
            path['base_url_path'] = file_service.extract_rewrite_base(path['shop_url'])
            file_service.update_htaccess_file(path)
        except SetupError as e:
            logger.warning(f"Could not update rewrite rules: {e}")
            htaccess_update_error = True

        for group_name, modules in requirements_service.get_system_info().items():
            translated_group_name = language.get_module_name(group_name)
            group_module_info[translated_group_name] = []
            for module_name, module_state in modules.items():
                continue_setup = continue_setup and bool(abs(module_state))

                # the rewrite file could not be updated, so permissions are not sufficient
                if htaccess_update_error and module_name == 'server_permissions':
                    css_class = self._wizard.get_module_class(0)
                    continue_setup = False
                else:
                    css_class = self._wizard.get_module_class(module_state)

                group_module_info[translated_group_name].append({
                    'module': module_name,
                    'class': css_class,
                    'module_name': language.get_module_name(module_name),
                })

        self._set_view_options('STEP_0_TITLE', {
            'continue': continue_setup,
            'group_module_info': group_module_info,
            'languages': get_languages(),
            'language': language.get_language(),
        })

        return 'systemreq.html'

    def welcome(self):
        """Welcome page with shop language and location choices."""
        language = self._language.get_language()

        # admin area defaults to the setup language
        self._view.set_cookie(
            config.ADMIN_LANGUAGE_COOKIE,
            language,
            config.ADMIN_LANGUAGE_COOKIE_LIFETIME,
        )

        self._set_view_options('STEP_1_TITLE', {
            'countries': get_country_list(language),
            'locations': get_locations(language),
            'languages': get_languages(),
            'shop_lang': self._session.get_session_param('shop_lang'),
            'language': language,
            'location_lang': self._session.get_session_param('location_lang'),
            'country_lang': self._session.get_session_param('country_lang'),
            'check_for_updates': self._session.get_session_param('check_for_updates', 1),
        })

        return 'welcome.html'

    def license(self):
        """License confirmation page."""
        self._store_welcome_choices()

        license_path = file_service.get_license_path(self._language.get_language())
        self._set_view_options('STEP_2_TITLE', {
            'license_text': file_service.get_file_contents(license_path),
        })

        return 'license.html'

    def db_info(self):
        """Database connection data entry page."""
        eula = self._request.get_request_var('eula', 'post')
        eula = to_flag(eula if eula is not None else self._session.get_session_param('eula'))
        if not eula:
            logger.info("License conditions were not accepted")
            self._wizard.set_next_step(self._wizard.get_step('STEP_WELCOME'))
            self._view.set_message(self._language.get_text('ERROR_SETUP_CANCELLED'))
            return 'licenseerror.html'

        self._session.set_session_param('eula', eula)

        db_config = self._session.get_session_param('db_config')
        if db_config is None:
            db_config = {
                'host': config.DB_DEFAULT_HOST,
                'port': config.DB_DEFAULT_PORT,
                'user': '',
                'password': '',
                'name': '',
                'demo_data': 1,
            }

        self._set_view_options('STEP_3_TITLE', {
            'db_config': db_config,
            'unicode_support': requirements_service.get_module_info('unicode_support'),
        })

        return 'dbinfo.html'

    def dirs_info(self):
        """Shop paths and admin login entry page."""
        if self._user_decided_overwrite_db():
            self._session.set_session_param('overwrite', True)

        paths = self._session.get_session_param('paths') or file_service.get_default_path_params(self._host_url)
        setup_config = self._session.get_session_param('setup_config') or {
            'delete_setup_dir': to_flag(self._wizard.delete_setup_directory()),
        }

        self._set_view_options('STEP_4_TITLE', {
            'admin_data': self._session.get_session_param('admin_data') or {},
            'paths': paths,
            'setup_config': setup_config,
        })

        return 'dirsinfo.html'

    def db_connect(self):
        """Test the database connection, creating the database when it is missing."""
        view = self._view
        language = self._language
        view.set_title('STEP_3_1_TITLE')

        db_config = dict(self._request.get_request_var('db', 'post') or {})
        db_config['demo_data'] = to_flag(db_config.get('demo_data'))
        db_config['utf_mode'] = 1
        self._session.set_session_param('db_config', db_config)

        if not db_config.get('host') or not db_config.get('name'):
            return self._retry('STEP_DB_INFO', language.get_text('ERROR_FILL_ALL_FIELDS'))

        database = self._get_database()
        try:
            try:
                database.open_database(db_config)
            except DatabaseError as e:
                if e.code in (DatabaseError.ERROR_DB_CONNECT, DatabaseError.ERROR_DB_VERSION):
                    return self._retry('STEP_DB_INFO', self._error_text(e))

                # database is not there yet, try to create it
                try:
                    database.create_db(db_config['name'])
                except DatabaseError as create_error:
                    return self._retry('STEP_DB_INFO', self._error_text(create_error))
                view.set_view_param('created', 1)

            view.set_view_param('db_config', db_config)

            if not self._database_can_be_overwritten(database):
                self._form_overwrite_message(db_config['name'], 'STEP_DIRS_INFO')
                return 'default.html'
        finally:
            self._close_database()

        self._wizard.set_next_step(self._wizard.get_step('STEP_DIRS_INFO'))

        return 'dbconnect.html'

    def db_create(self):
        """Create the shop tables, data and admin login."""
        view = self._view
        language = self._language
        view.set_title('STEP_4_2_TITLE')

        db_config = self._session.get_session_param('db_config') or {}

        database = self._get_database()
        try:
            template = self._create_shop_database(database, db_config)
        finally:
            self._close_database()
        if template:
            return template

        logger.info(f"Database {db_config.get('name')} created")
        view.set_message(language.get_text('STEP_4_2_UPDATING_DATABASE'))
        self._wizard.set_next_step(self._wizard.get_step('STEP_FINISH'))

        return 'default.html'

    def dirs_write(self):
        """Validate paths and admin login, then write the config and rewrite files."""
        view = self._view
        language = self._language
        view.set_title('STEP_4_1_TITLE')

        paths = dict(self._request.get_request_var('paths', 'post') or {})
        setup_config = dict(self._request.get_request_var('setup_config', 'post') or {})
        admin_data = dict(self._request.get_request_var('admin_data', 'post') or {})

        for key in ('shop_url', 'shop_dir', 'compile_dir'):
            paths[key] = file_service.prepare_path(paths.get(key))
        paths['base_url_path'] = file_service.extract_rewrite_base(paths['shop_url'])

        setup_config['delete_setup_dir'] = to_flag(setup_config.get('delete_setup_dir'))

        self._session.set_session_param('paths', paths)
        self._session.set_session_param('setup_config', setup_config)
        self._session.set_session_param('admin_data', admin_data)

        required = (
            paths['shop_url'], paths['shop_dir'], paths['compile_dir'],
            admin_data.get('login_name'), admin_data.get('password'), admin_data.get('password_confirm'),
        )
        if not all(required):
            return self._retry('STEP_DIRS_INFO', language.get_text('ERROR_FILL_ALL_FIELDS'))

        if len(admin_data['password']) < config.MIN_PASSWORD_LENGTH:
            return self._retry('STEP_DIRS_INFO', language.get_text('ERROR_PASSWORD_TOO_SHORT'))

        if admin_data['password'] != admin_data['password_confirm']:
            return self._retry('STEP_DIRS_INFO', language.get_text('ERROR_PASSWORDS_DO_NOT_MATCH'))

        if not file_service.is_valid_email(admin_data['login_name']):
            return self._retry('STEP_DIRS_INFO', language.get_text('ERROR_USER_NAME_DOES_NOT_MATCH_PATTERN'))

        db_config = self._session.get_session_param('db_config') or {}
        try:
            params = dict(db_config)
            params.update(paths)
            file_service.update_config_file(params)
            file_service.update_htaccess_file(params)
        except SetupError as e:
            return self._retry('STEP_DIRS_INFO', self._error_text(e))

        view.set_message(language.get_text('STEP_4_1_DATA_WAS_WRITTEN'))
        view.set_view_param('paths', paths)
        view.set_view_param('setup_config', setup_config)
        view.set_view_param('db_config', db_config)
        self._wizard.set_next_step(self._wizard.get_step('STEP_DB_CREATE'))

        return 'default.html'

    def finish(self):
        """Final page."""
        paths = self._session.get_session_param('paths') or {}
        config_file = config.get_shop_config_path(paths.get('shop_dir'))

        self._set_view_options('STEP_6_TITLE', {
            'paths': paths,
            'setup_config': self._session.get_session_param('setup_config') or {},
            'config_file': config_file,
            'writable_config': file_service.is_writable(config_file),
        })

        return 'finish.html'

    # ============================================
    # HELPERS
    # ============================================

    def get_view(self):
        return self._view

    def get_wizard(self):
        return self._wizard

    def _get_database(self):
        if self._database is None:
            self._database = self._database_factory()
        return self._database

    def _close_database(self):
        if self._database is not None:
            self._database.close()
            self._database = None

    def _create_shop_database(self, database, db_config):
        """
        Install schema, shop data, settings and admin login.

        Returns:
            str: Template to render when the step stopped early, otherwise None
        """
        language = self._language

        try:
            database.open_database(db_config)
            database.test_create_view()
        except DatabaseError as e:
            return self._retry('STEP_DB_INFO', self._error_text(e))

        if not self._database_can_be_overwritten(database):
            self._form_overwrite_message(db_config.get('name'), 'STEP_DB_CREATE')
            return 'default.html'

        database.set_collation(db_config.get('utf_mode', 1))

        try:
            database.query_file(os.path.join(file_service.get_sql_directory(), 'database_schema.sql'))

            try:
                self._install_shop_data(database, db_config.get('demo_data'))
            except SetupError as e:
                message = Markup('{}<br><br>{}').format(
                    language.get_text('ERROR_BAD_DEMODATA'), self._error_text(e))
                return self._retry('STEP_DB_INFO', message)
        except SetupError as e:
            return self._retry('STEP_DB_INFO', self._error_text(e))

        try:
            database.save_shop_settings(self._get_shop_settings())
        except SetupError as e:
            return self._retry('STEP_DB_INFO', self._error_text(e))

        admin_data = self._session.get_session_param('admin_data') or {}
        if not admin_data.get('login_name') or not admin_data.get('password'):
            return self._retry('STEP_DIRS_INFO', language.get_text('ERROR_FILL_ALL_FIELDS'))

        try:
            database.write_admin_login_data(admin_data.get('login_name'), admin_data.get('password'))
        except SetupError as e:
            return self._retry('STEP_DIRS_INFO', self._error_text(e))

        return None

    def _retry(self, step_name, message):
        """Show `message` and offer `step_name` as the step to continue with."""
        logger.warning(f"Setup step failed, returning to {step_name}: {message}")
        self._wizard.set_next_step(self._wizard.get_step(step_name))
        self._view.set_message(message)
        return 'default.html'

    def _error_text(self, exception):
        """Localized message for a service exception."""
        get_text = self._language.get_text

        if isinstance(exception, DatabaseError):
            if exception.code == DatabaseError.ERROR_DB_CONNECT:
                return f"{get_text('ERROR_DB_CONNECT')} - {exception}"
            if exception.code == DatabaseError.ERROR_DB_VERSION and exception.params:
                return get_text('ERROR_DB_VERSION') % exception.params
            if exception.code == DatabaseError.ERROR_BAD_SQL:
                return f"{get_text('ERROR_BAD_SQL')}{exception}"
            if exception.code == DatabaseError.ERROR_VIEWS_CANT_CREATE:
                return f"{get_text('ERROR_VIEWS_CANT_CREATE')} - {exception}"

        if isinstance(exception, FileWriteError) and exception.text_key:
            return get_text(exception.text_key) % exception.path

        return str(exception)

    def _store_welcome_choices(self):
        posted = [self._request.get_request_var(name, 'post') for name in WELCOME_FIELDS]
        if all(value is None for value in posted):
            return

        for name, value in zip(WELCOME_FIELDS, posted):
            if value is not None:
                self._session.set_session_param(name, value)
        self._session.set_session_param(
            'check_for_updates',
            to_flag(self._request.get_request_var('check_for_updates', 'post')),
        )

    def _get_shop_settings(self):
        return {
            'shop_language': self._session.get_session_param('shop_lang'),
            'shop_country': self._session.get_session_param('country_lang'),
            'shop_location': self._session.get_session_param('location_lang'),
            'admin_language': self._session.get_session_param('setup_lang'),
            'check_for_updates': self._session.get_session_param('check_for_updates'),
        }

    def _install_shop_data(self, database, demodata=0):
        """Install the demo data package, or initial data plus optional bundled demo data."""
        sql_dir = file_service.get_sql_directory()
        migrations_dir = file_service.get_migrations_directory()

        if file_service.check_if_demodata_prepared(demodata):
            database.migrate(migrations_dir)
            database.query_file(file_service.get_demodata_sql_file_path())
            paths = self._session.get_session_param('paths') or {}
            file_service.demodata_assets_install(paths.get('shop_dir') or config.SHOP_DIR)
        else:
            database.query_file(os.path.join(sql_dir, 'initial_data.sql'))
            database.migrate(migrations_dir)
            if to_flag(demodata):
                database.query_file(os.path.join(sql_dir, 'demodata.sql'))

    def _database_can_be_overwritten(self, database):
        """Overwriting is fine once the user opted in, or when no shop is installed yet."""
        if self._user_decided_overwrite_db():
            return True
        return not file_service.check_db_exists(database)

    def _user_decided_overwrite_db(self):
        overwrite_check = self._request.get_request_var('ow', 'get')
        return overwrite_check is not None or bool(self._session.get_session_param('overwrite'))

    def _form_overwrite_message(self, database_name, step_name):
        """Ask whether an existing shop database may be overwritten."""
        language = self._language
        setup_step = self._wizard.get_step(step_name)
        link = '?' + urlencode({'sid': self._session.get_sid(), 'istep': setup_step, 'ow': 1})

        logger.warning(f"Database {database_name} already contains a shop, asking before overwriting")
        self._view.set_message(Markup(
            '{}<br><br>{} <a href="{}" id="step3Continue" style="text-decoration: underline;">{}</a>'
        ).format(
            language.get_text('ERROR_DB_ALREADY_EXISTS') % database_name,
            language.get_text('STEP_4_2_OVERWRITE_DB'),
            link,
            language.get_text('HERE'),
        ))
        self._view.set_view_param('overwrite_step', setup_step)
        self._view.set_view_param('overwrite_link', link)

    def _set_view_options(self, title, view_options):
        self._view.set_title(title)
        for key, value in view_options.items():
            self._view.set_view_param(key, value)
