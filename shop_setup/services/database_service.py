"""
Database operations for the setup wizard

Handles:
- Opening a connection from the wizard's db_config (creating the database if missing)
- Server version and view privilege checks
- Running SQL script files and migrations
- Saving shop settings and the administrator login
"""
import glob
import logging
import os
from datetime import datetime

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import generate_password_hash

from .. import config
from ..exceptions import DatabaseError

logger = logging.getLogger(__name__)

# Database to connect to when the target database does not exist yet
SERVER_DATABASES = {
    'postgresql': 'postgres',
}

MIGRATIONS_TABLE = 'schema_migrations'
ADMIN_USER_ID = 'defaultadmin'
VIEW_TEST_NAME = 'setup_view_test'


def split_sql_statements(sql_text, dialect=None):
    """
    Split a SQL script into single statements.

    Semicolons inside quotes and comments do not end a statement. `#` starts
    a line comment only for MySQL; elsewhere it is an operator.
    """
    hash_comments = (dialect or get_dialect()) == 'mysql'
    statements = []
    current = []
    quote = None
    i = 0
    length = len(sql_text)

    while i < length:
        char = sql_text[i]
        pair = sql_text[i:i + 2]

        if quote:
            current.append(char)
            if char == '\\' and quote != '`' and i + 1 < length:
                current.append(sql_text[i + 1])
                i += 2
                continue
            if char == quote:
                quote = None
            i += 1
            continue

        if pair == '--' or (hash_comments and char == '#'):
            end = sql_text.find('\n', i)
            i = length if end == -1 else end + 1
            current.append('\n')
            continue

        if pair == '/*':
            end = sql_text.find('*/', i + 2)
            i = length if end == -1 else end + 2
            current.append(' ')
            continue

        if char in ("'", '"', '`'):
            quote = char
        elif char == ';':
            statement = ''.join(current).strip()
            if statement:
                statements.append(statement)
            current = []
            i += 1
            continue

        current.append(char)
        i += 1

    statement = ''.join(current).strip()
    if statement:
        statements.append(statement)

    return statements


def get_dialect(db_driver=None):
    return (db_driver or config.DB_DRIVER).split('+')[0]


def build_database_url(db_config, with_database=True):
    """
    Build the SQLAlchemy URL for a wizard db_config.

    For sqlite the database name is the path of the database file.
    """
    driver = config.DB_DRIVER
    dialect = get_dialect(driver)

    if dialect == 'sqlite':
        return URL.create(driver, database=db_config.get('name'))

    port = db_config.get('port')
    try:
        port = int(port) if port else None
    except (TypeError, ValueError):
        port = None

    database = db_config.get('name') if with_database else SERVER_DATABASES.get(dialect)

    return URL.create(
        driver,
        username=db_config.get('user') or None,
        password=db_config.get('password') or None,
        host=db_config.get('host') or None,
        port=port,
        database=database,
    )


def _create_engine(url, **kwargs):
    """create_engine() with a missing DB driver reported as a connection error."""
    try:
        return create_engine(url, **kwargs)
    except ImportError as e:
        logger.error(f"Database driver for {url.drivername} is not installed: {e}")
        raise DatabaseError(f"Database driver {url.drivername} is not installed: {e}",
                            DatabaseError.ERROR_DB_CONNECT) from e
    except SQLAlchemyError as e:
        raise DatabaseError(f"Invalid database settings: {e}", DatabaseError.ERROR_DB_CONNECT) from e


class Database:
    """Connection to the shop database configured in the wizard."""

    def __init__(self):
        self._engine = None
        self._db_config = None

    @property
    def dialect(self):
        return get_dialect()

    def _get_engine(self):
        if self._engine is None:
            raise DatabaseError("Database is not opened", DatabaseError.ERROR_DB_CONNECT)
        return self._engine

    def open_database(self, db_config):
        """
        Connect to the configured database.

        Raises:
            DatabaseError: ERROR_DB_CONNECT when the server is unreachable,
                ERROR_DB_VERSION when the server is too old,
                ERROR_DB_NOT_EXISTS when the server is fine but the database is missing.
        """
        self.close()
        self._db_config = dict(db_config)
        name = self._db_config.get('name')

        if self.dialect == 'sqlite':
            if not name or not os.path.isfile(name):
                raise DatabaseError(f"Database {name} does not exist", DatabaseError.ERROR_DB_NOT_EXISTS)
            self._engine = _create_engine(build_database_url(self._db_config))
            logger.info(f"Opened sqlite database {name}")
            return self

        engine = _create_engine(build_database_url(self._db_config), pool_pre_ping=True)
        try:
            with engine.connect() as conn:
                self._check_server_version(conn)
            self._engine = engine
            logger.info(f"Connected to database {name} on {self._db_config.get('host')}")
            return self
        except DatabaseError:
            engine.dispose()
            raise
        except SQLAlchemyError as e:
            engine.dispose()
            logger.warning(f"Could not open database {name}: {e}")

        # The database itself failed, check whether the server is reachable
        server_engine = _create_engine(build_database_url(self._db_config, with_database=False))
        try:
            with server_engine.connect() as conn:
                self._check_server_version(conn)
        except SQLAlchemyError as e:
            logger.error(f"Database server connection failed: {e}")
            raise DatabaseError(str(getattr(e, 'orig', None) or e), DatabaseError.ERROR_DB_CONNECT) from e
        finally:
            server_engine.dispose()

        raise DatabaseError(f"Database {name} does not exist", DatabaseError.ERROR_DB_NOT_EXISTS)

    def _check_server_version(self, conn):
        if self.dialect != 'mysql':
            return

        version = conn.dialect.server_version_info or ()
        if version and tuple(version[:2]) < config.MIN_MYSQL_VERSION:
            found = '.'.join(str(v) for v in version)
            required = '.'.join(str(v) for v in config.MIN_MYSQL_VERSION)
            logger.error(f"MySQL server version {found} is older than {required}")
            raise DatabaseError(
                f"MySQL server version {found} does not fit the requirements (at least {required})",
                DatabaseError.ERROR_DB_VERSION,
                params=(found, required),
            )

    def create_db(self, name):
        """Create the database `name` and open it."""
        self.close()
        self._db_config = dict(self._db_config or {}, name=name)

        if self.dialect == 'sqlite':
            engine = _create_engine(build_database_url(self._db_config))
            try:
                with engine.connect():
                    pass
            except SQLAlchemyError as e:
                engine.dispose()
                raise DatabaseError(f"Could not create database {name}: {e}",
                                    DatabaseError.ERROR_DB_NOT_EXISTS) from e
            self._engine = engine
            logger.info(f"Created sqlite database {name}")
            return

        server_engine = _create_engine(
            build_database_url(self._db_config, with_database=False),
            isolation_level='AUTOCOMMIT',
        )
        try:
            with server_engine.connect() as conn:
                quoted = conn.dialect.identifier_preparer.quote(name)
                conn.execute(text(f"CREATE DATABASE {quoted}"))
        except SQLAlchemyError as e:
            logger.error(f"Failed to create database {name}: {e}")
            raise DatabaseError(f"Could not create database {name}: {getattr(e, 'orig', None) or e}",
                                DatabaseError.ERROR_DB_NOT_EXISTS) from e
        finally:
            server_engine.dispose()

        self._engine = _create_engine(build_database_url(self._db_config), pool_pre_ping=True)
        logger.info(f"Created database {name}")

    def has_table(self, table_name):
        try:
            return inspect(self._get_engine()).has_table(table_name)
        except SQLAlchemyError as e:
            raise DatabaseError(f"Could not inspect database: {e}", DatabaseError.ERROR_DB_CONNECT) from e

    def test_create_view(self):
        """Create and drop a throwaway view to verify the user may create views."""
        try:
            with self._get_engine().begin() as conn:
                conn.execute(text(f"DROP VIEW IF EXISTS {VIEW_TEST_NAME}"))
                conn.execute(text(f"CREATE VIEW {VIEW_TEST_NAME} AS SELECT 1 AS test"))
                conn.execute(text(f"DROP VIEW {VIEW_TEST_NAME}"))
        except SQLAlchemyError as e:
            logger.error(f"Creating views is not possible: {e}")
            raise DatabaseError(str(getattr(e, 'orig', None) or e), DatabaseError.ERROR_VIEWS_CANT_CREATE) from e

    def set_collation(self, utf_mode):
        """Switch a MySQL database to utf8mb4; other servers are left untouched."""
        if self.dialect != 'mysql' or not utf_mode:
            return

        try:
            with self._get_engine().begin() as conn:
                quoted = conn.dialect.identifier_preparer.quote(self._db_config['name'])
                conn.execute(text(
                    f"ALTER DATABASE {quoted} CHARACTER SET utf8mb4 COLLATE utf8mb4_general_ci"
                ))
            logger.info("Database collation set to utf8mb4_general_ci")
        except SQLAlchemyError as e:
            logger.warning(f"Failed to set database collation: {e}")

    def execute_statements(self, sql_text):
        """Run every statement of a SQL script, stopping at the first failure."""
        statements = split_sql_statements(sql_text, self.dialect)
        with self._get_engine().connect() as conn:
            for statement in statements:
                try:
                    conn.exec_driver_sql(statement)
                    conn.commit()
                except SQLAlchemyError as e:
                    conn.rollback()
                    logger.error(f"SQL statement failed: {statement[:80]} - {e}")
                    raise DatabaseError(
                        f"{statement} - {getattr(e, 'orig', None) or e}",
                        DatabaseError.ERROR_BAD_SQL,
                    ) from e
        return len(statements)

    def query_file(self, path):
        """Run the SQL script at `path`."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                sql_text = f.read()
        except OSError as e:
            raise DatabaseError(f"Could not read SQL file {path}: {e}", DatabaseError.ERROR_BAD_SQL) from e

        count = self.execute_statements(sql_text)
        logger.info(f"Executed {count} statements from {os.path.basename(path)}")

    def migrate(self, migrations_dir):
        """
        Apply pending *.sql migrations in file name order.

        Applied migrations are recorded in the schema_migrations table.

        Returns:
            list: File names of the migrations applied in this run
        """
        self.execute_statements(
            f"CREATE TABLE IF NOT EXISTS {MIGRATIONS_TABLE} "
            "(version VARCHAR(255) PRIMARY KEY, applied_at TIMESTAMP)"
        )

        try:
            with self._get_engine().connect() as conn:
                applied = {row[0] for row in conn.execute(text(f"SELECT version FROM {MIGRATIONS_TABLE}"))}
        except SQLAlchemyError as e:
            raise DatabaseError(f"Could not read applied migrations: {e}", DatabaseError.ERROR_BAD_SQL) from e

        newly_applied = []
        for path in sorted(glob.glob(os.path.join(migrations_dir, '*.sql'))):
            version = os.path.basename(path)
            if version in applied:
                continue

            self.query_file(path)
            with self._get_engine().begin() as conn:
                conn.execute(
                    text(f"INSERT INTO {MIGRATIONS_TABLE} (version, applied_at) VALUES (:version, :applied_at)"),
                    {'version': version, 'applied_at': datetime.now().strftime('%Y-%m-%d %H:%M:%S')},
                )
            newly_applied.append(version)
            logger.info(f"Applied migration {version}")

        if not newly_applied:
            logger.info("Database migrations up to date")
        return newly_applied

    def save_shop_settings(self, settings):
        """Store the welcome page choices in the shop configuration table."""
        try:
            with self._get_engine().begin() as conn:
                for name, value in settings.items():
                    if value is None:
                        continue
                    conn.execute(text(f"DELETE FROM {config.SHOP_MARKER_TABLE} WHERE name = :name"),
                                 {'name': name})
                    conn.execute(text(f"INSERT INTO {config.SHOP_MARKER_TABLE} (name, value) VALUES (:name, :value)"),
                                 {'name': name, 'value': str(value)})
        except SQLAlchemyError as e:
            raise DatabaseError(f"Could not save shop settings: {e}", DatabaseError.ERROR_BAD_SQL) from e
        logger.info(f"Saved shop settings: {', '.join(sorted(settings))}")

    def write_admin_login_data(self, login_name, password):
        """Create or update the default administrator account."""
        password_hash = generate_password_hash(password)
        params = {'id': ADMIN_USER_ID, 'username': login_name, 'password': password_hash}

        try:
            with self._get_engine().begin() as conn:
                result = conn.execute(
                    text("UPDATE shop_users SET username = :username, password = :password WHERE id = :id"),
                    params,
                )
                if result.rowcount == 0:
                    conn.execute(
                        text("INSERT INTO shop_users (id, username, password, rights, active) "
                             "VALUES (:id, :username, :password, 'malladmin', 1)"),
                        params,
                    )
        except SQLAlchemyError as e:
            logger.error(f"Failed to write admin login: {e}")
            raise DatabaseError(f"Could not write admin login: {e}", DatabaseError.ERROR_BAD_SQL) from e

        logger.info(f"Admin login written for {login_name}")

    def close(self):
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
