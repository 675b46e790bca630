#!/usr/bin/env python3
"""
Storefront Setup Wizard - Interactive CLI Version
Runs the setup wizard steps in a terminal instead of a browser.

Features:
- Interactive CLI with questionary for user-friendly prompts
- Rich console output with panels and tables
- Same steps, checks and error handling as the web version
- No web server required
"""

import os
import sys
import logging

import questionary
from questionary import Style
from markupsafe import Markup, escape
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from shop_setup import config
from shop_setup.controller import Controller
from shop_setup.language import Language
from shop_setup.request_params import RequestParams
from shop_setup.services import file_service
from shop_setup.session import SetupSession
from shop_setup.texts import LANGUAGES
from shop_setup.wizard import STEPS, Wizard, dispatch

# ============================================
# GLOBAL CONFIGURATION
# ============================================

APP_VERSION = f"{config.APP_VERSION}-CLI"

# Custom style for questionary prompts
custom_style = Style([
    ('qmark', 'fg:#673ab7 bold'),       # Question mark
    ('question', 'bold'),                # Question text
    ('answer', 'fg:#f44336 bold'),      # User's answer
    ('pointer', 'fg:#673ab7 bold'),     # Pointer in select
    ('highlighted', 'fg:#673ab7 bold'), # Highlighted choice
    ('selected', 'fg:#cc5454'),         # Selected choice
    ('separator', 'fg:#cc5454'),        # Separator
    ('instruction', ''),                 # Instructions
    ('text', ''),                        # Plain text
    ('disabled', 'fg:#858585 italic')   # Disabled choice
])

# Module css class -> rich markup
STATE_MARKUP = {
    'pass': '[green]✓[/green]',
    'pmin': '[yellow]~[/yellow]',
    'fail': '[red]✗[/red]',
    'null': '[dim]?[/dim]',
}

console = Console()

# ============================================
# LOGGING SETUP
# ============================================

def setup_logging():
    """Initialize logging to file and console."""
    log_format = '%(asctime)s - %(levelname)s - %(message)s'

    logger = logging.getLogger('shop_setup')
    logger.setLevel(logging.INFO)
    logger.handlers.clear()

    # Console handler with lower level
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
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
# HELPER FUNCTIONS
# ============================================

def safe_ask(question):
    """
    Safely ask a questionary question and handle Ctrl+C properly.
    Questionary returns None when Ctrl+C is pressed, so we convert it to KeyboardInterrupt.
    """
    result = question.ask()
    if result is None:
        raise KeyboardInterrupt
    return result

def plain_text(message):
    """Wizard message without HTML markup, one line per <br>."""
    parts = str(escape(message)).split("<br>")
    return "\n".join(Markup(part).striptags() for part in parts if part)

def get_browser_language():
    """Language of the terminal locale, used like a browser's preferred language."""
    locale = os.environ.get('LANG', '')[:2].lower()
    return locale if locale in LANGUAGES else None

def run_step(bag, step, get=None, post=None):
    """
    Run one wizard step against an in-memory session bag.

    Args:
        bag: dict holding the setup session
        step: Step id to run
        get: Query values of the simulated request
        post: Form values of the simulated request

    Returns:
        tuple: (template name, Controller, Language)
    """
    params = RequestParams(get=get, post=post)
    setup_session = SetupSession(bag, (get or {}).get('sid'))
    language = Language(setup_session, params, browser_language=get_browser_language())
    wizard = Wizard()
    controller = Controller(setup_session, params, language=language, wizard=wizard)

    template = dispatch(controller, wizard.get_current_step(step))
    return template, controller, language

# ============================================
# STEP PAGES
# ============================================

def show_system_requirements(view, language):
    """Print the requirements table and ask for the setup language."""
    for group_name, modules in view.get_view_param('group_module_info', {}).items():
        table = Table(title=group_name, box=box.ROUNDED, show_header=False)
        table.add_column("State", justify="center")
        table.add_column("Module", style="cyan")
        for module in modules:
            table.add_row(STATE_MARKUP.get(module['class'], '?'), module['module_name'])
        console.print(table)

    console.print(f"[dim]{language.get_text('STEP_0_TEXT')}[/dim]")

    if not view.get_view_param('continue'):
        console.print(Panel.fit(
            f"[bold red]❌ {language.get_text('STEP_0_ERROR_TEXT')}[/bold red]",
            border_style="red"
        ))
        return None

    setup_lang = safe_ask(questionary.select(
        language.get_text('SELECT_SETUP_LANG'),
        choices=[questionary.Choice(name, value=code) for code, name in view.get_view_param('languages').items()],
        default=view.get_view_param('language'),
        style=custom_style
    ))

    return STEPS['STEP_WELCOME'], {}, {'setup_lang': setup_lang}

def collect_welcome(view, language):
    """Ask for shop location, country and language."""
    location = safe_ask(questionary.select(
        language.get_text('SELECT_SHOP_LOCATION'),
        choices=[questionary.Choice(name, value=code) for code, name in view.get_view_param('locations').items()],
        default=view.get_view_param('location_lang'),
        style=custom_style
    ))
    country = safe_ask(questionary.select(
        language.get_text('SELECT_SHOP_COUNTRY'),
        choices=[questionary.Choice(name, value=code) for code, name in view.get_view_param('countries').items()],
        default=view.get_view_param('country_lang'),
        style=custom_style
    ))
    shop_lang = safe_ask(questionary.select(
        language.get_text('SELECT_SHOP_LANG'),
        choices=[questionary.Choice(name, value=code) for code, name in view.get_view_param('languages').items()],
        default=view.get_view_param('shop_lang') or view.get_view_param('language'),
        style=custom_style
    ))
    check_for_updates = safe_ask(questionary.confirm(
        language.get_text('CHECK_FOR_UPDATES'),
        default=bool(view.get_view_param('check_for_updates')),
        style=custom_style
    ))

    return STEPS['STEP_LICENSE'], {}, {
        'location_lang': location,
        'country_lang': country,
        'shop_lang': shop_lang,
        'check_for_updates': 1 if check_for_updates else 0,
    }

def collect_license(view, language):
    """Show the license and ask for acceptance."""
    console.print(Panel(view.get_view_param('license_text') or '', border_style="cyan"))

    accepted = safe_ask(questionary.confirm(
        language.get_text('BUTTON_I_AGREE'),
        default=False,
        style=custom_style
    ))

    return STEPS['STEP_DB_INFO'], {}, {'eula': 1 if accepted else 0}

def collect_database_config(view, language):
    """Ask for the database connection data."""
    db_config = view.get_view_param('db_config') or {}
    console.print(f"[dim]{language.get_text('STEP_3_CREATE_DB_WHEN_NO_DB_FOUND')}[/dim]")

    db = {
        'host': safe_ask(questionary.text(
            language.get_text('STEP_3_DB_HOSTNAME'), default=str(db_config.get('host') or ''), style=custom_style)),
        'port': safe_ask(questionary.text(
            language.get_text('STEP_3_DB_PORT'), default=str(db_config.get('port') or ''), style=custom_style)),
        'name': safe_ask(questionary.text(
            language.get_text('STEP_3_DB_DATABSE_NAME'), default=str(db_config.get('name') or ''), style=custom_style)),
        'user': safe_ask(questionary.text(
            language.get_text('STEP_3_DB_USER_NAME'), default=str(db_config.get('user') or ''), style=custom_style)),
        'password': safe_ask(questionary.password(
            language.get_text('STEP_3_DB_PASSWORD'), style=custom_style)),
    }
    if safe_ask(questionary.confirm(
        language.get_text('STEP_3_DB_DEMODATA'),
        default=bool(db_config.get('demo_data')),
        style=custom_style
    )):
        db['demo_data'] = 1

    return STEPS['STEP_DB_CONNECT'], {}, {'db': db}

def collect_directory_config(view, language):
    """Ask for shop paths and the administrator login."""
    paths = view.get_view_param('paths') or {}
    admin_data = view.get_view_param('admin_data') or {}
    setup_config = view.get_view_param('setup_config') or {}

    post_paths = {
        'shop_url': safe_ask(questionary.text(
            language.get_text('STEP_4_SHOP_URL'), default=paths.get('shop_url', ''), style=custom_style)),
        'shop_dir': safe_ask(questionary.text(
            language.get_text('STEP_4_SHOP_DIR'), default=paths.get('shop_dir', ''), style=custom_style)),
        'compile_dir': safe_ask(questionary.text(
            language.get_text('STEP_4_SHOP_TMP_DIR'), default=paths.get('compile_dir', ''), style=custom_style)),
    }
    post_admin = {
        'login_name': safe_ask(questionary.text(
            language.get_text('STEP_4_ADMIN_LOGIN_NAME'), default=admin_data.get('login_name') or '',
            style=custom_style)),
        'password': safe_ask(questionary.password(
            f"{language.get_text('STEP_4_ADMIN_PASS')} ({language.get_text('STEP_4_ADMIN_PASS_MINCHARS')})",
            style=custom_style)),
        'password_confirm': safe_ask(questionary.password(
            language.get_text('STEP_4_ADMIN_PASS_CONFIRM'), style=custom_style)),
    }
    delete_setup_dir = safe_ask(questionary.confirm(
        language.get_text('STEP_4_DELETE_SETUP_DIR'),
        default=bool(setup_config.get('delete_setup_dir')),
        style=custom_style
    ))

    return STEPS['STEP_DIRS_WRITE'], {}, {
        'paths': post_paths,
        'admin_data': post_admin,
        'setup_config': {'delete_setup_dir': 1 if delete_setup_dir else 0},
    }

def show_message(view, language, wizard, sid):
    """Print a step result; an existing shop database asks before overwriting."""
    overwrite_step = view.get_view_param('overwrite_step')

    if overwrite_step:
        console.print(Panel(plain_text(view.message), border_style="yellow"))
        if safe_ask(questionary.confirm(
            language.get_text('STEP_4_2_OVERWRITE_DB'),
            default=False,
            style=custom_style
        )):
            return overwrite_step, {'sid': sid, 'ow': 1}, {}
        return None

    if view.message:
        console.print(f"[bold cyan]{plain_text(view.message)}[/bold cyan]")

    return wizard.get_next_step(), {'sid': sid}, {}

def show_completion_summary(view, language):
    """Display the finish page."""
    paths = view.get_view_param('paths') or {}
    setup_config = view.get_view_param('setup_config') or {}

    table = Table(title=language.get_text('STEP_6_DESC'), box=box.ROUNDED, show_header=False)
    table.add_column("Link", style="cyan")
    table.add_column("URL", style="green")
    table.add_row(language.get_text('STEP_6_TO_SHOP'), paths.get('shop_url', ''))
    table.add_row(language.get_text('STEP_6_TO_SHOP_ADMIN'), f"{paths.get('shop_url', '')}admin/")
    console.print(table)

    if view.get_view_param('writable_config'):
        console.print(f"\n[bold yellow]{language.get_text('ATTENTION')}[/bold yellow]")
        console.print(language.get_text('SETUP_CONFIG_PERMISSIONS') % view.get_view_param('config_file'))

    if setup_config.get('delete_setup_dir'):
        success, message = file_service.remove_setup_directory()
        if not success:
            console.print(f"[red]{language.get_text('ERROR_SETUP_DIR_NOT_REMOVED')} {message}[/red]")
    else:
        console.print(f"[yellow]{language.get_text('SETUP_DIR_DELETE_NOTICE')}[/yellow]")

    console.print(f"\n  • Setup logs: [yellow]{config.LOG_FILE}[/yellow]")
    console.print("\n" + "="*70 + "\n")

# Template -> page handler collecting the input of the next request
PAGE_HANDLERS = {
    'systemreq.html': show_system_requirements,
    'welcome.html': collect_welcome,
    'license.html': collect_license,
    'dbinfo.html': collect_database_config,
    'dirsinfo.html': collect_directory_config,
}

# ============================================
# MAIN PROGRAM
# ============================================

def run_wizard():
    """
    Walk through the wizard steps until the finish page or a cancellation.

    Returns:
        bool: True when the setup was finished
    """
    bag = {}
    step, get, post = STEPS['STEP_SYSTEMREQ'], {}, {}

    while True:
        template, controller, language = run_step(bag, step, get, post)
        view = controller.get_view()
        wizard = controller.get_wizard()
        sid = bag['sid']

        if view.title:
            console.print(f"\n[bold cyan]{language.get_text(view.title)}[/bold cyan]")

        if template == 'finish.html':
            show_completion_summary(view, language)
            return True

        if template in PAGE_HANDLERS:
            result = PAGE_HANDLERS[template](view, language)
        elif template == 'licenseerror.html':
            console.print(f"[red]{plain_text(view.message)}[/red]")
            result = wizard.get_next_step(), {'sid': sid}, {}
        elif template == 'dbconnect.html':
            console.print(f"[green]✓ {language.get_text('STEP_3_1_DB_CONNECT_IS_OK')}[/green]")
            result = wizard.get_next_step(), {'sid': sid}, {}
        else:
            result = show_message(view, language, wizard, sid)

        if result is None:
            return False

        step, get, post = result
        get = dict(get, sid=sid)

def main():
    """Main program entry point."""
    try:
        console.print(Panel(
            f"[bold]STOREFRONT SETUP WIZARD[/bold]\nInteractive CLI Version {APP_VERSION}\n\n"
            f"Shop directory: {config.SHOP_DIR}",
            border_style="cyan",
            box=box.DOUBLE
        ))

        if not run_wizard():
            console.print("\n[yellow]Setup cancelled.[/yellow]")
            sys.exit(1)

    except KeyboardInterrupt:
        console.print("\n\n[yellow]Setup cancelled by user.[/yellow]")
        sys.exit(0)
    except Exception as e:
        console.print(f"\n[bold red]Unexpected error: {e}[/bold red]")
        logger.exception("Unexpected error during setup")
        sys.exit(1)

if __name__ == "__main__":
    main()
