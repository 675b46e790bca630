"""
Wizard step table and dispatch

The wizard is a flat sequence of steps. Each step id maps to one controller
method; the controller decides which step follows by calling set_next_step().
"""
import logging

from . import config

logger = logging.getLogger(__name__)

STEPS = {
    'STEP_SYSTEMREQ': 100,
    'STEP_WELCOME': 200,
    'STEP_LICENSE': 300,
    'STEP_DB_INFO': 400,
    'STEP_DB_CONNECT': 410,
    'STEP_DB_CREATE': 420,
    'STEP_DIRS_INFO': 500,
    'STEP_DIRS_WRITE': 510,
    'STEP_FINISH': 700,
}

# Step id -> controller method name
STEP_HANDLERS = {
    STEPS['STEP_SYSTEMREQ']: 'system_req',
    STEPS['STEP_WELCOME']: 'welcome',
    STEPS['STEP_LICENSE']: 'license',
    STEPS['STEP_DB_INFO']: 'db_info',
    STEPS['STEP_DB_CONNECT']: 'db_connect',
    STEPS['STEP_DB_CREATE']: 'db_create',
    STEPS['STEP_DIRS_INFO']: 'dirs_info',
    STEPS['STEP_DIRS_WRITE']: 'dirs_write',
    STEPS['STEP_FINISH']: 'finish',
}

# Module state -> css class used by the requirements page
MODULE_CLASSES = {
    2: 'pass',
    1: 'pmin',
    -1: 'null',
}


class Wizard:
    """Holds the step table and the step selected to follow the current one."""

    def __init__(self):
        self._next_step = None

    def get_steps(self):
        return dict(STEPS)

    def get_step(self, name):
        return STEPS.get(name)

    def get_current_step(self, requested_step=None):
        """Resolve the requested `istep` value, defaulting to the requirements page."""
        try:
            step = int(requested_step)
        except (TypeError, ValueError):
            return STEPS['STEP_SYSTEMREQ']

        if step not in STEP_HANDLERS:
            logger.warning(f"Unknown setup step requested: {requested_step}")
            return STEPS['STEP_SYSTEMREQ']

        return step

    def set_next_step(self, step):
        self._next_step = step

    def get_next_step(self):
        return self._next_step

    def get_module_class(self, module_state):
        return MODULE_CLASSES.get(module_state, 'fail')

    def delete_setup_directory(self):
        """Default for the "delete setup directory" checkbox."""
        return config.DELETE_SETUP_DIR


def dispatch(controller, step):
    """Run the controller method registered for `step` and return its template name."""
    handler_name = STEP_HANDLERS[step]
    logger.info(f"Running setup step {step} ({handler_name})")
    return getattr(controller, handler_name)()
