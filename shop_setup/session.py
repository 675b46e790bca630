"""
Session bag used by the setup wizard
"""
import logging
import secrets

logger = logging.getLogger(__name__)


class SetupSession:
    """
    Wraps a key/value session bag (the Flask session or a plain dict).

    Every wizard session carries its own id ("sid") which is embedded in
    links such as the database overwrite confirmation. A request presenting
    a different sid starts a fresh bag.
    """

    def __init__(self, bag, requested_sid=None):
        self._bag = bag
        self._validate_session(requested_sid)

    def _validate_session(self, requested_sid):
        sid = self._bag.get('sid')
        if sid and (not requested_sid or requested_sid == sid):
            return

        if sid:
            logger.warning("Setup session id mismatch, starting a new setup session")
        self._bag.clear()
        self._bag['sid'] = secrets.token_hex(16)
        self._mark_modified()
        logger.info("New setup session started")

    def _mark_modified(self):
        if hasattr(self._bag, 'modified'):
            self._bag.modified = True

    def get_sid(self):
        return self._bag['sid']

    def get_session_param(self, name, default=None):
        return self._bag.get(name, default)

    def set_session_param(self, name, value):
        self._bag[name] = value
        self._mark_modified()
