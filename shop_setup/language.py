"""
Language selection and text lookup for the setup wizard
"""
import logging

from .texts import COUNTRIES, DEFAULT_LANGUAGE, LANGUAGES, LOCATIONS, TEXTS

logger = logging.getLogger(__name__)


class Language:
    """
    Resolves the wizard language and translates text keys.

    The language is taken from a posted `setup_lang` value first, then from
    the session, then from the browser's preferred language.
    """

    def __init__(self, session, request=None, browser_language=None):
        self._session = session
        self._request = request
        self._browser_language = browser_language

    def get_language(self):
        requested = self._request.get_request_var('setup_lang', 'post') if self._request else None
        if requested in LANGUAGES:
            self._session.set_session_param('setup_lang', requested)
        elif self._session.get_session_param('setup_lang') is None:
            language = self._browser_language if self._browser_language in LANGUAGES else DEFAULT_LANGUAGE
            self._session.set_session_param('setup_lang', language)

        return self._session.get_session_param('setup_lang')

    def get_text(self, key):
        texts = TEXTS.get(self.get_language(), TEXTS[DEFAULT_LANGUAGE])
        if key not in texts:
            logger.debug(f"Missing setup text: {key}")
        return texts.get(key, TEXTS[DEFAULT_LANGUAGE].get(key, key))

    def get_module_name(self, module_name):
        return self.get_text('MOD_' + module_name.upper())


def get_languages():
    return dict(LANGUAGES)


def get_country_list(language):
    return COUNTRIES.get(language, COUNTRIES[DEFAULT_LANGUAGE])


def get_locations(language):
    return LOCATIONS.get(language, LOCATIONS[DEFAULT_LANGUAGE])
