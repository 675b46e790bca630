"""
Localized texts and choice lists for the setup wizard
"""

LANGUAGES = {
    'en': 'English',
    'de': 'Deutsch',
}

DEFAULT_LANGUAGE = 'en'

LOCATIONS = {
    'en': {
        'de_ch_at': 'Germany, Austria, Switzerland',
        'eu': 'Europe',
        'ww': 'World wide',
    },
    'de': {
        'de_ch_at': 'Deutschland, Österreich, Schweiz',
        'eu': 'Europa',
        'ww': 'Weltweit',
    },
}

COUNTRIES = {
    'en': {
        'de': 'Germany',
        'at': 'Austria',
        'ch': 'Switzerland',
        'gb': 'United Kingdom',
        'us': 'United States',
    },
    'de': {
        'de': 'Deutschland',
        'at': 'Österreich',
        'ch': 'Schweiz',
        'gb': 'Vereinigtes Königreich',
        'us': 'Vereinigte Staaten',
    },
}

TEXTS = {
    'en': {
        'HEADER_TITLE': 'Storefront Setup',
        'STEP_0_TITLE': 'System requirements',
        'STEP_1_TITLE': 'Welcome',
        'STEP_2_TITLE': 'License conditions',
        'STEP_3_TITLE': 'Database',
        'STEP_3_1_TITLE': 'Database - connecting',
        'STEP_4_TITLE': 'Directories and login',
        'STEP_4_1_TITLE': 'Directories - writing data',
        'STEP_4_2_TITLE': 'Database - creating tables',
        'STEP_6_TITLE': 'Setup finished',
        'BUTTON_PROCEED_INSTALL': 'Proceed with setup',
        'BUTTON_I_AGREE': 'I accept the license conditions',
        'BUTTON_RADIO_NOT_ACCEPT': 'I do not accept the license conditions',
        'BUTTON_START_INSTALL': 'Start installation',
        'BUTTON_WRITE_DATA': 'Save and continue',
        'BUTTON_DB_INSTALL': 'Create database now',
        'BUTTON_CONTINUE': 'Continue',
        'BUTTON_SHUTDOWN': 'Finish and close the setup',
        'SELECT_SETUP_LANG': 'Setup language',
        'SELECT_SHOP_LOCATION': 'Shop location',
        'SELECT_SHOP_COUNTRY': 'Main country',
        'SELECT_SHOP_LANG': 'Shop language',
        'CHECK_FOR_UPDATES': 'Check for updates regularly',
        'STEP_0_DESC': 'Your server is checked for the requirements of the storefront.',
        'STEP_0_ERROR_TEXT': 'Your system does not fit the system requirements.',
        'STEP_0_TEXT': 'Legend: green = fulfilled, yellow = minimum fulfilled, red = not fulfilled, grey = could not be checked',
        'STEP_1_DESC': 'Welcome to the installation wizard of the storefront.',
        'STEP_3_DESC': 'Enter the connection data of your database.',
        'STEP_3_DB_HOSTNAME': 'Database server hostname or IP address',
        'STEP_3_DB_PORT': 'Database server port',
        'STEP_3_DB_USER_NAME': 'Database username',
        'STEP_3_DB_PASSWORD': 'Database password',
        'STEP_3_DB_DATABSE_NAME': 'Database name',
        'STEP_3_DB_DEMODATA': 'Install demo data',
        'STEP_3_CREATE_DB_WHEN_NO_DB_FOUND': 'If the database does not exist, it will be created.',
        'STEP_3_1_DB_CONNECT_IS_OK': 'Database connection successfully tested ...',
        'STEP_3_1_DB_CREATE_IS_OK': 'Database %s successfully created ...',
        'STEP_4_DESC': 'Enter the directories of your shop and the login of the administrator.',
        'STEP_4_SHOP_URL': 'Shop URL',
        'STEP_4_SHOP_DIR': 'Directory of the shop',
        'STEP_4_SHOP_TMP_DIR': 'Directory for temporary data',
        'STEP_4_ADMIN_LOGIN_NAME': 'Administrator e-mail (used as login name)',
        'STEP_4_ADMIN_PASS': 'Administrator password',
        'STEP_4_ADMIN_PASS_CONFIRM': 'Confirm administrator password',
        'STEP_4_ADMIN_PASS_MINCHARS': 'at least 6 characters',
        'STEP_4_DELETE_SETUP_DIR': 'Delete setup files after installation',
        'STEP_4_1_DATA_WAS_WRITTEN': 'Check and writing data successful.',
        'STEP_4_2_OVERWRITE_DB': 'If you want to overwrite all existing data and install anyway click',
        'STEP_4_2_UPDATING_DATABASE': 'Database successfully updated. Please wait ...',
        'STEP_6_DESC': 'Your storefront has been installed successfully.',
        'STEP_6_LINK_TO_SHOP': 'Continue to your shop',
        'STEP_6_LINK_TO_SHOP_ADMIN_AREA': 'Continue to the admin area of your shop',
        'STEP_6_TO_SHOP': 'To shop',
        'STEP_6_TO_SHOP_ADMIN': 'To admin interface',
        'ATTENTION': 'Attention, important!',
        'SETUP_CONFIG_PERMISSIONS': 'For security reasons remove the write permissions of %s after the installation.',
        'SETUP_DIR_DELETE_NOTICE': 'Please remove the setup directory if it was not deleted automatically.',
        'HERE': 'here',
        'LOAD_DYN_CONTENT_NOTICE': 'Shop settings were saved.',
        'ERROR_SETUP_CANCELLED': 'The setup was cancelled because you did not accept the license conditions.',
        'ERROR_FILL_ALL_FIELDS': 'Please fill in all needed fields!',
        'ERROR_DB_CONNECT': 'No database connection possible!',
        'ERROR_DB_ALREADY_EXISTS': 'ERROR: Seems there is already a shop installed in database %s. Please delete it prior continuing!',
        'ERROR_BAD_DEMODATA': 'ERROR: Issue while inserting demo data.',
        'ERROR_PASSWORD_TOO_SHORT': 'Password is too short!',
        'ERROR_PASSWORDS_DO_NOT_MATCH': 'Passwords do not match!',
        'ERROR_USER_NAME_DOES_NOT_MATCH_PATTERN': 'Please enter a valid e-mail address!',
        'ERROR_COULD_NOT_OPEN_CONFIG_FILE': 'Could not open %s for reading!',
        'ERROR_COULD_NOT_WRITE_TO_FILE': 'Could not write to %s!',
        'ERROR_BAD_SQL': 'ERROR: (Tables) Issue while executing the following query: ',
        'ERROR_VIEWS_CANT_CREATE': 'ERROR: Cannot create views. Please check your database user privileges.',
        'ERROR_DB_VERSION': 'ERROR: The database server version %s does not fit the requirements (at least %s).',
        'ERROR_SETUP_DIR_NOT_REMOVED': 'The setup directory could not be removed.',
        'MOD_SERVER_CONFIG': 'Server configuration',
        'MOD_PYTHON_MODULES': 'Python modules',
        'MOD_PYTHON_VERSION': 'Python version 3.9 or newer',
        'MOD_UNICODE_SUPPORT': 'UTF-8 support',
        'MOD_SERVER_PERMISSIONS': 'Files/folders access rights',
        'MOD_REWRITE_FILE': 'Rewrite rules file',
        'MOD_FREE_DISK_SPACE': 'Free disk space (at least 100 MB)',
        'MOD_SQLALCHEMY': 'SQLAlchemy',
        'MOD_DB_DRIVER': 'Database driver',
        'MOD_IMAGE_LIBRARY': 'Image library (Pillow)',
    },
    'de': {
        'HEADER_TITLE': 'Shop-Installation',
        'STEP_0_TITLE': 'Systemvoraussetzungen',
        'STEP_1_TITLE': 'Willkommen',
        'STEP_2_TITLE': 'Lizenzbedingungen',
        'STEP_3_TITLE': 'Datenbank',
        'STEP_3_1_TITLE': 'Datenbank - Verbindung wird hergestellt',
        'STEP_4_TITLE': 'Verzeichnisse und Login',
        'STEP_4_1_TITLE': 'Verzeichnisse - Daten werden geschrieben',
        'STEP_4_2_TITLE': 'Datenbank - Tabellen werden erstellt',
        'STEP_6_TITLE': 'Installation abgeschlossen',
        'BUTTON_PROCEED_INSTALL': 'Installation fortsetzen',
        'BUTTON_I_AGREE': 'Ich akzeptiere die Lizenzbedingungen',
        'BUTTON_RADIO_NOT_ACCEPT': 'Ich akzeptiere die Lizenzbedingungen nicht',
        'BUTTON_START_INSTALL': 'Installation starten',
        'BUTTON_WRITE_DATA': 'Speichern und weiter',
        'BUTTON_DB_INSTALL': 'Datenbank jetzt erstellen',
        'BUTTON_CONTINUE': 'Weiter',
        'BUTTON_SHUTDOWN': 'Abschließen und Setup beenden',
        'SELECT_SETUP_LANG': 'Sprache der Installation',
        'SELECT_SHOP_LOCATION': 'Standort des Shops',
        'SELECT_SHOP_COUNTRY': 'Hauptland',
        'SELECT_SHOP_LANG': 'Sprache des Shops',
        'CHECK_FOR_UPDATES': 'Regelmäßig nach Updates suchen',
        'STEP_0_DESC': 'Ihr Server wird auf die Systemvoraussetzungen des Shops geprüft.',
        'STEP_0_ERROR_TEXT': 'Ihr System erfüllt nicht die Systemvoraussetzungen.',
        'STEP_0_TEXT': 'Legende: grün = erfüllt, gelb = minimal erfüllt, rot = nicht erfüllt, grau = nicht prüfbar',
        'STEP_1_DESC': 'Willkommen beim Installationsassistenten des Shops.',
        'STEP_3_DESC': 'Geben Sie die Verbindungsdaten Ihrer Datenbank ein.',
        'STEP_3_DB_HOSTNAME': 'Datenbankserver Hostname oder IP-Adresse',
        'STEP_3_DB_PORT': 'Datenbankserver Port',
        'STEP_3_DB_USER_NAME': 'Datenbank Benutzername',
        'STEP_3_DB_PASSWORD': 'Datenbank Passwort',
        'STEP_3_DB_DATABSE_NAME': 'Datenbankname',
        'STEP_3_DB_DEMODATA': 'Demodaten installieren',
        'STEP_3_CREATE_DB_WHEN_NO_DB_FOUND': 'Falls die Datenbank nicht existiert, wird sie angelegt.',
        'STEP_3_1_DB_CONNECT_IS_OK': 'Datenbankverbindung erfolgreich geprüft ...',
        'STEP_3_1_DB_CREATE_IS_OK': 'Datenbank %s erfolgreich erstellt ...',
        'STEP_4_DESC': 'Geben Sie die Verzeichnisse Ihres Shops und den Login des Administrators ein.',
        'STEP_4_SHOP_URL': 'Shop URL',
        'STEP_4_SHOP_DIR': 'Verzeichnis des Shops',
        'STEP_4_SHOP_TMP_DIR': 'Verzeichnis für temporäre Daten',
        'STEP_4_ADMIN_LOGIN_NAME': 'Administrator E-Mail (wird als Benutzername verwendet)',
        'STEP_4_ADMIN_PASS': 'Administrator Passwort',
        'STEP_4_ADMIN_PASS_CONFIRM': 'Administrator Passwort bestätigen',
        'STEP_4_ADMIN_PASS_MINCHARS': 'mindestens 6 Zeichen',
        'STEP_4_DELETE_SETUP_DIR': 'Setup-Dateien nach der Installation löschen',
        'STEP_4_1_DATA_WAS_WRITTEN': 'Kontrolle und Schreiben der Dateien erfolgreich.',
        'STEP_4_2_OVERWRITE_DB': 'Wenn Sie dennoch installieren und alle vorhandenen Daten überschreiben wollen, klicken Sie',
        'STEP_4_2_UPDATING_DATABASE': 'Datenbank wurde erfolgreich aktualisiert. Bitte warten ...',
        'STEP_6_DESC': 'Ihr Shop wurde erfolgreich installiert.',
        'STEP_6_LINK_TO_SHOP': 'Hier geht es zu Ihrem Shop',
        'STEP_6_LINK_TO_SHOP_ADMIN_AREA': 'Hier geht es zum Administrationsbereich Ihres Shops',
        'STEP_6_TO_SHOP': 'Zum Shop',
        'STEP_6_TO_SHOP_ADMIN': 'Zur Administration',
        'ATTENTION': 'Achtung, wichtig!',
        'SETUP_CONFIG_PERMISSIONS': 'Entfernen Sie aus Sicherheitsgründen nach der Installation die Schreibrechte von %s.',
        'SETUP_DIR_DELETE_NOTICE': 'Bitte löschen Sie das Setup-Verzeichnis, falls es nicht automatisch gelöscht wurde.',
        'HERE': 'hier',
        'LOAD_DYN_CONTENT_NOTICE': 'Shop-Einstellungen wurden gespeichert.',
        'ERROR_SETUP_CANCELLED': 'Die Installation wurde abgebrochen, weil Sie die Lizenzbedingungen nicht akzeptiert haben.',
        'ERROR_FILL_ALL_FIELDS': 'Bitte füllen Sie alle notwendigen Felder aus!',
        'ERROR_DB_CONNECT': 'Keine Datenbankverbindung möglich!',
        'ERROR_DB_ALREADY_EXISTS': 'FEHLER: In der Datenbank %s ist anscheinend bereits ein Shop installiert. Bitte löschen Sie diesen vorher!',
        'ERROR_BAD_DEMODATA': 'FEHLER: Problem beim Einspielen der Demodaten.',
        'ERROR_PASSWORD_TOO_SHORT': 'Passwort ist zu kurz!',
        'ERROR_PASSWORDS_DO_NOT_MATCH': 'Passwörter stimmen nicht überein!',
        'ERROR_USER_NAME_DOES_NOT_MATCH_PATTERN': 'Bitte geben Sie eine gültige E-Mail-Adresse ein!',
        'ERROR_COULD_NOT_OPEN_CONFIG_FILE': '%s konnte nicht zum Lesen geöffnet werden!',
        'ERROR_COULD_NOT_WRITE_TO_FILE': 'Konnte nicht in %s schreiben!',
        'ERROR_BAD_SQL': 'FEHLER: (Tabellen) Problem bei folgender Abfrage: ',
        'ERROR_VIEWS_CANT_CREATE': 'FEHLER: Views können nicht erstellt werden. Bitte prüfen Sie die Rechte des Datenbankbenutzers.',
        'ERROR_DB_VERSION': 'FEHLER: Die Version %s des Datenbankservers erfüllt nicht die Anforderungen (mindestens %s).',
        'ERROR_SETUP_DIR_NOT_REMOVED': 'Das Setup-Verzeichnis konnte nicht gelöscht werden.',
        'MOD_SERVER_CONFIG': 'Server-Konfiguration',
        'MOD_PYTHON_MODULES': 'Python-Module',
        'MOD_PYTHON_VERSION': 'Python Version 3.9 oder neuer',
        'MOD_UNICODE_SUPPORT': 'UTF-8 Unterstützung',
        'MOD_SERVER_PERMISSIONS': 'Zugriffsrechte Dateien/Verzeichnisse',
        'MOD_REWRITE_FILE': 'Datei für Rewrite-Regeln',
        'MOD_FREE_DISK_SPACE': 'Freier Speicherplatz (mindestens 100 MB)',
        'MOD_SQLALCHEMY': 'SQLAlchemy',
        'MOD_DB_DRIVER': 'Datenbanktreiber',
        'MOD_IMAGE_LIBRARY': 'Bildbibliothek (Pillow)',
    },
}
