"""Test settings.

Uses a throwaway file-backed SQLite database and a fast password hasher
so the suite runs without external services. A file is used instead of
``:memory:`` so that threads get their own connections and contend for
the database write lock the way separate server processes do.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': str(BASE_DIR / 'test-db.sqlite3'),  # noqa: F405
        'OPTIONS': SQLITE_OPTIONS,  # noqa: F405
        'TEST': {'NAME': str(BASE_DIR / '.test-db.sqlite3')},  # noqa: F405
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

LOGGING['root']['level'] = 'CRITICAL'  # noqa: F405
