"""
Development settings: debug on, verbose logs, any localhost frontend port.
"""
from .base import *

DEBUG = True

ALLOWED_HOSTS = env.list('ALLOWED_HOSTS', default=['localhost', '127.0.0.1', '0.0.0.0'])

CORS_ALLOWED_ORIGIN_REGEXES = [
    r'^http://(localhost|127\.0\.0\.1):\d+$',
]

LOGGING['root']['level'] = env('LOG_LEVEL', default='DEBUG')
