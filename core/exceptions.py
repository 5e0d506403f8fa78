"""
Domain exceptions not covered by rest_framework.exceptions.
"""
from rest_framework import status
from rest_framework.exceptions import APIException


class Conflict(APIException):
    """409: the request collides with existing state (e.g. email already in use)."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists.'
    default_code = 'conflict'
