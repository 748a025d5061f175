"""
Request body helpers for the JSON API
"""

from flask import request

from awardpool.errors import InvalidInput


def json_body():
    """
    The request's JSON body as a dict.

    A missing or unparseable body reads as empty; any other JSON value
    (array, string, number) is rejected with InvalidInput.
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInput("Request body must be a JSON object")
    return data


def is_id(value):
    """True for an integer row id as decoded from JSON (booleans excluded)"""
    return isinstance(value, int) and not isinstance(value, bool)
