from flask import request
from flask_wtf import FlaskForm

from awardpool.errors import InvalidInput
from awardpool.utils.request_utils import json_body


def strip_filter(value):
    return value.strip() if isinstance(value, str) else value


class ApiForm(FlaskForm):
    """
    Form fed from a JSON body.

    CSRF is checked globally from the X-CSRFToken header, so the per-form
    token field is disabled.
    """

    class Meta:
        csrf = False

    def __init__(self, *args, **kwargs):
        # Flask-WTF only accepts an object body as form data
        if request.is_json:
            json_body()
        super().__init__(*args, **kwargs)

    def validate_or_raise(self):
        if not self.validate():
            field, errors = next(iter(self.errors.items()))
            raise InvalidInput(errors[0] if errors else f"Invalid {field}")
        return self
