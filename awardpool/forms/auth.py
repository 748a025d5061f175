from wtforms import PasswordField, StringField
from wtforms.validators import DataRequired, Length, Regexp

from awardpool.forms.base import ApiForm, strip_filter


class LoginForm(ApiForm):
    username = StringField(
        "Username",
        filters=[strip_filter],
        validators=[DataRequired(message="Username and password required")],
    )
    password = PasswordField(
        "Password", validators=[DataRequired(message="Username and password required")]
    )


class RegistrationForm(ApiForm):
    username = StringField(
        "Username",
        filters=[strip_filter],
        validators=[
            DataRequired(message="Username and password required"),
            Length(
                min=3, max=80, message="Username must be between 3 and 80 characters"
            ),
            Regexp(
                r"^[a-zA-Z0-9_.-]+$",
                message="Username can only contain letters, numbers, dots, underscores, and hyphens",
            ),
        ],
    )
    password = PasswordField(
        "Password",
        validators=[
            DataRequired(message="Username and password required"),
            Length(min=6, message="Password must be at least 6 characters"),
        ],
    )
