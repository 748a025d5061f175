from wtforms import StringField
from wtforms.validators import DataRequired, Length

from awardpool.forms.base import ApiForm, strip_filter


class CreateLobbyForm(ApiForm):
    name = StringField(
        "Lobby Name",
        filters=[strip_filter],
        validators=[
            DataRequired(message="Lobby name required"),
            Length(max=100, message="Lobby name cannot exceed 100 characters"),
        ],
    )
