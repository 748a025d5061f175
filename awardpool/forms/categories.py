from wtforms import IntegerField, StringField
from wtforms.validators import DataRequired, Length, Optional

from awardpool.forms.base import ApiForm, strip_filter


class CategoryForm(ApiForm):
    name = StringField(
        "Category Name",
        filters=[strip_filter],
        validators=[
            DataRequired(message="Category name is required"),
            Length(max=200, message="Category name cannot exceed 200 characters"),
        ],
    )
    display_order = IntegerField("Display Order", validators=[Optional()])


class NomineeForm(ApiForm):
    name = StringField(
        "Nominee Name",
        filters=[strip_filter],
        validators=[
            DataRequired(message="Nominee name is required"),
            Length(max=200, message="Nominee name cannot exceed 200 characters"),
        ],
    )
