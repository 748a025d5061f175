import logging

from flask import jsonify
from flask_login import login_required

from awardpool.forms.categories import CategoryForm, NomineeForm
from awardpool.routes.categories import bp
from awardpool.services import category_service
from awardpool.utils.request_utils import json_body

logger = logging.getLogger(__name__)


@bp.route("")
@login_required
def index():
    """All categories with nominees and winners"""
    return jsonify(category_service.categories_with_nominees())


@bp.route("", methods=["POST"])
@login_required
def create():
    form = CategoryForm().validate_or_raise()
    category = category_service.create_category(form.name.data)
    return jsonify(category.to_dict()), 201


@bp.route("/<int:category_id>", methods=["PATCH"])
@login_required
def update(category_id):
    form = CategoryForm().validate_or_raise()
    category = category_service.update_category(
        category_id, form.name.data, form.display_order.data
    )
    return jsonify(category.to_dict())


@bp.route("/reorder", methods=["POST"])
@login_required
def reorder():
    data = json_body()
    category_service.reorder_categories(data.get("ordered_ids"))
    return jsonify(category_service.categories_with_nominees())


@bp.route("/<int:category_id>", methods=["DELETE"])
@login_required
def delete(category_id):
    category_service.delete_category(category_id)
    return jsonify({"success": True})


@bp.route("/<int:category_id>/nominees", methods=["POST"])
@login_required
def add_nominee(category_id):
    form = NomineeForm().validate_or_raise()
    nominee = category_service.add_nominee(category_id, form.name.data)
    return jsonify(nominee.to_dict()), 201


@bp.route("/<int:category_id>/nominees/<int:nominee_id>", methods=["DELETE"])
@login_required
def delete_nominee(category_id, nominee_id):
    category_service.delete_nominee(nominee_id, category_id=category_id)
    return jsonify({"success": True})


@bp.route("/<int:category_id>/nominees/<int:nominee_id>/winner", methods=["POST"])
@login_required
def set_winner(category_id, nominee_id):
    category_service.set_winner(category_id, nominee_id)
    return jsonify({"success": True})


@bp.route("/<int:category_id>/winner", methods=["DELETE"])
@login_required
def clear_winner(category_id):
    category_service.clear_winner(category_id)
    return jsonify({"success": True})


@bp.route("/bulk-import", methods=["POST"])
@login_required
def bulk_import():
    data = json_body()
    result = category_service.bulk_import(data.get("categories"))
    return jsonify(result)
