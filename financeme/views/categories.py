"""Blueprint per le categorie"""
from flask import Blueprint

from financeme.services.categories.category_service import CategoryService
from financeme.services.groups.group_service import ScopeError
from financeme.views import current_user_id, errore, get_gateway, get_scope, json_body, risposta

categories_bp = Blueprint('categories', __name__)


@categories_bp.route('/', methods=['GET'])
def lista():
    try:
        categories = CategoryService(get_gateway()).get_categories_dict(current_user_id(), get_scope())
    except ScopeError as e:
        return errore(str(e), 403)
    except ValueError as e:
        return errore(str(e), 400)
    return risposta(True, 'OK', categories=categories)


@categories_bp.route('/', methods=['POST'])
def crea():
    data = json_body()
    try:
        scope_id = get_scope(data)
    except ValueError as e:
        return errore(str(e), 400)
    success, message, category = CategoryService(get_gateway()).create_category(
        current_user_id(), data.get('name'), scope_id)
    return risposta(success, message, status_ok=201, **({'category': category.to_dict()} if success else {}))


@categories_bp.route('/<int:category_id>', methods=['DELETE'])
def elimina(category_id):
    success, message = CategoryService(get_gateway()).delete_category(current_user_id(), category_id)
    return risposta(success, message)
