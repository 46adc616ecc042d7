"""
Servizio per la gestione delle categorie
"""
from financeme.defaults import CATEGORIE_DEFAULT
from financeme.models.category import Category
from financeme.services import BaseService
from financeme.services.gateway import PersistenceGateway, scope_filter
from financeme.services.groups.group_service import GroupService


class CategoryService(BaseService):
    """Servizio per la gestione delle categorie"""

    def __init__(self, gateway=None, groups=None):
        super().__init__()
        self.gateway = gateway or PersistenceGateway()
        self.groups = groups or GroupService()

    def get_custom_categories(self, user_id, scope_id=None):
        self.groups.check_scope(user_id, scope_id)
        return self.gateway.list('categories', scope_filter(user_id, scope_id), order_by='name')

    def get_categories_dict(self, user_id, scope_id=None):
        """Categorie predefinite seguite da quelle personali o del gruppo"""
        result = [{'id': None, 'name': nome, 'kind': tipo} for nome, tipo in CATEGORIE_DEFAULT]
        result.extend(dict(c.to_dict(), kind=None) for c in self.get_custom_categories(user_id, scope_id))
        return result

    def create_category(self, user_id, name, scope_id=None):
        """Crea una nuova categoria"""
        name = (name or '').strip()
        if not name:
            return False, "Il nome della categoria è obbligatorio", None
        self.groups.check_scope(user_id, scope_id)
        existing = {n.lower() for n, _ in CATEGORIE_DEFAULT}
        existing.update(c.name.lower() for c in self.get_custom_categories(user_id, scope_id))
        if name.lower() in existing:
            return False, f"Categoria '{name}' già esistente", None

        success, message, created = self.gateway.insert(
            'categories', {'user_id': user_id, 'group_id': scope_id, 'name': name})
        if not success:
            return False, message, None
        return True, f"Categoria '{name}' creata con successo", created[0]

    def delete_category(self, user_id, category_id):
        category = self.gateway.get('categories', category_id)
        if not self.groups.can_access(category, user_id):
            return False, "Categoria non trovata"
        return self.gateway.delete('categories', category.id)
