"""
Persistence Gateway: CRUD e query filtrate sulle tabelle dell'app.

I filtri sono tuple congiuntive `(campo, operatore, valore)`; per le
disgiunzioni (es. `group_id = g OR group_id IS NULL`) si usa `any_of(...)`.
Le notifiche di modifica usano gli eventi di mapper di SQLAlchemy
(after_insert / after_update / after_delete).
"""
import logging
from collections import namedtuple
from typing import Callable, Iterable

from sqlalchemy import and_, event, or_

from financeme import db
from financeme.models import (
    Appointment,
    Budget,
    Category,
    CreditCard,
    Goal,
    Group,
    GroupInvite,
    GroupMember,
    SpendingNotification,
    Transaction,
    UserConfig,
)

logger = logging.getLogger(__name__)

COLLECTIONS = {
    'transactions': Transaction,
    'appointments': Appointment,
    'budgets': Budget,
    'goals': Goal,
    'credit_cards': CreditCard,
    'groups': Group,
    'group_members': GroupMember,
    'group_invites': GroupInvite,
    'categories': Category,
    'user_config': UserConfig,
    'spending_notifications': SpendingNotification,
}

OPERATORI = ('eq', 'ne', 'gt', 'gte', 'lt', 'lte', 'between', 'is_null', 'in')

ChangeEvent = namedtuple('ChangeEvent', ['collection', 'action', 'record_id'])


class GatewayError(LookupError):
    pass


class AnyOf:
    """Disgiunzione di filtri (almeno uno deve essere vero)."""

    def __init__(self, *filters):
        self.filters = filters


def any_of(*filters):
    return AnyOf(*filters)


def scope_filter(user_id, scope_id):
    """Filtro per l'ambito: un gruppo oppure le righe personali dell'utente."""
    if scope_id is not None:
        return [('group_id', 'eq', scope_id)]
    return [('group_id', 'is_null', True), ('user_id', 'eq', user_id)]


def _column(model, field):
    col = getattr(model, field, None)
    if col is None or not hasattr(col, 'property'):
        raise GatewayError(f"Campo sconosciuto per {model.__tablename__}: {field}")
    return col


def _predicate(model, flt):
    if isinstance(flt, AnyOf):
        return or_(*[_predicate(model, f) for f in flt.filters])
    field, op, value = flt
    col = _column(model, field)
    if op == 'eq':
        return col == value
    if op == 'ne':
        return col != value
    if op == 'gt':
        return col > value
    if op == 'gte':
        return col >= value
    if op == 'lt':
        return col < value
    if op == 'lte':
        return col <= value
    if op == 'between':
        low, high = value
        return col.between(low, high)
    if op == 'is_null':
        return col.is_(None) if value else col.isnot(None)
    if op == 'in':
        return col.in_(list(value))
    raise GatewayError(f"Operatore non supportato: {op}")


class PersistenceGateway:
    """Accesso alle tabelle per nome di collezione"""

    def __init__(self):
        self.db = db

    def model_for(self, collection):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise GatewayError(f"Collezione sconosciuta: {collection}")

    def list(self, collection, filters: Iterable = (), order_by=None):
        model = self.model_for(collection)
        query = model.query
        predicates = [_predicate(model, f) for f in filters]
        if predicates:
            query = query.filter(and_(*predicates))
        if order_by:
            for name in ([order_by] if isinstance(order_by, str) else order_by):
                desc = name.startswith('-')
                col = _column(model, name.lstrip('-'))
                query = query.order_by(col.desc() if desc else col.asc())
        return query.all()

    def get(self, collection, record_id):
        model = self.model_for(collection)
        return self.db.session.get(model, record_id)

    def insert(self, collection, records):
        """Inserisce uno o più record (dict) in un unico commit.

        Returns:
            Tuple (success: bool, message: str, oggetti creati)
        """
        model = self.model_for(collection)
        batch = records if isinstance(records, (list, tuple)) else [records]
        try:
            objs = [model(**data) for data in batch]
            self.db.session.add_all(objs)
            self.db.session.commit()
            return True, f"{len(objs)} record inseriti", objs
        except Exception as e:
            self.db.session.rollback()
            logger.exception(f"Errore nell'inserimento in {collection}: {e}")
            return False, f"Errore durante l'inserimento: {str(e)}", []

    def update(self, collection, record_id, values):
        model = self.model_for(collection)
        try:
            obj = self.db.session.get(model, record_id)
            if not obj:
                return False, "Record non trovato", None
            for key, value in values.items():
                _column(model, key)
                setattr(obj, key, value)
            self.db.session.commit()
            return True, "Aggiornamento completato con successo", obj
        except GatewayError as e:
            self.db.session.rollback()
            return False, str(e), None
        except Exception as e:
            self.db.session.rollback()
            logger.exception(f"Errore nell'aggiornamento di {collection}/{record_id}: {e}")
            return False, f"Errore durante l'aggiornamento: {str(e)}", None

    def delete(self, collection, record_id):
        model = self.model_for(collection)
        try:
            obj = self.db.session.get(model, record_id)
            if not obj:
                return False, "Record non trovato"
            self.db.session.delete(obj)
            self.db.session.commit()
            return True, "Eliminazione completata con successo"
        except Exception as e:
            self.db.session.rollback()
            logger.exception(f"Errore nell'eliminazione di {collection}/{record_id}: {e}")
            return False, f"Errore durante l'eliminazione: {str(e)}"

    def subscribe_to_changes(self, collection, callback: Callable[[ChangeEvent], None]):
        """Invoca `callback(ChangeEvent)` a ogni insert/update/delete sulla tabella.

        Returns:
            funzione senza argomenti che annulla la sottoscrizione
        """
        model = self.model_for(collection)
        handlers = []
        for action, name in (('insert', 'after_insert'), ('update', 'after_update'), ('delete', 'after_delete')):
            handler = _make_handler(collection, action, callback)
            event.listen(model, name, handler)
            handlers.append((name, handler))

        def unsubscribe():
            for name, handler in handlers:
                if event.contains(model, name, handler):
                    event.remove(model, name, handler)
        return unsubscribe


def _make_handler(collection, action, callback):
    def handler(mapper, connection, target):
        try:
            callback(ChangeEvent(collection, action, getattr(target, 'id', None)))
        except Exception:
            # la notifica non deve far fallire l'operazione principale
            logger.exception(f"Errore nella notifica {action} su {collection}")
    return handler
