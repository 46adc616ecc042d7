"""Fan-out esplicito dei ricalcoli.

Chi ha bisogno di ricalcolare (proiezioni, rate, budget) registra una callback
su un RefreshHub di sua proprietà; nessuno stato globale condiviso.
"""
import logging
from typing import Callable, List

logger = logging.getLogger(__name__)


class RefreshHub:
    """Lista di callback da invocare quando i dati cambiano"""

    def __init__(self):
        self._listeners: List[Callable] = []

    def add_listener(self, listener: Callable) -> Callable[[], None]:
        """Registra una callback e restituisce la funzione per rimuoverla."""
        self._listeners.append(listener)

        def remove():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return remove

    def __len__(self):
        return len(self._listeners)

    def refresh(self, *args, **kwargs):
        """Invoca tutte le callback registrate; un errore non blocca le altre."""
        for listener in list(self._listeners):
            try:
                listener(*args, **kwargs)
            except Exception:
                logger.exception('Errore in una callback di refresh')

    # compatibile con la firma delle callback di PersistenceGateway.subscribe_to_changes
    def notify(self, change):
        self.refresh(change)
