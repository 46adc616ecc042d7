"""
Snapshot delle obligation usate da proiezioni, agenda e rate.

Ogni snapshot è una lista immutabile caricata dal Persistence Gateway per una
chiave (utente, ambito, vista). Il RefreshHub dell'app invoca `invalidate` a
ogni modifica delle tabelle osservate: la lettura successiva ricarica tutto da
capo. `max_age` limita quanto a lungo uno snapshot sopravvive alle modifiche
fatte da altri processi, che qui non generano notifiche.
"""
import logging
import time

logger = logging.getLogger(__name__)

# tabelle le cui modifiche rendono obsoleti gli snapshot
COLLEZIONI_OSSERVATE = ('transactions', 'appointments', 'group_members')


class ObligationSnapshots:
    """Cache degli snapshot per chiave, svuotata dalle notifiche di modifica"""

    def __init__(self, max_age=30, clock=time.monotonic):
        self.max_age = max_age
        self.clock = clock
        self.loads = 0
        self._snapshots = {}

    def get(self, key, loader):
        """Restituisce lo snapshot per `key`, ricaricandolo con `loader()` se assente o scaduto."""
        now = self.clock()
        entry = self._snapshots.get(key)
        if entry is not None and (self.max_age is None or now - entry[0] < self.max_age):
            return list(entry[1])
        snapshot = tuple(loader())
        self.loads += 1
        self._snapshots[key] = (now, snapshot)
        return list(snapshot)

    def invalidate(self, change=None):
        if self._snapshots:
            logger.debug("Snapshot invalidati (%d) per %s", len(self._snapshots), change)
        self._snapshots.clear()

    def __len__(self):
        return len(self._snapshots)


def connect(gateway, hub, snapshots, collections=COLLEZIONI_OSSERVATE):
    """Collega le notifiche del gateway al hub e il hub agli snapshot.

    Returns:
        funzione senza argomenti che annulla tutti i collegamenti
    """
    remove_listener = hub.add_listener(snapshots.invalidate)
    unsubscribers = [gateway.subscribe_to_changes(c, hub.notify) for c in collections]

    def disconnect():
        for unsubscribe in unsubscribers:
            unsubscribe()
        remove_listener()
    return disconnect
