"""
Service per la gestione delle transazioni.

Creazione:
- ripetizione giornaliera: N righe 'once' a un giorno di distanza, descrizione "X (i/N)"
- carta con N > 1 rate: N righe 'once' a un mese di distanza, descrizione "X i/N",
  importo totale (con eventuale interesse) diviso in parti uguali
- ricorrenza mensile: una sola riga valutata a ogni lettura
Tutte le righe di un lotto condividono un `batch_id` e vengono salvate con un
unico commit; ripresentare lo stesso `batch_id` non crea duplicati.
"""
import logging
import uuid
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from financeme import db
from financeme.models.credit_card import CreditCard
from financeme.models.transaction import Transaction
from financeme.services import BaseService
from financeme.services.encryption import display_decoder, undecodable_fields
from financeme.services.gateway import PersistenceGateway, scope_filter
from financeme.services.groups.group_service import GroupService
from financeme.services.obligations import transaction_to_obligation
from financeme.services.projection import (
    InvalidAmountError,
    InvalidRecurrenceError,
    Kind,
    Obligation,
    ObligationError,
    PaymentMethod,
    Recurrence,
    parse_amount,
    parse_money,
    parse_date,
)
from financeme.utils.formatting import format_decimal

logger = logging.getLogger(__name__)

CENTESIMI = Decimal('0.01')
CAMPI_CIFRATI = ('category', 'amount', 'description')


class TransactionService(BaseService):
    """Service per gestire le transazioni"""

    def __init__(self, codec, gateway=None, groups=None):
        super().__init__(codec)
        self.gateway = gateway or PersistenceGateway()
        self.groups = groups or GroupService()

    # ------------------------------------------------------------------ letture

    def list(self, user_id: str, scope_id=None, start=None, end=None,
             installments_only=False) -> List[Transaction]:
        """Transazioni dell'ambito ordinate per data (eventualmente in un intervallo)."""
        self.groups.check_scope(user_id, scope_id)
        filters = scope_filter(user_id, scope_id)
        if start is not None and end is not None:
            filters.append(('date', 'between', (start, end)))
        elif start is not None:
            filters.append(('date', 'gte', start))
        elif end is not None:
            filters.append(('date', 'lte', end))
        if installments_only:
            filters.append(('installment_total', 'gt', 1))
        return self.gateway.list('transactions', filters, order_by=['date', 'id'])

    def list_decrypted(self, user_id: str, scope_id=None, start=None, end=None):
        return [tx.to_decrypted_dict(display_decoder(self.codec)) for tx in self.list(user_id, scope_id, start, end)]

    def obligations(self, user_id: str, scope_id=None, start=None, end=None,
                    installments_only=False) -> List[Obligation]:
        """Snapshot delle transazioni come Obligation (solleva su importi non validi)."""
        rows = self.list(user_id, scope_id, start, end, installments_only=installments_only)
        return [transaction_to_obligation(tx, self.codec) for tx in rows]

    def get_accessible(self, user_id: str, tx_id) -> Optional[Transaction]:
        """Restituisce la transazione se l'utente può vederla (personale o di un suo gruppo)."""
        tx = self.gateway.get('transactions', tx_id)
        return tx if self.groups.can_access(tx, user_id) else None

    # ------------------------------------------------------------------ creazione

    def _validate(self, user_id: str, data: dict) -> dict:
        """Valida tutto prima di qualunque scrittura e restituisce i valori normalizzati."""
        try:
            payment_method = PaymentMethod(data.get('payment_method') or 'other')
        except ValueError:
            raise ObligationError(f"Metodo di pagamento non valido: {data.get('payment_method')!r}")

        if payment_method == PaymentMethod.INCOME:
            kind = Kind.INCOME
        elif payment_method == PaymentMethod.CARD:
            kind = Kind.EXPENSE
        else:
            try:
                kind = Kind(data.get('kind') or 'expense')
            except ValueError:
                raise ObligationError(f"Tipo non valido: {data.get('kind')!r}")
            if kind == Kind.APPOINTMENT:
                raise ObligationError("Gli appuntamenti si gestiscono dall'agenda")

        amount = parse_money(data.get('amount'))
        if amount <= 0:
            raise InvalidAmountError("Inserire un importo valido maggiore di zero")

        category = (data.get('category') or '').strip()
        if not category:
            raise ObligationError("Il campo Categoria è obbligatorio")

        card_id = data.get('card_id')
        if payment_method == PaymentMethod.CARD:
            if not card_id:
                raise ObligationError("Selezionare una carta di credito")
            card = db.session.get(CreditCard, int(card_id))
            if not card or card.user_id != user_id:
                raise ObligationError(f"Carta {card_id} inesistente o di un altro utente")
            card_id = card.id
        else:
            card_id = None

        try:
            recurrence = Recurrence(data.get('recurrence') or 'once')
        except ValueError:
            raise InvalidRecurrenceError(f"Cadenza non valida: {data.get('recurrence')!r}")

        installments = _positive_int(data.get('installments'), 'installments', default=1)
        daily_repetitions = _positive_int(data.get('daily_repetitions'), 'daily_repetitions', default=1)
        repetition_limit = None
        indefinite = data.get('indefinite')
        if indefinite is None:
            indefinite = data.get('repetition_limit') in (None, '')
        if recurrence == Recurrence.MONTHLY and not _truthy(indefinite):
            repetition_limit = _positive_int(data.get('repetition_limit'), 'repetition_limit', default=None)
            if repetition_limit is None:
                raise InvalidRecurrenceError("Indicare il numero di ripetizioni mensili")

        interest = data.get('interest_rate')
        interest_rate = parse_amount(interest) if interest not in (None, '') else Decimal('0')
        if interest_rate < 0:
            raise InvalidAmountError("Il tasso di interesse non può essere negativo")

        return {
            'kind': kind,
            'payment_method': payment_method,
            'card_id': card_id,
            'amount': amount,
            'category': category,
            'description': (data.get('description') or '').strip(),
            'date': parse_date(data.get('date')),
            'recurrence': recurrence,
            'installments': installments,
            'daily_repetitions': daily_repetitions,
            'repetition_limit': repetition_limit,
            'interest_rate': interest_rate,
        }

    def _row(self, user_id, scope_id, batch_id, v, **override):
        values = {
            'user_id': user_id,
            'group_id': scope_id,
            'batch_id': batch_id,
            'kind': v['kind'].value,
            'payment_method': v['payment_method'].value,
            'card_id': v['card_id'],
            'category': self.encode(v['category']),
            'amount': self.encode(format_decimal(v['amount'])),
            'description': self.encode(v['description']) if v['description'] else None,
            'date': v['date'],
            'recurrence': Recurrence.ONCE.value,
            'repetition_limit': None,
            'installment_total': None,
            'installment_index': None,
            'is_paid': False,
        }
        values.update(override)
        return values

    def expand(self, user_id: str, v: dict, scope_id=None, batch_id=None) -> List[dict]:
        """Costruisce le righe da inserire a partire dai valori validati."""
        descr = v['description']

        if v['recurrence'] == Recurrence.DAILY:
            n = v['daily_repetitions']
            return [
                self._row(
                    user_id, scope_id, batch_id, v,
                    date=v['date'] + timedelta(days=i),
                    description=self.encode(f"{descr} ({i + 1}/{n})"),
                )
                for i in range(n)
            ]

        if v['payment_method'] == PaymentMethod.CARD and v['installments'] > 1:
            n = v['installments']
            total = v['amount'] * (1 + v['interest_rate'] / 100)
            per_installment = (total / n).quantize(CENTESIMI, rounding=ROUND_HALF_UP)
            return [
                self._row(
                    user_id, scope_id, batch_id, v,
                    date=v['date'] + relativedelta(months=i),
                    amount=self.encode(format_decimal(per_installment)),
                    description=self.encode(f"{descr} {i + 1}/{n}"),
                    installment_total=n,
                    installment_index=i + 1,
                )
                for i in range(n)
            ]

        if v['recurrence'] == Recurrence.MONTHLY:
            return [self._row(
                user_id, scope_id, batch_id, v,
                recurrence=Recurrence.MONTHLY.value,
                repetition_limit=v['repetition_limit'],
            )]

        extra = {'installment_total': 1} if v['payment_method'] == PaymentMethod.CARD else {}
        return [self._row(user_id, scope_id, batch_id, v, **extra)]

    def create(self, user_id: str, data: dict, scope_id=None) -> Tuple[bool, str, List[Transaction]]:
        """
        Crea una o più transazioni

        Returns:
            Tuple (success: bool, message: str, righe create)
        """
        self.groups.check_scope(user_id, scope_id)
        try:
            values = self._validate(user_id, data)
        except (ObligationError, ValueError) as e:
            return False, str(e), []

        batch_id = str(data.get('batch_id') or uuid.uuid4())
        existing = Transaction.query.filter_by(batch_id=batch_id, user_id=user_id).order_by(Transaction.date.asc()).all()
        if existing:
            logger.info("Lotto %s già registrato (%d righe): nessun nuovo inserimento", batch_id, len(existing))
            return True, "Transazioni già registrate", existing

        rows = self.expand(user_id, values, scope_id=scope_id, batch_id=batch_id)
        success, message, created = self.gateway.insert('transactions', rows)
        if not success:
            return False, message, []
        if len(created) > 1:
            logger.info("Lotto %s: create %d transazioni per l'utente %s", batch_id, len(created), user_id)
        return True, "Transazione(i) creata(e) con successo", created

    # ------------------------------------------------------------------ modifiche

    def update(self, user_id: str, tx_id, data: dict) -> Tuple[bool, str, Optional[Transaction]]:
        """Modifica una transazione singola; ricorrenze e rate non sono modificabili."""
        tx = self.get_accessible(user_id, tx_id)
        if not tx:
            return False, "Transazione non trovata", None
        if tx.recurrence != Recurrence.ONCE.value:
            return False, "Usare 'termina ricorrenza' per interrompere le ripetizioni: una transazione ricorrente non è modificabile", None
        if tx.is_installment or tx.batch_id and Transaction.query.filter_by(batch_id=tx.batch_id, user_id=tx.user_id).count() > 1:
            return False, "Le righe di un lotto non sono modificabili singolarmente", None

        current = tx.to_decrypted_dict(self.codec.decode)
        illeggibili = undecodable_fields(current, CAMPI_CIFRATI, replaced=data)
        if illeggibili:
            return False, f"Campi non decifrabili ({', '.join(illeggibili)}): reinserirli per sovrascriverli", None
        merged = {
            'kind': current['kind'],
            'payment_method': current['payment_method'],
            'card_id': current['card_id'],
            'amount': current['amount'],
            'category': current['category'],
            'description': current['description'],
            'date': current['date'],
            'recurrence': current['recurrence'],
        }
        merged.update({k: v for k, v in data.items() if k in merged or k in ('repetition_limit', 'indefinite')})
        try:
            v = self._validate(user_id, merged)
        except (ObligationError, ValueError) as e:
            return False, str(e), None
        if v['recurrence'] == Recurrence.DAILY or (v['payment_method'] == PaymentMethod.CARD and v['installments'] > 1):
            return False, "Ripetizioni giornaliere e rate si creano solo con una nuova transazione", None

        values = self._row(tx.user_id, tx.group_id, tx.batch_id, v)
        if v['recurrence'] == Recurrence.MONTHLY:
            values['recurrence'] = Recurrence.MONTHLY.value
            values['repetition_limit'] = v['repetition_limit']
        if v['payment_method'] == PaymentMethod.CARD:
            values['installment_total'] = 1
        for key in ('user_id', 'group_id', 'batch_id', 'is_paid'):
            values.pop(key)
        return self.gateway.update('transactions', tx.id, values)

    def end_recurrence(self, user_id: str, tx_id) -> Tuple[bool, str]:
        """Termina una ricorrenza mensile: la riga torna 'once' e perde il limite."""
        tx = self.get_accessible(user_id, tx_id)
        if not tx:
            return False, "Transazione non trovata"
        if tx.recurrence != Recurrence.MONTHLY.value or tx.is_installment:
            return False, "Solo le ricorrenze mensili possono essere terminate"
        success, message, _ = self.gateway.update('transactions', tx.id, {
            'recurrence': Recurrence.ONCE.value,
            'repetition_limit': None,
        })
        if success:
            logger.info("Ricorrenza terminata per la transazione %s", tx.id)
            return True, "Ricorrenza terminata: la transazione non si ripeterà più"
        return False, message

    def set_paid(self, user_id: str, tx_id, is_paid: bool) -> Tuple[bool, str]:
        """Segna una singola rata come pagata o da pagare (nessun effetto sulle altre)."""
        tx = self.get_accessible(user_id, tx_id)
        if not tx:
            return False, "Transazione non trovata"
        if not tx.is_installment:
            return False, "Solo le rate della carta hanno lo stato di pagamento"
        success, message, _ = self.gateway.update('transactions', tx.id, {'is_paid': bool(is_paid)})
        if success:
            return True, f"Rata segnata come {'pagata' if is_paid else 'da pagare'}"
        return False, message

    def delete(self, user_id: str, tx_id) -> Tuple[bool, str]:
        tx = self.get_accessible(user_id, tx_id)
        if not tx:
            return False, "Transazione non trovata"
        return self.gateway.delete('transactions', tx.id)


def _positive_int(value, name, default):
    if value is None or value == '':
        return default
    if isinstance(value, bool):
        raise InvalidRecurrenceError(f"{name} deve essere un intero positivo")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidRecurrenceError(f"{name} deve essere un intero positivo")
    if number < 1:
        raise InvalidRecurrenceError(f"{name} deve essere un intero positivo")
    return number


def _truthy(value):
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'on', 'yes')
