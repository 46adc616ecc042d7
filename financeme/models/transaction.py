"""
Modello per le transazioni

I campi `categoria`, `importo` e `descrizione` sono salvati cifrati (testo);
tipo, metodo di pagamento, data e cadenza restano in chiaro per poter filtrare.

Per le ricorrenze mensili `repetition_limit` indica il numero di occorrenze
(NULL = indefinita). Le rate della carta e le ripetizioni giornaliere sono
invece righe 'once' create tutte insieme e legate dallo stesso `batch_id`.
"""
from datetime import datetime
from financeme import db


class Transaction(db.Model):
    """Transazione (entrata/uscita) personale o di gruppo"""
    __tablename__ = 'transactions'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    group_id = db.Column(db.Integer, db.ForeignKey('groups.id'), nullable=True, index=True)
    kind = db.Column(db.String(20), nullable=False)  # 'expense' o 'income'
    payment_method = db.Column(db.String(20), nullable=False, default='other')
    card_id = db.Column(db.Integer, db.ForeignKey('credit_cards.id'), nullable=True, index=True)
    category = db.Column(db.Text, nullable=False)     # encrypted
    amount = db.Column(db.Text, nullable=False)       # encrypted
    description = db.Column(db.Text, nullable=True)   # encrypted
    date = db.Column(db.Date, nullable=False, index=True)
    recurrence = db.Column(db.String(20), nullable=False, default='once')
    repetition_limit = db.Column(db.Integer, nullable=True)
    installment_total = db.Column(db.Integer, nullable=True)
    installment_index = db.Column(db.Integer, nullable=True)
    is_paid = db.Column(db.Boolean, nullable=False, default=False)
    batch_id = db.Column(db.String(36), nullable=True, index=True)
    data_creazione = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    data_aggiornamento = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    card = db.relationship('CreditCard', backref=db.backref('transactions', lazy=True))

    @property
    def is_installment(self):
        return (self.installment_total or 0) > 1

    def to_decrypted_dict(self, decrypt_fn):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'group_id': self.group_id,
            'kind': self.kind,
            'payment_method': self.payment_method,
            'card_id': self.card_id,
            'category': decrypt_fn(self.category) if self.category else '',
            'amount': decrypt_fn(self.amount) if self.amount else '',
            'description': decrypt_fn(self.description) if self.description else '',
            'date': self.date.isoformat(),
            'recurrence': self.recurrence,
            'repetition_limit': self.repetition_limit,
            'installment_total': self.installment_total,
            'installment_index': self.installment_index,
            'is_paid': bool(self.is_paid),
            'batch_id': self.batch_id,
        }

    def __repr__(self):
        return f'<Transaction {self.id} {self.date} ({self.kind}/{self.recurrence})>'
