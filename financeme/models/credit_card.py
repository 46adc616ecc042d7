"""Modello per le carte di credito"""
from datetime import datetime
from financeme import db


class CreditCard(db.Model):
    __tablename__ = 'credit_cards'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    card_name = db.Column(db.String(100), nullable=False)
    last_four_digits = db.Column(db.String(4), nullable=True)
    spending_limit = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    closing_day = db.Column(db.Integer, nullable=False)  # giorno di chiusura fattura (1-31)
    due_day = db.Column(db.Integer, nullable=False)      # giorno di scadenza (1-31)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'card_name': self.card_name,
            'last_four_digits': self.last_four_digits,
            'spending_limit': float(self.spending_limit or 0),
            'closing_day': self.closing_day,
            'due_day': self.due_day,
        }

    def __repr__(self):
        return f'<CreditCard {self.card_name} *{self.last_four_digits}>'
