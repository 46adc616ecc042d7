"""Modello per gli appuntamenti dell'agenda"""
from datetime import datetime
from financeme import db


class Appointment(db.Model):
    """Appuntamento (eventualmente con importo) mostrato nel calendario"""
    __tablename__ = 'appointments'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    group_id = db.Column(db.Integer, db.ForeignKey('groups.id'), nullable=True, index=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)  # encrypted
    amount = db.Column(db.Text, nullable=True)       # encrypted, opzionale
    date = db.Column(db.Date, nullable=False, index=True)
    time = db.Column(db.Time, nullable=True)
    recurrence = db.Column(db.String(20), nullable=False, default='once')
    repetition_limit = db.Column(db.Integer, nullable=True)
    data_creazione = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_decrypted_dict(self, decrypt_fn):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'group_id': self.group_id,
            'title': self.title,
            'description': decrypt_fn(self.description) if self.description else '',
            'amount': decrypt_fn(self.amount) if self.amount else None,
            'date': self.date.isoformat(),
            'time': self.time.strftime('%H:%M') if self.time else None,
            'recurrence': self.recurrence,
            'repetition_limit': self.repetition_limit,
        }

    def __repr__(self):
        return f'<Appointment {self.title} {self.date}>'
