from datetime import datetime
from financeme import db


class UserConfig(db.Model):
    """Impostazioni per utente (limite di spesa mensile)"""
    __tablename__ = 'user_config'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, unique=True)
    spending_limit = db.Column(db.Numeric(12, 2), nullable=True)
    email = db.Column(db.String(200), nullable=True)

    def __repr__(self):
        return f'<UserConfig {self.user_id} limit={self.spending_limit}>'


class SpendingNotification(db.Model):
    """Una notifica di superamento limite per utente e mese (YYYY-MM)."""
    __tablename__ = 'spending_notifications'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    month = db.Column(db.String(7), nullable=False)
    sent_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('user_id', 'month', name='uix_notification_user_month'),
    )

    def __repr__(self):
        return f'<SpendingNotification {self.user_id} {self.month}>'
