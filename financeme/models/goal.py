from datetime import datetime
from financeme import db


class Goal(db.Model):
    """Obiettivo di risparmio"""
    __tablename__ = 'goals'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    group_id = db.Column(db.Integer, db.ForeignKey('groups.id'), nullable=True, index=True)
    name = db.Column(db.String(200), nullable=False)
    target_amount = db.Column(db.Numeric(12, 2), nullable=False)
    current_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    target_date = db.Column(db.Date, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    @property
    def progress_percent(self):
        target = float(self.target_amount or 0)
        if target <= 0:
            return 0.0
        return float(self.current_amount or 0) / target * 100

    def to_dict(self):
        return {
            'id': self.id,
            'group_id': self.group_id,
            'name': self.name,
            'target_amount': float(self.target_amount or 0),
            'current_amount': float(self.current_amount or 0),
            'target_date': self.target_date.isoformat() if self.target_date else None,
            'progress_percent': self.progress_percent,
        }

    def __repr__(self):
        return f'<Goal {self.name} {self.current_amount}/{self.target_amount}>'
