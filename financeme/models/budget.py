"""
Modello per i budget mensili per categoria
"""
from financeme import db


class Budget(db.Model):
    """Budget associato a una categoria in un mese (YYYY-MM)"""
    __tablename__ = 'budgets'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    group_id = db.Column(db.Integer, db.ForeignKey('groups.id'), nullable=True, index=True)
    category = db.Column(db.String(100), nullable=False)
    month = db.Column(db.String(7), nullable=False, index=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    __table_args__ = (
        db.UniqueConstraint('user_id', 'group_id', 'category', 'month', name='uix_budget_scope_category_month'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'group_id': self.group_id,
            'category': self.category,
            'month': self.month,
            'amount': float(self.amount or 0),
        }

    def __repr__(self):
        return f'<Budget {self.category} {self.month} amount={self.amount}>'
