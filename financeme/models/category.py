"""Modello per le categorie di transazioni"""
from datetime import datetime
from financeme import db


class Category(db.Model):
    """Categoria personale (group_id NULL) o condivisa con un gruppo"""
    __tablename__ = 'categories'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    group_id = db.Column(db.Integer, db.ForeignKey('groups.id'), nullable=True, index=True)
    name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {'id': self.id, 'group_id': self.group_id, 'name': self.name}

    def __repr__(self):
        return f'<Category {self.name}>'
