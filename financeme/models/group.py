"""
Modelli per i gruppi di finanze condivise e i relativi membri
"""
from datetime import datetime
from financeme import db


class Group(db.Model):
    __tablename__ = 'groups'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    owner_id = db.Column(db.String(64), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'owner_id': self.owner_id,
            'members': [m.to_dict() for m in self.members],
        }

    def __repr__(self):
        return f'<Group {self.name}>'


class GroupMember(db.Model):
    __tablename__ = 'group_members'

    id = db.Column(db.Integer, primary_key=True)
    group_id = db.Column(db.Integer, db.ForeignKey('groups.id'), nullable=False, index=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    role = db.Column(db.String(20), nullable=False, default='member')  # 'owner' o 'member'
    joined_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    group = db.relationship('Group', backref=db.backref('members', lazy=True, cascade='all, delete-orphan'))

    __table_args__ = (
        db.UniqueConstraint('group_id', 'user_id', name='uix_group_member'),
    )

    def to_dict(self):
        return {'user_id': self.user_id, 'role': self.role}

    def __repr__(self):
        return f'<GroupMember group={self.group_id} user={self.user_id} ({self.role})>'


class GroupInvite(db.Model):
    """Invito a un gruppo inviato a un indirizzo email"""
    __tablename__ = 'group_invites'

    PENDING = 'pending'
    ACCEPTED = 'accepted'
    DECLINED = 'declined'

    id = db.Column(db.Integer, primary_key=True)
    group_id = db.Column(db.Integer, db.ForeignKey('groups.id'), nullable=False, index=True)
    email = db.Column(db.String(200), nullable=False, index=True)
    invited_by = db.Column(db.String(64), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=PENDING)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    responded_at = db.Column(db.DateTime, nullable=True)

    group = db.relationship('Group', backref=db.backref('invites', lazy=True, cascade='all, delete-orphan'))

    def to_dict(self):
        return {
            'id': self.id,
            'group_id': self.group_id,
            'group_name': self.group.name if self.group else None,
            'email': self.email,
            'invited_by': self.invited_by,
            'status': self.status,
        }

    def __repr__(self):
        return f'<GroupInvite group={self.group_id} {self.email} ({self.status})>'
