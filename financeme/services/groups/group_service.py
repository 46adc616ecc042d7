"""
Service per i gruppi di finanze condivise.

L'ambito (scope) di ogni query è un parametro esplicito: `scope_id` è l'id del
gruppo oppure None per le righe personali dell'utente.
"""
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from financeme import db
from financeme.models.group import Group, GroupInvite, GroupMember
from financeme.services import BaseService
from financeme.utils import ValidationUtils

logger = logging.getLogger(__name__)


class ScopeError(PermissionError):
    """L'utente non appartiene al gruppo richiesto."""


class GroupService(BaseService):
    """Service per gestire gruppi e membri"""

    def get_groups_for_user(self, user_id: str) -> List[Group]:
        group_ids = [m.group_id for m in GroupMember.query.filter_by(user_id=user_id).all()]
        if not group_ids:
            return []
        return Group.query.filter(Group.id.in_(group_ids)).order_by(Group.name.asc()).all()

    def is_member(self, group_id, user_id: str) -> bool:
        return GroupMember.query.filter_by(group_id=group_id, user_id=user_id).first() is not None

    def check_scope(self, user_id: str, scope_id) -> None:
        """Solleva ScopeError se `scope_id` è un gruppo di cui l'utente non fa parte."""
        if scope_id is None:
            return
        if not self.is_member(scope_id, user_id):
            raise ScopeError(f"L'utente non fa parte del gruppo {scope_id}")

    def can_access(self, row, user_id: str) -> bool:
        """True se la riga è personale dell'utente o appartiene a un suo gruppo."""
        if row is None:
            return False
        if row.group_id is None:
            return row.user_id == user_id
        return self.is_member(row.group_id, user_id)

    def create(self, owner_id: str, name: str) -> Tuple[bool, str, Optional[Group]]:
        """Crea un gruppo; il creatore ne diventa membro 'owner'."""
        try:
            if not name or not name.strip():
                return False, "Il nome del gruppo è obbligatorio", None
            group = Group(name=name.strip(), owner_id=owner_id)
            db.session.add(group)
            db.session.flush()
            db.session.add(GroupMember(group_id=group.id, user_id=owner_id, role='owner'))
            db.session.commit()
            logger.info("Gruppo %s creato da %s", group.id, owner_id)
            return True, "Gruppo creato con successo", group
        except Exception as e:
            db.session.rollback()
            logger.exception(f"Errore nella creazione del gruppo: {e}")
            return False, f"Errore durante la creazione: {str(e)}", None

    def add_member(self, group_id, requester_id: str, user_id: str) -> Tuple[bool, str]:
        try:
            group = db.session.get(Group, group_id)
            if not group:
                return False, "Gruppo non trovato"
            if group.owner_id != requester_id:
                return False, "Solo il proprietario può aggiungere membri"
            if not user_id or not str(user_id).strip():
                return False, "L'utente da aggiungere è obbligatorio"
            if self.is_member(group_id, user_id):
                return False, "L'utente fa già parte del gruppo"
            success, message = self.save(GroupMember(group_id=group_id, user_id=str(user_id).strip(), role='member'))
            return (True, "Membro aggiunto con successo") if success else (False, message)
        except Exception as e:
            db.session.rollback()
            logger.exception(f"Errore nell'aggiunta del membro: {e}")
            return False, f"Errore durante l'aggiunta: {str(e)}"

    def remove_member(self, group_id, requester_id: str, user_id: str) -> Tuple[bool, str]:
        try:
            group = db.session.get(Group, group_id)
            if not group:
                return False, "Gruppo non trovato"
            # il proprietario rimuove chiunque, un membro può solo uscire
            if requester_id != group.owner_id and requester_id != user_id:
                return False, "Operazione non consentita"
            if user_id == group.owner_id:
                return False, "Il proprietario non può essere rimosso dal gruppo"
            member = GroupMember.query.filter_by(group_id=group_id, user_id=user_id).first()
            if not member:
                return False, "Membro non trovato"
            success, message = self.delete(member)
            return (True, "Membro rimosso con successo") if success else (False, message)
        except Exception as e:
            db.session.rollback()
            logger.exception(f"Errore nella rimozione del membro: {e}")
            return False, f"Errore durante la rimozione: {str(e)}"

    # ------------------------------------------------------------------ inviti

    def invite(self, group_id, requester_id: str, email) -> Tuple[bool, str, Optional[GroupInvite]]:
        """Invita un indirizzo email nel gruppo; solo i membri possono invitare."""
        group = db.session.get(Group, group_id)
        if not group:
            return False, "Gruppo non trovato", None
        if not self.is_member(group_id, requester_id):
            return False, "Solo i membri del gruppo possono invitare", None
        try:
            email = ValidationUtils.validate_email(email)
        except ValueError as e:
            return False, str(e), None
        pending = GroupInvite.query.filter_by(group_id=group_id, email=email, status=GroupInvite.PENDING).first()
        if pending:
            return False, f"Esiste già un invito in attesa per {email}", None
        invite = GroupInvite(group_id=group_id, email=email, invited_by=requester_id)
        success, message = self.save(invite)
        if not success:
            return False, message, None
        logger.info("Invito %s al gruppo %s inviato da %s", invite.id, group_id, requester_id)
        return True, f"Invito inviato a {email}", invite

    def pending_invites(self, email) -> List[GroupInvite]:
        """Inviti in attesa per l'indirizzo dell'utente"""
        if not email:
            return []
        return (GroupInvite.query
                .filter_by(email=email.strip().lower(), status=GroupInvite.PENDING)
                .order_by(GroupInvite.created_at.asc())
                .all())

    def group_pending_invites(self, group_id, requester_id: str) -> List[GroupInvite]:
        """Inviti in attesa di un gruppo, visibili ai suoi membri"""
        self.check_scope(requester_id, group_id)
        return GroupInvite.query.filter_by(group_id=group_id, status=GroupInvite.PENDING).all()

    def respond(self, invite_id, user_id: str, email, accept: bool) -> Tuple[bool, str]:
        """Accetta (diventando membro) o rifiuta un invito indirizzato all'utente."""
        invite = db.session.get(GroupInvite, invite_id)
        if not invite or not email or invite.email != email.strip().lower():
            return False, "Invito non trovato"
        if invite.status != GroupInvite.PENDING:
            return False, "L'invito è già stato gestito"
        try:
            invite.status = GroupInvite.ACCEPTED if accept else GroupInvite.DECLINED
            invite.responded_at = datetime.utcnow()
            if accept and not self.is_member(invite.group_id, user_id):
                db.session.add(GroupMember(group_id=invite.group_id, user_id=user_id, role='member'))
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.exception(f"Errore nella risposta all'invito {invite_id}: {e}")
            return False, f"Errore durante la risposta all'invito: {str(e)}"
        if accept:
            logger.info("Invito %s accettato: %s entra nel gruppo %s", invite_id, user_id, invite.group_id)
            return True, "Ora fai parte del gruppo"
        return True, "Invito rifiutato"
