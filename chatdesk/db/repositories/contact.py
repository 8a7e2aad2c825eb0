"""Contact repository for database operations."""

from typing import Optional
from .base import BaseRepository
from ..database_models.contact import ContactDO


class ContactRepository(BaseRepository):
    """Repository for Contact CRUD operations."""

    def create(self, contact: ContactDO) -> ContactDO:
        contact.id = self._next_id("contacts_id_seq")
        self.conn.execute("""
            INSERT INTO contacts (id, account_id, name, email, phone_number, thumbnail, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """, [
            contact.id,
            contact.account_id,
            contact.name,
            contact.email,
            contact.phone_number,
            contact.thumbnail,
            contact.created_at
        ])
        return contact

    def get(self, contact_id: Optional[int]) -> Optional[ContactDO]:
        if contact_id is None:
            return None
        result = self.conn.execute("""
            SELECT id, account_id, name, email, phone_number, thumbnail, created_at
            FROM contacts
            WHERE id = ?
        """, [contact_id]).fetchone()

        if result:
            return ContactDO(
                id=result[0],
                account_id=result[1],
                name=result[2],
                email=result[3],
                phone_number=result[4],
                thumbnail=result[5] or "",
                created_at=result[6]
            )
        return None
