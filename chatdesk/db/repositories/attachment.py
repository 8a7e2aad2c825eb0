"""Attachment repository for database operations."""

from typing import Optional
from .base import BaseRepository
from ..database_models.attachment import AttachmentDO, FileType


class AttachmentRepository(BaseRepository):
    """Repository for message attachments."""

    def add(self, attachment: AttachmentDO) -> AttachmentDO:
        attachment.id = self._next_id("attachments_id_seq")
        self.conn.execute("""
            INSERT INTO attachments (
                id, message_id, account_id, file_type, external_url, extension,
                coordinates_lat, coordinates_long, created_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, [
            attachment.id,
            attachment.message_id,
            attachment.account_id,
            int(attachment.file_type),
            attachment.external_url,
            attachment.extension,
            attachment.coordinates_lat,
            attachment.coordinates_long,
            attachment.created_at
        ])
        return attachment

    def get_by_message(self, message_id: int) -> Optional[AttachmentDO]:
        result = self.conn.execute("""
            SELECT id, message_id, account_id, file_type, external_url, extension,
                   coordinates_lat, coordinates_long, created_at
            FROM attachments
            WHERE message_id = ?
            ORDER BY id
            LIMIT 1
        """, [message_id]).fetchone()

        if result:
            return AttachmentDO(
                id=result[0],
                message_id=result[1],
                account_id=result[2],
                file_type=FileType(result[3]),
                external_url=result[4],
                extension=result[5],
                coordinates_lat=result[6],
                coordinates_long=result[7],
                created_at=result[8]
            )
        return None
