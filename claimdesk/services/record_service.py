# services/record_service.py
from datetime import date
from typing import Dict

from ..models import Record
from ..exceptions import NotFoundError
from .client_service import ClientService

from claimdesk import logger


class RecordService:
    @staticmethod
    def add_record(client_id: str, data: Dict) -> Record:
        """
        Attach a claim record to an existing client.

        Args:
            client_id: owning client
            data: schema-validated record fields; claim_date defaults to today
        Raises:
            NotFoundError: the client does not exist
        """
        client = ClientService.get_client(client_id)

        record = Record(
            client_id=client.id,
            claim_number=data['claim_number'],
            claim_amount=data.get('claim_amount') or 0,
            claim_date=data.get('claim_date') or date.today(),
            status=data.get('status') or 'Pending',
            record_type=data['record_type'],
            description=data.get('description') or ''
        )

        try:
            record.save()
            logger.info(f"Record {record.claim_number} added for client {client.id}")
            return record
        except Exception as e:
            logger.error(f"Error adding record for client {client_id}: {str(e)}")
            raise

    @staticmethod
    def delete_record(record_id: str) -> None:
        record = Record.get_by_id(record_id)
        if record is None:
            raise NotFoundError('Record', record_id)
        record.delete()
        logger.info(f"Record {record_id} deleted")
