# services/client_service.py
from typing import List, Dict, Optional, Tuple
from sqlalchemy import func

from ..models import Client, Record, db
from ..exceptions import NotFoundError
from .search_service import rank_clients

from claimdesk import logger


class ClientService:
    @staticmethod
    def list_clients(query: Optional[str] = None) -> List[Client]:
        """
        All clients ordered by name. When a search query is given, only
        matching clients are returned, best matches first.
        """
        clients = Client.query.order_by(Client.name).all()
        if query is None:
            return clients
        return rank_clients(query, clients)

    @staticmethod
    def get_client(client_id: str) -> Client:
        client = Client.get_by_id(client_id)
        if client is None:
            raise NotFoundError('Client', client_id)
        return client

    @staticmethod
    def create_client(data: Dict) -> Client:
        """Create a client from schema-validated data"""
        logger.info(f"Creating new client: {data.get('name')}")

        client = Client(**data)
        try:
            client.save()
            logger.info(f"Client created successfully: {client.id}")
            return client
        except Exception as e:
            logger.error(f"Error creating client: {str(e)}")
            raise

    @staticmethod
    def update_client(client_id: str, data: Dict) -> Client:
        """Replace every editable field of an existing client"""
        client = ClientService.get_client(client_id)
        for key, value in data.items():
            setattr(client, key, value)

        try:
            client.save()
            logger.info(f"Client updated: {client.id}")
            return client
        except Exception as e:
            logger.error(f"Error updating client {client_id}: {str(e)}")
            raise

    @staticmethod
    def delete_client(client_id: str) -> int:
        """
        Delete a client and all of its records in one transaction.

        Returns:
            int: number of records removed with the client
        """
        client = ClientService.get_client(client_id)
        record_count = len(client.records)
        try:
            client.delete()
        except Exception as e:
            logger.error(f"Error deleting client {client_id}: {str(e)}")
            raise
        logger.info(f"Client {client_id} deleted with {record_count} record(s)")
        return record_count

    @staticmethod
    def get_client_detail(client_id: str, aggregate: bool = False) -> Tuple[Client, List[Record]]:
        """
        Fetch a client and its records ordered by claim date.

        With aggregate=True every client row sharing the target's name
        (case-insensitive) and phone is treated as the same person: their
        records are combined and the earliest created matching row is
        returned as the representative. The underlying rows are left as they are.

        Raises:
            NotFoundError: no client has this id
        """
        client = ClientService.get_client(client_id)

        if not aggregate:
            records = Record.query.filter_by(client_id=client.id) \
                .order_by(Record.claim_date.asc(), Record.created_at.asc()) \
                .all()
            return client, records

        matched = Client.query.filter(
            func.lower(Client.name) == func.lower(client.name),
            Client.phone == (client.phone or '')
        ).order_by(Client.created_at.asc()).all()

        ids = [c.id for c in matched]
        records = []
        if ids:
            records = Record.query.filter(Record.client_id.in_(ids)) \
                .order_by(Record.claim_date.asc(), Record.created_at.asc()) \
                .all()

        representative = matched[0] if matched else client
        logger.debug(f"Aggregated {len(matched)} client row(s) into {representative.id}")
        return representative, records

    @staticmethod
    def all_clients_for_export() -> List[Client]:
        return Client.query.order_by(Client.name).all()
