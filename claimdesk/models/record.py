import enum
from datetime import date

from sqlalchemy import Column, String, Date, Text, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from . import BaseModel


class ClaimStatus(enum.Enum):
    """
    Enum representing possible claim statuses.
    """
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    IN_REVIEW = "In Review"


class RecordType(enum.Enum):
    ANNUAL = "Annual"
    RENEWAL = "Renewal"
    MONTHLY = "Monthly"


class Record(BaseModel):
    """
    A claim filed against a client's policy.

    Records are created and deleted, never edited. Deleting the owning client
    deletes its records in the same transaction.
    """

    __tablename__ = 'records'

    client_id = Column(
        String(36),
        ForeignKey('clients.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    client = relationship('Client', back_populates='records')

    claim_number = Column(String(100), nullable=False, doc="Insurer-issued claim number.")
    claim_amount = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    claim_date = Column(Date, nullable=False, default=date.today)
    status = Column(String(20), nullable=False, default=ClaimStatus.PENDING.value)
    record_type = Column(String(20), nullable=False)
    description = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Record {self.claim_number} ({self.status}) for client {self.client_id}>"
