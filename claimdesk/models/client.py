# models/client.py

from claimdesk import db
from . import BaseModel


class Client(BaseModel):
    """
    An insured client of the agency.

    balance is derived from premium and premium_paid and never stored.
    Duplicate rows for the same person (same name and phone) are allowed;
    they are merged at read time by the aggregate detail view.
    """
    __tablename__ = 'clients'

    name = db.Column(db.String(200), nullable=False, index=True)
    email = db.Column(db.String(200), nullable=True)
    phone = db.Column(db.String(10), nullable=True, index=True)

    # Policy attributes
    customer_id_no = db.Column(db.String(100), nullable=True)
    vehicle_number_plate = db.Column(db.String(50), nullable=True)
    company = db.Column(db.String(200), nullable=True)
    insurance_category = db.Column(db.String(100), nullable=True)
    insurance_type = db.Column(db.String(100), nullable=True)
    business_type = db.Column(db.String(100), nullable=True)

    # Financials
    premium = db.Column(db.Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    premium_paid = db.Column(db.Numeric(12, 2, asdecimal=False), nullable=False, default=0)

    # Coverage window
    start_date = db.Column(db.Date, nullable=True)
    expiry_date = db.Column(db.Date, nullable=True)

    records = db.relationship(
        'Record',
        back_populates='client',
        cascade='all, delete-orphan',
        lazy=True
    )

    @property
    def balance(self):
        return (self.premium or 0) - (self.premium_paid or 0)

    def __repr__(self):
        return f"<Client {self.name} - {self.phone}>"
