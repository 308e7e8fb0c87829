# services/expiry_service.py
from collections import namedtuple
from datetime import date
from typing import List, Dict, Optional

from ..models import Client

ExpiryStatus = namedtuple('ExpiryStatus', ['days_remaining', 'is_expired', 'is_expiring_soon'])

DEFAULT_WARNING_DAYS = 30


def compute_expiry(expiry_date: Optional[date], today: date,
                   warning_days: int = DEFAULT_WARNING_DAYS) -> ExpiryStatus:
    """
    Derive the expiry status of a policy.

    A missing expiry date yields zero days remaining with both flags off.
    Dates carry no time component, so the day difference is already whole.
    """
    if expiry_date is None:
        return ExpiryStatus(0, False, False)

    days_remaining = (expiry_date - today).days
    return ExpiryStatus(
        days_remaining=days_remaining,
        is_expired=days_remaining < 0,
        is_expiring_soon=0 <= days_remaining <= warning_days
    )


class ExpiryService:
    @staticmethod
    def list_expiring(today: Optional[date] = None,
                      warning_days: int = DEFAULT_WARNING_DAYS) -> List[Dict]:
        """
        Every client with its derived expiry status, soonest first.

        Returns:
            list of dicts carrying the client's report fields plus
            days_remaining, is_expired and is_expiring_soon
        """
        today = today or date.today()
        clients = Client.query.order_by(Client.expiry_date).all()

        report = []
        for client in clients:
            status = compute_expiry(client.expiry_date, today, warning_days)
            report.append({
                'id': client.id,
                'name': client.name,
                'vehicle_number_plate': client.vehicle_number_plate,
                'insurance_category': client.insurance_category,
                'insurance_type': client.insurance_type,
                'company': client.company,
                'expiry_date': client.expiry_date,
                **status._asdict()
            })

        return sorted(report, key=lambda row: row['days_remaining'])
