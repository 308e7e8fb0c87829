import re


def normalize_phone(value):
    """
    Reduce a phone number to its digits, e.g. '123-456-7890' -> '1234567890'.
    Numeric input is accepted and stringified first.
    """
    return re.sub(r'[^0-9]', '', str(value))


def parse_bool(value):
    """Interpret query-string flags such as ?aggregate=true"""
    if value is None:
        return False
    return str(value).strip().lower() in ['true', '1', 'yes', 'on']
