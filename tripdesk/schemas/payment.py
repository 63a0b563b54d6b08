import json
from typing import Optional

from pydantic import TypeAdapter

from .base import ApiModel


class BankDetails(ApiModel):
    account_holder_name: Optional[str] = None
    bank_name: Optional[str] = None
    branch_name: Optional[str] = None
    account_number: Optional[str] = None
    ifsc_code: Optional[str] = None
    bank_country: Optional[str] = None
    currency: Optional[str] = None
    notes: Optional[str] = None


_bank_list = TypeAdapter(list[BankDetails])


def parse_bank_details(raw: Optional[str]) -> list[BankDetails]:
    """
    Bank accounts posted as a JSON string in a multipart form.

    Accepts a list or a single object; empty, ``"null"`` and ``"undefined"``
    mean no accounts. Raises ValueError for anything else.
    """
    if not raw or raw.strip() in ("null", "undefined"):
        return []
    data = json.loads(raw)
    if isinstance(data, dict):
        data = [data]
    return _bank_list.validate_python(data)
