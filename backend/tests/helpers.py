from datetime import date

from ledgerbook.schemas import Transaction

TODAY = date(2024, 2, 15)
ADMIN_TOKEN = "test-token"
ADMIN = {"Authorization": f"Bearer {ADMIN_TOKEN}"}


def tx(id, date, amount, type="expense", category="기타", description="", receipt=None) -> Transaction:
    return Transaction(
        id=id,
        date=date,
        category=category,
        amount=amount,
        description=description,
        type=type,
        receipt=receipt,
    )
