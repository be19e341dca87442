"""Debt helpers.

A debt's ``status`` is set by the user; these helpers offer the optional
derivation from ``remaining_amount`` used by payment recording.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from busledger.domain.entities import (
    Debt,
    DebtStatus,
    ProvisionalDebt,
    ProvisionalDebtStatus,
    SupplierType,
)
from busledger.utils.ids import new_id

ZERO = Decimal("0")


def derive_debt_status(amount: Decimal, remaining_amount: Decimal) -> DebtStatus:
    """Derive the status a debt would have from its outstanding amount."""
    if remaining_amount <= ZERO:
        return DebtStatus.PAID
    if remaining_amount < amount:
        return DebtStatus.PARTIAL
    return DebtStatus.PENDING


def clamp_remaining(amount: Decimal, remaining_amount: Decimal) -> Decimal:
    """Bound an outstanding amount to ``[0, amount]``."""
    return max(ZERO, min(remaining_amount, amount))


def new_debt(
    supplier: str,
    part: str,
    amount: Decimal,
    supplier_type: SupplierType = SupplierType.OTHER,
    remaining_amount: Optional[Decimal] = None,
    date_created: Optional[date] = None,
    date_due: Optional[date] = None,
    status: DebtStatus = DebtStatus.PENDING,
    notes: str = "",
) -> Debt:
    """Create a debt; the outstanding amount defaults to the full amount."""
    if not remaining_amount:
        remaining_amount = amount
    return Debt(
        id=new_id(),
        supplier=supplier,
        supplier_type=SupplierType(supplier_type),
        part=part,
        amount=amount,
        remaining_amount=remaining_amount,
        date_created=date_created or date.today(),
        date_due=date_due,
        status=DebtStatus(status),
        notes=notes,
    )


def new_provisional_debt(
    label: str,
    amount: Decimal,
    original_debt_id: Optional[str] = None,
    date_created: Optional[date] = None,
    notes: str = "",
) -> ProvisionalDebt:
    """Create a provisional debt in the provisional state."""
    return ProvisionalDebt(
        id=new_id(),
        label=label,
        amount=amount,
        date_created=date_created or date.today(),
        status=ProvisionalDebtStatus.PROVISIONAL,
        notes=notes,
        original_debt_id=original_debt_id or None,
    )


def outstanding_total(debts: Iterable[Debt]) -> Decimal:
    """Sum the remaining amount of every debt not marked paid."""
    return sum((d.remaining_amount for d in debts if d.status != DebtStatus.PAID), ZERO)


def provisional_total(provisional_debts: Iterable[ProvisionalDebt]) -> Decimal:
    """Sum the amount of provisional debts still in the provisional state."""
    return sum(
        (pd.amount for pd in provisional_debts if pd.status == ProvisionalDebtStatus.PROVISIONAL),
        ZERO,
    )
