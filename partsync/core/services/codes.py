"""Human-readable document codes: ``{PREFIX}{YYMM}-{seq:04d}``."""

from datetime import date, datetime

from partsync.core.interfaces.unit_of_work import ICodeSequenceStore

PURCHASE_ORDER_PREFIX = "PO"
SALES_ORDER_PREFIX = "SO"
AUDIT_PREFIX = "AU"
PICKING_PREFIX = "PK"


def code_period(on: date | datetime) -> str:
    """YYMM period a code is numbered within."""
    return on.strftime("%y%m")


def format_code(prefix: str, period: str, sequence: int) -> str:
    """
    Render a document code.

    >>> format_code("PO", "2501", 1)
    'PO2501-0001'
    """
    return f"{prefix}{period}-{sequence:04d}"


class CodeGenerator:
    """Allocates codes from a per-prefix, per-month sequence."""

    def __init__(self, sequences: ICodeSequenceStore) -> None:
        self._sequences = sequences

    async def next_code(self, prefix: str, on: date | datetime | None = None) -> str:
        period = code_period(on or datetime.now())
        sequence = await self._sequences.next_value(prefix, period)
        return format_code(prefix, period, sequence)
