"""
TipMate UI — Calculator Form State
====================================

What:  The calculator's form fields and the values derived from them.
How:   Input fields are kept as the text the user typed. The tip amount is
       re-derived after every change by the derivation function of the
       current mode:

           TipMode.PERCENTAGE → tip = round(bill × pct / 100, 2)
           TipMode.AMOUNT     → tip = whatever the user typed

       Nothing is back-derived: in amount mode the percentage field keeps
       its text and is ignored until submit recomputes the real percentage.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from tipmate.ui.formatting import (
    format_currency,
    format_money,
    parse_number,
    round_money,
    round_percent,
)

PRESET_PERCENTAGES: Tuple[int, ...] = (10, 15, 18, 20, 25)


class TipMode(str, Enum):
    """Which input is authoritative for the tip."""
    PERCENTAGE = "percentage"
    AMOUNT = "amount"


def derive_tip_from_percentage(bill_text: str, percentage_text: str, tip_text: str) -> str:
    bill = parse_number(bill_text)
    percentage = parse_number(percentage_text)
    return format_money(round_money(bill * (percentage / 100)))


def derive_tip_from_amount(bill_text: str, percentage_text: str, tip_text: str) -> str:
    return tip_text


DERIVATIONS: Dict[TipMode, Callable[[str, str, str], str]] = {
    TipMode.PERCENTAGE: derive_tip_from_percentage,
    TipMode.AMOUNT: derive_tip_from_amount,
}


@dataclass(frozen=True)
class Summary:
    """Bill, tip and total as shown under the form."""
    bill: float
    tip: float

    @property
    def total(self) -> float:
        return self.bill + self.tip

    @property
    def bill_display(self) -> str:
        return format_money(self.bill)

    @property
    def tip_display(self) -> str:
        return format_money(self.tip)

    @property
    def total_display(self) -> str:
        return format_money(self.total)

    def lines(self):
        return [
            f"Bill Amount: {format_currency(self.bill)}",
            f"Tip Amount:  {format_currency(self.tip)}",
            f"Total:       {format_currency(self.total)}",
        ]


@dataclass
class CalculatorForm:
    """
    Editable calculator state.

    Use the setter methods rather than assigning to the amount fields
    directly; they keep `tip_amount` in step with the current mode.
    """

    customer_name: str = ""
    mobile_number: str = ""
    bill_amount: str = ""
    tip_percentage: str = ""
    tip_amount: str = ""
    mode: TipMode = TipMode.PERCENTAGE
    selected_preset: Optional[int] = field(default=None)

    def __post_init__(self):
        self.mode = TipMode(self.mode)
        self._recompute()

    def _recompute(self) -> None:
        derive = DERIVATIONS[self.mode]
        self.tip_amount = derive(self.bill_amount, self.tip_percentage, self.tip_amount)

    # ── Field edits ───────────────────────────────────────────────────────

    def set_customer_name(self, value: str) -> None:
        self.customer_name = value

    def set_mobile_number(self, value: str) -> None:
        self.mobile_number = value

    def set_bill_amount(self, value: str) -> None:
        self.bill_amount = value
        self._recompute()

    def set_tip_percentage(self, value: str) -> None:
        """Manual edit of the percentage field; clears the preset marker."""
        self.tip_percentage = value
        self.selected_preset = None
        self._recompute()

    def set_tip_amount(self, value: str) -> None:
        """Manual edit of the tip amount. Only sticks in amount mode."""
        self.tip_amount = value
        self._recompute()

    def select_preset(self, percentage: int) -> None:
        """
        Apply one of PRESET_PERCENTAGES: switches to percentage mode, fills
        the percentage field and marks the preset as selected.
        """
        if percentage not in PRESET_PERCENTAGES:
            raise ValueError(
                f"Unknown preset {percentage}. Must be one of: {PRESET_PERCENTAGES}"
            )
        self.mode = TipMode.PERCENTAGE
        self.tip_percentage = str(percentage)
        self.selected_preset = percentage
        self._recompute()

    def set_mode(self, mode) -> None:
        """Switch modes without clearing any entered values."""
        self.mode = TipMode(mode)
        self._recompute()

    def toggle_mode(self) -> None:
        self.set_mode(
            TipMode.AMOUNT if self.mode is TipMode.PERCENTAGE else TipMode.PERCENTAGE
        )

    def reset(self) -> None:
        """Clear every field and the preset marker; the mode is kept."""
        self.customer_name = ""
        self.mobile_number = ""
        self.bill_amount = ""
        self.tip_percentage = ""
        self.tip_amount = ""
        self.selected_preset = None
        self._recompute()

    # ── Derived values ────────────────────────────────────────────────────

    @property
    def bill(self) -> float:
        return parse_number(self.bill_amount)

    @property
    def tip(self) -> float:
        return parse_number(self.tip_amount)

    def summary(self) -> Summary:
        return Summary(bill=self.bill, tip=self.tip)

    def missing_fields(self):
        missing = []
        if not self.customer_name.strip():
            missing.append("customerName")
        if not self.mobile_number.strip():
            missing.append("mobileNumber")
        if self.bill <= 0:
            missing.append("billAmount")
        return missing

    def is_submittable(self) -> bool:
        return not self.missing_fields()

    def build_payload(self) -> Dict[str, Any]:
        """
        Request body for POST /api/tip-calculations.

        The percentage is recomputed from tip / bill, whatever the mode and
        whatever the percentage field says.

        Raises:
            ValueError: the form does not pass is_submittable()
        """
        missing = self.missing_fields()
        if missing:
            raise ValueError(f"Form is missing required fields: {', '.join(missing)}")

        bill = self.bill
        tip = self.tip
        return {
            "customerName": self.customer_name,
            "mobileNumber": self.mobile_number,
            "billAmount": round_money(bill),
            "tipAmount": round_money(tip),
            "totalAmount": round_money(bill + tip),
            "tipPercentage": round_percent(tip / bill * 100),
        }
