"""
TipMate UI — Calculator Controller
====================================

What:  Ties the calculator form to the API: loads history on start, submits
       the form, keeps the history list and the notifications.
How:   Runs on the caller's event loop. The success toast hides itself
       through `loop.call_later`; showing or dismissing it again cancels the
       pending hide.

Submit flow:
    ┌──────────┐  fail   ┌──────────────────────────┐
    │  Guard   │────────▶│ notice, no network call  │
    └────┬─────┘         └──────────────────────────┘
         │ pass
    ┌────▼─────┐  fail   ┌──────────────────────────┐
    │  POST    │────────▶│ notice, form untouched   │
    └────┬─────┘         └──────────────────────────┘
         │ 201
    ┌────▼──────────────────────────────────────────┐
    │ prepend to history → toast (3 s) → reset form │
    └───────────────────────────────────────────────┘
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from tipmate.exceptions import ApiClientError
from tipmate.ui.calculator import PRESET_PERCENTAGES, CalculatorForm, TipMode
from tipmate.ui.client import TipCalculationsClient
from tipmate.ui.formatting import format_currency, format_date

logger = logging.getLogger(__name__)

TOAST_DURATION = 3.0
TOAST_MESSAGE = "Tip calculation saved successfully!"
REQUIRED_FIELDS_NOTICE = "Please fill in all required fields"
SUBMIT_FAILED_NOTICE = "Failed to submit tip calculation"


@dataclass(frozen=True)
class HistoryEntry:
    """A stored calculation as displayed in the history list."""
    id: str
    customer_name: str
    mobile_number: str
    bill_amount: float
    tip_amount: float
    total_amount: float
    tip_percentage: int
    date: str  # "Month Day, Year"

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "HistoryEntry":
        """
        Build from an API record.

        Raises:
            KeyError / ValueError / TypeError: the record is malformed
        """
        return cls(
            id=str(item["id"]),
            customer_name=item["customerName"],
            mobile_number=item["mobileNumber"],
            bill_amount=float(item["billAmount"]),
            tip_amount=float(item["tipAmount"]),
            total_amount=float(item["totalAmount"]),
            tip_percentage=int(item["tipPercentage"]),
            date=format_date(item["date"]),
        )

    def lines(self) -> List[str]:
        return [
            f"{self.customer_name} · {self.date}",
            f"  {format_currency(self.total_amount)} "
            f"({format_currency(self.bill_amount)} + {format_currency(self.tip_amount)}, "
            f"{self.tip_percentage}%)",
        ]


class CalculatorController:
    """
    Calculator screen state and actions.

    Attributes:
        form:           the editable CalculatorForm
        history:        displayed calculations, newest first
        toast_visible:  success toast currently shown
        notices:        blocking messages shown to the user, oldest first

    Args:
        client:          API client
        toast_duration:  seconds before the success toast hides itself
        on_notice:       called with each blocking message (e.g. a dialog)
    """

    def __init__(
        self,
        client: TipCalculationsClient,
        toast_duration: float = TOAST_DURATION,
        on_notice: Optional[Callable[[str], None]] = None,
    ):
        self.client = client
        self.toast_duration = toast_duration
        self.on_notice = on_notice
        self.form = CalculatorForm()
        self.history: List[HistoryEntry] = []
        self.toast_visible = False
        self.notices: List[str] = []
        self._toast_handle: Optional[asyncio.TimerHandle] = None

    # ── Notifications ─────────────────────────────────────────────────────

    def notify(self, message: str) -> None:
        self.notices.append(message)
        if self.on_notice is not None:
            self.on_notice(message)

    def show_toast(self) -> None:
        self._cancel_toast_timer()
        self.toast_visible = True
        loop = asyncio.get_running_loop()
        self._toast_handle = loop.call_later(self.toast_duration, self.dismiss_toast)

    def dismiss_toast(self) -> None:
        self._cancel_toast_timer()
        self.toast_visible = False

    def _cancel_toast_timer(self) -> None:
        if self._toast_handle is not None:
            self._toast_handle.cancel()
            self._toast_handle = None

    # ── Actions ───────────────────────────────────────────────────────────

    async def load_history(self) -> None:
        """Fetch history once. Failures are logged and leave history empty."""
        try:
            items = await self.client.list_recent()
            self.history = [HistoryEntry.from_api(item) for item in items]
        except (ApiClientError, KeyError, TypeError, ValueError) as e:
            logger.error("Failed to fetch history: %s", e)
            self.history = []

    async def submit(self) -> Optional[HistoryEntry]:
        """
        Submit the form.

        Returns:
            The new history entry, or None when the guard or the API call
            failed (a notice has been pushed in both cases).
        """
        if not self.form.is_submittable():
            self.notify(REQUIRED_FIELDS_NOTICE)
            return None

        payload = self.form.build_payload()
        try:
            created = await self.client.create(payload)
            entry = HistoryEntry.from_api(created)
        except (ApiClientError, KeyError, TypeError, ValueError) as e:
            logger.error("Error submitting tip calculation: %s", e)
            self.notify(SUBMIT_FAILED_NOTICE)
            return None

        self.history.insert(0, entry)
        self.show_toast()
        self.form.reset()
        return entry

    # ── View ──────────────────────────────────────────────────────────────

    def render(self) -> str:
        """Plain-text view of the calculator screen."""
        form = self.form
        presets = " ".join(
            f"[{p}%]" if p == form.selected_preset else f" {p}% " for p in PRESET_PERCENTAGES
        )
        mode_label = "Percentage" if form.mode is TipMode.PERCENTAGE else "Amount"
        lines = [
            "TipMate",
            f"Customer Name: {form.customer_name}",
            f"Mobile Number: {form.mobile_number}",
            f"Bill Amount:   {form.bill_amount}",
            f"Tip Mode:      {mode_label}",
        ]
        if form.mode is TipMode.PERCENTAGE:
            lines.append(f"Presets:       {presets}")
            lines.append(f"Tip %:         {form.tip_percentage}")
        else:
            lines.append(f"Tip Amount:    {form.tip_amount}")
        lines.append("")
        lines.extend(form.summary().lines())
        lines.append("")
        lines.append("Recent Calculations")
        if not self.history:
            lines.append("  No calculations yet")
        for entry in self.history:
            lines.extend(entry.lines())
        if self.toast_visible:
            lines.append("")
            lines.append(TOAST_MESSAGE)
        return "\n".join(lines)
