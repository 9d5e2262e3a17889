"""
TipMate UI — Calculator Component
===================================

Client side of TipMate: form state with live tip/total derivation
(calculator.py), the HTTP client for the API (client.py) and the controller
that loads history and submits calculations (controller.py).
"""

from tipmate.ui.calculator import PRESET_PERCENTAGES, CalculatorForm, TipMode
from tipmate.ui.client import TipCalculationsClient
from tipmate.ui.controller import CalculatorController, HistoryEntry

__all__ = [
    "PRESET_PERCENTAGES",
    "CalculatorForm",
    "TipMode",
    "TipCalculationsClient",
    "CalculatorController",
    "HistoryEntry",
]
