"""
TipMate UI — Calculator Form Tests
====================================

What we test:
    ✅ Percentage mode derives the tip from bill and percentage
    ✅ Presets switch mode, fill the percentage and mark the selection
    ✅ Amount mode keeps the typed tip regardless of percentage
    ✅ Mode toggle keeps entered values
    ✅ Summary rendering with two decimals
    ✅ Submit guard and payload (percentage recomputed from tip / bill)
    ✅ Number/date formatting helpers
"""

import pytest

from tipmate.ui.calculator import (
    PRESET_PERCENTAGES,
    CalculatorForm,
    TipMode,
    derive_tip_from_amount,
    derive_tip_from_percentage,
)
from tipmate.ui.formatting import (
    format_currency,
    format_date,
    format_money,
    parse_number,
    round_money,
    round_percent,
)


def filled_form(**overrides):
    form = CalculatorForm()
    form.set_customer_name(overrides.get("name", "Asha Rao"))
    form.set_mobile_number(overrides.get("mobile", "9876543210"))
    form.set_bill_amount(overrides.get("bill", "200"))
    return form


class TestPercentageMode:
    """Tip follows bill × percentage while in percentage mode."""

    def test_new_form_starts_at_zero_tip(self):
        form = CalculatorForm()
        assert form.mode is TipMode.PERCENTAGE
        assert form.tip_amount == "0.00"

    def test_tip_recomputed_on_bill_and_percentage_change(self):
        form = CalculatorForm()
        form.set_bill_amount("150")
        form.set_tip_percentage("10")
        assert form.tip_amount == "15.00"

        form.set_bill_amount("80.50")
        assert form.tip_amount == "8.05"

    def test_fractional_percentage(self):
        form = CalculatorForm()
        form.set_bill_amount("250")
        form.set_tip_percentage("12.5")
        assert form.tip_amount == "31.25"

    def test_unparseable_input_counts_as_zero(self):
        form = CalculatorForm()
        form.set_bill_amount("abc")
        form.set_tip_percentage("15")
        assert form.tip_amount == "0.00"

    def test_typed_tip_ignored_in_percentage_mode(self):
        form = filled_form()
        form.set_tip_percentage("10")
        form.set_tip_amount("99")
        assert form.tip_amount == "20.00"


class TestPresets:
    """Preset buttons 10/15/18/20/25."""

    def test_preset_values(self):
        assert PRESET_PERCENTAGES == (10, 15, 18, 20, 25)

    def test_preset_sets_percentage_and_tip(self):
        form = filled_form(bill="200")

        form.select_preset(18)

        assert form.tip_percentage == "18"
        assert form.selected_preset == 18
        assert form.tip_amount == "36.00"
        assert form.summary().total_display == "236.00"

    def test_preset_switches_back_to_percentage_mode(self):
        form = filled_form()
        form.set_mode(TipMode.AMOUNT)
        form.set_tip_amount("5")

        form.select_preset(25)

        assert form.mode is TipMode.PERCENTAGE
        assert form.tip_amount == "50.00"

    def test_manual_percentage_edit_clears_preset(self):
        form = filled_form()
        form.select_preset(15)

        form.set_tip_percentage("12")

        assert form.selected_preset is None
        assert form.tip_amount == "24.00"

    def test_unknown_preset_rejected(self):
        form = CalculatorForm()
        with pytest.raises(ValueError, match="Unknown preset"):
            form.select_preset(17)


class TestAmountMode:
    """The typed tip is authoritative in amount mode."""

    def test_typed_tip_kept_regardless_of_percentage(self):
        form = filled_form(bill="200")
        form.set_tip_percentage("18")
        form.set_mode(TipMode.AMOUNT)

        form.set_tip_amount("50")
        form.set_tip_percentage("10")
        form.set_bill_amount("200")

        assert form.summary().tip_display == "50.00"
        assert form.summary().total_display == "250.00"

    def test_toggle_keeps_entered_values(self):
        form = filled_form(bill="120")
        form.set_tip_percentage("15")

        form.toggle_mode()

        assert form.mode is TipMode.AMOUNT
        assert form.bill_amount == "120"
        assert form.tip_percentage == "15"
        assert form.tip_amount == "18.00"

    def test_switching_back_rederives_from_percentage(self):
        form = filled_form(bill="100")
        form.set_tip_percentage("20")
        form.set_mode("amount")
        form.set_tip_amount("7")

        form.set_mode(TipMode.PERCENTAGE)

        assert form.tip_amount == "20.00"

    def test_derivation_functions(self):
        assert derive_tip_from_percentage("200", "18", "") == "36.00"
        assert derive_tip_from_amount("200", "18", "50") == "50"


class TestSubmitPayload:
    """Guard and request body built on submit."""

    @pytest.mark.parametrize(
        "overrides, missing",
        [
            ({"name": ""}, ["customerName"]),
            ({"mobile": "  "}, ["mobileNumber"]),
            ({"bill": "0"}, ["billAmount"]),
            ({"bill": ""}, ["billAmount"]),
            ({"bill": "-4"}, ["billAmount"]),
        ],
    )
    def test_guard(self, overrides, missing):
        form = filled_form(**overrides)
        assert form.missing_fields() == missing
        assert not form.is_submittable()
        with pytest.raises(ValueError):
            form.build_payload()

    def test_payload_from_preset(self):
        form = filled_form(bill="200")
        form.select_preset(18)

        assert form.build_payload() == {
            "customerName": "Asha Rao",
            "mobileNumber": "9876543210",
            "billAmount": 200.0,
            "tipAmount": 36.0,
            "totalAmount": 236.0,
            "tipPercentage": 18,
        }

    def test_percentage_recomputed_in_amount_mode(self):
        form = filled_form(bill="200")
        form.set_tip_percentage("10")
        form.set_mode(TipMode.AMOUNT)
        form.set_tip_amount("50")

        payload = form.build_payload()

        assert payload["tipAmount"] == 50.0
        assert payload["totalAmount"] == 250.0
        assert payload["tipPercentage"] == 25

    def test_amounts_rounded_to_cents(self):
        form = filled_form(bill="33.333")
        form.set_mode(TipMode.AMOUNT)
        form.set_tip_amount("4.444")

        payload = form.build_payload()

        assert payload["billAmount"] == 33.33
        assert payload["tipAmount"] == 4.44
        assert payload["totalAmount"] == 37.78
        assert payload["tipPercentage"] == 13

    def test_reset_clears_fields_and_keeps_mode(self):
        form = filled_form()
        form.select_preset(20)
        form.set_mode(TipMode.AMOUNT)

        form.reset()

        assert form.customer_name == ""
        assert form.mobile_number == ""
        assert form.bill_amount == ""
        assert form.tip_percentage == ""
        assert form.tip_amount == ""
        assert form.selected_preset is None
        assert form.mode is TipMode.AMOUNT


class TestFormatting:
    """Rounding and display helpers."""

    def test_round_money_half_up(self):
        assert round_money(2.675) == 2.68
        assert round_money(0.125) == 0.13

    def test_round_percent_half_up(self):
        assert round_percent(12.5) == 13
        assert round_percent(17.49) == 17

    def test_format_money_two_decimals(self):
        assert format_money(36) == "36.00"
        assert format_money(0.1 + 0.2) == "0.30"
        assert format_currency(236) == "₹236.00"

    @pytest.mark.parametrize("text, expected", [
        ("12.5", 12.5), ("", 0.0), (None, 0.0), ("abc", 0.0), ("nan", 0.0), (" 7 ", 7.0),
    ])
    def test_parse_number(self, text, expected):
        assert parse_number(text) == expected

    def test_format_date(self):
        assert format_date("2025-03-05T10:00:00Z") == "March 5, 2025"
        assert format_date("2024-12-31T23:59:59.123456+00:00") == "December 31, 2024"

    @pytest.mark.parametrize("bill", ["1e27", "1e28", "99999999999999999999999999999"])
    def test_huge_bill_does_not_raise(self, bill):
        form = CalculatorForm()
        form.set_tip_percentage("10")

        form.set_bill_amount(bill)

        expected = format_money(parse_number(bill) * 0.1)
        assert form.tip_amount == expected
        assert form.tip_amount.endswith(".00")
        assert form.summary().total_display.endswith(".00")

    def test_round_money_large_values(self):
        assert round_money(1e30) == 1e30
        assert format_money(1e27) == "1000000000000000000000000000.00"

    def test_overflowed_values_count_as_zero(self):
        assert round_money(float("inf")) == 0.0
        assert round_percent(float("nan")) == 0
        assert format_money(float("-inf")) == "0.00"
