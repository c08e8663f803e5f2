"""JSON API for the debt calculator.

Each endpoint accepts a JSON body with already-parsed numbers, runs one of
the ``debt_calc`` engines and returns the result with Decimals converted to
floats. Invalid input yields HTTP 400 with an ``error`` message.
"""

import logging
import os

from flask import Flask, jsonify, request

from debt_calc.data_models import Debt, LoanParams, TaxParams, TransferParams
from debt_calc.engine import compare_strategies, simulate_payoff, summarize_debts
from debt_calc.errors import InvalidInput
from debt_calc.restructure import simulate_restructure, solve_required_transfer_payment
from debt_calc.tax import available_budget, estimate_take_home
from debt_calc.utils import to_decimal, to_jsonable


def _log_level(name: str) -> str:
    """Return ``name`` as a logging level name, or WARNING when it is not one."""
    name = name.upper()
    if isinstance(logging.getLevelName(name), int):
        return name
    return "WARNING"


app = Flask(__name__)
app.config["MAX_CHART_POINTS"] = int(os.environ.get("DEBT_CALC_MAX_CHART_POINTS", "600"))
app.config["LOG_LEVEL"] = _log_level(os.environ.get("DEBT_CALC_LOG_LEVEL", "WARNING"))

logging.getLogger("debt_calc").setLevel(app.config["LOG_LEVEL"])
logger = logging.getLogger(__name__)


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidInput("Request body must be a JSON object")
    return payload


def _require(payload: dict, key: str):
    if key not in payload:
        raise InvalidInput(f"Missing field: {key}")
    return payload[key]


def _int_field(payload: dict, key: str) -> int:
    value = to_decimal(_require(payload, key))
    if value != value.to_integral_value():
        raise InvalidInput(f"Field {key} must be a whole number")
    return int(value)


def _debts_from_payload(payload: dict) -> list:
    entries = _require(payload, "debts")
    if not isinstance(entries, list):
        raise InvalidInput("Field debts must be a list")
    debts = []
    for index, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            raise InvalidInput("Each debt must be an object")
        debts.append(
            Debt(
                id=str(entry.get("id", index)),
                name=str(entry.get("name", f"Debt {index}")),
                balance=to_decimal(_require(entry, "balance")),
                apr=to_decimal(_require(entry, "apr")),
                min_payment=to_decimal(_require(entry, "min_payment")),
            )
        )
    return debts


def _transfer_params(payload: dict) -> TransferParams:
    return TransferParams(
        total_debt=to_decimal(_require(payload, "total_debt")),
        current_apr=to_decimal(_require(payload, "current_apr")),
        monthly_payment=to_decimal(payload.get("monthly_payment", 0)),
        transfer_amount=to_decimal(_require(payload, "transfer_amount")),
        transfer_fee_percent=to_decimal(payload.get("transfer_fee_percent", 0)),
        intro_duration_months=_int_field(payload, "intro_duration_months"),
        intro_apr=to_decimal(payload.get("intro_apr", 0)),
        post_intro_apr=to_decimal(_require(payload, "post_intro_apr")),
    )


def _loan_params(payload: dict) -> LoanParams:
    return LoanParams(
        total_debt=to_decimal(_require(payload, "total_debt")),
        current_apr=to_decimal(payload.get("current_apr", 0)),
        monthly_payment=to_decimal(payload.get("monthly_payment", 0)),
        loan_rate=to_decimal(_require(payload, "loan_rate")),
        loan_term_months=_int_field(payload, "loan_term_months"),
        origination_fee_percent=to_decimal(payload.get("origination_fee_percent", 0)),
    )


def _truncate(rows: list) -> list:
    return rows[: app.config["MAX_CHART_POINTS"] + 1]


@app.errorhandler(InvalidInput)
def handle_invalid_input(exc):
    logger.info("Rejected request to %s: %s", request.path, exc)
    return jsonify({"error": str(exc)}), 400


@app.get("/health")
def health():
    return jsonify({"status": "ok"})


@app.post("/api/payoff")
def payoff():
    payload = _json_body()
    debts = _debts_from_payload(payload)
    budget = to_decimal(_require(payload, "monthly_budget"))
    result = simulate_payoff(debts, budget, payload.get("strategy", "avalanche"))
    body = to_jsonable(result)
    body["chart_data"] = _truncate(body["chart_data"])
    body["budget_shortfall"] = result.budget_shortfall
    body["summary"] = to_jsonable(summarize_debts(debts, budget))
    return jsonify(body)


@app.post("/api/compare")
def compare():
    payload = _json_body()
    comparison = compare_strategies(
        _debts_from_payload(payload),
        to_decimal(_require(payload, "monthly_budget")),
        payload.get("strategy", "avalanche"),
    )
    body = to_jsonable(comparison)
    for key in ("chosen", "alternative"):
        body[key]["chart_data"] = _truncate(body[key]["chart_data"])
    return jsonify(body)


@app.post("/api/restructure")
def restructure():
    payload = _json_body()
    strategy_type = payload.get("strategy_type", "transfer")
    if strategy_type == "transfer":
        params = _transfer_params(payload)
    elif strategy_type == "loan":
        params = _loan_params(payload)
    else:
        raise InvalidInput(f"Unknown strategy_type: {strategy_type}")
    body = to_jsonable(simulate_restructure(params))
    body["monthly_data"] = _truncate(body["monthly_data"])
    return jsonify(body)


@app.post("/api/transfer/required-payment")
def required_payment():
    payment = solve_required_transfer_payment(_transfer_params(_json_body()))
    return jsonify({"required_payment": float(payment)})


@app.post("/api/take-home")
def take_home():
    payload = _json_body()
    params = TaxParams(
        annual_salary=to_decimal(_require(payload, "annual_salary")),
        filing_status=payload.get("filing_status", "single"),
        contribution_401k_percent=to_decimal(payload.get("contribution_401k_percent", 0)),
        state=payload.get("state", "Other"),
        custom_state_tax_rate=to_decimal(payload.get("custom_state_tax_rate", 0)),
        is_portland_metro=bool(payload.get("is_portland_metro", False)),
        is_multnomah_county=bool(payload.get("is_multnomah_county", False)),
    )
    result = estimate_take_home(params)
    body = to_jsonable(result)
    if "monthly_expenses" in payload:
        body["available_budget"] = float(
            available_budget(result, to_decimal(payload["monthly_expenses"]))
        )
    return jsonify(body)


if __name__ == "__main__":
    print("Starting debt calculator API...")
    app.run(debug=os.environ.get("FLASK_DEBUG") == "1")
