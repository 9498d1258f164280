"""Lossless conversion between financing models and JSON-ready dicts."""

from dataclasses import fields
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from financing_core.exceptions import PersistenceError
from financing_core.models.enums import AmortizationSystem, InstallmentStatus, LoanType
from financing_core.models.financing import Financing, Installment


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def installment_to_dict(installment: Installment) -> dict[str, Any]:
    return {f.name: serialize_value(getattr(installment, f.name)) for f in fields(installment)}


def financing_to_dict(financing: Financing) -> dict[str, Any]:
    """Convert a financing (installments included) to a JSON-ready dict."""
    data = {
        f.name: serialize_value(getattr(financing, f.name))
        for f in fields(financing)
        if f.name != "installments"
    }
    data["installments"] = [installment_to_dict(i) for i in financing.installments]
    return data


def _optional(value: Any, parse: Any) -> Any:
    return None if value is None else parse(value)


def installment_from_dict(data: dict[str, Any]) -> Installment:
    return Installment(
        number=int(data["number"]),
        due_date=date.fromisoformat(data["due_date"]),
        principal_component=Decimal(data["principal_component"]),
        interest_component=Decimal(data["interest_component"]),
        payment=Decimal(data["payment"]),
        balance=Decimal(data["balance"]),
        status=InstallmentStatus(data["status"]),
        paid_date=_optional(data.get("paid_date"), date.fromisoformat),
        linked_transaction_id=data.get("linked_transaction_id"),
    )


def financing_from_dict(data: dict[str, Any]) -> Financing:
    """Rebuild a financing from :func:`financing_to_dict` output."""
    try:
        return Financing(
            financing_id=data["financing_id"],
            name=data["name"],
            loan_type=LoanType(data["loan_type"]),
            principal=Decimal(data["principal"]),
            annual_rate=Decimal(data["annual_rate"]),
            term_months=int(data["term_months"]),
            system=AmortizationSystem(data["system"]),
            start_date=date.fromisoformat(data["start_date"]),
            installments=[installment_from_dict(i) for i in data.get("installments", [])],
            cet_rate=_optional(data.get("cet_rate"), Decimal),
            paid_installments=int(data.get("paid_installments", 0)),
            anticipated_installments=int(data.get("anticipated_installments", 0)),
            created_at=_optional(data.get("created_at"), datetime.fromisoformat),
        )
    except (KeyError, TypeError, ValueError, ArithmeticError) as e:
        raise PersistenceError(f"Malformed financing record: {e}") from e


def dump_financings(financings: list[Financing]) -> list[dict[str, Any]]:
    return [financing_to_dict(f) for f in financings]


def load_financings(payload: list[dict[str, Any]]) -> list[Financing]:
    return [financing_from_dict(item) for item in payload]
