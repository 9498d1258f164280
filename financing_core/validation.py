"""Input validation for financing creation and updates.

Raw payloads (dicts coming from forms, files or API layers) are normalized
into typed values here. Every failure raises FinancingValidationError before
any schedule is generated.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from financing_core.exceptions import FinancingValidationError
from financing_core.models.enums import AmortizationSystem, LoanType

MAX_AMOUNT = Decimal("999999999.99")
MIN_YEAR = 1990
MAX_YEAR = 2100

# Fields whose change forces a full schedule regeneration
SCHEDULE_FIELDS = frozenset({"principal", "annual_rate", "term_months", "system", "start_date"})


@dataclass(frozen=True)
class FinancingInput:
    """Validated payload for ``FinancingLedger.add_financing``.

    Every field is normalized on construction, so an instance built directly
    is held to the same rules as one parsed from a raw mapping.
    """

    name: str
    loan_type: LoanType
    principal: Decimal
    annual_rate: Decimal
    term_months: int
    system: AmortizationSystem | str
    start_date: date
    cet_rate: Decimal | None = None
    paid_installments: int = 0
    anticipated_installments: int = 0

    def __post_init__(self) -> None:
        normalized = {
            "name": validate_name(self.name),
            "loan_type": validate_loan_type(self.loan_type),
            "principal": validate_amount(self.principal),
            "annual_rate": validate_rate(self.annual_rate),
            "term_months": validate_term(self.term_months),
            "system": _system(self.system),
            "start_date": validate_date(self.start_date),
            "cet_rate": validate_optional_rate(self.cet_rate),
            "paid_installments": validate_count(self.paid_installments, "paid_installments"),
            "anticipated_installments": validate_count(
                self.anticipated_installments, "anticipated_installments"
            ),
        }
        for name, value in normalized.items():
            object.__setattr__(self, name, value)


def _decimal(value: Any, field_name: str) -> Decimal:
    if value is None or value == "":
        raise FinancingValidationError(f"{field_name} is required")
    if isinstance(value, bool):
        raise FinancingValidationError(f"{field_name} must be a number")
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise FinancingValidationError(f"{field_name} must be a number, got {value!r}") from None
    if not number.is_finite():
        raise FinancingValidationError(f"{field_name} must be a finite number")
    return number


def validate_name(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise FinancingValidationError("name is required")
    return value.strip()


def validate_amount(value: Any, field_name: str = "principal") -> Decimal:
    """Positive monetary amount within the supported range."""
    amount = _decimal(value, field_name)
    if amount <= 0:
        raise FinancingValidationError(f"{field_name} must be greater than zero")
    if amount > MAX_AMOUNT:
        raise FinancingValidationError(f"{field_name} exceeds the maximum of {MAX_AMOUNT}")
    return amount


def validate_rate(value: Any, field_name: str = "annual_rate") -> Decimal:
    rate = _decimal(value, field_name)
    if rate <= 0:
        raise FinancingValidationError(f"{field_name} must be greater than zero")
    return rate


def validate_optional_rate(value: Any, field_name: str = "cet_rate") -> Decimal | None:
    if value is None or value == "":
        return None
    rate = _decimal(value, field_name)
    if rate < 0:
        raise FinancingValidationError(f"{field_name} must not be negative")
    return rate


def _integer(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise FinancingValidationError(f"{field_name} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    if isinstance(value, (float, Decimal)):
        try:
            if value == int(value):
                return int(value)
        except (ValueError, OverflowError):
            pass
    raise FinancingValidationError(f"{field_name} must be an integer, got {value!r}")


def validate_term(value: Any) -> int:
    if value is None or value == "":
        raise FinancingValidationError("term_months is required")
    term = _integer(value, "term_months")
    if term <= 0:
        raise FinancingValidationError("term_months must be a positive integer")
    return term


def validate_count(value: Any, field_name: str) -> int:
    if value is None or value == "":
        return 0
    count = _integer(value, field_name)
    if count < 0:
        raise FinancingValidationError(f"{field_name} must not be negative")
    return count


def validate_date(value: Any, field_name: str = "start_date") -> date:
    """Accept a ``date`` or an ISO ``YYYY-MM-DD`` string within 1990-2100."""
    if isinstance(value, datetime):
        parsed = value.date()
    elif isinstance(value, date):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = date.fromisoformat(value.strip())
        except ValueError:
            raise FinancingValidationError(f"{field_name} must be a valid YYYY-MM-DD date, got {value!r}") from None
    else:
        raise FinancingValidationError(f"{field_name} is required")

    if not MIN_YEAR <= parsed.year <= MAX_YEAR:
        raise FinancingValidationError(f"{field_name} year must be between {MIN_YEAR} and {MAX_YEAR}")
    return parsed


def validate_loan_type(value: Any) -> LoanType:
    if value is None or value == "":
        return LoanType.OTHER
    try:
        return LoanType(value)
    except ValueError:
        raise FinancingValidationError(f"unrecognized loan_type: {value!r}") from None


def _system(value: Any) -> AmortizationSystem | str:
    # Unknown systems are a domain error raised by the schedule calculator.
    if value is None or value == "":
        raise FinancingValidationError("system is required")
    return value


def parse_financing_input(data: Mapping[str, Any]) -> FinancingInput:
    """Validate a raw creation payload.

    Parameters
    ----------
    data : Mapping[str, Any]
        Keys: name, loan_type, principal, annual_rate, term_months, system,
        start_date, and optionally cet_rate, paid_installments,
        anticipated_installments.

    Returns
    -------
    FinancingInput
        Normalized input.
    """
    return FinancingInput(
        name=data.get("name"),
        loan_type=data.get("loan_type"),
        principal=data.get("principal"),
        annual_rate=data.get("annual_rate"),
        term_months=data.get("term_months"),
        system=data.get("system"),
        start_date=data.get("start_date"),
        cet_rate=data.get("cet_rate"),
        paid_installments=data.get("paid_installments"),
        anticipated_installments=data.get("anticipated_installments"),
    )


_VALIDATORS = {
    "name": validate_name,
    "loan_type": validate_loan_type,
    "cet_rate": validate_optional_rate,
    "principal": validate_amount,
    "annual_rate": validate_rate,
    "term_months": validate_term,
    "system": _system,
    "start_date": validate_date,
}


def parse_updates(updates: Mapping[str, Any]) -> dict[str, Any]:
    """Validate a partial update; unknown or immutable fields are rejected."""
    unknown = set(updates) - set(_VALIDATORS)
    if unknown:
        raise FinancingValidationError(f"fields cannot be updated: {', '.join(sorted(unknown))}")
    return {key: _VALIDATORS[key](value) for key, value in updates.items()}
