"""Sample financing payload generator."""

from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Iterator

from financing_core.generators.base import BaseGenerator
from financing_core.models.enums import AmortizationSystem, LoanType


class FinancingGenerator(BaseGenerator):
    """Generate realistic ``add_financing`` payloads."""

    # Annual nominal rates in percent by loan type
    ANNUAL_RATES = {
        LoanType.HOUSE: (8.0, 13.0),
        LoanType.VEHICLE: (14.0, 30.0),
        LoanType.OTHER: (18.0, 60.0),
    }

    TERMS = {
        LoanType.HOUSE: [120, 180, 240, 300, 360, 420],
        LoanType.VEHICLE: [12, 24, 36, 48, 60],
        LoanType.OTHER: [6, 12, 18, 24, 36],
    }

    # Principal in thousands
    PRINCIPALS = {
        LoanType.HOUSE: (100, 1500),
        LoanType.VEHICLE: (20, 150),
        LoanType.OTHER: (2, 80),
    }

    NAME_PREFIXES = {
        LoanType.HOUSE: "Financiamento Imobiliário",
        LoanType.VEHICLE: "Financiamento Veículo",
        LoanType.OTHER: "Empréstimo",
    }

    def generate(
        self,
        loan_type: LoanType | None = None,
        reference_date: date | None = None,
    ) -> dict[str, Any]:
        """Generate one financing payload.

        Parameters
        ----------
        loan_type : LoanType | None
            Loan type; random when omitted.
        reference_date : date | None
            Start dates are drawn from the three years before this date
            (default: today).

        Returns
        -------
        dict[str, Any]
            Payload accepted by ``FinancingLedger.add_financing``.
        """
        loan_type = loan_type or self.random.choice(list(LoanType))
        reference_date = reference_date or date.today()

        low, high = self.ANNUAL_RATES[loan_type]
        annual_rate = Decimal(str(round(self.random.uniform(low, high), 2)))
        term_months = self.random.choice(self.TERMS[loan_type])
        principal = Decimal(self.random.randint(*self.PRINCIPALS[loan_type]) * 1000)

        if loan_type == LoanType.HOUSE:
            system = self.random.choice(list(AmortizationSystem))
        else:
            system = AmortizationSystem.PRICE

        start_date = reference_date - timedelta(days=self.random.randint(0, 365 * 3))
        elapsed = (reference_date.year - start_date.year) * 12 + reference_date.month - start_date.month
        paid_installments = self.random.randint(0, max(0, min(elapsed - 1, term_months)))

        return {
            "name": f"{self.NAME_PREFIXES[loan_type]} - {self.fake.company()}",
            "loan_type": loan_type.value,
            "principal": principal,
            "annual_rate": annual_rate,
            "term_months": term_months,
            "system": system.value,
            "start_date": start_date.isoformat(),
            "cet_rate": annual_rate + Decimal(str(round(self.random.uniform(0.5, 3.0), 2))),
            "paid_installments": paid_installments,
            "anticipated_installments": 0,
        }

    def generate_batch(self, count: int, reference_date: date | None = None) -> Iterator[dict[str, Any]]:
        """Yield ``count`` payloads."""
        for _ in range(count):
            yield self.generate(reference_date=reference_date)
