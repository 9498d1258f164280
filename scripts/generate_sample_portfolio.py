#!/usr/bin/env python3
"""Generate a sample financing portfolio into a JSON store.

Fills the store with generated financings, pays the next installment of each
one, applies an extra amortization to the first, and prints a summary.
"""

import argparse
import logging
from decimal import Decimal
from pathlib import Path

from financing_core.clock import SystemClock
from financing_core.config import FinancingConfig
from financing_core.generators import FinancingGenerator
from financing_core.logging import configure_from
from financing_core.persistence import JsonFileFinancingStore
from financing_core.store import FinancingLedger
from financing_core.transactions import InMemoryTransactionService

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--output", type=Path, default=Path("local") / "financings.json")
    parser.add_argument("--count", type=int, default=5, help="Number of financings")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--extra", type=Decimal, default=Decimal("5000"), help="Extra amortization amount")
    parser.add_argument("--log-level", default=None, help="Overrides LOG_LEVEL")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    config = FinancingConfig.from_env()
    if args.log_level:
        config.log_level = args.log_level
    configure_from(config)

    clock = SystemClock()
    ledger = FinancingLedger(JsonFileFinancingStore(args.output, pretty=True), clock=clock)
    transactions = InMemoryTransactionService(seed=args.seed)
    generator = FinancingGenerator(seed=args.seed)

    for payload in generator.generate_batch(args.count, reference_date=clock.today()):
        financing = ledger.add_financing(payload)
        upcoming = ledger.next_installments(financing.financing_id, count=1)
        if upcoming:
            ledger.settle_installment(financing.financing_id, upcoming[0].number, transactions)

    financings = ledger.list_financings()
    if financings:
        target = financings[0]
        comparison = ledger.compare_scenarios(target.financing_id, args.extra)
        if comparison is not None:
            print(f"\nScenarios for {target.name} (extra {args.extra}):")
            print(f"  current:        {comparison.current.term} months, interest {comparison.current.total_interest}")
            for label, result in (("reduce_term", comparison.reduce_term), ("reduce_payment", comparison.reduce_payment)):
                print(
                    f"  {label:<15} {result.new_term} months, "
                    f"saves {result.savings.interest} interest / {result.savings.months} months"
                )
            ledger.apply_extra_amortization(target.financing_id, args.extra, "reduce_term", transactions)
            logger.info("Extra amortization applied to %s", target.financing_id)

    print("\n" + "=" * 60)
    print(f"Portfolio written to {args.output}")
    print("=" * 60)
    for financing in ledger.list_financings():
        summary = ledger.get_summary(financing.financing_id)
        print(
            f"  {financing.name[:40]:<40} {financing.system.value:<5} "
            f"{summary.paid_count:>3}/{financing.term_months:<3} paid  "
            f"balance {summary.remaining_balance:>12}"
        )
    print(f"\n  Overdue installments: {ledger.overdue_count()}")
    print(f"  Total remaining balance: {ledger.total_remaining_balance()}")
    print(f"  Expenses recorded: {len(transactions.expenses)}")


if __name__ == "__main__":
    main()
