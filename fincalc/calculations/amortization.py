"""
Loan Amortization Calculations

Generates amortization schedules for the four repayment structures offered
by the AMRT calculator and sums schedule rows over a period range.
Rates are percentages per period (e.g., 1 for 1% per period).
"""

from dataclasses import dataclass
from typing import List, Optional

from fincalc.calculations.tvm import BEGIN, END

SHPITZER = "shpitzer"
REGULAR = "regular"
BALLOON = "balloon"
GRACE = "grace"

SCHEDULE_LABELS = {
    SHPITZER: "Shpitzer (Equal Principal)",
    REGULAR: "Regular (Equal Payments)",
    BALLOON: "Balloon",
    GRACE: "Grace Period",
}


@dataclass(frozen=True)
class AmortizationRow:
    """One schedule period. Field order matches the spreadsheet export."""

    period: int
    principal_payment: float
    interest_payment: float
    total_payment: float
    remaining_balance: float


@dataclass(frozen=True)
class ScheduleSummary:
    """Totals over a range of schedule periods."""

    total_principal: float
    total_interest: float
    total_payment: float


def _row(
    period: int, principal_payment: float, interest_payment: float, balance: float
) -> AmortizationRow:
    return AmortizationRow(
        period=period,
        principal_payment=principal_payment,
        interest_payment=interest_payment,
        total_payment=principal_payment + interest_payment,
        remaining_balance=max(0.0, balance),
    )


def calculate_level_payment(
    principal: float, rate: float, periods: int, timing: str = END
) -> float:
    """
    Calculate the level total payment of a regular (annuity) loan.

    Args:
        principal: Loan principal
        rate: Periodic rate as percentage
        periods: Number of payments
        timing: "begin" or "end"

    Returns:
        Payment per period
    """
    r = rate / 100

    if r == 0:
        return principal / periods

    if timing == BEGIN:
        return (principal * r) / ((1 - (1 + r) ** -periods) * (1 + r))

    return (principal * r) / (1 - (1 + r) ** -periods)


def generate_shpitzer_schedule(
    principal: float, rate: float, periods: int, timing: str = END
) -> List[AmortizationRow]:
    """
    Generate an equal-principal schedule.

    Every period repays principal / periods. Interest accrues on the balance
    after that period's principal payment for "begin" timing and on the
    opening balance for "end" timing.
    """
    schedule = []
    principal_slice = principal / periods
    r = rate / 100
    balance = principal

    for period in range(1, periods + 1):
        principal_pmt = min(principal_slice, balance)

        if timing == BEGIN:
            interest = (balance - principal_pmt) * r
        else:
            interest = balance * r

        balance -= principal_pmt
        schedule.append(_row(period, principal_pmt, interest, balance))

    return schedule


def generate_regular_schedule(
    principal: float, rate: float, periods: int, timing: str = END
) -> List[AmortizationRow]:
    """
    Generate a level-payment (annuity) schedule.

    Args:
        principal: Loan principal
        rate: Periodic rate as percentage
        periods: Number of payments
        timing: "begin" or "end"

    Returns:
        List of amortization rows
    """
    schedule = []
    r = rate / 100
    payment = calculate_level_payment(principal, rate, periods, timing)
    balance = principal

    for period in range(1, periods + 1):
        if timing == BEGIN:
            principal_pmt = min(payment / (1 + r), balance)
            interest = (balance - principal_pmt) * r
        else:
            interest = balance * r
            principal_pmt = min(payment - interest, balance)

        balance -= principal_pmt
        schedule.append(_row(period, principal_pmt, interest, balance))

    return schedule


def generate_balloon_schedule(
    principal: float, rate: float, periods: int, timing: str = END
) -> List[AmortizationRow]:
    """
    Generate an interest-only schedule with a final balloon repayment.

    Interest is principal * rate every period. With "begin" timing interest
    is paid in advance, so the final period carries the principal only.
    """
    schedule = []
    r = rate / 100

    for period in range(1, periods + 1):
        if period < periods:
            schedule.append(_row(period, 0.0, principal * r, principal))
        else:
            interest = 0.0 if timing == BEGIN else principal * r
            schedule.append(_row(period, principal, interest, 0.0))

    return schedule


def generate_grace_schedule(
    principal: float,
    rate: float,
    periods: int,
    grace_periods: int,
    timing: str = END,
) -> List[AmortizationRow]:
    """
    Generate a grace-period schedule.

    Every period but the last is interest-only; the last repays the full
    principal plus that period's interest. grace_periods is accepted for
    interface compatibility but does not change the schedule.
    """
    # TODO: confirm with product whether grace_periods should end the
    # interest-only window before the final period.
    schedule = []
    r = rate / 100

    for period in range(1, periods + 1):
        if period < periods:
            schedule.append(_row(period, 0.0, principal * r, principal))
        else:
            schedule.append(_row(period, principal, principal * r, 0.0))

    return schedule


def generate_schedule(
    principal: float,
    rate: float,
    periods: int,
    schedule_type: str,
    timing: str = END,
    grace_periods: Optional[int] = None,
) -> List[AmortizationRow]:
    """
    Generate a schedule of the given type.

    Unknown schedule types produce an empty schedule.
    """
    if schedule_type == SHPITZER:
        return generate_shpitzer_schedule(principal, rate, periods, timing)
    if schedule_type == REGULAR:
        return generate_regular_schedule(principal, rate, periods, timing)
    if schedule_type == BALLOON:
        return generate_balloon_schedule(principal, rate, periods, timing)
    if schedule_type == GRACE:
        return generate_grace_schedule(
            principal, rate, periods, grace_periods or periods, timing
        )
    return []


def calculate_summary(
    schedule: List[AmortizationRow], from_period: int, to_period: int
) -> ScheduleSummary:
    """Sum principal, interest and total payments for periods in [from, to]."""
    total_principal = 0.0
    total_interest = 0.0
    total_payment = 0.0

    for row in schedule:
        if from_period <= row.period <= to_period:
            total_principal += row.principal_payment
            total_interest += row.interest_payment
            total_payment += row.total_payment

    return ScheduleSummary(
        total_principal=total_principal,
        total_interest=total_interest,
        total_payment=total_payment,
    )
