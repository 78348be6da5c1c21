"""
Financial calculation API endpoints.

These endpoints accept already-evaluated numeric inputs and return
calculated results. Solver results that have no solution are returned as
null values rather than errors.
"""

import math
from dataclasses import asdict
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from fincalc.calculations import amortization, solver, tvm
from fincalc.config import get_settings
from fincalc.services.history import CalculationHistory, get_history_service

router = APIRouter()

Timing = Literal["begin", "end"]
RateType = Literal["fixed", "variable"]


class CalculatorInput(BaseModel):
    """Base for calculator inputs; rejects NaN and infinity."""

    model_config = ConfigDict(allow_inf_nan=False)


# =============================================================================
# CMPD (compound interest)
# =============================================================================


class CMPDInput(CalculatorInput):
    """Input for a compound interest calculation."""

    solve_for: Literal["fv", "pv", "rate", "periods", "pmt"] = "fv"
    pv: Optional[float] = None
    fv: Optional[float] = None
    rate: Optional[float] = Field(None, gt=-100)
    periods: Optional[float] = Field(None, gt=0)
    pmt: float = 0.0
    timing: Timing = "end"
    rate_type: RateType = "fixed"
    variable_rates: Optional[List[float]] = None


class SolveResponse(BaseModel):
    """Solver result; value is null when no solution was found."""

    value: Optional[float] = None
    solved: bool


class CMPDResponse(SolveResponse):
    """Response with the solved CMPD variable."""

    solve_for: str


def _require(inputs: BaseModel, *names: str) -> None:
    missing = [name for name in names if getattr(inputs, name) is None]
    if missing:
        raise ValueError(f"Missing required inputs: {', '.join(missing)}")


def solve_cmpd(inputs: CMPDInput) -> Optional[float]:
    """
    Solve the compound interest equation for inputs.solve_for.

    Raises:
        ValueError: If the inputs needed for the requested unknown are
            missing or inconsistent
    """
    if inputs.rate_type == "variable":
        if inputs.solve_for != "fv":
            raise ValueError("Variable rates only support solving for FV")
        _require(inputs, "pv", "periods")
        if not inputs.variable_rates:
            raise ValueError("Please enter at least one variable rate")
        if len(inputs.variable_rates) != inputs.periods:
            raise ValueError(
                f"Number of rates ({len(inputs.variable_rates)}) must equal "
                f"number of periods ({inputs.periods:g})"
            )
        return solver.solve_cmpd_fv_variable(
            inputs.pv, inputs.variable_rates, inputs.pmt, inputs.timing
        )

    if inputs.solve_for == "fv":
        _require(inputs, "pv", "rate", "periods")
        return solver.solve_cmpd_fv(
            inputs.pv, inputs.rate, inputs.periods, inputs.pmt, inputs.timing
        )
    if inputs.solve_for == "pv":
        _require(inputs, "fv", "rate", "periods")
        return solver.solve_cmpd_pv(
            inputs.fv, inputs.rate, inputs.periods, inputs.pmt, inputs.timing
        )
    if inputs.solve_for == "rate":
        _require(inputs, "pv", "fv", "periods")
        return solver.solve_cmpd_rate(
            inputs.pv, inputs.fv, inputs.periods, inputs.pmt, inputs.timing
        )
    if inputs.solve_for == "periods":
        _require(inputs, "pv", "fv", "rate")
        return solver.solve_cmpd_periods(
            inputs.pv, inputs.fv, inputs.rate, inputs.pmt, inputs.timing
        )

    _require(inputs, "pv", "fv", "rate", "periods")
    return tvm.calculate_pmt(
        inputs.pv, inputs.fv, inputs.rate, inputs.periods, inputs.timing
    )


def _format_cmpd_result(solve_for: str, value: float) -> str:
    if solve_for == "rate":
        return f"Rate = {value:.4f}%"
    if solve_for == "periods":
        return f"Periods = {value:.2f}"
    return f"{solve_for.upper()} = {value:.2f}"


@router.post("/cmpd", response_model=CMPDResponse)
async def calculate_cmpd(
    inputs: CMPDInput,
    history: CalculationHistory = Depends(get_history_service),
):
    """Solve for one unknown of the compound interest equation."""
    try:
        value = solve_cmpd(inputs)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    # Overflowed results have no usable value
    if value is not None and not math.isfinite(value):
        value = None

    if value is not None:
        description = f"CMPD: Solve for {inputs.solve_for.upper()}"
        if inputs.rate_type == "variable":
            description += " (Variable Rates)"
        history.record(
            "cmpd",
            description,
            _format_cmpd_result(inputs.solve_for, value),
            inputs.model_dump(exclude={"solve_for"}, exclude_none=True),
        )

    return CMPDResponse(
        solve_for=inputs.solve_for, value=value, solved=value is not None
    )


# =============================================================================
# CASH (discounted cash flow)
# =============================================================================


class CashInput(CalculatorInput):
    """Input for a cash flow analysis."""

    cash_flows: List[float] = Field(..., min_length=1)
    discount_rate: float = Field(0.0, gt=-100)
    rate_type: RateType = "fixed"
    variable_rates: Optional[List[float]] = None


class CashResponse(BaseModel):
    """NPV, IRR (percent) and profitability index."""

    npv: float
    irr: Optional[float] = None
    pi: Optional[float] = None


class CashSolveInput(CashInput):
    """Input for solving the cash flow that hits a target NPV."""

    solver_period: int = Field(..., ge=0)
    target_npv: float


def _check_cash_inputs(inputs: CashInput) -> None:
    max_cash_flows = get_settings().max_cash_flows
    if len(inputs.cash_flows) > max_cash_flows:
        raise ValueError(f"At most {max_cash_flows} cash flows are supported")

    if inputs.rate_type == "variable":
        rates = inputs.variable_rates or []
        if not rates:
            raise ValueError("Please enter at least one discount rate")
        if len(rates) != len(inputs.cash_flows) - 1:
            raise ValueError(
                f"Number of discount rates ({len(rates)}) must equal "
                f"number of periods ({len(inputs.cash_flows) - 1})"
            )
        if any(rate <= -100 for rate in rates):
            raise ValueError("Discount rates must be greater than -100%")


def analyze_cash_flows(inputs: CashInput) -> CashResponse:
    """Compute NPV, IRR and (for fixed rates) PI of a cash flow series."""
    _check_cash_inputs(inputs)

    pi = None
    if inputs.rate_type == "variable":
        npv = tvm.calculate_npv_variable(inputs.cash_flows, inputs.variable_rates)
    else:
        npv = tvm.calculate_npv(inputs.cash_flows, inputs.discount_rate)
        pi = tvm.calculate_pi(inputs.cash_flows, inputs.discount_rate)

    irr = tvm.calculate_irr(inputs.cash_flows)

    return CashResponse(npv=npv, irr=irr, pi=pi)


@router.post("/cash", response_model=CashResponse)
async def calculate_cash(
    inputs: CashInput,
    history: CalculationHistory = Depends(get_history_service),
):
    """Calculate NPV, IRR and PI for a cash flow series."""
    try:
        result = analyze_cash_flows(inputs)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    details = {
        "NPV": f"{result.npv:.2f}",
        "Cash Flows": ", ".join(f"{cf:g}" for cf in inputs.cash_flows),
    }
    if result.irr is not None:
        details["IRR"] = f"{result.irr:.4f}%"
    if result.pi is not None:
        details["PI"] = f"{result.pi:.4f}"
    if inputs.rate_type == "fixed":
        details["Discount Rate"] = f"{inputs.discount_rate:g}%"
    else:
        details["Discount Type"] = "Variable"

    history.record(
        "cash", "CASH: Cash Flow Analysis", f"NPV = {result.npv:.2f}", details
    )
    return result


@router.post("/cash/solve", response_model=SolveResponse)
async def solve_cash_flow(
    inputs: CashSolveInput,
    history: CalculationHistory = Depends(get_history_service),
):
    """Find the cash flow at solver_period that produces target_npv."""
    try:
        _check_cash_inputs(inputs)
        if inputs.solver_period >= len(inputs.cash_flows):
            raise ValueError("Invalid solver period")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    value = solver.solve_dcf_cash_flow(
        inputs.cash_flows,
        inputs.solver_period,
        inputs.target_npv,
        inputs.discount_rate,
        inputs.rate_type,
        inputs.variable_rates,
    )

    if value is not None:
        history.record(
            "cash",
            f"CASH: Solve for Cash Flow at Period {inputs.solver_period}",
            f"X = {value:.2f}",
            {
                "Target NPV": f"{inputs.target_npv:.2f}",
                "Solver Period": inputs.solver_period,
                "Discount Rate": (
                    f"{inputs.discount_rate:g}%"
                    if inputs.rate_type == "fixed"
                    else "Variable"
                ),
            },
        )

    return SolveResponse(value=value, solved=value is not None)


# =============================================================================
# AMRT (amortization)
# =============================================================================


class AmortizationInput(CalculatorInput):
    """Input for amortization schedule generation."""

    principal: float = Field(..., gt=0)
    rate: float = Field(..., ge=0)
    periods: int = Field(..., gt=0)
    timing: Timing = "end"
    schedule_type: Literal["shpitzer", "regular", "balloon", "grace"] = "shpitzer"
    grace_periods: Optional[int] = None


class AmortizationSummaryInput(AmortizationInput):
    """Input for summing a period range of a schedule."""

    from_period: int = 1
    to_period: Optional[int] = None


class AmortizationRowModel(BaseModel):
    period: int
    principal_payment: float
    interest_payment: float
    total_payment: float
    remaining_balance: float


class ScheduleSummaryModel(BaseModel):
    total_principal: float
    total_interest: float
    total_payment: float


class AmortizationResponse(BaseModel):
    """Response with the full schedule and its totals."""

    schedule: List[AmortizationRowModel]
    summary: ScheduleSummaryModel


def build_schedule(inputs: AmortizationInput) -> List[amortization.AmortizationRow]:
    """
    Generate the schedule described by inputs.

    Raises:
        ValueError: If periods exceeds the configured limit, or grace_periods
            is missing or outside 1..periods for a grace schedule
    """
    max_periods = get_settings().max_periods
    if inputs.periods > max_periods:
        raise ValueError(f"At most {max_periods} periods are supported")

    if inputs.schedule_type == amortization.GRACE:
        grace = inputs.grace_periods
        if not grace or grace <= 0 or grace > inputs.periods:
            raise ValueError("Invalid grace periods")

    return amortization.generate_schedule(
        inputs.principal,
        inputs.rate,
        inputs.periods,
        inputs.schedule_type,
        inputs.timing,
        inputs.grace_periods,
    )


@router.post("/amortization", response_model=AmortizationResponse)
async def calculate_amortization(
    inputs: AmortizationInput,
    history: CalculationHistory = Depends(get_history_service),
):
    """Generate a loan amortization schedule."""
    try:
        schedule = build_schedule(inputs)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    summary = amortization.calculate_summary(schedule, 1, inputs.periods)
    label = amortization.SCHEDULE_LABELS[inputs.schedule_type]

    history.record(
        "amrt",
        f"AMRT: {label}",
        f"Generated {len(schedule)} periods",
        {
            "Principal": f"{inputs.principal:.2f}",
            "Rate (%)": inputs.rate,
            "Periods": inputs.periods,
            "Timing": inputs.timing.upper(),
            "Type": label,
        },
    )

    return AmortizationResponse(
        schedule=[AmortizationRowModel(**asdict(row)) for row in schedule],
        summary=ScheduleSummaryModel(**asdict(summary)),
    )


@router.post("/amortization/summary", response_model=ScheduleSummaryModel)
async def calculate_amortization_summary(
    inputs: AmortizationSummaryInput,
    history: CalculationHistory = Depends(get_history_service),
):
    """Sum principal, interest and payments over a period range."""
    to_period = inputs.to_period if inputs.to_period is not None else inputs.periods

    try:
        schedule = build_schedule(inputs)
        if (
            inputs.from_period < 1
            or to_period > len(schedule)
            or inputs.from_period > to_period
        ):
            raise ValueError("Invalid period range")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    summary = amortization.calculate_summary(schedule, inputs.from_period, to_period)

    history.record(
        "amrt",
        f"AMRT: Summary (Periods {inputs.from_period}-{to_period})",
        f"Total Payment = {summary.total_payment:.2f}",
        {
            "Total Principal": f"{summary.total_principal:.2f}",
            "Total Interest": f"{summary.total_interest:.2f}",
            "Total Payment": f"{summary.total_payment:.2f}",
        },
    )

    return ScheduleSummaryModel(**asdict(summary))
