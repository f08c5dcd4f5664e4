"""Pydantic schemas for validating requests and serializing decisions."""

from pydantic import BaseModel, ConfigDict, Field

from decision.engine import DecisionReport
from decision.significance import AnalysisResult
from pricing.models import ExerciseStyle, MarketSnapshot, OptionContract, OptionKind


class OptionContractSchema(BaseModel):
    """Schema for an option contract."""

    kind: OptionKind = Field(..., description="call or put")
    style: ExerciseStyle = Field(ExerciseStyle.EUROPEAN, description="european or american")
    strike: float = Field(..., gt=0, description="Strike price")
    expiry: float = Field(..., gt=0, description="Time to expiry in years")

    def to_domain(self) -> OptionContract:
        return OptionContract(kind=self.kind, style=self.style, strike=self.strike, expiry=self.expiry)


class MarketSnapshotSchema(BaseModel):
    """Schema for market observables."""

    spot: float = Field(..., gt=0, description="Current spot price")
    rate: float = Field(..., ge=0, le=1, description="Risk-free rate")
    volatility: float = Field(..., gt=0, description="Annualized volatility")

    def to_domain(self) -> MarketSnapshot:
        return MarketSnapshot(spot=self.spot, rate=self.rate, volatility=self.volatility)


class AnalysisResultSchema(BaseModel):
    """Schema for a paired-difference test result."""

    # t_statistic is ±inf for zero-variance differences; JSON has no such token
    model_config = ConfigDict(ser_json_inf_nan="null")

    mean_difference: float
    standard_deviation: float = Field(..., ge=0)
    p_value: float = Field(..., ge=0, le=1)
    confidence_interval: float = Field(..., ge=0, description="95% CI half-width")
    is_significant: bool
    t_statistic: float
    standard_error: float = Field(..., ge=0)
    n_samples: int = Field(..., ge=1)

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisResultSchema":
        return cls(**result.to_dict())


class DecisionSchema(BaseModel):
    """Schema for a decision and its statistical justification."""

    model_config = ConfigDict(ser_json_inf_nan="null")

    action: str = Field(..., description="buy, sell or hold")
    analysis: AnalysisResultSchema
    edge: float | None = Field(None, description="Reference price edge over spot")
    threshold: float = Field(..., ge=0)
    reference_price: float
    strategy_names: list[str] = Field(..., min_length=2, max_length=2)

    @classmethod
    def from_report(cls, report: DecisionReport) -> "DecisionSchema":
        return cls(
            action=report.action.value,
            analysis=AnalysisResultSchema.from_result(report.analysis),
            edge=report.edge,
            threshold=report.threshold,
            reference_price=report.reference_price,
            strategy_names=list(report.strategy_names),
        )
