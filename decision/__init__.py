"""Statistical comparison of pricing strategies and the resulting action.

- significance: paired-difference test between two price series
- engine: volatility sweep, edge computation and BUY/SELL/HOLD mapping
- schemas: pydantic models for validated requests and serialized decisions
"""

from decision.significance import AnalysisResult, SignificanceAnalyzer
from decision.engine import Action, DecisionEngine, DecisionReport
from decision.schemas import (
    AnalysisResultSchema,
    DecisionSchema,
    MarketSnapshotSchema,
    OptionContractSchema,
)

__all__ = [
    "AnalysisResult",
    "SignificanceAnalyzer",
    "Action",
    "DecisionEngine",
    "DecisionReport",
    "AnalysisResultSchema",
    "DecisionSchema",
    "MarketSnapshotSchema",
    "OptionContractSchema",
]
