"""
RiskCast Analysis Agents

This module contains the agents that turn a record collection into a
dataset analysis and a risk prediction.

Agents:
- CorrelationAnalyzerAgent: Pearson correlation of each factor with derived risk
- PatternDetectionAgent: Factor ranges shared by historically high-risk records
- SeasonalTrendAgent: Quarterly risk multipliers and recent per-factor slopes
- RiskSynthesisAgent: Combines an analysis with current conditions
"""

from agents.correlation_agent import CorrelationAnalyzerAgent, pearson_correlation, historical_risk_score
from agents.pattern_detection_agent import PatternDetectionAgent
from agents.seasonal_trend_agent import SeasonalTrendAgent
from agents.risk_synthesis_agent import RiskSynthesisAgent, SynthesisBreakdown

__all__ = [
    "CorrelationAnalyzerAgent",
    "pearson_correlation",
    "historical_risk_score",
    "PatternDetectionAgent",
    "SeasonalTrendAgent",
    "RiskSynthesisAgent",
    "SynthesisBreakdown",
]
