"""
Risk Synthesis Agent

Combines current conditions with a dataset analysis (correlation weights,
pattern matches, seasonal multiplier) into a single prediction: risk score,
timeline, affected population, recommendations and reasoning.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional
import logging

from agents.pattern_detection_agent import PatternDetectionAgent
from agents.seasonal_trend_agent import current_quarter
from models.base import BaseConditions, DisasterType, PredictionMethod, risk_level_for
from models.prediction_models import DatasetAnalysis, PredictionResult

logger = logging.getLogger("riskcast.agents.risk_synthesis")


@dataclass
class SynthesisBreakdown:
    """Intermediate values behind a synthesized score"""
    weighted_score: float = 0.0
    weight_sum: float = 0.0
    pattern_bonus: float = 0.0
    season: str = ""
    seasonal_multiplier: float = 1.0
    final_score: float = 0.0
    factor_risks: Dict[str, float] = field(default_factory=dict)


class RiskSynthesisAgent:
    """
    Agent that turns an analysis plus live conditions into a prediction

    Scoring:
    1. Correlation-weighted average of per-factor risks (|r| > min_weight)
    2. + pattern-match bonus (up to 20)
    3. x seasonal multiplier for the current quarter
    4. Clamp to [0, 100]
    """

    BASE_POPULATION = 5000

    def __init__(self, pattern_agent: Optional[PatternDetectionAgent] = None,
                 min_weight: float = 0.1):
        self.pattern_agent = pattern_agent or PatternDetectionAgent()
        self.min_weight = min_weight

    @staticmethod
    def factor_risk(factor: str, value: float, correlation: float,
                    disaster_type: DisasterType) -> float:
        """Nonlinear mapping of one current value onto a risk contribution"""
        if factor == "rainfall":
            return min(value / 200 * 100, 100)
        if factor == "temperature":
            if disaster_type == DisasterType.HEAT:
                return max(0.0, (value - 30) * 5)
            return abs(value - 25) * 2
        if factor == "humidity":
            return (value / 100) * (100 if correlation > 0 else -100)
        if factor == "wind_speed":
            return min(value / 150 * 100, 100)
        if factor == "pressure":
            return max(0.0, (1013 - value) * 2)
        return 0.0

    def score(self, conditions: BaseConditions, analysis: DatasetAnalysis,
              disaster_type: DisasterType, now: Optional[datetime] = None) -> SynthesisBreakdown:
        """Unrounded risk score with the pieces that produced it"""
        breakdown = SynthesisBreakdown()

        for factor, correlation in analysis.correlations.items():
            weight = abs(correlation)
            if weight <= self.min_weight:
                continue
            value = getattr(conditions, factor, None)
            if value is None:
                continue
            risk = self.factor_risk(factor, value, correlation, disaster_type)
            breakdown.factor_risks[factor] = risk
            breakdown.weighted_score += risk * weight
            breakdown.weight_sum += weight

        score = breakdown.weighted_score / breakdown.weight_sum if breakdown.weight_sum > 0 else 0.0

        breakdown.pattern_bonus = self.pattern_agent.match_bonus(conditions, analysis.risk_patterns)
        score += breakdown.pattern_bonus

        breakdown.season = current_quarter(now)
        # A zero or missing multiplier falls back to neutral
        breakdown.seasonal_multiplier = analysis.seasonal_factors.get(breakdown.season) or 1.0
        score *= breakdown.seasonal_multiplier

        breakdown.final_score = max(0.0, min(100.0, score))
        return breakdown

    @staticmethod
    def predict_timeline(conditions: BaseConditions, risk_score: float) -> str:
        """First matching urgency rule wins"""
        if conditions.rainfall > 100 or conditions.wind_speed > 80:
            return "2-6 hours"
        if conditions.pressure < 980 or risk_score > 80:
            return "6-24 hours"
        if risk_score > 60:
            return "1-2 days"
        if risk_score > 40:
            return "2-5 days"
        return "5-10 days"

    def affected_population(self, risk_score: float, conditions: BaseConditions,
                            analysis: DatasetAnalysis) -> int:
        rainfall_correlation = analysis.correlations.get("rainfall", 0.0)
        wind_correlation = analysis.correlations.get("wind_speed", 0.0)

        impact_multiplier = 1.0
        if rainfall_correlation > 0.5 and conditions.rainfall > 80:
            impact_multiplier *= 1.5
        if wind_correlation > 0.5 and conditions.wind_speed > 60:
            impact_multiplier *= 1.3

        affected = self.BASE_POPULATION * (risk_score / 100) * impact_multiplier
        return max(0, int(round(affected)))

    @staticmethod
    def recommendations(risk_score: float, analysis: DatasetAnalysis,
                        disaster_type: DisasterType) -> List[str]:
        recs: List[str] = []

        if risk_score > 70:
            recs.append(
                f"Based on {len(analysis.risk_patterns)} similar historical patterns, "
                "immediate evacuation is recommended"
            )
            recs.append("Activate emergency response teams immediately")
            recs.append(
                f"Historical data shows {round(analysis.confidence)}% confidence in high-risk scenarios"
            )
        elif risk_score > 40:
            recs.append("Monitor conditions closely - historical patterns indicate potential escalation")
            recs.append("Prepare evacuation routes based on similar past events")
            recs.append("Issue weather warnings to residents")
        else:
            recs.append("Continue routine monitoring")
            recs.append("Review emergency preparedness plans")
            recs.append("Update community on current risk assessment")

        if disaster_type == DisasterType.FLOOD and analysis.correlations.get("rainfall", 0.0) > 0.6:
            recs.append("Historical data shows strong rainfall correlation - monitor drainage systems")
        if disaster_type == DisasterType.CYCLONE and analysis.correlations.get("wind_speed", 0.0) > 0.6:
            recs.append("Wind speed patterns match historical cyclone events - secure loose objects")

        return recs

    @staticmethod
    def reasoning(analysis: DatasetAnalysis, breakdown: SynthesisBreakdown) -> List[str]:
        lines = [f"Analysis based on {analysis.confidence:g}% confidence from historical data patterns"]

        if analysis.correlations:
            factor, correlation = max(analysis.correlations.items(), key=lambda item: abs(item[1]))
            if abs(correlation) > 0.3:
                lines.append(
                    f"{factor} shows strongest correlation ({round(correlation * 100)}%) "
                    "with historical risk events"
                )

        if analysis.risk_patterns:
            lines.append(
                f"Current conditions match {len(analysis.risk_patterns)} historical high-risk patterns"
            )

        seasonal = analysis.seasonal_factors.get(breakdown.season)
        if seasonal and seasonal > 1.2:
            lines.append(
                f"Current season ({breakdown.season}) historically shows "
                f"{round((seasonal - 1) * 100)}% higher risk"
            )

        return lines

    def synthesize(self, conditions: BaseConditions, analysis: DatasetAnalysis,
                   disaster_type: DisasterType, now: Optional[datetime] = None) -> PredictionResult:
        """Full dataset-path prediction from an analysis and current conditions"""
        breakdown = self.score(conditions, analysis, disaster_type, now=now)
        risk = breakdown.final_score

        result = PredictionResult(
            risk_score=min(int(round(risk)), 100),
            risk_level=risk_level_for(round(risk)),
            confidence=analysis.confidence,
            timeline=self.predict_timeline(conditions, risk),
            affected_population=self.affected_population(risk, conditions, analysis),
            recommendations=self.recommendations(risk, analysis, disaster_type),
            reasoning=self.reasoning(analysis, breakdown),
            analysis=analysis,
            method=PredictionMethod.DATASET,
        )

        logger.info(
            f"Synthesized {disaster_type.value} risk {result.risk_score} "
            f"(bonus={breakdown.pattern_bonus:.1f}, season={breakdown.season} "
            f"x{breakdown.seasonal_multiplier:.2f})"
        )
        return result
