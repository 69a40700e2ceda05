"""
Pattern Detection Agent

Isolates records whose derived historical risk is high and records the
observed range of each environmental factor within that subset. The
resulting risk pattern is later matched against current conditions.
"""

from typing import Dict, List
import logging

from agents.correlation_agent import historical_risk_score
from models.base import BaseConditions, DisasterType, FACTORS
from models.dataset_models import WeatherRecord
from models.prediction_models import FactorRange, RiskPattern

logger = logging.getLogger("riskcast.agents.pattern_detection")


class PatternDetectionAgent:
    """
    Agent that discovers high-risk condition ranges in historical data

    Only one aggregated pattern is ever emitted per analysis: every record
    above the risk threshold contributes to the same set of ranges.
    """

    def __init__(self, risk_threshold: float = 70.0, pattern_risk_score: float = 85.0,
                 max_match_bonus: float = 20.0):
        """
        Args:
            risk_threshold: Derived risk a record must exceed to count as high-risk
            pattern_risk_score: Fixed severity attached to an emitted pattern
            max_match_bonus: Bonus awarded when every range matches
        """
        self.risk_threshold = risk_threshold
        self.pattern_risk_score = pattern_risk_score
        self.max_match_bonus = max_match_bonus

        logger.info(f"PatternDetectionAgent initialized: threshold={risk_threshold}")

    def identify_risk_patterns(self, records: List[WeatherRecord],
                               disaster_type: DisasterType) -> List[RiskPattern]:
        """
        Build the high-risk pattern for a disaster type

        Returns:
            Empty list if no record exceeds the threshold, else one pattern
        """
        high_risk = [
            record for record in records
            if historical_risk_score(record, disaster_type) > self.risk_threshold
        ]

        if not high_risk:
            logger.info(f"No high-risk {disaster_type.value} records found")
            return []

        conditions: Dict[str, FactorRange] = {}
        for factor in FACTORS:
            values = [v for v in (r.numeric(factor) for r in high_risk) if v is not None]
            if values:
                conditions[factor] = FactorRange(min=min(values), max=max(values))

        pattern = RiskPattern(
            conditions=conditions,
            risk_score=self.pattern_risk_score,
            occurrences=len(high_risk),
            disaster_type=disaster_type,
        )
        logger.info(
            f"  [OK] Pattern {disaster_type.value}: {pattern.occurrences} occurrences, "
            f"{len(conditions)} factor ranges"
        )
        return [pattern]

    def match_fraction(self, conditions: BaseConditions, pattern: RiskPattern) -> float:
        """Fraction of the pattern's ranges that contain the current value"""
        if not pattern.conditions:
            return 0.0
        matched = sum(
            1 for factor, value_range in pattern.conditions.items()
            if value_range.contains(getattr(conditions, factor))
        )
        return matched / len(pattern.conditions)

    def match_bonus(self, conditions: BaseConditions, patterns: List[RiskPattern]) -> float:
        """Best pattern-match bonus across patterns (0 to max_match_bonus)"""
        best = 0.0
        for pattern in patterns:
            if not pattern.conditions:
                continue
            best = max(best, self.match_fraction(conditions, pattern) * self.max_match_bonus)
        return best

