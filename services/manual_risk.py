# services/manual_risk.py
"""
Fixed-Weight Risk Scoring

Rule-table scoring for manual and live input, independent of any dataset:
- Threshold-bucketed contributions from the six input factors
- Static per-location attributes (seismic zone, coastal risk)
- Disaster-specific affected-population estimate with +/-20% variance
- Trend adjustment from the live weather feed
"""

from typing import Callable, Dict, List, Optional, Tuple, Union
import logging
import random

from models.base import DisasterType, PredictionMethod, RiskLevel, risk_level_for
from models.model import EnvironmentalFactors, LiveWeather, LocationProfile
from models.prediction_models import PredictionResult
from services.exceptions import UnknownLocationError

logger = logging.getLogger("riskcast.manual_risk")


LOCATIONS: Dict[str, LocationProfile] = {
    "mumbai": LocationProfile(value="mumbai", label="Mumbai", seismic_zone=3, coastal_risk=0.9),
    "chennai": LocationProfile(value="chennai", label="Chennai", seismic_zone=2, coastal_risk=0.8),
    "kolkata": LocationProfile(value="kolkata", label="Kolkata", seismic_zone=3, coastal_risk=0.7),
    "delhi": LocationProfile(value="delhi", label="Delhi", seismic_zone=4, coastal_risk=0.0),
    "bangalore": LocationProfile(value="bangalore", label="Bangalore", seismic_zone=2, coastal_risk=0.0),
    "hyderabad": LocationProfile(value="hyderabad", label="Hyderabad", seismic_zone=2, coastal_risk=0.0),
}

# (factor, comparison, [(threshold, points), ...]); first matching tier wins
Rule = Tuple[str, str, List[Tuple[float, float]]]

RULE_TABLES: Dict[DisasterType, List[Rule]] = {
    DisasterType.FLOOD: [
        ("rainfall", "gt", [(150, 40), (100, 30), (50, 15)]),
        ("humidity", "gt", [(80, 20), (60, 10)]),
        ("pressure", "lt", [(980, 20), (1000, 10)]),
        ("temperature", "gt", [(35, 5)]),
        ("temperature", "lt", [(15, 5)]),
        ("population", "gt", [(10000, 10), (5000, 5)]),
    ],
    DisasterType.EARTHQUAKE: [
        ("population", "gt", [(15000, 25), (10000, 20), (5000, 15)]),
        # Dense areas have older infrastructure
        ("population", "gt", [(12000, 15)]),
    ],
    DisasterType.CYCLONE: [
        ("wind_speed", "gt", [(120, 40), (80, 30), (40, 15)]),
        ("pressure", "lt", [(970, 20), (990, 15), (1005, 10)]),
        ("temperature", "gt", [(30, 10), (28, 5)]),
        ("population", "gt", [(8000, 10)]),
    ],
    DisasterType.LANDSLIDE: [
        ("rainfall", "gt", [(120, 50), (80, 35), (40, 20)]),
        ("humidity", "gt", [(85, 20), (70, 15)]),
        ("temperature", "lt", [(20, 15)]),
        ("temperature", "gt", [(35, 10)]),
        ("population", "gt", [(8000, 15), (4000, 10)]),
    ],
}

# Linear per-location terms: (profile attribute, points per unit)
LOCATION_TERMS: Dict[DisasterType, Tuple[str, float]] = {
    DisasterType.EARTHQUAKE: ("seismic_zone", 15),
    DisasterType.CYCLONE: ("coastal_risk", 20),
}

ImpactFn = Callable[[EnvironmentalFactors, LocationProfile], float]

# impact factor, area multiplier, evacuation rate by tier (>70, >40, else)
IMPACT_CONFIG: Dict[DisasterType, Dict[str, Union[ImpactFn, Tuple[float, float, float]]]] = {
    DisasterType.FLOOD: {
        "impact": lambda f, loc: 0.2 + (f.rainfall / 200) * 0.3,
        "area": lambda f, loc: 1.5,
        "evacuation": (0.8, 0.5, 0.2),
    },
    DisasterType.EARTHQUAKE: {
        "impact": lambda f, loc: 0.15 + (loc.seismic_zone / 4) * 0.25,
        "area": lambda f, loc: 2.0,
        "evacuation": (0.6, 0.3, 0.1),
    },
    DisasterType.CYCLONE: {
        "impact": lambda f, loc: 0.25 + (f.wind_speed / 150) * 0.4,
        "area": lambda f, loc: loc.coastal_risk * 1.8 + 0.5,
        "evacuation": (0.9, 0.6, 0.3),
    },
    DisasterType.LANDSLIDE: {
        "impact": lambda f, loc: 0.1 + (f.rainfall / 200) * 0.2,
        "area": lambda f, loc: 0.3,
        "evacuation": (0.7, 0.4, 0.15),
    },
}

RECOMMENDATIONS: Dict[RiskLevel, List[str]] = {
    RiskLevel.HIGH: [
        "Issue immediate evacuation orders for high-risk areas",
        "Activate emergency response teams",
        "Set up emergency shelters and medical facilities",
        "Issue red alert to all residents",
        "Coordinate with disaster management authorities",
    ],
    RiskLevel.MEDIUM: [
        "Issue warning alerts to residents",
        "Prepare evacuation routes and shelters",
        "Monitor conditions continuously",
        "Brief emergency response teams",
        "Advise residents to prepare emergency kits",
    ],
    RiskLevel.LOW: [
        "Issue advisory notices",
        "Continue monitoring weather conditions",
        "Review emergency preparedness plans",
        "Keep emergency services on standby",
        "Inform public about potential risks",
    ],
}


def get_location_profile(location: str) -> LocationProfile:
    """Static profile by key or label, case-insensitive"""
    key = (location or "").strip().lower()
    profile = LOCATIONS.get(key)
    if profile is None:
        profile = next((p for p in LOCATIONS.values() if p.label.lower() == key), None)
    if profile is None:
        raise UnknownLocationError(location)
    return profile


def _tier_points(value: float, comparison: str, tiers: List[Tuple[float, float]]) -> float:
    for threshold, points in tiers:
        if comparison == "gt" and value > threshold:
            return points
        if comparison == "lt" and value < threshold:
            return points
    return 0.0


def manual_timeline(risk_score: float) -> str:
    if risk_score >= 70:
        return "6-24 hours"
    if risk_score >= 40:
        return "1-3 days"
    return "3-7 days"


class FixedWeightRiskScorer:
    """
    Rule-table scorer for manual and live predictions

    Randomness (population variance, confidence jitter) comes from the
    injected generator so callers can make results reproducible.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def calculate_risk(self, disaster_type: DisasterType, factors: EnvironmentalFactors,
                       profile: LocationProfile) -> float:
        """Sum of rule contributions, capped at 100"""
        rules = RULE_TABLES.get(disaster_type)
        if rules is None:
            raise ValueError(f"No fixed-weight rule table for {disaster_type.value}")

        risk = 0.0
        for factor, comparison, tiers in rules:
            risk += _tier_points(getattr(factors, factor), comparison, tiers)

        term = LOCATION_TERMS.get(disaster_type)
        if term is not None:
            attribute, weight = term
            risk += getattr(profile, attribute) * weight

        return min(risk, 100.0)

    def affected_population(self, disaster_type: DisasterType, risk_score: float,
                            factors: EnvironmentalFactors, profile: LocationProfile) -> int:
        """Directly affected plus evacuated, with +/-20% variance"""
        config = IMPACT_CONFIG[disaster_type]
        risk_multiplier = risk_score / 100

        impact_factor = config["impact"](factors, profile)
        area_multiplier = config["area"](factors, profile)
        high, medium, low = config["evacuation"]
        evacuation_rate = high if risk_score > 70 else medium if risk_score > 40 else low

        directly_affected = factors.population * risk_multiplier * impact_factor * area_multiplier
        evacuated = factors.population * evacuation_rate * risk_multiplier

        variance = 0.8 + self.rng.random() * 0.4
        return max(0, int(round((directly_affected + evacuated) * variance)))

    @staticmethod
    def trend_adjustment(trend: List[LiveWeather], disaster_type: DisasterType) -> float:
        """Recent-vs-earlier feed averages nudge the score up (max 20)"""
        if len(trend) < 6:
            return 0.0

        recent = trend[-3:]
        earlier = trend[-6:-3]

        def mean(points: List[LiveWeather], attr: str) -> float:
            return sum(getattr(p, attr) for p in points) / len(points)

        temp_trend = mean(recent, "temperature") - mean(earlier, "temperature")
        rain_trend = mean(recent, "rainfall") - mean(earlier, "rainfall")

        adjustment = 0.0
        if disaster_type == DisasterType.FLOOD:
            if rain_trend > 5:
                adjustment += 10
            if rain_trend > 10:
                adjustment += 10
        elif disaster_type == DisasterType.CYCLONE:
            if temp_trend > 2:
                adjustment += 5
        elif disaster_type == DisasterType.LANDSLIDE:
            if rain_trend > 3:
                adjustment += 8

        return min(adjustment, 20.0)

    def _result(self, disaster_type: DisasterType, risk: float, factors: EnvironmentalFactors,
                profile: LocationProfile, confidence: float, method: PredictionMethod,
                reasoning: List[str], lead: Optional[str] = None) -> PredictionResult:
        risk = max(0.0, min(100.0, risk))
        score = int(round(risk))
        level = risk_level_for(score)

        recommendations = list(RECOMMENDATIONS[level])
        if lead:
            recommendations.insert(0, lead)

        return PredictionResult(
            risk_score=score,
            risk_level=level,
            confidence=confidence,
            timeline=manual_timeline(score),
            affected_population=self.affected_population(disaster_type, risk, factors, profile),
            recommendations=recommendations,
            reasoning=reasoning,
            method=method,
        )

    def predict_manual(self, disaster_type: DisasterType, location: str,
                       factors: EnvironmentalFactors) -> PredictionResult:
        profile = get_location_profile(location)
        risk = self.calculate_risk(disaster_type, factors, profile)
        confidence = min(70 + round(self.rng.random() * 25), 95)

        logger.info(f"Manual {disaster_type.value} risk for {profile.label}: {risk:.0f}")
        return self._result(
            disaster_type, risk, factors, profile, confidence, PredictionMethod.MANUAL,
            reasoning=["Manual input-based prediction", "Standard risk calculation algorithms"],
        )

    def predict_live(self, disaster_type: DisasterType, location: str, weather: LiveWeather,
                     trend: List[LiveWeather], population: float) -> PredictionResult:
        profile = get_location_profile(location)
        factors = EnvironmentalFactors(**weather.to_conditions().model_dump(), population=population)

        risk = self.calculate_risk(disaster_type, factors, profile)
        if len(trend) > 5:
            risk += self.trend_adjustment(trend, disaster_type)
        confidence = min(80 + round(self.rng.random() * 15), 95)

        logger.info(f"Live {disaster_type.value} risk for {profile.label}: {risk:.0f}")
        return self._result(
            disaster_type, risk, factors, profile, confidence, PredictionMethod.LIVE,
            reasoning=[f"Live weather data from {weather.source}", "Real-time trend analysis applied"],
            lead="Based on real-time weather data analysis",
        )
