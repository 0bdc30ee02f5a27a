"""
Recommendation decision table

Rules are evaluated top-down and the first match wins. Order matters:
safety rules for older adults pre-empt the net-score tiers.

| #  | Condition                                                    | Tier                 |
|----|--------------------------------------------------------------|----------------------|
| 1  | net < 0                                                      | not-recommended      |
| 2  | frail patient, medication flagged avoid-if-frail             | caution-elderly      |
| 3  | listed hazard, high-severity caution, elderly, meets, >= 1.0 | caution-elderly      |
| 4  | listed hazard, high-severity caution, elderly                | not-recommended      |
| 5  | listed hazard, elderly, meets threshold                      | caution-elderly      |
| 6  | listed hazard, elderly                                       | marginal             |
| 7  | meets threshold, net >= 3.0                                  | strongly-recommended |
| 8  | meets threshold, high-severity caution, elderly              | consider             |
| 9  | meets threshold, high burden, goals of care <= 2             | consider             |
| 10 | meets threshold, annual cost > 3000, high cost sensitivity   | consider             |
| 11 | meets threshold                                              | recommended          |
| 12 | net > 0                                                      | marginal             |
| 13 | otherwise                                                    | not-recommended      |
"""

from dataclasses import dataclass
from typing import Callable, List, Tuple

from .schema import RecommendationTier

@dataclass(frozen=True)
class RecommendationContext:
    net_benefit: float
    threshold: float
    goals_of_care: int
    goals_of_care_name: str
    elderly: bool
    listed_hazard: bool
    high_severity_caution: bool
    avoid_recommended: bool
    high_burden: bool
    high_cost: bool
    high_cost_sensitivity: bool
    strong_floor: float = 3.0
    listed_hazard_floor: float = 1.0

    @property
    def meets_threshold(self) -> bool:
        return self.net_benefit >= self.threshold

@dataclass(frozen=True)
class Rule:
    name: str
    applies: Callable[[RecommendationContext], bool]
    tier: RecommendationTier
    rationale: str

T = RecommendationTier

DECISION_TABLE: List[Rule] = [
    Rule("net_harm",
         lambda c: c.net_benefit < 0,
         T.NOT_RECOMMENDED, "Expected harms outweigh benefits"),
    Rule("avoid_in_frail",
         lambda c: c.avoid_recommended,
         T.CAUTION_ELDERLY, "Avoid in frail patients - high risk of adverse events (Beers Criteria)"),
    Rule("listed_hazard_high_severity_with_benefit",
         lambda c: (c.listed_hazard and c.high_severity_caution and c.elderly
                    and c.meets_threshold and c.net_benefit >= c.listed_hazard_floor),
         T.CAUTION_ELDERLY, "Potential benefit but Beers Criteria medication - discuss safer alternatives"),
    Rule("listed_hazard_high_severity",
         lambda c: c.listed_hazard and c.high_severity_caution and c.elderly,
         T.NOT_RECOMMENDED, "Beers Criteria medication with limited benefit in this patient - avoid"),
    Rule("listed_hazard_meets_threshold",
         lambda c: c.listed_hazard and c.elderly and c.meets_threshold,
         T.CAUTION_ELDERLY, "Beers Criteria medication - use lowest dose, monitor closely"),
    Rule("listed_hazard_below_threshold",
         lambda c: c.listed_hazard and c.elderly,
         T.MARGINAL, "Beers Criteria medication with limited benefit - consider alternatives"),
    Rule("high_net_benefit",
         lambda c: c.meets_threshold and c.net_benefit >= c.strong_floor,
         T.STRONGLY_RECOMMENDED, "High net benefit - strongly recommended"),
    Rule("elderly_caution",
         lambda c: c.meets_threshold and c.high_severity_caution and c.elderly,
         T.CONSIDER, "Good benefit but use caution in elderly - monitor closely"),
    Rule("high_burden",
         lambda c: c.meets_threshold and c.high_burden and c.goals_of_care <= 2,
         T.CONSIDER, "Good benefit but high burden - discuss with your doctor"),
    Rule("high_cost",
         lambda c: c.meets_threshold and c.high_cost and c.high_cost_sensitivity,
         T.CONSIDER, "Good benefit but high cost - discuss alternatives"),
    Rule("meets_threshold",
         lambda c: c.meets_threshold,
         T.RECOMMENDED, "Net benefit meets your goals"),
    Rule("below_threshold",
         lambda c: c.net_benefit > 0,
         T.MARGINAL, "Benefit below your {goc} threshold"),
    Rule("no_benefit",
         lambda c: True,
         T.NOT_RECOMMENDED, "No net benefit expected"),
]

def classify(context: RecommendationContext,
             table: List[Rule] = DECISION_TABLE) -> Tuple[RecommendationTier, str]:
    """Tier and rationale from the first matching rule"""
    for rule in table:
        if rule.applies(context):
            return rule.tier, rule.rationale.format(goc=context.goals_of_care_name.lower())
    # The final rule always matches
    raise ValueError("decision table has no fallback rule")
