"""
Plan feature gating
Plans map to feature names; the mapping can be overridden under `plans:` in
the YAML config.
"""
from typing import Dict, List, Optional

from flashdeck.models.database_models import User, UserPlan
from flashdeck.services.errors import FeatureNotAvailable
from flashdeck.utils.config_loader import get_app_config, get_config_value

AI_FLASHCARD_GENERATION = "ai_flashcard_generation"

DEFAULT_PLAN_FEATURES: Dict[str, List[str]] = {
    UserPlan.FREE.value: [],
    UserPlan.PRO.value: [AI_FLASHCARD_GENERATION],
}


def plan_features(plan: UserPlan, config: Optional[dict] = None) -> List[str]:
    if config is None:
        config = get_app_config()
    configured = get_config_value(config, ["plans", plan.value, "features"])
    if configured is None:
        return list(DEFAULT_PLAN_FEATURES.get(plan.value, []))
    return list(configured)


def has_feature(user: User, feature: str, config: Optional[dict] = None) -> bool:
    plan = user.plan or UserPlan.FREE
    return feature in plan_features(plan, config)


def require_feature(user: User, feature: str, config: Optional[dict] = None) -> None:
    if not has_feature(user, feature, config):
        raise FeatureNotAvailable(feature)


def user_features(user: User, config: Optional[dict] = None) -> List[str]:
    plan = user.plan or UserPlan.FREE
    return plan_features(plan, config)
