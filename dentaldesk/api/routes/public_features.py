from fastapi import APIRouter, Depends

from dentaldesk.api.deps import get_settings_service
from dentaldesk.components.settings import SettingsService, run_get_feature_toggles
from dentaldesk.domain.entities import FeatureToggles

router = APIRouter()


@router.get("/features", response_model=FeatureToggles)
def public_features(service: SettingsService = Depends(get_settings_service)) -> FeatureToggles:
    """Read-only toggle snapshot; clients hide disabled sections from it."""
    return run_get_feature_toggles(service)
