from fastapi import APIRouter, Depends

from weatherbot.api.deps import get_recommendation_service
from weatherbot.schemas.profile import USER_PROFILES
from weatherbot.schemas.recommendation import ProfilesResponse, RecommendationRequest, RecommendationResult
from weatherbot.services.recommendation_service import RecommendationService

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.post("", response_model=RecommendationResult, response_model_by_alias=True)
async def create_recommendation(
    payload: RecommendationRequest,
    service: RecommendationService = Depends(get_recommendation_service),
) -> RecommendationResult:
    return await service.generate(payload)


@router.get("/profiles", response_model=ProfilesResponse, response_model_by_alias=True)
def list_profiles() -> ProfilesResponse:
    return ProfilesResponse(profiles=list(USER_PROFILES))
