from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
import logging
from core.config import settings
from core.limiter import click_rate_limit
from dependencies.auth import get_admin_user, get_optional_user
from models import TargetAudience
from schemas import AdCreate, AdUpdate, AdListResponse, AdResponse, MessageResponse
from services.ad_service import AdService, DEFAULT_LIMIT

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ads", tags=["ads"])


@router.get("", response_model=AdListResponse)
async def get_ads(
    target_audience: Optional[TargetAudience] = Query(None, alias="targetAudience"),
    department_id: Optional[str] = Query(None, alias="departmentId"),
    is_new_medicine: Optional[bool] = Query(None, alias="isNewMedicine"),
    include_inactive: bool = Query(False, alias="includeInactive"),
    cursor: Optional[str] = Query(None),
    limit: int = Query(DEFAULT_LIMIT),
    user: Optional[dict] = Depends(get_optional_user),
):
    try:
        return AdService.list_ads(
            target_audience=target_audience,
            department_id=department_id,
            is_new_medicine=is_new_medicine,
            include_inactive=include_inactive,
            cursor=cursor,
            limit=limit,
            user=user,
        )
    except Exception as e:
        # Widgets fall back to their default ads on an empty list
        logger.error(f"Error fetching ads: {e}", exc_info=settings.ENVIRONMENT != "production")
        return AdListResponse()


@router.post("/{ad_id}/click", response_model=MessageResponse, dependencies=[Depends(click_rate_limit)])
async def track_ad_click(ad_id: str):
    try:
        AdService.increment_click(ad_id)
        return MessageResponse(message="Click counted")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ Error counting click for ad {ad_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to increment click count")


@router.post("", response_model=AdResponse, status_code=201)
async def create_ad(payload: AdCreate, admin_user: dict = Depends(get_admin_user)):
    try:
        return AdResponse(ad=AdService.create_ad(payload))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ Error creating ad: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to create ad: {str(e)}")


@router.put("/{ad_id}", response_model=AdResponse)
async def update_ad(ad_id: str, payload: AdUpdate, admin_user: dict = Depends(get_admin_user)):
    try:
        return AdResponse(ad=AdService.update_ad(ad_id, payload))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ Error updating ad {ad_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to update ad: {str(e)}")


@router.delete("/{ad_id}", response_model=MessageResponse)
async def delete_ad(ad_id: str, admin_user: dict = Depends(get_admin_user)):
    try:
        AdService.delete_ad(ad_id)
        return MessageResponse(message="Ad deleted")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"❌ Error deleting ad {ad_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))
