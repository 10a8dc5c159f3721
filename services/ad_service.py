from datetime import datetime, timezone
from typing import Dict, Any, List, Optional
import logging
from fastapi import HTTPException
from pydantic import ValidationError
from core.database import get_supabase
from models import TargetAudience, UserRole
from schemas import AdRecord, AdCreate, AdUpdate, AdListResponse, Pagination

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 10000
AD_COLUMNS = "*, department:departments(id, name)"


class AdService:
    @staticmethod
    def _get_db():
        return get_supabase()

    @staticmethod
    def _to_record(row: Dict[str, Any]) -> AdRecord:
        record = AdRecord.model_validate(row)
        department = row.get("department")
        if isinstance(department, dict) and department.get("name"):
            record.category = department["name"]
        return record

    @classmethod
    def _require_db(cls):
        supabase = cls._get_db()
        if not supabase:
            raise HTTPException(status_code=500, detail="Database not configured")
        return supabase

    @classmethod
    def _doctor_department(cls, user_id: Any) -> Optional[str]:
        """Department of the logged-in doctor, None when unknown."""
        supabase = cls._get_db()
        try:
            res = supabase.table("doctors").select("department_id").eq("user_id", user_id).limit(1).execute()
        except Exception as e:
            logger.error(f"Error fetching doctor department for user {user_id}: {e}")
            return None
        if res.data and res.data[0].get("department_id"):
            return str(res.data[0]["department_id"])
        return None

    @classmethod
    def _ensure_department(cls, department_id: str):
        supabase = cls._require_db()
        res = supabase.table("departments").select("id").eq("id", department_id).execute()
        if not res.data:
            raise HTTPException(status_code=400, detail="Invalid department selected")

    @classmethod
    def _get_row(cls, ad_id: str) -> Dict[str, Any]:
        supabase = cls._require_db()
        res = supabase.table("ads").select(AD_COLUMNS).eq("id", ad_id).execute()
        if not res.data:
            raise HTTPException(status_code=404, detail="Ad not found")
        return res.data[0]

    @classmethod
    def list_ads(
        cls,
        target_audience: Optional[TargetAudience] = None,
        department_id: Optional[str] = None,
        is_new_medicine: Optional[bool] = None,
        include_inactive: bool = False,
        cursor: Optional[str] = None,
        limit: int = DEFAULT_LIMIT,
        user: Optional[Dict[str, Any]] = None,
    ) -> AdListResponse:
        supabase = cls._require_db()
        role = (user or {}).get("role")
        is_admin = role == UserRole.ADMIN.value
        is_doctor = role == UserRole.DOCTOR.value

        query = supabase.table("ads").select(AD_COLUMNS)

        if not is_admin:
            if target_audience and target_audience != TargetAudience.ALL:
                audiences = [TargetAudience.ALL.value, target_audience.value]
            else:
                audiences = [a.value for a in TargetAudience]
            query = query.in_("target_audience", audiences)

        if not (include_inactive or is_admin):
            query = query.eq("is_active", True)

        # Department-specific ads always come with the general (no department) ones
        doctor_department = None
        if is_doctor and not department_id:
            doctor_department = cls._doctor_department(user.get("id"))
        final_department = department_id or doctor_department
        if final_department:
            query = query.or_(f"department_id.eq.{final_department},department_id.is.null")
        elif is_doctor:
            query = query.is_("department_id", "null")

        if is_new_medicine is not None:
            query = query.eq("is_new_medicine", is_new_medicine)

        if cursor:
            query = query.lt("created_at", cursor)

        limit = max(1, min(limit or DEFAULT_LIMIT, MAX_LIMIT))
        result = query.order("created_at", desc=True).limit(limit + 1).execute()

        rows: List[Dict[str, Any]] = result.data or []
        has_more = len(rows) > limit
        rows = rows[:limit]
        next_cursor = rows[-1].get("created_at") if has_more and rows else None

        ads = []
        for row in rows:
            try:
                ads.append(cls._to_record(row))
            except ValidationError as e:
                logger.warning(f"⚠️ Skipping malformed ad row {row.get('id')}: {e}")

        return AdListResponse(
            ads=ads,
            pagination=Pagination(has_more=has_more, next_cursor=next_cursor),
        )

    @classmethod
    def increment_click(cls, ad_id: str) -> int:
        supabase = cls._require_db()
        existing = supabase.table("ads").select("id, click_count").eq("id", ad_id).execute()
        if not existing.data:
            raise HTTPException(status_code=404, detail="Ad not found")

        # PostgREST has no atomic increment without an RPC; read-modify-write it is
        click_count = (existing.data[0].get("click_count") or 0) + 1
        supabase.table("ads").update({"click_count": click_count}).eq("id", ad_id).execute()
        logger.info(f"✅ Incremented click count for ad {ad_id} → {click_count}")
        return click_count

    @classmethod
    def create_ad(cls, payload: AdCreate) -> AdRecord:
        if not payload.title and not payload.medicine_name:
            raise HTTPException(status_code=400, detail="Title or Medicine Name is required")
        if payload.department_id:
            cls._ensure_department(payload.department_id)

        supabase = cls._require_db()
        ad_data = payload.model_dump(mode="json")
        ad_data["title"] = payload.title or payload.medicine_name

        result = supabase.table("ads").insert(ad_data).execute()
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create ad")
        logger.info(f"✅ Created ad {result.data[0].get('id')} ({ad_data['title']})")
        return cls._to_record(result.data[0])

    @classmethod
    def update_ad(cls, ad_id: str, payload: AdUpdate) -> AdRecord:
        current = cls._get_row(ad_id)
        changes = payload.model_dump(mode="json", exclude_unset=True)

        if changes.get("department_id"):
            cls._ensure_department(changes["department_id"])

        if not changes.get("title"):
            changes["title"] = changes.get("medicine_name") or current.get("title") or "Untitled"
        changes["updated_at"] = datetime.now(timezone.utc).isoformat()

        supabase = cls._require_db()
        result = supabase.table("ads").update(changes).eq("id", ad_id).execute()
        row = result.data[0] if result.data else {**current, **changes}
        return cls._to_record(row)

    @classmethod
    def delete_ad(cls, ad_id: str):
        cls._get_row(ad_id)
        supabase = cls._require_db()
        supabase.table("ads").delete().eq("id", ad_id).execute()
        logger.info(f"🗑️ Deleted ad {ad_id}")
