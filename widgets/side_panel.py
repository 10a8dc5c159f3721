"""
Side panel: tall rotating card next to the dashboard sidebar.
Doctors see new medicines, patients see every medicine aimed at them.
"""

from typing import List, Optional, Tuple, Union

from models import TargetAudience
from schemas import Ad
from widgets.base import AdPanelBase, AdCardView
from widgets.defaults import doctor_default_ads, patient_default_ads


class SideAdPanel(AdPanelBase):

    ROTATION_PERIOD_MS = 5000

    def __init__(self, client, target_audience: Union[TargetAudience, str] = TargetAudience.PATIENT, **kwargs):
        super().__init__(client, **kwargs)
        self.target_audience = self._check_audience(target_audience)

    @staticmethod
    def _check_audience(target_audience: Union[TargetAudience, str]) -> TargetAudience:
        audience = TargetAudience(target_audience)
        if audience == TargetAudience.ALL:
            raise ValueError("Side panel audience must be 'patient' or 'doctor'")
        return audience

    @property
    def name(self) -> str:
        return "side-panel"

    def query(self) -> Tuple[str, Optional[bool]]:
        if self.target_audience == TargetAudience.DOCTOR:
            return TargetAudience.DOCTOR.value, True
        return TargetAudience.PATIENT.value, None

    def default_ads(self) -> List[Ad]:
        if self.target_audience == TargetAudience.DOCTOR:
            return doctor_default_ads()
        return patient_default_ads()

    async def set_audience(self, target_audience: Union[TargetAudience, str]):
        """Switch audience: drop the running timer and refetch."""
        audience = self._check_audience(target_audience)
        if audience == self.target_audience:
            return
        self.target_audience = audience
        if not self.mounted:
            return
        self._timer.stop()
        await self.refresh()

    def build_card(self, ad: Ad) -> AdCardView:
        conditions = ad.indication_list
        return AdCardView(
            ad_id=ad.id,
            heading=ad.medicine_name or ad.title,
            initial=ad.title[:1] or "M",
            image_url=ad.image_url,
            badge="New Medicine" if self.target_audience == TargetAudience.DOCTOR else None,
            conditions=conditions,
            category=ad.category if not ad.indications else None,
            description=ad.description,
            show_divider=bool(ad.description or ad.indications),
            link=ad.link,
            dots=self.dots(),
            sponsored=True,
        )
