"""
Bottom panel: horizontal strip of established ("old") medicines for doctors.
"""

from typing import List, Optional, Tuple

from models import TargetAudience
from schemas import Ad
from widgets.base import AdPanelBase, AdCardView
from widgets.defaults import bottom_default_ads

MAX_CONDITIONS = 2


class BottomAdPanel(AdPanelBase):

    ROTATION_PERIOD_MS = 4000

    @property
    def name(self) -> str:
        return "bottom-panel"

    def query(self) -> Tuple[str, Optional[bool]]:
        return TargetAudience.DOCTOR.value, False

    def default_ads(self) -> List[Ad]:
        return bottom_default_ads()

    def build_card(self, ad: Ad) -> AdCardView:
        conditions = ad.indication_list
        return AdCardView(
            ad_id=ad.id,
            heading=ad.medicine_name or ad.title,
            initial=ad.title[:1] or "A",
            image_url=ad.image_url,
            badge="Old Medicine",
            conditions=conditions[:MAX_CONDITIONS],
            more_conditions=max(len(conditions) - MAX_CONDITIONS, 0),
            category=ad.category if not ad.indications else None,
            description=ad.description,
            link=ad.link,
            dots=self.dots(),
        )
