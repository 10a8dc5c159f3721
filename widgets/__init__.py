"""
Rotating medicine ad panels for the patient and doctor dashboards.
"""

from .base import AdCardView, AdPanelBase, PanelView
from .bottom_panel import BottomAdPanel
from .client import AdsApiClient, AdsApiError, FetchResult
from .rotation import shutdown_rotation_scheduler
from .side_panel import SideAdPanel

__all__ = [
    "AdCardView",
    "AdPanelBase",
    "AdsApiClient",
    "AdsApiError",
    "BottomAdPanel",
    "FetchResult",
    "PanelView",
    "SideAdPanel",
    "shutdown_rotation_scheduler",
]
