"""Source profiles, one per brand, keyed by brand slug."""
from __future__ import annotations

from typing import Dict, Mapping, Optional

from .base import SourceProfile
from .burgerking import BurgerKingProfile
from .frank import FrankProfile
from .kfc import KfcProfile
from .lotteria import LotteriaProfile
from .mcdonalds import McDonaldsProfile
from .momstouch import MomsTouchProfile
from .nobrand import NoBrandProfile

PROFILE_CLASSES = (
    McDonaldsProfile,
    BurgerKingProfile,
    LotteriaProfile,
    MomsTouchProfile,
    NoBrandProfile,
    FrankProfile,
    KfcProfile,
)


def default_profiles() -> Dict[str, SourceProfile]:
    return {cls.slug: cls() for cls in PROFILE_CLASSES}


def get_profile(slug: str, profiles: Optional[Mapping[str, SourceProfile]] = None) -> Optional[SourceProfile]:
    return (profiles if profiles is not None else default_profiles()).get(slug)


__all__ = [
    "SourceProfile",
    "PROFILE_CLASSES",
    "default_profiles",
    "get_profile",
]
