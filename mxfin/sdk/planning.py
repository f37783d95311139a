"""Planning tables loading (financial levels, emergency ladder, instruments).

Tables live in mxfin/data/planning.yaml, are validated on first load and
cached for the process lifetime.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import yaml

from .schemas import (
    EmergencyMilestone,
    FinancialLevel,
    InvestmentType,
    InvestmentTypeInfo,
    SavingsInstrument,
)

logger = logging.getLogger(__name__)

PLANNING_FILENAME = "planning.yaml"


def _get_planning_path() -> Path:
    return Path(__file__).parent.parent / "data" / PLANNING_FILENAME


@lru_cache(maxsize=None)
def _load_planning_data() -> Dict[str, Any]:
    with open(_get_planning_path(), "r") as f:
        data = yaml.safe_load(f) or {}
    logger.debug(f"Loaded planning tables from {_get_planning_path()}")
    return data


@lru_cache(maxsize=None)
def get_financial_levels() -> tuple[FinancialLevel, ...]:
    """Financial levels ordered ascending by multiplier."""
    levels = [FinancialLevel.model_validate(lv) for lv in _load_planning_data()["financial_levels"]]
    return tuple(sorted(levels, key=lambda lv: lv.multiplier))


@lru_cache(maxsize=None)
def get_emergency_milestones() -> tuple[EmergencyMilestone, ...]:
    """Emergency milestones ordered ascending by months."""
    raw = _load_planning_data()["emergency"]["milestones"]
    milestones = [EmergencyMilestone.model_validate(m) for m in raw]
    return tuple(sorted(milestones, key=lambda m: m.months))


def get_emergency_base_target() -> float:
    """Flat starter amount (MXN) the fund must reach before the month ladder."""
    return float(_load_planning_data()["emergency"]["base_target"])


@lru_cache(maxsize=None)
def get_investment_types() -> Dict[InvestmentType, InvestmentTypeInfo]:
    """Display metadata for every investment type, in table order.

    Raises:
        ValueError: If planning.yaml does not cover every InvestmentType
    """
    raw = _load_planning_data()["investment_types"]
    types = {InvestmentType(key): InvestmentTypeInfo.model_validate(info) for key, info in raw.items()}
    missing = [t.value for t in InvestmentType if t not in types]
    if missing:
        raise ValueError(f"planning.yaml investment_types missing: {', '.join(missing)}")
    return types


def get_tax_exemption() -> Dict[str, float]:
    """SOFIPO interest exemption parameters (uma_daily, exempt_umas)."""
    return dict(_load_planning_data()["tax_exemption"])


@lru_cache(maxsize=None)
def get_savings_instruments() -> tuple[SavingsInstrument, ...]:
    """All reference instruments (SOFIPOs and CETES)."""
    return tuple(
        SavingsInstrument.model_validate(i) for i in _load_planning_data()["savings_instruments"]
    )


def get_sofipos() -> list[SavingsInstrument]:
    return [i for i in get_savings_instruments() if i.type == "sofipo"]


def get_cetes_info() -> SavingsInstrument:
    return next(i for i in get_savings_instruments() if i.type == "cetes")
