"""Tax rules loading.

Year-specific rules live in mxfin/data/tax_rules/{year}.yaml and are validated
against TaxRules on first load. Loaded tables are cached for the process.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

import yaml

from .schemas import TaxRules

logger = logging.getLogger(__name__)


class TaxRulesNotFoundError(FileNotFoundError):
    """Raised when no tax rules file exists for a year."""
    pass


def _get_tax_rules_dir() -> Path:
    """Get the tax_rules data directory path."""
    package_root = Path(__file__).parent.parent.parent  # taxes -> sdk -> mxfin
    return package_root / "data" / "tax_rules"


def get_available_years() -> list[int]:
    """Get sorted list of available tax rule years (descending)."""
    rules_dir = _get_tax_rules_dir()
    years = [int(p.stem) for p in rules_dir.glob("*.yaml") if p.stem.isdigit()]
    return sorted(years, reverse=True)


@lru_cache(maxsize=None)
def _load_tax_rules(year: int) -> TaxRules:
    config_file = _get_tax_rules_dir() / f"{year}.yaml"
    if not config_file.exists():
        raise TaxRulesNotFoundError(f"Tax rules file not found for year {year}: {config_file}")

    with open(config_file, "r") as f:
        raw = yaml.safe_load(f)

    rules = TaxRules.model_validate(raw)
    logger.debug(
        f"Loaded tax rules {year}: {len(rules.isr_monthly)} ISR brackets, "
        f"{len(rules.employment_subsidy.brackets)} subsidy brackets"
    )
    return rules


def load_tax_rules(year: Optional[Union[int, str]] = None) -> TaxRules:
    """Load tax rules for a year (latest available when year is None).

    Raises:
        TaxRulesNotFoundError: If no rules file exists for the year
        pydantic.ValidationError: If the file does not match TaxRules
    """
    if year is None:
        years = get_available_years()
        if not years:
            raise TaxRulesNotFoundError(f"No tax rules found in {_get_tax_rules_dir()}")
        year = years[0]
    return _load_tax_rules(int(year))
