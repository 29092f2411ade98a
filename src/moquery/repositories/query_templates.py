"""
Named question templates for the text2sql directive.

`--!text2sql tpch-q1` expands to the canonical TPC-H Q1 question instead of
sending the literal key to the model. Built-in entries cover a few TPC-H
queries; a YAML file can add or override entries:

    templates:
      top-customers: |
        List the 10 customers with the highest total order price.
"""

from pathlib import Path
from typing import Dict, Optional

import yaml

from moquery.config import TemplateConfig
from moquery.domain.errors import TemplateLoadError
from moquery.domain.types import TemplateMap
from moquery.utils.logging import get_module_logger

logger = get_module_logger()


BUILTIN_TEMPLATES: Dict[str, str] = {
    "tpch-q1": """
List return flag, line status,
totals of extended price, discounted extended price,
discounted extended price plus tax, average quantity,
average extended price and average discount for all orders
whose ship date is between 90 days before 1998-12-01 and
1998-12-01.  Group result by return flag and line status,
sorted by return flag and line status in ascending order.
""",
    "tpch-q3": """
Retrieve the order key, order date, ship priority and revenue,
defined as the sum of extended price * (1 - discount), of orders
placed by customers in the BUILDING market segment that were ordered
before 1995-03-15 and had line items shipped after 1995-03-15.
Return the 10 orders with the largest revenue, sorted by revenue
descending and then by order date ascending.
""",
    "tpch-q5": """
For each nation in the ASIA region, list the revenue volume, defined
as the sum of extended price * (1 - discount), from line items where
the customer who placed the order and the supplier who filled it are
both in that nation, for orders placed during 1994.
Sort nations by revenue in descending order.
""",
    "tpch-q6": """
Compute the total revenue increase, defined as the sum of
extended price * discount, from line items shipped during 1994
with a discount between 0.05 and 0.07 inclusive and a quantity
of less than 24.
""",
}


def load_templates_file(path: str) -> TemplateMap:
    """
    Load templates from a YAML file.

    Args:
        path: YAML file with a top-level "templates" mapping

    Returns:
        Mapping of template key to question text

    Raises:
        TemplateLoadError: If the file cannot be read or has the wrong shape
    """
    try:
        content = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise TemplateLoadError(f"Failed to load templates file {path}: {e}") from e

    templates = content.get("templates", {}) if isinstance(content, dict) else None
    if not isinstance(templates, dict):
        raise TemplateLoadError(f"Templates file {path} must contain a 'templates' mapping")

    parsed: TemplateMap = {}
    for key, description in templates.items():
        if not isinstance(description, str):
            raise TemplateLoadError(
                f"Template '{key}' in {path} must be a string",
                details={"key": str(key)},
            )
        parsed[str(key)] = description

    logger.info("Loaded query templates", path=path, template_count=len(parsed))
    return parsed


def build_template_map(config: Optional[TemplateConfig] = None) -> TemplateMap:
    """Built-in templates, overlaid with the configured YAML file if any."""
    templates: TemplateMap = dict(BUILTIN_TEMPLATES)
    if config is not None and config.templates_file:
        templates.update(load_templates_file(config.templates_file))
    return templates
