"""Role catalog and rule table documents."""

from nightfall.catalog.role_catalog import RoleCatalog, load_document, packaged_data_path
from nightfall.catalog.rule_table import RuleTable

__all__ = [
    "RoleCatalog",
    "RuleTable",
    "load_document",
    "packaged_data_path",
]
