"""
ListLicensesQuery.

Query to list every stored license record.
"""
from dataclasses import dataclass


@dataclass
class ListLicensesQuery:
    """Query to list all license records."""

    pass
