"""
ListLicensesHandler.

Handler for listing every license record.
"""
from typing import Dict

from core.infrastructure.store_calls import call_store
from licenses.application.dto.license_dto import LicenseRecordDTO
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.ports.license_repository import LicenseRepository


class ListLicensesHandler:
    """Handler for ListLicensesQuery."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, query: ListLicensesQuery) -> Dict[str, LicenseRecordDTO]:
        """
        Handle list licenses query.

        Returns:
            Mapping of license key to record, newest first
        """
        licenses = await call_store(self.license_repository.list_all(), "list_all")
        return {
            license.license_key: LicenseRecordDTO.from_entity(license) for license in licenses
        }
