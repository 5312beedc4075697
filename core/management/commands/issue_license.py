"""
Django management command to issue license keys from the shell.
"""

import asyncio
import logging

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from core.domain.exceptions import DomainException
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.infrastructure.store import build_license_repository

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to issue one or more license keys."""

    help = "Issue license keys and print them, one per line"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--product",
            default=settings.LICENSE_DEFAULT_PRODUCT,
            help="Product the keys are issued for",
        )
        parser.add_argument(
            "--prefix",
            default=settings.LICENSE_TEST_PREFIX,
            help="Key prefix, 1-16 characters A-Z0-9",
        )
        parser.add_argument(
            "--count",
            type=int,
            default=1,
            help="Number of keys to issue",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        count = options["count"]
        if count < 1:
            raise CommandError("--count must be at least 1")

        handler = IssueLicenseHandler(license_repository=build_license_repository())

        async def issue_all():
            issued = []
            for _ in range(count):
                command = IssueLicenseCommand(
                    product=options["product"],
                    prefix=options["prefix"],
                )
                issued.append(await handler.handle(command))
            return issued

        try:
            issued = asyncio.run(issue_all())
        except DomainException as e:
            raise CommandError(f"{e.code}: {e.message}") from e

        for result in issued:
            self.stdout.write(result.license_key)
        # pylint: disable=no-member
        self.stderr.write(
            self.style.SUCCESS(f"Issued {len(issued)} license key(s) for {options['product']}")
        )
