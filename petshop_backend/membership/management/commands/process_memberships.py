# membership/management/commands/process_memberships.py

"""
Daily membership job (schedule once a day, e.g. cron):

    python manage.py process_memberships
"""

from django.core.management.base import BaseCommand

from membership.services.renewals import process_memberships


class Command(BaseCommand):
    help = "Send membership expiry notices and process auto-renewals"

    def handle(self, *args, **options):
        result = process_memberships()

        self.stdout.write(f"Expiry notices sent: {result.notices_sent}")
        self.stdout.write(f"Memberships renewed: {result.renewed}")
        if result.renewal_failed:
            self.stdout.write(self.style.WARNING(f"Auto-renewals failed: {result.renewal_failed}"))

        self.stdout.write(self.style.SUCCESS("Membership processing complete."))
