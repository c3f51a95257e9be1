from django.core.management.base import BaseCommand
from django.utils import timezone

from vault.services.shared_access import expire_overdue_shares


class Command(BaseCommand):
    help = "Mark active shares past their expiry date as expired."

    def handle(self, *args, **options):
        now = timezone.now()
        count = expire_overdue_shares(now)
        self.stdout.write(self.style.SUCCESS(f"Expired {count} share(s) at {now}"))
