from django.core.management.base import BaseCommand
from django.utils import timezone

from careops.services.events import broadcast_refresh
from careops.services.hospitals import warm_directory


class Command(BaseCommand):
    help = "Warm the hospital directory caches; broadcast WebSocket refresh event."

    def handle(self, *args, **options):
        now = timezone.now()
        keys_refreshed = warm_directory()
        broadcast_refresh(keys_refreshed)
        self.stdout.write(self.style.SUCCESS(f"Refreshed {len(keys_refreshed)} keys at {now}"))
