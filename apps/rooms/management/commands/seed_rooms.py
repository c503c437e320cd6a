from django.core.management.base import BaseCommand

from apps.rooms.models import Room

DEFAULT_ROOMS = ("General's Quarters", "Major's Suite")


class Command(BaseCommand):
    help = "Create the default rooms if they do not exist yet"

    def handle(self, *args, **options):
        for name in DEFAULT_ROOMS:
            room, created = Room.objects.get_or_create(name=name)
            if created:
                self.stdout.write(self.style.SUCCESS(f"Created room #{room.pk}: {room.name}"))
            else:
                self.stdout.write(f"Room #{room.pk} already exists: {room.name}")
