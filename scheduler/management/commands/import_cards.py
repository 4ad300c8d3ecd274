import json
import uuid

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.db.models import Max

from scheduler.data.models import Card, Deck


def _text(entry, key):
    # Anything but a JSON string (null, numbers, lists) counts as blank.
    if not isinstance(entry, dict):
        return ""
    value = entry.get(key)
    return value.strip() if isinstance(value, str) else ""


class Command(BaseCommand):
    help = "Import generated {front, back, reversible} cards into a deck"

    def add_arguments(self, parser):
        parser.add_argument("--file", required=True, help="JSON file with a list of cards")
        parser.add_argument("--owner", type=uuid.UUID, help="Owner id for a new deck")
        parser.add_argument("--title", default="Imported deck", help="Title for a new deck")
        parser.add_argument("--source-url", default="", help="Where the content came from")
        parser.add_argument("--deck", type=uuid.UUID, help="Append to this existing deck instead")

    def handle(self, *args, **options):
        file_name = options["file"]
        try:
            with open(file_name, encoding="utf-8") as json_file:
                entries = json.load(json_file)
        except OSError as e:
            raise CommandError(f"Cannot read {file_name}: {e}")
        except json.JSONDecodeError as e:
            raise CommandError(f"{file_name} is not valid JSON: {e}")

        if not isinstance(entries, list):
            raise CommandError(f"{file_name} must contain a JSON list of cards")

        with transaction.atomic():
            deck = self._resolve_deck(options)
            last = deck.cards.aggregate(last=Max("position"))["last"]
            position = 0 if last is None else last + 1

            created = 0
            skipped = 0
            for entry in entries:
                front = _text(entry, "front")
                back = _text(entry, "back")
                if not front or not back:
                    skipped += 1
                    continue
                Card.objects.create(
                    deck=deck,
                    front=front,
                    back=back,
                    is_reversible=entry.get("reversible") is True,
                    position=position,
                )
                position += 1
                created += 1

        self.stdout.write(
            self.style.SUCCESS(f"Imported {created} cards into deck {deck.pk} ({deck.title})")
        )
        if skipped:
            self.stdout.write(self.style.WARNING(f"Skipped {skipped} entries with empty front or back"))

    def _resolve_deck(self, options):
        if options.get("deck"):
            try:
                return Deck.objects.get(pk=options["deck"])
            except Deck.DoesNotExist:
                raise CommandError(f"Deck {options['deck']} not found")
        if not options.get("owner"):
            raise CommandError("Either --deck or --owner is required")
        return Deck.objects.create(
            owner_id=options["owner"],
            title=options["title"],
            source_url=options["source_url"],
        )
