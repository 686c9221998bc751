from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from eventplan.importer import load_templates


class Command(BaseCommand):
    help = ("Seed the assignment template catalog from an Excel, CSV or JSON file. "
            "Does nothing if the catalog already has templates.")

    def add_arguments(self, parser):
        parser.add_argument('path', nargs='?',
                            help='Template file, defaults to settings.EVENTPLAN_TEMPLATE_FILE')
        parser.add_argument('--force', action='store_true',
                            help='Import even if the catalog is not empty')

    def handle(self, *args, **options):
        path = options['path'] or getattr(settings, 'EVENTPLAN_TEMPLATE_FILE', None)
        if not path:
            raise CommandError('No template file given and settings.EVENTPLAN_TEMPLATE_FILE is not set')

        try:
            created = load_templates(path, force=options['force'])
        except (OSError, ValueError) as e:
            raise CommandError(str(e)) from e

        if created:
            self.stdout.write(self.style.SUCCESS(f'Loaded {created} template(s)'))
        else:
            self.stdout.write('Template catalog already populated')
