from django.core.management.base import BaseCommand, CommandError

from exams.importers import import_questions
from exams.models import Module


class Command(BaseCommand):
    help = 'Loads questions into the bank from a CSV file'

    def add_arguments(self, parser):
        parser.add_argument('path', type=str, help='CSV file with a question_text,category,difficulty,points,options,correct_answer header')
        parser.add_argument('--module', type=int, help='Attach the questions to this module id')

    def handle(self, *args, **options):
        module = None
        if options['module']:
            try:
                module = Module.objects.get(pk=options['module'])
            except Module.DoesNotExist:
                raise CommandError(f"Module {options['module']} not found")

        try:
            with open(options['path'], encoding='utf-8-sig', newline='') as fh:
                result = import_questions(fh, module=module)
        except FileNotFoundError:
            raise CommandError(f"File {options['path']} not found")

        for error in result.errors:
            self.stdout.write(self.style.WARNING(error))
        self.stdout.write(self.style.SUCCESS(f"Imported {result.created} questions"))
