from django.core.management.base import BaseCommand, CommandError
from eventplan.models import Project
from eventplan.serialize import json_dumps


class Command(BaseCommand):
    help = "Print a project's derived schedule as JSON, datetimes in UTC"

    def add_arguments(self, parser):
        parser.add_argument('project_id', type=int)

    def handle(self, *args, **options):
        try:
            project = Project.objects.get(id=options['project_id'])
        except Project.DoesNotExist:
            raise CommandError(f"Project {options['project_id']} does not exist")

        rows = []
        assignments = project.assignments.select_related('template', 'assignee')
        for assignment in assignments.order_by('recommended_start_date', 'id'):
            rows.append({
                'id': assignment.id,
                'step': assignment.template.step,
                'name': assignment.template.name,
                'assignee': assignment.assignee.email if assignment.assignee else None,
                'recommended_start_date': assignment.recommended_start_date,
                'due_date': assignment.due_date,
                'estimated_completion': assignment.estimated_completion,
                'important': assignment.important,
                'status': assignment.status,
            })

        self.stdout.write(json_dumps({
            'project': project.name,
            'date': project.date,
            'assignments': rows,
        }, indent=2))
