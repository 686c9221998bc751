"""
The project aggregate: a project, its editors and its derived assignments.

Creation runs catalog lookup, schedule derivation and storage strictly in
that order. All templates are matched and drafted before anything is
written, then the project and its assignments are stored in a single
transaction, so a failure leaves neither behind.

Collaborators (template catalog, comment store) are passed in, the
defaults read from the app's own models.
"""
import logging
from datetime import timedelta
from django.contrib.auth import get_user_model
from django.utils import timezone
from . import access
from .catalog import TemplateCatalog
from .comments import CommentStore
from .exceptions import ConflictError, NotFoundError
from .models import Project, ProjectAssignment
from .schedule import derive, derive_all
from .status import TaskStatus
from .transaction import atomic_operation
from .validation import (require, parse_moment, parse_tags, parse_number,
                         parse_id, parse_text, parse_whole_number)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('name', 'date', 'tags', 'budget', 'area', 'venue', 'amount_of_people')


def _build(project, draft):
    return ProjectAssignment(
        project=project,
        template_id=draft.template_id,
        assignee_id=draft.assignee_id,
        recommended_start_date=draft.recommended_start_date,
        due_date=draft.due_date,
        estimated_completion=draft.estimated_completion,
        important=draft.important,
        status=draft.status,
    )


class ProjectService:

    def __init__(self, catalog=None, comments=None, users=None):
        self.catalog = catalog or TemplateCatalog()
        self.comments = comments or CommentStore()
        self.users = users

    def _users(self):
        return self.users if self.users is not None else get_user_model().objects

    def _get_user(self, user_id, field='user'):
        user_id = parse_id(user_id, field)
        user = self._users().filter(pk=user_id).first()
        if user is None:
            raise NotFoundError('User not found')
        return user

    def _clean_fields(self, data):
        cleaned = {}
        for field in UPDATABLE_FIELDS:
            if field not in data:
                continue
            value = data[field]
            if field == 'name':
                cleaned[field] = parse_text(value, 'name')
            elif field == 'date':
                cleaned[field] = parse_moment(value, 'date')
            elif field == 'tags':
                cleaned[field] = parse_tags(value)
            elif field == 'budget':
                cleaned[field] = parse_number(value, 'budget', allow_null=True) or 0
            elif field == 'amount_of_people':
                cleaned[field] = parse_whole_number(value, 'amount_of_people',
                                                    allow_null=True, minimum=0)
            else:
                cleaned[field] = '' if value is None else str(value)
        return cleaned

    def create_project(self, creator, name=None, date=None, tags=None, budget=0, **extra):
        """Create a project owned by `creator` and derive one assignment
        per matching template."""
        data = dict(extra, name=name, date=date, tags=tags, budget=budget)
        for field in ('name', 'date', 'tags'):
            require(data[field], field)
        fields = self._clean_fields(data)

        project = Project(creator=creator, **fields)
        templates = self.catalog.find_matching_templates(fields['tags'])
        drafts = derive_all(project, templates)

        with atomic_operation('project creation'):
            project.save()
            ProjectAssignment.objects.bulk_create([
                _build(project, draft) for draft in drafts
            ])

        logger.info('Project %s created by user %s with %d derived assignments',
                    project.pk, creator.pk, len(drafts))
        return access.get_project(project.pk)

    def update_project(self, project_id, requester, data):
        project = access.get_project(project_id)
        access.require_manager(project, requester,
                               'Only the project creator or an editor may edit it')
        fields = self._clean_fields(data)
        if not fields:
            return project
        for field, value in fields.items():
            setattr(project, field, value)
        with atomic_operation('project update'):
            project.save(update_fields=list(fields))
        return access.get_project(project.pk)

    def add_editor(self, project_id, requester, editor_id):
        project = access.get_project(project_id)
        access.require_creator(project, requester,
                               'Only the project creator may add editors')
        editor = self._get_user(editor_id, 'editor_id')
        if editor.pk in project.editor_ids:
            raise ConflictError('User is already an editor of this project')
        with atomic_operation('add editor', 'User is already an editor of this project'):
            project.editors.add(editor)
        return access.get_project(project.pk)

    def remove_editor(self, project_id, requester, editor_id):
        """Removing someone who is not an editor is a no-op."""
        project = access.get_project(project_id)
        access.require_creator(project, requester,
                               'Only the project creator may remove editors')
        editor_id = parse_id(editor_id, 'editor_id')
        with atomic_operation('remove editor'):
            project.editors.remove(editor_id)
        return access.get_project(project.pk)

    def delete_project(self, project_id, requester):
        """Delete the project, its assignments and all of their comments in
        one transaction. Returns the removed counts."""
        project = access.get_project(project_id)
        access.require_creator(project, requester,
                               'Only the project creator may delete it')
        assignment_ids = project.assignment_ids

        with atomic_operation('project deletion'):
            deleted_comments = self.comments.purge_for(assignment_ids)
            ProjectAssignment.objects.filter(project=project).delete()
            project.delete()

        logger.info('Project %s deleted with %d assignments and %d comments',
                    project_id, len(assignment_ids), deleted_comments)
        return {
            'deleted_assignments': len(assignment_ids),
            'deleted_comments': deleted_comments,
        }

    def add_assignment(self, project_id, requester, template_id, assignee_id=None):
        """Derive and append an assignment for a template that is not on
        the project yet."""
        project = access.get_project(project_id)
        access.require_manager(project, requester)
        template = self.catalog.get(parse_id(template_id, 'template_id'))
        if template is None:
            raise NotFoundError('Template not found')
        if any(a.template_id == template.pk for a in project.assignments.all()):
            raise ConflictError('Template already has an assignment on this project')

        draft = derive(project, template)
        if assignee_id is not None:
            draft.assignee_id = self._get_user(assignee_id, 'assignee_id').pk

        assignment = _build(project, draft)
        with atomic_operation('add assignment',
                              'Template already has an assignment on this project'):
            assignment.save()
        return access.get_visible_assignment(assignment.pk, requester)

    def delete_assignment(self, assignment_id, requester):
        assignment = access.get_visible_assignment(assignment_id, requester)
        access.require_creator(assignment.project, requester,
                               'Only the project creator may delete assignments')
        with atomic_operation('assignment deletion'):
            deleted_comments = self.comments.purge_for([assignment.pk])
            assignment.delete()
        return {'deleted_comments': deleted_comments}

    def stats(self, project_id, requester):
        project, assignments = access.get_visible_project(project_id, requester)
        ids = [a.pk for a in assignments]
        by_status = {}
        for assignment in assignments:
            by_status[assignment.status] = by_status.get(assignment.status, 0) + 1
        week_ago = timezone.now() - timedelta(days=7)
        return {
            'total_assignments': len(assignments),
            'assignments_by_status': by_status,
            'done_assignments': by_status.get(TaskStatus.DONE, 0),
            'important_assignments': sum(1 for a in assignments if a.important),
            'total_comments': self.comments.count_active_for(ids),
            'comments_this_week': self.comments.count_active_for(ids, since=week_ago),
        }

    def recent_comments(self, project_id, requester, limit=None):
        project, assignments = access.get_visible_project(project_id, requester)
        return self.comments.recent_for([a.pk for a in assignments], limit)
