"""Narrow, single-field mutations of project assignments.

Each mutation checks that the requester can see the assignment, writes
one field and returns the assignment re-read from storage. Concurrent
writes to the same field are last-write-wins.
"""
import logging
import math
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db.models import Q
from . import access
from .exceptions import NotFoundError
from .status import transition, parse_status
from .transaction import atomic_operation
from .validation import parse_bool, parse_moment, parse_id, parse_paging

logger = logging.getLogger(__name__)

_TRUE = ('true', '1', 'yes')
_FALSE = ('false', '0', 'no')


class AssignmentService:

    def __init__(self, assignments=None, users=None):
        self._assignments = assignments
        self._users = users

    @property
    def assignments(self):
        if self._assignments is not None:
            return self._assignments
        return access.assignments_queryset()

    @property
    def users(self):
        return self._users if self._users is not None else get_user_model().objects

    def get(self, assignment_id, requester):
        return access.get_visible_assignment(assignment_id, requester, self.assignments)

    def list(self, requester, status=None, important=None, assignee=None,
             project=None, page=1, limit=None):
        """Assignments visible to `requester` across all projects, ordered
        by recommended start date and paginated."""
        requester_id = getattr(requester, 'pk', requester)
        qs = self.assignments.select_related('project').filter(
            Q(project__creator_id=requester_id) | Q(assignee_id=requester_id)
        )

        if status:
            qs = qs.filter(status=parse_status(status))
        if important is not None and important != '':
            if isinstance(important, str):
                if important.lower() in _TRUE:
                    important = True
                elif important.lower() in _FALSE:
                    important = False
            qs = qs.filter(important=parse_bool(important, 'important'))
        if assignee:
            qs = qs.filter(assignee_id=parse_id(assignee, 'assignee'))
        if project:
            qs = qs.filter(project_id=parse_id(project, 'project'))

        page, limit = parse_paging(page, limit, getattr(settings, 'EVENTPLAN_PAGE_SIZE', 10))

        qs = qs.order_by('recommended_start_date', 'id')
        total = qs.count()
        offset = (page - 1) * limit
        return {
            'assignments': list(qs[offset:offset + limit]),
            'total_pages': math.ceil(total / limit),
            'current_page': page,
            'total': total,
        }

    def _write(self, assignment, field, value, description):
        setattr(assignment, field, value)
        with atomic_operation(description):
            assignment.save(update_fields=[field])
        return self.assignments.select_related('project').get(pk=assignment.pk)

    def set_status(self, assignment_id, requester, status):
        assignment = self.get(assignment_id, requester)
        new_status, changed = transition(assignment.status, status)
        if not changed:
            return assignment
        logger.debug('Assignment %s status %s -> %s',
                     assignment.pk, assignment.status, new_status)
        return self._write(assignment, 'status', new_status, 'status change')

    def set_importance(self, assignment_id, requester, important):
        important = parse_bool(important, 'important')
        assignment = self.get(assignment_id, requester)
        return self._write(assignment, 'important', important, 'importance change')

    def set_assignee(self, assignment_id, requester, assignee_id):
        assignee_id = parse_id(assignee_id, 'assignee')
        assignment = self.get(assignment_id, requester)
        if not self.users.filter(pk=assignee_id).exists():
            raise NotFoundError('Assignee user not found')
        return self._write(assignment, 'assignee_id', assignee_id, 'assignee change')

    def set_recommended_start_date(self, assignment_id, requester, value):
        start = parse_moment(value, 'recommended_start_date')
        assignment = self.get(assignment_id, requester)
        return self._write(assignment, 'recommended_start_date', start,
                           'recommended start date change')

    def set_due_date(self, assignment_id, requester, value):
        due = parse_moment(value, 'due_date', allow_null=True)
        assignment = self.get(assignment_id, requester)
        return self._write(assignment, 'due_date', due, 'due date change')

    def set_estimated_completion(self, assignment_id, requester, value):
        completion = parse_moment(value, 'estimated_completion', allow_null=True)
        assignment = self.get(assignment_id, requester)
        return self._write(assignment, 'estimated_completion', completion,
                           'estimated completion change')
