"""
Role-scoped visibility of a project's assignments.

A requester's relationship to a project is resolved in this order:

1. creator: sees every assignment of the project.
2. editor, or assignee of at least one assignment: sees only the
   assignments assigned to them. Editors administer the project but do not
   see other people's tasks.
3. anything else: the project does not exist for this requester.
   Lookups answer NotFoundError, never ForbiddenError, so existence is
   not leaked.

Project listings drop non-creator projects whose visible list is empty.
"""
from django.db.models import Q, Prefetch
from .exceptions import ForbiddenError, NotFoundError
from .models import Project, ProjectAssignment

CREATOR = 'creator'
EDITOR = 'editor'
ASSIGNEE = 'assignee'


def _id(user):
    return getattr(user, 'pk', user)


def assignments_queryset():
    return ProjectAssignment.objects.select_related('template', 'assignee')


def projects_queryset():
    return Project.objects.select_related('creator').prefetch_related(
        'editors',
        Prefetch('assignments', queryset=assignments_queryset()),
    )


def relationship(project, requester, assignments=None):
    requester_id = _id(requester)
    if requester_id is None:
        return None
    if project.creator_id == requester_id:
        return CREATOR
    if requester_id in project.editor_ids:
        return EDITOR
    if assignments is None:
        assignments = project.assignments.all()
    if any(a.assignee_id == requester_id for a in assignments):
        return ASSIGNEE
    return None


def visible_assignments(project, requester, assignments=None):
    """The assignments of `project` that `requester` may see."""
    requester_id = _id(requester)
    if assignments is None:
        assignments = list(project.assignments.all())
    role = relationship(project, requester_id, assignments)
    if role is None:
        raise NotFoundError('Project not found')
    if role == CREATOR:
        return list(assignments)
    return [a for a in assignments if a.assignee_id == requester_id]


def visible_projects(requester):
    """List (project, visible assignments) pairs for every project the
    requester has a visibility relationship with."""
    requester_id = _id(requester)
    candidates = projects_queryset().filter(
        Q(creator_id=requester_id) |
        Q(editors__id=requester_id) |
        Q(assignments__assignee_id=requester_id)
    ).distinct()

    result = []
    for project in candidates:
        assignments = visible_assignments(project, requester_id)
        if project.creator_id != requester_id and not assignments:
            continue
        result.append((project, assignments))
    return result


def get_project(project_id, queryset=None):
    queryset = queryset if queryset is not None else projects_queryset()
    try:
        return queryset.get(id=project_id)
    except (Project.DoesNotExist, ValueError, TypeError):
        raise NotFoundError('Project not found')


def get_visible_project(project_id, requester):
    project = get_project(project_id)
    return project, visible_assignments(project, requester)


def require_role(project, requester, allowed, message):
    """Raise unless the requester's role on `project` is in `allowed`.

    Requesters with no relationship get NotFoundError, the others
    ForbiddenError.
    """
    role = relationship(project, requester)
    if role is None:
        raise NotFoundError('Project not found')
    if role not in allowed:
        raise ForbiddenError(message)
    return role


def require_creator(project, requester, message='Only the project creator may do this'):
    return require_role(project, requester, (CREATOR,), message)


def require_manager(project, requester, message='Only the project creator or an editor may do this'):
    return require_role(project, requester, (CREATOR, EDITOR), message)


def can_see_assignment(assignment, requester):
    requester_id = _id(requester)
    return requester_id is not None and (
        assignment.project.creator_id == requester_id or
        assignment.assignee_id == requester_id
    )


def get_visible_assignment(assignment_id, requester, queryset=None):
    queryset = queryset if queryset is not None else assignments_queryset()
    try:
        assignment = queryset.select_related('project').get(id=assignment_id)
    except (ProjectAssignment.DoesNotExist, ValueError, TypeError):
        raise NotFoundError('Assignment not found')
    if not can_see_assignment(assignment, requester):
        raise NotFoundError('Assignment not found')
    return assignment
