from django.contrib.auth import authenticate, get_user_model
from django.db import transaction
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView, exception_handler as drf_exception_handler
from . import access
from .assignments import AssignmentService
from .comments import CommentStore
from .exceptions import PlannerError, ConflictError, UnauthorizedError
from .projects import ProjectService
from .serializers import (UserSerializer, CommentSerializer,
                          ProjectSerializer, ProjectAssignmentSerializer,
                          ProjectAssignmentDetailSerializer,
                          DeletedProjectSerializer, ProjectStatsSerializer)
from .validation import require


def exception_handler(exc, context):
    """Render planner errors as {"error": kind, "message": message}.
    Everything else goes through DRF's default handler."""
    if isinstance(exc, PlannerError):
        return Response(
            {'error': exc.kind, 'message': exc.message},
            status=exc.status_code,
        )
    return drf_exception_handler(exc, context)


class PlannerView(APIView):
    permission_classes = [IsAuthenticated]
    projects = None
    assignments = None
    comments = None

    def get_exception_handler(self):
        return exception_handler

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.comment_store = self.comments or CommentStore()
        self.project_service = self.projects or ProjectService(comments=self.comment_store)
        self.assignment_service = self.assignments or AssignmentService()

    def project_response(self, project, assignments=None, status_code=status.HTTP_200_OK):
        if assignments is None:
            assignments = access.visible_assignments(project, self.request.user)
        data = ProjectSerializer(project, context={'assignments': assignments}).data
        return Response(data, status=status_code)


class SignupView(PlannerView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        email = require(request.data.get('email'), 'email')
        password = require(request.data.get('password'), 'password')
        User = get_user_model()
        if User.objects.filter(username=email).exists():
            raise ConflictError('Email already in use')
        with transaction.atomic():
            user = User.objects.create_user(
                username=email,
                email=email,
                password=password,
                role=request.data.get('role') or 'user',
            )
            token = Token.objects.create(user=user)
        return Response({'token': token.key, 'user': UserSerializer(user).data},
                        status=status.HTTP_201_CREATED)


class LoginView(PlannerView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        email = require(request.data.get('email'), 'email')
        password = require(request.data.get('password'), 'password')
        user = authenticate(request, username=email, password=password)
        if user is None:
            raise UnauthorizedError('Invalid email or password')
        token, _ = Token.objects.get_or_create(user=user)
        return Response({'token': token.key, 'user': UserSerializer(user).data})


class MeView(PlannerView):

    def get(self, request):
        data = UserSerializer(request.user).data
        data['project_ids'] = request.user.project_ids
        return Response(data)


class ProjectListView(PlannerView):

    def get(self, request):
        visible = access.visible_projects(request.user)
        context = {'assignments': {project.pk: assignments for project, assignments in visible}}
        data = ProjectSerializer([p for p, _ in visible], many=True, context=context).data
        return Response(data)

    def post(self, request):
        data = request.data
        project = self.project_service.create_project(
            request.user,
            name=data.get('name'),
            date=data.get('date'),
            tags=data.get('tags'),
            budget=data.get('budget', 0),
            **{f: data[f] for f in ('area', 'venue', 'amount_of_people') if f in data}
        )
        return self.project_response(project, status_code=status.HTTP_201_CREATED)


class ProjectDetailView(PlannerView):

    def get(self, request, project_id):
        project, assignments = access.get_visible_project(project_id, request.user)
        return self.project_response(project, assignments)

    def patch(self, request, project_id):
        project = self.project_service.update_project(project_id, request.user, request.data)
        return self.project_response(project)

    def delete(self, request, project_id):
        result = self.project_service.delete_project(project_id, request.user)
        return Response(DeletedProjectSerializer(result).data)


class ProjectStatsView(PlannerView):

    def get(self, request, project_id):
        stats = self.project_service.stats(project_id, request.user)
        return Response(ProjectStatsSerializer(stats).data)


class ProjectRecentCommentsView(PlannerView):

    def get(self, request, project_id):
        comments = self.project_service.recent_comments(
            project_id, request.user, request.query_params.get('limit'))
        return Response(CommentSerializer(comments, many=True).data)


class ProjectEditorsView(PlannerView):

    def post(self, request, project_id):
        project = self.project_service.add_editor(
            project_id, request.user, request.data.get('editor_id'))
        return self.project_response(project)


class ProjectEditorDetailView(PlannerView):

    def delete(self, request, project_id, editor_id):
        project = self.project_service.remove_editor(project_id, request.user, editor_id)
        return self.project_response(project)


class ProjectAssignmentsView(PlannerView):

    def post(self, request, project_id):
        assignment = self.project_service.add_assignment(
            project_id,
            request.user,
            request.data.get('template_id'),
            request.data.get('assignee_id'),
        )
        return Response(ProjectAssignmentDetailSerializer(assignment).data,
                        status=status.HTTP_201_CREATED)


class AssignmentListView(PlannerView):

    def get(self, request):
        params = request.query_params
        result = self.assignment_service.list(
            request.user,
            status=params.get('status'),
            important=params.get('important'),
            assignee=params.get('assignee'),
            project=params.get('project'),
            page=params.get('page', 1),
            limit=params.get('limit'),
        )
        result['assignments'] = ProjectAssignmentSerializer(
            result['assignments'], many=True).data
        return Response(result)


class AssignmentDetailView(PlannerView):

    def get(self, request, assignment_id):
        assignment = self.assignment_service.get(assignment_id, request.user)
        return Response(ProjectAssignmentDetailSerializer(assignment).data)

    def delete(self, request, assignment_id):
        result = self.project_service.delete_assignment(assignment_id, request.user)
        return Response(result)


class AssignmentFieldView(PlannerView):
    """PATCH a single assignment field. `field` names the request key and
    `setter` the AssignmentService method, both given in urls.py."""
    field = None
    setter = None

    def patch(self, request, assignment_id):
        if self.field not in request.data:
            value = None
        else:
            value = request.data[self.field]
        setter = getattr(self.assignment_service, self.setter)
        assignment = setter(assignment_id, request.user, value)
        return Response(ProjectAssignmentDetailSerializer(assignment).data)


class CommentListView(PlannerView):

    def get(self, request, assignment_id):
        assignment = self.assignment_service.get(assignment_id, request.user)
        params = request.query_params
        if params.get('all') == 'true':
            result = self.comment_store.list_comments(assignment)
        else:
            result = self.comment_store.list_comments(
                assignment, params.get('page'), params.get('limit'))
        result['comments'] = CommentSerializer(result['comments'], many=True).data
        return Response(result)

    def post(self, request, assignment_id):
        assignment = self.assignment_service.get(assignment_id, request.user)
        self.comment_store.add_comment(
            assignment,
            request.user,
            request.data.get('content'),
            kind=request.data.get('kind') or 'comment',
            parent_id=request.data.get('parent'),
        )
        assignment = self.assignment_service.get(assignment_id, request.user)
        return Response(ProjectAssignmentDetailSerializer(assignment).data,
                        status=status.HTTP_201_CREATED)


class CommentDetailView(PlannerView):

    def patch(self, request, assignment_id, comment_id):
        assignment = self.assignment_service.get(assignment_id, request.user)
        self.comment_store.edit_comment(
            assignment, comment_id, request.user, request.data.get('content'))
        return Response(ProjectAssignmentDetailSerializer(assignment).data)

    def delete(self, request, assignment_id, comment_id):
        assignment = self.assignment_service.get(assignment_id, request.user)
        self.comment_store.delete_comment(assignment, comment_id, request.user)
        return Response(ProjectAssignmentDetailSerializer(assignment).data)


class CommentLikeView(PlannerView):

    def post(self, request, assignment_id, comment_id):
        assignment = self.assignment_service.get(assignment_id, request.user)
        liked = self.comment_store.toggle_like(request.user, assignment, comment_id)
        return Response({
            'liked': liked,
            'likes_count': self.comment_store.count_likes(comment_id),
        })
