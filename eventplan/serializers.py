from django.contrib.auth import get_user_model
from rest_framework import serializers
from .models import AssignmentTemplate, Project, ProjectAssignment, Comment


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = get_user_model()
        fields = ('id', 'email', 'role')


class AssignmentTemplateSerializer(serializers.ModelSerializer):
    class Meta:
        model = AssignmentTemplate
        fields = (
            'id',
            'step',
            'name',
            'estimated_duration_hours',
            'recommended_start_offset_days',
            'is_ongoing',
            'is_day_of',
            'tags',
            'status',
        )


class CommentSerializer(serializers.ModelSerializer):
    author = UserSerializer()
    likes_count = serializers.SerializerMethodField()

    class Meta:
        model = Comment
        fields = ('id', 'assignment', 'author', 'parent', 'kind', 'content',
                  'created_at', 'updated_at', 'is_edited', 'likes_count')

    def get_likes_count(self, comment):
        return comment.likes.count()


class ProjectAssignmentSerializer(serializers.ModelSerializer):
    template = AssignmentTemplateSerializer()
    assignee = UserSerializer(allow_null=True)
    comment_ids = serializers.ListField(child=serializers.IntegerField(), read_only=True)

    class Meta:
        model = ProjectAssignment
        fields = (
            'id',
            'project',
            'template',
            'assignee',
            'recommended_start_date',
            'due_date',
            'estimated_completion',
            'important',
            'status',
            'comment_ids',
        )


class ProjectAssignmentDetailSerializer(ProjectAssignmentSerializer):
    comments = serializers.SerializerMethodField()

    class Meta(ProjectAssignmentSerializer.Meta):
        fields = ProjectAssignmentSerializer.Meta.fields + ('comments',)

    def get_comments(self, assignment):
        comments = Comment.objects.active().filter(assignment=assignment) \
                                           .select_related('author')
        return CommentSerializer(comments, many=True).data


class ProjectSerializer(serializers.ModelSerializer):
    """Serializes a project with the assignments passed in the
    `assignments` context entry, already scoped to the requester."""
    creator = UserSerializer()
    editors = UserSerializer(many=True)
    assignment_ids = serializers.SerializerMethodField()
    assignments = serializers.SerializerMethodField()

    class Meta:
        model = Project
        fields = (
            'id',
            'name',
            'date',
            'creator',
            'editors',
            'tags',
            'budget',
            'area',
            'venue',
            'amount_of_people',
            'assignment_ids',
            'assignments',
        )

    def _assignments(self, project):
        scoped = self.context.get('assignments')
        if scoped is None:
            return []
        if isinstance(scoped, dict):
            return scoped.get(project.pk, [])
        return scoped

    def get_assignment_ids(self, project):
        return [a.pk for a in self._assignments(project)]

    def get_assignments(self, project):
        return ProjectAssignmentSerializer(self._assignments(project), many=True).data


class DeletedProjectSerializer(serializers.Serializer):
    deleted_assignments = serializers.IntegerField()
    deleted_comments = serializers.IntegerField()


class ProjectStatsSerializer(serializers.Serializer):
    total_assignments = serializers.IntegerField()
    assignments_by_status = serializers.DictField(child=serializers.IntegerField())
    done_assignments = serializers.IntegerField()
    important_assignments = serializers.IntegerField()
    total_comments = serializers.IntegerField()
    comments_this_week = serializers.IntegerField()
