from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models
from .status import TaskStatus


class User(AbstractUser):
    """Identity is owned by the auth layer; the planner only reads the
    global role. Project roles are derived per project."""
    role = models.CharField(max_length=32, default='user')

    @property
    def project_ids(self):
        return list(
            Project.objects.filter(
                models.Q(creator=self) |
                models.Q(editors=self) |
                models.Q(assignments__assignee=self)
            ).distinct().values_list('id', flat=True)
        )


class AssignmentTemplate(models.Model):
    step = models.CharField(max_length=255, blank=True, default='')
    name = models.CharField(max_length=255)
    estimated_duration_hours = models.FloatField(null=True, blank=True)
    # Days before the project date, negative values schedule after it
    recommended_start_offset_days = models.IntegerField(null=True, blank=True)
    is_ongoing = models.BooleanField(default=False)
    is_day_of = models.BooleanField(default=False)
    tags = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=32, default='Pending')

    class Meta:
        ordering = ['id']

    def __str__(self):
        return self.name


class Project(models.Model):
    name = models.CharField(max_length=255)
    date = models.DateTimeField()
    creator = models.ForeignKey(settings.AUTH_USER_MODEL,
                                related_name='created_projects',
                                on_delete=models.CASCADE)
    editors = models.ManyToManyField(settings.AUTH_USER_MODEL,
                                     related_name='edited_projects',
                                     blank=True)
    tags = models.JSONField(default=list)
    budget = models.FloatField(default=0)
    area = models.CharField(max_length=255, blank=True, default='')
    venue = models.CharField(max_length=255, blank=True, default='')
    amount_of_people = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['date', 'id']

    def __str__(self):
        return self.name

    @property
    def assignment_ids(self):
        return [assignment.id for assignment in self.assignments.all()]

    @property
    def editor_ids(self):
        return [editor.id for editor in self.editors.all()]


class ProjectAssignment(models.Model):
    template = models.ForeignKey(AssignmentTemplate,
                                 related_name='derived_assignments',
                                 on_delete=models.PROTECT)
    project = models.ForeignKey(Project,
                                related_name='assignments',
                                on_delete=models.CASCADE)
    assignee = models.ForeignKey(settings.AUTH_USER_MODEL,
                                 related_name='assignments',
                                 null=True,
                                 blank=True,
                                 on_delete=models.SET_NULL)
    recommended_start_date = models.DateTimeField()
    due_date = models.DateTimeField(null=True, blank=True)
    estimated_completion = models.DateTimeField(null=True, blank=True)
    important = models.BooleanField(default=False)
    status = models.CharField(max_length=16,
                              choices=TaskStatus.choices,
                              default=TaskStatus.PENDING)

    class Meta:
        # Creation order is the project's assignment order
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(fields=['project', 'template'],
                                    name='unique_project_template'),
        ]

    def __str__(self):
        return f'{self.template} @ {self.project}'

    @property
    def comment_ids(self):
        return list(
            Comment.objects.active().filter(assignment=self)
            .order_by('created_at', 'id')
            .values_list('id', flat=True)
        )


class CommentQuerySet(models.QuerySet):

    def active(self):
        """The only place soft-deleted comments are filtered out."""
        return self.filter(is_deleted=False)


class Comment(models.Model):
    KINDS = [
        ('comment', 'Comment'),
        ('question', 'Question'),
        ('update', 'Update'),
        ('issue', 'Issue'),
        ('suggestion', 'Suggestion'),
    ]

    assignment = models.ForeignKey(ProjectAssignment,
                                   related_name='comments',
                                   on_delete=models.CASCADE)
    author = models.ForeignKey(settings.AUTH_USER_MODEL,
                               related_name='comments',
                               on_delete=models.CASCADE)
    parent = models.ForeignKey('self',
                               related_name='replies',
                               null=True,
                               blank=True,
                               on_delete=models.CASCADE)
    kind = models.CharField(max_length=16, choices=KINDS, default='comment')
    content = models.CharField(max_length=1000)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    is_edited = models.BooleanField(default=False)
    is_deleted = models.BooleanField(default=False)

    objects = CommentQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['assignment', '-created_at'],
                         name='comment_assignment_recent'),
        ]

    def __str__(self):
        return f'{self.author}: {self.content[:50]}'


class Like(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL,
                             related_name='likes',
                             on_delete=models.CASCADE)
    comment = models.ForeignKey(Comment,
                                related_name='likes',
                                on_delete=models.CASCADE)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('user', 'comment',)
