from django.urls import path
from . import views

app_name = 'eventplan'


def field_view(field, setter):
    return views.AssignmentFieldView.as_view(field=field, setter=setter)


urlpatterns = [
    path('users/signup/', views.SignupView.as_view(), name='signup'),
    path('users/login/', views.LoginView.as_view(), name='login'),
    path('users/me/', views.MeView.as_view(), name='me'),

    path('projects/', views.ProjectListView.as_view(), name='project-list'),
    path('projects/<int:project_id>/', views.ProjectDetailView.as_view(), name='project-detail'),
    path('projects/<int:project_id>/stats/', views.ProjectStatsView.as_view(), name='project-stats'),
    path('projects/<int:project_id>/recent-comments/', views.ProjectRecentCommentsView.as_view(),
         name='project-recent-comments'),
    path('projects/<int:project_id>/editors/', views.ProjectEditorsView.as_view(),
         name='project-editors'),
    path('projects/<int:project_id>/editors/<int:editor_id>/', views.ProjectEditorDetailView.as_view(),
         name='project-editor-detail'),
    path('projects/<int:project_id>/assignments/', views.ProjectAssignmentsView.as_view(),
         name='project-assignments'),

    path('assignments/', views.AssignmentListView.as_view(), name='assignment-list'),
    path('assignments/<int:assignment_id>/', views.AssignmentDetailView.as_view(),
         name='assignment-detail'),
    path('assignments/<int:assignment_id>/status/',
         field_view('status', 'set_status'), name='assignment-status'),
    path('assignments/<int:assignment_id>/importance/',
         field_view('important', 'set_importance'), name='assignment-importance'),
    path('assignments/<int:assignment_id>/assignee/',
         field_view('assignee', 'set_assignee'), name='assignment-assignee'),
    path('assignments/<int:assignment_id>/recommended-start-date/',
         field_view('recommended_start_date', 'set_recommended_start_date'),
         name='assignment-recommended-start-date'),
    path('assignments/<int:assignment_id>/due-date/',
         field_view('due_date', 'set_due_date'), name='assignment-due-date'),
    path('assignments/<int:assignment_id>/estimated-completion/',
         field_view('estimated_completion', 'set_estimated_completion'),
         name='assignment-estimated-completion'),
    path('assignments/<int:assignment_id>/comments/', views.CommentListView.as_view(),
         name='assignment-comments'),
    path('assignments/<int:assignment_id>/comments/<int:comment_id>/',
         views.CommentDetailView.as_view(), name='assignment-comment-detail'),
    path('assignments/<int:assignment_id>/comments/<int:comment_id>/like/',
         views.CommentLikeView.as_view(), name='assignment-comment-like'),
]
