"""Comment and like storage attached to project assignments.

The planner core only reads counts from here. Soft-deleted comments are
excluded through `Comment.objects.active()`; hard deletes happen only
when the owning assignment or project goes away.
"""
import math
from django.conf import settings
from .exceptions import ForbiddenError, NotFoundError, ValidationError
from .models import Comment, Like
from .transaction import atomic_operation
from .validation import parse_paging, parse_text, parse_whole_number


def _content(value):
    return parse_text(value, 'content', Comment._meta.get_field('content').max_length)


class CommentStore:

    def __init__(self, comments=None, likes=None):
        self._comments = comments
        self._likes = likes

    @property
    def comments(self):
        return self._comments if self._comments is not None else Comment.objects

    @property
    def active(self):
        return self.comments.active()

    @property
    def likes(self):
        return self._likes if self._likes is not None else Like.objects

    def count_active_comments(self, assignment_id):
        return self.active.filter(assignment_id=assignment_id).count()

    def count_likes(self, comment_id):
        return self.likes.filter(comment_id=comment_id).count()

    def count_active_for(self, assignment_ids, since=None):
        qs = self.active.filter(assignment_id__in=list(assignment_ids))
        if since is not None:
            qs = qs.filter(created_at__gte=since)
        return qs.count()

    def recent_for(self, assignment_ids, limit=None):
        if limit is None or limit == '':
            limit = getattr(settings, 'EVENTPLAN_RECENT_COMMENTS_LIMIT', 10)
        limit = parse_whole_number(limit, 'limit', minimum=0)
        return list(
            self.active.filter(assignment_id__in=list(assignment_ids))
            .select_related('author', 'assignment__template')
            .order_by('-created_at', '-id')[:limit]
        )

    def list_comments(self, assignment, page=None, limit=None):
        qs = self.active.filter(assignment=assignment) \
                        .select_related('author').order_by('-created_at', '-id')
        if page is None and limit is None:
            comments = list(qs)
            return {
                'comments': comments,
                'total': len(comments),
                'paginated': False,
            }

        page, limit = parse_paging(page, limit, 20)
        total = qs.count()
        offset = (page - 1) * limit
        return {
            'comments': list(qs[offset:offset + limit]),
            'total_pages': math.ceil(total / limit),
            'current_page': page,
            'total': total,
            'paginated': True,
        }

    def _get(self, assignment, comment_id):
        try:
            return self.active.get(id=comment_id, assignment=assignment)
        except (Comment.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('Comment not found')

    def add_comment(self, assignment, author, content, kind='comment', parent_id=None):
        content = _content(content)
        if kind not in dict(Comment.KINDS):
            raise ValidationError(f'Invalid comment kind "{kind}"')
        parent = None
        if parent_id is not None:
            parent = self._get(assignment, parent_id)
        with atomic_operation('add comment'):
            return self.comments.create(
                assignment=assignment,
                author=author,
                content=content,
                kind=kind,
                parent=parent,
            )

    def edit_comment(self, assignment, comment_id, author, content):
        content = _content(content)
        comment = self._get(assignment, comment_id)
        if comment.author_id != author.pk:
            raise ForbiddenError('Only the author may edit a comment')
        comment.content = content
        comment.is_edited = True
        with atomic_operation('edit comment'):
            comment.save(update_fields=['content', 'is_edited', 'updated_at'])
        return comment

    def delete_comment(self, assignment, comment_id, requester):
        comment = self._get(assignment, comment_id)
        if requester.pk not in (comment.author_id, assignment.project.creator_id):
            raise ForbiddenError('Only the author or the project creator may delete a comment')
        comment.is_deleted = True
        with atomic_operation('delete comment'):
            comment.save(update_fields=['is_deleted', 'updated_at'])
        return comment

    def toggle_like(self, user, assignment, comment_id):
        """Like the comment, or unlike it if the user already does.
        Returns True when the comment ends up liked."""
        comment = self._get(assignment, comment_id)
        with atomic_operation('toggle like', 'Comment already liked'):
            deleted, _ = self.likes.filter(user=user, comment=comment).delete()
            if deleted:
                return False
            self.likes.create(user=user, comment=comment)
            return True

    def purge_for(self, assignment_ids):
        """Hard delete every comment (deleted or not) of the assignments,
        returns how many comments were removed. Must run inside the
        caller's transaction."""
        qs = self.comments.filter(assignment_id__in=list(assignment_ids))
        count = qs.count()
        qs.delete()
        return count
