from datetime import datetime
from unittest import mock
import pytz
from django.test import TestCase, override_settings
from eventplan.assignments import AssignmentService
from eventplan.exceptions import NotFoundError, ValidationError
from eventplan.models import ProjectAssignment
from .utils import PROJECT_DATE, make_user, make_template, make_project, assign


class AssignmentMutationTestCase(TestCase):

    def setUp(self):
        self.creator = make_user('creator')
        self.assignee = make_user('assignee')
        self.stranger = make_user('stranger')
        make_template('Book venue', ['wedding'], recommended_start_offset_days=30)
        make_template('Hire band', ['wedding'], is_day_of=True)
        self.project = make_project(self.creator)
        self.venue, self.band = self.project.assignments.all()
        assign(self.venue, self.assignee)
        self.service = AssignmentService()

    def test_set_status(self):
        assignment = self.service.set_status(self.venue.pk, self.creator, 'InProgress')
        self.assertEqual(assignment.status, 'InProgress')
        self.assertEqual(ProjectAssignment.objects.get(pk=self.venue.pk).status, 'InProgress')

    def test_set_same_status_twice(self):
        """A retried status change does not write again."""
        self.service.set_status(self.venue.pk, self.assignee, 'Done')
        with mock.patch.object(ProjectAssignment, 'save') as save:
            assignment = self.service.set_status(self.venue.pk, self.assignee, 'Done')
        save.assert_not_called()
        self.assertEqual(assignment.status, 'Done')

    def test_status_may_go_back(self):
        self.service.set_status(self.venue.pk, self.creator, 'Done')
        assignment = self.service.set_status(self.venue.pk, self.creator, 'Pending')
        self.assertEqual(assignment.status, 'Pending')

    def test_invalid_status(self):
        with self.assertRaises(ValidationError):
            self.service.set_status(self.venue.pk, self.creator, 'Finished')
        with self.assertRaises(ValidationError):
            self.service.set_status(self.venue.pk, self.creator, None)
        self.assertEqual(ProjectAssignment.objects.get(pk=self.venue.pk).status, 'Pending')

    def test_unknown_assignment(self):
        with self.assertRaises(NotFoundError):
            self.service.set_status(999999, self.creator, 'Done')

    def test_invisible_assignment(self):
        with self.assertRaises(NotFoundError):
            self.service.set_status(self.band.pk, self.assignee, 'Done')
        with self.assertRaises(NotFoundError):
            self.service.set_importance(self.venue.pk, self.stranger, True)

    def test_set_importance(self):
        assignment = self.service.set_importance(self.venue.pk, self.creator, True)
        self.assertTrue(assignment.important)
        assignment = self.service.set_importance(self.band.pk, self.creator, False)
        self.assertFalse(assignment.important)

    def test_importance_must_be_boolean(self):
        for value in ('true', 1, None):
            with self.assertRaises(ValidationError):
                self.service.set_importance(self.venue.pk, self.creator, value)

    def test_set_assignee(self):
        assignment = self.service.set_assignee(self.band.pk, self.creator, self.stranger.pk)
        self.assertEqual(assignment.assignee, self.stranger)
        self.assertEqual(self.service.get(self.band.pk, self.stranger), assignment)

    def test_assignee_may_hand_over(self):
        assignment = self.service.set_assignee(self.venue.pk, self.assignee, self.stranger.pk)
        self.assertEqual(assignment.assignee_id, self.stranger.pk)
        with self.assertRaises(NotFoundError):
            self.service.get(self.venue.pk, self.assignee)

    def test_unknown_assignee(self):
        with self.assertRaises(NotFoundError):
            self.service.set_assignee(self.venue.pk, self.creator, 999999)
        with self.assertRaises(ValidationError):
            self.service.set_assignee(self.venue.pk, self.creator, 'someone')

    def test_set_dates(self):
        moment = datetime(2025, 5, 1, 9, 30, tzinfo=pytz.utc)
        assignment = self.service.set_recommended_start_date(
            self.venue.pk, self.creator, '2025-05-01T09:30:00Z')
        self.assertEqual(assignment.recommended_start_date, moment)
        assignment = self.service.set_due_date(self.venue.pk, self.creator, moment)
        self.assertEqual(assignment.due_date, moment)
        assignment = self.service.set_estimated_completion(
            self.venue.pk, self.creator, '2025-05-02')
        self.assertEqual(assignment.estimated_completion,
                         datetime(2025, 5, 2, tzinfo=pytz.utc))

    def test_clear_dates(self):
        assignment = self.service.set_due_date(self.venue.pk, self.creator, None)
        self.assertIsNone(assignment.due_date)
        assignment = self.service.set_estimated_completion(self.venue.pk, self.creator, '')
        self.assertIsNone(assignment.estimated_completion)
        with self.assertRaises(ValidationError):
            self.service.set_recommended_start_date(self.venue.pk, self.creator, None)

    def test_invalid_date(self):
        with self.assertRaises(ValidationError):
            self.service.set_due_date(self.venue.pk, self.creator, 'tomorrow')
        with self.assertRaises(ValidationError):
            self.service.set_due_date(self.venue.pk, self.creator, 12)


class AssignmentListTestCase(TestCase):

    def setUp(self):
        self.creator = make_user('creator')
        self.assignee = make_user('assignee')
        for days in (10, 20, 30):
            make_template(f'Task {days}', ['wedding'], recommended_start_offset_days=days)
        make_template('Day of', ['wedding'], is_day_of=True)
        self.project = make_project(self.creator)
        self.other = make_project(self.assignee, name='Other')
        self.assignments = list(self.project.assignments.all())
        assign(self.assignments[3], self.assignee)
        self.service = AssignmentService()

    def test_creator_lists_own_projects_in_start_order(self):
        result = self.service.list(self.creator)
        self.assertEqual(result['total'], 4)
        starts = [a.recommended_start_date for a in result['assignments']]
        self.assertEqual(starts, sorted(starts))
        self.assertEqual(result['assignments'][-1].recommended_start_date, PROJECT_DATE)

    def test_assignee_sees_own_and_created(self):
        result = self.service.list(self.assignee)
        self.assertEqual(result['total'], 5)
        result = self.service.list(self.assignee, project=self.project.pk)
        self.assertEqual([a.pk for a in result['assignments']], [self.assignments[3].pk])

    def test_filters(self):
        ProjectAssignment.objects.filter(pk=self.assignments[0].pk).update(status='Done')
        self.assertEqual(self.service.list(self.creator, status='Done')['total'], 1)
        self.assertEqual(self.service.list(self.creator, important='true')['total'], 1)
        self.assertEqual(self.service.list(self.creator, important=False)['total'], 3)
        self.assertEqual(self.service.list(self.creator, assignee=self.assignee.pk)['total'], 1)

    def test_invalid_filters(self):
        with self.assertRaises(ValidationError):
            self.service.list(self.creator, status='Unknown')
        with self.assertRaises(ValidationError):
            self.service.list(self.creator, important='maybe')
        with self.assertRaises(ValidationError):
            self.service.list(self.creator, page='first')

    def test_pagination(self):
        result = self.service.list(self.creator, page=2, limit=3)
        self.assertEqual(len(result['assignments']), 1)
        self.assertEqual(result['total_pages'], 2)
        self.assertEqual(result['current_page'], 2)

    @override_settings(EVENTPLAN_PAGE_SIZE=2)
    def test_default_page_size(self):
        result = self.service.list(self.creator)
        self.assertEqual(len(result['assignments']), 2)
        self.assertEqual(result['total_pages'], 2)
