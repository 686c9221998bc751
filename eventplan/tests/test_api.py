from django.test import TestCase
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient
from eventplan.models import Project, ProjectAssignment
from .utils import make_user, make_template


class ApiTestCase(TestCase):

    def setUp(self):
        self.creator = make_user('creator')
        self.assignee = make_user('assignee')
        self.stranger = make_user('stranger')
        self.venue = make_template('Book venue', ['wedding'], recommended_start_offset_days=30,
                                   estimated_duration_hours=2)
        self.band = make_template('Hire band', ['wedding'], is_day_of=True)
        make_template('Order cake', ['birthday'])

    def client_for(self, user):
        client = APIClient()
        token, _ = Token.objects.get_or_create(user=user)
        client.credentials(HTTP_AUTHORIZATION='Bearer ' + token.key)
        return client

    def create_project(self, **data):
        payload = {'name': 'Wedding', 'date': '2025-06-20T18:00:00Z', 'tags': ['wedding']}
        payload.update(data)
        return self.client_for(self.creator).post('/api/projects/', payload, format='json')

    def test_create_project(self):
        response = self.create_project(budget=5000, venue='Garden')
        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['name'], 'Wedding')
        self.assertEqual(data['date'], '2025-06-20T18:00:00Z')
        self.assertEqual(data['creator']['id'], self.creator.pk)
        self.assertEqual(len(data['assignment_ids']), 2)
        venue, band = data['assignments']
        self.assertEqual(venue['template']['name'], 'Book venue')
        self.assertEqual(venue['recommended_start_date'], '2025-05-21T18:00:00Z')
        self.assertEqual(venue['due_date'], '2025-05-21T20:00:00Z')
        self.assertEqual(band['due_date'], '2025-06-20T18:00:00Z')
        self.assertIsNone(band['estimated_completion'])
        self.assertTrue(band['important'])
        self.assertEqual(band['status'], 'Pending')

    def test_create_project_validation(self):
        response = self.create_project(tags=[])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'error/invalid')
        self.assertFalse(Project.objects.exists())

    def test_non_finite_budget_is_invalid(self):
        response = self.create_project(budget='nan')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'error/invalid')
        self.assertFalse(Project.objects.exists())

    def test_unauthenticated(self):
        response = APIClient().get('/api/projects/')
        self.assertEqual(response.status_code, 401)
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION='Bearer nope')
        self.assertEqual(client.get('/api/projects/').status_code, 401)

    def test_project_visibility(self):
        project_id = self.create_project().json()['id']
        response = self.client_for(self.stranger).get(f'/api/projects/{project_id}/')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['error'], 'error/not-found')
        self.assertEqual(self.client_for(self.stranger).get('/api/projects/').json(), [])

        assignment = ProjectAssignment.objects.filter(project_id=project_id).first()
        assignment.assignee = self.assignee
        assignment.save()
        data = self.client_for(self.assignee).get(f'/api/projects/{project_id}/').json()
        self.assertEqual(data['assignment_ids'], [assignment.pk])
        listed = self.client_for(self.assignee).get('/api/projects/').json()
        self.assertEqual([p['id'] for p in listed], [project_id])

    def test_editors(self):
        project_id = self.create_project().json()['id']
        url = f'/api/projects/{project_id}/editors/'
        client = self.client_for(self.creator)
        response = client.post(url, {'editor_id': self.assignee.pk}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual([e['id'] for e in response.json()['editors']], [self.assignee.pk])

        response = client.post(url, {'editor_id': self.assignee.pk}, format='json')
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['error'], 'error/conflict')

        response = self.client_for(self.assignee).delete(f'{url}{self.assignee.pk}/')
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()['error'], 'error/forbidden')

        response = client.delete(f'{url}{self.stranger.pk}/')
        self.assertEqual(response.status_code, 200)

    def test_delete_project(self):
        project_id = self.create_project().json()['id']
        response = self.client_for(self.creator).delete(f'/api/projects/{project_id}/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'deleted_assignments': 2, 'deleted_comments': 0})
        response = self.client_for(self.creator).get(f'/api/projects/{project_id}/')
        self.assertEqual(response.status_code, 404)

    def test_update_project(self):
        project_id = self.create_project().json()['id']
        response = self.client_for(self.creator).patch(
            f'/api/projects/{project_id}/', {'name': 'Garden wedding'}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['name'], 'Garden wedding')

    def test_assignment_fields(self):
        data = self.create_project().json()
        assignment_id = data['assignment_ids'][0]
        client = self.client_for(self.creator)
        base = f'/api/assignments/{assignment_id}/'

        response = client.patch(base + 'status/', {'status': 'InProgress'}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'InProgress')
        response = client.patch(base + 'status/', {'status': 'InProgress'}, format='json')
        self.assertEqual(response.status_code, 200)

        response = client.patch(base + 'status/', {'status': 'Finished'}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'error/invalid')

        response = client.patch(base + 'importance/', {'important': True}, format='json')
        self.assertTrue(response.json()['important'])

        response = client.patch(base + 'due-date/', {'due_date': None}, format='json')
        self.assertIsNone(response.json()['due_date'])

        response = client.patch(base + 'assignee/', {'assignee': self.assignee.pk}, format='json')
        self.assertEqual(response.json()['assignee']['id'], self.assignee.pk)
        response = self.client_for(self.assignee).get(base)
        self.assertEqual(response.status_code, 200)

        response = self.client_for(self.stranger).patch(
            base + 'status/', {'status': 'Done'}, format='json')
        self.assertEqual(response.status_code, 404)

    def test_assignment_list(self):
        self.create_project()
        response = self.client_for(self.creator).get('/api/assignments/', {'important': 'true'})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['total'], 1)
        self.assertEqual(data['assignments'][0]['template']['name'], 'Hire band')

    def test_manual_assignment(self):
        cake = make_template('Order cupcakes', ['birthday'])
        project_id = self.create_project().json()['id']
        url = f'/api/projects/{project_id}/assignments/'
        client = self.client_for(self.creator)
        response = client.post(url, {'template_id': cake.pk}, format='json')
        self.assertEqual(response.status_code, 201)
        response = client.post(url, {'template_id': cake.pk}, format='json')
        self.assertEqual(response.status_code, 409)

    def test_comments(self):
        data = self.create_project().json()
        assignment_id = data['assignment_ids'][0]
        project_id = data['id']
        client = self.client_for(self.creator)
        url = f'/api/assignments/{assignment_id}/comments/'

        response = client.post(url, {'content': 'Called the venue'}, format='json')
        self.assertEqual(response.status_code, 201)
        comment = response.json()['comments'][0]
        self.assertEqual(comment['content'], 'Called the venue')

        response = client.post(f'{url}{comment["id"]}/like/')
        self.assertEqual(response.json(), {'liked': True, 'likes_count': 1})

        response = client.get(url, {'page': 1, 'limit': 5})
        self.assertEqual(response.json()['total'], 1)

        stats = client.get(f'/api/projects/{project_id}/stats/').json()
        self.assertEqual(stats['total_comments'], 1)
        self.assertEqual(stats['total_assignments'], 2)

        recent = client.get(f'/api/projects/{project_id}/recent-comments/').json()
        self.assertEqual([c['content'] for c in recent], ['Called the venue'])

        response = client.delete(f'{url}{comment["id"]}/')
        self.assertEqual(response.json()['comments'], [])

    def test_malformed_comment_input(self):
        data = self.create_project().json()
        assignment_id = data['assignment_ids'][0]
        client = self.client_for(self.creator)
        url = f'/api/assignments/{assignment_id}/comments/'

        response = client.post(url, {'content': 5}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'error/invalid')

        response = client.get(url, {'page': 'abc'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'error/invalid')

        response = client.get(f'/api/projects/{data["id"]}/recent-comments/', {'limit': -1})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'error/invalid')


class UserApiTestCase(TestCase):

    def test_signup_and_login(self):
        client = APIClient()
        response = client.post('/api/users/signup/',
                               {'email': 'planner@example.com', 'password': 'pw'}, format='json')
        self.assertEqual(response.status_code, 201)
        token = response.json()['token']

        response = client.post('/api/users/signup/',
                               {'email': 'planner@example.com', 'password': 'pw'}, format='json')
        self.assertEqual(response.status_code, 409)

        response = client.post('/api/users/login/',
                               {'email': 'planner@example.com', 'password': 'pw'}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['token'], token)

        response = client.post('/api/users/login/',
                               {'email': 'planner@example.com', 'password': 'bad'}, format='json')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['error'], 'error/unauthorized')

        client.credentials(HTTP_AUTHORIZATION='Bearer ' + token)
        response = client.get('/api/users/me/')
        self.assertEqual(response.json()['email'], 'planner@example.com')
        self.assertEqual(response.json()['project_ids'], [])
