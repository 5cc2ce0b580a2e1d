import io

import openpyxl

SUBJECT_FORM = {
    "subjectName": "Algebra",
    "faculty": ["7"],
    "duration": "2",
    "lecturesPerWeek": "3",
    "sectionScope": "SPECIFIC",
    "sections": ["1", "2"],
}


def add_subject(client, **overrides):
    data = dict(SUBJECT_FORM)
    data.update(overrides)
    return client.post('/subjects', data=data, follow_redirects=True)


class TestPages:
    def test_index_loads_reference_data(self, client, fake_client):
        response = client.get('/')
        assert response.status_code == 200
        assert b'Dr. Rao' in response.data
        assert fake_client.reference_calls == 1
        assert response.headers['X-Frame-Options'] == 'DENY'

    def test_index_shows_load_error(self, client, fake_client):
        fake_client.fail_reference = True
        response = client.get('/')
        assert b'Failed to load reference data' in response.data

    def test_add_then_update_subject(self, client):
        client.get('/')
        response = add_subject(client)
        assert b'Subject added to queue.' in response.data

        response = add_subject(client, sections=["2", "1"], lecturesPerWeek="4")
        assert b'Subject updated in queue.' in response.data
        assert response.data.count(b'class="queue-item-card"') == 1

    def test_validation_error_keeps_queue(self, client):
        client.get('/')
        response = add_subject(client, sections=[])
        assert b'Please select at least one section' in response.data
        assert b'No subjects queued.' in response.data

    def test_submission_blocked_until_catalog_loaded(self, client, fake_client):
        fake_client.fail_reference = True
        client.get('/')
        response = add_subject(client)
        assert b'Reference data has not been loaded yet' in response.data

    def test_remove_subject(self, client):
        client.get('/')
        add_subject(client)
        response = client.post('/subjects/0/remove', follow_redirects=True)
        assert b'No subjects queued.' in response.data

    def test_generate_and_view_section(self, client, fake_client):
        client.get('/')
        add_subject(client)
        response = client.post('/generate', follow_redirects=True)
        assert b'Timetable generated successfully!' in response.data
        assert b'No eligible faculty could assign the lecture.' in response.data
        assert len(fake_client.sent[0]) == 6

        response = client.get('/?section=S1')
        body = response.data.decode().split('<tbody>')[1]
        assert body.index('Physics') < body.index('Algebra')

    def test_generate_empty_queue(self, client, fake_client):
        response = client.post('/generate', follow_redirects=True)
        assert b'Please add at least one subject to the queue' in response.data
        assert fake_client.sent == []

    def test_generate_failure_keeps_previous_result(self, client, fake_client):
        client.get('/')
        add_subject(client)
        client.post('/generate')
        fake_client.fail_generate = True

        response = client.post('/generate', follow_redirects=True)

        assert b'Failed to generate timetable. Please try again later.' in response.data
        assert b'sectionSelect' in response.data

    def test_export(self, client):
        client.get('/')
        add_subject(client)
        client.post('/generate')

        response = client.get('/timetable/export?section=S2')

        assert response.status_code == 200
        assert 'timetable_S2.xlsx' in response.headers['Content-Disposition']
        ws = openpyxl.load_workbook(io.BytesIO(response.data)).active
        assert ws.cell(row=2, column=1).value == 'Physics'

    def test_export_without_result_redirects(self, client):
        response = client.get('/timetable/export?section=S1')
        assert response.status_code == 302


class TestApi:
    def test_reference_data(self, client):
        data = client.get('/api/reference-data').get_json()
        assert data['success']
        assert [s['name'] for s in data['sections']] == ['S1', 'S2', 'S3']

    def test_reference_data_failure(self, client, fake_client):
        fake_client.fail_reference = True
        response = client.get('/api/reference-data')
        assert response.status_code == 502
        assert response.get_json()['success'] is False

    def test_queue_upsert_and_delete(self, client):
        client.get('/api/reference-data')
        body = {"name": "Algebra", "faculty": [7], "duration": 2, "lecturesPerWeek": 3,
                "sectionScope": "SPECIFIC", "sections": [1, 2]}

        first = client.post('/api/queue', json=body).get_json()
        second = client.post('/api/queue', json={**body, "sections": [2, 1]}).get_json()

        assert first['outcome'] == 'inserted'
        assert second['outcome'] == 'updated'
        assert len(second['subjects']) == 1
        assert second['subjects'][0]['id'] == first['subjects'][0]['id']
        assert sorted(second['subjects'][0]['sectionNames']) == ['S1', 'S2']

        expanded = client.get('/api/queue/expanded').get_json()['requests']
        assert len(expanded) == 6

        remaining = client.delete('/api/queue/0').get_json()['subjects']
        assert remaining == []

    def test_queue_validation_error(self, client):
        client.get('/api/reference-data')
        response = client.post('/api/queue', json={"name": "", "faculty": []})
        assert response.status_code == 400
        assert 'required fields' in response.get_json()['error']

    def test_queue_rejects_non_object_body(self, client):
        response = client.post('/api/queue', json=[1, 2])
        assert response.status_code == 400

    def test_all_scope_uses_catalog_at_submit_time(self, client, fake_client):
        client.get('/api/reference-data')
        body = {"name": "Ethics", "faculty": [8], "duration": 1, "lecturesPerWeek": 1, "sectionScope": "ALL"}
        client.post('/api/queue', json=body)

        fake_client.reference_data = {
            **fake_client.reference_data,
            "sections": fake_client.reference_data["sections"] + [{"id": 4, "name": "S4"}],
        }
        client.post('/api/reference-data/refresh')
        subjects = client.post('/api/queue', json=body).get_json()['subjects']

        assert [s['sections'] for s in subjects] == [[1, 2, 3], [1, 2, 3, 4]]

    def test_exclude_everything_goes_out_as_sentinel(self, client, fake_client):
        client.get('/api/reference-data')
        client.post('/api/queue', json={"name": "Orphan", "faculty": [7], "duration": 1, "lecturesPerWeek": 2,
                                        "sectionScope": "EXCLUDE", "sections": [1, 2, 3]})
        client.post('/api/generate')
        assert fake_client.sent[0] == [{
            "subjectName": "Orphan", "facultyIds": [7], "duration": 1, "frequency": 2, "sectionId": None,
        }]

    def test_generate_and_project(self, client):
        client.get('/api/reference-data')
        client.post('/api/queue', json={"name": "Algebra", "faculty": [7], "duration": 2, "lecturesPerWeek": 3,
                                        "sectionScope": "SPECIFIC", "sections": [1, 2]})

        generated = client.post('/api/generate').get_json()
        assert generated['sections'] == ['S1', 'S2']
        assert generated['skippedSlots'][0]['subject'] == 'Chemistry'

        assert client.get('/api/timetable/sections').get_json()['sections'] == ['S1', 'S2']
        entries = client.get('/api/timetable/sections/S2').get_json()['entries']
        assert [e['subjectName'] for e in entries] == ['Physics']
        assert entries[0]['group'] is True

    def test_generate_failure(self, client, fake_client):
        client.get('/api/reference-data')
        client.post('/api/queue', json={"name": "Algebra", "faculty": [7], "duration": 2, "lecturesPerWeek": 3,
                                        "sectionScope": "ALL"})
        fake_client.fail_generate = True
        response = client.post('/api/generate')
        assert response.status_code == 502
        assert client.get('/api/timetable/sections').get_json()['sections'] == []

    def test_generate_empty_queue(self, client):
        response = client.post('/api/generate')
        assert response.status_code == 400


class TestResilience:
    def test_reload_retries_failed_reference_load(self, client, fake_client):
        fake_client.fail_reference = True
        assert b'Failed to load reference data' in client.get('/').data

        fake_client.fail_reference = False
        response = client.get('/')

        assert b'Failed to load reference data' not in response.data
        assert b'Dr. Rao' in response.data
        assert b'Subject added to queue.' in add_subject(client).data

    def test_non_string_name_is_bad_request(self, client):
        client.get('/api/reference-data')
        response = client.post('/api/queue', json={"name": 123, "faculty": [7], "duration": 2,
                                                   "lecturesPerWeek": 3, "sectionScope": "ALL"})
        assert response.status_code == 400
        assert client.get('/api/queue').get_json()['subjects'] == []

    def test_read_only_requests_do_not_create_workspaces(self, client):
        from services.workspace import get_workspace_registry

        for _ in range(20):
            client.get('/api/queue')
            client.get('/api/queue/expanded')
            client.get('/api/timetable/sections')
            client.get('/api/timetable/sections/S1')
            client.get('/')

        assert len(get_workspace_registry()) == 0

    def test_mutating_request_creates_one_workspace_per_session(self, client):
        from services.workspace import get_workspace_registry

        client.get('/api/reference-data')
        body = {"name": "Algebra", "faculty": [7], "duration": 2, "lecturesPerWeek": 3, "sectionScope": "ALL"}
        client.post('/api/queue', json=body)
        client.post('/api/queue', json={**body, "name": "Physics"})

        assert len(get_workspace_registry()) == 1
        assert len(client.get('/api/queue').get_json()['subjects']) == 2
