import pytest

from models import GenerationResult, ReferenceCatalog
from utils.errors import NetworkError

REFERENCE_DATA = {
    "faculty": [
        {"id": 7, "name": "Dr. Rao"},
        {"id": 8, "name": "Dr. Iyer"},
    ],
    "sections": [
        {"id": 1, "name": "S1", "studentCount": 60},
        {"id": 2, "name": "S2", "studentCount": 55},
        {"id": 3, "name": "S3", "studentCount": 40},
    ],
    "rooms": [
        {"id": 1, "roomNumber": "C101", "roomType": "CLASSROOM", "capacity": 70},
    ],
    "timeSlots": [
        {"id": 1, "day": "Monday", "startTime": "09:00", "endTime": "10:00", "period": "1"},
    ],
}

TIMETABLE_RESPONSE = {
    "timetable": [
        {
            "subjectName": "Algebra",
            "faculty": {"name": "Dr. Rao"},
            "section": {"name": "S1"},
            "room": {"roomNumber": "C101"},
            "timeslot": {"day": "Tuesday", "start_time": "09:00", "end_time": "10:00"},
        },
        {
            "subjectName": "Physics",
            "faculty": {"name": "Dr. Iyer"},
            "sections": [{"name": "S1"}, {"name": "S2"}],
            "room": {"name": "LT1"},
            "timeslot": {"day": "Monday", "startTime": "10:00", "endTime": "11:00"},
        },
    ],
    "skippedSlots": [
        {"subject": "Chemistry", "section": "S3", "reason": "No eligible faculty could assign the lecture."},
    ],
}


class FakeSchedulerClient:
    """스케줄러 백엔드 대역"""

    def __init__(self, reference_data=None, response=None):
        self.reference_data = REFERENCE_DATA if reference_data is None else reference_data
        self.response = TIMETABLE_RESPONSE if response is None else response
        self.fail_reference = False
        self.fail_generate = False
        self.reference_calls = 0
        self.sent = []

    def fetch_reference_data(self):
        self.reference_calls += 1
        if self.fail_reference:
            raise NetworkError("Scheduler service responded with 503: unavailable")
        return self.reference_data

    def generate_timetable(self, expanded_requests):
        self.sent.append([r.to_dict() for r in expanded_requests])
        if self.fail_generate:
            raise NetworkError("Scheduler service responded with 500: boom")
        return GenerationResult.from_response(self.response)


@pytest.fixture
def catalog():
    return ReferenceCatalog.from_dict(REFERENCE_DATA)


@pytest.fixture
def fake_client():
    return FakeSchedulerClient()


@pytest.fixture
def app(monkeypatch, fake_client):
    import services.scheduler_client as scheduler_client
    import services.reference_data as reference_data
    import services.workspace as workspace
    monkeypatch.setattr(scheduler_client, '_client_instance', fake_client)
    monkeypatch.setattr(reference_data, '_cache_instance', None)
    monkeypatch.setattr(workspace, '_registry_instance', None)

    from app import create_app
    return create_app({'TESTING': True, 'SECRET_KEY': 'test-secret'})


@pytest.fixture
def client(app):
    return app.test_client()
