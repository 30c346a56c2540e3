from datetime import datetime, timezone

from exercise_tracker.utils.dates import format_date


def test_add_exercise_defaults_date_to_today(client, make_user):
    user = make_user('runner')
    r = client.post(f"/api/users/{user['id']}/exercises", data={'description': 'run', 'duration': '30'})
    assert r.status_code == 200
    body = r.json()
    assert body['id'] == user['id']
    assert body['username'] == 'runner'
    assert body['description'] == 'run'
    assert body['duration'] == 30
    assert isinstance(body['duration'], int)
    assert body['date'] == format_date(datetime.now(timezone.utc))


def test_add_exercise_with_explicit_date(client, make_user):
    user = make_user('walker')
    r = client.post(
        f"/api/users/{user['id']}/exercises",
        data={'description': 'walk', 'duration': '45', 'date': '2006-01-02'},
    )
    assert r.json()['date'] == 'Mon Jan 02 2006'


def test_fractional_duration_is_kept(client, make_user):
    user = make_user('swimmer')
    r = client.post(f"/api/users/{user['id']}/exercises", json={'description': 'swim', 'duration': 12.5})
    assert r.json()['duration'] == 12.5


def test_non_numeric_duration_is_invalid_input(client, make_user):
    user = make_user('lifter')
    r = client.post(f"/api/users/{user['id']}/exercises", data={'description': 'lift', 'duration': 'abc'})
    assert r.status_code == 200
    assert r.json() == {'error': 'Invalid input.'}


def test_missing_fields_are_invalid_input(client, make_user):
    user = make_user('idle')
    url = f"/api/users/{user['id']}/exercises"
    assert client.post(url, data={'duration': '10'}).json() == {'error': 'Invalid input.'}
    assert client.post(url, data={'description': '', 'duration': '10'}).json() == {'error': 'Invalid input.'}
    assert client.post(url, data={'description': 'x'}).json() == {'error': 'Invalid input.'}


def test_bad_date_is_invalid_input(client, make_user):
    user = make_user('timetraveller')
    r = client.post(
        f"/api/users/{user['id']}/exercises",
        data={'description': 'run', 'duration': '5', 'date': '2023-02-30'},
    )
    assert r.json() == {'error': 'Invalid input.'}


def test_empty_date_uses_today(client, make_user):
    user = make_user('blank')
    r = client.post(
        f"/api/users/{user['id']}/exercises",
        data={'description': 'run', 'duration': '5', 'date': ''},
    )
    assert r.json()['date'] == format_date(datetime.now(timezone.utc))


def test_unknown_user_is_not_found(client):
    r = client.post('/api/users/doesnotexist/exercises', data={'description': 'run', 'duration': '30'})
    assert r.status_code == 200
    assert r.json() == {'error': 'User not found'}


def test_validation_runs_before_user_lookup(client):
    r = client.post('/api/users/doesnotexist/exercises', data={'description': 'run', 'duration': 'x'})
    assert r.json() == {'error': 'Invalid input.'}


def test_date_pushed_out_of_range_by_offset_is_invalid_input(client, make_user):
    user = make_user('edge')
    r = client.post(
        f"/api/users/{user['id']}/exercises",
        data={'description': 'run', 'duration': '5', 'date': '0001-01-01T00:00:00+01:00'},
    )
    assert r.status_code == 200
    assert r.json() == {'error': 'Invalid input.'}
