from exercise_tracker.main import create_app


def test_home_page_is_html(client):
    r = client.get('/')
    assert r.status_code == 200
    assert r.headers['content-type'].startswith('text/html')
    assert 'action="/api/users"' in r.text


def test_stylesheet_is_served(client):
    r = client.get('/static/style.css')
    assert r.status_code == 200


def test_health_and_request_id(client):
    r = client.get('/health')
    assert r.status_code == 200
    assert r.json() == {'status': 'ok'}
    assert 'X-Request-ID' in r.headers


def test_request_id_is_propagated(client):
    r = client.get('/api/users', headers={'X-Request-ID': 'abc123'})
    assert r.headers['X-Request-ID'] == 'abc123'


def test_each_app_uses_its_own_engine(engine):
    from fastapi.testclient import TestClient
    from sqlalchemy.pool import StaticPool
    from sqlmodel import create_engine

    other = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    with TestClient(create_app(engine)) as a, TestClient(create_app(other)) as b:
        a.post('/api/users', data={'username': 'only-in-a'})
        assert [u['username'] for u in a.get('/api/users').json()] == ['only-in-a']
        assert b.get('/api/users').json() == []
    other.dispose()
