"""Tests for the admin API using FastAPI's TestClient."""

import pytest
from fastapi.testclient import TestClient

from recipe_admin.core.database import get_job_runner, get_storage
from recipe_admin.main import app
from recipe_scraper.models import JobStatus

from conftest import BASE_URL, FakeFetcher, FakeParser, full_recipe_payload, make_runner, search_page


@pytest.fixture
def client(storage, site, sleeps):
    fetcher = FakeFetcher({
        f'{BASE_URL}/search?q=chicken&page=1': search_page('/recipes/a'),
    }, default=search_page())
    parser = FakeParser({f'{BASE_URL}/recipes/a': full_recipe_payload()})
    runner = make_runner(storage, fetcher, parser, sleeps)

    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_job_runner] = lambda: runner
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get('/api/health')
    assert response.status_code == 200
    assert response.json()['status'] == 'healthy'


def test_list_sites(client):
    response = client.get('/api/sites')
    assert response.status_code == 200
    sites = response.json()
    assert [s['name'] for s in sites] == ['example']
    assert sites[0]['categories'] == ['chicken', 'pasta']


def test_start_job_runs_in_background(client):
    response = client.post('/api/jobs', json={'site_name': 'example', 'category': 'chicken'})

    assert response.status_code == 202
    job = response.json()
    assert job['status'] == JobStatus.PENDING

    # TestClient finishes background tasks before returning
    finished = client.get(f"/api/jobs/{job['id']}").json()
    assert finished['status'] == JobStatus.COMPLETED
    assert finished['urls_succeeded'] == 1


def test_start_job_unknown_site(client, storage):
    response = client.post('/api/jobs', json={'site_name': 'nonexistent'})

    assert response.status_code == 404
    assert 'nonexistent' in response.json()['detail']
    assert storage.list_jobs() == []


def test_start_job_validates_options(client):
    response = client.post('/api/jobs', json={'max_pages_per_category': 0})
    assert response.status_code == 422


def test_list_jobs(client, storage):
    ids = [storage.create_job(), storage.create_job()]
    storage.cancel_job(ids[0])

    response = client.get('/api/jobs', params={'status': 'failed'})

    assert response.status_code == 200
    body = response.json()
    assert [j['id'] for j in body['items']] == [ids[0]]
    assert body['limit'] == 20
    assert body['offset'] == 0


def test_list_jobs_invalid_status(client):
    assert client.get('/api/jobs', params={'status': 'paused'}).status_code == 400


def test_get_missing_job(client):
    assert client.get('/api/jobs/missing').status_code == 404


def test_cancel_job(client, storage):
    job_id = storage.create_job()

    response = client.post(f'/api/jobs/{job_id}/cancel')

    assert response.status_code == 200
    assert response.json()['status'] == JobStatus.FAILED
    assert response.json()['error_log'] == 'Job cancelled by user'


def test_cancel_missing_job(client):
    assert client.post('/api/jobs/missing/cancel').status_code == 404
