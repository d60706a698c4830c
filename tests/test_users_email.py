import pytest
from httpx import AsyncClient

from app.services.email_templates import render_invite_email, render_welcome_email

USERS = "/api/users"


def user_payload(**extra):
    payload = {
        "email": "ana.mora@example.com",
        "userName": "amora",
        "firstName": "Ana",
        "lastName": "Mora",
        "configStep": 2,
    }
    payload.update(extra)
    return payload


@pytest.mark.asyncio
async def test_create_and_read_profile(client: AsyncClient, admin_headers):
    created = await client.post(USERS, json=user_payload(), headers=admin_headers)

    assert created.status_code == 201
    user = created.json()
    assert user["configStep"] == 2
    assert user["isActive"] is True

    profile = await client.get(f"{USERS}/{user['id']}/profile", headers=admin_headers)
    assert profile.status_code == 200
    assert profile.json()["email"] == "ana.mora@example.com"


@pytest.mark.asyncio
async def test_duplicate_email_conflicts(client: AsyncClient, admin_headers):
    await client.post(USERS, json=user_payload(), headers=admin_headers)
    response = await client.post(USERS, json=user_payload(userName="other"), headers=admin_headers)

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_invalid_email_rejected(client: AsyncClient, admin_headers):
    response = await client.post(USERS, json=user_payload(email="not-an-email"), headers=admin_headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_profile(client: AsyncClient, admin_headers):
    user = (await client.post(USERS, json=user_payload(), headers=admin_headers)).json()

    response = await client.put(
        f"{USERS}/{user['id']}/profile", json={"company": "LCR", "configStep": 3}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["company"] == "LCR"
    assert response.json()["configStep"] == 3
    assert response.json()["firstName"] == "Ana"

    missing = await client.put(f"{USERS}/nope/profile", json={"company": "X"}, headers=admin_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_verify_email_complete_sends_welcome(client: AsyncClient, admin_headers, email_service, monkeypatch):
    sent = []

    async def fake_send(to_email, subject, html_content, text_content=None):
        sent.append((to_email, subject, html_content))
        return True

    monkeypatch.setattr(email_service, "send", fake_send)
    user = (await client.post(USERS, json=user_payload(), headers=admin_headers)).json()

    response = await client.post(
        f"{USERS}/{user['id']}/verify-email-complete", params={"language": "en"}, headers=admin_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["emailSent"] is True
    assert body["user"]["id"] == user["id"]
    assert len(sent) == 1
    to_email, subject, html = sent[0]
    assert to_email == "ana.mora@example.com"
    assert subject.startswith("Welcome")
    assert "Ana Mora" in html


@pytest.mark.asyncio
async def test_verify_email_complete_unknown_user(client: AsyncClient, admin_headers):
    response = await client.post(f"{USERS}/ghost/verify-email-complete", headers=admin_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_invite_sent_on_create(client: AsyncClient, admin_headers, email_service, monkeypatch):
    subjects = []

    async def fake_send(to_email, subject, html_content, text_content=None):
        subjects.append(subject)
        return True

    monkeypatch.setattr(email_service, "send", fake_send)

    response = await client.post(USERS, json=user_payload(sendInvite=True), headers=admin_headers)

    assert response.status_code == 201
    assert len(subjects) == 1
    assert "Cuerpo de Banderas" in subjects[0]


@pytest.mark.asyncio
async def test_disabled_delivery_reports_success_without_smtp(email_service):
    assert await email_service.send("a@example.com", "Asunto", "<p>Hola</p>") is True


def test_templates_are_localized():
    es_subject, es_html = render_welcome_email("Ana", "es", "http://frontend.test")
    en_subject, en_html = render_welcome_email("Ana", "en", "http://frontend.test")

    assert es_subject != en_subject
    assert "¡Hola" in es_html
    assert "http://frontend.test" in en_html

    subject, html = render_invite_email("Ana", "Cuerpo de Banderas", ["Administrador"], "http://frontend.test/", "es")
    assert "Cuerpo de Banderas" in subject
    assert "Administrador" in html


@pytest.mark.asyncio
async def test_user_routes_require_admin(client: AsyncClient):
    assert (await client.post(USERS, json=user_payload())).status_code == 401
