import pytest
from httpx import AsyncClient

NEW_PASSWORD = "N3w!Password"


def _token(reset_url: str) -> str:
    return reset_url.split("token=", 1)[1]


@pytest.mark.asyncio
async def test_reset_link_redeem_and_sign_in(client: AsyncClient, seed, login, mailbox):
    """Admin-issued password reset

    Given alice administers site 1 and bob is a member of site 1
    When alice issues a reset link for bob and bob redeems it
    Then bob signs in with the new password only
    And the link cannot be used again
    """
    alice = await login("alice")

    issued = await client.post(f"/users/{seed['bob']}/password-reset", headers=alice)
    assert issued.status_code == 201, issued.text
    body = issued.json()
    assert body["email"] == "bob@example.com"
    assert body["email_sent"] is True
    assert "/auth/reset-password?token=" in body["reset_url"]
    assert mailbox.sent[-1][0] == "bob@example.com"
    token = _token(body["reset_url"])

    validated = await client.get(f"/password-resets/validate/{token}")
    assert validated.status_code == 200
    assert validated.json()["username"] == "bob"

    redeemed = await client.post(
        "/password-resets/redeem", json={"token": token, "new_password": NEW_PASSWORD}
    )
    assert redeemed.status_code == 200, redeemed.text

    old = await client.post("/auth/login", json={"email": "bob@example.com", "password": "Str0ng!Pass"})
    assert old.status_code == 401
    assert old.json()["error"]["code"] == "INVALID_CREDENTIALS"
    await login("bob", NEW_PASSWORD)

    again = await client.post(
        "/password-resets/redeem", json={"token": token, "new_password": "An0ther!Pass"}
    )
    assert again.status_code == 400
    assert again.json()["error"]["code"] == "INVALID_OR_EXPIRED"


@pytest.mark.asyncio
async def test_site_admin_cannot_reset_user_outside_their_sites(client: AsyncClient, seed, login):
    alice = await login("alice")

    response = await client.post(f"/users/{seed['carol']}/password-reset", headers=alice)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_plain_user_cannot_issue_reset(client: AsyncClient, seed, login):
    bob = await login("bob")

    response = await client.post(f"/users/{seed['carol']}/password-reset", headers=bob)

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_unknown_reset_token(client: AsyncClient, seed):
    validated = await client.get("/password-resets/validate/not-a-token")
    redeemed = await client.post(
        "/password-resets/redeem", json={"token": "not-a-token", "new_password": NEW_PASSWORD}
    )

    assert validated.status_code == 400
    assert redeemed.status_code == 400
    assert redeemed.json()["error"]["code"] == "INVALID_OR_EXPIRED"
