from core.security import create_access_token


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def test_no_token_is_allowed(north):
    assert north.get("/classes").status_code == 200


def test_invalid_token(north):
    res = north.get("/classes", headers=_auth("garbage"))
    assert res.status_code == 401
    assert res.json()["code"] == "INVALID_TOKEN"


def test_listed_branch_is_allowed(north):
    token = create_access_token(user_id="u1", roles=["teacher"], branch_ids=["north"])
    assert north.get("/classes", headers=_auth(token)).status_code == 200


def test_unlisted_branch_is_forbidden(south):
    token = create_access_token(user_id="u1", roles=["teacher"], branch_ids=["north"])
    res = south.get("/classes", headers=_auth(token))
    assert res.status_code == 403
    assert res.json()["code"] == "BRANCH_FORBIDDEN"


def test_branch_header_required_with_branch_claims(client):
    from conftest import API

    token = create_access_token(user_id="u1", roles=["teacher"], branch_ids=["north"])
    res = client.get(API + "/classes", headers=_auth(token))
    assert res.status_code == 403
    assert res.json()["code"] == "BRANCH_SELECTION_REQUIRED"


def test_admin_roles_reach_any_branch(south):
    token = create_access_token(user_id="root", roles=["Admin"], branch_ids=["north"])
    assert south.get("/classes", headers=_auth(token)).status_code == 200
