import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from errors import AccountConflictError, InvalidUserDataError, UserNotFoundError
from models import Note, User
from services import account_service, note_service
from conftest import PROFILE, make_profile


async def _user_count(session) -> int:
    result = await session.execute(select(func.count()).select_from(User))
    return result.scalar_one()


async def test_link_creates_user_from_profile(session):
    user = await account_service.link_account(session, make_profile(), "gho_first")

    assert await _user_count(session) == 1
    assert user.id is not None
    assert user.githubId == "1001"
    assert user.login == PROFILE["login"]
    assert user.name == PROFILE["name"]
    assert user.email == PROFILE["email"]
    assert user.avatarUrl == PROFILE["avatar_url"]
    assert user.htmlUrl == PROFILE["html_url"]
    assert user.company == PROFILE["company"]
    assert user.location == PROFILE["location"]
    assert user.bio == PROFILE["bio"]
    assert user.oauth_access_token == "gho_first"
    assert user.createdAt is not None


async def test_link_existing_user_overwrites_everything_but_identity(session):
    first = await account_service.link_account(session, make_profile(), "gho_first")
    original_id, original_created = first.id, first.createdAt

    changed = make_profile(
        login="octocat-renamed", name=None, email="new@example.com", avatar_url=None,
        html_url="https://github.com/octocat-renamed", company=None, location="Seoul", bio=None,
    )
    second = await account_service.link_account(session, changed, "gho_second")

    assert await _user_count(session) == 1
    assert second.id == original_id
    assert second.createdAt == original_created
    assert second.login == "octocat-renamed"
    assert second.name is None
    assert second.email == "new@example.com"
    assert second.avatarUrl is None
    assert second.company is None
    assert second.location == "Seoul"
    assert second.bio is None
    assert second.oauth_access_token == "gho_second"
    assert second.updatedAt >= original_created


async def test_link_is_idempotent(session):
    fields = ["id", "githubId", "login", "name", "email", "avatarUrl", "htmlUrl",
              "company", "location", "bio", "oauth_access_token", "createdAt"]

    first = await account_service.link_account(session, make_profile(), "gho_same")
    snapshot = {f: getattr(first, f) for f in fields}
    second = await account_service.link_account(session, make_profile(), "gho_same")

    assert {f: getattr(second, f) for f in fields} == snapshot
    assert await _user_count(session) == 1


async def test_link_recovers_from_concurrent_insert(session, monkeypatch):
    await account_service.link_account(session, make_profile(), "gho_winner")

    real_find = account_service.find_user_by_github_id
    calls = []

    async def stale_find(session_, github_id):
        calls.append(github_id)
        if len(calls) == 1:
            return None
        return await real_find(session_, github_id)

    monkeypatch.setattr(account_service, "find_user_by_github_id", stale_find)

    user = await account_service.link_account(session, make_profile(name="Late Writer"), "gho_loser")

    assert len(calls) == 2
    assert await _user_count(session) == 1
    assert user.name == "Late Writer"
    assert user.oauth_access_token == "gho_loser"


async def test_link_conflict_when_row_stays_invisible(session, monkeypatch):
    await account_service.link_account(session, make_profile(), "gho_winner")

    async def never_found(session_, github_id):
        return None

    monkeypatch.setattr(account_service, "find_user_by_github_id", never_found)

    with pytest.raises(AccountConflictError):
        await account_service.link_account(session, make_profile(name="Late Writer"), "gho_loser")

    assert await _user_count(session) == 1


async def test_link_conflict_when_retry_also_collides(session, monkeypatch):
    await account_service.link_account(session, make_profile(), "gho_winner")

    real_find = account_service.find_user_by_github_id
    calls = []

    async def stale_find(session_, github_id):
        calls.append(github_id)
        if len(calls) == 1:
            return None
        return await real_find(session_, github_id)

    async def colliding_update(*args, **kwargs):
        raise IntegrityError("UPDATE users", {}, Exception("duplicate key"))

    monkeypatch.setattr(account_service, "find_user_by_github_id", stale_find)
    monkeypatch.setattr(account_service, "_update_existing", colliding_update)

    with pytest.raises(AccountConflictError) as exc_info:
        await account_service.link_account(session, make_profile(), "gho_loser")

    assert exc_info.value.status_code == 409
    assert len(calls) == 2
    assert await _user_count(session) == 1


async def test_distinct_accounts_get_distinct_rows(session):
    await account_service.link_account(session, make_profile(id=1), "a")
    await account_service.link_account(session, make_profile(id=2, login="other"), "b")

    assert await _user_count(session) == 2


@pytest.mark.parametrize("github_id", ["", "   ", "bad_id", "x" * 40, "a/b"])
async def test_get_user_rejects_malformed_ids(session, github_id):
    with pytest.raises(InvalidUserDataError):
        await account_service.get_user(session, github_id)


async def test_get_user_trims_whitespace(session):
    await account_service.link_account(session, make_profile(), "gho")

    user = await account_service.get_user(session, "  1001 ")

    assert user is not None
    assert user.login == "octocat"


async def test_require_user_unknown(session):
    with pytest.raises(UserNotFoundError):
        await account_service.require_user(session, "424242")


async def test_delete_user_removes_owned_notes(session):
    await account_service.link_account(session, make_profile(), "gho")
    await note_service.create_note(session, "1001", "Week 1", "did X")

    await account_service.delete_user(session, "1001")

    assert await account_service.get_user(session, "1001") is None
    remaining = await session.execute(select(func.count()).select_from(Note))
    assert remaining.scalar_one() == 0


async def test_delete_unknown_user(session):
    with pytest.raises(UserNotFoundError):
        await account_service.delete_user(session, "999")
