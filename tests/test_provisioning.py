"""Tests for the database backed user provisioning."""

import pytest
from sqlalchemy.exc import OperationalError

from conftest import ORCID_ID
from orcid_login.models.orm import User
from orcid_login.models.schema.OAuthSchemas import NormalizedProfile
from orcid_login.strategies.base import UserProvisioner
from orcid_login.strategies.orcid import synthetic_email


def make_profile(name="Jane Doe", orcid_id=ORCID_ID, **extra) -> NormalizedProfile:
    return NormalizedProfile.model_validate(
        {"email": synthetic_email(orcid_id), "displayName": name, **extra}
    )


def count_users(session_factory) -> int:
    with session_factory() as session:
        return session.query(User).count()


def test_is_a_user_provisioner(db_provisioner):
    assert isinstance(db_provisioner, UserProvisioner)


async def test_creates_user(db_provisioner, session_factory):
    user = await db_provisioner.process_profile(
        profile=make_profile(affiliation="Example University"), provider_key="orcid"
    )
    assert user.id is not None
    assert user.email == synthetic_email(ORCID_ID)
    assert user.display_name == "Jane Doe"
    assert user.provider_key == "orcid"
    assert user.profile["affiliation"] == "Example University"
    assert count_users(session_factory) == 1


async def test_second_login_updates_user(db_provisioner, session_factory):
    first = await db_provisioner.process_profile(
        profile=make_profile(), provider_key="orcid"
    )
    second = await db_provisioner.process_profile(
        profile=make_profile(name="Jane Q. Doe"), provider_key="orcid"
    )
    assert second.id == first.id
    assert second.display_name == "Jane Q. Doe"
    assert second.last_login >= first.last_login
    assert count_users(session_factory) == 1


async def test_missing_name_keeps_stored_name(db_provisioner):
    await db_provisioner.process_profile(profile=make_profile(), provider_key="orcid")
    user = await db_provisioner.process_profile(
        profile=make_profile(name=None), provider_key="orcid"
    )
    assert user.display_name == "Jane Doe"


async def test_users_are_separated_by_provider_key(db_provisioner, session_factory):
    a = await db_provisioner.process_profile(profile=make_profile(), provider_key="orcid")
    b = await db_provisioner.process_profile(
        profile=make_profile(), provider_key="orcid-sandbox"
    )
    assert a.id != b.id
    assert count_users(session_factory) == 2


async def test_database_error_propagates(db_provisioner, session_factory):
    User.__table__.drop(session_factory.kw["bind"])
    with pytest.raises(OperationalError):
        await db_provisioner.process_profile(profile=make_profile(), provider_key="orcid")


async def test_structured_display_name_is_not_stored(db_provisioner):
    user = await db_provisioner.process_profile(
        profile=make_profile(name={"value": "Jane Doe"}), provider_key="orcid"
    )
    assert user.display_name is None
    assert user.profile["displayName"] == {"value": "Jane Doe"}

    await db_provisioner.process_profile(profile=make_profile(), provider_key="orcid")
    user = await db_provisioner.process_profile(
        profile=make_profile(name={"value": "J."}), provider_key="orcid"
    )
    assert user.display_name == "Jane Doe"


def test_profile_defaults_to_a_new_dict(session_factory):
    with session_factory() as session:
        users = [User(email=f"user{i}@example.org", provider_key="orcid") for i in range(2)]
        session.add_all(users)
        session.commit()
        assert users[0].profile == {} and users[1].profile == {}
        assert users[0].profile is not users[1].profile
