from __future__ import annotations

import pytest

from fakes import ADMIN, STAFF, TEACHER, World, build_world
from school_attendance import create_app
from school_attendance.container import Container
from school_attendance.settings import testing as testing_settings
from school_attendance.users.auth import make_roles_required
from school_attendance.users.service import IdentityResolver


class FakeConnection:
    def __init__(self, reachable: bool = True):
        self.reachable = reachable

    def ping(self) -> bool:
        return self.reachable


@pytest.fixture
def world() -> World:
    return build_world()


@pytest.fixture
def app(world: World):
    resolver = IdentityResolver(world.users)
    container = Container(
        conn=FakeConnection(),
        clock=world.clock,
        sms_executor=world.executor,
        identity_resolver=resolver,
        roles_required=make_roles_required(resolver),
        quarter_service=world.quarter_service,
        late_accumulator=world.accumulator,
        sms_pipeline=world.sms_pipeline,
        notification_service=world.notifier,
        attendance_service=world.service,
    )
    return create_app(settings=testing_settings, container=container)


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, caller):
    with client.session_transaction() as s:
        s["user_id"] = caller.user_id
    return client


@pytest.fixture
def admin_client(client):
    return _login(client, ADMIN)


@pytest.fixture
def teacher_client(client):
    return _login(client, TEACHER)


@pytest.fixture
def staff_client(client):
    return _login(client, STAFF)
