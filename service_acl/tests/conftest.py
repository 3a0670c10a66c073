"""
Shared fixtures for ACL tests.
"""

import os

import pytest
from prometheus_client import CollectorRegistry

from service_acl.app.rules.models import Role
from shared.config import AclSettings
from shared.metrics import AclMetrics

from .factories import ADMIN, LOGGED_IN, MAIN, READ, USER


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep ACL_* variables and stray .env files out of AclSettings."""
    for name in list(os.environ):
        if name.upper().startswith("ACL_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def metrics():
    """Metrics bound to a private registry."""
    return AclMetrics(CollectorRegistry())


@pytest.fixture
def settings():
    """Default evaluator settings."""
    return AclSettings(validate_roles=True, metrics_enabled=True)


@pytest.fixture
def guest():
    return Role(1, "guest", privileges={MAIN: {READ: []}})


@pytest.fixture
def registered(guest):
    return Role(2, "registered", inherited_roles=[guest], privileges={USER: {LOGGED_IN: []}})


@pytest.fixture
def admin(registered):
    return Role(4, "admin", inherited_roles=[registered], privileges={ADMIN: {}})


@pytest.fixture
def roles(guest, registered, admin):
    return [guest, registered, admin]
