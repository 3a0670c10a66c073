"""
Unit tests for declarative role definitions.
"""

import json

import pytest

from service_acl.app.rules.definitions import AclDefinition, build_roles, load_definition, roles_from_settings
from service_acl.app.rules.engine import Acl
from service_acl.app.rules.models import Identity, Privilege
from shared.config import AclSettings
from shared.errors import ConfigurationError

from .factories import ADMIN, EDIT, LOGGED_IN, MAIN, PROFILE, READ, USER, Record


ROLES_YAML = """
roles:
  - identifier: 1
    name: guest
    resources:
      main: {read: []}
  - identifier: 2
    name: registered
    parents: [guest]
    resources:
      user: {loggedIn: []}
      profile: {edit: [is_owner]}
  - identifier: 4
    name: admin
    parents: [registered]
    resources:
      admin: {}
"""


def is_owner(obj):
    return obj is not None and obj.owner_id == 7


@pytest.fixture
def yaml_file(tmp_path):
    path = tmp_path / "roles.yaml"
    path.write_text(ROLES_YAML)
    return path


class TestLoadDefinition:
    """Test cases for load_definition."""

    def test_load_yaml(self, yaml_file):
        definition = load_definition(yaml_file)

        assert [r.name for r in definition.roles] == ["guest", "registered", "admin"]
        assert definition.roles[1].parents == ["guest"]
        assert definition.roles[2].resources == {"admin": {}}

    def test_load_json(self, tmp_path):
        path = tmp_path / "roles.json"
        path.write_text(json.dumps({"roles": [{"identifier": 1, "name": "guest"}]}))

        definition = load_definition(path)

        assert definition.roles[0].name == "guest"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_definition(tmp_path / "missing.yaml")

    def test_invalid_identifier(self, tmp_path):
        path = tmp_path / "roles.yaml"
        path.write_text("roles:\n  - identifier: 0\n    name: nobody\n")

        with pytest.raises(ConfigurationError, match="Invalid role definitions"):
            load_definition(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "roles.yaml"
        path.write_text("")

        assert load_definition(path).roles == []


class TestBuildRoles:
    """Test cases for build_roles."""

    def test_builds_hierarchy(self, yaml_file):
        guest, registered, admin = build_roles(load_definition(yaml_file), {"is_owner": is_owner})

        assert registered.inherited_roles == (guest,)
        assert admin.inherited_roles == (registered,)
        assert admin.privileges[ADMIN] == {}
        assert registered.privileges[PROFILE][EDIT] == (is_owner,)

    def test_built_roles_evaluate(self, yaml_file):
        roles = build_roles(load_definition(yaml_file), {"is_owner": is_owner})
        acl = Acl(roles, Identity(id=7, role_mask=2), settings=AclSettings(metrics_enabled=False))

        assert acl.is_allowed(MAIN, READ) is True
        assert acl.is_allowed(USER, LOGGED_IN) is True
        assert acl.is_allowed(PROFILE, EDIT, Record(owner_id=7)) is True
        assert acl.is_allowed(PROFILE, EDIT, Record(owner_id=8)) is False
        assert acl.is_allowed(ADMIN, Privilege("manage")) is False

    def test_parents_declared_later(self):
        definition = AclDefinition.model_validate({"roles": [
            {"identifier": 2, "name": "child", "parents": ["base"]},
            {"identifier": 1, "name": "base"},
        ]})

        child, base = build_roles(definition)

        assert child.inherited_roles == (base,)

    def test_null_privilege_map_is_wildcard(self):
        definition = AclDefinition.model_validate({"roles": [
            {"identifier": 1, "name": "root", "resources": {"admin": None}},
        ]})

        (root,) = build_roles(definition)

        assert root.privileges[ADMIN] == {}

    def test_unknown_parent(self):
        definition = AclDefinition.model_validate({"roles": [
            {"identifier": 1, "name": "child", "parents": ["ghost"]},
        ]})

        with pytest.raises(ConfigurationError, match="Unknown parent role 'ghost'") as exc_info:
            build_roles(definition)

        assert exc_info.value.details == {"role": "child", "parent": "ghost"}

    def test_unknown_assertion(self, yaml_file):
        with pytest.raises(ConfigurationError, match="Unknown assertion"):
            build_roles(load_definition(yaml_file), {})

    def test_parent_cycle(self):
        definition = AclDefinition.model_validate({"roles": [
            {"identifier": 1, "name": "a", "parents": ["b"]},
            {"identifier": 2, "name": "b", "parents": ["a"]},
        ]})

        with pytest.raises(ConfigurationError, match="cycle"):
            build_roles(definition)

    def test_duplicate_names(self):
        definition = AclDefinition.model_validate({"roles": [
            {"identifier": 1, "name": "a"},
            {"identifier": 2, "name": "a"},
        ]})

        with pytest.raises(ConfigurationError, match="declared twice"):
            build_roles(definition)


class TestRolesFromSettings:
    """Test cases for roles_from_settings."""

    def test_reads_configured_file(self, yaml_file):
        settings = AclSettings(definitions_file=str(yaml_file))

        roles = roles_from_settings(settings, {"is_owner": is_owner})

        assert [r.role_name for r in roles] == ["guest", "registered", "admin"]

    def test_requires_configured_file(self):
        with pytest.raises(ConfigurationError, match="ACL_DEFINITIONS_FILE"):
            roles_from_settings(AclSettings(definitions_file=None))
