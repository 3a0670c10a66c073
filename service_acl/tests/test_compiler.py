"""
Unit tests for the rule compiler.
"""

import pytest

from service_acl.app.rules.compiler import WILDCARD, compile_rules, rule_key, wildcard_key
from service_acl.app.rules.models import Privilege, Resource, Role

from .factories import ADMIN, EDIT, MAIN, PROFILE, READ, USER, LOGGED_IN


def is_owner(obj):
    return obj is not None


class TestRuleCompiler:
    """Test cases for compile_rules."""

    def test_rule_key_format(self, guest):
        """Keys are role/resource/privilege."""
        assert rule_key(guest, MAIN, READ) == "guest/main/read"
        assert wildcard_key(guest, ADMIN) == f"guest/admin/{WILDCARD}"

    def test_compiles_every_privilege(self, roles):
        """Each role/resource/privilege triple becomes one entry."""
        rules = compile_rules(roles)

        assert rules["guest/main/read"] == ()
        assert rules["registered/user/loggedIn"] == ()
        assert "registered/main/read" not in rules

    def test_empty_privilege_map_compiles_to_wildcard(self, admin):
        """A resource without privileges compiles to a single wildcard key."""
        rules = compile_rules([admin])

        assert list(rules) == ["admin/admin/*"]
        assert rules["admin/admin/*"] == ()

    def test_assertions_preserved_in_order(self):
        """Assertion lists keep declaration order."""
        second = lambda obj: True
        role = Role(8, "owner", privileges={PROFILE: {EDIT: [is_owner, second]}})

        rules = compile_rules([role])

        assert rules["owner/profile/edit"] == (is_owner, second)

    def test_multiple_resources_and_privileges(self):
        """All privileges under all resources are emitted."""
        role = Role(1, "editor", privileges={
            MAIN: {READ: [], EDIT: []},
            USER: {LOGGED_IN: []},
        })

        rules = compile_rules([role])

        assert set(rules) == {"editor/main/read", "editor/main/edit", "editor/user/loggedIn"}

    def test_duplicate_key_last_write_wins(self):
        """Two roles with the same name collapse onto the same keys."""
        first = Role(1, "dup", privileges={MAIN: {READ: [is_owner]}})
        second = Role(2, "dup", privileges={MAIN: {READ: []}})

        rules = compile_rules([first, second])

        assert rules["dup/main/read"] == ()

    def test_compiled_table_is_read_only(self, roles):
        """The compiled table cannot be modified."""
        rules = compile_rules(roles)

        with pytest.raises(TypeError):
            rules["guest/main/write"] = ()

    def test_no_roles(self):
        """An empty role set compiles to an empty table."""
        assert len(compile_rules([])) == 0

    def test_resource_identity_is_name_equality(self):
        """Separately constructed resources with equal names share keys."""
        role = Role(1, "guest", privileges={Resource("main"): {Privilege("read"): []}})

        rules = compile_rules([role])

        assert rule_key(role, Resource("main"), Privilege("read")) in rules
