"""
Unit tests for Role, Scope and Resource authoring.
"""

import pytest

from access_policy.definitions import Role, Resource, Scope
from access_policy.rules import ALLOW, ANY, DENY, DEFAULT_ACTIONS
from shared.errors import BadConfiguration


class TestRoleAuthoring:
    """Test cases for authoring rules on a role."""

    @pytest.fixture
    def role(self):
        """Create Role instance."""
        return Role("admin")

    def test_initialize(self, role):
        """Test a fresh role."""
        assert role.name == "admin"
        assert role.parents == ()
        assert len(role.rules) == 0
        assert role.frozen is False

    @pytest.mark.parametrize("parents, expected", [
        (None, ()),
        ("parent_role", ("parent_role",)),
        (["parent1", "parent2"], ("parent1", "parent2")),
        (("parent1",), ("parent1",)),
    ])
    def test_parents(self, parents, expected):
        """Test parent normalization."""
        assert Role("role_name", parents=parents).parents == expected

    @pytest.mark.parametrize("parents", [123, ["ok", 5], {"parent": True}])
    def test_invalid_parents(self, parents):
        """Test parents must be names."""
        with pytest.raises(BadConfiguration):
            Role("role_name", parents=parents)

    @pytest.mark.parametrize("name", ["", "*", None, 42])
    def test_invalid_names(self, name):
        """Test role names are validated."""
        with pytest.raises(BadConfiguration):
            Role(name)

    def test_can_and_cannot(self, role):
        """Test role-level rules use wildcard resource and scope."""
        allowed = role.can("see_me")
        denied = role.cannot("fool_me")

        assert role.keys() == ["*:/*/see_me", "*:/*/fool_me"]
        assert allowed.outcome is ALLOW
        assert denied.outcome is DENY
        assert allowed.role is role
        assert role.own_rules == [allowed, denied]

    def test_duplicate_rule(self, role):
        """Test duplicate keys in one role are rejected."""
        role.can("see_me")

        with pytest.raises(BadConfiguration):
            role.can("see_me")

        with pytest.raises(BadConfiguration):
            role.cannot("see_me")

    def test_no_nested_roles(self, role):
        """Test roles cannot be nested."""
        with pytest.raises(AttributeError):
            role.role("admin")

    def test_role_query(self, role):
        """Test querying a role directly."""
        role.can("administrate")

        assert role.allows(action="administrate") is True
        assert role.allows(action="have_fun") is False
        assert role.explain(action="administrate").rule == "*:/*/administrate"


class TestResource:
    """Test cases for Resource."""

    @pytest.fixture
    def role(self):
        """Create Role instance."""
        return Role("admin")

    def test_default_rules(self, role):
        """Test a bare resource grants the default actions."""
        charts = role.resource("charts")

        assert len(role.rules) == 7
        assert charts.selected_actions == DEFAULT_ACTIONS
        assert all(key.startswith("*:/charts/") for key in role.keys())
        assert all(rule.outcome is ALLOW for rule in role.rules)

    def test_only(self, role):
        """Test only narrows the granted actions."""
        role.resource("charts", only=["view"])

        assert role.keys() == ["*:/charts/view"]

    def test_except(self, role):
        """Test except removes granted actions."""
        role.resource("charts", except_=["index"])

        assert len(role.rules) == 6
        assert "*:/charts/index" not in role.rules

    def test_except_unknown_action(self, role):
        """Test excluding an unknown action is allowed."""
        role.resource("charts", **{"except": ["foo"]})

        assert len(role.rules) == 7

    def test_invalid_options(self, role):
        """Test resource options are validated."""
        with pytest.raises(BadConfiguration):
            role.resource("charts", except_=["index"], invalid=["index"])

        with pytest.raises(BadConfiguration):
            role.resource("charts", only=["show"], except_=["index"])

        with pytest.raises(BadConfiguration):
            role.resource("charts", only="show")

    @pytest.mark.parametrize("options", [{"scope": "api"}, {"role": "other"}])
    def test_constructor_names_are_not_options(self, role, options):
        """Test scope and role cannot be smuggled in as resource options."""
        with pytest.raises(BadConfiguration):
            role.resource("charts", **options)

        with pytest.raises(BadConfiguration):
            role.scope("api").resource("charts", **options)

        assert len(role.rules) == 0

    def test_duplicate_resource(self, role):
        """Test resources are unique per role."""
        role.resource("charts")

        with pytest.raises(BadConfiguration):
            role.resource("charts")

    def test_resource_rules(self, role):
        """Test can/cannot on a resource bind the resource."""
        with role.resource("charts", only=[]) as charts:
            charts.can("view")
            charts.cannot("export")

        assert role.keys() == ["*:/charts/view", "*:/charts/export"]

    def test_match(self, role):
        """Test resource matching."""
        charts = Resource("charts", role=role, options={"only": []})

        assert charts.match("charts") is True
        assert charts.match(ANY) is True
        assert charts.match("*") is True
        assert charts.match("reports") is False
        assert repr(charts) == "Resource('charts')"

    def test_no_nesting(self, role):
        """Test resources cannot nest resources or scopes."""
        charts = role.resource("charts")

        with pytest.raises(AttributeError):
            charts.resource("charts")

        with pytest.raises(AttributeError):
            charts.scope("api")


class TestScope:
    """Test cases for Scope."""

    @pytest.fixture
    def role(self):
        """Create Role instance."""
        return Role("admin")

    def test_empty_scope(self, role):
        """Test declaring a scope adds no rules."""
        role.can("see_me")
        role.cannot("fool_me")
        role.scope("api")

        assert len(role.rules) == 2

    def test_resources_in_scope(self, role):
        """Test scoped resources produce scoped keys."""
        with role.scope("api") as api:
            api.resource("charts")

        assert len(role.rules) == 7
        assert all(key.startswith("api:") for key in role.keys())

    def test_scope_rules(self, role):
        """Test can/cannot on a scope bind the scope only."""
        api = role.scope("api")
        api.can("list")

        assert role.keys() == ["api:/*/list"]

    def test_duplicate_scope(self, role):
        """Test scopes are unique per role."""
        role.scope("api")

        with pytest.raises(BadConfiguration):
            role.scope("api")

    def test_duplicate_resource_in_scope(self, role):
        """Test resources are unique per scope."""
        api = role.scope("api")
        api.resource("charts", only=["view"])

        with pytest.raises(BadConfiguration):
            api.resource("charts", only=["export"])

    def test_same_resource_in_two_scopes(self, role):
        """Test one resource name may appear in the wildcard and a named scope."""
        role.resource("charts", only=["view"])
        role.scope("api").resource("charts", only=["view"])

        assert role.keys() == ["*:/charts/view", "api:/charts/view"]

    def test_no_nested_scopes(self, role):
        """Test scopes cannot be nested."""
        api = role.scope("api")

        with pytest.raises(AttributeError):
            api.scope("api")

    def test_match(self, role):
        """Test scope matching."""
        api = Scope("api", role=role)

        assert api.match("api") is True
        assert api.match(ANY) is True
        assert api.match(api) is True
        assert api.match("ui") is False
