# ============================================================================
# PLACEHOLDER RESOLUTION TESTS
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Tests - $path / ${path} substitution
# PURPOSE: Verify whole-value, template and inline substitution rules
# CREATED: 19 OCT 2026
# ============================================================================
"""
Placeholder Resolution Tests

Tests:
1. "$path" replaces the whole value and keeps its type
2. "${path}" spans render as strings, "" when unresolved
3. Inline "$path" inside a longer string resolves only when found
4. Lists/dicts are walked, keys are never substituted
5. Path syntax (dots, list indexes, brackets)

Run with:
    pytest tests/test_placeholders.py -v
"""

import pytest

from orchestrator.engine.placeholders import (
    PlaceholderResolver,
    lookup,
    resolve_placeholders,
    split_path,
    to_template_string,
)


@pytest.fixture
def resolver():
    return PlaceholderResolver()


@pytest.fixture
def context():
    return {
        "A": {"user": {"id": 42, "name": "ada", "tags": ["x", "y"]}},
        "list": {"data": [{"id": 7}, {"id": 8}]},
        "flags": {"active": True, "deleted": None, "ratio": 1.5, "count": 2.0},
    }


# ============================================================================
# WHOLE-VALUE SUBSTITUTION
# ============================================================================

class TestWholeValue:
    """Strings starting with $ are replaced by the looked-up value."""

    def test_keeps_integer_type(self, resolver, context):
        assert resolver.resolve("$A.user.id", context) == 42

    def test_returns_objects(self, resolver, context):
        assert resolver.resolve("$A.user", context) == {
            "id": 42, "name": "ada", "tags": ["x", "y"],
        }

    def test_returns_lists(self, resolver, context):
        assert resolver.resolve("$A.user.tags", context) == ["x", "y"]

    def test_resolves_null_value(self, resolver, context):
        assert resolver.resolve("$flags.deleted", context) is None

    def test_unresolved_returns_original(self, resolver, context):
        assert resolver.resolve("$A.user.missing", context) == "$A.user.missing"
        assert resolver.resolve("$nope", context) == "$nope"

    def test_bare_sentinel_unchanged(self, resolver, context):
        assert resolver.resolve("$", context) == "$"

    def test_leading_sentinel_is_always_whole_value(self, resolver, context):
        # The rest is a path, so a template at the start does not resolve
        assert resolver.resolve("${A.user.id}", context) == "${A.user.id}"


# ============================================================================
# TEMPLATE SUBSTITUTION
# ============================================================================

class TestTemplate:
    """${path} spans are replaced by string forms."""

    def test_template_span(self, resolver, context):
        assert resolver.resolve("id=${A.user.id}", context) == "id=42"

    def test_unresolved_span_is_empty(self, resolver, context):
        assert resolver.resolve("id=${A.user.missing}", context) == "id="

    def test_multiple_spans(self, resolver, context):
        value = "/users/${A.user.id}/items/${list.data.1.id}?n=${A.user.name}"
        assert resolver.resolve(value, context) == "/users/42/items/8?n=ada"

    def test_scalar_renderings(self, resolver, context):
        value = "a=${flags.active}&d=${flags.deleted}&r=${flags.ratio}&c=${flags.count}"
        assert resolver.resolve(value, context) == "a=true&d=null&r=1.5&c=2"

    def test_containers_render_as_json(self, resolver, context):
        assert resolver.resolve("t=${A.user.tags}", context) == 't=["x","y"]'

    def test_plain_text_untouched(self, resolver, context):
        assert resolver.resolve("no placeholders here", context) == "no placeholders here"


# ============================================================================
# INLINE REFERENCES
# ============================================================================

class TestInline:
    """$path inside a longer string."""

    def test_inline_reference_in_url(self, resolver):
        context = {"user": {"id": 42}}
        assert resolver.resolve("/o?uid=$user.id", context) == "/o?uid=42"

    def test_inline_unresolved_left_verbatim(self, resolver):
        assert resolver.resolve("/o?uid=$user.id", {}) == "/o?uid=$user.id"

    def test_inline_reference_ends_at_hyphen(self, resolver):
        context = {"user": {"id": 42}}
        assert resolver.resolve("/o?uid=$user.id-x", context) == "/o?uid=42-x"
        assert resolver.resolve("key-$user.id.", context) == "key-42."

    def test_price_text_is_safe(self, resolver, context):
        assert resolver.resolve("costs $5", context) == "costs $5"


# ============================================================================
# STRUCTURES
# ============================================================================

class TestStructures:
    """Recursion over lists and dicts."""

    def test_nested_structures(self, resolver, context):
        value = {
            "uid": "$A.user.id",
            "filter": {"names": ["$A.user.name", "literal"], "label": "u-${A.user.id}"},
        }
        assert resolver.resolve(value, context) == {
            "uid": 42,
            "filter": {"names": ["ada", "literal"], "label": "u-42"},
        }

    def test_keys_not_substituted(self, resolver, context):
        assert resolver.resolve({"$A.user.id": "x"}, context) == {"$A.user.id": "x"}

    def test_scalars_pass_through(self, resolver, context):
        for value in (None, 0, 3.5, True, False):
            assert resolver.resolve(value, context) is value

    def test_does_not_mutate_input(self, resolver, context):
        value = {"a": ["$A.user.id"]}
        resolver.resolve(value, context)
        assert value == {"a": ["$A.user.id"]}

    def test_convenience_function(self, context):
        assert resolve_placeholders(["$A.user.id"], context) == [42]

    def test_has_placeholders(self, resolver):
        assert resolver.has_placeholders({"a": ["x", "${b}"]})
        assert resolver.has_placeholders("$a")
        assert not resolver.has_placeholders({"a": ["x", 1]})


# ============================================================================
# PATHS
# ============================================================================

class TestPaths:
    """Dotted path parsing and lookup."""

    def test_split_path(self):
        assert split_path("a.b[0].c") == ["a", "b", "0", "c"]
        assert split_path("a['k'].b") == ["a", "k", "b"]

    def test_lookup_list_index(self, context):
        assert lookup(context, "list.data[1].id") == 8
        assert lookup(context, "list.data.0.id") == 7

    def test_lookup_out_of_range_is_missing(self, resolver, context):
        assert resolver.resolve("$list.data.5.id", context) == "$list.data.5.id"

    def test_lookup_through_scalar_is_missing(self, resolver, context):
        assert resolver.resolve("$A.user.id.deeper", context) == "$A.user.id.deeper"

    def test_to_template_string(self):
        assert to_template_string("s") == "s"
        assert to_template_string(False) == "false"
        assert to_template_string({"a": 1}) == '{"a":1}'
