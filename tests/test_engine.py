import copy

import pytest

from schemaorg_validator.errors import RecordCycleError
from schemaorg_validator.validation import SchemaValidator, ViolationKind


def kinds(violations):
    return [v.kind for v in violations]


def paths(violations):
    return [v.path for v in violations]


class TestValidate:

    def test_valid_howto_has_no_violations(self, validator, tea_howto):
        assert validator.validate(tea_howto) == []

    def test_wrong_type_for_total_time(self, validator, tea_howto):
        tea_howto["totalTime"] = 5

        violations = validator.validate(tea_howto)

        assert len(violations) == 1
        assert violations[0].kind == ViolationKind.TYPE_MISMATCH
        assert violations[0].path == "totalTime"
        assert violations[0].message == 'Property "totalTime" expects: Duration, got: Integer'

    def test_missing_type_at_root(self, validator):
        violations = validator.validate({"name": "No type here"})

        assert len(violations) == 1
        assert violations[0].path == ""
        assert violations[0].kind == ViolationKind.MISSING_TYPE
        assert violations[0].message == "Missing @type"

    def test_non_object_record_is_missing_type(self, validator):
        assert kinds(validator.validate("just text")) == [ViolationKind.MISSING_TYPE]

    def test_unknown_type_stops_descent(self, validator):
        violations = validator.validate({"@type": "Spaceship", "warpSpeed": 9})

        assert len(violations) == 1
        assert violations[0].kind == ViolationKind.UNKNOWN_TYPE
        assert violations[0].message == 'Unknown type: "Spaceship"'

    def test_disallowed_property(self, validator, tea_howto):
        tea_howto["invalidProperty"] = "x"

        violations = validator.validate(tea_howto)

        assert len(violations) == 1
        assert violations[0].kind == ViolationKind.DISALLOWED_PROPERTY
        assert violations[0].path == "invalidProperty"
        assert violations[0].message == 'Property "invalidProperty" is not allowed for type "HowTo".'

    def test_inherited_properties_are_allowed(self, validator):
        record = {
            "@type": "Recipe",
            "name": "Pancakes",
            "url": "https://example.com/pancakes",
            "author": {"@type": "Person", "name": "Ada"},
            "totalTime": "PT20M",
            "cookTime": "PT10M",
            "isFamilyFriendly": True,
        }

        assert validator.validate(record) == []

    def test_subtype_values_are_compatible(self, validator):
        record = {
            "@type": "HowTo",
            "name": "https://example.com/is-still-text",
            "tool": "Kettle",
            "step": [{"@type": "HowToStep", "position": 1}],
        }

        assert validator.validate(record) == []

    def test_text_is_not_a_url(self, validator):
        violations = validator.validate({"@type": "Thing", "url": "example.com"})

        assert kinds(violations) == [ViolationKind.TYPE_MISMATCH]
        assert violations[0].message == 'Property "url" expects: URL, got: Text'

    def test_range_alternatives_joined_in_message(self, validator):
        violations = validator.validate({"@type": "HowTo", "tool": 3})

        assert violations[0].message == 'Property "tool" expects: HowToTool | Text, got: Integer'

    def test_nested_violations_carry_paths(self, validator, tea_howto):
        tea_howto["step"].append({"@type": "HowToStep", "name": "Steep", "badField": "y"})
        tea_howto["tool"]["position"] = "first"
        tea_howto["tool"]["color"] = "red"

        violations = validator.validate(tea_howto)

        assert paths(violations) == ["tool.color", "step[1].badField"]
        assert kinds(violations) == [ViolationKind.DISALLOWED_PROPERTY] * 2

    def test_sequence_elements_are_checked_individually(self, validator):
        record = {"@type": "HowTo", "step": ["Boil water", 2, {"@type": "HowToStep"}]}

        violations = validator.validate(record)

        assert paths(violations) == ["step[1]"]
        assert violations[0].message.endswith("got: Integer")

    def test_empty_sequence_passes(self, validator):
        assert validator.validate({"@type": "HowTo", "step": []}) == []

    def test_untyped_nested_object_is_a_mismatch_without_descent(self, validator):
        record = {"@type": "HowTo", "tool": {"name": "Kettle", "bogus": 1}}

        violations = validator.validate(record)

        assert len(violations) == 1
        assert violations[0].path == "tool"
        assert violations[0].message.endswith("got: Unknown")

    def test_nested_unknown_type(self, validator):
        record = {"@type": "HowTo", "tool": {"@type": "Spaceship", "name": "Enterprise"}}

        violations = validator.validate(record)

        assert kinds(violations) == [ViolationKind.TYPE_MISMATCH, ViolationKind.UNKNOWN_TYPE]
        assert paths(violations) == ["tool", "tool"]

    def test_nested_mismatch_still_descends(self, validator):
        record = {"@type": "HowTo", "author": {"@type": "HowToTool", "name": "Kettle", "bad": 1}}

        violations = validator.validate(record)

        assert kinds(violations) == [ViolationKind.TYPE_MISMATCH, ViolationKind.DISALLOWED_PROPERTY]
        assert paths(violations) == ["author", "author.bad"]

    def test_reserved_keys_are_never_checked(self, validator):
        record = {"@context": {"@vocab": "https://schema.org/"}, "@type": "Thing", "name": "x"}

        assert validator.validate(record) == []

    def test_violations_in_discovery_order(self, validator):
        record = {
            "@type": "HowTo",
            "badKey": 1,
            "totalTime": 5,
            "step": [{"@type": "HowToStep", "badField": "y"}, {"@type": "HowToStep", "other": "z"}],
            "lastBad": True,
        }

        violations = validator.validate(record)

        assert paths(violations) == ["badKey", "totalTime", "step[0].badField", "step[1].other", "lastBad"]

    def test_path_prefix(self, validator):
        violations = validator.validate({"@type": "HowTo", "totalTime": 5}, path_prefix="mainEntity")

        assert paths(violations) == ["mainEntity.totalTime"]

    def test_multi_typed_node_uses_first_type(self, validator):
        record = {"@type": ["Recipe", "HowTo"], "cookTime": "PT5M"}

        assert validator.validate(record) == []

    def test_validate_does_not_mutate(self, validator, tea_howto):
        tea_howto["invalidProperty"] = "x"
        before = copy.deepcopy(tea_howto)

        validator.validate(tea_howto)

        assert tea_howto == before

    def test_cyclic_record_raises(self, validator):
        record = {"@type": "HowTo", "name": "loop"}
        record["step"] = [record]

        with pytest.raises(RecordCycleError):
            validator.validate(record)

    def test_shared_subtree_is_not_a_cycle(self, validator):
        tool = {"@type": "HowToTool", "name": "Kettle"}
        record = {"@type": "HowTo", "tool": [tool, tool]}

        assert validator.validate(record) == []

    def test_check_and_is_valid(self, validator, tea_howto):
        result = validator.check(tea_howto)
        assert result.ok
        assert result.violations == []
        assert validator.is_valid(tea_howto)

        tea_howto["totalTime"] = 5
        result = validator.check(tea_howto)
        assert not result.ok
        assert len(result.by_kind(ViolationKind.TYPE_MISMATCH)) == 1

    def test_violation_wire_shape(self, validator):
        violation = validator.validate({"name": "x"})[0]

        assert violation.to_dict() == {"path": "", "message": "Missing @type", "kind": "missing_type"}


class TestStripInvalid:

    def test_strips_root_and_nested_properties(self, validator, tea_howto):
        tea_howto["invalidProperty"] = "this should be removed"
        tea_howto["step"][0]["badField"] = "should be removed too"

        clean = validator.strip_invalid(tea_howto)

        assert "invalidProperty" not in clean
        assert "badField" not in clean["step"][0]
        assert clean["name"] == "Make Tea"
        assert clean["totalTime"] == "PT5M"
        assert clean["step"][0]["name"] == "Boil water"
        assert clean["@context"] == "https://schema.org/"

    def test_input_is_left_untouched(self, validator, tea_howto):
        tea_howto["invalidProperty"] = "x"
        before = copy.deepcopy(tea_howto)

        clean = validator.strip_invalid(tea_howto)
        clean["tool"]["name"] = "changed"

        assert tea_howto == before

    def test_noop_on_valid_record(self, validator, tea_howto):
        assert validator.validate(tea_howto) == []
        assert validator.strip_invalid(tea_howto) == tea_howto

    def test_idempotent(self, validator, tea_howto):
        tea_howto["invalidProperty"] = "x"
        tea_howto["tool"]["color"] = "red"
        tea_howto["supply"] = [{"@type": "Spaceship", "warp": 9}, {"untyped": True}]

        once = validator.strip_invalid(tea_howto)

        assert validator.strip_invalid(once) == once

    def test_untyped_record_returned_unchanged(self, validator):
        record = {"name": "No type here", "whatever": [1, 2]}

        clean = validator.strip_invalid(record)

        assert clean == record
        assert clean is not record

    def test_untyped_nested_values_pass_through(self, validator):
        record = {"@type": "HowTo", "tool": {"name": "Kettle", "bogus": 1}, "step": ["Boil", {"x": 1}]}

        assert validator.strip_invalid(record) == record

    def test_unknown_type_strips_to_reserved_keys_by_default(self, validator):
        record = {"@context": "https://schema.org/", "@type": "Spaceship", "warpSpeed": 9}

        assert validator.strip_invalid(record) == {"@context": "https://schema.org/", "@type": "Spaceship"}

    def test_unknown_type_passthrough_policy(self, ontology):
        validator = SchemaValidator(ontology, unknown_type_policy="passthrough")
        record = {"@type": "HowTo", "tool": {"@type": "Spaceship", "warpSpeed": 9}, "junk": 1}

        clean = validator.strip_invalid(record)

        assert clean == {"@type": "HowTo", "tool": {"@type": "Spaceship", "warpSpeed": 9}}

    def test_invalid_policy_rejected(self, ontology):
        with pytest.raises(ValueError):
            SchemaValidator(ontology, unknown_type_policy="explode")

    def test_cyclic_record_raises(self, validator):
        record = {"@type": "HowTo"}
        record["tool"] = record

        with pytest.raises(RecordCycleError):
            validator.strip_invalid(record)


def test_describe_type(validator):
    description = validator.describe_type("HowToTool")

    assert description["ancestors"] == ["HowToItem", "ListItem", "Intangible", "Thing"]
    assert description["properties"]["requiredQuantity"] == ["Number", "Text"]
    assert validator.describe_type("Spaceship") is None
