import pytest
from entity_tags import (
    ACTION_MARKER,
    MAX_ACTION_SEQUENCE,
    ActionTag,
    InvalidIdError,
    MalformedTagError,
    TagKindMismatchError,
    UnitTag,
    UnknownTagKindError,
    action_prefix,
    is_valid_action,
    parse_action_id,
    parse_action_tag,
    parse_tag,
)


def test_action_tag():
    tag = ActionTag(UnitTag("mysql/1"), 321)
    assert tag.kind() == "action"
    assert tag.id() == "mysql/1_a_321"
    assert tag.to_string() == "action-mysql-1_a_321"
    assert tag.unit_tag() == UnitTag("mysql/1")
    assert tag.sequence() == 321


def test_parse_action_tag():
    tag = parse_action_tag("action-mysql-1_a_321")
    assert tag.unit_tag() == UnitTag("mysql/1")
    assert tag.sequence() == 321
    assert tag == ActionTag(UnitTag("mysql/1"), 321)


def test_parse_action_tag_invalid_unit():
    # the sequence is well formed but "foo" is not a unit name
    with pytest.raises(MalformedTagError) as exc_info:
        parse_action_tag("action-foo_a_321")
    assert exc_info.value.kind == "action"
    assert exc_info.value.tag == "action-foo_a_321"


def test_parse_action_tag_wrong_kind():
    with pytest.raises(TagKindMismatchError) as exc_info:
        parse_action_tag("unit-mysql-1")
    assert exc_info.value.kind == "action"
    assert exc_info.value.actual == "unit"
    assert str(exc_info.value) == "'unit-mysql-1' is not a valid action tag"

    with pytest.raises(UnknownTagKindError):
        parse_action_tag("mysql-1_a_321")


def test_sequence_canonical_form():
    assert ActionTag(UnitTag("foo/0"), 0).id() == "foo/0_a_0"
    assert ActionTag(UnitTag("foo/0"), 5).id() == "foo/0_a_5"
    assert parse_action_id("foo/0_a_05") is None
    assert parse_action_id("foo/0_a_00") is None
    assert parse_action_id("foo/0_a_0") == ActionTag(UnitTag("foo/0"), 0)


def test_sequence_range():
    max_id = f"foo/0_a_{MAX_ACTION_SEQUENCE}"
    assert MAX_ACTION_SEQUENCE == 4294967295
    assert parse_action_id(max_id).sequence() == 4294967295
    assert parse_action_id("foo/0_a_4294967296") is None
    assert parse_action_id("foo/0_a_" + "9" * 5000) is None
    with pytest.raises(MalformedTagError):
        parse_tag("action-foo-0_a_4294967296")


@pytest.mark.parametrize(
    "action_id,valid",
    [
        ("mysql/1_a_321", True),
        ("rabbitmq-server/0_a_0", True),
        ("foo_a_321", False),
        ("foo/0", False),
        ("foo/0_a_", False),
        ("_a_1", False),
        ("foo/0_a_1_a_2", False),
        ("foo/0_a__a_1", False),
        ("foo/0_a_-1", False),
        ("foo/0_a_+1", False),
        ("foo/0_a_1 ", False),
        ("foo/0_a_1.0", False),
        ("foo/0_a_0x1", False),
        ("foo/0_a_١", False),
        ("foo/0_A_1", False),
        ("foo/00_a_1", False),
        ("", False),
    ],
)
def test_is_valid_action(action_id, valid):
    assert is_valid_action(action_id) == valid
    assert (parse_action_id(action_id) is not None) == valid


def test_is_valid_action_rejects_non_strings():
    assert not is_valid_action(None)
    assert not is_valid_action(321)


@pytest.mark.parametrize(
    "raw",
    [
        "action-",
        "action-mysql-1",
        "action-mysql-1_a_",
        "action-mysql-1_a_007",
        "action-mysql-1_a_1_a_2",
        "action-_a_1",
        "action-foo-55-1_a_1",
    ],
)
def test_parse_action_tag_malformed(raw):
    with pytest.raises(MalformedTagError) as exc_info:
        parse_action_tag(raw)
    assert exc_info.value.kind == "action"


def test_action_prefix():
    unit = UnitTag("mysql/1")
    first = ActionTag(unit, 1)
    second = ActionTag(unit, 22)
    other = ActionTag(UnitTag("mysql/11"), 1)

    assert action_prefix(unit) == "mysql/1" + ACTION_MARKER
    assert first.prefix() == second.prefix() == action_prefix(unit)
    assert first.id().startswith(first.prefix())
    assert second.id().startswith(first.prefix())
    assert not other.id().startswith(first.prefix())


@pytest.mark.parametrize(
    "unit,sequence",
    [
        ("mysql/1", 1),
        (UnitTag("mysql/1"), -1),
        (UnitTag("mysql/1"), MAX_ACTION_SEQUENCE + 1),
        (UnitTag("mysql/1"), "1"),
        (UnitTag("mysql/1"), 1.0),
        (UnitTag("mysql/1"), True),
    ],
)
def test_invalid_action_fails_fast(unit, sequence):
    with pytest.raises(InvalidIdError):
        ActionTag(unit, sequence)


def test_action_tag_equality():
    assert ActionTag(UnitTag("mysql/1"), 1) == ActionTag(UnitTag("mysql/1"), 1)
    assert ActionTag(UnitTag("mysql/1"), 1) != ActionTag(UnitTag("mysql/1"), 2)
    assert ActionTag(UnitTag("mysql/1"), 1) != ActionTag(UnitTag("mysql/2"), 1)
    assert len({ActionTag(UnitTag("mysql/1"), 1), parse_action_tag("action-mysql-1_a_1")}) == 1
