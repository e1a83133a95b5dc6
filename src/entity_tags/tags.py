"""Entity tags and the tag string codec

A tag is an immutable reference to an entity of one kind: a machine, unit,
application, relation, environment, user, network or action. Its string
form is `<kind>-<id>`, with kind-specific substitutions applied to the id:

- `machine-10-lxc-1` for machine `10/lxc/1`
- `unit-mysql-1` for unit `mysql/1`
- `relation-wordpress.db#mysql.server` for relation `wordpress:db mysql:server`
- `action-mysql-1_a_321` for action 321 queued on unit `mysql/1`

Tags built from trusted ids use the class constructors, which raise
InvalidIdError on a bad id. Untrusted tag strings go through parse_tag or a
parse_<kind>_tag function, which raise InvalidTagError subclasses.
"""

import logging
from enum import Enum
from typing import Optional, Tuple

from . import grammar
from .errors import (
    InvalidIdError,
    MalformedTagError,
    TagKindMismatchError,
    UnknownTagKindError,
)

logger = logging.getLogger(__name__)

# Separates an action's unit id from its sequence number
ACTION_MARKER = "_a_"
MAX_ACTION_SEQUENCE = 2 ** 32 - 1
_MAX_SEQUENCE_DIGITS = len(str(MAX_ACTION_SEQUENCE))


class TagKind(Enum):
    """Kind tokens recognized as tag string prefixes"""
    MACHINE = "machine"
    UNIT = "unit"
    APPLICATION = "application"
    # Legacy token, decodes to an ApplicationTag
    SERVICE = "service"
    RELATION = "relation"
    ENVIRON = "environment"
    USER = "user"
    NETWORK = "network"
    ACTION = "action"


class Tag:
    """Base class of all entity tags

    Subclasses set KIND and, where the id contains characters that cannot
    appear in a tag string, a grammar.Flattening.
    """

    KIND: TagKind
    _flattening = grammar.IDENTITY
    _noun = "name"

    def __init__(self, id_: str):
        if not self.is_valid(id_):
            raise InvalidIdError(id_, self.kind(), self._noun)
        self._id = id_

    @staticmethod
    def is_valid(id_: str) -> bool:
        raise NotImplementedError

    @classmethod
    def from_string(cls, tag: str) -> 'Tag':
        """Parse a tag string that must be of this class's kind"""
        return _parse_kind(tag, cls)

    def kind(self) -> str:
        return self.KIND.value

    def id(self) -> str:
        return self._id

    def _suffix(self) -> str:
        return self._flattening.flatten(self.id())

    def to_string(self) -> str:
        """Get the tag string, `<kind>-<flattened id>`"""
        return f"{self.kind()}-{self._suffix()}"

    def _key(self) -> tuple:
        return (self._id,)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self.id()}')"

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return False
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash((type(self), self._key()))


class MachineTag(Tag):
    KIND = TagKind.MACHINE
    _flattening = grammar.MACHINE_FLATTENING
    _noun = "id"

    @staticmethod
    def is_valid(id_: str) -> bool:
        return grammar.is_valid_machine(id_)

    def is_container(self) -> bool:
        return "/" in self._id

    def container_type(self) -> Optional[str]:
        return grammar.machine_container_type(self._id)

    def parent_tag(self) -> Optional['MachineTag']:
        """Get the tag of the machine hosting this container, if any"""
        parent_id = grammar.machine_parent_id(self._id)
        if parent_id is None:
            return None
        return MachineTag(parent_id)


class ApplicationTag(Tag):
    KIND = TagKind.APPLICATION

    @staticmethod
    def is_valid(id_: str) -> bool:
        return grammar.is_valid_application(id_)


ServiceTag = ApplicationTag


class UnitTag(Tag):
    KIND = TagKind.UNIT
    _flattening = grammar.UNIT_FLATTENING

    @staticmethod
    def is_valid(id_: str) -> bool:
        return grammar.is_valid_unit(id_)

    def application_name(self) -> str:
        return grammar.split_unit_name(self._id)[0]

    def application_tag(self) -> ApplicationTag:
        return ApplicationTag(self.application_name())

    def number(self) -> int:
        return grammar.split_unit_name(self._id)[1]


class RelationTag(Tag):
    KIND = TagKind.RELATION
    _flattening = grammar.RELATION_FLATTENING
    _noun = "key"

    @staticmethod
    def is_valid(id_: str) -> bool:
        return grammar.is_valid_relation(id_)

    def endpoints(self) -> Tuple[Tuple[str, str], ...]:
        """Get the (application, relation name) pair of each endpoint"""
        return grammar.split_relation_key(self._id)

    def is_peer(self) -> bool:
        return len(self.endpoints()) == 1


class EnvironTag(Tag):
    KIND = TagKind.ENVIRON
    _noun = "uuid"

    @staticmethod
    def is_valid(id_: str) -> bool:
        return grammar.is_valid_environ(id_)


class UserTag(Tag):
    KIND = TagKind.USER

    @staticmethod
    def is_valid(id_: str) -> bool:
        return grammar.is_valid_user(id_)

    def user_name(self) -> str:
        return grammar.split_user_name(self._id)[0]

    def domain(self) -> Optional[str]:
        return grammar.split_user_name(self._id)[1]


class NetworkTag(Tag):
    KIND = TagKind.NETWORK

    @staticmethod
    def is_valid(id_: str) -> bool:
        return grammar.is_valid_network(id_)


class ActionTag(Tag):
    """Tag of an action queued on a unit

    The id joins the unit id and a per-unit sequence number with
    ACTION_MARKER, so every action of a unit shares the prefix
    `<unit id>_a_`.
    """

    KIND = TagKind.ACTION

    def __init__(self, unit: UnitTag, sequence: int):
        if not isinstance(unit, UnitTag):
            raise InvalidIdError(unit, self.kind(), "unit tag")
        if (isinstance(sequence, bool) or not isinstance(sequence, int)
                or not 0 <= sequence <= MAX_ACTION_SEQUENCE):
            raise InvalidIdError(sequence, self.kind(), "sequence")
        self._unit = unit
        self._sequence = sequence

    @staticmethod
    def is_valid(id_: str) -> bool:
        return is_valid_action(id_)

    def unit_tag(self) -> UnitTag:
        return self._unit

    def sequence(self) -> int:
        return self._sequence

    def prefix(self) -> str:
        """Get the id prefix shared by all actions of this tag's unit"""
        return action_prefix(self._unit)

    def id(self) -> str:
        return f"{self._unit.id()}{ACTION_MARKER}{self._sequence}"

    def _suffix(self) -> str:
        return f"{self._unit._suffix()}{ACTION_MARKER}{self._sequence}"

    def _key(self) -> tuple:
        return (self._unit, self._sequence)

    def __repr__(self) -> str:
        return f"ActionTag({self._unit!r}, {self._sequence})"


def action_prefix(unit: UnitTag) -> str:
    """Get the action id prefix for a unit, for filtering its actions"""
    return f"{unit.id()}{ACTION_MARKER}"


def parse_action_id(action_id: str) -> Optional[ActionTag]:
    """Parse an action id such as `mysql/1_a_321`

    Returns None if the id does not contain the marker exactly once, the
    part before it is not a unit name, or the part after it is not a
    canonical decimal that fits in 32 unsigned bits.
    """
    if not isinstance(action_id, str):
        return None
    parts = action_id.split(ACTION_MARKER)
    if len(parts) != 2:
        return None
    unit_name, sequence = parts
    if not grammar.is_valid_unit(unit_name):
        return None
    # is_valid_number rejects empty strings and leading zeros
    if len(sequence) > _MAX_SEQUENCE_DIGITS or not grammar.is_valid_number(sequence):
        return None
    value = int(sequence)
    if value > MAX_ACTION_SEQUENCE:
        return None
    return ActionTag(UnitTag(unit_name), value)


def is_valid_action(action_id: str) -> bool:
    return parse_action_id(action_id) is not None


def _decode_simple(cls: type, suffix: str) -> Optional[Tag]:
    id_ = cls._flattening.restore(suffix)
    if not cls.is_valid(id_):
        return None
    return cls(id_)


def _decode_action(suffix: str) -> Optional[ActionTag]:
    parts = suffix.split(ACTION_MARKER)
    if len(parts) != 2:
        return None
    unit_name = grammar.UNIT_FLATTENING.restore(parts[0])
    return parse_action_id(f"{unit_name}{ACTION_MARKER}{parts[1]}")


def _decode(kind: TagKind, suffix: str) -> Optional[Tag]:
    """Decode the id part of a tag string of a known kind"""
    if kind is TagKind.MACHINE:
        return _decode_simple(MachineTag, suffix)
    elif kind is TagKind.UNIT:
        return _decode_simple(UnitTag, suffix)
    elif kind is TagKind.APPLICATION or kind is TagKind.SERVICE:
        return _decode_simple(ApplicationTag, suffix)
    elif kind is TagKind.RELATION:
        return _decode_simple(RelationTag, suffix)
    elif kind is TagKind.ENVIRON:
        return _decode_simple(EnvironTag, suffix)
    elif kind is TagKind.USER:
        return _decode_simple(UserTag, suffix)
    elif kind is TagKind.NETWORK:
        return _decode_simple(NetworkTag, suffix)
    elif kind is TagKind.ACTION:
        return _decode_action(suffix)
    raise AssertionError(f"unhandled tag kind {kind!r}")


def tag_kind(tag: str) -> TagKind:
    """Get the kind of a tag string from its prefix, without decoding the id"""
    token, sep, _ = tag.partition("-")
    if not sep or not token:
        logger.debug("rejected tag %r: no kind prefix", tag)
        raise UnknownTagKindError(tag)
    try:
        return TagKind(token)
    except ValueError:
        logger.debug("rejected tag %r: unknown kind %r", tag, token)
        raise UnknownTagKindError(tag, token) from None


def parse_tag(tag: str) -> Tag:
    """Parse a tag string of any kind

    Raises UnknownTagKindError if the prefix is missing or not a known kind,
    and MalformedTagError if the id does not satisfy the kind's grammar.
    """
    kind = tag_kind(tag)
    result = _decode(kind, tag[len(kind.value) + 1:])
    if result is None:
        logger.debug("rejected tag %r: malformed %s id", tag, kind.value)
        raise MalformedTagError(tag, kind.value)
    return result


def _parse_kind(tag: str, cls: type) -> Tag:
    result = parse_tag(tag)
    if not isinstance(result, cls):
        logger.debug("rejected tag %r: expected kind %s, got %s",
                     tag, cls.KIND.value, result.kind())
        raise TagKindMismatchError(tag, cls.KIND.value, result.kind())
    return result


def parse_machine_tag(tag: str) -> MachineTag:
    return _parse_kind(tag, MachineTag)


def parse_unit_tag(tag: str) -> UnitTag:
    return _parse_kind(tag, UnitTag)


def parse_application_tag(tag: str) -> ApplicationTag:
    return _parse_kind(tag, ApplicationTag)


parse_service_tag = parse_application_tag


def parse_relation_tag(tag: str) -> RelationTag:
    return _parse_kind(tag, RelationTag)


def parse_environ_tag(tag: str) -> EnvironTag:
    return _parse_kind(tag, EnvironTag)


def parse_user_tag(tag: str) -> UserTag:
    return _parse_kind(tag, UserTag)


def parse_network_tag(tag: str) -> NetworkTag:
    return _parse_kind(tag, NetworkTag)


def parse_action_tag(tag: str) -> ActionTag:
    return _parse_kind(tag, ActionTag)
