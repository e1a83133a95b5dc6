"""Entity Tags - Canonical identifiers for orchestration entities

This package provides typed tags for machines, units, applications,
relations, environments, users, networks and actions, with lossless
conversion to and from flat `<kind>-<id>` tag strings.
"""

import logging

from .errors import (
    TagError,
    InvalidTagError,
    UnknownTagKindError,
    MalformedTagError,
    TagKindMismatchError,
    InvalidIdError,
)
from .grammar import (
    is_valid_machine,
    is_valid_unit,
    is_valid_application,
    is_valid_relation,
    is_valid_environ,
    is_valid_user,
    is_valid_network,
    is_container_machine,
    machine_parent_id,
    machine_container_type,
    unit_application,
)
from .tags import (
    ACTION_MARKER,
    MAX_ACTION_SEQUENCE,
    TagKind,
    Tag,
    MachineTag,
    UnitTag,
    ApplicationTag,
    ServiceTag,
    RelationTag,
    EnvironTag,
    UserTag,
    NetworkTag,
    ActionTag,
    action_prefix,
    is_valid_action,
    parse_action_id,
    tag_kind,
    parse_tag,
    parse_machine_tag,
    parse_unit_tag,
    parse_application_tag,
    parse_service_tag,
    parse_relation_tag,
    parse_environ_tag,
    parse_user_tag,
    parse_network_tag,
    parse_action_tag,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "TagError",
    "InvalidTagError",
    "UnknownTagKindError",
    "MalformedTagError",
    "TagKindMismatchError",
    "InvalidIdError",
    "is_valid_machine",
    "is_valid_unit",
    "is_valid_application",
    "is_valid_relation",
    "is_valid_environ",
    "is_valid_user",
    "is_valid_network",
    "is_container_machine",
    "machine_parent_id",
    "machine_container_type",
    "unit_application",
    "ACTION_MARKER",
    "MAX_ACTION_SEQUENCE",
    "TagKind",
    "Tag",
    "MachineTag",
    "UnitTag",
    "ApplicationTag",
    "ServiceTag",
    "RelationTag",
    "EnvironTag",
    "UserTag",
    "NetworkTag",
    "ActionTag",
    "action_prefix",
    "is_valid_action",
    "parse_action_id",
    "tag_kind",
    "parse_tag",
    "parse_machine_tag",
    "parse_unit_tag",
    "parse_application_tag",
    "parse_service_tag",
    "parse_relation_tag",
    "parse_environ_tag",
    "parse_user_tag",
    "parse_network_tag",
    "parse_action_tag",
]
