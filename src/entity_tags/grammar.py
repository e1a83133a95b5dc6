"""Id grammars for every tag kind

Each kind's id grammar is a compiled regular expression matched against the
whole id, wrapped by an is_valid_* predicate. The predicates are the only
place a kind's grammar is checked; tag constructors and the tag string
decoder both go through them.

Ids of some kinds contain characters that are replaced in the flattened
tag string form, e.g. `10/lxc/1` becomes `machine-10-lxc-1`. The
replacements live in one Flattening per kind, used for both formatting and
decoding. The grammars never allow a replacement character in the position
it would be restored to, so the substitution is lossless.
"""

import re
from typing import Dict, Optional, Tuple

from .errors import InvalidIdError


NUMBER_SNIPPET = r"(?:0|[1-9][0-9]*)"
# Each hyphen-separated segment after the first must contain a letter, so an
# application name can never end in "-<digits>" and be confused with a
# flattened unit number.
APPLICATION_SNIPPET = r"(?:[a-z][a-z0-9]*(?:-[a-z0-9]*[a-z][a-z0-9]*)*)"
CONTAINER_TYPE_SNIPPET = r"(?:[a-z]+)"
RELATION_SNIPPET = r"(?:[a-z][a-z0-9]*(?:[_-][a-z0-9]+)*)"
ENDPOINT_SNIPPET = rf"(?:{APPLICATION_SNIPPET}:{RELATION_SNIPPET})"
USER_PART_SNIPPET = r"(?:[a-zA-Z0-9][a-zA-Z0-9.+-]*[a-zA-Z0-9])"

_NUMBER = re.compile(NUMBER_SNIPPET)
_MACHINE = re.compile(
    rf"{NUMBER_SNIPPET}(?:/{CONTAINER_TYPE_SNIPPET}/{NUMBER_SNIPPET})*")
_APPLICATION = re.compile(APPLICATION_SNIPPET)
_UNIT = re.compile(rf"({APPLICATION_SNIPPET})/({NUMBER_SNIPPET})")
_ENDPOINT = re.compile(rf"({APPLICATION_SNIPPET}):({RELATION_SNIPPET})")
_RELATION = re.compile(rf"{ENDPOINT_SNIPPET}(?: {ENDPOINT_SNIPPET})?")
_ENVIRON = re.compile(r"[a-zA-Z0-9][a-zA-Z0-9._-]*")
_USER = re.compile(rf"({USER_PART_SNIPPET})(?:@({USER_PART_SNIPPET}))?")
_NETWORK = re.compile(r"[a-zA-Z0-9_-]+")


class Flattening:
    """Reversible character substitution between an id and its tag suffix

    With `last_only`, restoring replaces only the last occurrence of each
    substitute, for ids whose grammar allows the substitute character
    elsewhere (unit ids: application names contain hyphens).
    """

    def __init__(self, replacements: Dict[str, str], last_only: bool = False):
        self.replacements = dict(replacements)
        self.last_only = last_only

    def flatten(self, id_: str) -> str:
        """Replace id characters with their tag string substitutes"""
        for original, substitute in self.replacements.items():
            id_ = id_.replace(original, substitute)
        return id_

    def restore(self, suffix: str) -> str:
        """Reverse flatten() on the suffix of a tag string"""
        for original, substitute in self.replacements.items():
            if self.last_only:
                pos = suffix.rfind(substitute)
                # a substitute at position 0 cannot follow an application name
                if pos > 0:
                    suffix = suffix[:pos] + original + suffix[pos + 1:]
            else:
                suffix = suffix.replace(substitute, original)
        return suffix


IDENTITY = Flattening({})
MACHINE_FLATTENING = Flattening({"/": "-"})
UNIT_FLATTENING = Flattening({"/": "-"}, last_only=True)
RELATION_FLATTENING = Flattening({":": ".", " ": "#"})


def _matches(pattern: 're.Pattern[str]', value: object) -> bool:
    return isinstance(value, str) and pattern.fullmatch(value) is not None


def is_valid_number(s: str) -> bool:
    """Check for a non-negative decimal without leading zeros"""
    return _matches(_NUMBER, s)


def is_valid_machine(machine_id: str) -> bool:
    """Check a machine id such as `0` or `10/lxc/1`"""
    return _matches(_MACHINE, machine_id)


def is_valid_application(name: str) -> bool:
    """Check an application (service) name such as `rabbitmq-server`"""
    return _matches(_APPLICATION, name)


def is_valid_unit(name: str) -> bool:
    """Check a unit name such as `wordpress/42`"""
    return _matches(_UNIT, name)


def is_valid_relation(key: str) -> bool:
    """Check a relation key: one endpoint (peer) or two separated by a space"""
    return _matches(_RELATION, key)


def is_valid_environ(uuid: str) -> bool:
    return _matches(_ENVIRON, uuid)


def is_valid_user(name: str) -> bool:
    """Check a user name with an optional `@domain`"""
    return _matches(_USER, name)


def is_valid_network(name: str) -> bool:
    return _matches(_NETWORK, name)


def split_unit_name(unit_name: str) -> Tuple[str, int]:
    """Split a valid unit name into its application name and number

    Raises InvalidIdError if the unit name is not valid.
    """
    match = _UNIT.fullmatch(unit_name) if isinstance(unit_name, str) else None
    if match is None:
        raise InvalidIdError(unit_name, "unit")
    return match.group(1), int(match.group(2))


def unit_application(unit_name: str) -> str:
    """Get the name of the application a unit belongs to"""
    return split_unit_name(unit_name)[0]


def split_relation_key(key: str) -> Tuple[Tuple[str, str], ...]:
    """Split a relation key into (application, relation) endpoint pairs"""
    if not is_valid_relation(key):
        raise InvalidIdError(key, "relation", "key")
    return tuple(_ENDPOINT.fullmatch(ep).groups() for ep in key.split(" "))


def split_user_name(name: str) -> Tuple[str, Optional[str]]:
    """Split a user name into the local name and the domain (or None)"""
    match = _USER.fullmatch(name) if isinstance(name, str) else None
    if match is None:
        raise InvalidIdError(name, "user")
    return match.group(1), match.group(2)


def is_container_machine(machine_id: str) -> bool:
    """Check whether a machine id names a container inside another machine"""
    return is_valid_machine(machine_id) and "/" in machine_id


def machine_parent_id(machine_id: str) -> Optional[str]:
    """Get the id of the machine hosting a container, or None for top level"""
    if not is_valid_machine(machine_id):
        raise InvalidIdError(machine_id, "machine", "id")
    parts = machine_id.split("/")
    if len(parts) < 3:
        return None
    return "/".join(parts[:-2])


def machine_container_type(machine_id: str) -> Optional[str]:
    """Get the container type (e.g. `lxc`) of a container machine id"""
    if not is_valid_machine(machine_id):
        raise InvalidIdError(machine_id, "machine", "id")
    parts = machine_id.split("/")
    if len(parts) < 3:
        return None
    return parts[-2]
