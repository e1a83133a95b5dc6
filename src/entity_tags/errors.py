"""Error classes for entity tags

Parsing untrusted tag strings raises subclasses of TagError. Constructing a
tag from an id the caller asserted to be valid raises InvalidIdError, a
ValueError outside the TagError hierarchy.
"""

from typing import Optional


class TagError(Exception):
    """Base exception for tag parsing errors"""
    pass


class InvalidTagError(TagError):
    """Tag string could not be parsed

    `kind` is the kind the tag was expected to have, or "" when it could not
    be determined.
    """
    def __init__(self, tag: str, kind: str = ""):
        self.tag = tag
        self.kind = kind
        if kind:
            message = f"'{tag}' is not a valid {kind} tag"
        else:
            message = f"'{tag}' is not a valid tag"
        super().__init__(message)


class UnknownTagKindError(InvalidTagError):
    """Empty input, missing separator or unrecognized kind prefix"""
    def __init__(self, tag: str, token: Optional[str] = None):
        self.token = token
        super().__init__(tag)


class MalformedTagError(InvalidTagError):
    """Known kind prefix followed by an id that violates the kind's grammar"""
    pass


class TagKindMismatchError(InvalidTagError):
    """Well-formed tag of a different kind than the one requested"""
    def __init__(self, tag: str, kind: str, actual: str):
        self.actual = actual
        super().__init__(tag, kind)


class InvalidIdError(ValueError):
    """A trusted id does not satisfy its kind's grammar (programmer error)"""
    def __init__(self, value: object, kind: str, noun: str = "name"):
        self.value = value
        self.kind = kind
        super().__init__(f"'{value}' is not a valid {kind} {noun}")
