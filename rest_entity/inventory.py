"""Enumerate the operations exposed by an entity class."""

import inspect
from functools import cache

from rest_entity.naming import to_segment


@cache
def operation_names(entity_class: type) -> frozenset[str]:
    """Return the public operation names of a class and its bases.

    Instance methods, classmethods and staticmethods count as operations;
    the initializer, private names and properties do not.
    """
    names: set[str] = set()
    for klass in entity_class.__mro__:
        if klass is object:
            continue
        for name, member in vars(klass).items():
            if name.startswith("_"):
                continue
            if isinstance(member, (classmethod, staticmethod)) or inspect.isfunction(
                member
            ):
                names.add(name)
    return frozenset(names)


def custom_operations(entity_class: type, base: type) -> frozenset[str]:
    """Operations ``entity_class`` adds on top of ``base``."""
    return operation_names(entity_class) - operation_names(base)


def inner_resources_for(entity_class: type, base: type) -> tuple[str, ...]:
    """Path segments for the custom operations of an entity class.

    Example:
        A subclass defining ``repairAll`` yields ``("repair-all",)``.

    """
    names = custom_operations(entity_class, base)
    return tuple(sorted(to_segment(name) for name in names))
