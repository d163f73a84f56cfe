# -*- coding: utf-8 -*-

"""
Feature structures and their unification.

A feature structure is a flat mapping from attribute names to values. A value is either an atom
(``nom``, ``sg``, ``he``), the universal wildcard TOP (written ``**top**`` in grammar files), or a
reference to a variable cell. Variable cells live in a VariableStore, a union-find table that is
created for a single rule application and thrown away afterwards. Rule templates refer to cells
indirectly through coreference tags (``#1``); instantiating a template against a store maps every
occurrence of the same tag onto the same cell, so that narrowing the cell through one occurrence is
visible through all the others.

Unification never modifies its inputs. It returns a new structure, and the only state that changes
along the way is the store's cells, which belong to exactly one rule application.
"""

import itertools
from collections.abc import Mapping
from functools import reduce
from sys import intern
from typing import Union, Optional, Iterable, Iterator, Dict, Tuple, List, FrozenSet, Any

from featurechart.exceptions import ValueConflict, AttributeConflict

__author__ = 'Aaron Hosford'
__all__ = [
    'TOP_STR',
    'Atom',
    'Top',
    'TOP',
    'VariableRef',
    'Tag',
    'FeatureStructure',
    'FeatureTemplate',
    'VariableStore',
    'unify_values',
    'unify',
    'unify_all',
    'instantiate',
    'resolve',
    'realize',
]


TOP_STR = '**top**'


class Atom:
    """An atomic feature value, such as ``nom`` in ``[ case: nom ]``. Atoms unify with equal atoms
    and with TOP, and with nothing else."""

    __slots__ = ('_name', '_hash')

    def __init__(self, name: str):
        if not isinstance(name, str):
            raise TypeError(name, str)
        if not name or name == TOP_STR or name.startswith('#'):
            raise ValueError("Invalid atom name: %r" % name)
        self._name = intern(name)
        self._hash = hash(self._name)

    @property
    def name(self) -> str:
        return self._name

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: 'Atom') -> bool:
        if not isinstance(other, Atom):
            return NotImplemented
        return self is other or self._name == other._name

    def __ne__(self, other: 'Atom') -> bool:
        if not isinstance(other, Atom):
            return NotImplemented
        return not self == other

    def __lt__(self, other: 'Atom') -> bool:
        if not isinstance(other, Atom):
            return NotImplemented
        return self._name < other._name

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return type(self).__name__ + '(' + repr(self._name) + ')'


class Top:
    """The universal wildcard value. It unifies with anything, yielding the other value. There is
    only ever one instance, TOP."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __reduce__(self):
        return Top, ()

    def __str__(self) -> str:
        return TOP_STR

    def __repr__(self) -> str:
        return 'TOP'


TOP = Top()


class VariableRef:
    """A reference to a variable cell in a particular VariableStore."""

    __slots__ = ('_store_id', '_index', '_hash')

    def __init__(self, store_id: int, index: int):
        self._store_id = store_id
        self._index = index
        self._hash = hash((store_id, index))

    @property
    def store_id(self) -> int:
        """The identifier of the store that owns the referenced cell."""
        return self._store_id

    @property
    def index(self) -> int:
        """The index of the referenced cell within its store."""
        return self._index

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: 'VariableRef') -> bool:
        if not isinstance(other, VariableRef):
            return NotImplemented
        return self._store_id == other._store_id and self._index == other._index

    def __ne__(self, other: 'VariableRef') -> bool:
        if not isinstance(other, VariableRef):
            return NotImplemented
        return not self == other

    def __str__(self) -> str:
        return '?%d' % self._index

    def __repr__(self) -> str:
        return type(self).__name__ + repr((self._store_id, self._index))


class Tag:
    """A coreference tag appearing in a rule template, optionally carrying an initial value. Every
    occurrence of the same tag name within one rule application refers to the same variable
    cell."""

    __slots__ = ('_name', '_value', '_hash')

    def __init__(self, name: str, value: 'Union[Atom, Top]' = TOP):
        if not isinstance(name, str):
            raise TypeError(name, str)
        if not name:
            raise ValueError("Tag names must be non-empty.")
        if not isinstance(value, (Atom, Top)):
            raise TypeError(value, (Atom, Top))
        self._name = intern(name)
        self._value = value
        self._hash = hash(self._name) ^ hash(self._value)

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> 'Union[Atom, Top]':
        """The value the tagged cell starts out with."""
        return self._value

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: 'Tag') -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        return self._name == other._name and self._value == other._value

    def __ne__(self, other: 'Tag') -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        return not self == other

    def __str__(self) -> str:
        if self._value is TOP:
            return '#' + self._name
        return '#%s %s' % (self._name, self._value)

    def __repr__(self) -> str:
        if self._value is TOP:
            return type(self).__name__ + '(' + repr(self._name) + ')'
        return type(self).__name__ + repr((self._name, self._value))


ConcreteValue = Union[Atom, Top]
Value = Union[Atom, Top, VariableRef]
TemplateValue = Union[Atom, Top, Tag]


class _FeatureMapping(Mapping):
    """Immutable attribute/value mapping shared by feature structures and templates."""

    def __init__(self, features: Union[Mapping, Iterable[Tuple[str, Any]]] = None, **kwargs):
        if features is None:
            items = []
        elif isinstance(features, Mapping):
            items = list(features.items())
        else:
            items = list(features)
        items.extend(kwargs.items())
        self._features = {}
        for key, value in items:
            if not isinstance(key, str):
                raise TypeError(key, str)
            if not key:
                raise ValueError("Attribute names must be non-empty.")
            self._features[intern(key)] = self._coerce_value(value)
        self._hash = None

    @classmethod
    def _coerce_value(cls, value):
        raise NotImplementedError()

    def __getitem__(self, key: str):
        return self._features[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._features)

    def __len__(self) -> int:
        return len(self._features)

    def __contains__(self, key) -> bool:
        return key in self._features

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(frozenset(self._features.items()))
        return self._hash

    def __eq__(self, other) -> bool:
        if not isinstance(other, _FeatureMapping) or type(self) is not type(other):
            return NotImplemented
        return self is other or self._features == other._features

    def __ne__(self, other) -> bool:
        if not isinstance(other, _FeatureMapping) or type(self) is not type(other):
            return NotImplemented
        return not self == other

    def __str__(self) -> str:
        if not self._features:
            return '[]'
        return '[ ' + ', '.join('%s: %s' % (key, value)
                                for key, value in self._features.items()) + ' ]'

    def __repr__(self) -> str:
        return type(self).__name__ + '(' + repr(self._features) + ')'


class FeatureStructure(_FeatureMapping):
    """An immutable mapping from attribute names to atoms, TOP, or variable references. Strings are
    accepted as values for convenience and converted to atoms (or TOP, for ``**top**``)."""

    @classmethod
    def _coerce_value(cls, value) -> Value:
        if isinstance(value, str):
            return TOP if value == TOP_STR else Atom(value)
        if not isinstance(value, (Atom, Top, VariableRef)):
            raise TypeError(value, (Atom, Top, VariableRef))
        return value

    def is_concrete(self) -> bool:
        """Return whether the structure is free of variable references."""
        return not any(isinstance(value, VariableRef) for value in self._features.values())

    def iter_variables(self) -> Iterator[VariableRef]:
        for value in self._features.values():
            if isinstance(value, VariableRef):
                yield value

    def unify(self, other: 'FeatureStructure',
              store: 'VariableStore' = None) -> 'FeatureStructure':
        """Shorthand for unify(self, other, store)."""
        return unify(self, other, store)

    def to_dict(self) -> Dict[str, str]:
        """Return a plain dictionary of attribute names to value strings, with TOP written as
        ``**top**``. Only concrete structures can be converted."""
        if not self.is_concrete():
            raise ValueError("Only concrete feature structures can be converted to dictionaries.")
        return {key: str(value) for key, value in self._features.items()}


class FeatureTemplate(_FeatureMapping):
    """The feature annotation of one symbol in a grammar rule. Values are atoms, TOP, or coreference
    tags. Strings starting with ``#`` are accepted for convenience and converted to tags."""

    @classmethod
    def _coerce_value(cls, value) -> TemplateValue:
        if isinstance(value, str):
            if value.startswith('#'):
                return Tag(value[1:])
            return TOP if value == TOP_STR else Atom(value)
        if not isinstance(value, (Atom, Top, Tag)):
            raise TypeError(value, (Atom, Top, Tag))
        return value

    @property
    def tags(self) -> FrozenSet[str]:
        """The names of the coreference tags appearing in the template."""
        return frozenset(value.name for value in self._features.values()
                         if isinstance(value, Tag))

    def is_concrete(self) -> bool:
        """Return whether the template is free of coreference tags."""
        return not any(isinstance(value, Tag) for value in self._features.values())


class VariableStore:
    """
    Variable cells for a single rule application.

    The store is a union-find table: each cell either points to a parent cell or is a root holding
    the current value of its equivalence class, which starts out as TOP and can only be narrowed
    to an atom. References handed out by a store are only valid in that same store; a fresh store
    is created for every rule application, so two applications of one rule can never share a cell.
    """

    _store_ids = itertools.count()

    def __init__(self):
        self._id = next(self._store_ids)
        self._parents = []  # type: List[int]
        self._ranks = []  # type: List[int]
        self._values = []  # type: List[ConcreteValue]
        self._tags = {}  # type: Dict[str, VariableRef]

    def __len__(self) -> int:
        return len(self._parents)

    def __contains__(self, ref: VariableRef) -> bool:
        return (isinstance(ref, VariableRef) and ref.store_id == self._id and
                0 <= ref.index < len(self._parents))

    def __repr__(self) -> str:
        return '<%s #%d: %d cells>' % (type(self).__name__, self._id, len(self._parents))

    @property
    def id(self) -> int:
        return self._id

    @property
    def tags(self) -> Tuple[str, ...]:
        """The tag names bound so far, in order of first appearance."""
        return tuple(self._tags)

    def new_variable(self, value: ConcreteValue = TOP) -> VariableRef:
        """Allocate a new cell holding the given value."""
        if not isinstance(value, (Atom, Top)):
            raise TypeError(value, (Atom, Top))
        index = len(self._parents)
        self._parents.append(index)
        self._ranks.append(0)
        self._values.append(value)
        return VariableRef(self._id, index)

    def variable_for(self, tag: Union[Tag, str]) -> VariableRef:
        """Return the cell for the given tag name, allocating it on first use."""
        name = tag.name if isinstance(tag, Tag) else tag
        ref = self._tags.get(name)
        if ref is None:
            ref = self._tags[intern(name)] = self.new_variable()
        return ref

    def _index(self, ref: VariableRef) -> int:
        if ref not in self:
            raise ValueError("Variable %r does not belong to %r." % (ref, self))
        return ref.index

    def _find_index(self, index: int) -> int:
        parents = self._parents
        root = index
        while parents[root] != root:
            root = parents[root]
        while parents[index] != root:
            parents[index], index = root, parents[index]
        return root

    def find(self, ref: VariableRef) -> VariableRef:
        """Return the root cell of the given cell's equivalence class."""
        root = self._find_index(self._index(ref))
        return ref if root == ref.index else VariableRef(self._id, root)

    def value(self, ref: VariableRef) -> ConcreteValue:
        """Return the value currently bound to the given cell."""
        return self._values[self._find_index(self._index(ref))]

    def narrow(self, ref: VariableRef, value: ConcreteValue) -> VariableRef:
        """Unify the cell's value with the given value, and return the root cell. Raises
        ValueConflict if the cell is already bound to a different atom."""
        root = self._find_index(self._index(ref))
        self._values[root] = unify_values(self._values[root], value)
        return VariableRef(self._id, root)

    def union(self, first: VariableRef, second: VariableRef) -> VariableRef:
        """Merge the equivalence classes of two cells, unifying their values, and return the root
        of the merged class. Raises ValueConflict if the classes are bound to different atoms."""
        first_root = self._find_index(self._index(first))
        second_root = self._find_index(self._index(second))
        if first_root == second_root:
            return VariableRef(self._id, first_root)
        value = unify_values(self._values[first_root], self._values[second_root])

        # Union by rank, breaking ties towards the lower index so the outcome does not depend on
        # argument order.
        if (self._ranks[first_root], -first_root) < (self._ranks[second_root], -second_root):
            first_root, second_root = second_root, first_root
        self._parents[second_root] = first_root
        if self._ranks[first_root] == self._ranks[second_root]:
            self._ranks[first_root] += 1
        self._values[first_root] = value
        return VariableRef(self._id, first_root)

    def bindings(self) -> Dict[str, ConcreteValue]:
        """Return the current value of every tag bound in this store."""
        return {name: self.value(ref) for name, ref in self._tags.items()}


def unify_values(left: Value, right: Value, store: VariableStore = None) -> Value:
    """Unify two individual values. Variable references are followed through the store and
    narrowed or merged; the result for them is the root cell of their class. Raises ValueConflict
    when two different atoms meet."""
    if isinstance(left, VariableRef) or isinstance(right, VariableRef):
        if store is None:
            raise ValueError("Unifying variable references requires a variable store.")
        if isinstance(left, VariableRef):
            if isinstance(right, VariableRef):
                return store.union(left, right)
            return store.narrow(left, right)
        return store.narrow(right, left)
    if not isinstance(left, (Atom, Top)):
        raise TypeError(left, (Atom, Top, VariableRef))
    if not isinstance(right, (Atom, Top)):
        raise TypeError(right, (Atom, Top, VariableRef))
    if left is TOP:
        return right
    if right is TOP or left == right:
        return left
    raise ValueConflict(left, right)


def unify(first: FeatureStructure, second: FeatureStructure,
          store: VariableStore = None) -> FeatureStructure:
    """
    Unify two feature structures, returning their most specific common structure.

    Attributes present in only one of the inputs are copied unchanged. Shared attributes are unified
    value by value. Neither input is modified, though variable cells in the store may be narrowed or
    merged. Raises AttributeConflict if the structures disagree on an attribute.
    """
    if not isinstance(first, FeatureStructure):
        raise TypeError(first, FeatureStructure)
    if not isinstance(second, FeatureStructure):
        raise TypeError(second, FeatureStructure)
    if first is second and first.is_concrete():
        return first
    features = {}
    for key, value in first.items():
        if key in second:
            try:
                features[key] = unify_values(value, second[key], store)
            except ValueConflict as conflict:
                raise AttributeConflict(key, conflict.left, conflict.right) from conflict
        else:
            features[key] = value
    for key, value in second.items():
        if key not in features:
            features[key] = value
    return FeatureStructure(features)


def unify_all(structures: Iterable[FeatureStructure],
              store: VariableStore = None) -> FeatureStructure:
    """Unify any number of feature structures. The result does not depend on their order."""
    return reduce(lambda first, second: unify(first, second, store), structures,
                  FeatureStructure())


def instantiate(template: FeatureTemplate, store: VariableStore) -> FeatureStructure:
    """Realize a rule template for one rule application. Tags are replaced with references to the
    store's cell for that tag; a tag carrying a value narrows its cell to that value."""
    if not isinstance(template, FeatureTemplate):
        raise TypeError(template, FeatureTemplate)
    features = {}
    for key, value in template.items():
        if isinstance(value, Tag):
            ref = store.variable_for(value)
            if value.value is not TOP:
                try:
                    store.narrow(ref, value.value)
                except ValueConflict as conflict:
                    raise AttributeConflict(key, conflict.left, conflict.right) from conflict
            features[key] = ref
        else:
            features[key] = value
    return FeatureStructure(features)


def resolve(value: Value, store: Optional[VariableStore] = None) -> ConcreteValue:
    """Dereference a value to the atom or TOP it is currently bound to."""
    if isinstance(value, VariableRef):
        if store is None:
            raise ValueError("Resolving variable references requires a variable store.")
        return store.value(value)
    if not isinstance(value, (Atom, Top)):
        raise TypeError(value, (Atom, Top, VariableRef))
    return value


def realize(structure: FeatureStructure, store: Optional[VariableStore] = None) \
        -> FeatureStructure:
    """Resolve every value of a structure, producing a concrete structure."""
    if structure.is_concrete():
        return structure
    return FeatureStructure((key, resolve(value, store)) for key, value in structure.items())
