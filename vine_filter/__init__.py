from vine_filter.about import __version__
from vine_filter.errors import (
    VineFilterError,
    DecodeError,
    MissingFieldError,
    TypeMismatchError,
    FilterDefinitionError,
    DuplicateFilterError,
    NoFilterError,
)
from vine_filter.parsing import (
    FieldType,
    EnumeratedToken,
    TaggedToken,
    GrammarDependency,
    GrammarDependencyParser,
)
from vine_filter.vine import Vine
from vine_filter.filtering import (
    Filter,
    FilterFactory,
    StrictStringCondition,
    TaggedTokenCondition,
    GrammarDependencyCondition,
    TargetWordCondition,
    TagInGrammarDependencyCondition,
)
from vine_filter.manager import Manager
