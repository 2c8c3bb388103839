from typing import Any, List, Mapping, Optional, Sequence
from .errors import DecodeError, FilterDefinitionError
from .parsing import FieldType, TaggedToken
from .vine import Vine, DEFAULT_MODIFIER_RELATIONS

GRAMMAR_DEPENDENCY_FIELD_TYPES = (
    FieldType.GRAMMAR_DEPENDENCY_GOVERNOR,
    FieldType.GRAMMAR_DEPENDENCY_DEPENDENT,
)


class Condition:
    """Parent class for all filter conditions. A condition holds a list of alternatives and is
    fulfilled by a vine that satisfies any one of them."""

    TYPE_LABEL = ""

    def matches(self, vine: Vine) -> bool:
        raise NotImplementedError

    @classmethod
    def from_section(
        cls, section: Mapping[str, Any], modifier_relations: Sequence[str]
    ) -> "Condition":
        raise NotImplementedError

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self.__dict__ == other.__dict__

    def __hash__(self) -> int:
        return hash(self.TYPE_LABEL)


class StrictStringCondition(Condition):
    """Fulfilled if one of *words* occurs as a whole word within the text (*FieldType.TEXT*) or
    the scrubbed text (*FieldType.SCRUBBED_TEXT*)."""

    TYPE_LABEL = "strict_string"

    def __init__(self, words: List[str], field_type: FieldType = FieldType.TEXT):
        if field_type not in (FieldType.TEXT, FieldType.SCRUBBED_TEXT):
            raise FilterDefinitionError(
                " ".join(("Strict string condition cannot address", field_type.value))
            )
        self.words = list(words)
        self.field_type = field_type

    def matches(self, vine: Vine) -> bool:
        scrubbed = self.field_type == FieldType.SCRUBBED_TEXT
        return any(vine.contains_strict_string(word, scrubbed) for word in self.words)

    @classmethod
    def from_section(cls, section, modifier_relations):
        return cls(
            _get_string_list(section, "words"),
            _get_field_type(section, FieldType.TEXT),
        )


class TaggedTokenCondition(Condition):
    """Fulfilled if one of *tagged_tokens* occurs in the POS tag sequence."""

    TYPE_LABEL = "tagged_token"

    def __init__(self, tagged_tokens: List[TaggedToken]):
        self.tagged_tokens = list(tagged_tokens)

    def matches(self, vine: Vine) -> bool:
        return any(
            vine.contains_tagged_token(tagged_token) for tagged_token in self.tagged_tokens
        )

    @classmethod
    def from_section(cls, section, modifier_relations):
        tagged_tokens = []
        for entry in _get_string_list(section, "tagged_tokens"):
            try:
                tagged_tokens.append(TaggedToken.from_string(entry))
            except DecodeError as error:
                raise FilterDefinitionError(str(error))
        return cls(tagged_tokens)


class GrammarDependencyCondition(Condition):
    """Fulfilled if the vine has a grammar dependency with one of *relations*."""

    TYPE_LABEL = "grammar_dependency"

    def __init__(self, relations: List[str]):
        self.relations = list(relations)

    def matches(self, vine: Vine) -> bool:
        return any(vine.contains_grammar_dependency(relation) for relation in self.relations)

    @classmethod
    def from_section(cls, section, modifier_relations):
        return cls(_get_string_list(section, "relations"))


class TargetWordCondition(Condition):
    """Fulfilled if one of *target_words*, each a single word or a phrase like
    *green bell pepper*, is present on the *field_type* side of a grammar dependency with one of
    *relations*. *relations* set to *None* allows any relation.
    """

    TYPE_LABEL = "target_word_in_grammar_dependency"

    def __init__(
        self,
        target_words: List[str],
        relations: Optional[List[str]],
        field_type: FieldType,
        modifier_relations: Sequence[str] = DEFAULT_MODIFIER_RELATIONS,
    ):
        if field_type not in GRAMMAR_DEPENDENCY_FIELD_TYPES:
            raise FilterDefinitionError(
                " ".join(("Target word condition cannot address", field_type.value))
            )
        self.target_words = list(target_words)
        self.relations = list(relations) if relations is not None else None
        self.field_type = field_type
        self.modifier_relations = list(modifier_relations)

    def matches(self, vine: Vine) -> bool:
        for target_word in self.target_words:
            if vine.matches_phrase(
                target_word, self.relations, self.field_type, self.modifier_relations
            ):
                return True
        return False

    @classmethod
    def from_section(cls, section, modifier_relations):
        return cls(
            _get_string_list(section, "target_words"),
            _get_string_list(section, "relations", required=False),
            _get_field_type(section, FieldType.GRAMMAR_DEPENDENCY_GOVERNOR),
            modifier_relations,
        )


class TagInGrammarDependencyCondition(Condition):
    """Fulfilled if a grammar dependency with one of *relations* has, on its *field_type* side,
    a token whose part-of-speech tag is one of *tags*, e.g. a *dobj* dependent tagged *NN*."""

    TYPE_LABEL = "tag_in_grammar_dependency"

    def __init__(self, tags: List[str], relations: List[str], field_type: FieldType):
        if field_type not in GRAMMAR_DEPENDENCY_FIELD_TYPES:
            raise FilterDefinitionError(
                " ".join(("Tag condition cannot address", field_type.value))
            )
        self.tags = list(tags)
        self.relations = list(relations)
        self.field_type = field_type

    def matches(self, vine: Vine) -> bool:
        for relation in self.relations:
            tagged_tokens = vine.get_tagged_tokens_from_grammar_dependencies(
                vine.get_grammar_dependencies_by_name(relation), self.field_type
            )
            for tagged_token in tagged_tokens:
                if tagged_token.tag in self.tags:
                    return True
        return False

    @classmethod
    def from_section(cls, section, modifier_relations):
        return cls(
            _get_string_list(section, "tags"),
            _get_string_list(section, "relations"),
            _get_field_type(section, FieldType.GRAMMAR_DEPENDENCY_GOVERNOR),
        )


CONDITION_CLASSES = {
    condition_class.TYPE_LABEL: condition_class
    for condition_class in (
        StrictStringCondition,
        TaggedTokenCondition,
        GrammarDependencyCondition,
        TargetWordCondition,
        TagInGrammarDependencyCondition,
    )
}


class Filter:
    """A named filter. A vine passes the filter if it fulfils every one of *conditions*; a
    filter without conditions is never passed.

    Args:

    name -- the name recorded on vines that pass the filter.
    conditions -- a list of *Condition* objects.
    """

    def __init__(self, name: str, conditions: List[Condition]):
        self.name = name
        self.conditions = list(conditions)

    def matches(self, vine: Vine) -> bool:
        if len(self.conditions) == 0:
            return False
        return all(condition.matches(vine) for condition in self.conditions)

    def evaluate(self, vine: Vine) -> bool:
        """Records the filter name on *vine* if *vine* passes the filter."""
        if self.matches(vine):
            vine.record_match(self.name)
            return True
        return False

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, Filter)
            and self.name == other.name
            and self.conditions == other.conditions
        )

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return "".join(("Filter(", repr(self.name), ")"))


class FilterFactory:
    """Builds filters from configuration sections, e.g.

    [filters.peppers.produce]
    type = "target_word_in_grammar_dependency"
    target_words = ["green bell pepper","pepper"]
    relations = ["dobj"]
    field = "dependent"

    where each subsection of a filter section is one condition.
    """

    def __init__(self, modifier_relations: Sequence[str] = DEFAULT_MODIFIER_RELATIONS):
        self.modifier_relations = list(modifier_relations)

    def filter(self, name: str, section: Mapping[str, Any]) -> Filter:
        if not isinstance(section, Mapping):
            raise FilterDefinitionError(
                " ".join(("Definition of filter", repr(name), "must be a section"))
            )
        conditions = []
        for condition_name, condition_section in section.items():
            conditions.append(self.condition(name, condition_name, condition_section))
        return Filter(name, conditions)

    def filters(self, sections: Mapping[str, Any]) -> List[Filter]:
        return [self.filter(name, section) for name, section in sections.items()]

    def condition(
        self, filter_name: str, condition_name: str, section: Mapping[str, Any]
    ) -> Condition:
        if not isinstance(section, Mapping):
            raise FilterDefinitionError(
                "".join(
                    ("Condition ", filter_name, ".", condition_name, " must be a section")
                )
            )
        type_label = section.get("type")
        if type_label not in CONDITION_CLASSES:
            raise FilterDefinitionError(
                "".join(
                    (
                        "Condition ",
                        filter_name,
                        ".",
                        condition_name,
                        " has unknown type ",
                        repr(type_label),
                    )
                )
            )
        return CONDITION_CLASSES[type_label].from_section(section, self.modifier_relations)


def _get_string_list(
    section: Mapping[str, Any], key: str, required: bool = True
) -> Optional[List[str]]:
    if key not in section:
        if required:
            raise FilterDefinitionError(" ".join(("Condition is missing", repr(key))))
        return None
    value = section[key]
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)) or not all(
        isinstance(entry, str) for entry in value
    ):
        raise FilterDefinitionError(" ".join((repr(key), "must be a list of strings")))
    return list(value)


def _get_field_type(section: Mapping[str, Any], default: FieldType) -> FieldType:
    if "field" not in section:
        return default
    field_name = section["field"]
    if not isinstance(field_name, str):
        raise FilterDefinitionError("'field' must be a string")
    try:
        return FieldType.from_string(field_name)
    except ValueError as error:
        raise FilterDefinitionError(str(error))
