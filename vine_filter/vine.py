from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
from threading import Lock
import logging
import srsly
from .errors import DecodeError, MissingFieldError, TypeMismatchError
from .parsing import (
    FieldType,
    GrammarDependency,
    GrammarDependencyParser,
    TaggedToken,
)

logger = logging.getLogger(__name__)

DEFAULT_MODIFIER_RELATIONS = ("amod", "nn")


class Vine:
    """A vine document together with its decoded part-of-speech tags and grammar dependencies.

    The fields are read in a fixed order (*id*, *url*, *text*, *scrubbed_text*, *pos_tags*,
    *grammar_dependencies*) and the first missing, wrongly typed or undecodable one aborts
    construction: a *Vine* is either complete or not created at all. Apart from the log of
    matched filter names, which only ever grows, a *Vine* does not change once constructed.

    Args:

    document -- a mapping as decoded from one JSON vine object.
    """

    grammar_dependency_parser = GrammarDependencyParser()

    def __init__(self, document: Mapping[str, Any]) -> None:
        if not isinstance(document, Mapping):
            raise TypeMismatchError(
                " ".join(("Vine document must be an object, not", type(document).__name__))
            )
        self._document = dict(document)
        self._id: str = self._get_field(document, "id", str)
        self._url: str = self._get_field(document, "url", str)
        self._text: str = self._get_field(document, "text", str)
        self._scrubbed_text: str = self._get_field(document, "scrubbed_text", str)
        self._tagged_tokens: Tuple[TaggedToken, ...] = tuple(
            TaggedToken.from_string(entry)
            for entry in self._get_field(document, "pos_tags", (list, tuple))
        )
        self._grammar_dependencies: Tuple[GrammarDependency, ...] = tuple(
            self.grammar_dependency_parser.parse(entry, self)
            for entry in self._get_field(document, "grammar_dependencies", (list, tuple))
        )
        self._good_filters: List[str] = []
        self._lock = Lock()

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> Optional["Vine"]:
        """Returns a new *Vine*, or *None* if *document* does not describe a valid vine. The
        reason for a failure is logged."""
        try:
            return cls(document)
        except (MissingFieldError, TypeMismatchError, DecodeError) as error:
            label = document.get("id") if isinstance(document, Mapping) else None
            logger.warning("Unable to construct vine %r: %s", label, error)
            return None

    @staticmethod
    def _get_field(document: Mapping[str, Any], name: str, expected_type) -> Any:
        if name not in document:
            raise MissingFieldError(" ".join(("Vine document has no field", repr(name))))
        value = document[name]
        if not isinstance(value, expected_type):
            raise TypeMismatchError(
                " ".join(
                    ("Vine document field", repr(name), "has wrong type", type(value).__name__)
                )
            )
        return value

    @property
    def id(self) -> str:
        return self._id

    @property
    def url(self) -> str:
        return self._url

    @property
    def text(self) -> str:
        return self._text

    @property
    def scrubbed_text(self) -> str:
        return self._scrubbed_text

    @property
    def tagged_tokens(self) -> Tuple[TaggedToken, ...]:
        return self._tagged_tokens

    @property
    def grammar_dependencies(self) -> Tuple[GrammarDependency, ...]:
        return self._grammar_dependencies

    @property
    def good_filters(self) -> Tuple[str, ...]:
        """The names of the filters this vine has matched so far, in the order they matched."""
        with self._lock:
            return tuple(self._good_filters)

    def record_match(self, filter_name: str) -> None:
        """Appends *filter_name* to the log of matched filters. Safe to call from several
        threads at once."""
        with self._lock:
            self._good_filters.append(filter_name)

    def contains_grammar_dependency(self, name: str) -> bool:
        for grammar_dependency in self._grammar_dependencies:
            if grammar_dependency.relation == name:
                return True
        return False

    def contains_tagged_token(self, tagged_token: TaggedToken) -> bool:
        return tagged_token in self._tagged_tokens

    def get_grammar_dependencies_by_name(self, name: str) -> List[GrammarDependency]:
        """Returns the grammar dependencies whose relation is *name*, e.g. *dobj*."""
        return [
            grammar_dependency
            for grammar_dependency in self._grammar_dependencies
            if grammar_dependency.relation == name
        ]

    def get_tagged_tokens_from_grammar_dependencies(
        self, grammar_dependencies: Iterable[GrammarDependency], field_type: FieldType
    ) -> List[TaggedToken]:
        """Returns the tagged tokens on the governor or dependent side of
        *grammar_dependencies*, skipping endpoints that cannot be resolved."""
        tagged_tokens = []
        for grammar_dependency in grammar_dependencies:
            tagged_token = grammar_dependency.get_tagged_token(field_type)
            if tagged_token is not None:
                tagged_tokens.append(tagged_token)
        return tagged_tokens

    def contains_strict_string(self, string: str, scrubbed: bool = False) -> bool:
        """Returns *True* if *string* is one of the whitespace-separated words of the text or
        the scrubbed text, ignoring case. *#dog* does not match *#doghouse*."""
        words = self._scrubbed_text.split() if scrubbed else self._text.split()
        target = string.lower()
        for word in words:
            if word.lower() == target:
                return True
        return False

    @staticmethod
    def contains_string_in_grammar_dependency(
        string: str, grammar_dependency: GrammarDependency, field_type: FieldType
    ) -> bool:
        return grammar_dependency.get_enumerated_token(field_type).token == string

    def matches_phrase(
        self,
        phrase: str,
        relations: Optional[Union[str, Iterable[str]]],
        field_type: FieldType,
        modifier_relations: Sequence[str] = DEFAULT_MODIFIER_RELATIONS,
    ) -> bool:
        """Returns *True* if *phrase*, e.g. *green bell pepper*, is present in the grammar
        dependencies.

        The last word of the phrase is its root and must be the *field_type* token of some
        dependency whose relation is one of *relations* (*None* allows any relation). Every other
        word must then be attached directly to the root by a modifier relation (*amod* or *nn*),
        with the root as governor and the word as dependent. Modifiers of modifiers are not
        followed.
        """
        words = phrase.split()
        if len(words) == 0:
            return False
        if isinstance(relations, str):
            relations = {relations}
        elif relations is not None:
            relations = set(relations)
        root_word = words[-1]
        word_evaluations = [False] * len(words)

        for grammar_dependency in self._grammar_dependencies:
            if (
                relations is None or grammar_dependency.relation in relations
            ) and self.contains_string_in_grammar_dependency(
                root_word, grammar_dependency, field_type
            ):
                word_evaluations[-1] = True
                break
        if not word_evaluations[-1]:
            return False

        if len(words) > 1:
            for modifier_relation in modifier_relations:
                for grammar_dependency in self.get_grammar_dependencies_by_name(
                    modifier_relation
                ):
                    if not self.contains_string_in_grammar_dependency(
                        root_word, grammar_dependency, FieldType.GRAMMAR_DEPENDENCY_GOVERNOR
                    ):
                        continue
                    for index, word in enumerate(words[:-1]):
                        if self.contains_string_in_grammar_dependency(
                            word, grammar_dependency, FieldType.GRAMMAR_DEPENDENCY_DEPENDENT
                        ):
                            word_evaluations[index] = True

        return all(word_evaluations)

    def to_document(self) -> Dict[str, Any]:
        """Returns the source document with the matched filter names added as *good_filters*."""
        document = dict(self._document)
        document["good_filters"] = list(self.good_filters)
        return document

    def to_json(self) -> str:
        return srsly.json_dumps(self.to_document())

    def __repr__(self) -> str:
        return "".join(("Vine(", repr(self._id), ")"))
