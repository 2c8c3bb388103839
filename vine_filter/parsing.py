from typing import Optional, Tuple
from enum import Enum
import weakref
from .errors import DecodeError

DIGITS = "0123456789"
COPY_NODE_MARK = "'"


class FieldType(Enum):
    """The parts of a vine a filter condition can address."""

    TEXT = "text"
    SCRUBBED_TEXT = "scrubbed_text"
    POS_TAGS = "pos_tags"
    GRAMMAR_DEPENDENCY_GOVERNOR = "governor"
    GRAMMAR_DEPENDENCY_DEPENDENT = "dependent"

    @classmethod
    def from_string(cls, name: str) -> "FieldType":
        """Accepts either the value (e.g. *governor*) or the member name
        (e.g. *GRAMMAR_DEPENDENCY_GOVERNOR*), case-insensitively."""
        normalized_name = name.strip().lower()
        for field_type in cls:
            if normalized_name in (field_type.value, field_type.name.lower()):
                return field_type
        raise ValueError(" ".join(("Unknown field type", repr(name))))


class EnumeratedToken:
    """A token together with its position within the node enumeration of a dependency parse.

    Args:

    token -- the token text.
    position -- the zero-based index the upstream parser assigned to this occurrence of the
        token. It tells apart repeated words, e.g. two occurrences of *the*.
    """

    def __init__(self, token: str, position: int) -> None:
        if position < 0:
            raise ValueError("position must be a non-negative integer.")
        self._token = token
        self._position = position

    @property
    def token(self) -> str:
        return self._token

    @property
    def position(self) -> int:
        return self._position

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, EnumeratedToken)
            and self._token == other._token
            and self._position == other._position
        )

    def __hash__(self) -> int:
        return hash((self._token, self._position))

    def __str__(self) -> str:
        return "-".join((self._token, str(self._position)))

    def __repr__(self) -> str:
        return "".join(("EnumeratedToken(", repr(self._token), ", ", str(self._position), ")"))


class TaggedToken:
    """A token together with its part-of-speech tag."""

    def __init__(self, tag: str, token: str) -> None:
        self._tag = tag
        self._token = token

    @property
    def tag(self) -> str:
        return self._tag

    @property
    def token(self) -> str:
        return self._token

    @classmethod
    def from_string(cls, string: str) -> "TaggedToken":
        """Decodes the compact *TAG-token* form. Only the first hyphen separates, so
        *HYPH--* yields the tag *HYPH* and the token *-*.
        """
        if not isinstance(string, str):
            raise DecodeError(" ".join(("POS tag entry is not a string:", repr(string))))
        tag, separator, token = string.partition("-")
        if separator == "" or len(tag) == 0 or len(token) == 0:
            raise DecodeError(" ".join(("Malformed POS tag entry:", repr(string))))
        return cls(tag, token)

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, TaggedToken)
            and self._tag == other._tag
            and self._token == other._token
        )

    def __hash__(self) -> int:
        return hash((self._tag, self._token))

    def __str__(self) -> str:
        return "-".join((self._tag, self._token))

    def __repr__(self) -> str:
        return "".join(("TaggedToken(", repr(self._tag), ", ", repr(self._token), ")"))


class GrammarDependency:
    """A labelled, directed edge of a dependency parse.

    Args:

    relation -- the grammatical relation, e.g. *nn*, *amod* or *dobj*.
    governor -- the *EnumeratedToken* at the head of the edge.
    dependent -- the *EnumeratedToken* at the tail of the edge.
    vine -- the *Vine* the edge belongs to, or *None*. Only a weak reference is held; it is
        used to resolve endpoints to their tagged tokens and never to change the vine.
    """

    def __init__(
        self,
        relation: str,
        governor: EnumeratedToken,
        dependent: EnumeratedToken,
        vine=None,
    ) -> None:
        self._relation = relation
        self._governor = governor
        self._dependent = dependent
        self._vine_reference = weakref.ref(vine) if vine is not None else None

    @property
    def relation(self) -> str:
        return self._relation

    @property
    def governor(self) -> EnumeratedToken:
        return self._governor

    @property
    def dependent(self) -> EnumeratedToken:
        return self._dependent

    def get_enumerated_token(self, field_type: FieldType) -> EnumeratedToken:
        if field_type == FieldType.GRAMMAR_DEPENDENCY_GOVERNOR:
            return self._governor
        if field_type == FieldType.GRAMMAR_DEPENDENCY_DEPENDENT:
            return self._dependent
        raise ValueError(" ".join(("Not a grammar dependency field:", str(field_type))))

    def get_tagged_token(self, field_type: FieldType) -> Optional[TaggedToken]:
        """Returns the tagged token of the owning vine at the position of the governor or
        dependent, or *None* if there is no owning vine or the position lies outside its
        POS tag sequence.
        """
        enumerated_token = self.get_enumerated_token(field_type)
        if self._vine_reference is None:
            return None
        vine = self._vine_reference()
        if vine is None:
            return None
        tagged_tokens = vine.tagged_tokens
        if enumerated_token.position >= len(tagged_tokens):
            return None
        return tagged_tokens[enumerated_token.position]

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, GrammarDependency)
            and self._relation == other._relation
            and self._governor == other._governor
            and self._dependent == other._dependent
        )

    def __hash__(self) -> int:
        return hash((self._relation, self._governor, self._dependent))

    def __str__(self) -> str:
        """e.g. *nn(prices-0,oil-1)*. Copy-node marks are not reproduced."""
        return "".join(
            (self._relation, "(", str(self._governor), ",", str(self._dependent), ")")
        )

    def __repr__(self) -> str:
        return "".join(("GrammarDependency(", str(self), ")"))


class GrammarDependencyParser:
    """Decodes the textual encoding of a dependency edge, e.g. *nn(prices-0,oil-1)*.

    The grammar is *relation(governor-i,dependent-j)*, where each index may be followed by
    apostrophes marking a copy node. Token text may itself contain hyphens and parentheses,
    so decoding anchors on a hyphen followed by a run of digits, optional
    apostrophes and then a comma (governor) or the closing parenthesis (dependent). The governor
    is found by scanning forwards for the first such anchor, the dependent by scanning backwards
    from the end of the encoding. Of the text before the dependent anchor, only the final
    comma-delimited segment is kept as the dependent token, so *num(dollars-3,1,000-2)* decodes
    the dependent as *000*.
    """

    def parse(self, encoding: str, vine=None) -> GrammarDependency:
        if not isinstance(encoding, str):
            raise DecodeError(
                " ".join(("Grammar dependency entry is not a string:", repr(encoding)))
            )
        relation, remainder = self.split_relation(encoding)
        governor, rest = self.scan_governor(remainder)
        dependent = self.scan_dependent(rest)
        return GrammarDependency(relation, governor, dependent, vine)

    @staticmethod
    def split_relation(encoding: str) -> Tuple[str, str]:
        """Returns the relation and the text following the first opening parenthesis."""
        relation, separator, remainder = encoding.partition("(")
        if separator == "":
            raise DecodeError(
                " ".join(("No opening parenthesis in grammar dependency", repr(encoding)))
            )
        if len(relation) == 0:
            raise DecodeError(" ".join(("No relation in grammar dependency", repr(encoding))))
        return relation, remainder

    def scan_governor(self, remainder: str) -> Tuple[EnumeratedToken, str]:
        """Returns the governor and the text following the comma after its index."""
        hyphen_index = remainder.find("-")
        while hyphen_index != -1:
            anchor = self._read_index_forwards(remainder, hyphen_index, ",")
            if anchor is not None:
                position, rest_start = anchor
                token = remainder[:hyphen_index]
                if len(token) == 0:
                    raise DecodeError(
                        " ".join(("Empty governor token in", repr(remainder)))
                    )
                return EnumeratedToken(token, position), remainder[rest_start:]
            hyphen_index = remainder.find("-", hyphen_index + 1)
        raise DecodeError(" ".join(("No governor index found in", repr(remainder))))

    @staticmethod
    def scan_dependent(rest: str) -> EnumeratedToken:
        """Decodes *dependent-j)*, scanning backwards from the closing parenthesis. The token is
        the final comma-delimited segment before the index."""
        if not rest.endswith(")"):
            raise DecodeError(" ".join(("No closing parenthesis in", repr(rest))))
        cursor = len(rest) - 1
        while cursor > 0 and rest[cursor - 1] == COPY_NODE_MARK:
            cursor -= 1
        digits_end = cursor
        while cursor > 0 and rest[cursor - 1] in DIGITS:
            cursor -= 1
        if cursor == digits_end:
            raise DecodeError(" ".join(("No dependent index found in", repr(rest))))
        digits_start = cursor
        if cursor == 0 or rest[cursor - 1] != "-":
            raise DecodeError(" ".join(("No hyphen before dependent index in", repr(rest))))
        token = rest[: cursor - 1].rsplit(",", 1)[-1]
        if len(token) == 0:
            raise DecodeError(" ".join(("Empty dependent token in", repr(rest))))
        return EnumeratedToken(token, int(rest[digits_start:digits_end]))

    @staticmethod
    def _read_index_forwards(
        text: str, hyphen_index: int, terminator: str
    ) -> Optional[Tuple[int, int]]:
        """Returns the index and the offset following *terminator* if *hyphen_index* starts a
        *-digits'...terminator* anchor, otherwise *None*."""
        cursor = hyphen_index + 1
        while cursor < len(text) and text[cursor] in DIGITS:
            cursor += 1
        if cursor == hyphen_index + 1:
            return None
        digits_end = cursor
        while cursor < len(text) and text[cursor] == COPY_NODE_MARK:
            cursor += 1
        if cursor == len(text) or text[cursor] != terminator:
            return None
        return int(text[hyphen_index + 1 : digits_end]), cursor + 1
