import unittest
from vine_filter.errors import DecodeError
from vine_filter.parsing import (
    EnumeratedToken,
    FieldType,
    GrammarDependency,
    GrammarDependencyParser,
    TaggedToken,
)

parser = GrammarDependencyParser()


class GrammarDependencyParserTest(unittest.TestCase):

    def _assert_decodes(self, encoding, relation, governor, dependent):
        grammar_dependency = parser.parse(encoding)
        self.assertEqual(grammar_dependency.relation, relation)
        self.assertEqual(grammar_dependency.governor, EnumeratedToken(*governor))
        self.assertEqual(grammar_dependency.dependent, EnumeratedToken(*dependent))

    def test_simple(self):
        self._assert_decodes("nn(prices-0,oil-1)", "nn", ("prices", 0), ("oil", 1))

    def test_multidigit_indexes(self):
        self._assert_decodes("dobj(ate-12,sandwich-104)", "dobj", ("ate", 12), ("sandwich", 104))

    def test_relation_with_underscore(self):
        self._assert_decodes("prep_for(cooking-3,dinner-6)", "prep_for", ("cooking", 3), ("dinner", 6))

    def test_copy_node_apostrophes(self):
        self._assert_decodes("nn(prices-0',oil-1'')", "nn", ("prices", 0), ("oil", 1))

    def test_copy_node_apostrophes_governor_only(self):
        self._assert_decodes("conj_and(eat-2''',drink-4)", "conj_and", ("eat", 2), ("drink", 4))

    def test_hyphenated_governor(self):
        self._assert_decodes("amod(bell-pepper-2,green-1)", "amod", ("bell-pepper", 2), ("green", 1))

    def test_hyphenated_dependent(self):
        self._assert_decodes("amod(pepper-3,bell-shaped-2)", "amod", ("pepper", 3), ("bell-shaped", 2))

    def test_hyphenated_tokens_with_digits(self):
        self._assert_decodes("nn(covid-19-4,post-2-3)", "nn", ("covid-19", 4), ("post-2", 3))

    def test_dependent_is_final_comma_segment(self):
        self._assert_decodes("num(dollars-3,1,000-2)", "num", ("dollars", 3), ("000", 2))
        self._assert_decodes("dep(x-1,y-2,z-3)", "dep", ("x", 1), ("z", 3))

    def test_scan_dependent_keeps_final_comma_segment(self):
        self.assertEqual(GrammarDependencyParser.scan_dependent("y-2,z-3')"),
                         EnumeratedToken("z", 3))

    def test_comma_as_dependent(self):
        with self.assertRaises(DecodeError):
            parser.parse("punct(said-3,,-4)")

    def test_comma_as_governor(self):
        self._assert_decodes("dep(,-4,said-3)", "dep", (",", 4), ("said", 3))

    def test_hyphen_as_token(self):
        self._assert_decodes("dep(--2,x-3)", "dep", ("-", 2), ("x", 3))

    def test_parentheses_in_tokens(self):
        self._assert_decodes("dep(:)-2,smile-3)", "dep", (":)", 2), ("smile", 3))
        self._assert_decodes("dep((-2,x-3)", "dep", ("(", 2), ("x", 3))
        self._assert_decodes("dep(x-2,)-3)", "dep", ("x", 2), (")", 3))

    def test_string_representation(self):
        self.assertEqual(str(parser.parse("nn(prices-0',oil-1'')")), "nn(prices-0,oil-1)")

    def test_split_relation(self):
        self.assertEqual(
            GrammarDependencyParser.split_relation("nn(prices-0,oil-1)"),
            ("nn", "prices-0,oil-1)"))

    def test_scan_governor(self):
        governor, rest = parser.scan_governor("bell-pepper-2',green-1)")
        self.assertEqual(governor, EnumeratedToken("bell-pepper", 2))
        self.assertEqual(rest, "green-1)")

    def test_scan_dependent(self):
        self.assertEqual(GrammarDependencyParser.scan_dependent("green-1'')"),
                         EnumeratedToken("green", 1))

    def test_no_owner(self):
        grammar_dependency = parser.parse("nn(prices-0,oil-1)")
        self.assertIsNone(grammar_dependency.get_tagged_token(
            FieldType.GRAMMAR_DEPENDENCY_GOVERNOR))

    def test_wrong_field_type(self):
        grammar_dependency = parser.parse("nn(prices-0,oil-1)")
        with self.assertRaises(ValueError):
            grammar_dependency.get_enumerated_token(FieldType.TEXT)

    def test_malformed(self):
        for encoding in (
                "not-an-edge",
                "nn prices-0,oil-1)",
                "(prices-0,oil-1)",
                "nn(prices-x,oil-1)",
                "nn(prices-0,oil-x)",
                "nn(prices-0,oil-1",
                "nn(prices-0,oil-1) ",
                "nn(prices-0,oil1)",
                "nn(prices0,oil-1)",
                "nn(prices-0,-1)",
                "nn(-0,oil-1)",
                "nn(prices-0)",
                "nn()",
                ""):
            with self.subTest(encoding=encoding):
                with self.assertRaises(DecodeError):
                    parser.parse(encoding)

    def test_not_a_string(self):
        with self.assertRaises(DecodeError):
            parser.parse(17)

    def test_equality_ignores_owner(self):
        first = GrammarDependency(
            "nn", EnumeratedToken("prices", 0), EnumeratedToken("oil", 1))
        second = parser.parse("nn(prices-0,oil-1)")
        self.assertEqual(first, second)
        self.assertEqual(hash(first), hash(second))
        self.assertNotEqual(first, parser.parse("nn(prices-0,oil-2)"))


class TaggedTokenTest(unittest.TestCase):

    def test_from_string(self):
        self.assertEqual(TaggedToken.from_string("NN-oil"), TaggedToken("NN", "oil"))

    def test_only_first_hyphen_separates(self):
        tagged_token = TaggedToken.from_string("HYPH--")
        self.assertEqual(tagged_token.tag, "HYPH")
        self.assertEqual(tagged_token.token, "-")
        self.assertEqual(TaggedToken.from_string("JJ-well-known").token, "well-known")

    def test_string_representation(self):
        self.assertEqual(str(TaggedToken("NNS", "prices")), "NNS-prices")

    def test_malformed(self):
        for entry in ("NN", "-oil", "NN-", ""):
            with self.subTest(entry=entry):
                with self.assertRaises(DecodeError):
                    TaggedToken.from_string(entry)

    def test_not_a_string(self):
        with self.assertRaises(DecodeError):
            TaggedToken.from_string(["NN", "oil"])

    def test_equality(self):
        self.assertEqual(TaggedToken("NN", "oil"), TaggedToken("NN", "oil"))
        self.assertNotEqual(TaggedToken("NN", "oil"), TaggedToken("NNS", "oil"))
        self.assertEqual(len({TaggedToken("NN", "oil"), TaggedToken("NN", "oil")}), 1)


class EnumeratedTokenTest(unittest.TestCase):

    def test_repeated_words_differ_by_position(self):
        self.assertNotEqual(EnumeratedToken("the", 0), EnumeratedToken("the", 4))

    def test_negative_position(self):
        with self.assertRaises(ValueError):
            EnumeratedToken("the", -1)


class FieldTypeTest(unittest.TestCase):

    def test_from_string(self):
        self.assertEqual(FieldType.from_string("governor"),
                         FieldType.GRAMMAR_DEPENDENCY_GOVERNOR)
        self.assertEqual(FieldType.from_string("GRAMMAR_DEPENDENCY_DEPENDENT"),
                         FieldType.GRAMMAR_DEPENDENCY_DEPENDENT)
        self.assertEqual(FieldType.from_string(" Scrubbed_Text "), FieldType.SCRUBBED_TEXT)

    def test_unknown(self):
        with self.assertRaises(ValueError):
            FieldType.from_string("lemma")
