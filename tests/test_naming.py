"""
Unit tests for identifier, symbol and path key derivation.
"""

import pytest

from scenariotree.core.codegen.emitter import emit_module
from scenariotree.core.codegen.generator import generate_artifact
from scenariotree.core.naming import FALLBACK_IDENTIFIER, NamingEngine, normalize_label
from scenariotree.core.tree.parser import parse_tree

DUPLICATE_SUBTREES = """\
Vault
├── when caller is owner
│   ├── given paused
│   │   └── it should revert
│   └── given active
│       └── it should pass
└── when caller is operator
    ├── given paused
    │   └── it should revert
    └── given active
        └── it should pass
"""


class TestNormalizeLabel:
    """Tests for normalize_label."""

    @pytest.mark.parametrize(
        "label,expected",
        [
            ("when id is null", "whenIdNull"),
            ("when id is not null", "whenIdNotNull"),
            ("given the start time is in the future", "givenStartTimeInFuture"),
            ("it should return DEPLETED", "itShouldReturnDEPLETED"),
            ("When The ID is NULL", "whenIDNULL"),
            ("given amount > 0 (wei)", "givenAmount0Wei"),
        ],
    )
    def test_camel_case(self, label, expected):
        """Labels become alphanumeric camelCase without stopwords."""
        assert normalize_label(label) == expected

    def test_leading_digit(self):
        """Identifiers never start with a digit."""
        assert normalize_label("42 holders") == "n42Holders"

    def test_nothing_left(self):
        """Labels without usable words fall back to a fixed identifier."""
        assert normalize_label("the ... is") == FALLBACK_IDENTIFIER

    def test_custom_stopwords(self):
        """Stopwords can be extended."""
        assert normalize_label("it should revert", {"should"}) == "itRevert"

    def test_deterministic(self):
        """Same label, same identifier."""
        assert normalize_label("given fully withdrawn") == normalize_label("given fully withdrawn")


class TestNamingEngine:
    """Tests for NamingEngine on real trees."""

    def test_identifiers_follow_labels(self, hash_pair_tree):
        naming = NamingEngine(hash_pair_tree)

        assert naming.identifier((1,)) == "whenIdNull"
        assert naming.identifier((2,)) == "whenIdNotNull"
        assert naming.identifier((2, 2, 2, 1)) == "givenStartTimeInFuture"

    def test_path_key(self, hash_pair_tree):
        """Path keys join the identifier chain with dots."""
        naming = NamingEngine(hash_pair_tree)

        assert naming.chain((2, 1, 1)) == ["whenIdNotNull", "givenFullyWithdrawn", "itShouldReturnDEPLETED"]
        assert naming.path_key((2, 1, 1)) == "whenIdNotNull.givenFullyWithdrawn.itShouldReturnDEPLETED"

    def test_identifiers_in_preorder(self, hash_pair_tree):
        identifiers = NamingEngine(hash_pair_tree).identifiers()

        assert list(identifiers) == [position for position, _ in hash_pair_tree.walk()]

    def test_sibling_collision_suffixed(self):
        """Siblings that normalize alike get their sibling index appended."""
        text = (
            "Vault\n"
            "├── when the id is null\n"
            "│   └── it should revert\n"
            "└── when id is null\n"
            "    └── it should pass\n"
        )
        naming = NamingEngine(parse_tree(text))

        assert naming.identifier((1,)) == "whenIdNull1"
        assert naming.identifier((2,)) == "whenIdNull2"

    def test_suffix_collision_resolved(self):
        """A suffixed identifier that clashes with a sibling's plain one is suffixed again."""
        text = (
            "Vault\n"
            "├── when x\n"
            "│   └── it should a\n"
            "├── when the x\n"
            "│   └── it should b\n"
            "└── when x1\n"
            "    └── it should c\n"
        )
        naming = NamingEngine(parse_tree(text))
        names = [naming.identifier((idx,)) for idx in (1, 2, 3)]

        assert len(set(names)) == 3

    def test_symbols_unique_across_tree(self):
        """Repeated identifiers in different subtrees get qualified symbols."""
        naming = NamingEngine(parse_tree(DUPLICATE_SUBTREES))

        assert naming.identifier((1, 1)) == naming.identifier((2, 1)) == "givenPaused"
        assert naming.symbol((1, 1)) == "whenCallerOwnerGivenPaused"
        assert naming.symbol((2, 1)) == "whenCallerOperatorGivenPaused"
        assert naming.symbol((1,)) == "whenCallerOwner"

    def test_keys_distinct_for_repeated_subtrees(self):
        naming = NamingEngine(parse_tree(DUPLICATE_SUBTREES))

        assert naming.path_key((1, 1, 1)) == "whenCallerOwner.givenPaused.itShouldRevert"
        assert naming.path_key((2, 1, 1)) == "whenCallerOperator.givenPaused.itShouldRevert"

    def test_keys_stable_under_reorder(self):
        """Swapping siblings changes positions but not keys."""
        swapped = (
            "Vault\n"
            "├── when caller is operator\n"
            "│   ├── given active\n"
            "│   │   └── it should pass\n"
            "│   └── given paused\n"
            "│       └── it should revert\n"
            "└── when caller is owner\n"
            "    ├── given paused\n"
            "    │   └── it should revert\n"
            "    └── given active\n"
            "        └── it should pass\n"
        )
        original = NamingEngine(parse_tree(DUPLICATE_SUBTREES))
        reordered = NamingEngine(parse_tree(swapped))

        original_keys = {original.path_key(p) for p in original.tree.leaf_positions()}
        reordered_keys = {reordered.path_key(p) for p in reordered.tree.leaf_positions()}
        assert original_keys == reordered_keys


class TestSymbols:
    """Tests for tree-wide symbol uniqueness."""

    QUALIFIED_CLASH = (
        "Vault\n"
        "├── when a\n"
        "│   ├── given b\n"
        "│   │   ├── it should x\n"
        "│   │   └── it should y\n"
        "│   └── it should z\n"
        "├── when a given b\n"
        "│   ├── given b\n"
        "│   │   ├── it should x\n"
        "│   │   └── it should y\n"
        "│   └── it should z\n"
        "└── when a given b 2\n"
        "    ├── it should x\n"
        "    └── it should y\n"
    )

    def test_suffixed_symbol_skips_taken_names(self):
        """A suffixed symbol never reuses a name another node already holds."""
        naming = NamingEngine(parse_tree(self.QUALIFIED_CLASH))
        symbols = [naming.symbol(position) for position, _ in naming.tree.walk()]

        assert len(set(symbols)) == len(symbols)
        assert naming.symbol((1, 1)) == "whenGivenB"
        assert naming.symbol((2,)) == "whenGivenB2"
        assert naming.symbol((3,)) == "whenGivenB3"

    def test_setup_fixtures_defined_once(self):
        artifact = generate_artifact(parse_tree(self.QUALIFIED_CLASH))
        symbols = [unit.symbol for unit in artifact.setup_units]
        module = emit_module(artifact)

        assert len(set(symbols)) == len(symbols)
        for symbol in symbols:
            assert module.count(f"def {symbol}(") == 1

    def test_qualified_names_unchanged_without_clash(self):
        naming = NamingEngine(parse_tree(DUPLICATE_SUBTREES))

        assert naming.symbol((1, 1, 1)) == "whenCallerOwnerGivenPausedItShouldRevert"
        assert naming.symbol((2,)) == "whenCallerOperator"
