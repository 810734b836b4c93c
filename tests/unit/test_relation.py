from __future__ import annotations

import dataclasses

import pytest

from finrel import (
    CompositionMismatchError,
    InvalidRelationError,
    NotAFunctionError,
    OutsideUniverseError,
    Relation,
    UndefinedElementError,
)


def _rel(domain: set, codomain: set, pairs: set) -> Relation:
    return Relation(domain=domain, codomain=codomain, pairs=pairs)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_stores_universes_and_pairs(self) -> None:
        r = _rel({1, 2, 3}, {"a", "b"}, {(1, "a")})
        assert r.domain == frozenset({1, 2, 3})
        assert r.codomain == frozenset({"a", "b"})
        assert r.pairs == frozenset({(1, "a")})

    def test_left_component_outside_domain_fails(self) -> None:
        with pytest.raises(InvalidRelationError) as excinfo:
            _rel({1}, {"a"}, {(2, "a")})
        assert excinfo.value.pair == (2, "a")
        assert excinfo.value.code == "PAIR_OUTSIDE_UNIVERSE"
        assert excinfo.value.details["side"] == "domain"

    def test_right_component_outside_codomain_fails(self) -> None:
        with pytest.raises(InvalidRelationError) as excinfo:
            _rel({1}, {"a"}, {(1, "z")})
        assert excinfo.value.details["side"] == "codomain"
        assert excinfo.value.details["element"] == "z"

    def test_first_offending_pair_in_input_order_is_reported(self) -> None:
        with pytest.raises(InvalidRelationError) as excinfo:
            Relation(domain={1}, codomain={"a"}, pairs=[(1, "a"), (5, "a"), (6, "a")])
        assert excinfo.value.pair == (5, "a")

    def test_malformed_pair_fails(self) -> None:
        with pytest.raises(InvalidRelationError) as excinfo:
            Relation(domain={1}, codomain={"a"}, pairs=[(1, "a", "extra")])
        assert excinfo.value.code == "MALFORMED_PAIR"

    @pytest.mark.parametrize("raw", ["ab", b"ab"])
    def test_text_is_not_split_into_a_pair(self, raw: object) -> None:
        with pytest.raises(InvalidRelationError) as excinfo:
            Relation(domain={"a", 97}, codomain={"b", 98}, pairs=[raw])
        assert excinfo.value.code == "MALFORMED_PAIR"

    def test_list_pairs_are_frozen_into_tuples(self) -> None:
        r = Relation(domain=[1, 2], codomain=["a"], pairs=[[1, "a"], [2, "a"], [1, "a"]])
        assert r.pairs == frozenset({(1, "a"), (2, "a")})
        assert len(r) == 2

    def test_unhashable_elements_are_rejected(self) -> None:
        with pytest.raises(TypeError):
            Relation(domain=[[1]], codomain=["a"])

    def test_pairs_default_to_empty(self) -> None:
        r = Relation(domain={1}, codomain={"a"})
        assert r.pairs == frozenset()
        assert r.is_partial()


class TestImmutability:
    def test_fields_cannot_be_reassigned(self) -> None:
        r = _rel({1}, {"a"}, {(1, "a")})
        with pytest.raises(dataclasses.FrozenInstanceError):
            r.pairs = frozenset()  # type: ignore[misc]

    def test_accessors_return_frozensets(self) -> None:
        r = _rel({1}, {"a"}, {(1, "a")})
        assert isinstance(r.domain, frozenset)
        assert isinstance(r.codomain, frozenset)
        assert isinstance(r.pairs, frozenset)

    def test_mutating_the_input_sets_does_not_leak(self) -> None:
        domain = {1, 2}
        pairs = {(1, "a")}
        r = _rel(domain, {"a"}, pairs)
        domain.add(3)
        pairs.add((2, "a"))
        assert r.domain == frozenset({1, 2})
        assert r.pairs == frozenset({(1, "a")})

    def test_equal_relations_hash_equal(self) -> None:
        left = _rel({1, 2}, {"a"}, {(1, "a")})
        right = Relation(domain=[2, 1], codomain=("a",), pairs=[(1, "a")])
        assert left == right
        assert hash(left) == hash(right)
        assert len({left, right}) == 1

    def test_codomain_participates_in_equality(self) -> None:
        assert _rel({1}, {"a"}, {(1, "a")}) != _rel({1}, {"a", "b"}, {(1, "a")})


# ---------------------------------------------------------------------------
# Classification scenarios
# ---------------------------------------------------------------------------

class TestClassification:
    def test_bijection(self) -> None:
        r = _rel({1, 2}, {"a", "b"}, {(1, "a"), (2, "b")})
        assert r.is_function()
        assert r.is_injective()
        assert r.is_surjective()
        assert r.is_bijective()
        assert r.is_total()

    def test_surjection_that_is_not_injective(self) -> None:
        r = _rel({1, 2}, {"a"}, {(1, "a"), (2, "a")})
        assert r.is_function()
        assert not r.is_injective()
        assert r.is_surjective()
        assert not r.is_bijective()

    def test_partial_relation(self) -> None:
        r = _rel({1, 2, 3}, {"a", "b"}, {(1, "a")})
        assert not r.is_total()
        assert r.is_partial()
        assert r.image(2) == frozenset()

    def test_totality_does_not_require_functionality(self) -> None:
        r = _rel({1}, {"a", "b"}, {(1, "a"), (1, "b")})
        assert not r.is_function()
        assert r.is_total()

    def test_empty_relation_is_a_function(self) -> None:
        r = Relation.empty({1, 2}, {"a"})
        assert r.is_function()
        assert r.is_injective()
        assert not r.is_surjective()

    @pytest.mark.parametrize("predicate", ["is_injective", "is_surjective", "is_bijective"])
    def test_function_only_predicates_reject_non_functions(self, predicate: str) -> None:
        r = _rel({1}, {"a", "b"}, {(1, "a"), (1, "b")})
        with pytest.raises(NotAFunctionError) as excinfo:
            getattr(r, predicate)()
        assert excinfo.value.operation == predicate
        assert excinfo.value.details["witness"] == 1
        assert excinfo.value.details["images"] == frozenset({"a", "b"})

    def test_bijection_need_not_be_total(self) -> None:
        r = _rel({1, 2, 3}, {"a"}, {(1, "a")})
        assert r.is_bijective()
        assert r.is_partial()


# ---------------------------------------------------------------------------
# Membership and queries
# ---------------------------------------------------------------------------

class TestQueries:
    r = Relation(
        domain={1, 2, 3},
        codomain={"a", "b", "c"},
        pairs={(1, "a"), (1, "b"), (2, "b")},
    )

    def test_universe_membership(self) -> None:
        assert self.r.in_domain(3)
        assert not self.r.in_domain(4)
        assert self.r.in_codomain("c")
        assert not self.r.in_codomain("z")

    def test_is_defined_for(self) -> None:
        assert self.r.is_defined_for(1)
        assert not self.r.is_defined_for(3)

    def test_is_defined_for_outside_domain_raises(self) -> None:
        with pytest.raises(OutsideUniverseError) as excinfo:
            self.r.is_defined_for(9)
        assert excinfo.value.code == "OUTSIDE_DOMAIN"

    def test_in_range(self) -> None:
        assert self.r.in_range("b")
        assert not self.r.in_range("c")

    def test_in_range_outside_codomain_raises(self) -> None:
        with pytest.raises(OutsideUniverseError) as excinfo:
            self.r.in_range("z")
        assert excinfo.value.code == "OUTSIDE_CODOMAIN"
        assert excinfo.value.side == "codomain"

    def test_image_and_image_of_set(self) -> None:
        assert self.r.image(1) == frozenset({"a", "b"})
        assert self.r.image(3) == frozenset()
        assert self.r.image("not-in-domain") == frozenset()
        assert self.r.image_of_set({1, 2}) == frozenset({"a", "b"})
        assert self.r.image_of_set(set()) == frozenset()

    def test_preimage_and_preimage_of_set(self) -> None:
        assert self.r.preimage("b") == frozenset({1, 2})
        assert self.r.preimage("c") == frozenset()
        assert self.r.preimage_of_set({"a", "c"}) == frozenset({1})

    def test_projections(self) -> None:
        assert self.r.defined_domain() == frozenset({1, 2})
        assert self.r.range() == frozenset({"a", "b"})

    def test_container_protocol(self) -> None:
        assert (1, "a") in self.r
        assert (3, "a") not in self.r
        assert sorted(self.r) == [(1, "a"), (1, "b"), (2, "b")]


class TestFunctionalImage:
    def test_returns_single_value(self) -> None:
        r = _rel({1, 2}, {"a", "b"}, {(1, "a"), (2, "b")})
        assert r.functional_image(2) == "b"
        assert r.functional_image(2) in r.image(2)

    def test_non_function_raises(self) -> None:
        r = _rel({1}, {"a", "b"}, {(1, "a"), (1, "b")})
        with pytest.raises(NotAFunctionError):
            r.functional_image(1)

    def test_outside_domain_raises(self) -> None:
        r = _rel({1}, {"a"}, {(1, "a")})
        with pytest.raises(OutsideUniverseError):
            r.functional_image(2)

    def test_undefined_element_raises(self) -> None:
        r = _rel({1, 2}, {"a"}, {(1, "a")})
        with pytest.raises(UndefinedElementError) as excinfo:
            r.functional_image(2)
        assert excinfo.value.element == 2
        assert excinfo.value.code == "UNDEFINED_ELEMENT"

    def test_to_mapping(self) -> None:
        r = _rel({1, 2, 3}, {"a", "b"}, {(1, "a"), (2, "a")})
        assert r.to_mapping() == {1: "a", 2: "a"}

    def test_to_mapping_requires_function(self) -> None:
        r = _rel({1}, {"a", "b"}, {(1, "a"), (1, "b")})
        with pytest.raises(NotAFunctionError):
            r.to_mapping()


# ---------------------------------------------------------------------------
# Derived relations
# ---------------------------------------------------------------------------

class TestInverse:
    def test_swaps_universes_and_pairs(self) -> None:
        r = _rel({1, 2}, {"a", "b", "c"}, {(1, "a"), (1, "b")})
        inv = r.inverse()
        assert inv.domain == frozenset({"a", "b", "c"})
        assert inv.codomain == frozenset({1, 2})
        assert inv.pairs == frozenset({("a", 1), ("b", 1)})

    def test_inverse_of_non_function_is_allowed(self) -> None:
        r = _rel({1, 2}, {"a"}, {(1, "a"), (2, "a")})
        assert not r.inverse().is_function()

    def test_operand_is_unchanged(self) -> None:
        r = _rel({1}, {"a"}, {(1, "a")})
        r.inverse()
        assert r.pairs == frozenset({(1, "a")})


class TestCompose:
    def test_simple_chain(self) -> None:
        r1 = _rel({1}, {2}, {(1, 2)})
        r2 = _rel({2}, {3}, {(2, 3)})
        composed = r1.compose(r2)
        assert composed.domain == frozenset({1})
        assert composed.codomain == frozenset({3})
        assert composed.pairs == frozenset({(1, 3)})

    def test_multi_valued_fan_out(self) -> None:
        r1 = _rel({1}, {"x", "y"}, {(1, "x"), (1, "y")})
        r2 = _rel({"x", "y"}, {10, 20, 30}, {("x", 10), ("y", 20), ("y", 30)})
        assert r1.compose(r2).pairs == frozenset({(1, 10), (1, 20), (1, 30)})

    def test_unreachable_elements_drop_out(self) -> None:
        r1 = _rel({1, 2}, {"x", "y"}, {(1, "x"), (2, "y")})
        r2 = _rel({"x", "y"}, {10}, {("x", 10)})
        composed = r1.compose(r2)
        assert composed.pairs == frozenset({(1, 10)})
        assert composed.domain == frozenset({1, 2})

    def test_subset_intermediate_universe_is_rejected(self) -> None:
        r1 = _rel({1}, {"x", "y"}, {(1, "x")})
        r2 = _rel({"x"}, {10}, {("x", 10)})
        with pytest.raises(CompositionMismatchError) as excinfo:
            r1.compose(r2)
        assert excinfo.value.code == "COMPOSITION_MISMATCH"
        assert excinfo.value.details["codomain_only"] == frozenset({"y"})
        assert excinfo.value.details["domain_only"] == frozenset()

    def test_compose_with_identity_is_neutral(self) -> None:
        r = _rel({1, 2}, {"a", "b"}, {(1, "a"), (1, "b")})
        assert r.compose(Relation.identity(r.codomain)) == r
        assert Relation.identity(r.domain).compose(r) == r


class TestBuilders:
    def test_identity(self) -> None:
        ident = Relation.identity({1, 2})
        assert ident.pairs == frozenset({(1, 1), (2, 2)})
        assert ident.is_bijective()
        assert ident.is_total()

    def test_from_mapping_defaults_universes(self) -> None:
        r = Relation.from_mapping({1: "a", 2: "b"})
        assert r.domain == frozenset({1, 2})
        assert r.codomain == frozenset({"a", "b"})
        assert r.is_bijective()

    def test_from_mapping_with_wider_universes(self) -> None:
        r = Relation.from_mapping({1: "a"}, domain={1, 2}, codomain={"a", "b"})
        assert r.is_partial()
        assert not r.is_surjective()

    def test_from_mapping_still_validates(self) -> None:
        with pytest.raises(InvalidRelationError):
            Relation.from_mapping({1: "a"}, domain={2})

    def test_restrict(self) -> None:
        r = _rel({1, 2, 3}, {"a", "b"}, {(1, "a"), (2, "b"), (3, "b")})
        restricted = r.restrict({1, 2})
        assert restricted.domain == frozenset({1, 2})
        assert restricted.codomain == r.codomain
        assert restricted.pairs == frozenset({(1, "a"), (2, "b")})
        assert restricted.is_injective()

    def test_restrict_outside_domain_raises(self) -> None:
        r = _rel({1}, {"a"}, {(1, "a")})
        with pytest.raises(OutsideUniverseError):
            r.restrict({1, 7})
