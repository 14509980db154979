"""Sign-convention views: consumed (<0), produced (>0), not connected (=0)."""

from __future__ import annotations

import numpy as np
import pytest
import scipy.sparse as sp

from fba_models import EntryNotFoundError, ModelBundle, to_dense_matrix
from fba_models.connectivity import (
    connectivity_summary,
    metabolite_reactions,
    reaction_equation,
    reaction_participants,
    split_stoichiometry,
)


@pytest.fixture
def toy_bundle():
    """
    EX_A:    --> A
    R1:      2 A --> B
    R2:      B --> 0.5 C
    EX_C:    C -->
    R_empty: (explicit zero stored for D)
    """
    data = np.array([1.0, -2.0, 1.0, -1.0, 0.5, -1.0, 0.0])
    indices = np.array([0, 0, 1, 1, 2, 2, 3])
    indptr = np.array([0, 1, 3, 5, 6, 7])
    S = sp.csc_matrix((data, indices, indptr), shape=(4, 5))
    return ModelBundle(
        S,
        ("A", "B", "C", "D"),
        ("EX_A", "R1", "R2", "EX_C", "R_empty"),
        record_name="toy",
    )


def test_split_recombines_to_S(toy_bundle):
    consumed, produced = split_stoichiometry(toy_bundle)

    assert consumed.shape == produced.shape == (4, 5)
    assert consumed.min() >= 0.0
    assert produced.min() >= 0.0
    assert np.array_equal(produced.toarray() - consumed.toarray(), to_dense_matrix(toy_bundle))
    assert consumed.nnz == 3
    assert produced.nnz == 3


def test_reaction_participants_by_name_and_index(toy_bundle):
    p = reaction_participants(toy_bundle, "R1")
    assert p.reaction == 1
    assert p.consumed.tolist() == [0]
    assert p.consumed_coeffs.tolist() == [2.0]
    assert p.produced.tolist() == [1]
    assert p.produced_coeffs.tolist() == [1.0]

    q = reaction_participants(toy_bundle, 1)
    assert q.consumed.tolist() == p.consumed.tolist()


def test_explicit_zero_is_not_a_participant(toy_bundle):
    p = reaction_participants(toy_bundle, "R_empty")
    assert p.consumed.size == 0
    assert p.produced.size == 0


def test_metabolite_reactions(toy_bundle):
    a = metabolite_reactions(toy_bundle, 0)
    assert a.consumed_by.tolist() == [1]
    assert a.produced_by.tolist() == [0]

    b = metabolite_reactions(toy_bundle, 1)
    assert b.consumed_by.tolist() == [2]
    assert b.produced_by.tolist() == [1]

    d = metabolite_reactions(toy_bundle, 3)
    assert d.consumed_by.size == 0
    assert d.produced_by.size == 0


@pytest.mark.parametrize(
    "reaction, expected",
    [
        ("R1", "2 A --> B"),
        (2, "B --> 0.5 C"),
        ("EX_A", "--> A"),
        ("EX_C", "C -->"),
        ("R_empty", "-->"),
    ],
)
def test_reaction_equation(toy_bundle, reaction, expected):
    assert reaction_equation(toy_bundle, reaction) == expected


def test_reaction_equation_labels_empty_formula():
    S = sp.csc_matrix(np.array([[-1.0], [1.0]]))
    b = ModelBundle(S, ("", "H2O"), ("r1",))
    assert reaction_equation(b, 0, arrow="<=>") == "#0 <=> H2O"


def test_connectivity_summary(toy_bundle):
    s = connectivity_summary(toy_bundle)

    assert s.n_stored == 7
    assert s.n_nonzero == 6
    assert s.n_explicit_zeros == 1
    assert s.dead_end_metabolites == (3,)
    assert s.empty_reactions == (4,)
    assert s.density == pytest.approx(6 / 20)


def test_summary_without_reactions():
    b = ModelBundle(sp.csc_matrix((2, 0)), ("A", "B"), ())
    s = connectivity_summary(b)
    assert s.density == 0.0
    assert s.dead_end_metabolites == (0, 1)
    assert s.empty_reactions == ()


class TestLookupErrors:
    def test_unknown_reaction_name(self, toy_bundle):
        with pytest.raises(EntryNotFoundError):
            reaction_participants(toy_bundle, "PGI")

    def test_reaction_index_out_of_range(self, toy_bundle):
        with pytest.raises(LookupError):
            reaction_equation(toy_bundle, 5)

    def test_metabolite_index_out_of_range(self, toy_bundle):
        with pytest.raises(EntryNotFoundError):
            metabolite_reactions(toy_bundle, -1)
