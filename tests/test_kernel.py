"""
Tests for the reference geometry kernel.
"""

from fractions import Fraction

import numpy as np
import pytest

from polyhedral_geometry import ArgumentError, KernelError, ScalarDomain, configure, kernel


def _rows(block):
    return sorted(tuple(int(x) for x in row) for row in block)


# =============================================================================
# KernelObject Tests
# =============================================================================

class TestKernelObject:
    """Test property caching and lookup."""

    def test_type_name(self):
        """Test the type name carries the scalar token."""
        obj = kernel.construct_cone([[1, 0]], scalar=ScalarDomain.INTEGER)
        assert kernel.type_name(obj) == "Cone<Integer>"
        assert obj.scalar_token == "Integer"

    def test_unknown_type(self):
        """Test only cones and polytopes exist."""
        with pytest.raises(KernelError):
            kernel.KernelObject("Fan<Rational>")

    def test_unknown_property(self):
        """Test asking for an unknown property fails."""
        obj = kernel.construct_cone([[1, 0]])
        with pytest.raises(KernelError):
            obj.give("NOT_A_PROPERTY")

    def test_properties_are_cached(self):
        """Test derived properties are stored on first use."""
        obj = kernel.construct_cone([[1, 0], [0, 1]])
        assert not obj.has("RAYS")
        kernel.read_scalar(obj, "N_RAYS")
        assert obj.has("RAYS")
        assert obj.has("FACETS")

    def test_read_block_returns_copy(self):
        """Test callers cannot corrupt the cache."""
        obj = kernel.construct_cone([[1, 0], [0, 1]])
        block = kernel.read_block(obj, "RAYS")
        block[0, 0] = Fraction(99)
        assert kernel.read_block(obj, "RAYS")[0, 0] == 1

    def test_read_scalar_rejects_blocks(self):
        """Test scalar and block reads are kept apart."""
        obj = kernel.construct_cone([[1, 0]])
        with pytest.raises(KernelError):
            kernel.read_scalar(obj, "RAYS")
        with pytest.raises(KernelError):
            kernel.read_block(obj, "N_RAYS")

    def test_invalid_input(self):
        """Test entries that do not parse are rejected."""
        with pytest.raises(ArgumentError):
            kernel.construct_cone([["a", 1]])
        with pytest.raises(ArgumentError):
            kernel.construct_cone([[Fraction(1, 2), 1]], scalar=ScalarDomain.INTEGER)

    def test_empty_input_needs_dimension(self):
        """Test the ambient dimension cannot be guessed from nothing."""
        with pytest.raises(KernelError):
            kernel.construct_cone([])
        obj = kernel.construct_cone([], ambient_dim=2)
        assert kernel.read_scalar(obj, "CONE_DIM") == 0


# =============================================================================
# Cone Rule Tests
# =============================================================================

class TestConeRules:
    """Test canonical cone data."""

    def test_redundant_ray_removed(self):
        """Test a repeated direction is kept once."""
        obj = kernel.construct_cone([[1, 0], [0, 1], [0, 2]])
        assert kernel.read_scalar(obj, "N_RAYS") == 2
        assert _rows(kernel.read_block(obj, "RAYS")) == [(0, 1), (1, 0)]

    def test_interior_generator_removed(self):
        """Test a generator inside the cone is not a ray."""
        obj = kernel.construct_cone([[1, 0], [1, 1], [0, 1]])
        assert kernel.read_scalar(obj, "N_RAYS") == 2

    def test_lineality(self):
        """Test opposite generators span a line."""
        obj = kernel.construct_cone([[1, 0], [0, 1], [0, -1]])
        assert kernel.read_scalar(obj, "LINEALITY_DIM") == 1
        assert kernel.read_scalar(obj, "POINTED") is False
        assert kernel.read_scalar(obj, "N_RAYS") == 1

    def test_facets(self):
        """Test facet normals of the positive quadrant."""
        obj = kernel.construct_cone([[1, 0], [0, 1]])
        assert _rows(kernel.read_block(obj, "FACETS")) == [(0, 1), (1, 0)]

    def test_from_inequalities(self):
        """Test the quadrant from x >= 0, y >= 0."""
        obj = kernel.construct_cone_from_inequalities([[1, 0], [0, 1]])
        assert _rows(kernel.read_block(obj, "RAYS")) == [(0, 1), (1, 0)]

    def test_linear_span(self):
        """Test a planar cone in space has one span equation."""
        obj = kernel.construct_cone([[1, 0, 0], [0, 1, 0]])
        assert _rows(kernel.read_block(obj, "LINEAR_SPAN")) == [(0, 0, 1)]
        assert kernel.read_scalar(obj, "FULL_DIM") is False

    def test_f_vector_square_cone(self):
        """Test the cone over a square has four rays and four facets."""
        obj = kernel.construct_cone([[1, 0, 0], [1, 1, 0], [1, 1, 1], [1, 0, 1]])
        assert list(kernel.read_block(obj, "F_VECTOR")) == [4, 4]

    def test_faces_of_dim(self):
        """Test faces are returned as 0-based ray index tuples."""
        obj = kernel.construct_cone([[1, 0, 0], [1, 1, 0], [1, 1, 1], [1, 0, 1]])
        edges = kernel.faces_of_dim(obj, 2)
        assert len(edges) == 4
        assert all(len(face) == 2 for face in edges)
        assert kernel.faces_of_dim(obj, 1) == [(0,), (1,), (2,), (3,)]

    def test_hilbert_basis(self):
        """Test the Hilbert basis of cone((1,0), (1,2))."""
        obj = kernel.construct_cone([[1, 0], [1, 2]])
        block = kernel.read_block(obj, "HILBERT_BASIS_GENERATORS")
        assert [tuple(row) for row in block] == [(1, 0), (1, 2), (1, 1)]

    def test_hilbert_basis_with_negative_entries(self):
        """Test a cone reaching into negative coordinates."""
        obj = kernel.construct_cone([[2, -1], [0, 1]])
        block = kernel.read_block(obj, "HILBERT_BASIS_GENERATORS")
        assert {tuple(row) for row in block} == {(2, -1), (0, 1), (1, 0)}

    def test_hilbert_basis_of_wide_cone(self):
        """Test every lattice point on x = 1 is needed for cone((1,0), (1,50))."""
        obj = kernel.construct_cone([[1, 0], [1, 50]])
        block = kernel.read_block(obj, "HILBERT_BASIS_GENERATORS")
        assert {tuple(row) for row in block} == {(1, k) for k in range(51)}

    def test_hilbert_basis_of_ray(self):
        """Test a one-dimensional cone has its primitive ray as basis."""
        obj = kernel.construct_cone([[2, 4, 0]])
        block = kernel.read_block(obj, "HILBERT_BASIS_GENERATORS")
        assert [tuple(row) for row in block] == [(1, 2, 0)]

    def test_hilbert_basis_needs_pointed_cone(self):
        """Test the kernel refuses non-pointed cones."""
        obj = kernel.construct_cone([[1, 0]], [[0, 1]])
        with pytest.raises(KernelError):
            kernel.read_block(obj, "HILBERT_BASIS_GENERATORS")

    def test_hilbert_box_limit(self, restore_settings):
        """Test the search box limit is taken from the settings."""
        configure(hilbert_box_limit=1)
        obj = kernel.construct_cone([[1, 0], [1, 2]])
        with pytest.raises(KernelError, match="limit"):
            kernel.read_block(obj, "HILBERT_BASIS_GENERATORS")

    def test_integer_rays_are_integral(self):
        """Test rays of integer cones have integer entries."""
        obj = kernel.construct_cone([[2, 4], [0, 3]], scalar=ScalarDomain.INTEGER)
        for row in kernel.read_block(obj, "RAYS"):
            assert all(Fraction(x).denominator == 1 for x in row)


# =============================================================================
# Polytope Rule Tests
# =============================================================================

class TestPolytopeRules:
    """Test homogenized polytope data."""

    def test_square(self):
        """Test the unit square."""
        obj = kernel.construct_polytope([[1, 0, 0], [1, 1, 0], [1, 0, 1], [1, 1, 1]])
        assert kernel.read_scalar(obj, "N_VERTICES") == 4
        assert kernel.read_scalar(obj, "N_FACETS") == 4
        assert kernel.read_scalar(obj, "BOUNDED") is True
        assert list(kernel.read_block(obj, "F_VECTOR")) == [4, 4]

    def test_far_facet_dropped(self):
        """Test the face at infinity is not a facet."""
        obj = kernel.construct_polytope([[1, 0, 0], [0, 1, 0], [0, 0, 1]])
        assert kernel.read_scalar(obj, "N_FACETS") == 2
        assert kernel.read_scalar(obj, "BOUNDED") is False
        assert list(kernel.read_block(obj, "F_VECTOR")) == [1, 2]

    def test_from_inequalities(self):
        """Test the square from 0 <= x, y <= 1."""
        obj = kernel.construct_polytope_from_inequalities(
            [[1, -1, 0], [1, 0, -1], [0, 1, 0], [0, 0, 1]]
        )
        vertices = kernel.read_block(obj, "VERTICES")
        assert _rows(vertices) == [(1, 0, 0), (1, 0, 1), (1, 1, 0), (1, 1, 1)]

    def test_infeasible(self):
        """Test x <= 0 and x >= 1 is empty."""
        obj = kernel.construct_polytope_from_inequalities([[0, -1], [-1, 1]])
        assert kernel.read_scalar(obj, "FEASIBLE") is False
        assert kernel.read_scalar(obj, "CONE_DIM") == 0
        assert kernel.read_block(obj, "VERTICES").shape == (0, 2)


# =============================================================================
# Primitive Reduction Tests
# =============================================================================

class TestReducePrimitive:
    """Test gcd reduction of rows."""

    def test_integer_rows(self):
        """Test rows are divided by their gcd."""
        block = kernel.reduce_primitive([[2, 4], [0, 3], [-6, 9]])
        assert block.tolist() == [[1, 2], [0, 1], [-2, 3]]

    def test_rational_rows(self):
        """Test denominators are cleared first."""
        block = kernel.reduce_primitive([[Fraction(1, 2), Fraction(1, 3)]])
        assert block.tolist() == [[3, 2]]

    def test_zero_row(self):
        """Test the zero row stays zero."""
        assert kernel.reduce_primitive([[0, 0]]).tolist() == [[0, 0]]

    def test_empty(self):
        """Test an empty block keeps its width."""
        assert kernel.reduce_primitive(np.empty((0, 3), dtype=object)).shape == (0, 3)
