"""
Tests for matrix materialization.
"""

from fractions import Fraction

import numpy as np
import pytest

from polyhedral_geometry import (
    InvalidHomogenization,
    NotLinear,
    ScalarDomain,
    UnsupportedOperation,
    affine_equation_matrix,
    affine_hull,
    affine_inequality_matrix,
    affine_matrix_for_kernel,
    as_matrix,
    convex_hull,
    facets,
    generator_matrix,
    halfspace_matrix_pair,
    hilbert_basis,
    homogenize,
    homogenized_matrix,
    lineality_space,
    linear_equation_matrix,
    linear_inequality_matrix,
    linear_matrix_for_kernel,
    linear_span,
    matrix_for_kernel,
    point_matrix,
    polyhedron_from_inequalities,
    positive_hull,
    ray_indices,
    rays,
    vector_matrix,
    vertex_indices,
    vertices,
)
from polyhedral_geometry.materialize import _dehomogenize


def _row_set(block):
    return {tuple(row) for row in np.asarray(block).tolist()}


@pytest.fixture
def quadrant():
    return positive_hull([[1, 0], [0, 1]])


@pytest.fixture
def square():
    return convex_hull([[0, 0], [1, 0], [0, 1], [1, 1]])


# =============================================================================
# homogenize Tests
# =============================================================================

class TestHomogenize:
    """Test the leading column helper."""

    def test_prepends_column(self):
        """Test every row gets the value in front."""
        assert homogenize([[1, 2], [3, 4]], 1).tolist() == [[1, 1, 2], [1, 3, 4]]

    def test_default_is_zero(self):
        """Test directions are homogenized with 0 by default."""
        assert homogenize([[5]]).tolist() == [[0, 5]]

    def test_empty_block(self):
        """Test an empty block keeps its row count."""
        assert homogenize(np.empty((0, 2), dtype=object), 1).shape == (0, 3)


# =============================================================================
# Linear and Affine Conversion Tests
# =============================================================================

class TestLinearAffine:
    """Test conversion between the linear and affine forms."""

    def test_linear_inequalities(self, quadrant):
        """Test cone facets read as -FACETS."""
        block = linear_inequality_matrix(facets(quadrant))
        assert _row_set(block) == {(0, -1), (-1, 0)}

    def test_linear_to_affine(self, quadrant):
        """Test the affine form has a zero bound column."""
        block = affine_inequality_matrix(facets(quadrant))
        assert block.shape == (2, 3)
        assert all(x == 0 for x in block[:, 0])

    def test_round_trip(self, quadrant):
        """Test linear -> affine -> linear gives back the same block."""
        linear = linear_inequality_matrix(facets(quadrant))
        affine = homogenize(linear, 0)
        assert np.array_equal(affine[:, 1:], linear)
        assert np.array_equal(affine_inequality_matrix(facets(quadrant)), affine)

    def test_homogenized_block_dehomogenizes(self, quadrant):
        """Test the affine-to-linear step undoes homogenize on a linear block."""
        linear = linear_inequality_matrix(facets(quadrant))
        assert np.array_equal(_dehomogenize(homogenize(linear, 0)), linear)
        with pytest.raises(NotLinear):
            _dehomogenize(homogenize(linear, 1))

    def test_linear_block_through_affine_facets(self, quadrant):
        """Test a linear block read back from polyhedron facets built on it."""
        linear = linear_inequality_matrix(facets(quadrant))
        P = polyhedron_from_inequalities(linear.tolist(), [0] * len(linear))
        assert _row_set(linear_inequality_matrix(facets(P))) == _row_set(linear)

    def test_affine_to_linear_needs_zero_bounds(self, square):
        """Test facets with a non-zero bound are not linear."""
        with pytest.raises(NotLinear, match="Input not linear."):
            linear_inequality_matrix(facets(square))
        with pytest.raises(NotLinear):
            linear_matrix_for_kernel(facets(square))

    def test_affine_to_linear_drops_zero_column(self):
        """Test facets through the origin convert."""
        P = convex_hull([[0, 0]], rays=[[1, 0], [0, 1]])
        block = linear_inequality_matrix(facets(P))
        assert _row_set(block) == {(-1, 0), (0, -1)}

    def test_results_are_rational(self, quadrant):
        """Test inequality matrices always hold fractions."""
        block = linear_inequality_matrix(facets(quadrant))
        assert all(isinstance(x, Fraction) for x in block.flat)

    def test_kernel_forms_agree(self, square):
        """Test the kernel form of facets is the affine inequality matrix."""
        assert np.array_equal(
            affine_matrix_for_kernel(facets(square)),
            affine_inequality_matrix(facets(square)),
        )

    def test_equations(self):
        """Test span equations of a planar cone."""
        C = positive_hull([[1, 0, 0], [0, 1, 0]])
        assert linear_equation_matrix(linear_span(C)).tolist() == [[0, 0, 1]]
        assert affine_equation_matrix(linear_span(C)).tolist() == [[0, 0, 0, 1]]

    def test_affine_equations(self):
        """Test the affine hull of a horizontal segment."""
        P = convex_hull([[0, 0], [1, 0]])
        block = affine_equation_matrix(affine_hull(P))
        assert block.shape == (1, 3)
        assert block[0, 0] == 0
        assert linear_equation_matrix(affine_hull(P)).shape == (1, 2)


# =============================================================================
# Halfspace Matrix Pair Tests
# =============================================================================

class TestHalfspaceMatrixPair:
    """Test splitting inequalities into A x <= b."""

    def test_square(self, square):
        """Test every vertex satisfies A v <= b."""
        A, b = halfspace_matrix_pair(facets(square))
        assert A.shape == (4, 2)
        for v in vertices(square):
            values = A.dot(np.array(list(v), dtype=object))
            assert all(lhs <= rhs for lhs, rhs in zip(values, b))

    def test_cone_bounds_are_zero(self, quadrant):
        """Test linear inequalities give b = 0."""
        pair = halfspace_matrix_pair(facets(quadrant))
        assert list(pair.b) == [0, 0]

    def test_not_inequalities(self, quadrant):
        """Test rays have no half-space form."""
        with pytest.raises(UnsupportedOperation) as excinfo:
            halfspace_matrix_pair(rays(quadrant))
        assert excinfo.value.capability == "Halfspace matrix pair"


# =============================================================================
# Generator Matrix Tests
# =============================================================================

class TestGeneratorMatrices:
    """Test point, vector and generator blocks."""

    def test_rational_rays_not_reduced(self):
        """Test rational rays keep their length."""
        C = positive_hull([[2, 4], [0, 3]])
        assert _row_set(vector_matrix(rays(C))) == {(2, 4), (0, 3)}

    def test_integer_rays_reduced(self):
        """Test integer rays become primitive."""
        C = positive_hull([[2, 4], [0, 3]], scalar=ScalarDomain.INTEGER)
        assert rays(C).at(1) == [2, 4]
        block = vector_matrix(rays(C))
        assert _row_set(block) == {(1, 2), (0, 1)}
        assert all(type(x) is int for x in block.flat)

    def test_as_integer_reduces_rational_rays(self):
        """Test rational rays read as integers are primitive."""
        C = positive_hull([[Fraction(1, 2), 1], [0, 3]])
        assert _row_set(as_matrix(rays(C), ScalarDomain.INTEGER)) == {(1, 2), (0, 1)}

    def test_as_matrix_defaults_to_iterator_domain(self):
        """Test rational rays stay rational without a domain."""
        C = positive_hull([[Fraction(1, 2), 1]])
        assert _row_set(as_matrix(rays(C))) == {(Fraction(1, 2), 1)}

    def test_integer_points_not_reduced(self):
        """Test integer points keep their coordinates."""
        P = convex_hull([[2, 4], [0, 0]], scalar=ScalarDomain.INTEGER)
        assert _row_set(point_matrix(vertices(P))) == {(2, 4), (0, 0)}

    def test_rational_points_as_integers_rejected(self):
        """Test rational points cannot be read as an integer block."""
        P = convex_hull([[Fraction(1, 2), 0], [1, 0]])
        with pytest.raises(UnsupportedOperation):
            as_matrix(vertices(P), ScalarDomain.INTEGER)

    def test_points_homogenized_with_one(self, square):
        """Test vertices get a leading one."""
        block = point_matrix(vertices(square), homogenized=True)
        assert all(x == 1 for x in block[:, 0])
        assert np.array_equal(block[:, 1:], point_matrix(vertices(square)))

    def test_lineality_generators(self):
        """Test the lineality space block."""
        C = positive_hull([[1, 0]], [[0, 1]])
        assert generator_matrix(lineality_space(C)).tolist() == [[0, 1]]
        assert matrix_for_kernel(lineality_space(C), homogenized=True).tolist() == [[0, 0, 1]]

    def test_hilbert_generators(self):
        """Test the Hilbert basis block is integral."""
        C = positive_hull([[1, 0], [1, 2]])
        block = generator_matrix(hilbert_basis(C))
        assert block.tolist() == [[1, 0], [1, 2], [1, 1]]

    def test_missing_capability(self, quadrant):
        """Test rays of a cone have no point matrix."""
        with pytest.raises(UnsupportedOperation, match="Point Matrix not defined in this context."):
            point_matrix(rays(quadrant))


# =============================================================================
# Homogenization Tests
# =============================================================================

class TestHomogenizedMatrix:
    """Test homogenized_matrix role checks."""

    def test_rays_with_zero(self, quadrant):
        """Test rays take 0 by default."""
        block = homogenized_matrix(rays(quadrant))
        assert all(x == 0 for x in block[:, 0])
        assert np.array_equal(homogenized_matrix(rays(quadrant), 0), block)

    def test_points_with_one(self, square):
        """Test points take 1 by default."""
        block = homogenized_matrix(vertices(square))
        assert all(x == 1 for x in block[:, 0])

    def test_rays_reject_one(self, quadrant):
        """Test rays cannot be homogenized with 1."""
        with pytest.raises(InvalidHomogenization):
            homogenized_matrix(rays(quadrant), 1)

    def test_points_reject_zero(self, square):
        """Test points cannot be homogenized with 0."""
        with pytest.raises(InvalidHomogenization):
            homogenized_matrix(vertices(square), 0)

    def test_not_generators(self, quadrant):
        """Test half-spaces have no homogenized generator form."""
        with pytest.raises(UnsupportedOperation):
            homogenized_matrix(facets(quadrant))


# =============================================================================
# Incidence Tests
# =============================================================================

class TestIncidence:
    """Test ray and vertex incidences."""

    def test_cone_facets(self, quadrant):
        """Test each quadrant facet contains one ray."""
        incidence = ray_indices(facets(quadrant))
        assert incidence.dtype == bool
        assert incidence.shape == (2, 2)
        assert list(incidence.sum(axis=1)) == [1, 1]

    def test_square_facets(self, square):
        """Test each square edge contains two vertices."""
        incidence = vertex_indices(facets(square))
        assert incidence.shape == (4, 4)
        assert list(incidence.sum(axis=1)) == [2, 2, 2, 2]
        assert ray_indices(facets(square)).shape == (4, 0)

    def test_no_vertices_for_cones(self, quadrant):
        """Test cones have no vertex incidence."""
        with pytest.raises(UnsupportedOperation, match="Incidence Matrix resp. vertices"):
            vertex_indices(facets(quadrant))
