import numpy as np

from flocking import utils

# -----------------------------------------------------------------------------
# Vector Math Tests
# -----------------------------------------------------------------------------


def test_distance():
    """Test Euclidean distance."""
    assert utils.distance(np.array([0.0, 0.0]), np.array([3.0, 4.0])) == 5.0
    assert utils.distance(np.array([1.0, 1.0]), np.array([1.0, 1.0])) == 0.0


def test_norm():
    """Test epsilon normalization used for rendering."""
    v = np.array([3.0, 4.0])
    np.testing.assert_allclose(utils.norm(v), [0.6, 0.8], atol=1e-9)

    # Zero vector stays zero
    np.testing.assert_allclose(utils.norm(np.zeros(2)), [0.0, 0.0], atol=1e-9)


def test_normalize():
    """Test strict normalization."""
    np.testing.assert_allclose(utils.normalize(np.array([3.0, 4.0])), [0.6, 0.8])
    np.testing.assert_allclose(utils.normalize(np.array([-3.0, -4.0])), [-0.6, -0.8])


def test_normalize_zero_vector_returns_random_unit():
    """A zero vector has no direction; a random unit vector comes back instead."""
    rng = np.random.default_rng(7)
    u = utils.normalize(np.zeros(2), rng=rng)

    assert np.all(np.isfinite(u))
    assert abs(np.linalg.norm(u) - 1.0) < 1e-12


def test_random_unit_is_seeded():
    """Same seed gives the same direction."""
    a = utils.random_unit(np.random.default_rng(3))
    b = utils.random_unit(np.random.default_rng(3))
    np.testing.assert_array_equal(a, b)
    assert abs(np.linalg.norm(a) - 1.0) < 1e-12


def test_clamp_length():
    """Test length clamping."""
    # Short vectors pass through unchanged
    v = np.array([30.0, 40.0])
    np.testing.assert_array_equal(utils.clamp_length(v, 150.0), v)

    # Exactly at the limit is unchanged
    np.testing.assert_array_equal(utils.clamp_length(v, 50.0), v)

    # Long vectors are scaled down to exactly max_length
    long_v = np.array([300.0, 400.0])
    clamped = utils.clamp_length(long_v, 150.0)
    np.testing.assert_allclose(clamped, [90.0, 120.0])
    assert abs(np.linalg.norm(clamped) - 150.0) < 1e-9


def test_clamp_length_returns_copy():
    """Clamping never aliases the input."""
    v = np.array([1.0, 1.0])
    out = utils.clamp_length(v, 10.0)
    out[0] = 99.0
    assert v[0] == 1.0


# -----------------------------------------------------------------------------
# Force Function Tests
# -----------------------------------------------------------------------------


def test_inverse_push():
    """Test inverse-distance push."""
    # Outside radius: no push
    assert utils.inverse_push(50.0, 40.0, 300.0) == 0.0
    assert utils.inverse_push(40.0, 40.0, 300.0) == 0.0

    # Inside radius: strength / distance
    assert utils.inverse_push(10.0, 40.0, 300.0) == 30.0

    # Closer means stronger
    assert utils.inverse_push(5.0, 40.0, 300.0) > utils.inverse_push(20.0, 40.0, 300.0)

    # Clipped at min_distance
    assert utils.inverse_push(0.0, 40.0, 300.0, min_distance=2.0) == 150.0
    assert utils.inverse_push(0.5, 40.0, 300.0, min_distance=2.0) == 150.0


def test_inverse_push_vectorized():
    """Arrays of distances are handled element-wise."""
    d = np.array([0.0, 10.0, 60.0])
    np.testing.assert_allclose(utils.inverse_push(d, 40.0, 300.0), [300.0, 30.0, 0.0])


def test_heading_angle():
    """Heading of a velocity vector."""
    assert utils.heading_angle(np.array([1.0, 0.0])) == 0.0
    np.testing.assert_allclose(utils.heading_angle(np.array([0.0, 2.0])), np.pi / 2)
