import pytest

from frameloom.animation.scatter import (
    NEUTRAL_GREY,
    REFERENCE_WIDTH,
    Bounds,
    CloudEnvelope,
    ParticleEnvelope,
    generate_clouds,
    generate_dust,
    generate_hill_path,
    generate_mist_wisps,
    generate_particles,
    generate_stars,
    generate_surface_elements,
)


@pytest.mark.unit
class TestStars:
    def test_seed_401_fifty_stars_identical(self):
        a = generate_stars(50, 401)
        b = generate_stars(50, 401)
        assert len(a) == 50
        assert a == b

    def test_growing_count_keeps_prefix(self):
        assert generate_stars(80, 401)[:50] == generate_stars(50, 401)

    def test_inside_sky_area(self):
        for s in generate_stars(200, 9, max_y=600):
            assert 0 <= s.x < REFERENCE_WIDTH
            assert 0 <= s.y < 600
            assert 0.3 <= s.brightness <= 1.0
            assert 0 <= s.phase < 1

    def test_other_seed_differs(self):
        assert generate_stars(50, 401) != generate_stars(50, 402)

    def test_negative_count_is_empty(self):
        assert generate_stars(-3, 401) == ()

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_count_is_empty(self, bad):
        assert generate_stars(bad, 1) == ()

    def test_non_finite_seed_counts_as_zero(self):
        assert generate_stars(5, float("nan")) == generate_stars(5, 0)
        assert generate_stars(5, float("inf")) == generate_stars(5, 0)

    def test_sets_are_immutable(self):
        stars = generate_stars(5, 401)
        with pytest.raises(AttributeError):
            stars[0].x = 0


@pytest.mark.unit
class TestEnvelopeSanitising:
    def test_inverted_ranges_are_reordered(self):
        env = CloudEnvelope(y_range=(320.0, 60.0), rx_range=(260.0, 120.0))
        for c in generate_clouds(30, 42, env):
            assert 60 <= c.y <= 320
            assert 120 <= c.rx <= 260

    def test_inverted_envelope_matches_ordered(self):
        inverted = CloudEnvelope(y_range=(320.0, 60.0))
        assert generate_clouds(10, 5, inverted) == generate_clouds(10, 5, CloudEnvelope(y_range=(60.0, 320.0)))

    def test_empty_palette_uses_grey(self):
        elements = generate_surface_elements(10, 3, Bounds(0, 800, 1920, 200), [])
        assert {e.color for e in elements} == {NEUTRAL_GREY}

    def test_negative_bounds_size(self):
        for e in generate_surface_elements(20, 3, Bounds(100, 800, -50, -20), [(1, 2, 3)]):
            assert 100 <= e.x <= 150
            assert 800 <= e.y <= 820

    def test_zero_segments_still_makes_a_hill(self):
        path = generate_hill_path(600, 40, 0, 1)
        assert len(path.points) == 12
        assert path.points[0] == (0.0, 1080.0)

    def test_particle_count_clamped(self):
        assert generate_particles(ParticleEnvelope(count=-10)) == ()


@pytest.mark.unit
class TestOtherGenerators:
    def test_hill_spans_width_and_stays_above_base(self):
        path = generate_hill_path(600, 50, 6, 11)
        xs = [x for x, _ in path.points]
        assert min(xs) == 0.0 and max(xs) == float(REFERENCE_WIDTH)
        crest = [y for _, y in path.points[1:-1]]
        assert max(crest) <= 600

    def test_particles_deterministic(self):
        env = ParticleEnvelope(count=40, seed=999)
        assert generate_particles(env) == generate_particles(env)
        assert len(generate_particles(env)) == 40

    def test_mist_near_requested_line(self):
        for w in generate_mist_wisps(10, 7, 900):
            assert 860 <= w.y <= 940

    def test_dust_inside_haze_band(self):
        for m in generate_dust(30, 12345, 540, 120):
            assert 480 <= m.y <= 600
            assert 0.3 <= m.opacity <= 0.8
