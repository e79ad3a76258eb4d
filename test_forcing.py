"""Tests for the stencil based forcing and the driver facing entry point."""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

import pyconvection as pc
from pyconvection.convection import ConvectiveStateTracker, ForcingEvaluator, HeatingStencil, u_damping, v_damping
from pyconvection.errors import ConfigurationError, NumericWarning
from pyconvection.grid import Grid
from pyconvection.parameters import ConvectionParameters

TAU_C = 50.
W0 = 1e6 / (np.pi * 250. ** 2)


def _params(**overrides):
    data = dict(tau_c=TAU_C, h_threshold=40., convective_radius=250., q0=1e6)
    data.update(overrides)
    return ConvectionParameters.from_dict(data)


def _scenario(strategy, **overrides):
    """10x10 grid, dx = 100, R = 250 (2 cells), one event at (5, 5) triggered at t = 0."""
    params = _params(**overrides)
    grid = Grid(10, 10, 100., halo=3)
    conv = pc.ConvectiveParameterization(grid, params, strategy=strategy)
    quiet, trigger = (35., 45.) if params.boundary_layer else (45., 35.)
    h = np.full(grid.rshp, quiet)
    h[5, 5] = trigger
    conv.on_step_start(h, 0.)
    return conv, h


def _numeric_warnings(recwarn):
    return [w for w in recwarn if issubclass(w.category, NumericWarning)]


class TestScenario:
    def test_state_after_first_step(self, strategy):
        conv, _ = _scenario(strategy)
        flags = conv.isconvecting
        assert flags[5, 5]
        assert flags.sum() == 1
        assert conv.triggered_time[5, 5] == 0.
        conv.destroy()

    def test_self_heating_at_mid_event(self, strategy):
        conv, h = _scenario(strategy)
        mid = conv.source_term(5, 5, 25., h)
        assert mid == pytest.approx(W0 / TAU_C)
        assert mid == pytest.approx(0.10186, rel=1e-4)
        assert mid > conv.source_term(5, 5, 0., h)
        assert mid > conv.source_term(5, 5, TAU_C, h)
        conv.destroy()

    def test_pulse_vanishes_at_event_bounds(self, strategy, recwarn):
        conv, h = _scenario(strategy)
        assert conv.source_term(5, 5, 0., h) == pytest.approx(0., abs=1e-12)
        assert conv.source_term(5, 5, TAU_C, h) == pytest.approx(0., abs=1e-12)
        assert not _numeric_warnings(recwarn)
        conv.destroy()

    def test_pulse_symmetry(self, strategy):
        conv, h = _scenario(strategy)
        for dt in (5., 12.5, 20.):
            assert conv.source_term(5, 5, 25. - dt, h) == pytest.approx(conv.source_term(5, 5, 25. + dt, h))
        assert conv.source_term(5, 5, 12.5, h) == pytest.approx(0.75 * W0 / TAU_C)
        conv.destroy()

    def test_neighbours_receive_less(self, strategy):
        conv, h = _scenario(strategy)
        centre = conv.source_term(5, 5, 25., h)
        side = conv.source_term(6, 5, 25., h)
        diagonal = conv.source_term(4, 6, 25., h)
        assert 0. < side < centre
        assert side == pytest.approx(0.84 * W0 / TAU_C)
        assert diagonal == pytest.approx(0.68 * W0 / TAU_C)
        # outside the disk
        assert conv.source_term(7, 7, 25., h) == 0.
        assert conv.source_term(8, 5, 25., h) == 0.
        conv.destroy()

    def test_boundary_layer_sign(self, strategy):
        conv, h = _scenario(strategy, boundary_layer=True)
        assert conv.isconvecting[5, 5]
        assert conv.source_term(5, 5, 25., h) == pytest.approx(-W0 / TAU_C)
        assert conv.source_term(6, 5, 25., h) == pytest.approx(-0.84 * W0 / TAU_C)
        conv.destroy()

    def test_idempotent_queries(self, strategy):
        conv, h = _scenario(strategy)
        flags, times = conv.isconvecting, conv.triggered_time
        first = [conv.source_term(i, 5, 17., h) for i in range(10)]
        second = [conv(i, 5, 17., h) for i in reversed(range(10))]
        assert first == second[::-1]
        np.testing.assert_array_equal(conv.isconvecting, flags)
        np.testing.assert_array_equal(conv.triggered_time, times)
        conv.destroy()

    def test_periodic_contribution(self, strategy):
        params = _params()
        grid = Grid(10, 10, 100., halo=3)
        conv = pc.ConvectiveParameterization(grid, params, strategy=strategy)
        h = np.full(grid.rshp, 45.)
        h[0, 0] = 35.
        conv.on_step_start(h, 0.)
        # (9, 9) sees (0, 0) at offset (+1, +1) through both periodic boundaries
        assert conv.source_term(9, 9, 25., h) == pytest.approx(0.68 * W0 / TAU_C)
        assert conv.source_term(0, 8, 25., h) == pytest.approx(0.36 * W0 / TAU_C)
        conv.destroy()


class TestForcingTerms:
    def test_radiative_and_relaxation_terms(self, strategy):
        params = _params(radiative_cooling_rate=1e-8, relaxation_parameter=1. / 3600., relaxation_height=38.)
        grid = Grid(10, 10, 100.)
        conv = pc.ConvectiveParameterization(grid, params, strategy=strategy)
        h = np.full(grid.rshp, 50.)
        conv.on_step_start(h, 0.)
        expected = 1e-8 - (50. - 38.) / 3600.
        assert conv.source_term(3, 4, 0., h) == pytest.approx(expected)
        assert conv.source_term(3, 4, 0., 50.) == pytest.approx(expected)
        np.testing.assert_allclose(conv.forcing_field(0., h), expected)
        conv.destroy()

    def test_boundary_layer_radiative_sign(self, strategy):
        params = _params(radiative_cooling_rate=1e-8, relaxation_parameter=1. / 3600., relaxation_height=38.,
            boundary_layer=True)
        grid = Grid(10, 10, 100.)
        conv = pc.ConvectiveParameterization(grid, params, strategy=strategy)
        h = np.full(grid.rshp, 35.)
        conv.on_step_start(h, 0.)
        assert conv.source_term(0, 0, 0., h) == pytest.approx(-1e-8 + 3. / 3600.)
        conv.destroy()

    def test_field_matches_point_queries(self, strategy):
        conv, h = _scenario(strategy, radiative_cooling_rate=1e-8, relaxation_parameter=1e-4, relaxation_height=44.)
        field = conv.forcing_field(20., h)
        assert field.shape == (10, 10)
        for j in range(10):
            for i in range(10):
                assert field[j, i] == pytest.approx(conv.source_term(i, j, 20., h), rel=1e-12, abs=1e-15)
        conv.destroy()

    def test_damping(self):
        u = np.array([1., -2., 0.5])
        np.testing.assert_allclose(u_damping(u, 0.1), [-0.1, 0.2, -0.05])
        np.testing.assert_allclose(v_damping(u, 0.), 0.)

        conv, _ = _scenario("sequential", relaxation_parameter=1. / 3600.)
        np.testing.assert_allclose(conv.u_damping(np.ones((2, 2))), -1. / 3600.)
        np.testing.assert_allclose(conv.v_damping(np.full(3, -3600.)), 1.)


class TestErrors:
    @pytest.mark.parametrize("i, j", [(-1, 0), (10, 0), (0, 10), (3, -2)])
    def test_out_of_interior_query(self, strategy, i, j):
        conv, h = _scenario(strategy)
        with pytest.raises(IndexError):
            conv.source_term(i, j, 10., h)
        conv.destroy()

    def test_query_before_update(self, strategy):
        grid = Grid(10, 10, 100.)
        conv = pc.ConvectiveParameterization(grid, _params(), strategy=strategy)
        h = np.full(grid.rshp, 45.)
        with pytest.raises(RuntimeError):
            conv.source_term(5, 5, 0., h)
        with pytest.raises(RuntimeError):
            conv.forcing_field(0., h)
        conv.destroy()

    def test_clamped_pulse_warns(self, strategy):
        conv, h = _scenario(strategy)
        with pytest.warns(NumericWarning):
            value = conv.source_term(5, 5, TAU_C + 10., h)
        assert value == 0.
        with pytest.warns(NumericWarning):
            field = conv.forcing_field(TAU_C + 10., h)
        assert not field.any()
        conv.destroy()

    def test_halo_narrower_than_stencil(self, strategy):
        grid = Grid(10, 10, 100., halo=1)
        with pytest.raises(ConfigurationError):
            pc.ConvectiveParameterization(grid, _params(), strategy=strategy)

    def test_halo_reaching_half_width(self, strategy):
        # R = 250, dx = 100: the stencil reads 2 cells out, a halo of 2 is enough
        grid = Grid(10, 10, 100., halo=2)
        conv = pc.ConvectiveParameterization(grid, _params(), strategy=strategy)
        h = np.full(grid.rshp, 45.)
        h[0, 0] = 35.
        conv.on_step_start(h, 0.)
        assert conv.source_term(0, 8, 25., h) == pytest.approx(0.36 * W0 / TAU_C)
        assert conv.source_term(8, 0, 25., h) == pytest.approx(0.36 * W0 / TAU_C)
        conv.destroy()

    def test_height_shape_mismatch(self, strategy):
        conv, _ = _scenario(strategy)
        with pytest.raises(ConfigurationError):
            conv.on_step_start(np.zeros((10, 9)), 1.)
        conv.destroy()

    def test_engine_mismatch(self):
        params = _params()
        grid = Grid(10, 10, 100.)
        stencil = HeatingStencil.from_parameters(params, grid, strategy="cpu")
        tracker = ConvectiveStateTracker(grid, params, strategy="sequential")
        with pytest.raises(ConfigurationError):
            ForcingEvaluator(tracker, stencil)


class TestEngines:
    def test_taichi_matches_sequential(self):
        params = _params(convective_radius=420., radiative_cooling_rate=1e-8, relaxation_parameter=1e-4,
            relaxation_height=40.)
        grid = Grid.for_radius(23, 19, 100., 120., params.convective_radius)
        seq = pc.ConvectiveParameterization(grid, params, strategy="sequential")
        tai = pc.ConvectiveParameterization(grid, params, strategy="cpu")
        rng = np.random.default_rng(3)

        for step in range(12):
            t = 9. * step
            h = 40. + np.round(rng.normal(0., 4., grid.rshp), 1)
            seq.on_step_start(h, t)
            tai.on_step_start(h, t)
            np.testing.assert_array_equal(tai.isconvecting, seq.isconvecting)
            np.testing.assert_allclose(tai.forcing_field(t, h), seq.forcing_field(t, h), rtol=1e-10, atol=1e-14)

        assert tai.source_term(4, 7, t, h) == pytest.approx(seq.source_term(4, 7, t, h), rel=1e-10, abs=1e-14)
        tai.destroy()

    def test_point_queries_on_uneven_halo(self):
        params = _params(convective_radius=420.)
        grid = Grid(13, 9, 100., 120., halo=(6, 3))
        seq = pc.ConvectiveParameterization(grid, params, strategy="sequential")
        tai = pc.ConvectiveParameterization(grid, params, strategy="cpu")
        h = np.full(grid.rshp, 45.)
        h[0, 12] = 35.
        h[8, 0] = 35.
        h[4, 6] = 35.
        for conv in (seq, tai):
            conv.on_step_start(h, 0.)

        for j in range(grid.ny):
            for i in range(grid.nx):
                assert tai.source_term(i, j, 20., h) == pytest.approx(seq.source_term(i, j, 20., h), rel=1e-12)
        tai.destroy()


class TestConcurrentQueries:
    def test_threaded_point_queries(self, strategy):
        params = _params()
        grid = Grid(10, 10, 100.)
        h = np.full(grid.rshp, 45.)
        h[5, 5] = 35.
        h[2, 7] = 35.
        seq = pc.ConvectiveParameterization(grid, params, strategy="sequential")
        conv = pc.ConvectiveParameterization(grid, params, strategy=strategy)
        seq.on_step_start(h, 0.)
        conv.on_step_start(h, 0.)

        cells = [(i, j) for j in range(grid.ny) for i in range(grid.nx)] * 20
        with ThreadPoolExecutor(max_workers=8) as executor:
            values = list(executor.map(lambda c: conv.source_term(c[0], c[1], 25., h), cells))

        expected = {(i, j): seq.source_term(i, j, 25., h) for i in range(grid.nx) for j in range(grid.ny)}
        for cell, value in zip(cells, values):
            assert value == pytest.approx(expected[cell], rel=1e-12, abs=1e-15)
        assert conv.isconvecting.sum() == 2
        conv.destroy()

    def test_threaded_mixed_calls(self):
        params = _params()
        grid = Grid(10, 10, 100.)
        conv = pc.ConvectiveParameterization(grid, params, strategy="cpu")
        h = np.full(grid.rshp, 45.)
        h[5, 5] = 35.
        conv.on_step_start(h, 0.)
        reference = conv.forcing_field(25., h)

        def query(k):
            if k % 4 == 0:
                return conv.forcing_field(25., h)[5, 5]
            return conv.source_term(5, 5, 25., h)

        with ThreadPoolExecutor(max_workers=4) as executor:
            values = list(executor.map(query, range(40)))
        np.testing.assert_allclose(values, reference[5, 5], rtol=1e-12)
        conv.destroy()
