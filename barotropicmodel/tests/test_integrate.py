"""Test the implicit midpoint iteration."""
import numpy as np
import pytest

from barotropicmodel import (
    ExhaustedPolicy,
    ImplicitMidpointIntegrator,
    IterationStatus,
    MassConservationError,
    NonConvergenceError,
    SolverConfig,
    StepReport,
    Strictness,
    TimeLevel,
)
import barotropicmodel.integrate

OLD, HALF, NEW = TimeLevel.OLD, TimeLevel.HALF, TimeLevel.NEW


@pytest.fixture
def resting_state(state):
    """Fluid at rest with flat surface."""
    state.gd.interior(OLD)[...] = 9.8e4
    for f in state.time_level_fields():
        f.apply_bnd_cond(OLD)
    state.ghs.apply_bnd_cond()
    return state


def commit(state, transformed):
    for f in state.time_level_fields():
        f.commit()
    for f in transformed:
        f.commit()


class TestSolverConfig:
    """Test SolverConfig class."""

    def test_defaults(self):
        """Test default settings."""
        cfg = SolverConfig()
        assert cfg.max_iterations == 8
        assert cfg.energy_tolerance == 5e-15
        assert cfg.mass_check is Strictness.RAISE
        assert cfg.on_exhausted is ExhaustedPolicy.ACCEPT

    def test_invalid_iterations(self):
        """Test at least one iteration is required."""
        with pytest.raises(ValueError):
            SolverConfig(max_iterations=0)


class TestStepReport:
    """Test StepReport class."""

    def test_relative_bias(self):
        """Test relative biases."""
        report = StepReport(
            IterationStatus.CONVERGED, 1, energy0=1.0, mass0=2.0, energy1=3.0, mass1=2.0
        )
        assert report.relative_energy_bias == pytest.approx(1.0)
        assert report.relative_mass_bias == 0.0


class TestImplicitMidpointIntegrator:
    """Test ImplicitMidpointIntegrator class."""

    def test_resting_state_converges(self, resting_state, transformed, workspace, coef):
        """Test a fluid at rest converges with the first iteration."""
        integrator = ImplicitMidpointIntegrator(coef)
        report = integrator.step(resting_state, transformed, workspace, 600.0)
        assert report.status is IterationStatus.CONVERGED
        assert report.iterations == 1
        assert report.seeded
        assert report.relative_energy_bias == 0.0
        assert report.energy1 == report.energy0
        assert report.mass1 == report.mass0
        for f in resting_state.time_level_fields():
            assert np.all(f[NEW] == f[OLD])

    def test_seed_only_first_step(self, resting_state, transformed, workspace, coef):
        """Test the HALF slot is seeded once."""
        integrator = ImplicitMidpointIntegrator(coef)
        assert integrator.first_run
        integrator.step(resting_state, transformed, workspace, 600.0)
        assert not integrator.first_run
        commit(resting_state, transformed)
        report = integrator.step(resting_state, transformed, workspace, 600.0)
        assert not report.seeded
        integrator.reset()
        assert integrator.first_run

    def test_old_slot_unchanged(self, random_state, transformed, workspace, coef):
        """Test the committed state is not modified by a step."""
        gd = random_state.gd[OLD].copy()
        u = random_state.u[OLD].copy()
        integrator = ImplicitMidpointIntegrator(coef)
        integrator.step(random_state, transformed, workspace, 1.0)
        assert np.all(random_state.gd[OLD] == gd)
        assert np.all(random_state.u[OLD] == u)

    def test_half_slot_is_midpoint(self, random_state, transformed, workspace, coef):
        """Test HALF holds the mean of OLD and the last NEW iterate."""
        integrator = ImplicitMidpointIntegrator(coef)
        integrator.step(random_state, transformed, workspace, 1.0)
        for f in (random_state.u, random_state.v, random_state.gd, transformed.ut):
            assert np.allclose(f[HALF], 0.5 * (f[OLD] + f[NEW]))

    def test_exhausted_accept(self, resting_state, transformed, workspace, coef):
        """Test the last iterate is kept when the budget is used up."""
        cfg = SolverConfig(max_iterations=3, energy_tolerance=0.0)
        integrator = ImplicitMidpointIntegrator(coef, cfg)
        report = integrator.step(resting_state, transformed, workspace, 600.0)
        assert report.status is IterationStatus.EXHAUSTED
        assert report.iterations == 3
        assert np.isfinite(report.mass1)

    def test_exhausted_raise(self, resting_state, transformed, workspace, coef):
        """Test NonConvergenceError on exhausted budget."""
        cfg = SolverConfig(
            max_iterations=2,
            energy_tolerance=0.0,
            on_exhausted=ExhaustedPolicy.RAISE,
        )
        integrator = ImplicitMidpointIntegrator(coef, cfg)
        with pytest.raises(NonConvergenceError):
            integrator.step(resting_state, transformed, workspace, 600.0)

    @pytest.mark.parametrize(
        "strictness, raises",
        ((Strictness.RAISE, True), (Strictness.WARN, False), (Strictness.OFF, False)),
    )
    def test_mass_check(
        self,
        monkeypatch,
        resting_state,
        transformed,
        workspace,
        coef,
        strictness,
        raises,
    ):
        """Test mass check policy with a tendency violating mass conservation."""

        def leaky_continuity(transformed, workspace, coef, level):
            workspace.dgd.interior()[...] = 1e-3

        monkeypatch.setattr(
            barotropicmodel.integrate, "continuity_tendency", leaky_continuity
        )
        integrator = ImplicitMidpointIntegrator(
            coef, SolverConfig(mass_check=strictness)
        )
        if raises:
            with pytest.raises(MassConservationError):
                integrator.step(resting_state, transformed, workspace, 600.0)
        else:
            report = integrator.step(resting_state, transformed, workspace, 600.0)
            assert report.mass1 < report.mass0

    def test_conserves_energy_and_mass(self, random_state, transformed, workspace, coef):
        """Test conservation for a random state and a small step."""
        integrator = ImplicitMidpointIntegrator(coef)
        report = integrator.step(random_state, transformed, workspace, 1.0)
        assert report.iterations <= 8
        assert report.relative_energy_bias < 1e-12
        assert report.relative_mass_bias < 1e-12
