# src/optctrl/lqr/solver.py
"""
Finite-horizon LQR / LQT solver.

The pipeline runs strictly backward-then-forward:

    Riccati S(t) -> gain K(t) -> costate V(t) -> [LQR: correction P(t)] -> x(t)

Every backward stage is integrated from its terminal condition at end_time and
returned aligned with the ascending time_vec. Sampled quantities live only for
the duration of one `solve()`.
"""
from __future__ import annotations

import enum
import logging
from typing import Optional

import numpy as np

from optctrl.config import IntegratorOptions
from optctrl.lqr.control_law import RegulatorLaw, TerminalConstraintLaw, TrackingLaw
from optctrl.lqr.correction import solve_correction_backward
from optctrl.lqr.costate import solve_costate_backward, tracking_forcing
from optctrl.lqr.gain import FeedbackGain
from optctrl.lqr.riccati import riccati_weights, solve_riccati_backward
from optctrl.lqr.simulate import simulate_closed_loop
from optctrl.models.system import ControlParameters, SystemDescriptor, TimeGrid
from optctrl.models.trajectory import Trajectory
from optctrl.utils.linalg import rinv_bt
from optctrl.utils.metrics import output_residual

logger = logging.getLogger(__name__)


class Stage(enum.Enum):
    INIT = "init"
    RICCATI_SOLVED = "riccati_solved"
    GAIN_READY = "gain_ready"
    COSTATE_SOLVED = "costate_solved"
    CORRECTION_SOLVED = "correction_solved"
    FORWARD_SIMULATED = "forward_simulated"
    DONE = "done"
    FAILED = "failed"


class OptimalControlSolver:
    """
    One solve of the LQR or LQT problem.

    Inputs are validated on construction; `solve()` runs the pipeline selected
    by params.control_type and returns the Trajectory. Any failure moves the
    solver to Stage.FAILED and re-raises.
    """

    def __init__(
        self,
        system: SystemDescriptor,
        params: ControlParameters,
        options: Optional[IntegratorOptions] = None,
    ):
        self.system = system.validate(params.control_type)
        self.params = params
        self.grid: TimeGrid = params.validate(system)
        self.options = options or IntegratorOptions()
        self.stage = Stage.INIT

    def _advance(self, stage: Stage) -> None:
        logger.debug("%s: %s -> %s", self.params.control_type, self.stage.name, stage.name)
        self.stage = stage

    def solve(self) -> Trajectory:
        if self.stage is not Stage.INIT:
            raise RuntimeError(f"solver already used (stage={self.stage.name})")
        pipelines = {"LQT": self._solve_lqt, "LQR": self._solve_lqr}
        try:
            trajectory = pipelines[self.params.control_type]()
        except Exception:
            self.stage = Stage.FAILED
            raise
        self._advance(Stage.DONE)
        logger.info(
            "%s solved: %d samples on [%g, %g], |x(T)|=%.3e",
            self.params.control_type,
            trajectory.N,
            self.grid.start,
            self.grid.end,
            float(np.linalg.norm(trajectory.states[-1])),
        )
        return trajectory

    # -------------------------------------------------
    # shared stages
    # -------------------------------------------------

    def _gain(self, Rinv_BT: np.ndarray) -> FeedbackGain:
        sys_ = self.system
        Phi, S_T = riccati_weights(sys_, self.params.control_type)
        S = solve_riccati_backward(
            sys_.A, sys_.B, Phi, sys_.R,
            terminal=S_T, grid=self.grid, Rinv_BT=Rinv_BT, options=self.options,
        )
        self._advance(Stage.RICCATI_SOLVED)
        gain = FeedbackGain(Rinv_BT, S)
        self._advance(Stage.GAIN_READY)
        return gain

    def _simulate(self, law):
        sys_ = self.system
        X, U = simulate_closed_loop(
            sys_.A, sys_.B, law, x0=self.params.init_state, grid=self.grid, options=self.options
        )
        self._advance(Stage.FORWARD_SIMULATED)
        return X, U

    def _trajectory(self, X: np.ndarray, U: np.ndarray, meta) -> Trajectory:
        sys_ = self.system
        Y = X @ sys_.C.T + U @ sys_.D.T
        return Trajectory(
            method=self.params.control_type,
            time=self.params.time_vec,
            states=X,
            controls=U,
            outputs=Y,
            meta=meta,
        )

    # -------------------------------------------------
    # pipelines
    # -------------------------------------------------

    def _solve_lqt(self) -> Trajectory:
        sys_ = self.system
        Rinv_BT = rinv_bt(sys_.B, sys_.R)
        gain = self._gain(Rinv_BT)

        V_T = sys_.C.T @ sys_.P @ sys_.reference(self.grid.end)
        V = solve_costate_backward(
            sys_.A, sys_.B, gain,
            terminal=V_T,
            forcing=tracking_forcing(sys_.C, sys_.Q, sys_.reference),
            options=self.options,
        )
        self._advance(Stage.COSTATE_SOLVED)

        X, U = self._simulate(TrackingLaw(gain, V))
        return self._trajectory(X, U, meta={})

    def _solve_lqr(self) -> Trajectory:
        sys_ = self.system
        Rinv_BT = rinv_bt(sys_.B, sys_.R)
        gain = self._gain(Rinv_BT)

        if not self.params.terminal_constraint:
            X, U = self._simulate(RegulatorLaw(gain))
            return self._trajectory(X, U, meta={"terminal_constraint": False})

        V = solve_costate_backward(
            sys_.A, sys_.B, gain, terminal=sys_.C.T.copy(), options=self.options
        )
        self._advance(Stage.COSTATE_SOLVED)

        P = solve_correction_backward(sys_.B, Rinv_BT, V, options=self.options)
        self._advance(Stage.CORRECTION_SOLVED)

        target = sys_.reference(self.grid.end)
        X, U = self._simulate(TerminalConstraintLaw(gain, V, P, target))
        residual = output_residual(sys_.C, X[-1], target)
        logger.info("LQR terminal residual |C x(T) - target| = %.3e", residual)
        return self._trajectory(
            X, U, meta={"terminal_constraint": True, "target": target, "terminal_residual": residual}
        )


def solve_optimal_control(
    system: SystemDescriptor,
    params: ControlParameters,
    options: Optional[IntegratorOptions] = None,
) -> Trajectory:
    """
    Dispatch on params.control_type ("LQR" or "LQT") and return the closed-loop
    trajectory on params.time_vec.
    """
    return OptimalControlSolver(system, params, options).solve()


__all__ = ["Stage", "OptimalControlSolver", "solve_optimal_control"]
