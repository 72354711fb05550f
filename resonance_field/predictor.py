"""
Resonance Field — Decay Predictor

First-order linear extrapolation of the coherence trend:

  velocity          = (last - first) / (n - 1)     over the last 5 samples
  projected         = clamp(current + velocity * 5)
  decay_rate        = max(0, -velocity)            rising trends are not decay
  time_to_threshold = (current - 0.5) / decay_rate  or +inf without decay

Fewer than 5 samples is not an error: the prediction reports the current
coherence, zero decay and an infinite time to threshold.
"""

import logging
import math
from typing import Optional, Sequence

import numpy as np

from . import config as cfg
from .errors import require_finite
from .history import ResonanceHistoryLog
from .types import DecayPrediction, clamp

log = logging.getLogger("resonance.predictor")


def no_trend(current_coherence: float) -> DecayPrediction:
    return DecayPrediction(
        projected_coherence=clamp(current_coherence),
        decay_rate=0.0,
        time_to_threshold=math.inf,
    )


class DecayPredictor:

    def __init__(
        self,
        window: int = cfg.PREDICTION_WINDOW,
        projection_steps: int = cfg.PROJECTION_STEPS,
        threshold: float = cfg.COHERENCE_THRESHOLD,
    ):
        if window < 2:
            raise ValueError(f"window must be >= 2, got {window}")
        self.window = window
        self.projection_steps = projection_steps
        self.threshold = threshold

    def predict(
        self,
        history: ResonanceHistoryLog,
        current_coherence: Optional[float] = None,
    ) -> DecayPrediction:
        """Predict from a history log; defaults to the newest recorded coherence."""
        samples = history.coherence_samples(self.window)
        if current_coherence is None:
            current_coherence = samples[-1] if samples else 1.0
        return self.predict_from_samples(samples, current_coherence)

    def predict_from_samples(
        self,
        samples: Sequence[float],
        current_coherence: float,
    ) -> DecayPrediction:
        current = clamp(require_finite("current_coherence", current_coherence))
        if len(samples) < self.window:
            return no_trend(current)

        window = np.asarray(samples[-self.window:], dtype=float)
        velocity = float(window[-1] - window[0]) / (len(window) - 1)

        projected = clamp(current + velocity * self.projection_steps)
        decay_rate = max(0.0, -velocity)
        if decay_rate > 0:
            time_to_threshold = max(0.0, (current - self.threshold) / decay_rate)
        else:
            time_to_threshold = math.inf

        return DecayPrediction(
            projected_coherence=projected,
            decay_rate=decay_rate,
            time_to_threshold=time_to_threshold,
        )
