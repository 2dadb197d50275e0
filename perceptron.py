from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple


logger = logging.getLogger(__name__)


class InvalidArgumentError(ValueError):
    """Raised when a model, registry or scene is built from malformed input."""


@dataclass(frozen=True)
class TrainingExample:
    inputs: Tuple[float, ...]
    target: int  # +1 or -1


@dataclass
class TrainingResult:
    epochs_run: int
    converged: bool
    mismatch_history: List[int] = field(default_factory=list)

    @property
    def final_mismatches(self) -> Optional[int]:
        """Mismatches of the last pass, or None when no pass ran."""
        return self.mismatch_history[-1] if self.mismatch_history else None


class PerceptronModel:
    """Single-output perceptron with a step activation.

    The weight list has one slot per input plus a trailing bias slot. Inputs
    are paired with weights positionally, so the trailing slot is only read
    when the caller supplies the constant 1.0 input for it; the training loop
    does not, and leaves that slot untouched.
    """

    def __init__(self, num_inputs: int, learning_rate: float, rng: random.Random | None = None) -> None:
        if num_inputs < 1:
            raise InvalidArgumentError(f"num_inputs must be >= 1, got {num_inputs}")
        if learning_rate <= 0:
            raise InvalidArgumentError(f"learning_rate must be > 0, got {learning_rate}")
        rng = rng or random.Random()
        self.learning_rate = float(learning_rate)
        self.weights: List[float] = [rng.random() for _ in range(num_inputs + 1)]

    @property
    def num_inputs(self) -> int:
        return len(self.weights) - 1

    def set_weights(self, weights: Sequence[float]) -> None:
        """Overwrite the weights in place; the length can not change."""
        if len(weights) != len(self.weights):
            raise InvalidArgumentError(f"expected {len(self.weights)} weights, got {len(weights)}")
        self.weights[:] = [float(w) for w in weights]

    def weighted_sum(self, inputs: Sequence[float]) -> float:
        if not inputs:
            raise InvalidArgumentError("inputs must not be empty")
        if len(inputs) > len(self.weights):
            raise InvalidArgumentError(f"got {len(inputs)} inputs for {len(self.weights)} weights")
        return sum(w * x for w, x in zip(self.weights, inputs))

    def predict(self, inputs: Sequence[float]) -> int:
        return 1 if self.weighted_sum(inputs) >= 0.0 else -1

    def update(self, example: TrainingExample) -> bool:
        """Apply the online update rule for one example. Returns True on a mismatch."""
        # One input per weight except the trailing bias slot, which training never touches
        if len(example.inputs) != self.num_inputs:
            raise InvalidArgumentError(
                f"example has {len(example.inputs)} inputs, model expects {self.num_inputs}"
            )
        error = example.target - self.predict(example.inputs)
        if error == 0:
            return False
        for i, x in enumerate(example.inputs):
            self.weights[i] += self.learning_rate * error * x
        return True

    def train(self, examples: Sequence[TrainingExample], max_epochs: int) -> TrainingResult:
        history: List[int] = []
        for epoch in range(max(0, max_epochs)):
            mismatches = 0
            for example in examples:
                if self.update(example):
                    mismatches += 1
            history.append(mismatches)
            logger.debug("epoch %d: %d mismatches, weights=%s", epoch, mismatches, self.weights)
            if mismatches == 0:
                return TrainingResult(epochs_run=epoch + 1, converged=True, mismatch_history=history)
        return TrainingResult(epochs_run=len(history), converged=False, mismatch_history=history)
