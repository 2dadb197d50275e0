from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from perceptron import PerceptronModel, TrainingExample, TrainingResult


logger = logging.getLogger(__name__)

LEARNING_RATE = 0.1
MAX_EPOCHS = 100
NUM_INPUTS = 2

# Mirrors logical XNOR, so it is not linearly separable.
DATASET: Tuple[TrainingExample, ...] = (
    TrainingExample(inputs=(0.0, 0.0), target=1),
    TrainingExample(inputs=(0.0, 1.0), target=-1),
    TrainingExample(inputs=(1.0, 0.0), target=-1),
    TrainingExample(inputs=(1.0, 1.0), target=1),
)

PredictionRow = Tuple[Tuple[float, ...], int, int]


@dataclass
class TrainingConfig:
    learning_rate: float = LEARNING_RATE
    max_epochs: int = MAX_EPOCHS
    num_inputs: int = NUM_INPUTS
    seed: Optional[int] = None  # None -> unseeded weight initialisation


@dataclass
class TrainingReport:
    model: PerceptronModel
    result: TrainingResult
    predictions: List[PredictionRow] = field(default_factory=list)

    @property
    def correct(self) -> int:
        return sum(1 for _, target, pred in self.predictions if target == pred)

    def summary_lines(self) -> List[str]:
        status = "converged" if self.result.converged else "not converged"
        lines = [f"Training: {status} after {self.result.epochs_run} epochs"]
        for inputs, target, pred in self.predictions:
            shown = ", ".join(f"{x:g}" for x in inputs)
            lines.append(f"({shown}) -> {pred:+d} (target {target:+d})")
        return lines


class Trainer:
    def __init__(self, config: TrainingConfig | None = None, dataset: Sequence[TrainingExample] = DATASET) -> None:
        self.config = config or TrainingConfig()
        self.dataset: Tuple[TrainingExample, ...] = tuple(dataset)

    def build_model(self) -> PerceptronModel:
        rng = random.Random(self.config.seed) if self.config.seed is not None else None
        return PerceptronModel(self.config.num_inputs, self.config.learning_rate, rng=rng)

    def run(self, model: PerceptronModel | None = None) -> TrainingReport:
        """Train once over the fixed dataset and report what the model now predicts."""
        model = model or self.build_model()
        logger.info(
            "training %d examples, learning_rate=%s, max_epochs=%d, initial weights=%s",
            len(self.dataset),
            model.learning_rate,
            self.config.max_epochs,
            model.weights,
        )
        result = model.train(self.dataset, self.config.max_epochs)
        if result.converged:
            logger.info("converged after %d epochs", result.epochs_run)
        else:
            logger.warning(
                "no convergence within %d epochs (%s mismatches in last pass)",
                result.epochs_run,
                result.final_mismatches,
            )
        report = TrainingReport(model=model, result=result, predictions=self.diagnose(model))
        for inputs, target, pred in report.predictions:
            logger.info("input %s -> %+d (target %+d)", inputs, pred, target)
        return report

    def diagnose(self, model: PerceptronModel) -> List[PredictionRow]:
        return [(ex.inputs, ex.target, model.predict(ex.inputs)) for ex in self.dataset]
