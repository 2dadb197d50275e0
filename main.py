import argparse
import logging
from typing import List, Optional

from logging_config import setup_logging
from pygame_view import PygameSelectionApp
from scene_model import build_perceptron_scene, build_shapes_scene
from selection import SelectionController
from training import Trainer, TrainingConfig


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pick scene entities and inspect a trained perceptron.")
    parser.add_argument("--variant", choices=("perceptron", "shapes"), default="perceptron")
    parser.add_argument("--seed", type=int, default=None, help="seed for the initial weights")
    parser.add_argument("--log-level", default="INFO", choices=("DEBUG", "INFO", "WARNING", "ERROR"))
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    setup_logging(level=getattr(logging, args.log_level))

    if args.variant == "shapes":
        scene = build_shapes_scene()
        app = PygameSelectionApp(scene, SelectionController(scene.registry))
    else:
        # Training always finishes before any pick event is handled
        report = Trainer(TrainingConfig(seed=args.seed)).run()
        scene = build_perceptron_scene(report.model)
        app = PygameSelectionApp(scene, SelectionController(scene.registry, report.model), report=report)
    app.run()


if __name__ == "__main__":
    main()
