r"""Thin wrapper for running the sentiment pipeline on TSV files.

Usage examples:
# train on data/training.txt, score data/testdata.txt, write to results/
# python scripts/run_sentiment.py --test data/testdata.txt

# keep rarer terms and use a different split seed
# python scripts/run_sentiment.py --train data/training.txt --sparsity 0.995 --seed 7 --out-dir results/run7
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from bow_sentiment import config
from bow_sentiment.config import PipelineSettings
from bow_sentiment.errors import PipelineError
from bow_sentiment.pipelines import run_pipeline

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    defaults = PipelineSettings.from_env()
    parser = argparse.ArgumentParser(description="Bag-of-words sentiment classification (logistic regression).")
    parser.add_argument("--train", type=Path, default=config.TRAIN_FILE, help="Labelled TSV file (label<TAB>text)")
    parser.add_argument("--test", type=Path, help="Unlabelled TSV file (text) to score")
    parser.add_argument("--out-dir", type=Path, default=config.RESULTS_DIR, help="Directory for outputs")
    parser.add_argument("--sparsity", type=float, help=f"Sparse-term threshold (default: {defaults.sparsity})")
    parser.add_argument("--cutoff", type=float, help=f"Probability cutoff for label 1 (default: {defaults.cutoff})")
    parser.add_argument("--split-ratio", type=float, help=f"Share of training rows used to fit (default: {defaults.split_ratio})")
    parser.add_argument("--seed", type=int, help=f"Random seed for the split (default: {defaults.seed})")
    parser.add_argument("--language", help=f"Stop-word/stemmer language (default: {defaults.language})")
    parser.add_argument("--vocabulary-from", choices=config.VOCABULARY_SOURCES, help="Build the vocabulary from the whole corpus or training sentences only")
    parser.add_argument("--skip-missing-text", action="store_true", help="Drop records without text instead of failing")
    args = parser.parse_args(argv)

    try:
        settings = defaults.with_overrides(
            sparsity=args.sparsity,
            cutoff=args.cutoff,
            split_ratio=args.split_ratio,
            seed=args.seed,
            language=args.language,
            vocabulary_from=args.vocabulary_from,
            on_missing_text="skip" if args.skip_missing_text else None,
        )
    except ValueError as exc:
        parser.error(str(exc))

    logger.info("Settings: %s", settings)
    try:
        result = run_pipeline(
            train_path=args.train,
            test_path=args.test,
            settings=settings,
            output_dir=args.out_dir,
        )
    except PipelineError as exc:
        logger.error("Pipeline aborted in stage '%s': %s", exc.stage, exc)
        return 2
    except OSError:
        logger.exception("Could not read inputs or write outputs")
        return 3
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130

    logger.info("Accuracy: %.4f", result.evaluation.accuracy)
    logger.info("Confusion matrix:\n%s", result.evaluation.confusion)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
