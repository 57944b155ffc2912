"""
High‑level pipeline orchestration functions.

Each stage consumes the output of the previous one and produces a new
immutable artefact:

1. load labelled training sentences and unlabelled test sentences;
2. normalise the combined corpus;
3. build the document‑term matrix and prune sparse terms;
4. assemble the feature table and split the training rows;
5. fit the logistic regression on the evaluation-train rows;
6. evaluate on the held-out rows and score the test sentences.

Any failure aborts the run.  The error is logged together with the
stage that raised it and propagated unchanged; nothing is written to
the output directory for a failed run.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from . import config
from .analysis.evaluation import EvaluationResult, evaluate
from .analysis.regression import CoefficientSummary, summarise_coefficients
from .classification.text_classifier import (
    LogisticModel,
    apply_cutoff,
    fit_logistic_regression,
)
from .config import LABEL_COLUMN, PipelineSettings
from .data_collection.loader import (
    Corpus,
    build_corpus,
    read_test_records,
    read_training_records,
)
from .data_processing.document_term import (
    DocumentTermMatrix,
    build_document_term_matrix,
    prune_sparse_terms,
)
from .data_processing.features import (
    FeatureTable,
    SplitPartition,
    assemble_feature_table,
    stratified_split,
)
from .data_processing.utils import TextNormalizer, normalise_corpus
from .errors import PipelineError
from .utils.file_io import write_artifacts


@dataclass(frozen=True)
class PipelineResult:
    settings: PipelineSettings
    corpus: Corpus
    normalizer: TextNormalizer
    feature_table: FeatureTable
    partition: SplitPartition
    model: LogisticModel
    coefficients: CoefficientSummary
    evaluation: EvaluationResult
    test_probabilities: pd.Series

    @property
    def test_predictions(self) -> pd.Series:
        return apply_cutoff(self.test_probabilities, self.settings.cutoff)


@contextmanager
def _stage(name: str):
    logging.info("Stage %s…", name)
    try:
        yield
    except (PipelineError, ValueError) as exc:
        logging.error("Stage %s failed: %s", name, exc)
        raise


def _vectorise(normalised: Corpus, settings: PipelineSettings) -> DocumentTermMatrix:
    documents = normalised.texts
    if settings.vocabulary_from == "train":
        source = documents[: normalised.train_count]
    else:
        source = documents
    dtm = build_document_term_matrix(source, min_term_length=settings.min_term_length)
    pruned = prune_sparse_terms(dtm, settings.sparsity)
    if settings.vocabulary_from == "train":
        return pruned.vocabulary.transform(documents)
    return pruned


def run_pipeline_from_corpus(
    corpus: Corpus,
    settings: Optional[PipelineSettings] = None,
    normalizer: Optional[TextNormalizer] = None,
) -> PipelineResult:
    """Run every stage after loading on an in-memory corpus."""
    settings = (settings or PipelineSettings()).validate()

    with _stage("normalise"):
        if normalizer is None:
            normalizer = TextNormalizer(language=settings.language)
        normalised = normalise_corpus(corpus, normalizer)

    with _stage("vectorise"):
        dtm = _vectorise(normalised, settings)

    with _stage("assemble"):
        table = assemble_feature_table(dtm, normalised)
        training = table.train_frame()

    with _stage("split"):
        partition = stratified_split(
            training[LABEL_COLUMN], settings.split_ratio, settings.seed
        )
        eval_train, eval_test = partition.apply(training)

    with _stage("fit"):
        model = fit_logistic_regression(eval_train, max_iter=settings.max_iter)
        coefficients = summarise_coefficients(model)

    with _stage("evaluate"):
        predicted = model.predict(eval_test, settings.cutoff)
        evaluation = evaluate(eval_test[LABEL_COLUMN], predicted)
        logging.info(
            "Held-out accuracy %.4f (%d rows)", evaluation.accuracy, evaluation.total
        )

    with _stage("predict"):
        test_probabilities = model.predict_proba(table.test_frame())

    return PipelineResult(
        settings=settings,
        corpus=corpus,
        normalizer=normalizer,
        feature_table=table,
        partition=partition,
        model=model,
        coefficients=coefficients,
        evaluation=evaluation,
        test_probabilities=test_probabilities,
    )


def run_pipeline(
    train_path=config.TRAIN_FILE,
    test_path=None,
    settings: Optional[PipelineSettings] = None,
    output_dir=None,
    normalizer: Optional[TextNormalizer] = None,
) -> PipelineResult:
    """Load TSV files, run the pipeline and optionally save its outputs.

    When *output_dir* is given the following files are written there:
    ``feature_table.csv``, ``coefficients.csv``, ``evaluation.json`` and
    ``test_predictions.csv``.
    """
    settings = (settings or PipelineSettings()).validate()

    with _stage("load"):
        train = read_training_records(train_path)
        test = read_test_records(test_path) if test_path is not None else ()
        corpus = build_corpus(train, test, on_missing_text=settings.on_missing_text)

    result = run_pipeline_from_corpus(corpus, settings, normalizer)

    if output_dir is not None:
        with _stage("write"):
            paths = save_results(result, output_dir)
        logging.info("Wrote %d files to %s", len(paths), output_dir)
    return result


def save_results(result: PipelineResult, output_dir) -> list:
    """Write the feature table, coefficients, metrics and test predictions."""
    test_texts = [r.text for r in result.corpus.test]
    predictions = pd.DataFrame(
        {
            "text": test_texts,
            "probability": result.test_probabilities.to_numpy(),
            "prediction": result.test_predictions.to_numpy(),
        }
    )
    metrics = {
        **result.evaluation.to_dict(),
        "train_rows": int(result.partition.mask.sum()),
        "heldout_rows": int((~result.partition.mask).sum()),
        "n_terms": len(result.feature_table.vocabulary),
        "settings": asdict(result.settings),
    }
    return write_artifacts(
        {
            "feature_table.csv": result.feature_table.frame,
            "coefficients.csv": result.coefficients.table,
            "evaluation.json": metrics,
            "test_predictions.csv": predictions,
        },
        Path(output_dir),
    )


def score_texts(texts: Iterable[str], result: PipelineResult) -> pd.DataFrame:
    """Score new sentences with a fitted pipeline.

    Sentences are normalised with the pipeline's normaliser and counted
    against its vocabulary.  Terms the vocabulary does not contain are
    dropped.
    """
    texts = list(texts)
    normalised = [result.normalizer.normalise(t) for t in texts]
    frame = result.feature_table.vocabulary.transform(normalised).to_frame()
    probabilities = result.model.predict_proba(frame)
    return pd.DataFrame(
        {
            "text": texts,
            "probability": probabilities.to_numpy(),
            "prediction": apply_cutoff(probabilities, result.settings.cutoff).to_numpy(),
        }
    )
