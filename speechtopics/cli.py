"""
Command line entry point: runs the full pipeline on a corpus file and writes
topic names, rankings and per-period proportions to an output directory.
"""

import argparse
import logging
import sys

from .core import SpeechTopicsOrchestrator, load_config
from .exceptions import SpeechTopicsError


def _alpha(value: str):
    return value if value == "auto" else float(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="speechtopics",
        description="Fit an LDA topic model on a speech corpus and summarize its topics",
    )
    parser.add_argument("corpus", help="Delimited text file with doc_id, text and date columns")
    parser.add_argument("--delimiter", help="Field delimiter (inferred from the file extension if omitted)")
    parser.add_argument("--stopwords", help="Stopword list file, one word per line")
    parser.add_argument("--lemmas", help="Lemma mapping file of inflected form and lemma pairs")
    parser.add_argument("--topics", type=int, help="Number of topics")
    parser.add_argument("--method", choices=["gensim", "sklearn"], help="Inference engine")
    parser.add_argument("--alpha", type=_alpha, help="Document-topic prior, a positive number or 'auto'")
    parser.add_argument("--iterations", type=int, help="Inference iterations")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--min-doc-proportion", type=float,
                        help="Minimum share of documents a term must appear in")
    parser.add_argument("--naming", choices=["top_probability", "saliency"], help="Topic naming mode")
    parser.add_argument("--config", help="YAML file overriding the packaged defaults")
    parser.add_argument("--output", help="Output directory (default: experiments/speechtopics_<timestamp>)")
    return parser


def _config_from_args(args) -> dict:
    config = load_config(args.config) if args.config else {}
    sections = {
        "corpus": {"delimiter": args.delimiter},
        "dtm": {"min_doc_proportion": args.min_doc_proportion},
        "topic_model": {
            "n_topics": args.topics,
            "method": args.method,
            "alpha": args.alpha,
            "iterations": args.iterations,
            "seed": args.seed,
        },
        "naming": {"mode": args.naming},
    }
    for section, values in sections.items():
        given = {key: value for key, value in values.items() if value is not None}
        if given:
            config.setdefault(section, {}).update(given)
    return config


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logger = logging.getLogger("SpeechTopics")

    try:
        orchestrator = SpeechTopicsOrchestrator(config=_config_from_args(args))
        logger = orchestrator.logger
        orchestrator.load_data(args.corpus)
        orchestrator.preprocess_text(stopwords_path=args.stopwords, lemma_path=args.lemmas)
        orchestrator.build_document_term_matrix()
        orchestrator.fit_topic_model()
        output_directory = orchestrator.save_results(args.output)
    except (SpeechTopicsError, ValueError, FileNotFoundError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    for name, proportion in orchestrator.rank_topics(by="proportion"):
        print(f"{proportion:.4f}  {name}")
    print(f"Results written to {output_directory}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
