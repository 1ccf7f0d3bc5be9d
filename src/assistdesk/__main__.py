"""Command line entry point: `python -m assistdesk`."""

import argparse
import json
import logging
import sys

from assistdesk._util import load_messages, setup_logging
from assistdesk.config import AssistDeskConfig
from assistdesk.messaging import create_classifier, summarize_classifications
from assistdesk.priorart import (
    PATENT_CLAIM_ELEMENTS,
    score_all_patents,
    score_patent,
    scores_to_frame,
    validate_catalogue,
)
from assistdesk.reproducibility import write_manifest

logger = logging.getLogger(__name__)


def cmd_score(args) -> int:
    if args.patent:
        claim_map = PATENT_CLAIM_ELEMENTS.get(args.patent)
        if claim_map is None:
            print(f"Unknown patent: {args.patent}", file=sys.stderr)
            return 1
        scores = {args.patent: score_patent(args.patent, claim_map)}
    else:
        scores = score_all_patents()

    for patent_id, patent in scores.items():
        print(f"Patent {patent_id}: {patent.confidence}")
        for label, claim in patent.claims.items():
            print(f"  {label}: {claim.confidence}")

    if args.csv:
        scores_to_frame(scores.values()).write_csv(args.csv)
        logger.info(f"Wrote element scores to {args.csv}")
    if args.manifest:
        manifest = write_manifest(args.manifest, scores)
        print(f"sha256: {manifest['sha256']}")
    return 0


def cmd_classify(args) -> int:
    config = AssistDeskConfig.load(args.config)
    messages = load_messages(args.file)
    classifier = create_classifier(config)

    try:
        results = classifier.classify_batch_sync(messages, show_progress=True)
    finally:
        classifier.cache.close()

    for message in messages:
        result = results[message.id]
        print(
            f"{message.id}\t{result.requires_response.value}\t"
            f"{result.confidence.value}\t{result.method.value}\t{result.reason}"
        )

    summary = summarize_classifications(results)
    print(json.dumps(summary.to_dict(), indent=2))

    if args.save:
        config.paths.create_dirs()
        out = config.paths.output_dir / "classifications.json"
        with open(out, "w") as f:
            json.dump({mid: r.to_dict() for mid, r in results.items()}, f, indent=2)
        if classifier.cost_tracker is not None:
            classifier.cost_tracker.save(config.paths.output_dir / "llm_costs.json")
        logger.info(f"Saved classifications to {out}")
    return 0


def cmd_validate(args) -> int:
    issues = validate_catalogue()
    if not issues:
        print("Catalogue is consistent")
        return 0
    for issue in issues:
        print(issue)
    return 1


def main(argv=None):
    parser = argparse.ArgumentParser(description="assistdesk command line")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    score = subparsers.add_parser("score", help="Score prior-art confidence per patent")
    score.add_argument("--patent", help="Score a single patent, e.g. 550")
    score.add_argument("--csv", help="Write per-element scores to this CSV file")
    score.add_argument("--manifest", help="Write scores and their SHA256 fingerprint here")
    score.set_defaults(func=cmd_score)

    classify = subparsers.add_parser("classify", help="Classify a JSON list of messages")
    classify.add_argument("file", help="JSON file holding a list of message records")
    classify.add_argument(
        "--config",
        default="configs/default.yaml",
        help="Path to configuration file",
    )
    classify.add_argument(
        "--save",
        action="store_true",
        help="Write results and LLM costs to the configured output directory",
    )
    classify.set_defaults(func=cmd_classify)

    validate = subparsers.add_parser("validate", help="Check catalogue consistency")
    validate.set_defaults(func=cmd_validate)

    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
