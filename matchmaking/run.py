"""
Main runner for discovery ranking.

This is the single entrypoint for ranking a profile file from the command line.

Usage:
    python -m matchmaking.run --config configs/config.yaml --subject p-001

The runner performs the following steps:
1. Load and validate configuration
2. Load profiles into a ProfileStore
3. Rank candidates for each requested subject
4. Evaluate each ranking (distribution, invariants, reciprocal agreement)
5. Save all artifacts
"""

import argparse
import logging
import sys
from datetime import datetime
from typing import Dict, Any, List, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(level)


def run_ranking(
    config_path: str,
    subject_ids: Optional[List[str]] = None,
    profiles_path: Optional[str] = None,
    include_symbolic: Optional[bool] = None,
    top_k: Optional[int] = None,
    output_dir: Optional[str] = None
) -> Dict[str, Any]:
    """
    Rank discovery candidates for one or more subjects.

    Args:
        config_path: Path to the configuration YAML file
        subject_ids: Subjects to rank for (every stored profile when None)
        profiles_path: Profiles file overriding data.profiles_path
        include_symbolic: Overrides engine.include_symbolic when not None
        top_k: Overrides ranking.top_k when not None
        output_dir: Overrides global.output_dir when not None

    Returns:
        Dictionary with run results and paths to artifacts
    """
    from . import __version__
    from .configs import load_config, validate_config
    from .data_loading import load_profile_store
    from .inference import CompatibilityEngine, EngineOptions
    from .ranking import RankingConfig, rank_from_store
    from .evaluation import create_ranking_report, compute_reciprocal_agreement
    from .artifacts import ArtifactManager

    logger.info("=" * 60)
    logger.info("COMPATIBILITY RANKING")
    logger.info("=" * 60)

    config = load_config(config_path)
    issues = validate_config(config)
    for issue in issues:
        logger.warning(f"Config issue: {issue}")

    # sections left empty in the YAML load as None
    for section in ["global", "data", "engine", "ranking", "evaluation"]:
        config[section] = config.get(section) or {}

    setup_logging(config["global"].get("log_level", "INFO"))

    # Apply command-line overrides to the config that gets saved with the run
    if include_symbolic is not None:
        config["engine"]["include_symbolic"] = include_symbolic
    if top_k is not None:
        config["ranking"]["top_k"] = top_k
    if profiles_path is not None:
        config["data"]["profiles_path"] = profiles_path

    data_config = config["data"]
    store = load_profile_store(data_config["profiles_path"], delimiter=data_config.get("delimiter"))

    engine = CompatibilityEngine(options=EngineOptions.from_config(config))
    ranking_config = RankingConfig.from_config(config)
    ranking_config.validate()

    evaluation_config = config["evaluation"]
    quantiles = evaluation_config.get("quantiles", [0.1, 0.25, 0.5, 0.75, 0.9])

    effective_output_dir = output_dir or config["global"].get("output_dir", "artifacts")
    artifact_manager = ArtifactManager(effective_output_dir)

    subjects = subject_ids or [p.id for p in store.list_profiles()]
    summaries = {}

    for subject_id in subjects:
        logger.info("\n" + "=" * 60)
        logger.info(f"SUBJECT {subject_id}")
        logger.info("=" * 60)

        ranking = rank_from_store(store, subject_id, engine=engine, config=ranking_config)
        artifact_manager.save_ranking(ranking)

        agreement = None
        if evaluation_config.get("reciprocal_agreement", True):
            agreement = compute_reciprocal_agreement(
                engine, store.get(subject_id), store.list_profiles()
            )

        report = create_ranking_report(
            subject_id,
            ranking.results,
            quantiles=quantiles,
            reciprocal_agreement=agreement,
            additional_metrics={
                "n_ineligible": len(ranking.ineligible),
                "n_filtered_out": len(ranking.filtered_out),
                "n_below_threshold": ranking.below_threshold
            }
        )
        artifact_manager.save_evaluation_report(report)
        logger.info("\n" + report.summary())

        summaries[subject_id] = {
            "n_matches": len(ranking.matches),
            "top_candidates": ranking.candidate_ids()[:5]
        }

    metadata = {
        "engine_version": __version__,
        "run_timestamp": datetime.now().isoformat(),
        "config_path": config_path,
        "profiles_path": data_config["profiles_path"],
        "n_profiles": len(store),
        "subjects": summaries,
        "engine_options": engine.options.to_dict(),
        "ranking_config": ranking_config.to_dict()
    }
    artifact_manager.save_metadata(metadata)
    artifact_manager.save_yaml_config(config, "config_used")

    logger.info("\n" + "=" * 60)
    logger.info("RANKING COMPLETE")
    logger.info("=" * 60)

    artifacts = artifact_manager.list_artifacts()
    logger.info("\nArtifacts saved:")
    for category, files in artifacts.items():
        logger.info(f"  {category}/")
        for f in files:
            logger.info(f"    - {f}")

    return {
        "success": True,
        "output_dir": str(artifact_manager.output_dir),
        "artifacts": artifacts,
        "metadata": metadata
    }


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the ranking runner."""
    parser = argparse.ArgumentParser(
        description="Rank discovery candidates with the compatibility engine"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--profiles",
        type=str,
        default=None,
        help="Profiles file (JSON or CSV, overrides config)"
    )
    parser.add_argument(
        "--subject",
        action="append",
        default=None,
        help="Subject profile id to rank for (repeatable; default: every profile)"
    )
    parser.add_argument(
        "--symbolic",
        action="store_true",
        default=None,
        help="Attach the symbolic indicator to every result"
    )
    parser.add_argument(
        "--top-k",
        type=int,
        default=None,
        help="Keep only the best k matches per subject"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory for artifacts (overrides config)"
    )

    args = parser.parse_args(argv)

    try:
        result = run_ranking(
            args.config,
            subject_ids=args.subject,
            profiles_path=args.profiles,
            include_symbolic=args.symbolic,
            top_k=args.top_k,
            output_dir=args.output_dir
        )
        if result["success"]:
            logger.info("\nRanking completed successfully!")
            return 0
        else:
            logger.error("\nRanking failed!")
            return 1
    except Exception as e:
        logger.exception(f"Ranking failed with error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
