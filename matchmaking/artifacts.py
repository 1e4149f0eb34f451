"""
Artifact management for ranking runs.

Layout under the output directory:
    rankings/ranking_<subject>.csv
    rankings/ranking_<subject>.json
    reports/evaluation_<subject>.json
    configs/config_used.yaml
    metadata.json
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, List

import yaml

logger = logging.getLogger(__name__)

SUBDIRECTORIES = ["rankings", "reports", "configs"]


class ArtifactManager:
    """
    Writes run outputs to a fixed directory layout.

    Attributes:
        output_dir: Root directory for all artifacts
    """

    def __init__(self, output_dir: str):
        self.output_dir = Path(output_dir)
        for subdir in SUBDIRECTORIES:
            (self.output_dir / subdir).mkdir(parents=True, exist_ok=True)

    def save_ranking(self, ranking) -> Path:
        """Save a DiscoveryRanking as CSV (one row per match) and JSON."""
        csv_path = self.output_dir / "rankings" / f"ranking_{ranking.subject_id}.csv"
        ranking.to_dataframe().to_csv(csv_path, index=False)

        json_path = csv_path.with_suffix(".json")
        with open(json_path, "w") as f:
            json.dump(ranking.to_dict(), f, indent=2)

        logger.info(f"Saved ranking to {csv_path}")
        return csv_path

    def save_evaluation_report(self, report) -> Path:
        path = self.output_dir / "reports" / f"evaluation_{report.subject_id}.json"
        report.save(str(path))
        return path

    def save_yaml_config(self, config: Dict[str, Any], name: str) -> Path:
        path = self.output_dir / "configs" / f"{name}.yaml"
        with open(path, "w") as f:
            yaml.safe_dump(config, f, sort_keys=False)
        logger.info(f"Saved config to {path}")
        return path

    def save_metadata(self, metadata: Dict[str, Any]) -> Path:
        path = self.output_dir / "metadata.json"
        with open(path, "w") as f:
            json.dump(metadata, f, indent=2)
        logger.info(f"Saved metadata to {path}")
        return path

    def list_artifacts(self) -> Dict[str, List[str]]:
        """List saved files per subdirectory."""
        artifacts = {}
        for subdir in SUBDIRECTORIES:
            files = sorted(p.name for p in (self.output_dir / subdir).iterdir() if p.is_file())
            artifacts[subdir] = files
        return artifacts
