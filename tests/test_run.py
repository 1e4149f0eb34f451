from __future__ import annotations

import json
import shutil
from pathlib import Path

import yaml

from matchmaking.run import main, run_ranking

REPO_ROOT = Path(__file__).resolve().parent.parent


def _write_config(tmp_path: Path, **ranking) -> Path:
    config = yaml.safe_load((REPO_ROOT / "configs" / "config.yaml").read_text())
    profiles = tmp_path / "profiles.json"
    shutil.copy(REPO_ROOT / "data" / "sample_profiles.json", profiles)
    config["data"]["profiles_path"] = str(profiles)
    config["global"]["output_dir"] = str(tmp_path / "artifacts")
    config["ranking"].update({"n_jobs": 1, **ranking})
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(config))
    return path


def test_run_ranking_writes_artifacts(tmp_path):
    config_path = _write_config(tmp_path)
    result = run_ranking(str(config_path), subject_ids=["p-001"], include_symbolic=True)

    assert result["success"]
    output_dir = Path(result["output_dir"])
    assert result["artifacts"]["rankings"] == ["ranking_p-001.csv", "ranking_p-001.json"]
    assert result["artifacts"]["reports"] == ["evaluation_p-001.json"]

    ranking = json.loads((output_dir / "rankings" / "ranking_p-001.json").read_text())
    candidate_ids = [m["candidate_id"] for m in ranking["matches"]]
    assert candidate_ids[0] == "p-002"
    assert "p-006" not in candidate_ids
    assert [p["candidate_id"] for p in ranking["ineligible"]] == ["p-006"]
    assert all("symbolic_indicator" in m["result"] for m in ranking["matches"])

    saved = yaml.safe_load((output_dir / "configs" / "config_used.yaml").read_text())
    assert saved["engine"]["include_symbolic"] is True
    metadata = json.loads((output_dir / "metadata.json").read_text())
    assert metadata["n_profiles"] == 6


def test_main_ranks_every_subject(tmp_path):
    config_path = _write_config(tmp_path, top_k=2)
    out = tmp_path / "cli"
    assert main(["--config", str(config_path), "--output-dir", str(out)]) == 0

    reports = sorted(p.name for p in (out / "reports").iterdir())
    assert len(reports) == 6
    metadata = json.loads((out / "metadata.json").read_text())
    assert all(len(s["top_candidates"]) <= 2 for s in metadata["subjects"].values())


def test_main_returns_error_code_for_unknown_subject(tmp_path):
    config_path = _write_config(tmp_path)
    assert main(["--config", str(config_path), "--subject", "missing"]) == 1


def test_main_returns_error_code_for_missing_config(tmp_path):
    assert main(["--config", str(tmp_path / "nope.yaml")]) == 1


def test_run_ranking_tolerates_empty_sections(tmp_path):
    profiles = tmp_path / "profiles.json"
    shutil.copy(REPO_ROOT / "data" / "sample_profiles.json", profiles)
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "global:\n"
        "data:\n"
        f"  profiles_path: {profiles}\n"
        "engine:\n"
        "ranking:\n"
        "  n_jobs: 1\n"
        "evaluation:\n"
    )
    result = run_ranking(
        str(config_path), subject_ids=["p-001"], output_dir=str(tmp_path / "out")
    )
    assert result["success"]
    assert result["artifacts"]["reports"] == ["evaluation_p-001.json"]


def test_main_reads_tsv_profiles_with_default_config(tmp_path):
    config_path = _write_config(tmp_path)
    records = json.loads((REPO_ROOT / "data" / "sample_profiles.json").read_text())["profiles"]
    columns = [
        "id", "gender", "age", "location.city", "location.state", "location.country",
        "education.degree", "career.job_title", "lifestyle.diet", "lifestyle.smoking",
        "lifestyle.drinking", "family.type", "family.values",
    ]
    lines = ["\t".join(columns)]
    for record in records:
        values = []
        for column in columns:
            node = record
            for key in column.split("."):
                node = node[key]
            values.append(str(node))
        lines.append("\t".join(values))
    tsv = tmp_path / "profiles.tsv"
    tsv.write_text("\n".join(lines) + "\n")

    out = tmp_path / "tsv"
    assert main([
        "--config", str(config_path), "--profiles", str(tsv),
        "--subject", "p-001", "--output-dir", str(out),
    ]) == 0
    assert (out / "rankings" / "ranking_p-001.csv").exists()
