from __future__ import annotations

import pytest

from matchmaking.data_loading import InMemoryProfileStore
from matchmaking.inference import CompatibilityEngine, EngineOptions
from matchmaking.ranking import (
    RankingConfig,
    failed_preferences,
    passes_preferences,
    rank_candidates,
    rank_from_store,
)
from matchmaking.scoring import symbolic_value

from .conftest import make_profile


@pytest.fixture
def pool():
    return [
        make_profile(id="perfect", gender="Female", age=31),
        make_profile(id="far", gender="Female", age=31,
                     location={"city": "Austin", "state": "Texas", "country": "USA"}),
        make_profile(id="older", gender="Female", age=45, family={"values": "Liberal"}),
        make_profile(id="rival", gender="Male", age=30),
        make_profile(id="twin-a", gender="Female", age=31, lifestyle={"smoking": "Yes"}),
        make_profile(id="twin-b", gender="Female", age=31, lifestyle={"drinking": "Yes"}),
    ]


def test_rank_orders_by_score_and_drops_ineligible(subject, pool):
    ranking = rank_candidates(subject, pool + [subject], config=RankingConfig(n_jobs=1))

    ids = ranking.candidate_ids()
    assert ids[0] == "perfect"
    assert "rival" not in ids
    assert "subject" not in ids
    assert [p.candidate_id for p in ranking.ineligible] == ["rival"]
    assert [m.rank for m in ranking.matches] == list(range(1, len(ids) + 1))
    scores = [m.result.overall_score for m in ranking.matches]
    assert scores == sorted(scores, reverse=True)


def test_ties_are_broken_by_symbolic_value_then_id(subject, pool):
    ranking = rank_candidates(subject, pool, config=RankingConfig(n_jobs=1))
    tied = [m for m in ranking.matches if m.candidate_id.startswith("twin")]
    assert tied[0].result.overall_score == tied[1].result.overall_score

    expected = sorted(
        ["twin-a", "twin-b"],
        key=lambda cid: (-symbolic_value(subject.id, cid), cid),
    )
    assert [m.candidate_id for m in tied] == expected
    assert tied[0].tie_break == symbolic_value(subject.id, tied[0].candidate_id)


def test_thread_fan_out_matches_inline(subject, pool):
    inline = rank_candidates(subject, pool, config=RankingConfig(n_jobs=1))
    threaded = rank_candidates(subject, pool, config=RankingConfig(n_jobs=4))
    assert threaded.to_dict() == inline.to_dict()


def test_min_score_and_top_k(subject, pool):
    full = rank_candidates(subject, pool, config=RankingConfig(n_jobs=1))
    top = rank_candidates(subject, pool, config=RankingConfig(n_jobs=1, top_k=2))
    assert top.candidate_ids() == full.candidate_ids()[:2]
    assert top.below_threshold == len(full.matches) - 2

    threshold = full.matches[1].result.overall_score
    strict = rank_candidates(subject, pool, config=RankingConfig(n_jobs=1, min_score=threshold))
    assert all(m.result.overall_score >= threshold for m in strict.matches)


def test_invalid_ranking_config(subject, pool):
    with pytest.raises(ValueError):
        rank_candidates(subject, pool, config=RankingConfig(n_jobs=0))
    with pytest.raises(ValueError):
        RankingConfig(min_score=101).validate()
    with pytest.raises(ValueError):
        RankingConfig(top_k=0).validate()


def test_ranking_config_from_config():
    config = RankingConfig.from_config({"ranking": {"n_jobs": 2, "top_k": 5}})
    assert config == RankingConfig(n_jobs=2, min_score=0, top_k=5, apply_preference_filters=False)


def test_preference_filters():
    subject = make_profile(preferences={
        "preferred_locations": ["maharashtra"],
        "preferred_diet": ["Veg"],
        "preferred_family_values": ["Traditional", "Moderate"],
        "preferred_education": ["MBA", "B.Tech"],
    })
    good = make_profile(id="good", gender="Female", location={"city": "Nagpur"})
    bad = make_profile(
        id="bad", gender="Female",
        location={"city": "Austin", "state": "Texas", "country": "USA"},
        lifestyle={"diet": "Vegan"},
        family={"values": "Liberal"},
        education={"degree": "PhD"},
    )
    assert passes_preferences(subject, good)
    assert failed_preferences(subject, bad) == [
        "preferred_locations", "preferred_education", "preferred_diet", "preferred_family_values"
    ]
    assert passes_preferences(make_profile(), bad)

    ranking = rank_candidates(
        subject, [good, bad], config=RankingConfig(n_jobs=1, apply_preference_filters=True)
    )
    assert ranking.candidate_ids() == ["good"]
    assert set(ranking.filtered_out) == {"bad"}


def test_rank_from_store_and_dataframe(subject, pool):
    store = InMemoryProfileStore([subject] + pool)
    engine = CompatibilityEngine(options=EngineOptions(include_symbolic=True))
    ranking = rank_from_store(store, "subject", engine=engine, config=RankingConfig(n_jobs=2))

    df = ranking.to_dataframe()
    assert list(df["candidate_id"]) == ranking.candidate_ids()
    assert list(df.columns[:4]) == ["rank", "candidate_id", "candidate_name", "overall_score"]
    assert df["symbolic_level"].notna().all()


def test_empty_pool(subject):
    ranking = rank_candidates(subject, [], config=RankingConfig(n_jobs=1))
    assert ranking.matches == []
    assert ranking.to_dataframe().empty


def test_preference_filters_ignore_surrounding_whitespace():
    subject = make_profile(preferences={
        "preferred_locations": [" Pune "],
        "preferred_education": ["mba"],
    })
    padded = make_profile(
        id="padded", gender="Female",
        location={"city": " pune", "state": "Maharashtra "},
        education={"degree": "MBA "},
    )
    assert failed_preferences(subject, padded) == []


def test_ranking_config_dict_round_trip():
    config = RankingConfig.from_dict({"n_jobs": 2, "min_score": 40, "top_k": 3})
    assert config.apply_preference_filters is False
    assert RankingConfig.from_dict(config.to_dict()) == config
