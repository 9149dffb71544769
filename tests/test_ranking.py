"""Tests des classements / Ranking tests."""

from fleetops.schemas.stats import AggregateStat
from fleetops.services.ranking import RankingService


def _stat(entity_id, trips=3, consumption=10.0, containers=0, km=100.0, cost=0.0):
    return AggregateStat(
        entity_id=entity_id,
        trip_count=trips,
        consumption_count=trips,
        consumption_sum=consumption * trips,
        efficiency_consumption=consumption,
        average_consumption=consumption,
        total_containers=containers,
        total_km=km,
        total_cost=cost,
        total_fuel_cost=cost,
    )


def test_small_sample_excluded():
    a = _stat(1, trips=2, consumption=10)
    b = _stat(2, trips=3, consumption=12)
    ranked = RankingService.by_efficiency([a, b], ascending=True)
    assert len(ranked) == 1
    assert ranked[0].entity_id == 2
    assert ranked[0].rank == 1
    assert ranked[0].value == 12


def test_efficiency_directions_and_ties():
    stats = [_stat(3, consumption=30), _stat(1, consumption=30), _stat(2, consumption=25)]
    assert [r.entity_id for r in RankingService.by_efficiency(stats)] == [2, 1, 3]
    assert [r.entity_id for r in RankingService.by_efficiency(stats, ascending=False)] == [1, 3, 2]


def test_volume_ranking():
    stats = [_stat(1, trips=1, containers=4), _stat(2, containers=9), _stat(3, containers=4)]
    ranked = RankingService.by_volume(stats, labels={2: "Marie Nkoulou"})
    assert [r.entity_id for r in ranked] == [2, 1, 3]
    assert [r.rank for r in ranked] == [1, 2, 3]
    assert ranked[0].label == "Marie Nkoulou"
    assert ranked[1].label == "#1"


def test_limit():
    stats = [_stat(i, containers=i) for i in range(1, 8)]
    assert len(RankingService.by_volume(stats, limit=5)) == 5
    assert RankingService.by_volume(stats, limit=0) == []


def test_efficiency_scores():
    scores = RankingService.efficiency_scores([
        _stat(1, consumption=20, km=100, cost=10000),
        _stat(2, consumption=30, km=100, cost=20000),
        _stat(3, consumption=25, km=100, cost=15000),
    ])
    assert scores[1] == 100.0
    assert scores[2] == 0.0
    assert scores[3] == 50.0


def test_single_candidate_scores_full():
    assert RankingService.efficiency_scores([_stat(1)]) == {1: 100.0}
    assert RankingService.efficiency_scores([]) == {}


def test_unmeasured_entities_get_no_score():
    # Trajet ouvert seul : consommation inconnue / Only an open trip: unknown consumption
    open_only = AggregateStat(entity_id=3, trip_count=1, total_containers=9)
    scores = RankingService.efficiency_scores([
        _stat(1, consumption=30, cost=19500),
        _stat(2, consumption=50, cost=32500),
        open_only,
    ])
    assert scores == {1: 100.0, 2: 0.0}


def test_score_candidates_respect_sample_floor():
    stats = [_stat(1, trips=6, consumption=40, cost=26000), _stat(2, trips=2, consumption=20, cost=13000)]
    assert RankingService.efficiency_scores(stats, min_sample=3) == {1: 100.0}
    assert RankingService.efficiency_scores(stats)[1] == 0.0
