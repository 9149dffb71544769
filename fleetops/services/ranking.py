"""
Service de classement chauffeurs / vehicules / Driver / vehicle ranking service.

- Par volume (ex. conteneurs) : decroissant, sans seuil d'echantillon.
- Par efficacite (consommation moyenne) : entites avec moins de 3 trajets
  mesures exclues, croissant (plus econome) ou decroissant (moins econome).
Egalites departagees par id croissant ; rangs 1..n sans ex aequo.
Ties broken by ascending id; ranks 1..n without shared positions.
"""

from collections.abc import Iterable, Mapping

from fleetops.schemas.stats import AggregateStat, RankedEntity

# Seuil de significativite statistique / Statistical significance floor
MIN_EFFICIENCY_SAMPLE = 3

# Ponderation du score d'efficacite / Efficiency score weights
SCORE_WEIGHT_CONSUMPTION = 0.6
SCORE_WEIGHT_COST_PER_KM = 0.4


def _label(stat: AggregateStat, labels: Mapping[int, str] | None) -> str:
    if labels and stat.entity_id in labels:
        return labels[stat.entity_id]
    return f"#{stat.entity_id}"


def _id_key(stat: AggregateStat) -> int:
    return stat.entity_id if stat.entity_id is not None else -1


def _ranked(ordered: list[AggregateStat], value_attr: str, labels, limit: int | None) -> list[RankedEntity]:
    if limit is not None:
        ordered = ordered[:max(limit, 0)]
    return [
        RankedEntity(
            rank=position,
            entity_id=stat.entity_id,
            label=_label(stat, labels),
            value=getattr(stat, value_attr),
            trip_count=stat.trip_count,
        )
        for position, stat in enumerate(ordered, 1)
    ]


class RankingService:
    """Classements / Leaderboards."""

    @staticmethod
    def by_volume(
        stats: Iterable[AggregateStat],
        metric: str = "total_containers",
        limit: int | None = None,
        labels: Mapping[int, str] | None = None,
    ) -> list[RankedEntity]:
        """Classement decroissant sur un compteur / Descending ranking on a count metric."""
        ordered = sorted(stats, key=lambda s: (-getattr(s, metric), _id_key(s)))
        return _ranked(ordered, metric, labels, limit)

    @staticmethod
    def by_efficiency(
        stats: Iterable[AggregateStat],
        ascending: bool = True,
        limit: int | None = None,
        labels: Mapping[int, str] | None = None,
    ) -> list[RankedEntity]:
        """
        Classement sur la consommation moyenne des trajets mesures.
        Ranking on the average consumption of measured trips.
        ascending=True : plus econome en premier / most economical first.
        """
        eligible = [s for s in stats if s.consumption_count >= MIN_EFFICIENCY_SAMPLE]
        sign = 1 if ascending else -1
        ordered = sorted(eligible, key=lambda s: (sign * s.efficiency_consumption, _id_key(s)))
        return _ranked(ordered, "efficiency_consumption", labels, limit)

    @staticmethod
    def efficiency_scores(
        stats: Iterable[AggregateStat],
        cost_attr: str = "total_cost",
        min_sample: int = 1,
    ) -> dict[int | None, float]:
        """
        Score d'efficacite 0-100 par entite / Efficiency score 0-100 per entity.

        Candidats : entites avec au moins min_sample trajets mesures. Les autres
        n'ont pas de score, une consommation inconnue n'est jamais la plus basse.
        Normalisation min-max de la consommation et du cout au km sur les
        candidats ; score = 100 - (0.6 x conso_norm + 0.4 x cout_norm) x 100.
        Sans dispersion, la composante ne penalise pas.
        Candidates have at least min_sample measured trips; other entities get
        no score. Min-max normalization of consumption and cost per km across
        candidates; a component with no spread carries no penalty.
        """
        candidates = [s for s in stats if s.consumption_count >= max(min_sample, 1)]
        if not candidates:
            return {}

        consumption = {s.entity_id: s.efficiency_consumption for s in candidates}
        cost_per_km = {
            s.entity_id: getattr(s, cost_attr) / s.total_km if s.total_km > 0 else 0.0
            for s in candidates
        }

        def normalize(values: dict) -> dict:
            low, high = min(values.values()), max(values.values())
            spread = high - low
            if spread <= 0:
                return {k: 0.0 for k in values}
            return {k: (v - low) / spread for k, v in values.items()}

        norm_consumption = normalize(consumption)
        norm_cost = normalize(cost_per_km)

        scores = {}
        for entity_id in consumption:
            penalty = (
                SCORE_WEIGHT_CONSUMPTION * norm_consumption[entity_id]
                + SCORE_WEIGHT_COST_PER_KM * norm_cost[entity_id]
            )
            scores[entity_id] = round(min(100.0, max(0.0, 100.0 - penalty * 100.0)), 1)
        return scores
