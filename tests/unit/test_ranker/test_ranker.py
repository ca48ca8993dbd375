"""Unit tests for the station ranker."""

import pytest

from src.filters.models import EvaluationContext
from src.freshness.evaluator import Freshness
from src.ranker.constants import MAX_URGENCY
from src.ranker.errors import UnrankableRecord
from src.ranker.metrics import RankerMetrics
from src.ranker.models import Score
from src.ranker.ranker import StationRanker, rank_records_pure, score_context
from src.stations.models import Category
from tests.helpers.stations import make_station


def _flagged(
    station_id: int,
    days: int,
    distance: float,
    arrival: float | None = 100.0,
) -> EvaluationContext:
    """Context with the market category already flagged stale."""
    return EvaluationContext(
        station=make_station(station_id, f"Station {station_id}", distance_to_arrival=arrival),
        distance=distance,
        freshness={Category.MARKET: Freshness(days_since_update=days, flagged_stale=days)},
    )


@pytest.fixture
def ranker() -> StationRanker:
    """Ranker with isolated metrics."""
    return StationRanker(metrics=RankerMetrics())


class TestScore:
    """Tests for Score."""

    @pytest.mark.unit
    def test_urgency_is_days_per_distance(self) -> None:
        """Test the urgency ratio."""
        assert Score.compute(stale_days=100, distance=10.0).urgency == pytest.approx(10.0)

    @pytest.mark.unit
    def test_at_location_uses_maximum(self) -> None:
        """Test that a distance under the epsilon gets the maximum urgency."""
        assert Score.compute(stale_days=1, distance=0.005).urgency == MAX_URGENCY
        assert Score.compute(stale_days=1, distance=0.0).urgency == MAX_URGENCY

    @pytest.mark.unit
    def test_epsilon_itself_is_finite(self) -> None:
        """Test that exactly the epsilon distance uses the ratio."""
        assert Score.compute(stale_days=1, distance=0.01).urgency == pytest.approx(100.0)


class TestScoreContext:
    """Tests for score_context."""

    @pytest.mark.unit
    def test_uses_largest_flagged_category(self) -> None:
        """Test that the maximum flagged day count drives urgency."""
        context = EvaluationContext(
            station=make_station(1, "A"),
            distance=2.0,
            freshness={
                Category.INFORMATION: Freshness(days_since_update=40, flagged_stale=40),
                Category.MARKET: Freshness(days_since_update=90, flagged_stale=90),
                Category.SHIPYARD: Freshness(days_since_update=500),
            },
        )

        assert score_context(context).stale_days == 90

    @pytest.mark.unit
    def test_unflagged_record_raises(self) -> None:
        """Test that a record with no flag cannot be ranked."""
        context = EvaluationContext(
            station=make_station(1, "A"),
            distance=2.0,
            freshness={Category.MARKET: Freshness(days_since_update=90)},
        )

        with pytest.raises(UnrankableRecord) as exc_info:
            score_context(context, position=4)

        assert exc_info.value.position == 4
        assert exc_info.value.to_dict()["station_id"] == 1


class TestStationRanker:
    """Tests for StationRanker."""

    @pytest.mark.unit
    def test_orders_by_urgency_descending(self, ranker: StationRanker) -> None:
        """Test the primary ordering."""
        contexts = [_flagged(1, 10, 10.0), _flagged(2, 50, 5.0), _flagged(3, 30, 10.0)]

        result = ranker.rank(contexts)

        assert result.station_ids() == [2, 3, 1]
        assert [r.rank for r in result.records] == [1, 2, 3]

    @pytest.mark.unit
    def test_arrival_distance_breaks_ties(self, ranker: StationRanker) -> None:
        """Test that nearer arrival wins on equal urgency, unknown last."""
        contexts = [
            _flagged(1, 10, 1.0, arrival=None),
            _flagged(2, 10, 1.0, arrival=900.0),
            _flagged(3, 10, 1.0, arrival=50.0),
        ]

        assert ranker.rank(contexts).station_ids() == [3, 2, 1]

    @pytest.mark.unit
    def test_full_ties_keep_input_order(self, ranker: StationRanker) -> None:
        """Test that sorting is stable."""
        contexts = [_flagged(i, 10, 1.0) for i in (5, 3, 9, 1)]

        assert ranker.rank(contexts).station_ids() == [5, 3, 9, 1]

    @pytest.mark.unit
    def test_at_location_records_rank_first_in_order(self, ranker: StationRanker) -> None:
        """Test that maximum-urgency records keep their relative order."""
        contexts = [_flagged(1, 1000, 1.0), _flagged(2, 1, 0.0), _flagged(3, 2, 0.001)]

        result = ranker.rank(contexts)

        assert result.station_ids() == [2, 3, 1]

    @pytest.mark.unit
    def test_limit_truncates(self, ranker: StationRanker) -> None:
        """Test truncation and the reported total."""
        contexts = [_flagged(i, i, 1.0) for i in range(1, 6)]

        result = ranker.rank(contexts, limit=2)

        assert result.station_ids() == [5, 4]
        assert result.total == 5
        assert result.truncated is True
        assert len(result) == 2

    @pytest.mark.unit
    def test_limit_zero_returns_nothing(self, ranker: StationRanker) -> None:
        """Test an explicit zero limit."""
        result = ranker.rank([_flagged(1, 10, 1.0)], limit=0)

        assert len(result) == 0
        assert result.total == 1

    @pytest.mark.unit
    def test_negative_limit_raises(self, ranker: StationRanker) -> None:
        """Test limit validation."""
        with pytest.raises(ValueError):
            ranker.rank([], limit=-1)

    @pytest.mark.unit
    def test_empty_input(self, ranker: StationRanker) -> None:
        """Test ranking nothing."""
        result = ranker.rank([])

        assert result.total == 0
        assert result.truncated is False

    @pytest.mark.unit
    def test_one_bad_record_fails_the_pass(self, ranker: StationRanker) -> None:
        """Test that no partial result is produced."""
        bad = EvaluationContext(station=make_station(9, "Bad"), distance=1.0)

        with pytest.raises(UnrankableRecord) as exc_info:
            ranker.rank([_flagged(1, 10, 1.0), bad])

        assert exc_info.value.position == 1

    @pytest.mark.unit
    def test_records_metrics(self) -> None:
        """Test that counts and at-location records are recorded."""
        metrics = RankerMetrics()
        ranker = StationRanker(metrics=metrics)

        ranker.rank([_flagged(1, 10, 0.0), _flagged(2, 10, 1.0)], limit=1)

        assert metrics.records_in == 2
        assert metrics.records_out == 1
        assert metrics.truncated_total == 1
        assert metrics.at_location_count == 1


class TestRankRecordsPure:
    """Tests for rank_records_pure."""

    @pytest.mark.unit
    def test_does_not_touch_shared_metrics(self) -> None:
        """Test that the pure API uses its own metrics."""
        RankerMetrics.reset()

        rank_records_pure([_flagged(1, 10, 1.0)])

        assert RankerMetrics.get_instance().records_in == 0
