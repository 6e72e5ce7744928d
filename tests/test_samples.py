"""
Tests for the sample reconstructor and GET /api/v1/meters/{meter_id}/latest.

CHANGELOG:
- 2026-10-18: Initial creation
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from conftest import make_reading
from meterhub.api.meters import parse_limit
from meterhub.services.samples import group_samples, latest_samples

T0 = datetime(2024, 1, 1, 0, 0, tzinfo=UTC)
T1 = T0 + timedelta(minutes=1)
T2 = T0 + timedelta(minutes=2)


def _rows_desc() -> list:
    """Three samples (T2, T1, T0) of two readings each, as the store returns them."""
    return [
        make_reading(6, T2, "1.0.32.7.0.255", 231.0, sequence_number=3),
        make_reading(5, T2, "1.0.1.7.0.255", 300.0, sequence_number=3),
        make_reading(4, T1, "1.0.32.7.0.255", 230.5, sequence_number=2),
        make_reading(3, T1, "1.0.1.7.0.255", 200.0, sequence_number=2),
        make_reading(2, T0, "1.0.32.7.0.255", 230.0, sequence_number=1),
        make_reading(1, T0, "1.0.1.7.0.255", 100.0, sequence_number=1),
    ]


def _result_with_rows(rows: list) -> MagicMock:
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    return result


# ---------------------------------------------------------------------------
# group_samples
# ---------------------------------------------------------------------------


class TestGroupSamples:
    def test_groups_by_timestamp_newest_first(self) -> None:
        samples = group_samples(_rows_desc(), limit=3)
        assert [s["timestamp"] for s in samples] == [T2, T1, T0]
        assert [s["sequence_number"] for s in samples] == [3, 2, 1]

    def test_limit_caps_number_of_samples(self) -> None:
        samples = group_samples(_rows_desc(), limit=2)
        assert [s["timestamp"] for s in samples] == [T2, T1]

    def test_default_limit_is_one(self) -> None:
        assert len(group_samples(_rows_desc())) == 1

    def test_single_sample_holds_all_readings_in_ingestion_order(self) -> None:
        (sample,) = group_samples(_rows_desc(), limit=1)
        assert [r["obis_code"] for r in sample["readings"]] == [
            "1.0.1.7.0.255",
            "1.0.32.7.0.255",
        ]
        assert sample["readings"][0] == {
            "obis_code": "1.0.1.7.0.255",
            "description": "Reading 1.0.1.7.0.255",
            "value": 300.0,
            "unit": "W",
            "scaler": 0,
        }

    def test_first_seen_sequence_number_wins(self) -> None:
        rows = [
            make_reading(2, T0, "b", sequence_number=9),
            make_reading(1, T0, "a", sequence_number=8),
        ]
        (sample,) = group_samples(rows, limit=1)
        assert sample["sequence_number"] == 9
        assert len(sample["readings"]) == 2

    def test_no_rows_gives_no_samples(self) -> None:
        assert group_samples([], limit=5) == []

    def test_fewer_samples_than_limit(self) -> None:
        assert len(group_samples(_rows_desc(), limit=10)) == 3


# ---------------------------------------------------------------------------
# latest_samples
# ---------------------------------------------------------------------------


class TestLatestSamples:
    @pytest.mark.asyncio
    async def test_over_fetches_rows(self, mock_db_session: AsyncMock) -> None:
        mock_db_session.execute = AsyncMock(return_value=_result_with_rows([]))
        await latest_samples(mock_db_session, "M1", limit=3)

        stmt = mock_db_session.execute.await_args.args[0]
        assert 30 in stmt.compile().params.values()

    @pytest.mark.asyncio
    async def test_over_fetch_factor_is_tunable(self, mock_db_session: AsyncMock) -> None:
        mock_db_session.execute = AsyncMock(return_value=_result_with_rows([]))
        await latest_samples(mock_db_session, "M1", limit=2, overfetch_factor=25)

        stmt = mock_db_session.execute.await_args.args[0]
        assert 50 in stmt.compile().params.values()

    @pytest.mark.asyncio
    async def test_unknown_meter_returns_empty_list(
        self, mock_db_session: AsyncMock
    ) -> None:
        mock_db_session.execute = AsyncMock(return_value=_result_with_rows([]))
        assert await latest_samples(mock_db_session, "NEVER_SEEN") == []

    @pytest.mark.asyncio
    async def test_n_readings_come_back_as_one_sample(
        self, mock_db_session: AsyncMock
    ) -> None:
        rows = [make_reading(i, T0, f"1.0.{i}.7.0.255") for i in range(8, 0, -1)]
        mock_db_session.execute = AsyncMock(return_value=_result_with_rows(rows))

        samples = await latest_samples(mock_db_session, "M1", limit=1)
        assert len(samples) == 1
        assert len(samples[0]["readings"]) == 8


# ---------------------------------------------------------------------------
# parse_limit
# ---------------------------------------------------------------------------


class TestParseLimit:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, 1),
            ("3", 3),
            ("abc", 1),
            ("0", 1),
            ("-4", 1),
            ("2.5", 1),
            ("1000", 100),
        ],
    )
    def test_lenient_parsing(self, raw: str | None, expected: int) -> None:
        assert parse_limit(raw, maximum=100) == expected


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------


class TestLatestEndpoint:
    def test_worked_example(
        self, client: TestClient, mock_db_session: AsyncMock, override_db
    ) -> None:
        row = make_reading(1, T0, "1.0.1.7.0.255", 100, meter_id="M1")
        mock_db_session.execute = AsyncMock(return_value=_result_with_rows([row]))
        override_db(mock_db_session)

        response = client.get("/api/v1/meters/M1/latest", params={"limit": 1})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert len(body["data"]) == 1
        sample = body["data"][0]
        assert sample["timestamp"] == "2024-01-01T00:00:00Z"
        assert sample["sequence_number"] == 1
        assert len(sample["readings"]) == 1
        assert sample["readings"][0]["value"] == 100
        assert sample["readings"][0]["obis_code"] == "1.0.1.7.0.255"

    def test_limit_returns_several_samples(
        self, client: TestClient, mock_db_session: AsyncMock, override_db
    ) -> None:
        mock_db_session.execute = AsyncMock(return_value=_result_with_rows(_rows_desc()))
        override_db(mock_db_session)

        data = client.get("/api/v1/meters/METER_001/latest?limit=2").json()["data"]
        assert [s["sequence_number"] for s in data] == [3, 2]

    def test_unknown_meter_returns_empty_data(
        self, client: TestClient, mock_db_session: AsyncMock, override_db
    ) -> None:
        mock_db_session.execute = AsyncMock(return_value=_result_with_rows([]))
        override_db(mock_db_session)

        response = client.get("/api/v1/meters/NOPE/latest")
        assert response.status_code == 200
        assert response.json() == {"status": "success", "data": []}

    def test_bad_limit_falls_back_to_one(
        self, client: TestClient, mock_db_session: AsyncMock, override_db
    ) -> None:
        mock_db_session.execute = AsyncMock(return_value=_result_with_rows(_rows_desc()))
        override_db(mock_db_session)

        response = client.get("/api/v1/meters/METER_001/latest?limit=abc")
        assert response.status_code == 200
        assert len(response.json()["data"]) == 1
