"""
Tests for buscadog.services.clinics — ClinicQueryService.
"""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from buscadog.exceptions import UpstreamQueryError
from buscadog.schemas.veterinaria import ClinicCluster, ClinicOut
from buscadog.services.clinics import (
    AGGREGATE_SQL,
    DETAIL_SQL,
    ClinicQueryService,
    get_clinic_service,
)
from buscadog.spatial.bounds import BoundingBox
from tests.conftest import make_clinic_row, make_cluster_row, make_result

BBOX = BoundingBox(south=19.0, west=-99.2, north=19.5, east=-99.0)


class TestClinicQueryService:
    """Tests with a mocked AsyncSession."""

    @pytest.fixture()
    def mock_session(self):
        return AsyncMock()

    @pytest.fixture()
    def svc(self, mock_session, query_limits):
        return ClinicQueryService(mock_session, query_limits)

    # ── aggregate ─────────────────────────────────────────────

    @pytest.mark.asyncio
    async def test_aggregate_empty(self, svc, mock_session):
        mock_session.execute.return_value = make_result([])
        assert await svc.aggregate(BBOX, 2, 1200) == []

    @pytest.mark.asyncio
    async def test_aggregate_returns_clusters(self, svc, mock_session):
        mock_session.execute.return_value = make_result([make_cluster_row()])

        clusters = await svc.aggregate(BBOX, 2, 1200)

        assert clusters == [ClinicCluster(lat=19.1, lng=-99.1, count=5)]
        assert isinstance(clusters[0].count, int)

    @pytest.mark.asyncio
    async def test_aggregate_binds_parameters_in_order(self, svc, mock_session):
        mock_session.execute.return_value = make_result([])

        await svc.aggregate(BBOX, 3, 500)

        stmt, params = mock_session.execute.call_args[0]
        assert stmt is AGGREGATE_SQL
        assert params == {
            "s": 19.0, "w": -99.2, "n": 19.5, "e": -99.0,
            "precision": 3, "limit": 500,
        }
        sql = str(stmt)
        assert "veterinarias_agrupadas_bbox(:s, :w, :n, :e, :precision, :limit)" in sql

    @pytest.mark.asyncio
    async def test_aggregate_preserves_row_order(self, svc, mock_session):
        rows = [
            make_cluster_row(lat=1.0, lng=1.0, count=1),
            make_cluster_row(lat=2.0, lng=2.0, count=9),
            make_cluster_row(lat=3.0, lng=3.0, count=4),
        ]
        mock_session.execute.return_value = make_result(rows)

        clusters = await svc.aggregate(BBOX, 0, 50)
        assert [c.count for c in clusters] == [1, 9, 4]

    @pytest.mark.asyncio
    async def test_aggregate_single_statement(self, svc, mock_session):
        mock_session.execute.return_value = make_result([])
        await svc.aggregate(BBOX, 2, 1200)
        mock_session.execute.assert_awaited_once()
        mock_session.commit.assert_not_called()

    def test_aggregate_sql_relabels_columns(self):
        sql = str(AGGREGATE_SQL)
        assert "AS lng" in sql
        assert "AS count" in sql
        assert "total::int" in sql

    # ── list_in_bbox ──────────────────────────────────────────

    @pytest.mark.asyncio
    async def test_list_returns_clinics(self, svc, mock_session):
        mock_session.execute.return_value = make_result([make_clinic_row()])

        clinics = await svc.list_in_bbox(BBOX, 800)

        assert clinics == [
            ClinicOut(
                id=1, nombre="Vet A", latitud=19.1, longitud=-99.1,
                municipio="X", codigo_postal="00000",
            )
        ]

    @pytest.mark.asyncio
    async def test_list_binds_parameters(self, svc, mock_session):
        mock_session.execute.return_value = make_result([])

        await svc.list_in_bbox(BBOX, 800)

        stmt, params = mock_session.execute.call_args[0]
        assert stmt is DETAIL_SQL
        assert params == {"s": 19.0, "w": -99.2, "n": 19.5, "e": -99.0, "limit": 800}
        assert "veterinarias_detalle_bbox(:s, :w, :n, :e, :limit)" in str(stmt)

    @pytest.mark.asyncio
    async def test_list_allows_null_optional_fields(self, svc, mock_session):
        row = make_clinic_row(municipio=None, codigo_postal=None)
        mock_session.execute.return_value = make_result([row])

        clinics = await svc.list_in_bbox(BBOX, 800)
        assert clinics[0].municipio is None
        assert clinics[0].codigo_postal is None

    def test_detail_sql_relabels_columns(self):
        sql = str(DETAIL_SQL)
        assert "AS latitud" in sql
        assert "AS longitud" in sql

    # ── Upstream failures ─────────────────────────────────────

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        SQLAlchemyError("syntax error at or near"),
        OperationalError("SELECT 1", {}, Exception("connection refused")),
        ConnectionRefusedError("connection refused"),
    ])
    async def test_aggregate_wraps_errors(self, svc, mock_session, error):
        mock_session.execute.side_effect = error

        with pytest.raises(UpstreamQueryError) as exc_info:
            await svc.aggregate(BBOX, 2, 1200)

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "error interno"
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_list_wraps_errors(self, svc, mock_session):
        mock_session.execute.side_effect = SQLAlchemyError("relation does not exist")

        with pytest.raises(UpstreamQueryError):
            await svc.list_in_bbox(BBOX, 800)

    @pytest.mark.asyncio
    async def test_error_is_logged(self, svc, mock_session, caplog):
        mock_session.execute.side_effect = SQLAlchemyError("boom")

        with caplog.at_level("ERROR", logger="buscadog.services.clinics"):
            with pytest.raises(UpstreamQueryError):
                await svc.aggregate(BBOX, 2, 1200)

        assert any("Clinic query failed" in r.message for r in caplog.records)

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, svc, mock_session):
        mock_session.execute.side_effect = RuntimeError("bug")
        with pytest.raises(RuntimeError):
            await svc.aggregate(BBOX, 2, 1200)


class TestGetClinicService:
    def test_uses_configured_limits(self):
        session = MagicMock()
        settings = MagicMock()
        with patch("buscadog.services.clinics.get_settings", return_value=settings):
            svc = get_clinic_service(session)

        assert svc.session is session
        assert svc.limits is settings.query_limits
