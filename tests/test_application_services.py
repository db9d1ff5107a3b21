"""Tests for application services."""
from __future__ import annotations

import pytest
from unittest.mock import Mock, patch
from sqlalchemy.exc import OperationalError

from app.application.graph_assembly_service import GraphAssemblyService
from app.application.graph_write_service import GraphWriteService
from app.domain.errors import (
    ConflictError, NotFoundError, StorageError, ValidationError, WatermarkUpdateError
)
from app.domain.events import (
    DomainEventPublisher, ServiceCreated, RelationCreated, WatermarkAdvanced
)


def _db_failure() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("connection lost"))


class TestGraphAssemblyService:
    """Test assembly of the nested graph document."""

    def test_empty_graph_has_empty_lists(self, db, sample_graph):
        doc = GraphAssemblyService(db).assemble_graph(1)

        assert doc.id == 1
        assert doc.name == "Test Graph"
        assert doc.max_node_id == 0
        assert doc.max_edge_id == 0
        assert doc.services == []
        assert doc.relations == []
        dumped = doc.model_dump()
        assert dumped["services"] == []
        assert dumped["relations"] == []

    def test_contains_exactly_the_graph_children(self, db, writer, sample_graph):
        writer.create_graph("Other", graph_id=2)
        for service_id in (7, 2, 4):
            writer.create_service(1, service_id, f"svc-{service_id}")
        writer.create_service(2, 2, "elsewhere")
        writer.create_relation(1, 1, from_service=2, to_service=7)
        writer.create_relation(2, 9, from_service=2, to_service=2)

        doc = GraphAssemblyService(db).assemble_graph(1)

        assert {s.id for s in doc.services} == {2, 4, 7}
        assert {r.id for r in doc.relations} == {1}
        assert all(s.graph_id == 1 for s in doc.services)

    def test_fields_are_copied_verbatim(self, db, writer, sample_graph):
        writer.create_service(1, 1, "api", "public api", 12.5, -3.0)
        writer.create_relation(1, 4, from_service=1, to_service=99, name="calls", description="http")

        doc = GraphAssemblyService(db).assemble_graph(1)

        service = doc.services[0]
        assert (service.name, service.description, service.x, service.y) == ("api", "public api", 12.5, -3.0)
        relation = doc.relations[0]
        assert relation.from_service == 1
        assert relation.to_service == 99
        assert relation.name == "calls"
        assert relation.description == "http"

    def test_assembly_is_idempotent(self, db, writer, sample_graph):
        writer.create_service(1, 1, "a")
        writer.create_relation(1, 1, from_service=1, to_service=1)
        assembler = GraphAssemblyService(db)

        assert assembler.assemble_graph(1) == assembler.assemble_graph(1)

    def test_missing_graph_is_not_found(self, db):
        with pytest.raises(NotFoundError, match="Graph not found") as excinfo:
            GraphAssemblyService(db).assemble_graph(404)
        assert excinfo.value.code == "graph_not_found"

    def test_storage_failure_is_distinct_from_not_found(self, db):
        assembler = GraphAssemblyService(db)

        with patch.object(assembler._graphs, "get_graph", side_effect=_db_failure()):
            with pytest.raises(StorageError) as excinfo:
                assembler.assemble_graph(1)

        assert not isinstance(excinfo.value, NotFoundError)
        assert excinfo.value.code == "storage_error"


class TestGraphWriteServiceWatermarks:
    """Test watermark maintenance on create."""

    def test_create_service_advances_max_node_id(self, db, writer, sample_graph):
        writer.create_service(1, 5, "svc")

        assert GraphAssemblyService(db).assemble_graph(1).max_node_id == 6

    def test_create_relation_advances_max_edge_id(self, db, writer, sample_graph):
        writer.create_relation(1, 11, from_service=1, to_service=2)

        doc = GraphAssemblyService(db).assemble_graph(1)
        assert doc.max_edge_id == 12
        assert doc.max_node_id == 0

    @pytest.mark.parametrize("ids", [(3, 7), (7, 3), (1, 9, 4, 2), (0,)])
    def test_watermark_is_max_plus_one_in_any_order(self, db, writer, sample_graph, ids):
        for service_id in ids:
            writer.create_service(1, service_id)

        assert GraphAssemblyService(db).assemble_graph(1).max_node_id == max(ids) + 1

    def test_interleaved_sessions_converge(self, session_factory, sample_graph):
        """Two writers with their own sessions, finishing in either order."""
        first, second = session_factory(), session_factory()
        try:
            GraphWriteService(second).create_service(1, 7)
            GraphWriteService(first).create_service(1, 3)
        finally:
            first.close()
            second.close()

        reader = session_factory()
        try:
            assert GraphAssemblyService(reader).assemble_graph(1).max_node_id == 8
        finally:
            reader.close()

    def test_delete_does_not_lower_watermark(self, db, writer, sample_graph):
        writer.create_service(1, 9)
        writer.create_relation(1, 4, from_service=9, to_service=9)

        writer.delete_relation(1, 4)
        writer.delete_service(1, 9)

        doc = GraphAssemblyService(db).assemble_graph(1)
        assert doc.max_node_id == 10
        assert doc.max_edge_id == 5
        assert doc.services == []

    def test_update_does_not_touch_watermark(self, db, writer, sample_graph):
        writer.create_service(1, 2)
        writer.update_service(1, 2, {"name": "renamed"})

        assert GraphAssemblyService(db).assemble_graph(1).max_node_id == 3

    def test_watermark_failure_rolls_back_insert(self, db, writer, sample_graph):
        with patch.object(writer._graphs, "advance_max_node_id", side_effect=_db_failure()):
            with pytest.raises(WatermarkUpdateError) as excinfo:
                writer.create_service(1, 5, "svc")

        assert excinfo.value.code == "watermark_update_failed"
        assert isinstance(excinfo.value, StorageError)
        with pytest.raises(NotFoundError):
            writer.get_service(1, 5)
        assert GraphAssemblyService(db).assemble_graph(1).max_node_id == 0

    def test_relation_watermark_failure_rolls_back_insert(self, db, writer, sample_graph):
        with patch.object(writer._graphs, "advance_max_edge_id", side_effect=_db_failure()):
            with pytest.raises(WatermarkUpdateError):
                writer.create_relation(1, 5, from_service=1, to_service=2)

        with pytest.raises(NotFoundError):
            writer.get_relation(1, 5)


class TestGraphWriteServiceErrors:
    """Test error translation of the write service."""

    def test_duplicate_service_conflicts(self, writer, sample_graph):
        writer.create_service(1, 5, "first")

        with pytest.raises(ConflictError, match="already exists") as excinfo:
            writer.create_service(1, 5, "second")
        assert excinfo.value.code == "duplicate_service"
        assert writer.get_service(1, 5).name == "first"

    def test_duplicate_relation_conflicts(self, writer, sample_graph):
        writer.create_relation(1, 1, from_service=1, to_service=2)

        with pytest.raises(ConflictError):
            writer.create_relation(1, 1, from_service=3, to_service=4)

    def test_create_in_missing_graph(self, writer):
        with pytest.raises(NotFoundError, match="Graph not found"):
            writer.create_service(8, 1)
        with pytest.raises(NotFoundError, match="Graph not found"):
            writer.create_relation(8, 1, from_service=1, to_service=2)

    def test_relation_endpoints_are_not_checked(self, writer, sample_graph):
        relation = writer.create_relation(1, 1, from_service=500, to_service=600)

        assert relation.from_service == 500
        assert writer.get_relation(1, 1).to_service == 600

    def test_get_missing_entities(self, writer, sample_graph):
        with pytest.raises(NotFoundError, match="Service not found"):
            writer.get_service(1, 99)
        with pytest.raises(NotFoundError, match="Relation not found"):
            writer.get_relation(1, 99)

    def test_update_and_delete_missing(self, writer, sample_graph):
        with pytest.raises(NotFoundError):
            writer.update_service(1, 99, {"name": "x"})
        with pytest.raises(NotFoundError):
            writer.update_relation(1, 99, {"name": "x"})
        with pytest.raises(NotFoundError):
            writer.delete_service(1, 99)
        with pytest.raises(NotFoundError):
            writer.delete_relation(1, 99)

    def test_empty_update_is_invalid(self, writer, sample_graph):
        writer.create_service(1, 1)

        with pytest.raises(ValidationError, match="No fields to update"):
            writer.update_service(1, 1, {})

    def test_create_graph_validation(self, writer):
        with pytest.raises(ValidationError):
            writer.create_graph("   ")

    def test_duplicate_graph_id(self, writer, sample_graph):
        with pytest.raises(ConflictError):
            writer.create_graph("Again", graph_id=1)

    def test_delete_graph(self, db, writer, sample_graph):
        writer.create_service(1, 1)
        writer.delete_graph(1)

        with pytest.raises(NotFoundError):
            GraphAssemblyService(db).assemble_graph(1)
        with pytest.raises(NotFoundError):
            writer.delete_graph(1)

    def test_store_failure_becomes_storage_error(self):
        db = Mock()
        db.query.side_effect = _db_failure()
        service = GraphWriteService(db)

        with pytest.raises(StorageError, match="Failed to create service"):
            service.create_service(1, 1)
        db.rollback.assert_called_once()
        db.commit.assert_not_called()

    def test_unique_violation_at_insert_is_conflict(self, db, writer, sample_graph):
        writer.create_service(1, 5, "first")
        db.expunge_all()

        # Another writer inserted id 5 after the existence check
        with patch.object(writer._services, "get_service", return_value=None):
            with pytest.raises(ConflictError, match="id already exists"):
                writer.create_service(1, 5, "second")

        assert writer.get_service(1, 5).name == "first"

    def test_foreign_key_violation_is_graph_not_found(self, writer):
        # Graph 8 was deleted after the existence check
        with patch.object(writer, "_require_graph"):
            with pytest.raises(NotFoundError, match="graph no longer exists") as excinfo:
                writer.create_service(8, 1)
        assert excinfo.value.code == "graph_not_found"

    def test_not_null_violation_is_storage_error(self, writer, sample_graph):
        with pytest.raises(StorageError, match="Failed to create service") as excinfo:
            writer.create_service(1, 1, name=None)
        assert not isinstance(excinfo.value, ConflictError)
        assert excinfo.value.code == "storage_error"

        with pytest.raises(NotFoundError):
            writer.get_service(1, 1)


class TestGraphWriteServiceEvents:
    """Test that events are published after commit."""

    def test_create_service_publishes_events(self, db, sample_graph):
        publisher = Mock(spec=DomainEventPublisher)
        writer = GraphWriteService(db, publisher=publisher)

        writer.create_service(1, 4, "svc")

        published = [call.args[0] for call in publisher.publish.call_args_list]
        assert [type(e) for e in published] == [ServiceCreated, WatermarkAdvanced]
        assert published[1].counter == "max_node_id"
        assert published[1].value == 5

    def test_no_watermark_event_when_not_advanced(self, db, sample_graph):
        publisher = Mock(spec=DomainEventPublisher)
        writer = GraphWriteService(db, publisher=publisher)
        writer.create_relation(1, 9, from_service=1, to_service=2)
        publisher.reset_mock()

        writer.create_relation(1, 3, from_service=1, to_service=2)

        published = [call.args[0] for call in publisher.publish.call_args_list]
        assert [type(e) for e in published] == [RelationCreated]

    def test_failed_create_publishes_nothing(self, db, sample_graph):
        publisher = Mock(spec=DomainEventPublisher)
        writer = GraphWriteService(db, publisher=publisher)

        with pytest.raises(NotFoundError):
            writer.create_service(2, 1)

        publisher.publish.assert_not_called()
