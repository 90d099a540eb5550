import json
from decimal import Decimal
from uuid import uuid4

import pytest
from django.core.exceptions import ImproperlyConfigured

from apps.slips.domain import CompleteSlip, PendingSlip
from apps.slips.exceptions import InvalidStateError, NotFoundError, PersistenceError
from apps.slips.models import SlipRecord
from apps.slips.repositories import (
    DatabaseSlipRepository,
    JsonFileSlipRepository,
    build_slip_repository,
)
from apps.slips.store import SlipStore


@pytest.fixture
def slips(store):
    """One Complete and one Pending slip, in creation order."""
    first = store.create('mh12ab1234', 'Sand', '12.500')
    store.create('ka01xy9', 'Gravel', '20')
    store.complete(first.id, '4.200')
    return list(store.list())


# =============================================================================
# JSON file repository
# =============================================================================

class TestJsonFileSlipRepository:
    """Tests for JsonFileSlipRepository."""

    def test_missing_file_loads_empty(self, tmp_path):
        repository = JsonFileSlipRepository(tmp_path / 'slips.json')

        assert repository.load() == []

    def test_round_trip(self, tmp_path, slips):
        repository = JsonFileSlipRepository(tmp_path / 'slips.json')

        repository.save(slips)

        assert repository.load() == slips

    def test_pending_record_has_no_completion_keys(self, tmp_path, slips):
        path = tmp_path / 'slips.json'
        JsonFileSlipRepository(path).save(slips)

        records = json.loads(path.read_text(encoding='utf-8'))

        assert records[0]['status'] == 'Complete'
        assert records[0]['netWeight'] == '8.300'
        assert records[1]['status'] == 'Pending'
        assert 'tareWeight' not in records[1]
        assert 'tareWeightTime' not in records[1]
        assert 'netWeight' not in records[1]

    def test_creates_parent_directory(self, tmp_path, slips):
        path = tmp_path / 'nested' / 'data' / 'slips.json'

        JsonFileSlipRepository(path).save(slips)

        assert path.exists()

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / 'slips.json'
        path.write_text('{not json', encoding='utf-8')

        with pytest.raises(PersistenceError):
            JsonFileSlipRepository(path).load()

    def test_non_list_document_raises(self, tmp_path):
        path = tmp_path / 'slips.json'
        path.write_text('{"slips": []}', encoding='utf-8')

        with pytest.raises(PersistenceError):
            JsonFileSlipRepository(path).load()

    def test_unwritable_location_raises(self, tmp_path, slips):
        blocker = tmp_path / 'blocker'
        blocker.write_text('', encoding='utf-8')

        with pytest.raises(PersistenceError):
            JsonFileSlipRepository(blocker / 'slips.json').save(slips)

    def test_failed_write_keeps_previous_file(self, tmp_path, slips, monkeypatch):
        path = tmp_path / 'slips.json'
        repository = JsonFileSlipRepository(path)
        repository.save(slips[:1])

        def refuse(src, dst):
            raise OSError('read-only file system')

        monkeypatch.setattr('apps.slips.repositories.os.replace', refuse)

        with pytest.raises(PersistenceError):
            repository.save(slips)

        assert repository.load() == slips[:1]

    def test_store_over_json_file(self, tmp_path, clock):
        """A fresh store over the same file sees earlier slips."""
        path = tmp_path / 'slips.json'
        pending = SlipStore(JsonFileSlipRepository(path), clock=clock).create('mh12', 'Sand', '12.5')

        reopened = SlipStore(JsonFileSlipRepository(path), clock=clock)
        slip = reopened.complete(pending.id, '4.2')

        assert reopened.next_slip_number() == '00002'
        assert slip.net_weight == Decimal('8.300')


# =============================================================================
# Database repository
# =============================================================================

def store_rows(repository, slips):
    """Write slips the way the store does: insert, then complete."""
    for position, slip in enumerate(slips, start=1):
        pending = slip if isinstance(slip, PendingSlip) else PendingSlip(
            id=slip.id,
            slip_number=slip.slip_number,
            vehicle_number=slip.vehicle_number,
            material=slip.material,
            gross_weight=slip.gross_weight,
            gross_weight_time=slip.gross_weight_time,
        )
        repository.insert(pending, slips[:position])
    for slip in slips:
        if isinstance(slip, CompleteSlip):
            repository.mark_complete(slip, slips)


@pytest.mark.django_db
class TestDatabaseSlipRepository:
    """Tests for DatabaseSlipRepository."""

    def test_empty_table_loads_empty(self):
        assert DatabaseSlipRepository().load() == []

    def test_round_trip(self, slips):
        repository = DatabaseSlipRepository()

        store_rows(repository, slips)
        loaded = repository.load()

        assert loaded == slips
        assert isinstance(loaded[0], CompleteSlip)
        assert isinstance(loaded[1], PendingSlip)

    def test_pending_row_has_null_completion_columns(self, slips):
        store_rows(DatabaseSlipRepository(), slips)

        record = SlipRecord.objects.get(id=slips[1].id)

        assert record.status == 'Pending'
        assert record.tare_weight is None
        assert record.tare_weight_time is None
        assert record.net_weight is None

    def test_complete_updates_row_in_place(self, clock):
        slip_store = SlipStore(DatabaseSlipRepository(), clock=clock)
        pending = slip_store.create('mh12', 'Sand', '12.5')

        slip_store.complete(pending.id, '4.2')

        assert SlipRecord.objects.count() == 1
        record = SlipRecord.objects.get(id=pending.id)
        assert record.status == 'Complete'
        assert record.net_weight == Decimal('8.300')

    def test_mark_complete_twice_raises(self, slips):
        repository = DatabaseSlipRepository()
        store_rows(repository, slips)
        again = PendingSlip(
            id=slips[0].id,
            slip_number=slips[0].slip_number,
            vehicle_number=slips[0].vehicle_number,
            material=slips[0].material,
            gross_weight=slips[0].gross_weight,
            gross_weight_time=slips[0].gross_weight_time,
        ).complete('1.000', at=slips[0].tare_weight_time)

        with pytest.raises(InvalidStateError):
            repository.mark_complete(again, slips)

        assert SlipRecord.objects.get(id=slips[0].id).net_weight == Decimal('8.300')

    def test_mark_complete_unknown_row_raises(self, slips):
        repository = DatabaseSlipRepository()

        with pytest.raises(NotFoundError):
            repository.mark_complete(slips[0], slips)

    def test_load_keeps_creation_order(self, clock):
        slip_store = SlipStore(DatabaseSlipRepository(), clock=clock)
        for vehicle in ('C3', 'A1', 'B2'):
            slip_store.create(vehicle, 'Sand', '10')

        loaded = DatabaseSlipRepository().load()

        assert [slip.vehicle_number for slip in loaded] == ['C3', 'A1', 'B2']
        assert [slip.slip_number for slip in loaded] == ['00001', '00002', '00003']

    def test_duplicate_slip_number_raises(self, slips):
        repository = DatabaseSlipRepository()
        store_rows(repository, slips)

        # Same number under a new identity, as a second process would allocate it
        clash = PendingSlip(
            id=uuid4(),
            slip_number=slips[0].slip_number,
            vehicle_number='DL01',
            material='Coal',
            gross_weight=Decimal('9.000'),
            gross_weight_time=slips[0].gross_weight_time,
        )

        with pytest.raises(PersistenceError):
            repository.insert(clash, slips + [clash])

        assert SlipRecord.objects.count() == 2


@pytest.mark.django_db
class TestStoresSharingDatabase:
    """Two stores over one database behave like two server processes."""

    @pytest.fixture
    def first(self, clock):
        return SlipStore(DatabaseSlipRepository(), clock=clock)

    @pytest.fixture
    def second(self, clock):
        return SlipStore(DatabaseSlipRepository(), clock=clock)

    def test_second_completion_is_rejected(self, first, second):
        pending = first.create('mh12', 'Sand', '12.500')
        second.list()
        first.complete(pending.id, '4.200')

        with pytest.raises(InvalidStateError):
            second.complete(pending.id, '1.000')

        record = SlipRecord.objects.get(id=pending.id)
        assert record.tare_weight == Decimal('4.200')
        assert record.net_weight == Decimal('8.300')

    def test_completion_does_not_revert_other_slips(self, first, second):
        one = first.create('A1', 'Sand', '12.500')
        two = first.create('B2', 'Sand', '10.000')
        second.list()

        first.complete(one.id, '4.200')
        second.complete(two.id, '3.000')

        statuses = dict(SlipRecord.objects.values_list('slip_number', 'status'))
        assert statuses == {'00001': 'Complete', '00002': 'Complete'}
        assert SlipRecord.objects.get(id=one.id).net_weight == Decimal('8.300')

    def test_create_uses_next_free_number(self, first, second):
        second.list()
        first.create('A1', 'Sand', '10')
        first.create('B2', 'Sand', '10')

        slip = second.create('C3', 'Sand', '10')

        assert slip.slip_number == '00003'
        assert second.next_slip_number() == '00004'
        assert [s.slip_number for s in first.list()] == ['00001', '00002', '00003']

    def test_reads_see_other_writers(self, first, second):
        pending = first.create('A1', 'Sand', '12.500')
        assert second.counts() == {'pending': 1, 'complete': 0}

        first.complete(pending.id, '4.200')

        assert second.get(pending.id).is_complete
        assert second.counts() == {'pending': 0, 'complete': 1}

    def test_completion_racing_after_reload_is_rejected(self, first, clock, monkeypatch):
        """Another process completes the slip between our read and our write."""
        pending = first.create('A1', 'Sand', '12.500')
        repository = DatabaseSlipRepository()
        before = repository.load()
        monkeypatch.setattr(repository, 'load', lambda: list(before))
        racer = SlipStore(repository, clock=clock)

        first.complete(pending.id, '4.200')

        with pytest.raises(InvalidStateError):
            racer.complete(pending.id, '1.000')

        assert SlipRecord.objects.get(id=pending.id).net_weight == Decimal('8.300')


class TestBuildSlipRepository:
    """Tests for build_slip_repository."""

    def test_database_backend(self, settings):
        settings.WEIGHBRIDGE_STORAGE = 'database'

        assert isinstance(build_slip_repository(), DatabaseSlipRepository)

    def test_json_backend(self, settings, tmp_path):
        settings.WEIGHBRIDGE_STORAGE = 'json'
        settings.WEIGHBRIDGE_DATA_DIR = tmp_path

        repository = build_slip_repository()

        assert isinstance(repository, JsonFileSlipRepository)
        assert repository.path == tmp_path / 'slips.json'

    def test_unknown_backend(self, settings):
        settings.WEIGHBRIDGE_STORAGE = 'floppy'

        with pytest.raises(ImproperlyConfigured):
            build_slip_repository()
